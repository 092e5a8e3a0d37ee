"""Data loader module for parsing expense and deposit CSV files."""

import logging
from typing import List

import pandas as pd

from .models.ledger import Expense, Deposit

logger = logging.getLogger(__name__)


def _read_csv(csv_path: str, required_cols: List[str]) -> pd.DataFrame:
    # Accept both comma and semicolon separated files
    df = pd.read_csv(csv_path, sep=None, engine="python")
    df.columns = [str(col).strip().lower() for col in df.columns]
    for col in required_cols:
        if col not in df.columns:
            raise ValueError(f"Missing required column: {col}")
    return df


def load_expenses(csv_path: str) -> List[Expense]:
    """
    Parse an expenses CSV (columns: day, amount, optional name).

    Args:
        csv_path: Path to expenses CSV file

    Returns:
        List of Expense instances
    """
    df = _read_csv(csv_path, ["day", "amount"])
    logger.info(f"Loaded expenses CSV with {len(df)} rows")

    expenses = []
    for _, row in df.iterrows():
        if pd.isna(row["day"]) or pd.isna(row["amount"]):
            logger.warning(f"Skipping incomplete expense row: {row.to_dict()}")
            continue
        name = row.get("name", "")
        expenses.append(Expense(
            day=int(row["day"]),
            name="" if pd.isna(name) else str(name),
            amount=float(row["amount"]),
        ))
    return expenses


def load_deposits(csv_path: str) -> List[Deposit]:
    """
    Parse a deposits CSV (columns: day, amount).

    Args:
        csv_path: Path to deposits CSV file

    Returns:
        List of Deposit instances
    """
    df = _read_csv(csv_path, ["day", "amount"])
    logger.info(f"Loaded deposits CSV with {len(df)} rows")

    deposits = []
    for _, row in df.iterrows():
        if pd.isna(row["day"]) or pd.isna(row["amount"]):
            logger.warning(f"Skipping incomplete deposit row: {row.to_dict()}")
            continue
        deposits.append(Deposit(day=int(row["day"]), amount=float(row["amount"])))
    return deposits
