"""Ledger models: dated expenses and deposits, ledger rows, and edits."""

from typing import List, Literal, Union
from pydantic import BaseModel, Field


class Expense(BaseModel):
    """A dated expense."""

    day: int
    name: str = ""
    amount: float


class Deposit(BaseModel):
    """A dated deposit (income other than shift pay)."""

    day: int
    amount: float


class DaySchedule(BaseModel):
    """One row of the monthly ledger.

    Invariant: end_balance = start_balance + deposit + earnings - expenses + adjustment,
    and each row's start_balance equals the previous row's end_balance.
    adjustment is non-zero only on days whose balance was overridden
    (balance reset day, fixed-balance constraint, or a balance edit).
    """

    day: int
    shifts: List[str] = Field(default_factory=list)
    earnings: float = 0.0
    expenses: float = 0.0
    deposit: float = 0.0
    start_balance: float = 0.0
    end_balance: float = 0.0
    adjustment: float = 0.0
    notes: str = ""

    class Config:
        json_schema_extra = {
            "example": {
                "day": 5,
                "shifts": ["large"],
                "earnings": 86.5,
                "expenses": 132.5,
                "deposit": 0.0,
                "start_balance": 500.0,
                "end_balance": 454.0,
                "adjustment": 0.0,
                "notes": "",
            }
        }

    def expected_end_balance(self) -> float:
        """End balance implied by the row's own movements."""
        return self.start_balance + self.deposit + self.earnings - self.expenses + self.adjustment


EditField = Literal["earnings", "expenses", "balance", "notes", "shifts", "deposit"]


class Edit(BaseModel):
    """A field-level edit a user made to the ledger."""

    day: int
    field: EditField
    original_value: Union[float, str, List[str], None] = None
    new_value: Union[float, str, List[str]]
