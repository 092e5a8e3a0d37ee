"""Sample month of expenses and deposits for demos and smoke runs."""

from typing import List

from .models.ledger import Expense, Deposit


_SAMPLE_EXPENSES = [
    # Fixed expenses
    (1, "Auto Insurance", 177),
    (2, "Video Streaming", 8),
    (8, "Streaming Add-on", 12),
    (8, "Tablet Warranty", 8.49),
    (10, "Streaming Services", 230),
    (11, "Cat Food", 40),
    (14, "Tablet Warranty", 8.49),
    (16, "Cat Food", 40),
    (17, "Car Payment", 463),
    (22, "Cell Phone", 177),
    (23, "Cat Food", 40),
    (24, "Software Subscription", 220),
    (25, "Electric", 139),
    (25, "Doorbell Subscription", 10),
    (28, "Phone Warranty", 13.49),
    (29, "Internet", 30),
    (29, "Cat Food", 40),
    (30, "Rent", 1636),
    # Recurring weekly
    (5, "Groceries", 112.5),
    (12, "Groceries", 112.5),
    (19, "Groceries", 112.5),
    (26, "Groceries", 112.5),
]

_SAMPLE_DEPOSITS = [
    (11, 1356),
    (25, 1356),
]


def sample_expenses() -> List[Expense]:
    return [Expense(day=day, name=name, amount=amount) for day, name, amount in _SAMPLE_EXPENSES]


def sample_deposits() -> List[Deposit]:
    return [Deposit(day=day, amount=amount) for day, amount in _SAMPLE_DEPOSITS]
