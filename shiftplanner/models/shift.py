"""Shift models: shift types and the shift catalog."""

from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, Field

from ..config import DEFAULT_SHIFT_TYPES, SHIFT_NAMES, SHIFT_SEPARATOR
from ..exceptions import InvalidShiftLabelError


class ShiftType(BaseModel):
    """Represents a single shift size and its pay."""

    name: str
    gross_pay: float
    net_pay: float = Field(gt=0)


def _default_shift(name: str) -> ShiftType:
    pay = DEFAULT_SHIFT_TYPES[name]
    return ShiftType(name=name, gross_pay=pay["gross"], net_pay=pay["net"])


class ShiftCatalog(BaseModel):
    """The three shift sizes a day can be built from.

    A day's assignment is a label: a single shift name ("large") or exactly
    two names joined by "+" ("medium+large"). Labels are parsed here so that
    every caller rejects the same malformed input.
    """

    large: ShiftType = Field(default_factory=lambda: _default_shift("large"))
    medium: ShiftType = Field(default_factory=lambda: _default_shift("medium"))
    small: ShiftType = Field(default_factory=lambda: _default_shift("small"))

    class Config:
        json_schema_extra = {
            "example": {
                "large": {"name": "large", "gross_pay": 94.5, "net_pay": 86.5},
                "medium": {"name": "medium", "gross_pay": 75.5, "net_pay": 67.5},
                "small": {"name": "small", "gross_pay": 64.0, "net_pay": 56.0},
            }
        }

    def get(self, name: str) -> ShiftType:
        """Look up a shift type by name."""
        if name not in SHIFT_NAMES:
            raise InvalidShiftLabelError(f"Unknown shift type: {name!r}")
        return getattr(self, name)

    def split(self, label: Optional[str]) -> List[str]:
        """Split a label into shift names, validating each part.

        Args:
            label: Shift label or None for a day off

        Returns:
            List of shift names (empty for a day off)

        Raises:
            InvalidShiftLabelError: If the label is malformed
        """
        if label is None:
            return []
        if not isinstance(label, str) or not label:
            raise InvalidShiftLabelError(f"Invalid shift label: {label!r}")

        parts = label.split(SHIFT_SEPARATOR)
        if len(parts) > 2:
            raise InvalidShiftLabelError(
                f"Shift label {label!r} combines more than two shifts"
            )
        for part in parts:
            self.get(part)
        return parts

    def net_for(self, label: Optional[str]) -> float:
        """Net pay for a label (0 for a day off)."""
        return sum(self.get(name).net_pay for name in self.split(label))

    def single_labels(self) -> List[str]:
        return list(SHIFT_NAMES)

    def double_labels(self) -> List[str]:
        """All unordered double-shift labels, smaller shift first."""
        labels = []
        for i, first in enumerate(SHIFT_NAMES):
            for second in SHIFT_NAMES[i:]:
                labels.append(f"{first}{SHIFT_SEPARATOR}{second}")
        return labels

    def combinations(self) -> List[Optional[str]]:
        """Every assignment a day can take, day off included."""
        return [None] + self.single_labels() + self.double_labels()

    def net_totals(self) -> List[Tuple[str, float]]:
        """(label, net total) for every single and double combination."""
        return [(label, self.net_for(label)) for label in self.single_labels() + self.double_labels()]

    def average_double_net(self) -> float:
        """Mean net of the double shifts the crisis search relies on.

        Covers large+large, medium+large and medium+medium.
        """
        large = self.large.net_pay
        medium = self.medium.net_pay
        return ((large + large) + (medium + large) + (medium + medium)) / 3

    def as_dict(self) -> Dict[str, Dict[str, float]]:
        return {
            name: {"gross": self.get(name).gross_pay, "net": self.get(name).net_pay}
            for name in SHIFT_NAMES
        }
