"""
Value objects: time periods and money.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TimePeriod:
    """
    Closed time interval; both ``start`` and ``end`` are inclusive.
    """

    start: datetime
    end: datetime

    def __post_init__(self):
        if self.end < self.start:
            raise ValueError("end must be >= start")

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    def overlaps(self, other: "TimePeriod") -> bool:
        return self.start <= other.end and self.end >= other.start

    @property
    def duration_days(self) -> int:
        return (self.end - self.start).days


@dataclass(frozen=True)
class MonetaryAmount:
    amount: float
    currency: str = "USD"

    def __post_init__(self):
        if self.amount < 0:
            raise ValueError("Monetary amount cannot be negative")

    def _check_currency(self, other: "MonetaryAmount") -> None:
        if self.currency != other.currency:
            raise ValueError(
                f"Currency mismatch: {self.currency} vs {other.currency}"
            )

    def add(self, other: "MonetaryAmount") -> "MonetaryAmount":
        self._check_currency(other)
        return MonetaryAmount(self.amount + other.amount, self.currency)

    def subtract(self, other: "MonetaryAmount") -> "MonetaryAmount":
        self._check_currency(other)
        return MonetaryAmount(self.amount - other.amount, self.currency)

    def multiply(self, factor: float) -> "MonetaryAmount":
        return MonetaryAmount(self.amount * factor, self.currency)

    def __str__(self) -> str:
        return f"{self.currency} {self.amount:.2f}"
