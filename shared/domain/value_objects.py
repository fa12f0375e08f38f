"""
Common Value Objects

Value objects used across multiple domains:
- DateRange: Represents a stay from check-in to check-out
"""

from dataclasses import dataclass
from datetime import date

from shared.domain.base import ValueObject


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents a stay from start_date (check-in) to end_date (check-out).
    Used for booking periods and availability checks.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date >= self.end_date:
            raise ValueError(f"Start date ({self.start_date}) must be before end date ({self.end_date})")

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Check if this range overlaps with another

        Boundaries are inclusive: a check-out on day N and a check-in on
        day N count as overlapping, so same-day turnover is not allowed.

        Examples:
            - DateRange(1, 5) overlaps with DateRange(4, 8) -> True
            - DateRange(1, 5) overlaps with DateRange(5, 7) -> True (shared day)
            - DateRange(1, 5) overlaps with DateRange(6, 9) -> False
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")

        # Overlap formula: start1 <= end2 AND end1 >= start2
        return (self.start_date <= other.end_date and
                self.end_date >= other.start_date)

    @property
    def nights(self) -> int:
        """Number of nights billed for the stay"""
        return (self.end_date - self.start_date).days

    def __str__(self):
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
