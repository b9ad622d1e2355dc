"""
Calendar dates parsed from the fixed dd-mm-yyyy layout.

[T1] Dates are proleptic Gregorian; construction fails for anything else.
"""

from dataclasses import dataclass
from datetime import date, datetime

#: Textual layout accepted by CalendarDate.parse
DATE_FORMAT = "%d-%m-%Y"


class MalformedDateError(ValueError):
    """Raised when text does not describe a valid calendar date."""

    pass


@dataclass(frozen=True, order=True)
class CalendarDate:
    """
    Immutable (year, month, day) triple.

    Attributes
    ----------
    year : int
        Calendar year
    month : int
        Month, 1-12
    day : int
        Day of month, 1-31 (bounded by the month length)

    Examples
    --------
    >>> CalendarDate.parse("29-02-2024")
    CalendarDate(year=2024, month=2, day=29)
    """

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        """Validate the triple against the Gregorian calendar."""
        try:
            date(self.year, self.month, self.day)
        except (TypeError, ValueError) as e:
            raise MalformedDateError(
                f"Invalid date (day={self.day!r}, month={self.month!r}, year={self.year!r}): {e}"
            ) from e

    @classmethod
    def parse(cls, text: str) -> "CalendarDate":
        """
        Parse a dd-mm-yyyy string.

        Parameters
        ----------
        text : str
            Date text, e.g. "01-01-2024"

        Returns
        -------
        CalendarDate
            Parsed date

        Raises
        ------
        MalformedDateError
            If the text is not a valid dd-mm-yyyy date
        """
        if not isinstance(text, str):
            raise MalformedDateError(f"Invalid date format: expected str, got {type(text).__name__}")
        try:
            parsed = datetime.strptime(text.strip(), DATE_FORMAT).date()
        except ValueError as e:
            raise MalformedDateError(f"Invalid date format {text!r}: expected dd-mm-yyyy") from e
        return cls.from_date(parsed)

    @classmethod
    def from_date(cls, value: date) -> "CalendarDate":
        """Build from a datetime.date."""
        return cls(value.year, value.month, value.day)

    def to_date(self) -> date:
        """Convert to datetime.date."""
        return date(self.year, self.month, self.day)

    def __str__(self) -> str:
        return f"{self.day:02}-{self.month:02}-{self.year:04}"


def as_calendar_date(value: "CalendarDate | date | str") -> CalendarDate:
    """
    Coerce text, datetime.date or CalendarDate into a CalendarDate.

    Raises
    ------
    MalformedDateError
        If the value cannot be interpreted as a date
    """
    if isinstance(value, CalendarDate):
        return value
    if isinstance(value, date):
        return CalendarDate.from_date(value)
    return CalendarDate.parse(value)
