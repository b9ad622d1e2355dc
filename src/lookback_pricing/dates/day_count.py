"""
Day-count conventions and year fractions.

Converts a pair of calendar dates into a fractional number of years:
- ACT/360 and ACT/365F: actual days over a fixed basis
- 30/360 EU and 30/360 US: day-of-month adjustments then a 360-day year
- ACT/ACT ISDA: actual days split by calendar year, each over its own length

References
----------
[T1] ISDA (2006) Definitions, Section 4.16 - Day Count Fraction
"""

import calendar
from datetime import date
from enum import Enum

from lookback_pricing.dates.calendar import CalendarDate, as_calendar_date


class UnknownConventionError(ValueError):
    """Raised when a day-count convention is outside the supported set."""

    pass


class DayCountConvention(Enum):
    """Day-count convention enumeration (values are the boundary codes)."""

    ACT_360 = 0
    ACT_365F = 1
    THIRTY_360_US = 2
    THIRTY_360_EU = 3
    ACT_ACT_ISDA = 4

    @classmethod
    def from_code(cls, code: int) -> "DayCountConvention":
        """
        Resolve an integer code (0-4).

        Raises
        ------
        UnknownConventionError
            If the code does not name a convention
        """
        if isinstance(code, bool) or not isinstance(code, int):
            raise UnknownConventionError(f"Unknown daycount code: {code!r}")
        try:
            return cls(code)
        except ValueError as e:
            raise UnknownConventionError(f"Unknown daycount code: {code}") from e

    @classmethod
    def parse(cls, value: "DayCountConvention | int | str") -> "DayCountConvention":
        """
        Resolve a member, an integer code or a name such as "ACT_365F".

        Names are matched case-insensitively; "/" and "-" are read as "_"
        so "ACT/360" and "30/360 US" style spellings also resolve.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper().replace("/", "_").replace("-", "_").replace(" ", "_")
            if key.startswith("30_360"):
                key = "THIRTY" + key[2:]
            try:
                return cls[key]
            except KeyError as e:
                raise UnknownConventionError(f"Unknown daycount: {value!r}") from e
        return cls.from_code(value)


def days_difference(start: CalendarDate, end: CalendarDate) -> int:
    """
    Signed number of calendar days from start to end.

    [T1] days_difference(d, d) == 0 and reversing the arguments flips the sign.
    """
    return (end.to_date() - start.to_date()).days


def is_leap(year: int) -> bool:
    """Gregorian leap-year test: divisible by 4 and not by 100, or by 400."""
    return (year % 4 == 0 and year % 100 != 0) or (year % 400 == 0)


def _days_in_year(year: int) -> int:
    return 366 if is_leap(year) else 365


def _is_end_of_february(d: CalendarDate) -> bool:
    return d.month == 2 and d.day == calendar.monthrange(d.year, 2)[1]


def _thirty_360(y1: int, m1: int, d1: int, y2: int, m2: int, d2: int) -> float:
    """Generic 30/360 formula on already-adjusted day numbers."""
    days360 = 360 * (y2 - y1) + 30 * (m2 - m1) + (d2 - d1)
    return days360 / 360.0


def yearfrac_30_360_eu(start: CalendarDate, end: CalendarDate) -> float:
    """
    30E/360 (Eurobond basis).

    Day 31 becomes 30 on both dates, symmetrically.
    """
    d1 = min(start.day, 30)
    d2 = min(end.day, 30)
    return _thirty_360(start.year, start.month, d1, end.year, end.month, d2)


def yearfrac_30_360_us(start: CalendarDate, end: CalendarDate) -> float:
    """
    30/360 US (bond basis).

    Adjustments, applied in order:
    1. The last day of February counts as day 30 (on either date)
    2. A start day of 31 becomes 30
    3. An end day of 31 becomes 30 only if the start day is (now) 30
    """
    d1 = start.day
    d2 = end.day

    if _is_end_of_february(start):
        d1 = 30
    if _is_end_of_february(end):
        d2 = 30

    if d1 == 31:
        d1 = 30
    if d2 == 31 and d1 == 30:
        d2 = 30

    return _thirty_360(start.year, start.month, d1, end.year, end.month, d2)


def yearfrac_act_act_isda(start: CalendarDate, end: CalendarDate) -> float:
    """
    ACT/ACT ISDA.

    [T1] Within one calendar year: days / (365 or 366).
    [T1] Across years: stub to the end of the start year over its length,
    plus one per whole intervening year, plus stub from 1 January of the
    end year over its length.
    """
    y1, y2 = start.year, end.year

    if y1 == y2:
        return days_difference(start, end) / _days_in_year(y1)

    if y2 < y1:
        # Mirror image keeps the fraction antisymmetric
        return -yearfrac_act_act_isda(end, start)

    # [start, 1 Jan y1+1) - half-open interval
    first_year = (date(y1 + 1, 1, 1) - start.to_date()).days / _days_in_year(y1)

    middle_years = float(y2 - y1 - 1)

    last_year = (end.to_date() - date(y2, 1, 1)).days / _days_in_year(y2)

    return first_year + middle_years + last_year


def year_fraction(
    start: CalendarDate,
    end: CalendarDate,
    convention: DayCountConvention,
) -> float:
    """
    Year fraction between two dates under a day-count convention.

    Parameters
    ----------
    start : CalendarDate
        Start date (e.g. value date)
    end : CalendarDate
        End date (e.g. maturity date)
    convention : DayCountConvention
        Day-count convention

    Returns
    -------
    float
        Fraction of a year; negative when end precedes start

    Raises
    ------
    UnknownConventionError
        If convention is not a DayCountConvention member

    Examples
    --------
    >>> d1, d2 = CalendarDate.parse("01-01-2023"), CalendarDate.parse("01-01-2024")
    >>> year_fraction(d1, d2, DayCountConvention.ACT_365F)
    1.0
    """
    if not isinstance(convention, DayCountConvention):
        raise UnknownConventionError(f"Unknown daycount: {convention!r}")

    if convention is DayCountConvention.ACT_360:
        return days_difference(start, end) / 360.0
    if convention is DayCountConvention.ACT_365F:
        return days_difference(start, end) / 365.0
    if convention is DayCountConvention.THIRTY_360_EU:
        return yearfrac_30_360_eu(start, end)
    if convention is DayCountConvention.THIRTY_360_US:
        return yearfrac_30_360_us(start, end)
    if convention is DayCountConvention.ACT_ACT_ISDA:
        return yearfrac_act_act_isda(start, end)

    raise UnknownConventionError(f"Unknown daycount: {convention!r}")


def year_fraction_from_text(
    start: str,
    end: str,
    convention: "DayCountConvention | int | str",
) -> float:
    """
    Year fraction from dd-mm-yyyy strings and a convention member, code or name.

    Raises
    ------
    MalformedDateError
        If either date is malformed
    UnknownConventionError
        If the convention cannot be resolved
    """
    return year_fraction(
        as_calendar_date(start),
        as_calendar_date(end),
        DayCountConvention.parse(convention),
    )
