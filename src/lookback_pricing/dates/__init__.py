"""
Calendar dates and day-count conventions.

Provides:
- CalendarDate parsing from dd-mm-yyyy text
- Year fractions for ACT/360, ACT/365F, 30/360 US, 30/360 EU, ACT/ACT ISDA
"""

from lookback_pricing.dates.calendar import (
    DATE_FORMAT,
    CalendarDate,
    MalformedDateError,
    as_calendar_date,
)
from lookback_pricing.dates.day_count import (
    DayCountConvention,
    UnknownConventionError,
    days_difference,
    is_leap,
    year_fraction,
    year_fraction_from_text,
    yearfrac_30_360_eu,
    yearfrac_30_360_us,
    yearfrac_act_act_isda,
)

__all__ = [
    # Dates
    "DATE_FORMAT",
    "CalendarDate",
    "MalformedDateError",
    "as_calendar_date",
    # Day count
    "DayCountConvention",
    "UnknownConventionError",
    "days_difference",
    "is_leap",
    "year_fraction",
    "year_fraction_from_text",
    "yearfrac_30_360_eu",
    "yearfrac_30_360_us",
    "yearfrac_act_act_isda",
]
