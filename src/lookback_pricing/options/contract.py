"""
Immutable lookback contract and market parameters.

The time to maturity is derived once from (value date, maturity date,
day-count convention); every later pricing or Greek call reuses it.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from lookback_pricing.config.settings import SETTINGS
from lookback_pricing.dates.calendar import CalendarDate, as_calendar_date
from lookback_pricing.dates.day_count import DayCountConvention, year_fraction
from lookback_pricing.options.payoffs import OptionType
from lookback_pricing.options.validation import validate_contract


@dataclass(frozen=True)
class ContractParameters:
    """
    Validated lookback contract. [T1: Immutable]

    Attributes
    ----------
    spot : float
        Initial spot price S0 (> 0)
    volatility : float
        Annualized volatility (> 0)
    rate : float
        Continuously compounded risk-free rate (>= 0)
    option_type : OptionType
        CALL or PUT; 'c'/'p' and "call"/"put" are normalized on construction
    fd_step : float
        Finite-difference step h, 0.005 <= h < 1
    time_to_maturity : float
        Time to maturity in years (>= 0)
    value_date : CalendarDate, optional
        Valuation date, when built from dates
    maturity_date : CalendarDate, optional
        Maturity date, when built from dates
    convention : DayCountConvention, optional
        Day count used for time_to_maturity, when built from dates

    Examples
    --------
    >>> contract = ContractParameters.from_dates(
    ...     spot=100.0, value_date="01-01-2024", maturity_date="01-01-2025",
    ...     volatility=0.2, rate=0.05, option="c", fd_step=0.01,
    ... )
    >>> contract.time_to_maturity
    1.0
    """

    spot: float
    volatility: float
    rate: float
    option_type: OptionType
    fd_step: float
    time_to_maturity: float
    value_date: Optional[CalendarDate] = field(default=None, compare=False)
    maturity_date: Optional[CalendarDate] = field(default=None, compare=False)
    convention: Optional[DayCountConvention] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        """Validate and normalize the option type."""
        option_type = validate_contract(
            self.spot,
            self.volatility,
            self.rate,
            self.option_type,
            self.time_to_maturity,
            self.fd_step,
        )
        # Frozen dataclass workaround: use object.__setattr__
        object.__setattr__(self, "option_type", option_type)

    @classmethod
    def from_dates(
        cls,
        spot: float,
        value_date: "CalendarDate | date | str",
        maturity_date: "CalendarDate | date | str",
        volatility: float,
        rate: float,
        option: "OptionType | str | int",
        fd_step: float,
        convention: Optional[DayCountConvention] = None,
    ) -> "ContractParameters":
        """
        Build a contract, deriving time to maturity from two dates.

        Parameters
        ----------
        spot : float
            Initial spot price
        value_date : CalendarDate, date or str
            Valuation date (dd-mm-yyyy when text)
        maturity_date : CalendarDate, date or str
            Maturity date (dd-mm-yyyy when text)
        volatility : float
            Annualized volatility
        rate : float
            Risk-free rate
        option : OptionType, str or int
            'c'/'p', "call"/"put" or an OptionType
        fd_step : float
            Finite-difference step for Greeks
        convention : DayCountConvention, optional
            Defaults to SETTINGS.contract.default_convention (ACT/ACT ISDA)

        Returns
        -------
        ContractParameters
            Validated contract

        Raises
        ------
        MalformedDateError
            If a date cannot be parsed
        UnknownConventionError
            If convention is not supported
        InvalidParameterError
            If any contract rule is violated
        """
        if convention is None:
            convention = SETTINGS.contract.default_convention

        start = as_calendar_date(value_date)
        end = as_calendar_date(maturity_date)
        ttm = year_fraction(start, end, convention)

        return cls(
            spot=spot,
            volatility=volatility,
            rate=rate,
            option_type=option,
            fd_step=fd_step,
            time_to_maturity=ttm,
            value_date=start,
            maturity_date=end,
            convention=convention,
        )

    @property
    def is_call(self) -> bool:
        """True for lookback calls."""
        return self.option_type is OptionType.CALL
