"""
Boundary adapter for callers that cannot receive Python exceptions.

Translates the library's exceptions into sentinel return values plus an
out-of-band error message, following the contract of a foreign-function
bridge:
- construction returns a handle or None
- numeric calls return 0.0 on failure
- curve calls return an empty curve on failure
- the last failure is readable from an ErrorContext and explicitly clearable

The error state lives in an ErrorContext value owned by the caller, never in
module-level globals; give each thread (or session) its own context.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TypeVar

import numpy as np

from lookback_pricing.dates.calendar import CalendarDate
from lookback_pricing.dates.day_count import DayCountConvention, year_fraction
from lookback_pricing.options.contract import ContractParameters
from lookback_pricing.options.curves import CurveResult, delta_curve, price_curve
from lookback_pricing.options.greeks import GreeksEngine, PathCountPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")

#: Value returned by numeric calls that fail
SENTINEL: float = 0.0


@dataclass
class ErrorContext:
    """
    Last failure description for one execution context.

    Attributes
    ----------
    last_error : str, optional
        "<operation>: <message>" of the last failure, None if the last call succeeded
    """

    last_error: Optional[str] = None

    def record(self, where: str, exc: BaseException) -> None:
        """Store the description of a failure."""
        message = str(exc) or type(exc).__name__
        self.last_error = f"{where}: {message}"
        logger.warning(f"Boundary call failed - {self.last_error}")

    def clear(self) -> None:
        """Forget the last failure."""
        self.last_error = None

    def get(self) -> str:
        """Last failure description, or "" if none."""
        return self.last_error or ""

    @property
    def has_error(self) -> bool:
        """True if the last call failed."""
        return self.last_error is not None


@dataclass
class LookbackBoundary:
    """
    Exception-free facade over contract construction, pricing and Greeks.

    Parameters
    ----------
    errors : ErrorContext
        Where failures are recorded (a fresh context by default)
    path_policy : PathCountPolicy, optional
        Path-count policy given to every created handle

    Examples
    --------
    >>> boundary = LookbackBoundary()
    >>> handle = boundary.create(100, "01-01-2024", "01-01-2025", 0.2, 0.05, ord("c"), 0.01, 4)
    >>> boundary.create(0, "01-01-2024", "01-01-2025", 0.2, 0.05, ord("c"), 0.01, 4) is None
    True
    >>> boundary.errors.get()
    'create: Error financial parameter: S0 must be positive.'
    """

    errors: ErrorContext = field(default_factory=ErrorContext)
    path_policy: Optional[PathCountPolicy] = None

    def _call(self, where: str, fallback: T, fn: Callable[[], T]) -> T:
        """Run fn, recording any failure and returning fallback instead."""
        self.errors.clear()
        try:
            return fn()
        except Exception as e:
            self.errors.record(where, e)
            return fallback

    def _check_handle(self, handle: Any, where: str) -> GreeksEngine:
        if handle is None:
            raise ValueError(f"Null handle in {where}")
        if not isinstance(handle, GreeksEngine):
            raise TypeError(f"Invalid handle in {where}: {type(handle).__name__}")
        return handle

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def create(
        self,
        spot: float,
        value_date: str,
        maturity_date: str,
        volatility: float,
        rate: float,
        option_code: "int | str",
        fd_step: float,
        convention_code: int,
    ) -> Optional[GreeksEngine]:
        """
        Build a contract handle from primitive inputs.

        Parameters
        ----------
        spot : float
            Initial spot
        value_date, maturity_date : str
            dd-mm-yyyy dates
        volatility, rate : float
            Market inputs
        option_code : int or str
            ASCII code or letter: 'c'/'C' call, 'p'/'P' put
        fd_step : float
            Finite-difference step
        convention_code : int
            0 ACT/360, 1 ACT/365F, 2 30/360 US, 3 30/360 EU, 4 ACT/ACT ISDA

        Returns
        -------
        GreeksEngine or None
            Handle, or None on failure (see errors)
        """

        def build() -> GreeksEngine:
            if value_date is None or maturity_date is None:
                raise ValueError("Null date string")
            contract = ContractParameters.from_dates(
                spot=spot,
                value_date=CalendarDate.parse(value_date),
                maturity_date=CalendarDate.parse(maturity_date),
                volatility=volatility,
                rate=rate,
                option=option_code,
                fd_step=fd_step,
                convention=DayCountConvention.from_code(convention_code),
            )
            return GreeksEngine(contract, path_policy=self.path_policy)

        return self._call("create", None, build)

    def destroy(self, handle: Optional[GreeksEngine]) -> None:
        """Release a handle. Handles hold no external resources."""
        self.errors.clear()

    # -------------------------------------------------------------------------
    # Pricing and Greeks
    # -------------------------------------------------------------------------

    def price(
        self,
        handle: Optional[GreeksEngine],
        spot: float,
        volatility: float,
        rate: float,
        maturity: float,
        n_paths: int,
    ) -> float:
        """Monte Carlo price, SENTINEL on failure."""
        return self._call(
            "price",
            SENTINEL,
            lambda: self._check_handle(handle, "price").engine.price(
                spot, volatility, rate, maturity, n_paths
            ),
        )

    def delta(self, handle: Optional[GreeksEngine], spot: float) -> float:
        """Delta at spot, SENTINEL on failure."""
        return self._call("delta", SENTINEL, lambda: self._check_handle(handle, "delta").delta(spot))

    def gamma(self, handle: Optional[GreeksEngine]) -> float:
        """Gamma, SENTINEL on failure."""
        return self._call("gamma", SENTINEL, lambda: self._check_handle(handle, "gamma").gamma())

    def vega(self, handle: Optional[GreeksEngine]) -> float:
        """Vega, SENTINEL on failure."""
        return self._call("vega", SENTINEL, lambda: self._check_handle(handle, "vega").vega())

    def rho(self, handle: Optional[GreeksEngine]) -> float:
        """Rho, SENTINEL on failure."""
        return self._call("rho", SENTINEL, lambda: self._check_handle(handle, "rho").rho())

    def theta(self, handle: Optional[GreeksEngine]) -> float:
        """Theta, SENTINEL on failure."""
        return self._call("theta", SENTINEL, lambda: self._check_handle(handle, "theta").theta())

    # -------------------------------------------------------------------------
    # Curves
    # -------------------------------------------------------------------------

    def graph_price(
        self,
        handle: Optional[GreeksEngine],
        dx: float,
        capacity: int,
        n_paths: Optional[int] = None,
    ) -> CurveResult:
        """Price curve truncated to capacity points; empty on failure."""
        return self._call(
            "graph_price",
            _empty_curve(),
            lambda: price_curve(self._check_handle(handle, "graph_price"), dx, n_paths).truncate(
                max(capacity, 0)
            ),
        )

    def graph_delta(
        self,
        handle: Optional[GreeksEngine],
        dx: float,
        capacity: int,
        n_paths: Optional[int] = None,
    ) -> CurveResult:
        """Delta curve truncated to capacity points; empty on failure."""
        return self._call(
            "graph_delta",
            _empty_curve(),
            lambda: delta_curve(self._check_handle(handle, "graph_delta"), dx, n_paths).truncate(
                max(capacity, 0)
            ),
        )

    # -------------------------------------------------------------------------
    # Dates
    # -------------------------------------------------------------------------

    def year_fraction(self, start: str, end: str, convention_code: int) -> float:
        """Year fraction between dd-mm-yyyy dates, SENTINEL on failure."""
        return self._call(
            "year_fraction",
            SENTINEL,
            lambda: year_fraction(
                CalendarDate.parse(start),
                CalendarDate.parse(end),
                DayCountConvention.from_code(convention_code),
            ),
        )


def _empty_curve() -> CurveResult:
    return CurveResult(x=np.empty(0), y=np.empty(0))
