"""
Floating-strike lookback payoffs.

[T1] Call: S(T) - min S(t)   (buy at the lowest price seen)
[T1] Put:  max S(t) - S(T)   (sell at the highest price seen)

Both payoffs are non-negative on any path because the running minimum
(maximum) never exceeds (falls below) the terminal value.
"""

from enum import Enum

import numpy as np


class OptionType(Enum):
    """Option type enumeration."""

    CALL = "call"
    PUT = "put"

    @classmethod
    def parse(cls, value: "OptionType | str | int") -> "OptionType":
        """
        Resolve a member, "call"/"put", a single letter 'c'/'p' or its ASCII code.

        Matching is case-insensitive.

        Raises
        ------
        ValueError
            If the value does not name a call or a put
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            if not 0 <= value < 0x110000:
                raise ValueError(f"CRITICAL: unknown option type code {value}")
            value = chr(value)
        if isinstance(value, str):
            key = value.strip().lower()
            if key in ("c", "call"):
                return cls.CALL
            if key in ("p", "put"):
                return cls.PUT
        raise ValueError(f"CRITICAL: unknown option type {value!r}")

    @property
    def is_call(self) -> bool:
        """True for calls (payoff on the running minimum)."""
        return self is OptionType.CALL


def lookback_payoff(
    option_type: OptionType,
    terminal: np.ndarray,
    extremum: np.ndarray,
) -> np.ndarray:
    """
    Vectorized lookback payoff.

    Parameters
    ----------
    option_type : OptionType
        CALL pays terminal - minimum, PUT pays maximum - terminal
    terminal : np.ndarray
        Terminal prices S(T)
    extremum : np.ndarray
        Running minimum (call) or maximum (put) on the same paths

    Returns
    -------
    np.ndarray
        Undiscounted payoffs
    """
    if option_type is OptionType.CALL:
        return terminal - extremum
    return extremum - terminal
