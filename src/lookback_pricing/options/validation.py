"""
Contract parameter validation.

Single static check run once when a ContractParameters is built. Rules are
evaluated in a fixed order and the first violation raises, so no partially
valid contract is ever observable.
"""

import logging
from typing import Any

from lookback_pricing.config.settings import SETTINGS
from lookback_pricing.options.payoffs import OptionType

logger = logging.getLogger(__name__)


class InvalidParameterError(ValueError):
    """
    Raised when a financial or numerical contract input is invalid.

    Attributes
    ----------
    rule : str
        Identifier of the violated rule (e.g. "spot", "fd_step_min")
    reason : str
        Human-readable reason
    """

    def __init__(self, rule: str, reason: str):
        self.rule = rule
        self.reason = reason
        super().__init__(f"Error financial parameter: {reason}")


def parse_option_type(option: Any) -> OptionType:
    """
    Resolve an option type, raising InvalidParameterError if unknown.

    Accepts OptionType members, "call"/"put", 'c'/'p' (any case) and ASCII codes.
    """
    try:
        return OptionType.parse(option)
    except ValueError as e:
        raise InvalidParameterError(
            "option_kind", "Option type can only be 'c' (Call) or 'p' (Put)."
        ) from e


def validate_contract(
    spot: float,
    volatility: float,
    rate: float,
    option: Any,
    time_to_maturity: float,
    fd_step: float,
) -> OptionType:
    """
    Validate contract inputs.

    Rules, in order:
    1. spot > 0
    2. volatility > 0
    3. option is a call or a put
    4. rate >= 0
    5. time_to_maturity >= 0 (maturity not before value date)
    6. fd_step >= min_fd_step (0.005)
    7. fd_step < max_fd_step (1)

    NaN fails every comparison and is rejected by the rule it appears in.

    Parameters
    ----------
    spot : float
        Initial spot price
    volatility : float
        Annualized volatility (decimal)
    rate : float
        Risk-free rate (decimal)
    option : OptionType, str or int
        Option type, see parse_option_type
    time_to_maturity : float
        Time to maturity in years
    fd_step : float
        Finite-difference step used by the Greeks

    Returns
    -------
    OptionType
        Normalized option type

    Raises
    ------
    InvalidParameterError
        On the first violated rule
    """
    bounds = SETTINGS.contract

    if not spot > 0:
        raise InvalidParameterError("spot", "S0 must be positive.")
    if not volatility > 0:
        raise InvalidParameterError("volatility", "Volatility must be positive.")

    option_type = parse_option_type(option)

    if not rate >= 0:
        raise InvalidParameterError("rate", "Our model allows only non-negative interest rates.")
    if not time_to_maturity >= 0:
        raise InvalidParameterError(
            "time_to_maturity", "maturity date < value date in yearFraction."
        )
    if not fd_step >= bounds.min_fd_step:
        raise InvalidParameterError(
            "fd_step_min", f"h must be positive and at least {bounds.min_fd_step}."
        )
    if not fd_step < bounds.max_fd_step:
        raise InvalidParameterError(
            "fd_step_max", f"h must be below {bounds.max_fd_step} so Greek path counts stay >= 1."
        )

    logger.debug(
        f"Validated contract: S0={spot}, sigma={volatility}, r={rate}, "
        f"{option_type.value}, ttm={time_to_maturity:.6f}, h={fd_step}"
    )
    return option_type
