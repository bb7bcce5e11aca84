"""
Price rounding rules applied after currency conversion.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP
from enum import Enum
from typing import Callable, Dict, Optional, Union

logger = logging.getLogger(__name__)


class RoundingMode(str, Enum):
    CHARM = "charm"
    WHOLE = "whole"
    NONE = "none"


# Currencies the storefronts price without a fractional part
ZERO_DECIMAL_CURRENCIES = [
    'JPY', 'KRW', 'VND', 'IDR', 'CLP', 'PYG', 'HUF', 'COP',
    'UGX', 'TZS', 'KZT', 'MNT', 'IQD', 'ISK', 'BIF', 'DJF',
    'GNF', 'KMF', 'RWF', 'VUV', 'XPF',
    'XOF', 'XAF',  # CFA Francs (West/Central African)
]

CURRENCY_MINOR_UNITS: Dict[str, int] = {code: 0 for code in ZERO_DECIMAL_CURRENCIES}
CURRENCY_MINOR_UNITS.update({
    'KWD': 3, 'BHD': 3, 'OMR': 3, 'JOD': 3, 'TND': 3, 'LYD': 3,
})

DEFAULT_MINOR_UNITS = 2

# CFA Francs are priced in multiples of 100 under charm and whole rounding
CURRENCY_INCREMENTS: Dict[str, int] = {
    'XOF': 100,
    'XAF': 100,
}


@dataclass(frozen=True)
class CharmRule:
    """
    Charm ending construction: floor(amount / step) * step + ending.
    e.g. step=1, ending=0.99 gives X.99; step=10, ending=9 gives X9.
    """
    step: Decimal
    ending: Decimal


CharmRuleSelector = Callable[[Decimal, int], CharmRule]


def currency_minor_digits(currency: Optional[str]) -> int:
    """Number of minor-unit digits for a currency (2 when unknown)"""
    if not currency:
        return DEFAULT_MINOR_UNITS
    return CURRENCY_MINOR_UNITS.get(currency.upper(), DEFAULT_MINOR_UNITS)


def default_charm_rule(amount: Decimal, minor_digits: int) -> CharmRule:
    """
    Pick the charm ending for an amount.

    Decimal currencies end in .99. Zero-decimal currencies end in 9 below 1000
    and in 90 from 1000 up; both bands map back into themselves, so rounding an
    already-rounded price leaves it unchanged.
    """
    if minor_digits > 0:
        return CharmRule(step=Decimal(1), ending=Decimal("0.99"))
    if amount >= 1000:
        return CharmRule(step=Decimal(100), ending=Decimal(90))
    return CharmRule(step=Decimal(10), ending=Decimal(9))


def _round_to_increment(value: Decimal, increment: Decimal) -> Decimal:
    return (value / increment).quantize(Decimal(1), rounding=ROUND_HALF_UP) * increment


def _charm(value: Decimal, minor_digits: int, select_rule: CharmRuleSelector) -> Decimal:
    rule = select_rule(value, minor_digits)
    floor_value = value.to_integral_value(rounding=ROUND_FLOOR)
    result = (value / rule.step).to_integral_value(rounding=ROUND_FLOOR) * rule.step + rule.ending

    # Never drop below the integer floor of the original amount
    if result < floor_value:
        result += rule.step
    return result


def round_price(
    amount: float,
    mode: Union[RoundingMode, str],
    minor_digits: Optional[int] = None,
    currency: Optional[str] = None,
    charm_rules: Optional[CharmRuleSelector] = None,
) -> float:
    """
    Round a converted price according to the rounding mode.

    Args:
        amount: Price in major units of the target currency
        mode: "charm", "whole" or "none"
        minor_digits: Minor-unit digits; derived from currency when omitted
        currency: Currency code, used for minor units and required increments
        charm_rules: Optional selector overriding the default charm endings

    Returns:
        Rounded price, never below the smallest sellable unit
    """
    mode = RoundingMode(mode)
    if minor_digits is None:
        minor_digits = currency_minor_digits(currency)

    value = Decimal(str(amount))

    increment = CURRENCY_INCREMENTS.get(currency.upper()) if currency and mode != RoundingMode.NONE else None
    if increment:
        step = Decimal(increment)
        return float(max(_round_to_increment(value, step), step))

    smallest_unit = Decimal(1).scaleb(-minor_digits)

    if mode == RoundingMode.NONE:
        result = value.quantize(smallest_unit, rounding=ROUND_HALF_UP)
        minimum = smallest_unit
    elif mode == RoundingMode.WHOLE:
        result = value.quantize(Decimal(1), rounding=ROUND_HALF_UP)
        minimum = Decimal(1)
    else:
        select_rule = charm_rules or default_charm_rule
        result = _charm(value, minor_digits, select_rule)
        minimum = max(select_rule(Decimal(0), minor_digits).ending, smallest_unit)

    if result < minimum:
        logger.debug(f"Rounded price {result} below minimum {minimum}, using minimum")
        result = minimum

    return float(result)
