"""
Multiplier resolution for each pricing strategy.

Each strategy is an ordered list of resolvers; the first one that finds a
multiplier wins. Keeping the precedence as data makes it easy to audit and to
test each step on its own.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple, Union

import pricing_indexes
import territories
from models import PPPData

logger = logging.getLogger(__name__)


class PricingStrategy(str, Enum):
    DIRECT = "direct"
    PPP = "ppp"
    BIGMAC = "bigmac"
    CUSTOM = "custom"


SOURCE_WORLD_BANK = 'world-bank'
SOURCE_BIG_MAC = 'big-mac'
SOURCE_STATIC = 'static'
SOURCE_CUSTOM = 'custom'
SOURCE_DIRECT = 'direct'

Resolution = Optional[Tuple[float, str]]


@dataclass
class ResolutionContext:
    ppp_data: Optional[PPPData] = None
    custom_table: Optional[Dict[str, float]] = None


Resolver = Callable[[str, ResolutionContext], Resolution]


def _lookup_codes(territory: str) -> List[str]:
    """Try the code as given, then its alpha-2 form (Apple territories are alpha-3)"""
    alpha2 = territories.to_alpha2(territory)
    return [territory] if alpha2 == territory else [territory, alpha2]


def resolve_direct(territory: str, context: ResolutionContext) -> Resolution:
    return 1.0, SOURCE_DIRECT


def resolve_from_ppp_data(territory: str, context: ResolutionContext) -> Resolution:
    if context.ppp_data is None:
        return None
    for code in _lookup_codes(territory):
        multiplier = context.ppp_data.multipliers.get(code)
        if multiplier is not None:
            return multiplier, context.ppp_data.sources.get(code, SOURCE_WORLD_BANK)
    return None


def resolve_from_static_index(territory: str, context: ResolutionContext) -> Resolution:
    for code in _lookup_codes(territory):
        entry = pricing_indexes.get_pricing_index_entry(code)
        if entry is not None:
            return entry.ppp_multiplier, SOURCE_STATIC
    return None


def resolve_static_default(territory: str, context: ResolutionContext) -> Resolution:
    return pricing_indexes.DEFAULT_PRICING_INDEX_ENTRY.ppp_multiplier, SOURCE_STATIC


def resolve_from_big_mac(territory: str, context: ResolutionContext) -> Resolution:
    for code in _lookup_codes(territory):
        multiplier = pricing_indexes.get_big_mac_multiplier(code)
        if multiplier is not None:
            return multiplier, SOURCE_BIG_MAC
    return None


def resolve_from_custom_table(territory: str, context: ResolutionContext) -> Resolution:
    if not context.custom_table:
        return None
    for code in _lookup_codes(territory):
        multiplier = context.custom_table.get(code)
        if multiplier is None:
            continue
        if multiplier <= 0:
            logger.warning(f"Ignoring non-positive custom multiplier {multiplier} for {territory}")
            return None
        return float(multiplier), SOURCE_CUSTOM
    return None


RESOLUTION_CHAINS: Dict[PricingStrategy, List[Resolver]] = {
    PricingStrategy.DIRECT: [resolve_direct],
    PricingStrategy.PPP: [resolve_from_ppp_data, resolve_from_static_index, resolve_static_default],
    PricingStrategy.BIGMAC: [resolve_from_big_mac, resolve_from_static_index, resolve_static_default],
    # A missing custom entry is deliberately not defaulted
    PricingStrategy.CUSTOM: [resolve_from_custom_table],
}


def resolve_multiplier(
    territory: str,
    strategy: Union[PricingStrategy, str],
    ppp_data: Optional[PPPData] = None,
    custom_table: Optional[Dict[str, float]] = None,
) -> Resolution:
    """
    Resolve the price multiplier for a territory.

    Args:
        territory: Region code (alpha-2 or Apple alpha-3)
        strategy: Pricing strategy
        ppp_data: PPP multipliers (for the ppp strategy)
        custom_table: Caller-supplied multipliers (for the custom strategy)

    Returns:
        Tuple of (multiplier, source), or None if the territory has no multiplier
        and must be excluded
    """
    strategy = PricingStrategy(strategy)
    context = ResolutionContext(ppp_data=ppp_data, custom_table=custom_table)

    for resolver in RESOLUTION_CHAINS[strategy]:
        resolution = resolver(territory, context)
        if resolution is not None:
            return resolution

    logger.debug(f"No {strategy.value} multiplier for {territory}")
    return None
