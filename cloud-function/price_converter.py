"""
Core price conversion logic.
Turns a USD base price into per-territory local prices using the pricing
strategy multipliers, current exchange rates and the rounding policy.
"""

import logging
from typing import Dict, Iterable, List, Optional, Union

import pricing_indexes
import territories
from models import CalculatedPrice, ExchangeRatesData, PPPData, money_from_amount
from pricing_strategy import PricingStrategy, resolve_multiplier
from rounding import RoundingMode, round_price

logger = logging.getLogger(__name__)


def resolve_currency(region_code: str, known_currencies: Optional[Dict[str, str]] = None) -> str:
    """
    Billing currency for a territory.
    Order: caller-supplied currencies, storefront catalogs, local currency table (USD default).
    """
    if known_currencies and known_currencies.get(region_code):
        return known_currencies[region_code].upper()
    return territories.get_catalog_currency(region_code) or pricing_indexes.get_local_currency(
        territories.to_alpha2(region_code)
    )


def _rate_for(currency: str, exchange_rates: Optional[ExchangeRatesData]) -> Optional[float]:
    if currency == 'USD':
        return 1.0
    if exchange_rates is None:
        return None
    return exchange_rates.rate_for(currency)


def minimum_price(
    region_code: str,
    currency: str,
    exchange_rates: Optional[ExchangeRatesData],
) -> Optional[float]:
    """
    Minimum sensible price for a territory in its billing currency.

    The static index stores minimums in the region's local currency; when the
    storefront bills in another currency the minimum is converted through USD.
    """
    alpha2 = territories.to_alpha2(region_code)
    entry = pricing_indexes.get_pricing_index_entry(alpha2)
    if entry is None:
        return None

    local_currency = pricing_indexes.get_local_currency(alpha2)
    if local_currency == currency:
        return entry.min_price

    local_rate = _rate_for(local_currency, exchange_rates)
    target_rate = _rate_for(currency, exchange_rates)
    if not local_rate or target_rate is None:
        return None
    return entry.min_price / local_rate * target_rate


def calculate_regional_price(
    base_price_usd: float,
    region_code: str,
    strategy: Union[PricingStrategy, str],
    rounding_mode: Union[RoundingMode, str],
    custom_multipliers: Optional[Dict[str, float]] = None,
    ppp_data: Optional[PPPData] = None,
    known_currencies: Optional[Dict[str, str]] = None,
    exchange_rates: Optional[ExchangeRatesData] = None,
    enforce_min_price: bool = False,
) -> Optional[CalculatedPrice]:
    """
    Calculate the local price for one territory.

    Returns:
        CalculatedPrice, or None when the territory has no multiplier or no
        exchange rate for its currency
    """
    currency = resolve_currency(region_code, known_currencies)

    resolution = resolve_multiplier(region_code, strategy, ppp_data=ppp_data, custom_table=custom_multipliers)
    if resolution is None:
        return None
    multiplier, source = resolution

    rate = _rate_for(currency, exchange_rates)
    if rate is None:
        logger.warning(f"No exchange rate for {currency}, skipping {region_code}")
        return None

    adjusted_usd = base_price_usd * multiplier
    converted = adjusted_usd * rate
    rounded = round_price(converted, rounding_mode, currency=currency)

    if enforce_min_price:
        floor_price = minimum_price(region_code, currency, exchange_rates)
        if floor_price is not None and rounded < floor_price:
            logger.debug(f"{region_code}: {rounded} {currency} below minimum {floor_price}, raising")
            rounded = round_price(floor_price, rounding_mode, currency=currency)

    return CalculatedPrice(
        region_code=region_code,
        currency_code=currency,
        multiplier=multiplier,
        multiplier_source=source,
        exchange_rate=rate,
        adjusted_usd_price=adjusted_usd,
        raw_price=rounded,
        price=money_from_amount(rounded, currency),
    )


def calculate_bulk_prices(
    base_price_usd: float,
    territory_codes: Iterable[str],
    strategy: Union[PricingStrategy, str],
    rounding_mode: Union[RoundingMode, str],
    custom_multipliers: Optional[Dict[str, float]] = None,
    ppp_data: Optional[PPPData] = None,
    known_currencies: Optional[Dict[str, str]] = None,
    exchange_rates: Optional[ExchangeRatesData] = None,
    enforce_min_price: bool = False,
) -> List[CalculatedPrice]:
    """
    Calculate local prices for many territories from one USD base price.

    Territories without a multiplier (custom strategy gaps) or without an
    exchange rate are left out of the result rather than guessed.

    Args:
        base_price_usd: Base price in USD
        territory_codes: Region codes to price
        strategy: "direct", "ppp", "bigmac" or "custom"
        rounding_mode: "charm", "whole" or "none"
        custom_multipliers: Region code -> multiplier for the custom strategy
        ppp_data: PPP multipliers for the ppp strategy
        known_currencies: Region code -> billing currency already known to the caller
        exchange_rates: USD-based rates
        enforce_min_price: Raise prices below the region's minimum

    Returns:
        List of CalculatedPrice in input order
    """
    if base_price_usd <= 0:
        return []

    strategy = PricingStrategy(strategy)
    rounding_mode = RoundingMode(rounding_mode)

    results: List[CalculatedPrice] = []
    skipped: List[str] = []
    for region_code in territory_codes:
        price = calculate_regional_price(
            base_price_usd,
            region_code,
            strategy,
            rounding_mode,
            custom_multipliers=custom_multipliers,
            ppp_data=ppp_data,
            known_currencies=known_currencies,
            exchange_rates=exchange_rates,
            enforce_min_price=enforce_min_price,
        )
        if price is None:
            skipped.append(region_code)
            continue
        results.append(price)

    if skipped:
        logger.info(f"Skipped {len(skipped)} territories without a {strategy.value} price: {', '.join(skipped)}")
    logger.info(f"Calculated {len(results)} prices for ${base_price_usd:.2f} ({strategy.value}, {rounding_mode.value})")
    return results
