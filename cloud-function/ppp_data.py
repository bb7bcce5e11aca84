"""
World Bank PPP client producing per-territory price multipliers.
API documentation: https://datahelpdesk.worldbank.org/knowledgebase/articles/889392
"""

import logging
from typing import Any, Dict, Optional, Tuple

import requests

import config
import pricing_indexes
import territories
from errors import SourceUnavailableError
from models import PPPData
from pricing_strategy import SOURCE_STATIC, SOURCE_WORLD_BANK
from reference_cache import ReferenceCache

logger = logging.getLogger(__name__)

# Every territory the multiplier table must cover
SUPPORTED_TERRITORIES = sorted(
    set(pricing_indexes.PRICING_INDEX) | {code for code, _, _ in territories.GOOGLE_PLAY_REGIONS}
)


def clamp_multiplier(value: float) -> float:
    return max(config.PPP_MULTIPLIER_MIN, min(config.PPP_MULTIPLIER_MAX, value))


def build_ppp_data(
    live: Dict[str, float],
    base_year: Optional[int],
    fetched_at: str,
    fallback: bool = False,
) -> PPPData:
    """
    Merge live multipliers with the static index.
    Territories missing from the live data are backfilled from the static table.
    """
    multipliers: Dict[str, float] = {}
    sources: Dict[str, str] = {}

    for code in SUPPORTED_TERRITORIES:
        if code in live:
            multipliers[code] = live[code]
            sources[code] = SOURCE_WORLD_BANK
        else:
            multipliers[code] = pricing_indexes.get_static_multiplier(code)
            sources[code] = SOURCE_STATIC

    # Live regions outside the supported list are kept as well
    for code, multiplier in live.items():
        if code not in multipliers:
            multipliers[code] = multiplier
            sources[code] = SOURCE_WORLD_BANK

    return PPPData(
        multipliers=multipliers,
        base_year=base_year,
        fallback=fallback,
        fetched_at=fetched_at,
        sources=sources,
    )


def static_ppp_data(fetched_at: str) -> PPPData:
    """PPP data built entirely from the bundled table"""
    return build_ppp_data({}, None, fetched_at, fallback=True)


def regional_index(ppp_data: PPPData) -> Dict[str, Dict[str, Any]]:
    """
    Per-region view merging PPP multipliers with the static index (minimum
    price, suggested rounding) and the Big Mac index.
    """
    merged: Dict[str, Dict[str, Any]] = {}
    for code, multiplier in ppp_data.multipliers.items():
        entry = pricing_indexes.PRICING_INDEX.get(code, pricing_indexes.DEFAULT_PRICING_INDEX_ENTRY)
        big_mac = pricing_indexes.get_big_mac_multiplier(code)
        merged[code] = {
            'pppMultiplier': multiplier,
            'bigMacMultiplier': big_mac if big_mac is not None else pricing_indexes.DEFAULT_BIG_MAC_MULTIPLIER,
            'minPrice': entry.min_price,
            'suggestedRounding': entry.suggested_rounding,
            'source': ppp_data.sources.get(code, SOURCE_STATIC),
        }
    return merged


class WorldBankPPPClient:
    """Client for the World Bank price level ratio indicator"""

    def __init__(
        self,
        cache: Optional[ReferenceCache] = None,
        session: Optional[requests.Session] = None,
        url: Optional[str] = None,
    ):
        self.cache = cache or ReferenceCache(config.PPP_CACHE_TTL_SECONDS)
        self.session = session or requests.Session()
        self.url = url or config.WORLD_BANK_PPP_URL

    def fetch(self, force_refresh: bool = False) -> Tuple[PPPData, Dict[str, Any]]:
        """
        Get PPP multipliers covering every supported territory.

        Falls back to the last cached live data when the World Bank cannot be
        reached, and to the static table (fallback=True) when nothing is cached.

        Args:
            force_refresh: Bypass the cache for this call

        Returns:
            Tuple of (PPPData, metadata)
        """
        key = config.PPP_CACHE_KEY
        cached, fresh = self.cache.get(key)

        if cached is not None and fresh and not force_refresh:
            data = PPPData.from_dict(cached)
            return data, self._metadata(data)

        try:
            live, base_year = self.fetch_live_multipliers()
        except SourceUnavailableError as e:
            if cached is not None:
                logger.warning(f"Using stale PPP cache from {cached.get('fetchedAt')} due to error: {e}")
                data = PPPData.from_dict(cached)
                return data, self._metadata(data, stale=True, error=str(e))

            logger.error(f"Failed to fetch PPP data from World Bank, using static table: {e}")
            data = static_ppp_data(self.cache.now_iso())
            return data, self._metadata(data, error=str(e))

        data = build_ppp_data(live, base_year, self.cache.now_iso())
        self.cache.put(key, data.to_dict())
        return data, self._metadata(data)

    def fetch_live_multipliers(self) -> Tuple[Dict[str, float], Optional[int]]:
        """
        Fetch and normalize the World Bank indicator.

        Returns:
            Tuple of (region code -> multiplier relative to US, base year)

        Raises:
            SourceUnavailableError: On network failure or an unusable response
        """
        try:
            logger.info(f"Fetching PPP data from {self.url}")
            response = self.session.get(self.url, timeout=config.REQUEST_TIMEOUT_SECONDS)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            raise SourceUnavailableError("World Bank", str(e)) from e

        # World Bank returns a [metadata, records] array
        if not isinstance(payload, list) or len(payload) < 2 or not isinstance(payload[1], list):
            raise SourceUnavailableError("World Bank", "invalid response format")

        ratios: Dict[str, Tuple[float, int]] = {}
        for record in payload[1]:
            value = record.get('value')
            if value is None:
                continue
            region_code = territories.alpha3_to_alpha2(record.get('countryiso3code') or '')
            if not region_code:
                continue
            try:
                ratios[region_code] = (float(value), int(record.get('date')))
            except (TypeError, ValueError):
                logger.debug(f"Skipping malformed World Bank record for {region_code}: {record}")

        us = ratios.get('US')
        if not us or us[0] <= 0:
            raise SourceUnavailableError("World Bank", "US PPP data not found")

        us_ratio, base_year = us
        multipliers = {code: clamp_multiplier(ratio / us_ratio) for code, (ratio, _) in ratios.items()}
        multipliers['US'] = 1.0

        logger.info(f"Fetched PPP multipliers for {len(multipliers)} regions (base year {base_year})")
        return multipliers, base_year

    def _metadata(self, data: PPPData, stale: bool = False, error: Optional[str] = None) -> Dict[str, Any]:
        metadata: Dict[str, Any] = {
            'baseYear': data.base_year,
            'fetchedAt': data.fetched_at,
            'worldBankRegions': sum(1 for s in data.sources.values() if s == SOURCE_WORLD_BANK),
            'totalRegions': len(data.multipliers),
            'fallback': data.fallback,
        }
        if stale:
            metadata['stale'] = True
        if error:
            metadata['error'] = error
        return metadata
