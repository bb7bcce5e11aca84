"""
Exchange rate API client for fetching USD-based currency conversion rates.
Uses Open Exchange Rates (https://docs.openexchangerates.org/) behind a reference data cache.
"""

import requests
import logging
import os
import time
from typing import Any, Dict, List, Optional

import config
from errors import NoApiKeyError, SourceUnavailableError
from models import ExchangeRatesData
from reference_cache import ReferenceCache

logger = logging.getLogger(__name__)


class ExchangeRateClient:
    """Client for fetching exchange rates from openexchangerates.org"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        cache: Optional[ReferenceCache] = None,
        session: Optional[requests.Session] = None,
        max_retries: int = config.FETCH_MAX_RETRIES,
        retry_delay: float = config.FETCH_RETRY_DELAY_SECONDS,
    ):
        """
        Initialize the exchange rate client.

        Args:
            api_key: Default API key (app_id); per-call keys take precedence
            cache: Reference data cache shared by the process
            session: Optional requests session (tests inject a fake)
            max_retries: Attempts per live fetch
            retry_delay: Delay in seconds between attempts
        """
        self.base_url = config.OPEN_EXCHANGE_RATES_BASE_URL
        self.api_key = api_key
        self.cache = cache or ReferenceCache(config.EXCHANGE_RATES_CACHE_TTL_SECONDS)
        self.session = session or requests.Session()
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    def resolve_api_key(self, api_key: Optional[str] = None) -> Optional[str]:
        """Explicit key, then OPEN_EXCHANGE_RATES_APP_ID, then the configured default"""
        return (
            api_key
            or self.api_key
            or os.environ.get('OPEN_EXCHANGE_RATES_APP_ID')
            or config.OPEN_EXCHANGE_RATES_APP_ID
        )

    def fetch(self, force_refresh: bool = False, api_key: Optional[str] = None) -> ExchangeRatesData:
        """
        Get exchange rates, from cache when fresh, otherwise from the API.

        If the live fetch fails the last cached value is returned regardless of
        its age (a stale rate beats none).

        Args:
            force_refresh: Bypass the cache for this call
            api_key: Optional per-request API key

        Returns:
            ExchangeRatesData

        Raises:
            NoApiKeyError: No key available and nothing cached
            SourceUnavailableError: API failed and nothing cached
        """
        key = config.EXCHANGE_RATES_CACHE_KEY
        cached, fresh = self.cache.get(key)

        if cached is not None and fresh and not force_refresh:
            return ExchangeRatesData.from_dict(cached)

        try:
            data = self.fetch_from_api(api_key)
        except (NoApiKeyError, SourceUnavailableError) as e:
            if cached is not None:
                logger.warning(f"Using stale exchange rates cache from {cached.get('fetchedAt')} due to error: {e}")
                return ExchangeRatesData.from_dict(cached)
            raise

        self.cache.put(key, data.to_dict())
        return data

    def fetch_from_api(self, api_key: Optional[str] = None) -> ExchangeRatesData:
        """
        Fetch latest rates from the API, retrying transient failures.

        Raises:
            NoApiKeyError: If no key can be resolved
            SourceUnavailableError: If all attempts fail or the response is unusable
        """
        app_id = self.resolve_api_key(api_key)
        if not app_id:
            raise NoApiKeyError()

        url = f"{self.base_url}/latest.json"
        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries):
            if attempt > 0:
                logger.info(f"Retry attempt {attempt + 1}/{self.max_retries} - waiting {self.retry_delay}s...")
                time.sleep(self.retry_delay)

            try:
                logger.info(f"Fetching exchange rates from {url}")
                response = self.session.get(
                    url,
                    params={'app_id': app_id},
                    headers={'Accept': 'application/json'},
                    timeout=config.REQUEST_TIMEOUT_SECONDS,
                )
                response.raise_for_status()
                payload = response.json()
            except requests.HTTPError as e:
                status = e.response.status_code if e.response is not None else None
                logger.error(f"Exchange rates API error {status} (attempt {attempt + 1}/{self.max_retries}): {e}")
                last_error = e
                # Bad key or plan limits will not fix themselves
                if status is not None and 400 <= status < 500 and status != 429:
                    break
                continue
            except (requests.RequestException, ValueError) as e:
                logger.error(f"Failed to fetch exchange rates (attempt {attempt + 1}/{self.max_retries}): {e}")
                last_error = e
                continue

            return self._parse_response(payload)

        raise SourceUnavailableError("Open Exchange Rates", str(last_error))

    def _parse_response(self, payload: Any) -> ExchangeRatesData:
        rates = payload.get('rates') if isinstance(payload, dict) else None
        if not isinstance(rates, dict) or not rates:
            raise SourceUnavailableError("Open Exchange Rates", "response did not include rates")

        try:
            timestamp = int(payload.get('timestamp') or 0)
            parsed_rates = {code: float(rate) for code, rate in rates.items()}
        except (TypeError, ValueError) as e:
            raise SourceUnavailableError("Open Exchange Rates", f"malformed response: {e}") from e

        provider_age = time.time() - timestamp if timestamp else None
        if provider_age is not None and provider_age > config.EXCHANGE_RATES_MAX_PROVIDER_AGE_SECONDS:
            logger.warning(
                f"API returned rates from {provider_age / 3600:.1f} hours ago. "
                f"Rates may be stale."
            )

        data = ExchangeRatesData(
            base=payload.get('base') or 'USD',
            rates=parsed_rates,
            timestamp=timestamp,
            fetched_at=self.cache.now_iso(),
        )
        logger.info(f"Fetched {len(data.rates)} exchange rates")
        return data

    def is_available(self, api_key: Optional[str] = None) -> bool:
        """True when a key is configured and rates can be obtained"""
        if not self.resolve_api_key(api_key):
            return False
        try:
            self.fetch(api_key=api_key)
            return True
        except (NoApiKeyError, SourceUnavailableError):
            return False

    def cache_status(self, api_key: Optional[str] = None) -> Dict[str, Any]:
        """Summarize the cached rates without touching the network"""
        cached, fresh = self.cache.get(config.EXCHANGE_RATES_CACHE_KEY)
        age = self.cache.age(cached) if cached is not None else None
        return {
            'hasApiKey': bool(self.resolve_api_key(api_key)),
            'hasCachedData': cached is not None,
            'cacheAgeSeconds': age.total_seconds() if age is not None else None,
            'isValid': fresh,
            'currencyCount': len(cached.get('rates', {})) if cached is not None else 0,
        }

    def available_currencies(self, data: Optional[ExchangeRatesData] = None) -> List[str]:
        if data is None:
            try:
                data = self.fetch()
            except (NoApiKeyError, SourceUnavailableError):
                return []
        return sorted(set(data.rates) | {data.base})

    def get_rate(self, currency: str, data: Optional[ExchangeRatesData] = None) -> Optional[float]:
        """
        Get exchange rate for a specific currency.

        Args:
            currency: Currency code (e.g., 'EUR', 'GBP')
            data: Optional pre-fetched rates

        Returns:
            Exchange rate from USD to the currency, or None if unknown
        """
        if data is None:
            data = self.fetch()

        rate = data.rate_for(currency)
        if rate is None:
            logger.warning(f"Exchange rate not found for {currency}")
        return rate
