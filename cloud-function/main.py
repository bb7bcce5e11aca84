"""
Cloud Function entry point for the regional pricing system.

Routes:
    GET  /exchange-rates     current USD exchange rates (?refresh=true, ?status=true)
    GET  /ppp                per-region PPP multipliers (?refresh=true)
    POST /prices/calculate   preview regional prices for a USD base price
    POST /bulk               apply territory prices to Google Play (NDJSON progress when requested)
"""

import json
import logging
from typing import Any, Callable, Dict, Optional, Tuple

from flask import Response
from pydantic import ValidationError

import config
import territories
from bulk_apply import BulkApplyOrchestrator, PriceUpdater, stream_bulk_apply
from errors import NoApiKeyError, SourceUnavailableError
from exchange_rates import ExchangeRateClient
from ndjson_stream import NDJSON_CONTENT_TYPE, NDJSON_HEADERS
from ppp_data import WorldBankPPPClient, regional_index
from price_converter import calculate_bulk_prices
from pricing_strategy import PricingStrategy
from reference_cache import JsonFileCacheStore, ReferenceCache
from schemas import BulkApplyRequest, CalculateRequest

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

HandlerResult = Any


def _google_play_updater() -> PriceUpdater:
    from play_client import GooglePlayClient, GooglePlayPriceUpdater
    return GooglePlayPriceUpdater(GooglePlayClient())


class PricingService:
    """
    Clients and caches shared by every invocation of a warm instance.
    The storefront updater is created on first use so read-only routes work without Google credentials.
    """

    def __init__(
        self,
        exchange_client: Optional[ExchangeRateClient] = None,
        ppp_client: Optional[WorldBankPPPClient] = None,
        updater_factory: Callable[[], PriceUpdater] = _google_play_updater,
    ):
        store = JsonFileCacheStore()
        self.exchange_client = exchange_client or ExchangeRateClient(
            cache=ReferenceCache(config.EXCHANGE_RATES_CACHE_TTL_SECONDS, store)
        )
        self.ppp_client = ppp_client or WorldBankPPPClient(cache=ReferenceCache(config.PPP_CACHE_TTL_SECONDS, store))
        self._updater_factory = updater_factory
        self._updater: Optional[PriceUpdater] = None

    @property
    def updater(self) -> PriceUpdater:
        if self._updater is None:
            self._updater = self._updater_factory()
        return self._updater


_service: Optional[PricingService] = None


def get_service() -> PricingService:
    global _service
    if _service is None:
        _service = PricingService()
    return _service


def _flag(value: Optional[str]) -> bool:
    return (value or '').lower() in ('1', 'true', 'yes')


def _validation_error(e: ValidationError) -> Tuple[Dict[str, Any], int]:
    # e.json() renders validator exceptions as strings; e.errors() may not be serializable
    return {'error': 'Invalid request body', 'details': json.loads(e.json(include_url=False))}, 400


def _no_api_key(e: NoApiKeyError) -> Tuple[Dict[str, Any], int]:
    # 200 so clients can show a "configure a key" prompt instead of a generic failure
    return {'success': False, 'noApiKey': True, 'error': str(e)}, 200


def _parse_body(request, schema):
    body = request.get_json(silent=True)
    if body is None:
        return None, ({'error': 'Invalid JSON in request body'}, 400)
    try:
        return schema.model_validate(body), None
    except ValidationError as e:
        return None, _validation_error(e)


def exchange_rates_handler(request) -> HandlerResult:
    """GET /exchange-rates"""
    client = get_service().exchange_client
    api_key = request.headers.get(config.EXCHANGE_RATES_KEY_HEADER) or None

    if _flag(request.args.get('status')):
        return {'success': True, **client.cache_status(api_key)}, 200

    try:
        data = client.fetch(force_refresh=_flag(request.args.get('refresh')), api_key=api_key)
    except NoApiKeyError as e:
        return _no_api_key(e)
    except SourceUnavailableError as e:
        logger.error(f"Exchange rates unavailable: {e}")
        return {'success': False, 'error': str(e)}, 503

    return {'success': True, 'currencyCount': len(data.rates), **data.to_dict()}, 200


def ppp_handler(request) -> HandlerResult:
    """GET /ppp"""
    data, metadata = get_service().ppp_client.fetch(force_refresh=_flag(request.args.get('refresh')))
    if data.fallback:
        logger.warning("Serving static PPP table (World Bank unavailable)")
    return {'success': True, 'data': regional_index(data), 'metadata': metadata}, 200


def calculate_handler(request) -> HandlerResult:
    """POST /prices/calculate"""
    payload, error = _parse_body(request, CalculateRequest)
    if error:
        return error

    service = get_service()
    if payload.territories:
        codes = list(payload.territories)
    elif payload.platform == 'apple':
        codes = [t.code for t in territories.apple_territories()]
    else:
        codes = [t.code for t in territories.google_play_territories()]

    api_key = request.headers.get(config.EXCHANGE_RATES_KEY_HEADER) or None
    try:
        rates = service.exchange_client.fetch(api_key=api_key)
    except NoApiKeyError as e:
        return _no_api_key(e)
    except SourceUnavailableError as e:
        logger.error(f"Exchange rates unavailable: {e}")
        return {'success': False, 'error': str(e)}, 503

    ppp_data, ppp_metadata = None, None
    if payload.strategy == PricingStrategy.PPP:
        ppp_data, ppp_metadata = service.ppp_client.fetch()

    prices = calculate_bulk_prices(
        payload.base_price_usd,
        codes,
        payload.strategy,
        payload.rounding_mode,
        custom_multipliers=payload.custom_multipliers,
        ppp_data=ppp_data,
        known_currencies=payload.known_currencies,
        exchange_rates=rates,
        enforce_min_price=payload.enforce_min_price,
    )
    prices.sort(key=lambda p: p.region_code)
    priced = {p.region_code for p in prices}

    result: Dict[str, Any] = {
        'success': True,
        'basePriceUsd': payload.base_price_usd,
        'strategy': payload.strategy.value,
        'roundingMode': payload.rounding_mode.value,
        'prices': [p.to_dict() for p in prices],
        'skipped': [code for code in codes if code not in priced] if payload.base_price_usd > 0 else [],
        'exchangeRatesFetchedAt': rates.fetched_at,
    }
    if ppp_metadata is not None:
        result['ppp'] = ppp_metadata
    return result, 200


def _wants_stream(request) -> bool:
    return NDJSON_CONTENT_TYPE in (request.headers.get('Accept') or '') or _flag(request.args.get('stream'))


def bulk_apply_handler(request) -> HandlerResult:
    """POST /bulk"""
    payload, error = _parse_body(request, BulkApplyRequest)
    if error:
        return error

    try:
        updater = get_service().updater
    except ValueError as e:
        logger.error(f"Google Play is not configured: {e}")
        return {'error': 'Google Play is not configured', 'message': str(e)}, 503

    orchestrator = BulkApplyOrchestrator(
        updater,
        concurrency=payload.concurrency or config.BULK_APPLY_CONCURRENCY,
        granularity=payload.granularity,
        stop_on_failure=payload.stop_on_failure,
    )
    items = payload.to_items()

    if _wants_stream(request):
        return Response(stream_bulk_apply(orchestrator, items), status=200, headers=NDJSON_HEADERS)

    aggregate = orchestrator.apply(items)
    return {'success': aggregate.failed == 0, **aggregate.to_dict()}, 200


ROUTES: Dict[str, Tuple[str, Callable]] = {
    '/exchange-rates': ('GET', exchange_rates_handler),
    '/ppp': ('GET', ppp_handler),
    '/prices/calculate': ('POST', calculate_handler),
    '/bulk': ('POST', bulk_apply_handler),
}


# For Cloud Functions HTTP trigger
def main(request):
    """Main entry point for Cloud Function"""
    path = request.path.rstrip('/') or '/'
    route = ROUTES.get(path)
    if route is None:
        return {'error': f"Not found: {request.path}"}, 404

    method, handler = route
    if request.method != method:
        return {'error': f"Method {request.method} not allowed"}, 405

    try:
        return handler(request)
    except Exception as e:
        logger.error(f"Error handling {request.method} {path}: {e}", exc_info=True)
        return {'error': str(e), 'message': 'Request failed'}, 500


# For local testing
if __name__ == '__main__':
    from flask import Flask, request as flask_request

    app = Flask(__name__)
    app.add_url_rule(
        '/<path:path>', 'main', lambda path: main(flask_request), methods=['GET', 'POST']
    )
    app.run(port=8080, debug=True)
