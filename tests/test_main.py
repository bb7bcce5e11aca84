"""Tests for the HTTP entry point and route handlers."""

import json
from unittest.mock import Mock

import flask
import pytest

import main
from bulk_apply import PriceUpdater
from errors import NoApiKeyError, SourceUnavailableError
from exchange_rates import ExchangeRateClient
from ndjson_stream import NDJSON_CONTENT_TYPE
from ppp_data import WorldBankPPPClient, static_ppp_data

app = flask.Flask(__name__)


class StubUpdater(PriceUpdater):
    def __init__(self):
        self.calls = []

    def update_region_price(self, item_id, region_code, new_price, base_plan_id=None):
        self.calls.append((item_id, region_code))
        return None


@pytest.fixture
def updater():
    return StubUpdater()


@pytest.fixture
def service(monkeypatch, sample_rates, updater):
    exchange_client = Mock(spec=ExchangeRateClient)
    exchange_client.fetch.return_value = sample_rates
    ppp_client = Mock(spec=WorldBankPPPClient)
    ppp_client.fetch.return_value = (static_ppp_data(sample_rates.fetched_at), {'fallback': True})

    service = main.PricingService(exchange_client, ppp_client, updater_factory=lambda: updater)
    monkeypatch.setattr(main, '_service', service)
    return service


def call(path, method='GET', **kwargs):
    with app.test_request_context(path, method=method, **kwargs):
        return main.main(flask.request)


class TestRouting:
    def test_unknown_path(self, service):
        body, status = call('/nowhere')
        assert status == 404
        assert body['error'] == 'Not found: /nowhere'

    def test_wrong_method(self, service):
        body, status = call('/prices/calculate')
        assert status == 405

    def test_unexpected_error_is_500(self, service):
        service.exchange_client.fetch.side_effect = RuntimeError('boom')
        body, status = call('/exchange-rates')
        assert status == 500
        assert body == {'error': 'boom', 'message': 'Request failed'}


class TestExchangeRates:
    def test_returns_rates(self, service, sample_rates):
        body, status = call('/exchange-rates?refresh=true', headers={'X-Exchange-Rates-Key': 'abc'})

        assert status == 200
        assert body['success'] is True
        assert body['currencyCount'] == len(sample_rates.rates)
        assert body['rates']['EUR'] == 0.92
        service.exchange_client.fetch.assert_called_once()
        assert service.exchange_client.fetch.call_args.kwargs['force_refresh'] is True

    def test_missing_key_is_not_an_http_error(self, service):
        service.exchange_client.fetch.side_effect = NoApiKeyError()
        body, status = call('/exchange-rates')
        assert status == 200
        assert body['success'] is False
        assert body['noApiKey'] is True

    def test_source_unavailable(self, service):
        service.exchange_client.fetch.side_effect = SourceUnavailableError('exchange-rates', 'timeout')
        body, status = call('/exchange-rates')
        assert status == 503
        assert body['success'] is False

    def test_status(self, service):
        service.exchange_client.cache_status.return_value = {'hasApiKey': False, 'isValid': False}
        body, status = call('/exchange-rates?status=1')
        assert status == 200
        assert body == {'success': True, 'hasApiKey': False, 'isValid': False}
        service.exchange_client.fetch.assert_not_called()


def test_ppp_index(service):
    body, status = call('/ppp')
    assert status == 200
    assert body['metadata'] == {'fallback': True}
    assert body['data']['FR']['pppMultiplier'] == pytest.approx(0.81)
    assert body['data']['JP']['minPrice'] == 100


class TestCalculate:
    def test_preview(self, service):
        body, status = call('/prices/calculate', method='POST', json={
            'basePriceUsd': 10,
            'territories': ['jp', 'FR'],
            'strategy': 'direct',
            'roundingMode': 'none',
        })

        assert status == 200
        assert body['strategy'] == 'direct'
        assert [p['regionCode'] for p in body['prices']] == ['FR', 'JP']
        fr = body['prices'][0]
        assert fr['currencyCode'] == 'EUR'
        assert fr['price'] == {'currencyCode': 'EUR', 'units': '9', 'nanos': 200000000}
        assert body['skipped'] == []
        assert 'ppp' not in body
        service.ppp_client.fetch.assert_not_called()

    def test_ppp_strategy_reports_source_metadata(self, service):
        body, status = call('/prices/calculate', method='POST', json={'basePriceUsd': 5, 'territories': ['FR']})
        assert status == 200
        assert body['ppp'] == {'fallback': True}
        assert body['prices'][0]['multiplierSource'] == 'static'

    def test_territory_without_rate_is_skipped(self, service):
        body, status = call('/prices/calculate', method='POST', json={
            'basePriceUsd': 5, 'territories': ['FR', 'AU'], 'strategy': 'direct',
        })
        assert [p['regionCode'] for p in body['prices']] == ['FR']
        assert body['skipped'] == ['AU']

    def test_lower_case_custom_table(self, service):
        body, status = call('/prices/calculate', method='POST', json={
            'basePriceUsd': 10, 'territories': ['fr', 'jp'], 'strategy': 'custom', 'roundingMode': 'none',
            'customMultipliers': {'fr': 0.5, 'jp': 0.5},
        })
        assert status == 200
        assert [p['regionCode'] for p in body['prices']] == ['FR', 'JP']
        assert body['prices'][0]['price'] == {'currencyCode': 'EUR', 'units': '4', 'nanos': 600000000}

    def test_invalid_body(self, service):
        body, status = call('/prices/calculate', method='POST', json={'basePriceUsd': 'ten', 'strategy': 'magic'})
        assert status == 400
        assert body['error'] == 'Invalid request body'
        assert {tuple(d['loc']) for d in body['details']} >= {('basePriceUsd',), ('strategy',)}

    def test_non_positive_custom_multiplier(self, service):
        body, status = call('/prices/calculate', method='POST', json={
            'basePriceUsd': 5, 'strategy': 'custom', 'customMultipliers': {'FR': 0},
        })
        assert status == 400

    def test_malformed_json(self, service):
        body, status = call('/prices/calculate', method='POST', data='{not json',
                            content_type='application/json')
        assert status == 400
        assert body == {'error': 'Invalid JSON in request body'}

    def test_missing_key(self, service):
        service.exchange_client.fetch.side_effect = NoApiKeyError()
        body, status = call('/prices/calculate', method='POST', json={'basePriceUsd': 5})
        assert (status, body['noApiKey']) == (200, True)


BULK_BODY = {
    'items': [{
        'id': 'coins_100',
        'territoryPrices': {
            'FR': {'currencyCode': 'EUR', 'units': 4, 'nanos': 490000000},
            'JP': {'currencyCode': 'JPY', 'units': '700'},
        },
    }],
    'concurrency': 1,
}


class TestBulkApply:
    def test_json_response(self, service, updater):
        body, status = call('/bulk', method='POST', json=BULK_BODY)

        assert status == 200
        assert body['success'] is True
        assert (body['total'], body['successful'], body['failed']) == (2, 2, 0)
        assert updater.calls == [('coins_100', 'FR'), ('coins_100', 'JP')]
        assert body['results'][0]['changes'][0] == {'regionCode': 'FR', 'oldPrice': None, 'newPrice': 'EUR 4.49'}

    def test_streams_ndjson_when_requested(self, service, updater):
        response = call('/bulk', method='POST', json=BULK_BODY, headers={'Accept': NDJSON_CONTENT_TYPE})

        assert isinstance(response, flask.Response)
        assert response.headers['Content-Type'] == NDJSON_CONTENT_TYPE
        events = [json.loads(line) for line in b''.join(response.response).decode('utf-8').splitlines()]
        assert [e['type'] for e in events] == ['progress', 'progress', 'done']
        assert events[-1]['data']['successful'] == 2

    def test_lower_case_regions_are_applied_upper_case(self, service, updater):
        body, status = call('/bulk', method='POST', json={
            'items': [{'id': 'coins_100', 'territoryPrices': {'fr': {'currencyCode': 'EUR', 'units': '4'}}}],
        })
        assert body['successful'] == 1
        assert updater.calls == [('coins_100', 'FR')]

    def test_empty_items_rejected(self, service):
        body, status = call('/bulk', method='POST', json={'items': []})
        assert status == 400

    def test_play_not_configured(self, service):
        def unconfigured():
            raise ValueError('GOOGLE_PLAY_PACKAGE_NAME must be set')

        service._updater_factory = unconfigured
        body, status = call('/bulk', method='POST', json=BULK_BODY)
        assert status == 503
        assert body['error'] == 'Google Play is not configured'
