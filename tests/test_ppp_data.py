"""Tests for the World Bank PPP client and the merged regional index."""

from unittest.mock import Mock

import pytest
import requests

import ppp_data
from errors import SourceUnavailableError
from ppp_data import WorldBankPPPClient, build_ppp_data, clamp_multiplier, regional_index


def _world_bank_payload():
    return [
        {'page': 1, 'pages': 1, 'total': 5},
        [
            {'countryiso3code': 'USA', 'date': '2022', 'value': 0.5},
            {'countryiso3code': 'IND', 'date': '2022', 'value': 0.125},
            {'countryiso3code': 'JPN', 'date': '2022', 'value': 0.3},
            {'countryiso3code': 'FRA', 'date': '2022', 'value': None},
            {'countryiso3code': 'WLD', 'date': '2022', 'value': 0.4},
        ],
    ]


def _session(payload=None, error=None):
    session = Mock()
    if error is not None:
        session.get.side_effect = error
    else:
        response = Mock()
        response.json.return_value = payload
        session.get.return_value = response
    return session


class TestLiveFetch:
    def test_multipliers_normalized_to_us(self, ppp_cache):
        client = WorldBankPPPClient(cache=ppp_cache, session=_session(_world_bank_payload()))

        multipliers, base_year = client.fetch_live_multipliers()

        assert base_year == 2022
        assert multipliers == {'US': 1.0, 'IN': 0.25, 'JP': 0.6}

    def test_missing_us_is_an_error(self, ppp_cache):
        payload = _world_bank_payload()
        payload[1] = [r for r in payload[1] if r['countryiso3code'] != 'USA']
        client = WorldBankPPPClient(cache=ppp_cache, session=_session(payload))

        with pytest.raises(SourceUnavailableError, match="US PPP data not found"):
            client.fetch_live_multipliers()

    def test_unexpected_format_is_an_error(self, ppp_cache):
        client = WorldBankPPPClient(cache=ppp_cache, session=_session({'message': 'invalid'}))

        with pytest.raises(SourceUnavailableError):
            client.fetch_live_multipliers()


class TestFetch:
    def test_live_data_backfilled_from_static_table(self, ppp_cache):
        client = WorldBankPPPClient(cache=ppp_cache, session=_session(_world_bank_payload()))

        data, metadata = client.fetch()

        assert data.fallback is False
        assert data.multipliers['IN'] == 0.25
        assert data.sources['IN'] == 'world-bank'
        assert data.multipliers['FR'] == 0.81
        assert data.sources['FR'] == 'static'
        assert set(ppp_data.SUPPORTED_TERRITORIES) <= set(data.multipliers)
        assert metadata['baseYear'] == 2022
        assert metadata['worldBankRegions'] == 3
        assert metadata['totalRegions'] == len(data.multipliers)
        assert metadata['fallback'] is False

    def test_second_fetch_served_from_cache(self, ppp_cache):
        session = _session(_world_bank_payload())
        client = WorldBankPPPClient(cache=ppp_cache, session=session)

        client.fetch()
        client.fetch()

        assert session.get.call_count == 1

    def test_refresh_bypasses_cache(self, ppp_cache):
        session = _session(_world_bank_payload())
        client = WorldBankPPPClient(cache=ppp_cache, session=session)

        client.fetch()
        client.fetch(force_refresh=True)

        assert session.get.call_count == 2

    def test_unreachable_without_cache_uses_static_table(self, ppp_cache):
        client = WorldBankPPPClient(cache=ppp_cache, session=_session(error=requests.ConnectionError("down")))

        data, metadata = client.fetch()

        assert data.fallback is True
        assert metadata['fallback'] is True
        assert metadata['worldBankRegions'] == 0
        assert 'error' in metadata
        assert data.multipliers['FR'] == 0.81
        assert set(data.sources.values()) == {'static'}

    def test_unreachable_with_stale_cache_serves_cache(self, ppp_cache, clock):
        WorldBankPPPClient(cache=ppp_cache, session=_session(_world_bank_payload())).fetch()
        clock.advance(days=2)
        client = WorldBankPPPClient(cache=ppp_cache, session=_session(error=requests.Timeout("slow")))

        data, metadata = client.fetch()

        assert data.fallback is False
        assert data.multipliers['IN'] == 0.25
        assert metadata['stale'] is True


class TestHelpers:
    def test_clamp_multiplier(self):
        assert clamp_multiplier(0.01) == 0.1
        assert clamp_multiplier(5.0) == 2.0
        assert clamp_multiplier(0.7) == 0.7

    def test_regional_index(self):
        data = build_ppp_data({'JP': 0.6}, 2022, '2026-01-15T12:00:00.000Z')

        index = regional_index(data)

        assert index['JP'] == {
            'pppMultiplier': 0.6,
            'bigMacMultiplier': 0.54,
            'minPrice': 100,
            'suggestedRounding': 0,
            'source': 'world-bank',
        }
        assert index['FR']['source'] == 'static'
