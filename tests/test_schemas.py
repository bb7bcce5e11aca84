"""Tests for request body validation."""

import pytest
from pydantic import ValidationError

from models import Money
from schemas import BulkApplyRequest, CalculateRequest


class TestCalculateRequest:
    def test_defaults(self):
        request = CalculateRequest.model_validate({'basePriceUsd': 4.99})
        assert request.platform == 'google'
        assert request.strategy.value == 'ppp'
        assert request.rounding_mode.value == 'charm'

    def test_region_codes_are_upper_cased(self):
        request = CalculateRequest.model_validate({
            'basePriceUsd': 4.99,
            'territories': ['fr', 'jpn'],
            'customMultipliers': {'fr': 0.8, 'Jp': 0.7},
            'knownCurrencies': {'fr': 'EUR'},
        })
        assert request.territories == ['FR', 'JPN']
        assert request.custom_multipliers == {'FR': 0.8, 'JP': 0.7}
        assert request.known_currencies == {'FR': 'EUR'}

    def test_colliding_codes_rejected(self):
        with pytest.raises(ValidationError):
            CalculateRequest.model_validate({'basePriceUsd': 1, 'customMultipliers': {'fr': 0.8, 'FR': 0.9}})

    def test_non_positive_multiplier_rejected(self):
        with pytest.raises(ValidationError, match='custom multipliers must be positive: FR'):
            CalculateRequest.model_validate({'basePriceUsd': 1, 'customMultipliers': {'fr': -1}})


class TestBulkApplyRequest:
    def test_items_and_normalized_regions(self):
        request = BulkApplyRequest.model_validate({
            'items': [{
                'id': 'premium',
                'basePlanId': 'monthly',
                'territoryPrices': {'fr': {'currencyCode': 'eur', 'units': 4, 'nanos': 490000000}},
            }],
            'stopOnFailure': True,
        })

        [item] = request.to_items()
        assert item.base_plan_id == 'monthly'
        assert item.territory_prices == {'FR': Money('EUR', '4', 490000000)}
        assert request.stop_on_failure is True
        assert request.granularity == 'territory'

    def test_same_region_twice_rejected(self):
        money = {'currencyCode': 'EUR', 'units': '4'}
        with pytest.raises(ValidationError):
            BulkApplyRequest.model_validate({'items': [{'id': 'a', 'territoryPrices': {'fr': money, 'FR': money}}]})

    @pytest.mark.parametrize('price', [
        {'currencyCode': 'EURO', 'units': '4'},
        {'currencyCode': 'EUR', 'units': '-4'},
        {'currencyCode': 'EUR', 'units': '4', 'nanos': 1_000_000_000},
    ])
    def test_invalid_money_rejected(self, price):
        with pytest.raises(ValidationError):
            BulkApplyRequest.model_validate({'items': [{'id': 'a', 'territoryPrices': {'FR': price}}]})
