"""Tests for regional price calculation."""

import pytest

from models import Money, money_to_amount
from price_converter import calculate_bulk_prices, calculate_regional_price
from rounding import round_price


def _by_region(prices):
    return {p.region_code: p for p in prices}


class TestDirectStrategy:
    def test_plain_conversion(self, sample_rates):
        prices = _by_region(calculate_bulk_prices(10.0, ['US', 'FR', 'JP'], 'direct', 'none',
                                                  exchange_rates=sample_rates))

        assert prices['US'].price == Money('USD', '10')
        assert prices['FR'].price == Money('EUR', '9', 200_000_000)
        assert prices['JP'].price == Money('JPY', '1500')

    def test_raw_price_is_rounded_base_times_rate(self, sample_rates):
        for price in calculate_bulk_prices(4.99, ['US', 'FR', 'GB', 'IN', 'BR'], 'direct', 'charm',
                                           exchange_rates=sample_rates):
            assert price.multiplier == 1.0
            assert price.multiplier_source == 'direct'
            assert price.adjusted_usd_price == 4.99
            assert price.raw_price == round_price(4.99 * price.exchange_rate, 'charm', currency=price.currency_code)
            assert money_to_amount(price.price) == pytest.approx(price.raw_price)

    def test_apple_territory_codes(self, sample_rates):
        [price] = calculate_bulk_prices(10.0, ['FRA'], 'direct', 'none', exchange_rates=sample_rates)
        assert price.region_code == 'FRA'
        assert price.currency_code == 'EUR'


class TestCustomStrategy:
    def test_custom_multipliers_with_charm(self, sample_rates):
        prices = _by_region(calculate_bulk_prices(
            9.99, ['FR', 'JP', 'US'], 'custom', 'charm',
            custom_multipliers={'FR': 0.8, 'JP': 0.7},
            exchange_rates=sample_rates,
        ))

        # US has no custom multiplier and is left out
        assert set(prices) == {'FR', 'JP'}
        assert prices['FR'].multiplier_source == 'custom'
        assert prices['FR'].adjusted_usd_price == pytest.approx(7.992)
        assert prices['FR'].price == Money('EUR', '7', 990_000_000)
        assert prices['JP'].raw_price == 1090.0
        assert prices['JP'].price == Money('JPY', '1090')


class TestPPPStrategy:
    def test_static_multiplier_without_live_data(self, sample_rates):
        [price] = calculate_bulk_prices(10.0, ['JP'], 'ppp', 'none', exchange_rates=sample_rates)
        assert price.multiplier == 0.61
        assert price.multiplier_source == 'static'
        assert price.raw_price == pytest.approx(915.0)

    def test_minimum_price_only_when_requested(self, sample_rates):
        loose = calculate_regional_price(0.99, 'JP', 'ppp', 'none', exchange_rates=sample_rates)
        enforced = calculate_regional_price(0.99, 'JP', 'ppp', 'none', exchange_rates=sample_rates,
                                            enforce_min_price=True)

        assert loose.price == Money('JPY', '91')
        assert enforced.price == Money('JPY', '100')


class TestCurrencyAndRates:
    def test_known_currency_overrides_catalog(self, sample_rates):
        [price] = calculate_bulk_prices(10.0, ['FR'], 'direct', 'none',
                                        known_currencies={'FR': 'USD'}, exchange_rates=sample_rates)
        assert price.currency_code == 'USD'
        assert price.exchange_rate == 1.0

    def test_missing_rate_skips_territory(self, sample_rates):
        # NOK is not in the sample rates
        prices = calculate_bulk_prices(10.0, ['NO', 'FR'], 'direct', 'none', exchange_rates=sample_rates)
        assert [p.region_code for p in prices] == ['FR']

    def test_usd_needs_no_rates(self):
        [price] = calculate_bulk_prices(10.0, ['US'], 'direct', 'charm')
        assert price.price == Money('USD', '10', 990_000_000)

    def test_cfa_franc_increment(self, sample_rates):
        [price] = calculate_bulk_prices(4.99, ['SN'], 'direct', 'charm', exchange_rates=sample_rates)
        assert price.currency_code == 'XOF'
        assert int(price.price.units) % 100 == 0


@pytest.mark.parametrize('base', [0, -1.0])
def test_non_positive_base_price_yields_nothing(base, sample_rates):
    assert calculate_bulk_prices(base, ['US', 'FR'], 'direct', 'charm', exchange_rates=sample_rates) == []


def test_serialized_shape(sample_rates):
    [price] = calculate_bulk_prices(10.0, ['FR'], 'direct', 'charm', exchange_rates=sample_rates)
    assert price.to_dict() == {
        'regionCode': 'FR',
        'currencyCode': 'EUR',
        'multiplier': 1.0,
        'multiplierSource': 'direct',
        'exchangeRate': 0.92,
        'adjustedUsdPrice': 10.0,
        'rawPrice': 9.99,
        'price': {'currencyCode': 'EUR', 'units': '9', 'nanos': 990_000_000},
    }


def test_raw_price_carries_the_rounded_amount(sample_rates):
    [price] = calculate_bulk_prices(4.2, ['FR'], 'direct', 'charm', exchange_rates=sample_rates)
    assert price.adjusted_usd_price * price.exchange_rate == pytest.approx(3.864)
    assert price.raw_price == 3.99
    assert price.price == Money('EUR', '3', 990_000_000)


def test_raw_price_after_minimum_enforcement(sample_rates):
    price = calculate_regional_price(0.99, 'JP', 'ppp', 'none', exchange_rates=sample_rates, enforce_min_price=True)
    assert price.raw_price == 100.0
