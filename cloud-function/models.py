"""
Canonical data types used at the core boundary.

Storefront-specific shapes are translated into these types by the adapters in
territories.py and play_client.py, so nothing in the core varies by platform.
"""

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

import rounding

NANOS_PER_UNIT = 1_000_000_000


@dataclass(frozen=True)
class Money:
    """Exact decimal amount: units carries the whole major units, nanos the fraction"""
    currency_code: str
    units: str
    nanos: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'currencyCode': self.currency_code, 'units': self.units}
        if self.nanos:
            data['nanos'] = self.nanos
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Money':
        currency = data.get('currencyCode')
        if not currency:
            raise ValueError("Money requires a currencyCode")
        nanos = int(data.get('nanos') or 0)
        if not 0 <= nanos < NANOS_PER_UNIT:
            raise ValueError(f"nanos out of range: {nanos}")
        return cls(currency_code=currency, units=str(data.get('units') or '0'), nanos=nanos)


def money_from_amount(amount: float, currency_code: str) -> Money:
    """
    Build Money from a float, rounded to the currency's minor-unit precision.

    Args:
        amount: Non-negative amount in major units
        currency_code: ISO-4217 currency code

    Returns:
        Money with units as a string and nanos holding the fractional part
    """
    digits = rounding.currency_minor_digits(currency_code)
    quantized = Decimal(str(amount)).quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)
    units = int(quantized)
    nanos = int((quantized - units) * NANOS_PER_UNIT)
    return Money(currency_code=currency_code, units=str(units), nanos=nanos)


def money_to_amount(money: Money) -> float:
    """Get Money as a float"""
    return float(Decimal(money.units) + Decimal(money.nanos) / NANOS_PER_UNIT)


def format_money_plain(money: Money) -> str:
    """Format Money as 'EUR 4.99' (no locale-specific symbols)"""
    digits = max(rounding.currency_minor_digits(money.currency_code), 2)
    return f"{money.currency_code} {money_to_amount(money):.{digits}f}"


@dataclass(frozen=True)
class Territory:
    code: str
    name: str
    currency: str


@dataclass
class ExchangeRatesData:
    """USD-based exchange rates. USD itself is always 1.0 even if not stored."""
    base: str
    rates: Dict[str, float]
    timestamp: int
    fetched_at: str

    def rate_for(self, currency: str) -> Optional[float]:
        currency = currency.upper()
        if currency == self.base:
            return 1.0
        return self.rates.get(currency)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'base': self.base,
            'rates': dict(self.rates),
            'timestamp': self.timestamp,
            'fetchedAt': self.fetched_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ExchangeRatesData':
        return cls(
            base=data.get('base', 'USD'),
            rates={k: float(v) for k, v in data['rates'].items()},
            timestamp=int(data.get('timestamp') or 0),
            fetched_at=data['fetchedAt'],
        )


@dataclass
class PPPData:
    """Per-territory price multipliers relative to the US (US = 1.0)"""
    multipliers: Dict[str, float]
    base_year: Optional[int]
    fallback: bool
    fetched_at: str
    sources: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'multipliers': dict(self.multipliers),
            'baseYear': self.base_year,
            'fallback': self.fallback,
            'fetchedAt': self.fetched_at,
            'sources': dict(self.sources),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PPPData':
        return cls(
            multipliers={k: float(v) for k, v in data['multipliers'].items()},
            base_year=data.get('baseYear'),
            fallback=bool(data.get('fallback', False)),
            fetched_at=data['fetchedAt'],
            sources=dict(data.get('sources') or {}),
        )


@dataclass(frozen=True)
class CalculatedPrice:
    region_code: str
    currency_code: str
    multiplier: float
    multiplier_source: str
    exchange_rate: float
    adjusted_usd_price: float
    raw_price: float
    price: Money

    def to_dict(self) -> Dict[str, Any]:
        return {
            'regionCode': self.region_code,
            'currencyCode': self.currency_code,
            'multiplier': self.multiplier,
            'multiplierSource': self.multiplier_source,
            'exchangeRate': self.exchange_rate,
            'adjustedUsdPrice': self.adjusted_usd_price,
            'rawPrice': self.raw_price,
            'price': self.price.to_dict(),
        }


@dataclass(frozen=True)
class PriceChange:
    region_code: str
    old_price: Optional[str]
    new_price: str

    def to_dict(self) -> Dict[str, Any]:
        return {'regionCode': self.region_code, 'oldPrice': self.old_price, 'newPrice': self.new_price}


@dataclass
class BulkApplyItem:
    id: str
    territory_prices: Dict[str, Money]
    base_plan_id: Optional[str] = None


@dataclass
class BulkApplyResult:
    item_id: str
    success: bool
    base_plan_id: Optional[str] = None
    error: Optional[str] = None
    changes: List[PriceChange] = field(default_factory=list)
    failures: List[Dict[str, str]] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'itemId': self.item_id, 'success': self.success}
        if self.base_plan_id:
            data['basePlanId'] = self.base_plan_id
        if self.error:
            data['error'] = self.error
        data['changes'] = [change.to_dict() for change in self.changes]
        if self.failures:
            data['failures'] = list(self.failures)
        if self.skipped:
            data['skipped'] = list(self.skipped)
        return data


@dataclass
class BulkApplyAggregate:
    total: int
    successful: int
    failed: int
    granularity: str
    results: List[BulkApplyResult]
    skipped: List[str] = field(default_factory=list)
    cancelled: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total': self.total,
            'successful': self.successful,
            'failed': self.failed,
            'skipped': list(self.skipped),
            'granularity': self.granularity,
            'cancelled': self.cancelled,
            'results': [result.to_dict() for result in self.results],
        }
