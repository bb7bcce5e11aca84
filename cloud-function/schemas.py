"""
Request bodies accepted by the HTTP handlers.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

import config
from models import BulkApplyItem, Money
from pricing_strategy import PricingStrategy
from rounding import RoundingMode


def _upper_keys(mapping: Dict[str, Any]) -> Dict[str, Any]:
    """Upper-case region code keys, rejecting codes that collide once normalized"""
    upper = {code.upper(): value for code, value in mapping.items()}
    if len(upper) != len(mapping):
        raise ValueError("region codes must be unique regardless of case")
    return upper


class RequestModel(BaseModel):
    """Accepts the camelCase wire names as well as field names"""
    model_config = ConfigDict(populate_by_name=True, extra='ignore')


class MoneySchema(RequestModel):
    currency_code: str = Field(alias='currencyCode', min_length=3, max_length=3)
    units: str = Field(pattern=r'^\d+$')
    nanos: int = Field(default=0, ge=0, lt=1_000_000_000)

    @field_validator('units', mode='before')
    @classmethod
    def units_as_string(cls, v):
        # JSON clients often send units as a number
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    def to_money(self) -> Money:
        return Money(currency_code=self.currency_code.upper(), units=self.units, nanos=self.nanos)


class CalculateRequest(RequestModel):
    base_price_usd: float = Field(alias='basePriceUsd')
    territories: Optional[List[str]] = None
    platform: Literal['google', 'apple'] = 'google'
    strategy: PricingStrategy = PricingStrategy.PPP
    rounding_mode: RoundingMode = Field(default=RoundingMode.CHARM, alias='roundingMode')
    custom_multipliers: Optional[Dict[str, float]] = Field(default=None, alias='customMultipliers')
    known_currencies: Optional[Dict[str, str]] = Field(default=None, alias='knownCurrencies')
    enforce_min_price: bool = Field(default=False, alias='enforceMinPrice')

    @field_validator('territories')
    @classmethod
    def territory_codes_upper(cls, v):
        return [code.upper() for code in v] if v is not None else v

    @field_validator('custom_multipliers', 'known_currencies')
    @classmethod
    def region_keys_upper(cls, v):
        return _upper_keys(v) if v is not None else v

    @field_validator('custom_multipliers')
    @classmethod
    def custom_multipliers_positive(cls, v):
        if v is not None:
            bad = sorted(code for code, multiplier in v.items() if multiplier <= 0)
            if bad:
                raise ValueError(f"custom multipliers must be positive: {', '.join(bad)}")
        return v


class BulkItemSchema(RequestModel):
    id: str = Field(min_length=1)
    base_plan_id: Optional[str] = Field(default=None, alias='basePlanId')
    territory_prices: Dict[str, MoneySchema] = Field(alias='territoryPrices', min_length=1)

    @field_validator('territory_prices')
    @classmethod
    def territory_limit(cls, v):
        if len(v) > config.MAX_BULK_REGIONS:
            raise ValueError(f"Maximum {config.MAX_BULK_REGIONS} target regions per item")
        return _upper_keys(v)

    def to_item(self) -> BulkApplyItem:
        return BulkApplyItem(
            id=self.id,
            territory_prices={code: money.to_money() for code, money in self.territory_prices.items()},
            base_plan_id=self.base_plan_id,
        )


class BulkApplyRequest(RequestModel):
    items: List[BulkItemSchema] = Field(min_length=1, max_length=config.MAX_BULK_ITEMS)
    granularity: Literal['territory', 'item'] = 'territory'
    stop_on_failure: bool = Field(default=False, alias='stopOnFailure')
    concurrency: Optional[int] = Field(default=None, ge=1, le=16)

    def to_items(self) -> List[BulkApplyItem]:
        return [item.to_item() for item in self.items]
