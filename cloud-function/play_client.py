"""
Google Play Android Publisher client for reading and updating regional prices.
"""

import logging
import os
import threading
from typing import Any, Dict, List, Optional

from google.oauth2 import service_account
from googleapiclient.discovery import build

import config
import territories
from bulk_apply import PriceUpdater
from models import BulkApplyItem, Money

logger = logging.getLogger(__name__)


def money_from_play(price: Dict[str, Any], default_currency: str = 'USD') -> Money:
    """Translate an Android Publisher Money resource"""
    return Money(
        currency_code=price.get('currencyCode') or default_currency,
        units=str(price.get('units') or '0'),
        nanos=int(price.get('nanos') or 0),
    )


def money_to_play(money: Money) -> Dict[str, Any]:
    return money.to_dict()


class GooglePlayClient:
    """Client for the Google Play Developer API (monetization resources)"""

    def __init__(self, credentials_path: Optional[str] = None, package_name: Optional[str] = None, service=None):
        """
        Initialize the Google Play client.

        Args:
            credentials_path: Path to service account JSON credentials file
            package_name: App package name (defaults to GOOGLE_PLAY_PACKAGE_NAME)
            service: Prebuilt API resource (tests pass a mock)
        """
        self.package_name = package_name or os.environ.get('GOOGLE_PLAY_PACKAGE_NAME') or config.GOOGLE_PLAY_PACKAGE_NAME
        if not self.package_name:
            raise ValueError("GOOGLE_PLAY_PACKAGE_NAME must be set in environment or config")

        if service is None:
            service = build('androidpublisher', 'v3', credentials=self._load_credentials(credentials_path),
                            cache_discovery=False)
        self.service = service
        self.monetization = self.service.monetization()

    @staticmethod
    def _load_credentials(credentials_path: Optional[str]):
        scopes = config.GOOGLE_PLAY_SCOPES
        creds_path = credentials_path or os.environ.get('GOOGLE_APPLICATION_CREDENTIALS')
        if creds_path and os.path.exists(creds_path):
            return service_account.Credentials.from_service_account_file(creds_path, scopes=scopes)

        # Application Default Credentials (Cloud Functions runtime)
        from google.auth import default
        from google.auth.exceptions import DefaultCredentialsError
        try:
            creds, _ = default(scopes=scopes)
        except DefaultCredentialsError as e:
            raise ValueError(
                f"Google credentials not found. Set GOOGLE_APPLICATION_CREDENTIALS or use "
                f"Application Default Credentials. Error: {e}"
            ) from e
        return creds

    def get_one_time_product(self, product_id: str) -> Dict[str, Any]:
        return self.monetization.onetimeproducts().get(
            packageName=self.package_name,
            productId=product_id,
        ).execute()

    def patch_one_time_product(self, product_id: str, product: Dict[str, Any]) -> Dict[str, Any]:
        return self.monetization.onetimeproducts().patch(
            packageName=self.package_name,
            productId=product_id,
            regionsVersion_version=self._regions_version(product),
            updateMask='purchaseOptions',
            body=product,
        ).execute()

    def get_subscription(self, product_id: str) -> Dict[str, Any]:
        return self.monetization.subscriptions().get(
            packageName=self.package_name,
            productId=product_id,
        ).execute()

    def patch_subscription(self, product_id: str, subscription: Dict[str, Any]) -> Dict[str, Any]:
        return self.monetization.subscriptions().patch(
            packageName=self.package_name,
            productId=product_id,
            regionsVersion_version=self._regions_version(subscription),
            updateMask='basePlans',
            body=subscription,
        ).execute()

    @staticmethod
    def _regions_version(resource: Dict[str, Any]) -> str:
        # The API rejects updates without the regions version the resource was priced against
        version = (resource.get('regionsVersion') or {}).get('version')
        return version or config.GOOGLE_PLAY_DEFAULT_REGIONS_VERSION


class GooglePlayPriceUpdater(PriceUpdater):
    """
    Sets one region's price on a one-time product, or on a subscription base
    plan when the item carries a base plan id. Other regions and their
    availability are written back unchanged.
    """

    def __init__(self, client: GooglePlayClient):
        self.client = client
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, item_id: str) -> threading.Lock:
        # Read-modify-write on one product must not interleave across workers
        with self._locks_guard:
            return self._locks.setdefault(item_id, threading.Lock())

    def supports_region(self, item: BulkApplyItem, region_code: str) -> bool:
        return territories.is_play_region(region_code)

    def update_region_price(
        self,
        item_id: str,
        region_code: str,
        new_price: Money,
        base_plan_id: Optional[str] = None,
    ) -> Optional[Money]:
        region_code = region_code.upper()
        with self._lock_for(item_id):
            if base_plan_id:
                return self._update_base_plan(item_id, base_plan_id, region_code, new_price)
            return self._update_one_time_product(item_id, region_code, new_price)

    def _update_one_time_product(self, product_id: str, region_code: str, new_price: Money) -> Optional[Money]:
        product = self.client.get_one_time_product(product_id)
        options = product.get('purchaseOptions') or []
        if not options:
            raise ValueError(f"Product {product_id} has no purchase options configured")

        configs: List[Dict[str, Any]] = options[0].setdefault('regionalPricingAndAvailabilityConfigs', [])
        old_price = self._replace_price(configs, region_code, new_price, {'availability': 'AVAILABLE'})

        self.client.patch_one_time_product(product_id, product)
        logger.info(f"Updated {product_id} in {region_code} to {new_price.units} {new_price.currency_code}")
        return old_price

    def _update_base_plan(
        self, product_id: str, base_plan_id: str, region_code: str, new_price: Money
    ) -> Optional[Money]:
        subscription = self.client.get_subscription(product_id)
        base_plan = next(
            (bp for bp in subscription.get('basePlans') or [] if bp.get('basePlanId') == base_plan_id),
            None,
        )
        if base_plan is None:
            raise ValueError(f"Base plan {base_plan_id} not found in subscription {product_id}")

        configs: List[Dict[str, Any]] = base_plan.setdefault('regionalConfigs', [])
        old_price = self._replace_price(configs, region_code, new_price, {'newSubscriberAvailability': True})

        self.client.patch_subscription(product_id, subscription)
        logger.info(
            f"Updated {product_id}/{base_plan_id} in {region_code} to {new_price.units} {new_price.currency_code}"
        )
        return old_price

    @staticmethod
    def _replace_price(
        configs: List[Dict[str, Any]],
        region_code: str,
        new_price: Money,
        new_region_defaults: Dict[str, Any],
    ) -> Optional[Money]:
        """Swap the price in a region's config in place, adding the region if it has none"""
        for cfg in configs:
            if not cfg.get('regionCode'):
                continue
            territory = territories.territory_from_play_region(cfg)
            if territory.code == region_code:
                old_price = money_from_play(cfg['price'], territory.currency) if cfg.get('price') else None
                cfg['price'] = money_to_play(new_price)
                return old_price

        configs.append({'regionCode': region_code, **new_region_defaults, 'price': money_to_play(new_price)})
        return None
