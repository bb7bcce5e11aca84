"""
Configuration constants for the regional pricing system.
Deployment-specific values can be overridden with environment variables of the same name.
"""

import os

# Open Exchange Rates API configuration
OPEN_EXCHANGE_RATES_BASE_URL = os.environ.get(
    'OPEN_EXCHANGE_RATES_BASE_URL', "https://openexchangerates.org/api"
)
OPEN_EXCHANGE_RATES_APP_ID = None  # Set via environment variable or Secret Manager

# Free tier updates hourly, so a 6 hour cache is plenty
EXCHANGE_RATES_CACHE_TTL_SECONDS = int(os.environ.get('EXCHANGE_RATES_CACHE_TTL_SECONDS', 6 * 60 * 60))
EXCHANGE_RATES_CACHE_KEY = "exchange-rates"

# Rates older than this (provider timestamp) are logged as suspicious
EXCHANGE_RATES_MAX_PROVIDER_AGE_SECONDS = 24 * 60 * 60

# World Bank PPP configuration
# PA.NUS.PPPC.RF = Price level ratio of PPP conversion factor (GDP) to market exchange rate
# mrnev=1 = most recent non-empty value per country
WORLD_BANK_PPP_URL = os.environ.get(
    'WORLD_BANK_PPP_URL',
    "https://api.worldbank.org/v2/country/all/indicator/PA.NUS.PPPC.RF?format=json&per_page=300&mrnev=1"
)
PPP_CACHE_TTL_SECONDS = int(os.environ.get('PPP_CACHE_TTL_SECONDS', 24 * 60 * 60))
PPP_CACHE_KEY = "ppp-data"

# PPP multipliers are clamped to these bounds
PPP_MULTIPLIER_MIN = 0.1
PPP_MULTIPLIER_MAX = 2.0

# On-disk cache directory (best effort - unwritable locations just disable persistence)
CACHE_DIR = os.environ.get('CACHE_DIR', os.getcwd())

# HTTP configuration
REQUEST_TIMEOUT_SECONDS = 10
FETCH_MAX_RETRIES = 3
FETCH_RETRY_DELAY_SECONDS = 2

# Bulk apply configuration
# Storefronts enforce per-resource update ordering, so territories go one at a time by default
BULK_APPLY_CONCURRENCY = int(os.environ.get('BULK_APPLY_CONCURRENCY', 1))
BULK_APPLY_MAX_RETRIES = 3
BULK_APPLY_RETRY_DELAY_SECONDS = 1.0
RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)
MAX_BULK_ITEMS = 100
MAX_BULK_REGIONS = 200

# Google Play configuration
GOOGLE_PLAY_PACKAGE_NAME = None  # Set via environment variable
GOOGLE_PLAY_SCOPES = ['https://www.googleapis.com/auth/androidpublisher']
GOOGLE_PLAY_DEFAULT_REGIONS_VERSION = "2022/02"

# Header carrying a per-request exchange rates key
EXCHANGE_RATES_KEY_HEADER = "X-Exchange-Rates-Key"

# Logging configuration
LOG_LEVEL = os.environ.get('LOG_LEVEL', "INFO")
