"""
Bundled static pricing indexes.

PPP multipliers synced from the World Bank API on 2026-02-01 (used when the live
dataset is unavailable or lacks a territory), The Economist's Big Mac Index
(2025), and the local currency each territory's macro data is denominated in.
"""

from typing import Dict, NamedTuple, Optional


class PricingIndexEntry(NamedTuple):
    ppp_multiplier: float     # PPP adjustment relative to US (0.1 - 2.0)
    min_price: float          # Minimum sellable price in local currency
    suggested_rounding: float  # Suggested fractional ending, e.g. 0.99, 0.90, 0


# region: (ppp_multiplier, min_price, suggested_rounding)
# US = 1.0; lower values mean lower prices for lower purchasing power regions
_PRICING_INDEX_ROWS = {
    # North America
    'US': (1.0, 0.99, 0.99),
    'CA': (0.85, 0.99, 0.99),
    'MX': (0.57, 10, 0),

    # Western Europe
    'GB': (0.91, 0.79, 0.99),
    'DE': (0.83, 0.99, 0.99),
    'FR': (0.81, 0.99, 0.99),
    'IT': (0.71, 0.99, 0.99),
    'ES': (0.67, 0.99, 0.99),
    'NL': (0.87, 0.99, 0.99),
    'BE': (0.84, 0.99, 0.99),
    'AT': (0.84, 0.99, 0.99),
    'CH': (1.23, 0.99, 0.00),
    'IE': (0.88, 0.99, 0.99),
    'PT': (0.61, 0.99, 0.99),
    'LU': (0.97, 0.99, 0.99),
    'MC': (0.81, 0.99, 0.99),
    'SM': (0.84, 0.99, 0.99),
    'VA': (0.81, 0.99, 0.99),
    'LI': (1.23, 0.99, 0.00),

    # Northern Europe
    'SE': (0.96, 9, 0),
    'NO': (0.95, 9, 0),
    'DK': (0.96, 6, 0),
    'FI': (0.90, 0.99, 0.99),
    'IS': (1.16, 0.99, 0.99),

    # Eastern Europe
    'PL': (0.55, 2, 0.99),
    'CZ': (0.63, 19, 0),
    'HU': (0.55, 299, 0),
    'RO': (0.44, 4, 0.99),
    'BG': (0.46, 0.99, 0.99),
    'SK': (0.60, 0.99, 0.99),
    'SI': (0.65, 0.99, 0.99),
    'HR': (0.53, 0.99, 0.99),
    'RS': (0.46, 99, 0),
    'BA': (0.44, 0.99, 0.99),
    'MK': (0.38, 0.99, 0.99),
    'AL': (0.48, 0.99, 0.99),
    'MD': (0.43, 0.99, 0.99),

    # Baltic States
    'EE': (0.69, 0.99, 0.99),
    'LV': (0.59, 0.99, 0.99),
    'LT': (0.58, 0.99, 0.99),

    # CIS & Eastern
    'RU': (0.38, 59, 0),
    'UA': (0.27, 19, 0),
    'BY': (0.29, 0.99, 0.99),
    'KZ': (0.32, 399, 0),
    'UZ': (0.28, 0.99, 0.99),
    'KG': (0.30, 0.99, 0.99),
    'TJ': (0.29, 0.99, 0.99),
    'TM': (0.43, 0.99, 0.99),
    'AM': (0.39, 0.99, 0.99),
    'AZ': (0.29, 0.99, 0.99),
    'GE': (0.33, 2, 0.99),

    # Middle East
    'IL': (1.13, 3, 0.90),
    'AE': (0.63, 3, 0.99),
    'SA': (0.49, 3, 0.99),
    'QA': (0.61, 3, 0.99),
    'KW': (0.63, 0.99, 0.99),
    'BH': (0.44, 0.99, 0.99),
    'OM': (0.49, 0.99, 0.99),
    'JO': (0.43, 0.50, 0.99),
    'LB': (0.27, 0.99, 0.99),
    'IQ': (0.42, 999, 0),
    'YE': (0.39, 0.99, 0.99),

    # Asia Pacific - Developed
    'JP': (0.61, 100, 0),
    'KR': (0.56, 1000, 0),
    'AU': (0.96, 0.99, 0.99),
    'NZ': (0.88, 0.99, 0.99),
    'SG': (0.63, 0.98, 0.98),
    'HK': (0.72, 8, 0),
    'TW': (0.60, 30, 0),
    'MO': (0.57, 8, 0),

    # Asia Pacific - Emerging
    'IN': (0.22, 10, 0),
    'ID': (0.28, 10000, 0),
    'MY': (0.36, 3, 0.90),
    'TH': (0.33, 29, 0),
    'VN': (0.27, 20000, 0),
    'PH': (0.33, 49, 0),
    'PK': (0.24, 150, 0),
    'BD': (0.24, 80, 0),
    'LK': (0.28, 199, 0),
    'NP': (0.23, 0.99, 0.99),
    'MM': (0.23, 1000, 0),
    'KH': (0.33, 0.99, 0.99),
    'LA': (0.20, 0.99, 0.99),
    'MN': (0.34, 2500, 0),
    'MV': (0.51, 0.99, 0.99),

    # Latin America
    'BR': (0.48, 4, 0.90),
    'AR': (0.29, 0.99, 0.99),  # Uses USD
    'CL': (0.51, 500, 0),
    'CO': (0.39, 2900, 0),
    'PE': (0.53, 3, 0.90),
    'EC': (0.43, 0.99, 0.99),
    'VE': (0.10, 0.99, 0.99),
    'BO': (0.34, 6, 0.90),
    'PY': (0.39, 5000, 0),
    'UY': (0.70, 0.99, 0.99),

    # Central America & Caribbean
    'GT': (0.43, 0.99, 0.99),
    'CR': (0.62, 500, 0),
    'PA': (0.46, 0.99, 0.99),
    'SV': (0.42, 0.99, 0.99),
    'HN': (0.43, 0.99, 0.99),
    'NI': (0.33, 0.99, 0.99),
    'BZ': (0.54, 0.99, 0.99),
    'DO': (0.37, 0.99, 0.99),
    'JM': (0.60, 0.99, 0.99),
    'TT': (0.52, 0.99, 0.99),
    'HT': (0.68, 0.99, 0.99),
    'BS': (0.96, 0.99, 0.99),
    'BB': (1.07, 0.99, 0.99),
    'AG': (0.71, 0.99, 0.99),
    'DM': (0.49, 0.99, 0.99),
    'GD': (0.58, 0.99, 0.99),
    'KN': (0.69, 0.99, 0.99),
    'LC': (0.51, 0.99, 0.99),
    'AW': (0.78, 0.99, 0.99),
    'KY': (1.12, 0.99, 0.99),
    'VG': (1.02, 0.99, 0.99),
    'TC': (0.99, 0.99, 0.99),
    'BM': (1.15, 0.99, 0.99),
    'SR': (0.28, 0.99, 0.99),

    # Africa - North
    'EG': (0.13, 19, 0.99),
    'MA': (0.44, 9, 0.00),
    'DZ': (0.34, 99, 0),
    'TN': (0.32, 0.99, 0.99),
    'LY': (0.35, 0.99, 0.99),

    # Africa - Sub-Saharan
    'ZA': (0.46, 9, 0.99),
    'NG': (0.13, 200, 0),
    'KE': (0.34, 99, 0),
    'GH': (0.39, 5, 0.99),
    'TZ': (0.29, 2000, 0),
    'UG': (0.35, 0.99, 0.99),
    'RW': (0.24, 0.99, 0.99),
    'ET': (0.18, 0.99, 0.99),
    'SN': (0.38, 500, 0),
    'CI': (0.39, 500, 0),
    'CM': (0.36, 500, 0),
    'AO': (0.29, 0.99, 0.99),
    'MZ': (0.39, 0.99, 0.99),
    'ZM': (0.37, 0.99, 0.99),
    'ZW': (0.33, 0.99, 0.99),
    'BW': (0.37, 0.99, 0.99),
    'NA': (0.43, 0.99, 0.99),
    'MU': (0.39, 0.99, 0.99),
    'SC': (0.53, 0.99, 0.99),
    'ML': (0.36, 0.99, 0.99),
    'BF': (0.37, 0.99, 0.99),
    'NE': (0.39, 0.99, 0.99),
    'TD': (0.39, 0.99, 0.99),
    'CF': (0.45, 0.99, 0.99),
    'CD': (0.45, 0.99, 0.99),
    'CG': (0.39, 0.99, 0.99),
    'GA': (0.42, 0.99, 0.99),
    'BJ': (0.37, 0.99, 0.99),
    'TG': (0.37, 0.99, 0.99),
    'GN': (0.36, 0.99, 0.99),
    'GW': (0.36, 0.99, 0.99),
    'SL': (0.10, 0.99, 0.99),
    'LR': (0.10, 0.99, 0.99),
    'GM': (0.23, 0.99, 0.99),
    'CV': (0.51, 0.99, 0.99),
    'ER': (0.33, 0.99, 0.99),
    'DJ': (0.45, 0.99, 0.99),
    'SO': (2.00, 0.99, 0.99),
    'KM': (0.46, 0.99, 0.99),

    # Oceania & Pacific
    'FJ': (0.43, 0.99, 0.99),
    'PG': (0.56, 0.99, 0.99),
    'WS': (0.63, 0.99, 0.99),
    'TO': (0.72, 0.99, 0.99),
    'VU': (0.95, 0.99, 0.99),
    'SB': (0.73, 0.99, 0.99),
    'FM': (0.96, 0.99, 0.99),

    # Turkey
    'TR': (0.26, 19, 0.99),

    # Mediterranean Islands
    'CY': (0.68, 0.99, 0.99),
    'MT': (0.68, 0.99, 0.99),
    'GI': (0.91, 0.99, 0.99),
    'GR': (0.61, 0.99, 0.99),
}

PRICING_INDEX: Dict[str, PricingIndexEntry] = {
    code: PricingIndexEntry(*row) for code, row in _PRICING_INDEX_ROWS.items()
}

# Regional-average entry for territories missing from the index
DEFAULT_PRICING_INDEX_ENTRY = PricingIndexEntry(ppp_multiplier=0.5, min_price=0.99, suggested_rounding=0.99)

# Big Mac Index multipliers relative to US (US = 1.0)
# Calculated from percentage difference from the US Big Mac price,
# e.g. India at -54.79% gives 1 - 0.5479 = 0.45
BIG_MAC_INDEX: Dict[str, float] = {
    # Higher than US
    'CH': 1.38,  # Switzerland +38.04%
    'AR': 1.20,  # Argentina +20.08%
    'UY': 1.19,  # Uruguay +19.35%
    'NO': 1.15,  # Norway +15.28%
    'CR': 1.02,  # Costa Rica +1.93%

    # US baseline
    'US': 1.00,  # United States

    # Lower than US
    'GB': 0.99,  # United Kingdom -1.11%
    'SE': 0.98,  # Sweden -2.09%
    'DK': 0.95,  # Denmark -5.23%
    'CA': 0.94,  # Canada -6.23%
    'LB': 0.93,  # Lebanon -7.42%
    'TR': 0.92,  # Turkey -8.18%
    'PL': 0.90,  # Poland -10.01%
    'CO': 0.89,  # Colombia -10.63%
    'SG': 0.89,  # Singapore -10.72%
    'SA': 0.87,  # Saudi Arabia -12.51%
    'AE': 0.85,  # UAE -15.36%
    'AU': 0.84,  # Australia -15.88%
    'NZ': 0.82,  # New Zealand -17.55%
    'IL': 0.81,  # Israel -18.57%
    'MX': 0.79,  # Mexico -20.53%
    'CZ': 0.79,  # Czechia -21.21%
    'CL': 0.79,  # Chile -21.45%
    'KW': 0.78,  # Kuwait -21.52%
    'PE': 0.78,  # Peru -21.78%
    'BH': 0.78,  # Bahrain -22.12%
    'NI': 0.77,  # Nicaragua -22.66%
    'VE': 0.77,  # Venezuela -23.08%
    'HN': 0.71,  # Honduras -28.78%
    'QA': 0.71,  # Qatar -28.85%
    'BR': 0.70,  # Brazil -30.47%
    'TH': 0.69,  # Thailand -30.8%
    'GT': 0.69,  # Guatemala -30.66%
    'OM': 0.69,  # Oman -31.36%
    'KR': 0.66,  # South Korea -33.63%
    'PK': 0.65,  # Pakistan -34.97%
    'AZ': 0.63,  # Azerbaijan -36.61%
    'HU': 0.63,  # Hungary -37.02%
    'JO': 0.61,  # Jordan -39.1%
    'CN': 0.61,  # China -39.24%
    'MD': 0.61,  # Moldova -39.15%
    'RO': 0.59,  # Romania -40.77%
    'JP': 0.54,  # Japan -46.29%
    'HK': 0.53,  # Hong Kong -46.77%
    'VN': 0.52,  # Vietnam -47.66%
    'MY': 0.52,  # Malaysia -48.13%
    'PH': 0.50,  # Philippines -50.05%
    'UA': 0.49,  # Ukraine -50.65%
    'ZA': 0.48,  # South Africa -52.04%
    'EG': 0.46,  # Egypt -53.6%
    'IN': 0.45,  # India -54.79%
    'ID': 0.44,  # Indonesia -56.22%
    'TW': 0.41,  # Taiwan -58.84%
}

DEFAULT_BIG_MAC_MULTIPLIER = 0.70

# Local currency per region (what macro data is denominated in).
# May differ from the currency a storefront bills in.
LOCAL_CURRENCIES: Dict[str, str] = {
    # Americas
    'US': 'USD', 'CA': 'CAD', 'MX': 'MXN', 'BR': 'BRL', 'AR': 'ARS', 'CL': 'CLP', 'CO': 'COP', 'PE': 'PEN',
    'VE': 'VES', 'EC': 'USD', 'UY': 'UYU', 'PY': 'PYG', 'BO': 'BOB', 'CR': 'CRC', 'PA': 'USD', 'GT': 'GTQ',
    'HN': 'HNL', 'SV': 'USD', 'NI': 'NIO', 'DO': 'DOP', 'JM': 'JMD', 'TT': 'TTD', 'BS': 'BSD', 'BB': 'BBD',
    'BZ': 'BZD', 'GY': 'GYD', 'SR': 'SRD', 'HT': 'HTG',
    # Caribbean (East Caribbean Dollar countries)
    'AG': 'XCD', 'DM': 'XCD', 'GD': 'XCD', 'KN': 'XCD', 'LC': 'XCD', 'VC': 'XCD',
    # Caribbean/Atlantic (other)
    'VG': 'USD', 'KY': 'KYD', 'TC': 'USD', 'AW': 'AWG', 'BM': 'BMD',
    # Europe
    'GB': 'GBP', 'DE': 'EUR', 'FR': 'EUR', 'IT': 'EUR', 'ES': 'EUR', 'NL': 'EUR', 'BE': 'EUR', 'AT': 'EUR',
    'CH': 'CHF', 'SE': 'SEK', 'NO': 'NOK', 'DK': 'DKK', 'FI': 'EUR', 'PL': 'PLN', 'CZ': 'CZK', 'HU': 'HUF',
    'RO': 'RON', 'BG': 'BGN', 'HR': 'EUR', 'SK': 'EUR', 'SI': 'EUR', 'LT': 'EUR', 'LV': 'EUR', 'EE': 'EUR',
    'IE': 'EUR', 'PT': 'EUR', 'GR': 'EUR', 'LU': 'EUR', 'MT': 'EUR', 'CY': 'EUR', 'IS': 'ISK',
    'RS': 'RSD', 'BA': 'BAM', 'MK': 'MKD', 'AL': 'ALL', 'ME': 'EUR', 'XK': 'EUR', 'MD': 'MDL',
    'UA': 'UAH', 'BY': 'BYN', 'RU': 'RUB',
    # European microstates
    'MC': 'EUR', 'LI': 'CHF', 'SM': 'EUR', 'VA': 'EUR', 'GI': 'GIP',
    # Middle East
    'IL': 'ILS', 'AE': 'AED', 'SA': 'SAR', 'QA': 'QAR', 'KW': 'KWD', 'BH': 'BHD', 'OM': 'OMR',
    'JO': 'JOD', 'LB': 'LBP', 'IQ': 'IQD', 'YE': 'YER', 'TR': 'TRY',
    # Asia
    'JP': 'JPY', 'KR': 'KRW', 'CN': 'CNY', 'HK': 'HKD', 'TW': 'TWD', 'SG': 'SGD', 'MY': 'MYR',
    'TH': 'THB', 'ID': 'IDR', 'PH': 'PHP', 'VN': 'VND', 'IN': 'INR', 'PK': 'PKR', 'BD': 'BDT',
    'LK': 'LKR', 'NP': 'NPR', 'MM': 'MMK', 'KH': 'KHR', 'LA': 'LAK', 'MN': 'MNT', 'KZ': 'KZT',
    'UZ': 'UZS', 'TM': 'TMT', 'KG': 'KGS', 'TJ': 'TJS', 'AZ': 'AZN', 'GE': 'GEL', 'AM': 'AMD',
    'MO': 'MOP', 'BN': 'BND', 'BT': 'BTN', 'MV': 'MVR', 'AF': 'AFN',
    # Oceania
    'AU': 'AUD', 'NZ': 'NZD', 'FJ': 'FJD', 'PG': 'PGK', 'SB': 'SBD', 'VU': 'VUV', 'WS': 'WST',
    'TO': 'TOP', 'PW': 'USD', 'FM': 'USD',
    # Africa
    'ZA': 'ZAR', 'EG': 'EGP', 'NG': 'NGN', 'KE': 'KES', 'GH': 'GHS', 'TZ': 'TZS', 'UG': 'UGX',
    'ET': 'ETB', 'MA': 'MAD', 'DZ': 'DZD', 'TN': 'TND', 'LY': 'LYD', 'SD': 'SDG', 'AO': 'AOA',
    'MZ': 'MZN', 'ZM': 'ZMW', 'ZW': 'ZWL', 'BW': 'BWP', 'NA': 'NAD', 'SZ': 'SZL', 'LS': 'LSL',
    'MW': 'MWK', 'RW': 'RWF', 'BI': 'BIF', 'MG': 'MGA', 'MU': 'MUR', 'SC': 'SCR', 'CM': 'XAF',
    'CI': 'XOF', 'SN': 'XOF', 'GN': 'GNF', 'ML': 'XOF', 'BF': 'XOF', 'NE': 'XOF', 'TG': 'XOF',
    'BJ': 'XOF', 'GA': 'XAF', 'CG': 'XAF', 'CD': 'CDF', 'TD': 'XAF', 'CF': 'XAF', 'GQ': 'XAF',
    'GM': 'GMD', 'GW': 'XOF', 'LR': 'LRD', 'SL': 'SLL', 'CV': 'CVE', 'ST': 'STN', 'MR': 'MRU',
    'DJ': 'DJF', 'ER': 'ERN', 'SO': 'SOS', 'SS': 'SSP', 'KM': 'KMF',
}


def get_pricing_index_entry(region_code: str) -> Optional[PricingIndexEntry]:
    return PRICING_INDEX.get(region_code.upper())


def get_static_multiplier(region_code: str) -> float:
    """Static PPP multiplier, falling back to the regional-average default"""
    entry = PRICING_INDEX.get(region_code.upper(), DEFAULT_PRICING_INDEX_ENTRY)
    return entry.ppp_multiplier


def get_big_mac_multiplier(region_code: str) -> Optional[float]:
    return BIG_MAC_INDEX.get(region_code.upper())


def get_local_currency(region_code: str) -> str:
    return LOCAL_CURRENCIES.get(region_code.upper(), 'USD')
