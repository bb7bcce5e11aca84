"""
Storefront territory catalogs and the adapters that normalize them.

Google Play identifies regions by ISO 3166-1 alpha-2 codes; Apple uses alpha-3
territory codes. Both are normalized into models.Territory so the pricing core
treats them uniformly.
"""

from typing import Any, Dict, List, Optional

from models import Territory

# Google Play regions: (code, name, billing currency)
GOOGLE_PLAY_REGIONS = [
    ('AE', 'United Arab Emirates', 'AED'),
    ('AG', 'Antigua and Barbuda', 'USD'),
    ('AL', 'Albania', 'USD'),
    ('AM', 'Armenia', 'USD'),
    ('AO', 'Angola', 'USD'),
    ('AR', 'Argentina', 'USD'),
    ('AT', 'Austria', 'EUR'),
    ('AU', 'Australia', 'AUD'),
    ('AW', 'Aruba', 'USD'),
    ('AZ', 'Azerbaijan', 'USD'),
    ('BA', 'Bosnia and Herzegovina', 'USD'),
    ('BD', 'Bangladesh', 'BDT'),
    ('BE', 'Belgium', 'EUR'),
    ('BF', 'Burkina Faso', 'EUR'),
    ('BG', 'Bulgaria', 'EUR'),
    ('BH', 'Bahrain', 'USD'),
    ('BJ', 'Benin', 'EUR'),
    ('BM', 'Bermuda', 'USD'),
    ('BO', 'Bolivia', 'BOB'),
    ('BR', 'Brazil', 'BRL'),
    ('BS', 'Bahamas', 'USD'),
    ('BW', 'Botswana', 'USD'),
    ('BY', 'Belarus', 'USD'),
    ('BZ', 'Belize', 'USD'),
    ('CA', 'Canada', 'CAD'),
    ('CD', 'Congo (DRC)', 'USD'),
    ('CF', 'Central African Republic', 'EUR'),
    ('CG', 'Congo (Republic)', 'USD'),
    ('CH', 'Switzerland', 'CHF'),
    ('CI', "Côte d'Ivoire", 'XOF'),
    ('CL', 'Chile', 'CLP'),
    ('CM', 'Cameroon', 'XAF'),
    ('CO', 'Colombia', 'COP'),
    ('CR', 'Costa Rica', 'CRC'),
    ('CV', 'Cabo Verde', 'USD'),
    ('CY', 'Cyprus', 'EUR'),
    ('CZ', 'Czech Republic', 'CZK'),
    ('DE', 'Germany', 'EUR'),
    ('DJ', 'Djibouti', 'USD'),
    ('DK', 'Denmark', 'DKK'),
    ('DM', 'Dominica', 'USD'),
    ('DO', 'Dominican Republic', 'USD'),
    ('DZ', 'Algeria', 'DZD'),
    ('EC', 'Ecuador', 'USD'),
    ('EE', 'Estonia', 'EUR'),
    ('EG', 'Egypt', 'EGP'),
    ('ER', 'Eritrea', 'USD'),
    ('ES', 'Spain', 'EUR'),
    ('FI', 'Finland', 'EUR'),
    ('FJ', 'Fiji', 'USD'),
    ('FM', 'Micronesia', 'USD'),
    ('FR', 'France', 'EUR'),
    ('GA', 'Gabon', 'EUR'),
    ('GB', 'United Kingdom', 'GBP'),
    ('GD', 'Grenada', 'USD'),
    ('GE', 'Georgia', 'GEL'),
    ('GH', 'Ghana', 'GHS'),
    ('GI', 'Gibraltar', 'GBP'),
    ('GM', 'Gambia', 'USD'),
    ('GN', 'Guinea', 'USD'),
    ('GR', 'Greece', 'EUR'),
    ('GT', 'Guatemala', 'USD'),
    ('GW', 'Guinea-Bissau', 'EUR'),
    ('HK', 'Hong Kong', 'HKD'),
    ('HN', 'Honduras', 'USD'),
    ('HR', 'Croatia', 'EUR'),
    ('HT', 'Haiti', 'USD'),
    ('HU', 'Hungary', 'HUF'),
    ('ID', 'Indonesia', 'IDR'),
    ('IE', 'Ireland', 'EUR'),
    ('IL', 'Israel', 'ILS'),
    ('IN', 'India', 'INR'),
    ('IQ', 'Iraq', 'IQD'),
    ('IS', 'Iceland', 'EUR'),
    ('IT', 'Italy', 'EUR'),
    ('JM', 'Jamaica', 'USD'),
    ('JO', 'Jordan', 'JOD'),
    ('JP', 'Japan', 'JPY'),
    ('KE', 'Kenya', 'KES'),
    ('KG', 'Kyrgyzstan', 'USD'),
    ('KH', 'Cambodia', 'USD'),
    ('KM', 'Comoros', 'USD'),
    ('KN', 'Saint Kitts and Nevis', 'USD'),
    ('KR', 'South Korea', 'KRW'),
    ('KW', 'Kuwait', 'USD'),
    ('KY', 'Cayman Islands', 'USD'),
    ('KZ', 'Kazakhstan', 'KZT'),
    ('LA', 'Laos', 'USD'),
    ('LB', 'Lebanon', 'USD'),
    ('LC', 'Saint Lucia', 'USD'),
    ('LI', 'Liechtenstein', 'CHF'),
    ('LK', 'Sri Lanka', 'LKR'),
    ('LR', 'Liberia', 'USD'),
    ('LT', 'Lithuania', 'EUR'),
    ('LU', 'Luxembourg', 'EUR'),
    ('LV', 'Latvia', 'EUR'),
    ('LY', 'Libya', 'USD'),
    ('MA', 'Morocco', 'MAD'),
    ('MC', 'Monaco', 'EUR'),
    ('MD', 'Moldova', 'USD'),
    ('MK', 'North Macedonia', 'USD'),
    ('ML', 'Mali', 'EUR'),
    ('MM', 'Myanmar', 'MMK'),
    ('MN', 'Mongolia', 'MNT'),
    ('MO', 'Macau', 'MOP'),
    ('MT', 'Malta', 'EUR'),
    ('MU', 'Mauritius', 'USD'),
    ('MV', 'Maldives', 'USD'),
    ('MX', 'Mexico', 'MXN'),
    ('MY', 'Malaysia', 'MYR'),
    ('MZ', 'Mozambique', 'USD'),
    ('NA', 'Namibia', 'USD'),
    ('NE', 'Niger', 'EUR'),
    ('NG', 'Nigeria', 'NGN'),
    ('NI', 'Nicaragua', 'USD'),
    ('NL', 'Netherlands', 'EUR'),
    ('NO', 'Norway', 'NOK'),
    ('NP', 'Nepal', 'USD'),
    ('NZ', 'New Zealand', 'NZD'),
    ('OM', 'Oman', 'USD'),
    ('PA', 'Panama', 'USD'),
    ('PE', 'Peru', 'PEN'),
    ('PG', 'Papua New Guinea', 'USD'),
    ('PH', 'Philippines', 'PHP'),
    ('PK', 'Pakistan', 'PKR'),
    ('PL', 'Poland', 'PLN'),
    ('PT', 'Portugal', 'EUR'),
    ('PY', 'Paraguay', 'PYG'),
    ('QA', 'Qatar', 'QAR'),
    ('RO', 'Romania', 'RON'),
    ('RS', 'Serbia', 'RSD'),
    ('RU', 'Russia', 'RUB'),
    ('RW', 'Rwanda', 'USD'),
    ('SA', 'Saudi Arabia', 'SAR'),
    ('SB', 'Solomon Islands', 'USD'),
    ('SC', 'Seychelles', 'USD'),
    ('SE', 'Sweden', 'SEK'),
    ('SG', 'Singapore', 'SGD'),
    ('SI', 'Slovenia', 'EUR'),
    ('SK', 'Slovakia', 'EUR'),
    ('SL', 'Sierra Leone', 'USD'),
    ('SM', 'San Marino', 'EUR'),
    ('SN', 'Senegal', 'XOF'),
    ('SO', 'Somalia', 'USD'),
    ('SR', 'Suriname', 'USD'),
    ('SV', 'El Salvador', 'USD'),
    ('TC', 'Turks and Caicos Islands', 'USD'),
    ('TD', 'Chad', 'USD'),
    ('TG', 'Togo', 'EUR'),
    ('TH', 'Thailand', 'THB'),
    ('TJ', 'Tajikistan', 'USD'),
    ('TM', 'Turkmenistan', 'USD'),
    ('TN', 'Tunisia', 'USD'),
    ('TO', 'Tonga', 'USD'),
    ('TR', 'Turkey', 'TRY'),
    ('TT', 'Trinidad and Tobago', 'USD'),
    ('TW', 'Taiwan', 'TWD'),
    ('TZ', 'Tanzania', 'TZS'),
    ('UA', 'Ukraine', 'UAH'),
    ('UG', 'Uganda', 'USD'),
    ('US', 'United States', 'USD'),
    ('UY', 'Uruguay', 'USD'),
    ('UZ', 'Uzbekistan', 'USD'),
    ('VA', 'Vatican City', 'EUR'),
    ('VE', 'Venezuela', 'USD'),
    ('VG', 'British Virgin Islands', 'USD'),
    ('VN', 'Vietnam', 'VND'),
    ('VU', 'Vanuatu', 'USD'),
    ('WS', 'Samoa', 'USD'),
    ('YE', 'Yemen', 'USD'),
    ('ZA', 'South Africa', 'ZAR'),
    ('ZM', 'Zambia', 'USD'),
    ('ZW', 'Zimbabwe', 'USD'),
]

# Apple App Store territories: (alpha3, alpha2, name, billing currency)
APPLE_TERRITORIES = [
    ('AFG', 'AF', 'Afghanistan', 'USD'),
    ('ALB', 'AL', 'Albania', 'ALL'),
    ('DZA', 'DZ', 'Algeria', 'DZD'),
    ('AGO', 'AO', 'Angola', 'AOA'),
    ('AIA', 'AI', 'Anguilla', 'USD'),
    ('ATG', 'AG', 'Antigua and Barbuda', 'USD'),
    ('ARG', 'AR', 'Argentina', 'ARS'),
    ('ARM', 'AM', 'Armenia', 'AMD'),
    ('AUS', 'AU', 'Australia', 'AUD'),
    ('AUT', 'AT', 'Austria', 'EUR'),
    ('AZE', 'AZ', 'Azerbaijan', 'AZN'),
    ('BHS', 'BS', 'Bahamas', 'USD'),
    ('BHR', 'BH', 'Bahrain', 'BHD'),
    ('BGD', 'BD', 'Bangladesh', 'BDT'),
    ('BRB', 'BB', 'Barbados', 'BBD'),
    ('BLR', 'BY', 'Belarus', 'BYN'),
    ('BEL', 'BE', 'Belgium', 'EUR'),
    ('BLZ', 'BZ', 'Belize', 'BZD'),
    ('BEN', 'BJ', 'Benin', 'XOF'),
    ('BMU', 'BM', 'Bermuda', 'USD'),
    ('BTN', 'BT', 'Bhutan', 'BTN'),
    ('BOL', 'BO', 'Bolivia', 'BOB'),
    ('BIH', 'BA', 'Bosnia and Herzegovina', 'BAM'),
    ('BWA', 'BW', 'Botswana', 'BWP'),
    ('BRA', 'BR', 'Brazil', 'BRL'),
    ('VGB', 'VG', 'British Virgin Islands', 'USD'),
    ('BRN', 'BN', 'Brunei', 'BND'),
    ('BGR', 'BG', 'Bulgaria', 'BGN'),
    ('BFA', 'BF', 'Burkina Faso', 'XOF'),
    ('KHM', 'KH', 'Cambodia', 'KHR'),
    ('CMR', 'CM', 'Cameroon', 'XAF'),
    ('CAN', 'CA', 'Canada', 'CAD'),
    ('CPV', 'CV', 'Cape Verde', 'CVE'),
    ('CYM', 'KY', 'Cayman Islands', 'KYD'),
    ('TCD', 'TD', 'Chad', 'XAF'),
    ('CHL', 'CL', 'Chile', 'CLP'),
    ('CHN', 'CN', 'China mainland', 'CNY'),
    ('COL', 'CO', 'Colombia', 'COP'),
    ('COG', 'CG', 'Congo (Republic)', 'XAF'),
    ('COD', 'CD', 'Congo (DRC)', 'CDF'),
    ('CRI', 'CR', 'Costa Rica', 'CRC'),
    ('CIV', 'CI', "Côte d'Ivoire", 'XOF'),
    ('HRV', 'HR', 'Croatia', 'EUR'),
    ('CYP', 'CY', 'Cyprus', 'EUR'),
    ('CZE', 'CZ', 'Czech Republic', 'CZK'),
    ('DNK', 'DK', 'Denmark', 'DKK'),
    ('DMA', 'DM', 'Dominica', 'XCD'),
    ('DOM', 'DO', 'Dominican Republic', 'DOP'),
    ('ECU', 'EC', 'Ecuador', 'USD'),
    ('EGY', 'EG', 'Egypt', 'EGP'),
    ('SLV', 'SV', 'El Salvador', 'USD'),
    ('EST', 'EE', 'Estonia', 'EUR'),
    ('SWZ', 'SZ', 'Eswatini', 'SZL'),
    ('FJI', 'FJ', 'Fiji', 'FJD'),
    ('FIN', 'FI', 'Finland', 'EUR'),
    ('FRA', 'FR', 'France', 'EUR'),
    ('GAB', 'GA', 'Gabon', 'XAF'),
    ('GMB', 'GM', 'Gambia', 'GMD'),
    ('GEO', 'GE', 'Georgia', 'GEL'),
    ('DEU', 'DE', 'Germany', 'EUR'),
    ('GHA', 'GH', 'Ghana', 'GHS'),
    ('GRC', 'GR', 'Greece', 'EUR'),
    ('GRD', 'GD', 'Grenada', 'XCD'),
    ('GTM', 'GT', 'Guatemala', 'GTQ'),
    ('GNB', 'GW', 'Guinea-Bissau', 'XOF'),
    ('GUY', 'GY', 'Guyana', 'GYD'),
    ('HND', 'HN', 'Honduras', 'HNL'),
    ('HKG', 'HK', 'Hong Kong', 'HKD'),
    ('HUN', 'HU', 'Hungary', 'HUF'),
    ('ISL', 'IS', 'Iceland', 'ISK'),
    ('IND', 'IN', 'India', 'INR'),
    ('IDN', 'ID', 'Indonesia', 'IDR'),
    ('IRQ', 'IQ', 'Iraq', 'IQD'),
    ('IRL', 'IE', 'Ireland', 'EUR'),
    ('ISR', 'IL', 'Israel', 'ILS'),
    ('ITA', 'IT', 'Italy', 'EUR'),
    ('JAM', 'JM', 'Jamaica', 'JMD'),
    ('JPN', 'JP', 'Japan', 'JPY'),
    ('JOR', 'JO', 'Jordan', 'JOD'),
    ('KAZ', 'KZ', 'Kazakhstan', 'KZT'),
    ('KEN', 'KE', 'Kenya', 'KES'),
    ('KOR', 'KR', 'South Korea', 'KRW'),
    ('XKS', 'XK', 'Kosovo', 'EUR'),
    ('KWT', 'KW', 'Kuwait', 'KWD'),
    ('KGZ', 'KG', 'Kyrgyzstan', 'KGS'),
    ('LAO', 'LA', 'Laos', 'LAK'),
    ('LVA', 'LV', 'Latvia', 'EUR'),
    ('LBN', 'LB', 'Lebanon', 'LBP'),
    ('LBR', 'LR', 'Liberia', 'LRD'),
    ('LBY', 'LY', 'Libya', 'LYD'),
    ('LTU', 'LT', 'Lithuania', 'EUR'),
    ('LUX', 'LU', 'Luxembourg', 'EUR'),
    ('MAC', 'MO', 'Macao', 'MOP'),
    ('MKD', 'MK', 'North Macedonia', 'MKD'),
    ('MDG', 'MG', 'Madagascar', 'MGA'),
    ('MWI', 'MW', 'Malawi', 'MWK'),
    ('MYS', 'MY', 'Malaysia', 'MYR'),
    ('MDV', 'MV', 'Maldives', 'MVR'),
    ('MLI', 'ML', 'Mali', 'XOF'),
    ('MLT', 'MT', 'Malta', 'EUR'),
    ('MRT', 'MR', 'Mauritania', 'MRU'),
    ('MUS', 'MU', 'Mauritius', 'MUR'),
    ('MEX', 'MX', 'Mexico', 'MXN'),
    ('FSM', 'FM', 'Micronesia', 'USD'),
    ('MDA', 'MD', 'Moldova', 'MDL'),
    ('MCO', 'MC', 'Monaco', 'EUR'),
    ('MNG', 'MN', 'Mongolia', 'MNT'),
    ('MNE', 'ME', 'Montenegro', 'EUR'),
    ('MSR', 'MS', 'Montserrat', 'USD'),
    ('MAR', 'MA', 'Morocco', 'MAD'),
    ('MOZ', 'MZ', 'Mozambique', 'MZN'),
    ('MMR', 'MM', 'Myanmar', 'MMK'),
    ('NAM', 'NA', 'Namibia', 'NAD'),
    ('NRU', 'NR', 'Nauru', 'USD'),
    ('NPL', 'NP', 'Nepal', 'NPR'),
    ('NLD', 'NL', 'Netherlands', 'EUR'),
    ('NZL', 'NZ', 'New Zealand', 'NZD'),
    ('NIC', 'NI', 'Nicaragua', 'NIO'),
    ('NER', 'NE', 'Niger', 'XOF'),
    ('NGA', 'NG', 'Nigeria', 'NGN'),
    ('NOR', 'NO', 'Norway', 'NOK'),
    ('OMN', 'OM', 'Oman', 'OMR'),
    ('PAK', 'PK', 'Pakistan', 'PKR'),
    ('PLW', 'PW', 'Palau', 'USD'),
    ('PAN', 'PA', 'Panama', 'PAB'),
    ('PNG', 'PG', 'Papua New Guinea', 'PGK'),
    ('PRY', 'PY', 'Paraguay', 'PYG'),
    ('PER', 'PE', 'Peru', 'PEN'),
    ('PHL', 'PH', 'Philippines', 'PHP'),
    ('POL', 'PL', 'Poland', 'PLN'),
    ('PRT', 'PT', 'Portugal', 'EUR'),
    ('QAT', 'QA', 'Qatar', 'QAR'),
    ('ROU', 'RO', 'Romania', 'RON'),
    ('RUS', 'RU', 'Russia', 'RUB'),
    ('RWA', 'RW', 'Rwanda', 'RWF'),
    ('KNA', 'KN', 'Saint Kitts and Nevis', 'XCD'),
    ('LCA', 'LC', 'Saint Lucia', 'XCD'),
    ('VCT', 'VC', 'Saint Vincent and the Grenadines', 'XCD'),
    ('WSM', 'WS', 'Samoa', 'WST'),
    ('STP', 'ST', 'São Tomé and Príncipe', 'STN'),
    ('SAU', 'SA', 'Saudi Arabia', 'SAR'),
    ('SEN', 'SN', 'Senegal', 'XOF'),
    ('SRB', 'RS', 'Serbia', 'RSD'),
    ('SYC', 'SC', 'Seychelles', 'SCR'),
    ('SLE', 'SL', 'Sierra Leone', 'SLL'),
    ('SGP', 'SG', 'Singapore', 'SGD'),
    ('SVK', 'SK', 'Slovakia', 'EUR'),
    ('SVN', 'SI', 'Slovenia', 'EUR'),
    ('SLB', 'SB', 'Solomon Islands', 'SBD'),
    ('ZAF', 'ZA', 'South Africa', 'ZAR'),
    ('ESP', 'ES', 'Spain', 'EUR'),
    ('LKA', 'LK', 'Sri Lanka', 'LKR'),
    ('SUR', 'SR', 'Suriname', 'SRD'),
    ('SWE', 'SE', 'Sweden', 'SEK'),
    ('CHE', 'CH', 'Switzerland', 'CHF'),
    ('TWN', 'TW', 'Taiwan', 'TWD'),
    ('TJK', 'TJ', 'Tajikistan', 'TJS'),
    ('TZA', 'TZ', 'Tanzania', 'TZS'),
    ('THA', 'TH', 'Thailand', 'THB'),
    ('TON', 'TO', 'Tonga', 'TOP'),
    ('TTO', 'TT', 'Trinidad and Tobago', 'TTD'),
    ('TUN', 'TN', 'Tunisia', 'TND'),
    ('TUR', 'TR', 'Turkey', 'TRY'),
    ('TKM', 'TM', 'Turkmenistan', 'TMT'),
    ('TCA', 'TC', 'Turks and Caicos Islands', 'USD'),
    ('UGA', 'UG', 'Uganda', 'UGX'),
    ('UKR', 'UA', 'Ukraine', 'UAH'),
    ('ARE', 'AE', 'United Arab Emirates', 'AED'),
    ('GBR', 'GB', 'United Kingdom', 'GBP'),
    ('USA', 'US', 'United States', 'USD'),
    ('URY', 'UY', 'Uruguay', 'UYU'),
    ('UZB', 'UZ', 'Uzbekistan', 'UZS'),
    ('VUT', 'VU', 'Vanuatu', 'VUV'),
    ('VEN', 'VE', 'Venezuela', 'USD'),
    ('VNM', 'VN', 'Vietnam', 'VND'),
    ('YEM', 'YE', 'Yemen', 'YER'),
    ('ZMB', 'ZM', 'Zambia', 'ZMW'),
    ('ZWE', 'ZW', 'Zimbabwe', 'USD'),
]

# Territories rejected by Apple's IAP pricing API (price schedule updates fail with 500)
UNSUPPORTED_IAP_TERRITORIES = ['BGD', 'MCO', 'WSM']

_PLAY_BY_CODE = {code: (code, name, currency) for code, name, currency in GOOGLE_PLAY_REGIONS}
_APPLE_BY_ALPHA3 = {row[0]: row for row in APPLE_TERRITORIES}
_APPLE_BY_ALPHA2 = {row[1]: row for row in APPLE_TERRITORIES}


def alpha3_to_alpha2(alpha3: str) -> Optional[str]:
    """Convert an Apple territory code (alpha-3) to a Google Play region code (alpha-2)"""
    row = _APPLE_BY_ALPHA3.get(alpha3.upper())
    return row[1] if row else None


def to_alpha2(region_code: str) -> str:
    """Normalize a region code to alpha-2 for table lookups (unknown codes pass through)"""
    if len(region_code) == 3:
        return alpha3_to_alpha2(region_code) or region_code
    return region_code.upper()


def territory_from_play_region(region: Dict[str, Any]) -> Territory:
    """
    Adapter for Google Play region records.

    Accepts either a catalog row dict ({code, name, currency}) or a regional
    pricing config from the Android Publisher API ({regionCode, price: {currencyCode}}).
    """
    code = region.get('code') or region.get('regionCode')
    if not code:
        raise ValueError("Google Play region has no code")
    code = code.upper()
    currency = region.get('currency') or (region.get('price') or {}).get('currencyCode')
    catalog = _PLAY_BY_CODE.get(code)
    name = region.get('name') or (catalog[1] if catalog else code)
    if not currency:
        currency = catalog[2] if catalog else 'USD'
    return Territory(code=code, name=name, currency=currency)


def territory_from_apple(territory: Dict[str, Any]) -> Territory:
    """
    Adapter for Apple territory records.

    Accepts a catalog row dict ({alpha3, name, currency}) or an App Store Connect
    territory resource ({id, attributes: {currency}}). The Apple alpha-3 code is kept.
    """
    code = territory.get('alpha3') or territory.get('id')
    if not code:
        raise ValueError("Apple territory has no code")
    attributes = territory.get('attributes') or {}
    catalog = _APPLE_BY_ALPHA3.get(code.upper())
    currency = territory.get('currency') or attributes.get('currency') or (catalog[3] if catalog else 'USD')
    name = territory.get('name') or (catalog[2] if catalog else code)
    return Territory(code=code.upper(), name=name, currency=currency)


def google_play_territories() -> List[Territory]:
    return [
        territory_from_play_region({'code': code, 'name': name, 'currency': currency})
        for code, name, currency in GOOGLE_PLAY_REGIONS
    ]


def apple_territories(include_unsupported: bool = False) -> List[Territory]:
    return [
        territory_from_apple({'alpha3': alpha3, 'name': name, 'currency': currency})
        for alpha3, _, name, currency in APPLE_TERRITORIES
        if include_unsupported or alpha3 not in UNSUPPORTED_IAP_TERRITORIES
    ]


def get_catalog_currency(region_code: str) -> Optional[str]:
    """
    Look up the storefront billing currency for a region code.
    Tries the Google Play catalog (alpha-2), then the Apple catalog (alpha-3 or alpha-2).
    """
    code = region_code.upper()
    if code in _PLAY_BY_CODE:
        return _PLAY_BY_CODE[code][2]
    row = _APPLE_BY_ALPHA3.get(code) or _APPLE_BY_ALPHA2.get(code)
    return row[3] if row else None


def is_play_region(region_code: str) -> bool:
    return region_code.upper() in _PLAY_BY_CODE
