"""
Column registry and reference values for bulk entry rows

A Row is a plain dict keyed by the column keys below, every value a
string (possibly empty). CSV files use the human-readable headers.
"""

from typing import Dict, List, Optional, Tuple

# (column key, CSV header), in grid order
COLUMN_DEFINITIONS: List[Tuple[str, str]] = [
    ('reference_id', 'Reference ID'),
    ('full_name', 'Full Name'),
    ('gender', 'Gender'),
    ('nationalities', 'Nationalities'),
    ('is_dead', 'Is Dead'),
    ('dob_day', 'DOB Day'),
    ('dob_month', 'DOB Month'),
    ('dob_year', 'DOB Year'),
    ('dates_of_birth', 'Dates of Birth'),
    ('dod_day', 'DOD Day'),
    ('dod_month', 'DOD Month'),
    ('dod_year', 'DOD Year'),
    ('profile_images', 'Profile Images'),
    ('original_script_name', 'Original Script Name'),
    ('alias_1', 'Nickname 1'),
    ('alias_2', 'Nickname 2'),
    ('address_line1', 'Address Line 1'),
    ('address_line2', 'Address Line 2'),
    ('city', 'City'),
    ('state', 'State'),
    ('county', 'County'),
    ('county_abbrev', 'County Abbreviation'),
    ('postcode', 'Postcode'),
    ('country_id', 'Country ID'),
    ('article_id', 'Article ID'),
    ('url', 'URL'),
    ('pdf_filename', 'PDF Filename'),
    ('summary', 'Summary'),
    ('snippet', 'Snippet'),
    ('day', 'Day'),
    ('month', 'Month'),
    ('year', 'Year'),
    ('rel_id', 'REL ID'),
    ('rel_category', 'REL Category'),
    ('rel_subcategory', 'REL Subcategory'),
    ('list_name', 'List Name'),
    ('event_type', 'Event Type'),
    ('pep_tier', 'PEP Tier'),
    ('pep_segment', 'PEP Segment'),
    ('pep_position', 'PEP Position'),
    ('pep_category', 'PEP Category'),
    ('country_iso_code', 'Country ISO Code'),
    ('from_day', 'From Day'),
    ('from_month', 'From Month'),
    ('from_year', 'From Year'),
    ('to_day', 'To Day'),
    ('to_month', 'To Month'),
    ('to_year', 'To Year'),
]

COLUMNS: List[str] = [key for key, _ in COLUMN_DEFINITIONS]
HEADERS: List[str] = [header for _, header in COLUMN_DEFINITIONS]

# Lower-cased header or key -> column key
_HEADER_LOOKUP: Dict[str, str] = {}
for _key, _header in COLUMN_DEFINITIONS:
    _HEADER_LOOKUP[_header.lower()] = _key
    _HEADER_LOOKUP[_key] = _key

GENDER_OPTIONS = ['Male', 'Female']
PEP_TIER_OPTIONS = ['PEP Tier 1', 'PEP Tier 2', 'PEP Tier 3']

COUNTRY_ISO_CODES = frozenset([
    'AF', 'AL', 'DZ', 'AS', 'AD', 'AO', 'AI', 'AG', 'AR', 'AM', 'AW', 'AU', 'AT', 'AZ',
    'BS', 'BH', 'BD', 'BB', 'BY', 'BE', 'BZ', 'BJ', 'BM', 'BT', 'BO', 'BA', 'BW', 'BR', 'VG', 'BN',
    'BG', 'BF', 'MM', 'BI', 'KH', 'CM', 'CA', 'CV', 'KY', 'CF', 'TD', 'CL', 'CN', 'CO', 'KM', 'CD',
    'CG', 'CK', 'CR', 'HR', 'CU', 'CY', 'CW', 'CZ', 'CI', 'DK', 'DJ', 'DM', 'DO', 'TL', 'EC', 'EG',
    'SV', 'GQ', 'ER', 'EE', 'ET', 'FO', 'FJ', 'FI', 'FR', 'GF', 'PF', 'GA', 'GM', 'GE', 'DE', 'GH',
    'GI', 'GR', 'GL', 'GD', 'GP', 'GU', 'GT', 'GG', 'GN', 'GW', 'GY', 'HT', 'VA', 'HN', 'HK', 'HU',
    'IS', 'IN', 'ID', 'IR', 'IQ', 'IE', 'IM', 'IL', 'IT', 'JM', 'JP', 'JE', 'JO', 'KZ', 'KE', 'KI',
    'KP', 'KR', 'XK', 'KW', 'KG', 'LA', 'LV', 'LB', 'LS', 'LR', 'LY', 'LI', 'LT', 'LU', 'MO', 'MK',
    'MG', 'MW', 'MY', 'MV', 'ML', 'MT', 'MH', 'MQ', 'MR', 'MU', 'YT', 'MX', 'FM', 'MD', 'MC', 'MN',
    'ME', 'MS', 'MA', 'MZ', 'NA', 'NR', 'NP', 'NL', 'NC', 'NZ', 'NI', 'NE', 'NG', 'NU', 'NF', 'MP',
    'NO', 'OM', 'PK', 'PW', 'PS', 'PA', 'PG', 'PY', 'PE', 'PH', 'PL', 'PT', 'PR', 'QA', 'RE', 'RO',
    'RU', 'RW', 'KN', 'LC', 'PM', 'VC', 'WS', 'SM', 'ST', 'SX', 'SA', 'SN', 'RS', 'SC', 'SL', 'SG',
    'SK', 'SI', 'SB', 'SO', 'ZA', 'SS', 'ES', 'LK', 'SD', 'SR', 'SZ', 'SE', 'CH', 'SY', 'TW', 'TJ',
    'TZ', 'TH', 'TG', 'TO', 'TT', 'TN', 'TR', 'TM', 'TC', 'TV', 'UG', 'UA', 'AE', 'GB', 'VI', 'US',
    'UY', 'UZ', 'VU', 'VE', 'VN', 'WF', 'EH', 'YE', 'ZM', 'ZW',
])


def column_for_header(header: str) -> Optional[str]:
    """Map a CSV header (or raw column key) to its column key, None if unknown"""
    if header is None:
        return None
    return _HEADER_LOOKUP.get(header.lstrip('\ufeff').strip().lower())


def empty_row() -> Dict[str, str]:
    """A row with every known column set to the empty string"""
    return {key: '' for key in COLUMNS}
