"""
Centralized Constants - SINGLE SOURCE OF TRUTH

Property classifications, Land Registry code mappings and pipeline
defaults for the Price Paid Data (PPD) reports.

DO NOT duplicate these definitions in other files.

Reference: HM Land Registry - "About the Price Paid Data"
https://www.gov.uk/guidance/about-the-price-paid-data
"""

from enum import Enum


# =============================================================================
# PROPERTY CLASSIFICATIONS
# =============================================================================
# Enum values double as the JSON keys of the emitted report.

class PropertyType(str, Enum):
    DETACHED = "Detached"
    SEMI_DETACHED = "SemiDetached"
    TERRACED = "Terraced"
    FLAT = "Flat"
    OTHER = "Other"


class PropertyAge(str, Enum):
    NEW = "New"
    OLD = "Old"


class Tenure(str, Enum):
    FREEHOLD = "Freehold"
    LEASEHOLD = "Leasehold"


# =============================================================================
# LAND REGISTRY CODE MAPPINGS
# =============================================================================

PROPERTY_TYPE_CODES = {
    'D': PropertyType.DETACHED,
    'S': PropertyType.SEMI_DETACHED,
    'T': PropertyType.TERRACED,
    'F': PropertyType.FLAT,
}

# 'Y' marks a newly built property; everything else is an established one
NEW_BUILD_CODE = 'Y'

# Leases of 7 years or less are not recorded in the dataset
FREEHOLD_CODE = 'F'


def property_type_from_code(code: str) -> PropertyType:
    """
    Map a PPD property type code to PropertyType.

    Unknown codes (e.g. 'O', a property comprising more than one large
    parcel of land) map to OTHER.
    """
    return PROPERTY_TYPE_CODES.get((code or '').strip().upper(), PropertyType.OTHER)


def property_age_from_code(code: str) -> PropertyAge:
    """Map the PPD old/new flag to PropertyAge."""
    if (code or '').strip().upper() == NEW_BUILD_CODE:
        return PropertyAge.NEW
    return PropertyAge.OLD


def tenure_from_code(code: str) -> Tenure:
    """Map the PPD duration code to Tenure."""
    if (code or '').strip().upper() == FREEHOLD_CODE:
        return Tenure.FREEHOLD
    return Tenure.LEASEHOLD


# =============================================================================
# CSV LAYOUT (published files carry no header row)
# =============================================================================

PPD_COLUMNS = [
    'transaction_id',
    'price',
    'date_of_transfer',
    'postcode',
    'property_type',
    'old_new',
    'duration',
    'paon',
    'saon',
    'street',
    'locality',
    'town_city',
    'district',
    'county',
    'ppd_category_type',
    'record_status',
]

COL_PRICE = 1
COL_DATE = 2
COL_POSTCODE = 3
COL_PROPERTY_TYPE = 4
COL_OLD_NEW = 5
COL_DURATION = 6
COL_PAON = 7
COL_SAON = 8
COL_STREET = 9
COL_TOWN_CITY = 11

DATE_FORMATS = ('%Y-%m-%d %H:%M', '%Y-%m-%d')


# =============================================================================
# PIPELINE DEFAULTS
# =============================================================================

DEFAULT_INPUT_FILE = 'pp-complete.csv'
DEFAULT_OUTPUT_FILE = 'data.json'
DEFAULT_CHUNK_SIZE = 250_000
DEFAULT_ENCODING = 'utf-8'

# Retained-record display band (inclusive on both ends)
DEFAULT_BAND_MIN = 300_000
DEFAULT_BAND_MAX = 800_000
