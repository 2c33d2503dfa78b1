"""
Record Model - one Price Paid transaction.

Postcodes can be reallocated over time and those changes are not
reflected in the dataset, so the outcode is taken as recorded.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ppd_trends.constants import PropertyAge, PropertyType, Tenure


def outcode_of(postcode: Optional[str]) -> str:
    """
    Return the outcode (first space-delimited segment) of a postcode.

    Example:
        >>> outcode_of("sw1a 1aa")
        'SW1A'
    """
    parts = (postcode or '').split()
    return parts[0].upper() if parts else ''


def compose_address(
    paon: Optional[str],
    saon: Optional[str],
    street: Optional[str],
    city: Optional[str]
) -> str:
    """Join PAON, SAON, street and city with ', ', skipping empty segments."""
    segments = [(s or '').strip() for s in (paon, saon, street, city)]
    return ', '.join(s for s in segments if s)


@dataclass(frozen=True)
class Record:
    price: int
    date: date
    postcode: str
    property_type: PropertyType
    property_age: PropertyAge
    tenure: Tenure
    address: Optional[str] = None

    @property
    def year(self) -> int:
        return self.date.year

    @property
    def outcode(self) -> str:
        return outcode_of(self.postcode)


@dataclass
class PriceSample:
    """A price routed into a bucket, with the address when tracked."""
    price: int
    address: Optional[str] = None

    def to_dict(self):
        return {'address': self.address, 'price': self.price}
