"""
Price Bucket Computation - Pure Functions for Testing

All functions are pure apart from sorting the sample list in place
(no I/O, no shared state).

Usage:
    from ppd_trends.services.price_bucket import build_bucket, PriceBand

    bucket = build_bucket(samples, band=PriceBand(300_000, 800_000))
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ppd_trends.constants import DEFAULT_BAND_MAX, DEFAULT_BAND_MIN
from ppd_trends.models import PriceBucket, PriceSample


# =============================================================================
# DISPLAY BAND
# =============================================================================

@dataclass(frozen=True)
class PriceBand:
    """Inclusive price band deciding which records are retained for display."""
    minimum: int = DEFAULT_BAND_MIN
    maximum: int = DEFAULT_BAND_MAX

    def contains(self, price: int) -> bool:
        return self.minimum <= price <= self.maximum


# =============================================================================
# STATISTICS
# =============================================================================

def median_of_sorted(prices: Sequence[int]) -> float:
    """
    Median of an ascending price list.

    Even count: mean of the two middle values. Odd count: the middle
    value. Empty list: 0.0.

    Example:
        >>> median_of_sorted([100, 200, 300, 400])
        250.0
        >>> median_of_sorted([100, 200, 300])
        200.0
    """
    n = len(prices)
    if n == 0:
        return 0.0
    mid = n // 2
    if n % 2 == 0:
        return (prices[mid - 1] + prices[mid]) / 2
    return float(prices[mid])


def range_of_sorted(prices: Sequence[int]) -> Tuple[int, int]:
    """(min, max) of an ascending price list; (0, 0) when empty."""
    if not prices:
        return (0, 0)
    return (prices[0], prices[-1])


def retained_samples(samples: Sequence[PriceSample], band: PriceBand) -> List[PriceSample]:
    """Samples carrying an address whose price falls inside the band."""
    return [
        s for s in samples
        if s.address is not None and band.contains(s.price)
    ]


# =============================================================================
# BUCKET BUILDER
# =============================================================================

def build_bucket(
    samples: List[PriceSample],
    band: Optional[PriceBand] = None,
    track_addresses: bool = False
) -> PriceBucket:
    """
    Summarize one sample list into a PriceBucket.

    Count, median and range always use the full sample set. The band
    only decides which address-carrying samples are kept under
    `properties`, and only when track_addresses is set.

    The list is sorted by price in place; callers must not rely on its
    original order afterwards.
    """
    samples.sort(key=lambda s: s.price)
    prices = [s.price for s in samples]

    properties = None
    if track_addresses:
        properties = retained_samples(samples, band or PriceBand())

    return PriceBucket(
        count=len(prices),
        median=median_of_sorted(prices),
        range=range_of_sorted(prices),
        properties=properties,
    )
