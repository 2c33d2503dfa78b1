"""
Report Models - the finalized output shapes.

PriceBucket and YearlyReport are built once per flush, handed to the
report writer and dropped.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ppd_trends.constants import PropertyAge, PropertyType
from ppd_trends.models.record import PriceSample


@dataclass(frozen=True)
class PriceBucket:
    """Statistical summary for one (postcode, type, age, year) combination."""
    count: int
    median: float
    range: Tuple[int, int]
    # None when addresses are not tracked; omitted from the output
    properties: Optional[List[PriceSample]] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'count': self.count,
            'median': self.median,
            'range': [self.range[0], self.range[1]],
        }
        if self.properties is not None:
            result['properties'] = [p.to_dict() for p in self.properties]
        return result


BucketMap = Dict[PropertyType, Dict[PropertyAge, PriceBucket]]


@dataclass
class YearlyReport:
    year: int
    postcodes: Dict[str, BucketMap] = field(default_factory=dict)

    @property
    def bucket_count(self) -> int:
        return sum(
            len(ages)
            for buckets in self.postcodes.values()
            for ages in buckets.values()
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the JSON output shape:

            {"year": 2020,
             "postcodes": {"SW1A": [{"year": 2020,
                                     "buckets": {"Flat": {"Old": {...}}}}]}}
        """
        postcodes = {}
        for outcode, buckets in self.postcodes.items():
            postcodes[outcode] = [{
                'year': self.year,
                'buckets': {
                    property_type.value: {
                        property_age.value: bucket.to_dict()
                        for property_age, bucket in ages.items()
                    }
                    for property_type, ages in buckets.items()
                },
            }]
        return {'year': self.year, 'postcodes': postcodes}
