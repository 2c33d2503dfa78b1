"""
Ingestion & Ordering - filter the record stream and sort it by date.

This is the one stage that holds every qualifying record at once; the
aggregation driver downstream relies on the ascending-date order
established here.

Filters (all optional, applied in this order):
  - min_year:                 drop transfers before this calendar year
  - tenure:                   keep only Freehold or only Leasehold
  - excluded_property_types:  drop e.g. PropertyType.OTHER
  - region:                   outcode allow-list (RegionFilter)
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set

from ppd_trends.constants import PropertyType, Tenure
from ppd_trends.exceptions import EmptyInputError
from ppd_trends.models import Record
from ppd_trends.services.etl.run_context import RunContext
from ppd_trends.services.region_filter import RegionFilter

logger = logging.getLogger(__name__)

REJECT_MIN_YEAR = 'before_min_year'
REJECT_TENURE = 'tenure'
REJECT_PROPERTY_TYPE = 'property_type'
REJECT_REGION = 'region'


@dataclass
class RecordFilters:
    min_year: Optional[int] = None
    tenure: Optional[Tenure] = None
    excluded_property_types: Set[PropertyType] = field(default_factory=set)
    region: RegionFilter = field(default_factory=RegionFilter)

    def rejection_reason(self, record: Record) -> Optional[str]:
        """Name of the first filter rejecting the record, or None."""
        if self.min_year is not None and record.year < self.min_year:
            return REJECT_MIN_YEAR
        if self.tenure is not None and record.tenure is not self.tenure:
            return REJECT_TENURE
        if record.property_type in self.excluded_property_types:
            return REJECT_PROPERTY_TYPE
        if not self.region.matches(record.outcode):
            return REJECT_REGION
        return None

    def accepts(self, record: Record) -> bool:
        return self.rejection_reason(record) is None

    def describe(self) -> str:
        parts = []
        if self.min_year is not None:
            parts.append(f"year>={self.min_year}")
        if self.tenure is not None:
            parts.append(f"tenure={self.tenure.value}")
        if self.excluded_property_types:
            names = sorted(t.value for t in self.excluded_property_types)
            parts.append(f"excluding {','.join(names)}")
        if not self.region.allows_all:
            parts.append(f"{len(self.region)} region entries")
        return '; '.join(parts) or 'none'


def load_sorted_records(
    records: Iterable[Record],
    filters: Optional[RecordFilters] = None,
    ctx: Optional[RunContext] = None
) -> List[Record]:
    """
    Apply filters and return the survivors sorted by transfer date.

    The sort is stable, so same-day records keep their file order.

    Raises:
        EmptyInputError: If no record survives filtering
    """
    filters = filters or RecordFilters()
    logger.info(f"Filtering records ({filters.describe()})")

    kept: List[Record] = []
    for record in records:
        if ctx is not None:
            ctx.rows_read += 1
        reason = filters.rejection_reason(record)
        if reason is not None:
            if ctx is not None:
                ctx.add_rejection(reason)
            continue
        kept.append(record)

    if ctx is not None:
        ctx.rows_loaded = len(kept)

    if not kept:
        raise EmptyInputError("no records left after filtering; nothing to report")

    logger.info(f"Sorting {len(kept):,} records by date")
    kept.sort(key=lambda r: r.date)
    return kept
