"""
Year Aggregate - in-memory accumulator for one calendar year.

Samples are grouped by outcode, then by (property type, property age).
The type/age key space is closed (5 x 2), so each outcode holds a
fixed-size slot table instead of nested dicts; only the outcode needs a
real mapping.

Usage:
    aggregate = YearAggregate(year=2020, track_addresses=True)
    for record in records_for_2020:
        aggregate.route(record)
    report = aggregate.drain_to_report(band=PriceBand())
"""

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from ppd_trends.constants import PropertyAge, PropertyType
from ppd_trends.models import PriceSample, Record, YearlyReport
from ppd_trends.services.price_bucket import PriceBand, build_bucket

logger = logging.getLogger(__name__)

SLOTS: List[Tuple[PropertyType, PropertyAge]] = [
    (property_type, property_age)
    for property_type in PropertyType
    for property_age in PropertyAge
]
SLOT_INDEX: Dict[Tuple[PropertyType, PropertyAge], int] = {
    key: i for i, key in enumerate(SLOTS)
}


class SlotTable:
    """Sample lists for one outcode, indexed by (type, age) slot."""

    __slots__ = ('_slots',)

    def __init__(self):
        self._slots: List[Optional[List[PriceSample]]] = [None] * len(SLOTS)

    def append(self, property_type: PropertyType, property_age: PropertyAge, sample: PriceSample):
        i = SLOT_INDEX[(property_type, property_age)]
        samples = self._slots[i]
        if samples is None:
            samples = self._slots[i] = []
        samples.append(sample)

    def items(self) -> Iterator[Tuple[PropertyType, PropertyAge, List[PriceSample]]]:
        """Occupied slots in declaration order."""
        for (property_type, property_age), samples in zip(SLOTS, self._slots):
            if samples is not None:
                yield property_type, property_age, samples


class YearAggregate:
    """
    Mutable accumulator scoped to exactly one calendar year.

    Records must already be filtered; every combination of enum values
    is accepted. Entries are only ever removed by drain_to_report(),
    which empties the accumulator so no sample can reach two reports.
    """

    def __init__(self, year: int, track_addresses: bool = False):
        self.year = year
        self.track_addresses = track_addresses
        self._postcodes: Dict[str, SlotTable] = {}
        self.sample_count = 0

    def route(self, record: Record) -> None:
        if record.year != self.year:
            raise ValueError(
                f"record from {record.year} routed into the {self.year} aggregate"
            )
        table = self._postcodes.get(record.outcode)
        if table is None:
            table = self._postcodes[record.outcode] = SlotTable()
        address = record.address if self.track_addresses else None
        table.append(record.property_type, record.property_age, PriceSample(record.price, address))
        self.sample_count += 1

    def drain_to_report(self, band: Optional[PriceBand] = None) -> YearlyReport:
        """
        Build one PriceBucket per occupied slot and clear the accumulator.
        """
        report = YearlyReport(year=self.year)
        for outcode, table in self._postcodes.items():
            buckets = {}
            for property_type, property_age, samples in table.items():
                buckets.setdefault(property_type, {})[property_age] = build_bucket(
                    samples, band=band, track_addresses=self.track_addresses
                )
            report.postcodes[outcode] = buckets

        logger.debug(
            f"Drained {self.year}: {self.sample_count} samples, "
            f"{len(self._postcodes)} postcodes"
        )
        self._postcodes = {}
        self.sample_count = 0
        return report
