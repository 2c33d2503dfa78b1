"""
Aggregation Driver - single pass over the date-sorted record stream.

States:
    ACCUMULATING(current_year) -> DONE

For each record:
    1. If its year differs from current_year, flush: drain the current
       YearAggregate into a YearlyReport, hand it to the writer and
       start a fresh aggregate for the new year.
    2. Route the record into the (possibly fresh) aggregate.
At end of stream the last year is flushed and the driver is DONE.

The flush happens before the boundary-crossing record is routed, so a
record never lands in the wrong year, and the end-of-stream flush
guarantees the final year is never dropped. Only one year of grouped
samples is held at a time.

Usage:
    with open_report("data.json") as writer:
        driver = AggregationDriver(writer, band=PriceBand(), track_addresses=False)
        driver.run(sorted_records)
"""

import logging
from enum import Enum
from typing import Callable, Iterable, List, Optional

from ppd_trends.exceptions import EmptyInputError
from ppd_trends.models import Record, YearlyReport
from ppd_trends.services.etl.run_context import RunContext
from ppd_trends.services.price_bucket import PriceBand
from ppd_trends.services.year_aggregate import YearAggregate

logger = logging.getLogger(__name__)


class DriverState(Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"
    DONE = "done"


class AggregationDriver:
    """
    Route records into per-year aggregates and emit one report per year.

    Args:
        emit: Callable receiving each YearlyReport in ascending year
            order (typically ReportWriter.write_report)
        band: Display band for retained records
        track_addresses: Keep addresses on samples and emit `properties`
        ctx: Optional RunContext updated with emitted years/buckets
    """

    def __init__(
        self,
        emit: Callable[[YearlyReport], None],
        band: Optional[PriceBand] = None,
        track_addresses: bool = False,
        ctx: Optional[RunContext] = None
    ):
        self._emit = emit
        self.band = band or PriceBand()
        self.track_addresses = track_addresses
        self.ctx = ctx
        self.state = DriverState.IDLE
        self.current_year: Optional[int] = None
        self.years_emitted: List[int] = []
        self._aggregate: Optional[YearAggregate] = None

    def run(self, records: Iterable[Record]) -> List[int]:
        """
        Consume the sorted stream and return the years emitted.

        Raises:
            EmptyInputError: If the stream yields no records
            ValueError: If the stream goes backwards in time
        """
        if self.state is not DriverState.IDLE:
            raise RuntimeError(f"driver already {self.state.value}")

        for record in records:
            if self.state is DriverState.IDLE:
                self._start_year(record.year)
            elif record.year != self.current_year:
                if record.year < self.current_year:
                    raise ValueError(
                        f"records out of order: {record.year} after {self.current_year}"
                    )
                self._flush()
                self._start_year(record.year)
            self._aggregate.route(record)

        if self.state is DriverState.IDLE:
            raise EmptyInputError("no records to aggregate")

        self._flush()
        self.state = DriverState.DONE
        return self.years_emitted

    def _start_year(self, year: int) -> None:
        self.current_year = year
        self._aggregate = YearAggregate(year, track_addresses=self.track_addresses)
        self.state = DriverState.ACCUMULATING

    def _flush(self) -> None:
        aggregate = self._aggregate
        sample_count = aggregate.sample_count
        report = aggregate.drain_to_report(band=self.band)
        self._aggregate = None

        self._emit(report)
        self.years_emitted.append(report.year)

        bucket_count = report.bucket_count
        if self.ctx is not None:
            self.ctx.record_year(report.year, bucket_count)
        logger.info(
            f"Flushed {report.year}: {sample_count} records, "
            f"{len(report.postcodes)} postcodes, {bucket_count} buckets"
        )
