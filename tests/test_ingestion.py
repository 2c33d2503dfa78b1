"""
Unit tests for services/ingestion.py

Ensures:
- each configured filter rejects what it should and is counted
- survivors come back in ascending date order (stable for ties)
- an empty result is a fatal EmptyInputError
"""

from datetime import date

import pytest

from ppd_trends.constants import PropertyType, Tenure
from ppd_trends.exceptions import EmptyInputError
from ppd_trends.services.etl import RunContext
from ppd_trends.services.ingestion import (
    REJECT_MIN_YEAR,
    REJECT_PROPERTY_TYPE,
    REJECT_REGION,
    REJECT_TENURE,
    RecordFilters,
    load_sorted_records,
)
from ppd_trends.services.region_filter import RegionFilter


class TestRecordFilters:

    def test_no_filters_accepts_everything(self, record):
        assert RecordFilters().accepts(record())

    def test_min_year(self, record):
        filters = RecordFilters(min_year=2020)
        assert filters.rejection_reason(record(when=date(2019, 12, 31))) == REJECT_MIN_YEAR
        assert filters.accepts(record(when=date(2020, 1, 1)))

    def test_tenure(self, record):
        filters = RecordFilters(tenure=Tenure.FREEHOLD)
        assert filters.rejection_reason(record(tenure=Tenure.LEASEHOLD)) == REJECT_TENURE
        assert filters.accepts(record(tenure=Tenure.FREEHOLD))

    def test_excluded_types(self, record):
        filters = RecordFilters(excluded_property_types={PropertyType.OTHER, PropertyType.FLAT})
        assert filters.rejection_reason(record(property_type=PropertyType.FLAT)) == REJECT_PROPERTY_TYPE
        assert filters.accepts(record(property_type=PropertyType.TERRACED))

    def test_region(self, record):
        filters = RecordFilters(region=RegionFilter(["E1"]))
        assert filters.rejection_reason(record(postcode="E14 5AB")) == REJECT_REGION
        assert filters.accepts(record(postcode="E1 6AN"))

    def test_describe(self):
        filters = RecordFilters(min_year=2010, tenure=Tenure.FREEHOLD,
                                excluded_property_types={PropertyType.OTHER})
        assert filters.describe() == "year>=2010; tenure=Freehold; excluding Other"
        assert RecordFilters().describe() == "none"


class TestLoadSortedRecords:

    def test_sorted_by_date(self, record):
        records = [
            record(price=3, when=date(2021, 5, 1)),
            record(price=1, when=date(2019, 1, 1)),
            record(price=2, when=date(2020, 7, 1)),
        ]
        result = load_sorted_records(records)
        assert [r.price for r in result] == [1, 2, 3]

    def test_same_day_keeps_file_order(self, record):
        records = [record(price=p, when=date(2020, 1, 1)) for p in (5, 3, 9)]
        assert [r.price for r in load_sorted_records(records)] == [5, 3, 9]

    def test_counts_on_context(self, record):
        ctx = RunContext()
        records = [
            record(when=date(2000, 1, 1)),
            record(tenure=Tenure.FREEHOLD),
            record(),
            record(),
        ]
        filters = RecordFilters(min_year=2010, tenure=Tenure.LEASEHOLD)

        result = load_sorted_records(records, filters, ctx=ctx)

        assert len(result) == 2
        assert ctx.rows_read == 4
        assert ctx.rows_loaded == 2
        assert ctx.rejections == {REJECT_MIN_YEAR: 1, REJECT_TENURE: 1}
        assert ctx.reconciliation_check()[0] is True

    def test_empty_after_filtering(self, record):
        with pytest.raises(EmptyInputError):
            load_sorted_records([record(when=date(2000, 1, 1))], RecordFilters(min_year=2010))

    def test_empty_input(self):
        with pytest.raises(EmptyInputError):
            load_sorted_records([])
