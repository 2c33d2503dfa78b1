"""
Shared pytest fixtures.

Provides:
- record(): Record factory with sensible defaults
- ppd_row(): one raw Price Paid CSV row (16 columns)
- write_ppd_csv: writes rows to a temporary CSV in the published format
"""

import csv
from datetime import date

import pytest

from ppd_trends.constants import PropertyAge, PropertyType, Tenure
from ppd_trends.models import Record


def make_record(
    price=250_000,
    when=date(2020, 6, 1),
    postcode="SW1A 1AA",
    property_type=PropertyType.FLAT,
    property_age=PropertyAge.OLD,
    tenure=Tenure.LEASEHOLD,
    address=None,
):
    return Record(
        price=price,
        date=when,
        postcode=postcode,
        property_type=property_type,
        property_age=property_age,
        tenure=tenure,
        address=address,
    )


def ppd_row(
    price="250000",
    when="2020-06-01 00:00",
    postcode="SW1A 1AA",
    property_type="F",
    old_new="N",
    duration="L",
    paon="10",
    saon="FLAT 2",
    street="HIGH STREET",
    town="LONDON",
):
    return [
        "{6A1B2C3D-0000-0000-0000-000000000001}",
        price,
        when,
        postcode,
        property_type,
        old_new,
        duration,
        paon,
        saon,
        street,
        "",
        town,
        "WESTMINSTER",
        "GREATER LONDON",
        "A",
        "A",
    ]


@pytest.fixture
def record():
    return make_record


@pytest.fixture
def write_ppd_csv(tmp_path):
    """Write rows (lists of cells) to a quoted CSV and return its path."""
    def _write(rows, name="pp-sample.csv", header=None):
        path = tmp_path / name
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, quoting=csv.QUOTE_ALL)
            if header:
                writer.writerow(header)
            writer.writerows(rows)
        return str(path)
    return _write


@pytest.fixture
def row():
    return ppd_row
