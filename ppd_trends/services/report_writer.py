"""
Report Writer - forward-only streaming JSON array.

The output is one top-level array with one object per year. Elements
are written as they are flushed; the separator is written before every
element except the first, so the file is valid JSON at close even for
zero elements.

Usage:
    with open_report("data.json") as writer:
        writer.write_report(report)
"""

import json
import logging
import os
from contextlib import contextmanager
from typing import Any, IO, Iterator

from ppd_trends.models import YearlyReport

logger = logging.getLogger(__name__)


class ReportWriter:
    """Append-only writer for the yearly report array."""

    def __init__(self, stream: IO[str]):
        self._stream = stream
        self.elements_written = 0
        self._opened = False
        self._closed = False

    def open(self) -> None:
        if self._opened:
            raise RuntimeError("report array already opened")
        self._stream.write('[')
        self._opened = True

    def write(self, value: Any) -> None:
        """Serialize one array element."""
        if not self._opened or self._closed:
            raise RuntimeError("report array is not open")
        if self.elements_written:
            self._stream.write(',')
        json.dump(value, self._stream, separators=(',', ':'), ensure_ascii=False)
        self.elements_written += 1

    def write_report(self, report: YearlyReport) -> None:
        self.write(report.to_dict())

    def close(self) -> None:
        if not self._opened:
            self.open()
        if not self._closed:
            self._stream.write(']')
            self._closed = True


@contextmanager
def open_report(path: str) -> Iterator[ReportWriter]:
    """
    Open a ReportWriter on `path`.

    Writes go to a temporary sibling file that replaces `path` only
    when the block completes; on error the temporary file is removed
    and the exception propagates.
    """
    tmp_path = f"{path}.tmp"
    try:
        with open(tmp_path, 'w', encoding='utf-8') as f:
            writer = ReportWriter(f)
            writer.open()
            yield writer
            writer.close()
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
    logger.info(f"Wrote {writer.elements_written} yearly report(s) to {path}")


def _check_bucket(bucket, where: str) -> int:
    if not isinstance(bucket, dict):
        raise ValueError(f"{where}: bucket is not an object")
    count = bucket.get('count')
    if not isinstance(count, int) or isinstance(count, bool):
        raise ValueError(f"{where}: bucket has no integer count")
    return count


def verify_report(path: str) -> dict:
    """
    Parse a written report and check its shape.

    Returns:
        {'years': [...], 'postcodes': n, 'buckets': n, 'records': n}

    Raises:
        ValueError: If the file is not a JSON array of yearly objects in
            strictly ascending year order, or any nested level has the
            wrong shape
    """
    with open(path, encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON array, got {type(data).__name__}")

    years = []
    postcodes = set()
    buckets = 0
    records = 0
    for element in data:
        year = element.get('year') if isinstance(element, dict) else None
        if not isinstance(year, int):
            raise ValueError(f"element {len(years)} has no integer year")
        if years and year <= years[-1]:
            raise ValueError(f"year {year} follows {years[-1]}")
        years.append(year)

        by_outcode = element.get('postcodes', {})
        if not isinstance(by_outcode, dict):
            raise ValueError(f"{year}: postcodes is not an object")
        for outcode, entries in by_outcode.items():
            where = f"{year} {outcode}"
            if not isinstance(entries, list):
                raise ValueError(f"{where}: expected a list of entries")
            postcodes.add(outcode)
            for entry in entries:
                types = entry.get('buckets', {}) if isinstance(entry, dict) else None
                if not isinstance(types, dict):
                    raise ValueError(f"{where}: entry has no buckets object")
                for type_name, ages in types.items():
                    if not isinstance(ages, dict):
                        raise ValueError(f"{where} {type_name}: expected an object of ages")
                    for age_name, bucket in ages.items():
                        records += _check_bucket(bucket, f"{where} {type_name}/{age_name}")
                        buckets += 1

    return {
        'years': years,
        'postcodes': len(postcodes),
        'buckets': buckets,
        'records': records,
    }
