"""
Unit tests for services/report_writer.py

The output must always parse as JSON: no separator after the last
element, closing bracket written, nothing left behind on failure.
"""

import io
import json
import os

import pytest

from ppd_trends.models import YearlyReport
from ppd_trends.services.report_writer import ReportWriter, open_report, verify_report


class TestReportWriter:

    def test_zero_elements_is_empty_array(self):
        buf = io.StringIO()
        writer = ReportWriter(buf)
        writer.open()
        writer.close()
        assert json.loads(buf.getvalue()) == []

    def test_no_trailing_separator(self):
        buf = io.StringIO()
        writer = ReportWriter(buf)
        writer.open()
        for year in (2019, 2020, 2021):
            writer.write({'year': year})
        writer.close()

        text = buf.getvalue()
        assert not text.endswith(',]')
        assert json.loads(text) == [{'year': 2019}, {'year': 2020}, {'year': 2021}]
        assert writer.elements_written == 3

    def test_write_before_open_fails(self):
        with pytest.raises(RuntimeError):
            ReportWriter(io.StringIO()).write({})

    def test_write_after_close_fails(self):
        writer = ReportWriter(io.StringIO())
        writer.open()
        writer.close()
        with pytest.raises(RuntimeError):
            writer.write({})

    def test_close_is_idempotent(self):
        buf = io.StringIO()
        writer = ReportWriter(buf)
        writer.open()
        writer.close()
        writer.close()
        assert buf.getvalue() == '[]'

    def test_non_ascii_written_verbatim(self):
        buf = io.StringIO()
        writer = ReportWriter(buf)
        writer.open()
        writer.write({'address': 'Tŷ Newydd'})
        writer.close()
        assert 'Tŷ Newydd' in buf.getvalue()


class TestOpenReport:

    def test_writes_valid_json_file(self, tmp_path):
        path = str(tmp_path / "data.json")
        with open_report(path) as writer:
            writer.write_report(YearlyReport(year=2020))
            writer.write_report(YearlyReport(year=2021))

        with open(path) as f:
            data = json.load(f)
        assert [e['year'] for e in data] == [2020, 2021]
        assert not os.path.exists(path + ".tmp")

    def test_failure_leaves_no_output(self, tmp_path):
        path = str(tmp_path / "data.json")
        with pytest.raises(RuntimeError):
            with open_report(path) as writer:
                writer.write_report(YearlyReport(year=2020))
                raise RuntimeError("boom")

        assert not os.path.exists(path)
        assert not os.path.exists(path + ".tmp")

    def test_failure_keeps_previous_report(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text('[{"year":1999,"postcodes":{}}]')

        with pytest.raises(RuntimeError):
            with open_report(str(path)):
                raise RuntimeError("boom")

        assert json.loads(path.read_text())[0]['year'] == 1999

    def test_unwritable_destination_raises_oserror(self, tmp_path):
        path = str(tmp_path / "missing-dir" / "data.json")
        with pytest.raises(OSError):
            with open_report(path):
                pass


class TestVerifyReport:

    def _write(self, tmp_path, text):
        path = tmp_path / "report.json"
        path.write_text(text)
        return str(path)

    def test_counts(self, tmp_path):
        bucket = {'count': 2, 'median': 1.5, 'range': [1, 2]}
        data = [
            {'year': 2020, 'postcodes': {'E1': [{'year': 2020, 'buckets': {'Flat': {'Old': bucket}}}]}},
            {'year': 2021, 'postcodes': {
                'E1': [{'year': 2021, 'buckets': {'Flat': {'Old': bucket, 'New': bucket}}}],
                'N1': [{'year': 2021, 'buckets': {'Detached': {'Old': bucket}}}],
            }},
        ]
        summary = verify_report(self._write(tmp_path, json.dumps(data)))
        assert summary == {'years': [2020, 2021], 'postcodes': 2, 'buckets': 4, 'records': 8}

    def test_trailing_comma_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            verify_report(self._write(tmp_path, '[{"year":2020,"postcodes":{}},]'))

    def test_not_an_array(self, tmp_path):
        with pytest.raises(ValueError):
            verify_report(self._write(tmp_path, '{"year": 2020}'))

    def test_years_must_ascend(self, tmp_path):
        text = '[{"year":2021,"postcodes":{}},{"year":2020,"postcodes":{}}]'
        with pytest.raises(ValueError):
            verify_report(self._write(tmp_path, text))

    def test_duplicate_year_rejected(self, tmp_path):
        text = '[{"year":2020,"postcodes":{}},{"year":2020,"postcodes":{}}]'
        with pytest.raises(ValueError):
            verify_report(self._write(tmp_path, text))

    @pytest.mark.parametrize("text,message", [
        ('[{"year":2020,"postcodes":{"SW1A":[{"year":2020,"buckets":{"Flat":{"Old":{}}}}]}}]',
         "integer count"),
        ('[{"year":2020,"postcodes":{"SW1A":[{"year":2020,"buckets":{"Flat":{"Old":{"count":"2"}}}}]}}]',
         "integer count"),
        ('[{"year":2020,"postcodes":{"SW1A":[{"year":2020,"buckets":{"Flat":{"Old":[]}}}]}}]',
         "not an object"),
        ('[{"year":2020,"postcodes":{"SW1A":[{"year":2020,"buckets":{"Flat":[]}}]}}]',
         "object of ages"),
        ('[{"year":2020,"postcodes":{"SW1A":[{"year":2020,"buckets":[]}]}}]',
         "no buckets object"),
        ('[{"year":2020,"postcodes":{"SW1A":["entry"]}}]',
         "no buckets object"),
        ('[{"year":2020,"postcodes":{"SW1A":{"year":2020}}}]',
         "list of entries"),
        ('[{"year":2020,"postcodes":["SW1A"]}]',
         "postcodes is not an object"),
    ])
    def test_nested_shape_errors(self, tmp_path, text, message):
        with pytest.raises(ValueError) as exc:
            verify_report(self._write(tmp_path, text))
        assert message in str(exc.value)
