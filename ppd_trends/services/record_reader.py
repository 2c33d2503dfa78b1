"""
Record Reader - Price Paid CSV to Record stream.

Reads the CSV with pandas in chunks so the multi-gigabyte complete file
never has to be materialized as a DataFrame. Every column is read as
raw text and converted here, nowhere else.

CSV Column Mapping (Land Registry PPD format, no header row):
  Index  CSV Column          -> Record field     Transformation
  ────────────────────────────────────────────────────────────────
  1      Price               -> price            Parse as integer
  2      Date of Transfer    -> date             Parse "%Y-%m-%d %H:%M"
  3      Postcode            -> postcode         Stripped (may be empty)
  4      Property Type       -> property_type    D/S/T/F, else Other
  5      Old/New             -> property_age     Y = New, else Old
  6      Duration            -> tenure           F = Freehold, else Leasehold
  7-9,11 PAON/SAON/Street/Town -> address        Joined with ", " (optional)

Any row with an unparsable price or date, a missing type, age or tenure
code, or the wrong number of columns is a fatal IngestionError: there
is no per-row recovery.
"""

import logging
import os
from typing import Iterator, Sequence

import pandas as pd

from ppd_trends.constants import (
    COL_DATE,
    COL_DURATION,
    COL_OLD_NEW,
    COL_PAON,
    COL_POSTCODE,
    COL_PRICE,
    COL_PROPERTY_TYPE,
    COL_SAON,
    COL_STREET,
    COL_TOWN_CITY,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_ENCODING,
    PPD_COLUMNS,
    property_age_from_code,
    property_type_from_code,
    tenure_from_code,
)
from ppd_trends.exceptions import IngestionError
from ppd_trends.models import Record, compose_address
from ppd_trends.utils.normalize import ValidationError, to_date, to_int

logger = logging.getLogger(__name__)


def _require_code(fields: Sequence, index: int, field: str, line_number: int) -> str:
    """Type, age and tenure codes are always filled in the published data."""
    code = fields[index].strip()
    if not code:
        raise IngestionError(f"missing {field}", line_number=line_number, field=field)
    return code


def parse_row(fields: Sequence, line_number: int, with_address: bool = False) -> Record:
    """
    Convert one CSV row to a Record.

    Args:
        fields: Raw cell values in PPD column order
        line_number: 1-based line in the source file, for error messages
        with_address: Compose and keep the display address

    Raises:
        IngestionError: If a required field is missing or unparsable
    """
    try:
        price = to_int(fields[COL_PRICE], field='price')
        sold_on = to_date(fields[COL_DATE], field='date_of_transfer')
    except ValidationError as e:
        raise IngestionError(str(e), line_number=line_number, field=e.field)

    if price is None:
        raise IngestionError("missing price", line_number=line_number, field='price')
    if sold_on is None:
        raise IngestionError("missing date of transfer", line_number=line_number, field='date_of_transfer')

    type_code = _require_code(fields, COL_PROPERTY_TYPE, 'property_type', line_number)
    age_code = _require_code(fields, COL_OLD_NEW, 'old_new', line_number)
    tenure_code = _require_code(fields, COL_DURATION, 'duration', line_number)

    address = None
    if with_address:
        address = compose_address(
            fields[COL_PAON], fields[COL_SAON], fields[COL_STREET], fields[COL_TOWN_CITY]
        )

    return Record(
        price=price,
        date=sold_on,
        postcode=fields[COL_POSTCODE].strip(),
        property_type=property_type_from_code(type_code),
        property_age=property_age_from_code(age_code),
        tenure=tenure_from_code(tenure_code),
        address=address,
    )


def read_records(
    path: str,
    has_header: bool = False,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    with_address: bool = False,
    encoding: str = DEFAULT_ENCODING
) -> Iterator[Record]:
    """
    Yield Records from a PPD CSV file in file order.

    The column count is taken from the first line (or the header row).
    Any other count there, and any later row with extra cells, is fatal.
    Later rows with missing cells are padded empty by pandas and fail on
    the first required field they lack.

    Raises:
        IngestionError: If the file is missing, malformed, not in
            ``encoding``, or any row fails to parse
    """
    if not os.path.exists(path):
        raise IngestionError(f"input file not found: {path}")

    first_line = 2 if has_header else 1
    rows = 0
    try:
        chunks = pd.read_csv(
            path,
            header=0 if has_header else None,
            index_col=False,
            dtype=str,
            keep_default_na=False,
            na_filter=False,
            encoding=encoding,
            chunksize=chunk_size,
        )
        for chunk in chunks:
            if chunk.shape[1] != len(PPD_COLUMNS):
                raise IngestionError(
                    f"expected {len(PPD_COLUMNS)} columns, got {chunk.shape[1]}",
                    line_number=1,
                )
            for fields in chunk.itertuples(index=False, name=None):
                rows += 1
                yield parse_row(fields, first_line + rows - 1, with_address=with_address)
            logger.debug(f"Read {rows:,} rows from {path}")
    except pd.errors.EmptyDataError:
        logger.warning(f"Input file is empty: {path}")
    except pd.errors.ParserError as e:
        raise IngestionError(f"malformed CSV in {path}: {e}")
    except UnicodeDecodeError as e:
        raise IngestionError(f"{path} is not valid {encoding} (after {rows:,} rows): {e}")

    logger.info(f"Read {rows:,} records from {path}")
