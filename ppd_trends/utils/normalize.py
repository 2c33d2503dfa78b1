"""
Input Normalization Utilities
=============================

Single source of truth for input normalization.
All parsing of external inputs (CSV fields, environment values, CLI
strings) happens here, nowhere else.

Usage:
    from ppd_trends.utils.normalize import to_int, to_date, to_bool, ValidationError

    try:
        price = to_int(fields[COL_PRICE], field="price")
        sold_on = to_date(fields[COL_DATE], field="date_of_transfer")
    except ValidationError as e:
        raise IngestionError(str(e), line_number=n, field=e.field)
"""

from datetime import date, datetime
from enum import Enum
from typing import Iterable, Optional, Type, TypeVar, Union

from ppd_trends.constants import DATE_FORMATS

E = TypeVar('E', bound=Enum)


class ValidationError(ValueError):
    """Raised when input cannot be normalized to expected type."""

    def __init__(self, message: str, field: str = None, received_value=None):
        super().__init__(message)
        self.field = field
        self.received_value = received_value


def to_int(
    value: Optional[str],
    *,
    default: Optional[int] = None,
    field: str = None
) -> Optional[int]:
    """
    Convert string to int, with explicit None handling.

    Surrounding whitespace is ignored. Decimal strings ("3.14") are
    rejected rather than truncated.

    Raises:
        ValidationError: If value cannot be converted to int
    """
    if value is None or value == "":
        return default
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    try:
        return int(str(value).strip())
    except (ValueError, TypeError):
        raise ValidationError(
            f"Expected int, got {type(value).__name__}: {value!r}",
            field=field,
            received_value=value
        )


def to_bool(
    value: Optional[str],
    *,
    default: bool = False,
    field: str = None
) -> bool:
    """
    Convert string to bool.

    Accepts (case-insensitive):
        True: 'true', '1', 'yes', 'on'
        False: 'false', '0', 'no', 'off'

    Raises:
        ValidationError: If value is not a recognized boolean string
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    lower = str(value).strip().lower()
    if lower in ("true", "1", "yes", "on"):
        return True
    if lower in ("false", "0", "no", "off"):
        return False
    raise ValidationError(
        f"Expected bool, got: {value!r}",
        field=field,
        received_value=value
    )


def to_date(
    value: Optional[Union[str, date]],
    *,
    default: Optional[date] = None,
    formats: Iterable[str] = DATE_FORMATS,
    field: str = None
) -> Optional[date]:
    """
    Convert string to date object.

    Accepts the Land Registry transfer format ("2017-01-20 00:00"),
    a plain ISO date, or a date/datetime object (passthrough).

    Raises:
        ValidationError: If value cannot be parsed as date
    """
    if value is None or value == "":
        return default
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    for fmt in formats:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValidationError(
        f"Expected date (YYYY-MM-DD[ HH:MM]), got {type(value).__name__}: {value!r}",
        field=field,
        received_value=value
    )


def to_str(
    value: Optional[str],
    *,
    default: Optional[str] = None,
    strip: bool = True
) -> Optional[str]:
    """Normalize string input; whitespace-only counts as empty."""
    if value is None or value == "":
        return default
    result = str(value)
    if strip:
        result = result.strip()
    if result == "":
        return default
    return result


def to_list(
    value: Optional[str],
    *,
    default: Optional[list] = None,
    separator: str = ","
) -> list:
    """
    Convert a separated string to a list of stripped, non-empty items.

    Example:
        >>> to_list("SW1A, E1,,N")
        ['SW1A', 'E1', 'N']
    """
    if value is None or value == "":
        return default if default is not None else []
    return [item.strip() for item in value.split(separator) if item.strip()]


def to_enum(
    value: Optional[str],
    enum_class: Type[E],
    *,
    default: Optional[E] = None,
    field: str = None
) -> Optional[E]:
    """
    Convert string to enum member.

    Matches by value first (case-insensitive), then by member name
    ("semi-detached" -> SEMI_DETACHED).

    Raises:
        ValidationError: If value doesn't match any enum member
    """
    if value is None or value == "":
        return default
    if isinstance(value, enum_class):
        return value

    text = str(value).strip()
    value_lower = text.lower()
    for member in enum_class:
        if str(member.value).lower() == value_lower:
            return member

    try:
        return enum_class[text.upper().replace(" ", "_").replace("-", "_")]
    except KeyError:
        pass

    valid_values = [m.value for m in enum_class]
    raise ValidationError(
        f"Expected one of {valid_values}, got: {value!r}",
        field=field,
        received_value=value
    )
