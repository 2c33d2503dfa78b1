"""
Region Filter - postcode allow-list predicate.

Allow-lists are configuration data (a file or a list of strings), not
compiled-in constants, so the region policy can change without a code
change.

Matching rules (case-insensitive):
  - "SW1A"  matches outcode SW1A only
  - "SW"    (a bare postcode area, letters only) matches every outcode
            in the area: SW1A, SW19, ... but not "S1"
  - "E1"    matches E1 only, never E14
An empty allow-list allows everything.

Usage:
    region = RegionFilter.from_file("regions/london.txt")
    if region.matches(record.outcode):
        ...
"""

import logging
import re
from typing import FrozenSet, Iterable

from ppd_trends.exceptions import ConfigError
from ppd_trends.utils.normalize import to_list

logger = logging.getLogger(__name__)

_AREA_RE = re.compile(r'^[A-Z]+')
_ENTRY_RE = re.compile(r'^[A-Z]{1,2}(\d[A-Z\d]?)?$')


def postcode_area(outcode: str) -> str:
    """Leading letters of an outcode ("SW1A" -> "SW")."""
    match = _AREA_RE.match(outcode.upper())
    return match.group(0) if match else ''


class RegionFilter:
    """Set-membership predicate over outcodes and postcode areas."""

    def __init__(self, prefixes: Iterable[str] = ()):
        outcodes = set()
        areas = set()
        for raw in prefixes:
            entry = raw.strip().upper()
            if not entry:
                continue
            if not _ENTRY_RE.match(entry):
                raise ConfigError(f"not a postcode area or outcode: {raw!r}")
            if entry.isalpha():
                areas.add(entry)
            else:
                outcodes.add(entry)
        self.outcodes: FrozenSet[str] = frozenset(outcodes)
        self.areas: FrozenSet[str] = frozenset(areas)

    @classmethod
    def from_file(cls, path: str) -> 'RegionFilter':
        """
        Load an allow-list file: one or more comma-separated entries per
        line, '#' starts a comment.
        """
        entries = []
        try:
            with open(path, encoding='utf-8') as f:
                for line in f:
                    entries.extend(to_list(line.split('#', 1)[0]))
        except OSError as e:
            raise ConfigError(f"cannot read region file {path}: {e}")
        region = cls(entries)
        logger.info(
            f"Loaded region filter from {path}: "
            f"{len(region.areas)} areas, {len(region.outcodes)} outcodes"
        )
        return region

    def merged(self, other: 'RegionFilter') -> 'RegionFilter':
        result = RegionFilter()
        result.outcodes = self.outcodes | other.outcodes
        result.areas = self.areas | other.areas
        return result

    @property
    def allows_all(self) -> bool:
        return not self.outcodes and not self.areas

    def matches(self, outcode: str) -> bool:
        if self.allows_all:
            return True
        code = (outcode or '').upper()
        return code in self.outcodes or postcode_area(code) in self.areas

    def __len__(self):
        return len(self.outcodes) + len(self.areas)

    def __repr__(self):
        return f"RegionFilter(areas={sorted(self.areas)}, outcodes={sorted(self.outcodes)})"
