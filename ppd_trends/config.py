"""
Report Configuration - environment-based settings

Values come from the process environment (a local .env file is loaded
first); CLI options override them.

Environment Variables:
    PPD_INPUT_FILE:      Price Paid CSV (default: pp-complete.csv)
    PPD_OUTPUT_FILE:     Report destination (default: data.json)
    PPD_HAS_HEADER:      'true' if the CSV starts with a header row (default: 'false')
    PPD_ENCODING:        Text encoding of the CSV (default: utf-8)
    PPD_CHUNK_SIZE:      Rows per CSV read chunk (default: 250000)
    PPD_MIN_YEAR:        Drop transfers before this year (default: unset)
    PPD_TENURE:          'Freehold' or 'Leasehold' (default: both)
    PPD_EXCLUDED_TYPES:  Comma-separated property types, e.g. 'Other,Flat'
    PPD_REGION_FILE:     Outcode allow-list file (default: unset, all postcodes)
    PPD_REGIONS:         Comma-separated outcodes/areas, merged with the file
    PPD_TRACK_ADDRESSES: 'true' to emit retained records per bucket
    PPD_BAND_MIN:        Lower bound of the retained-record band (default: 300000)
    PPD_BAND_MAX:        Upper bound of the retained-record band (default: 800000)
"""

import codecs
import os
from dataclasses import dataclass, field, replace
from typing import List, Optional, Set

from dotenv import load_dotenv

from ppd_trends.constants import (
    DEFAULT_BAND_MAX,
    DEFAULT_BAND_MIN,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_ENCODING,
    DEFAULT_INPUT_FILE,
    DEFAULT_OUTPUT_FILE,
    PropertyType,
    Tenure,
)
from ppd_trends.exceptions import ConfigError
from ppd_trends.services.ingestion import RecordFilters
from ppd_trends.services.price_bucket import PriceBand
from ppd_trends.services.region_filter import RegionFilter
from ppd_trends.utils.normalize import ValidationError, to_bool, to_enum, to_int, to_list, to_str

load_dotenv()


@dataclass
class Settings:
    input_file: str = DEFAULT_INPUT_FILE
    output_file: str = DEFAULT_OUTPUT_FILE
    has_header: bool = False
    encoding: str = DEFAULT_ENCODING
    chunk_size: int = DEFAULT_CHUNK_SIZE
    min_year: Optional[int] = None
    tenure: Optional[Tenure] = None
    excluded_property_types: Set[PropertyType] = field(default_factory=set)
    region_file: Optional[str] = None
    region_prefixes: List[str] = field(default_factory=list)
    track_addresses: bool = False
    band_min: int = DEFAULT_BAND_MIN
    band_max: int = DEFAULT_BAND_MAX

    @classmethod
    def from_env(cls, environ=None) -> 'Settings':
        """
        Build settings from environment variables.

        Raises:
            ConfigError: If any variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        try:
            settings = cls(
                input_file=to_str(env.get('PPD_INPUT_FILE'), default=DEFAULT_INPUT_FILE),
                output_file=to_str(env.get('PPD_OUTPUT_FILE'), default=DEFAULT_OUTPUT_FILE),
                has_header=to_bool(env.get('PPD_HAS_HEADER'), field='PPD_HAS_HEADER'),
                encoding=to_str(env.get('PPD_ENCODING'), default=DEFAULT_ENCODING),
                chunk_size=to_int(env.get('PPD_CHUNK_SIZE'), default=DEFAULT_CHUNK_SIZE,
                                  field='PPD_CHUNK_SIZE'),
                min_year=to_int(env.get('PPD_MIN_YEAR'), field='PPD_MIN_YEAR'),
                tenure=to_enum(env.get('PPD_TENURE'), Tenure, field='PPD_TENURE'),
                excluded_property_types={
                    to_enum(name, PropertyType, field='PPD_EXCLUDED_TYPES')
                    for name in to_list(env.get('PPD_EXCLUDED_TYPES'))
                },
                region_file=to_str(env.get('PPD_REGION_FILE')),
                region_prefixes=to_list(env.get('PPD_REGIONS')),
                track_addresses=to_bool(env.get('PPD_TRACK_ADDRESSES'), field='PPD_TRACK_ADDRESSES'),
                band_min=to_int(env.get('PPD_BAND_MIN'), default=DEFAULT_BAND_MIN, field='PPD_BAND_MIN'),
                band_max=to_int(env.get('PPD_BAND_MAX'), default=DEFAULT_BAND_MAX, field='PPD_BAND_MAX'),
            )
        except ValidationError as e:
            raise ConfigError(f"{e.field}: {e}")
        settings.validate()
        return settings

    def with_overrides(self, **overrides) -> 'Settings':
        """Copy with every non-None override applied (CLI options)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        updated = replace(self, **changes)
        updated.validate()
        return updated

    def validate(self):
        try:
            codecs.lookup(self.encoding)
        except LookupError:
            raise ConfigError(f"unknown encoding: {self.encoding}")
        if self.chunk_size <= 0:
            raise ConfigError(f"chunk size must be positive, got {self.chunk_size}")
        if self.band_min > self.band_max:
            raise ConfigError(
                f"price band minimum {self.band_min} exceeds maximum {self.band_max}"
            )

    def price_band(self) -> PriceBand:
        return PriceBand(self.band_min, self.band_max)

    def region_filter(self) -> RegionFilter:
        region = RegionFilter(self.region_prefixes)
        if self.region_file:
            region = RegionFilter.from_file(self.region_file).merged(region)
        return region

    def record_filters(self) -> RecordFilters:
        return RecordFilters(
            min_year=self.min_year,
            tenure=self.tenure,
            excluded_property_types=set(self.excluded_property_types),
            region=self.region_filter(),
        )
