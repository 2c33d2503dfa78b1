from .record import Record, PriceSample, compose_address, outcode_of
from .report import PriceBucket, YearlyReport

__all__ = [
    'Record',
    'PriceSample',
    'compose_address',
    'outcode_of',
    'PriceBucket',
    'YearlyReport',
]
