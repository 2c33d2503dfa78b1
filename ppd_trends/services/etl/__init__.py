"""
ETL Services Package

Run bookkeeping for a report run:
- RunContext: Unified context for pipeline runs
- Fingerprinting: input file hashing for run reproducibility
"""

from .run_context import RunContext, create_run_context
from .fingerprint import compute_file_sha256

__all__ = [
    'RunContext',
    'create_run_context',
    'compute_file_sha256',
]
