"""
ETL Run Context

Unified context object for report runs.
Prevents "threading parameters everywhere" and keeps the pipeline consistent.

Usage:
    ctx = create_run_context(input_file="pp-complete.csv")

    # During processing
    ctx.rows_read += 1
    ctx.add_rejection("tenure")

    # After completion
    ctx.complete()
    print(ctx.summary())
"""
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
from uuid import uuid4


@dataclass
class RunContext:
    """
    Shared context across all pipeline stages.

    Passed from ingestion through aggregation to the writer,
    accumulating counts as each stage completes.
    """

    run_id: str = field(default_factory=lambda: str(uuid4()))

    input_file: str = ""
    output_file: str = ""
    input_sha256: str = ""

    started_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    # loading | aggregating | completed | failed
    status: str = "loading"

    # Source reconciliation: rows_read = rows_loaded + sum(rejections)
    rows_read: int = 0
    rows_loaded: int = 0
    rejections: Counter = field(default_factory=Counter)

    years_emitted: List[int] = field(default_factory=list)
    buckets_emitted: int = 0

    error_message: Optional[str] = None
    error_stage: Optional[str] = None

    def mark_stage(self, stage: str):
        """Update status to current stage."""
        self.status = stage

    def add_rejection(self, reason: str):
        self.rejections[reason] += 1

    @property
    def rows_rejected(self) -> int:
        return sum(self.rejections.values())

    def record_year(self, year: int, bucket_count: int):
        self.years_emitted.append(year)
        self.buckets_emitted += bucket_count

    def fail(self, stage: str, message: str):
        """Mark the run as failed."""
        self.status = 'failed'
        self.error_stage = stage
        self.error_message = message
        self.completed_at = datetime.now()

    def complete(self):
        """Mark the run as completed."""
        self.status = 'completed'
        self.completed_at = datetime.now()

    def reconciliation_check(self) -> tuple:
        """
        Check that every row read was either loaded or rejected.

        Returns:
            (is_ok, unaccounted, message)
        """
        unaccounted = self.rows_read - self.rows_loaded - self.rows_rejected
        if unaccounted == 0:
            return (True, 0, "OK: all rows accounted for")
        return (False, unaccounted, f"MISMATCH: {unaccounted} rows unaccounted")

    def summary(self) -> str:
        """Get human-readable summary of the run."""
        elapsed = (self.completed_at or datetime.now()) - self.started_at
        lines = [
            f"Run ID: {self.run_id[:8]}...",
            f"Status: {self.status}",
            f"Input: {self.input_file}",
            f"Rows: read={self.rows_read}, loaded={self.rows_loaded}, "
            f"rejected={self.rows_rejected}",
        ]
        for reason, count in sorted(self.rejections.items()):
            lines.append(f"  - {reason}: {count}")
        if self.years_emitted:
            lines.append(
                f"Years: {self.years_emitted[0]}-{self.years_emitted[-1]} "
                f"({len(self.years_emitted)} reports, {self.buckets_emitted} buckets)"
            )
        if self.output_file and self.status == 'completed':
            lines.append(f"Output: {self.output_file}")
        lines.append(f"Elapsed: {elapsed.total_seconds():.1f}s")
        if self.error_message:
            lines.append(f"Error: {self.error_stage}: {self.error_message}")
        return '\n'.join(lines)


def create_run_context(input_file: str = "", output_file: str = "") -> RunContext:
    """Factory function to create a new RunContext."""
    return RunContext(input_file=input_file, output_file=output_file)
