"""
Report Pipeline - Record Reader -> Ingestion -> Aggregation -> Writer

Pipeline: **Read CSV** -> Filter/Sort -> Aggregate per year -> Stream JSON

The output file is only opened once ingestion has succeeded, and is
replaced atomically, so a failed run never leaves a partial report.
"""

import logging

from ppd_trends.config import Settings
from ppd_trends.exceptions import PipelineError
from ppd_trends.services.aggregation_driver import AggregationDriver
from ppd_trends.services.etl import RunContext, compute_file_sha256, create_run_context
from ppd_trends.services.ingestion import load_sorted_records
from ppd_trends.services.record_reader import read_records
from ppd_trends.services.report_writer import open_report

logger = logging.getLogger(__name__)


def run_pipeline(settings: Settings) -> RunContext:
    """
    Run one report end to end.

    Raises:
        PipelineError: Ingestion, empty-input or config failures
        OSError: Output I/O failures
    """
    ctx = create_run_context(input_file=settings.input_file, output_file=settings.output_file)
    try:
        ctx.mark_stage('loading')
        filters = settings.record_filters()
        records = read_records(
            settings.input_file,
            has_header=settings.has_header,
            chunk_size=settings.chunk_size,
            with_address=settings.track_addresses,
            encoding=settings.encoding,
        )
        sorted_records = load_sorted_records(records, filters, ctx=ctx)
        ctx.input_sha256 = compute_file_sha256(settings.input_file)
        logger.info(f"Loaded {ctx.rows_loaded:,} of {ctx.rows_read:,} records")

        ctx.mark_stage('aggregating')
        with open_report(settings.output_file) as writer:
            driver = AggregationDriver(
                writer.write_report,
                band=settings.price_band(),
                track_addresses=settings.track_addresses,
                ctx=ctx,
            )
            driver.run(sorted_records)
    except (PipelineError, OSError) as e:
        ctx.fail(ctx.status, str(e))
        logger.error(f"Run {ctx.run_id[:8]} failed during {ctx.error_stage}: {e}")
        raise

    ctx.complete()
    ok, _, message = ctx.reconciliation_check()
    if not ok:
        logger.warning(message)
    logger.info(f"Run {ctx.run_id[:8]} completed: {len(ctx.years_emitted)} yearly reports")
    return ctx
