#!/usr/bin/env python3
"""
CLI for the Price Paid yearly trend reports

Commands:
    report  - Aggregate a Price Paid CSV into per-year postcode buckets (JSON)
    check   - Validate a written report and print its coverage

Usage:
    ppd-trends report --file pp-complete.csv
    ppd-trends report -f pp-2023.csv -o london.json --region-file regions/london.txt
    ppd-trends check data.json

Examples:
    # Freehold houses only, from 2010, keeping records priced 300k-800k
    ppd-trends report --tenure Freehold --exclude-type Flat --exclude-type Other \\
        --min-year 2010 --track-addresses

    # Restrict to two postcode areas
    ppd-trends report --region SW --region SE
"""

import logging
import sys

import click

from ppd_trends import __version__
from ppd_trends.config import Settings
from ppd_trends.constants import DEFAULT_INPUT_FILE, PropertyType, Tenure
from ppd_trends.exceptions import PipelineError
from ppd_trends.services.pipeline import run_pipeline
from ppd_trends.services.report_writer import verify_report
from ppd_trends.utils.normalize import to_enum


def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )


@click.group()
@click.version_option(version=__version__, prog_name="ppd-trends")
def cli():
    """Price Paid Data trends - yearly price buckets per postcode."""
    pass


@cli.command("report")
@click.option("--file", "-f", "input_file", default=None,
              help=f"Price Paid CSV to read (default: {DEFAULT_INPUT_FILE})")
@click.option("--output", "-o", "output_file", default=None, help="Report destination (default: data.json)")
@click.option("--min-year", type=int, default=None, help="Drop transfers before this year")
@click.option("--tenure", type=click.Choice([t.value for t in Tenure], case_sensitive=False),
              default=None, help="Keep only one tenure")
@click.option("--exclude-type", "excluded_types", multiple=True,
              type=click.Choice([t.value for t in PropertyType], case_sensitive=False),
              help="Property type to drop (repeatable)")
@click.option("--region-file", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Outcode allow-list file")
@click.option("--region", "regions", multiple=True, help="Outcode or postcode area to keep (repeatable)")
@click.option("--track-addresses/--no-track-addresses", default=None,
              help="Emit in-band records under each bucket")
@click.option("--band-min", type=int, default=None, help="Lower bound of the retained-record band")
@click.option("--band-max", type=int, default=None, help="Upper bound of the retained-record band")
@click.option("--has-header/--no-header", default=None, help="Input CSV starts with a header row")
@click.option("--encoding", default=None, help="Text encoding of the input CSV (default: utf-8)")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
def report(input_file, output_file, min_year, tenure, excluded_types, region_file, regions,
           track_addresses, band_min, band_max, has_header, encoding, verbose):
    """
    Aggregate a Price Paid CSV into one JSON object per year.

    Each year maps postcode outcodes to count, median and price range per
    property type and age.
    """
    configure_logging(verbose)

    try:
        settings = Settings.from_env().with_overrides(
            input_file=input_file,
            output_file=output_file,
            min_year=min_year,
            tenure=to_enum(tenure, Tenure),
            excluded_property_types={to_enum(t, PropertyType) for t in excluded_types} or None,
            region_file=region_file,
            region_prefixes=list(regions) or None,
            track_addresses=track_addresses,
            band_min=band_min,
            band_max=band_max,
            has_header=has_header,
            encoding=encoding,
        )
    except PipelineError as e:
        click.secho(f"Error: {e}", fg="red")
        sys.exit(1)

    click.echo(f"Input:  {settings.input_file}")
    click.echo(f"Output: {settings.output_file}")
    click.echo()

    try:
        ctx = run_pipeline(settings)
    except PipelineError as e:
        click.secho(f"Error: {e}", fg="red")
        sys.exit(1)
    except OSError as e:
        click.secho(f"I/O error: {e}", fg="red")
        sys.exit(1)

    click.echo("=" * 60)
    click.secho("RUN SUMMARY", fg="cyan", bold=True)
    click.echo("=" * 60)
    click.echo(ctx.summary())


@cli.command("check")
@click.argument("report_path", type=click.Path(exists=True, dir_okay=False))
def check(report_path):
    """
    Validate a written report.

    REPORT_PATH: JSON file produced by the report command
    """
    try:
        summary = verify_report(report_path)
    except ValueError as e:
        click.secho(f"Invalid report: {e}", fg="red")
        sys.exit(1)

    years = summary['years']
    click.secho("Report OK", fg="green", bold=True)
    if years:
        click.echo(f"  Years:     {years[0]}-{years[-1]} ({len(years)} reports)")
    else:
        click.echo("  Years:     none")
    click.echo(f"  Postcodes: {summary['postcodes']}")
    click.echo(f"  Buckets:   {summary['buckets']}")
    click.echo(f"  Records:   {summary['records']}")


def main():
    cli()


if __name__ == "__main__":
    main()
