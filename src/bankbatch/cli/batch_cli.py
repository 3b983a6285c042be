"""
Command-line interface for batch processing.

Usage:
    python -m bankbatch.cli.batch_cli process --input <file.csv> [<file.csv> ...] --output-dir <dir> [options]
"""

import argparse
import sys
from pathlib import Path

from bankbatch.batch.pipeline import RecordPipeline
from bankbatch.batch.readers import CSVRowReader
from bankbatch.batch.writers import CSVExportWriter
from bankbatch.core.banks import default_bank_registry, load_bank_registry
from bankbatch.core.errors import ExportGateError, IngestionError
from bankbatch.core.rules import RuleConfigLoader, RuleEngine
from bankbatch.observability.logger import get_logger

logger = get_logger(__name__)


def build_pipeline(args) -> RecordPipeline:
    """
    Create the pipeline from command-line options.

    Args:
        args: Command-line arguments

    Returns:
        RecordPipeline
    """
    registry = load_bank_registry(args.registry) if args.registry else default_bank_registry()

    if args.validation_rules:
        rule_engine = RuleEngine(RuleConfigLoader(args.validation_rules).load_rules())
    else:
        rule_engine = RuleEngine.default()

    return RecordPipeline(registry=registry, rule_engine=rule_engine)


def process_command(args) -> int:
    """
    Execute batch processing command.

    Args:
        args: Command-line arguments

    Returns:
        Process exit code
    """
    logger.info(f"Input files: {', '.join(args.input)}")

    try:
        pipeline = build_pipeline(args)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    reader = CSVRowReader(delimiter=args.delimiter)
    try:
        sources = [reader.read(path) for path in args.input]
        pipeline.load(sources, source_name="cli")
    except IngestionError as e:
        logger.error(f"Ingestion failed: {e}")
        return 1

    for line in pipeline.validation_error_details():
        logger.warning(line)
    for line in pipeline.duplicate_details():
        logger.warning(line)

    if args.remove_duplicates:
        pipeline.remove_duplicates()

    summary = pipeline.summary()
    logger.info("=" * 60)
    logger.info("PROCESSING COMPLETE")
    logger.info("=" * 60)
    logger.info(f"Total records: {summary['total_records']}")
    logger.info(f"Records with validation errors: {summary['invalid_records']}")
    logger.info(f"Duplicate records: {summary['duplicate_records']}")
    logger.info("=" * 60)

    try:
        tables = pipeline.export_tables()
    except ExportGateError as e:
        logger.error(str(e))
        return 1

    for table in tables:
        logger.info(f"{table.bank_name}: {table.record_count} records")

    if args.dry_run:
        logger.info("DRY RUN: No files were written")
        return 0

    paths = CSVExportWriter(args.output_dir).write_all(tables)
    logger.info(f"Wrote {len(paths)} file(s) to {Path(args.output_dir)}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Validate, de-duplicate and split bank transfer batches by bank",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate two sheets and write one CSV per bank
  python -m bankbatch.cli.batch_cli process --input january.csv extra.csv --output-dir out

  # Drop flagged duplicates before exporting
  python -m bankbatch.cli.batch_cli process --input january.csv --output-dir out --remove-duplicates

  # Custom registry, validate only
  python -m bankbatch.cli.batch_cli process --input january.csv --registry config/banks.yaml --dry-run
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    process_parser = subparsers.add_parser("process", help="Process transfer sheets")
    process_parser.add_argument(
        "--input",
        required=True,
        nargs="+",
        help="CSV exports of the source sheets, header row first"
    )
    process_parser.add_argument(
        "--output-dir",
        default="export",
        help="Directory for the per-bank files (default: export)"
    )
    process_parser.add_argument(
        "--registry",
        default=None,
        help="Bank registry YAML file (default: packaged registry)"
    )
    process_parser.add_argument(
        "--validation-rules",
        default=None,
        help="Validation rules YAML file (default: packaged validation_rules.yaml)"
    )
    process_parser.add_argument(
        "--delimiter",
        default=",",
        help="CSV delimiter (default: ,)"
    )
    process_parser.add_argument(
        "--remove-duplicates",
        action="store_true",
        help="Drop every flagged duplicate before export"
    )
    process_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate and group without writing files"
    )

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "process":
        return process_command(args)
    return 1


if __name__ == "__main__":
    sys.exit(main())
