"""CLI for validating assembled lesson content.

Usage:
    python -m deutschmeister.cli.validate_lessons \
        --report output/validation_report.json \
        --log-level INFO

Runs every catalog lesson through the assembly pipeline for each applicable
purpose track and learning style, prints warnings then errors to stderr and
exits with:
- 0 when no error was recorded
- 1 when at least one error was recorded (or any warning with --strict)
- 2 when the lesson data itself cannot be loaded
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from deutschmeister import config
from deutschmeister.exceptions import LessonEngineError
from deutschmeister.utils.file_io import write_json
from deutschmeister.utils.logging_config import configure_logging
from deutschmeister.validators.lesson_validator import validate_lessons
from deutschmeister.validators.schema import ValidationFinding

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_DATA_ERROR = 2


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Validate personalized lesson content across purposes and styles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate the bundled lessons
  python -m deutschmeister.cli.validate_lessons

  # Write a JSON report and fail on warnings too
  python -m deutschmeister.cli.validate_lessons \\
      --report output/validation_report.json --strict

  # Structured logs for CI, no progress bars
  deutschmeister-validate --json-logs --no-progress
        """,
    )

    parser.add_argument(
        "--report",
        type=Path,
        help="Write the full validation report as JSON to this path",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat warnings as errors for the exit code",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=config.LOG_LEVEL.upper(),
        help=f"Logging level (default: {config.LOG_LEVEL.upper()})",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        default=config.LOG_FORMAT == "json",
        help="Emit structured JSON log records",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable progress bars",
    )

    return parser.parse_args(argv)


def print_findings(title: str, findings: List[ValidationFinding]) -> None:
    if not findings:
        return
    print(title, file=sys.stderr)
    for finding in findings:
        print(f"- {finding}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)

    configure_logging(
        level=getattr(logging, args.log_level),
        json_format=args.json_logs,
        console_output=True,
    )

    logger.info("=" * 80)
    logger.info("Lesson Validation")
    logger.info("=" * 80)
    logger.info(f"Data directory: {config.DATA_DIR}")
    logger.info(f"Strict: {args.strict}")
    if args.report:
        logger.info(f"Report: {args.report}")
    logger.info("=" * 80)

    try:
        report = validate_lessons(show_progress=not args.no_progress)
    except LessonEngineError as e:
        logger.error(f"Cannot load lesson data: {e}")
        return EXIT_DATA_ERROR

    print_findings("Lesson validation warnings:", report.warnings)
    print_findings("Lesson validation errors:", report.errors)

    if args.report:
        write_json(
            {**report.model_dump(mode="json"), "passed": report.passed}, args.report
        )
        logger.info(f"Wrote report: {args.report}")

    logger.info("=" * 80)
    logger.info("VALIDATION SUMMARY")
    logger.info("=" * 80)
    logger.info(f"Lessons checked: {report.lessons_checked}")
    logger.info(f"Combinations checked: {report.combinations_checked}")
    logger.info(f"Errors: {len(report.errors)}")
    logger.info(f"Warnings: {len(report.warnings)}")
    logger.info("=" * 80)

    if not report.passed or (args.strict and report.warnings):
        return EXIT_FINDINGS

    print("Lesson validation passed.")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
