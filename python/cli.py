#!/usr/bin/env python3
"""
Command-line front end for the bulk entry converter

Usage:
    bulk-entry template rows.csv
    bulk-entry generate rows.csv --mode create --profile rel [--stdout] [--check-schema]
    bulk-entry validate rows.csv --mode update
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from config_manager import ConfigManager, ConfigurationError
from csv_io import CsvImportError, import_rows, write_template
from log_utils import setup_logging
from output_schema import validate_document
from session import EntrySession
from transform.assembler import PROFILE_TYPES
from transform.classifier import MODES

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bulk-entry",
        description="Convert bulk entry rows (CSV) into the individuals JSON document"
    )
    parser.add_argument("--config", help="Path to config.yaml")
    parser.add_argument("--log-level", help="Override the configured log level (DEBUG, INFO, ...)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    template = subparsers.add_parser("template", help="Write the header-only CSV template")
    template.add_argument("output", help="Destination CSV path")

    generate = subparsers.add_parser("generate", help="Generate the JSON document from a CSV file")
    generate.add_argument("input", help="Source CSV path")
    generate.add_argument("--mode", choices=MODES, help="create or update (config default if omitted)")
    generate.add_argument("--profile", choices=PROFILE_TYPES, help="rel or pep (config default if omitted)")
    target = generate.add_mutually_exclusive_group()
    target.add_argument("--output-dir", help="Directory for the exported JSON file")
    target.add_argument("--stdout", action="store_true", help="Print the JSON instead of writing a file")
    generate.add_argument("--check-schema", action="store_true",
                          help="Check the generated document against the output schema")

    validate = subparsers.add_parser("validate", help="Print the advisory validation report")
    validate.add_argument("input", help="Source CSV path")
    validate.add_argument("--mode", choices=MODES, help="create or update (config default if omitted)")

    return parser


def _load_session(args, config: ConfigManager) -> EntrySession:
    session = EntrySession(config=config, mode=args.mode,
                           profile_type=getattr(args, "profile", None))
    session.load_rows(import_rows(args.input))
    return session


def _run_generate(args, config: ConfigManager) -> int:
    session = _load_session(args, config)

    report = session.validate()
    for issue in report.issues:
        logger.warning("Row %d, %s: %s", issue.row_index, issue.field, issue.message)

    if args.stdout:
        print(session.generate())
    else:
        path = session.export(args.output_dir)
        print(path)

    if args.check_schema:
        try:
            validate_document(session.rendered_document)
        except ValidationError as e:
            logger.error(f"Generated document does not match the output schema:\n{e}")
            return 2
        logger.info("✓ Output schema check passed")
    return 0


def _run_validate(args, config: ConfigManager) -> int:
    session = _load_session(args, config)
    print(json.dumps(session.validate().to_dict(), indent=config.output.indent, ensure_ascii=False))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit status"""
    args = build_parser().parse_args(argv)

    try:
        config = ConfigManager.create(args.config)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging, args.log_level)

    try:
        if args.command == "template":
            print(write_template(Path(args.output)))
            return 0
        if args.command == "generate":
            return _run_generate(args, config)
        return _run_validate(args, config)
    except (FileNotFoundError, CsvImportError) as e:
        logger.error(f"Cannot read input: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
