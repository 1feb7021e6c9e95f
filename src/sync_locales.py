"""
Command-line entry point for synchronizing locale documents with the reference.

Usage:
    locale-sync            # audit every locale, remove extraneous keys
    locale-sync --fix      # ... and add missing keys with a placeholder
    locale-sync de         # report missing keys for de.json only
    locale-sync de --fix   # ... and add them
"""
import argparse
import logging
import os
import sys
from typing import List, Optional

from src.app_config import load_app_config
from src.document_store import LocaleSyncError
from src.locale_sync import load_reference, run_all_locales, run_single_locale
from src.logging_config import LOGGER_NAME
from src.report import Painter, render_audit_report, render_single_locale_report


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='locale-sync',
        description="Synchronize translation documents with the reference locale."
    )
    parser.add_argument(
        'locale', nargs='?',
        help="Locale to check (e.g. 'de' or 'de.json'). Without it, every locale is synchronized."
    )
    parser.add_argument(
        '--fix', action='store_true',
        help="Add missing keys using the reference text wrapped in a placeholder marker."
    )
    parser.add_argument(
        '--dry-run', action='store_true',
        help="Report what would change without writing any file."
    )
    parser.add_argument('--no-color', action='store_true', help="Disable colored output.")
    parser.add_argument('--locales-dir', help="Directory holding the locale documents.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the synchronizer and return the process exit status.

    Returns 1 when the run was aborted by a missing or unreadable document or a
    failed write, 0 otherwise (including when nothing needed to change).
    """
    args = parse_args(argv)
    config = load_app_config()
    logger = logging.getLogger(LOGGER_NAME)

    if args.locales_dir:
        config.locales_directory = os.path.abspath(args.locales_dir)
    if args.no_color or not sys.stdout.isatty():
        config.use_color = False

    paint = Painter(config.palette, enabled=config.use_color)

    try:
        _, reference_flat = load_reference(config)

        if args.locale:
            report = run_single_locale(args.locale, reference_flat, config, fix=args.fix, dry_run=args.dry_run)
            print(render_single_locale_report(
                report, config.reference_file_name, paint, fix=args.fix, dry_run=args.dry_run
            ))
        else:
            result = run_all_locales(reference_flat, config, fix=args.fix, dry_run=args.dry_run)
            print(render_audit_report(
                result, config.reference_file_name, paint, fix=args.fix, dry_run=args.dry_run
            ))
    except LocaleSyncError as sync_exc:
        logger.error("Aborting: %s", sync_exc)
        print(paint('red', f"Error: {sync_exc}"), file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
