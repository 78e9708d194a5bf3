import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import config
from .config import RenamerConfig
from .core import RenamerApp
from .exceptions import RenamerError


def setup_logging(verbose: bool, log_file: Optional[Path] = None):
    """Sets up logging to the console and, optionally, a file."""
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        prog="photo-renamer",
        description="Copies photos and videos to an output folder with a standardised naming format.",
    )

    p.add_argument("-d", "--db-name", type=Path, default=Path(config.DEFAULT_DB_NAME),
                   help="SQLite file used to store file copy history")
    p.add_argument("-t", "--test-mode", action="store_true",
                   help="Log what would have been done instead of performing the action")
    p.add_argument("-c", "--config", type=Path, default=Path(config.DEFAULT_CONFIG_NAME),
                   help="Settings file (created with defaults if missing)")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file")
    p.add_argument("--report-dir", type=Path, default=Path("."),
                   help="Directory for the error report of unresolved files")

    sub = p.add_subparsers(dest="command", required=True)
    sub.add_parser("rename", help="Rename and copy files as per the config file")

    rebase = sub.add_parser("rebase", help="Update the source file locations in the copy history")
    rebase.add_argument("original_file_root",
                        help="Original root directory of files in the copy history to be changed")
    rebase.add_argument("destination_file_root",
                        help="New root directory to use in the copy history")

    return p.parse_args(argv)


def run(args) -> int:
    app = RenamerApp(args.db_name, dry_run=args.test_mode)

    if args.command == "rebase":
        app.rebase(args.original_file_root, args.destination_file_root)
        return 0

    renamer_config = RenamerConfig.read_or_create(args.config, create=not args.test_mode)
    if renamer_config is None:
        return 0

    app.rename(renamer_config, report_dir=args.report_dir)
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    if args.test_mode:
        logging.info("Running in test mode, no files or history will be changed")

    try:
        return run(args)
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        return 1
    except RenamerError as e:
        logging.error(str(e))
        return 1
    except Exception:
        logging.exception("Fatal error during processing.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
