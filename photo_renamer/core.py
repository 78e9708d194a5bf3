import logging
from pathlib import Path
from typing import Dict, Optional

from tqdm import tqdm

from .config import RenamerConfig
from .database.db import DBManager
from .database.ops import Ledger
from .exceptions import UnresolvedFilesError
from .metadata.resolver import TimestampResolver
from .models import CopyStatus, RenameSummary, StemGroup
from .organization.mover import FileCopier
from .reporting import ErrorReport
from .scanning.filesystem import DiskScanner


class RenamerApp:
    def __init__(self, db_path: Path, dry_run: bool = False):
        self.db_path = db_path
        self.dry_run = dry_run
        self.db_manager = DBManager(db_path, read_only=dry_run)

    def rename(self,
               config: RenamerConfig,
               report_dir: Path = Path("."),
               resolver: Optional[TimestampResolver] = None) -> RenameSummary:
        """
        Copies every not-yet-processed in-scope file under the configured
        roots into the output directories, named after its capture time.

        Raises UnresolvedFilesError after all groups have been attempted if
        any file could not be handled.
        """
        logging.info("Beginning media rename operation...")

        with self.db_manager as conn:
            ledger = Ledger(conn)
            scanner = DiskScanner(config.exclusions)
            groups = scanner.collect_groups(Path(p) for p in config.root_paths)

            copier = FileCopier(
                ledger,
                output_dir=Path(config.output_path),
                raw_output_dir=Path(config.raw_output_path),
                dry_run=self.dry_run,
            )
            summary = process_groups(groups, ledger, copier, resolver or TimestampResolver(), report_dir)

        if summary.failed:
            raise UnresolvedFilesError(len(summary.unresolved), summary.report_path)

        logging.info("Rename complete")
        return summary

    def rebase(self, original_root: str, destination_root: str) -> int:
        """Rewrites recorded source paths after the source tree was moved."""
        with self.db_manager as conn:
            count = Ledger(conn).rebase(original_root, destination_root, dry_run=self.dry_run)
        logging.info("Rebase complete")
        return count


def process_groups(groups: Dict[str, StemGroup],
                   ledger: Ledger,
                   copier: FileCopier,
                   resolver: TimestampResolver,
                   report_dir: Path) -> RenameSummary:
    """
    Processes stem groups one at a time. Unresolvable files are collected
    into the error report; filesystem and ledger errors propagate.
    """
    summary = RenameSummary()
    report = ErrorReport()

    for group in tqdm(list(groups.values()), desc="Renaming", unit="stem"):
        members = group.sorted_members()

        # Every member already copied in an earlier run
        if all(ledger.is_processed(m.path) for m in members):
            summary.already_processed += len(members)
            continue

        # A single EXIF date shared by the group is used for raws/movies too
        group_timestamp = resolver.resolve_group(group)

        for media in members:
            if not media.in_scope:
                continue
            if ledger.is_processed(media.path):
                summary.already_processed += 1
                continue

            timestamp = group_timestamp or resolver.resolve_file(media)
            if timestamp is None:
                report.add_unresolved_timestamp(media.path)
                continue

            result = copier.copy_and_record(media, timestamp)
            if result.status is CopyStatus.COPIED:
                summary.copied += 1
            elif result.status is CopyStatus.DRY_RUN:
                summary.dry_run += 1
            else:
                report.add_exhausted_names(media.path)

    if report:
        summary.unresolved = list(report.lines)
        if copier.dry_run:
            report.log_lines()
        else:
            summary.report_path = report.write(report_dir)
        logging.warning(f"Errors found when copying {len(report)} files")

    if summary.copied:
        logging.info(f"Copied {summary.copied} files")
    if summary.dry_run:
        logging.info(f"Would have copied {summary.dry_run} files")

    return summary
