import shutil
import logging
from datetime import datetime
from pathlib import Path
from typing import Set

from .. import config
from ..database.ops import Ledger
from ..exceptions import FileOperationError
from ..models import CopyResult, CopyStatus, MediaFile
from .naming import candidate_names, target_directory


class FileCopier:
    """
    Copies one source file to its first free output name and records it in
    the ledger. Copy and ledger insert are two separate steps: a crash in
    between leaves an output file whose source is not yet recorded.
    """

    def __init__(self,
                 ledger: Ledger,
                 output_dir: Path,
                 raw_output_dir: Path,
                 dry_run: bool = False,
                 max_attempts: int = config.MAX_NAME_ATTEMPTS):
        self.ledger = ledger
        self.output_dir = output_dir
        self.raw_output_dir = raw_output_dir
        self.dry_run = dry_run
        self.max_attempts = max_attempts
        # Names handed out during a dry run, which never reach the disk
        self._planned: Set[Path] = set()

    def copy_and_record(self, media: MediaFile, timestamp: datetime) -> CopyResult:
        folder = target_directory(media, self.output_dir, self.raw_output_dir)

        for name in candidate_names(media, timestamp, self.max_attempts):
            dest = folder / name
            if dest.exists() or dest in self._planned:
                continue

            if self.dry_run:
                self._planned.add(dest)
                logging.info(f"[DRY RUN] Copy {media.path} -> {dest}")
                return CopyResult(CopyStatus.DRY_RUN, media.path, dest)

            try:
                folder.mkdir(parents=True, exist_ok=True)
                shutil.copy2(str(media.path), str(dest))
            except OSError as e:
                raise FileOperationError(f"Failed to copy {media.path} -> {dest}: {e}") from e

            self.ledger.mark_processed(media.path)
            logging.debug(f"Copied {media.path} -> {dest}")
            return CopyResult(CopyStatus.COPIED, media.path, dest)

        logging.warning(f"No free output name for {media.path} after {self.max_attempts} attempts")
        return CopyResult(CopyStatus.EXHAUSTED, media.path)
