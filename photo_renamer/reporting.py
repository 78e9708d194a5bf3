import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from . import config


class ErrorReport:
    """
    Collects files a run could not handle; written out once at the end.
    """

    def __init__(self):
        self.lines: List[str] = []

    def add_unresolved_timestamp(self, path: Path):
        self.lines.append(f"Unable to determine valid datetime for {path}")

    def add_exhausted_names(self, path: Path):
        self.lines.append(f"Unable to find free output name for {path}")

    def __len__(self) -> int:
        return len(self.lines)

    def __bool__(self) -> bool:
        return bool(self.lines)

    def write(self, report_dir: Path, now: Optional[datetime] = None) -> Path:
        """Writes <report_dir>/YYYYmmdd_HHMMSS_errors.log and returns its path."""
        now = now or datetime.now()
        report_path = report_dir / now.strftime(config.ERROR_REPORT_PATTERN)
        report_path.write_text("\n".join(self.lines), encoding="utf-8")
        return report_path

    def log_lines(self):
        for line in self.lines:
            logging.warning(line)
