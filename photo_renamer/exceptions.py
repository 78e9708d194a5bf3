"""
Custom exception hierarchy for the photo renamer.

Metadata extraction failures are routine and never surface as exceptions;
everything defined here is fatal for the run except UnresolvedFilesError,
which is raised only after every group has been attempted.
"""
from pathlib import Path
from typing import Optional


class RenamerError(Exception):
    """Base exception for all photo renamer errors."""
    pass


class ConfigError(RenamerError):
    """Raised when the settings file is malformed."""
    pass


class LedgerError(RenamerError):
    """Raised when the processing ledger cannot be queried or updated."""
    pass


class FileOperationError(RenamerError):
    """Raised when a copy or directory creation fails."""
    pass


class UnresolvedFilesError(RenamerError):
    """Raised at the end of a run that could not handle every file."""

    def __init__(self, count: int, report_path: Optional[Path] = None):
        self.count = count
        self.report_path = report_path
        message = f"{count} errors found when renaming files"
        if report_path is not None:
            message += f" (see {report_path})"
        super().__init__(message)
