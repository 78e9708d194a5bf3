"""
Ledger connection management.
"""
import sqlite3
import logging
from pathlib import Path
from typing import Optional

from ..exceptions import LedgerError
from .schema import init_schema


class DBManager:
    """
    Owns the single ledger connection for the lifetime of a run.

    With read_only=True (test mode) the ledger file is never created or
    written: an existing file is opened read-only, a missing one is replaced
    by an empty in-memory ledger.
    """

    def __init__(self, db_path: Path, read_only: bool = False):
        self.db_path = db_path
        self.read_only = read_only
        self._conn: Optional[sqlite3.Connection] = None

    def connect(self) -> sqlite3.Connection:
        if self._conn:
            return self._conn

        try:
            if not self.read_only:
                logging.info(f"Connecting to ledger: {self.db_path}")
                self._conn = sqlite3.connect(self.db_path)
                self._conn.execute("PRAGMA synchronous=NORMAL;")
                init_schema(self._conn)
            elif self.db_path.exists():
                logging.info(f"Opening ledger read-only: {self.db_path}")
                uri = f"{self.db_path.resolve().as_uri()}?mode=ro"
                self._conn = sqlite3.connect(uri, uri=True)
            else:
                logging.info(f"Ledger {self.db_path} does not exist yet, using an empty one")
                self._conn = sqlite3.connect(":memory:")
                init_schema(self._conn)
        except sqlite3.Error as e:
            self.close()
            raise LedgerError(f"Unable to open ledger {self.db_path}: {e}") from e

        return self._conn

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self):
        return self.connect()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
