import sqlite3
import logging
from pathlib import PurePath
from typing import Union

from ..exceptions import LedgerError

PathLike = Union[str, PurePath]


def normalize_path(path: PathLike) -> str:
    """Ledger representation of a path: forward slashes only."""
    return str(path).replace("\\", "/")


def normalize_root(path: PathLike) -> str:
    """
    Ledger representation of a directory root, always ending in a separator
    so that '/data/photos/' cannot match '/data/photos2/...'.
    """
    root = normalize_path(path)
    if not root.endswith("/"):
        root += "/"
    return root


class Ledger:
    """
    Append-only record of source files already copied.
    Identity is the normalized source path.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def is_processed(self, path: PathLike) -> bool:
        try:
            cur = self.conn.execute(
                "SELECT 1 FROM files WHERE filename = ? LIMIT 1", (normalize_path(path),)
            )
            return cur.fetchone() is not None
        except sqlite3.Error as e:
            raise LedgerError(f"Unable to query ledger for {path}: {e}") from e

    def mark_processed(self, path: PathLike):
        """
        Records a copied source. Callers check is_processed() first, so a
        uniqueness violation here means a logic fault and is fatal.
        """
        key = normalize_path(path)
        try:
            with self.conn:
                self.conn.execute("INSERT INTO files VALUES (?, ?)", (key, key))
        except sqlite3.IntegrityError as e:
            raise LedgerError(f"{key} is already recorded in the ledger") from e
        except sqlite3.Error as e:
            raise LedgerError(f"Unable to record {key} in the ledger: {e}") from e

    def count_prefix(self, prefix: str) -> int:
        try:
            cur = self.conn.execute(
                "SELECT COUNT(*) FROM files WHERE substr(filename, 1, length(?)) = ?",
                (prefix, prefix),
            )
            return cur.fetchone()[0]
        except sqlite3.Error as e:
            raise LedgerError(f"Unable to count ledger entries under {prefix}: {e}") from e

    def rebase(self, old_prefix: PathLike, new_prefix: PathLike, dry_run: bool = False) -> int:
        """
        Rewrites the leading `old_prefix` of every recorded path to `new_prefix`.
        Returns the number of matching (dry run) or updated (live) rows.
        """
        source_root = normalize_root(old_prefix)
        dest_root = normalize_root(new_prefix)

        if dry_run:
            count = self.count_prefix(source_root)
            logging.info(f"Would have updated {count} path roots from {source_root} to {dest_root}")
            return count

        try:
            with self.conn:
                cur = self.conn.execute(
                    """
                    UPDATE files
                    SET filename = ? || substr(filename, length(?) + 1)
                    WHERE substr(filename, 1, length(?)) = ?
                    """,
                    (dest_root, source_root, source_root, source_root),
                )
        except sqlite3.IntegrityError as e:
            raise LedgerError(
                f"Rebasing {source_root} to {dest_root} would duplicate existing ledger entries"
            ) from e
        except sqlite3.Error as e:
            raise LedgerError(f"Unable to rebase {source_root} to {dest_root}: {e}") from e

        logging.info(f"Updated path roots from {source_root} to {dest_root} - {cur.rowcount} rows affected")
        return cur.rowcount
