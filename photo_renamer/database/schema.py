"""
Ledger schema definitions.
"""
import sqlite3
import logging


def init_schema(conn: sqlite3.Connection):
    """
    Creates the ledger table if missing.
    Idempotent: safe to run against ledgers written by earlier runs.
    """
    with conn:
        # `checksum` is a placeholder and holds the same normalized path
        conn.execute("""
            CREATE TABLE IF NOT EXISTS files (
                filename TEXT,
                checksum TEXT
            );
        """)
        conn.execute("CREATE UNIQUE INDEX IF NOT EXISTS unique_paths ON files (filename);")

    logging.debug("Ledger schema initialized.")
