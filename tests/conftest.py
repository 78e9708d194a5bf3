import sqlite3
import struct
from pathlib import Path

import pytest
from PIL import Image

from photo_renamer.config import RenamerConfig
from photo_renamer.database.db import DBManager
from photo_renamer.database.ops import Ledger
from photo_renamer.database.schema import init_schema


@pytest.fixture
def conn():
    """Returns an in-memory SQLite connection with the ledger schema initialized."""
    c = sqlite3.connect(":memory:")
    init_schema(c)
    try:
        yield c
    finally:
        c.close()


@pytest.fixture
def ledger(conn):
    """Returns a Ledger attached to the in-memory DB."""
    return Ledger(conn)


@pytest.fixture
def ledger_paths():
    """Returns the recorded source paths, sorted, from a connection or a ledger file."""
    def read(source):
        if isinstance(source, Path):
            with DBManager(source) as c:
                return read(c)
        cur = source.execute("SELECT filename FROM files ORDER BY filename")
        return [row[0] for row in cur.fetchall()]
    return read


@pytest.fixture
def renamer_config(tmp_path):
    """Config with one source root and output dirs outside it."""
    src = tmp_path / "src"
    src.mkdir()
    return RenamerConfig(
        root_paths=[str(src)],
        output_path=str(tmp_path / "out"),
        raw_output_path=str(tmp_path / "out_raw"),
        exclusions=[],
    )


def _exif_block(date_original: str) -> bytes:
    """Minimal little-endian TIFF/EXIF block holding only DateTimeOriginal."""
    value = date_original.encode("ascii") + b"\x00"
    tiff = b"II" + struct.pack("<HI", 42, 8)
    # IFD0 at 8: one entry pointing at the Exif IFD (8 + 18 = 26)
    tiff += struct.pack("<H", 1) + struct.pack("<HHII", 0x8769, 4, 1, 26) + struct.pack("<I", 0)
    # Exif IFD at 26: DateTimeOriginal, string stored at 26 + 18 = 44
    tiff += struct.pack("<H", 1) + struct.pack("<HHII", 0x9003, 2, len(value), 44) + struct.pack("<I", 0)
    tiff += value
    return b"Exif\x00\x00" + tiff


@pytest.fixture
def exif_jpeg():
    """Factory writing a real JPEG whose EXIF carries the given DateTimeOriginal."""
    def make(path, date_original="2021:06:01 10:20:30"):
        path.parent.mkdir(parents=True, exist_ok=True)
        with Image.new("RGB", (8, 8), color="red") as im:
            im.save(path, "JPEG", exif=_exif_block(date_original))
        return path
    return make
