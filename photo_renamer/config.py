"""
Configuration constants and the on-disk renamer settings file.
"""
import logging
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List, Optional

import tomli_w

from .exceptions import ConfigError

# --- File Type Definitions ---
IMAGE_EXTS = {'.jpg', '.jpeg', '.tif', '.tiff'}
RAW_EXTS = {'.dng', '.rw2', '.raw', '.cr2', '.cr3', '.nef', '.arw', '.orf'}
MOVIE_EXTS = {'.mp4', '.avi', '.mpg', '.mpeg', '.mov', '.m4v', '.mts', '.3gp'}

# --- Metadata Parsing ---
EXIF_DATE_TAG = 'EXIF DateTimeOriginal'
EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"

# 8-digit date, optional separator, 6-digit time (IMG_20230115_142233)
FILENAME_TIMESTAMP_PATTERN = r'(\d{8})[-_]?(\d{6})'
FILENAME_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"

# --- Naming ---
OUTPUT_NAME_FORMAT = "%Y%m%d_%H%M%S"
MAX_NAME_ATTEMPTS = 99  # counters 0..98
LIVE_PHOTO_SEGMENT = "mp"
LIVE_PHOTO_STEM_PREFIX = "mvimg"

# --- Files ---
DEFAULT_DB_NAME = "renamer.db"
DEFAULT_CONFIG_NAME = "renamer.toml"
ERROR_REPORT_PATTERN = "%Y%m%d_%H%M%S_errors.log"

CONFIG_HEADER = """\
# root_paths: which paths will be searched for images and videos
# output_path: where non-RAW results will be written out to
# raw_output_path: where RAW results will be written out to
# exclusions: path fragments to exclude from processing
"""


@dataclass
class RenamerConfig:
    """
    User-editable settings, stored as TOML next to the ledger.
    """
    # Which paths will be searched for images and videos
    root_paths: List[str] = field(default_factory=lambda: ["."])
    # Where non-RAW results are written
    output_path: str = str(Path(".") / "output")
    # Where RAW results are written
    raw_output_path: str = str(Path(".") / "output_raw")
    # Path fragments to exclude from processing
    exclusions: List[str] = field(default_factory=lambda: ["exclusions", "output"])

    @classmethod
    def from_dict(cls, data: dict) -> "RenamerConfig":
        try:
            root_paths = data["root_paths"]
            output_path = data["output_path"]
            raw_output_path = data["raw_output_path"]
            exclusions = data["exclusions"]
        except KeyError as e:
            raise ConfigError(f"Missing config setting: {e.args[0]}") from e

        for name, value in (("root_paths", root_paths), ("exclusions", exclusions)):
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigError(f"Config setting '{name}' must be a list of strings")
        for name, value in (("output_path", output_path), ("raw_output_path", raw_output_path)):
            if not isinstance(value, str):
                raise ConfigError(f"Config setting '{name}' must be a string")

        return cls(
            root_paths=list(root_paths),
            output_path=output_path,
            raw_output_path=raw_output_path,
            exclusions=list(exclusions),
        )

    def to_toml(self) -> str:
        return CONFIG_HEADER + tomli_w.dumps(asdict(self))

    @classmethod
    def load(cls, path: Path) -> "RenamerConfig":
        try:
            with path.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file {path}: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def read_or_create(cls,
                       path: Path = Path(DEFAULT_CONFIG_NAME),
                       create: bool = True) -> Optional["RenamerConfig"]:
        """
        Loads the config file, or writes a default one and returns None
        so the caller can stop and let the user edit it first.
        With create=False a missing file is only reported.
        """
        if path.exists():
            return cls.load(path)

        if not create:
            logging.warning(f"Config file {path} not found, run without test mode to create it.")
            return None

        path.write_text(cls().to_toml(), encoding="utf-8")
        logging.info(f"New config file {path} created, please edit settings and re-run to begin renaming.")
        return None
