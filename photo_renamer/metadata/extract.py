"""
Timestamp sources, one function per tier.

Each takes a MediaFile and returns a naive local datetime, or None when the
source has nothing usable. Failures are routine (most raws and movies carry
no readable EXIF) and are never raised to the caller.
"""
import logging
import re
from datetime import datetime
from typing import Callable, Optional

import exifread

from .. import config
from ..models import MediaFile

TimestampStrategy = Callable[[MediaFile], Optional[datetime]]

_filename_regex = re.compile(config.FILENAME_TIMESTAMP_PATTERN)


def exif_timestamp(media: MediaFile) -> Optional[datetime]:
    """DateTimeOriginal of the primary image, via exifread."""
    try:
        with media.path.open('rb') as f:
            # details=False skips makernotes, which we never need
            tags = exifread.process_file(f, details=False)
    except Exception as e:
        logging.debug(f"ExifRead failed for {media.path}: {e}")
        return None

    if config.EXIF_DATE_TAG not in tags:
        logging.debug(f"DateTimeOriginal field not available for {media.path}")
        return None

    raw = str(tags[config.EXIF_DATE_TAG]).strip()
    try:
        return datetime.strptime(raw, config.EXIF_DATE_FORMAT)
    except ValueError:
        logging.debug(f"Unparseable DateTimeOriginal {raw!r} in {media.path}")
        return None


def filename_timestamp(media: MediaFile) -> Optional[datetime]:
    """First YYYYMMDD[-_]HHMMSS run in the stem, e.g. IMG_20230115_142233."""
    match = _filename_regex.search(media.stem)
    if not match:
        return None
    try:
        return datetime.strptime(match.group(1) + match.group(2), config.FILENAME_TIMESTAMP_FORMAT)
    except ValueError:
        return None


def modified_timestamp(media: MediaFile) -> Optional[datetime]:
    """Filesystem mtime in local time."""
    try:
        return datetime.fromtimestamp(media.path.stat().st_mtime)
    except (OSError, OverflowError, ValueError) as e:
        logging.debug(f"Unable to read modified time of {media.path}: {e}")
        return None
