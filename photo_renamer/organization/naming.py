"""
Output filename synthesis.

Names look like YYYYMMDD_HHMMSS[.N][.mp].ext, where N is a counter only
used when the plain name is already taken in the output directory.
"""
from datetime import datetime
from pathlib import Path
from typing import Iterator

from .. import config
from ..models import MediaCategory, MediaFile


def is_live_photo(media: MediaFile) -> bool:
    """True for Motion Photo style names: IMG_x.MP.jpg or MVIMG_x.jpg."""
    segments = media.path.name.lower().split('.')
    has_mp_tag = config.LIVE_PHOTO_SEGMENT in segments[1:-1]
    is_mvimg = media.stem.lower().startswith(config.LIVE_PHOTO_STEM_PREFIX)
    return has_mp_tag or is_mvimg


def build_name(timestamp: datetime, counter: int, live_photo: bool, extension: str) -> str:
    components = [timestamp.strftime(config.OUTPUT_NAME_FORMAT)]
    if counter > 0:
        components.append(str(counter))
    if live_photo:
        components.append(config.LIVE_PHOTO_SEGMENT)
    components.append(extension.lstrip('.').lower())
    return '.'.join(components)


def candidate_names(media: MediaFile,
                    timestamp: datetime,
                    max_attempts: int = config.MAX_NAME_ATTEMPTS) -> Iterator[str]:
    """Yields the candidate names for counters 0 .. max_attempts - 1, in order."""
    live_photo = is_live_photo(media)
    for counter in range(max_attempts):
        yield build_name(timestamp, counter, live_photo, media.path.suffix)


def target_directory(media: MediaFile, output_dir: Path, raw_output_dir: Path) -> Path:
    return raw_output_dir if media.category is MediaCategory.RAW else output_dir
