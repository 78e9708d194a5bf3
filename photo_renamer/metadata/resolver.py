import logging
from datetime import datetime
from typing import Optional, Sequence, Set

from ..models import MediaFile, StemGroup
from .extract import (TimestampStrategy, exif_timestamp, filename_timestamp,
                      modified_timestamp)


class TimestampResolver:
    """
    Picks the capture timestamp used to name output files.

    Group mode: if the EXIF dates of all members of a stem group agree on
    exactly one value, every member (raws and movies included) uses it.
    Otherwise each file goes through the per-file chain: EXIF, then a
    timestamp embedded in the filename, then the modified time.
    """

    def __init__(self,
                 exif_reader: TimestampStrategy = exif_timestamp,
                 fallbacks: Sequence[TimestampStrategy] = (filename_timestamp, modified_timestamp)):
        self.exif_reader = exif_reader
        self.strategies = [exif_reader, *fallbacks]

    def resolve_group(self, group: StemGroup) -> Optional[datetime]:
        dates: Set[datetime] = set()
        for media in group.members:
            dt = self.exif_reader(media)
            if dt is not None:
                dates.add(dt)

        if len(dates) == 1:
            return next(iter(dates))

        if len(dates) > 1:
            logging.debug(f"Conflicting EXIF dates for stem {group.stem}, resolving files individually")
        return None

    def resolve_file(self, media: MediaFile) -> Optional[datetime]:
        for strategy in self.strategies:
            dt = strategy(media)
            if dt is not None:
                logging.debug(f"{media.path}: {dt} from {getattr(strategy, '__name__', strategy)}")
                return dt
        return None
