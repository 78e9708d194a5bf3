from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Set

from . import config


class MediaCategory(str, Enum):
    IMAGE = 'image'
    RAW = 'raw'
    MOVIE = 'movie'
    UNSUPPORTED = 'unsupported'

    @classmethod
    def for_path(cls, path: Path) -> "MediaCategory":
        ext = path.suffix.lower()
        if ext in config.IMAGE_EXTS:
            return cls.IMAGE
        if ext in config.RAW_EXTS:
            return cls.RAW
        if ext in config.MOVIE_EXTS:
            return cls.MOVIE
        return cls.UNSUPPORTED


@dataclass(frozen=True)
class MediaFile:
    """
    A discovered source file. `path` is absolute.
    """
    path: Path
    category: MediaCategory
    stem: str

    @classmethod
    def from_path(cls, path: Path) -> "MediaFile":
        return cls(path=path, category=MediaCategory.for_path(path), stem=path.stem)

    @property
    def in_scope(self) -> bool:
        return self.category is not MediaCategory.UNSUPPORTED


@dataclass
class StemGroup:
    """
    All in-scope files sharing a stem, across every configured root.
    """
    stem: str
    members: Set[MediaFile] = field(default_factory=set)

    def add(self, media: MediaFile):
        self.members.add(media)

    def sorted_members(self) -> List[MediaFile]:
        return sorted(self.members, key=lambda m: str(m.path))

    def __len__(self) -> int:
        return len(self.members)


class CopyStatus(str, Enum):
    COPIED = 'copied'
    DRY_RUN = 'dry_run'
    EXHAUSTED = 'exhausted'  # every candidate name was taken


@dataclass
class CopyResult:
    status: CopyStatus
    source: Path
    target: Optional[Path] = None


@dataclass
class RenameSummary:
    copied: int = 0
    dry_run: int = 0
    already_processed: int = 0
    unresolved: List[str] = field(default_factory=list)
    report_path: Optional[Path] = None

    @property
    def failed(self) -> bool:
        return bool(self.unresolved)
