import os
import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional

from ..exceptions import FileOperationError
from ..models import MediaCategory, MediaFile, StemGroup


def is_hidden(name: str) -> bool:
    return name.startswith(".")


class DiskScanner:
    """
    Walks the configured roots and groups in-scope media by filename stem.
    """

    def __init__(self, exclusions: Optional[Iterable[str]] = None):
        self.exclusions = list(exclusions or [])

    def collect_groups(self, roots: Iterable[Path]) -> Dict[str, StemGroup]:
        """
        Returns {stem: StemGroup}. Files sharing a stem under different
        roots end up in the same group.
        """
        logging.info("Determining in-scope filenames")
        groups: Dict[str, StemGroup] = {}

        for root in roots:
            root = Path(root).resolve()
            if not root.is_dir():
                raise FileOperationError(f"Search root {root} does not exist or is not a directory")
            for path in self._iter_files(root):
                media = MediaFile.from_path(path)
                if media.category is MediaCategory.UNSUPPORTED:
                    continue
                if self._is_excluded(path):
                    logging.debug(f"Excluded: {path}")
                    continue
                groups.setdefault(media.stem, StemGroup(media.stem)).add(media)

        logging.info(f"Found {len(groups)} unique file stems")
        return groups

    def _is_excluded(self, path: Path) -> bool:
        path_str = str(path)
        return any(fragment in path_str for fragment in self.exclusions)

    def _iter_files(self, root: Path) -> Iterator[Path]:
        """Depth-first walker using os.scandir, skipping hidden entries."""
        stack = [root]
        while stack:
            current = stack.pop()

            try:
                with os.scandir(current) as it:
                    entries = list(it)
            except OSError as e:
                raise FileOperationError(f"Unable to read directory {current}: {e}") from e

            # Sort for stable traversal order
            entries.sort(key=lambda e: e.name.lower())

            dirs = []
            for e in entries:
                if is_hidden(e.name):
                    continue
                if e.is_dir(follow_symlinks=False):
                    dirs.append(Path(e.path))
                elif e.is_file():
                    yield Path(e.path)

            # Reversed so we process A before Z
            for d in reversed(dirs):
                stack.append(d)
