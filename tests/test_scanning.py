import os
from pathlib import Path

import pytest

from photo_renamer.exceptions import FileOperationError
from photo_renamer.models import MediaCategory, MediaFile
from photo_renamer.scanning.filesystem import DiskScanner


@pytest.mark.parametrize(
    "name,expected",
    [
        ("photo.JPG", MediaCategory.IMAGE),
        ("photo.jpeg", MediaCategory.IMAGE),
        ("scan.tiff", MediaCategory.IMAGE),
        ("shot.dng", MediaCategory.RAW),
        ("shot.RW2", MediaCategory.RAW),
        ("shot.raw", MediaCategory.RAW),
        ("clip.mp4", MediaCategory.MOVIE),
        ("clip.MOV", MediaCategory.MOVIE),
        ("clip.avi", MediaCategory.MOVIE),
        ("meta.xmp", MediaCategory.UNSUPPORTED),
        ("noext", MediaCategory.UNSUPPORTED),
    ],
)
def test_classify_extension(name, expected):
    assert MediaCategory.for_path(Path(name)) is expected


def test_media_file_stem_drops_only_last_extension():
    media = MediaFile.from_path(Path("/src/PXL_20230101_010101.MP.jpg"))
    assert media.stem == "PXL_20230101_010101.MP"
    assert media.category is MediaCategory.IMAGE


def test_groups_by_stem_across_roots(tmp_path):
    root1 = tmp_path / "card1"
    root2 = tmp_path / "card2"
    (root1 / "day1").mkdir(parents=True)
    root2.mkdir()
    (root1 / "day1" / "IMG_0001.jpg").write_bytes(b"jpg")
    (root2 / "IMG_0001.dng").write_bytes(b"raw")
    (root2 / "IMG_0002.mp4").write_bytes(b"mov")

    groups = DiskScanner().collect_groups([root1, root2])

    assert set(groups) == {"IMG_0001", "IMG_0002"}
    names = {m.path.name for m in groups["IMG_0001"].members}
    assert names == {"IMG_0001.jpg", "IMG_0001.dng"}
    assert all(m.path.is_absolute() for m in groups["IMG_0001"].members)


def test_skips_hidden_unsupported_and_excluded(tmp_path):
    root = tmp_path / "src"
    (root / ".thumbs").mkdir(parents=True)
    (root / "exclusions").mkdir()
    (root / ".thumbs" / "a.jpg").write_bytes(b"x")
    (root / ".b.jpg").write_bytes(b"x")
    (root / "c.txt").write_text("x")
    (root / "exclusions" / "d.jpg").write_bytes(b"x")
    (root / "e.jpg").write_bytes(b"x")

    groups = DiskScanner(exclusions=["exclusions"]).collect_groups([root])

    assert list(groups) == ["e"]


def test_overlapping_roots_do_not_duplicate_members(tmp_path):
    root = tmp_path / "src"
    (root / "sub").mkdir(parents=True)
    (root / "sub" / "a.jpg").write_bytes(b"x")

    groups = DiskScanner().collect_groups([root, root / "sub"])

    assert len(groups["a"]) == 1


def test_relative_roots_are_resolved(tmp_path, monkeypatch):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "a.jpg").write_bytes(b"x")
    monkeypatch.chdir(tmp_path)

    groups = DiskScanner().collect_groups([Path("src")])

    [media] = groups["a"].members
    assert media.path == (tmp_path / "src" / "a.jpg").resolve()


def test_missing_root_is_fatal(tmp_path):
    with pytest.raises(FileOperationError, match="does not exist"):
        DiskScanner().collect_groups([tmp_path / "nowhere"])


def test_file_as_root_is_fatal(tmp_path):
    (tmp_path / "a.jpg").write_bytes(b"x")
    with pytest.raises(FileOperationError):
        DiskScanner().collect_groups([tmp_path / "a.jpg"])


@pytest.mark.skipif(not hasattr(os, "geteuid") or os.geteuid() == 0,
                    reason="needs a user that directory permissions apply to")
def test_unreadable_subdirectory_is_fatal(tmp_path):
    root = tmp_path / "src"
    locked = root / "locked"
    locked.mkdir(parents=True)
    (locked / "a.jpg").write_bytes(b"x")
    (root / "b.jpg").write_bytes(b"x")
    os.chmod(locked, 0)
    try:
        with pytest.raises(FileOperationError, match="Unable to read directory") as excinfo:
            DiskScanner().collect_groups([root])
    finally:
        os.chmod(locked, 0o755)

    assert "locked" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, PermissionError)
