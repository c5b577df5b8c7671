"""Tests for defragmentation.

Defragmentation walks every file depth first and reassigns consecutive
sector ids from 0, so the used area becomes one contiguous block.
"""

import pytest

from sectorfs.config import DiskConfig
from sectorfs.defrag import is_fragmented
from sectorfs.errors import DiskFullError
from sectorfs.filesystem import FileSystem
from sectorfs.session import Session

SECTOR_SIZE = 4


def _fragmented_session() -> tuple[FileSystem, Session]:
    """Create a disk whose files are scattered across holes."""
    fs = FileSystem(DiskConfig(total_sectors=16, sector_size=SECTOR_SIZE))
    session = fs.open_session()
    session.put("a", b"aaaaaaaa")  # 0, 1
    session.put("b", b"bbbbbbbb")  # 2, 3
    session.put("c", b"cccc")  # 4
    session.rm("a")
    session.mkdir("dir")
    session.put("d", b"dddddddddddd", "dir")  # 0, 1, 5
    return fs, session


class TestIsFragmented:
    """Verify the contiguity check."""

    @pytest.mark.parametrize("sectors", [[], [3], [0, 1, 2], [5, 6]])
    def test_contiguous(self, sectors: list[int]) -> None:
        """Empty, single and ascending runs are not fragmented."""
        assert not is_fragmented(sectors)

    @pytest.mark.parametrize("sectors", [[0, 2], [1, 0], [0, 1, 5]])
    def test_fragmented(self, sectors: list[int]) -> None:
        """Gaps and descending steps are fragmentation."""
        assert is_fragmented(sectors)


class TestDefrag:
    """Verify the relayout."""

    def test_fixture_is_fragmented(self) -> None:
        """The helper's file d should span a hole and the tail."""
        fs, session = _fragmented_session()
        assert session.info("dir/d").sectors == (0, 1, 5)
        assert fs.status().fragmented_files == 1

    def test_layout_is_contiguous_from_zero(self) -> None:
        """Used sectors become exactly 0..n-1."""
        fs, session = _fragmented_session()
        total = sum(len(node.sectors) for node in fs.tree.iter_files())
        report = session.defrag()
        used = sorted(s for node in fs.tree.iter_files() for s in node.sectors)
        assert used == list(range(total))
        assert report.used_sectors == total
        assert report.free_sectors == 16 - total
        assert fs.allocator.bitmap() == [True] * total + [False] * (16 - total)

    def test_files_follow_tree_order(self) -> None:
        """Files are laid out in depth-first child order."""
        _fs, session = _fragmented_session()
        session.defrag()
        assert session.info("b").sectors == (0, 1)
        assert session.info("c").sectors == (2,)
        assert session.info("dir/d").sectors == (3, 4, 5)

    def test_content_survives(self) -> None:
        """Every file reads back the same after defrag."""
        fs, session = _fragmented_session()
        paths = [fs.tree.full_path(node.handle) for node in fs.tree.iter_files()]
        before = {path: session.get(path) for path in paths}
        session.defrag()
        after = {path: session.get(path) for path in before}
        assert after == before
        assert fs.check() == []

    def test_report_counts(self) -> None:
        """The report lists files seen and files moved."""
        _fs, session = _fragmented_session()
        report = session.defrag()
        assert report.files == 3
        assert report.moved == 3

    def test_second_pass_moves_nothing(self) -> None:
        """A defragmented disk stays put."""
        _fs, session = _fragmented_session()
        session.defrag()
        assert session.defrag().moved == 0

    def test_empty_disk(self) -> None:
        """Defragmenting an empty tree succeeds."""
        fs = FileSystem(DiskConfig(total_sectors=2))
        report = fs.defrag()
        assert report.files == 0
        assert report.used_sectors == 0

    def test_over_capacity_changes_nothing(self) -> None:
        """If the files cannot fit, defrag raises before touching the bitmap."""
        fs, session = _fragmented_session()
        # Corrupt the tree behind the writer's back to force an impossible layout.
        node = fs.tree.node(fs.tree.lookup("/b"))
        node.content = b"x" * (SECTOR_SIZE * 20)
        bitmap = fs.allocator.bitmap()
        with pytest.raises(DiskFullError, match="Disk is full"):
            session.defrag()
        assert fs.allocator.bitmap() == bitmap
