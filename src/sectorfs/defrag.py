"""Defragmentation: relaying every file out contiguously from sector 0.

Lowest-id-first allocation fills the holes that deletions leave, so
over time a file's sectors end up scattered: ``[0, 1, 7, 8, 3]``.  The
defragmenter fixes that by walking every file in tree order (depth
first, children in insertion order) and handing out sector ids
0, 1, 2, ... consecutively, rewriting each slot from the file's
content as it goes.

The relayout is checked up front: if the files need more sectors than
the disk has, ``DiskFullError`` is raised before the bitmap is touched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from sectorfs.errors import DiskFullError
from sectorfs.writer import chunks

if TYPE_CHECKING:
    from sectorfs.allocator import SectorAllocator
    from sectorfs.disk import Disk
    from sectorfs.logging import Logger
    from sectorfs.node import Node
    from sectorfs.tree import Tree

_SOURCE = "defrag"


@dataclass(frozen=True)
class DefragReport:
    """Summary of one defragmentation pass."""

    files: int
    used_sectors: int
    free_sectors: int
    moved: int


def is_fragmented(sectors: list[int]) -> bool:
    """Return True if *sectors* is not one ascending contiguous run."""
    return any(b != a + 1 for a, b in zip(sectors, sectors[1:], strict=False))


class Defragmenter:
    """Compact the sector layout of every file in a tree."""

    def __init__(
        self,
        *,
        tree: Tree,
        allocator: SectorAllocator,
        disk: Disk,
        logger: Logger,
    ) -> None:
        """Create a defragmenter over a tree and its storage."""
        self._tree = tree
        self._allocator = allocator
        self._disk = disk
        self._logger = logger

    def fragmented_files(self) -> list[Node]:
        """Return the files whose sectors are not one contiguous run."""
        return [node for node in self._tree.iter_files() if is_fragmented(node.sectors)]

    def defrag(self) -> DefragReport:
        """Reassign every file to consecutive sectors starting at 0.

        Returns:
            A report of files seen, sectors used and free, and files moved.

        Raises:
            DiskFullError: If the files need more sectors than exist.

        """
        files = list(self._tree.iter_files())
        sector_size = self._disk.sector_size
        layouts = [chunks(node.content, sector_size) for node in files]
        needed = sum(len(layout) for layout in layouts)
        total = self._allocator.total_sectors
        if needed > total:
            msg = f"Disk is full: {needed} sectors needed, {total} available"
            self._logger.error(msg, source=_SOURCE)
            raise DiskFullError(msg)

        self._logger.info(f"Starting defragmentation of {len(files)} files", source=_SOURCE)
        self._allocator.reset()
        next_sector = 0
        moved = 0
        for node, layout in zip(files, layouts, strict=True):
            sectors = list(range(next_sector, next_sector + len(layout)))
            for sector, chunk in zip(sectors, layout, strict=True):
                self._allocator.claim(sector)
                self._disk.write(sector, chunk)
            if sectors != node.sectors:
                moved += 1
            node.sectors = sectors
            next_sector += len(layout)

        report = DefragReport(
            files=len(files),
            used_sectors=next_sector,
            free_sectors=total - next_sector,
            moved=moved,
        )
        self._logger.info(
            f"Defragmentation complete: {next_sector} sectors used, "
            f"{report.free_sectors} free, {moved} files moved",
            source=_SOURCE,
        )
        return report
