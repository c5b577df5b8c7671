"""The filesystem facade: one disk, one tree, any number of sessions.

``FileSystem`` wires the pieces together::

    Disk ← SectorAllocator ← ContentWriter ← Tree ← Defragmenter
                                                ↑
                                             Session (cwd)

Callers never build the parts by hand.  They create a ``FileSystem``
from a ``DiskConfig`` and open sessions on it; each session carries
its own current directory.
"""

from __future__ import annotations

from dataclasses import dataclass

from sectorfs.allocator import SectorAllocator
from sectorfs.config import DiskConfig
from sectorfs.defrag import Defragmenter, DefragReport
from sectorfs.disk import Disk
from sectorfs.logging import Logger
from sectorfs.session import Session
from sectorfs.tree import Tree
from sectorfs.writer import ContentWriter


@dataclass(frozen=True)
class DiskStatus:
    """Snapshot of disk usage and tree size."""

    total_sectors: int
    used_sectors: int
    free_sectors: int
    sector_size: int
    files: int
    directories: int
    fragmented_files: int
    disk_reads: int
    disk_writes: int


class FileSystem:
    """An in-memory filesystem on a fixed-capacity sector disk."""

    def __init__(self, config: DiskConfig, *, logger: Logger | None = None) -> None:
        """Build the disk, allocator, tree and defragmenter for *config*.

        Args:
            config: Disk geometry and log level.
            logger: Log to record into; a fresh one is created if omitted.

        """
        self._config = config
        self._logger = logger if logger is not None else Logger(min_level=config.log_level)
        self._disk = Disk(total_sectors=config.total_sectors, sector_size=config.sector_size)
        self._allocator = SectorAllocator(total_sectors=config.total_sectors, logger=self._logger)
        self._writer = ContentWriter(allocator=self._allocator, disk=self._disk, logger=self._logger)
        self._tree = Tree(writer=self._writer, logger=self._logger)
        self._defragmenter = Defragmenter(
            tree=self._tree,
            allocator=self._allocator,
            disk=self._disk,
            logger=self._logger,
        )
        self._logger.info(
            f"File system created with {config.total_sectors} sectors "
            f"of {config.sector_size} bytes",
            source="filesystem",
        )

    @property
    def config(self) -> DiskConfig:
        """Return the disk geometry."""
        return self._config

    @property
    def logger(self) -> Logger:
        """Return the shared event log."""
        return self._logger

    @property
    def tree(self) -> Tree:
        """Return the node tree."""
        return self._tree

    @property
    def allocator(self) -> SectorAllocator:
        """Return the sector allocator."""
        return self._allocator

    @property
    def disk(self) -> Disk:
        """Return the simulated disk."""
        return self._disk

    def open_session(self) -> Session:
        """Return a new session whose current directory is the root."""
        return Session(self)

    def defrag(self) -> DefragReport:
        """Relay every file out contiguously from sector 0."""
        return self._defragmenter.defrag()

    def status(self) -> DiskStatus:
        """Return a usage snapshot."""
        files = 0
        directories = 0
        for handle in self._tree.walk():
            if self._tree.node(handle).is_dir:
                directories += 1
            else:
                files += 1
        return DiskStatus(
            total_sectors=self._allocator.total_sectors,
            used_sectors=self._allocator.used_count,
            free_sectors=self._allocator.free_count,
            sector_size=self._config.sector_size,
            files=files,
            directories=directories,
            fragmented_files=len(self._defragmenter.fragmented_files()),
            disk_reads=self._disk.reads,
            disk_writes=self._disk.writes,
        )

    def sector_map(self) -> list[int | None]:
        """Return, for every sector id, the handle of its owning file."""
        owners: list[int | None] = [None] * self._allocator.total_sectors
        for node in self._tree.iter_files():
            for sector in node.sectors:
                owners[sector] = node.handle
        return owners

    def check(self) -> list[str]:
        """Verify that the bitmap matches the sectors files reference.

        Returns:
            One message per inconsistency; empty when the disk is sound.

        """
        problems: list[str] = []
        owners: dict[int, int] = {}
        sector_size = self._config.sector_size
        for node in self._tree.iter_files():
            expected = self._writer.required_sectors(node.size)
            if len(node.sectors) != expected:
                problems.append(
                    f"{self._tree.full_path(node.handle)}: {len(node.sectors)} sectors "
                    f"for {node.size} bytes (expected {expected} at {sector_size} bytes each)"
                )
            for sector in node.sectors:
                if sector in owners:
                    problems.append(
                        f"Sector {sector} shared by handles {owners[sector]} and {node.handle}"
                    )
                owners[sector] = node.handle
        for sector, used in enumerate(self._allocator.bitmap()):
            if used and sector not in owners:
                problems.append(f"Sector {sector} allocated but owned by no file")
            if not used and sector in owners:
                problems.append(f"Sector {sector} referenced by handle {owners[sector]} but free")
        return problems
