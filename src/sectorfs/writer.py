"""Content writer: the bridge between file nodes and the disk.

Writing a file means cutting its bytes into sector-sized **chunks**,
claiming one sector per chunk, and storing each chunk in its slot.
Reading a file means walking its sector list and joining the slots
back together.

Writes are **all-or-nothing**.  Before touching anything the writer
checks that the new content fits in the free sectors plus the sectors
the file already owns.  If it does not, ``DiskFullError`` is raised
and the file keeps its old content and its old sectors.  Once the
check passes, the allocation below it cannot fail.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sectorfs.errors import DiskFullError, IsDirectoryError

if TYPE_CHECKING:
    from sectorfs.allocator import SectorAllocator
    from sectorfs.disk import Disk
    from sectorfs.logging import Logger
    from sectorfs.node import Node

_SOURCE = "writer"


def required_sectors(size: int, sector_size: int) -> int:
    """Return how many sectors *size* bytes occupy (0 for empty content)."""
    return -(-size // sector_size)


def chunks(content: bytes, sector_size: int) -> list[bytes]:
    """Split *content* into slices of at most *sector_size* bytes.

    The last slice may be shorter.  Empty content yields no slices.
    """
    return [content[pos : pos + sector_size] for pos in range(0, len(content), sector_size)]


class ContentWriter:
    """Store and load file content through the allocator and disk."""

    def __init__(self, *, allocator: SectorAllocator, disk: Disk, logger: Logger) -> None:
        """Create a writer over an allocator and a disk.

        Args:
            allocator: Hands out and takes back sector ids.
            disk: Holds the sector payloads.
            logger: Receives write and release events.

        """
        self._allocator = allocator
        self._disk = disk
        self._logger = logger

    @property
    def sector_size(self) -> int:
        """Return the sector payload size of the underlying disk."""
        return self._disk.sector_size

    @property
    def free_sectors(self) -> int:
        """Return the number of sectors still free on the disk."""
        return self._allocator.free_count

    def required_sectors(self, size: int) -> int:
        """Return how many sectors *size* bytes occupy on this disk."""
        return required_sectors(size, self._disk.sector_size)

    def can_store(self, size: int, *, reclaimable: int = 0) -> bool:
        """Return True if *size* bytes fit in the free sectors.

        Args:
            size: Number of content bytes to store.
            reclaimable: Sectors that would be freed first (the file's own).

        """
        return self.required_sectors(size) <= self._allocator.free_count + reclaimable

    def write(self, node: Node, content: bytes) -> None:
        """Replace the content of a file node.

        Args:
            node: The file to rewrite.
            content: The new bytes.

        Raises:
            IsDirectoryError: If *node* is a directory.
            DiskFullError: If the content does not fit; nothing changes.

        """
        if node.is_dir:
            msg = f"Is a directory: {node.name}"
            raise IsDirectoryError(msg)

        needed = self.required_sectors(len(content))
        if not self.can_store(len(content), reclaimable=len(node.sectors)):
            msg = (
                f"Cannot store {len(content)} bytes in {node.name}: "
                f"needs {needed} sectors, {self._allocator.free_count + len(node.sectors)} available"
            )
            self._logger.error(msg, source=_SOURCE)
            raise DiskFullError(msg)

        self.release(node)
        sectors = self._allocator.allocate_many(needed)
        for sector, chunk in zip(sectors, chunks(content, self._disk.sector_size), strict=True):
            self._disk.write(sector, chunk)
        node.sectors = sectors
        node.content = bytes(content)
        self._logger.debug(
            f"Wrote {len(content)} bytes to {node.name} in sectors {sectors}", source=_SOURCE
        )

    def read(self, node: Node) -> bytes:
        """Assemble a file's content from its sectors on disk.

        Raises:
            IsDirectoryError: If *node* is a directory.

        """
        if node.is_dir:
            msg = f"Is a directory: {node.name}"
            raise IsDirectoryError(msg)
        return b"".join(self._disk.read(sector) for sector in node.sectors)

    def release(self, node: Node) -> int:
        """Free every sector a file owns and clear its sector list.

        Returns:
            The number of sectors released.

        """
        released = len(node.sectors)
        for sector in node.sectors:
            self._allocator.free(sector)
        node.sectors = []
        return released
