"""Sector allocator: a bitmap over the disk's sectors.

The disk is divided into fixed-size **sectors**.  The allocator tracks
which sector ids are in use with one boolean per sector and hands out
ids to files as they grow.

Allocation is **first fit by id**: ``allocate()`` scans from sector 0
upward and returns the lowest free id.  A freed id becomes eligible
again immediately, and because low ids win, a file written after a
deletion lands in the hole the deletion left behind.  That is exactly
how fragmentation appears, and what the defragmenter later repairs.

Why a bitmap instead of a free set?
    Real filesystems (ext2's block bitmap, FAT's cluster table) keep
    a per-sector flag.  The ascending scan makes "lowest id first" a
    property of the data structure rather than of a sort.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sectorfs.errors import DiskFullError, InvalidSectorError

if TYPE_CHECKING:
    from sectorfs.logging import Logger

_SOURCE = "allocator"


class SectorAllocator:
    """Track allocated and free sectors with a bitmap.

    Freeing an id that is already free is an idempotent no-op.  It is
    recorded as a WARNING so double frees stay visible in the log.
    """

    def __init__(self, *, total_sectors: int, logger: Logger | None = None) -> None:
        """Create an allocator with every sector free.

        Args:
            total_sectors: Number of sectors on the disk.
            logger: Optional log to record double frees into.

        """
        self._bitmap: list[bool] = [False] * total_sectors
        self._used = 0
        self._logger = logger

    @property
    def total_sectors(self) -> int:
        """Return the number of sectors managed."""
        return len(self._bitmap)

    @property
    def used_count(self) -> int:
        """Return the number of allocated sectors."""
        return self._used

    @property
    def free_count(self) -> int:
        """Return the number of free sectors."""
        return len(self._bitmap) - self._used

    def bitmap(self) -> list[bool]:
        """Return a copy of the allocation bitmap."""
        return list(self._bitmap)

    def is_allocated(self, sector: int) -> bool:
        """Return True if *sector* is currently allocated.

        Raises:
            InvalidSectorError: If *sector* is outside the disk.

        """
        self._check_range(sector)
        return self._bitmap[sector]

    def allocate(self) -> int:
        """Claim the lowest free sector id.

        Returns:
            The allocated sector id.

        Raises:
            DiskFullError: If every sector is allocated.

        """
        for sector, used in enumerate(self._bitmap):
            if not used:
                self._bitmap[sector] = True
                self._used += 1
                return sector
        msg = "No free sectors available"
        raise DiskFullError(msg)

    def allocate_many(self, count: int) -> list[int]:
        """Claim *count* sectors, or none at all.

        Capacity is checked before anything is claimed, so a failure
        leaves the bitmap untouched.

        Args:
            count: Number of sectors needed.

        Returns:
            The allocated ids in ascending order.

        Raises:
            DiskFullError: If fewer than *count* sectors are free.

        """
        if count > self.free_count:
            msg = f"Cannot allocate {count} sectors: only {self.free_count} free"
            raise DiskFullError(msg)
        return [self.allocate() for _ in range(count)]

    def free(self, sector: int) -> None:
        """Return *sector* to the free pool.

        Raises:
            InvalidSectorError: If *sector* is outside the disk.

        """
        self._check_range(sector)
        if not self._bitmap[sector]:
            if self._logger is not None:
                self._logger.warning(f"Sector {sector} freed twice", source=_SOURCE)
            return
        self._bitmap[sector] = False
        self._used -= 1

    def claim(self, sector: int) -> None:
        """Mark a specific sector as allocated (used when relaying out).

        Raises:
            InvalidSectorError: If *sector* is outside the disk.

        """
        self._check_range(sector)
        if not self._bitmap[sector]:
            self._bitmap[sector] = True
            self._used += 1

    def reset(self) -> None:
        """Mark every sector free."""
        self._bitmap = [False] * len(self._bitmap)
        self._used = 0

    def _check_range(self, sector: int) -> None:
        if not 0 <= sector < len(self._bitmap):
            msg = (
                f"Invalid sector number: {sector}. "
                f"Valid range: 0 to {len(self._bitmap) - 1}"
            )
            raise InvalidSectorError(msg)
