"""The simulated disk: an array of fixed-size sector slots.

The disk knows nothing about files.  It stores at most ``sector_size``
bytes per slot and is addressed by sector id.  Which ids are in use is
the allocator's business; the disk only holds payloads and counts the
reads and writes it serves, the way a drive's SMART counters would.
"""

from sectorfs.errors import InvalidSectorError


class Disk:
    """A fixed-capacity array of sector payloads."""

    def __init__(self, *, total_sectors: int, sector_size: int) -> None:
        """Create a disk with every slot empty.

        Args:
            total_sectors: Number of sector slots.
            sector_size: Maximum payload per slot, in bytes.

        """
        self._sector_size = sector_size
        self._slots: list[bytes] = [b""] * total_sectors
        self.reads = 0
        self.writes = 0

    @property
    def sector_size(self) -> int:
        """Return the maximum payload of one sector."""
        return self._sector_size

    def __len__(self) -> int:
        """Return the current number of slots."""
        return len(self._slots)

    def read(self, sector: int) -> bytes:
        """Return the payload stored in *sector*.

        Slots that were never written read back as ``b""``.

        Raises:
            InvalidSectorError: If *sector* is negative.

        """
        if sector < 0:
            msg = f"Invalid sector number: {sector}"
            raise InvalidSectorError(msg)
        self.reads += 1
        if sector >= len(self._slots):
            return b""
        return self._slots[sector]

    def write(self, sector: int, data: bytes) -> None:
        """Store *data* in *sector*, growing the slot array if needed.

        Raises:
            InvalidSectorError: If *sector* is negative.
            ValueError: If *data* is larger than one sector.

        """
        if sector < 0:
            msg = f"Invalid sector number: {sector}"
            raise InvalidSectorError(msg)
        if len(data) > self._sector_size:
            msg = f"Payload of {len(data)} bytes exceeds sector size {self._sector_size}"
            raise ValueError(msg)
        if sector >= len(self._slots):
            self._slots.extend([b""] * (sector + 1 - len(self._slots)))
        self._slots[sector] = bytes(data)
        self.writes += 1
