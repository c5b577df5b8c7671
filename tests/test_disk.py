"""Tests for the simulated disk's sector slots."""

import pytest

from sectorfs.disk import Disk
from sectorfs.errors import InvalidSectorError


class TestDisk:
    """Verify slot reads, writes, and limits."""

    def test_unwritten_slot_reads_empty(self) -> None:
        """A slot that was never written should read back as b''."""
        disk = Disk(total_sectors=2, sector_size=8)
        assert disk.read(1) == b""

    def test_write_then_read(self) -> None:
        """A written payload should be readable from the same slot."""
        disk = Disk(total_sectors=2, sector_size=8)
        disk.write(0, b"abc")
        assert disk.read(0) == b"abc"

    def test_payload_larger_than_sector_raises(self) -> None:
        """Payloads may not exceed the sector size."""
        disk = Disk(total_sectors=2, sector_size=4)
        with pytest.raises(ValueError, match="exceeds sector size 4"):
            disk.write(0, b"12345")

    def test_negative_sector_raises(self) -> None:
        """Negative ids are never valid."""
        disk = Disk(total_sectors=2, sector_size=4)
        with pytest.raises(InvalidSectorError):
            disk.write(-1, b"x")
        with pytest.raises(InvalidSectorError):
            disk.read(-1)

    def test_write_past_end_grows(self) -> None:
        """Writing a high id should grow the slot array lazily."""
        disk = Disk(total_sectors=2, sector_size=4)
        disk.write(5, b"x")
        assert len(disk) == 6
        assert disk.read(5) == b"x"

    def test_counters(self) -> None:
        """Reads and writes should be counted."""
        disk = Disk(total_sectors=2, sector_size=4)
        disk.write(0, b"x")
        disk.read(0)
        disk.read(1)
        assert disk.writes == 1
        assert disk.reads == 2
