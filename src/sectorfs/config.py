"""Disk geometry and logging configuration.

The simulator has no config files and reads no environment variables.
Everything a disk needs is captured in one frozen ``DiskConfig``,
built by the REPL from the prompted capacity or by the web factory.
"""

from dataclasses import dataclass

from sectorfs.logging import LogLevel

SECTOR_SIZE = 64
"""Default sector payload size in bytes."""


@dataclass(frozen=True)
class DiskConfig:
    """Geometry of a simulated disk.

    Attributes:
        total_sectors: Number of sectors on the disk.
        sector_size: Maximum payload of one sector, in bytes.
        log_level: Minimum level recorded by the filesystem log.

    """

    total_sectors: int
    sector_size: int = SECTOR_SIZE
    log_level: LogLevel = LogLevel.INFO

    def __post_init__(self) -> None:
        """Reject non-positive geometry.

        Raises:
            ValueError: If either size is zero or negative.

        """
        if self.total_sectors <= 0:
            msg = f"Disk capacity must be positive, got {self.total_sectors}"
            raise ValueError(msg)
        if self.sector_size <= 0:
            msg = f"Sector size must be positive, got {self.sector_size}"
            raise ValueError(msg)

    @property
    def capacity_bytes(self) -> int:
        """Return the total payload capacity of the disk."""
        return self.total_sectors * self.sector_size
