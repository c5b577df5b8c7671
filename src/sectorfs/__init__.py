"""sectorfs: an in-memory Unix-like filesystem on a fixed-capacity sector disk.

Re-exports public symbols so callers can write::

    from sectorfs import DiskConfig, FileSystem

    fs = FileSystem(DiskConfig(total_sectors=16))
    session = fs.open_session()
    session.put("notes.txt", b"hello")
"""

from sectorfs.allocator import SectorAllocator
from sectorfs.config import SECTOR_SIZE, DiskConfig
from sectorfs.defrag import DefragReport, Defragmenter
from sectorfs.disk import Disk
from sectorfs.errors import (
    AlreadyExistsError,
    DiskFullError,
    ErrorKind,
    FsError,
    InvalidNameError,
    InvalidOperationError,
    InvalidSectorError,
    IsDirectoryError,
    NameConflictError,
    NotDirectoryError,
    NotEmptyError,
    NotFoundError,
)
from sectorfs.filesystem import DiskStatus, FileSystem
from sectorfs.logging import LogEntry, Logger, LogLevel
from sectorfs.node import NodeInfo, NodeKind
from sectorfs.session import Session
from sectorfs.tree import Tree
from sectorfs.writer import ContentWriter

__all__ = [
    "SECTOR_SIZE",
    "AlreadyExistsError",
    "ContentWriter",
    "DefragReport",
    "Defragmenter",
    "Disk",
    "DiskConfig",
    "DiskFullError",
    "DiskStatus",
    "ErrorKind",
    "FileSystem",
    "FsError",
    "InvalidNameError",
    "InvalidOperationError",
    "InvalidSectorError",
    "IsDirectoryError",
    "LogEntry",
    "LogLevel",
    "Logger",
    "NameConflictError",
    "NodeInfo",
    "NodeKind",
    "NotDirectoryError",
    "NotEmptyError",
    "NotFoundError",
    "SectorAllocator",
    "Session",
    "Tree",
]
