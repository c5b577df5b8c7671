"""Error kinds raised by the filesystem core.

Every failure in the core is an ``FsError`` carrying an ``ErrorKind``.
The kind is what callers branch on; the message is what a human reads.
Narrow subclasses exist so a caller can write ``except DiskFullError``
instead of inspecting ``.kind`` by hand.

Why exceptions instead of ``None`` returns?
    A ``None`` from a lookup has to be checked by every caller, and it
    cannot say *why* something failed.  A typed error carries the kind
    (not found, disk full, ...) and keeps "missing in the tree" apart
    from host I/O failures, which surface as plain ``OSError``.
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    """The category of a filesystem failure."""

    NOT_FOUND = "not found"
    ALREADY_EXISTS = "already exists"
    NOT_A_DIRECTORY = "not a directory"
    IS_A_DIRECTORY = "is a directory"
    NOT_EMPTY = "not empty"
    INVALID_NAME = "invalid name"
    NAME_CONFLICT = "name conflict"
    INVALID_OPERATION = "invalid operation"
    DISK_FULL = "disk full"
    INVALID_SECTOR = "invalid sector"


class FsError(Exception):
    """Raise when a filesystem operation cannot be carried out.

    Attributes:
        kind: The category of the failure.

    """

    kind: ErrorKind = ErrorKind.INVALID_OPERATION

    def __init__(self, message: str, *, kind: ErrorKind | None = None) -> None:
        """Create an error with a message and an optional explicit kind."""
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class NotFoundError(FsError):
    """Raise when a path or name does not exist."""

    kind = ErrorKind.NOT_FOUND


class AlreadyExistsError(FsError):
    """Raise when a name is already taken in the target directory."""

    kind = ErrorKind.ALREADY_EXISTS


class NotDirectoryError(FsError):
    """Raise when a directory was required but a file was found."""

    kind = ErrorKind.NOT_A_DIRECTORY


class IsDirectoryError(FsError):
    """Raise when a file was required but a directory was found."""

    kind = ErrorKind.IS_A_DIRECTORY


class NotEmptyError(FsError):
    """Raise when removing a non-empty directory without recursion."""

    kind = ErrorKind.NOT_EMPTY


class InvalidNameError(FsError):
    """Raise when a name breaks the allowed character set."""

    kind = ErrorKind.INVALID_NAME


class NameConflictError(FsError):
    """Raise when a path segment exists but has the wrong kind."""

    kind = ErrorKind.NAME_CONFLICT


class InvalidOperationError(FsError):
    """Raise for structurally impossible requests (e.g. moving root)."""

    kind = ErrorKind.INVALID_OPERATION


class DiskFullError(FsError):
    """Raise when there are not enough free sectors."""

    kind = ErrorKind.DISK_FULL


class InvalidSectorError(FsError):
    """Raise when a sector id lies outside the disk."""

    kind = ErrorKind.INVALID_SECTOR
