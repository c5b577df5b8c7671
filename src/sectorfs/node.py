"""Nodes: the inode-style records of the tree.

A node is either a **file** (content bytes plus the sector ids that
hold them on disk) or a **directory** (an ordered list of children).
Nodes never point at each other directly.  They live in an arena owned
by the tree and refer to one another by integer **handle**: the parent
is a handle, the children are a list of handles.

Why handles instead of object references?
    With handles the tree can answer "is this node an ancestor of
    that one?" by walking parent ids, and a removed node simply stops
    being a key in the arena.  Nothing else can keep it alive.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum

from sectorfs.errors import InvalidNameError

ROOT_NAME = "/"

_NAME_PATTERN = re.compile(r"[A-Za-z0-9_.]+")


class NodeKind(StrEnum):
    """The kind of object a node represents."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass
class Node:
    """Internal node record.

    For files, ``content`` holds the raw bytes and ``sectors`` the ids
    they are stored in.  For directories, ``children`` holds child
    handles in insertion order.
    """

    handle: int
    kind: NodeKind
    name: str
    parent: int | None = None
    content: bytes = b""
    sectors: list[int] = field(default_factory=list)  # pyright: ignore[reportUnknownVariableType]
    children: list[int] = field(default_factory=list)  # pyright: ignore[reportUnknownVariableType]

    @property
    def is_dir(self) -> bool:
        """Return True for directories."""
        return self.kind is NodeKind.DIRECTORY

    @property
    def size(self) -> int:
        """Return the size of the file content in bytes."""
        return len(self.content)


@dataclass(frozen=True)
class NodeInfo:
    """Read-only snapshot of a node (returned by ``info``)."""

    handle: int
    name: str
    path: str
    kind: NodeKind
    size: int
    sectors: tuple[int, ...] = ()
    child_count: int = 0


def is_valid_name(name: str) -> bool:
    """Return True if *name* may be used for a file or directory.

    Names are non-empty, use only letters, digits, ``_`` and ``.``,
    and are not ``.`` or ``..`` (those are path navigation).
    """
    if name in ("", ".", ".."):
        return False
    return _NAME_PATTERN.fullmatch(name) is not None


def validate_name(name: str) -> str:
    """Return *name* unchanged, or raise if it is not a valid name.

    Raises:
        InvalidNameError: If the name breaks the character rules.

    """
    if not is_valid_name(name):
        msg = f"Invalid name: {name!r}"
        raise InvalidNameError(msg)
    return name
