"""The node tree: path resolution and structural operations.

Models the hierarchical side of a Unix filesystem:

- **Arena**: every node lives in one ``dict[int, Node]`` keyed by its
  handle.  The root is handle 0 and is never removed.

- **Path resolution**: ``docs/../notes.txt`` is walked segment by
  segment, from the root for absolute paths or from a starting
  directory for relative ones.  ``.`` stays put, ``..`` climbs (and
  stops at the root).  Resolution never creates anything.

- **Structure**: ``mkdir``, ``touch``, ``remove``, ``copy`` and ``move``
  check every precondition before they mutate, so a failed call
  leaves the tree exactly as it found it.

Every traversal (walk, copy, delete) uses an explicit stack, so a very
deep tree cannot hit Python's recursion limit.
"""

from __future__ import annotations

from collections.abc import Iterator
from itertools import count
from typing import TYPE_CHECKING

from sectorfs.errors import (
    AlreadyExistsError,
    DiskFullError,
    InvalidNameError,
    InvalidOperationError,
    IsDirectoryError,
    NameConflictError,
    NotDirectoryError,
    NotEmptyError,
    NotFoundError,
)
from sectorfs.node import ROOT_NAME, Node, NodeInfo, NodeKind, validate_name

if TYPE_CHECKING:
    from sectorfs.logging import Logger
    from sectorfs.writer import ContentWriter

_SOURCE = "tree"


def split_parent(path: str) -> tuple[str, str]:
    """Split a destination path into (directory_path, final_name).

    Examples::

        "notes.txt"      → (".", "notes.txt")
        "docs/notes.txt" → ("docs", "notes.txt")
        "/notes.txt"     → ("/", "notes.txt")

    """
    last_slash = path.rfind("/")
    if last_slash == -1:
        return (".", path)
    if last_slash == 0:
        return ("/", path[1:])
    return (path[:last_slash], path[last_slash + 1 :])


class Tree:
    """A rooted arena of file and directory nodes.

    Content storage is delegated to a ``ContentWriter``; the tree only
    decides *which* files get written or released.
    """

    def __init__(self, *, writer: ContentWriter, logger: Logger) -> None:
        """Create a tree holding only the root directory."""
        self._writer = writer
        self._logger = logger
        self._handles = count(start=0)
        root = Node(handle=next(self._handles), kind=NodeKind.DIRECTORY, name=ROOT_NAME)
        self._nodes: dict[int, Node] = {root.handle: root}
        self._root: int = root.handle

    @property
    def root(self) -> int:
        """Return the root directory's handle."""
        return self._root

    def __contains__(self, handle: object) -> bool:
        """Return True if *handle* names a live node."""
        return handle in self._nodes

    def __len__(self) -> int:
        """Return the number of live nodes, root included."""
        return len(self._nodes)

    def node(self, handle: int) -> Node:
        """Return the node for *handle*.

        Raises:
            NotFoundError: If the handle is not live.

        """
        try:
            return self._nodes[handle]
        except KeyError:
            msg = f"No such node: {handle}"
            raise NotFoundError(msg) from None

    # -- Resolution ----------------------------------------------------------

    def child(self, parent: int, name: str) -> int | None:
        """Return the handle of *parent*'s child called *name*, if any."""
        for handle in self._nodes[parent].children:
            if self._nodes[handle].name == name:
                return handle
        return None

    def resolve(self, path: str, start: int | None = None) -> int | None:
        """Resolve *path* to a handle, or ``None`` if it does not exist.

        Args:
            path: Absolute (leading ``/``) or relative path.
            start: Directory that relative paths start from (root by default).

        """
        start = self._root if start is None else start
        if path in ("", "."):
            return start
        if path == "/":
            return self._root
        if path == "..":
            parent = self._nodes[start].parent
            return start if parent is None else parent

        current = self._root if path.startswith("/") else start
        for part in path.split("/"):
            if part in ("", "."):
                continue
            if part == "..":
                parent = self._nodes[current].parent
                if parent is not None:
                    current = parent
                continue
            found = self.child(current, part)
            if found is None:
                return None
            current = found
        return current

    def lookup(self, path: str, start: int | None = None) -> int:
        """Resolve *path* or raise.

        Raises:
            NotFoundError: If nothing lives at *path*.

        """
        handle = self.resolve(path, start)
        if handle is None:
            msg = f"Path not found: {path}"
            raise NotFoundError(msg)
        return handle

    def lookup_dir(self, path: str, start: int | None = None) -> int:
        """Resolve *path* to a directory or raise.

        Raises:
            NotFoundError: If nothing lives at *path*.
            NotDirectoryError: If *path* is a file.

        """
        handle = self.lookup(path, start)
        if not self._nodes[handle].is_dir:
            msg = f"Not a directory: {path}"
            raise NotDirectoryError(msg)
        return handle

    def lookup_file(self, path: str, start: int | None = None) -> int:
        """Resolve *path* to a file or raise.

        Raises:
            NotFoundError: If nothing lives at *path*.
            IsDirectoryError: If *path* is a directory.

        """
        handle = self.lookup(path, start)
        if self._nodes[handle].is_dir:
            msg = f"Is a directory: {path}"
            raise IsDirectoryError(msg)
        return handle

    def is_ancestor(self, ancestor: int, handle: int) -> bool:
        """Return True if *ancestor* is *handle* or lies on its parent chain."""
        current: int | None = handle
        while current is not None:
            if current == ancestor:
                return True
            current = self._nodes[current].parent
        return False

    def full_path(self, handle: int) -> str:
        """Return the absolute path of *handle* (``/`` for the root)."""
        parts: list[str] = []
        current = self._nodes[handle]
        while current.parent is not None:
            parts.append(current.name)
            current = self._nodes[current.parent]
        return "/" + "/".join(reversed(parts))

    # -- Enumeration ---------------------------------------------------------

    def walk(self, handle: int | None = None) -> Iterator[int]:
        """Yield *handle* and every descendant, depth first, in child order."""
        stack = [self._root if handle is None else handle]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(self._nodes[current].children))

    def iter_files(self, handle: int | None = None) -> Iterator[Node]:
        """Yield every file node under *handle* in walk order."""
        for current in self.walk(handle):
            node = self._nodes[current]
            if not node.is_dir:
                yield node

    def list_dir(self, handle: int) -> list[str]:
        """Return sorted child names; directories carry a trailing ``/``.

        Raises:
            NotDirectoryError: If *handle* is a file.

        """
        node = self._nodes[handle]
        if not node.is_dir:
            msg = f"Not a directory: {node.name}"
            raise NotDirectoryError(msg)
        names = []
        for child in node.children:
            child_node = self._nodes[child]
            names.append(child_node.name + "/" if child_node.is_dir else child_node.name)
        return sorted(names)

    def stat(self, handle: int) -> NodeInfo:
        """Return a read-only snapshot of *handle*."""
        node = self.node(handle)
        return NodeInfo(
            handle=node.handle,
            name=node.name,
            path=self.full_path(handle),
            kind=node.kind,
            size=node.size,
            sectors=tuple(node.sectors),
            child_count=len(node.children),
        )

    # -- Creation ------------------------------------------------------------

    def mkdir(self, path: str, start: int | None = None) -> int:
        """Create every missing directory along *path* (like ``mkdir -p``).

        All segments are validated first; if any is invalid or collides
        with a file, nothing is created.

        Returns:
            The handle of the final directory.

        Raises:
            InvalidNameError: If the path is empty or a segment is invalid.
            NameConflictError: If a segment already exists as a file.

        """
        parts = [part for part in path.split("/") if part]
        if not parts:
            msg = f"Invalid path: {path!r}"
            raise InvalidNameError(msg)
        for part in parts:
            validate_name(part)

        current = self._root if path.startswith("/") else self._start(start)
        index = 0
        while index < len(parts):
            existing = self.child(current, parts[index])
            if existing is None:
                break
            if not self._nodes[existing].is_dir:
                msg = f"Cannot create directory: '{parts[index]}', a file with this name exists"
                raise NameConflictError(msg)
            current = existing
            index += 1

        for part in parts[index:]:
            current = self._attach(NodeKind.DIRECTORY, part, current).handle
            self._logger.info(f"Directory created: {self.full_path(current)}", source=_SOURCE)
        return current

    def touch(self, name: str, parent: int) -> int:
        """Create an empty file called *name* directly inside *parent*.

        Raises:
            InvalidNameError: If *name* is invalid.
            AlreadyExistsError: If *parent* already has a child called *name*.

        """
        return self.create_file(name, parent, b"")

    def create_file(self, name: str, parent: int, content: bytes) -> int:
        """Create a file with *content* directly inside *parent*.

        Capacity is checked before the node is linked, so a disk-full
        failure leaves no trace.

        Raises:
            InvalidNameError: If *name* is invalid.
            NotDirectoryError: If *parent* is a file.
            AlreadyExistsError: If the name is taken.
            DiskFullError: If the content does not fit.

        """
        validate_name(name)
        if not self._nodes[parent].is_dir:
            msg = f"Not a directory: {self._nodes[parent].name}"
            raise NotDirectoryError(msg)
        self._check_free(parent, name)
        if not self._writer.can_store(len(content)):
            needed = self._writer.required_sectors(len(content))
            msg = f"Cannot create {name}: needs {needed} sectors, {self._writer.free_sectors} free"
            raise DiskFullError(msg)

        node = self._attach(NodeKind.FILE, name, parent)
        self._writer.write(node, content)
        self._logger.info(f"File created: {self.full_path(node.handle)}", source=_SOURCE)
        return node.handle

    # -- Content -------------------------------------------------------------

    def write(self, handle: int, content: bytes) -> None:
        """Replace a file's content (old content kept if the disk is full)."""
        self._writer.write(self._nodes[handle], content)

    def read(self, handle: int) -> bytes:
        """Read a file's content back from its sectors."""
        return self._writer.read(self._nodes[handle])

    # -- Removal -------------------------------------------------------------

    def remove(self, name: str, parent: int, *, recursive: bool = False) -> int:
        """Remove *parent*'s child called *name* and everything under it.

        Returns:
            The number of sectors released.

        Raises:
            NotFoundError: If there is no such child.
            NotEmptyError: If the child is a non-empty directory and
                *recursive* is false.

        """
        target = self.child(parent, name)
        if target is None:
            msg = f"File or directory not found: {name}"
            raise NotFoundError(msg)
        node = self._nodes[target]
        if node.is_dir and node.children and not recursive:
            msg = f"Directory is not empty: {name}. Use -r to remove recursively"
            raise NotEmptyError(msg)

        path = self.full_path(target)
        subtree = list(self.walk(target))
        freed = sum(self._writer.release(self._nodes[h]) for h in subtree)
        self._nodes[parent].children.remove(target)
        for handle in subtree:
            del self._nodes[handle]
        self._logger.info(
            f"Removed {path} ({len(subtree)} nodes, {freed} sectors freed)", source=_SOURCE
        )
        return freed

    # -- Copy and move -------------------------------------------------------

    def copy(self, source: str, dest: str, start: int | None = None) -> int:
        """Deep-copy the node at *source* to *dest*.

        If *dest* is an existing directory the copy keeps the source's
        name inside it; otherwise *dest* names the copy.  Every copied
        file gets freshly allocated sectors.

        Returns:
            The handle of the new top-level node.

        Raises:
            NotFoundError: If *source* or the destination directory is missing.
            NotDirectoryError: If the destination directory is a file.
            InvalidNameError: If the new name is invalid.
            InvalidOperationError: If *source* is the root.
            AlreadyExistsError: If the target name is taken.
            DiskFullError: If the copied files do not fit; nothing is created.

        """
        start = self._start(start)
        src = self.lookup(source, start)
        if src == self._root:
            msg = "Cannot copy the root directory"
            raise InvalidOperationError(msg)
        dest_dir, name = self._destination(dest, start, default_name=self._nodes[src].name)
        self._check_free(dest_dir, name)

        # Snapshot first: copying into the source's own subtree must not
        # see the nodes it is creating.
        subtree = list(self.walk(src))
        needed = sum(self._writer.required_sectors(n.size) for n in self.iter_files(src))
        if needed > self._writer.free_sectors:
            msg = f"Cannot copy {source}: needs {needed} sectors, {self._writer.free_sectors} free"
            raise DiskFullError(msg)

        copies: dict[int, int] = {}
        for handle in subtree:
            original = self._nodes[handle]
            if handle == src:
                parent, copy_name = dest_dir, name
            else:
                parent, copy_name = copies[self._parent_of(original)], original.name
            clone = self._attach(original.kind, copy_name, parent)
            copies[handle] = clone.handle
            if not original.is_dir:
                self._writer.write(clone, original.content)

        new_handle = copies[src]
        self._logger.info(
            f"Copied {self.full_path(src)} -> {self.full_path(new_handle)} "
            f"({len(subtree)} nodes, {needed} sectors)",
            source=_SOURCE,
        )
        return new_handle

    def move(self, source: str, dest: str, start: int | None = None) -> int:
        """Move or rename the node at *source*; its sectors stay put.

        Returns:
            The handle of the moved node (unchanged).

        Raises:
            NotFoundError: If *source* or the destination directory is missing.
            NotDirectoryError: If the destination directory is a file.
            InvalidNameError: If the new name is invalid.
            InvalidOperationError: If *source* is the root, or a directory
                would end up inside its own subtree.
            AlreadyExistsError: If another node already has the target name.

        """
        start = self._start(start)
        src = self.lookup(source, start)
        if src == self._root:
            msg = "Cannot move the root directory"
            raise InvalidOperationError(msg)
        node = self._nodes[src]
        dest_dir, name = self._destination(dest, start, default_name=node.name)
        if node.is_dir and self.is_ancestor(src, dest_dir):
            msg = "Cannot move a folder into itself"
            raise InvalidOperationError(msg)
        existing = self.child(dest_dir, name)
        if existing is not None and existing != src:
            msg = f"Destination already exists: {name}"
            raise AlreadyExistsError(msg)

        old_path = self.full_path(src)
        if node.parent != dest_dir:
            self._nodes[self._parent_of(node)].children.remove(src)
            self._nodes[dest_dir].children.append(src)
            node.parent = dest_dir
        node.name = name
        self._logger.info(f"Moved {old_path} -> {self.full_path(src)}", source=_SOURCE)
        return src

    # -- Helpers -------------------------------------------------------------

    def _start(self, start: int | None) -> int:
        return self._root if start is None else start

    def _parent_of(self, node: Node) -> int:
        if node.parent is None:
            msg = "The root directory has no parent"
            raise InvalidOperationError(msg)
        return node.parent

    def _attach(self, kind: NodeKind, name: str, parent: int) -> Node:
        """Create a node and append it to *parent*'s children."""
        node = Node(handle=next(self._handles), kind=kind, name=name, parent=parent)
        self._nodes[node.handle] = node
        self._nodes[parent].children.append(node.handle)
        return node

    def _check_free(self, parent: int, name: str) -> None:
        if self.child(parent, name) is not None:
            msg = f"Already exists: {name}"
            raise AlreadyExistsError(msg)

    def _destination(self, dest: str, start: int, *, default_name: str) -> tuple[int, str]:
        """Work out (directory, name) for a copy or move target.

        An existing directory at *dest* receives the node under
        *default_name*; otherwise *dest*'s parent must be a directory
        and its last segment becomes the new name.
        """
        target = self.resolve(dest, start)
        if target is not None and self._nodes[target].is_dir:
            return target, default_name

        dir_path, name = split_parent(dest)
        dir_handle = self.resolve(dir_path, start)
        if dir_handle is None:
            msg = f"Destination directory not found: {dir_path}"
            raise NotFoundError(msg)
        if not self._nodes[dir_handle].is_dir:
            msg = f"Not a directory: {dir_path}"
            raise NotDirectoryError(msg)
        return dir_handle, validate_name(name)
