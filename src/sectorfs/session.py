"""Sessions: a current directory and the verbs that act relative to it.

A shell does not keep its working directory inside the filesystem; it
keeps it for itself, which is why two terminals can sit in different
directories of the same disk.  ``Session`` mirrors that: it holds one
directory handle and resolves every relative path from there.

The verbs are the filesystem's public surface: ``pwd``, ``cd``, ``ls``,
``mkdir``, ``touch``, ``rm``, ``cp``, ``mv``, ``get``, ``put``, ``write``,
``info``, ``defrag`` and ``status``.  They return plain values and raise
``FsError`` subclasses; presenting either is the caller's job.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sectorfs.defrag import DefragReport
    from sectorfs.filesystem import DiskStatus, FileSystem
    from sectorfs.node import NodeInfo

_SOURCE = "session"


class Session:
    """A view of a filesystem from one current directory."""

    def __init__(self, fs: FileSystem) -> None:
        """Open a session on *fs* in the root directory."""
        self._fs = fs
        self._tree = fs.tree
        self._cwd: int = self._tree.root

    @property
    def filesystem(self) -> FileSystem:
        """Return the filesystem this session works on."""
        return self._fs

    @property
    def cwd(self) -> int:
        """Return the current directory handle.

        If another session removed the directory, fall back to the root.
        """
        if self._cwd not in self._tree:
            self._fs.logger.warning(
                f"Current directory {self._cwd} no longer exists, returning to /",
                source=_SOURCE,
            )
            self._cwd = self._tree.root
        return self._cwd

    def pwd(self) -> str:
        """Return the absolute path of the current directory."""
        return self._tree.full_path(self.cwd)

    def cd(self, path: str) -> str:
        """Change the current directory and return its new path.

        Raises:
            NotFoundError: If *path* does not exist.
            NotDirectoryError: If *path* is a file.

        """
        self._cwd = self._tree.lookup_dir(path, self.cwd)
        return self.pwd()

    def ls(self, path: str | None = None) -> list[str]:
        """List a directory (``/`` marks subdirectories).

        Listing a file returns just its name.

        Raises:
            NotFoundError: If *path* does not exist.

        """
        handle = self.cwd if not path else self._tree.lookup(path, self.cwd)
        node = self._tree.node(handle)
        if not node.is_dir:
            return [node.name]
        return self._tree.list_dir(handle)

    def mkdir(self, path: str) -> str:
        """Create *path* and any missing parents; return its absolute path."""
        return self._tree.full_path(self._tree.mkdir(path, self.cwd))

    def touch(self, name: str) -> str:
        """Create an empty file in the current directory."""
        return self._tree.full_path(self._tree.touch(name, self.cwd))

    def rm(self, name: str, *, recursive: bool = False) -> int:
        """Remove a direct child of the current directory.

        Returns:
            The number of sectors freed.

        """
        return self._tree.remove(name, self.cwd, recursive=recursive)

    def cp(self, source: str, dest: str) -> str:
        """Deep-copy *source* to *dest*; return the copy's path."""
        return self._tree.full_path(self._tree.copy(source, dest, self.cwd))

    def mv(self, source: str, dest: str) -> str:
        """Move or rename *source*; return its new path."""
        return self._tree.full_path(self._tree.move(source, dest, self.cwd))

    def get(self, path: str) -> bytes:
        """Return a file's content, read back from its sectors.

        Raises:
            NotFoundError: If *path* does not exist.
            IsDirectoryError: If *path* is a directory.

        """
        return self._tree.read(self._tree.lookup_file(path, self.cwd))

    def put(self, name: str, data: bytes, directory: str = ".") -> str:
        """Store *data* as a new file called *name* inside *directory*.

        If the data does not fit, the file is not created.

        Returns:
            The new file's absolute path.

        """
        parent = self._tree.lookup_dir(directory, self.cwd)
        return self._tree.full_path(self._tree.create_file(name, parent, data))

    def write(self, path: str, data: bytes) -> None:
        """Replace the content of an existing file.

        If the data does not fit, the old content and sectors are kept.
        """
        self._tree.write(self._tree.lookup_file(path, self.cwd), data)

    def info(self, path: str = ".") -> NodeInfo:
        """Return a snapshot of the node at *path*."""
        return self._tree.stat(self._tree.lookup(path, self.cwd))

    def defrag(self) -> DefragReport:
        """Defragment the whole disk."""
        return self._fs.defrag()

    def status(self) -> DiskStatus:
        """Return the disk usage snapshot."""
        return self._fs.status()
