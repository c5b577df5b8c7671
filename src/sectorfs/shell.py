"""The shell: command interpreter for the simulated filesystem.

The shell reads a command string, splits it into a command name and
arguments, dispatches to the matching handler, and returns a string
result.  Every handler talks to the filesystem through a ``Session``,
so the shell owns nothing but its current directory (inside the
session) and the host directory used by ``get``/``put``.

Design choices:
    - **Returns strings, not prints.**  The shell is fully testable;
      the REPL and the web UI decide how to display output.
    - **Command dispatch via a dict.**  Adding a command means writing
      a method and adding one dict entry.
    - **Errors become ``Error: ...`` lines.**  ``FsError`` and host
      ``OSError`` are caught here and nowhere else, and they read
      differently so a missing file and a failed disk read never look
      alike.
"""

from collections.abc import Callable
from pathlib import Path
from string import ascii_letters, digits
from typing import TypeAlias

from sectorfs.errors import FsError
from sectorfs.node import NodeKind
from sectorfs.session import Session

# Type alias for a command handler: takes a list of args, returns output.
_Handler: TypeAlias = Callable[[list[str]], str]

_DEFAULT_LOG_LINES = 20
_MAP_ROW = 32
_MAP_GLYPHS = ascii_letters + digits

_HELP = """\
=== Available Commands ===
pwd                     - Print working directory
cd <path>               - Change directory
ls [path]               - List directory contents
mkdir <path>            - Create directory (and missing parents)
touch <name>            - Create file
rm <name>               - Remove file
rm -r <name>            - Remove directory recursively
cp <source> <dest>      - Copy file or directory
mv <source> <dest>      - Move/rename file or directory
get <file>              - Display file content and save it to the host
put <real> [dir]        - Copy real file into the virtual FS
write <file> <text...>  - Replace a file's content
info <path>             - Display file information
defrag                  - Defragment disk
status                  - Show disk usage
map                     - Show which file owns each sector
log [count]             - Show recent filesystem events
help                    - Show this help
exit                    - Exit program"""


class Shell:
    """Command interpreter bound to one filesystem session."""

    EXIT_SENTINEL = "__EXIT__"

    def __init__(self, *, session: Session, host_dir: Path | None = None) -> None:
        """Create a shell over *session*.

        Args:
            session: The session whose current directory commands use.
            host_dir: Real directory that ``get`` writes to and ``put``
                reads from (the process working directory by default).

        """
        self._session = session
        self._host_dir = host_dir if host_dir is not None else Path.cwd()

        # Command dispatch table: maps command names to handler methods.
        self._commands: dict[str, _Handler] = {
            "help": self._cmd_help,
            "pwd": self._cmd_pwd,
            "cd": self._cmd_cd,
            "ls": self._cmd_ls,
            "mkdir": self._cmd_mkdir,
            "touch": self._cmd_touch,
            "rm": self._cmd_rm,
            "cp": self._cmd_cp,
            "mv": self._cmd_mv,
            "get": self._cmd_get,
            "put": self._cmd_put,
            "write": self._cmd_write,
            "info": self._cmd_info,
            "defrag": self._cmd_defrag,
            "status": self._cmd_status,
            "map": self._cmd_map,
            "log": self._cmd_log,
            "exit": self._cmd_exit,
            "quit": self._cmd_exit,
        }

    @property
    def session(self) -> Session:
        """Return the session commands run in."""
        return self._session

    @property
    def command_names(self) -> list[str]:
        """Return all command names, sorted."""
        return sorted(self._commands)

    def execute(self, command: str) -> str:
        """Parse and execute one command line.

        Args:
            command: The raw command string (e.g. "cp notes.txt docs").

        Returns:
            The command output, an ``Error:`` line, or ``EXIT_SENTINEL``.

        """
        parts = command.strip().split()
        if not parts:
            return ""

        name, args = parts[0], parts[1:]
        handler = self._commands.get(name)
        if handler is None:
            return f"Unknown command: {name}\nType 'help' for available commands"
        try:
            return handler(args)
        except FsError as e:
            return f"Error: {e}"
        except OSError as e:
            return f"Error: host I/O failed: {e}"

    # -- Command handlers ----------------------------------------------------

    def _cmd_help(self, _args: list[str]) -> str:
        return _HELP

    def _cmd_pwd(self, _args: list[str]) -> str:
        return self._session.pwd()

    def _cmd_cd(self, args: list[str]) -> str:
        if not args:
            return "Error: cd requires a path"
        self._session.cd(args[0])
        return ""

    def _cmd_ls(self, args: list[str]) -> str:
        """List a directory, or describe a single file."""
        if args:
            info = self._session.info(args[0])
            if info.kind is NodeKind.FILE:
                return f"Name: {info.name}\nPath: {info.path}\nSize: {info.size} bytes"
        return "\n".join(self._session.ls(args[0] if args else None))

    def _cmd_mkdir(self, args: list[str]) -> str:
        if not args:
            return "Error: mkdir requires a name"
        return f"Directory created: {self._session.mkdir(args[0])}"

    def _cmd_touch(self, args: list[str]) -> str:
        if not args:
            return "Error: touch requires a filename"
        self._session.touch(args[0])
        return f"File created: {args[0]}"

    def _cmd_rm(self, args: list[str]) -> str:
        """Remove a file, or a directory tree with ``-r``."""
        recursive = bool(args) and args[0] == "-r"
        names = args[1:] if recursive else args
        if not names:
            return "Error: rm requires a name"
        self._session.rm(names[0], recursive=recursive)
        suffix = " (recursively)" if recursive else ""
        return f"Removed: {names[0]}{suffix}"

    def _cmd_cp(self, args: list[str]) -> str:
        if len(args) < 2:  # noqa: PLR2004
            return "Error: cp requires source and destination"
        return f"Copied: {args[0]} -> {self._session.cp(args[0], args[1])}"

    def _cmd_mv(self, args: list[str]) -> str:
        if len(args) < 2:  # noqa: PLR2004
            return "Error: mv requires source and destination"
        return f"Moved: {args[0]} -> {self._session.mv(args[0], args[1])}"

    def _cmd_get(self, args: list[str]) -> str:
        """Show a file and save a copy of it into the host directory."""
        if not args:
            return "Error: get requires a filename"
        data = self._session.get(args[0])
        target = self._host_dir / Path(args[0]).name
        target.write_bytes(data)
        return data.decode(errors="replace")

    def _cmd_put(self, args: list[str]) -> str:
        """Read a host file and store it under its base name."""
        if not args:
            return "Error: put requires real file and virtual directory names"
        source = self._host_dir / args[0]
        directory = args[1] if len(args) > 1 else "."
        data = source.read_bytes()
        path = self._session.put(source.name, data, directory)
        return f"File copied from real system: {args[0]} -> {path}"

    def _cmd_write(self, args: list[str]) -> str:
        if len(args) < 2:  # noqa: PLR2004
            return "Error: write requires a filename and content"
        self._session.write(args[0], " ".join(args[1:]).encode())
        return ""

    def _cmd_info(self, args: list[str]) -> str:
        """Show name, path, size and sectors of a node."""
        if not args:
            return "Error: info requires a filename"
        info = self._session.info(args[0])
        lines = [f"Name: {info.name}", f"Path: {info.path}"]
        if info.kind is NodeKind.DIRECTORY:
            lines.append("Type: Directory")
            lines.append(f"Entries: {info.child_count}")
            return "\n".join(lines)
        lines.append(f"Size: {info.size} bytes")
        if info.sectors:
            lines.append("Sectors: " + " ".join(str(s) for s in info.sectors))
        return "\n".join(lines)

    def _cmd_defrag(self, _args: list[str]) -> str:
        report = self._session.defrag()
        lines = [
            "Starting disk defragmentation...",
            f"Found {report.files} files",
            "Defragmentation completed successfully!",
        ]
        if report.used_sectors:
            lines.append(f"Used sectors: 0 to {report.used_sectors - 1}")
        else:
            lines.append("Used sectors: none")
        lines.append(f"Free sectors: {report.free_sectors}")
        return "\n".join(lines)

    def _cmd_status(self, _args: list[str]) -> str:
        status = self._session.status()
        return "\n".join(
            [
                f"Sectors: {status.used_sectors}/{status.total_sectors} used, "
                f"{status.free_sectors} free ({status.sector_size} bytes each)",
                f"Files: {status.files}  Directories: {status.directories}",
                f"Fragmented files: {status.fragmented_files}",
                f"Disk reads: {status.disk_reads}  writes: {status.disk_writes}",
            ]
        )

    def _cmd_map(self, _args: list[str]) -> str:
        """Draw the sector map: one glyph per file, ``.`` for free sectors."""
        fs = self._session.filesystem
        owners = fs.sector_map()
        glyphs: dict[int, str] = {}
        cells: list[str] = []
        for owner in owners:
            if owner is None:
                cells.append(".")
                continue
            if owner not in glyphs:
                glyphs[owner] = _MAP_GLYPHS[len(glyphs) % len(_MAP_GLYPHS)]
            cells.append(glyphs[owner])
        rows = [
            f"{start:>5}  {''.join(cells[start : start + _MAP_ROW])}"
            for start in range(0, len(cells), _MAP_ROW)
        ]
        legend = [f"  {glyph} = {fs.tree.full_path(owner)}" for owner, glyph in glyphs.items()]
        return "\n".join(rows + legend)

    def _cmd_log(self, args: list[str]) -> str:
        """Show the most recent log entries."""
        count = _DEFAULT_LOG_LINES
        if args:
            try:
                count = int(args[0])
            except ValueError:
                return f"Error: invalid count '{args[0]}'"
        entries = self._session.filesystem.logger.tail(count)
        return "\n".join(str(entry) for entry in entries)

    def _cmd_exit(self, _args: list[str]) -> str:
        return self.EXIT_SENTINEL
