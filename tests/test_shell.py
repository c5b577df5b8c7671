"""Tests for the shell module.

The shell is the command interpreter: it parses user input, dispatches
to built-in commands, and returns string output.  Filesystem errors and
host I/O errors come back as ``Error:`` lines rather than exceptions.
"""

from pathlib import Path

from sectorfs.config import DiskConfig
from sectorfs.filesystem import FileSystem
from sectorfs.shell import Shell


def _shell(tmp_path: Path, total_sectors: int = 16, sector_size: int = 4) -> Shell:
    """Create a shell over a fresh filesystem, with *tmp_path* as host dir."""
    fs = FileSystem(DiskConfig(total_sectors=total_sectors, sector_size=sector_size))
    return Shell(session=fs.open_session(), host_dir=tmp_path)


class TestShellExecute:
    """Verify command parsing and dispatch."""

    def test_empty_command_returns_empty(self, tmp_path: Path) -> None:
        """An empty command should produce no output."""
        shell = _shell(tmp_path)
        assert shell.execute("") == ""
        assert shell.execute("   ") == ""

    def test_unknown_command_returns_error(self, tmp_path: Path) -> None:
        """An unknown command names itself and points at help."""
        shell = _shell(tmp_path)
        result = shell.execute("foobar")
        assert result == "Unknown command: foobar\nType 'help' for available commands"

    def test_help_lists_commands(self, tmp_path: Path) -> None:
        """Help mentions every user-facing command."""
        shell = _shell(tmp_path)
        result = shell.execute("help")
        for name in ("pwd", "cd", "ls", "mkdir", "rm -r", "defrag", "put"):
            assert name in result

    def test_exit_and_quit_return_sentinel(self, tmp_path: Path) -> None:
        """Both exit spellings stop the loop."""
        shell = _shell(tmp_path)
        assert shell.execute("exit") == Shell.EXIT_SENTINEL
        assert shell.execute("quit") == Shell.EXIT_SENTINEL

    def test_command_names_sorted(self, tmp_path: Path) -> None:
        """command_names is sorted for completion."""
        names = _shell(tmp_path).command_names
        assert names == sorted(names)
        assert "map" in names


class TestNavigationCommands:
    """Verify pwd, cd, mkdir and ls."""

    def test_mkdir_cd_pwd(self, tmp_path: Path) -> None:
        """mkdir reports the new path; cd is silent."""
        shell = _shell(tmp_path)
        assert shell.execute("mkdir a/b") == "Directory created: /a/b"
        assert shell.execute("cd a/b") == ""
        assert shell.execute("pwd") == "/a/b"
        shell.execute("cd ../..")
        assert shell.execute("pwd") == "/"

    def test_ls_marks_directories(self, tmp_path: Path) -> None:
        """ls prints one sorted entry per line."""
        shell = _shell(tmp_path)
        shell.execute("mkdir docs")
        shell.execute("touch b.txt")
        assert shell.execute("ls") == "b.txt\ndocs/"
        assert shell.execute("ls docs") == ""

    def test_ls_of_file_describes_it(self, tmp_path: Path) -> None:
        """ls on a file prints its name, path and size."""
        shell = _shell(tmp_path)
        shell.execute("mkdir docs")
        shell.execute("cd docs")
        shell.execute("touch f")
        shell.execute("write f hello")
        shell.execute("cd /")
        assert shell.execute("ls docs/f") == "Name: f\nPath: /docs/f\nSize: 5 bytes"

    def test_ls_missing_path(self, tmp_path: Path) -> None:
        """ls on a missing path is an error."""
        assert _shell(tmp_path).execute("ls nope") == "Error: Path not found: nope"

    def test_cd_into_file_is_error(self, tmp_path: Path) -> None:
        """cd onto a file fails without moving."""
        shell = _shell(tmp_path)
        shell.execute("touch f")
        assert shell.execute("cd f").startswith("Error:")
        assert shell.execute("pwd") == "/"

    def test_missing_arguments(self, tmp_path: Path) -> None:
        """Commands that need operands say so."""
        shell = _shell(tmp_path)
        assert shell.execute("cd") == "Error: cd requires a path"
        assert shell.execute("mkdir") == "Error: mkdir requires a name"
        assert shell.execute("cp a") == "Error: cp requires source and destination"
        assert shell.execute("rm -r") == "Error: rm requires a name"


class TestFileCommands:
    """Verify touch, write, get, info, rm, cp and mv."""

    def test_touch_and_duplicate(self, tmp_path: Path) -> None:
        """A second touch of the same name is an error."""
        shell = _shell(tmp_path)
        assert shell.execute("touch f") == "File created: f"
        assert shell.execute("touch f") == "Error: Already exists: f"

    def test_invalid_name(self, tmp_path: Path) -> None:
        """Names outside the allowed alphabet are rejected."""
        shell = _shell(tmp_path)
        assert shell.execute("touch bad-name") == "Error: Invalid name: 'bad-name'"

    def test_write_then_get(self, tmp_path: Path) -> None:
        """write joins its words; get prints and saves the content."""
        shell = _shell(tmp_path)
        shell.execute("touch f")
        assert shell.execute("write f hello  there") == ""
        assert shell.execute("get f") == "hello there"
        assert (tmp_path / "f").read_bytes() == b"hello there"

    def test_info_file(self, tmp_path: Path) -> None:
        """info lists size and sectors for a file."""
        shell = _shell(tmp_path)
        shell.execute("touch f")
        shell.execute("write f abcdef")
        assert shell.execute("info f") == "Name: f\nPath: /f\nSize: 6 bytes\nSectors: 0 1"

    def test_info_directory(self, tmp_path: Path) -> None:
        """info on a directory counts its entries."""
        shell = _shell(tmp_path)
        shell.execute("mkdir d")
        shell.execute("cd d")
        shell.execute("touch x")
        shell.execute("cd /")
        assert shell.execute("info d") == "Name: d\nPath: /d\nType: Directory\nEntries: 1"

    def test_rm_directory_needs_flag(self, tmp_path: Path) -> None:
        """A non-empty directory needs -r."""
        shell = _shell(tmp_path)
        shell.execute("mkdir d/e")
        assert shell.execute("rm d").startswith("Error: Directory is not empty")
        assert shell.execute("rm -r d") == "Removed: d (recursively)"
        assert shell.execute("ls") == ""

    def test_cp_and_mv(self, tmp_path: Path) -> None:
        """cp duplicates content; mv renames in place."""
        shell = _shell(tmp_path)
        shell.execute("mkdir docs")
        shell.execute("touch f")
        shell.execute("write f data")
        assert shell.execute("cp f docs") == "Copied: f -> /docs/f"
        assert shell.execute("mv f g") == "Moved: f -> /g"
        assert shell.execute("get docs/f") == "data"
        assert shell.execute("ls") == "docs/\ng"

    def test_mv_folder_into_itself(self, tmp_path: Path) -> None:
        """A folder cannot be moved below itself."""
        shell = _shell(tmp_path)
        shell.execute("mkdir a/b")
        assert shell.execute("mv a a/b") == "Error: Cannot move a folder into itself"


class TestHostTransfer:
    """Verify put and get against the host directory."""

    def test_put_copies_host_file(self, tmp_path: Path) -> None:
        """put stores a host file under its base name."""
        (tmp_path / "real.txt").write_bytes(b"from host")
        shell = _shell(tmp_path)
        shell.execute("mkdir docs")
        result = shell.execute("put real.txt docs")
        assert result == "File copied from real system: real.txt -> /docs/real.txt"
        assert shell.execute("get docs/real.txt") == "from host"

    def test_put_missing_host_file(self, tmp_path: Path) -> None:
        """A missing host file reads as a host I/O error."""
        shell = _shell(tmp_path)
        assert shell.execute("put nope.txt").startswith("Error: host I/O failed:")

    def test_put_too_large_is_disk_full(self, tmp_path: Path) -> None:
        """A host file larger than the disk is not created."""
        (tmp_path / "big").write_bytes(b"x" * 100)
        shell = _shell(tmp_path, total_sectors=2)
        assert shell.execute("put big").startswith("Error: Cannot create big")
        assert shell.execute("ls") == ""


class TestDiskCommands:
    """Verify defrag, status, map and log."""

    def test_defrag_report(self, tmp_path: Path) -> None:
        """defrag prints the file count and the used range."""
        shell = _shell(tmp_path)
        shell.execute("touch a")
        shell.execute("write a 12345")
        result = shell.execute("defrag")
        assert "Found 1 files" in result
        assert "Used sectors: 0 to 1" in result
        assert "Free sectors: 14" in result

    def test_defrag_empty_disk(self, tmp_path: Path) -> None:
        """An empty disk has no used range."""
        assert "Used sectors: none" in _shell(tmp_path).execute("defrag")

    def test_status(self, tmp_path: Path) -> None:
        """status summarises sector use."""
        shell = _shell(tmp_path)
        shell.execute("touch a")
        shell.execute("write a 123")
        result = shell.execute("status")
        assert result.startswith("Sectors: 1/16 used, 15 free (4 bytes each)")
        assert "Files: 1  Directories: 1" in result

    def test_map_draws_owners(self, tmp_path: Path) -> None:
        """map draws one glyph per file and a legend."""
        shell = _shell(tmp_path)
        shell.execute("touch a")
        shell.execute("write a 12345")
        lines = shell.execute("map").splitlines()
        assert lines[0] == "    0  aa.............."
        assert lines[1] == "  a = /a"

    def test_log_tail(self, tmp_path: Path) -> None:
        """log shows the newest entries."""
        shell = _shell(tmp_path)
        shell.execute("mkdir docs")
        assert shell.execute("log 1") == "[INFO] tree: Directory created: /docs"

    def test_log_bad_count(self, tmp_path: Path) -> None:
        """A non-numeric count is rejected."""
        assert _shell(tmp_path).execute("log many") == "Error: invalid count 'many'"
