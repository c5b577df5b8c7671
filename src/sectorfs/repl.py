"""Interactive REPL (Read-Eval-Print Loop) for the filesystem.

The REPL asks for the disk capacity, builds a filesystem, creates a
shell, and enters the classic loop:

    1. **Read**: display the ``fs:$`` prompt and read user input.
    2. **Eval**: pass the command to ``shell.execute()``.
    3. **Print**: display the result.
    4. **Loop**: repeat until the shell returns the exit sentinel.

The shell is fully testable (it returns strings); this module is the
thin I/O wrapper connecting it to ``stdin``/``stdout``.  The helpers
``parse_capacity`` and ``format_banner`` are pure and testable.
"""

import readline
import sys

from sectorfs.completer import Completer
from sectorfs.config import DiskConfig
from sectorfs.filesystem import FileSystem
from sectorfs.shell import Shell

PROMPT = "fs:$ "
CAPACITY_PROMPT = "Enter disk capacity (number of sectors): "


def parse_capacity(text: str) -> int | None:
    """Return *text* as a positive sector count, or ``None`` if it is not one."""
    try:
        value = int(text.strip())
    except ValueError:
        return None
    return value if value > 0 else None


def format_banner(config: DiskConfig) -> str:
    """Return the start-up banner for a freshly built disk."""
    return (
        "=== File System ===\n"
        f"File system created with {config.total_sectors} sectors "
        f"({config.sector_size} bytes each, {config.capacity_bytes} bytes total)\n"
        "Type 'help' for commands, 'exit' to quit."
    )


def prompt_capacity() -> int | None:
    """Ask for the disk capacity until a positive integer is entered.

    Returns:
        The capacity, or ``None`` if input ended or was interrupted first.

    """
    while True:
        try:
            text = input(CAPACITY_PROMPT)
        except (EOFError, KeyboardInterrupt):
            print()  # noqa: T201
            return None
        capacity = parse_capacity(text)
        if capacity is not None:
            return capacity
        print("Error: Disk capacity must be positive", file=sys.stderr)  # noqa: T201


def run(argv: list[str] | None = None) -> None:
    """Build a filesystem and run the interactive REPL.

    The capacity comes from the first command-line argument if it is a
    positive integer, otherwise it is prompted for.  Ctrl+D and Ctrl+C
    both exit gracefully.
    """
    args = sys.argv[1:] if argv is None else argv
    capacity = parse_capacity(args[0]) if args else None
    if capacity is None:
        capacity = prompt_capacity()
        if capacity is None:
            return

    config = DiskConfig(total_sectors=capacity)
    shell = Shell(session=FileSystem(config).open_session())

    # Wire up tab completion via readline.
    completer = Completer(shell)
    readline.set_completer(completer.complete)
    readline.set_completer_delims(" \t")
    readline.parse_and_bind("tab: complete")

    print(format_banner(config))  # noqa: T201

    try:
        while True:
            try:
                command = input(PROMPT)
            except EOFError:
                print()  # noqa: T201
                break

            result = shell.execute(command)
            if result == Shell.EXIT_SENTINEL:
                break
            if result:
                print(result)  # noqa: T201

    except KeyboardInterrupt:
        print("\nInterrupted.")  # noqa: T201

    finally:
        print("Goodbye!")  # noqa: T201


def main() -> None:
    """Console entry point (``sectorfs``)."""
    run()


if __name__ == "__main__":
    main()
