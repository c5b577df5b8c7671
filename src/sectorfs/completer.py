"""Tab completer for the filesystem shell.

The completer separates **what to complete** (pure logic, fully
testable) from **how to wire it** (readline integration in the REPL).

``complete(text, state)`` is the readline callback.  It delegates to
``completions(text, line)``, which completes command names for the
first word and virtual paths, relative to the shell's current
directory, for every later word.
"""

from __future__ import annotations

import readline
from typing import TYPE_CHECKING

from sectorfs.errors import FsError
from sectorfs.node import NodeKind

if TYPE_CHECKING:
    from sectorfs.shell import Shell

# Commands whose arguments are host paths, not virtual ones.
_HOST_COMMANDS: frozenset[str] = frozenset(["put"])


class Completer:
    """Context-aware tab completer for the shell."""

    def __init__(self, shell: Shell) -> None:
        """Create a completer attached to a shell instance."""
        self._shell = shell

    def complete(self, text: str, state: int) -> str | None:
        """Readline callback: return the *state*-th candidate for *text*.

        Args:
            text: The partial word being completed.
            state: Index into the candidate list (0, 1, 2, …).

        Returns:
            The candidate at *state*, or ``None`` when exhausted.

        """
        line = readline.get_line_buffer()
        candidates = self.completions(text, line)
        if state < len(candidates):
            return candidates[state]
        return None

    def completions(self, text: str, line: str) -> list[str]:
        """Return completion candidates based on context.

        Args:
            text: The partial word under the cursor.
            line: The full input line so far.

        Returns:
            Sorted list of matching candidates.

        """
        words = line.lstrip().split()

        # No words yet, or still typing the first word → command completion
        if not words or (len(words) == 1 and not line.endswith(" ")):
            return [cmd for cmd in self._shell.command_names if cmd.startswith(text)]

        if words[0] in _HOST_COMMANDS and (
            len(words) == 1 or (len(words) == 2 and not line.endswith(" "))  # noqa: PLR2004
        ):
            return []
        return self._complete_paths(text)

    def _complete_paths(self, text: str) -> list[str]:
        """Complete virtual paths.

        Split the partial path into a directory and a name prefix, list
        the directory from the session, and filter by prefix.
        Directories keep their trailing ``/``.
        """
        last_slash = text.rfind("/")
        directory = text[: last_slash + 1]
        prefix = text[last_slash + 1 :]
        session = self._shell.session
        try:
            if session.info(directory or ".").kind is not NodeKind.DIRECTORY:
                return []
            entries = session.ls(directory or None)
        except FsError:
            return []
        return sorted(directory + entry for entry in entries if entry.startswith(prefix))
