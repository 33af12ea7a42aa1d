"""Readline tab completion for builtins, PATH executables and files."""

import os
import readline
from collections.abc import Iterable
from functools import lru_cache


def setup_completion(builtin_names: Iterable[str]) -> None:
    """Configure readline to complete with the given builtin names."""
    readline.set_completer(Completer(builtin_names))
    readline.set_completer_delims(" \t\n>")
    readline.parse_and_bind("tab: complete")


class Completer:
    """Readline completer callable.

    On state 0, compute all matches. On subsequent states, return the next.
    """

    def __init__(self, builtin_names: Iterable[str]) -> None:
        self.builtin_names = sorted(builtin_names)
        self.matches: list[str] = []

    def __call__(self, text: str, state: int) -> str | None:
        if state == 0:
            line = readline.get_line_buffer()
            before_cursor = line[: readline.get_begidx()]
            self.matches = self.complete(text, before_cursor)

        if state < len(self.matches):
            return self.matches[state]
        return None

    def complete(self, text: str, before_cursor: str) -> list[str]:
        if before_cursor.strip():
            return _complete_path(text)
        return self.complete_command(text)

    def complete_command(self, text: str) -> list[str]:
        """Complete a command name; a trailing space follows unique names."""
        matches = {name for name in self.builtin_names if name.startswith(text)}
        matches.update(cmd for cmd in _get_path_commands() if cmd.startswith(text))
        if len(matches) == 1:
            return [f"{matches.pop()} "]
        return sorted(matches) + _complete_path(text)


def _complete_path(text: str) -> list[str]:
    """Complete a file or directory path."""
    dirname = os.path.dirname(text)
    basename = os.path.basename(text)
    search_dir = os.path.expanduser(dirname) if dirname else "."

    matches: list[str] = []
    try:
        for entry in os.listdir(search_dir):
            if entry.startswith(basename):
                full = os.path.join(dirname, entry) if dirname else entry
                if os.path.isdir(os.path.join(search_dir, entry)):
                    full += "/"
                matches.append(full)
    except OSError:
        pass

    return sorted(matches)


@lru_cache(maxsize=1)
def _get_path_commands() -> frozenset[str]:
    """Get all executable command names from PATH (cached)."""
    commands: set[str] = set()
    path = os.environ.get("PATH", "")

    for directory in path.split(os.pathsep):
        try:
            for entry in os.listdir(directory):
                full_path = os.path.join(directory, entry)
                if os.path.isfile(full_path) and os.access(full_path, os.X_OK):
                    commands.add(entry)
        except OSError:
            continue

    return frozenset(commands)
