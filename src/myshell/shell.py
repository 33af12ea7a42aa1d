"""Main shell loop: prompt, read, parse, dispatch, repeat."""

import contextlib
import os
import readline
import shutil
import sys
from collections.abc import Callable
from types import MappingProxyType

from myshell.builtins import BuiltinHandler, default_registry
from myshell.completion import setup_completion
from myshell.outcome import ExecutionOutcome
from myshell.parser import ParsedCommand, parse
from myshell.runner import SHELL_NAME, ExecutableResolver, run_external
from myshell.tokenizer import tokenize

PROMPT = "$ "
HISTORY_FILE = os.path.expanduser("~/.myshell_history")
HISTORY_LENGTH = 1000


def default_home_directory() -> str | None:
    return os.environ.get("HOME")


class Shell:
    """Shell state and main loop.

    The builtin table and the PATH and HOME lookups are fixed at
    construction, so tests can swap them without touching the process
    environment.
    """

    def __init__(
        self,
        registry: dict[str, BuiltinHandler] | None = None,
        resolve_executable: ExecutableResolver = shutil.which,
        home_directory: Callable[[], str | None] = default_home_directory,
    ) -> None:
        self.builtins = MappingProxyType(registry if registry is not None else default_registry())
        self.resolve_executable = resolve_executable
        self.home_directory = home_directory
        self.last_exit_code: int = 0

    def load_history(self) -> None:
        with contextlib.suppress(OSError):
            readline.read_history_file(HISTORY_FILE)

    def save_history(self) -> None:
        with contextlib.suppress(OSError):
            readline.write_history_file(HISTORY_FILE)

    def expand_home(self, path: str) -> str:
        """Expand a leading ``~`` or ``~/`` to the home directory."""
        if path != "~" and not path.startswith("~/"):
            return path
        home = self.home_directory()
        if home is None:
            return path
        return home + path[1:]

    def run_command(self, line: str) -> ExecutionOutcome:
        """Tokenize, parse and run one input line."""
        try:
            command = parse(tokenize(line))
        except ValueError as e:
            print(f"{SHELL_NAME}: {e}", file=sys.stderr)
            self.last_exit_code = 2
            return ExecutionOutcome(2)

        if command is None:
            return ExecutionOutcome(self.last_exit_code)

        outcome = self.dispatch(command)
        self.last_exit_code = outcome.exit_code
        return outcome

    def dispatch(self, command: ParsedCommand) -> ExecutionOutcome:
        """Route a parsed command to a builtin or an external program."""
        handler = self.builtins.get(command.name)
        if handler is not None:
            return handler(command.args, command.output_target, self)
        return run_external(
            command.name, command.args, command.output_target, self.resolve_executable
        )

    def run(self) -> int:
        """Main shell loop. Returns the status the process should exit with."""
        self.load_history()
        readline.set_history_length(HISTORY_LENGTH)
        setup_completion(self.builtins)

        while True:
            try:
                line = input(PROMPT)
            except (EOFError, KeyboardInterrupt):
                print()
                break

            outcome = self.run_command(line)
            if outcome.terminated:
                self.save_history()
                return outcome.exit_code

        self.save_history()
        return 0


def main() -> None:
    """Entry point."""
    shell = Shell()
    sys.exit(shell.run())
