"""Run external programs and open output redirection targets."""

import contextlib
import signal
import subprocess
import sys
import threading
from collections.abc import Callable, Iterator
from typing import TextIO, TypeAlias

from myshell.outcome import ExecutionOutcome

ExecutableResolver: TypeAlias = Callable[[str], str | None]

SHELL_NAME = "myshell"
COMMAND_NOT_EXECUTABLE = 126
COMMAND_NOT_FOUND = 127


@contextlib.contextmanager
def open_output(target: str | None) -> Iterator[TextIO]:
    """Yield the stream a command should write to.

    With no target this is ``sys.stdout``. Otherwise the target is created
    or truncated and closed again when the block exits, error or not.
    """
    if target is None:
        yield sys.stdout
        return
    with open(target, "w") as fh:
        yield fh


@contextlib.contextmanager
def ignoring_interrupts() -> Iterator[None]:
    """Ignore SIGINT in the shell while a child owns the terminal.

    Ctrl-C reaches the whole foreground process group, so the child still
    gets it and its death is reported through its exit status. Must be
    entered after the child is spawned, or the child inherits SIG_IGN.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    previous = signal.signal(signal.SIGINT, signal.SIG_IGN)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def report_os_error(err: OSError, prefix: str = SHELL_NAME) -> ExecutionOutcome:
    """Print an OSError as ``<prefix>: <file>: <reason>`` and return failure."""
    if err.filename is not None:
        print(f"{prefix}: {err.filename}: {err.strerror}", file=sys.stderr)
    else:
        print(f"{prefix}: {err.strerror or err}", file=sys.stderr)
    return ExecutionOutcome(1)


def exit_status(returncode: int) -> int:
    """Map a subprocess return code to a shell exit status.

    A child killed by signal N reports -N; shells report that as 128 + N.
    """
    if returncode < 0:
        return 128 - returncode
    return returncode


def run_external(
    name: str,
    args: list[str],
    output_target: str | None,
    resolve_executable: ExecutableResolver,
) -> ExecutionOutcome:
    """Resolve and run an external program, waiting for it to finish.

    stdin and stderr are inherited; stdout is inherited or written to
    ``output_target``. A nonzero exit status terminates the shell with the
    same status.
    """
    path = resolve_executable(name)
    if path is None:
        print(f"{name}: command not found", file=sys.stderr)
        return ExecutionOutcome(COMMAND_NOT_FOUND)

    # The child writes straight to fd 1; anything still buffered here
    # must go out first.
    sys.stdout.flush()

    try:
        with open_output(output_target) as out:
            stdout = None if output_target is None else out
            try:
                proc = subprocess.Popen([name, *args], executable=path, stdout=stdout)
            except OSError as e:
                print(f"{name}: {e.strerror}", file=sys.stderr)
                return ExecutionOutcome(COMMAND_NOT_EXECUTABLE)
            with proc, ignoring_interrupts():
                returncode = proc.wait()
    except OSError as e:
        return report_os_error(e)

    status = exit_status(returncode)
    if status != 0:
        return ExecutionOutcome(status, terminated=True)
    return ExecutionOutcome(0)
