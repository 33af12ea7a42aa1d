"""Result of running one command, shared by builtins and external programs."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ExecutionOutcome:
    """Exit status of a command.

    ``terminated`` asks the shell loop to stop and exit the process with
    ``exit_code``. Nothing below the loop exits the process directly.
    """

    exit_code: int = 0
    terminated: bool = False


SUCCESS = ExecutionOutcome()
FAILURE = ExecutionOutcome(1)
