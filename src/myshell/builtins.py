"""Built-in shell commands."""

import os
import re
import sys
from collections.abc import Callable
from typing import TYPE_CHECKING, TypeAlias

from myshell.outcome import FAILURE, SUCCESS, ExecutionOutcome
from myshell.runner import open_output, report_os_error

if TYPE_CHECKING:
    from myshell.shell import Shell

BuiltinHandler: TypeAlias = Callable[[list[str], str | None, "Shell"], ExecutionOutcome]

_EXIT_CODE_RE = re.compile(r"[+-]?[0-9]+")

# Status values a shell accepts for `exit`: a signed 64-bit integer.
_EXIT_CODE_MIN = -(2**63)
_EXIT_CODE_MAX = 2**63 - 1


def parse_exit_code(arg: str) -> int | None:
    """Parse an `exit` argument to a status in 0-255, or None if invalid."""
    text = arg.strip()
    if not _EXIT_CODE_RE.fullmatch(text):
        return None
    value = int(text)
    if not _EXIT_CODE_MIN <= value <= _EXIT_CODE_MAX:
        return None
    return value & 0xFF


def builtin_exit(args: list[str], target: str | None, shell: "Shell") -> ExecutionOutcome:
    code = 0
    if args:
        code = parse_exit_code(args[0])
        if code is None:
            print(f"exit: {args[0]}: numeric argument required", file=sys.stderr)
            code = 1
    return ExecutionOutcome(code, terminated=True)


def builtin_cd(args: list[str], target: str | None, shell: "Shell") -> ExecutionOutcome:
    if not args:
        print("cd: missing argument", file=sys.stderr)
        return FAILURE
    path = shell.expand_home(args[0])
    try:
        os.chdir(path)
    except OSError as e:
        print(f"cd: {path}: {e.strerror}", file=sys.stderr)
        return FAILURE
    return SUCCESS


def builtin_echo(args: list[str], target: str | None, shell: "Shell") -> ExecutionOutcome:
    try:
        with open_output(target) as out:
            print(" ".join(args), file=out)
    except OSError as e:
        return report_os_error(e)
    return SUCCESS


def builtin_pwd(args: list[str], target: str | None, shell: "Shell") -> ExecutionOutcome:
    try:
        cwd = os.getcwd()
    except OSError as e:
        print(f"pwd: error retrieving current directory: {e.strerror}", file=sys.stderr)
        return FAILURE
    try:
        with open_output(target) as out:
            print(cwd, file=out)
    except OSError as e:
        return report_os_error(e)
    return SUCCESS


def builtin_type(args: list[str], target: str | None, shell: "Shell") -> ExecutionOutcome:
    if not args:
        print("type: missing argument", file=sys.stderr)
        return FAILURE
    ret = 0
    try:
        with open_output(target) as out:
            for name in args:
                match name:
                    case n if n in shell.builtins:
                        print(f"{name} is a shell builtin", file=out)
                    case _:
                        path = shell.resolve_executable(name)
                        if path:
                            print(f"{name} is {path}", file=out)
                        else:
                            print(f"{name}: not found", file=out)
                            ret = 1
    except OSError as e:
        return report_os_error(e)
    return ExecutionOutcome(ret)


def default_registry() -> dict[str, BuiltinHandler]:
    """Build the table of builtins a new shell starts with."""
    return {
        "exit": builtin_exit,
        "cd": builtin_cd,
        "echo": builtin_echo,
        "pwd": builtin_pwd,
        "type": builtin_type,
    }
