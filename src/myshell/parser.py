"""Split a token list into a command and its output redirection."""

from dataclasses import dataclass, field

from myshell.tokenizer import is_operator


@dataclass(frozen=True)
class ParsedCommand:
    """A single command with an optional stdout redirection target."""

    name: str
    args: list[str] = field(default_factory=list)
    output_target: str | None = None


def parse(tokens: list[str]) -> ParsedCommand | None:
    """Extract redirection operators from a token list.

    The token after ``>`` or ``1>`` becomes the output target; when several
    redirections appear, the last one wins. Returns None when no arguments
    remain. Raises ValueError when an operator has no filename after it.
    """
    argv: list[str] = []
    output_target: str | None = None

    i = 0
    while i < len(tokens):
        token = tokens[i]
        if is_operator(token):
            if i + 1 >= len(tokens):
                raise ValueError("syntax error near unexpected token `newline'")
            output_target = tokens[i + 1]
            i += 2
        else:
            argv.append(token)
            i += 1

    if not argv:
        return None

    return ParsedCommand(name=argv[0], args=argv[1:], output_target=output_target)
