"""Tokenize shell input into words and output-redirection operators."""

from enum import Enum, auto

REDIRECT_OUT = ">"
REDIRECT_STDOUT = "1>"


class Operator(str):
    """A redirection operator found outside quotes.

    Compares equal to its plain text, so ``tokenize`` results can be checked
    against ordinary string lists, but a quoted ``'>'`` stays a plain ``str``
    and is never treated as an operator.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Operator({str.__repr__(self)})"


class _State(Enum):
    NORMAL = auto()
    SINGLE_QUOTE = auto()
    DOUBLE_QUOTE = auto()


def is_operator(token: str) -> bool:
    return isinstance(token, Operator)


def tokenize(line: str) -> list[str]:
    """Tokenize a shell input line.

    Single quotes disable all escaping. Inside double quotes and in unquoted
    text a backslash makes the next character literal, whatever it is.
    ``>`` and ``1>`` are recognized as operators only outside quotes, even
    when adjacent to a word (``echo hi>out`` -> ``['echo', 'hi', '>', 'out']``).

    Never raises: an unterminated quote or a trailing backslash simply ends
    the current token at end of input.
    """
    tokens: list[str] = []
    buf: list[str] = []
    state = _State.NORMAL
    escape = False

    def flush() -> None:
        if buf:
            tokens.append("".join(buf))
            buf.clear()

    i = 0
    while i < len(line):
        ch = line[i]

        if escape:
            buf.append(ch)
            escape = False
            i += 1
            continue

        match state:
            case _State.SINGLE_QUOTE:
                if ch == "'":
                    state = _State.NORMAL
                else:
                    buf.append(ch)
            case _State.DOUBLE_QUOTE:
                if ch == '"':
                    state = _State.NORMAL
                elif ch == "\\":
                    escape = True
                else:
                    buf.append(ch)
            case _State.NORMAL:
                if line.startswith(REDIRECT_STDOUT, i):
                    flush()
                    tokens.append(Operator(REDIRECT_STDOUT))
                    i += len(REDIRECT_STDOUT)
                    continue
                if ch == REDIRECT_OUT:
                    flush()
                    tokens.append(Operator(REDIRECT_OUT))
                elif ch == "\\":
                    escape = True
                elif ch == "'":
                    state = _State.SINGLE_QUOTE
                elif ch == '"':
                    state = _State.DOUBLE_QUOTE
                elif ch.isspace():
                    flush()
                else:
                    buf.append(ch)
        i += 1

    flush()
    return tokens
