"""Variable expansion and quote handling for word tokens."""

from __future__ import annotations

from .environment import Environment
from .tokens import Token, TokenType

_SKIP_NEXT = frozenset({TokenType.HEREDOC, TokenType.REDIRECT_OUT, TokenType.APPEND})


class UnmatchedQuoteError(ValueError):
    """Raised when a quoted section has no closing quote."""

    def __init__(self) -> None:
        super().__init__("Error: Unmatched quotes")


def _is_name_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch == "_")


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _join(current: str | None, extra: str | None) -> str | None:
    if extra is None:
        return current
    return extra if current is None else current + extra


def _read_variable(text: str, i: int, env: Environment) -> tuple[str | None, int, bool]:
    """Read ``$NAME`` whose name starts at ``i``.

    Return the value, the index after the name, and whether the name was a
    single skipped digit.
    """
    if _is_digit(text[i]):
        return None, i + 1, True
    start = i
    n = len(text)
    while i < n and _is_name_char(text[i]):
        i += 1
    return env.get(text[start:i]), i, False


def split_whitespace(text: str | None) -> list[str]:
    """Split ``text`` on blanks and control characters."""
    if text is None:
        return []
    words: list[str] = []
    current: list[str] = []
    for ch in text:
        if ord(ch) <= 32:
            if current:
                words.append("".join(current))
                current = []
        else:
            current.append(ch)
    if current:
        words.append("".join(current))
    return words


def strip_quoted(text: str, env: Environment, quote: str) -> str:
    """Remove the quotes of a quoted section, expanding variables in double quotes."""
    if len(text) < 2 or text[-1] != quote:
        raise UnmatchedQuoteError()
    n = len(text)
    out: list[str] = []
    i = 0
    while i < n:
        ch = text[i]
        if ch == '"':
            i += 1
            while i < n and text[i] != '"':
                if text[i] == "$" and i + 1 < n and _is_name_char(text[i + 1]):
                    value, i, skipped = _read_variable(text, i + 1, env)
                    if skipped:
                        continue
                    out.append(value or "")
                    if i < n and text[i] == '"':
                        i += 1
                if i < n:
                    out.append(text[i])
                i += 1
        elif ch == "'":
            i += 1
            while i < n and text[i] != "'":
                out.append(text[i])
                i += 1
            i += 1
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def _quoted_section(text: str, i: int) -> int:
    """Return the index just past the quoted section starting at ``i``."""
    quote = text[i]
    n = len(text)
    i += 1
    while i < n and text[i] != quote:
        i += 1
    return i + 1 if i < n else i


def expand_word(text: str, env: Environment) -> str:
    """Expand variables in ``text``; quoted sections come back in single quotes."""
    out: list[str] = []
    n = len(text)
    i = 0
    while i < n:
        ch = text[i]
        if ch == "$" and i + 1 < n and _is_name_char(text[i + 1]):
            value, i, skipped = _read_variable(text, i + 1, env)
            if not skipped:
                out.append(value or "")
        elif ch in ('"', "'"):
            end = _quoted_section(text, i)
            out.append("'")
            out.append(strip_quoted(text[i:end], env, ch))
            out.append("'" if ch == '"' else text[end - 1])
            i = end
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def _expand_token(value: str, env: Environment) -> list[str | None]:
    """Expand one word, splitting unquoted variable values into fields."""
    fields: list[str | None] = []
    current: str | None = None
    n = len(value)
    i = 0
    while i < n:
        ch = value[i]
        if ch == "$" and i + 1 < n and _is_name_char(value[i + 1]):
            expanded, i, skipped = _read_variable(value, i + 1, env)
            if skipped:
                continue
            words = split_whitespace(expanded)
            if not words:
                continue
            current = _join(current, words[0])
            if len(words) > 1:
                fields.append(current)
                fields.extend(words[1:-1])
                current = words[-1]
        elif ch in ('"', "'"):
            end = _quoted_section(value, i)
            current = _join(current, strip_quoted(value[i:end], env, ch))
            i = end
        else:
            current = _join(current, ch)
            i += 1
    fields.append(current)
    return fields


def expand_variables(tokens: list[Token], env: Environment) -> list[Token]:
    """Return ``tokens`` with words expanded and unquoted values split."""
    result: list[Token] = []
    skip_next = False
    for token in tokens:
        if skip_next:
            skip_next = False
            result.append(token)
            continue
        if token.type == TokenType.WORD and token.value is not None:
            result.extend(Token(v, TokenType.WORD) for v in _expand_token(token.value, env))
            continue
        if token.type in _SKIP_NEXT:
            skip_next = True
        result.append(token)
    return result