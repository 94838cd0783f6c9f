"""Splitting an input line into shell tokens."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

_QUOTES = ('"', "'")
_OPERATORS = ("<", ">")


class TokenType(IntEnum):
    """Kinds of token produced by the tokenizer."""

    WORD = 0
    PIPE = 1
    REDIRECT_IN = 2
    REDIRECT_OUT = 3
    APPEND = 4
    HEREDOC = 5


_REDIRECTIONS = frozenset(
    {TokenType.REDIRECT_IN, TokenType.REDIRECT_OUT, TokenType.APPEND, TokenType.HEREDOC}
)


@dataclass
class Token:
    """One token of an input line."""

    value: str | None
    type: TokenType = TokenType.WORD

    @property
    def is_redirection(self) -> bool:
        return self.type in _REDIRECTIONS


def _is_blank(ch: str) -> bool:
    return ord(ch) <= 32


def _is_break(ch: str) -> bool:
    return ch == "|" or ch in _OPERATORS


def count_words(line: str) -> int:
    """Count the tokens that ``split_line`` will take from ``line``."""
    n = len(line)
    i = 0
    words = 0
    quote: str | None = None
    while i < n and _is_blank(line[i]):
        i += 1
    while i < n:
        ch = line[i]
        starts = i == 0 or _is_blank(line[i - 1]) or _is_break(line[i - 1])
        if ch in _QUOTES and quote is None:
            if starts:
                words += 1
            quote = ch
        if _is_break(ch) and quote is None:
            if i + 1 < n and line[i + 1] == ch:
                i += 1
            words += 1
        elif not _is_blank(ch) and quote is None and starts:
            words += 1
        i += 1
        if i < n and line[i] == quote:
            quote = None
            i += 1
    return words


def _next_token(line: str, i: int) -> tuple[str, int]:
    """Read one token starting at ``i``; return it and the index after it."""
    n = len(line)
    start = i
    while i < n:
        ch = line[i]
        if _is_break(ch):
            if ch == "|":
                return "|", i + 1
            if i + 1 < n and line[i + 1] == ch:
                i += 1
            i += 1
            return line[start:i], i
        if ch in _QUOTES:
            i += 1
            while i < n and line[i] != ch:
                i += 1
            if i >= n:
                return line[start:i], i
        if i + 1 >= n or _is_blank(line[i + 1]) or _is_break(line[i + 1]):
            i += 1
            return line[start:i], i
        i += 1
    return line[start:i], i


def split_line(line: str) -> list[str]:
    """Split ``line`` into raw token strings, keeping quotes in place."""
    words = count_words(line)
    parts: list[str] = []
    i = 0
    n = len(line)
    while i < n and len(parts) < words:
        while i < n and _is_blank(line[i]):
            i += 1
        part, i = _next_token(line, i)
        parts.append(part)
    return parts


def classify(value: str) -> TokenType:
    """Return the token type of a raw token string."""
    first = value[:1]
    if first == "|":
        return TokenType.PIPE
    if value[:2] == "<<":
        return TokenType.HEREDOC
    if first == "<":
        return TokenType.REDIRECT_IN
    # A single '>' is tagged APPEND and '>>' REDIRECT_OUT; later stages
    # decide the real redirection kind from the operator text itself.
    if first == ">" and value[1:2] != ">":
        return TokenType.APPEND
    if first == ">":
        return TokenType.REDIRECT_OUT
    return TokenType.WORD


def tokenize(line: str) -> list[Token]:
    """Split ``line`` into typed tokens."""
    return [Token(part, classify(part)) for part in split_line(line)]