"""Building commands from tokens: arguments, redirections and here-documents."""

from __future__ import annotations

import itertools
import os
import tempfile
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum

from .environment import Environment
from .expansion import expand_word
from .tokens import Token, TokenType

MAX_HEREDOCS = 16
_heredoc_counter = itertools.count()


class RedirType(IntEnum):
    """Kinds of redirection attached to a command."""

    IN = 0
    OUT = 1
    APPEND = 2
    HEREDOC = 3


_OPERATORS = {"<": RedirType.IN, ">": RedirType.OUT, ">>": RedirType.APPEND, "<<": RedirType.HEREDOC}


class ShellSyntaxError(Exception):
    """Raised for input the shell cannot accept."""


@dataclass
class Redirection:
    filename: str | None
    type: RedirType


@dataclass
class Command:
    args: list[str] = field(default_factory=list)
    redirections: list[Redirection] = field(default_factory=list)
    heredoc: str | None = None


def redirection_type(op: str) -> RedirType:
    """Return the redirection kind of an operator string."""
    try:
        return _OPERATORS[op]
    except KeyError:
        raise ValueError(f"not a redirection operator: {op!r}") from None


def _build_one(segment: list[Token]) -> Command:
    command = Command()
    tokens = iter(segment)
    for token in tokens:
        if token.is_redirection:
            target = next(tokens, None)
            command.redirections.append(
                Redirection(target.value if target else None, redirection_type(token.value or ""))
            )
            if target is None:
                break
        elif token.value is not None:
            command.args.append(token.value)
    return command


def build_commands(tokens: list[Token]) -> list[Command]:
    """Split tokens at pipes into commands."""
    commands: list[Command] = []
    segment: list[Token] = []
    started = False
    for token in tokens:
        started = True
        if token.type == TokenType.PIPE:
            commands.append(_build_one(segment))
            segment = []
            started = False
        else:
            segment.append(token)
    if started:
        commands.append(_build_one(segment))
    return commands


def expand_heredoc_line(line: str, env: Environment) -> str:
    """Expand ``$NAME`` references in a here-document line."""
    out: list[str] = []
    n = len(line)
    i = 0
    while i < n:
        ch = line[i]
        nxt = line[i + 1] if i + 1 < n else ""
        if ch == "$" and nxt and nxt.isascii() and (nxt.isalnum() or nxt == "_"):
            i += 1
            if "0" <= line[i] <= "9":
                i += 1
                continue
            start = i
            while i < n and line[i].isascii() and (line[i].isalnum() or line[i] == "_"):
                i += 1
            out.append(env.get(line[start:i]) or "")
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def move_quote(text: str | None) -> str | None:
    """Drop the first quote pair of ``text`` and wrap the whole in that quote."""
    if text is None:
        return None
    first = next((i for i, ch in enumerate(text) if ch in ('"', "'")), None)
    if first is None:
        return text
    quote = text[first]
    close = text.find(quote, first + 1)
    if close < 0:
        raise ShellSyntaxError(f"minishell: syntax error near unexpected token `{text}'")
    return quote + text[:first] + text[first + 1 : close] + text[close + 1 :] + quote


def remove_quotes(text: str) -> str:
    """Remove quote characters that pair up, keeping what they enclose."""
    out: list[str] = []
    n = len(text)
    i = 0
    while i < n:
        ch = text[i]
        if ch in ('"', "'"):
            i += 1
            while i < n and text[i] != ch:
                out.append(text[i])
                i += 1
            if i < n:
                i += 1
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def _heredoc_path() -> str:
    return os.path.join(tempfile.gettempdir(), f"heredoc+{next(_heredoc_counter)}")


def collect_heredocs(
    tokens: list[Token],
    commands: list[Command],
    env: Environment,
    read_line: Callable[[str], str | None],
) -> None:
    """Read every here-document body into a file recorded on the first command."""
    for token, nxt in zip(tokens, tokens[1:]):
        if token.type == TokenType.HEREDOC and nxt.type != TokenType.WORD:
            print("minishell: syntax error near unexpected token `<<'")
            break
    previous: str | None = None
    for index, token in enumerate(tokens):
        if token.type != TokenType.HEREDOC:
            continue
        nxt = tokens[index + 1] if index + 1 < len(tokens) else None
        if nxt is None:
            print("minishell: syntax error near unexpected token `newline'")
            return
        if nxt.type != TokenType.WORD:
            return
        if previous is not None and os.path.exists(previous):
            os.unlink(previous)
        path = _heredoc_path()
        if commands:
            commands[0].heredoc = path
        delimiter = move_quote(nxt.value) or ""
        expand = delimiter[:1] not in ('"', "'")
        delimiter = remove_quotes(delimiter)
        try:
            handle = open(path, "w", encoding="utf-8")
        except OSError as exc:
            raise ShellSyntaxError("minishell: i can not open the file") from exc
        with handle:
            while True:
                line = read_line("> ")
                if line is None:
                    break
                if expand:
                    line = expand_heredoc_line(line, env)
                if line == delimiter:
                    break
                handle.write(line + "\n")
        previous = path


def check_ambiguous_redirects(commands: list[Command], env: Environment) -> None:
    """Expand input and append targets, rejecting ones that split into words."""
    for command in commands:
        for redir in command.redirections:
            if redir.type not in (RedirType.APPEND, RedirType.IN) or redir.filename is None:
                continue
            redir.filename = move_quote(expand_word(redir.filename, env))
            name = redir.filename or ""
            if name[:1] != "'" and any(ord(ch) <= 32 for ch in name):
                raise ShellSyntaxError("minishell: ambiguous redirect")


def parse_tokens(
    tokens: list[Token],
    commands: list[Command],
    env: Environment,
    read_line: Callable[[str], str | None],
) -> None:
    """Check here-document limits, read their bodies and check redirections."""
    if sum(t.type == TokenType.HEREDOC for t in tokens) > MAX_HEREDOCS:
        raise ShellSyntaxError("minishell: maximum here-document count exceeded")
    collect_heredocs(tokens, commands, env, read_line)
    check_ambiguous_redirects(commands, env)