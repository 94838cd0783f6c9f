"""Running commands with redirections and pipelines."""

from __future__ import annotations

import contextlib
import copy
import os
import sys
import tempfile
from collections.abc import Iterator

from .builtins import execute_command
from .commands import Command, RedirType
from .environment import Environment


@contextlib.contextmanager
def _stdout_to(fd: int) -> Iterator[None]:
    """Send both Python output and child output to ``fd``."""
    sys.stdout.flush()
    saved = os.dup(1)
    try:
        os.dup2(fd, 1)
        with open(os.dup(1), "w", encoding="utf-8", closefd=True) as stream:
            with contextlib.redirect_stdout(stream):
                yield
    finally:
        os.dup2(saved, 1)
        os.close(saved)


@contextlib.contextmanager
def _stdin_from(fd: int) -> Iterator[None]:
    """Make ``fd`` the standard input of child programs."""
    saved = os.dup(0)
    try:
        os.dup2(fd, 0)
        yield
    finally:
        os.dup2(saved, 0)
        os.close(saved)


def apply_redirection(command: Command, env: Environment) -> bool:
    """Run ``command`` under its first redirection; return False if it has none."""
    if not command.redirections:
        return False
    redir = command.redirections[0]
    if redir.type in (RedirType.OUT, RedirType.APPEND):
        mode = os.O_TRUNC if redir.type == RedirType.OUT else os.O_APPEND
        if redir.filename is None:
            print(f"fd error :: {os.strerror(2)}", file=sys.stderr)
            return True
        try:
            fd = os.open(redir.filename, os.O_WRONLY | os.O_CREAT | mode, 0o644)
        except OSError as exc:
            print(f"fd error :: {exc.strerror}", file=sys.stderr)
            return True
        try:
            with _stdout_to(fd):
                execute_command(command, env)
        finally:
            os.close(fd)
        return True
    source = redir.filename if redir.type == RedirType.IN else command.heredoc
    if source is None:
        print(f"open REDIRECT_IN: {os.strerror(2)}", file=sys.stderr)
        return True
    try:
        fd = os.open(source, os.O_RDONLY)
    except OSError as exc:
        print(f"open REDIRECT_IN: {exc.strerror}", file=sys.stderr)
        return True
    try:
        with _stdin_from(fd):
            execute_command(command, env)
    finally:
        os.close(fd)
    return True


def _run(command: Command, env: Environment) -> None:
    if not apply_redirection(command, env):
        execute_command(command, env)


def execute_pipeline(commands: list[Command], env: Environment) -> None:
    """Run ``commands`` connected by pipes.

    A lone command runs in the shell itself; in a pipeline each stage runs
    in turn on its own copy of the environment, its output feeding the next.
    """
    if not commands:
        return
    if len(commands) == 1:
        _run(commands[0], env)
        return
    with contextlib.ExitStack() as files:
        previous = None
        for index, command in enumerate(commands):
            is_last = index == len(commands) - 1
            output = None if is_last else files.enter_context(tempfile.TemporaryFile())
            with contextlib.ExitStack() as stage:
                if previous is not None:
                    os.lseek(previous.fileno(), 0, os.SEEK_SET)
                    stage.enter_context(_stdin_from(previous.fileno()))
                if output is not None:
                    stage.enter_context(_stdout_to(output.fileno()))
                _run(command, copy.deepcopy(env))
            previous = output