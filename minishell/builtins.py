"""Builtin commands and launching of external programs."""

from __future__ import annotations

import errno
import os
import signal
import stat
import subprocess
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager, suppress

from .commands import Command
from .environment import Environment

SELF_NAME = "./minishell"


def is_executable(path: str) -> bool:
    """Return True if ``path`` exists and has the owner's execute bit."""
    try:
        st = os.stat(path)
    except (OSError, ValueError):
        return False
    return bool(st.st_mode & stat.S_IXUSR)


def search_path(name: str, path: str | None) -> str | None:
    """Find ``name`` in the ``:``-separated directories of ``path``."""
    if name == SELF_NAME:
        return SELF_NAME
    if path is None:
        return None
    for directory in filter(None, path.split(":")):
        candidate = f"{directory}/{name}"
        if is_executable(candidate):
            return candidate
    return None


def pwd(env: Environment) -> None:
    """Print the working directory."""
    try:
        cwd = os.getcwd()
    except OSError as exc:
        print(f"getcwd() error: {exc.strerror}", file=sys.stderr)
        env.status = 1
        return
    print(cwd)
    env.status = 0


def print_env(env: Environment) -> None:
    """Print the variables that carry a value of more than one character."""
    for entry in env.to_env_table():
        _, eq, value = entry.partition("=")
        if eq and len(value) > 1:
            print(entry)
    env.status = 0


def echo(args: list[str], env: Environment) -> None:
    """Print the words after ``echo``, each followed by a space."""
    words = args[1:]
    newline = True
    if words and words[0] == "-n":
        newline = False
        words = words[1:]
    print("".join(f"{word} " for word in words), end="\n" if newline else "")
    env.status = 0


def cd(args: list[str], env: Environment) -> None:
    """Change the working directory; ``~`` goes to ``$HOME``."""
    if len(args) < 2:
        print("cd: missing argument")
        env.status = 1
        return
    if len(args) > 2:
        print("cd: too many arguments")
        env.status = 1
        return
    target = args[1]
    if target == "~":
        home = os.environ.get("HOME")
        if home is not None:
            with suppress(OSError):
                os.chdir(home)
    else:
        try:
            os.chdir(target)
        except OSError as exc:
            env.status = 1
            print(f"Error : {exc.strerror}", file=sys.stderr)
            return
    env.status = 0


def _reset_child_signals() -> None:
    signal.signal(signal.SIGINT, signal.SIG_DFL)
    signal.signal(signal.SIGQUIT, signal.SIG_DFL)


@contextmanager
def _sigint_ignored() -> Iterator[None]:
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    previous = signal.signal(signal.SIGINT, signal.SIG_IGN)
    try:
        yield
    finally:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)


def _child_environ(env: Environment) -> dict[str, str]:
    return dict(entry.split("=", 1) for entry in env.to_env_table() if "=" in entry)


def _report_missing() -> int:
    print(f"Error: {os.strerror(errno.ENOENT)}", file=sys.stderr)
    return 1


def run_external(args: list[str], env: Environment) -> int:
    """Run an external program found on ``$PATH`` and return its exit code."""
    name = args[0]
    path = os.environ.get("PATH")
    if path is None:
        return _report_missing()
    full_path = search_path(name, path)
    if full_path is None and "/" in name:
        full_path = name
    if full_path is None:
        return _report_missing()
    sys.stdout.flush()
    try:
        with _sigint_ignored():
            result = subprocess.run(
                [full_path, *args[1:]],
                env=_child_environ(env),
                preexec_fn=_reset_child_signals if os.name == "posix" else None,
            )
    except OSError as exc:
        print(f"Error: {exc.strerror}", file=sys.stderr)
        return 1
    code = result.returncode
    if code < 0:
        if -code == signal.SIGINT:
            print()
        elif -code == getattr(signal, "SIGQUIT", None):
            print("Quit (core dumped)")
    return code


def execute_command(command: Command, env: Environment) -> None:
    """Run one command, either as a builtin or as an external program."""
    if not command.args:
        return
    args = command.args
    match args[0]:
        case "pwd":
            pwd(env)
        case "env":
            print_env(env)
        case "echo":
            echo(args, env)
        case "cd":
            cd(args, env)
        case "export":
            env.export(args[1:])
        case "unset":
            env.unset(args[1:])
        case _:
            run_external(args, env)