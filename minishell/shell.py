"""The interactive read-evaluate loop."""

from __future__ import annotations

import os
import signal
import sys
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from .commands import ShellSyntaxError, build_commands, parse_tokens
from .environment import Environment
from .executor import execute_pipeline
from .expansion import UnmatchedQuoteError, expand_variables
from .tokens import tokenize

try:
    import readline
except ImportError:  # pragma: no cover - platforms without readline
    readline = None

PROMPT = "minishell$ "


def process_line(
    line: str, env: Environment, read_line: Callable[[str], str | None]
) -> None:
    """Tokenize, expand, parse and run one input line."""
    tokens = expand_variables(tokenize(line), env)
    commands = build_commands(tokens)
    parse_tokens(tokens, commands, env, read_line)
    execute_pipeline(commands, env)


def _on_sigint(signum: int, frame: object) -> None:
    print(f"\n{PROMPT}", end="", flush=True)


@contextmanager
def _interactive_signals() -> Iterator[None]:
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    previous_int = signal.signal(signal.SIGINT, _on_sigint)
    previous_quit = signal.signal(signal.SIGQUIT, signal.SIG_IGN)
    try:
        yield
    finally:
        if previous_int is not None:
            signal.signal(signal.SIGINT, previous_int)
        if previous_quit is not None:
            signal.signal(signal.SIGQUIT, previous_quit)


def _read_heredoc_line(prompt: str) -> str | None:
    """Read one here-document line; Ctrl-C or end of input ends the body."""
    main_thread = threading.current_thread() is threading.main_thread()
    previous = signal.signal(signal.SIGINT, signal.default_int_handler) if main_thread else None
    try:
        return input(prompt)
    except EOFError:
        return None
    except KeyboardInterrupt:
        print()
        return None
    finally:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)


def main(argv: list[str] | None = None) -> int:
    """Run the shell until end of input."""
    if argv is None:
        argv = sys.argv[1:]
    if argv:
        print("Error: Too many arguments")
        return 1
    env = Environment.from_environ(os.environ)
    try:
        with _interactive_signals():
            while True:
                try:
                    line = input(PROMPT)
                except EOFError:
                    print("Exit")
                    break
                if not line:
                    continue
                try:
                    process_line(line, env, _read_heredoc_line)
                except (ShellSyntaxError, UnmatchedQuoteError) as exc:
                    print(exc)
                    return 1
    finally:
        if readline is not None:
            readline.clear_history()
    return 0


if __name__ == "__main__":
    sys.exit(main())