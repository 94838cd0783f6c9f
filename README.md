# minishell

A small interactive shell. It reads a line, splits it into tokens, expands
`$VARIABLES`, handles quotes, builds a pipeline of commands and runs them.

## Features

- Pipes: `ls | grep py | wc -l`
- Redirections: `<`, `>`, `>>` and here-documents with `<<` (at most 16
  here-documents per line).
- Variable expansion outside quotes and inside double quotes. Single quotes
  keep their text as written. Unquoted variable values are split into
  separate words on whitespace.
- Built-in commands:
  - `echo` (with `-n`); each word is printed followed by a space.
  - `cd` with exactly one argument; `cd ~` goes to `$HOME`.
  - `pwd`
  - `env`, which lists variables whose value is longer than one character.
  - `export`, which accepts `NAME`, `NAME=value` and `NAME+=value`; with no
    arguments it prints `declare -x` lines in sorted order.
  - `unset`
- Any other command is looked up on `PATH` and run as a child process with
  the shell's variables as its environment.
- `SHLVL` is raised by one when the shell starts.

## Installation

```
pip install .
```

## Usage

Start the shell:

```
minishell
```

The prompt is `minishell$ `. Type commands as you would in any shell:

```
minishell$ export GREETING=hello
minishell$ echo "$GREETING world" > out.txt
minishell$ cat << EOF
> $GREETING from a here-document
> EOF
```

End the session with Ctrl-D; the shell prints `Exit`. Ctrl-C at the prompt
shows a fresh prompt, and Ctrl-C while typing a here-document ends its body.

`minishell` takes no arguments. If you pass any, it prints an error and
exits with status 1.

## Using it as a library

The parsing stages can be used on their own:

```python
from minishell.environment import Environment
from minishell.tokens import tokenize
from minishell.expansion import expand_variables
from minishell.commands import build_commands

env = Environment.from_environ({"USER": "alice"})
tokens = expand_variables(tokenize('echo "$USER" > out.txt'), env)
commands = build_commands(tokens)
```

- `minishell.tokens`: `tokenize`, `split_line`, `classify`, `Token`,
  `TokenType`.
- `minishell.environment`: `Environment` (with `get`, `set`, `export`,
  `unset`, `to_env_table`, `to_export_table`, `declarations`), `EnvVar`,
  `atoi`.
- `minishell.expansion`: `expand_variables`, `expand_word`, `strip_quoted`,
  `split_whitespace`, `UnmatchedQuoteError`.
- `minishell.commands`: `build_commands`, `parse_tokens`, `Command`,
  `Redirection`, `RedirType`, `ShellSyntaxError`.
- `minishell.builtins`: `execute_command` and the individual builtins.
- `minishell.executor`: `execute_pipeline`, `apply_redirection`.
- `minishell.shell.process_line(line, env, read_line)` runs a whole line;
  `read_line` is the function that supplies here-document input.

## Limitations

- Only the first redirection of a command is applied.
- Pipeline stages run one after another, each on its own copy of the
  variables, so `export` or `unset` inside a pipeline does not last.
- The exit status of external programs is not recorded, and `$?` is not
  expanded.
- There is no `exit` builtin; end the session with Ctrl-D.
- An unmatched quote or another syntax error prints a message and ends the
  shell with status 1.

## Running the tests

```
pip install .[test]
pytest
```