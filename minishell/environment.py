"""Shell variables: the environment list and the export/unset builtins."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

STATUS_KEY = "$?"
_LONG_MAX = 2**63 - 1


def _to_int32(value: int) -> int:
    return (value + 2**31) % 2**32 - 2**31


def atoi(text: str) -> int:
    """Parse a leading decimal integer the way the C library's atoi does."""
    n = len(text)
    i = 0
    while i < n and (text[i] == " " or "\t" <= text[i] <= "\r"):
        i += 1
    sign = 1
    if i < n and text[i] in "+-":
        if text[i] == "-":
            sign = -1
        i += 1
    num = 0
    while i < n and "0" <= text[i] <= "9":
        digit = ord(text[i]) - ord("0")
        if num > (_LONG_MAX - digit) // 10:
            return -1 if sign == 1 else 0
        num = num * 10 + digit
        i += 1
    return _to_int32(_to_int32(num) * sign)


@dataclass
class EnvVar:
    """One shell variable; ``equal`` tells whether it was given a value."""

    key: str
    value: str | None = None
    equal: bool = True


@dataclass
class Environment:
    """Ordered shell variables plus the last exit status."""

    variables: list[EnvVar] = field(default_factory=list)
    status: int = 0

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | Iterable[str]) -> Environment:
        """Build from a mapping or from ``KEY=VALUE`` strings, bumping SHLVL."""
        if isinstance(environ, Mapping):
            pairs = list(environ.items())
        else:
            pairs = [(key, value) for key, _, value in (e.partition("=") for e in environ)]
        env = cls()
        for key, value in pairs:
            if key == "SHLVL":
                value = str(_to_int32(atoi(value) + 1))
            env.variables.append(EnvVar(key, value, True))
        return env

    def _find(self, key: str) -> EnvVar | None:
        return next((var for var in self.variables if var.key == key), None)

    def get(self, key: str) -> str | None:
        """Return the value of ``key``, or None if unset or valueless."""
        if key == STATUS_KEY:
            return str(self.status)
        var = self._find(key)
        return var.value if var else None

    def set(self, name_value: str) -> None:
        """Apply one export argument: ``NAME``, ``NAME=value`` or ``NAME+=value``."""
        name, eq, value = name_value.partition("=")
        if not eq:
            if self._find(name_value) is None:
                self.variables.append(EnvVar(name_value, None, False))
            return
        var = self._find(name)
        if var is not None:
            var.value = value
            var.equal = True
            return
        if name.endswith("+") and len(name) > 1:
            base = name[:-1]
            var = self._find(base)
            if var is not None:
                var.value = (var.value or "") + value
                var.equal = True
                return
            name = base
        self.variables.append(EnvVar(name, value, True))

    def export(self, args: list[str]) -> None:
        """Run ``export`` with ``args`` (the words after the command name)."""
        if not args:
            for line in self.declarations(self.to_export_table()):
                print(line)
            return
        for arg in args:
            self.set(arg)

    def unset(self, args: list[str]) -> None:
        """Run ``unset`` with ``args`` (the words after the command name)."""
        if not args:
            print("unset: not enough arguments")
            return
        for arg in args:
            if "=" in arg:
                print(f"unset: `{arg}': not a valid identifier")
                continue
            self.variables = [var for var in self.variables if var.key != arg]

    def to_env_table(self) -> list[str]:
        """Return the variables as ``KEY=VALUE`` entries for a child process."""
        table = []
        for var in self.variables:
            if var.equal:
                table.append(f"{var.key}={var.value or ''}")
            else:
                table.append(var.key)
        return table

    def to_export_table(self) -> list[str]:
        """Return the variables formatted for ``export`` with no arguments."""
        table = []
        for var in self.variables:
            if var.equal and var.value is not None:
                table.append(f'{var.key}="{var.value}"')
            elif var.equal:
                table.append(f"{var.key}=")
            else:
                table.append(var.key)
        return table

    def declarations(self, table: list[str] | None = None) -> list[str]:
        """Return ``declare -x`` lines for ``table`` in sorted order."""
        if table is None:
            table = self.to_export_table()
        return [f"declare -x {entry}" for entry in sorted(table)]