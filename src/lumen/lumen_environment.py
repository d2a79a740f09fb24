"""
Variable environment for a LUMEN session.

The environment is an ordered list of ``(name, TypedValue)`` pairs rather
than a dict:

- ``declare`` appends, so repeated ``let`` of one name leaves several
  entries and lookups keep resolving to the first one.
- ``assign`` drops every entry with that name and appends a single fresh
  one, which moves the name to the end.
- ``lookup`` scans from the front and returns the first match.

The read-loop owns one environment for the whole session and passes it to
every ``evaluate`` call.
"""

from collections.abc import Iterator

from lumen.lumen_values import TypedValue


class UnboundVariableError(LookupError):
    """Raised when a name has no entry in the environment."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Variable '{name}' is not defined")
        self.name = name


class Environment:
    def __init__(self, entries: list[tuple[str, TypedValue]] | None = None) -> None:
        self.entries: list[tuple[str, TypedValue]] = list(entries or [])

    def __repr__(self) -> str:
        return f"Environment({self.entries!r})"

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[tuple[str, TypedValue]]:
        return iter(self.entries)

    def __contains__(self, name: object) -> bool:
        return any(entry_name == name for entry_name, _ in self.entries)

    def declare(self, name: str, value: TypedValue) -> None:
        self.entries.append((name, value))

    def assign(self, name: str, value: TypedValue) -> None:
        self.entries = [entry for entry in self.entries if entry[0] != name]
        self.entries.append((name, value))

    def lookup(self, name: str) -> TypedValue:
        for entry_name, value in self.entries:
            if entry_name == name:
                return value
        raise UnboundVariableError(name)

    def names(self) -> list[str]:
        return [name for name, _ in self.entries]

    def clear(self) -> None:
        self.entries.clear()

    def dump(self) -> str:
        """One ``name: value`` line per entry, in scan order."""
        return "\n".join(f"{name}: {value!r}" for name, value in self.entries)
