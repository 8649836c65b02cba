"""The ordered environment list the shell works on."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Mapping


class Environment:
    """Ordered ``KEY=VALUE`` (or bare ``KEY``) entries."""

    def __init__(self, entries: Iterable[str] | None = None) -> None:
        self._entries: list[str] = list(entries or [])

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> Environment:
        """Build from a mapping; an empty mapping gives the default environment."""
        if not mapping:
            return cls.default()
        return cls(f"{key}={value}" for key, value in mapping.items())

    @classmethod
    def default(cls) -> Environment:
        """The environment used when the shell starts with none."""
        return cls(["OLDPWD", f"PWD={os.getcwd()}"])

    def get(self, key: str | None) -> str | None:
        """Value of the first entry starting with ``key``, or ``None``.

        An entry without ``=`` yields an empty value.
        """
        if key is None:
            return None
        for entry in self._entries:
            if entry.startswith(key):
                return entry.partition("=")[2]
        return None

    def find_index(self, name: str) -> int | None:
        """Position of the entry whose key is exactly the key of ``name``."""
        key = name.partition("=")[0]
        for index, entry in enumerate(self._entries):
            if entry == key or entry.startswith(key + "="):
                return index
        return None

    def export(self, entry: str) -> None:
        """Add ``entry`` or replace the entry with the same key.

        Replacing an entry makes it the head of the list.
        """
        position = self.find_index(entry)
        if position is None:
            self._entries.append(entry)
            return
        self._entries[position] = entry
        self._entries = self._entries[position:] + self._entries[:position]

    def unset(self, name: str) -> bool:
        """Remove the first entry starting with ``name``; report whether one was removed."""
        if not name:
            return False
        for index, entry in enumerate(self._entries):
            if entry.startswith(name):
                del self._entries[index]
                return True
        return False

    def entries(self) -> list[str]:
        """A copy of the raw entries in order."""
        return list(self._entries)

    def to_envp(self) -> dict[str, str]:
        """Entries that carry a value, as a mapping for child processes."""
        result: dict[str, str] = {}
        for entry in self._entries:
            key, sep, value = entry.partition("=")
            if sep:
                result[key] = value
        return result

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Environment({self._entries!r})"