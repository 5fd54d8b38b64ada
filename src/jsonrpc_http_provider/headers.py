# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Ordered request header collection."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from .exceptions import ConfigurationError

AUTHORIZATION = "Authorization"


def _same_name(a: str, b: str) -> bool:
    return a.casefold() == b.casefold()


@dataclass(frozen=True)
class Header:
    """A single request header."""

    name: str
    value: str

    @classmethod
    def coerce(cls, item: Any) -> Header:
        """Build a Header from a Header, a (name, value) pair or a mapping."""
        if isinstance(item, Header):
            return item
        if isinstance(item, Mapping):
            try:
                return cls(str(item["name"]), str(item["value"]))
            except KeyError as e:
                raise ConfigurationError(
                    f"Header mapping is missing the {e.args[0]!r} key: {item!r}"
                ) from e
        if isinstance(item, (tuple, list)) and len(item) == 2:
            return cls(str(item[0]), str(item[1]))
        raise ConfigurationError(f"Cannot interpret {item!r} as a header")


class HeaderSet:
    """
    Ordered sequence of request headers.

    Entries keep their insertion order and are sent in that order. Names are
    compared case-insensitively, as HTTP does. ``upsert`` keeps at most one
    entry per name, which is how the ``Authorization`` header is maintained
    across token refreshes.
    """

    def __init__(self, headers: Iterable[Any] = ()) -> None:
        self._headers: list[Header] = [Header.coerce(h) for h in headers]

    def upsert(self, name: str, value: str) -> None:
        """Replace the entry called ``name`` in place, or append it."""
        header = Header(name, value)
        replaced = False
        kept: list[Header] = []
        for existing in self._headers:
            if not _same_name(existing.name, name):
                kept.append(existing)
            elif not replaced:
                kept.append(header)
                replaced = True
        if not replaced:
            kept.append(header)
        self._headers = kept

    def get(self, name: str) -> str | None:
        for header in self._headers:
            if _same_name(header.name, name):
                return header.value
        return None

    def remove(self, name: str) -> bool:
        """Drop every entry called ``name``. Returns True if any was removed."""
        before = len(self._headers)
        self._headers = [h for h in self._headers if not _same_name(h.name, name)]
        return len(self._headers) != before

    def count(self, name: str) -> int:
        return sum(1 for h in self._headers if _same_name(h.name, name))

    def items(self) -> list[tuple[str, str]]:
        """Snapshot of the headers as (name, value) pairs."""
        return [(h.name, h.value) for h in self._headers]

    def __iter__(self) -> Iterator[Header]:
        return iter(list(self._headers))

    def __len__(self) -> int:
        return len(self._headers)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return any(_same_name(h.name, name) for h in self._headers)

    def __repr__(self) -> str:
        return f"HeaderSet({self.items()!r})"


__all__ = ["AUTHORIZATION", "Header", "HeaderSet"]
