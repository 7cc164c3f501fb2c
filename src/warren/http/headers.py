"""Immutable, case-insensitive HTTP request headers.

Implements ``Mapping[str, str]``. Names are stored lower-cased; repeated
headers keep every value, in arrival order.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``__getitem__`` returns the first matching value.
    ``get_list`` returns all values for a header.

    Build from a plain mapping, from ``(name, value)`` pairs, or from raw
    ASGI byte pairs via ``from_raw``::

        Headers({"Content-Type": "application/json"})
        Headers.from_raw(scope["headers"])
    """

    __slots__ = ("_items",)

    def __init__(self, headers: Mapping[str, str] | Iterable[tuple[str, str]] = ()) -> None:
        pairs = headers.items() if isinstance(headers, Mapping) else headers
        items = tuple((str(name).lower(), str(value)) for name, value in pairs)
        object.__setattr__(self, "_items", items)

    @classmethod
    def from_raw(cls, raw: Iterable[tuple[bytes, bytes]]) -> Headers:
        """Decode ASGI header byte pairs (latin-1, per RFC 7230)."""
        return cls((name.decode("latin-1"), value.decode("latin-1")) for name, value in raw)

    def __setattr__(self, name: str, value: object) -> None:
        msg = "Headers is immutable"
        raise AttributeError(msg)

    def __getitem__(self, key: str) -> str:
        key_lower = key.lower()
        for name, value in self._items:
            if name == key_lower:
                return value
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        key_lower = key.lower()
        return any(name == key_lower for name, _ in self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(dict.fromkeys(name for name, _ in self._items))

    def __len__(self) -> int:
        return len(dict.fromkeys(name for name, _ in self._items))

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        try:
            return self[key]
        except KeyError:
            return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        key_lower = key.lower()
        return [value for name, value in self._items if name == key_lower]
