"""Immutable query string parameters."""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qsl


class QueryParams(Mapping[str, str]):
    """Immutable, order-preserving query string parameters.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key.
    """

    __slots__ = ("_pairs", "_raw")

    def __init__(self, query_string: bytes | str = b"") -> None:
        raw = query_string.decode("latin-1") if isinstance(query_string, bytes) else query_string
        object.__setattr__(self, "_raw", raw)
        object.__setattr__(self, "_pairs", tuple(parse_qsl(raw, keep_blank_values=True)))

    def __getitem__(self, key: str) -> str:
        for name, value in self._pairs:
            if name == key:
                return value
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return iter(dict.fromkeys(name for name, _ in self._pairs))

    def __len__(self) -> int:
        return len(dict.fromkeys(name for name, _ in self._pairs))

    def __repr__(self) -> str:
        return f"QueryParams({self._raw!r})"

    @property
    def raw(self) -> str:
        """The undecoded query string."""
        return self._raw

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return [value for name, value in self._pairs if name == key]

    def get_int(self, key: str, default: int | None = None) -> int | None:
        """Return value as int, or *default* if missing or not numeric."""
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default
