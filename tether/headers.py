from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, MutableMapping

HeaderSource = Mapping[str, "str | Iterable[str] | None"] | Iterable[tuple[str, str]]


def _sanitize(text: str) -> str:
    """
    Strip CR, LF and null bytes to prevent HTTP header injection (CRLF injection).
    """
    return text.replace("\r", "").replace("\n", "").replace("\x00", "")


def _key(name: str) -> str:
    return _sanitize(name).lower()


def _as_values(values: str | Iterable[str] | None) -> list[str]:
    if values is None:
        return []
    if isinstance(values, (str, bytes)):
        values = [values]
    out: list[str] = []
    for value in values:
        if isinstance(value, bytes):
            value = value.decode("latin-1")
        out.append(_sanitize(str(value)))
    return out


class Headers(MutableMapping[str, list[str]]):
    """
    Multi-valued header map.

    Lookups are case-insensitive, the casing of the first insertion is kept
    for iteration, and both names and values preserve insertion order.
    Accepts a mapping of name -> value(s) or an iterable of (name, value)
    pairs as produced by a wire parser.
    Names without values are never stored.
    """

    def __init__(self, source: HeaderSource | None = None) -> None:
        self._store: dict[str, tuple[str, list[str]]] = {}
        if source is None:
            return
        if isinstance(source, Mapping):
            for name, values in source.items():
                self.extend(name, values)
        else:
            for name, value in source:
                self.add(name, value)

    def __getitem__(self, name: str) -> list[str]:
        return self._store[_key(name)][1]

    def __setitem__(self, name: str, values: str | Iterable[str] | None) -> None:
        """Replace the values of ``name``; no values removes the header."""
        key = _key(name)
        cleaned = _as_values(values)
        if not cleaned:
            self._store.pop(key, None)
            return
        original = self._store[key][0] if key in self._store else _sanitize(name)
        self._store[key] = (original, cleaned)

    def __delitem__(self, name: str) -> None:
        del self._store[_key(name)]

    def __iter__(self) -> Iterator[str]:
        for name, _ in self._store.values():
            yield name

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and _key(name) in self._store

    def add(self, name: str, value: str) -> None:
        """Append a single value, keeping any existing ones."""
        self.extend(name, [value])

    def extend(self, name: str, values: str | Iterable[str] | None) -> None:
        cleaned = _as_values(values)
        if not cleaned:
            return
        key = _key(name)
        if key not in self._store:
            self._store[key] = (_sanitize(name), [])
        self._store[key][1].extend(cleaned)

    def first(self, name: str, default: str | None = None) -> str | None:
        values = self._store.get(_key(name))
        if not values or not values[1]:
            return default
        return values[1][0]

    def pairs(self) -> Iterator[tuple[str, str]]:
        """Yield (name, value) pairs in insertion order."""
        for name, values in self._store.values():
            for value in values:
                yield name, value

    def copy(self) -> Headers:
        return Headers({name: list(values) for name, values in self._store.values()})

    def __eq__(self, other: object) -> bool:
        if isinstance(other, HeaderView):
            other = other._headers
        if not isinstance(other, Headers):
            return NotImplemented
        return {k: v[1] for k, v in self._store.items()} == {
            k: v[1] for k, v in other._store.items()
        }

    def __repr__(self) -> str:
        return f"Headers({dict((n, v) for n, v in self._store.values())!r})"


class HeaderView(Mapping[str, tuple[str, ...]]):
    """Read-only live view over a ``Headers`` instance."""

    def __init__(self, headers: Headers) -> None:
        self._headers = headers

    def __getitem__(self, name: str) -> tuple[str, ...]:
        return tuple(self._headers[name])

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __contains__(self, name: object) -> bool:
        return name in self._headers

    def first(self, name: str, default: str | None = None) -> str | None:
        return self._headers.first(name, default)

    def pairs(self) -> Iterator[tuple[str, str]]:
        return self._headers.pairs()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (Headers, HeaderView)):
            return self._headers == (other if isinstance(other, Headers) else other._headers)
        return NotImplemented

    def __repr__(self) -> str:
        return f"HeaderView({self._headers!r})"
