"""Case-insensitive HTTP headers.

``Headers`` is the read-only view handlers get on ``request.headers``;
it stores the raw byte pairs from the ASGI scope and decodes on access.
``merge_headers`` overlays one set of response header pairs onto
another, which is how CORS headers end up on handler responses.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive request headers.

    ``__getitem__`` returns the first matching value.
    ``get_list`` returns every value sent under a name.
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        object.__setattr__(self, "_raw", raw)

    @classmethod
    def from_dict(cls, headers: Mapping[str, str]) -> Headers:
        """Build headers from a ``{name: value}`` mapping."""
        return cls(
            tuple(
                (name.lower().encode("latin-1"), value.encode("latin-1"))
                for name, value in headers.items()
            )
        )

    def __getitem__(self, key: str) -> str:
        key_lower = key.lower().encode("latin-1")
        for name, value in self._raw:
            if name.lower() == key_lower:
                return value.decode("latin-1")
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        key_lower = key.lower().encode("latin-1")
        return any(name.lower() == key_lower for name, _ in self._raw)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._raw:
            key = name.decode("latin-1").lower()
            if key not in seen:
                seen.add(key)
                yield key

    def __len__(self) -> int:
        return len(set(self))

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
        key_lower = key.lower().encode("latin-1")
        return [value.decode("latin-1") for name, value in self._raw if name.lower() == key_lower]

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        return self._raw


def merge_headers(
    base: tuple[tuple[str, str], ...],
    overlay: Mapping[str, str],
) -> tuple[tuple[str, str], ...]:
    """Overlay *overlay* onto *base* header pairs.

    Every pair in *base* whose name (case-insensitively) appears in
    *overlay* is dropped; all other pairs keep their order and
    repeats. The overlay pairs follow, in mapping order::

        merge_headers(
            (("X-Foo", "bar"), ("access-control-allow-origin", "a")),
            {"Access-Control-Allow-Origin": "*"},
        )
        # (("X-Foo", "bar"), ("Access-Control-Allow-Origin", "*"))
    """
    replaced = {name.lower() for name in overlay}
    kept = tuple((name, value) for name, value in base if name.lower() not in replaced)
    return (*kept, *overlay.items())
