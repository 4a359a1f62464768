"""Immutable URI value type.

Thin wrapper over ``urllib.parse`` that keeps the query as an ordered list
of decoded key/value pairs. Every modifier returns a new ``Uri``.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

if TYPE_CHECKING:
    from signeduri.builder import Builder
    from signeduri.config import SigningConfig
    from signeduri.signed import SignedUri
    from signeduri.signers.base import UriSigner

QueryPairs = tuple[tuple[str, str], ...]


def encode_query(pairs: Iterable[tuple[str, str]]) -> str:
    """Encode query pairs RFC 3986 style (spaces as %20)."""
    return urlencode(list(pairs), quote_via=quote, safe="")


class Query(Mapping[str, str]):
    """Read-only view of a URI's query parameters.

    Repeated keys are kept; lookups return the last value.
    """

    def __init__(self, pairs: QueryPairs = ()) -> None:
        self._pairs = pairs

    def __getitem__(self, key: str) -> str:
        for name, value in reversed(self._pairs):
            if name == key:
                return value
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._pairs:
            if name not in seen:
                seen.add(name)
                yield name

    def __len__(self) -> int:
        return len({name for name, _ in self._pairs})

    def __repr__(self) -> str:
        return f"Query({self.all()!r})"

    def has(self, key: str) -> bool:
        """Check if ``key`` is present (even with a blank value)."""
        return key in self

    def get_int(self, key: str, default: int | None = None) -> int | None:
        """Return the value of ``key`` as an int, or ``default``.

        Missing keys and values that are not integers both give ``default``.
        """
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default

    def all(self) -> dict[str, str]:
        """Return the parameters as a dict (last value wins)."""
        return {name: self[name] for name in self}

    def pairs(self) -> QueryPairs:
        """Return every key/value pair in order."""
        return self._pairs


class Uri:
    """Parsed, immutable URI."""

    def __init__(self, value: str | Uri = "") -> None:
        if isinstance(value, Uri):
            self._set_parts(value._scheme, value._netloc, value._path, value._query, value._fragment)
            return

        parts = urlsplit(str(value))
        self._set_parts(
            parts.scheme,
            parts.netloc,
            parts.path,
            tuple(parse_qsl(parts.query, keep_blank_values=True)),
            parts.fragment,
        )

    def _set_parts(self, scheme: str, netloc: str, path: str, query: QueryPairs, fragment: str) -> None:
        self._scheme = scheme
        self._netloc = netloc
        self._path = path
        self._query = query
        self._fragment = fragment

    @classmethod
    def parse(cls, value: str | Uri) -> Uri:
        """Return ``value`` as a Uri (Uri instances are returned unchanged)."""
        if isinstance(value, Uri):
            return value
        return Uri(value)

    def _with_query(self, pairs: Iterable[tuple[str, str]]) -> Uri:
        uri = Uri.__new__(Uri)
        uri._set_parts(self._scheme, self._netloc, self._path, tuple(pairs), self._fragment)
        return uri

    def __str__(self) -> str:
        return urlunsplit((
            self._scheme,
            self._netloc,
            self._path,
            encode_query(self._query),
            self._fragment,
        ))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Uri):
            return str(self) == str(other)
        if isinstance(other, str):
            return str(self) == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(str(self))

    @property
    def scheme(self) -> str:
        return self._scheme

    @property
    def host(self) -> str | None:
        return urlsplit(f"//{self._netloc}").hostname

    @property
    def port(self) -> int | None:
        return urlsplit(f"//{self._netloc}").port

    @property
    def path(self) -> str:
        return self._path

    @property
    def fragment(self) -> str:
        return self._fragment

    def query(self) -> Query:
        return Query(self._query)

    def with_query(self, pairs: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> Uri:
        """Return a copy whose query is exactly ``pairs``."""
        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        return self._with_query((str(k), str(v)) for k, v in items)

    def with_query_param(self, key: str, value: Any) -> Uri:
        """Return a copy with ``key`` set to ``value``, appended last."""
        kept = [(k, v) for k, v in self._query if k != key]
        kept.append((key, str(value)))
        return self._with_query(kept)

    def without_query_params(self, *keys: str) -> Uri:
        """Return a copy with every value of ``keys`` removed."""
        return self._with_query((k, v) for k, v in self._query if k not in keys)

    def sign(self, secret: str | bytes | UriSigner, config: SigningConfig | None = None) -> Builder:
        """Start building a signed version of this URI."""
        from signeduri.builder import Builder

        return Builder(self, secret, config=config)

    def verify(
        self,
        secret: str | bytes | UriSigner,
        single_use_token: str | int | None = None,
        config: SigningConfig | None = None,
    ) -> SignedUri:
        """Verify this URI and return it sealed.

        Raises:
            VerificationFailed: If the signature, expiry or single-use check fails
        """
        from signeduri.signed import SignedUri

        return SignedUri.create_verified(self, secret, single_use_token, config)

    def is_verified(
        self,
        secret: str | bytes | UriSigner,
        single_use_token: str | int | None = None,
        config: SigningConfig | None = None,
    ) -> bool:
        """Return True if ``verify`` would succeed."""
        from signeduri.errors import VerificationFailed

        try:
            self.verify(secret, single_use_token, config)
        except VerificationFailed:
            return False
        return True
