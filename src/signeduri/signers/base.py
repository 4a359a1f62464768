"""Base signer interface for appending and checking URI MACs."""

from __future__ import annotations

import base64
import binascii
import hmac
from abc import ABC, abstractmethod

from signeduri.config import DEFAULT_PARAMETER
from signeduri.errors import SignerUnavailable
from signeduri.uri import Uri


def encode_mac(mac: bytes) -> str:
    """URL-safe base64 without padding."""
    return base64.urlsafe_b64encode(mac).decode("ascii").rstrip("=")


def decode_mac(value: str) -> bytes | None:
    """Inverse of ``encode_mac``; None when ``value`` is not valid base64."""
    try:
        return base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))
    except (binascii.Error, ValueError):
        return None


class UriSigner(ABC):
    """Abstract base class for URI signers.

    A signer appends an HMAC of the URI under its ``parameter`` query key
    and checks that key against the rest of the URI. The MAC covers the
    canonical form of the URI: query parameters sorted by key, the MAC
    parameter itself excluded.
    """

    def __init__(
        self,
        secret: str | bytes,
        parameter: str = DEFAULT_PARAMETER,
        algorithm: str = "sha256",
    ) -> None:
        """Initialize signer.

        Args:
            secret: Shared secret used as the HMAC key
            parameter: Query key holding the MAC
            algorithm: Hash algorithm name (e.g. sha256)

        Raises:
            ValueError: If secret or parameter is empty
            SignerUnavailable: If the backend or algorithm is not usable
        """
        if not secret:
            raise ValueError("Secret cannot be empty")
        if not parameter:
            raise ValueError("Parameter cannot be empty")

        if not self.is_available():
            raise SignerUnavailable(f"Signer backend '{self.name}' is not available")

        algorithm = algorithm.lower()
        if not self.supports(algorithm):
            raise SignerUnavailable(
                f"Signer backend '{self.name}' does not support algorithm '{algorithm}'"
            )

        self._secret = secret.encode("utf-8") if isinstance(secret, str) else secret
        self._parameter = parameter
        self._algorithm = algorithm

    @property
    @abstractmethod
    def name(self) -> str:
        """Return backend name."""
        pass

    @classmethod
    @abstractmethod
    def is_available(cls) -> bool:
        """Return whether this backend's dependencies are importable."""
        pass

    @classmethod
    @abstractmethod
    def supports(cls, algorithm: str) -> bool:
        """Return whether this backend can compute HMAC with ``algorithm``."""
        pass

    @abstractmethod
    def compute_mac(self, message: bytes) -> bytes:
        """Return the raw HMAC of ``message``."""
        pass

    def verify_mac(self, message: bytes, mac: bytes) -> bool:
        """Constant-time comparison of ``mac`` against the HMAC of ``message``."""
        return hmac.compare_digest(self.compute_mac(message), mac)

    @property
    def parameter(self) -> str:
        return self._parameter

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def derive(self, secret: str | bytes, parameter: str) -> UriSigner:
        """Return a signer of the same backend and algorithm with another key."""
        return type(self)(secret, parameter, self._algorithm)

    def canonical(self, uri: Uri | str) -> str:
        """Return the string the MAC is computed over."""
        uri = Uri.parse(uri).without_query_params(self._parameter)
        pairs = sorted(uri.query().pairs(), key=lambda pair: pair[0])
        return str(uri.with_query(pairs))

    def sign(self, uri: Uri | str) -> Uri:
        """Return ``uri`` with sorted query and the MAC parameter appended."""
        canonical = Uri(self.canonical(uri))
        mac = encode_mac(self.compute_mac(str(canonical).encode("utf-8")))
        return canonical.with_query_param(self._parameter, mac)

    def check(self, uri: Uri | str) -> bool:
        """Return True if ``uri`` carries a valid MAC parameter."""
        uri = Uri.parse(uri)
        value = uri.query().get(self._parameter)
        if not value:
            return False

        # Reject non-canonical encodings that decode to the same bytes
        mac = decode_mac(value)
        if mac is None or encode_mac(mac) != value:
            return False

        return self.verify_mac(self.canonical(uri).encode("utf-8"), mac)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(parameter={self._parameter!r}, algorithm={self._algorithm!r})"
