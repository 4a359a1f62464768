"""HMAC signer backed by the standard library (hmac/hashlib)."""

from __future__ import annotations

import hashlib
import hmac

from signeduri.signers.base import UriSigner


class HashlibUriSigner(UriSigner):
    """Signer using ``hmac.new`` with any hashlib algorithm.

    Always available; used when ``cryptography`` is not installed.
    """

    @property
    def name(self) -> str:
        return "hashlib"

    @classmethod
    def is_available(cls) -> bool:
        return True

    @classmethod
    def supports(cls, algorithm: str) -> bool:
        if algorithm not in hashlib.algorithms_available:
            return False
        # Variable-length digests (shake_*) cannot key an HMAC
        try:
            hmac.new(b"probe", b"", algorithm)
        except (TypeError, ValueError):
            return False
        return True

    def compute_mac(self, message: bytes) -> bytes:
        return hmac.new(self._secret, message, self._algorithm).digest()
