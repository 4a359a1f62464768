"""HMAC signer backed by the ``cryptography`` library."""

from __future__ import annotations

from signeduri.signers.base import UriSigner

# Hash names accepted by this backend, mapped to cryptography hash classes
_ALGORITHMS = {
    "sha1": "SHA1",
    "sha224": "SHA224",
    "sha256": "SHA256",
    "sha384": "SHA384",
    "sha512": "SHA512",
    "sha512_224": "SHA512_224",
    "sha512_256": "SHA512_256",
    "sha3_224": "SHA3_224",
    "sha3_256": "SHA3_256",
    "sha3_384": "SHA3_384",
    "sha3_512": "SHA3_512",
}


class CryptographyUriSigner(UriSigner):
    """Signer using ``cryptography.hazmat.primitives.hmac``.

    Produces the same MACs as ``HashlibUriSigner`` for the same secret
    and algorithm, so URIs signed by one backend verify with the other.
    """

    @property
    def name(self) -> str:
        return "cryptography"

    @classmethod
    def is_available(cls) -> bool:
        try:
            from cryptography.hazmat.primitives import hashes, hmac  # noqa: F401
        except ImportError:
            return False
        return True

    @classmethod
    def supports(cls, algorithm: str) -> bool:
        return algorithm in _ALGORITHMS

    def _hmac(self):
        from cryptography.hazmat.primitives import hashes, hmac

        hash_class = getattr(hashes, _ALGORITHMS[self._algorithm])
        return hmac.HMAC(self._secret, hash_class())

    def compute_mac(self, message: bytes) -> bytes:
        h = self._hmac()
        h.update(message)
        return h.finalize()

    def verify_mac(self, message: bytes, mac: bytes) -> bool:
        from cryptography.exceptions import InvalidSignature

        h = self._hmac()
        h.update(message)
        try:
            h.verify(mac)
        except InvalidSignature:
            return False
        return True
