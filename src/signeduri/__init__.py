"""Signed URIs (tamper-evident links).

Issue URIs carrying an HMAC signature, with optional expiry and single-use
binding, and verify them on the way back in.

Usage:
    link = sign("https://example.com/download/42", secret).expires("+1 hour").create()
    verified = verify(request_url, secret)
"""

from __future__ import annotations

from signeduri.builder import Builder
from signeduri.config import DEFAULT_CONFIG, SigningConfig
from signeduri.errors import (
    AlreadySigned,
    ExpiredUri,
    InvalidExpiry,
    InvalidSignature,
    SignedUriCloneError,
    SignedUriError,
    SignerUnavailable,
    UriAlreadyUsed,
    VerificationFailed,
)
from signeduri.signed import SignedUri
from signeduri.signers import (
    CryptographyUriSigner,
    HashlibUriSigner,
    UriSigner,
    create_signer,
    list_backends,
)
from signeduri.uri import Query, Uri

__version__ = "1.0.0"

__all__ = [
    "Builder",
    "SignedUri",
    "Uri",
    "Query",
    "UriSigner",
    "CryptographyUriSigner",
    "HashlibUriSigner",
    "SigningConfig",
    "DEFAULT_CONFIG",
    "SignedUriError",
    "AlreadySigned",
    "InvalidExpiry",
    "SignerUnavailable",
    "VerificationFailed",
    "InvalidSignature",
    "ExpiredUri",
    "UriAlreadyUsed",
    "SignedUriCloneError",
    "create_signer",
    "list_backends",
    "sign",
    "verify",
    "is_verified",
]


def sign(
    uri: Uri | str,
    secret: str | bytes | UriSigner,
    config: SigningConfig | None = None,
) -> Builder:
    """Start signing ``uri``.

    Raises:
        AlreadySigned: If ``uri`` is already a SignedUri
    """
    if isinstance(uri, SignedUri):
        raise AlreadySigned(uri)
    return Uri.parse(uri).sign(secret, config)


def verify(
    uri: Uri | str,
    secret: str | bytes | UriSigner,
    single_use_token: str | int | None = None,
    config: SigningConfig | None = None,
) -> SignedUri:
    """Verify ``uri`` and return it as a SignedUri.

    Raises:
        VerificationFailed: InvalidSignature, ExpiredUri or UriAlreadyUsed
        AlreadySigned: If ``uri`` is already a SignedUri
    """
    return SignedUri.create_verified(uri, secret, single_use_token, config)


def is_verified(
    uri: Uri | str,
    secret: str | bytes | UriSigner,
    single_use_token: str | int | None = None,
    config: SigningConfig | None = None,
) -> bool:
    """Return True if ``verify`` would succeed."""
    try:
        verify(uri, secret, single_use_token, config)
    except VerificationFailed:
        return False
    return True
