"""Signer backends - HMAC implementations behind the UriSigner interface."""

from __future__ import annotations

import logging

from signeduri.config import (
    BACKEND_AUTO,
    BACKEND_CRYPTOGRAPHY,
    BACKEND_HASHLIB,
    DEFAULT_CONFIG,
    SigningConfig,
)
from signeduri.errors import SignerUnavailable
from signeduri.signers.base import UriSigner
from signeduri.signers.crypto import CryptographyUriSigner
from signeduri.signers.stdlib import HashlibUriSigner

logger = logging.getLogger(__name__)

__all__ = [
    "UriSigner",
    "CryptographyUriSigner",
    "HashlibUriSigner",
    "get_signer_class",
    "create_signer",
    "resolve_signer",
    "list_backends",
]

# Preference order for the "auto" backend
BACKEND_CLASSES: dict[str, type[UriSigner]] = {
    BACKEND_CRYPTOGRAPHY: CryptographyUriSigner,
    BACKEND_HASHLIB: HashlibUriSigner,
}


def get_signer_class(backend: str = BACKEND_AUTO) -> type[UriSigner]:
    """Get a signer class by backend name.

    Args:
        backend: Backend name (auto, cryptography, hashlib)

    Returns:
        Signer class whose dependencies are installed

    Raises:
        SignerUnavailable: If the backend is unknown or not installed
    """
    if backend == BACKEND_AUTO:
        for name, signer_class in BACKEND_CLASSES.items():
            if signer_class.is_available():
                logger.debug("Selected signer backend %s", name)
                return signer_class
        raise SignerUnavailable("No HMAC signer backend is available")

    signer_class = BACKEND_CLASSES.get(backend)
    if signer_class is None:
        raise SignerUnavailable(f"Unknown signer backend: {backend}")

    if not signer_class.is_available():
        raise SignerUnavailable(
            f"Signer backend '{backend}' is not available. "
            "Install with: pip install cryptography"
        )

    return signer_class


def create_signer(
    secret: str | bytes,
    parameter: str | None = None,
    config: SigningConfig | None = None,
) -> UriSigner:
    """Create a signer for ``secret`` using the configured backend.

    Args:
        secret: Shared secret
        parameter: MAC query key (defaults to ``config.parameter``)
        config: Signing configuration

    Raises:
        SignerUnavailable: If no backend supports the configuration
    """
    config = config or DEFAULT_CONFIG
    signer_class = get_signer_class(config.backend)

    return signer_class(secret, parameter or config.parameter, config.algorithm)


def resolve_signer(
    secret_or_signer: str | bytes | UriSigner,
    config: SigningConfig | None = None,
) -> UriSigner:
    """Return ``secret_or_signer`` as a signer.

    Signer instances are used as they are; raw secrets are wrapped
    with ``create_signer``.
    """
    if isinstance(secret_or_signer, UriSigner):
        return secret_or_signer

    if not isinstance(secret_or_signer, (str, bytes)):
        raise TypeError(
            f"Expected a secret string or UriSigner, got {type(secret_or_signer).__name__}"
        )

    return create_signer(secret_or_signer, config=config)


def list_backends() -> list[dict[str, str | bool]]:
    """List signer backends.

    Returns:
        List of backend info dicts with name and available status
    """
    return [
        {"name": name, "available": signer_class.is_available()}
        for name, signer_class in BACKEND_CLASSES.items()
    ]
