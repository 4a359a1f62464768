"""Error taxonomy for signing and verifying URIs.

Every failure carries a stable, machine-readable ``code`` so callers can
map rejections to their own responses ("link expired", "link invalid",
"link already used") without matching on message text.

None of these are retriable: a signature that failed once fails again.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any


class SignedUriError(Exception):
    """Base class for all signeduri errors."""

    code = "signed_uri_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AlreadySigned(SignedUriError):
    """A SignedUri was passed where an unsigned URI is required."""

    code = "already_signed"

    def __init__(self, uri: object) -> None:
        super().__init__(f'"{uri}" is already signed.')
        self.uri = uri


class InvalidExpiry(SignedUriError, ValueError):
    """An expiry value could not be normalized to an instant."""

    code = "invalid_expiry"

    def __init__(self, value: object, reason: str | None = None) -> None:
        message = f"{type(value).__name__} is not a valid expires at."
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)
        self.value = value


class SignerUnavailable(SignedUriError):
    """No usable MAC backend for the requested configuration."""

    code = "signer_unavailable"


class VerificationFailed(SignedUriError):
    """Base class for rejections of an incoming URI."""

    code = "verification_failed"
    default_message = "URI verification failed."

    def __init__(self, uri: object, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.uri = uri

    def to_dict(self) -> dict[str, Any]:
        """Serialize for error responses."""
        return {
            "code": self.code,
            "message": self.message,
            "uri": str(self.uri),
        }


class InvalidSignature(VerificationFailed):
    """Primary signature mismatch, or single-use expectation mismatch."""

    code = "invalid_signature"
    default_message = "URI signature is invalid."


class ExpiredUri(VerificationFailed):
    """The URI carried an expiry that has already passed."""

    code = "expired"
    default_message = "URI has expired."

    def __init__(self, uri: object, expires_at: datetime, message: str | None = None) -> None:
        super().__init__(uri, message or f"URI expired at {expires_at.isoformat()}.")
        self.expires_at = expires_at

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["expires_at"] = self.expires_at.isoformat()
        return data


class UriAlreadyUsed(VerificationFailed):
    """The single-use token changed since the URI was issued."""

    code = "already_used"
    default_message = "URI has already been used."


class SignedUriCloneError(TypeError):
    """A SignedUri was copied."""

    def __init__(self, uri: object) -> None:
        super().__init__(f"SignedUri ({uri}) cannot be cloned.")
