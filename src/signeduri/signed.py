"""Sealed signed URIs: creation from a Builder and verification of raw URIs."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, NoReturn

from signeduri import clock
from signeduri.builder import Builder
from signeduri.config import EXPIRES_AT_KEY, SINGLE_USE_TOKEN_KEY, SigningConfig
from signeduri.errors import (
    AlreadySigned,
    ExpiredUri,
    InvalidSignature,
    SignedUriCloneError,
    UriAlreadyUsed,
    VerificationFailed,
)
from signeduri.signers import resolve_signer
from signeduri.uri import Uri

if TYPE_CHECKING:
    from signeduri.signers import UriSigner

logger = logging.getLogger(__name__)


def _reject(error: VerificationFailed) -> NoReturn:
    logger.info("Rejected signed URI (%s): %s", error.code, error.message)
    raise error


class SignedUri(Uri):
    """A URI whose signature has been created or verified.

    Instances only come from ``SignedUri.new`` (signing a Builder) and
    ``SignedUri.create_verified`` (checking an incoming URI). They are immutable
    and cannot be copied or pickled. Modifiers such as
    ``with_query_param`` return plain, unsigned ``Uri`` objects.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        raise TypeError("SignedUri cannot be instantiated directly, use sign() or verify().")

    @classmethod
    def _seal(cls, uri: Uri, expires_at: datetime | None) -> SignedUri:
        instance = cls.__new__(cls)
        Uri.__init__(instance, uri)
        instance._expires_at = expires_at
        object.__setattr__(instance, "_sealed", True)
        return instance

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, "_sealed", False):
            raise AttributeError(f"{type(self).__name__} is immutable")
        super().__setattr__(name, value)

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __copy__(self) -> NoReturn:
        raise SignedUriCloneError(self)

    def __deepcopy__(self, memo: dict[int, Any]) -> NoReturn:
        raise SignedUriCloneError(self)

    def __replace__(self, **changes: Any) -> NoReturn:
        raise SignedUriCloneError(self)

    def __reduce_ex__(self, protocol: Any) -> NoReturn:
        raise SignedUriCloneError(self)

    @classmethod
    def new(cls, builder: Builder) -> SignedUri:
        """Sign the URI held by ``builder``.

        ``_expires`` and ``_token`` are added before the primary signature
        so the primary MAC covers both.
        """
        if not isinstance(builder, Builder):
            raise TypeError(f"Expected a Builder, got {type(builder).__name__}")

        signer = builder.signer
        uri = builder.uri.without_query_params(EXPIRES_AT_KEY, SINGLE_USE_TOKEN_KEY, signer.parameter)

        if builder.expiration is not None:
            uri = uri.with_query_param(EXPIRES_AT_KEY, int(builder.expiration.timestamp()))

        if builder.single_use_token:
            uri = signer.derive(builder.single_use_token, SINGLE_USE_TOKEN_KEY).sign(uri)

        signed = cls._seal(signer.sign(uri), builder.expiration)
        logger.debug(
            "Signed URI for %s (temporary=%s, single_use=%s)",
            signed.path or "/",
            signed.is_temporary(),
            signed.is_single_use(),
        )
        return signed

    @classmethod
    def create_verified(
        cls,
        uri: Uri | str,
        secret: str | bytes | UriSigner,
        single_use_token: str | int | None = None,
        config: SigningConfig | None = None,
    ) -> SignedUri:
        """Verify an incoming URI.

        Args:
            uri: URI to verify (e.g. the full URL of a request)
            secret: Secret or signer the URI was signed with
            single_use_token: Current state token of the protected resource,
                required when the URI was issued as single-use
            config: Settings used when wrapping a raw secret

        Returns:
            Sealed SignedUri

        Raises:
            AlreadySigned: If ``uri`` is already a SignedUri
            InvalidSignature: If the signature does not match, or the
                single-use expectation differs from the URI
            ExpiredUri: If the URI's expiry has passed
            UriAlreadyUsed: If the single-use token has changed
        """
        if isinstance(uri, SignedUri):
            raise AlreadySigned(uri)

        uri = Uri.parse(uri)
        signer = resolve_signer(secret, config)

        if single_use_token is not None:
            single_use_token = str(single_use_token)

        if not signer.check(uri):
            _reject(InvalidSignature(uri))

        expires_at = cls._parse_expires_at(uri)

        if expires_at is not None and expires_at < clock.now():
            _reject(ExpiredUri(uri, expires_at))

        single_use_signature = uri.query().get(SINGLE_USE_TOKEN_KEY)

        if not single_use_signature and not single_use_token:
            return cls._seal(uri, expires_at)

        if single_use_signature and not single_use_token:
            _reject(InvalidSignature(uri, "URI is single use but this was not expected."))

        if not single_use_signature and single_use_token:
            _reject(InvalidSignature(uri, "Expected single use URI."))

        without_hash = uri.without_query_params(signer.parameter)

        if not signer.derive(single_use_token, SINGLE_USE_TOKEN_KEY).check(without_hash):
            _reject(UriAlreadyUsed(uri))

        return cls._seal(uri, expires_at)

    @staticmethod
    def _parse_expires_at(uri: Uri) -> datetime | None:
        value = uri.query().get(EXPIRES_AT_KEY)
        if value is None:
            return None

        try:
            return datetime.fromtimestamp(int(value), UTC)
        except (ValueError, OverflowError, OSError):
            _reject(InvalidSignature(uri, "URI has a malformed expiration."))

    def expires_at(self) -> datetime | None:
        return self._expires_at

    def is_temporary(self) -> bool:
        return self._expires_at is not None

    def is_single_use(self) -> bool:
        return bool(self.query().get(SINGLE_USE_TOKEN_KEY))
