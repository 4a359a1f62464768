"""Copy-on-write builder for signed URIs."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import TYPE_CHECKING

from signeduri import expiry
from signeduri.config import SigningConfig
from signeduri.errors import AlreadySigned
from signeduri.signers import UriSigner, resolve_signer
from signeduri.uri import Uri

if TYPE_CHECKING:
    from signeduri.expiry import Duration, ExpiryInput
    from signeduri.signed import SignedUri


@dataclass(frozen=True)
class Builder:
    """Signing intent for a URI.

    Holds the URI, the signer and the optional expiry and single-use token.
    No cryptography happens until ``create()``. Every modifier returns a
    new Builder and leaves the original untouched.

    Attributes:
        uri: URI to sign (must not already be a SignedUri)
        signer: UriSigner, or a raw secret wrapped on construction
        expiration: Absolute UTC expiry instant
        single_use_token: Current state of the protected resource
        config: Settings used when wrapping a raw secret
    """

    uri: Uri
    signer: UriSigner
    expiration: datetime | None = None
    single_use_token: str | None = field(default=None, repr=False)
    config: SigningConfig | None = field(default=None, repr=False, compare=False, kw_only=True)

    def __post_init__(self):
        from signeduri.signed import SignedUri

        if isinstance(self.uri, SignedUri):
            raise AlreadySigned(self.uri)

        object.__setattr__(self, "uri", Uri.parse(self.uri))
        object.__setattr__(self, "signer", resolve_signer(self.signer, self.config))

    def __str__(self) -> str:
        return str(self.create())

    def expires(self, when: ExpiryInput) -> Builder:
        """Set an expiry for the signed URI.

        Args:
            when: datetime: the exact time the link should expire
                  timedelta/relativedelta: added to the current time
                  str: date expression (e.g. "+1 hour", "2030-01-01")
                  int/float: number of seconds until the link expires

        Raises:
            InvalidExpiry: If ``when`` cannot be resolved to an instant
        """
        return replace(self, expiration=expiry.normalize(when))

    def expires_at(self, when: datetime) -> Builder:
        """Expire at an exact instant."""
        return replace(self, expiration=expiry.expires_at(when))

    def expires_in(self, duration: Duration) -> Builder:
        """Expire after ``duration`` from now."""
        return replace(self, expiration=expiry.expires_in(duration))

    def expires_in_seconds(self, seconds: int | float) -> Builder:
        """Expire ``seconds`` from now."""
        return replace(self, expiration=expiry.expires_in_seconds(seconds))

    def single_use(self, token: str | int) -> Builder:
        """Make the signed URI single-use.

        Args:
            token: Value that MUST change once the URI is considered "used"
        """
        if token is None or str(token) == "":
            raise ValueError("Single-use token cannot be empty")
        return replace(self, single_use_token=str(token))

    def create(self) -> SignedUri:
        """Sign the URI."""
        from signeduri.signed import SignedUri

        return SignedUri.new(self)
