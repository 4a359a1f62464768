"""Tests for the signing Builder."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from signeduri import clock, sign
from signeduri.builder import Builder
from signeduri.config import SigningConfig
from signeduri.errors import AlreadySigned, InvalidExpiry
from signeduri.signed import SignedUri
from signeduri.signers import HashlibUriSigner
from signeduri.uri import Uri

SECRET = "s3cr3t"
NOW = datetime(2030, 1, 1, 12, 0, 0, tzinfo=UTC)


class TestBuilderConstruction:
    """Test creating builders."""

    def test_from_string(self):
        """Test string URIs are parsed."""
        builder = Builder("https://example.com/a?x=1", SECRET)
        assert isinstance(builder.uri, Uri)
        assert builder.expiration is None
        assert builder.single_use_token is None

    def test_secret_wrapped(self):
        """Test raw secrets become signers."""
        builder = Builder(Uri("https://example.com"), SECRET)
        assert builder.signer.parameter == "_hash"

    def test_signer_passthrough(self):
        """Test injected signers are used as is."""
        signer = HashlibUriSigner(SECRET, "sig")
        builder = Builder("https://example.com", signer)
        assert builder.signer is signer
        assert builder.create().query().has("sig")

    def test_config(self):
        """Test config applies to raw secrets."""
        config = SigningConfig(parameter="signature")
        builder = Builder("https://example.com", SECRET, config=config)
        assert builder.create().query().has("signature")

    def test_config_through_sign(self):
        """Test config passed to sign() and Uri.sign() reaches the signer."""
        config = SigningConfig(parameter="signature")
        builders = [
            sign("https://example.com", SECRET, config),
            Uri("https://example.com").sign(SECRET, config),
        ]
        for builder in builders:
            assert builder.expiration is None
            assert builder.signer.parameter == "signature"
            assert builder.create().query().has("signature")

    def test_config_is_keyword_only(self):
        """Test config cannot land in another field by position."""
        with pytest.raises(TypeError):
            Builder("https://example.com", SECRET, None, None, SigningConfig())

    def test_already_signed(self):
        """Test SignedUri values are refused."""
        signed = sign("https://example.com", SECRET).create()
        with pytest.raises(AlreadySigned):
            Builder(signed, SECRET)
        with pytest.raises(AlreadySigned):
            sign(signed, SECRET)
        with pytest.raises(AlreadySigned):
            signed.sign(SECRET)


class TestBuilderModifiers:
    """Test copy-on-write modifiers."""

    def test_expires_returns_new_builder(self):
        """Test expires() leaves the original untouched."""
        builder = sign("https://example.com", SECRET)
        with clock.frozen_time(NOW):
            expiring = builder.expires(60)
        assert builder.expiration is None
        assert expiring.expiration == NOW + timedelta(seconds=60)
        assert expiring is not builder

    def test_single_use_returns_new_builder(self):
        """Test single_use() leaves the original untouched."""
        builder = sign("https://example.com", SECRET)
        single = builder.single_use("v1")
        assert builder.single_use_token is None
        assert single.single_use_token == "v1"

    def test_explicit_expiry_methods(self):
        """Test expires_at / expires_in / expires_in_seconds."""
        builder = sign("https://example.com", SECRET)
        with clock.frozen_time(NOW):
            assert builder.expires_at(NOW).expiration == NOW
            assert builder.expires_in(timedelta(hours=2)).expiration == NOW + timedelta(hours=2)
            assert builder.expires_in_seconds(5).expiration == NOW + timedelta(seconds=5)

    def test_expires_string(self):
        """Test date expressions."""
        with clock.frozen_time(NOW):
            builder = sign("https://example.com", SECRET).expires("+1 day")
        assert builder.expiration == NOW + timedelta(days=1)

    def test_invalid_expiry(self):
        """Test invalid expiry values."""
        builder = sign("https://example.com", SECRET)
        with pytest.raises(InvalidExpiry):
            builder.expires(object())
        with pytest.raises(InvalidExpiry):
            builder.expires("whenever")

    def test_empty_single_use_token(self):
        """Test empty tokens are refused."""
        with pytest.raises(ValueError):
            sign("https://example.com", SECRET).single_use("")

    def test_integer_token(self):
        """Test counters are stored as strings, including zero."""
        assert sign("https://example.com", SECRET).single_use(0).single_use_token == "0"
        assert sign("https://example.com", SECRET).single_use(5).single_use_token == "5"

    def test_modifiers_commute(self):
        """Test expires() and single_use() in either order give the same result."""
        builder = sign("https://example.com/file?id=7", SECRET)
        when = NOW + timedelta(hours=1)

        a = builder.expires(when).single_use("token")
        b = builder.single_use("token").expires(when)

        assert a == b
        assert str(a) == str(b)

    def test_str_creates(self):
        """Test str() renders the signed URI."""
        builder = sign("https://example.com/?a=1", SECRET)
        assert str(builder) == str(builder.create())
        assert "_hash=" in str(builder)

    def test_create_returns_signed_uri(self):
        """Test create() result type."""
        assert isinstance(sign("https://example.com", SECRET).create(), SignedUri)

    def test_repr_hides_token(self):
        """Test the single-use token is not in repr."""
        builder = sign("https://example.com", SECRET).single_use("private-state")
        assert "private-state" not in repr(builder)
