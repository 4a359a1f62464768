"""Tests for the Uri value type."""

from __future__ import annotations

import pytest

from signeduri.uri import Query, Uri


class TestUriParsing:
    """Test parsing and rendering."""

    def test_roundtrip_string(self):
        """Test a plain URI renders back unchanged."""
        uri = Uri("https://example.com/foo/bar?b=2&a=1#section")
        assert str(uri) == "https://example.com/foo/bar?b=2&a=1#section"

    def test_components(self):
        """Test component accessors."""
        uri = Uri("https://user@Example.com:8443/path?x=1#frag")
        assert uri.scheme == "https"
        assert uri.host == "example.com"
        assert uri.port == 8443
        assert uri.path == "/path"
        assert uri.fragment == "frag"

    def test_spaces_encoded_rfc3986(self):
        """Test query values are encoded with %20."""
        uri = Uri("https://example.com/?q=a+b")
        assert uri.query().get("q") == "a b"
        assert str(uri) == "https://example.com/?q=a%20b"

    def test_parse_returns_same_instance(self):
        """Test Uri.parse does not re-parse Uri instances."""
        uri = Uri("https://example.com")
        assert Uri.parse(uri) is uri
        assert Uri.parse("https://example.com") == uri

    def test_equality_and_hash(self):
        """Test equality against Uri and str."""
        a = Uri("https://example.com/?a=1")
        b = Uri("https://example.com/?a=1")
        assert a == b
        assert a == "https://example.com/?a=1"
        assert hash(a) == hash(b)
        assert a != Uri("https://example.com/?a=2")


class TestUriModifiers:
    """Test copy-on-write query modifiers."""

    def test_with_query_param_appends(self):
        """Test adding a new parameter."""
        uri = Uri("https://example.com/?a=1")
        assert str(uri.with_query_param("b", 2)) == "https://example.com/?a=1&b=2"

    def test_with_query_param_replaces(self):
        """Test replacing an existing parameter moves it last."""
        uri = Uri("https://example.com/?a=1&b=2&a=3")
        assert str(uri.with_query_param("a", "x")) == "https://example.com/?b=2&a=x"

    def test_without_query_params(self):
        """Test removing parameters."""
        uri = Uri("https://example.com/?a=1&b=2&c=3")
        assert str(uri.without_query_params("a", "c")) == "https://example.com/?b=2"

    def test_with_query_mapping(self):
        """Test replacing the whole query."""
        uri = Uri("https://example.com/p?a=1")
        assert str(uri.with_query({"z": 1, "y": "two"})) == "https://example.com/p?z=1&y=two"

    def test_modifiers_do_not_mutate(self):
        """Test the original is untouched."""
        uri = Uri("https://example.com/?a=1")
        uri.with_query_param("b", 2)
        uri.without_query_params("a")
        assert str(uri) == "https://example.com/?a=1"


class TestQuery:
    """Test the Query mapping view."""

    def test_get_last_value_wins(self):
        """Test repeated keys return the last value."""
        query = Uri("https://example.com/?a=1&a=2").query()
        assert query.get("a") == "2"
        assert query["a"] == "2"
        assert len(query) == 1
        assert query.pairs() == (("a", "1"), ("a", "2"))

    def test_has_blank_value(self):
        """Test blank values count as present."""
        query = Uri("https://example.com/?flag=&n=5").query()
        assert query.has("flag")
        assert not query.has("missing")
        assert "n" in query

    def test_get_int(self):
        """Test integer lookup."""
        query = Uri("https://example.com/?n=5&s=abc").query()
        assert query.get_int("n") == 5
        assert query.get_int("s") is None
        assert query.get_int("missing", 7) == 7

    def test_all(self):
        """Test dict conversion."""
        query = Query((("a", "1"), ("b", "2")))
        assert query.all() == {"a": "1", "b": "2"}
        assert list(query) == ["a", "b"]

    def test_missing_key_raises(self):
        """Test item access on missing key."""
        with pytest.raises(KeyError):
            Query()["nope"]
