"""
Unit tests for the HTTP request value.
"""

import pytest

from muxchain.http import HTTPRequest


class TestFromTarget:
    """Tests for HTTPRequest.from_target()."""

    def test_splits_path_and_query(self):
        """Test path and query string separation."""
        request = HTTPRequest.from_target("GET", "/api/users?page=1&limit=10")

        assert request.method == "GET"
        assert request.path == "/api/users"
        assert request.get_query("page") == "1"
        assert request.get_query("limit") == "10"

    def test_method_upper_cased(self):
        """Test that the method is normalized."""
        assert HTTPRequest.from_target("post", "/").method == "POST"

    def test_percent_decoding(self):
        """Test that the path is URL-decoded."""
        request = HTTPRequest.from_target("GET", "/files/my%20file.txt")
        assert request.path == "/files/my file.txt"

    def test_empty_path_is_root(self):
        """A target with only a query string maps to "/"."""
        assert HTTPRequest.from_target("GET", "?x=1").path == "/"

    def test_blank_query_values_kept(self):
        """Test that ?flag= is kept with an empty value."""
        request = HTTPRequest.from_target("GET", "/search?flag=&q=x")
        assert request.get_query("flag") == ""

    def test_body_and_client(self):
        """Test body and client address pass through."""
        request = HTTPRequest.from_target(
            "POST", "/items", body=b'{"a": 1}', client_address=("10.0.0.1", 5000)
        )

        assert request.body == b'{"a": 1}'
        assert request.client_address == ("10.0.0.1", 5000)


class TestHeaders:
    """Tests for header access."""

    def test_headers_lowercased(self):
        """Test that header names are normalized."""
        request = HTTPRequest.from_target("GET", "/", headers={"Content-Type": "text/plain"})
        assert request.headers == {"content-type": "text/plain"}

    def test_get_header_case_insensitive(self):
        """Test case-insensitive header lookup."""
        request = HTTPRequest(method="GET", path="/", headers={"X-Token": "abc"})

        assert request.get_header("x-token") == "abc"
        assert request.get_header("X-TOKEN") == "abc"
        assert request.get_header("missing") == ""
        assert request.get_header("missing", "none") == "none"

    def test_user_agent(self):
        """Test the User-Agent shortcut."""
        request = HTTPRequest(method="GET", path="/", headers={"User-Agent": "pytest"})

        assert request.user_agent == "pytest"
        assert HTTPRequest(method="GET", path="/").user_agent == ""


class TestQueryParams:
    """Tests for query parameter access."""

    def test_get_query_default(self):
        """Test defaults for missing parameters."""
        request = HTTPRequest.from_target("GET", "/users")

        assert request.get_query("missing") is None
        assert request.get_query("missing", "default") == "default"

    def test_multiple_values(self):
        """Test repeated parameters."""
        request = HTTPRequest.from_target("GET", "/users?tag=a&tag=b")

        assert request.get_query("tag") == "a"
        assert request.get_query_list("tag") == ["a", "b"]
        assert request.get_query_list("missing") == []


class TestPathParamsAndContext:
    """Tests for path variables and per-request context."""

    def test_param(self):
        """Test path variable lookup."""
        request = HTTPRequest(method="GET", path="/users/7", path_params={"id": "7"})

        assert request.param("id") == "7"
        assert request.param("missing") == ""
        assert request.param("missing", "x") == "x"

    def test_context_set_get(self):
        """Values stored by one layer are visible to the next."""
        request = HTTPRequest(method="GET", path="/")
        request.set("user", "alice")

        assert request.get("user") == "alice"
        assert request.get("missing") is None
        assert request.get("missing", 0) == 0

    def test_context_not_shared(self):
        """Each request has its own context."""
        first = HTTPRequest(method="GET", path="/")
        second = HTTPRequest(method="GET", path="/")
        first.set("user", "alice")

        assert second.get("user") is None

    @pytest.mark.parametrize("key", ["request_id", "user", "session"])
    def test_context_overwrite(self, key):
        """Setting a key twice keeps the latest value."""
        request = HTTPRequest(method="GET", path="/")
        request.set(key, 1)
        request.set(key, 2)

        assert request.get(key) == 2
