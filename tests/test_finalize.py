"""
Tests for freezing a builder into a gateway request.
"""

from typing import Callable

import pytest

from postgrest_builder import (
    Builder,
    Client,
    GatewayRequest,
    InvalidArgumentError,
    InvalidHeaderValueError,
)

URL = "http://localhost:3000/users"


def profile_headers(request: GatewayRequest) -> dict[str, str | None]:
    return {
        "Accept-Profile": request.get_header("Accept-Profile"),
        "Content-Profile": request.get_header("Content-Profile"),
    }


class TestSchemaProfile:
    """Test suite for the schema profile header selection."""

    @pytest.fixture
    def builder(self) -> Builder:
        return Builder.new(URL, schema="private")

    @pytest.mark.parametrize(
        "modifier",
        [
            lambda b: b.select("*"),
            lambda b: b.select("*").exact_count().head(),
        ],
    )
    def test_reads_use_accept_profile(
        self, builder: Builder, modifier: Callable[[Builder], Builder]
    ) -> None:
        """Test that GET and HEAD select the schema with Accept-Profile."""
        request = modifier(builder).build()
        assert profile_headers(request) == {
            "Accept-Profile": "private",
            "Content-Profile": None,
        }

    @pytest.mark.parametrize(
        "modifier",
        [
            lambda b: b.insert("{}"),
            lambda b: b.update("{}"),
            lambda b: b.delete(),
            lambda b: b.single_upsert("id", "1", "{}"),
        ],
    )
    def test_writes_use_content_profile(
        self, builder: Builder, modifier: Callable[[Builder], Builder]
    ) -> None:
        """Test that POST, PATCH, PUT and DELETE use Content-Profile."""
        request = modifier(builder).build()
        assert profile_headers(request) == {
            "Accept-Profile": None,
            "Content-Profile": "private",
        }

    def test_no_schema_no_profile(self) -> None:
        """Test that no profile header is sent without a schema."""
        request = Builder.new(URL).select("*").build()
        assert profile_headers(request) == {
            "Accept-Profile": None,
            "Content-Profile": None,
        }

    def test_rpc_by_method_policy(self, builder: Builder) -> None:
        """Test that RPC calls follow the method by default."""
        request = builder.rpc("{}").build()
        assert request.get_header("Content-Profile") == "private"
        assert request.get_header("Accept-Profile") is None

    def test_rpc_accept_profile_policy(self) -> None:
        """Test the policy for gateways reading RPC schemas from Accept-Profile."""
        builder = Builder.new(
            URL, schema="private", profile_policy="rpc_accept_profile"
        )
        request = builder.rpc("{}").build()
        assert request.get_header("Accept-Profile") == "private"
        assert request.get_header("Content-Profile") is None

    def test_rpc_policy_does_not_affect_tables(self) -> None:
        """Test that the RPC policy leaves table writes alone."""
        builder = Builder.new(
            URL, schema="private", profile_policy="rpc_accept_profile"
        )
        request = builder.insert("{}").build()
        assert request.get_header("Content-Profile") == "private"


class TestContentType:
    """Test suite for the Content-Type set on finalize."""

    def test_writes_default_to_json(self) -> None:
        """Test that write requests are sent as JSON."""
        request = Builder.new(URL).insert("{}").build()
        assert request.get_header("Content-Type") == "application/json"

    def test_reads_have_no_content_type(self) -> None:
        """Test that GET requests carry no Content-Type."""
        request = Builder.new(URL).select("*").build()
        assert request.get_header("Content-Type") is None

    def test_csv_is_preserved(self) -> None:
        """Test that a CSV body keeps its content type."""
        request = Builder.new(URL).insert_csv("id\n1").build()
        assert request.get_header("Content-Type") == "text/csv"


class TestPreferMerging:
    """Test suite for Prefer directives set by callers."""

    def test_client_directive_survives_insert(self) -> None:
        """Test that a default Prefer directive is kept next to return."""
        request = (
            Client("http://localhost:3000")
            .insert_header("Prefer", "tx=rollback")
            .from_("users")
            .insert("{}")
            .build()
        )
        assert request.get_header("Prefer") == "return=representation,tx=rollback"

    def test_builder_directives_are_merged(self) -> None:
        """Test that caller directives render after the builder ones."""
        request = (
            Builder.new(URL)
            .insert_header("Prefer", "missing=default, tx=rollback")
            .upsert("[]")
            .exact_count()
            .build()
        )
        assert request.get_header("Prefer") == (
            "return=representation,resolution=merge-duplicates,count=exact,"
            "missing=default,tx=rollback"
        )

    def test_each_directive_is_sent_once(self) -> None:
        """Test that a directive set twice keeps its last value."""
        request = (
            Builder.new(URL)
            .insert_header("Prefer", "return=minimal")
            .insert("{}")
            .insert_header("prefer", "tx=commit")
            .insert_header("Prefer", "tx=rollback")
            .build()
        )
        prefer = [value for name, value in request.headers if name == "Prefer"]
        assert prefer == ["return=representation,tx=rollback"]

    def test_caller_directive_overrides_builder_one(self) -> None:
        """Test that the last writer of a known directive wins."""
        request = Builder.new(URL).insert("{}").insert_header(
            "Prefer", "return=minimal"
        ).build()
        assert request.get_header("Prefer") == "return=minimal"

    def test_directive_without_argument(self) -> None:
        """Test that bare directives are rendered as given."""
        request = Builder.new(URL).insert_header("Prefer", "handling").build()
        assert request.get_header("Prefer") == "handling"

    def test_prefer_value_is_validated(self) -> None:
        """Test that Prefer values are still legal header values."""
        with pytest.raises(InvalidHeaderValueError):
            Builder.new(URL).insert_header("Prefer", "tx=roll\nback")


class TestRequestAssembly:
    """Test suite for the assembled GatewayRequest."""

    def test_select_request(self) -> None:
        """Test a plain read request."""
        request = Builder.new(URL).select("*").build()
        assert request.method == "GET"
        assert request.url == URL
        assert request.query_params == [("select", "*")]
        assert request.body is None

    def test_body_is_encoded(self) -> None:
        """Test that string bodies are sent as UTF-8 bytes."""
        request = Builder.new(URL).rpc('{"a":1,"b":2}').build()
        assert request.body == b'{"a":1,"b":2}'

    def test_prefer_is_a_single_header(self) -> None:
        """Test that Prefer directives are sent as one header."""
        request = Builder.new(URL).upsert("[]").exact_count().build()
        prefer = [value for name, value in request.headers if name == "Prefer"]
        assert prefer == [
            "return=representation,resolution=merge-duplicates,count=exact"
        ]

    def test_full_url(self) -> None:
        """Test the rendered URL of a filtered read."""
        request = Builder.new(URL).select("username").eq("status", "OFFLINE").build()
        assert (
            request.full_url()
            == "http://localhost:3000/users?select=username&status=eq.OFFLINE"
        )

    def test_full_url_keeps_pair_order(self) -> None:
        """Test that repeated keys are not regrouped."""
        request = Builder.new(URL).order("a").eq("x", "1").order("b").build()
        assert request.full_url() == (
            "http://localhost:3000/users?order=a&x=eq.1&order=b"
        )

    def test_full_url_encodes_quotes(self) -> None:
        """Test that quoted values are percent-encoded."""
        request = (
            Builder.new(URL).eq("username", "ihave.special,c:haracter(s)").build()
        )
        assert request.full_url() == (
            "http://localhost:3000/users"
            "?username=eq.%22ihave.special,c:haracter(s)%22"
        )

    def test_query_string(self) -> None:
        """Test that query_string encodes spaces and wildcards."""
        builder = Builder.new(URL).like("name", "%United States%")
        assert builder.query_string() == "name=like.*United%20States*"

    def test_full_url_without_query(self) -> None:
        """Test that no question mark is added without pairs."""
        assert Builder.new(URL).build().full_url() == URL


class TestExecuteWithoutTransport:
    """Test suite for execute on a detached builder."""

    @pytest.mark.asyncio
    async def test_execute_requires_backend(self) -> None:
        """Test that a builder without backend cannot be executed."""
        with pytest.raises(InvalidArgumentError):
            await Builder.new(URL).select("*").execute()
