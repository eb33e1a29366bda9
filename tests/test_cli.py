"""
Tests for the command line interface.
"""

import pytest
from click.testing import CliRunner

from postgrest_builder.cli import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestRequestCommand:
    """Test suite for the request command."""

    def test_dry_run_prints_the_request(self, runner: CliRunner) -> None:
        """Test the rendered read request."""
        result = runner.invoke(
            cli,
            [
                "request",
                "users",
                "--url",
                "http://localhost:3000",
                "--select",
                "username",
                "--eq",
                "status=OFFLINE",
                "--limit",
                "5",
                "--dry-run",
            ],
        )

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == (
            "GET http://localhost:3000/users?select=username&status=eq.OFFLINE"
        )
        assert "Accept: application/json" in lines
        assert "Range: 0-4" in lines
        assert "Range-Unit: items" in lines

    def test_url_from_environment(self, runner: CliRunner) -> None:
        """Test that the base URL may come from POSTGREST_URL."""
        result = runner.invoke(
            cli,
            ["request", "users", "--count", "exact", "--single", "--dry-run"],
            env={"POSTGREST_URL": "http://gateway:3000"},
        )

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "GET http://gateway:3000/users?select=*"
        assert "Prefer: count=exact" in lines
        assert "Accept: application/vnd.pgrst.object+json" in lines

    def test_token_and_schema(self, runner: CliRunner) -> None:
        """Test the authentication and schema options."""
        result = runner.invoke(
            cli,
            [
                "request",
                "users",
                "--url",
                "http://localhost:3000",
                "--schema",
                "personal",
                "--token",
                "secret",
                "--dry-run",
            ],
        )

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert "Authorization: Bearer secret" in lines
        assert "Accept-Profile: personal" in lines

    def test_environment_configuration(self, runner: CliRunner) -> None:
        """Test that the POSTGREST_* settings apply to command line requests."""
        result = runner.invoke(
            cli,
            ["request", "users", "--url", "http://localhost:3000", "--dry-run"],
            env={
                "POSTGREST_SCHEMA": "personal",
                "POSTGREST_API_KEY": "anon-key",
                "POSTGREST_HEADERS": "X-Client-Info=cli",
                "POSTGREST_TOKEN": None,
            },
        )

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert "Accept-Profile: personal" in lines
        assert "apikey: anon-key" in lines
        assert "X-Client-Info: cli" in lines

    def test_options_override_environment(self, runner: CliRunner) -> None:
        """Test that --schema and --token win over the environment."""
        result = runner.invoke(
            cli,
            [
                "request",
                "users",
                "--url",
                "http://localhost:3000",
                "--schema",
                "public",
                "--token",
                "cli-token",
                "--dry-run",
            ],
            env={"POSTGREST_SCHEMA": "personal", "POSTGREST_TOKEN": "env-token"},
        )

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert "Accept-Profile: public" in lines
        assert "Authorization: Bearer cli-token" in lines

    def test_invalid_environment(self, runner: CliRunner) -> None:
        """Test that a bad POSTGREST_TIMEOUT is reported as an error."""
        result = runner.invoke(
            cli,
            ["request", "users", "--url", "http://localhost:3000", "--dry-run"],
            env={"POSTGREST_TIMEOUT": "soon"},
        )

        assert result.exit_code == 1
        assert "POSTGREST_TIMEOUT" in result.output

    def test_invalid_limit(self, runner: CliRunner) -> None:
        """Test that builder errors are reported without a traceback."""
        result = runner.invoke(
            cli,
            [
                "request",
                "users",
                "--url",
                "http://localhost:3000",
                "--limit",
                "0",
                "--dry-run",
            ],
        )

        assert result.exit_code == 1
        assert "limit count must be at least 1" in result.output

    def test_invalid_filter(self, runner: CliRunner) -> None:
        """Test that malformed equality filters are usage errors."""
        result = runner.invoke(
            cli,
            [
                "request",
                "users",
                "--url",
                "http://localhost:3000",
                "--eq",
                "status",
                "--dry-run",
            ],
        )

        assert result.exit_code == 2
        assert "COLUMN=VALUE" in result.output

    def test_missing_url(self, runner: CliRunner) -> None:
        """Test that the base URL is required."""
        result = runner.invoke(
            cli, ["request", "users", "--dry-run"], env={"POSTGREST_URL": None}
        )

        assert result.exit_code == 2


class TestRpcCommand:
    """Test suite for the rpc command."""

    def test_dry_run_prints_the_call(self, runner: CliRunner) -> None:
        """Test the rendered RPC request."""
        result = runner.invoke(
            cli,
            [
                "rpc",
                "add",
                '{"a": 1, "b": 2}',
                "--url",
                "http://localhost:3000",
                "--schema",
                "personal",
                "--dry-run",
            ],
        )

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "POST http://localhost:3000/rpc/add"
        assert "Content-Profile: personal" in lines
        assert "Content-Type: application/json" in lines
        assert lines[-1] == '{"a": 1, "b": 2}'

    def test_profile_policy_from_environment(self, runner: CliRunner) -> None:
        """Test that POSTGREST_PROFILE_POLICY selects the RPC schema header."""
        result = runner.invoke(
            cli,
            ["rpc", "add", "--url", "http://localhost:3000", "--dry-run"],
            env={
                "POSTGREST_SCHEMA": "personal",
                "POSTGREST_PROFILE_POLICY": "rpc_accept_profile",
            },
        )

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert "Accept-Profile: personal" in lines
        assert "Content-Profile: personal" not in lines

    def test_default_params(self, runner: CliRunner) -> None:
        """Test that the parameters default to an empty object."""
        result = runner.invoke(
            cli, ["rpc", "get_status", "--url", "http://localhost:3000", "--dry-run"]
        )

        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[-1] == "{}"
