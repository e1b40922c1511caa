"""Tests for the inspectflow CLI."""

import httpx
import pytest
from click.testing import CliRunner

import inspectflow.cli as cli_module
from inspectflow.services import http_service
from inspectflow.services.api_client import InspectionApiClient

TS = "2025-06-10T12:00:00.000Z"
USER = {
    "_id": "user-1",
    "name": "Ada Admin",
    "email": "ada@acme.com",
    "role": "admin",
    "organizationId": "org-1",
    "createdAt": TS,
    "updatedAt": TS,
}


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def mock_backend(monkeypatch):
    """Route CLI clients through a mock transport answering with ``handler``."""

    def install(handler):
        def factory(base_url=None, session=None):
            return InspectionApiClient(
                base_url="http://api.test",
                session=session,
                transport=httpx.MockTransport(handler),
            )

        monkeypatch.setattr(cli_module, "InspectionApiClient", factory)

    return install


def test_normalize_date_utc_noon(runner):
    result = runner.invoke(
        cli_module.cli, ["normalize-date", "2025-06-10", "--strategy", "utc_noon"]
    )

    assert result.exit_code == 0
    assert "Normalized: 2025-06-10T12:00:00.000Z" in result.output
    assert "✓ Date part preserved" in result.output


def test_normalize_date_zone_midnight(runner):
    result = runner.invoke(
        cli_module.cli,
        [
            "normalize-date",
            "2025-12-31",
            "--strategy",
            "zone_midnight",
            "--timezone",
            "Asia/Tokyo",
        ],
    )

    assert result.exit_code == 0
    assert "Normalized: 2025-12-31T00:00:00.000+09:00" in result.output


def test_normalize_date_invalid_input(runner):
    result = runner.invoke(cli_module.cli, ["normalize-date", "2025-02-30"])

    assert result.exit_code == 1
    assert "❌ Error" in result.output


def test_normalize_date_unknown_strategy(runner):
    result = runner.invoke(
        cli_module.cli, ["normalize-date", "2025-06-10", "--strategy", "noon"]
    )
    assert result.exit_code == 2


def test_login_prints_token(runner, mock_backend):
    mock_backend(lambda request: httpx.Response(200, json={"token": "jwt", "user": USER}))

    result = runner.invoke(
        cli_module.cli, ["login", "--email", "ada@acme.com", "--password", "secret"]
    )

    assert result.exit_code == 0
    assert "✓ Logged in as Ada Admin (admin)" in result.output
    assert result.output.strip().endswith("jwt")


def test_login_failure_exits_non_zero(runner, mock_backend):
    mock_backend(lambda request: httpx.Response(400, json={"message": "Invalid credentials"}))

    result = runner.invoke(
        cli_module.cli, ["login", "--email", "ada@acme.com", "--password", "wrong"]
    )

    assert result.exit_code == 1
    assert "❌ Login failed (400): Invalid credentials" in result.output


def test_whoami_reads_token_from_env(runner, mock_backend):
    def handler(request):
        assert request.headers["authorization"] == "Bearer jwt"
        return httpx.Response(200, json=USER)

    mock_backend(handler)

    result = runner.invoke(cli_module.cli, ["whoami"], env={"INSPECTFLOW_TOKEN": "jwt"})

    assert result.exit_code == 0
    assert "✓ Ada Admin <ada@acme.com>" in result.output
    assert "Organization: org-1" in result.output


def test_whoami_expired_token(runner, mock_backend):
    mock_backend(
        lambda request: httpx.Response(401, json={"message": "Token expired", "expired": True})
    )

    result = runner.invoke(cli_module.cli, ["whoami", "--token", "old"])

    assert result.exit_code == 1
    assert "❌ Error (401): Token expired" in result.output


def _refuse(request):
    raise httpx.ConnectError("All connection attempts failed", request=request)


def test_login_backend_unreachable(runner, mock_backend):
    mock_backend(_refuse)

    result = runner.invoke(
        cli_module.cli,
        ["login", "--email", "ada@acme.com", "--password", "secret", "--base-url", "http://api.test"],
    )

    assert result.exit_code == 1
    assert "❌ Cannot reach backend at http://api.test: All connection attempts failed" in result.output
    assert not isinstance(result.exception, httpx.RequestError)


def test_whoami_backend_unreachable(runner, mock_backend, monkeypatch):
    monkeypatch.setattr(http_service, "backoff_delay", lambda *args: 0)
    mock_backend(_refuse)

    result = runner.invoke(cli_module.cli, ["whoami", "--token", "jwt"])

    assert result.exit_code == 1
    assert "❌ Cannot reach backend at" in result.output
