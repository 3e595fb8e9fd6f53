"""Tests for the windi command line interface."""

import json

import httpx
import pytest
from click.testing import CliRunner

from windi_reader import __version__, embed_envelope, sha256_urn, sha256_urn_from_text
from windi_reader.cli import cli
from windi_reader.client import WindiVerifyClient


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def plain_file(tmp_path, document_bytes):
    path = tmp_path / "invoice.pdf"
    path.write_bytes(document_bytes)
    return path


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


class TestVerifyCommand:

    def test_no_governance_exits_1(self, runner, plain_file):
        result = runner.invoke(cli, ["verify", str(plain_file)])
        assert result.exit_code == 1
        assert "NO_GOVERNANCE" in result.output
        assert "warning: No WINDI governance metadata found in document" in result.output

    def test_json_output(self, runner, plain_file, document_hash):
        result = runner.invoke(cli, ["verify", "--json", str(plain_file)])
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["status"] == "NO_GOVERNANCE"
        assert data["document_hash"] == document_hash
        assert data["verified"] is False

    def test_embedded_receipt_mismatch(self, runner, tmp_path, sealed_receipt):
        path = tmp_path / "governed.txt"
        path.write_text(embed_envelope(sealed_receipt.to_dict()), encoding="utf-8")

        result = runner.invoke(cli, ["verify", "--strict", str(path)])

        assert result.exit_code == 1
        assert "INVALID" in result.output
        assert "error: Document hash does not match Virtue Receipt" in result.output

    def test_missing_file_is_usage_error(self, runner, tmp_path):
        result = runner.invoke(cli, ["verify", str(tmp_path / "missing.pdf")])
        assert result.exit_code == 2


def test_hash_command(runner, plain_file, document_bytes):
    result = runner.invoke(cli, ["hash", str(plain_file)])
    assert result.exit_code == 0
    assert result.output.strip() == sha256_urn(document_bytes)


class TestShelfCommand:

    def test_prints_fingerprints(self, runner):
        result = runner.invoke(cli, [
            "shelf", "--iban", "DE89 3704 0044 0532 0130 00", "--amount", "€ 1.234,50",
        ])
        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert lines == [
            f"{sha256_urn_from_text('PAYTO|IBAN|DE89370400440532013000')}  PAYTO|IBAN|DE89370400440532013000",
            f"{sha256_urn_from_text('AMOUNT|DEC|1234.50')}  AMOUNT|DEC|1234.50",
        ]

    def test_no_fields(self, runner):
        result = runner.invoke(cli, ["shelf"])
        assert result.exit_code == 2
        assert "No payment fields given" in result.output


class TestRemoteCommand:

    @pytest.fixture
    def env(self, monkeypatch):
        monkeypatch.setenv("WINDI_BASE_URL", "https://verify.windi.test")
        monkeypatch.setenv("WINDI_API_KEY", "secret-key")
        monkeypatch.delenv("WINDI_TIMEOUT", raising=False)

    def mock_api(self, monkeypatch, payload, status=200):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(status, json=payload)

        def from_settings(settings, transport=None):
            return WindiVerifyClient(
                settings.base_url, settings.api_key, settings.timeout,
                transport=httpx.MockTransport(handler),
            )

        monkeypatch.setattr(WindiVerifyClient, "from_settings", staticmethod(from_settings))
        return requests

    def args(self, path, *extra):
        return ["remote", str(path), "--document-id", "windi:doc:1", "--issuer-key-id", "k", *extra]

    def test_valid_with_decision(self, runner, env, monkeypatch, plain_file, document_bytes):
        requests = self.mock_api(monkeypatch, {
            "verdict": "VALID", "integrity": "INTACT", "trust_level": "L2", "risk_flags": [],
        })

        result = runner.invoke(cli, self.args(plain_file, "--amount-eur", "1200"))

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["verify"]["verdict"] == "VALID"
        assert data["decision"] == {"action": "ALLOW", "reason": "OK"}
        body = json.loads(requests[0].content)
        assert body["document_hash"] == sha256_urn(document_bytes)
        assert requests[0].headers["X-WINDI-API-KEY"] == "secret-key"

    def test_suspect_exits_1_without_decision(self, runner, env, monkeypatch, plain_file):
        self.mock_api(monkeypatch, {"verdict": "SUSPECT", "integrity": "INTACT", "trust_level": "L2"})

        result = runner.invoke(cli, self.args(plain_file))

        assert result.exit_code == 1
        assert "decision" not in json.loads(result.stdout)

    def test_http_error_exits_2(self, runner, env, monkeypatch, plain_file):
        self.mock_api(monkeypatch, {"error": "unauthorized"}, status=401)

        result = runner.invoke(cli, self.args(plain_file))

        assert result.exit_code == 2
        assert "WINDI HTTP 401" in result.output

    def test_missing_configuration_exits_2(self, runner, monkeypatch, plain_file):
        monkeypatch.delenv("WINDI_BASE_URL", raising=False)
        monkeypatch.delenv("WINDI_API_KEY", raising=False)

        result = runner.invoke(cli, self.args(plain_file))

        assert result.exit_code == 2
        assert "base_url is required" in result.output
