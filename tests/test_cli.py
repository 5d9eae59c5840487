"""Tests for the vericid command line interface."""

import json
from unittest.mock import patch

import httpx
import pytest
from click.testing import CliRunner

from tests.conftest import HELLO_CID_V0, HELLO_CID_V1, HELLO_SHA256, WORKER_SAMPLE_CID
from vericid.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def hello_file(tmp_path):
    path = tmp_path / "hello.txt"
    path.write_bytes(b"hello")
    return path


@pytest.fixture
def index_file(tmp_path, worker_origins):
    path = tmp_path / "index.json"
    path.write_text(json.dumps({HELLO_CID_V1: {"origins": worker_origins}}))
    return path


def _invoke(runner, *args):
    return runner.invoke(main, ["--log-level", "ERROR", *map(str, args)])


class TestCidCommand:
    def test_json_output(self, runner, hello_file):
        result = _invoke(runner, "cid", hello_file, "--json")
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {
            "v0": HELLO_CID_V0,
            "v1": HELLO_CID_V1,
            "digest": HELLO_SHA256,
            "hash_function": "sha2-256",
        }

    def test_algorithm_option(self, runner, hello_file):
        result = _invoke(runner, "cid", hello_file, "-a", "sha2-512", "--json")
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["hash_function"] == "sha2-512"

    def test_unknown_algorithm(self, runner, hello_file):
        result = _invoke(runner, "cid", hello_file, "-a", "md5")
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_table_output(self, runner, hello_file):
        result = _invoke(runner, "cid", hello_file)
        assert result.exit_code == 0, result.output
        assert "CIDv0" in result.output
        assert "CIDv1" in result.output

    def test_missing_file(self, runner, tmp_path):
        result = _invoke(runner, "cid", tmp_path / "missing.txt")
        assert result.exit_code == 2


class TestDecodeCommand:
    def test_decode_worker_sample(self, runner):
        result = _invoke(runner, "decode", WORKER_SAMPLE_CID)
        assert result.exit_code == 0, result.output
        assert "dag-pb" in result.output
        assert "sha2-256" in result.output

    def test_decode_invalid(self, runner):
        result = _invoke(runner, "decode", "not-a-cid")
        assert result.exit_code == 1


class TestLookupCommand:
    def test_json_certificate(self, runner, hello_file, index_file, tmp_path):
        out = tmp_path / "out" / "cert.json"
        result = _invoke(runner, "lookup", hello_file, "-i", index_file, "-f", "json", "-o", out)
        assert result.exit_code == 0, result.output
        cert = json.loads(out.read_text())
        assert cert["identifier"] == HELLO_CID_V1
        assert cert["searched_cids"] == {"v0": HELLO_CID_V0, "v1": HELLO_CID_V1}
        assert cert["total_origins"] == 2
        assert cert["trust_tier"] == "medium"
        assert [o["network"] for o in cert["origins"]] == ["base", "ethereum"]

    def test_markdown_certificate(self, runner, hello_file, index_file, tmp_path):
        out = tmp_path / "cert.md"
        result = _invoke(runner, "lookup", hello_file, "-i", index_file, "-f", "markdown", "-o", out)
        assert result.exit_code == 0, result.output
        text = out.read_text()
        assert text.startswith("# Provenance Certificate")
        assert "basescan.org" in text

    def test_table_report(self, runner, hello_file, index_file):
        result = _invoke(runner, "lookup", hello_file, "-i", index_file)
        assert result.exit_code == 0, result.output
        assert "medium" in result.output

    def test_all_sources_failed_exit_code(self, runner, hello_file):
        with patch(
            "vericid.sources.api_clients.httpx.request",
            side_effect=httpx.ConnectError("connection refused"),
        ), patch("vericid.sources.api_clients.time.sleep"):
            result = _invoke(runner, "lookup", hello_file, "-s", "https://worker.example.com")
        assert result.exit_code == 2

    @pytest.mark.parametrize("content", ["{not json", "[]"])
    def test_malformed_index(self, runner, hello_file, tmp_path, content):
        path = tmp_path / "bad-index.json"
        path.write_text(content)
        result = _invoke(runner, "lookup", hello_file, "-i", path)
        assert result.exit_code == 1
        assert "Error" in result.output
        assert not isinstance(result.exception, ValueError)

    def test_no_sources_configured(self, runner, hello_file):
        result = _invoke(runner, "lookup", hello_file)
        assert result.exit_code == 0, result.output
        assert "No provenance sources configured" in result.output


class TestVerifyCommand:
    def _certificate(self, runner, hello_file, index_file, tmp_path):
        out = tmp_path / "cert.json"
        result = _invoke(runner, "lookup", hello_file, "-i", index_file, "-f", "json", "-o", out)
        assert result.exit_code == 0, result.output
        return out

    def test_valid_certificate(self, runner, hello_file, index_file, tmp_path):
        cert = self._certificate(runner, hello_file, index_file, tmp_path)
        result = _invoke(runner, "verify", cert)
        assert result.exit_code == 0, result.output
        assert "valid" in result.output

    def test_tampered_certificate(self, runner, hello_file, index_file, tmp_path):
        cert = self._certificate(runner, hello_file, index_file, tmp_path)
        data = json.loads(cert.read_text())
        data["total_origins"] = 99
        cert.write_text(json.dumps(data))
        result = _invoke(runner, "verify", cert)
        assert result.exit_code == 1

    def test_unreadable_certificate(self, runner, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        result = _invoke(runner, "verify", path)
        assert result.exit_code == 1
