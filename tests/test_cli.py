from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from cli.main import app

DESCRIPTOR = Path(__file__).resolve().parents[1] / ".koyeb" / "koyeb.yaml"

runner = CliRunner()


@pytest.fixture(autouse=True)
def _api_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MORPHIK_DOCS_API_BASE_URL", "http://api.test")
    monkeypatch.setenv("MORPHIK_DOCS_AUTH_TOKEN", "env-token")
    monkeypatch.setenv("MORPHIK_DOCS_DEPLOYMENT_PATH", str(DESCRIPTOR))


def test_update_text_command(patched_client) -> None:
    result = runner.invoke(
        app,
        [
            "update-text",
            "doc-1",
            "new text",
            "--metadata",
            '{"a": 1}',
            "--use-colpali",
            "false",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "doc-1" in result.output
    request = patched_client.last
    assert str(request.url) == "http://api.test/documents/doc-1/update_text?use_colpali=false"
    assert request.headers["authorization"] == "Bearer env-token"
    assert json.loads(request.content) == {"text": "new text", "metadata": '{"a":1}'}


def test_update_text_command_without_colpali_sends_no_query(patched_client) -> None:
    result = runner.invoke(app, ["update-text", "doc-1", "x", "--api-url", "http://other.test", "--token", "t"])

    assert result.exit_code == 0, result.output
    assert str(patched_client.last.url) == "http://other.test/documents/doc-1/update_text"
    assert patched_client.last.headers["authorization"] == "Bearer t"


def test_update_text_command_rejects_bad_metadata(patched_client) -> None:
    result = runner.invoke(app, ["update-text", "doc-1", "x", "--metadata", "[1, 2]"])

    assert result.exit_code != 0
    assert patched_client.requests == []


def test_update_file_command_writes_output(patched_client, tmp_path: Path, document) -> None:
    upload = tmp_path / "report.txt"
    upload.write_text("body", encoding="utf-8")
    output = tmp_path / "out" / "doc.json"

    result = runner.invoke(
        app,
        ["update-file", "doc-1", str(upload), "--rules", '[{"type": "x"}]', "--output", str(output)],
    )

    assert result.exit_code == 0, result.output
    assert patched_client.last.headers["content-type"].startswith("multipart/form-data")
    assert b'name="rules"\r\n\r\n[{"type":"x"}]\r\n' in patched_client.last.content
    assert json.loads(output.read_text(encoding="utf-8")) == document


def test_update_metadata_command(patched_client) -> None:
    result = runner.invoke(app, ["update-metadata", "doc-1", "{}"])

    assert result.exit_code == 0, result.output
    assert patched_client.last.content == b'{"metadata":{}}'


def test_update_command_reports_api_error(patched_client) -> None:
    patched_client.respond(404, text="not found")

    result = runner.invoke(app, ["update-metadata", "missing", '{"a": 1}'])

    assert result.exit_code == 1
    assert "Not Found - not found" in result.output


def test_update_command_prints_raw_json_for_unexpected_payload(patched_client) -> None:
    patched_client.respond(200, json={"status": "queued"})

    result = runner.invoke(app, ["update-metadata", "doc-1", "{}"])

    assert result.exit_code == 0, result.output
    assert "queued" in result.output


def test_deploy_validate_bundled_descriptor() -> None:
    result = runner.invoke(app, ["deploy", "validate"])

    assert result.exit_code == 0, result.output
    assert "morphik-api" in result.output


def test_deploy_show_lists_healthcheck() -> None:
    result = runner.invoke(app, ["deploy", "show", str(DESCRIPTOR)])

    assert result.exit_code == 0, result.output
    assert "/health" in result.output


def test_deploy_validate_reports_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["deploy", "validate", str(tmp_path / "nope.yaml")])

    assert result.exit_code == 1
    assert "not found" in result.output


def test_deploy_env_fails_when_secrets_are_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("JWT_SECRET_KEY", "POSTGRES_URI", "PGPASSWORD", "REDIS_HOST", "REDIS_PORT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("JWT_SECRET_KEY", "x")

    result = runner.invoke(app, ["deploy", "env"])

    assert result.exit_code == 1
    assert "JWT_SECRET_KEY: set" in result.output
    assert "POSTGRES_URI: missing" in result.output


def test_deploy_env_passes_when_secrets_are_set(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("JWT_SECRET_KEY", "POSTGRES_URI", "PGPASSWORD", "REDIS_HOST", "REDIS_PORT"):
        monkeypatch.setenv(name, "x")

    result = runner.invoke(app, ["deploy", "env"])

    assert result.exit_code == 0, result.output
