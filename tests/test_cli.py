"""Tests for CLI."""

from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from deployer.auth.signature import compute_signature
from deployer.cli.main import cli


def test_cli_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "Deployer: signed webhook intake" in result.output


def test_server_command_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["server", "--help"])

    assert result.exit_code == 0
    assert "--host" in result.output
    assert "--port" in result.output
    assert "--reload" in result.output


def test_sign_reads_file(tmp_path: Path) -> None:
    payload = tmp_path / "node.json"
    payload.write_bytes(b'{"a":1}')
    runner = CliRunner()

    result = runner.invoke(cli, ["sign", "--secret", "s3cr3t", str(payload)])

    assert result.exit_code == 0
    assert result.output.strip() == "sha256=" + compute_signature("s3cr3t", b'{"a":1}')


def test_sign_reads_stdin_and_env_secret() -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli,
        ["sign"],
        input=b"",
        env={"DEPLOYER_WEBHOOK_SECRET": "from-env"},
    )

    assert result.exit_code == 0
    assert result.output.strip() == "sha256=" + compute_signature("from-env", b"")


def test_sign_requires_secret() -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["sign"], input=b"x", env={"DEPLOYER_WEBHOOK_SECRET": None})

    assert result.exit_code != 0
    assert "--secret" in result.output


def test_server_exits_on_missing_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("deployer.cli.main.load_environment", lambda: False)
    monkeypatch.setattr("deployer.cli.main.setup_logging", lambda **kwargs: None)
    monkeypatch.delenv("DEPLOYER_WEBHOOK_SECRET", raising=False)
    runner = CliRunner()

    result = runner.invoke(cli, ["server"])

    assert result.exit_code == 1


def test_server_runs_uvicorn_with_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, Any]] = []

    def _fake_run(app: Any, **kwargs: Any) -> None:
        calls.append({"app": app, **kwargs})

    monkeypatch.setattr("deployer.cli.main.load_environment", lambda: False)
    monkeypatch.setattr("deployer.cli.main.setup_logging", lambda **kwargs: None)
    monkeypatch.setattr("uvicorn.run", _fake_run)
    monkeypatch.setenv("DEPLOYER_WEBHOOK_SECRET", "s3cr3t")
    monkeypatch.setenv("DEPLOYER_SERVER_PORT", "9000")
    runner = CliRunner()

    result = runner.invoke(cli, ["server", "--host", "127.0.0.1", "--no-access-log"])

    assert result.exit_code == 0
    assert len(calls) == 1
    assert calls[0]["host"] == "127.0.0.1"
    assert calls[0]["port"] == 9000
    assert calls[0]["app"].title == "Deployer Webhook"
    assert calls[0]["log_config"] is None
    assert calls[0]["access_log"] is False
