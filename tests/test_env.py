"""Tests for environment loading."""

import os
from pathlib import Path

import pytest

from deployer.core.env import load_environment


def test_load_environment_missing_file_is_safe(tmp_path: Path) -> None:
    missing_env = tmp_path / ".env.missing"
    assert load_environment(str(missing_env)) is False
    assert not missing_env.exists()


def test_load_environment_does_not_override(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "DEPLOYER_WEBHOOK_SECRET=from-file\nDEPLOYER_SERVER_PORT=9100\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("DEPLOYER_WEBHOOK_SECRET", "from-env")
    monkeypatch.setenv("DEPLOYER_SERVER_PORT", "unset")
    monkeypatch.delenv("DEPLOYER_SERVER_PORT")

    load_environment(str(env_file))

    assert os.environ["DEPLOYER_WEBHOOK_SECRET"] == "from-env"
    assert os.environ["DEPLOYER_SERVER_PORT"] == "9100"
