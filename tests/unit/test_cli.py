from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from dbconnect import main
from dbconnect.config import Settings

runner = CliRunner()


@pytest.fixture
def cli_settings(monkeypatch, tmp_path: Path) -> Settings:
    settings = Settings(
        _env_file=None,
        mysql_dsn="mysql://root:topsecret@db:3306/app",
        sqlite_dsn="",
        sqlite_path=str(tmp_path / "cli.db"),
    )
    monkeypatch.setattr(main, "get_settings", lambda: settings)
    # keep the root logger untouched; CliRunner swaps stderr per invocation
    monkeypatch.setattr(main, "configure_logging", lambda **kwargs: None)
    return settings


def test_info_lists_targets_with_masked_credentials(cli_settings) -> None:
    result = runner.invoke(main.app, ["info"])

    assert result.exit_code == 0
    assert "Configured Targets" in result.output
    assert "root:***@db" in result.output
    assert "topsecret" not in result.output


def test_ping_sqlite_uses_configured_path(cli_settings) -> None:
    result = runner.invoke(main.app, ["ping", "sqlite"])

    assert result.exit_code == 0, result.output
    assert "OK" in result.output
    assert "sqlite" in result.output
    assert Path(cli_settings.sqlite_path).exists()


def test_ping_sqlite_with_target_override(cli_settings, tmp_path: Path) -> None:
    override = tmp_path / "override.db"

    result = runner.invoke(main.app, ["ping", "sqlite", "--target", str(override)])

    assert result.exit_code == 0, result.output
    assert override.exists()
    assert not Path(cli_settings.sqlite_path).exists()


def test_ping_failure_exits_with_status_one(cli_settings, tmp_path: Path) -> None:
    target = tmp_path / "no-such-dir" / "app.db"

    result = runner.invoke(main.app, ["ping", "sqlite", "--target", str(target)])

    assert result.exit_code == 1
    assert "OK" not in result.output


def test_ping_redis_builds_options_from_configured_password(cli_settings, monkeypatch) -> None:
    seen = []

    class _Handle:
        def close(self) -> None:
            seen.append("closed")

    def fake_redis_connection(cfg):
        seen.append(cfg)
        return _Handle()

    monkeypatch.setattr(main, "new_redis_connection", fake_redis_connection)
    monkeypatch.setattr(
        main,
        "get_settings",
        lambda: cli_settings.model_copy(update={"redis_password": "hunter2"}),
    )

    result = runner.invoke(main.app, ["ping", "redis"])

    assert result.exit_code == 0, result.output
    options, closed = seen
    assert options.addr == "localhost:6379"
    assert options.password == "hunter2"
    assert closed == "closed"


def test_ping_rejects_unknown_backend(cli_settings) -> None:
    result = runner.invoke(main.app, ["ping", "cassandra"])

    assert result.exit_code != 0
