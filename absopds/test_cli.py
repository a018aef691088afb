from __future__ import annotations

import sys
from pathlib import Path

import pytest

from absopds import cli


def test_ui_info_error_emit_prefixed_messages(monkeypatch: pytest.MonkeyPatch) -> None:
    lines: list[str] = []
    monkeypatch.setattr(cli.console, "print", lambda msg, *_args, **_kwargs: lines.append(str(msg)))

    cli._ui_info("hello")
    cli._ui_error("boom")

    assert lines == ["[cyan][INFO][/cyan] hello", "[red][ERROR][/red] boom"]


def test_resolve_config_path_accepts_directory(tmp_path: Path) -> None:
    assert cli.resolve_config_path(str(tmp_path)) == tmp_path / "config.toml"
    assert cli.resolve_config_path(str(tmp_path / "other.toml")) == tmp_path / "other.toml"


def test_resolve_config_path_prefers_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "config.toml").write_text("", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    assert cli.resolve_config_path(None) == tmp_path / "config.toml"


def test_overrides_replace_server_settings() -> None:
    args = cli.build_parser().parse_args(["--host", "127.0.0.1", "--port", "9000"])

    config = cli.apply_overrides(cli.AbsOpdsConfig(), args)

    assert config.server.host == "127.0.0.1"
    assert config.server.port == 9000


def _write_config(tmp_path: Path) -> Path:
    path = tmp_path / "config.toml"
    path.write_text('[upstream]\napi_key = "k"\n', encoding="utf-8")
    return path


def test_main_verify_exit_code(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write_config(tmp_path)

    async def _fake_verify(config) -> bool:
        return config.upstream.api_key == "k"

    monkeypatch.setattr(cli, "verify_upstream", _fake_verify)
    monkeypatch.setattr(sys, "argv", ["absopds", "--verify", "-c", str(path)])

    with pytest.raises(SystemExit) as exc_info:
        cli.main()

    assert exc_info.value.code == 0


def test_main_runs_server_with_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write_config(tmp_path)
    started: list[tuple[str, int]] = []
    monkeypatch.setattr(cli, "run_server", lambda config: started.append((config.server.host, config.server.port)))
    monkeypatch.setattr(sys, "argv", ["absopds", "-c", str(path), "--port", "8123"])

    with pytest.raises(SystemExit) as exc_info:
        cli.main()

    assert exc_info.value.code == 0
    assert started == [("0.0.0.0", 8123)]


def test_main_reports_fatal_errors(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write_config(tmp_path)
    lines: list[str] = []

    def _boom(_config) -> None:
        raise RuntimeError("port in use")

    monkeypatch.setattr(cli, "run_server", _boom)
    monkeypatch.setattr(cli.console, "print", lambda msg, *_args, **_kwargs: lines.append(str(msg)))
    monkeypatch.setattr(sys, "argv", ["absopds", "-c", str(path)])

    with pytest.raises(SystemExit) as exc_info:
        cli.main()

    assert exc_info.value.code == 1
    assert lines[-1] == "[red][ERROR][/red] Fatal error: port in use"
