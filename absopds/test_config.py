from __future__ import annotations

from pathlib import Path

import pytest

from absopds import config as abs_config


def test_load_config_reads_sections(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        """
[upstream]
url = "http://abs.example:13378"
api_key = "secret"

[server]
port = 8080
use_proxy_links = true

[catalog]
page_size = 50
show_char_cards = true

[i18n]
languages_dir = "lang"
""",
        encoding="utf-8",
    )

    loaded = abs_config.load_config(path)

    assert loaded.upstream.api_key == "secret"
    assert loaded.server.port == 8080
    assert loaded.server.use_proxy_links is True
    assert loaded.catalog.page_size == 50
    assert loaded.catalog.show_audiobooks is False
    assert loaded.catalog.parallel_threshold == 5000
    assert loaded.i18n.languages_dir == tmp_path / "lang"
    assert loaded.config_path == path


def test_defaults_without_sections(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text("", encoding="utf-8")

    loaded = abs_config.load_config(path)

    assert loaded.server.port == 3010
    assert loaded.catalog.page_size == 20
    assert (loaded.i18n.languages_dir / "en.json").exists()


def test_missing_file_exits(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(abs_config.console, "print", lambda *_args, **_kwargs: None)

    with pytest.raises(SystemExit) as exc_info:
        abs_config.load_config(tmp_path / "absent.toml")

    assert exc_info.value.code == 1


def test_invalid_values_exit(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    messages: list[str] = []
    monkeypatch.setattr(abs_config.console, "print", lambda msg, *_args, **_kwargs: messages.append(str(msg)))
    path = tmp_path / "config.toml"
    path.write_text("[catalog]\npage_size = 0\n", encoding="utf-8")

    with pytest.raises(SystemExit):
        abs_config.load_config(path)

    assert "Error loading configuration" in messages[0]
