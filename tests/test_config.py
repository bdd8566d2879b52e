"""Tests for binrun.config."""

from pathlib import Path

import pytest
from _pytest.capture import CaptureFixture

from binrun.config import BinrunConfig


def test_defaults() -> None:
    config = BinrunConfig()
    assert config.cache_dir == Path.home() / ".binrun" / "cache"
    assert config.api_url == "https://api.github.com"
    assert config.user_agent == "binrun"
    assert config.redirect_limit == 5
    assert config.timeout is None


def test_load_from_file(tmp_path: Path) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "cache_dir: ~/somewhere/cache\n"
        "api_url: https://github.example.com/api/v3\n"
        "redirect_limit: 2\n"
        "timeout: 10\n",
    )

    config = BinrunConfig.load_from_file(config_file)

    assert config.cache_dir == Path.home() / "somewhere" / "cache"
    assert config.api_url == "https://github.example.com/api/v3"
    assert config.redirect_limit == 2
    assert config.timeout == 10
    assert config.user_agent == "binrun"


def test_load_missing_explicit_file(tmp_path: Path, capsys: CaptureFixture[str]) -> None:
    config = BinrunConfig.load_from_file(tmp_path / "nope.yaml")
    assert config == BinrunConfig()
    assert "Configuration file not found" in capsys.readouterr().err


def test_load_default_path_missing(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: CaptureFixture[str],
) -> None:
    """A missing default file is not worth a warning."""
    monkeypatch.setattr("binrun.config.DEFAULT_CONFIG_PATH", tmp_path / "config.yaml")
    assert BinrunConfig.load_from_file() == BinrunConfig()
    assert capsys.readouterr().err == ""


def test_load_invalid_yaml(tmp_path: Path, capsys: CaptureFixture[str]) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text("cache_dir: [unclosed\n")
    assert BinrunConfig.load_from_file(config_file) == BinrunConfig()
    assert "Invalid YAML" in capsys.readouterr().err


def test_load_unknown_keys_and_bad_values(tmp_path: Path, capsys: CaptureFixture[str]) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text("colour: blue\nredirect_limit: -3\ntimeout: 0\n")

    config = BinrunConfig.load_from_file(config_file)

    err = capsys.readouterr().err
    assert "unknown configuration key 'colour'" in err
    assert config.redirect_limit == 0
    assert config.timeout is None


def test_load_wrongly_typed_values(tmp_path: Path, capsys: CaptureFixture[str]) -> None:
    """Values of the wrong type fall back to their defaults."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "cache_dir:\n"
        "redirect_limit: five\n"
        "timeout: soon\n"
        "user_agent: 42\n"
        "api_url: true\n",
    )

    config = BinrunConfig.load_from_file(config_file)

    assert config == BinrunConfig()
    assert isinstance(config.cache_dir, Path)
    err = capsys.readouterr().err
    assert "Ignoring invalid value 'five' for 'redirect_limit'" in err
    for key in ("cache_dir", "timeout", "user_agent", "api_url"):
        assert f"for '{key}'" in err


def test_load_null_timeout_and_float(tmp_path: Path) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text("timeout: 2.5\nredirect_limit: 0\n")
    config = BinrunConfig.load_from_file(config_file)
    assert config.timeout == 2.5
    assert config.redirect_limit == 0

    config_file.write_text("timeout:\n")
    assert BinrunConfig.load_from_file(config_file).timeout is None
