"""
Tests for Settings and config path resolution.
"""
import logging

import pytest

from centralstorage.core import config, paths
from centralstorage.core.config import Settings, get_settings, reload_settings


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("CENTRALSTORAGE_SERVER", "https://storage.example.com")
    monkeypatch.setenv("CENTRALSTORAGE_KEY", "abcdef")
    monkeypatch.setenv("CENTRALSTORAGE_SECRET", "bcdefhijklmn")
    monkeypatch.setenv("CENTRALSTORAGE_ALGORITHM", "sha512")

    settings = reload_settings()
    try:
        assert settings.server == "https://storage.example.com"
        assert settings.key == "abcdef"
        assert settings.secret == "bcdefhijklmn"
        assert settings.algorithm == "sha512"
        assert get_settings() is settings
    finally:
        config._settings = None


def test_defaults(monkeypatch):
    for name in ("SERVER", "FRONT", "KEY", "SECRET", "VERSION", "ALGORITHM"):
        monkeypatch.delenv(f"CENTRALSTORAGE_{name}", raising=False)

    settings = Settings(_env_file=None)

    assert settings.version == "1"
    assert settings.algorithm == "sha256"
    assert settings.consumers_file == "consumers.yaml"


def test_front_url_falls_back_to_server():
    assert Settings(_env_file=None, server="https://s.example.com").front_url == "https://s.example.com"
    assert Settings(
        _env_file=None, server="https://s.example.com", front="https://cdn.example.com"
    ).front_url == "https://cdn.example.com"


def test_configure_logging_quiets_httpx():
    Settings(_env_file=None, log_level="DEBUG").configure_logging()
    assert logging.getLogger("httpx").level == logging.WARNING


def test_get_config_path_falls_back_to_example(tmp_path, monkeypatch):
    monkeypatch.setattr(paths, "CONFIG_DIR", tmp_path)
    (tmp_path / "consumers.example.yaml").write_text("consumers: {}\n")

    assert paths.get_config_path("consumers.yaml") == tmp_path / "consumers.example.yaml"

    (tmp_path / "consumers.yaml").write_text("consumers: {}\n")
    assert paths.get_config_path("consumers.yaml") == tmp_path / "consumers.yaml"


def test_get_config_path_required(tmp_path, monkeypatch):
    monkeypatch.setattr(paths, "CONFIG_DIR", tmp_path)
    monkeypatch.setattr(paths, "_DEFAULT_CONFIG_DIR", tmp_path)

    assert paths.get_config_path("absent.yaml") is None

    with pytest.raises(FileNotFoundError):
        paths.get_config_path("absent.yaml", required=True)
