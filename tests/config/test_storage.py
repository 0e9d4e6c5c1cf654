from __future__ import annotations

from pathlib import Path

import pytest

from showsync.config import storage


def test_storage_config_prefers_explicit_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("SHOWSYNC_DATA_DIR", str(custom))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))

    assert storage.get_storage_config().data_dir == custom.resolve()


def test_default_data_dir_follows_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("SHOWSYNC_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))

    config = storage.get_storage_config()

    assert config.data_dir == (tmp_path / "xdg" / "showsync").resolve()


def test_default_data_dir_without_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("SHOWSYNC_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", "  ")
    monkeypatch.setattr(Path, "home", classmethod(lambda _cls: tmp_path))

    config = storage.get_storage_config()

    assert config.data_dir == (tmp_path / ".local" / "share" / "showsync").resolve()


def test_get_database_uri_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")

    assert storage.get_database_uri() == "sqlite:///override.db"


def test_get_database_uri_creates_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("SHOWSYNC_DATA_DIR", str(tmp_path / "data-dir"))

    uri = storage.get_database_uri()

    expected_path = (tmp_path / "data-dir").resolve() / storage.CATALOG_FILENAME
    assert uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.is_dir()


def test_exports_dir_is_created_on_demand(tmp_path: Path) -> None:
    config = storage.StorageConfig(data_dir=tmp_path / "data")

    exports = config.exports_dir()

    assert exports == tmp_path / "data" / storage.EXPORTS_DIRNAME
    assert exports.is_dir()
