"""Where showsync keeps its catalog database and export documents.

``SHOWSYNC_DATA_DIR`` wins, then ``$XDG_DATA_HOME/showsync``, then
``~/.local/share/showsync``. ``DATABASE_URI`` replaces the SQLite catalog file.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

DATA_DIR_VAR: Final[str] = "SHOWSYNC_DATA_DIR"
DATABASE_URI_VAR: Final[str] = "DATABASE_URI"
CATALOG_FILENAME: Final[str] = "showsync.db"
EXPORTS_DIRNAME: Final[str] = "exports"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path

    @property
    def catalog_path(self) -> Path:
        return self.data_dir / CATALOG_FILENAME

    def catalog_uri(self) -> str:
        """SQLite URI of the catalog file; creates the data directory."""

        self.data_dir.mkdir(parents=True, exist_ok=True)
        return f"sqlite+pysqlite:///{self.catalog_path}"

    def exports_dir(self) -> Path:
        path = self.data_dir / EXPORTS_DIRNAME
        path.mkdir(parents=True, exist_ok=True)
        return path


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def get_storage_config() -> StorageConfig:
    configured = optional_env_var(DATA_DIR_VAR)
    if configured is not None:
        data_dir = Path(configured)
    else:
        xdg_data = optional_env_var("XDG_DATA_HOME")
        base = Path(xdg_data) if xdg_data else Path.home() / ".local" / "share"
        data_dir = base / "showsync"
    return StorageConfig(data_dir=data_dir.expanduser().resolve())


def get_database_config() -> DatabaseConfig:
    uri = optional_env_var(DATABASE_URI_VAR)
    return DatabaseConfig(uri=uri or get_storage_config().catalog_uri())


def get_database_uri() -> str:
    return get_database_config().uri
