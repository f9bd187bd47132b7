from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ..core import DATA_DIR, EVENTS_FILE_NAME, LOG_FILE_NAME

load_dotenv()


@dataclass(frozen=True)
class StorageSettings:
    data_dir: Path
    events_file: Path
    export_dir: Path


@dataclass(frozen=True)
class ServerSettings:
    host: str
    port: int


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    log_file: Optional[Path]

    @property
    def file_enabled(self) -> bool:
        return self.log_file is not None


@dataclass(frozen=True)
class AppSettings:
    storage: StorageSettings
    server: ServerSettings
    logging: LoggingSettings


def _path_from_env(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if not raw:
        return default
    return Path(raw).expanduser()


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    data_dir = _path_from_env("DAYGRID_DATA_DIR", DATA_DIR)

    storage = StorageSettings(
        data_dir=data_dir,
        events_file=_path_from_env("DAYGRID_EVENTS_FILE", data_dir / EVENTS_FILE_NAME),
        export_dir=_path_from_env("DAYGRID_EXPORT_DIR", Path.cwd()),
    )

    server = ServerSettings(
        host=os.getenv("DAYGRID_API_HOST", "127.0.0.1"),
        port=_int_from_env("DAYGRID_API_PORT", 8000),
    )

    log_file_raw = os.getenv("DAYGRID_LOG_FILE", str(data_dir / LOG_FILE_NAME))
    logging_settings = LoggingSettings(
        level=os.getenv("DAYGRID_LOG_LEVEL", "INFO").upper(),
        log_file=Path(log_file_raw).expanduser() if log_file_raw else None,
    )

    return AppSettings(storage=storage, server=server, logging=logging_settings)
