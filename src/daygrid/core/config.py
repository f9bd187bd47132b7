from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "daygrid"
APP_AUTHOR = "daygrid"
DATA_DIR = Path(os.getenv("DAYGRID_DATA_DIR") or user_data_dir(APP_NAME, APP_AUTHOR))
EVENTS_FILE_NAME = "events.json"
LOG_FILE_NAME = "daygrid.log"


def ensure_data_dir(path: Path | None = None) -> Path:
    target = path or DATA_DIR
    target.mkdir(parents=True, exist_ok=True)
    return target
