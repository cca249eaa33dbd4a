from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def _float_env(name: str, default: float) -> float:
    try:
        value = float(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


class Settings:
    """Centralized configuration for the wellness session service."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        data_root_default = repo_root / "data"

        self.data_root: Path = Path(
            os.environ.get("NODEPERSON_DATA_ROOT") or data_root_default
        ).expanduser()
        self.db_path: Path = Path(
            os.environ.get("NODEPERSON_DB_PATH") or (self.data_root / "nodeperson.db")
        ).expanduser()

        # 20 fps animation by default.
        self.tick_interval: float = _float_env("NODEPERSON_TICK_INTERVAL", 0.05)
        self.default_canvas: str = os.environ.get("NODEPERSON_DEFAULT_CANVAS") or "flowState"
        self.history_limit: int = int(os.environ.get("NODEPERSON_HISTORY_LIMIT") or "50")

        self.timezone: Optional[ZoneInfo] = None
        tz_name = (os.environ.get("NODEPERSON_TIMEZONE") or "").strip()
        if tz_name:
            try:
                self.timezone = ZoneInfo(tz_name)
            except (ZoneInfoNotFoundError, ValueError):
                self.timezone = None

        cors = os.environ.get("NODEPERSON_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()
