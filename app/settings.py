from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from decouple import config


@dataclass(frozen=True)
class AppConfig:
    storage_path: Path
    log_level: str


def load_app_config() -> AppConfig:
    default_path = Path.home() / ".carfin" / "saved_calculations.json"
    return AppConfig(
        storage_path=Path(config("CARFIN_STORAGE_PATH", default=str(default_path))).expanduser(),
        log_level=config("CARFIN_LOG_LEVEL", default="INFO").strip().upper(),
    )


def setup_logging(cfg: AppConfig) -> None:
    level = getattr(logging, cfg.log_level, logging.INFO)
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")
