"""Centralized application configuration."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
import logging
import os
import sys


def get_default_data_dir(
    app_name: str,
    *,
    platform: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Return an OS-specific user data directory for ``app_name``.

    ``TASKAPP_DATA_DIR`` in the environment wins over the platform default.
    """

    platform_id = (platform or sys.platform).lower()
    environ = dict(os.environ if env is None else env)
    override = environ.get("TASKAPP_DATA_DIR")
    if override:
        return Path(override).expanduser()

    home_dir = Path(home or Path.home())
    sanitized = app_name.strip() or "app"
    sanitized = sanitized.replace("/", "-").replace("\\", "-")

    if platform_id.startswith("win"):
        base = Path(environ.get("APPDATA") or home_dir / "AppData" / "Roaming")
    elif platform_id == "darwin":
        base = home_dir / "Library" / "Application Support"
    else:
        base = Path(environ.get("XDG_DATA_HOME") or home_dir / ".local" / "share")

    return base.expanduser() / sanitized


APP_NAME = "TaskApp"


DATA_DIR = get_default_data_dir(APP_NAME)
BACKUP_DIR = DATA_DIR / "backups"
LOG_DIR = DATA_DIR / "logs"

DB_PATH = DATA_DIR / "tasks.db"
CONFIG_PATH = DATA_DIR / "config.json"
LOG_PATH = LOG_DIR / "taskapp.log"


def ensure_data_dirs() -> None:
    for directory in (DATA_DIR, BACKUP_DIR, LOG_DIR):
        directory.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class ThemeColors:
    surface_bg: str = "#F1F5F9"
    text_subtle: str = "#6B7280"
    category_chip: str = "#E0E7FF"
    category_text: str = "#1F2937"
    danger: str = "#EF4444"


@dataclass(frozen=True)
class UISettings:
    app_title: str = APP_NAME
    theme_mode: str = "system"
    color_scheme_seed: str = "#4F46E5"
    window_min_width: int = 360
    window_min_height: int = 560
    row_date_format: str = "%Y-%m-%d %H:%M"
    input_date_format: str = "%d.%m.%Y"
    input_time_format: str = "%H:%M"
    dialog_width: int = 420
    theme: ThemeColors = ThemeColors()


UI = UISettings()


@dataclass(frozen=True)
class NotificationSettings:
    enabled: bool = True
    poll_interval_sec: int = 15


NOTIFICATIONS = NotificationSettings()


@dataclass(frozen=True)
class BackupSettings:
    enabled: bool = True
    directory: Path = BACKUP_DIR
    keep_days: int = 7


BACKUP = BackupSettings()


@dataclass(frozen=True)
class LoggingSettings:
    level: int = logging.INFO
    path: Path = LOG_PATH
    max_bytes: int = 1_000_000
    backup_count: int = 3


LOGGING = LoggingSettings()


__all__ = [
    "APP_NAME",
    "BACKUP",
    "BACKUP_DIR",
    "CONFIG_PATH",
    "DATA_DIR",
    "DB_PATH",
    "LOGGING",
    "LOG_DIR",
    "LOG_PATH",
    "NOTIFICATIONS",
    "UI",
    "ensure_data_dirs",
    "get_default_data_dir",
]
