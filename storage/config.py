"""User preferences persisted to ``config.json``."""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from core.settings import CONFIG_PATH

logger = logging.getLogger("taskapp.config")


@dataclass
class AppConfig:
    last_query: str = ""
    notifications_enabled: bool = True


def _load_raw(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def load_config(path: Optional[Path] = None) -> AppConfig:
    data = _load_raw(Path(path or CONFIG_PATH))
    defaults = AppConfig()
    last_query = data.get("last_query", defaults.last_query)
    enabled = data.get("notifications_enabled", defaults.notifications_enabled)
    return AppConfig(
        last_query=last_query if isinstance(last_query, str) else defaults.last_query,
        notifications_enabled=bool(enabled),
    )


def save_config(config: AppConfig, path: Optional[Path] = None) -> None:
    target = Path(path or CONFIG_PATH)
    target.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(asdict(config), ensure_ascii=False, indent=2, sort_keys=True)
    tmp = target.with_suffix(".tmp")
    try:
        tmp.write_text(payload, encoding="utf-8")
        tmp.replace(target)
    finally:
        if tmp.exists():
            try:
                tmp.unlink()
            except OSError:
                pass


def update_config(path: Optional[Path] = None, **changes: Any) -> AppConfig:
    known = {f.name for f in fields(AppConfig)}
    unknown = set(changes) - known
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")
    cfg = load_config(path)
    for key, value in changes.items():
        setattr(cfg, key, value)
    save_config(cfg, path)
    return cfg


__all__ = ["AppConfig", "load_config", "save_config", "update_config"]
