# common/config_loader.py
import os
import yaml
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

_log = logging.getLogger("contractor-profile")


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load YAML from `path`, CONFIG_PATH or ./config.yaml, with safe defaults."""
    config_path = Path(path or os.getenv("CONFIG_PATH", "config.yaml"))
    if not config_path.exists():
        _log.warning("Config file not found at %s. Using built-in defaults.", config_path)
        return {}
    try:
        with config_path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        _log.error("Failed to parse %s: %s. Using built-in defaults.", config_path, e)
        return {}


def cfg_get(d: Dict[str, Any], path: str, default=None):
    """Safely fetch a nested key via dotted path, e.g. cfg_get(cfg, 'storage.image_prefix')."""
    cur = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


@dataclass(frozen=True)
class ProfileSettings:
    image_prefix: str = "profile-images"
    after_save_route: str = "/tabs/profile"
    delete_request_route: str = "/delete"
    notify_services_failure: bool = False

    @classmethod
    def from_config(cls, cfg: Optional[Dict[str, Any]] = None) -> "ProfileSettings":
        cfg = cfg if cfg is not None else load_config()
        d = cls()
        return cls(
            image_prefix=str(cfg_get(cfg, "storage.image_prefix", d.image_prefix)).strip("/"),
            after_save_route=cfg_get(cfg, "routes.after_save", d.after_save_route),
            delete_request_route=cfg_get(cfg, "routes.delete_request", d.delete_request_route),
            notify_services_failure=bool(cfg_get(cfg, "ui.notify_services_failure", d.notify_services_failure)),
        )
