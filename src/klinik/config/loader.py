from pathlib import Path
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

DEFAULT_CONFIG_PATH = Path("klinik.config.yaml")
DEFAULT_SQLITE_PATH = "klinik.db"

ALLOWED_SECTIONS = ("storage", "clinic", "logging")


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """
    Load klinik configuration from YAML file.

    Args:
        path: Optional path to config file. Defaults to klinik.config.yaml

    Returns:
        Dictionary with configuration (sections default to empty dicts)

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config structure is invalid
    """
    cfg_path = path or DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError("Config must be a dictionary")

    for section in ALLOWED_SECTIONS:
        value = config.get(section)
        if value is None:
            config[section] = {}
        elif not isinstance(value, dict):
            raise ValueError(f"Config '{section}' must be a dictionary if provided")

    return config


def get_sqlite_path(config: Dict[str, Any] | None = None) -> str:
    """Resolve storage.sqlite_path, falling back to klinik.db."""
    if not config:
        return DEFAULT_SQLITE_PATH
    return (config.get("storage") or {}).get("sqlite_path") or DEFAULT_SQLITE_PATH


def get_clinic_timezone(config: Dict[str, Any] | None = None) -> Optional[ZoneInfo]:
    """
    Resolve clinic.timezone into a ZoneInfo.

    Returns None when unset, meaning day boundaries follow the server's
    local zone.

    Raises:
        ValueError: If the zone name is unknown
    """
    if not config:
        return None
    name = (config.get("clinic") or {}).get("timezone")
    if not name:
        return None
    try:
        return ZoneInfo(str(name))
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown clinic timezone: {name}") from e


def get_log_level(config: Dict[str, Any] | None = None) -> Optional[str]:
    """Return logging.level from config, or None to use the default."""
    if not config:
        return None
    return (config.get("logging") or {}).get("level")
