"""Pre-DB bootstrap configuration. Imports nothing from the app but constants.

Stores preferences that must be known before opening the local store or
talking to the backend (db_folder, api_base_url, request_timeout, log_level).
Config lives in ~/.budget/config.json to avoid a bootstrapping problem.
"""
import json
import os
from pathlib import Path

from utils.constants import DEFAULT_API_BASE_URL, DEFAULT_REQUEST_TIMEOUT

CONFIG_DIR = Path.home() / ".budget"
CONFIG_FILE = CONFIG_DIR / "config.json"

API_URL_ENV = "BUDGET_API_URL"


def load_config() -> dict:
    """Returns {} on missing or corrupt file; never raises."""
    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(config: dict) -> None:
    """Creates ~/.budget/ if needed; atomic write via .tmp + os.replace()."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    tmp = CONFIG_FILE.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, CONFIG_FILE)
    except Exception:
        try:
            tmp.unlink(missing_ok=True)
        except Exception:
            pass


def get_db_folder() -> str | None:
    """Return config["db_folder"] or None if not set."""
    return load_config().get("db_folder")


def get_api_base_url() -> str:
    """Environment override first, then config, then the local default."""
    url = (os.getenv(API_URL_ENV) or "").strip()
    if not url:
        url = str(load_config().get("api_base_url") or DEFAULT_API_BASE_URL)
    return url.rstrip("/")


def get_request_timeout() -> float:
    val = load_config().get("request_timeout")
    if val is not None:
        try:
            return max(1.0, float(val))
        except (ValueError, TypeError):
            pass
    return float(DEFAULT_REQUEST_TIMEOUT)


def get_log_level() -> str:
    return str(load_config().get("log_level") or "INFO").upper()


def set_value(key: str, value) -> None:
    """Update a single key in config and save. None removes the key."""
    config = load_config()
    if value is None:
        config.pop(key, None)
    else:
        config[key] = value
    save_config(config)
