from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

BASE_URL_ENV = "LOCAL_API_BASE"
CONFIG_PATH_ENV = "OPENCODE_CONFIG"
CONFIG_HOME_ENV = "XDG_CONFIG_HOME"

DEFAULT_BASE_URL = "http://127.0.0.1:1234/v1"
DEFAULT_SCHEMA_URL = "https://opencode.ai/config.json"
CONFIG_RELATIVE_PATH = Path("opencode") / "opencode.json"
SERVICE_NAME = "opencode_sync"


def resolve_config_path(
    explicit: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path:
    env = os.environ if environ is None else environ
    if explicit:
        return Path(explicit).expanduser()

    override = env.get(CONFIG_PATH_ENV)
    if override:
        return Path(override).expanduser()

    config_home = env.get(CONFIG_HOME_ENV)
    root = Path(config_home).expanduser() if config_home else Path.home() / ".config"
    return root / CONFIG_RELATIVE_PATH


def resolve_base_url(
    explicit: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> str:
    env = os.environ if environ is None else environ
    raw = explicit or env.get(BASE_URL_ENV) or DEFAULT_BASE_URL
    return normalize_base_url(raw)


def normalize_base_url(url: str) -> str:
    return url.strip().rstrip("/")
