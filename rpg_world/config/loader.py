from __future__ import annotations

from pathlib import Path
from typing import Any
import os

import yaml
from loguru import logger

from rpg_world.config.schema import AppConfigRoot, resolve_paths

# Path of the world file; ``JSON`` is the historical name and is kept as a fallback.
STORE_PATH_ENV_VARS = ("RPG_WORLD_JSON", "JSON")


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    return data or {}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _load_dotenv(dotenv_path: Path) -> None:
    if not dotenv_path.exists():
        return
    for raw_line in dotenv_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip("\"")
        os.environ.setdefault(key, value)


def _store_path_from_env() -> str | None:
    for name in STORE_PATH_ENV_VARS:
        value = os.getenv(name)
        if value:
            return value
    return None


def _apply_env(config_data: dict[str, Any]) -> dict[str, Any]:
    data_dir = os.getenv("RPG_WORLD_DATA_DIR")
    if data_dir:
        app = config_data.setdefault("app", {})
        app["data_dir"] = data_dir

    backend = os.getenv("RPG_WORLD_STORAGE_BACKEND")
    if backend:
        storage = config_data.setdefault("storage", {})
        storage["backend"] = backend.strip().lower()
    return config_data


def _apply_env_store_path(config_data: dict[str, Any], overrides: dict[str, Any] | None) -> dict[str, Any]:
    """Point the active backend at the env store path.

    Runs after overrides are merged so the backend they select is the one used.
    A path set explicitly in the overrides wins.
    """
    store_path = _store_path_from_env()
    if not store_path:
        return config_data
    storage = dict(config_data.get("storage") or {})
    key = "sqlite_path" if storage.get("backend") == "sqlite" else "json_path"
    if key not in (overrides or {}).get("storage", {}):
        storage[key] = store_path
    config_data["storage"] = storage
    return config_data


def load_config(
    config_path: Path | None = None,
    profile: str | None = None,
    overrides: dict[str, Any] | None = None,
) -> AppConfigRoot:
    base_dir = Path.cwd()
    _load_dotenv(base_dir / ".env")

    config_data: dict[str, Any] = {}
    config_data = _deep_merge(config_data, _read_yaml(base_dir / "configs" / "default.yaml"))

    if profile:
        profile_path = base_dir / "configs" / "profiles" / f"{profile}.yaml"
        config_data = _deep_merge(config_data, _read_yaml(profile_path))

    if config_path:
        config_data = _deep_merge(config_data, _read_yaml(config_path))

    config_data = _apply_env(config_data)

    if overrides:
        config_data = _deep_merge(config_data, overrides)
    config_data = _apply_env_store_path(config_data, overrides)

    config = AppConfigRoot.model_validate(config_data)
    config = resolve_paths(config, base_dir)

    logger.debug("Loaded config from {}", base_dir)
    return config


def masked_env_snapshot() -> dict[str, str | None]:
    snapshot: dict[str, str | None] = {}
    for name in ("RPG_WORLD_DATA_DIR", "RPG_WORLD_STORAGE_BACKEND", *STORE_PATH_ENV_VARS):
        snapshot[name] = os.getenv(name)
    return snapshot
