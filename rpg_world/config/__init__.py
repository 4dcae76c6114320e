"""Configuration loading and schema."""

from rpg_world.config.loader import load_config
from rpg_world.config.schema import AppConfig, AppConfigRoot

__all__ = ["AppConfig", "AppConfigRoot", "load_config"]
