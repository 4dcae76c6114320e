from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    data_dir: Path = Field(default=Path("./data"))
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        return value.strip().upper()


class StorageConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    backend: Literal["json", "sqlite"] = "json"
    # Unset paths resolve under app.data_dir.
    json_path: Path | None = None
    sqlite_path: Path | None = None


class ToolsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    min_description_length: int = 100

    @field_validator("min_description_length")
    @classmethod
    def _non_negative_length(cls, value: int) -> int:
        if value < 0:
            raise ValueError("min_description_length must be non-negative")
        return value


class ObservabilityConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    log_tool_arguments: bool = False


class AppConfigRoot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    app: AppConfig = AppConfig()
    storage: StorageConfig = StorageConfig()
    tools: ToolsConfig = ToolsConfig()
    observability: ObservabilityConfig = ObservabilityConfig()


def resolve_paths(config: AppConfigRoot, base_dir: Path) -> AppConfigRoot:
    def _resolve(path_value: Path) -> Path:
        return path_value if path_value.is_absolute() else (base_dir / path_value).resolve()

    config.app.data_dir = _resolve(config.app.data_dir)
    data_dir = config.app.data_dir
    config.storage.json_path = _resolve(config.storage.json_path or data_dir / "world.json")
    config.storage.sqlite_path = _resolve(config.storage.sqlite_path or data_dir / "world.db")
    return config
