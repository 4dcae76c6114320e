"""Argument schemas for every tool.

Wire names are camelCase (``parentId``, ``characterIds``); Python attributes are
snake_case. Description length limits come from the validation context so
they follow ``tools.min_description_length``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_MIN_DESCRIPTION_LENGTH = 100


class ToolArgs(BaseModel):
    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)


class _LongDescriptionArgs(ToolArgs):
    @field_validator("description", check_fields=False)
    @classmethod
    def _min_description_length(cls, value: str | None, info: ValidationInfo) -> str | None:
        if value is None:
            return value
        context = info.context or {}
        minimum = int(context.get("min_description_length", DEFAULT_MIN_DESCRIPTION_LENGTH))
        if len(value) < minimum:
            raise ValueError(f"description must be at least {minimum} characters")
        return value


class NoArgs(ToolArgs):
    pass


class CreateWorldArgs(_LongDescriptionArgs):
    name: str = Field(description="Name of the RPG world")
    description: str = Field(description="Description of the world")


class CreateLocationArgs(_LongDescriptionArgs):
    parent_id: int = Field(description="ID of the parent location")
    name: str = Field(description="Name of the location")
    description: str = Field(description="Description of the location")


class UpdateLocationArgs(_LongDescriptionArgs):
    id: int = Field(description="ID of the location to update")
    name: str | None = Field(default=None, description="New location name")
    description: str | None = Field(default=None, description="New location description")


class DeleteLocationArgs(ToolArgs):
    id: int
    force: bool = Field(default=False, description="Also delete every child location")


class LocationIdArgs(ToolArgs):
    id: int = Field(description="ID of the location to look up")


class ListLocationsArgs(ToolArgs):
    include_details: bool = Field(default=False, description="Return full records instead of summaries")


class CreateCharacterArgs(ToolArgs):
    name: str
    personality: str
    description: str
    location_id: int


class UpdateCharacterArgs(ToolArgs):
    id: int
    name: str | None = None
    personality: str | None = None
    description: str | None = None
    location_id: int | None = None


class EntityIdArgs(ToolArgs):
    id: int


class CreatePlotArgs(ToolArgs):
    id: PositiveInt = Field(description="Caller-chosen unique plot ID")
    name: str
    description: str
    time: str = Field(description="When the event happens, free-form")
    location_id: int
    character_ids: list[int] = Field(default_factory=list)


class UpdatePlotArgs(ToolArgs):
    id: int
    name: str | None = None
    description: str | None = None
    time: str | None = None
    location_id: int | None = None
    character_ids: list[int] | None = None


class ListPlotsArgs(ToolArgs):
    ids: list[int] = Field(description="Plot IDs to fetch")
