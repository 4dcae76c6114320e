from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from loguru import logger
from pydantic import ValidationError

from rpg_world.config.schema import AppConfigRoot
from rpg_world.domain.errors import InvalidArgumentsError, WorldError
from rpg_world.storage.codec import character_to_dict, plot_to_dict
from rpg_world.tools import schemas
from rpg_world.tools.results import ToolResult, json_response, tool_error, tool_response
from rpg_world.world.service import WorldService

ToolHandler = Callable[[WorldService, Any], ToolResult]


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    args_model: type[schemas.ToolArgs]
    handler: ToolHandler


def _create_world(service: WorldService, args: schemas.CreateWorldArgs) -> ToolResult:
    service.create_world(args.name, args.description)
    return tool_response("World created")


def _get_world(service: WorldService, _args: schemas.NoArgs) -> ToolResult:
    return json_response(service.get_world())


def _create_location(service: WorldService, args: schemas.CreateLocationArgs) -> ToolResult:
    location_id = service.create_location(args.parent_id, args.name, args.description)
    return tool_response(f"Location created, ID: {location_id}")


def _update_location(service: WorldService, args: schemas.UpdateLocationArgs) -> ToolResult:
    service.update_location(args.id, name=args.name, description=args.description)
    return tool_response("Location updated")


def _delete_location(service: WorldService, args: schemas.DeleteLocationArgs) -> ToolResult:
    location = service.delete_location(args.id, force=args.force)
    return tool_response(f"Location '{location.name}' deleted")


def _get_location(service: WorldService, args: schemas.LocationIdArgs) -> ToolResult:
    return json_response(service.get_location(args.id), indent=True)


def _list_locations(service: WorldService, args: schemas.ListLocationsArgs) -> ToolResult:
    return json_response(service.list_locations(include_details=args.include_details))


def _create_character(service: WorldService, args: schemas.CreateCharacterArgs) -> ToolResult:
    character_id = service.create_character(
        name=args.name,
        personality=args.personality,
        description=args.description,
        location_id=args.location_id,
    )
    return tool_response(f"Character '{args.name}' created, ID: {character_id}")


def _list_characters(service: WorldService, _args: schemas.NoArgs) -> ToolResult:
    characters = service.list_characters()
    if not characters:
        return tool_response("No characters yet.")
    return json_response([character_to_dict(character) for character in characters])


def _delete_character(service: WorldService, args: schemas.EntityIdArgs) -> ToolResult:
    service.delete_character(args.id)
    return tool_response(f"Character with ID {args.id} deleted")


def _update_character(service: WorldService, args: schemas.UpdateCharacterArgs) -> ToolResult:
    character = service.update_character(
        args.id,
        name=args.name,
        personality=args.personality,
        description=args.description,
        location_id=args.location_id,
    )
    return tool_response(f"Character '{character.name}' updated")


def _get_character(service: WorldService, args: schemas.EntityIdArgs) -> ToolResult:
    return json_response(character_to_dict(service.get_character(args.id)))


def _create_plot(service: WorldService, args: schemas.CreatePlotArgs) -> ToolResult:
    plot = service.create_plot(
        args.id,
        name=args.name,
        description=args.description,
        time=args.time,
        location_id=args.location_id,
        character_ids=args.character_ids,
    )
    return tool_response(f"Plot '{plot.name}' created, ID: {plot.id}")


def _update_plot(service: WorldService, args: schemas.UpdatePlotArgs) -> ToolResult:
    plot = service.update_plot(
        args.id,
        name=args.name,
        description=args.description,
        time=args.time,
        location_id=args.location_id,
        character_ids=args.character_ids,
    )
    return tool_response(f"Plot '{plot.name}' updated")


def _delete_plot(service: WorldService, args: schemas.EntityIdArgs) -> ToolResult:
    service.delete_plot(args.id)
    return tool_response(f"Plot with ID {args.id} deleted")


def _get_plot(service: WorldService, args: schemas.EntityIdArgs) -> ToolResult:
    return json_response(plot_to_dict(service.get_plot(args.id)))


def _list_plots(service: WorldService, args: schemas.ListPlotsArgs) -> ToolResult:
    return json_response([plot_to_dict(plot) for plot in service.list_plots(args.ids)])


TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec("create_world", "Create the RPG world; only one world can exist", schemas.CreateWorldArgs, _create_world),
    ToolSpec("get_world", "Get the world record with its whole location tree", schemas.NoArgs, _get_world),
    ToolSpec("create_location", "Create a location under a parent location", schemas.CreateLocationArgs, _create_location),
    ToolSpec("update_location", "Update a location's name or description", schemas.UpdateLocationArgs, _update_location),
    ToolSpec("delete_location", "Delete a location, with force=true to prune its subtree", schemas.DeleteLocationArgs, _delete_location),
    ToolSpec("get_location", "Get a location with its parent, path and child count", schemas.LocationIdArgs, _get_location),
    ToolSpec("list_locations", "List every location as a flat, depth-annotated list", schemas.ListLocationsArgs, _list_locations),
    ToolSpec("create_character", "Create a character anchored to a location", schemas.CreateCharacterArgs, _create_character),
    ToolSpec("list_characters", "List all characters", schemas.NoArgs, _list_characters),
    ToolSpec("delete_character", "Delete a character", schemas.EntityIdArgs, _delete_character),
    ToolSpec("update_character", "Update a character's fields", schemas.UpdateCharacterArgs, _update_character),
    ToolSpec("get_character", "Get a character by ID", schemas.EntityIdArgs, _get_character),
    ToolSpec("create_plot", "Create a plot event with a caller-chosen ID", schemas.CreatePlotArgs, _create_plot),
    ToolSpec("update_plot", "Update a plot event's fields", schemas.UpdatePlotArgs, _update_plot),
    ToolSpec("delete_plot", "Delete a plot event", schemas.EntityIdArgs, _delete_plot),
    ToolSpec("get_plot", "Get a plot event by ID", schemas.EntityIdArgs, _get_plot),
    ToolSpec("list_plots", "Get plot events by ID, ordered by ID", schemas.ListPlotsArgs, _list_plots),
)


class ToolRegistry:
    """Validates raw tool arguments and turns service outcomes into tool results."""

    def __init__(self, service: WorldService, config: AppConfigRoot | None = None) -> None:
        self.service = service
        self.config = config or AppConfigRoot()
        self._tools = {spec.name: spec for spec in TOOLS}

    def names(self) -> list[str]:
        return list(self._tools)

    def list_tools(self) -> list[dict[str, Any]]:
        return [
            {
                "name": spec.name,
                "description": spec.description,
                "inputSchema": spec.args_model.model_json_schema(by_alias=True),
            }
            for spec in self._tools.values()
        ]

    def call(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResult:
        log = logger.bind(op=name)
        spec = self._tools.get(name)
        if spec is None:
            return tool_error(InvalidArgumentsError(f"Unknown tool: {name}"))

        if self.config.observability.log_tool_arguments:
            log.debug("Tool arguments: {}", arguments)

        try:
            args = spec.args_model.model_validate(
                arguments or {},
                context={"min_description_length": self.config.tools.min_description_length},
            )
        except ValidationError as exc:
            log.warning("Tool arguments rejected: {} error(s)", exc.error_count())
            return tool_error(InvalidArgumentsError(_format_validation_error(exc)))

        try:
            return spec.handler(self.service, args)
        except WorldError as exc:
            return tool_error(exc)


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "arguments"
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "Invalid arguments: " + "; ".join(parts)
