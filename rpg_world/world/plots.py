from __future__ import annotations

from typing import Iterable

from rpg_world.domain.errors import (
    DuplicateIdError,
    InvalidCharacterReferencesError,
    LocationNotFoundError,
    NotFoundError,
)
from rpg_world.domain.models import Plot, WorldState
from rpg_world.domain.tree import find_by_id


def _check_location(state: WorldState, location_id: int) -> None:
    if find_by_id(state.root, location_id) is None:
        raise LocationNotFoundError(location_id)


def _check_characters(state: WorldState, character_ids: Iterable[int]) -> None:
    known = {character.id for character in state.characters}
    # Report every unknown id at once, in the order given.
    invalid = [character_id for character_id in dict.fromkeys(character_ids) if character_id not in known]
    if invalid:
        raise InvalidCharacterReferencesError(invalid)


def _find(state: WorldState, plot_id: int) -> Plot | None:
    for plot in state.plots:
        if plot.id == plot_id:
            return plot
    return None


def create_plot(
    state: WorldState,
    plot_id: int,
    name: str,
    description: str,
    time: str,
    location_id: int,
    character_ids: Iterable[int] = (),
) -> Plot:
    character_ids = list(character_ids)
    if _find(state, plot_id) is not None:
        raise DuplicateIdError("plot", plot_id)
    _check_location(state, location_id)
    _check_characters(state, character_ids)

    plot = Plot(
        id=plot_id,
        name=name,
        description=description,
        time=time,
        location_id=location_id,
        character_ids=list(dict.fromkeys(character_ids)),
    )
    state.plots.append(plot)
    return plot


def get_plot(state: WorldState, plot_id: int) -> Plot:
    plot = _find(state, plot_id)
    if plot is None:
        raise NotFoundError("plot", plot_id)
    return plot


def update_plot(
    state: WorldState,
    plot_id: int,
    name: str | None = None,
    description: str | None = None,
    time: str | None = None,
    location_id: int | None = None,
    character_ids: Iterable[int] | None = None,
) -> Plot:
    plot = get_plot(state, plot_id)
    if location_id is not None:
        _check_location(state, location_id)
    if character_ids is not None:
        character_ids = list(character_ids)
        _check_characters(state, character_ids)

    if name is not None:
        plot.name = name
    if description is not None:
        plot.description = description
    if time is not None:
        plot.time = time
    if location_id is not None:
        plot.location_id = location_id
    if character_ids is not None:
        plot.character_ids = list(dict.fromkeys(character_ids))
    return plot


def delete_plot(state: WorldState, plot_id: int) -> Plot:
    plot = get_plot(state, plot_id)
    state.plots.remove(plot)
    return plot


def list_plots(state: WorldState, plot_ids: Iterable[int]) -> list[Plot]:
    """Plots whose id is requested, ascending by id; unknown ids are skipped."""
    wanted = set(plot_ids)
    return sorted((plot for plot in state.plots if plot.id in wanted), key=lambda plot: plot.id)
