from __future__ import annotations

import pytest

from rpg_world.domain.errors import (
    DuplicateIdError,
    InvalidCharacterReferencesError,
    LocationNotFoundError,
    NotFoundError,
)
from rpg_world.domain.models import WorldState
from rpg_world.world import characters, locations, plots

DESCRIPTION = "x" * 120


def _world() -> WorldState:
    state = WorldState()
    locations.create_world(state, "Aldoria", DESCRIPTION)
    capital = locations.create_location(state, 0, "Capital", DESCRIPTION)
    locations.create_location(state, capital.id, "Slums", DESCRIPTION)
    characters.create_character(state, "Mira", "curious", "thief", location_id=2)
    return state


def test_create_plot_with_caller_id() -> None:
    state = _world()

    plot = plots.create_plot(state, 5, "Heist", "The vault job", "Night 1", location_id=2, character_ids=[1])

    assert plot.id == 5
    assert plots.get_plot(state, 5) is plot


def test_duplicate_plot_id_rejected() -> None:
    state = _world()
    plots.create_plot(state, 5, "Heist", "d", "Night 1", location_id=2, character_ids=[1])

    with pytest.raises(DuplicateIdError):
        plots.create_plot(state, 5, "Again", "d", "Night 2", location_id=2)
    assert len(state.plots) == 1


def test_invalid_character_references_listed_together() -> None:
    state = _world()

    with pytest.raises(InvalidCharacterReferencesError) as exc_info:
        plots.create_plot(state, 5, "Heist", "d", "Night 1", location_id=2, character_ids=[1, 99, 42])

    assert exc_info.value.invalid_ids == [99, 42]
    assert state.plots == []


def test_unknown_location_rejected() -> None:
    state = _world()

    with pytest.raises(LocationNotFoundError):
        plots.create_plot(state, 5, "Heist", "d", "Night 1", location_id=8)


def test_update_plot_validates_before_applying() -> None:
    state = _world()
    plot = plots.create_plot(state, 5, "Heist", "d", "Night 1", location_id=2, character_ids=[1])

    with pytest.raises(InvalidCharacterReferencesError):
        plots.update_plot(state, 5, name="Renamed", character_ids=[1, 7])
    with pytest.raises(LocationNotFoundError):
        plots.update_plot(state, 5, name="Renamed", location_id=50)
    assert plot.name == "Heist"

    plots.update_plot(state, 5, time="Dawn", character_ids=[])
    assert (plot.name, plot.time, plot.character_ids) == ("Heist", "Dawn", [])

    with pytest.raises(NotFoundError):
        plots.update_plot(state, 6, name="ghost")


def test_delete_plot() -> None:
    state = _world()
    plots.create_plot(state, 5, "Heist", "d", "Night 1", location_id=2)

    plots.delete_plot(state, 5)

    assert state.plots == []
    with pytest.raises(NotFoundError):
        plots.delete_plot(state, 5)


def test_list_plots_filters_and_sorts() -> None:
    state = _world()
    for plot_id in (9, 3, 5):
        plots.create_plot(state, plot_id, f"Plot {plot_id}", "d", "t", location_id=0)

    listed = plots.list_plots(state, [5, 9, 3, 100])

    assert [plot.id for plot in listed] == [3, 5, 9]
    assert [plot.id for plot in plots.list_plots(state, [9])] == [9]
    assert plots.list_plots(state, []) == []
