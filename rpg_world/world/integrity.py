from __future__ import annotations

from rpg_world.domain.models import DanglingReference, WorldState
from rpg_world.domain.tree import iter_locations


def find_dangling_references(state: WorldState) -> list[DanglingReference]:
    """List references left pointing at deleted locations or characters.

    Deletes never cascade, so characters can outlive their location and plots
    can outlive their location or cast. This report is read-only.
    """
    location_ids = {node.id for node in iter_locations(state.root)}
    character_ids = {character.id for character in state.characters}
    dangling: list[DanglingReference] = []

    for character in state.characters:
        if character.location_id is not None and character.location_id not in location_ids:
            dangling.append(
                DanglingReference(
                    entity="character",
                    entity_id=character.id,
                    attribute="locationId",
                    missing_id=character.location_id,
                )
            )

    for plot in state.plots:
        if plot.location_id not in location_ids:
            dangling.append(
                DanglingReference(entity="plot", entity_id=plot.id, attribute="locationId", missing_id=plot.location_id)
            )
        for character_id in plot.character_ids:
            if character_id not in character_ids:
                dangling.append(
                    DanglingReference(
                        entity="plot",
                        entity_id=plot.id,
                        attribute="characterIds",
                        missing_id=character_id,
                    )
                )
    return dangling
