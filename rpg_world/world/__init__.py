"""World operations: location tree, character and plot registries, and the service facade."""

from rpg_world.world.service import WorldService

__all__ = ["WorldService"]
