"""Typed failures raised by world operations.

Each error carries an :class:`ErrorKind` so callers can tell failures apart
without parsing messages. All of them are raised before any mutation happens,
except :class:`PersistenceError`, which reports a failed save after the
in-memory state already changed.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable


class ErrorKind(str, Enum):
    ALREADY_EXISTS = "AlreadyExists"
    WORLD_MISSING = "WorldMissing"
    NOT_FOUND = "NotFound"
    LOCATION_NOT_FOUND = "LocationNotFound"
    ROOT_DELETION_FORBIDDEN = "RootDeletionForbidden"
    HAS_CHILDREN = "HasChildren"
    DUPLICATE_ID = "DuplicateId"
    INVALID_CHARACTER_REFERENCES = "InvalidCharacterReferences"
    PERSISTENCE_FAILED = "PersistenceFailed"
    INVALID_ARGUMENTS = "InvalidArguments"


class WorldError(Exception):
    kind: ErrorKind = ErrorKind.NOT_FOUND

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class WorldAlreadyExistsError(WorldError):
    kind = ErrorKind.ALREADY_EXISTS

    def __init__(self) -> None:
        super().__init__("World already exists")


class WorldMissingError(WorldError):
    kind = ErrorKind.WORLD_MISSING

    def __init__(self) -> None:
        super().__init__("No world exists yet, create the world first")


class NotFoundError(WorldError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, entity_id: int) -> None:
        super().__init__(f"{entity.capitalize()} with ID {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class LocationNotFoundError(WorldError):
    kind = ErrorKind.LOCATION_NOT_FOUND

    def __init__(self, location_id: int) -> None:
        super().__init__(f"Location with ID {location_id} not found")
        self.location_id = location_id


class RootDeletionForbiddenError(WorldError):
    kind = ErrorKind.ROOT_DELETION_FORBIDDEN

    def __init__(self) -> None:
        super().__init__("The world root location cannot be deleted")


class HasChildrenError(WorldError):
    kind = ErrorKind.HAS_CHILDREN

    def __init__(self, location_id: int, child_count: int) -> None:
        super().__init__(
            f"Location {location_id} has {child_count} child location(s); "
            "delete them first or pass force=true"
        )
        self.location_id = location_id
        self.child_count = child_count


class DuplicateIdError(WorldError):
    kind = ErrorKind.DUPLICATE_ID

    def __init__(self, entity: str, entity_id: int) -> None:
        super().__init__(f"{entity.capitalize()} with ID {entity_id} already exists")
        self.entity = entity
        self.entity_id = entity_id


class InvalidCharacterReferencesError(WorldError):
    kind = ErrorKind.INVALID_CHARACTER_REFERENCES

    def __init__(self, invalid_ids: Iterable[int]) -> None:
        self.invalid_ids = list(invalid_ids)
        joined = ", ".join(str(character_id) for character_id in self.invalid_ids)
        super().__init__(f"Characters not found: {joined}")


class PersistenceError(WorldError):
    kind = ErrorKind.PERSISTENCE_FAILED


class InvalidArgumentsError(WorldError):
    kind = ErrorKind.INVALID_ARGUMENTS
