from __future__ import annotations


class GraphError(Exception):
    """
    Base class for knowledge graph failures raised by kgmemory.
    """


class EntityNotFoundError(GraphError, LookupError):
    """
    Raised when an operation requires an entity that is not stored.
    """

    def __init__(self, entity_name: str) -> None:
        self.entity_name = entity_name
        super().__init__(f"Entity with name {entity_name} not found")


class InvalidRecordError(GraphError, ValueError):
    """
    Raised when a persisted or imported record does not have the expected shape.
    """
