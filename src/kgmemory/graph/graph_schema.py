from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Set, Tuple

from kgmemory.graph.errors import InvalidRecordError


def _require_str(data: Mapping[str, Any], key: str, kind: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise InvalidRecordError(f"{kind} field '{key}' must be a string, got {value!r}")
    return value


def _require_str_list(data: Mapping[str, Any], key: str, kind: str) -> List[str]:
    value = data.get(key)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise InvalidRecordError(
            f"{kind} field '{key}' must be a list of strings, got {value!r}"
        )
    return list(value)


@dataclass
class Entity:
    """
    Named node in the knowledge graph.

    Identity is the name; observations are free-text facts kept in
    insertion order.
    """

    name: str
    entity_type: str
    observations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "entityType": self.entity_type,
            "observations": list(self.observations),
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "Entity":
        return Entity(
            name=_require_str(data, "name", "entity"),
            entity_type=_require_str(data, "entityType", "entity"),
            observations=_require_str_list(data, "observations", "entity"),
        )


@dataclass(frozen=True)
class Relationship:
    """
    Directed, typed edge between two entity names.

    A relationship is a value: two relationships with the same
    (source, target, relationship_type) triple are the same relationship.
    Endpoints are free-form and never checked against stored entities.
    """

    source: str
    target: str
    relationship_type: str

    @property
    def key(self) -> Tuple[str, str, str]:
        return (self.source, self.target, self.relationship_type)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.source,
            "to": self.target,
            "relationshipType": self.relationship_type,
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "Relationship":
        return Relationship(
            source=_require_str(data, "from", "relationship"),
            target=_require_str(data, "to", "relationship"),
            relationship_type=_require_str(data, "relationshipType", "relationship"),
        )


@dataclass
class KnowledgeGraph:
    """
    Entire state of one partition.

    Order of both sequences is preserved and observable in results.
    """

    entities: List[Entity] = field(default_factory=list)
    relationships: List[Relationship] = field(default_factory=list)

    @staticmethod
    def empty() -> "KnowledgeGraph":
        return KnowledgeGraph(entities=[], relationships=[])

    def entity_names(self) -> Set[str]:
        return {e.name for e in self.entities}

    def find_entity(self, name: str) -> Entity | None:
        for entity in self.entities:
            if entity.name == name:
                return entity
        return None

    def clone(self) -> "KnowledgeGraph":
        return KnowledgeGraph(
            entities=[
                Entity(
                    name=e.name,
                    entity_type=e.entity_type,
                    observations=list(e.observations),
                )
                for e in self.entities
            ],
            # Relationships are frozen, sharing them is safe.
            relationships=list(self.relationships),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entities": [e.to_dict() for e in self.entities],
            "relationships": [r.to_dict() for r in self.relationships],
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "KnowledgeGraph":
        return KnowledgeGraph(
            entities=[Entity.from_dict(e) for e in data.get("entities", [])],
            relationships=[
                Relationship.from_dict(r) for r in data.get("relationships", [])
            ],
        )


# ---------------------------------------------------------------------
# Operation payloads
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class ObservationAddition:
    """
    Observations to attach to one existing entity.
    """

    entity_name: str
    contents: List[str]

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "ObservationAddition":
        return ObservationAddition(
            entity_name=_require_str(data, "entityName", "observation"),
            contents=_require_str_list(data, "contents", "observation"),
        )


@dataclass(frozen=True)
class ObservationDeletion:
    entity_name: str
    observations: List[str]

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "ObservationDeletion":
        return ObservationDeletion(
            entity_name=_require_str(data, "entityName", "deletion"),
            observations=_require_str_list(data, "observations", "deletion"),
        )


@dataclass(frozen=True)
class AddedObservations:
    """
    Observations actually appended to one entity by an add call.
    """

    entity_name: str
    added_observations: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entityName": self.entity_name,
            "addedObservations": list(self.added_observations),
        }
