from typing import Any, List, Dict
from pydantic import BaseModel, ConfigDict, Field

from kgmemory.graph.graph_schema import (
    Entity,
    Relationship,
    KnowledgeGraph,
    ObservationAddition,
    ObservationDeletion,
    AddedObservations,
)


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


# ---------------- Graph primitives ----------------


class EntityModel(_WireModel):
    name: str
    entity_type: str = Field(alias="entityType")
    observations: List[str]

    def to_domain(self) -> Entity:
        return Entity(
            name=self.name,
            entity_type=self.entity_type,
            observations=list(self.observations),
        )

    @classmethod
    def from_domain(cls, entity: Entity) -> "EntityModel":
        return cls(
            name=entity.name,
            entity_type=entity.entity_type,
            observations=list(entity.observations),
        )


class RelationshipModel(_WireModel):
    source: str = Field(alias="from")
    target: str = Field(alias="to")
    relationship_type: str = Field(alias="relationshipType")

    def to_domain(self) -> Relationship:
        return Relationship(
            source=self.source,
            target=self.target,
            relationship_type=self.relationship_type,
        )

    @classmethod
    def from_domain(cls, rel: Relationship) -> "RelationshipModel":
        return cls(
            source=rel.source,
            target=rel.target,
            relationship_type=rel.relationship_type,
        )


class KnowledgeGraphModel(_WireModel):
    entities: List[EntityModel]
    relationships: List[RelationshipModel]

    @classmethod
    def from_domain(cls, graph: KnowledgeGraph) -> "KnowledgeGraphModel":
        return cls(
            entities=[EntityModel.from_domain(e) for e in graph.entities],
            relationships=[RelationshipModel.from_domain(r) for r in graph.relationships],
        )


class ObservationModel(_WireModel):
    entity_name: str = Field(alias="entityName")
    contents: List[str]

    def to_domain(self) -> ObservationAddition:
        return ObservationAddition(
            entity_name=self.entity_name,
            contents=list(self.contents),
        )


class ObservationDeletionModel(_WireModel):
    entity_name: str = Field(alias="entityName")
    observations: List[str]

    def to_domain(self) -> ObservationDeletion:
        return ObservationDeletion(
            entity_name=self.entity_name,
            observations=list(self.observations),
        )


class AddedObservationsModel(_WireModel):
    entity_name: str = Field(alias="entityName")
    added_observations: List[str] = Field(alias="addedObservations")

    @classmethod
    def from_domain(cls, added: AddedObservations) -> "AddedObservationsModel":
        return cls(
            entity_name=added.entity_name,
            added_observations=list(added.added_observations),
        )


# ---------------- Requests ----------------


class CreateEntitiesRequest(_WireModel):
    entities: List[EntityModel]


class CreateRelationshipsRequest(_WireModel):
    relationships: List[RelationshipModel]


class AddObservationsRequest(_WireModel):
    observations: List[ObservationModel]


class DeleteEntitiesRequest(_WireModel):
    entity_names: List[str] = Field(alias="entityNames")


class DeleteObservationsRequest(_WireModel):
    deletions: List[ObservationDeletionModel]


class DeleteRelationshipsRequest(_WireModel):
    relationships: List[RelationshipModel]


class SearchNodesRequest(_WireModel):
    query: str


class OpenNodesRequest(_WireModel):
    names: List[str]


class ReadGraphRequest(_WireModel):
    pass


# ---------------- Responses ----------------


class StatusResponse(BaseModel):
    status: str = "ok"


class GraphStatsResponse(BaseModel):
    entities: int
    relationships: int
    observations: int
    entity_types: Dict[str, int]
    dangling_relationships: int
    components: int


class ToolDescription(BaseModel):
    name: str
    description: str


class ToolCallRequest(BaseModel):
    arguments: Dict[str, Any] = Field(default_factory=dict)
    session_id: str | None = None


class ToolCallResponse(BaseModel):
    output: str
    is_error: bool = False


class InstructionsResponse(BaseModel):
    instructions: str
