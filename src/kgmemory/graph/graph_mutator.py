from __future__ import annotations

from typing import Iterable, List, Set, Tuple

from kgmemory.config.settings import EngineConfig
from kgmemory.graph.errors import EntityNotFoundError
from kgmemory.graph.graph_schema import (
    AddedObservations,
    Entity,
    KnowledgeGraph,
    ObservationAddition,
    ObservationDeletion,
    Relationship,
)


class GraphMutator:
    """
    In-memory transformations of a loaded knowledge graph.

    Every method edits the graph it is given in place and holds no state
    between calls; persistence is the engine's job.
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig()

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_entities(
        self,
        graph: KnowledgeGraph,
        entities: Iterable[Entity],
    ) -> List[Entity]:
        """
        Append entities whose name is not stored yet and return them.

        Input order is preserved. Unless ``dedupe_within_batch`` is set,
        names are only checked against the graph as loaded, so a new name
        repeated in one batch is appended once per occurrence.
        """
        existing = graph.entity_names()
        seen: Set[str] = set()
        created: List[Entity] = []

        for entity in entities:
            if entity.name in existing:
                continue
            if self.config.dedupe_within_batch:
                if entity.name in seen:
                    continue
                seen.add(entity.name)
            created.append(
                Entity(
                    name=entity.name,
                    entity_type=entity.entity_type,
                    observations=list(entity.observations),
                )
            )

        graph.entities.extend(created)
        return created

    def create_relationships(
        self,
        graph: KnowledgeGraph,
        relationships: Iterable[Relationship],
    ) -> List[Relationship]:
        existing = {r.key for r in graph.relationships}
        seen: Set[Tuple[str, str, str]] = set()
        created: List[Relationship] = []

        for rel in relationships:
            if rel.key in existing:
                continue
            if self.config.dedupe_within_batch:
                if rel.key in seen:
                    continue
                seen.add(rel.key)
            created.append(rel)

        graph.relationships.extend(created)
        return created

    def add_observations(
        self,
        graph: KnowledgeGraph,
        additions: Iterable[ObservationAddition],
    ) -> List[AddedObservations]:
        """
        Append new observation strings to existing entities.

        Contents are checked against the entity's observations as they
        were before the entry; with ``dedupe_within_batch`` a content
        repeated inside the entry is also added only once.

        Raises EntityNotFoundError at the first entry naming an unknown
        entity. Entries before it have already been applied to ``graph``;
        nothing is rolled back.
        """
        results: List[AddedObservations] = []

        for addition in additions:
            entity = graph.find_entity(addition.entity_name)
            if entity is None:
                raise EntityNotFoundError(addition.entity_name)

            present = set(entity.observations)
            seen: Set[str] = set()
            added: List[str] = []
            for content in addition.contents:
                if content in present:
                    continue
                if self.config.dedupe_within_batch:
                    if content in seen:
                        continue
                    seen.add(content)
                added.append(content)

            entity.observations.extend(added)
            results.append(
                AddedObservations(
                    entity_name=addition.entity_name,
                    added_observations=added,
                )
            )

        return results

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    def delete_entities(self, graph: KnowledgeGraph, names: Iterable[str]) -> None:
        """
        Remove the named entities and every relationship touching them.
        """
        doomed = set(names)
        graph.entities = [e for e in graph.entities if e.name not in doomed]
        graph.relationships = [
            r
            for r in graph.relationships
            if r.source not in doomed and r.target not in doomed
        ]

    def delete_observations(
        self,
        graph: KnowledgeGraph,
        deletions: Iterable[ObservationDeletion],
    ) -> None:
        # Unknown entities are ignored, unlike add_observations.
        for deletion in deletions:
            entity = graph.find_entity(deletion.entity_name)
            if entity is None:
                continue
            doomed = set(deletion.observations)
            entity.observations = [o for o in entity.observations if o not in doomed]

    def delete_relationships(
        self,
        graph: KnowledgeGraph,
        relationships: Iterable[Relationship],
    ) -> None:
        doomed = {r.key for r in relationships}
        graph.relationships = [r for r in graph.relationships if r.key not in doomed]
