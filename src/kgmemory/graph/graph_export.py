from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict

import networkx as nx

from kgmemory.graph.graph_schema import KnowledgeGraph


@dataclass(frozen=True)
class GraphStats:
    """
    Structural summary of one partition.
    """

    entities: int
    relationships: int
    observations: int
    entity_types: Dict[str, int]
    dangling_relationships: int
    components: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entities": self.entities,
            "relationships": self.relationships,
            "observations": self.observations,
            "entity_types": dict(self.entity_types),
            "dangling_relationships": self.dangling_relationships,
            "components": self.components,
        }


def to_networkx(graph: KnowledgeGraph) -> nx.MultiDiGraph:
    """
    Build a networkx view of a knowledge graph.

    Relationship endpoints that name no stored entity become bare nodes.
    Parallel relationships of different types are kept as separate edges
    keyed by relationship type.
    """
    g = nx.MultiDiGraph()

    for entity in graph.entities:
        g.add_node(
            entity.name,
            entity_type=entity.entity_type,
            observations=list(entity.observations),
        )

    for rel in graph.relationships:
        g.add_edge(rel.source, rel.target, key=rel.relationship_type)

    return g


def graph_stats(graph: KnowledgeGraph) -> GraphStats:
    names = graph.entity_names()
    view = to_networkx(graph)

    dangling = sum(
        1
        for r in graph.relationships
        if r.source not in names or r.target not in names
    )

    return GraphStats(
        entities=len(graph.entities),
        relationships=len(graph.relationships),
        observations=sum(len(e.observations) for e in graph.entities),
        entity_types=dict(Counter(e.entity_type for e in graph.entities)),
        dangling_relationships=dangling,
        components=nx.number_weakly_connected_components(view),
    )
