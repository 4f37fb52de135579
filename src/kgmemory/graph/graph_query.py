from __future__ import annotations

from typing import Callable, Iterable

from kgmemory.graph.graph_schema import Entity, KnowledgeGraph
from kgmemory.utils.text import contains_ignore_case


EntityPredicate = Callable[[Entity], bool]


class GraphQueryEngine:
    """
    Read-only selection over a loaded knowledge graph.

    Search and open both return a subgraph: the selected entities plus
    every relationship with at least one endpoint among them. The other
    endpoint does not have to be selected, or even stored.
    """

    def subgraph(
        self,
        graph: KnowledgeGraph,
        predicate: EntityPredicate,
    ) -> KnowledgeGraph:
        entities = [e for e in graph.entities if predicate(e)]
        names = {e.name for e in entities}

        relationships = [
            r for r in graph.relationships if r.source in names or r.target in names
        ]

        return KnowledgeGraph(entities=entities, relationships=relationships)

    def search(self, graph: KnowledgeGraph, query: str) -> KnowledgeGraph:
        """
        Case-insensitive substring match on name, type or any observation.
        """

        def _matches(entity: Entity) -> bool:
            return (
                contains_ignore_case(entity.name, query)
                or contains_ignore_case(entity.entity_type, query)
                or any(contains_ignore_case(o, query) for o in entity.observations)
            )

        return self.subgraph(graph, _matches)

    def open(self, graph: KnowledgeGraph, names: Iterable[str]) -> KnowledgeGraph:
        """
        Exact-name selection; unknown names are simply absent.
        """
        wanted = set(names)
        return self.subgraph(graph, lambda e: e.name in wanted)
