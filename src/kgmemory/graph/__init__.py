"""
Graph subsystem for kgmemory.

Defines the knowledge graph data model and the layers that operate on it:
- persistence (one graph per partition)
- in-memory mutation and query transforms
- the engine tying them into load-transform-save operations
"""

from kgmemory.graph.errors import GraphError, EntityNotFoundError, InvalidRecordError
from kgmemory.graph.graph_schema import (
    Entity,
    Relationship,
    KnowledgeGraph,
    ObservationAddition,
    ObservationDeletion,
    AddedObservations,
)
from kgmemory.graph.graph_store import (
    GraphStore,
    FileGraphStore,
    InMemoryGraphStore,
    create_store,
    partition_key,
)
from kgmemory.graph.graph_mutator import GraphMutator
from kgmemory.graph.graph_query import GraphQueryEngine
from kgmemory.graph.graph_engine import GraphEngine
from kgmemory.graph.graph_export import GraphStats, graph_stats, to_networkx

__all__ = [
    "GraphError",
    "EntityNotFoundError",
    "InvalidRecordError",
    "Entity",
    "Relationship",
    "KnowledgeGraph",
    "ObservationAddition",
    "ObservationDeletion",
    "AddedObservations",
    "GraphStore",
    "FileGraphStore",
    "InMemoryGraphStore",
    "create_store",
    "partition_key",
    "GraphMutator",
    "GraphQueryEngine",
    "GraphEngine",
    "GraphStats",
    "graph_stats",
    "to_networkx",
]
