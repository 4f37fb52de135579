"""
kgmemory
========

A small persistent knowledge-graph memory: named entities carrying
free-text observations, typed directed relationships between them,
file-backed persistence per session partition, and substring search.

Core idea:
- Every operation is load, transform in memory, save.

Public API:
- GraphEngine
- GraphStore
- FileGraphStore
- InMemoryGraphStore
"""

from kgmemory.graph.graph_engine import GraphEngine
from kgmemory.graph.graph_store import GraphStore, FileGraphStore, InMemoryGraphStore
from kgmemory.graph.graph_schema import Entity, Relationship, KnowledgeGraph
from kgmemory.graph.errors import EntityNotFoundError

__all__ = [
    "GraphEngine",
    "GraphStore",
    "FileGraphStore",
    "InMemoryGraphStore",
    "Entity",
    "Relationship",
    "KnowledgeGraph",
    "EntityNotFoundError",
]

__version__ = "0.1.0"
