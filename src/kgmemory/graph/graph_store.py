from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

from kgmemory.config.settings import StoreConfig
from kgmemory.graph.graph_schema import Entity, KnowledgeGraph, Relationship
from kgmemory.utils.text import partition_token

ENTITY_RECORD = "entity"
RELATIONSHIP_RECORD = "relationship"


def partition_key(session_id: Optional[str]) -> Optional[str]:
    """
    Canonical partition key: an empty session id means the global partition.
    """
    return session_id or None


class GraphStore(ABC):
    """
    Durable load/save of one knowledge graph per partition.

    Contract shared by every implementation:
    - load() of a partition that was never saved returns the empty graph
    - save() fully replaces the partition's persisted state
    - partitions never see each other's data

    A ``session_id`` of None or "" addresses the global partition.
    """

    @abstractmethod
    def load(self, session_id: Optional[str] = None) -> KnowledgeGraph:
        raise NotImplementedError

    @abstractmethod
    def save(self, session_id: Optional[str], graph: KnowledgeGraph) -> None:
        raise NotImplementedError


class FileGraphStore(GraphStore):
    """
    Stores each partition as newline-delimited JSON.

    One record per entity and per relationship, each tagged with a
    ``type`` discriminator. Writes are not atomic: a crash mid-save can
    leave a truncated file.
    """

    def __init__(self, memory_file_path: str | Path, *, encoding: str = "utf-8") -> None:
        self.memory_file_path = Path(memory_file_path)
        self.encoding = encoding
        self._logger = logging.getLogger("kgmemory.store")

    # -------------------- Paths --------------------

    def path_for(self, session_id: Optional[str]) -> Path:
        session_id = partition_key(session_id)
        if session_id is None:
            return self.memory_file_path
        base = self.memory_file_path
        name = f"{base.stem}.{partition_token(session_id)}{base.suffix}"
        return base.with_name(name)

    # -------------------- Load / Save --------------------

    def load(self, session_id: Optional[str] = None) -> KnowledgeGraph:
        path = self.path_for(session_id)
        try:
            content = path.read_text(encoding=self.encoding)
        except FileNotFoundError:
            self._logger.debug("no graph file at %s; using empty graph", path)
            return KnowledgeGraph.empty()

        graph = KnowledgeGraph.empty()
        for lineno, line in enumerate(content.split("\n"), start=1):
            if not line.strip():
                continue
            record = json.loads(line)
            kind = record.get("type") if isinstance(record, dict) else None
            if kind == ENTITY_RECORD:
                graph.entities.append(Entity.from_dict(record))
            elif kind == RELATIONSHIP_RECORD:
                graph.relationships.append(Relationship.from_dict(record))
            else:
                self._logger.warning(
                    "skipping record with unknown type %r at %s:%s",
                    kind,
                    path,
                    lineno,
                )

        self._logger.debug(
            "loaded entities=%s relationships=%s from %s",
            len(graph.entities),
            len(graph.relationships),
            path,
        )
        return graph

    def save(self, session_id: Optional[str], graph: KnowledgeGraph) -> None:
        path = self.path_for(session_id)
        lines: List[str] = [
            json.dumps({"type": ENTITY_RECORD, **e.to_dict()}, ensure_ascii=False)
            for e in graph.entities
        ]
        lines.extend(
            json.dumps({"type": RELATIONSHIP_RECORD, **r.to_dict()}, ensure_ascii=False)
            for r in graph.relationships
        )

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(lines), encoding=self.encoding)
        self._logger.debug("saved %s records to %s", len(lines), path)


class InMemoryGraphStore(GraphStore):
    """
    Process-local store, mainly for tests and ephemeral sessions.

    Graphs are cloned on the way in and on the way out so no caller ever
    holds a live reference to stored state.
    """

    def __init__(self) -> None:
        # None keys the global partition.
        self._graphs: Dict[Optional[str], KnowledgeGraph] = {}

    def load(self, session_id: Optional[str] = None) -> KnowledgeGraph:
        graph = self._graphs.get(partition_key(session_id))
        if graph is None:
            return KnowledgeGraph.empty()
        return graph.clone()

    def save(self, session_id: Optional[str], graph: KnowledgeGraph) -> None:
        self._graphs[partition_key(session_id)] = graph.clone()

    def partitions(self) -> List[Optional[str]]:
        return list(self._graphs)


def create_store(config: StoreConfig) -> GraphStore:
    """
    Build the store selected by configuration.
    """
    if config.backend == "file":
        return FileGraphStore(config.memory_file_path, encoding=config.encoding)
    if config.backend == "memory":
        return InMemoryGraphStore()
    raise ValueError(f"Unknown graph store backend: {config.backend!r}")
