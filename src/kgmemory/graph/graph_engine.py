from __future__ import annotations

import logging
import threading
from contextlib import nullcontext
from typing import Callable, ContextManager, Dict, Iterable, List, Optional, TypeVar

from kgmemory.config.settings import EngineConfig
from kgmemory.graph.errors import EntityNotFoundError
from kgmemory.graph.graph_mutator import GraphMutator
from kgmemory.graph.graph_query import GraphQueryEngine
from kgmemory.graph.graph_schema import (
    AddedObservations,
    Entity,
    KnowledgeGraph,
    ObservationAddition,
    ObservationDeletion,
    Relationship,
)
from kgmemory.graph.graph_store import GraphStore, partition_key

T = TypeVar("T")


class GraphEngine:
    """
    Operation set over a partitioned knowledge graph.

    Each call is one cycle: load the partition from the store, transform
    the loaded copy in memory, save it back (mutations only) and return
    the operation's result. The engine keeps no graph state between
    calls; ``session_id=None`` selects the global partition.

    With ``serialize_writes`` enabled, cycles on the same partition run
    one at a time, and reads wait for an in-flight save so they never see
    a half-written partition. One lock is kept per partition key used
    during the engine's lifetime; locks are never evicted.
    """

    def __init__(
        self,
        store: GraphStore,
        config: EngineConfig | None = None,
    ) -> None:
        self.store = store
        self.config = config or EngineConfig()
        self.mutator = GraphMutator(self.config)
        self.query = GraphQueryEngine()

        self._locks: Dict[Optional[str], threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._logger = logging.getLogger("kgmemory.engine")

    # ------------------------------------------------------------------
    # Persistence cycle
    # ------------------------------------------------------------------

    def _partition_lock(self, session_id: Optional[str]) -> ContextManager:
        if not self.config.serialize_writes:
            return nullcontext()
        session_id = partition_key(session_id)
        with self._locks_guard:
            lock = self._locks.get(session_id)
            if lock is None:
                lock = self._locks[session_id] = threading.Lock()
        return lock

    def _load(self, session_id: Optional[str]) -> KnowledgeGraph:
        with self._partition_lock(session_id):
            return self.store.load(session_id)

    def _with_graph(
        self,
        session_id: Optional[str],
        modifier: Callable[[KnowledgeGraph], T],
    ) -> T:
        # The save is skipped when the modifier raises.
        with self._partition_lock(session_id):
            graph = self.store.load(session_id)
            result = modifier(graph)
            self.store.save(session_id, graph)
        return result

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_entities(
        self,
        entities: Iterable[Entity],
        *,
        session_id: Optional[str] = None,
    ) -> List[Entity]:
        """
        Store entities whose name is new; return only those.
        """
        batch = list(entities)
        created = self._with_graph(
            session_id,
            lambda g: self.mutator.create_entities(g, batch),
        )
        self._logger.debug(
            "create_entities session=%s requested=%s created=%s",
            session_id,
            len(batch),
            len(created),
        )
        return created

    def create_relationships(
        self,
        relationships: Iterable[Relationship],
        *,
        session_id: Optional[str] = None,
    ) -> List[Relationship]:
        """
        Store relationships whose (from, to, type) triple is new; return only those.
        """
        batch = list(relationships)
        created = self._with_graph(
            session_id,
            lambda g: self.mutator.create_relationships(g, batch),
        )
        self._logger.debug(
            "create_relationships session=%s requested=%s created=%s",
            session_id,
            len(batch),
            len(created),
        )
        return created

    def add_observations(
        self,
        additions: Iterable[ObservationAddition],
        *,
        session_id: Optional[str] = None,
    ) -> List[AddedObservations]:
        """
        Attach new observations to existing entities.

        Raises EntityNotFoundError if any entry names an unknown entity;
        the whole call is then left unsaved.
        """
        batch = list(additions)
        try:
            results = self._with_graph(
                session_id,
                lambda g: self.mutator.add_observations(g, batch),
            )
        except EntityNotFoundError as exc:
            self._logger.warning(
                "add_observations session=%s failed: %s",
                session_id,
                exc,
            )
            raise

        self._logger.debug(
            "add_observations session=%s entities=%s added=%s",
            session_id,
            len(results),
            sum(len(r.added_observations) for r in results),
        )
        return results

    def delete_entities(
        self,
        names: Iterable[str],
        *,
        session_id: Optional[str] = None,
    ) -> None:
        """
        Remove entities and, in cascade, every relationship touching them.
        """
        batch = list(names)
        self._with_graph(session_id, lambda g: self.mutator.delete_entities(g, batch))
        self._logger.debug("delete_entities session=%s names=%s", session_id, batch)

    def delete_observations(
        self,
        deletions: Iterable[ObservationDeletion],
        *,
        session_id: Optional[str] = None,
    ) -> None:
        batch = list(deletions)
        self._with_graph(
            session_id,
            lambda g: self.mutator.delete_observations(g, batch),
        )
        self._logger.debug(
            "delete_observations session=%s entries=%s",
            session_id,
            len(batch),
        )

    def delete_relationships(
        self,
        relationships: Iterable[Relationship],
        *,
        session_id: Optional[str] = None,
    ) -> None:
        batch = list(relationships)
        self._with_graph(
            session_id,
            lambda g: self.mutator.delete_relationships(g, batch),
        )
        self._logger.debug(
            "delete_relationships session=%s requested=%s",
            session_id,
            len(batch),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def read_graph(self, *, session_id: Optional[str] = None) -> KnowledgeGraph:
        return self._load(session_id)

    def search_nodes(
        self,
        query: str,
        *,
        session_id: Optional[str] = None,
    ) -> KnowledgeGraph:
        result = self.query.search(self._load(session_id), query)
        self._logger.debug(
            "search_nodes session=%s query=%r matched=%s",
            session_id,
            query,
            len(result.entities),
        )
        return result

    def open_nodes(
        self,
        names: Iterable[str],
        *,
        session_id: Optional[str] = None,
    ) -> KnowledgeGraph:
        return self.query.open(self._load(session_id), names)
