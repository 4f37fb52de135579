from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Type

from pydantic import BaseModel, ValidationError

from kgmemory.graph.errors import GraphError
from kgmemory.graph.graph_engine import GraphEngine
from kgmemory.graph.graph_schema import KnowledgeGraph

from backend.app.api.schemas import (
    AddObservationsRequest,
    CreateEntitiesRequest,
    CreateRelationshipsRequest,
    DeleteEntitiesRequest,
    DeleteObservationsRequest,
    DeleteRelationshipsRequest,
    OpenNodesRequest,
    ReadGraphRequest,
    SearchNodesRequest,
)


ToolHandler = Callable[[GraphEngine, Any, Optional[str]], str]


@dataclass(frozen=True)
class MemoryTool:
    """
    One LLM-facing operation: a name, a description, the request model
    its arguments must satisfy and a handler rendering the result as text.
    """

    name: str
    description: str
    input_model: Type[BaseModel]
    handler: ToolHandler


@dataclass(frozen=True)
class ToolResult:
    output: str
    is_error: bool = False


def _to_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def _graph_text(graph: KnowledgeGraph) -> str:
    return _to_json(graph.to_dict())


# ---------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------


def _create_entities(engine: GraphEngine, req: CreateEntitiesRequest, session_id):
    created = engine.create_entities(
        [e.to_domain() for e in req.entities],
        session_id=session_id,
    )
    return "Created the following new entities:\n\n" + _to_json(
        [e.to_dict() for e in created]
    )


def _create_relationships(
    engine: GraphEngine, req: CreateRelationshipsRequest, session_id
):
    created = engine.create_relationships(
        [r.to_domain() for r in req.relationships],
        session_id=session_id,
    )
    return "Created the following new relationships:\n\n" + _to_json(
        [r.to_dict() for r in created]
    )


def _add_observations(engine: GraphEngine, req: AddObservationsRequest, session_id):
    added = engine.add_observations(
        [o.to_domain() for o in req.observations],
        session_id=session_id,
    )
    return "Added the following observations:\n\n" + _to_json(
        [a.to_dict() for a in added]
    )


def _delete_entities(engine: GraphEngine, req: DeleteEntitiesRequest, session_id):
    engine.delete_entities(req.entity_names, session_id=session_id)
    return "Entities deleted successfully"


def _delete_observations(
    engine: GraphEngine, req: DeleteObservationsRequest, session_id
):
    engine.delete_observations(
        [d.to_domain() for d in req.deletions],
        session_id=session_id,
    )
    return "Observations deleted successfully"


def _delete_relationships(
    engine: GraphEngine, req: DeleteRelationshipsRequest, session_id
):
    engine.delete_relationships(
        [r.to_domain() for r in req.relationships],
        session_id=session_id,
    )
    return "Relationships deleted successfully"


def _read_graph(engine: GraphEngine, req: ReadGraphRequest, session_id):
    return _graph_text(engine.read_graph(session_id=session_id))


def _search_nodes(engine: GraphEngine, req: SearchNodesRequest, session_id):
    return _graph_text(engine.search_nodes(req.query, session_id=session_id))


def _read_nodes(engine: GraphEngine, req: OpenNodesRequest, session_id):
    return _graph_text(engine.open_nodes(req.names, session_id=session_id))


MEMORY_TOOLS: List[MemoryTool] = [
    MemoryTool(
        name="memory_create_entities",
        description=(
            "Creates new entities in the knowledge graph. Entities represent "
            "distinct concepts or objects."
        ),
        input_model=CreateEntitiesRequest,
        handler=_create_entities,
    ),
    MemoryTool(
        name="memory_create_relationships",
        description=(
            "Creates new relationships between existing entities in the knowledge "
            "graph. Relationships define how entities are connected and should be "
            "expressed in active voice."
        ),
        input_model=CreateRelationshipsRequest,
        handler=_create_relationships,
    ),
    MemoryTool(
        name="memory_add_observations",
        description=(
            "Adds new observations to existing entities in the knowledge graph. "
            "Observations are factual details or attributes associated with an entity."
        ),
        input_model=AddObservationsRequest,
        handler=_add_observations,
    ),
    MemoryTool(
        name="memory_delete_entities",
        description=(
            "Deletes specified entities from the knowledge graph. This action will "
            "also remove any relationships or observations associated with the "
            "deleted entities."
        ),
        input_model=DeleteEntitiesRequest,
        handler=_delete_entities,
    ),
    MemoryTool(
        name="memory_delete_observations",
        description=(
            "Deletes specific observations from entities in the knowledge graph. You "
            "must specify the entity name and the exact observations to remove."
        ),
        input_model=DeleteObservationsRequest,
        handler=_delete_observations,
    ),
    MemoryTool(
        name="memory_delete_relationships",
        description=(
            "Deletes specified relationships between entities in the knowledge "
            "graph. You must provide the exact relationship details to be deleted."
        ),
        input_model=DeleteRelationshipsRequest,
        handler=_delete_relationships,
    ),
    MemoryTool(
        name="memory_read_graph",
        description=(
            "Reads and returns the entire current state of the knowledge graph, "
            "including all entities, relationships, and observations."
        ),
        input_model=ReadGraphRequest,
        handler=_read_graph,
    ),
    MemoryTool(
        name="memory_search_nodes",
        description=(
            "Searches for entities (nodes) in the knowledge graph that match a given "
            "query. Returns a subgraph containing the matching entities and their "
            "direct relationships/observations."
        ),
        input_model=SearchNodesRequest,
        handler=_search_nodes,
    ),
    MemoryTool(
        name="memory_read_nodes",
        description=(
            "Reads and returns specific entities (nodes) from the knowledge graph by "
            "their exact names. Returns a subgraph containing the requested entities "
            "and their direct relationships/observations."
        ),
        input_model=OpenNodesRequest,
        handler=_read_nodes,
    ),
]

MEMORY_TOOL_NAMES = [t.name for t in MEMORY_TOOLS]

MEMORY_TOOLS_INSTRUCTIONS = f"""[instructions about memory tools]

You have access to the following tools that help you manage long-term memory: {", ".join(MEMORY_TOOL_NAMES)}

Use them when asked to remember things. Memory is a knowledge graph consisting of entities with observations and relationships between entities.
Always represent facts in those terms to make it easier to look up information later.

When asked to modify existing facts always look up correct entity/relationship names.

The memory_search_nodes tool uses basic substring search, keep that in mind.

IMPORTANT:
 - If targeted search (memory_search_nodes tool) returns nothing, always use memory_read_graph tool next to get the full graph. memory_search_nodes can be unreliable.
 - Never guess entity names, you MUST look up current state first.

[end of instructions about memory tools]
"""


class MemoryToolService:
    """
    Adapter exposing the graph engine as text-returning tools.

    Arguments are validated against each tool's request model before
    they reach the engine. Validation and graph errors come back as
    error results rather than exceptions, since the consumer is a model
    that reads text.
    """

    def __init__(self, engine: GraphEngine) -> None:
        self.engine = engine
        self._tools: Dict[str, MemoryTool] = {t.name: t for t in MEMORY_TOOLS}
        self._logger = logging.getLogger("kgmemory.tools")

    def list_tools(self) -> List[MemoryTool]:
        return list(self._tools.values())

    def get(self, name: str) -> MemoryTool:
        """
        Raises KeyError for unknown tool names.
        """
        return self._tools[name]

    def call(
        self,
        name: str,
        arguments: Mapping[str, Any] | None = None,
        *,
        session_id: Optional[str] = None,
    ) -> ToolResult:
        tool = self.get(name)

        try:
            request = tool.input_model.model_validate(dict(arguments or {}))
        except ValidationError as exc:
            self._logger.info("tool=%s rejected arguments: %s", name, exc)
            return ToolResult(
                output=f"Invalid arguments for {name}: {exc}",
                is_error=True,
            )

        try:
            output = tool.handler(self.engine, request, session_id)
        except GraphError as exc:
            self._logger.warning("tool=%s session=%s failed: %s", name, session_id, exc)
            return ToolResult(output=f"Error: {exc}", is_error=True)

        self._logger.debug("tool=%s session=%s ok", name, session_id)
        return ToolResult(output=output)
