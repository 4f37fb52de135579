from typing import List, Optional

from fastapi import APIRouter, Depends

from kgmemory.graph.graph_engine import GraphEngine
from kgmemory.graph.graph_export import graph_stats

from backend.app.api.schemas import (
    AddObservationsRequest,
    AddedObservationsModel,
    CreateEntitiesRequest,
    CreateRelationshipsRequest,
    DeleteEntitiesRequest,
    DeleteObservationsRequest,
    DeleteRelationshipsRequest,
    EntityModel,
    GraphStatsResponse,
    KnowledgeGraphModel,
    OpenNodesRequest,
    RelationshipModel,
    StatusResponse,
)
from backend.app.dependencies import get_engine

router = APIRouter()


# ---------------- Queries ----------------


@router.get("/", response_model=KnowledgeGraphModel)
def read_graph(
    session_id: Optional[str] = None,
    engine: GraphEngine = Depends(get_engine),
):
    return KnowledgeGraphModel.from_domain(engine.read_graph(session_id=session_id))


@router.get("/search", response_model=KnowledgeGraphModel)
def search_nodes(
    query: str,
    session_id: Optional[str] = None,
    engine: GraphEngine = Depends(get_engine),
):
    return KnowledgeGraphModel.from_domain(
        engine.search_nodes(query, session_id=session_id)
    )


@router.post("/open", response_model=KnowledgeGraphModel)
def open_nodes(
    request: OpenNodesRequest,
    session_id: Optional[str] = None,
    engine: GraphEngine = Depends(get_engine),
):
    return KnowledgeGraphModel.from_domain(
        engine.open_nodes(request.names, session_id=session_id)
    )


@router.get("/stats", response_model=GraphStatsResponse)
def stats(
    session_id: Optional[str] = None,
    engine: GraphEngine = Depends(get_engine),
):
    return GraphStatsResponse(
        **graph_stats(engine.read_graph(session_id=session_id)).to_dict()
    )


# ---------------- Mutations ----------------


@router.post("/entities", response_model=List[EntityModel])
def create_entities(
    request: CreateEntitiesRequest,
    session_id: Optional[str] = None,
    engine: GraphEngine = Depends(get_engine),
):
    created = engine.create_entities(
        [e.to_domain() for e in request.entities],
        session_id=session_id,
    )
    return [EntityModel.from_domain(e) for e in created]


@router.post("/relationships", response_model=List[RelationshipModel])
def create_relationships(
    request: CreateRelationshipsRequest,
    session_id: Optional[str] = None,
    engine: GraphEngine = Depends(get_engine),
):
    created = engine.create_relationships(
        [r.to_domain() for r in request.relationships],
        session_id=session_id,
    )
    return [RelationshipModel.from_domain(r) for r in created]


@router.post("/observations", response_model=List[AddedObservationsModel])
def add_observations(
    request: AddObservationsRequest,
    session_id: Optional[str] = None,
    engine: GraphEngine = Depends(get_engine),
):
    added = engine.add_observations(
        [o.to_domain() for o in request.observations],
        session_id=session_id,
    )
    return [AddedObservationsModel.from_domain(a) for a in added]


@router.post("/entities/delete", response_model=StatusResponse)
def delete_entities(
    request: DeleteEntitiesRequest,
    session_id: Optional[str] = None,
    engine: GraphEngine = Depends(get_engine),
):
    engine.delete_entities(request.entity_names, session_id=session_id)
    return StatusResponse()


@router.post("/observations/delete", response_model=StatusResponse)
def delete_observations(
    request: DeleteObservationsRequest,
    session_id: Optional[str] = None,
    engine: GraphEngine = Depends(get_engine),
):
    engine.delete_observations(
        [d.to_domain() for d in request.deletions],
        session_id=session_id,
    )
    return StatusResponse()


@router.post("/relationships/delete", response_model=StatusResponse)
def delete_relationships(
    request: DeleteRelationshipsRequest,
    session_id: Optional[str] = None,
    engine: GraphEngine = Depends(get_engine),
):
    engine.delete_relationships(
        [r.to_domain() for r in request.relationships],
        session_id=session_id,
    )
    return StatusResponse()
