from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from contextlib import asynccontextmanager

from backend.app.main import create_app
from backend.app.config import AppConfig
from backend.app.dependencies import get_engine, get_tool_service
from backend.app.services.memory_tools import MemoryToolService

from kgmemory.config.settings import EngineConfig
from kgmemory.graph.graph_engine import GraphEngine
from kgmemory.graph.graph_schema import Entity, KnowledgeGraph, Relationship
from kgmemory.graph.graph_store import FileGraphStore, InMemoryGraphStore


@pytest.fixture()
def store() -> InMemoryGraphStore:
    return InMemoryGraphStore()


@pytest.fixture()
def engine(store: InMemoryGraphStore) -> GraphEngine:
    return GraphEngine(store, EngineConfig())


@pytest.fixture()
def file_store(tmp_path) -> FileGraphStore:
    return FileGraphStore(tmp_path / "memory_graph.json")


@pytest.fixture()
def fruit_graph() -> KnowledgeGraph:
    return KnowledgeGraph(
        entities=[
            Entity(name="Apple", entity_type="Fruit", observations=["Red", "Sweet"]),
            Entity(name="Banana", entity_type="Fruit", observations=["Yellow", "Long"]),
            Entity(name="Car", entity_type="Vehicle", observations=["Fast", "Wheels"]),
        ],
        relationships=[
            Relationship(source="Apple", target="Banana", relationship_type="COMPLEMENTS"),
            Relationship(source="Car", target="Wheels", relationship_type="HAS_PART"),
        ],
    )


@pytest.fixture()
def tool_service(engine: GraphEngine) -> MemoryToolService:
    return MemoryToolService(engine)


@pytest.fixture()
def client(engine: GraphEngine, tool_service: MemoryToolService):
    @asynccontextmanager
    async def _no_lifespan(_: FastAPI):
        yield

    app = create_app(AppConfig())
    app.router.lifespan_context = _no_lifespan

    app.dependency_overrides[get_engine] = lambda: engine
    app.dependency_overrides[get_tool_service] = lambda: tool_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
