from functools import lru_cache
import logging
from pathlib import Path
import time

from kgmemory.graph.graph_engine import GraphEngine
from kgmemory.graph.graph_store import GraphStore, create_store

from backend.app.config import AppConfig
from backend.app.loaders.graph_loader import load_seed_dir
from backend.app.services.memory_tools import MemoryToolService


@lru_cache
def get_config() -> AppConfig:
    return AppConfig()


@lru_cache
def get_store() -> GraphStore:
    config = get_config()
    store = create_store(config.kgmemory.store)
    logging.getLogger("kgmemory.startup").info(
        "[startup] graph store backend=%s path=%s",
        config.kgmemory.store.backend,
        config.kgmemory.store.memory_file_path,
    )
    return store


@lru_cache
def get_engine() -> GraphEngine:
    config = get_config()
    return GraphEngine(get_store(), config.kgmemory.engine)


@lru_cache
def get_tool_service() -> MemoryToolService:
    return MemoryToolService(get_engine())


def seed_graph(engine: GraphEngine, config: AppConfig) -> None:
    """
    Import the configured seed tables, if any.

    Creation is idempotent, so re-seeding on every start is harmless.
    """
    logger = logging.getLogger("kgmemory.startup")
    if not config.seed_dir:
        return

    seed_dir = Path(config.seed_dir)
    if not seed_dir.is_dir():
        logger.warning("[startup] seed dir %s does not exist; skipping", seed_dir)
        return

    t0 = time.perf_counter()
    report = load_seed_dir(
        engine=engine,
        seed_dir=seed_dir,
        session_id=config.seed_session_id,
    )
    if report is None:
        logger.warning("[startup] no entities table in %s; skipping", seed_dir)
        return

    logger.info(
        "[startup] seeded entities=%s relationships=%s in %.3fs",
        report.entities_created,
        report.relationships_created,
        time.perf_counter() - t0,
    )
