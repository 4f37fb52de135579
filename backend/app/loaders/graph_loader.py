from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Optional
import json
import logging
import time

import pandas as pd

from kgmemory.graph.errors import InvalidRecordError
from kgmemory.graph.graph_engine import GraphEngine
from kgmemory.graph.graph_schema import Entity, Relationship

ENTITY_COLUMNS = {
    "name": ("name",),
    "entity_type": ("entityType", "entity_type"),
}
RELATIONSHIP_COLUMNS = {
    "source": ("from", "source"),
    "target": ("to", "target"),
    "relationship_type": ("relationshipType", "relationship_type"),
}


@dataclass(frozen=True)
class LoadReport:
    entities_created: int
    relationships_created: int


def read_table(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".parquet":
        return pd.read_parquet(path)
    if suffix == ".csv":
        return pd.read_csv(path, dtype=str, keep_default_na=False)
    raise InvalidRecordError(f"Unsupported table format: {path}")


def _resolve_columns(df: pd.DataFrame, spec: dict, path: Path) -> dict:
    resolved = {}
    for field_name, candidates in spec.items():
        column = next((c for c in candidates if c in df.columns), None)
        if column is None:
            raise InvalidRecordError(
                f"{path}: missing column {candidates[0]!r} (accepted: {', '.join(candidates)})"
            )
        resolved[field_name] = column
    return resolved


def _parse_observations(value: Any) -> List[str]:
    """
    Accepts a list/array, a JSON array string, a ';'-separated string,
    or an empty cell.
    """
    if value is None:
        return []
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        if text.startswith("["):
            try:
                parsed = json.loads(text)
            except json.JSONDecodeError:
                parsed = None
            if isinstance(parsed, list):
                return [str(v) for v in parsed]
        return [part.strip() for part in text.split(";") if part.strip()]
    if isinstance(value, float) and pd.isna(value):
        return []
    if isinstance(value, Iterable):
        return [str(v) for v in value]
    return [str(value)]


def entities_from_frame(df: pd.DataFrame, path: Path) -> List[Entity]:
    columns = _resolve_columns(df, ENTITY_COLUMNS, path)
    has_observations = "observations" in df.columns

    entities: List[Entity] = []
    for _, row in df.iterrows():
        entities.append(
            Entity(
                name=str(row[columns["name"]]),
                entity_type=str(row[columns["entity_type"]]),
                observations=(
                    _parse_observations(row["observations"]) if has_observations else []
                ),
            )
        )
    return entities


def relationships_from_frame(df: pd.DataFrame, path: Path) -> List[Relationship]:
    columns = _resolve_columns(df, RELATIONSHIP_COLUMNS, path)
    return [
        Relationship(
            source=str(row[columns["source"]]),
            target=str(row[columns["target"]]),
            relationship_type=str(row[columns["relationship_type"]]),
        )
        for _, row in df.iterrows()
    ]


def load_graph_from_tables(
    *,
    engine: GraphEngine,
    entities_path: Path,
    relationships_path: Optional[Path] = None,
    session_id: Optional[str] = None,
) -> LoadReport:
    """
    Import entities and relationships from CSV or Parquet tables.

    Rows go through the engine's create operations, so importing the
    same tables twice creates nothing the second time.
    """
    logger = logging.getLogger("kgmemory.load_graph")
    t0 = time.perf_counter()

    entities = entities_from_frame(read_table(entities_path), entities_path)
    created_entities = engine.create_entities(entities, session_id=session_id)

    created_relationships: List[Relationship] = []
    if relationships_path is not None:
        relationships = relationships_from_frame(
            read_table(relationships_path),
            relationships_path,
        )
        created_relationships = engine.create_relationships(
            relationships,
            session_id=session_id,
        )

    logger.info(
        "imported session=%s entities=%s/%s relationships=%s in %.3fs",
        session_id,
        len(created_entities),
        len(entities),
        len(created_relationships),
        time.perf_counter() - t0,
    )

    return LoadReport(
        entities_created=len(created_entities),
        relationships_created=len(created_relationships),
    )


def find_table(directory: Path, stem: str) -> Optional[Path]:
    for suffix in (".parquet", ".csv"):
        candidate = directory / f"{stem}{suffix}"
        if candidate.exists():
            return candidate
    return None


def load_seed_dir(
    *,
    engine: GraphEngine,
    seed_dir: Path,
    session_id: Optional[str] = None,
) -> Optional[LoadReport]:
    """
    Import ``entities`` (and optional ``relationships``) tables from a directory.

    Returns None when the directory holds no entities table.
    """
    entities_path = find_table(seed_dir, "entities")
    if entities_path is None:
        return None

    return load_graph_from_tables(
        engine=engine,
        entities_path=entities_path,
        relationships_path=find_table(seed_dir, "relationships"),
        session_id=session_id,
    )
