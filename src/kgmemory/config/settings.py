from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

# ---------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class StoreConfig:
    """
    Selects and parameterizes the graph persistence backend.

    The file backend keeps the global partition at ``memory_file_path``
    and derives one sibling file per named partition.
    """

    backend: Literal["file", "memory"] = "file"
    memory_file_path: str = "memory_graph.json"
    encoding: str = "utf-8"


# ---------------------------------------------------------------------
# Engine behavior
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class EngineConfig:
    """
    Controls how graph operations are applied.

    serialize_writes:
        Hold a per-partition lock around every load-modify-save cycle so
        concurrent writers on one partition cannot lose updates.
    dedupe_within_batch:
        Also deduplicate entities (by name) and relationships (by triple)
        against earlier items of the same create call, and observation
        contents against earlier contents of the same entry. Off by
        default, which appends a repeated new item once per occurrence.
    """

    serialize_writes: bool = True
    dedupe_within_batch: bool = False


# ---------------------------------------------------------------------
# Root configuration object
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class KgMemoryConfig:
    """
    Root configuration object for kgmemory.

    Constructed explicitly by the host and passed to the store factory
    and the engine; there is no global configuration.
    """

    store: StoreConfig = field(default_factory=StoreConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)
