"""
Configuration layer for kgmemory.

Configuration contracts for graph persistence and engine behavior.

Configuration in kgmemory is:
- Explicit (passed, not global)
- Typed (frozen dataclasses)
"""

from kgmemory.config.settings import (
    StoreConfig,
    EngineConfig,
    KgMemoryConfig,
)

__all__ = [
    "StoreConfig",
    "EngineConfig",
    "KgMemoryConfig",
]
