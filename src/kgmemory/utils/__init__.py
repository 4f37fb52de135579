"""
Utility functions for kgmemory.

This module contains low-level helpers used across the system.
No domain logic should live here.
"""

from kgmemory.utils.text import contains_ignore_case, hash_text, partition_token

__all__ = [
    "contains_ignore_case",
    "hash_text",
    "partition_token",
]
