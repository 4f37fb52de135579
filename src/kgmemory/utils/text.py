from __future__ import annotations

import re
import hashlib

_SAFE_TOKEN = re.compile(r"[A-Za-z0-9._-]+")


def contains_ignore_case(text: str, query: str) -> bool:
    """
    Case-insensitive substring test.

    Used by node search on names, types and observations.
    """
    return query.lower() in text.lower()


def hash_text(text: str) -> str:
    """
    Stable hash of the exact text (no normalization).
    """
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def partition_token(session_id: str) -> str:
    """
    Filesystem-safe token for a partition key.

    Plain keys are kept as-is so files stay recognizable. Anything else
    is hashed, and the "~" prefix keeps hashed tokens apart from plain ones.
    """
    if _SAFE_TOKEN.fullmatch(session_id) and session_id not in {".", ".."}:
        return session_id
    return "~" + hash_text(session_id)[:32]
