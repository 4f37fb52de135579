DEFAULTS = {
    # Title reported by the HTTP API
    "APP_NAME": "kgmemory-backend",
    # Prefix prepended to every route
    "API_PREFIX": "",
    # Root log level for the runnable entry points
    "LOG_LEVEL": "INFO",
    # Graph persistence backend: "file" or "memory"
    "STORE_BACKEND": "file",
    # NDJSON file of the global partition; sessions get sibling files
    "GRAPH_MEMORY_FILE_PATH": "memory_graph.json",
    # Text encoding of graph files
    "FILE_ENCODING": "utf-8",
    # Serialize load-modify-save cycles per partition
    "SERIALIZE_WRITES": True,
    # Deduplicate repeated names/triples inside one create call
    "DEDUPE_WITHIN_BATCH": False,
    # Directory with entities/relationships tables imported at startup
    "SEED_DIR": "",
    # Partition receiving the startup seed (empty = global)
    "SEED_SESSION_ID": "",
}
