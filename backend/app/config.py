from dataclasses import dataclass
from dynaconf import Dynaconf
from backend.app.constants import DEFAULTS

from kgmemory.config.settings import (
    StoreConfig,
    EngineConfig,
    KgMemoryConfig,
)

settings = Dynaconf(
    envvar_prefix="KGMEMORY",
    load_dotenv=True,
    settings_files=[],
)
for _key, _value in DEFAULTS.items():
    settings.setdefault(_key, _value)


def _optional_str(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@dataclass(frozen=True)
class AppConfig:
    # ---------------- App ----------------
    app_name: str = settings.get("APP_NAME", "kgmemory-backend")
    api_prefix: str = settings.get("API_PREFIX", "")
    log_level: str = settings.get("LOG_LEVEL", "INFO")

    # ---------------- Graph Memory Policy ----------------
    kgmemory: KgMemoryConfig = KgMemoryConfig(
        store=StoreConfig(
            backend=settings.get("STORE_BACKEND", "file"),
            memory_file_path=str(
                settings.get("GRAPH_MEMORY_FILE_PATH", "memory_graph.json")
            ),
            encoding=settings.get("FILE_ENCODING", "utf-8"),
        ),
        engine=EngineConfig(
            serialize_writes=settings.get("SERIALIZE_WRITES", True),
            dedupe_within_batch=settings.get("DEDUPE_WITHIN_BATCH", False),
        ),
    )

    # ---------------- Seeding ----------------
    seed_dir: str | None = _optional_str(settings.get("SEED_DIR", ""))
    seed_session_id: str | None = _optional_str(settings.get("SEED_SESSION_ID", ""))
