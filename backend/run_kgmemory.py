import json
import logging
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from kgmemory.graph.graph_schema import (  # noqa: E402
    Entity,
    Relationship,
    ObservationAddition,
    ObservationDeletion,
)

from backend.app.config import AppConfig  # noqa: E402
from backend.app.dependencies import get_engine  # noqa: E402


def main() -> None:
    config = AppConfig()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logger = logging.getLogger("kgmemory.run")
    start = time.perf_counter()
    engine = get_engine()

    def populate(label: str, session_id, person: str, role: str, employer: str) -> None:
        created = engine.create_entities(
            [
                Entity(name=person, entity_type="Person", observations=[]),
                Entity(name=role, entity_type="Occupation", observations=[]),
                Entity(name=employer, entity_type="Organization", observations=[]),
            ],
            session_id=session_id,
        )
        engine.create_relationships(
            [
                Relationship(source=person, target=role, relationship_type="works_as"),
                Relationship(source=person, target=employer, relationship_type="works_at"),
            ],
            session_id=session_id,
        )
        logger.info("[%s] created %s new entities", label, len(created))

    populate(
        "global",
        None,
        "Pavel",
        "Software Developer",
        "Placeholder Software Inc.",
    )
    populate("session", "123", "Banana", "Tree", "Banana Grove Inc.")

    added = engine.add_observations(
        [ObservationAddition(entity_name="Pavel", contents=["likes TypeScript"])]
    )
    logger.info("[global] added %s", [a.to_dict() for a in added])

    engine.delete_observations(
        [ObservationDeletion(entity_name="Pavel", observations=["likes TypeScript"])]
    )
    engine.delete_relationships(
        [
            Relationship(
                source="Pavel",
                target="Software Developer",
                relationship_type="works_as",
            )
        ]
    )

    for label, session_id in (("global", None), ("session", "123")):
        graph = engine.read_graph(session_id=session_id)
        logger.info("[%s] graph:\n%s", label, json.dumps(graph.to_dict(), indent=2))

    found = engine.search_nodes("pavel")
    logger.info(
        "search 'pavel': entities=%s relationships=%s",
        [e.name for e in found.entities],
        len(found.relationships),
    )
    logger.info("done in %.3fs", time.perf_counter() - start)


if __name__ == "__main__":
    main()
