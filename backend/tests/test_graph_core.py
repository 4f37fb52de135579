import pytest

from kgmemory.config.settings import EngineConfig
from kgmemory.graph.errors import EntityNotFoundError, InvalidRecordError
from kgmemory.graph.graph_mutator import GraphMutator
from kgmemory.graph.graph_query import GraphQueryEngine
from kgmemory.graph.graph_schema import (
    Entity,
    KnowledgeGraph,
    ObservationAddition,
    Relationship,
)


def _names(graph: KnowledgeGraph) -> list[str]:
    return [e.name for e in graph.entities]


def test_entity_and_relationship_wire_names():
    entity = Entity(name="E1", entity_type="T1", observations=["o"])
    rel = Relationship(source="E1", target="E2", relationship_type="R1")

    assert entity.to_dict() == {"name": "E1", "entityType": "T1", "observations": ["o"]}
    assert rel.to_dict() == {"from": "E1", "to": "E2", "relationshipType": "R1"}
    assert Entity.from_dict(entity.to_dict()) == entity
    assert Relationship.from_dict(rel.to_dict()) == rel


def test_from_dict_rejects_malformed_records():
    with pytest.raises(InvalidRecordError):
        Entity.from_dict({"name": "E1", "observations": []})

    with pytest.raises(InvalidRecordError):
        Entity.from_dict({"name": "E1", "entityType": "T", "observations": "oops"})

    with pytest.raises(InvalidRecordError):
        Relationship.from_dict({"from": "A", "to": 3, "relationshipType": "R"})


def test_relationship_identity_is_the_triple():
    a = Relationship(source="A", target="B", relationship_type="R")
    b = Relationship(source="A", target="B", relationship_type="R")

    assert a == b
    assert hash(a) == hash(b)
    assert a.key == ("A", "B", "R")
    assert a != Relationship(source="B", target="A", relationship_type="R")


def test_clone_does_not_share_observation_lists():
    graph = KnowledgeGraph(
        entities=[Entity(name="E1", entity_type="T", observations=["a"])],
    )
    copy = graph.clone()
    copy.entities[0].observations.append("b")

    assert graph.entities[0].observations == ["a"]
    assert copy == KnowledgeGraph(
        entities=[Entity(name="E1", entity_type="T", observations=["a", "b"])],
    )


def test_mutator_appends_created_entities_in_input_order():
    graph = KnowledgeGraph(entities=[Entity(name="B", entity_type="T")])
    created = GraphMutator().create_entities(
        graph,
        [
            Entity(name="C", entity_type="T"),
            Entity(name="B", entity_type="T"),
            Entity(name="A", entity_type="T"),
        ],
    )

    assert [e.name for e in created] == ["C", "A"]
    assert _names(graph) == ["B", "C", "A"]


def test_mutator_copies_created_entities():
    source = Entity(name="A", entity_type="T", observations=["x"])
    graph = KnowledgeGraph.empty()
    GraphMutator().create_entities(graph, [source])

    source.observations.append("y")
    assert graph.entities[0].observations == ["x"]


def test_add_observations_applies_earlier_entries_before_failing():
    graph = KnowledgeGraph(entities=[Entity(name="A", entity_type="T")])

    with pytest.raises(EntityNotFoundError) as info:
        GraphMutator().add_observations(
            graph,
            [
                ObservationAddition(entity_name="A", contents=["first"]),
                ObservationAddition(entity_name="Missing", contents=["second"]),
            ],
        )

    assert info.value.entity_name == "Missing"
    assert str(info.value) == "Entity with name Missing not found"
    # In-memory state is not rolled back; the engine simply never saves it.
    assert graph.entities[0].observations == ["first"]


def test_add_observations_keeps_repeats_within_one_entry_by_default():
    graph = KnowledgeGraph(entities=[Entity(name="A", entity_type="T", observations=["y"])])
    results = GraphMutator().add_observations(
        graph,
        [ObservationAddition(entity_name="A", contents=["x", "x", "y"])],
    )

    assert results[0].added_observations == ["x", "x"]
    assert graph.entities[0].observations == ["y", "x", "x"]


def test_add_observations_collapses_repeats_when_configured():
    graph = KnowledgeGraph(entities=[Entity(name="A", entity_type="T", observations=["y"])])
    mutator = GraphMutator(EngineConfig(dedupe_within_batch=True))
    results = mutator.add_observations(
        graph,
        [ObservationAddition(entity_name="A", contents=["x", "x", "y"])],
    )

    assert results[0].added_observations == ["x"]
    assert graph.entities[0].observations == ["y", "x"]


def test_observation_dedup_is_case_sensitive():
    graph = KnowledgeGraph(
        entities=[Entity(name="A", entity_type="T", observations=["Likes tea"])]
    )
    results = GraphMutator().add_observations(
        graph,
        [ObservationAddition(entity_name="A", contents=["likes tea"])],
    )

    assert results[0].added_observations == ["likes tea"]


def test_mutator_batch_dedupe_flag():
    batch = [Entity(name="N", entity_type="T1"), Entity(name="N", entity_type="T2")]

    graph = KnowledgeGraph.empty()
    GraphMutator(EngineConfig(dedupe_within_batch=False)).create_entities(graph, batch)
    assert [(e.name, e.entity_type) for e in graph.entities] == [("N", "T1"), ("N", "T2")]

    graph = KnowledgeGraph.empty()
    GraphMutator(EngineConfig(dedupe_within_batch=True)).create_entities(graph, batch)
    assert [(e.name, e.entity_type) for e in graph.entities] == [("N", "T1")]


def test_subgraph_includes_edges_touching_either_side(fruit_graph):
    result = GraphQueryEngine().open(fruit_graph, ["Banana"])

    assert _names(result) == ["Banana"]
    assert result.relationships == [
        Relationship(source="Apple", target="Banana", relationship_type="COMPLEMENTS")
    ]


def test_search_matches_name_type_and_observations(fruit_graph):
    query = GraphQueryEngine()

    assert _names(query.search(fruit_graph, "APPLE")) == ["Apple"]
    assert _names(query.search(fruit_graph, "fruit")) == ["Apple", "Banana"]
    assert _names(query.search(fruit_graph, "ello")) == ["Banana"]

    by_observation = query.search(fruit_graph, "wheels")
    assert _names(by_observation) == ["Car"]
    # Car -> Wheels is kept although "Wheels" is not a stored entity.
    assert [r.target for r in by_observation.relationships] == ["Wheels"]


def test_empty_query_matches_everything(fruit_graph):
    result = GraphQueryEngine().search(fruit_graph, "")

    assert _names(result) == ["Apple", "Banana", "Car"]
    assert len(result.relationships) == 2
