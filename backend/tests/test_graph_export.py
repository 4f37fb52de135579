from kgmemory.graph.graph_export import graph_stats, to_networkx
from kgmemory.graph.graph_schema import Entity, KnowledgeGraph, Relationship


def test_stats_on_fruit_graph(fruit_graph):
    stats = graph_stats(fruit_graph)

    assert stats.entities == 3
    assert stats.relationships == 2
    assert stats.observations == 6
    assert stats.entity_types == {"Fruit": 2, "Vehicle": 1}
    # Car -> Wheels points at an unstored name.
    assert stats.dangling_relationships == 1
    # {Apple, Banana} and {Car, Wheels}
    assert stats.components == 2


def test_stats_on_empty_graph():
    stats = graph_stats(KnowledgeGraph.empty())

    assert stats.to_dict() == {
        "entities": 0,
        "relationships": 0,
        "observations": 0,
        "entity_types": {},
        "dangling_relationships": 0,
        "components": 0,
    }


def test_networkx_view_keeps_parallel_relationship_types():
    graph = KnowledgeGraph(
        entities=[
            Entity(name="A", entity_type="T", observations=["x"]),
            Entity(name="B", entity_type="T"),
        ],
        relationships=[
            Relationship(source="A", target="B", relationship_type="KNOWS"),
            Relationship(source="A", target="B", relationship_type="LIKES"),
        ],
    )

    view = to_networkx(graph)

    assert view.number_of_nodes() == 2
    assert view.number_of_edges() == 2
    assert set(view["A"]["B"]) == {"KNOWS", "LIKES"}
    assert view.nodes["A"]["entity_type"] == "T"
    assert view.nodes["A"]["observations"] == ["x"]
