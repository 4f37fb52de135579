def _create(client, entities, session_id=None):
    params = {"session_id": session_id} if session_id else {}
    return client.post("/graph/entities", params=params, json={"entities": entities})


def test_create_and_read_graph(client):
    response = _create(
        client,
        [{"name": "Pavel", "entityType": "Person", "observations": ["dev"]}],
    )
    assert response.status_code == 200
    assert response.json() == [
        {"name": "Pavel", "entityType": "Person", "observations": ["dev"]}
    ]

    rel = {"from": "Pavel", "to": "Acme", "relationshipType": "works_at"}
    response = client.post("/graph/relationships", json={"relationships": [rel]})
    assert response.json() == [rel]

    response = client.get("/graph/")
    assert response.status_code == 200
    assert response.json() == {
        "entities": [{"name": "Pavel", "entityType": "Person", "observations": ["dev"]}],
        "relationships": [rel],
    }


def test_duplicate_create_returns_empty_list(client):
    entity = {"name": "E", "entityType": "T", "observations": []}
    _create(client, [entity])

    assert _create(client, [entity]).json() == []


def test_add_observations_and_missing_entity(client):
    _create(client, [{"name": "E", "entityType": "T", "observations": ["obs1"]}])

    response = client.post(
        "/graph/observations",
        json={"observations": [{"entityName": "E", "contents": ["obs2", "obs1"]}]},
    )
    assert response.status_code == 200
    assert response.json() == [{"entityName": "E", "addedObservations": ["obs2"]}]

    response = client.post(
        "/graph/observations",
        json={"observations": [{"entityName": "Ghost", "contents": ["x"]}]},
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Entity with name Ghost not found"
    assert response.json()["entity_name"] == "Ghost"


def test_delete_routes(client):
    _create(
        client,
        [
            {"name": "A", "entityType": "T", "observations": ["x", "y"]},
            {"name": "B", "entityType": "T", "observations": []},
        ],
    )
    client.post(
        "/graph/relationships",
        json={"relationships": [{"from": "A", "to": "B", "relationshipType": "R"}]},
    )

    response = client.post(
        "/graph/observations/delete",
        json={"deletions": [{"entityName": "A", "observations": ["x"]}]},
    )
    assert response.json() == {"status": "ok"}

    response = client.post(
        "/graph/relationships/delete",
        json={"relationships": [{"from": "A", "to": "B", "relationshipType": "R"}]},
    )
    assert response.json() == {"status": "ok"}

    response = client.post("/graph/entities/delete", json={"entityNames": ["B"]})
    assert response.json() == {"status": "ok"}

    assert client.get("/graph/").json() == {
        "entities": [{"name": "A", "entityType": "T", "observations": ["y"]}],
        "relationships": [],
    }


def test_search_open_and_stats(client):
    _create(
        client,
        [
            {"name": "Apple", "entityType": "Fruit", "observations": ["Red"]},
            {"name": "Car", "entityType": "Vehicle", "observations": []},
        ],
    )
    client.post(
        "/graph/relationships",
        json={"relationships": [{"from": "Apple", "to": "Car", "relationshipType": "RIDES"}]},
    )

    searched = client.get("/graph/search", params={"query": "fruit"}).json()
    assert [e["name"] for e in searched["entities"]] == ["Apple"]
    assert len(searched["relationships"]) == 1

    opened = client.post("/graph/open", json={"names": ["Car", "Missing"]}).json()
    assert [e["name"] for e in opened["entities"]] == ["Car"]

    stats = client.get("/graph/stats").json()
    assert stats["entities"] == 2
    assert stats["relationships"] == 1
    assert stats["entity_types"] == {"Fruit": 1, "Vehicle": 1}
    assert stats["components"] == 1


def test_session_query_parameter_isolates_partitions(client):
    _create(client, [{"name": "S1", "entityType": "T", "observations": []}], session_id="session1")

    assert [e["name"] for e in client.get("/graph/", params={"session_id": "session1"}).json()["entities"]] == ["S1"]
    assert client.get("/graph/").json() == {"entities": [], "relationships": []}
    assert client.get("/graph/", params={"session_id": "session2"}).json()["entities"] == []


def test_request_shape_is_validated(client):
    response = client.post(
        "/graph/entities",
        json={"entities": [{"name": "A", "observations": "not-a-list"}]},
    )
    assert response.status_code == 422


def test_tool_routes(client):
    tools = client.get("/tools/").json()
    assert len(tools) == 9
    assert tools[0]["name"] == "memory_create_entities"

    instructions = client.get("/tools/instructions").json()["instructions"]
    assert "memory_read_graph" in instructions

    response = client.post(
        "/tools/memory_create_entities",
        json={
            "arguments": {"entities": [{"name": "A", "entityType": "T", "observations": []}]},
            "session_id": "tools-session",
        },
    )
    assert response.status_code == 200
    assert response.json()["is_error"] is False
    assert response.json()["output"].startswith("Created the following new entities:")

    graph = client.get("/graph/", params={"session_id": "tools-session"}).json()
    assert [e["name"] for e in graph["entities"]] == ["A"]

    response = client.post(
        "/tools/memory_add_observations",
        json={"arguments": {"observations": [{"entityName": "Nope", "contents": ["x"]}]}},
    )
    assert response.status_code == 200
    assert response.json() == {
        "output": "Error: Entity with name Nope not found",
        "is_error": True,
    }


def test_unknown_tool_is_404(client):
    response = client.post("/tools/memory_unknown", json={"arguments": {}})
    assert response.status_code == 404


def test_empty_session_query_parameter_reads_global_graph(client):
    _create(client, [{"name": "G", "entityType": "T", "observations": []}])

    response = client.get("/graph/", params={"session_id": ""})
    assert [e["name"] for e in response.json()["entities"]] == ["G"]
