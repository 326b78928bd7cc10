"""Graph route tests — HTTP contract of /api/v1/graph and /api/v1/health.

Tests cover:
    - build: filters, property rules, populate, rendering options and fallbacks
    - analyze: missing references, orphans, nested records
    - subgraph: multi-root and depth-limited extraction
    - inline: whole graph, single root, unknown root → 404
    - Error envelope: validation errors (400), graph size guard (413)
"""

import json

import pytest

from ldgraph.config import Settings

GRAPH = [
    {"@id": "org:hyperweb", "@type": "Organization", "name": "Hyperweb", "url": "https://hyperweb.io"},
    {"@id": "person:john", "@type": "Person", "name": "John Doe", "worksFor": {"@id": "org:hyperweb"}},
    {"@id": "article:1", "@type": "Article", "headline": "Test Article 1", "author": {"@id": "person:john"}},
    {"@id": "note:orphan", "@type": "Note"},
]


# -- Health --------------------------------------------------------------------

async def test_health(client):
    resp = await client.get("/api/v1/health/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


# -- build ---------------------------------------------------------------------

async def test_build_without_filters(client):
    resp = await client.post("/api/v1/graph/build", json={"graph": GRAPH})
    assert resp.status_code == 200
    data = resp.json()
    assert data["entity_count"] == 4
    assert json.loads(data["document"]) == {"@context": "https://schema.org", "@graph": GRAPH}


async def test_build_with_subgraph_and_property_rules(client):
    resp = await client.post("/api/v1/graph/build", json={
        "graph": GRAPH,
        "filters": {
            "subgraph_roots": ["article:1"],
            "property_filters_by_types": [
                {"entity_types": ["Organization"], "include": ["name"]},
            ],
        },
        "options": {"pretty_print": False},
    })
    assert resp.status_code == 200
    data = resp.json()
    assert [e["@id"] for e in data["graph"]] == ["article:1", "person:john", "org:hyperweb"]
    assert data["graph"][2] == {"@id": "org:hyperweb", "name": "Hyperweb"}
    assert "\n" not in data["document"]


async def test_build_with_entity_filters_and_additions(client):
    resp = await client.post("/api/v1/graph/build", json={
        "graph": GRAPH,
        "filters": {"exclude_types": ["Note"], "max_entities": 1},
        "additional_entities": [{"@id": "website:1", "@type": "WebSite"}],
    })
    assert [e["@id"] for e in resp.json()["graph"]] == ["org:hyperweb", "website:1"]


async def test_build_with_populate(client):
    resp = await client.post("/api/v1/graph/build", json={
        "graph": GRAPH,
        "filters": {"include_ids": ["org:hyperweb"]},
        "populate": {
            "org:hyperweb": [{"property": "member", "entities": [{"@id": "person:john"}]}],
        },
    })
    assert resp.json()["graph"][0]["member"] == [{"@id": "person:john"}]


async def test_build_script_tag_and_context(client):
    resp = await client.post("/api/v1/graph/build", json={
        "graph": GRAPH[:1],
        "options": {
            "with_script_tag": True, "script_id": "ld",
            "context_url": "https://example.org", "pretty_print": False,
        },
    })
    document = resp.json()["document"]
    assert document.startswith('<script id="ld" type="application/ld+json">{"@context":"https://example.org"')


async def test_build_uses_settings_defaults(client, settings):
    settings.pretty_print = False
    settings.default_context_url = "https://ctx.example"
    resp = await client.post("/api/v1/graph/build", json={"graph": GRAPH[:1]})
    assert resp.json()["document"].startswith('{"@context":"https://ctx.example"')


async def test_build_rejects_zero_max_entities(client):
    resp = await client.post("/api/v1/graph/build", json={
        "graph": GRAPH, "filters": {"max_entities": 0},
    })
    assert resp.status_code == 400
    error = resp.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert any("max_entities" in d["field"] for d in error["details"])


async def test_build_rejects_missing_graph(client):
    resp = await client.post("/api/v1/graph/build", json={"filters": {}})
    assert resp.status_code == 400


# -- analyze -------------------------------------------------------------------

async def test_analyze_reports_structure(client):
    graph = [
        *GRAPH,
        {"@id": "event:1", "location": {"name": "Venue"}, "organizer": "org:missing"},
    ]
    resp = await client.post("/api/v1/graph/analyze", json={"graph": graph})
    assert resp.status_code == 200
    report = resp.json()
    assert report["entity_count"] == 5
    assert report["missing_references"] == ["org:missing"]
    assert report["orphans"] == ["article:1", "event:1", "note:orphan"]
    assert report["nested_entities"] == [{
        "parent_id": "event:1", "property": "location",
        "nested_entity": {"name": "Venue"}, "has_id": False,
    }]


# -- subgraph ------------------------------------------------------------------

async def test_subgraph_multiple_roots(client):
    resp = await client.post("/api/v1/graph/subgraph", json={
        "graph": GRAPH, "root_ids": ["note:orphan", "person:john"],
    })
    data = resp.json()
    assert [e["@id"] for e in data["graph"]] == ["note:orphan", "person:john", "org:hyperweb"]
    assert data["entity_count"] == 3


async def test_subgraph_with_depth_and_rules(client):
    resp = await client.post("/api/v1/graph/subgraph", json={
        "graph": GRAPH,
        "root_ids": ["article:1"],
        "max_depth": 1,
        "property_filters": [{"selector": {"@type": "Person"}, "include": ["name"]}],
    })
    assert resp.json()["graph"] == [
        GRAPH[2],
        {"@id": "person:john", "name": "John Doe"},
    ]


async def test_subgraph_depth_requires_single_root(client):
    resp = await client.post("/api/v1/graph/subgraph", json={
        "graph": GRAPH, "root_ids": ["article:1", "person:john"], "max_depth": 1,
    })
    assert resp.status_code == 400


async def test_subgraph_unknown_root_is_empty(client):
    resp = await client.post("/api/v1/graph/subgraph", json={
        "graph": GRAPH, "root_ids": ["person:nobody"],
    })
    assert resp.status_code == 200
    assert resp.json()["graph"] == []


# -- inline --------------------------------------------------------------------

async def test_inline_single_root(client):
    resp = await client.post("/api/v1/graph/inline", json={
        "graph": GRAPH, "root_id": "article:1",
    })
    result = resp.json()["result"]
    assert result["author"]["name"] == "John Doe"
    assert result["author"]["worksFor"]["url"] == "https://hyperweb.io"


async def test_inline_whole_graph(client):
    resp = await client.post("/api/v1/graph/inline", json={"graph": GRAPH})
    result = resp.json()["result"]
    assert len(result) == 4
    assert result[1]["worksFor"]["name"] == "Hyperweb"


async def test_inline_unknown_root_returns_404(client):
    resp = await client.post("/api/v1/graph/inline", json={
        "graph": GRAPH, "root_id": "person:nobody",
    })
    assert resp.status_code == 404
    error = resp.json()["error"]
    assert error["code"] == "ENTITY_NOT_FOUND"
    assert error["category"] == "resource_not_found"
    assert error["context"]["entity_id"] == "person:nobody"


# -- Size guard ----------------------------------------------------------------

@pytest.mark.parametrize("path", ["build", "analyze", "subgraph", "inline"])
async def test_graph_too_large(client, settings, path):
    settings.max_graph_entities = 2
    body = {"graph": GRAPH}
    if path == "subgraph":
        body["root_ids"] = ["article:1"]
    resp = await client.post(f"/api/v1/graph/{path}", json=body)
    assert resp.status_code == 413
    error = resp.json()["error"]
    assert error["code"] == "GRAPH_TOO_LARGE"
    assert error["context"]["operation"] == path


def test_settings_reject_zero_limit():
    with pytest.raises(ValueError):
        Settings(max_graph_entities=0)
