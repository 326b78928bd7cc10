"""Root conftest — shared test configuration and graph fixtures.

Fixtures return fresh lists on every call, so tests may mutate freely.
"""

import os

import pytest

# Keep test output readable; never pick up a developer's .env limits
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("MAX_GRAPH_ENTITIES", "10000")


@pytest.fixture
def people_graph() -> list[dict]:
    """People, organizations, an event and an article, with a reference cycle."""
    return [
        {
            "@id": "person:danlynch",
            "@type": "Person",
            "name": "Dan Lynch",
            "affiliation": {"@id": "org:hyperweb"},
            "knows": ["person:jane", "person:john"],
            "worksFor": "org:hyperweb",
        },
        {
            "@id": "person:jane",
            "@type": "Person",
            "name": "Jane Doe",
            "knows": {"@id": "person:danlynch"},
        },
        {
            "@id": "person:john",
            "@type": ["Person", "Developer"],
            "name": "John Smith",
            "memberOf": [{"@id": "org:hyperweb"}, {"@id": "org:osmosis"}],
        },
        {
            "@id": "org:hyperweb",
            "@type": "Organization",
            "name": "HyperWeb",
            "member": [{"@id": "person:danlynch"}, {"@id": "person:john"}],
        },
        {
            "@id": "org:osmosis",
            "@type": "Organization",
            "name": "Osmosis",
            "url": "https://osmosis.zone",
        },
        {
            "@id": "event:cosmoverse-2024",
            "@type": "Event",
            "name": "Cosmoverse 2024",
            "organizer": {"@id": "org:osmosis"},
            "performer": ["person:danlynch", "person:jane"],
            "location": "Dubai, UAE",
        },
        {
            "@id": "article:web3-future",
            "@type": "Article",
            "headline": "The Future of Web3",
            "author": {"@id": "person:danlynch"},
            "mentions": [{"@id": "org:hyperweb"}, {"@id": "event:cosmoverse-2024"}],
        },
    ]


@pytest.fixture
def site_graph() -> list[dict]:
    """Small publishing site: one org, one person, one article."""
    return [
        {
            "@id": "org:hyperweb",
            "@type": "Organization",
            "name": "Hyperweb",
            "url": "https://hyperweb.io",
        },
        {
            "@id": "person:john",
            "@type": "Person",
            "name": "John Doe",
            "worksFor": {"@id": "org:hyperweb"},
        },
        {
            "@id": "article:1",
            "@type": "Article",
            "headline": "Test Article 1",
            "author": {"@id": "person:john"},
        },
    ]
