"""Graph Routes — build, analyze, extract and inline linked-data graphs.

Invariants:
    - Every endpoint is a POST carrying the graph in the body (graphs are not stored)
    - Handlers are thin: validate via schemas, delegate to graph_service
    - Engine errors surface through the global LdGraphError handler

Design Decisions:
    - Settings injected with Depends(get_settings) so tests can override them
"""

import logging

from fastapi import APIRouter, Depends

from ldgraph.config import Settings, get_settings
from ldgraph.schemas.graph import (
    BuildRequest,
    BuildResponse,
    GraphPayload,
    GraphReport,
    InlineRequest,
    InlineResponse,
    SubgraphRequest,
    SubgraphResponse,
)
from ldgraph.services import graph_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/graph", tags=["graph"])


@router.post("/build", response_model=BuildResponse)
async def build_graph(
    request: BuildRequest, settings: Settings = Depends(get_settings),
):
    """Run the full filter pipeline and render the JSON-LD document."""
    _log_request("build", request.graph)
    return graph_service.build_document(request, settings)


@router.post("/analyze", response_model=GraphReport)
async def analyze_graph(
    payload: GraphPayload, settings: Settings = Depends(get_settings),
):
    """Report missing references, orphans and nested records."""
    _log_request("analyze", payload.graph)
    return graph_service.analyze_graph(payload, settings)


@router.post("/subgraph", response_model=SubgraphResponse)
async def extract_subgraph(
    request: SubgraphRequest, settings: Settings = Depends(get_settings),
):
    """Extract what the given roots reach, optionally depth-limited."""
    _log_request("subgraph", request.graph, root_count=len(request.root_ids))
    return graph_service.extract_request_subgraph(request, settings)


@router.post("/inline", response_model=InlineResponse)
async def inline_graph(
    request: InlineRequest, settings: Settings = Depends(get_settings),
):
    """Replace @id references with the referenced entities' data."""
    _log_request("inline", request.graph)
    return graph_service.inline_graph(request, settings)


def _log_request(operation: str, graph: list, **extra: int) -> None:
    logger.debug(
        "%s request with %d entities", operation, len(graph),
        extra={"operation": operation, "entity_count": len(graph), **extra},
    )
