"""Graph Service — translates API requests into core calls.

Invariants:
    - Request schemas are converted to frozen core values before any processing
    - Graph size is checked against settings.max_graph_entities first
    - Rendering options left unset by the request come from settings
    - Core errors propagate unchanged; the API layer maps them to responses

Design Decisions:
    - Translation lives here, not in schemas/ or routes: schemas stay pure
      contracts, routes stay thin (ADR: impureim sandwich)
"""

import logging

from ldgraph.config import Settings
from ldgraph.core.config_model import (
    FilterOptions,
    JsonLdConfig,
    PopulateProperty,
)
from ldgraph.core.domain_types import Entity
from ldgraph.core.errors import ErrorContext, GraphTooLargeError
from ldgraph.core.graph_validation import (
    find_missing_references,
    find_nested_entities,
    find_orphans,
    inline_references,
)
from ldgraph.core.pipeline import BuildOptions
from ldgraph.core.property_filters import (
    PropertyFilterByIdRule,
    PropertyFilterByTypeRule,
    PropertyFilterRule,
)
from ldgraph.core.subgraph import extract_subgraph_with_depth, extract_subgraphs
from ldgraph.schemas.graph import (
    BuildOptionsSchema,
    BuildRequest,
    BuildResponse,
    FilterOptionsSchema,
    GraphPayload,
    GraphReport,
    InlineRequest,
    InlineResponse,
    NestedEntitySchema,
    PropertyFilterRuleSchema,
    SubgraphRequest,
    SubgraphResponse,
)
from ldgraph.services.graph_builder import JsonLdBuilder

logger = logging.getLogger(__name__)


# === Public API ===============================================================

def build_document(request: BuildRequest, settings: Settings) -> BuildResponse:
    """Run the full pipeline for a request and render the document."""
    check_graph_size(request.graph, settings, "build")
    builder = JsonLdBuilder(config_from_request(request))
    graph = builder.get_current_graph()
    document = builder.build(build_options_from_schema(request.options, settings))
    logger.info(
        "Built document with %d entities", len(graph),
        extra={"operation": "build", "entity_count": len(graph)},
    )
    return BuildResponse(graph=graph, document=document, entity_count=len(graph))


def analyze_graph(payload: GraphPayload, settings: Settings) -> GraphReport:
    """Missing references, orphans and nested records for one graph."""
    check_graph_size(payload.graph, settings, "analyze")
    nested = [
        NestedEntitySchema(
            parent_id=item.parent_id, property=item.property,
            nested_entity=item.nested_entity, has_id=item.has_id,
        )
        for item in find_nested_entities(payload.graph)
    ]
    return GraphReport(
        entity_count=len(payload.graph),
        missing_references=find_missing_references(payload.graph),
        orphans=find_orphans(payload.graph),
        nested_entities=nested,
    )


def extract_request_subgraph(
    request: SubgraphRequest, settings: Settings,
) -> SubgraphResponse:
    check_graph_size(request.graph, settings, "subgraph")
    rules = _rules_from_schema(request.property_filters)
    if request.max_depth is not None:
        graph = extract_subgraph_with_depth(
            request.graph, request.root_ids[0], request.max_depth, rules,
        )
    else:
        graph = extract_subgraphs(request.graph, request.root_ids, rules)
    return SubgraphResponse(graph=graph, entity_count=len(graph))


def inline_graph(request: InlineRequest, settings: Settings) -> InlineResponse:
    check_graph_size(request.graph, settings, "inline")
    return InlineResponse(result=inline_references(request.graph, request.root_id))


# === Translation ==============================================================

def config_from_request(request: BuildRequest) -> JsonLdConfig:
    """Convert a BuildRequest into a frozen JsonLdConfig."""
    populate = None
    if request.populate:
        populate = {
            entity_id: tuple(
                PopulateProperty(property=rule.property, entities=tuple(rule.entities))
                for rule in rules
            )
            for entity_id, rules in request.populate.items()
        }
    return JsonLdConfig(
        base_graph=request.graph,
        filters=filters_from_schema(request.filters),
        additional_entities=_optional_tuple(request.additional_entities),
        populate_config=populate,
    )


def filters_from_schema(schema: FilterOptionsSchema | None) -> FilterOptions | None:
    if schema is None:
        return None
    by_ids = None
    if schema.property_filters_by_ids is not None:
        by_ids = tuple(
            PropertyFilterByIdRule(
                entity_ids=tuple(rule.entity_ids),
                include=_optional_tuple(rule.include),
                exclude=_optional_tuple(rule.exclude),
            )
            for rule in schema.property_filters_by_ids
        )
    by_types = None
    if schema.property_filters_by_types is not None:
        by_types = tuple(
            PropertyFilterByTypeRule(
                entity_types=tuple(rule.entity_types),
                include=_optional_tuple(rule.include),
                exclude=_optional_tuple(rule.exclude),
            )
            for rule in schema.property_filters_by_types
        )
    generic = _rules_from_schema(schema.property_filters)
    return FilterOptions(
        include_types=_optional_tuple(schema.include_types),
        exclude_types=_optional_tuple(schema.exclude_types),
        include_ids=_optional_tuple(schema.include_ids),
        exclude_ids=_optional_tuple(schema.exclude_ids),
        required_properties=_optional_tuple(schema.required_properties),
        exclude_entities_with_properties=_optional_tuple(
            schema.exclude_entities_with_properties,
        ),
        max_entities=schema.max_entities,
        subgraph_roots=_optional_tuple(schema.subgraph_roots),
        property_filters=tuple(generic) if generic is not None else None,
        property_filters_by_ids=by_ids,
        property_filters_by_types=by_types,
    )


def build_options_from_schema(
    schema: BuildOptionsSchema, settings: Settings,
) -> BuildOptions:
    return BuildOptions(
        pretty_print=(
            schema.pretty_print if schema.pretty_print is not None
            else settings.pretty_print
        ),
        context_url=schema.context_url or settings.default_context_url,
        with_script_tag=schema.with_script_tag,
        script_id=schema.script_id,
    )


def check_graph_size(graph: list[Entity], settings: Settings, operation: str) -> None:
    if len(graph) > settings.max_graph_entities:
        raise GraphTooLargeError(
            len(graph), settings.max_graph_entities,
            ErrorContext(operation=operation),
        )


# === Private helpers ==========================================================

def _rules_from_schema(
    rules: list[PropertyFilterRuleSchema] | None,
) -> list[PropertyFilterRule] | None:
    if rules is None:
        return None
    return [
        PropertyFilterRule(
            selector=rule.selector,
            include=_optional_tuple(rule.include),
            exclude=_optional_tuple(rule.exclude),
        )
        for rule in rules
    ]


def _optional_tuple(items: list | None) -> tuple | None:
    return tuple(items) if items is not None else None
