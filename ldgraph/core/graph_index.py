"""Graph Index — lookups over a flat entity list by identifier, type or reference.

Invariants:
    - All lookups are linear scans; no persistent index survives a call
    - Results keep graph order; multi-id lookups go through a transient set
    - Entities without @id never match an id lookup

Design Decisions:
    - No up-front index: graphs are small documents and change per request,
      so building an index would cost more than it saves (ADR: per-call arena only)
"""

from typing import Iterable, Sequence

from ldgraph.core.domain_types import ID_KEY, TYPE_KEY, Entity, Graph
from ldgraph.core.property_filters import PropertyFilterRule, filter_entity_properties
from ldgraph.core.references import extract_references


def find_entity(graph: Graph, entity_id: str) -> Entity | None:
    """Return the first entity whose @id equals entity_id."""
    for entity in graph:
        if entity.get(ID_KEY) == entity_id:
            return entity
    return None


def find_entities(graph: Graph, ids: Iterable[str]) -> list[Entity]:
    """Return entities whose @id is in ids, in graph order."""
    wanted = set(ids)
    return [entity for entity in graph if entity.get(ID_KEY) in wanted]


def find_entities_by_type(graph: Graph, entity_type: str) -> list[Entity]:
    """Return entities classified as entity_type (scalar or list @type)."""
    return [entity for entity in graph if entity_has_type(entity, entity_type)]


def get_entity_types(entity: Entity) -> list[str]:
    """Normalize @type to a list. Missing or empty @type → []."""
    value = entity.get(TYPE_KEY)
    if not value:
        return []
    if isinstance(value, list):
        return list(value)
    return [value]


def entity_has_type(entity: Entity, entity_type: str) -> bool:
    return entity_type in get_entity_types(entity)


def entity_has_any_type(entity: Entity, types: Iterable[str]) -> bool:
    return any(entity_has_type(entity, t) for t in types)


def find_referencing_entities(
    graph: Graph,
    target_id: str,
    property_filters: Sequence[PropertyFilterRule] | None = None,
) -> list[Entity]:
    """Return the entities that reference target_id.

    With property_filters, each entity is filtered first and only its
    surviving properties count; the filtered views are returned.
    A self-reference counts.
    """
    referencing = []
    for entity in graph:
        view = (
            filter_entity_properties(entity, property_filters)
            if property_filters is not None else entity
        )
        if target_id in extract_references(view):
            referencing.append(view)
    return referencing
