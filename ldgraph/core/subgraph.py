"""Subgraph Extractor — collects an entity and everything it transitively references.

Invariants:
    - Every reachable entity is visited exactly once; cycles terminate
    - Output order is discovery order (root first), not source-graph order
    - Unknown roots and dangling references are skipped silently, never an error
    - With property filters, an entity is filtered BEFORE its references are read:
      a filtered-out property cannot make further entities reachable
    - Multi-root extraction keeps the first root's view of a shared entity

Design Decisions:
    - Id-keyed arena built once per call; traversal state is a set of ids,
      never links between entity objects (ADR: no host-level reference cycles)
    - Pending ids kept in an insertion-ordered dict: FIFO pop with O(1) membership
"""

from collections import deque
from typing import Iterable, Sequence

from ldgraph.core.domain_types import ID_KEY, Entity, Graph, entity_id
from ldgraph.core.property_filters import PropertyFilterRule, filter_entity_properties
from ldgraph.core.references import ordered_references


def extract_subgraph(
    graph: Graph,
    root_id: str,
    property_filters: Sequence[PropertyFilterRule] | None = None,
) -> list[Entity]:
    """Return the root entity and every entity reachable from it."""
    arena = _build_arena(graph)
    result: dict[str, Entity] = {}
    visited: set[str] = set()
    pending: dict[str, None] = {root_id: None}

    while pending:
        current_id = next(iter(pending))
        del pending[current_id]
        if current_id in visited:
            continue
        visited.add(current_id)

        entity = arena.get(current_id)
        if entity is None:
            continue

        view = _apply_filters(entity, property_filters)
        result[current_id] = view
        for ref in ordered_references(view):
            if ref not in visited:
                pending.setdefault(ref, None)

    return list(result.values())


def extract_subgraphs(
    graph: Graph,
    root_ids: Iterable[str],
    property_filters: Sequence[PropertyFilterRule] | None = None,
) -> list[Entity]:
    """Union of per-root subgraphs, keyed by @id.

    When two roots reach the same entity, the first root's (possibly
    filtered) view is kept at its first position.
    """
    combined: dict[str, Entity] = {}
    for root_id in root_ids:
        for entity in extract_subgraph(graph, root_id, property_filters):
            combined.setdefault(entity[ID_KEY], entity)
    return list(combined.values())


def extract_subgraph_with_depth(
    graph: Graph,
    root_id: str,
    max_depth: int,
    property_filters: Sequence[PropertyFilterRule] | None = None,
) -> list[Entity]:
    """Like extract_subgraph, but stop following references past max_depth.

    The root sits at depth 0; max_depth=1 keeps direct references only.
    """
    if max_depth < 1:
        return []

    arena = _build_arena(graph)
    result: dict[str, Entity] = {}
    visited: set[str] = set()
    queue: deque[tuple[str, int]] = deque([(root_id, 0)])

    while queue:
        current_id, depth = queue.popleft()
        if current_id in visited or depth > max_depth:
            continue
        visited.add(current_id)

        entity = arena.get(current_id)
        if entity is None:
            continue

        view = _apply_filters(entity, property_filters)
        result[current_id] = view
        if depth < max_depth:
            for ref in ordered_references(view):
                if ref not in visited:
                    queue.append((ref, depth + 1))

    return list(result.values())


# === Private helpers ==========================================================

def _build_arena(graph: Graph) -> dict[str, Entity]:
    """Map @id → entity; the first occurrence of a duplicate id wins."""
    arena: dict[str, Entity] = {}
    for entity in graph:
        key = entity_id(entity)
        if key is not None and key not in arena:
            arena[key] = entity
    return arena


def _apply_filters(
    entity: Entity, property_filters: Sequence[PropertyFilterRule] | None,
) -> Entity:
    if property_filters is None:
        return entity
    return filter_entity_properties(entity, property_filters)
