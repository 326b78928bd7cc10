"""Graph Validator — structural diagnostics and reference inlining.

Invariants:
    - find_missing_references / find_orphans return sorted, de-duplicated ids
    - A self-reference counts as "referenced" for orphan detection
    - find_nested_entities reports embedded records, never pure {"@id"} references
    - inline_references never loops: an id already on the current branch becomes
      a bare {"@id": id} stub
    - Inputs are never mutated; inlining returns fresh dicts/lists

Design Decisions:
    - Visited set is per branch, not global: the same entity may be
      inlined under several parents, only true cycles are cut
    - Unknown reference targets are left untouched (filter narrows, never fails)
    - Explicit work stacks, as in references.py: long reference chains never
      hit the recursion limit
"""

from typing import Any

from ldgraph.core.domain_types import (
    ID_KEY,
    Entity,
    Graph,
    NestedEntity,
    entity_id,
    is_pure_reference,
)
from ldgraph.core.errors import EntityNotFoundError, ErrorContext
from ldgraph.core.references import extract_references


def find_missing_references(graph: Graph) -> list[str]:
    """Referenced ids that have no entity in the graph."""
    return sorted(_all_references(graph) - _existing_ids(graph))


def find_orphans(graph: Graph) -> list[str]:
    """Existing entity ids that no entity references."""
    return sorted(_existing_ids(graph) - _all_references(graph))


def find_nested_entities(graph: Graph) -> list[NestedEntity]:
    """Depth-first list of records embedded inside entities."""
    found: list[NestedEntity] = []
    for entity in graph:
        parent_id = entity_id(entity)
        if parent_id is None:
            continue
        stack = _nested_children(entity, "")
        while stack:
            path, record = stack.pop()
            found.append(NestedEntity(parent_id, path, record, bool(record.get(ID_KEY))))
            stack.extend(_nested_children(record, path))
    return found


def inline_references(
    entities: Graph, root_id: str | None = None,
) -> Entity | list[Entity]:
    """Replace pure {"@id"} references with the referenced entity's data.

    With root_id, return only that entity (inlined); raise
    EntityNotFoundError if it is absent. Otherwise return every entity.
    """
    arena: dict[str, Entity] = {}
    for entity in entities:
        key = entity_id(entity)
        if key is not None:
            arena[key] = entity

    if root_id:
        root = next((e for e in entities if e.get(ID_KEY) == root_id), None)
        if root is None:
            raise EntityNotFoundError(
                root_id, ErrorContext(operation="inline_references"),
            )
        return _inline_value(root, arena, frozenset())

    return [_inline_value(entity, arena, frozenset()) for entity in entities]


# === Private helpers ==========================================================

def _existing_ids(graph: Graph) -> set[str]:
    return {key for key in map(entity_id, graph) if key is not None}


def _all_references(graph: Graph) -> set[str]:
    references: set[str] = set()
    for entity in graph:
        references |= extract_references(entity)
    return references


def _is_nested_record(value: Any) -> bool:
    return isinstance(value, dict) and not is_pure_reference(value)


def _nested_children(record: dict, base_path: str) -> list[tuple[str, dict]]:
    """Embedded records one level down, reversed for stack popping."""
    children: list[tuple[str, dict]] = []
    for key, value in record.items():
        if key.startswith("@"):
            continue
        path = f"{base_path}.{key}" if base_path else key

        if _is_nested_record(value):
            children.append((path, value))
        elif isinstance(value, list):
            children.extend(
                (f"{path}[{index}]", item)
                for index, item in enumerate(value)
                if _is_nested_record(item)
            )
    children.reverse()
    return children


def _inline_value(value: Any, arena: dict[str, Entity], visited: frozenset[str]) -> Any:
    """Inline with an explicit work stack; each item carries its branch's visited ids.

    Copies are allocated before their children are filled in, so every
    work item names the (container, slot) its result goes to.
    """
    holder: list[Any] = [None]
    stack: list[tuple[Any, frozenset[str], Any, Any]] = [(value, visited, holder, 0)]

    while stack:
        current, seen, parent, slot = stack.pop()

        if is_pure_reference(current):
            ref = current[ID_KEY]
            if ref in seen:
                parent[slot] = {ID_KEY: ref}
                continue
            target = arena.get(ref)
            if target is not None:
                stack.append((target, seen | {ref}, parent, slot))
                continue

        if isinstance(current, list):
            copy: Any = [None] * len(current)
            stack.extend((item, seen, copy, index) for index, item in enumerate(current))
        elif isinstance(current, dict):
            copy = dict.fromkeys(current)
            stack.extend((item, seen, copy, key) for key, item in current.items())
        else:
            copy = current
        parent[slot] = copy

    return holder[0]
