"""Property Filter Engine — narrows which properties of a matching entity survive.

Invariants:
    - @id always survives and always comes first in the filtered entity
    - Rules evaluate in list order; the LAST matching include list wins
    - Excludes from every matching rule accumulate and always beat includes
    - An empty include list is still an include: only @id survives
    - Returns new dicts; the input entity is never mutated (values are shared)

Design Decisions:
    - By-id and by-type rules are lowered to selector rules ({"@id": x} / {"@type": t})
      so a single matcher handles every rule source (ADR: one evaluation path)
    - Strict equality in selectors: True never matches 1, dicts/lists match by identity
      and an absent property never matches, not even a None selector value
"""

from dataclasses import dataclass
from typing import Any, Sequence

from ldgraph.core.domain_types import ID_KEY, TYPE_KEY, WILDCARD, Entity, Graph, Selector

# Absent property; never equal to any selector value, JSON null included
_MISSING = object()


@dataclass(frozen=True)
class PropertyFilterRule:
    """Selector-based rule: "*" / {} match everything, else property → expected value."""
    selector: Selector = WILDCARD
    include: tuple[str, ...] | None = None
    exclude: tuple[str, ...] | None = None


@dataclass(frozen=True)
class PropertyFilterByIdRule:
    """Property rule applied to every entity whose @id is listed."""
    entity_ids: tuple[str, ...]
    include: tuple[str, ...] | None = None
    exclude: tuple[str, ...] | None = None


@dataclass(frozen=True)
class PropertyFilterByTypeRule:
    """Property rule applied to every entity carrying one of the listed types."""
    entity_types: tuple[str, ...]
    include: tuple[str, ...] | None = None
    exclude: tuple[str, ...] | None = None


# === Public API ===============================================================

def matches_selector(entity: Entity, selector: Selector) -> bool:
    """Check whether an entity satisfies every condition of a selector."""
    if selector == WILDCARD:
        return True
    if not isinstance(selector, dict):
        return False
    return all(
        _value_matches(entity.get(prop, _MISSING), expected)
        for prop, expected in selector.items()
    )


def filter_entity_properties(
    entity: Entity, rules: Sequence[PropertyFilterRule],
) -> Entity:
    """Apply every matching rule to one entity and return the reduced copy."""
    exclusions: set[str] = set()
    last_include: tuple[str, ...] | None = None

    for rule in rules:
        if not matches_selector(entity, rule.selector):
            continue
        if rule.include is not None:
            last_include = tuple(rule.include)
        if rule.exclude:
            exclusions.update(rule.exclude)

    if last_include is not None:
        kept = [prop for prop in last_include if prop in entity]
    else:
        kept = list(entity)

    filtered: Entity = {}
    if ID_KEY in entity:
        filtered[ID_KEY] = entity[ID_KEY]
    for prop in kept:
        if prop != ID_KEY and prop not in exclusions:
            filtered[prop] = entity[prop]
    return filtered


def filter_graph_properties(
    graph: Graph, rules: Sequence[PropertyFilterRule],
) -> list[Entity]:
    """Filter every entity of a graph. No reachability test."""
    return [filter_entity_properties(entity, rules) for entity in graph]


def rules_from_id_filters(
    rules: Sequence[PropertyFilterByIdRule],
) -> list[PropertyFilterRule]:
    """One {"@id": x} selector rule per listed id, in rule order."""
    return [
        PropertyFilterRule(
            selector={ID_KEY: entity_id}, include=rule.include, exclude=rule.exclude,
        )
        for rule in rules
        for entity_id in rule.entity_ids
    ]


def rules_from_type_filters(
    rules: Sequence[PropertyFilterByTypeRule],
) -> list[PropertyFilterRule]:
    """One {"@type": t} selector rule per listed type, in rule order."""
    return [
        PropertyFilterRule(
            selector={TYPE_KEY: entity_type}, include=rule.include, exclude=rule.exclude,
        )
        for rule in rules
        for entity_type in rule.entity_types
    ]


# === Private helpers ==========================================================

def _value_matches(actual: Any, expected: Any) -> bool:
    if actual is _MISSING:
        return False
    if isinstance(actual, list):
        return any(_strict_equals(item, expected) for item in actual)
    if _is_reference(expected) and _is_reference(actual):
        return actual[ID_KEY] == expected[ID_KEY]
    return _strict_equals(actual, expected)


def _is_reference(value: Any) -> bool:
    return isinstance(value, dict) and bool(value.get(ID_KEY))


def _strict_equals(left: Any, right: Any) -> bool:
    """Identity for containers, type-aware equality for scalars."""
    if isinstance(left, (dict, list)) or isinstance(right, (dict, list)):
        return left is right
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    return left == right
