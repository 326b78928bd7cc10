"""Domain Types — aliases and small value types shared across the graph core.

Invariants:
    - An Entity is a plain dict; "@id" is its identity, "@type" its classification
    - Entities without a non-empty "@id" are inert: never indexed, never a reference target
    - All value types here are frozen (hashable where their fields allow it)

Design Decisions:
    - Recursive JsonValue alias over an open Any map: keeps reference scanning and
      property filtering exhaustive over the six JSON shapes
    - Plain dicts over wrapper classes: graphs arrive as parsed JSON and leave as JSON
      (ADR: zero conversion at the boundary)
"""

from dataclasses import dataclass
from typing import Any, Callable, Sequence, TypeAlias, Union


# ─── Reserved Keys ───────────────────────────────────────────────

ID_KEY = "@id"
TYPE_KEY = "@type"

# Wildcard property-filter selector
WILDCARD = "*"


# ─── Value Aliases ───────────────────────────────────────────────

JsonValue: TypeAlias = Union[
    None, bool, int, float, str, list["JsonValue"], dict[str, "JsonValue"],
]
Entity: TypeAlias = dict[str, JsonValue]
Graph: TypeAlias = Sequence[Entity]

EntityPredicate: TypeAlias = Callable[[Entity], bool]
PipeFunction: TypeAlias = Callable[[list[Entity]], list[Entity]]
Selector: TypeAlias = Union[str, dict[str, Any]]


def entity_id(entity: Entity) -> str | None:
    """Return the entity's identifier, or None when it has no usable @id."""
    value = entity.get(ID_KEY)
    if isinstance(value, str) and value:
        return value
    return None


def is_pure_reference(value: Any) -> bool:
    """True for a dict that holds nothing but a non-empty @id."""
    return (
        isinstance(value, dict)
        and len(value) == 1
        and bool(value.get(ID_KEY))
    )


# ─── Value Types ─────────────────────────────────────────────────

@dataclass(frozen=True)
class NestedEntity:
    """A record embedded inside an entity instead of being referenced by @id."""
    parent_id: str
    property: str       # dotted/bracketed path, e.g. "location.geo" or "knows[1]"
    nested_entity: dict[str, Any]
    has_id: bool
