"""Reference Resolver — collects the identifiers one entity points at.

Invariants:
    - Pure: reads one entity, returns a fresh set, never mutates the input
    - The scanned entity's own top-level @id/@type are never treated as references
    - Nested dicts contribute their @id AND are scanned recursively
    - Strings count only if they look like a compact URI: "scheme:suffix", no
      whitespace, not starting with "http"

Design Decisions:
    - Heuristic reproduced as-is: colon-bearing prose without spaces ("note:hello")
      matches; stricter URI validation would change which entities are reachable
    - Explicit stack instead of recursion: deep JSON never hits the recursion limit
    - ordered_references keeps scan order so traversal output is reproducible
"""

import re

from ldgraph.core.domain_types import ID_KEY, TYPE_KEY, Entity

_COMPACT_URI = re.compile(r"[a-zA-Z][a-zA-Z0-9+.-]*:\S+")


def is_reference_string(value: str) -> bool:
    """True if a string looks like an entity identifier (e.g. "org:acme")."""
    return (
        _COMPACT_URI.fullmatch(value) is not None
        and not value.startswith("http")
    )


def extract_references(entity: Entity) -> set[str]:
    """Return every identifier referenced from the entity's property values."""
    return set(ordered_references(entity))


def ordered_references(entity: Entity) -> list[str]:
    """Referenced identifiers in first-seen scan order, de-duplicated."""
    found: dict[str, None] = {}
    stack = [
        value for key, value in reversed(entity.items())
        if key not in (ID_KEY, TYPE_KEY)
    ]

    while stack:
        value = stack.pop()
        if isinstance(value, str):
            if is_reference_string(value):
                found.setdefault(value, None)
        elif isinstance(value, list):
            stack.extend(reversed(value))
        elif isinstance(value, dict):
            ref = value.get(ID_KEY)
            if isinstance(ref, str) and ref:
                found.setdefault(ref, None)
            stack.extend(reversed(list(value.values())))

    return list(found)
