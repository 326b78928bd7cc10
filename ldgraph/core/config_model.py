"""Configuration Model — immutable value describing one graph-processing run.

Invariants:
    - JsonLdConfig and FilterOptions are frozen; sequences are stored as tuples
    - None means "unset"; an unset sequence and an empty one both filter nothing
    - Merging concatenates sequences (base first), never replaces them
    - Scalar options (custom_filter, max_entities, base_graph, populate_config):
      the override wins when it is not None
    - validate_runtime_config raises on structural misuse, in a fixed order:
      missing base graph → non-sequence base graph → max_entities < 1

Design Decisions:
    - Pure value + free functions (config_ops) over a builder class hierarchy:
      the orchestrator owns a config instead of extending a builder (ADR: composition)
    - validate_config (warnings) separate from validate_runtime_config (errors):
      include/exclude overlaps are legal, only suspicious
"""

from dataclasses import dataclass
from typing import Any, Mapping, Sequence, TypeVar

from ldgraph.core.domain_types import Entity, EntityPredicate, PipeFunction
from ldgraph.core.errors import (
    InvalidBaseGraphError,
    InvalidMaxEntitiesError,
    MissingBaseGraphError,
)
from ldgraph.core.property_filters import (
    PropertyFilterByIdRule,
    PropertyFilterByTypeRule,
    PropertyFilterRule,
    rules_from_id_filters,
    rules_from_type_filters,
)

T = TypeVar("T")


@dataclass(frozen=True)
class PopulateProperty:
    """Set `property` on the target entity to this fixed entity list."""
    property: str
    entities: tuple[Entity, ...] = ()


PopulateConfig = Mapping[str, tuple[PopulateProperty, ...]]


@dataclass(frozen=True)
class FilterOptions:
    """Entity-level and property-level filter settings."""
    include_types: tuple[str, ...] | None = None
    exclude_types: tuple[str, ...] | None = None
    include_ids: tuple[str, ...] | None = None
    exclude_ids: tuple[str, ...] | None = None
    required_properties: tuple[str, ...] | None = None
    exclude_entities_with_properties: tuple[str, ...] | None = None
    custom_filter: EntityPredicate | None = None
    max_entities: int | None = None
    subgraph_roots: tuple[str, ...] | None = None
    property_filters: tuple[PropertyFilterRule, ...] | None = None
    property_filters_by_ids: tuple[PropertyFilterByIdRule, ...] | None = None
    property_filters_by_types: tuple[PropertyFilterByTypeRule, ...] | None = None


@dataclass(frozen=True)
class JsonLdConfig:
    """Everything needed to turn a base graph into an output graph."""
    base_graph: Any = None
    filters: FilterOptions | None = None
    additional_entities: tuple[Entity, ...] | None = None
    pipes: tuple[PipeFunction, ...] | None = None
    populate_config: PopulateConfig | None = None


# Sequence-valued FilterOptions fields, merged by concatenation
_SEQUENCE_FILTER_FIELDS: tuple[str, ...] = (
    "include_types", "exclude_types", "include_ids", "exclude_ids",
    "required_properties", "exclude_entities_with_properties",
    "subgraph_roots", "property_filters",
    "property_filters_by_ids", "property_filters_by_types",
)


# === Merging ==================================================================

def combine(
    base: Sequence[T] | None, override: Sequence[T] | None,
) -> tuple[T, ...] | None:
    """Concatenate two optional sequences; None only if both are None."""
    if base is None and override is None:
        return None
    return (*(base or ()), *(override or ()))


def merge_filter_options(
    base: FilterOptions | None, override: FilterOptions | None,
) -> FilterOptions | None:
    """Concatenate sequence fields; override wins for custom_filter/max_entities."""
    if base is None:
        return override
    if override is None:
        return base

    merged: dict[str, Any] = {
        name: combine(getattr(base, name), getattr(override, name))
        for name in _SEQUENCE_FILTER_FIELDS
    }
    merged["custom_filter"] = _prefer(override.custom_filter, base.custom_filter)
    merged["max_entities"] = _prefer(override.max_entities, base.max_entities)
    return FilterOptions(**merged)


def merge_configs(base: JsonLdConfig, override: JsonLdConfig) -> JsonLdConfig:
    """Merge two configurations, the second taking precedence for scalars."""
    return JsonLdConfig(
        base_graph=_prefer(override.base_graph, base.base_graph),
        filters=merge_filter_options(base.filters, override.filters),
        additional_entities=combine(base.additional_entities, override.additional_entities),
        pipes=combine(base.pipes, override.pipes),
        populate_config=_prefer(override.populate_config, base.populate_config),
    )


# === Derived views ============================================================

def build_property_filter_rules(
    filters: FilterOptions | None,
) -> list[PropertyFilterRule] | None:
    """Combine generic, by-id and by-type rules (in that order). None if empty."""
    if filters is None:
        return None
    rules: list[PropertyFilterRule] = []
    rules.extend(filters.property_filters or ())
    rules.extend(rules_from_id_filters(filters.property_filters_by_ids or ()))
    rules.extend(rules_from_type_filters(filters.property_filters_by_types or ()))
    return rules or None


# === Validation ===============================================================

def validate_config(config: JsonLdConfig) -> list[str]:
    """Report suspicious but legal settings. Never raises."""
    warnings: list[str] = []
    filters = config.filters
    if filters is None:
        return warnings

    if filters.include_types and filters.exclude_types:
        overlap = [t for t in filters.include_types if t in filters.exclude_types]
        if overlap:
            warnings.append(f"Conflicting include/exclude types: {', '.join(overlap)}")

    if filters.include_ids and filters.exclude_ids:
        overlap = [i for i in filters.include_ids if i in filters.exclude_ids]
        if overlap:
            warnings.append(f"Conflicting include/exclude IDs: {', '.join(overlap)}")

    if filters.max_entities is not None and filters.max_entities < 1:
        warnings.append("max_entities must be greater than 0")

    return warnings


def validate_runtime_config(config: JsonLdConfig) -> None:
    """Raise on the first structural problem that would break processing."""
    if config.base_graph is None:
        raise MissingBaseGraphError()
    if not is_graph_sequence(config.base_graph):
        raise InvalidBaseGraphError(type(config.base_graph))

    filters = config.filters
    if filters is not None and filters.max_entities is not None and filters.max_entities < 1:
        raise InvalidMaxEntitiesError(filters.max_entities)


def is_graph_sequence(value: Any) -> bool:
    """Lists and tuples qualify; strings, bytes and mappings do not."""
    return isinstance(value, (list, tuple))


# === Private helpers ==========================================================

def _prefer(primary: T | None, fallback: T | None) -> T | None:
    return primary if primary is not None else fallback
