"""Configuration Operations — free functions that derive a new JsonLdConfig.

Invariants:
    - Every function returns a NEW config; the input config is never altered
    - Sequence setters append to what is already there (merge by default)
    - clear_* functions reset exactly their own fields to None, nothing else
    - clear_all keeps only base_graph

Design Decisions:
    - Functions over methods: the fluent builders (ConfigBuilder, JsonLdBuilder)
      bind these same functions, so both share one implementation
    - dataclasses.replace on frozen values: structural sharing, no deep copies
"""

from dataclasses import replace
from typing import Any, Iterable, Mapping

from ldgraph.core.config_model import (
    FilterOptions,
    JsonLdConfig,
    PopulateProperty,
    combine,
    merge_configs,
    merge_filter_options,
)
from ldgraph.core.domain_types import Entity, EntityPredicate, PipeFunction
from ldgraph.core.property_filters import (
    PropertyFilterByIdRule,
    PropertyFilterByTypeRule,
    PropertyFilterRule,
)


# === Base graph ===============================================================

def set_base_graph(config: JsonLdConfig, graph: Any) -> JsonLdConfig:
    """Set (replace) the graph to process."""
    return replace(config, base_graph=graph)


# === Entity filters ===========================================================

def include_ids(config: JsonLdConfig, ids: Iterable[str]) -> JsonLdConfig:
    return _append_filter(config, "include_ids", ids)


def exclude_ids(config: JsonLdConfig, ids: Iterable[str]) -> JsonLdConfig:
    return _append_filter(config, "exclude_ids", ids)


def include_types(config: JsonLdConfig, types: Iterable[str]) -> JsonLdConfig:
    return _append_filter(config, "include_types", types)


def exclude_types(config: JsonLdConfig, types: Iterable[str]) -> JsonLdConfig:
    return _append_filter(config, "exclude_types", types)


def required_properties(config: JsonLdConfig, props: Iterable[str]) -> JsonLdConfig:
    """Entities must have every listed property (accumulates across calls)."""
    return _append_filter(config, "required_properties", props)


def exclude_entities_with_properties(
    config: JsonLdConfig, props: Iterable[str],
) -> JsonLdConfig:
    return _append_filter(config, "exclude_entities_with_properties", props)


def custom_filter(config: JsonLdConfig, predicate: EntityPredicate) -> JsonLdConfig:
    """Set (replace) the custom entity predicate."""
    return _set_filters(config, custom_filter=predicate)


def max_entities(config: JsonLdConfig, limit: int) -> JsonLdConfig:
    """Set (replace) the entity limit. Validated when the pipeline runs."""
    return _set_filters(config, max_entities=limit)


def subgraph(config: JsonLdConfig, root_ids: Iterable[str]) -> JsonLdConfig:
    """Restrict output to what these roots reach (roots accumulate)."""
    return _append_filter(config, "subgraph_roots", root_ids)


# === Property filters =========================================================

def filter_properties(
    config: JsonLdConfig, rules: Iterable[PropertyFilterRule],
) -> JsonLdConfig:
    """Append generic selector rules."""
    return _append_filter(config, "property_filters", rules)


def filter_properties_by_ids(
    config: JsonLdConfig,
    entity_ids: Iterable[str],
    *,
    include: Iterable[str] | None = None,
    exclude: Iterable[str] | None = None,
) -> JsonLdConfig:
    rule = PropertyFilterByIdRule(
        entity_ids=tuple(entity_ids), include=_optional_tuple(include),
        exclude=_optional_tuple(exclude),
    )
    return _append_filter(config, "property_filters_by_ids", [rule])


def filter_properties_by_types(
    config: JsonLdConfig,
    entity_types: Iterable[str],
    *,
    include: Iterable[str] | None = None,
    exclude: Iterable[str] | None = None,
) -> JsonLdConfig:
    rule = PropertyFilterByTypeRule(
        entity_types=tuple(entity_types), include=_optional_tuple(include),
        exclude=_optional_tuple(exclude),
    )
    return _append_filter(config, "property_filters_by_types", [rule])


# === Output additions =========================================================

def add_entities(config: JsonLdConfig, entities: Iterable[Entity]) -> JsonLdConfig:
    """Append entities that bypass every filter."""
    return replace(
        config, additional_entities=combine(config.additional_entities, tuple(entities)),
    )


def pipe(config: JsonLdConfig, fn: PipeFunction) -> JsonLdConfig:
    """Append a whole-graph transform, run after everything else."""
    return replace(config, pipes=combine(config.pipes, (fn,)))


def populate_entities(
    config: JsonLdConfig,
    entity_ids: Iterable[str],
    populate_config: Mapping[str, Iterable[PopulateProperty]],
) -> JsonLdConfig:
    """Register populate rules for the listed ids found in populate_config.

    Rules for other ids already in the config are kept; a later call for
    the same id replaces that id's rules.
    """
    merged = dict(config.populate_config or {})
    for entity_id in entity_ids:
        if entity_id in populate_config:
            merged[entity_id] = tuple(populate_config[entity_id])
    return replace(config, populate_config=merged)


# === Clearing =================================================================

def clear_ids(config: JsonLdConfig) -> JsonLdConfig:
    return _set_filters(config, include_ids=None, exclude_ids=None)


def clear_types(config: JsonLdConfig) -> JsonLdConfig:
    return _set_filters(config, include_types=None, exclude_types=None)


def clear_property_requirements(config: JsonLdConfig) -> JsonLdConfig:
    return _set_filters(
        config, required_properties=None, exclude_entities_with_properties=None,
    )


def clear_property_filters(config: JsonLdConfig) -> JsonLdConfig:
    """Drop by-id and by-type property rules (generic rules are kept)."""
    return _set_filters(
        config, property_filters_by_ids=None, property_filters_by_types=None,
    )


def clear_subgraph(config: JsonLdConfig) -> JsonLdConfig:
    return _set_filters(config, subgraph_roots=None)


def clear_all(config: JsonLdConfig) -> JsonLdConfig:
    """Reset everything except the base graph."""
    return JsonLdConfig(base_graph=config.base_graph)


# === Merging ==================================================================

def merge_config(config: JsonLdConfig, other: JsonLdConfig) -> JsonLdConfig:
    return merge_configs(config, other)


def merge_filters(config: JsonLdConfig, filters: FilterOptions) -> JsonLdConfig:
    """Merge filter options only; the rest of the config is untouched."""
    return replace(config, filters=merge_filter_options(config.filters, filters))


# === Private helpers ==========================================================

def _set_filters(config: JsonLdConfig, **changes: Any) -> JsonLdConfig:
    filters = config.filters or FilterOptions()
    return replace(config, filters=replace(filters, **changes))


def _append_filter(config: JsonLdConfig, name: str, items: Iterable[Any]) -> JsonLdConfig:
    existing = getattr(config.filters, name) if config.filters else None
    return _set_filters(config, **{name: (*(existing or ()), *items)})


def _optional_tuple(items: Iterable[str] | None) -> tuple[str, ...] | None:
    return tuple(items) if items is not None else None
