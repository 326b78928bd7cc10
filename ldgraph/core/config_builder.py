"""Config Builder — immutable fluent wrapper over the config_ops functions.

Invariants:
    - Every chained call returns a NEW builder wrapping a NEW config
    - A builder never changes after construction; reuse a prefix freely:
        people = create_config().include_types(["Person"])
        a = people.include_ids(["a"])      # people is unaffected
    - get_config() returns the wrapped frozen value itself (no copy needed)

Design Decisions:
    - chainable() binds one config_ops function as a method; JsonLdBuilder binds
      the same functions, so the two classes share behavior without inheriting
      from each other (ADR: composition over builder subclassing)
    - Explicit method table over __getattr__ delegation: every method is visible
      to readers and IDEs (ADR: no convention-over-config)
"""

from functools import wraps
from typing import Any, Callable

from ldgraph.core import config_ops
from ldgraph.core.config_model import JsonLdConfig


def chainable(op: Callable[..., JsonLdConfig]) -> Callable[..., Any]:
    """Turn `op(config, *args)` into a method returning `type(self)(new_config)`."""

    @wraps(op)
    def method(self, *args: Any, **kwargs: Any):
        return type(self)(op(self._config, *args, **kwargs))

    return method


class ConfigBuilder:
    """Fluent, immutable configuration builder."""

    __slots__ = ("_config",)

    def __init__(self, config: JsonLdConfig | None = None) -> None:
        self._config = config or JsonLdConfig()

    def get_config(self) -> JsonLdConfig:
        return self._config

    base_graph = chainable(config_ops.set_base_graph)
    include_ids = chainable(config_ops.include_ids)
    exclude_ids = chainable(config_ops.exclude_ids)
    include_types = chainable(config_ops.include_types)
    exclude_types = chainable(config_ops.exclude_types)
    custom_filter = chainable(config_ops.custom_filter)
    max_entities = chainable(config_ops.max_entities)
    required_properties = chainable(config_ops.required_properties)
    exclude_entities_with_properties = chainable(config_ops.exclude_entities_with_properties)
    subgraph = chainable(config_ops.subgraph)
    filter_properties = chainable(config_ops.filter_properties)
    filter_properties_by_ids = chainable(config_ops.filter_properties_by_ids)
    filter_properties_by_types = chainable(config_ops.filter_properties_by_types)
    add_entities = chainable(config_ops.add_entities)
    pipe = chainable(config_ops.pipe)
    populate_entities = chainable(config_ops.populate_entities)
    clear_ids = chainable(config_ops.clear_ids)
    clear_types = chainable(config_ops.clear_types)
    clear_property_requirements = chainable(config_ops.clear_property_requirements)
    clear_property_filters = chainable(config_ops.clear_property_filters)
    clear_subgraph = chainable(config_ops.clear_subgraph)
    clear_all = chainable(config_ops.clear_all)
    merge_config = chainable(config_ops.merge_config)
    merge_filters = chainable(config_ops.merge_filters)


def create_config() -> ConfigBuilder:
    """Start an empty configuration."""
    return ConfigBuilder()
