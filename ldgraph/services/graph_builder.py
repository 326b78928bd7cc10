"""Graph Builder — stateful orchestrator that owns a config and memoizes its output.

Invariants:
    - Owns exactly one JsonLdConfig (composition); never extends ConfigBuilder
    - Fluent calls return a NEW JsonLdBuilder, so the memo is per instance:
      a builder computes its graph at most once, derived builders start empty
    - build() never mutates the memoized graph
    - Configuration warnings (include/exclude overlaps) are logged, not raised

Design Decisions:
    - Same chainable() method table as ConfigBuilder: shared behavior without
      inheritance between the configuration builder and the orchestrator
    - Lazy memo: a builder only used for get_config() never runs the pipeline
"""

import logging
from dataclasses import replace
from typing import Any

from ldgraph.core import config_ops
from ldgraph.core.config_builder import chainable
from ldgraph.core.config_model import JsonLdConfig, validate_config
from ldgraph.core.domain_types import Entity
from ldgraph.core.pipeline import BuildOptions, process_graph, render_document
from ldgraph.infrastructure.observability import log_duration

logger = logging.getLogger(__name__)


class JsonLdBuilder:
    """Configure, process and render a linked-data graph."""

    __slots__ = ("_config", "_current_graph")

    def __init__(self, config: JsonLdConfig | None = None) -> None:
        self._config = config or JsonLdConfig()
        self._current_graph: list[Entity] | None = None

    def get_config(self) -> JsonLdConfig:
        return self._config

    def get_current_graph(self) -> list[Entity]:
        """Processed graph for this builder, computed on first access."""
        if self._current_graph is None:
            self._current_graph = self._process()
        return self._current_graph

    def build(self, options: BuildOptions | None = None, **overrides: Any) -> str:
        """Render the processed graph as a JSON-LD document string.

        Keyword overrides (pretty_print, context_url, with_script_tag,
        script_id) are applied on top of `options`.
        """
        options = replace(options or BuildOptions(), **overrides)
        return render_document(self.get_current_graph(), options)

    def _process(self) -> list[Entity]:
        for warning in validate_config(self._config):
            logger.warning("Configuration warning: %s", warning)

        roots = self._config.filters.subgraph_roots if self._config.filters else None
        with log_duration(logger, "process_graph", root_count=len(roots or ())):
            graph = process_graph(self._config)

        logger.debug(
            "Processed graph with %d entities", len(graph),
            extra={"operation": "process_graph", "entity_count": len(graph)},
        )
        return graph

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


def create_builder(config: JsonLdConfig | None = None) -> JsonLdBuilder:
    """Start a builder, optionally from an existing configuration."""
    return JsonLdBuilder(config)
