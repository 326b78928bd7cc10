"""Processing Pipeline — turns a JsonLdConfig into an output graph and document.

Invariants:
    - Single forward pass, fixed layer order:
        validate → [1] subgraph extraction (property rules fused)
                 → [2] property rules (if not consumed) + entity filters
                 → [3] populate → [4] additional entities → [5] pipes
    - Property rules are applied at most once per run
    - Additional entities bypass every filter (appended after layer 2/3)
    - Pipes run in registration order, each on the previous pipe's output
    - Identical config + graph → byte-identical document

Design Decisions:
    - Pure function of the config: memoization lives in the stateful
      JsonLdBuilder (services/), not here (ADR: functional core)
    - Rendering mirrors JSON.stringify: 2-space indent or compact separators,
      non-ASCII left as-is
"""

import json
from dataclasses import dataclass
from typing import Sequence

from ldgraph.core.config_model import (
    JsonLdConfig,
    PopulateConfig,
    build_property_filter_rules,
    validate_runtime_config,
)
from ldgraph.core.domain_types import ID_KEY, Entity
from ldgraph.core.entity_filters import filter_jsonld_graph
from ldgraph.core.property_filters import filter_graph_properties
from ldgraph.core.subgraph import extract_subgraphs

DEFAULT_CONTEXT_URL = "https://schema.org"


@dataclass(frozen=True)
class BuildOptions:
    """How the output document is rendered."""
    pretty_print: bool = True
    context_url: str = DEFAULT_CONTEXT_URL
    with_script_tag: bool = False
    script_id: str | None = None


# === Public API ===============================================================

def process_graph(config: JsonLdConfig) -> list[Entity]:
    """Run every layer of the pipeline and return the output graph."""
    validate_runtime_config(config)

    graph = list(config.base_graph)
    filters = config.filters
    property_rules = build_property_filter_rules(filters)
    rules_consumed = False

    # Layer 1: subgraph extraction, property rules fused into traversal
    if filters is not None and filters.subgraph_roots:
        graph = extract_subgraphs(graph, filters.subgraph_roots, property_rules)
        rules_consumed = True

    # Layer 2: property rules (unless consumed) then entity filters
    if filters is not None:
        if property_rules is not None and not rules_consumed:
            graph = filter_graph_properties(graph, property_rules)
        graph = filter_jsonld_graph(graph, filters)

    # Layer 3: populate
    if config.populate_config:
        graph = apply_populate_config(graph, config.populate_config)

    # Layer 4: additional entities
    if config.additional_entities:
        graph = [*graph, *config.additional_entities]

    # Layer 5: pipes
    for fn in config.pipes or ():
        graph = fn(graph)

    return graph


def apply_populate_config(
    graph: Sequence[Entity], populate_config: PopulateConfig,
) -> list[Entity]:
    """Overwrite configured properties with fixed entity lists.

    Entities without rules are returned as-is; populated ones are copies.
    """
    result = []
    for entity in graph:
        rules = populate_config.get(entity.get(ID_KEY))
        if not rules:
            result.append(entity)
            continue
        populated = dict(entity)
        for rule in rules:
            populated[rule.property] = list(rule.entities)
        result.append(populated)
    return result


def render_document(graph: Sequence[Entity], options: BuildOptions | None = None) -> str:
    """Serialize a graph as {"@context", "@graph"}, optionally in a script tag."""
    options = options or BuildOptions()
    document = {"@context": options.context_url, "@graph": list(graph)}

    if options.pretty_print:
        text = json.dumps(document, indent=2, ensure_ascii=False)
    else:
        text = json.dumps(document, separators=(",", ":"), ensure_ascii=False)

    if not options.with_script_tag:
        return text
    id_attribute = f' id="{options.script_id}"' if options.script_id else ""
    return f'<script{id_attribute} type="application/ld+json">{text}</script>'
