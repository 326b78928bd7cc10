"""Entity Filter Engine — ordered whole-graph passes that narrow which entities survive.

Invariants:
    - Passes run in a fixed order, each on the previous pass's output:
      include types → exclude types → include ids → exclude ids →
      required properties → excluded properties → custom filter → max entities
    - A pass with an absent or empty criterion is a no-op
    - Stable: surviving entities keep their relative order
    - Later passes only narrow; nothing is ever added back

Design Decisions:
    - Sequential passes over one combined predicate: max_entities must count
      survivors of every earlier pass (ADR: short-circuit composition)
"""

from ldgraph.core.config_model import FilterOptions
from ldgraph.core.domain_types import ID_KEY, Entity, Graph
from ldgraph.core.graph_index import get_entity_types


def filter_jsonld_graph(graph: Graph, options: FilterOptions) -> list[Entity]:
    """Apply every configured entity-level pass to a graph."""
    filtered = list(graph)

    if options.include_types:
        wanted = set(options.include_types)
        filtered = [e for e in filtered if wanted.intersection(get_entity_types(e))]

    if options.exclude_types:
        unwanted = set(options.exclude_types)
        filtered = [e for e in filtered if not unwanted.intersection(get_entity_types(e))]

    if options.include_ids:
        wanted_ids = set(options.include_ids)
        filtered = [e for e in filtered if e.get(ID_KEY) and e[ID_KEY] in wanted_ids]

    if options.exclude_ids:
        unwanted_ids = set(options.exclude_ids)
        filtered = [e for e in filtered if not e.get(ID_KEY) or e[ID_KEY] not in unwanted_ids]

    if options.required_properties:
        required = options.required_properties
        filtered = [e for e in filtered if all(prop in e for prop in required)]

    if options.exclude_entities_with_properties:
        forbidden = options.exclude_entities_with_properties
        filtered = [e for e in filtered if not any(prop in e for prop in forbidden)]

    if options.custom_filter is not None:
        filtered = [e for e in filtered if options.custom_filter(e)]

    if options.max_entities and options.max_entities > 0:
        filtered = filtered[:options.max_entities]

    return filtered
