"""Graph schema tests — request validation rules and translation to core values.

Tests cover:
    - PropertyFilterRuleSchema selector forms
    - FilterOptionsSchema max_entities bound
    - BuildOptionsSchema script_id guard
    - SubgraphRequest depth/root rule
    - graph_service translation: frozen tuples, settings fallbacks
"""

import pytest
from pydantic import ValidationError

from ldgraph.config import Settings
from ldgraph.core.config_model import FilterOptions
from ldgraph.core.property_filters import PropertyFilterByIdRule, PropertyFilterRule
from ldgraph.schemas.graph import (
    BuildOptionsSchema,
    BuildRequest,
    FilterOptionsSchema,
    PropertyFilterByIdSchema,
    PropertyFilterRuleSchema,
    SubgraphRequest,
)
from ldgraph.services.graph_service import (
    build_options_from_schema,
    config_from_request,
    filters_from_schema,
)


# -- Schemas -------------------------------------------------------------------

def test_selector_accepts_wildcard_and_dict():
    assert PropertyFilterRuleSchema().selector == "*"
    assert PropertyFilterRuleSchema(selector={"@type": "Person"}).selector == {"@type": "Person"}


def test_selector_rejects_other_strings():
    with pytest.raises(ValidationError):
        PropertyFilterRuleSchema(selector="Person")


def test_id_rule_needs_ids():
    with pytest.raises(ValidationError):
        PropertyFilterByIdSchema(entity_ids=[])


def test_max_entities_must_be_positive():
    with pytest.raises(ValidationError):
        FilterOptionsSchema(max_entities=0)
    assert FilterOptionsSchema(max_entities=1).max_entities == 1


def test_script_id_rejects_markup():
    with pytest.raises(ValidationError):
        BuildOptionsSchema(script_id='x"><script>')
    assert BuildOptionsSchema(script_id="jsonld").script_id == "jsonld"


def test_subgraph_depth_needs_single_root():
    with pytest.raises(ValidationError):
        SubgraphRequest(graph=[], root_ids=["a", "b"], max_depth=2)
    assert SubgraphRequest(graph=[], root_ids=["a"], max_depth=2).max_depth == 2
    assert SubgraphRequest(graph=[], root_ids=["a", "b"]).max_depth is None


def test_subgraph_needs_roots():
    with pytest.raises(ValidationError):
        SubgraphRequest(graph=[], root_ids=[])


# -- Translation ---------------------------------------------------------------

def test_filters_from_schema_builds_frozen_tuples():
    schema = FilterOptionsSchema(
        include_types=["Person"],
        max_entities=3,
        property_filters=[PropertyFilterRuleSchema(exclude=["email"])],
        property_filters_by_ids=[PropertyFilterByIdSchema(entity_ids=["a"], include=["name"])],
    )
    options = filters_from_schema(schema)
    assert isinstance(options, FilterOptions)
    assert options.include_types == ("Person",)
    assert options.exclude_types is None
    assert options.max_entities == 3
    assert options.property_filters == (PropertyFilterRule("*", None, ("email",)),)
    assert options.property_filters_by_ids == (
        PropertyFilterByIdRule(("a",), ("name",), None),
    )


def test_filters_from_schema_none():
    assert filters_from_schema(None) is None


def test_config_from_request():
    request = BuildRequest(
        graph=[{"@id": "a"}],
        additional_entities=[{"@id": "b"}],
        populate={"a": [{"property": "p", "entities": [{"@id": "c"}]}]},
    )
    config = config_from_request(request)
    assert config.base_graph == [{"@id": "a"}]
    assert config.filters is None
    assert config.additional_entities == ({"@id": "b"},)
    assert config.populate_config["a"][0].entities == ({"@id": "c"},)


def test_build_options_fall_back_to_settings():
    settings = Settings(pretty_print=False, default_context_url="https://ctx.example")
    options = build_options_from_schema(BuildOptionsSchema(), settings)
    assert options.pretty_print is False
    assert options.context_url == "https://ctx.example"

    explicit = build_options_from_schema(
        BuildOptionsSchema(pretty_print=True, context_url="https://other.example"), settings,
    )
    assert explicit.pretty_print is True
    assert explicit.context_url == "https://other.example"
