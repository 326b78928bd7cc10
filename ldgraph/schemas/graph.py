"""Graph Schemas — Pydantic models for the /api/v1/graph endpoints.

Invariants:
    - Entities cross the boundary as plain JSON objects (dict[str, Any])
    - Every list-valued filter is optional; None and [] both mean "no filter"
    - max_entities, when given, must be >= 1 (same rule as the pipeline)
    - SubgraphRequest.max_depth requires exactly one root

Design Decisions:
    - Snake_case field names like the rest of the API; entity keys ("@id",
      "@type") are untouched since they live inside the graph payload
    - custom predicates and pipes have no JSON form: they stay Python-only
"""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator


class PropertyFilterRuleSchema(BaseModel):
    """Selector-based property rule. "*" or {} selects every entity."""
    selector: Literal["*"] | dict[str, Any] = "*"
    include: list[str] | None = None
    exclude: list[str] | None = None


class PropertyFilterByIdSchema(BaseModel):
    entity_ids: list[str] = Field(min_length=1)
    include: list[str] | None = None
    exclude: list[str] | None = None


class PropertyFilterByTypeSchema(BaseModel):
    entity_types: list[str] = Field(min_length=1)
    include: list[str] | None = None
    exclude: list[str] | None = None


class FilterOptionsSchema(BaseModel):
    """Entity- and property-level filters for one build."""
    include_types: list[str] | None = None
    exclude_types: list[str] | None = None
    include_ids: list[str] | None = None
    exclude_ids: list[str] | None = None
    required_properties: list[str] | None = None
    exclude_entities_with_properties: list[str] | None = None
    max_entities: int | None = Field(None, ge=1)
    subgraph_roots: list[str] | None = None
    property_filters: list[PropertyFilterRuleSchema] | None = None
    property_filters_by_ids: list[PropertyFilterByIdSchema] | None = None
    property_filters_by_types: list[PropertyFilterByTypeSchema] | None = None


class PopulatePropertySchema(BaseModel):
    property: str = Field(min_length=1)
    entities: list[dict[str, Any]] = []


class BuildOptionsSchema(BaseModel):
    """Rendering options; unset fields fall back to server settings."""
    pretty_print: bool | None = None
    context_url: str | None = None
    with_script_tag: bool = False
    script_id: str | None = Field(None, max_length=200)

    @field_validator("script_id")
    @classmethod
    def no_quotes_in_script_id(cls, v: str | None) -> str | None:
        if v is not None and any(ch in v for ch in "\"<>"):
            raise ValueError("script_id cannot contain quotes or angle brackets")
        return v


class GraphPayload(BaseModel):
    """A bare graph."""
    graph: list[dict[str, Any]]


class BuildRequest(GraphPayload):
    """Full pipeline request: graph + filters + additions + rendering."""
    filters: FilterOptionsSchema | None = None
    additional_entities: list[dict[str, Any]] | None = None
    populate: dict[str, list[PopulatePropertySchema]] | None = None
    options: BuildOptionsSchema = BuildOptionsSchema()


class BuildResponse(BaseModel):
    graph: list[dict[str, Any]]
    document: str
    entity_count: int


class SubgraphRequest(GraphPayload):
    root_ids: list[str] = Field(min_length=1)
    max_depth: int | None = Field(None, ge=0)
    property_filters: list[PropertyFilterRuleSchema] | None = None

    @model_validator(mode="after")
    def depth_needs_single_root(self) -> "SubgraphRequest":
        if self.max_depth is not None and len(self.root_ids) != 1:
            raise ValueError("max_depth requires exactly one root id")
        return self


class SubgraphResponse(BaseModel):
    graph: list[dict[str, Any]]
    entity_count: int


class NestedEntitySchema(BaseModel):
    parent_id: str
    property: str
    nested_entity: dict[str, Any]
    has_id: bool


class GraphReport(BaseModel):
    """Structural diagnostics for a graph."""
    entity_count: int
    missing_references: list[str] = []
    orphans: list[str] = []
    nested_entities: list[NestedEntitySchema] = []


class InlineRequest(GraphPayload):
    root_id: str | None = None


class InlineResponse(BaseModel):
    result: dict[str, Any] | list[dict[str, Any]]
