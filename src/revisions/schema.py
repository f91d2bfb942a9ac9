"""GraphQL schemas exposed by each revision family."""

from __future__ import annotations

from functools import lru_cache

from graphql import GraphQLSchema, build_schema

_SCHEMA_HEADER = """
schema {
  query: RootSchemaQuery
}

directive @filter(op: String!, value: [String!]) repeatable on FIELD
directive @output(name: String) on FIELD
directive @optional on FIELD

type RootSchemaQuery {
  Crate: Crate!
  CrateDiff: CrateDiff!
}

type CrateDiff {
  current: Crate!
  baseline: Crate
}

type Span {
  filename: String!
  begin_line: Int!
  end_line: Int!
}
"""

_CRATE_TYPE = """
type Crate {
  root: String!
  crate_version: String
  format_version: Int!
  includes_private: Boolean!
  target_triple: %(target_type)s
  package_name: String
  package_version: String
  item: [Item!]
  root_module: Item!
}
"""

_ITEM_TYPE = """
type Item {
  id: String!
  name: String
  docs: String
  kind: String!
  visibility_limit: String!
  deprecated: Boolean!
  path: [String!]
%(extra_fields)s
  span: Span
}
"""


@lru_cache(maxsize=None)
def legacy_schema() -> GraphQLSchema:
    """Schema for revisions whose documents predate recorded targets."""
    return build_schema(
        _SCHEMA_HEADER
        + _CRATE_TYPE % {"target_type": "String!"}
        + _ITEM_TYPE % {"extra_fields": ""}
    )


@lru_cache(maxsize=None)
def modern_schema() -> GraphQLSchema:
    """Schema for revisions that record targets and expose item attributes."""
    return build_schema(
        _SCHEMA_HEADER
        + _CRATE_TYPE % {"target_type": "String"}
        + _ITEM_TYPE % {"extra_fields": "  attrs: [String!]!"}
    )
