"""Unit tests for query compilation."""

from __future__ import annotations

import pytest

from core.errors import QueryCompilationError
from query.compiler import compile_query
from revisions.schema import legacy_schema, modern_schema


def test_compile_collects_outputs_and_variables() -> None:
    """Compiled queries should list outputs in order and referenced variables."""
    query = """
    {
      Crate {
        crate_version @output
        item {
          name @output(name: "item_name")
          kind @filter(op: "=", value: ["$kind"])
          span @optional {
            begin_line @output
          }
        }
      }
    }
    """

    compiled = compile_query(modern_schema(), query)

    assert compiled.root_edge == "Crate"
    assert compiled.outputs == ("crate_version", "item_name", "begin_line")
    assert compiled.variables == frozenset({"kind"})
    item_edge = compiled.root.edges[0]
    assert item_edge.name == "item" and item_edge.target.edges[0].optional


def test_alias_names_output() -> None:
    """An aliased property should use the alias as output name."""
    compiled = compile_query(modern_schema(), "{ Crate { version: crate_version @output } }")

    assert compiled.outputs == ("version",)


def test_syntax_error_reports_location() -> None:
    """Syntax errors should carry line and column."""
    with pytest.raises(QueryCompilationError) as error_info:
        compile_query(modern_schema(), "{\n  Crate {\n    name @output\n")

    assert error_info.value.line is not None and error_info.value.column is not None


def test_unknown_property_is_rejected() -> None:
    """Fields outside the schema should fail validation."""
    with pytest.raises(QueryCompilationError, match="no_such_field"):
        compile_query(modern_schema(), "{ Crate { no_such_field @output } }")


def test_attrs_exist_only_in_modern_schema() -> None:
    """Item attributes should be queryable only for modern revisions."""
    query = "{ Crate { item { attrs @output } } }"

    assert compile_query(modern_schema(), query).outputs == ("attrs",)
    with pytest.raises(QueryCompilationError, match="attrs"):
        compile_query(legacy_schema(), query)


def test_query_without_outputs_is_rejected() -> None:
    """Queries must output at least one property."""
    with pytest.raises(QueryCompilationError, match="no @output"):
        compile_query(modern_schema(), "{ Crate { crate_version } }")


def test_duplicate_output_names_are_rejected() -> None:
    """Output names must be unique across the query."""
    query = '{ Crate { crate_version @output(name: "x") root @output(name: "x") } }'

    with pytest.raises(QueryCompilationError, match="Duplicate output names: x"):
        compile_query(modern_schema(), query)


def test_literal_filter_operand_is_rejected() -> None:
    """Filter operands must be variable references."""
    query = '{ Crate { item { name @output kind @filter(op: "=", value: ["function"]) } } }'

    with pytest.raises(QueryCompilationError, match="variable references"):
        compile_query(modern_schema(), query)


def test_ordering_filter_on_boolean_is_rejected() -> None:
    """Ordering operators should require String or Int properties."""
    query = '{ Crate { item { name @output deprecated @filter(op: "<", value: ["$x"]) } } }'

    with pytest.raises(QueryCompilationError, match="requires a String or Int"):
        compile_query(modern_schema(), query)


def test_unknown_filter_operator_is_rejected() -> None:
    """Unsupported operators should fail at compile time."""
    query = '{ Crate { item { name @output @filter(op: "fuzzy", value: ["$x"]) } } }'

    with pytest.raises(QueryCompilationError, match="'fuzzy' is not supported"):
        compile_query(modern_schema(), query)


def test_unary_filter_takes_no_operand() -> None:
    """is_null filters should reject operands."""
    query = '{ Crate { item { name @output docs @filter(op: "is_null", value: ["$x"]) } } }'

    with pytest.raises(QueryCompilationError, match="takes 0 operand"):
        compile_query(modern_schema(), query)


def test_graphql_variable_definitions_are_rejected() -> None:
    """Operation-level variable definitions should be refused."""
    query = "query Q($kind: String) { Crate { crate_version @output } }"

    with pytest.raises(QueryCompilationError):
        compile_query(modern_schema(), query)


def test_output_on_edge_is_rejected() -> None:
    """Edges should accept only @optional."""
    query = "{ Crate { root_module @output { name @output } } }"

    with pytest.raises(QueryCompilationError, match="not supported on edges"):
        compile_query(modern_schema(), query)


def test_fields_without_directives_or_arguments_compile() -> None:
    """Bare properties, bare edges and argument-free outputs should compile."""
    query = "{ Crate { root item { name @output } crate_version @output } }"

    compiled = compile_query(modern_schema(), query)

    assert compiled.outputs == ("crate_version", "name")
    assert compiled.root.properties[0].output_name is None
    assert compiled.root.edges[0].optional is False


@pytest.mark.parametrize("query", ["{ __typename }", "{ __schema { types { name } } }"])
def test_meta_root_fields_are_rejected(query: str) -> None:
    """Introspection fields at the root should fail as compilation errors."""
    with pytest.raises(QueryCompilationError, match="Meta field"):
        compile_query(modern_schema(), query)
