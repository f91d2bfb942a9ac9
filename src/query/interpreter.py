"""Lazy query evaluation.

Rows are produced depth-first by a generator that pulls vertices from the
adapter on demand. Variable binding happens before the generator is
returned, so bad arguments fail at call time rather than mid-iteration.
"""

from __future__ import annotations

import re
from typing import Any, Iterator, Mapping, Protocol

from core.errors import QueryRuntimeError
from core.types import QueryRow
from query.compiler import CompiledEdge, CompiledFilter, CompiledQuery, CompiledVertex

_SCALAR_PYTHON_TYPES: dict[str, tuple[type, ...]] = {
    "String": (str,),
    "Int": (int,),
    "Boolean": (bool,),
}


class QueryAdapter(Protocol):
    """Resolver interface the interpreter evaluates queries against."""

    def resolve_starting_vertices(self, edge_name: str) -> Iterator[Any]: ...

    def resolve_property(self, vertex: Any, type_name: str, property_name: str) -> Any: ...

    def resolve_neighbors(self, vertex: Any, type_name: str, edge_name: str) -> Iterator[Any]: ...


def execute_query(
    adapter: QueryAdapter,
    query: CompiledQuery,
    variables: Mapping[str, Any],
) -> Iterator[QueryRow]:
    """Bind variables and return a lazy row iterator.

    Args:
        adapter: Resolver adapter.
        query: Compiled query.
        variables: Filter operand values keyed by variable name.

    Returns:
        Single-pass iterator of rows, each mapping output names to values
        in declaration order.

    Raises:
        QueryRuntimeError: If variables are missing, unused, or ill-typed.
    """
    bound = bind_variables(query, variables)
    return _evaluate(adapter, query, bound)


def bind_variables(query: CompiledQuery, variables: Mapping[str, Any]) -> dict[str, Any]:
    """Check provided variables against the query's filters.

    Returns:
        Variable values, with ``regex`` operands compiled.

    Raises:
        QueryRuntimeError: On missing, unused, or ill-typed variables.
    """
    provided = set(variables)
    missing = sorted(query.variables - provided)
    if missing:
        raise QueryRuntimeError(f"Missing value for variable(s): {', '.join(missing)}")
    unused = sorted(provided - query.variables)
    if unused:
        raise QueryRuntimeError(f"Variable(s) not used by the query: {', '.join(unused)}")
    bound = dict(variables)
    for query_filter in _iter_filters(query.root):
        if query_filter.variable is None:
            continue
        value = variables[query_filter.variable]
        _check_operand(query_filter, value)
        if query_filter.op == "regex":
            bound[_regex_key(query_filter.variable)] = _compile_regex(query_filter.variable, value)
    return bound


def _evaluate(
    adapter: QueryAdapter,
    query: CompiledQuery,
    bound: Mapping[str, Any],
) -> Iterator[QueryRow]:
    for vertex in adapter.resolve_starting_vertices(query.root_edge):
        for values in _vertex_rows(adapter, query.root, vertex, bound):
            yield {name: values.get(name) for name in query.outputs}


def _vertex_rows(
    adapter: QueryAdapter,
    compiled: CompiledVertex,
    vertex: Any,
    bound: Mapping[str, Any],
) -> Iterator[dict[str, Any]]:
    values: dict[str, Any] = {}
    for prop in compiled.properties:
        value = adapter.resolve_property(vertex, compiled.type_name, prop.name)
        if not all(_passes(query_filter, value, bound) for query_filter in prop.filters):
            return
        if prop.output_name is not None:
            values[prop.output_name] = value
    yield from _edge_rows(adapter, compiled, vertex, compiled.edges, values, bound)


def _edge_rows(
    adapter: QueryAdapter,
    compiled: CompiledVertex,
    vertex: Any,
    edges: tuple[CompiledEdge, ...],
    partial: dict[str, Any],
    bound: Mapping[str, Any],
) -> Iterator[dict[str, Any]]:
    if not edges:
        yield dict(partial)
        return
    edge, remaining = edges[0], edges[1:]
    has_neighbors = False
    for neighbor in adapter.resolve_neighbors(vertex, compiled.type_name, edge.name):
        has_neighbors = True
        for child_values in _vertex_rows(adapter, edge.target, neighbor, bound):
            merged = {**partial, **child_values}
            yield from _edge_rows(adapter, compiled, vertex, remaining, merged, bound)
    if edge.optional and not has_neighbors:
        nulls = {name: None for name in edge.target.output_names()}
        yield from _edge_rows(adapter, compiled, vertex, remaining, {**partial, **nulls}, bound)


def _passes(query_filter: CompiledFilter, value: Any, bound: Mapping[str, Any]) -> bool:
    op = query_filter.op
    if op == "is_null":
        return value is None
    if op == "is_not_null":
        return value is not None
    if value is None:
        return False
    assert query_filter.variable is not None
    operand = bound[query_filter.variable]
    if op == "=":
        return value == _normalize(operand)
    if op == "!=":
        return value != _normalize(operand)
    if op == "<":
        return value < operand
    if op == "<=":
        return value <= operand
    if op == ">":
        return value > operand
    if op == ">=":
        return value >= operand
    if op == "one_of":
        return value in operand
    if op == "contains":
        return operand in value
    if op == "has_prefix":
        return value.startswith(operand)
    if op == "has_suffix":
        return value.endswith(operand)
    if op == "has_substring":
        return operand in value
    if op == "regex":
        return bound[_regex_key(query_filter.variable)].search(value) is not None
    raise AssertionError(f"unhandled filter operator {op}")


def _check_operand(query_filter: CompiledFilter, value: Any) -> None:
    name = query_filter.variable
    scalar = query_filter.scalar_type
    if query_filter.op == "one_of" or (query_filter.is_list and query_filter.op in ("=", "!=")):
        if not isinstance(value, (list, tuple)):
            raise QueryRuntimeError(
                f"Variable '{name}' must be a list for '{query_filter.op}' filters"
            )
        for element in value:
            _check_scalar(name, scalar, element)
        return
    _check_scalar(name, scalar, value)


def _check_scalar(name: str | None, scalar: str, value: Any) -> None:
    expected = _SCALAR_PYTHON_TYPES.get(scalar, (object,))
    if scalar == "Int" and isinstance(value, bool):
        raise QueryRuntimeError(f"Variable '{name}' must be of type Int, got bool")
    if not isinstance(value, expected):
        raise QueryRuntimeError(
            f"Variable '{name}' must be of type {scalar}, got {type(value).__name__}"
        )


def _compile_regex(name: str, pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as error:
        raise QueryRuntimeError(f"Variable '{name}' is not a valid regex: {error}") from error


def _iter_filters(vertex: CompiledVertex) -> Iterator[CompiledFilter]:
    for prop in vertex.properties:
        yield from prop.filters
    for edge in vertex.edges:
        yield from _iter_filters(edge.target)


def _normalize(operand: Any) -> Any:
    return list(operand) if isinstance(operand, tuple) else operand


def _regex_key(variable: str) -> str:
    return f"\0regex:{variable}"
