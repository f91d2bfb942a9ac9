"""Query compilation against a revision schema.

Queries are GraphQL documents in the Trustfall style: a single root entry
edge, ``@output`` on properties to emit values, ``@filter`` on properties
to constrain them using ``$variable`` operands, and ``@optional`` on
edges that may have no neighbors.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Sequence

from graphql import (
    DirectiveNode,
    FieldNode,
    GraphQLError,
    GraphQLObjectType,
    GraphQLSchema,
    ListValueNode,
    Node,
    OperationDefinitionNode,
    OperationType,
    StringValueNode,
    get_named_type,
    get_nullable_type,
    is_list_type,
    is_object_type,
    parse,
    validate,
)

from core.errors import QueryCompilationError

UNARY_FILTER_OPS = frozenset({"is_null", "is_not_null"})
SCALAR_FILTER_OPS = frozenset(
    {
        "=",
        "!=",
        "<",
        "<=",
        ">",
        ">=",
        "one_of",
        "has_prefix",
        "has_suffix",
        "has_substring",
        "regex",
    }
)
LIST_FILTER_OPS = frozenset({"=", "!=", "contains"})
_STRING_ONLY_OPS = frozenset({"has_prefix", "has_suffix", "has_substring", "regex"})
_ORDERING_OPS = frozenset({"<", "<=", ">", ">="})
_VARIABLE_PATTERN = re.compile(r"^\$([A-Za-z_][A-Za-z0-9_]*)$")


@dataclass(frozen=True)
class CompiledFilter:
    """One filter on a property.

    Attributes:
        op: Filter operator.
        variable: Operand variable name without ``$``, or None for unary ops.
        scalar_type: GraphQL scalar name of the filtered property.
        is_list: Whether the filtered property is list-valued.
    """

    op: str
    variable: str | None
    scalar_type: str
    is_list: bool


@dataclass(frozen=True)
class CompiledProperty:
    """A property read at one vertex, with optional output and filters."""

    name: str
    output_name: str | None
    filters: tuple[CompiledFilter, ...]


@dataclass(frozen=True)
class CompiledVertex:
    """Properties read and edges expanded at one vertex type."""

    type_name: str
    properties: tuple[CompiledProperty, ...]
    edges: tuple["CompiledEdge", ...]

    def output_names(self) -> tuple[str, ...]:
        """Return every output name at or below this vertex."""
        names = [prop.output_name for prop in self.properties if prop.output_name]
        for edge in self.edges:
            names.extend(edge.target.output_names())
        return tuple(names)


@dataclass(frozen=True)
class CompiledEdge:
    """An edge traversal to a child vertex."""

    name: str
    optional: bool
    target: CompiledVertex


@dataclass(frozen=True)
class CompiledQuery:
    """A query validated against one schema.

    Attributes:
        root_edge: Entry edge on the schema's query type.
        root: Compiled vertex reached through the entry edge.
        outputs: Output names in declaration order.
        variables: Names of every variable the filters reference.
    """

    root_edge: str
    root: CompiledVertex
    outputs: tuple[str, ...]
    variables: frozenset[str]


def compile_query(schema: GraphQLSchema, query_text: str) -> CompiledQuery:
    """Parse and validate query text against a schema.

    Args:
        schema: Revision schema.
        query_text: GraphQL query text.

    Returns:
        Compiled query.

    Raises:
        QueryCompilationError: On syntax errors, schema violations, or
            unsupported directive usage.
    """
    try:
        document = parse(query_text)
    except GraphQLError as error:
        raise _from_graphql_error(error) from error
    validation_errors = validate(schema, document)
    if validation_errors:
        raise _from_graphql_error(validation_errors[0]) from validation_errors[0]
    operation = _single_query_operation(document.definitions)
    root_field = _single_root_field(operation)
    query_type = schema.query_type
    assert query_type is not None
    root_type = get_named_type(query_type.fields[root_field.name.value].type)
    if root_field.directives:
        raise _error_at(root_field, "Directives are not supported on the root edge")
    root = _compile_vertex(root_type, root_field)
    outputs = root.output_names()
    if not outputs:
        raise _error_at(root_field, "Query has no @output fields")
    duplicates = sorted({name for name in outputs if outputs.count(name) > 1})
    if duplicates:
        raise _error_at(root_field, f"Duplicate output names: {', '.join(duplicates)}")
    return CompiledQuery(
        root_edge=root_field.name.value,
        root=root,
        outputs=outputs,
        variables=frozenset(_collect_variables(root)),
    )


def _single_query_operation(definitions: Sequence[Node]) -> OperationDefinitionNode:
    operations = [item for item in definitions if isinstance(item, OperationDefinitionNode)]
    if len(operations) != len(definitions):
        raise _error_at(definitions[0], "Fragments are not supported")
    if len(operations) != 1:
        raise _error_at(definitions[0], "Expected exactly one query operation")
    operation = operations[0]
    if operation.operation != OperationType.QUERY:
        raise _error_at(operation, "Only query operations are supported")
    if operation.variable_definitions:
        raise _error_at(operation, "Declare variables as \"$name\" filter operands instead")
    return operation


def _single_root_field(operation: OperationDefinitionNode) -> FieldNode:
    selections = operation.selection_set.selections
    if len(selections) != 1 or not isinstance(selections[0], FieldNode):
        raise _error_at(operation, "Query must select exactly one root entry edge")
    root_field = selections[0]
    if root_field.name.value.startswith("__"):
        raise _error_at(root_field, f"Meta field {root_field.name.value} is not supported")
    return root_field


def _compile_vertex(vertex_type: object, field: FieldNode) -> CompiledVertex:
    assert isinstance(vertex_type, GraphQLObjectType)
    properties: list[CompiledProperty] = []
    edges: list[CompiledEdge] = []
    assert field.selection_set is not None
    for selection in field.selection_set.selections:
        if not isinstance(selection, FieldNode):
            raise _error_at(selection, "Fragments are not supported")
        field_name = selection.name.value
        if field_name.startswith("__"):
            raise _error_at(selection, f"Meta field {field_name} is not supported")
        field_type = vertex_type.fields[field_name].type
        named_type = get_named_type(field_type)
        if is_object_type(named_type):
            edges.append(_compile_edge(named_type, selection))
        else:
            is_list = is_list_type(get_nullable_type(field_type))
            properties.append(_compile_property(named_type.name, is_list, selection))
    return CompiledVertex(
        type_name=vertex_type.name,
        properties=tuple(properties),
        edges=tuple(edges),
    )


def _compile_edge(target_type: object, field: FieldNode) -> CompiledEdge:
    optional = False
    for directive in field.directives or ():
        if directive.name.value != "optional":
            raise _error_at(directive, f"@{directive.name.value} is not supported on edges")
        optional = True
    return CompiledEdge(
        name=field.name.value,
        optional=optional,
        target=_compile_vertex(target_type, field),
    )


def _compile_property(scalar_type: str, is_list: bool, field: FieldNode) -> CompiledProperty:
    output_name: str | None = None
    filters: list[CompiledFilter] = []
    for directive in field.directives or ():
        directive_name = directive.name.value
        if directive_name == "output":
            output_name = _output_name(directive, field)
        elif directive_name == "filter":
            filters.append(_compile_filter(directive, scalar_type, is_list))
        else:
            raise _error_at(directive, f"@{directive_name} is not supported on properties")
    return CompiledProperty(
        name=field.name.value,
        output_name=output_name,
        filters=tuple(filters),
    )


def _output_name(directive: DirectiveNode, field: FieldNode) -> str:
    for argument in directive.arguments or ():
        if argument.name.value == "name" and isinstance(argument.value, StringValueNode):
            return argument.value.value
    if field.alias is not None:
        return field.alias.value
    return field.name.value


def _compile_filter(directive: DirectiveNode, scalar_type: str, is_list: bool) -> CompiledFilter:
    op = ""
    operands: list[Node] = []
    for argument in directive.arguments or ():
        if argument.name.value == "op" and isinstance(argument.value, StringValueNode):
            op = argument.value.value
        elif argument.name.value == "value":
            value = argument.value
            operands = list(value.values) if isinstance(value, ListValueNode) else [value]
    allowed = (LIST_FILTER_OPS if is_list else SCALAR_FILTER_OPS) | UNARY_FILTER_OPS
    if op not in allowed:
        kind = "list" if is_list else scalar_type
        raise _error_at(directive, f"Filter operator '{op}' is not supported on {kind} properties")
    if op in _STRING_ONLY_OPS and scalar_type != "String":
        raise _error_at(directive, f"Filter operator '{op}' requires a String property")
    if op in _ORDERING_OPS and scalar_type not in ("String", "Int"):
        raise _error_at(directive, f"Filter operator '{op}' requires a String or Int property")
    expected_count = 0 if op in UNARY_FILTER_OPS else 1
    if len(operands) != expected_count:
        raise _error_at(
            directive,
            f"Filter operator '{op}' takes {expected_count} operand(s), got {len(operands)}",
        )
    variable: str | None = None
    if operands:
        operand = operands[0]
        match = (
            _VARIABLE_PATTERN.match(operand.value)
            if isinstance(operand, StringValueNode)
            else None
        )
        if match is None:
            raise _error_at(operand, 'Filter operands must be variable references like "$name"')
        variable = match.group(1)
    return CompiledFilter(op=op, variable=variable, scalar_type=scalar_type, is_list=is_list)


def _collect_variables(vertex: CompiledVertex) -> set[str]:
    names = {
        query_filter.variable
        for prop in vertex.properties
        for query_filter in prop.filters
        if query_filter.variable is not None
    }
    for edge in vertex.edges:
        names |= _collect_variables(edge.target)
    return names


def _error_at(node: Node, message: str) -> QueryCompilationError:
    return _from_graphql_error(GraphQLError(message, node))


def _from_graphql_error(error: GraphQLError) -> QueryCompilationError:
    if error.locations:
        location = error.locations[0]
        return QueryCompilationError(error.message, location.line, location.column)
    return QueryCompilationError(error.message)
