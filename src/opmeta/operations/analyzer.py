from collections.abc import Iterable
from typing import cast

from graphql import (
    DocumentNode,
    ListTypeNode,
    NamedTypeNode,
    NonNullTypeNode,
    OperationDefinitionNode,
    TypeNode,
    VariableDefinitionNode,
)

from opmeta import log
from opmeta.errors import ErrorMessages, InvalidOperationError, UnsupportedTypeError
from opmeta.metadata.table import TypeMetadataTable
from opmeta.operations.models import (
    EnumParameter,
    ListParameter,
    ObjectParameter,
    OperationDescriptor,
    OperationKind,
    ParameterDescriptor,
    ScalarParameter,
)

DEFAULT_DOCUMENT_SUFFIX = "Document"

UNIT_PARAMETERS: dict[str, type[ScalarParameter | EnumParameter | ObjectParameter]] = {
    "scalar": ScalarParameter,
    "enum": EnumParameter,
    "object": ObjectParameter,
}


def _unwrap_list_item(list_type: ListTypeNode) -> tuple[str, bool]:
    """Return the item type name of a list and whether the items are declared non-null."""
    item_type: TypeNode = list_type.type

    if isinstance(item_type, NamedTypeNode):
        return item_type.name.value, False

    if isinstance(item_type, NonNullTypeNode):
        if isinstance(item_type.type, NamedTypeNode):
            return item_type.type.name.value, True
        raise UnsupportedTypeError(ErrorMessages.UNSUPPORTED_LIST_ITEM_TYPE.format(kind=item_type.type.kind))

    raise UnsupportedTypeError(ErrorMessages.UNSUPPORTED_LIST_ITEM_TYPE.format(kind=item_type.kind))


def analyze_variable(variable: VariableDefinitionNode, table: TypeMetadataTable) -> ParameterDescriptor:
    """
    Classify one variable declaration of an operation.

    Args:
        variable: The variable definition node
        table: Type metadata table used to look up the kind of named types

    Returns:
        The parameter descriptor of the variable

    Raises:
        TypeNotFoundError: If the variable (or list item) type is not in the table.
        UnsupportedTypeError: If the type expression is a nested list or of unknown shape.
    """
    name = variable.variable.name.value
    directives = tuple(directive.name.value for directive in variable.directives or ())

    variable_type: TypeNode = variable.type
    required = isinstance(variable_type, NonNullTypeNode)
    if required:
        variable_type = cast(NonNullTypeNode, variable_type).type

    if isinstance(variable_type, NamedTypeNode):
        type_name = variable_type.name.value
        parameter_class = UNIT_PARAMETERS[table.lookup(type_name).kind]
        return parameter_class(name=name, required=required, directives=directives, type_name=type_name)

    if isinstance(variable_type, ListTypeNode):
        item_type_name, items_required = _unwrap_list_item(variable_type)
        return ListParameter(
            name=name,
            required=required,
            directives=directives,
            item_type_name=item_type_name,
            item_kind=table.lookup(item_type_name).kind,
            items_required=items_required,
        )

    raise UnsupportedTypeError(ErrorMessages.UNSUPPORTED_VARIABLE_TYPE.format(kind=variable_type.kind))


def analyze_operation(
    definition: OperationDefinitionNode,
    table: TypeMetadataTable,
    document_suffix: str = DEFAULT_DOCUMENT_SUFFIX,
) -> OperationDescriptor | None:
    """
    Build the descriptor of one operation.

    Args:
        definition: The operation definition node
        table: Type metadata table
        document_suffix: Appended to the operation name to reference its compiled document

    Returns:
        The operation descriptor, or None if the operation declares no variables

    Raises:
        InvalidOperationError: If an anonymous operation declares variables.
    """
    if not definition.variable_definitions:
        return None

    if definition.name is None:
        raise InvalidOperationError(ErrorMessages.ANONYMOUS_OPERATION)

    operation_name = definition.name.value
    parameters = tuple(analyze_variable(variable, table) for variable in definition.variable_definitions)

    return OperationDescriptor(
        name=operation_name,
        operation_type=cast(OperationKind, definition.operation.value),
        document=f"{operation_name}{document_suffix}",
        parameters=parameters,
    )


def analyze_documents(
    documents: Iterable[DocumentNode],
    table: TypeMetadataTable,
    document_suffix: str = DEFAULT_DOCUMENT_SUFFIX,
) -> list[OperationDescriptor]:
    """
    Build descriptors for every operation of every document, in encounter order.

    Fragments and other non-operation definitions are skipped, as are operations
    without variables.

    Raises:
        InvalidOperationError: If two operations share a name.
    """
    operations: list[OperationDescriptor] = []
    seen_names: set[str] = set()

    for document in documents:
        for definition in document.definitions:
            if not isinstance(definition, OperationDefinitionNode):
                continue

            operation = analyze_operation(definition, table, document_suffix)
            if operation is None:
                log.debug(f"Skipping operation {definition.name.value if definition.name else '<anonymous>'}")
                continue

            if operation.name in seen_names:
                raise InvalidOperationError(ErrorMessages.DUPLICATE_OPERATION.format(name=operation.name))
            seen_names.add(operation.name)
            operations.append(operation)

    log.info(f"Analyzed {len(operations)} operation(s) with variables")
    return operations
