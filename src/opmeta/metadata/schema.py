"""Extraction of input-type metadata from a GraphQL schema.

Extracted metadata is a starting point for hand-maintained metadata files:
validation rules are taken from field directives, every other rule has to be
added to the metadata files.
"""

import json
from collections.abc import Mapping
from typing import Any, cast

from graphql import (
    DirectiveNode,
    GraphQLEnumType,
    GraphQLInputField,
    GraphQLInputObjectType,
    GraphQLList,
    GraphQLNamedType,
    GraphQLNonNull,
    GraphQLSchema,
    GraphQLType,
    is_enum_type,
    is_input_object_type,
    is_list_type,
    is_named_type,
    is_non_null_type,
    is_scalar_type,
)
from graphql.pyutils import Undefined
from graphql.utilities import value_from_ast_untyped

from opmeta import log
from opmeta.errors import ErrorMessages, UnsupportedTypeError
from opmeta.metadata.models import (
    EnumFieldMetadata,
    EnumTypeMetadata,
    FieldMetadata,
    InputTypeMetadata,
    InputTypes,
    ListFieldMetadata,
    ObjectFieldMetadata,
    ObjectTypeMetadata,
    ScalarFieldMetadata,
    ScalarTypeMetadata,
    SchemaMetadata,
    TypeKind,
    ValidationRule,
)
from opmeta.utils.graphql_type import is_introspection_type, is_validation_directive


def _get_type_kind(named_type: GraphQLNamedType) -> TypeKind:
    if is_enum_type(named_type):
        return "enum"
    if is_input_object_type(named_type):
        return "object"
    return "scalar"


def _get_directive_constraints(schema: GraphQLSchema, directive: DirectiveNode) -> list[Any]:
    """
    Argument values of a directive usage in the order the directive declares its arguments.

    Omitted arguments take their declared default value, or None without one.
    """
    given: dict[str, Any] = {
        argument.name.value: value_from_ast_untyped(argument.value) for argument in directive.arguments
    }

    definition = schema.get_directive(directive.name.value)
    if definition is None:
        return list(given.values())

    constraints = []
    for argument_name, argument in definition.args.items():
        if argument_name in given:
            constraints.append(given[argument_name])
        elif argument.default_value is not Undefined:
            constraints.append(argument.default_value)
        else:
            constraints.append(None)
    return constraints


def _get_validation_rules(schema: GraphQLSchema, field: GraphQLInputField) -> list[ValidationRule] | None:
    """Turn the directives of an input field into validation rules, arguments becoming constraints."""
    if not field.ast_node or not field.ast_node.directives:
        return None

    rules = []
    for directive in field.ast_node.directives:
        if not is_validation_directive(directive.name.value):
            continue
        constraints = _get_directive_constraints(schema, directive)
        rules.append(ValidationRule(type=directive.name.value, constraints=constraints or None))

    return rules or None


def _build_field_metadata(
    schema: GraphQLSchema, type_name: str, field_name: str, field: GraphQLInputField
) -> FieldMetadata:
    field_type: GraphQLType = field.type
    required = is_non_null_type(field_type)
    if required:
        field_type = cast(GraphQLNonNull[GraphQLType], field_type).of_type

    validation = _get_validation_rules(schema, field)

    if is_list_type(field_type):
        item_type: GraphQLType = cast(GraphQLList[GraphQLType], field_type).of_type
        if is_non_null_type(item_type):
            item_type = cast(GraphQLNonNull[GraphQLType], item_type).of_type
        if not is_named_type(item_type):
            raise UnsupportedTypeError(
                f"{ErrorMessages.UNSUPPORTED_LIST_ITEM_TYPE.format(kind=item_type)} in {type_name}.{field_name}"
            )
        named_item = cast(GraphQLNamedType, item_type)
        return ListFieldMetadata(
            name=field_name,
            type=named_item.name,
            item_kind=_get_type_kind(named_item),
            required=required,
            validation=validation,
        )

    named_type = cast(GraphQLNamedType, field_type)
    kind = _get_type_kind(named_type)
    if kind == "enum":
        return EnumFieldMetadata(name=field_name, type=named_type.name, required=required, validation=validation)
    if kind == "object":
        return ObjectFieldMetadata(name=field_name, type=named_type.name, required=required, validation=validation)
    return ScalarFieldMetadata(name=field_name, type=named_type.name, required=required, validation=validation)


def extract_input_metadata(schema: GraphQLSchema) -> dict[str, InputTypeMetadata]:
    """
    Build input-type metadata for every scalar, enum and input object of a schema.

    Args:
        schema: The GraphQL schema

    Returns:
        Mapping of type name to metadata, in schema type map order

    Raises:
        UnsupportedTypeError: If an input field is a list of lists.
    """
    types: dict[str, InputTypeMetadata] = {}

    for type_name, named_type in schema.type_map.items():
        if is_introspection_type(type_name):
            continue

        description = named_type.description
        if is_scalar_type(named_type):
            types[type_name] = ScalarTypeMetadata(type=type_name, description=description)
        elif is_enum_type(named_type):
            enum_type = cast(GraphQLEnumType, named_type)
            types[type_name] = EnumTypeMetadata(
                type=type_name, description=description, values=list(enum_type.values.keys())
            )
        elif is_input_object_type(named_type):
            input_type = cast(GraphQLInputObjectType, named_type)
            fields = [
                _build_field_metadata(schema, type_name, field_name, field)
                for field_name, field in input_type.fields.items()
            ]
            types[type_name] = ObjectTypeMetadata(type=type_name, description=description, fields=fields)

    log.info(f"Extracted metadata for {len(types)} input types from the schema")
    return types


def dump_metadata(types: Mapping[str, InputTypeMetadata]) -> str:
    """Serialize input-type metadata in the metadata file shape as JSON."""
    metadata = SchemaMetadata(types=InputTypes(input=dict(types)))
    return json.dumps(metadata.model_dump(by_alias=True, exclude_none=True), indent=2) + "\n"
