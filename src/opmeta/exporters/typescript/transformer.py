import json
from typing import Any

from jinja2 import Environment, PackageLoader, select_autoescape

from opmeta import log
from opmeta.metadata.models import EnumTypeMetadata, FieldMetadata, ListFieldMetadata, ValidationRule
from opmeta.metadata.resolver import TypeDeclaration, TypeGraphResolver
from opmeta.metadata.table import TypeMetadataTable
from opmeta.operations.models import (
    ListParameter,
    OperationDescriptor,
    ParameterDescriptor,
    get_referenced_type_name,
)

from .models import (
    TsEnumDeclaration,
    TsField,
    TsModule,
    TsObjectDeclaration,
    TsOperation,
    TsParameter,
    TsValidationRule,
)

DEFAULT_NAMESPACE = "GraphQLInputTypes"

_TS_STRING_ESCAPES = str.maketrans({"\\": "\\\\", "'": "\\'", "\n": "\\n", "\r": "\\r"})


def ts_string(value: str) -> str:
    """Render a single-quoted TypeScript string literal."""
    return f"'{value.translate(_TS_STRING_ESCAPES)}'"


def ts_json(value: Any) -> str:
    """Render an opaque value as a compact JSON literal."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)


def ts_bool(value: bool) -> str:
    return "true" if value else "false"


class TypeScriptTransformer:
    """
    Render operation descriptors and the input types they reference into one
    TypeScript module.
    """

    def __init__(
        self,
        table: TypeMetadataTable,
        operations: list[OperationDescriptor],
        namespace: str = DEFAULT_NAMESPACE,
        documents_import: str | None = None,
    ):
        self.table = table
        self.operations = operations
        self.namespace = namespace
        self.documents_import = documents_import

        self.env = Environment(
            loader=PackageLoader("opmeta.exporters.typescript", "templates"),
            autoescape=select_autoescape(),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.env.filters["ts_string"] = ts_string
        self.env.filters["ts_bool"] = ts_bool

    def transform(self) -> str:
        """
        Resolve every referenced input type and render the module.

        Returns:
            str: TypeScript source

        Raises:
            TypeNotFoundError: If a referenced type is missing from the metadata table.
        """
        resolver = TypeGraphResolver(self.table)
        for operation in self.operations:
            for parameter in operation.parameters:
                resolver.resolve(get_referenced_type_name(parameter))

        log.debug(f"Resolved {len(resolver.declarations)} input type declarations")

        module = TsModule(
            namespace=self.namespace,
            documents_import=self.documents_import,
            declarations=[self._build_declaration(declaration) for declaration in resolver.declarations],
            operations=[self._build_operation(operation) for operation in self.operations],
        )

        template = self.env.get_template("operation_metadata.ts.j2")
        return template.render(module=module)

    def _type_reference(self, kind: str, type_name: str) -> str:
        """Scalars are referenced by name, enums and objects by their namespace declaration."""
        if kind == "scalar":
            return ts_string(type_name)
        return f"{self.namespace}.{type_name}"

    def _build_declaration(self, declaration: TypeDeclaration) -> TsEnumDeclaration | TsObjectDeclaration:
        if isinstance(declaration, EnumTypeMetadata):
            return TsEnumDeclaration(
                name=declaration.type, values=declaration.values, description=declaration.description
            )
        return TsObjectDeclaration(
            name=declaration.type,
            fields=[self._build_field(field) for field in declaration.fields],
            description=declaration.description,
        )

    def _build_field(self, field: FieldMetadata) -> TsField:
        validation = self._build_validation(field.validation or [])

        if isinstance(field, ListFieldMetadata):
            item_kind = self.table.item_kind(field)
            return TsField(
                name=field.name,
                kind=field.kind,
                item_kind=item_kind,
                type_ref=self._type_reference(item_kind, field.type),
                required=field.required,
                allows_empty=field.allows_empty,
                validation=validation,
            )

        return TsField(
            name=field.name,
            kind=field.kind,
            type_ref=self._type_reference(field.kind, field.type),
            required=field.required,
            validation=validation,
        )

    def _build_validation(self, rules: list[ValidationRule]) -> list[TsValidationRule]:
        return [
            TsValidationRule(
                type=rule.type,
                constraints=[ts_json(constraint) for constraint in rule.constraints or []],
                each=bool(rule.each),
                context=None if rule.context is None else ts_json(rule.context),
                options=None if rule.options is None else ts_json(rule.options),
            )
            for rule in rules
        ]

    def _build_operation(self, operation: OperationDescriptor) -> TsOperation:
        return TsOperation(
            name=operation.name,
            operation_type=operation.operation_type,
            document=operation.document,
            parameters=[self._build_parameter(parameter) for parameter in operation.parameters],
        )

    def _build_parameter(self, parameter: ParameterDescriptor) -> TsParameter:
        if isinstance(parameter, ListParameter):
            return TsParameter(
                parameter=parameter.name,
                required=parameter.required,
                kind=parameter.kind,
                item_kind=parameter.item_kind,
                type_ref=self._type_reference(parameter.item_kind, parameter.item_type_name),
                allows_empty=parameter.allows_empty,
            )

        return TsParameter(
            parameter=parameter.name,
            required=parameter.required,
            kind=parameter.kind,
            type_ref=self._type_reference(parameter.kind, parameter.type_name),
        )
