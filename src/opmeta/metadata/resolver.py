from opmeta import log
from opmeta.errors import ErrorMessages, InvalidMetadataError
from opmeta.metadata.models import (
    EnumTypeMetadata,
    FieldMetadata,
    ListFieldMetadata,
    ObjectTypeMetadata,
)
from opmeta.metadata.table import TypeMetadataTable

TypeDeclaration = EnumTypeMetadata | ObjectTypeMetadata


class TypeGraphResolver:
    """
    Collects the declarations of input types and everything they reference.

    The registry of visited names is write-once: a name is registered before the
    resolver recurses into its fields, so shared types and reference cycles are
    visited exactly once. Declarations are recorded in depth-first post-order,
    which places every referenced type before the types that reference it
    (except along the back edge of a cycle).
    """

    def __init__(self, table: TypeMetadataTable):
        self.table = table
        self._registry: set[str] = set()
        self._declarations: dict[str, TypeDeclaration] = {}

    def __contains__(self, type_name: str) -> bool:
        return type_name in self._registry

    @property
    def declarations(self) -> list[TypeDeclaration]:
        """Enum and object declarations in dependency order."""
        return list(self._declarations.values())

    def resolve(self, type_name: str) -> None:
        """
        Register ``type_name`` and, recursively, every type it references.

        Args:
            type_name: Name of an input type in the table

        Raises:
            TypeNotFoundError: If this type or any type it references is missing from the table.
            InvalidMetadataError: If a field kind disagrees with the kind of the type it references.
        """
        if type_name in self._registry:
            return

        type_metadata = self.table.lookup(type_name)
        self._registry.add(type_name)

        if isinstance(type_metadata, ObjectTypeMetadata):
            for field in type_metadata.fields:
                referenced_type = self._get_referenced_type(type_name, field)
                if referenced_type:
                    self.resolve(referenced_type)

        if isinstance(type_metadata, EnumTypeMetadata | ObjectTypeMetadata):
            log.debug(f"Declaring {type_metadata.kind} type {type_name}")
            self._declarations[type_name] = type_metadata

    def _get_referenced_type(self, type_name: str, field: FieldMetadata) -> str | None:
        """
        Name of the type a field needs declared, None for scalar and scalar-item fields.

        Raises:
            InvalidMetadataError: If the field declares an enum or object kind the referenced type does not have.
        """
        kind = self.table.item_kind(field) if isinstance(field, ListFieldMetadata) else field.kind
        if kind == "scalar":
            return None

        actual = self.table.lookup(field.type).kind
        if actual != kind:
            raise InvalidMetadataError(
                ErrorMessages.FIELD_KIND_MISMATCH.format(
                    type_name=type_name, field_name=field.name, kind=kind, field_type=field.type, actual=actual
                )
            )
        return field.type
