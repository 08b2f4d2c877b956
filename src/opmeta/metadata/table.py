from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from opmeta.errors import TypeNotFoundError
from opmeta.metadata.models import InputTypeMetadata, ListFieldMetadata, TypeKind


class TypeMetadataTable(Mapping[str, InputTypeMetadata]):
    """Read-only lookup of input-type metadata by type name.

    The table is built once per generation run and passed explicitly to every
    component that needs it.
    """

    def __init__(self, types: Mapping[str, InputTypeMetadata] | None = None) -> None:
        self._types: Mapping[str, InputTypeMetadata] = MappingProxyType(dict(types or {}))

    @classmethod
    def merge(cls, sources: Iterable[Mapping[str, InputTypeMetadata]]) -> "TypeMetadataTable":
        """Shallow-merge sources in order; later sources override earlier ones on name collision."""
        merged: dict[str, InputTypeMetadata] = {}
        for source in sources:
            merged.update(source)
        return cls(merged)

    def __getitem__(self, type_name: str) -> InputTypeMetadata:
        return self._types[type_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def lookup(self, type_name: str) -> InputTypeMetadata:
        """Return the metadata of ``type_name`` or raise TypeNotFoundError."""
        try:
            return self._types[type_name]
        except KeyError:
            raise TypeNotFoundError(type_name) from None

    def item_kind(self, field: ListFieldMetadata) -> TypeKind:
        """Kind of a list field's items, taken from the field or looked up from the item type."""
        if field.item_kind is not None:
            return field.item_kind
        return self.lookup(field.type).kind

    def count_by_kind(self) -> dict[str, int]:
        counts = {"scalar": 0, "enum": 0, "object": 0}
        for type_metadata in self._types.values():
            counts[type_metadata.kind] += 1
        return counts
