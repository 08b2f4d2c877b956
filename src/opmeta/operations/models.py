from dataclasses import dataclass
from typing import ClassVar, Literal

from opmeta.metadata.models import TypeKind

OperationKind = Literal["query", "mutation", "subscription"]


@dataclass(frozen=True, kw_only=True)
class BaseParameter:
    name: str
    required: bool
    directives: tuple[str, ...] = ()


@dataclass(frozen=True, kw_only=True)
class ScalarParameter(BaseParameter):
    kind: ClassVar[Literal["scalar"]] = "scalar"
    type_name: str


@dataclass(frozen=True, kw_only=True)
class EnumParameter(BaseParameter):
    kind: ClassVar[Literal["enum"]] = "enum"
    type_name: str


@dataclass(frozen=True, kw_only=True)
class ObjectParameter(BaseParameter):
    kind: ClassVar[Literal["object"]] = "object"
    type_name: str


@dataclass(frozen=True, kw_only=True)
class ListParameter(BaseParameter):
    """A list variable.

    ``items_required`` is True when the item type is declared non-null
    (``[Item!]``). The generated ``allowsEmpty`` flag is its negation, which is
    how the descriptors have always been emitted.
    """

    kind: ClassVar[Literal["list"]] = "list"
    item_type_name: str
    item_kind: TypeKind
    items_required: bool = False

    @property
    def allows_empty(self) -> bool:
        return not self.items_required


ParameterDescriptor = ScalarParameter | EnumParameter | ObjectParameter | ListParameter


def get_referenced_type_name(parameter: ParameterDescriptor) -> str:
    """Name of the input type a parameter references (the item type for lists)."""
    if isinstance(parameter, ListParameter):
        return parameter.item_type_name
    return parameter.type_name


@dataclass(frozen=True)
class OperationDescriptor:
    name: str
    operation_type: OperationKind
    document: str
    parameters: tuple[ParameterDescriptor, ...]
