"""Pydantic models for input-type metadata files.

A metadata file has the shape ``{"types": {"input": {<name>: <type metadata>}}}``.
Type and field metadata are tagged unions discriminated by ``kind``.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

TypeKind = Literal["scalar", "enum", "object"]


class ValidationRule(BaseModel):
    """Inert validation metadata of a field, reproduced verbatim in generated code."""

    type: str
    constraints: list[Any] | None = None
    each: bool | None = None
    context: Any = None
    options: Any = None


class BaseFieldMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    required: bool = False
    validation: list[ValidationRule] | None = None


class ScalarFieldMetadata(BaseFieldMetadata):
    kind: Literal["scalar"] = "scalar"
    type: str


class EnumFieldMetadata(BaseFieldMetadata):
    kind: Literal["enum"] = "enum"
    type: str


class ObjectFieldMetadata(BaseFieldMetadata):
    kind: Literal["object"] = "object"
    type: str


class ListFieldMetadata(BaseFieldMetadata):
    """A list field; ``type`` names the item type."""

    kind: Literal["list"] = "list"
    type: str
    item_kind: TypeKind | None = Field(None, alias="itemKind")
    allows_empty: bool = Field(True, alias="allowsEmpty")


FieldMetadata = Annotated[
    ScalarFieldMetadata | EnumFieldMetadata | ObjectFieldMetadata | ListFieldMetadata,
    Field(discriminator="kind"),
]


class BaseInputTypeMetadata(BaseModel):
    type: str
    description: str | None = None


class ScalarTypeMetadata(BaseInputTypeMetadata):
    kind: Literal["scalar"] = "scalar"


class EnumTypeMetadata(BaseInputTypeMetadata):
    kind: Literal["enum"] = "enum"
    values: list[str] = Field(min_length=1)


class ObjectTypeMetadata(BaseInputTypeMetadata):
    kind: Literal["object"] = "object"
    fields: list[FieldMetadata] = Field(default_factory=list)


InputTypeMetadata = Annotated[
    ScalarTypeMetadata | EnumTypeMetadata | ObjectTypeMetadata,
    Field(discriminator="kind"),
]


class InputTypes(BaseModel):
    input: dict[str, InputTypeMetadata] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_keys_match_type_names(self) -> "InputTypes":
        for key, type_metadata in self.input.items():
            if key != type_metadata.type:
                raise ValueError(f"Input type stored under '{key}' declares the name '{type_metadata.type}'")
        return self


class SchemaMetadata(BaseModel):
    """Root of a metadata file. Keys other than ``types.input`` are ignored."""

    types: InputTypes = Field(default_factory=InputTypes)
