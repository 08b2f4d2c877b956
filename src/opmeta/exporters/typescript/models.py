"""Pydantic models of the rendered TypeScript module.

String-valued members such as ``type_ref``, ``constraints``, ``context`` and
``options`` already hold TypeScript source (literals or references).
"""

from typing import Literal

from pydantic import BaseModel, Field


class TsValidationRule(BaseModel):
    type: str
    constraints: list[str] = Field(default_factory=list)
    each: bool = False
    context: str | None = None
    options: str | None = None


class TsField(BaseModel):
    name: str
    kind: str
    type_ref: str
    required: bool
    item_kind: str | None = None
    allows_empty: bool | None = None
    validation: list[TsValidationRule] = Field(default_factory=list)


class TsEnumDeclaration(BaseModel):
    kind: Literal["enum"] = "enum"
    name: str
    values: list[str]
    description: str | None = None


class TsObjectDeclaration(BaseModel):
    kind: Literal["object"] = "object"
    name: str
    fields: list[TsField]
    description: str | None = None


class TsParameter(BaseModel):
    parameter: str
    required: bool
    kind: str
    type_ref: str
    item_kind: str | None = None
    allows_empty: bool | None = None


class TsOperation(BaseModel):
    name: str
    operation_type: str
    document: str
    parameters: list[TsParameter]


class TsModule(BaseModel):
    """Everything one generated file contains."""

    namespace: str
    documents_import: str | None = None
    declarations: list[TsEnumDeclaration | TsObjectDeclaration] = Field(default_factory=list)
    operations: list[TsOperation] = Field(default_factory=list)
