from collections.abc import Callable
from pathlib import Path
from typing import Any, cast

import pytest
from ariadne import gql
from faker import Faker
from graphql import DocumentNode, OperationDefinitionNode, parse
from hypothesis import strategies as st
from hypothesis.strategies import composite

from opmeta.metadata.models import SchemaMetadata
from opmeta.metadata.table import TypeMetadataTable


class SampleData:
    TESTS_DATA_DIR: Path = Path(__file__).parent / "data"
    METADATA_DIR: Path = TESTS_DATA_DIR / "metadata"
    COMMON_METADATA: Path = METADATA_DIR / "common.json"
    SEARCH_METADATA: Path = METADATA_DIR / "search.json"
    STATUS_OVERRIDE: Path = METADATA_DIR / "overrides" / "status.yaml"
    DOCUMENTS_DIR: Path = TESTS_DATA_DIR / "documents"
    SCHEMA: Path = TESTS_DATA_DIR / "schema" / "schema.graphql"
    CONFIG: Path = TESTS_DATA_DIR / "config.yaml"


def build_table(types: dict[str, dict[str, Any]]) -> TypeMetadataTable:
    """Build a table from raw metadata, keyed by type name, validated like a metadata file."""
    metadata = SchemaMetadata.model_validate({"types": {"input": types}})
    return TypeMetadataTable(metadata.types.input)


def scalar(name: str) -> dict[str, Any]:
    return {"kind": "scalar", "type": name}


def enum(name: str, *values: str) -> dict[str, Any]:
    return {"kind": "enum", "type": name, "values": list(values)}


def obj(name: str, *fields: dict[str, Any]) -> dict[str, Any]:
    return {"kind": "object", "type": name, "fields": list(fields)}


def field(name: str, kind: str, type_name: str, required: bool = False, **extra: Any) -> dict[str, Any]:
    return {"name": name, "kind": kind, "type": type_name, "required": required, **extra}


def parse_operation(source: str) -> OperationDefinitionNode:
    """Parse a document holding a single operation."""
    return cast(OperationDefinitionNode, parse(gql(source)).definitions[0])


def parse_documents(*sources: str) -> list[DocumentNode]:
    return [parse(gql(source)) for source in sources]


@pytest.fixture
def search_table() -> TypeMetadataTable:
    """Table of a small search API: an object with an enum field, a list field and a nested object."""
    return build_table(
        {
            "String": scalar("String"),
            "ID": scalar("ID"),
            "Int": scalar("Int"),
            "Status": enum("Status", "ACTIVE", "INACTIVE"),
            "Filter": obj(
                "Filter",
                field("status", "enum", "Status", required=True),
                field("query", "scalar", "String"),
                field("tags", "list", "TagInput"),
                field("page", "object", "Page"),
            ),
            "Page": obj("Page", field("size", "scalar", "Int", required=True)),
            "TagInput": obj(
                "TagInput",
                field("name", "scalar", "String", required=True),
                field("parent", "object", "TagInput"),
            ),
        }
    )


@composite
def type_graph_strategy(
    draw: Callable[[st.SearchStrategy[Any]], Any],
) -> tuple[TypeMetadataTable, list[str]]:
    """Generate a random graph of object input types, possibly with shared types and cycles."""
    faker = Faker()
    faker.seed_instance(draw(st.integers(min_value=0, max_value=10_000)))

    num_objects = draw(st.integers(min_value=1, max_value=6))
    object_names = [f"{faker.unique.word().capitalize()}Input" for _ in range(num_objects)]
    referable = [*object_names, "Color", "String"]

    types: dict[str, dict[str, Any]] = {
        "String": scalar("String"),
        "Color": enum("Color", "RED", "GREEN"),
    }
    for name in object_names:
        references = draw(st.lists(st.sampled_from(referable), max_size=4))
        fields = []
        for index, referenced in enumerate(references):
            kind = "scalar" if referenced == "String" else "enum" if referenced == "Color" else "object"
            if draw(st.booleans()):
                fields.append(field(f"items{index}", "list", referenced))
            else:
                fields.append(field(f"field{index}", kind, referenced))
        types[name] = obj(name, *fields)

    return build_table(types), object_names
