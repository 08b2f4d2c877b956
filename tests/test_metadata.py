import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from opmeta.errors import ConfigurationError, InvalidMetadataError, TypeNotFoundError
from opmeta.metadata import build_metadata_table, load_metadata
from opmeta.metadata.loader import load_metadata_file, resolve_metadata_files
from opmeta.metadata.models import (
    EnumTypeMetadata,
    ListFieldMetadata,
    ObjectTypeMetadata,
    ScalarTypeMetadata,
    SchemaMetadata,
)
from opmeta.metadata.table import TypeMetadataTable
from tests.conftest import SampleData, build_table, enum, field, obj, scalar


def write_metadata(path: Path, types: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"types": {"input": types}}))
    return path


class TestMetadataModels:
    def test_kinds_are_discriminated(self) -> None:
        metadata = SchemaMetadata.model_validate(
            {
                "types": {
                    "input": {
                        "ID": scalar("ID"),
                        "Color": enum("Color", "RED"),
                        "Input": obj("Input", field("colors", "list", "Color")),
                    }
                }
            }
        )

        assert isinstance(metadata.types.input["ID"], ScalarTypeMetadata)
        assert isinstance(metadata.types.input["Color"], EnumTypeMetadata)
        assert isinstance(metadata.types.input["Input"], ObjectTypeMetadata)

    def test_list_field_defaults(self) -> None:
        table = build_table({"Input": obj("Input", field("ids", "list", "ID"))})
        list_field = table["Input"].fields[0]  # type: ignore[union-attr]

        assert isinstance(list_field, ListFieldMetadata)
        assert list_field.item_kind is None
        assert list_field.allows_empty is True
        assert list_field.required is False

    def test_list_field_aliases(self) -> None:
        table = build_table({"Input": obj("Input", field("ids", "list", "ID", itemKind="scalar", allowsEmpty=False))})
        list_field = table["Input"].fields[0]  # type: ignore[union-attr]

        assert isinstance(list_field, ListFieldMetadata)
        assert list_field.item_kind == "scalar"
        assert list_field.allows_empty is False

    @pytest.mark.parametrize(
        "types",
        [
            {"Bad": {"kind": "interface", "type": "Bad"}},
            {"Empty": enum("Empty")},
            {"Input": obj("Input", field("x", "union", "X"))},
            {"Alias": scalar("Other")},
        ],
        ids=["unknown-type-kind", "enum-without-values", "unknown-field-kind", "key-mismatch"],
    )
    def test_invalid_metadata(self, types: dict) -> None:
        with pytest.raises(ValidationError):
            SchemaMetadata.model_validate({"types": {"input": types}})

    def test_unrelated_keys_are_ignored(self) -> None:
        metadata = SchemaMetadata.model_validate({"version": 2, "types": {"output": {}, "input": {"ID": scalar("ID")}}})

        assert list(metadata.types.input) == ["ID"]


class TestMetadataLoading:
    def test_later_files_override_earlier_ones(self) -> None:
        table = load_metadata(
            [str(SampleData.COMMON_METADATA), str(SampleData.SEARCH_METADATA), str(SampleData.STATUS_OVERRIDE)]
        )

        status = table.lookup("Status")
        assert isinstance(status, EnumTypeMetadata)
        assert status.values == ["ACTIVE", "INACTIVE", "ARCHIVED"]
        assert status.description == "Lifecycle status"
        assert "Filter" in table
        assert "SortOrder" in table

    def test_override_order_follows_patterns(self) -> None:
        table = load_metadata([str(SampleData.STATUS_OVERRIDE), str(SampleData.COMMON_METADATA)])

        status = table.lookup("Status")
        assert isinstance(status, EnumTypeMetadata)
        assert status.values == ["ACTIVE", "INACTIVE"]

    def test_relative_patterns_resolve_against_root(self) -> None:
        files = resolve_metadata_files(["**/*.yaml", "*.json"], root=SampleData.METADATA_DIR)

        assert files == [SampleData.STATUS_OVERRIDE, SampleData.COMMON_METADATA, SampleData.SEARCH_METADATA]

    def test_files_are_deduplicated(self) -> None:
        files = resolve_metadata_files(["*.json", "common.json"], root=SampleData.METADATA_DIR)

        assert files == [SampleData.COMMON_METADATA, SampleData.SEARCH_METADATA]

    def test_node_modules_are_ignored(self, tmp_path: Path) -> None:
        kept = write_metadata(tmp_path / "types" / "a.json", {"ID": scalar("ID")})
        write_metadata(tmp_path / "node_modules" / "pkg" / "b.json", {"Int": scalar("Int")})

        assert resolve_metadata_files(["**/*.json"], root=tmp_path) == [kept]

    def test_project_inside_node_modules(self, tmp_path: Path) -> None:
        root = tmp_path / "node_modules" / "app"
        kept = write_metadata(root / "metadata" / "a.json", {"ID": scalar("ID")})
        write_metadata(root / "metadata" / "node_modules" / "b.json", {"Int": scalar("Int")})

        assert resolve_metadata_files(["metadata/**/*.json"], root=root) == [kept]
        assert resolve_metadata_files([str(root / "metadata" / "**" / "*.json")]) == [kept]

    def test_no_patterns(self) -> None:
        with pytest.raises(ConfigurationError, match="metadata option is required"):
            resolve_metadata_files([])

    def test_unmatched_pattern_loads_nothing(self, tmp_path: Path) -> None:
        assert len(load_metadata(["*.json"], root=tmp_path)) == 0

    def test_empty_file_declares_nothing(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty.yaml"
        empty.write_text("")

        assert load_metadata_file(empty) == {}

    def test_malformed_file(self, tmp_path: Path) -> None:
        broken = tmp_path / "broken.json"
        broken.write_text("{ not json")

        with pytest.raises(InvalidMetadataError, match="Cannot read metadata file"):
            load_metadata_file(broken)

    def test_undecodable_file(self, tmp_path: Path) -> None:
        undecodable = tmp_path / "latin1.json"
        undecodable.write_bytes(b"{\"types\": \xff}")

        with pytest.raises(InvalidMetadataError, match="Cannot read metadata file"):
            load_metadata_file(undecodable)

    def test_invalid_shape(self, tmp_path: Path) -> None:
        invalid = write_metadata(tmp_path / "invalid.json", {"Color": {"kind": "enum", "type": "Color"}})

        with pytest.raises(InvalidMetadataError, match="Invalid metadata file"):
            load_metadata_file(invalid)


class TestTypeMetadataTable:
    def test_lookup(self, search_table: TypeMetadataTable) -> None:
        assert search_table.lookup("Status").kind == "enum"

    def test_lookup_missing_type(self, search_table: TypeMetadataTable) -> None:
        with pytest.raises(TypeNotFoundError, match="Type Missing not found in schema metadata") as exc_info:
            search_table.lookup("Missing")
        assert exc_info.value.type_name == "Missing"
        assert isinstance(exc_info.value, ValueError)

    def test_table_is_read_only(self, search_table: TypeMetadataTable) -> None:
        with pytest.raises(TypeError):
            search_table["Extra"] = ScalarTypeMetadata(type="Extra")  # type: ignore[index]

    def test_merge_is_shallow(self) -> None:
        first = {"Color": EnumTypeMetadata(type="Color", values=["RED"]), "ID": ScalarTypeMetadata(type="ID")}
        second = {"Color": EnumTypeMetadata(type="Color", values=["BLUE"])}

        table = TypeMetadataTable.merge([first, second])

        assert list(table) == ["Color", "ID"]
        assert table.lookup("Color").values == ["BLUE"]  # type: ignore[union-attr]

    def test_item_kind(self, search_table: TypeMetadataTable) -> None:
        declared = ListFieldMetadata(name="ids", type="Undeclared", item_kind="scalar")
        looked_up = ListFieldMetadata(name="tags", type="TagInput")

        assert search_table.item_kind(declared) == "scalar"
        assert search_table.item_kind(looked_up) == "object"

    def test_count_by_kind(self, search_table: TypeMetadataTable) -> None:
        assert search_table.count_by_kind() == {"scalar": 3, "enum": 1, "object": 3}


class TestBuildMetadataTable:
    def test_no_sources(self) -> None:
        with pytest.raises(ConfigurationError):
            build_metadata_table([])

    def test_schema_types_only(self) -> None:
        table = build_metadata_table([], {"ID": ScalarTypeMetadata(type="ID")})

        assert list(table) == ["ID"]

    def test_files_override_schema_types(self) -> None:
        schema_types = {
            "Status": EnumTypeMetadata(type="Status", values=["ACTIVE"]),
            "Float": ScalarTypeMetadata(type="Float"),
        }

        table = build_metadata_table([str(SampleData.COMMON_METADATA)], schema_types)

        assert table.lookup("Status").values == ["ACTIVE", "INACTIVE"]  # type: ignore[union-attr]
        assert "Float" in table
