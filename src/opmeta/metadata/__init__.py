"""Input-type metadata: models, the lookup table, loading and type graph resolution."""

from collections.abc import Mapping, Sequence
from pathlib import Path

from opmeta.errors import ConfigurationError, ErrorMessages
from opmeta.metadata.loader import load_metadata
from opmeta.metadata.models import InputTypeMetadata
from opmeta.metadata.resolver import TypeGraphResolver
from opmeta.metadata.table import TypeMetadataTable


def build_metadata_table(
    patterns: Sequence[str],
    schema_types: Mapping[str, InputTypeMetadata] | None = None,
    root: Path | None = None,
) -> TypeMetadataTable:
    """
    Build the table of one run from schema-extracted types and metadata files.

    Metadata files are merged on top of the schema-extracted types, so hand-written
    declarations (e.g. with validation rules) win over extracted ones.

    Raises:
        ConfigurationError: If neither patterns nor schema types are given.
    """
    if not patterns:
        if not schema_types:
            raise ConfigurationError(ErrorMessages.NO_METADATA)
        return TypeMetadataTable(schema_types)
    return load_metadata(patterns, root, base=schema_types)


__all__ = ["TypeGraphResolver", "TypeMetadataTable", "build_metadata_table", "load_metadata"]
