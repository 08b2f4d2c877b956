import glob
import json
from collections.abc import Mapping, Sequence
from itertools import takewhile
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from opmeta import log
from opmeta.errors import ConfigurationError, ErrorMessages, InvalidMetadataError
from opmeta.metadata.models import InputTypeMetadata, SchemaMetadata
from opmeta.metadata.table import TypeMetadataTable

YAML_SUFFIXES = {".yaml", ".yml"}
IGNORED_DIRECTORIES = {"node_modules"}


def resolve_metadata_files(patterns: Sequence[str], root: Path | None = None) -> list[Path]:
    """Expand glob patterns into an ordered list of unique metadata files.

    Matches of each pattern are sorted; patterns keep their given order so that
    later patterns can override earlier ones when merged.

    Args:
        patterns: Glob patterns, relative to ``root`` unless absolute. ``**`` matches recursively.
        root: Base directory for relative patterns (default: current working directory)

    Returns:
        List of metadata file paths

    Raises:
        ConfigurationError: If no pattern is given.
    """
    if not patterns:
        raise ConfigurationError(ErrorMessages.NO_METADATA)

    base = root or Path.cwd()
    resolved: dict[Path, None] = {}

    for pattern in patterns:
        matches = sorted(glob.glob(pattern, root_dir=base, recursive=True))
        files = [base / match for match in matches if not _is_ignored(pattern, match) and (base / match).is_file()]
        if not files:
            log.warning(f"Metadata pattern '{pattern}' did not match any file")
        for file in files:
            resolved.setdefault(file, None)

    return list(resolved)


def _is_ignored(pattern: str, match: str) -> bool:
    """Whether a match lies in an ignored directory below the literal prefix of its pattern."""
    literal_parts = list(takewhile(lambda part: not glob.has_magic(part), Path(pattern).parts))
    return not IGNORED_DIRECTORIES.isdisjoint(Path(match).parts[len(literal_parts) :])


def _read_metadata_document(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as f:
        if path.suffix in YAML_SUFFIXES:
            return yaml.safe_load(f)
        return json.load(f)


def load_metadata_file(path: Path) -> dict[str, InputTypeMetadata]:
    """
    Load the input-type declarations of one metadata file.

    Args:
        path: JSON or YAML metadata file

    Returns:
        Mapping of type name to its metadata, in file order

    Raises:
        InvalidMetadataError: If the file cannot be parsed or does not match the metadata shape.
    """
    try:
        raw = _read_metadata_document(path)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise InvalidMetadataError(f"Cannot read metadata file {path}: {e}") from e

    # An empty file declares nothing
    if raw is None:
        return {}

    try:
        metadata = SchemaMetadata.model_validate(raw)
    except ValidationError as e:
        raise InvalidMetadataError(f"Invalid metadata file {path}: {e}") from e

    log.debug(f"Loaded {len(metadata.types.input)} input types from {path}")
    return dict(metadata.types.input)


def load_metadata(
    patterns: Sequence[str],
    root: Path | None = None,
    base: Mapping[str, InputTypeMetadata] | None = None,
) -> TypeMetadataTable:
    """
    Build the type metadata table from every file matched by ``patterns``.

    Args:
        patterns: Glob patterns of metadata files
        root: Base directory for relative patterns
        base: Declarations the files are merged on top of (e.g. extracted from a schema)

    Returns:
        The merged, read-only table
    """
    files = resolve_metadata_files(patterns, root)
    sources: list[Mapping[str, InputTypeMetadata]] = [base or {}]
    sources.extend(load_metadata_file(file) for file in files)

    table = TypeMetadataTable.merge(sources)
    log.info(f"Loaded {len(table)} input types from {len(files)} metadata file(s)")
    return table
