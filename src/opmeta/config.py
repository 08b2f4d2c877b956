import re
from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from opmeta import log

TYPESCRIPT_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
IDENTIFIER_PART = re.compile(r"^[A-Za-z0-9_$]*$")


class GeneratorConfig(BaseModel):
    """Options of a generation run, read from YAML; command line options override them."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    metadata: list[str] = Field(default_factory=list)
    namespace: str = "GraphQLInputTypes"
    document_suffix: str = Field("Document", alias="documentSuffix")
    documents_import: str | None = Field(None, alias="documentsImport")

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, namespace: str) -> str:
        if not TYPESCRIPT_IDENTIFIER.match(namespace):
            raise ValueError(f"Namespace '{namespace}' is not a valid TypeScript identifier")
        return namespace

    @field_validator("document_suffix")
    @classmethod
    def validate_document_suffix(cls, document_suffix: str) -> str:
        if not IDENTIFIER_PART.match(document_suffix):
            raise ValueError(f"Document suffix '{document_suffix}' must only contain identifier characters")
        return document_suffix


def load_generator_config(config_path: Path | None) -> GeneratorConfig:
    """
    Load and validate a generator configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file, or None for defaults.

    Returns:
        A validated GeneratorConfig.

    Raises:
        OSError: If the file cannot be read.
        yaml.YAMLError: If the file is not valid YAML.
        TypeError: If the YAML root is not a mapping.
        ValidationError: If validation against GeneratorConfig fails.
    """
    if config_path is None:
        log.debug("No generator config provided")
        return GeneratorConfig()

    raw: Any
    with config_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    log.debug(f"Loaded generator config from {config_path}")

    if raw is None:
        return GeneratorConfig()

    if not isinstance(raw, dict):
        raise TypeError(f"Generator config root must be a mapping (YAML object), got {type(raw).__name__}")

    return GeneratorConfig.model_validate(cast(dict[str, Any], raw))
