import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import rich_click as click
from ariadne.exceptions import GraphQLFileSyntaxError
from graphql import GraphQLError
from pydantic import ValidationError
from rich.traceback import install

from opmeta import __version__, log
from opmeta.config import GeneratorConfig, load_generator_config
from opmeta.errors import OperationMetadataError
from opmeta.exporters.typescript import translate_to_typescript
from opmeta.metadata import TypeMetadataTable, build_metadata_table
from opmeta.metadata.models import InputTypeMetadata
from opmeta.metadata.schema import dump_metadata, extract_input_metadata
from opmeta.utils.graphql_type import is_builtin_scalar_type
from opmeta.utils.schema_loader import load_documents, load_schema, resolve_graphql_files

GENERATION_ERRORS = (OperationMetadataError, GraphQLError, GraphQLFileSyntaxError)


class PathResolverOption(click.Option):
    def process_value(self, ctx: click.Context, value: Any) -> list[Path] | None:
        value = super().process_value(ctx, value)
        if not value:
            return None
        paths = set(value)
        return resolve_graphql_files(list(paths))


def schema_option(required: bool = False) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    return click.option(
        "--schema",
        "-s",
        "schemas",
        type=click.Path(exists=True, path_type=Path),
        cls=PathResolverOption,
        required=required,
        multiple=True,
        help="The GraphQL schema file or directory containing schema files. Can be specified multiple times.",
    )


documents_option = click.option(
    "--documents",
    "-d",
    type=click.Path(exists=True, path_type=Path),
    cls=PathResolverOption,
    required=True,
    multiple=True,
    help="GraphQL operation document file or directory. Can be specified multiple times.",
)


metadata_option = click.option(
    "--metadata",
    "-m",
    type=str,
    multiple=True,
    help="Glob pattern of JSON/YAML input type metadata files. Later files override earlier ones.",
)


output_option = click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    required=True,
    help="Output file",
)


config_option = click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file containing generator configuration",
)


def build_table(metadata: list[str], schemas: list[Path] | None, root: Path | None = None) -> TypeMetadataTable:
    """Merge schema-extracted input types with the metadata files of the given patterns."""
    schema_types: dict[str, InputTypeMetadata] | None = None
    if schemas:
        schema_types = extract_input_metadata(load_schema(schemas))
    return build_metadata_table(metadata, schema_types, root)


def resolve_generator_config(
    config: Path | None, metadata: tuple[str, ...], overrides: dict[str, Any]
) -> tuple[GeneratorConfig, Path | None]:
    """
    Load the config file and apply command line overrides.

    Returns:
        The effective config and the directory relative metadata patterns are resolved against
        (the config file's directory when its patterns are used, the working directory otherwise).
    """
    try:
        file_config = load_generator_config(config)
        values = file_config.model_dump()
        values.update({key: value for key, value in overrides.items() if value is not None})
        if metadata:
            values["metadata"] = list(metadata)
        generator_config = GeneratorConfig.model_validate(values)
    except (ValidationError, TypeError) as e:
        raise click.ClickException(f"Invalid generator configuration: {e}") from e

    metadata_root = config.parent if config and not metadata else None
    return generator_config, metadata_root


@click.group(context_settings={"auto_envvar_prefix": "opmeta"})
@click.option(
    "-l",
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default="INFO",
    help="Log level",
    show_default=True,
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Log file",
)
@click.version_option(__version__)
def cli(log_level: str, log_file: Path | None) -> None:
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w")
        file_handler.setFormatter(logging.Formatter("%(asctime)s:%(levelname)s:%(message)s"))
        log.addHandler(file_handler)

    log.setLevel(log_level.upper())
    if log_level.upper() == "DEBUG":
        _ = install(show_locals=True)


@click.group()
def generate() -> None:
    """Generate code from operation documents and input type metadata."""
    pass


@click.group()
def extract() -> None:
    """Extract metadata from GraphQL schemas."""
    pass


@click.group()
def stats() -> None:
    """Stats commands."""
    pass


# Generate -> typescript
# ----------
@generate.command
@documents_option
@metadata_option
@schema_option()
@config_option
@click.option(
    "--namespace",
    "-n",
    type=str,
    help="Name of the TypeScript namespace holding the input type declarations [default: GraphQLInputTypes]",
)
@click.option(
    "--documents-import",
    type=str,
    help="Module to import the compiled operation documents from",
)
@output_option
def typescript(
    documents: list[Path],
    metadata: tuple[str, ...],
    schemas: list[Path] | None,
    config: Path | None,
    namespace: str | None,
    documents_import: str | None,
    output: Path,
) -> None:
    """Generate TypeScript operation metadata from GraphQL operation documents."""
    generator_config, metadata_root = resolve_generator_config(
        config, metadata, {"namespace": namespace, "documents_import": documents_import}
    )

    try:
        table = build_table(generator_config.metadata, schemas, metadata_root)
        result = translate_to_typescript(load_documents(documents), table, generator_config)
    except GENERATION_ERRORS as e:
        log.error(f"Generation failed: {e}")
        raise click.ClickException(f"Operation metadata generation failed: {e}") from e

    output.parent.mkdir(parents=True, exist_ok=True)
    _ = output.write_text(result)
    log.success(f"Operation metadata written to {output}")
    if not generator_config.documents_import:
        log.hint("Use --documents-import to import the operation documents in the generated module")


# Extract -> metadata
# ----------
@extract.command(name="metadata")
@schema_option(required=True)
@output_option
def extract_metadata(schemas: list[Path], output: Path) -> None:
    """Extract input type metadata from a GraphQL schema into a JSON metadata file."""
    try:
        types = extract_input_metadata(load_schema(schemas))
    except GENERATION_ERRORS as e:
        log.error(f"Extraction failed: {e}")
        raise click.ClickException(f"Metadata extraction failed: {e}") from e

    output.parent.mkdir(parents=True, exist_ok=True)
    _ = output.write_text(dump_metadata(types))
    log.success(f"Metadata for {len(types)} input types written to {output}")


# Stats -> metadata
# ----------
@stats.command(name="metadata")
@metadata_option
@schema_option()
def stats_metadata(metadata: tuple[str, ...], schemas: list[Path] | None) -> None:
    """Get type counts of the merged input type metadata."""
    try:
        table = build_table(list(metadata), schemas)
    except GENERATION_ERRORS as e:
        log.error(f"Loading metadata failed: {e}")
        raise click.ClickException(f"Loading metadata failed: {e}") from e

    type_counts: dict[str, Any] = table.count_by_kind()
    type_counts["custom_scalars"] = sorted(
        name
        for name, type_metadata in table.items()
        if type_metadata.kind == "scalar" and not is_builtin_scalar_type(name)
    )

    log.rule("Input Type Metadata Counts")
    log.print_dict(type_counts)
    log.key_value("Total", len(table))


cli.add_command(generate)
cli.add_command(extract)
cli.add_command(stats)

if __name__ == "__main__":
    cli()
