from pathlib import Path

from ariadne import load_schema_from_path
from graphql import DocumentNode, GraphQLSchema, build_schema, parse

from opmeta import log
from opmeta.utils.graphql_type import GRAPHQL_FILE_SUFFIXES


def resolve_graphql_files(paths: list[Path]) -> list[Path]:
    """Resolve a list of paths (files and directories) into a flat list of unique GraphQL files.

    Args:
        paths: List of file or directory paths

    Returns:
        Flat list of unique GraphQL file paths (deduplicated and sorted)
    """
    resolved_files: set[Path] = set()

    for path in paths:
        if path.is_file():
            resolved_files.add(path)
        elif path.is_dir():
            for file in path.rglob("*"):
                if file.is_file() and file.suffix in GRAPHQL_FILE_SUFFIXES:
                    resolved_files.add(file)

    return sorted(resolved_files)


def load_documents(paths: list[Path]) -> list[DocumentNode]:
    """Load and parse GraphQL operation documents, one document per file, in path order."""
    documents = []
    for graphql_file in resolve_graphql_files(paths):
        content = load_schema_from_path(graphql_file)
        documents.append(parse(content))
        log.debug(f"Parsed operation document {graphql_file}")

    log.info(f"Loaded {len(documents)} operation document(s)")
    return documents


def build_schema_str(graphql_schema_paths: list[Path]) -> str:
    """Concatenate the SDL of every GraphQL file found under the given paths."""
    schema_str = ""
    for graphql_file in resolve_graphql_files(graphql_schema_paths):
        schema_str += load_schema_from_path(graphql_file) + "\n"
    return schema_str


def load_schema(graphql_schema_paths: Path | list[Path]) -> GraphQLSchema:
    """Load and build a GraphQL schema from files or folders."""
    if isinstance(graphql_schema_paths, Path):
        graphql_schema_paths = [graphql_schema_paths]

    schema = build_schema(build_schema_str(graphql_schema_paths))
    log.info("Successfully built the given GraphQL schema.")
    return schema
