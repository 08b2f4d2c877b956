from collections.abc import Iterable

from graphql import DocumentNode

from opmeta import log
from opmeta.config import GeneratorConfig
from opmeta.metadata.table import TypeMetadataTable
from opmeta.operations.analyzer import analyze_documents

from .transformer import TypeScriptTransformer


def translate_to_typescript(
    documents: Iterable[DocumentNode],
    table: TypeMetadataTable,
    config: GeneratorConfig | None = None,
) -> str:
    """
    Generate TypeScript operation metadata for a set of operation documents.

    Args:
        documents: Parsed GraphQL operation documents, in generation order
        table: The merged type metadata table
        config: Generator options (namespace, document suffix, documents import)

    Returns:
        str: TypeScript source with input type declarations and one constant per operation

    Raises:
        TypeNotFoundError: If a variable or field references a type missing from the table.
        UnsupportedTypeError: If a variable type expression cannot be described.
        InvalidOperationError: If an operation is anonymous or its name is not unique.
    """
    config = config or GeneratorConfig()
    log.info(f"Generating TypeScript operation metadata with {len(table)} input types")

    operations = analyze_documents(documents, table, config.document_suffix)
    transformer = TypeScriptTransformer(table, operations, config.namespace, config.documents_import)
    result = transformer.transform()

    log.info(f"Successfully generated metadata for {len(operations)} operation(s)")
    return result
