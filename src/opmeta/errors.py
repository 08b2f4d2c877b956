"""Error taxonomy of a generation run.

Every error is fatal for the run it is raised in: nothing is retried and no
partial output is produced.
"""


class OperationMetadataError(ValueError):
    """Base class for all errors raised while generating operation metadata."""


class ConfigurationError(OperationMetadataError):
    """Raised when a run is started without any metadata source."""


class InvalidMetadataError(OperationMetadataError):
    """Raised when a metadata file cannot be read or does not match the metadata shape."""


class TypeNotFoundError(OperationMetadataError):
    """Raised when a referenced type name is absent from the type metadata table."""

    def __init__(self, type_name: str) -> None:
        super().__init__(ErrorMessages.TYPE_NOT_FOUND.format(type_name=type_name))
        self.type_name = type_name


class UnsupportedTypeError(OperationMetadataError):
    """Raised for type expressions the generator cannot describe, e.g. nested lists."""


class InvalidOperationError(OperationMetadataError):
    """Raised for operations that cannot be turned into a named descriptor."""


class ErrorMessages:
    """Standard error messages for generation errors."""

    NO_METADATA = "The metadata option is required and must be a glob pattern of metadata files"
    TYPE_NOT_FOUND = "Type {type_name} not found in schema metadata"
    UNSUPPORTED_VARIABLE_TYPE = "Unsupported variable type {kind}"
    UNSUPPORTED_LIST_ITEM_TYPE = "Unsupported list item type {kind}"
    ANONYMOUS_OPERATION = "Operations declaring variables must be named"
    DUPLICATE_OPERATION = "Operation {name} is defined more than once"
    FIELD_KIND_MISMATCH = "Field {type_name}.{field_name} declares kind {kind} but {field_type} is of kind {actual}"
