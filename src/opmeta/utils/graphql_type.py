GRAPHQL_FILE_SUFFIXES = {".graphql", ".graphqls", ".gql"}

NON_VALIDATION_DIRECTIVES = {"deprecated", "specifiedBy", "oneOf"}


def is_introspection_type(type_name: str) -> bool:
    return type_name.startswith("__")


def is_builtin_scalar_type(type_name: str) -> bool:
    return type_name in {
        "ID",
        "String",
        "Int",
        "Float",
        "Boolean",
    }


def is_validation_directive(directive_name: str) -> bool:
    return directive_name not in NON_VALIDATION_DIRECTIVES
