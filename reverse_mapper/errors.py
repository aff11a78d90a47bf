# ==============================================
# Errors
# ==============================================
#
# Exceptions raised by the mapping engine.
#
# Structural ambiguities in the schema are NOT exceptions: they
# become Diagnostic entries (see diagnostics.py). Only the
# conditions below interrupt a call.
#
# - MappingError          → base class
# - UnknownEntityError    → requested class name has no table
# - IntrospectionError    → a single table could not be described
# - ConfigError           → malformed environment configuration
#
# ==============================================


class MappingError(Exception):
    """Base class for all reverse mapping errors."""
    pass


class UnknownEntityError(MappingError, KeyError):
    """Raised when a class name does not correspond to any entity table."""

    def __init__(self, class_name: str):
        self.class_name = class_name
        super().__init__(f"Unknown class {class_name}")

    def __str__(self) -> str:
        return f"Unknown class {self.class_name}"


class IntrospectionError(MappingError):
    """Raised by a schema source when one table cannot be described."""

    def __init__(self, table_name: str, reason: str):
        self.table_name = table_name
        self.reason = reason
        super().__init__(f"Cannot introspect table '{table_name}': {reason}")


class ConfigError(MappingError):
    """Raised when configuration values cannot be parsed."""
    pass
