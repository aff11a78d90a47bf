# ==============================================
# Diagnostics
# ==============================================
#
# Non-fatal events collected while building a snapshot, classifying
# tables or inferring one entity. They are returned to the caller
# (ClassificationResult.diagnostics, EntityMapping.diagnostics) who
# decides how to surface them. The engine itself never prints.
#
# ==============================================

from enum import Enum
from dataclasses import dataclass
from typing import Dict, Any


class DiagnosticKind(Enum):
    INTROSPECTION_FAILURE = "introspection_failure"
    MISSING_PRIMARY_KEY = "missing_primary_key"
    DUPLICATE_ASSOCIATION = "duplicate_association"
    INSUFFICIENT_JOIN_TABLE_INFO = "insufficient_join_table_info"
    UNRESOLVED_TARGET = "unresolved_target"
    CROSS_SCHEMA_SKIPPED = "cross_schema_skipped"


@dataclass(frozen=True)
class Diagnostic:
    """One structured, non-fatal event."""

    kind: DiagnosticKind
    table: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "table": self.table,
            "message": self.message,
        }

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.table}: {self.message}"
