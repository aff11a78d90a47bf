# ==============================================
# Schema Sources
# ==============================================
#
# PURPOSE:
#   Define what the engine needs from an introspection backend and
#   turn a backend into an immutable SchemaSnapshot.
#
# PROTOCOL: SchemaSource
# ----------------------
#   - list_tables() -> list[str]
#   - describe_table(table_name: str) -> Table
#       May raise IntrospectionError for a single table.
#   - supports_foreign_key_constraints() -> bool
#
# IMPLEMENTATIONS:
# ----------------
#   - StaticSchemaSource          → in-memory tables (tests, JSON snapshots)
#   - MySQLIntrospector           → see mysql_introspector.py
#
# FUNCTION:
# ---------
#   - build_snapshot(source, schema_filter=None) -> SchemaSnapshot
#       Describe every listed table. A table that fails to describe is
#       dropped and recorded as an INTROSPECTION_FAILURE diagnostic;
#       the pass itself never fails because of one table.
#
# ==============================================

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Protocol, Tuple

from reverse_mapper.diagnostics import Diagnostic, DiagnosticKind
from reverse_mapper.errors import IntrospectionError
from reverse_mapper.schema.model import QualifiedName, Table


class SchemaSource(Protocol):
    """Anything able to list and describe tables."""

    def list_tables(self) -> List[str]:
        ...

    def describe_table(self, table_name: str) -> Table:
        ...

    def supports_foreign_key_constraints(self) -> bool:
        ...


class StaticSchemaSource:
    """
    Schema source backed by already-built Table objects.

    Used for tests, for snapshots loaded from JSON and for callers
    that run their own introspection.
    """

    def __init__(self, tables: Iterable[Table], supports_foreign_keys: bool = True):
        self._tables = {table.name: table for table in tables}
        self._supports_foreign_keys = supports_foreign_keys

    def list_tables(self) -> List[str]:
        return list(self._tables.keys())

    def describe_table(self, table_name: str) -> Table:
        if table_name not in self._tables:
            raise IntrospectionError(table_name, "table does not exist")
        return self._tables[table_name]

    def supports_foreign_key_constraints(self) -> bool:
        return self._supports_foreign_keys


@dataclass(frozen=True)
class SchemaSnapshot:
    """Tables described by a source, in listing order."""

    tables: Tuple[Table, ...]
    supports_foreign_keys: bool = True
    diagnostics: Tuple[Diagnostic, ...] = field(default_factory=tuple)


def build_snapshot(source: SchemaSource, schema_filter: Optional[str] = None) -> SchemaSnapshot:
    """
    Describe every table of a source.

    Args:
        source: The schema source to read from
        schema_filter: If set, only tables of this schema are kept

    Returns:
        SchemaSnapshot with the successfully described tables
    """
    tables: List[Table] = []
    diagnostics: List[Diagnostic] = []

    for table_name in source.list_tables():
        if schema_filter is not None and QualifiedName.parse(table_name).schema != schema_filter:
            continue
        try:
            tables.append(source.describe_table(table_name))
        except IntrospectionError as e:
            diagnostics.append(Diagnostic(
                kind=DiagnosticKind.INTROSPECTION_FAILURE,
                table=table_name,
                message=e.reason,
            ))

    return SchemaSnapshot(
        tables=tuple(tables),
        supports_foreign_keys=source.supports_foreign_key_constraints(),
        diagnostics=tuple(diagnostics),
    )
