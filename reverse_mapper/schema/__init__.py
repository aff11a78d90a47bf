# ==============================================
# SCHEMA: Table snapshots and where they come from
# ==============================================
#
# Modules:
# --------
# - model.py               → Column, ColumnKind, ForeignKey, Table, QualifiedName
# - source.py              → SchemaSource protocol, StaticSchemaSource, build_snapshot
# - mysql_introspector.py  → MySQLIntrospector (INFORMATION_SCHEMA via PyMySQL)
#
# ==============================================

from .model import Column, ColumnKind, ForeignKey, QualifiedName, Table
from .source import SchemaSnapshot, SchemaSource, StaticSchemaSource, build_snapshot
from .mysql_introspector import MySQLIntrospector

__all__ = [
    "Column",
    "ColumnKind",
    "ForeignKey",
    "QualifiedName",
    "Table",
    "SchemaSnapshot",
    "SchemaSource",
    "StaticSchemaSource",
    "build_snapshot",
    "MySQLIntrospector",
]
