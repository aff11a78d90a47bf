# ==============================================
# Schema Model (Data Classes)
# ==============================================
#
# PURPOSE:
#   Immutable snapshot of a relational schema as handed over by a
#   schema source. This is the INPUT of classification and mapping
#   inference.
#
# ENUMS:
# ------
# - ColumnKind(Enum): STRING, INTEGER, OTHER
#     Closed semantic variant used to pick field mapping attributes
#     (length/fixed for strings, unsigned for integers).
#
# CLASSES:
# --------
# - QualifiedName (frozen dataclass)
#     schema: str | None, name: str
#     parse("sales.orders") -> QualifiedName("sales", "orders")
#
# - Column (frozen dataclass)
#     name, type_name, kind, nullable, length, fixed, unsigned
#
# - ForeignKey (frozen dataclass)
#     local_table, foreign_table, local_columns, foreign_columns, name
#     local_columns[i] references foreign_columns[i].
#
# - Table (frozen dataclass)
#     name, columns, primary_key, foreign_keys
#
#   All classes provide to_dict() / from_dict() so snapshots can be
#   stored as JSON (see persistence/mapping_store.py).
#
# ==============================================

from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Tuple, Dict, Any, List


SCHEMA_SEPARATOR = "."


class ColumnKind(Enum):
    """
    Semantic family of a column type.

    - STRING: character types, carry length and fixed-width
    - INTEGER: integral types, carry signedness
    - OTHER: everything else (dates, decimals, blobs, ...)
    """
    STRING = "string"
    INTEGER = "integer"
    OTHER = "other"


@dataclass(frozen=True)
class QualifiedName:
    """A table name split into its optional schema and bare name."""

    schema: Optional[str]
    name: str

    @classmethod
    def parse(cls, table_name: str) -> "QualifiedName":
        # Schema is everything before the FIRST separator
        if SCHEMA_SEPARATOR in table_name:
            schema, name = table_name.split(SCHEMA_SEPARATOR, 1)
            return cls(schema=schema, name=name)
        return cls(schema=None, name=table_name)

    @property
    def bare(self) -> str:
        return self.name

    def __str__(self) -> str:
        if self.schema is None:
            return self.name
        return f"{self.schema}{SCHEMA_SEPARATOR}{self.name}"


@dataclass(frozen=True)
class Column:
    """A single column of a table."""

    name: str
    type_name: str  # Portable lower-case type, e.g. "integer", "string", "datetime"
    kind: ColumnKind = ColumnKind.OTHER
    nullable: bool = True
    length: Optional[int] = None  # Strings only
    fixed: bool = False  # Strings only (CHAR vs VARCHAR)
    unsigned: bool = False  # Integers only

    @property
    def is_integral(self) -> bool:
        return self.kind is ColumnKind.INTEGER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type_name,
            "kind": self.kind.value,
            "nullable": self.nullable,
            "length": self.length,
            "fixed": self.fixed,
            "unsigned": self.unsigned,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Column":
        return cls(
            name=data["name"],
            type_name=data["type"],
            kind=ColumnKind(data.get("kind", "other")),
            nullable=data.get("nullable", True),
            length=data.get("length"),
            fixed=data.get("fixed", False),
            unsigned=data.get("unsigned", False),
        )


@dataclass(frozen=True)
class ForeignKey:
    """
    A foreign key constraint.

    local_columns and foreign_columns are index-aligned:
    local_columns[i] references foreign_columns[i] of foreign_table.
    """

    local_table: str
    foreign_table: str
    local_columns: Tuple[str, ...]
    foreign_columns: Tuple[str, ...]
    name: Optional[str] = None

    def __post_init__(self):
        # Accept lists from callers but store tuples (hashable, immutable)
        object.__setattr__(self, "local_columns", tuple(self.local_columns))
        object.__setattr__(self, "foreign_columns", tuple(self.foreign_columns))
        if len(self.local_columns) != len(self.foreign_columns):
            raise ValueError(
                f"Foreign key {self.local_table} -> {self.foreign_table} has "
                f"{len(self.local_columns)} local but {len(self.foreign_columns)} "
                f"referenced columns"
            )
        if not self.local_columns:
            raise ValueError(
                f"Foreign key {self.local_table} -> {self.foreign_table} has no columns"
            )

    @property
    def column_pairs(self) -> List[Tuple[str, str]]:
        return list(zip(self.local_columns, self.foreign_columns))

    def references(self, table_name: str) -> bool:
        """True if this key points at table_name (case-insensitive)."""
        return self.foreign_table.lower() == table_name.lower()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "local_table": self.local_table,
            "foreign_table": self.foreign_table,
            "local_columns": list(self.local_columns),
            "foreign_columns": list(self.foreign_columns),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ForeignKey":
        return cls(
            local_table=data["local_table"],
            foreign_table=data["foreign_table"],
            local_columns=tuple(data["local_columns"]),
            foreign_columns=tuple(data["foreign_columns"]),
            name=data.get("name"),
        )


@dataclass(frozen=True)
class Table:
    """
    Immutable description of one table.

    primary_key is None when the table has no primary key; such
    tables cannot be mapped and are dropped during classification.
    """

    name: str
    columns: Tuple[Column, ...] = field(default_factory=tuple)
    primary_key: Optional[Tuple[str, ...]] = None
    foreign_keys: Tuple[ForeignKey, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "columns", tuple(self.columns))
        object.__setattr__(self, "foreign_keys", tuple(self.foreign_keys))
        if self.primary_key is not None:
            object.__setattr__(self, "primary_key", tuple(self.primary_key))

    @property
    def qualified(self) -> QualifiedName:
        return QualifiedName.parse(self.name)

    @property
    def has_primary_key(self) -> bool:
        return bool(self.primary_key)

    @property
    def primary_key_columns(self) -> Tuple[str, ...]:
        return self.primary_key or ()

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    def column(self, name: str) -> Optional[Column]:
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def foreign_key_columns(self) -> List[str]:
        """All local columns of all foreign keys, in declaration order."""
        columns: List[str] = []
        for foreign_key in self.foreign_keys:
            columns.extend(foreign_key.local_columns)
        return columns

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "columns": [column.to_dict() for column in self.columns],
            "primary_key": list(self.primary_key) if self.primary_key is not None else None,
            "foreign_keys": [fk.to_dict() for fk in self.foreign_keys],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Table":
        primary_key = data.get("primary_key")
        return cls(
            name=data["name"],
            columns=tuple(Column.from_dict(c) for c in data.get("columns", [])),
            primary_key=tuple(primary_key) if primary_key is not None else None,
            foreign_keys=tuple(ForeignKey.from_dict(fk) for fk in data.get("foreign_keys", [])),
        )
