# ==============================================
# MySQLIntrospector
# ==============================================
#
# PURPOSE:
#   Reads table, column, primary key and foreign key definitions
#   from MySQL's INFORMATION_SCHEMA and turns them into Table
#   snapshots the inferencer can classify.
#
# CLASS: MySQLIntrospector
# ------------------------
#   Stateful. Holds a connection to MySQL. Implements SchemaSource.
#
#   Constructor:
#   ------------
#   - __init__(host, port, user, password, database, schemas=None)
#       Store connection params. Don't connect yet.
#       When `schemas` is given, every listed schema is inspected and
#       table names are schema-qualified ("schema.table"). Otherwise
#       only `database` is inspected and names are left bare.
#
#   Methods:
#   --------
#   - connect() / disconnect()
#   - list_tables() -> list[str]
#   - describe_table(table_name: str) -> Table
#       Raises IntrospectionError for unsupported column types or
#       MySQL errors on that table.
#   - supports_foreign_key_constraints() -> bool
#       True if at least one inspected table uses an engine that
#       enforces foreign keys (InnoDB, NDB). A MyISAM-only database
#       reports False.
#
#   Context Manager:
#   ----------------
#   - __enter__ / __exit__ for `with MySQLIntrospector(...) as source:` usage.
#
# TYPE MAPPING (DATA_TYPE → portable type):
# -----------------------------------------
#   varchar, char                 → string   (STRING)
#   tinytext .. longtext          → text
#   int, integer, mediumint       → integer  (INTEGER)
#   bigint                        → bigint   (INTEGER)
#   smallint, tinyint             → smallint (INTEGER)
#   tinyint(1)                    → boolean
#   decimal, numeric              → decimal
#   float, double, real           → float
#   date, year                    → date
#   datetime, timestamp           → datetime
#   time                          → time
#   *blob, binary, varbinary      → blob / binary
#   json                          → json
#   anything else                 → IntrospectionError
#
# ==============================================

from typing import Any, Dict, List, Optional, Tuple, cast
import pymysql
import pymysql.cursors

from reverse_mapper.errors import IntrospectionError
from reverse_mapper.schema.model import Column, ColumnKind, ForeignKey, QualifiedName, Table


TYPE_MAP: Dict[str, Tuple[str, ColumnKind]] = {
    "varchar": ("string", ColumnKind.STRING),
    "char": ("string", ColumnKind.STRING),
    "tinytext": ("text", ColumnKind.OTHER),
    "text": ("text", ColumnKind.OTHER),
    "mediumtext": ("text", ColumnKind.OTHER),
    "longtext": ("text", ColumnKind.OTHER),
    "int": ("integer", ColumnKind.INTEGER),
    "integer": ("integer", ColumnKind.INTEGER),
    "mediumint": ("integer", ColumnKind.INTEGER),
    "bigint": ("bigint", ColumnKind.INTEGER),
    "smallint": ("smallint", ColumnKind.INTEGER),
    "tinyint": ("smallint", ColumnKind.INTEGER),
    "decimal": ("decimal", ColumnKind.OTHER),
    "numeric": ("decimal", ColumnKind.OTHER),
    "float": ("float", ColumnKind.OTHER),
    "double": ("float", ColumnKind.OTHER),
    "real": ("float", ColumnKind.OTHER),
    "date": ("date", ColumnKind.OTHER),
    "year": ("date", ColumnKind.OTHER),
    "datetime": ("datetime", ColumnKind.OTHER),
    "timestamp": ("datetime", ColumnKind.OTHER),
    "time": ("time", ColumnKind.OTHER),
    "tinyblob": ("blob", ColumnKind.OTHER),
    "blob": ("blob", ColumnKind.OTHER),
    "mediumblob": ("blob", ColumnKind.OTHER),
    "longblob": ("blob", ColumnKind.OTHER),
    "binary": ("binary", ColumnKind.OTHER),
    "varbinary": ("binary", ColumnKind.OTHER),
    "json": ("json", ColumnKind.OTHER),
}

# Engines that enforce declared foreign keys
FOREIGN_KEY_ENGINES = {"INNODB", "NDB", "NDBCLUSTER"}


class MySQLIntrospector:
    def __init__(self, host, port, user, password, database, schemas: Optional[List[str]] = None):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.schemas = list(schemas) if schemas else [database]
        self.qualify_names = bool(schemas)
        self.connection = None
        self._supports_foreign_keys: Optional[bool] = None

    def connect(self) -> None:
        # Establish connection to MySQL on the inspected database
        self.connection = pymysql.connect(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            database=self.database,
        )

    def disconnect(self) -> None:
        # Close connection cleanly
        if self.connection:
            self.connection.close()
            self.connection = None

    def list_tables(self) -> List[str]:
        # Base tables of every inspected schema, ordered for stable output
        rows = self._fetch_all(
            "SELECT TABLE_SCHEMA, TABLE_NAME FROM INFORMATION_SCHEMA.TABLES "
            f"WHERE TABLE_SCHEMA IN ({self._schema_placeholders()}) "
            "AND TABLE_TYPE = 'BASE TABLE' "
            "ORDER BY TABLE_SCHEMA, TABLE_NAME",
            tuple(self.schemas),
        )
        return [self._table_name(row["TABLE_SCHEMA"], row["TABLE_NAME"]) for row in rows]

    def describe_table(self, table_name: str) -> Table:
        qualified = QualifiedName.parse(table_name) if self.qualify_names else QualifiedName(None, table_name)
        schema = qualified.schema or self.database
        try:
            columns = self._read_columns(schema, qualified.name)
            primary_key = self._read_primary_key(schema, qualified.name)
            foreign_keys = self._read_foreign_keys(schema, qualified.name, table_name)
        except pymysql.MySQLError as e:
            raise IntrospectionError(table_name, str(e)) from e

        if not columns:
            raise IntrospectionError(table_name, "table has no columns")

        return Table(
            name=table_name,
            columns=tuple(columns),
            primary_key=tuple(primary_key) if primary_key else None,
            foreign_keys=tuple(foreign_keys),
        )

    def supports_foreign_key_constraints(self) -> bool:
        if self._supports_foreign_keys is None:
            rows = self._fetch_all(
                "SELECT DISTINCT ENGINE FROM INFORMATION_SCHEMA.TABLES "
                f"WHERE TABLE_SCHEMA IN ({self._schema_placeholders()}) "
                "AND TABLE_TYPE = 'BASE TABLE'",
                tuple(self.schemas),
            )
            engines = {str(row["ENGINE"] or "").upper() for row in rows}
            # An empty database has nothing to contradict constraint support
            self._supports_foreign_keys = not engines or bool(engines & FOREIGN_KEY_ENGINES)
        return self._supports_foreign_keys

    def _read_columns(self, schema: str, table: str) -> List[Column]:
        rows = self._fetch_all(
            "SELECT COLUMN_NAME, DATA_TYPE, COLUMN_TYPE, IS_NULLABLE, CHARACTER_MAXIMUM_LENGTH "
            "FROM INFORMATION_SCHEMA.COLUMNS "
            "WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s "
            "ORDER BY ORDINAL_POSITION",
            (schema, table),
        )
        columns = []
        for row in rows:
            columns.append(self._column_from_row(table, row))
        return columns

    def _read_primary_key(self, schema: str, table: str) -> List[str]:
        rows = self._fetch_all(
            "SELECT COLUMN_NAME FROM INFORMATION_SCHEMA.KEY_COLUMN_USAGE "
            "WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s AND CONSTRAINT_NAME = 'PRIMARY' "
            "ORDER BY ORDINAL_POSITION",
            (schema, table),
        )
        return [str(row["COLUMN_NAME"]) for row in rows]

    def _read_foreign_keys(self, schema: str, table: str, table_name: str) -> List[ForeignKey]:
        rows = self._fetch_all(
            "SELECT CONSTRAINT_NAME, COLUMN_NAME, REFERENCED_TABLE_SCHEMA, "
            "REFERENCED_TABLE_NAME, REFERENCED_COLUMN_NAME "
            "FROM INFORMATION_SCHEMA.KEY_COLUMN_USAGE "
            "WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s "
            "AND REFERENCED_TABLE_NAME IS NOT NULL "
            "ORDER BY CONSTRAINT_NAME, ORDINAL_POSITION",
            (schema, table),
        )
        # Group column rows by constraint, keeping first-seen order
        grouped: Dict[str, Dict[str, Any]] = {}
        for row in rows:
            constraint = str(row["CONSTRAINT_NAME"])
            if constraint not in grouped:
                grouped[constraint] = {
                    "foreign_table": self._table_name(
                        row["REFERENCED_TABLE_SCHEMA"], row["REFERENCED_TABLE_NAME"]
                    ),
                    "local_columns": [],
                    "foreign_columns": [],
                }
            grouped[constraint]["local_columns"].append(str(row["COLUMN_NAME"]))
            grouped[constraint]["foreign_columns"].append(str(row["REFERENCED_COLUMN_NAME"]))

        return [
            ForeignKey(
                local_table=table_name,
                foreign_table=data["foreign_table"],
                local_columns=tuple(data["local_columns"]),
                foreign_columns=tuple(data["foreign_columns"]),
                name=constraint,
            )
            for constraint, data in grouped.items()
        ]

    def _column_from_row(self, table: str, row: Dict[str, Any]) -> Column:
        data_type = str(row["DATA_TYPE"]).lower()
        column_type = str(row["COLUMN_TYPE"] or "").lower()
        if data_type not in TYPE_MAP:
            raise IntrospectionError(
                table, f"Unknown database type {data_type} requested for column {row['COLUMN_NAME']}"
            )

        type_name, kind = TYPE_MAP[data_type]
        if column_type.startswith("tinyint(1)"):
            type_name, kind = "boolean", ColumnKind.OTHER

        length = None
        if kind is ColumnKind.STRING and row.get("CHARACTER_MAXIMUM_LENGTH") is not None:
            length = int(row["CHARACTER_MAXIMUM_LENGTH"])

        return Column(
            name=str(row["COLUMN_NAME"]),
            type_name=type_name,
            kind=kind,
            nullable=str(row["IS_NULLABLE"]).upper() == "YES",
            length=length,
            fixed=data_type == "char",
            unsigned=kind is ColumnKind.INTEGER and "unsigned" in column_type,
        )

    def _table_name(self, schema: str, table: str) -> str:
        if self.qualify_names or schema != self.database:
            return f"{schema}.{table}"
        return str(table)

    def _schema_placeholders(self) -> str:
        return ", ".join(["%s"] * len(self.schemas))

    def _fetch_all(self, query: str, params: tuple) -> List[Dict[str, Any]]:
        # Execute SELECT and return rows as dicts
        if self.connection is None:
            raise RuntimeError("Not connected to MySQL")
        cursor = self.connection.cursor(pymysql.cursors.DictCursor)
        try:
            cursor.execute(query, params)
            return cast(List[Dict[str, Any]], list(cursor.fetchall()))
        finally:
            cursor.close()

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
