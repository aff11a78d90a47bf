# ==============================================
# Tests for MySQLIntrospector
# ==============================================
#
# pymysql.connect is monkeypatched with a fake connection whose
# cursor answers INFORMATION_SCHEMA queries from canned rows.
# ==============================================

import pymysql
import pytest

from reverse_mapper.diagnostics import DiagnosticKind
from reverse_mapper.errors import IntrospectionError
from reverse_mapper.schema.model import ColumnKind
from reverse_mapper.schema.mysql_introspector import MySQLIntrospector
from reverse_mapper.schema.source import build_snapshot


def _column(name, data_type, column_type=None, nullable="NO", length=None):
    return {
        "COLUMN_NAME": name,
        "DATA_TYPE": data_type,
        "COLUMN_TYPE": column_type or data_type,
        "IS_NULLABLE": nullable,
        "CHARACTER_MAXIMUM_LENGTH": length,
    }


SHOP_SCHEMA = {
    "tables": [
        {"TABLE_SCHEMA": "shop", "TABLE_NAME": "customer"},
        {"TABLE_SCHEMA": "shop", "TABLE_NAME": "purchase"},
    ],
    "engines": [{"ENGINE": "InnoDB"}],
    "columns": {
        "customer": [
            _column("id", "int", "int(10) unsigned"),
            _column("name", "varchar", "varchar(100)", length=100),
            _column("country", "char", "char(2)", nullable="YES", length=2),
            _column("active", "tinyint", "tinyint(1)"),
        ],
        "purchase": [
            _column("id", "bigint"),
            _column("customer_id", "int", "int(10) unsigned"),
            _column("total", "decimal", "decimal(10,2)"),
            _column("created_at", "datetime", nullable="YES"),
        ],
    },
    "primary_keys": {
        "customer": [{"COLUMN_NAME": "id"}],
        "purchase": [{"COLUMN_NAME": "id"}],
    },
    "foreign_keys": {
        "customer": [],
        "purchase": [
            {
                "CONSTRAINT_NAME": "fk_purchase_customer",
                "COLUMN_NAME": "customer_id",
                "REFERENCED_TABLE_SCHEMA": "shop",
                "REFERENCED_TABLE_NAME": "customer",
                "REFERENCED_COLUMN_NAME": "id",
            },
        ],
    },
}


class FakeCursor:
    def __init__(self, schema):
        self.schema = schema
        self.rows = []

    def execute(self, query, params):
        table = params[1] if len(params) > 1 else None
        if "DISTINCT ENGINE" in query:
            self.rows = self.schema["engines"]
        elif "INFORMATION_SCHEMA.TABLES" in query:
            self.rows = self.schema["tables"]
        elif "INFORMATION_SCHEMA.COLUMNS" in query:
            if table in self.schema.get("broken", ()):
                raise pymysql.err.ProgrammingError(1146, f"Table '{table}' doesn't exist")
            self.rows = self.schema["columns"].get(table, [])
        elif "CONSTRAINT_NAME = 'PRIMARY'" in query:
            self.rows = self.schema["primary_keys"].get(table, [])
        elif "REFERENCED_TABLE_NAME IS NOT NULL" in query:
            self.rows = self.schema["foreign_keys"].get(table, [])
        else:
            raise AssertionError(f"Unexpected query: {query}")

    def fetchall(self):
        return list(self.rows)

    def close(self):
        pass


class FakeConnection:
    def __init__(self, schema):
        self.schema = schema
        self.closed = False

    def cursor(self, cursor_class=None):
        return FakeCursor(self.schema)

    def close(self):
        self.closed = True


@pytest.fixture
def fake_mysql(monkeypatch):
    state = {"schema": SHOP_SCHEMA, "kwargs": None}

    def fake_connect(**kwargs):
        state["kwargs"] = kwargs
        state["connection"] = FakeConnection(state["schema"])
        return state["connection"]

    monkeypatch.setattr(pymysql, "connect", fake_connect)
    return state


def _introspector(**overrides):
    params = dict(host="localhost", port=3306, user="root", password="root", database="shop")
    params.update(overrides)
    return MySQLIntrospector(**params)


class TestMySQLIntrospector:
    def test_connect_uses_parameters(self, fake_mysql):
        with _introspector(port=3307):
            pass

        assert fake_mysql["kwargs"]["port"] == 3307
        assert fake_mysql["kwargs"]["database"] == "shop"
        assert fake_mysql["connection"].closed

    def test_requires_connection(self):
        with pytest.raises(RuntimeError):
            _introspector().list_tables()

    def test_list_tables(self, fake_mysql):
        with _introspector() as source:
            assert source.list_tables() == ["customer", "purchase"]

    def test_list_tables_qualified_with_schemas(self, fake_mysql):
        with _introspector(schemas=["shop"]) as source:
            assert source.list_tables() == ["shop.customer", "shop.purchase"]

    def test_describe_columns(self, fake_mysql):
        with _introspector() as source:
            customer = source.describe_table("customer")

        assert customer.primary_key == ("id",)
        assert customer.column_names == ["id", "name", "country", "active"]

        column_id, name, country, active = customer.columns
        assert column_id.kind is ColumnKind.INTEGER
        assert column_id.unsigned is True
        assert column_id.nullable is False
        assert name.type_name == "string"
        assert name.length == 100
        assert name.fixed is False
        assert country.fixed is True
        assert country.nullable is True
        assert active.type_name == "boolean"
        assert active.kind is ColumnKind.OTHER

    def test_describe_foreign_keys(self, fake_mysql):
        with _introspector() as source:
            purchase = source.describe_table("purchase")

        assert len(purchase.foreign_keys) == 1
        key = purchase.foreign_keys[0]
        assert key.name == "fk_purchase_customer"
        assert key.local_table == "purchase"
        assert key.foreign_table == "customer"
        assert key.local_columns == ("customer_id",)
        assert key.foreign_columns == ("id",)

    def test_unknown_type(self, fake_mysql):
        fake_mysql["schema"] = dict(SHOP_SCHEMA, columns={"customer": [_column("location", "geometry")]})
        with _introspector() as source:
            with pytest.raises(IntrospectionError) as info:
                source.describe_table("customer")

        assert "Unknown database type geometry" in str(info.value)

    def test_mysql_error_becomes_introspection_error(self, fake_mysql):
        fake_mysql["schema"] = dict(SHOP_SCHEMA, broken=["purchase"])
        with _introspector() as source:
            with pytest.raises(IntrospectionError):
                source.describe_table("purchase")

    def test_foreign_key_support_from_engines(self, fake_mysql):
        with _introspector() as source:
            assert source.supports_foreign_key_constraints() is True

    def test_myisam_has_no_foreign_keys(self, fake_mysql):
        fake_mysql["schema"] = dict(SHOP_SCHEMA, engines=[{"ENGINE": "MyISAM"}])
        with _introspector() as source:
            assert source.supports_foreign_key_constraints() is False

    def test_snapshot_drops_broken_table(self, fake_mysql):
        fake_mysql["schema"] = dict(SHOP_SCHEMA, broken=["purchase"])
        with _introspector() as source:
            snapshot = build_snapshot(source)

        assert [table.name for table in snapshot.tables] == ["customer"]
        assert [d.kind for d in snapshot.diagnostics] == [DiagnosticKind.INTROSPECTION_FAILURE]
        assert snapshot.diagnostics[0].table == "purchase"
