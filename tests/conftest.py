# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# This file contains shared fixtures for all tests.
#
# FIXTURES:
# ---------
#   user_table, group_table, user_group_table,
#   article_table, profile_table     → one small blog/auth schema
#   blog_tables                      → all of the above, snapshot order
#   blog_source                      → StaticSchemaSource over blog_tables
#   inferencer                       → SchemaMappingInferencer over blog_source
#   mapping_store                    → MappingStore in tmp_path
#
# NOTES:
# ------
# - Schemas are built in memory; no database is needed
# - Use tmp_path for temporary files
# ==============================================

import pytest

from reverse_mapper.inferencer import SchemaMappingInferencer
from reverse_mapper.persistence.mapping_store import MappingStore
from reverse_mapper.schema.model import Column, ColumnKind, ForeignKey, Table
from reverse_mapper.schema.source import StaticSchemaSource


@pytest.fixture
def user_table() -> Table:
    return Table(
        name="user",
        columns=[
            Column("id", "integer", ColumnKind.INTEGER, nullable=False, unsigned=True),
            Column("username", "string", ColumnKind.STRING, nullable=False, length=64),
            Column("email", "string", ColumnKind.STRING, length=255),
        ],
        primary_key=["id"],
    )


@pytest.fixture
def group_table() -> Table:
    return Table(
        name="group",
        columns=[
            Column("id", "integer", ColumnKind.INTEGER, nullable=False),
            Column("code", "string", ColumnKind.STRING, nullable=False, length=8, fixed=True),
        ],
        primary_key=["id"],
    )


@pytest.fixture
def user_group_table() -> Table:
    return Table(
        name="user_group",
        columns=[
            Column("user_id", "integer", ColumnKind.INTEGER, nullable=False),
            Column("group_id", "integer", ColumnKind.INTEGER, nullable=False),
        ],
        primary_key=["user_id", "group_id"],
        foreign_keys=[
            ForeignKey("user_group", "user", ["user_id"], ["id"]),
            ForeignKey("user_group", "group", ["group_id"], ["id"]),
        ],
    )


@pytest.fixture
def article_table() -> Table:
    return Table(
        name="article",
        columns=[
            Column("id", "integer", ColumnKind.INTEGER, nullable=False),
            Column("author_id", "integer", ColumnKind.INTEGER, nullable=False),
            Column("title", "string", ColumnKind.STRING, nullable=False, length=200),
            Column("published_at", "datetime"),
        ],
        primary_key=["id"],
        foreign_keys=[ForeignKey("article", "user", ["author_id"], ["id"])],
    )


@pytest.fixture
def profile_table() -> Table:
    return Table(
        name="profile",
        columns=[
            Column("user_id", "integer", ColumnKind.INTEGER, nullable=False),
            Column("bio", "text"),
        ],
        primary_key=["user_id"],
        foreign_keys=[ForeignKey("profile", "user", ["user_id"], ["id"])],
    )


@pytest.fixture
def blog_tables(user_table, group_table, user_group_table, article_table, profile_table):
    return [user_table, group_table, user_group_table, article_table, profile_table]


@pytest.fixture
def blog_source(blog_tables) -> StaticSchemaSource:
    return StaticSchemaSource(blog_tables)


@pytest.fixture
def inferencer(blog_source) -> SchemaMappingInferencer:
    return SchemaMappingInferencer(blog_source)


@pytest.fixture
def mapping_store(tmp_path) -> MappingStore:
    return MappingStore(str(tmp_path / "mappings"))
