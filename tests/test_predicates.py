# ==============================================
# Tests for Structural Predicates
# ==============================================

from reverse_mapper.analysis.predicates import (
    SchemaExpansionPolicy,
    effective_foreign_keys,
    implied_inheritance_key,
    is_fake_inheritance,
    is_identity_foreign_key,
    is_join_table_shape,
    is_same_schema,
)
from reverse_mapper.schema.model import Column, ColumnKind, ForeignKey, Table


def _int(name):
    return Column(name, "integer", ColumnKind.INTEGER, nullable=False)


def _link_table(extra_columns=(), primary_key=("a_id", "b_id"), foreign_keys=None):
    if foreign_keys is None:
        foreign_keys = [
            ForeignKey("a_b", "a", ["a_id"], ["id"]),
            ForeignKey("a_b", "b", ["b_id"], ["id"]),
        ]
    return Table(
        name="a_b",
        columns=[_int("a_id"), _int("b_id")] + list(extra_columns),
        primary_key=primary_key,
        foreign_keys=foreign_keys,
    )


class TestJoinTableShape:
    def test_pure_link_table(self):
        table = _link_table()
        assert is_join_table_shape(table, table.foreign_keys)

    def test_primary_key_order_does_not_matter(self):
        table = _link_table(primary_key=("b_id", "a_id"))
        assert is_join_table_shape(table, table.foreign_keys)

    def test_payload_column_breaks_shape(self):
        table = _link_table(extra_columns=[Column("created_at", "datetime")])
        assert not is_join_table_shape(table, table.foreign_keys)

    def test_primary_key_mismatch_breaks_shape(self):
        table = _link_table(primary_key=("a_id",))
        assert not is_join_table_shape(table, table.foreign_keys)

    def test_single_foreign_key_breaks_shape(self):
        table = _link_table()
        assert not is_join_table_shape(table, table.foreign_keys[:1])

    def test_no_primary_key(self):
        table = Table(name="a_b", columns=[_int("a_id"), _int("b_id")])
        assert not is_join_table_shape(table, table.foreign_keys)


class TestForeignKeyPredicates:
    def test_effective_foreign_keys_without_support(self, article_table):
        assert effective_foreign_keys(article_table, True) == article_table.foreign_keys
        assert effective_foreign_keys(article_table, False) == ()

    def test_same_schema(self):
        assert is_same_schema("a.t1", "a.t2")
        assert is_same_schema("t1", "t2")
        assert not is_same_schema("a.t1", "t2")

    def test_identity_foreign_key(self, profile_table, user_table):
        assert is_identity_foreign_key(profile_table, profile_table.foreign_keys[0], user_table)

    def test_plain_foreign_key_is_not_identity(self, article_table, user_table):
        assert not is_identity_foreign_key(article_table, article_table.foreign_keys[0], user_table)


class TestFakeInheritance:
    def _tables(self):
        person = Table(name="person", columns=[_int("id"), Column("name", "string", ColumnKind.STRING)], primary_key=["id"])
        employee = Table(name="employee", columns=[_int("person_id"), _int("salary")], primary_key=["person_id"])
        return person, employee

    def test_detected_without_foreign_key_support(self):
        person, employee = self._tables()
        key = ForeignKey("employee", "person", ["person_id"], ["id"])
        assert is_fake_inheritance(employee, key, person, supports_foreign_keys=False)

    def test_never_detected_with_foreign_key_support(self):
        person, employee = self._tables()
        key = ForeignKey("employee", "person", ["person_id"], ["id"])
        assert not is_fake_inheritance(employee, key, person, supports_foreign_keys=True)

    def test_name_must_match_target(self):
        person, employee = self._tables()
        key = ForeignKey("employee", "person", ["person_id"], ["id"])
        other = Table(name="company", columns=[_int("id")], primary_key=["id"])
        assert not is_fake_inheritance(employee, key, other, supports_foreign_keys=False)

    def test_implied_key_is_rebuilt_from_names(self):
        person, employee = self._tables()
        key = implied_inheritance_key(employee, [person, employee], supports_foreign_keys=False)
        assert key is not None
        assert key.foreign_table == "person"
        assert key.local_columns == ("person_id",)
        assert key.foreign_columns == ("id",)

    def test_no_implied_key_for_supertype(self):
        person, employee = self._tables()
        assert implied_inheritance_key(person, [person, employee], supports_foreign_keys=False) is None


class TestSchemaExpansionPolicy:
    def test_different_schemas_denied_by_default(self):
        assert not SchemaExpansionPolicy().can_expand("a.t1", "b.t2")

    def test_same_schema_allowed(self):
        assert SchemaExpansionPolicy().can_expand("a.t1", "a.t2")

    def test_unqualified_source_to_qualified_target_denied(self):
        assert not SchemaExpansionPolicy().can_expand("t1", "b.t2")

    def test_unqualified_target_allowed(self):
        assert SchemaExpansionPolicy().can_expand("a.t1", "t2")

    def test_allow_list_entry(self):
        policy = SchemaExpansionPolicy()
        policy.allow("a", "b")
        assert policy.can_expand("a.t1", "b.t2")
        assert not policy.can_expand("b.t2", "a.t1")

    def test_allow_list_entry_can_be_revoked(self):
        policy = SchemaExpansionPolicy({("a", "b"): True})
        policy.allow("a", "b", False)
        assert not policy.can_expand("a.t1", "b.t2")
