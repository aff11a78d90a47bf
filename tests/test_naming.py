# ==============================================
# Tests for Naming Module
# ==============================================

from reverse_mapper.naming.inflector import camelize, capitalize, classify, pluralize, strip_id_suffix
from reverse_mapper.naming.name_resolver import NameResolver


class TestInflector:
    def test_classify(self):
        assert classify("user_group") == "UserGroup"
        assert classify("order-items") == "OrderItems"
        assert classify("user") == "User"

    def test_camelize(self):
        assert camelize("published_at") == "publishedAt"
        assert camelize("id") == "id"

    def test_capitalize_keeps_rest(self):
        assert capitalize("mappedBy") == "MappedBy"
        assert capitalize("") == ""

    def test_pluralize_simple_words(self):
        assert pluralize("user") == "users"
        assert pluralize("group") == "groups"
        assert pluralize("category") == "categories"

    def test_pluralize_only_last_camel_word(self):
        assert pluralize("orderLine") == "orderLines"
        assert pluralize("userCategory") == "userCategories"

    def test_strip_id_suffix(self):
        assert strip_id_suffix("author_id") == "author"
        assert strip_id_suffix("identity") == "identity"
        assert strip_id_suffix("_id") == "_id"


class TestClassNames:
    def test_plain_table(self):
        names = NameResolver()
        assert names.class_name_for("user_group") == "UserGroup"

    def test_upper_case_table_is_lowered_first(self):
        names = NameResolver()
        assert names.class_name_for("USER_GROUP") == "UserGroup"

    def test_override_wins(self):
        names = NameResolver()
        names.set_class_name("usr", "Member")
        assert names.class_name_for("usr") == "Member"

    def test_longest_prefix_wins(self):
        names = NameResolver()
        names.add_prefix_namespace("wp_", "Blog")
        names.add_prefix_namespace("wp_shop_", "Shop")
        assert names.class_name_for("wp_posts") == "Blog.Posts"
        assert names.class_name_for("wp_shop_orders") == "Shop.Orders"

    def test_schema_qualified_table(self):
        names = NameResolver()
        assert names.class_name_for("billing.invoice_line") == "Billing.InvoiceLine"

    def test_namespace_is_prepended(self):
        names = NameResolver("App.Entity")
        assert names.class_name_for("user") == "App.Entity.User"

    def test_namespace_change_clears_memo(self):
        names = NameResolver()
        assert names.class_name_for("user") == "User"
        names.set_namespace("App")
        assert names.class_name_for("user") == "App.User"


class TestFieldNames:
    def test_plain_column(self):
        names = NameResolver()
        assert names.field_name_for("article", "published_at") == "publishedAt"

    def test_foreign_key_column_loses_id(self):
        names = NameResolver()
        assert names.field_name_for("article", "author_id", True) == "author"
        assert names.field_name_for("article", "author_id", False) == "authorId"

    def test_override_is_per_table(self):
        names = NameResolver()
        names.set_field_name("article", "title", "headline")
        assert names.field_name_for("article", "title") == "headline"
        assert names.field_name_for("page", "title") == "title"
