# ==============================================
# NameResolver
# ==============================================
#
# PURPOSE:
#   Decide the class name of a table and the field name of a column.
#   Every decision is memoised so that repeated lookups during one
#   inference pass return identical names.
#
# CLASS: NameResolver
# -------------------
#
#   Constructor:
#   ------------
#   - __init__(namespace: str = "")
#       Namespace prepended to every generated class name
#       ("app.entities" + "User" → "app.entities.User").
#
#   Configuration:
#   --------------
#   - set_namespace(namespace)
#   - set_class_name(table_name, class_name)
#   - set_field_name(table_name, column_name, field_name)
#   - add_prefix_namespace(prefix, namespace)
#       Tables starting with `prefix` go to `namespace`, prefix removed:
#       add_prefix_namespace("wp_", "Blog"): wp_posts → Blog.Posts
#
#   Resolution:
#   -----------
#   - class_name_for(table_name) -> str
#       1. explicit override
#       2. longest matching table-name prefix → namespace + classified rest
#       3. "schema.table" → Schema.Table
#       4. classified lower-cased table name
#
#   - field_name_for(table_name, column_name, is_foreign_key=False) -> str
#       1. explicit (table, column) override
#       2. lower-case, strip trailing "_id" for foreign keys, camelize
#
# ==============================================

from typing import Dict, Optional, Tuple

from reverse_mapper.naming.inflector import camelize, classify, strip_id_suffix
from reverse_mapper.schema.model import QualifiedName

NAMESPACE_SEPARATOR = "."


def join_namespace(*parts: Optional[str]) -> str:
    return NAMESPACE_SEPARATOR.join(part for part in parts if part)


class NameResolver:
    """Resolves and memoises class names and field names."""

    def __init__(self, namespace: str = ""):
        self.namespace = namespace.strip(NAMESPACE_SEPARATOR) if namespace else ""
        self._class_overrides: Dict[str, str] = {}
        self._field_overrides: Dict[str, Dict[str, str]] = {}
        self._prefix_namespaces: Dict[str, str] = {}
        self._class_cache: Dict[str, str] = {}
        self._field_cache: Dict[Tuple[str, str, bool], str] = {}

    def set_namespace(self, namespace: str) -> None:
        self.namespace = namespace.strip(NAMESPACE_SEPARATOR) if namespace else ""
        self._class_cache.clear()

    def set_class_name(self, table_name: str, class_name: str) -> None:
        self._class_overrides[table_name] = class_name
        self._class_cache.clear()

    def set_field_name(self, table_name: str, column_name: str, field_name: str) -> None:
        self._field_overrides.setdefault(table_name, {})[column_name] = field_name
        self._field_cache.clear()

    def add_prefix_namespace(self, prefix: str, namespace: str) -> None:
        self._prefix_namespaces[prefix] = namespace
        self._class_cache.clear()

    def class_name_for(self, table_name: str) -> str:
        if table_name not in self._class_cache:
            self._class_cache[table_name] = join_namespace(
                self.namespace, self._resolve_class_name(table_name)
            )
        return self._class_cache[table_name]

    def field_name_for(self, table_name: str, column_name: str, is_foreign_key: bool = False) -> str:
        key = (table_name, column_name, is_foreign_key)
        if key not in self._field_cache:
            self._field_cache[key] = self._resolve_field_name(table_name, column_name, is_foreign_key)
        return self._field_cache[key]

    def _resolve_class_name(self, table_name: str) -> str:
        if table_name in self._class_overrides:
            return self._class_overrides[table_name]

        prefix = self._longest_prefix(table_name)
        if prefix is not None:
            remainder = table_name[len(prefix):]
            return join_namespace(self._prefix_namespaces[prefix], classify(remainder.lower()))

        qualified = QualifiedName.parse(table_name)
        if qualified.schema:
            return join_namespace(classify(qualified.schema.lower()), classify(qualified.name.lower()))

        # Lower-casing first: upper-case table names (Oracle) are common
        return classify(table_name.lower())

    def _resolve_field_name(self, table_name: str, column_name: str, is_foreign_key: bool) -> str:
        overrides = self._field_overrides.get(table_name, {})
        if column_name in overrides:
            return overrides[column_name]

        name = column_name.lower()
        if is_foreign_key:
            name = strip_id_suffix(name)
        return camelize(name)

    def _longest_prefix(self, table_name: str) -> Optional[str]:
        lowered = table_name.lower()
        matches = [
            prefix for prefix in self._prefix_namespaces
            if lowered.startswith(prefix.lower()) and len(prefix) < len(table_name)
        ]
        if not matches:
            return None
        return max(matches, key=len)
