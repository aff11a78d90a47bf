# ==============================================
# Predicates
# ==============================================
#
# PURPOSE:
#   The named structural tests the classifier and the association
#   inferrer are composed of. Each one looks at table shapes only
#   and can be tested on its own.
#
# FUNCTIONS:
# ----------
#   - effective_foreign_keys(table, supports_foreign_keys)
#       Declared keys, or none when the platform has no FK constraints.
#
#   - is_join_table_shape(table, foreign_keys)
#       Exactly two keys, no payload columns, PK == union of key columns.
#
#   - is_identity_foreign_key(table, foreign_key, target)
#       Key columns are this table's PK and reference the target's PK.
#
#   - is_fake_inheritance(table, foreign_key, target, supports_foreign_keys)
#       Without FK constraints: the single PK column is "<target>_id".
#
#   - implied_inheritance_key(table, candidates, supports_foreign_keys)
#       Re-derive the key is_fake_inheritance would accept, from names.
#
# CLASS: SchemaExpansionPolicy
# ----------------------------
#   - can_expand(from_table, to_table) -> bool
#       same schema                      → True
#       target has no schema             → True
#       source has none, target has one  → False
#       allow-list (from, to) is True    → True
#       otherwise                        → False
#
# ==============================================

from typing import Dict, Iterable, Optional, Sequence, Tuple

from reverse_mapper.naming.inflector import strip_id_suffix
from reverse_mapper.schema.model import ForeignKey, QualifiedName, Table


def effective_foreign_keys(table: Table, supports_foreign_keys: bool) -> Tuple[ForeignKey, ...]:
    if not supports_foreign_keys:
        return ()
    return table.foreign_keys


def is_join_table_shape(table: Table, foreign_keys: Sequence[ForeignKey]) -> bool:
    """
    True if a table only links two other tables.

    Args:
        table: The table to test
        foreign_keys: Its effective foreign keys

    Returns:
        True when the sorted PK columns equal the sorted local columns
        of all keys, there are exactly two keys and no other columns
    """
    if not table.has_primary_key:
        return False

    foreign_key_columns = []
    for foreign_key in foreign_keys:
        foreign_key_columns.extend(foreign_key.local_columns)

    return (
        sorted(table.primary_key_columns) == sorted(foreign_key_columns)
        and len(foreign_keys) == 2
        and len(table.columns) == len(foreign_keys)
    )


def is_same_schema(table_a: str, table_b: str) -> bool:
    return QualifiedName.parse(table_a).schema == QualifiedName.parse(table_b).schema


def is_identity_foreign_key(table: Table, foreign_key: ForeignKey, target: Table) -> bool:
    """The relationship *is* the identity of `table`: a one-to-one."""
    if not table.has_primary_key or not target.has_primary_key:
        return False
    return (
        set(foreign_key.foreign_columns) == set(target.primary_key_columns)
        and set(foreign_key.local_columns) == set(table.primary_key_columns)
    )


def is_fake_inheritance(
    table: Table,
    foreign_key: ForeignKey,
    target: Table,
    supports_foreign_keys: bool,
) -> bool:
    """
    Detect a supertype/subtype split in a database without FK constraints.

    `table` is the subtype: its single primary key column is named after
    the supertype (`<target>_id`) and is the key's only local column.
    """
    if supports_foreign_keys:
        return False
    if len(table.primary_key_columns) != 1 or foreign_key.local_columns != table.primary_key_columns:
        return False

    column = table.primary_key_columns[0].lower()
    if not column.endswith("_id"):
        return False
    return strip_id_suffix(column) == target.qualified.bare.lower()


def implied_inheritance_key(
    table: Table,
    candidates: Iterable[Table],
    supports_foreign_keys: bool,
) -> Optional[ForeignKey]:
    """
    Build the undeclared key of a fake-inheritance subtype table.

    Args:
        table: Possible subtype table
        candidates: Entity tables that may be its supertype
        supports_foreign_keys: Platform capability flag

    Returns:
        ForeignKey from table's PK to the supertype's single-column PK,
        or None when no supertype matches
    """
    if supports_foreign_keys or len(table.primary_key_columns) != 1:
        return None

    for candidate in candidates:
        if candidate.name == table.name or len(candidate.primary_key_columns) != 1:
            continue
        implied = ForeignKey(
            local_table=table.name,
            foreign_table=candidate.name,
            local_columns=table.primary_key_columns,
            foreign_columns=candidate.primary_key_columns,
        )
        if is_fake_inheritance(table, implied, candidate, supports_foreign_keys):
            return implied
    return None


class SchemaExpansionPolicy:
    """Whether a relationship may be inferred across schemas."""

    def __init__(self, allowed: Optional[Dict[Tuple[str, str], bool]] = None):
        self._allowed: Dict[Tuple[str, str], bool] = dict(allowed or {})

    def allow(self, from_schema: str, to_schema: str, allowed: bool = True) -> None:
        self._allowed[(from_schema, to_schema)] = allowed

    @property
    def entries(self) -> Dict[Tuple[str, str], bool]:
        return dict(self._allowed)

    def can_expand(self, from_table: str, to_table: str) -> bool:
        source = QualifiedName.parse(from_table).schema
        target = QualifiedName.parse(to_table).schema

        if source == target:
            return True
        if target is None:
            return True
        if source is None:
            return False
        return self._allowed.get((source, target), False)
