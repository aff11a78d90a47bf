# ==============================================
# AssociationInferrer
# ==============================================
#
# PURPOSE:
#   Infer every association of one entity from the foreign keys of
#   the classified schema. This is where the relationship heuristics
#   live.
#
# CLASS: AssociationInferrer
# --------------------------
#
#   Constructor:
#   ------------
#   - __init__(names: NameResolver, policy: SchemaExpansionPolicy)
#
#   Methods:
#   --------
#   - infer(mapping, table, classification) -> None
#       Runs the three passes below, in order, registering
#       associations on `mapping`.
#
#   PASS 1: MANY-TO-MANY (map_many_to_many)
#     For each join table with a key pointing at this table:
#       - the other key gives the target and the field name
#       - first declared join table column belongs to my key
#           → owning side: join_table + inversed_by
#         otherwise
#           → inverse side: mapped_by
#       - single-column other key → index_by its referenced column
#     Only the first matching key of a join table is used.
#
#   PASS 2: OWNING SIDE (map_owning_side)
#     For each relationship key of this table:
#       - identity key or fake inheritance → ONE_TO_ONE
#       - anything else                    → MANY_TO_ONE (+ inversed_by)
#     inversed_by names the collection the target actually maps back
#     (suffix included), or is None when the target maps none.
#
#   PASS 3: INVERSE SIDE (map_inverse_side)
#     For each entity table with a key pointing at this table:
#       - cross-schema expansion denied    → skipped
#       - no FK constraints and the key mirrors a one-to-one this
#         table already owns               → skipped (double one-to-one)
#       - identity key / fake inheritance  → inverse ONE_TO_ONE
#       - anything else                    → ONE_TO_MANY collection
#
#   "Relationship keys" are the declared foreign keys when the
#   platform enforces them, otherwise only the key implied by a
#   fake-inheritance naming pattern.
#
# ==============================================

from typing import List, Optional, Tuple

from reverse_mapper.analysis.mapping import (
    AssociationKind,
    AssociationMapping,
    ClassificationResult,
    EntityMapping,
    JoinColumn,
    JoinTable,
)
from reverse_mapper.analysis.predicates import (
    SchemaExpansionPolicy,
    effective_foreign_keys,
    implied_inheritance_key,
    is_fake_inheritance,
    is_identity_foreign_key,
)
from reverse_mapper.diagnostics import Diagnostic, DiagnosticKind
from reverse_mapper.naming.inflector import capitalize, pluralize
from reverse_mapper.naming.name_resolver import NameResolver
from reverse_mapper.schema.model import ForeignKey, Table


class AssociationInferrer:
    """Derives association mappings for one entity at a time."""

    def __init__(self, names: NameResolver, policy: SchemaExpansionPolicy):
        self.names = names
        self.policy = policy

    def infer(self, mapping: EntityMapping, table: Table, classification: ClassificationResult) -> None:
        self.map_many_to_many(mapping, table, classification)
        self.map_owning_side(mapping, table, classification)
        self.map_inverse_side(mapping, table, classification)

    # ------------------------------------------
    # PASS 1: many-to-many through join tables
    # ------------------------------------------

    def map_many_to_many(self, mapping: EntityMapping, table: Table, classification: ClassificationResult) -> None:
        for join_table in classification.join_tables.values():
            join_keys = join_table.foreign_keys
            for my_key in join_keys:
                if not my_key.references(table.name):
                    continue

                other_key = next((key for key in join_keys if key != my_key), None)
                if other_key is None:
                    mapping.diagnostics.append(Diagnostic(
                        kind=DiagnosticKind.INSUFFICIENT_JOIN_TABLE_INFO,
                        table=join_table.name,
                        message=f"Join table has no second foreign key besides the one to {table.name}",
                    ))
                    break

                mapping.map_association(self._many_to_many(join_table, my_key, other_key))
                break

    def _many_to_many(self, join_table: Table, my_key: ForeignKey, other_key: ForeignKey) -> AssociationMapping:
        my_column = my_key.local_columns[0]
        my_field = pluralize(self.names.field_name_for(join_table.name, my_column, True))
        field_name = pluralize(self.names.field_name_for(join_table.name, other_key.local_columns[0], True))
        target_entity = self.names.class_name_for(other_key.foreign_table)

        # Collection keyed by the target's identifier when it is a single column
        index_by = other_key.foreign_columns[0] if len(other_key.foreign_columns) == 1 else None

        if join_table.columns and join_table.columns[0].name == my_column:
            return AssociationMapping(
                kind=AssociationKind.MANY_TO_MANY,
                field_name=field_name,
                target_entity=target_entity,
                inversed_by=my_field,
                join_table=JoinTable(
                    name=join_table.name.lower(),
                    join_columns=self._join_columns(my_key),
                    inverse_join_columns=self._join_columns(other_key),
                ),
                index_by=index_by,
            )

        return AssociationMapping(
            kind=AssociationKind.MANY_TO_MANY,
            field_name=field_name,
            target_entity=target_entity,
            mapped_by=my_field,
            index_by=index_by,
        )

    # ------------------------------------------
    # PASS 2: this table's own foreign keys
    # ------------------------------------------

    def map_owning_side(
        self,
        mapping: EntityMapping,
        table: Table,
        classification: ClassificationResult,
        resolve_inverse: bool = True,
    ) -> None:
        for key in self.relationship_keys(table, classification):
            target = classification.find_entity_table(key.foreign_table)
            if target is None:
                mapping.diagnostics.append(Diagnostic(
                    kind=DiagnosticKind.UNRESOLVED_TARGET,
                    table=table.name,
                    message=f"Foreign key references unmapped table {key.foreign_table}",
                ))
                continue

            field_name = self.names.field_name_for(table.name, self.pivot_column(key), True)
            target_entity = self.names.class_name_for(target.name)

            if self.is_one_to_one(table, key, target, classification):
                mapping.map_association(AssociationMapping(
                    kind=AssociationKind.ONE_TO_ONE,
                    field_name=field_name,
                    target_entity=target_entity,
                    join_columns=self._join_columns(key),
                ))
            else:
                inversed_by = pluralize(self.reference_field_name(table))
                if resolve_inverse:
                    inversed_by = self.inverse_collection_name(table, field_name, target, classification)
                mapping.map_association(AssociationMapping(
                    kind=AssociationKind.MANY_TO_ONE,
                    field_name=field_name,
                    target_entity=target_entity,
                    join_columns=self._join_columns(key),
                    inversed_by=inversed_by,
                ))

    # ------------------------------------------
    # PASS 3: other tables' keys pointing here
    # ------------------------------------------

    def map_inverse_side(self, mapping: EntityMapping, table: Table, classification: ClassificationResult) -> None:
        for candidate in classification.entity_tables.values():
            for key in self.relationship_keys(candidate, classification):
                if not key.references(table.name):
                    continue

                if not self.policy.can_expand(table.name, candidate.name):
                    mapping.diagnostics.append(Diagnostic(
                        kind=DiagnosticKind.CROSS_SCHEMA_SKIPPED,
                        table=table.name,
                        message=f"Not expanding to {candidate.name}: schema not allowed",
                    ))
                    continue

                if self.owns_mirrored_one_to_one(table, key, candidate, classification):
                    continue

                mapped_by = self.names.field_name_for(candidate.name, self.pivot_column(key), True)
                target_entity = self.names.class_name_for(candidate.name)
                field_name = self.reference_field_name(candidate)

                if self.is_one_to_one(candidate, key, table, classification):
                    # First mapping wins; a second one is only reported
                    mapping.map_association(AssociationMapping(
                        kind=AssociationKind.ONE_TO_ONE,
                        field_name=field_name,
                        target_entity=target_entity,
                        mapped_by=mapped_by,
                        cascade_all=True,
                    ))
                    continue

                index_by, cascade_all = self._collection_index(candidate, key)
                field_name = pluralize(field_name)
                if mapping.has_association(field_name):
                    field_name += capitalize(self._disambiguator(candidate, key, mapped_by))

                mapping.map_association(AssociationMapping(
                    kind=AssociationKind.ONE_TO_MANY,
                    field_name=field_name,
                    target_entity=target_entity,
                    mapped_by=mapped_by,
                    index_by=index_by,
                    cascade_all=cascade_all,
                ))

    # ------------------------------------------
    # Shared helpers
    # ------------------------------------------

    def relationship_keys(self, table: Table, classification: ClassificationResult) -> List[ForeignKey]:
        supports = classification.supports_foreign_keys
        keys = list(effective_foreign_keys(table, supports))
        implied = implied_inheritance_key(table, classification.entity_tables.values(), supports)
        if implied is not None:
            keys.append(implied)
        return keys

    def is_one_to_one(
        self,
        table: Table,
        key: ForeignKey,
        target: Table,
        classification: ClassificationResult,
    ) -> bool:
        return (
            is_identity_foreign_key(table, key, target)
            or is_fake_inheritance(table, key, target, classification.supports_foreign_keys)
        )

    def owns_mirrored_one_to_one(
        self,
        table: Table,
        key: ForeignKey,
        candidate: Table,
        classification: ClassificationResult,
    ) -> bool:
        """
        True if `key` (candidate → table) is the reverse of a one-to-one
        that `table` already owns towards `candidate`.

        Only two undeclared fake-inheritance keys can mirror each other,
        so this never fires when the platform enforces FK constraints.
        """
        if classification.supports_foreign_keys:
            return False

        mirrored = [(foreign, local) for local, foreign in key.column_pairs]
        for own_key in self.relationship_keys(table, classification):
            if (
                own_key.references(candidate.name)
                and own_key.column_pairs == mirrored
                and self.is_one_to_one(table, own_key, candidate, classification)
            ):
                return True
        return False

    def inverse_collection_name(
        self,
        table: Table,
        field_name: str,
        target: Table,
        classification: ClassificationResult,
    ) -> Optional[str]:
        """
        Name of the collection `target` maps back onto `table.field_name`.

        Replays the target's passes on a scratch mapping so the collision
        suffix is the one the target really gets. Returns None when the
        target maps no such collection (denied cross-schema expansion or
        a dropped duplicate).
        """
        scratch = EntityMapping(name=self.names.class_name_for(target.name), table_name=target.name)
        self.map_many_to_many(scratch, target, classification)
        self.map_owning_side(scratch, target, classification, resolve_inverse=False)
        self.map_inverse_side(scratch, target, classification)

        source_entity = self.names.class_name_for(table.name)
        for association in scratch.associations:
            if (
                association.kind is AssociationKind.ONE_TO_MANY
                and association.target_entity == source_entity
                and association.mapped_by == field_name
            ):
                return association.field_name
        return None

    def pivot_column(self, key: ForeignKey) -> str:
        """
        The local column a to-one association is named after.

        Single-column keys use their column. Multi-column keys prefer a
        column named like the referenced table, else the first column.
        """
        if len(key.local_columns) == 1:
            return key.local_columns[0]

        foreign_name = key.foreign_table.lower()
        foreign_bare = foreign_name.split(".", 1)[-1]
        for column in key.local_columns:
            if column.lower() in (foreign_name, foreign_bare):
                return column
        return key.local_columns[0]

    def reference_field_name(self, referencing: Table) -> str:
        # Field name for "the rows of `referencing`", before pluralisation
        return self.names.field_name_for(referencing.name, referencing.qualified.bare, True)

    def fancy_column(self, candidate: Table, column: str) -> str:
        """Strip a leading "<candidate>_" or "<schema>." from a key column."""
        lowered = column.lower()
        table_prefix = candidate.qualified.bare.lower() + "_"
        if lowered.startswith(table_prefix) and len(lowered) > len(table_prefix):
            return column[len(table_prefix):]

        schema = candidate.qualified.schema
        if schema:
            schema_prefix = schema.lower() + "."
            if lowered.startswith(schema_prefix) and len(lowered) > len(schema_prefix):
                return column[len(schema_prefix):]
        return column

    def _disambiguator(self, candidate: Table, key: ForeignKey, mapped_by: str) -> str:
        pivot = self.pivot_column(key)
        fancy = self.fancy_column(candidate, pivot)
        if fancy == pivot:
            return mapped_by
        return self.names.field_name_for(candidate.name, fancy, True)

    def _collection_index(self, candidate: Table, key: ForeignKey) -> Tuple[Optional[str], bool]:
        primary_key = candidate.primary_key_columns
        if len(primary_key) == 1:
            return primary_key[0], False

        remaining = [column for column in primary_key if column not in key.local_columns]
        index_by = remaining[0] if len(remaining) == 1 else None
        return index_by, True

    @staticmethod
    def _join_columns(key: ForeignKey) -> Tuple[JoinColumn, ...]:
        return tuple(
            JoinColumn(name=local, referenced_column_name=foreign)
            for local, foreign in key.column_pairs
        )
