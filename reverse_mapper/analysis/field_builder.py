# ==============================================
# FieldMappingBuilder
# ==============================================
#
# PURPOSE:
#   Turn the columns of one entity table into scalar field mappings
#   and decide how its identifier is generated.
#
# RULES:
# ------
#   1. Foreign key column outside the PK   → skipped (it becomes an association)
#   2. PK column                           → identifier field
#   3. PK column that is also an FK column → identifier, association_key=True
#   4. STRING columns copy length/fixed, INTEGER columns copy unsigned
#
#   Identifier generation is AUTO only for exactly one integral
#   identifier that no foreign key fully covers; NONE otherwise.
#
# ==============================================

from typing import List, Sequence, Tuple

from reverse_mapper.analysis.mapping import FieldMapping, GeneratorType
from reverse_mapper.naming.name_resolver import NameResolver
from reverse_mapper.schema.model import Column, ColumnKind, ForeignKey, Table


class FieldMappingBuilder:
    def __init__(self, names: NameResolver):
        self.names = names

    def build(
        self,
        table: Table,
        foreign_keys: Sequence[ForeignKey],
    ) -> Tuple[List[FieldMapping], List[FieldMapping]]:
        """
        Map every column of a table.

        Args:
            table: The entity table
            foreign_keys: Its effective foreign keys

        Returns:
            Tuple of (identifier_fields, regular_fields), column order kept
        """
        primary_key = set(table.primary_key_columns)
        foreign_key_columns = set()
        for foreign_key in foreign_keys:
            foreign_key_columns.update(foreign_key.local_columns)

        identifiers: List[FieldMapping] = []
        fields: List[FieldMapping] = []

        for column in table.columns:
            is_id = column.name in primary_key
            is_foreign_key = column.name in foreign_key_columns
            if is_foreign_key and not is_id:
                continue

            mapping = self._map_column(table, column, is_id, is_foreign_key)
            if is_id:
                identifiers.append(mapping)
            else:
                fields.append(mapping)

        return identifiers, fields

    def id_generator_for(
        self,
        table: Table,
        identifiers: Sequence[FieldMapping],
        foreign_keys: Sequence[ForeignKey],
    ) -> GeneratorType:
        if len(identifiers) != 1:
            return GeneratorType.NONE

        column = table.column(identifiers[0].column_name)
        if column is None or not column.is_integral:
            return GeneratorType.NONE

        # An identifier defined by a foreign key is assigned, never generated
        primary_key = set(table.primary_key_columns)
        for foreign_key in foreign_keys:
            if primary_key <= set(foreign_key.local_columns):
                return GeneratorType.NONE

        return GeneratorType.AUTO

    def _map_column(self, table: Table, column: Column, is_id: bool, is_foreign_key: bool) -> FieldMapping:
        length = None
        fixed = None
        unsigned = None
        if column.kind is ColumnKind.STRING:
            length = column.length
            fixed = column.fixed
        elif column.kind is ColumnKind.INTEGER:
            unsigned = column.unsigned

        return FieldMapping(
            field_name=self.names.field_name_for(table.name, column.name, is_foreign_key),
            column_name=column.name,
            type=column.type_name,
            nullable=column.nullable,
            length=length,
            fixed=fixed,
            unsigned=unsigned,
            id=is_id,
            association_key=is_id and is_foreign_key,
        )
