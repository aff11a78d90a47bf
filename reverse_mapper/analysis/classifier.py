# ==============================================
# TableClassifier
# ==============================================
#
# PURPOSE:
#   Partition a schema snapshot into join tables (pure many-to-many
#   links) and entity tables (mapped business objects). This is the
#   first pass of inference and runs once per inferencer.
#
# CLASS: TableClassifier
# ----------------------
#   Stateless apart from its collaborators.
#
#   Constructor:
#   ------------
#   - __init__(names: NameResolver, policy: SchemaExpansionPolicy)
#
#   Methods:
#   --------
#   - classify(
#         tables: list[Table],
#         supports_foreign_keys: bool = True,
#         diagnostics: list[Diagnostic] = ()
#     ) -> ClassificationResult
#       Applies rules in order:
#
#       RULE 1: NO PRIMARY KEY → SKIPPED
#         Cannot be mapped at all (MISSING_PRIMARY_KEY diagnostic).
#
#       RULE 2: JOIN TABLE SHAPE → JOIN TABLE
#         is_join_table_shape() AND both keys expandable relative to
#         each other AND both keys point into the same schema.
#
#       RULE 3: EVERYTHING ELSE → ENTITY TABLE
#         Keyed by its resolved class name.
#
#   - from_tables(entity_tables, join_tables, supports_foreign_keys=True)
#       Manual override: trust a caller-provided partition.
#
# ==============================================

from typing import Dict, Iterable, List, Sequence

from reverse_mapper.analysis.mapping import ClassificationResult
from reverse_mapper.analysis.predicates import (
    SchemaExpansionPolicy,
    effective_foreign_keys,
    is_join_table_shape,
    is_same_schema,
)
from reverse_mapper.diagnostics import Diagnostic, DiagnosticKind
from reverse_mapper.naming.name_resolver import NameResolver
from reverse_mapper.schema.model import ForeignKey, Table


class TableClassifier:
    """Splits tables into entity tables and join tables."""

    def __init__(self, names: NameResolver, policy: SchemaExpansionPolicy):
        self.names = names
        self.policy = policy

    def classify(
        self,
        tables: Iterable[Table],
        supports_foreign_keys: bool = True,
        diagnostics: Sequence[Diagnostic] = (),
    ) -> ClassificationResult:
        """
        Classify every table of a snapshot.

        Args:
            tables: Tables in snapshot order
            supports_foreign_keys: Platform capability; when False no
                                   table can be a join table
            diagnostics: Events from earlier passes to carry along

        Returns:
            An immutable ClassificationResult
        """
        collected: List[Diagnostic] = list(diagnostics)
        entity_tables: Dict[str, Table] = {}
        join_tables: Dict[str, Table] = {}
        class_names: Dict[str, str] = {}

        for table in tables:
            # RULE 1: tables without a primary key cannot be mapped
            if not table.has_primary_key:
                collected.append(Diagnostic(
                    kind=DiagnosticKind.MISSING_PRIMARY_KEY,
                    table=table.name,
                    message="Table has no primary key and is not mapped",
                ))
                continue

            foreign_keys = effective_foreign_keys(table, supports_foreign_keys)

            # RULE 2: pure link tables
            if self.is_join_table(table, foreign_keys):
                join_tables[table.name] = table
                continue

            # RULE 3: entities
            class_names[self.names.class_name_for(table.name)] = table.name
            entity_tables[table.name] = table

        return ClassificationResult(
            entity_tables=entity_tables,
            join_tables=join_tables,
            class_names=class_names,
            supports_foreign_keys=supports_foreign_keys,
            diagnostics=tuple(collected),
        )

    def from_tables(
        self,
        entity_tables: Iterable[Table],
        join_tables: Iterable[Table],
        supports_foreign_keys: bool = True,
    ) -> ClassificationResult:
        entities: Dict[str, Table] = {}
        class_names: Dict[str, str] = {}
        for table in entity_tables:
            class_names[self.names.class_name_for(table.name)] = table.name
            entities[table.name] = table

        return ClassificationResult(
            entity_tables=entities,
            join_tables={table.name: table for table in join_tables},
            class_names=class_names,
            supports_foreign_keys=supports_foreign_keys,
        )

    def is_join_table(self, table: Table, foreign_keys: Sequence[ForeignKey]) -> bool:
        if not is_join_table_shape(table, foreign_keys):
            return False

        first, second = foreign_keys
        return (
            self.policy.can_expand(first.foreign_table, second.foreign_table)
            and self.policy.can_expand(second.foreign_table, first.foreign_table)
            and is_same_schema(first.foreign_table, second.foreign_table)
        )
