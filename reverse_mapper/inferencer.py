# ==============================================
# SchemaMappingInferencer: Orchestrator
# ==============================================
#
# PURPOSE:
#   This is the MAIN CLASS that ties the inference passes together.
#   Users interact with this class only. Everything else is internal.
#
# HOW IT CONNECTS THE PASSES:
#
#   ┌──────────────────────────────────────────────────────────┐
#   │                 SchemaMappingInferencer                  │
#   │                                                          │
#   │  ┌──────────────────────────────────────────────┐        │
#   │  │ SNAPSHOT (once)                              │        │
#   │  │  SchemaSource → build_snapshot()             │        │
#   │  └──────────────┬───────────────────────────────┘        │
#   │                 │ tables + FK support flag               │
#   │                 ▼                                        │
#   │  ┌──────────────────────────────────────────────┐        │
#   │  │ CLASSIFICATION (once, under a lock)          │        │
#   │  │  TableClassifier → ClassificationResult      │        │
#   │  └──────────────┬───────────────────────────────┘        │
#   │                 │ entity tables / join tables            │
#   │                 ▼                                        │
#   │  ┌──────────────────────────────────────────────┐        │
#   │  │ PER ENTITY (fresh on every request)          │        │
#   │  │  FieldMappingBuilder → AssociationInferrer   │        │
#   │  │  → EntityMapping                             │        │
#   │  └──────────────────────────────────────────────┘        │
#   └──────────────────────────────────────────────────────────┘
#
#
# CLASS: SchemaMappingInferencer
# ------------------------------
#
#   Constructor:
#   ------------
#   - __init__(source: SchemaSource | None = None,
#              mapping_config: MappingConfig | None = None)
#       Without a source, tables must be injected (from_tables).
#
#   - from_tables(entity_tables, join_tables=(), supports_foreign_keys=True,
#                 mapping_config=None)   [classmethod]
#       Skip introspection and classification heuristics: trust the
#       caller's partition.
#
#   Configuration:
#   --------------
#   - set_namespace(namespace)
#   - set_repository_class_name(class_name)
#   - set_class_name_for_table(table_name, class_name)
#   - set_field_name_for_column(table_name, column_name, field_name)
#   - add_prefix_namespace(prefix, namespace)
#   - allow_cross_schema(from_schema, to_schema, allowed=True)
#   Naming changes discard the cached classification (class names
#   are its keys); the schema snapshot itself is never re-read.
#
#   Public Methods (User-facing API):
#   ---------------------------------
#   - get_all_class_names() -> list[str]
#   - load_mapping(class_name) -> EntityMapping
#       Raises UnknownEntityError for names not produced by this schema.
#   - load_all_mappings() -> dict[str, EntityMapping]
#   - is_transient(class_name) -> bool
#       Always True: inferred classes are never backed by user code.
#   - diagnostics() -> list[Diagnostic]
#       Snapshot and classification events.
#   - snapshot() -> SchemaSnapshot
#       The tables actually classified (the source is read once).
#
# ==============================================

import threading
from typing import Dict, Iterable, List, Optional

from reverse_mapper.analysis.associations import AssociationInferrer
from reverse_mapper.analysis.classifier import TableClassifier
from reverse_mapper.analysis.field_builder import FieldMappingBuilder
from reverse_mapper.analysis.mapping import ClassificationResult, EntityMapping
from reverse_mapper.analysis.predicates import SchemaExpansionPolicy
from reverse_mapper.config import MappingConfig
from reverse_mapper.diagnostics import Diagnostic
from reverse_mapper.errors import MappingError
from reverse_mapper.naming.name_resolver import NameResolver
from reverse_mapper.schema.model import Table
from reverse_mapper.schema.source import SchemaSnapshot, SchemaSource, build_snapshot


class SchemaMappingInferencer:
    """
    Infers ORM mapping metadata from a relational schema.

    Classification runs once and is shared by every request; entity
    mappings are rebuilt on each call and never cached.
    """

    def __init__(
        self,
        source: Optional[SchemaSource] = None,
        mapping_config: Optional[MappingConfig] = None,
    ):
        """
        Initialize the inferencer and its passes.

        Args:
            source: Where tables come from. May be None when tables are
                    injected through from_tables().
            mapping_config: Naming and scoping options. Defaults apply if None.
        """
        config = mapping_config or MappingConfig()

        self._source = source
        self._schema_filter = config.schema
        self._repository_class = config.repository_class

        # Naming
        self._names = NameResolver(config.namespace)
        for prefix, namespace in config.table_prefixes.items():
            self._names.add_prefix_namespace(prefix, namespace)

        # Cross-schema policy
        self._policy = SchemaExpansionPolicy()
        for from_schema, to_schema in config.cross_schema:
            self._policy.allow(from_schema, to_schema)

        # Passes
        self._classifier = TableClassifier(self._names, self._policy)
        self._field_builder = FieldMappingBuilder(self._names)
        self._associations = AssociationInferrer(self._names, self._policy)

        # Internal state
        self._lock = threading.Lock()
        self._snapshot: Optional[SchemaSnapshot] = None
        self._injected: Optional[tuple] = None
        self._classification: Optional[ClassificationResult] = None

    @classmethod
    def from_tables(
        cls,
        entity_tables: Iterable[Table],
        join_tables: Iterable[Table] = (),
        supports_foreign_keys: bool = True,
        mapping_config: Optional[MappingConfig] = None,
    ) -> "SchemaMappingInferencer":
        """
        Build an inferencer over a caller-provided partition of tables.

        Args:
            entity_tables: Tables to map as entities
            join_tables: Tables to treat as many-to-many links
            supports_foreign_keys: Whether the declared foreign keys count
            mapping_config: Naming and scoping options

        Returns:
            SchemaMappingInferencer that never touches a schema source
        """
        inferencer = cls(source=None, mapping_config=mapping_config)
        inferencer._injected = (tuple(entity_tables), tuple(join_tables), supports_foreign_keys)
        return inferencer

    # ------------------------------------------
    # Configuration
    # ------------------------------------------

    def set_namespace(self, namespace: str) -> None:
        self._names.set_namespace(namespace)
        self._invalidate()

    def set_repository_class_name(self, class_name: Optional[str]) -> None:
        self._repository_class = class_name

    def set_class_name_for_table(self, table_name: str, class_name: str) -> None:
        self._names.set_class_name(table_name, class_name)
        self._invalidate()

    def set_field_name_for_column(self, table_name: str, column_name: str, field_name: str) -> None:
        self._names.set_field_name(table_name, column_name, field_name)

    def add_prefix_namespace(self, prefix: str, namespace: str) -> None:
        self._names.add_prefix_namespace(prefix, namespace)
        self._invalidate()

    def allow_cross_schema(self, from_schema: str, to_schema: str, allowed: bool = True) -> None:
        self._policy.allow(from_schema, to_schema, allowed)
        self._invalidate()

    # ------------------------------------------
    # Classification
    # ------------------------------------------

    def classify(self) -> ClassificationResult:
        """
        Return the classification, computing it on first use.

        Returns:
            The shared ClassificationResult
        """
        with self._lock:
            if self._classification is None:
                self._classification = self._build_classification()
            return self._classification

    def _build_classification(self) -> ClassificationResult:
        if self._injected is not None:
            entity_tables, join_tables, supports = self._injected
            return self._classifier.from_tables(entity_tables, join_tables, supports)

        snapshot = self._read_snapshot()
        return self._classifier.classify(
            snapshot.tables,
            supports_foreign_keys=snapshot.supports_foreign_keys,
            diagnostics=snapshot.diagnostics,
        )

    def _read_snapshot(self) -> SchemaSnapshot:
        if self._snapshot is None:
            if self._source is None:
                raise MappingError("No schema source configured and no tables injected")
            self._snapshot = build_snapshot(self._source, self._schema_filter)
        return self._snapshot

    def snapshot(self) -> SchemaSnapshot:
        """
        Return the tables this inferencer classifies, reading the source
        on first use only.

        Injected tables are returned entities first, then join tables.
        """
        if self._injected is not None:
            entity_tables, join_tables, supports = self._injected
            return SchemaSnapshot(tables=entity_tables + join_tables, supports_foreign_keys=supports)

        with self._lock:
            return self._read_snapshot()

    def _invalidate(self) -> None:
        with self._lock:
            self._classification = None

    # ------------------------------------------
    # Public API
    # ------------------------------------------

    def get_all_class_names(self) -> List[str]:
        return list(self.classify().class_names.keys())

    def is_transient(self, class_name: str) -> bool:
        return True

    def diagnostics(self) -> List[Diagnostic]:
        return list(self.classify().diagnostics)

    def load_mapping(self, class_name: str) -> EntityMapping:
        """
        Infer the complete mapping of one entity class.

        Args:
            class_name: A name returned by get_all_class_names()

        Returns:
            A freshly built EntityMapping

        Raises:
            UnknownEntityError: class_name is not an entity of this schema
        """
        classification = self.classify()
        table = classification.table_for_class(class_name)

        foreign_keys = self._associations.relationship_keys(table, classification)
        identifiers, fields = self._field_builder.build(table, foreign_keys)

        mapping = EntityMapping(
            name=class_name,
            table_name=table.name,
            custom_repository_class=self._repository_class,
            id_generator=self._field_builder.id_generator_for(table, identifiers, foreign_keys),
            identifiers=identifiers,
            fields=fields,
        )

        self._associations.infer(mapping, table, classification)
        return mapping

    def load_all_mappings(self) -> Dict[str, EntityMapping]:
        return {
            class_name: self.load_mapping(class_name)
            for class_name in self.get_all_class_names()
        }
