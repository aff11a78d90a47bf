# ==============================================
# Mapping (Data Classes)
# ==============================================
#
# PURPOSE:
#   Data classes that represent the OUTPUT of classification and
#   inference: which tables are entities, and for one entity, its
#   field and association mappings.
#
# ENUMS:
# ------
# - GeneratorType(Enum): AUTO, NONE
#     Identifier generation strategy of an entity.
# - AssociationKind(Enum): ONE_TO_ONE, MANY_TO_ONE, ONE_TO_MANY, MANY_TO_MANY
#
# CLASSES:
# --------
# - FieldMapping (frozen dataclass)
#     One scalar column mapped to one field.
#
# - JoinColumn / JoinTable (frozen dataclasses)
#     Column pairs of an owning association.
#
# - AssociationMapping (frozen dataclass)
#     One association. Owning sides carry join_columns or join_table,
#     inverse sides carry mapped_by.
#
# - ClassificationResult (frozen dataclass)
#     Entity tables, join tables and the class name → table name map.
#
# - EntityMapping (dataclass)
#     Everything inferred for one entity. Built fresh per request.
#
#   FieldMapping, AssociationMapping and EntityMapping provide
#   to_dict() with the conventional ORM mapping keys (fieldName,
#   targetEntity, joinColumns, mappedBy, ...).
#
# ==============================================

from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Tuple, Dict, Any, List

from reverse_mapper.diagnostics import Diagnostic, DiagnosticKind
from reverse_mapper.errors import UnknownEntityError
from reverse_mapper.schema.model import Table


class GeneratorType(Enum):
    """
    Identifier generation strategy.

    - AUTO: database generated (auto-increment / identity)
    - NONE: assigned by the application, composite or foreign keys
    """
    AUTO = "auto"
    NONE = "none"


class AssociationKind(Enum):
    ONE_TO_ONE = "oneToOne"
    MANY_TO_ONE = "manyToOne"
    ONE_TO_MANY = "oneToMany"
    MANY_TO_MANY = "manyToMany"


@dataclass(frozen=True)
class FieldMapping:
    """A single column mapped to a scalar field."""

    field_name: str
    column_name: str
    type: str
    nullable: bool = True
    length: Optional[int] = None
    fixed: Optional[bool] = None
    unsigned: Optional[bool] = None
    id: bool = False
    association_key: bool = False  # Identifier column that is also a foreign key column

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "fieldName": self.field_name,
            "columnName": self.column_name,
            "type": self.type,
            "nullable": self.nullable,
        }
        if self.length is not None:
            data["length"] = self.length
        if self.fixed is not None:
            data["fixed"] = self.fixed
        if self.unsigned is not None:
            data["unsigned"] = self.unsigned
        if self.id:
            data["id"] = True
        if self.association_key:
            data["associationKey"] = True
        return data


@dataclass(frozen=True)
class JoinColumn:
    name: str
    referenced_column_name: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "referencedColumnName": self.referenced_column_name}


@dataclass(frozen=True)
class JoinTable:
    name: str
    join_columns: Tuple[JoinColumn, ...]
    inverse_join_columns: Tuple[JoinColumn, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "joinColumns": [column.to_dict() for column in self.join_columns],
            "inverseJoinColumns": [column.to_dict() for column in self.inverse_join_columns],
        }


@dataclass(frozen=True)
class AssociationMapping:
    """
    One association of an entity.

    Which optional attributes are set depends on the kind and side:
    - owning to-one:    join_columns (+ inversed_by for many-to-one)
    - owning M:N:       join_table + inversed_by
    - inverse sides:    mapped_by
    - collections:      index_by when a natural lookup column exists
    """

    kind: AssociationKind
    field_name: str
    target_entity: str
    join_columns: Tuple[JoinColumn, ...] = field(default_factory=tuple)
    mapped_by: Optional[str] = None
    inversed_by: Optional[str] = None
    join_table: Optional[JoinTable] = None
    index_by: Optional[str] = None
    cascade_all: bool = False

    @property
    def is_owning_side(self) -> bool:
        return self.mapped_by is None

    @property
    def is_collection(self) -> bool:
        return self.kind in (AssociationKind.ONE_TO_MANY, AssociationKind.MANY_TO_MANY)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.kind.value,
            "fieldName": self.field_name,
            "targetEntity": self.target_entity,
        }
        if self.join_columns:
            data["joinColumns"] = [column.to_dict() for column in self.join_columns]
        if self.mapped_by is not None:
            data["mappedBy"] = self.mapped_by
        if self.inversed_by is not None:
            data["inversedBy"] = self.inversed_by
        if self.join_table is not None:
            data["joinTable"] = self.join_table.to_dict()
        if self.index_by is not None:
            data["indexBy"] = self.index_by
        if self.cascade_all:
            data["cascade"] = ["all"]
        return data


@dataclass(frozen=True)
class ClassificationResult:
    """
    Partition of the schema into entity tables and join tables.

    entity_tables and join_tables are keyed by table name and keep
    snapshot order; class_names maps class name → table name.
    """

    entity_tables: Dict[str, Table]
    join_tables: Dict[str, Table]
    class_names: Dict[str, str]
    supports_foreign_keys: bool = True
    diagnostics: Tuple[Diagnostic, ...] = field(default_factory=tuple)

    def table_for_class(self, class_name: str) -> Table:
        if class_name not in self.class_names:
            raise UnknownEntityError(class_name)
        return self.entity_tables[self.class_names[class_name]]

    def is_join_table(self, table_name: str) -> bool:
        return table_name in self.join_tables

    def find_entity_table(self, table_name: str) -> Optional[Table]:
        """Exact lookup first, then case-insensitive."""
        if table_name in self.entity_tables:
            return self.entity_tables[table_name]
        lowered = table_name.lower()
        for name, table in self.entity_tables.items():
            if name.lower() == lowered:
                return table
        return None


@dataclass
class EntityMapping:
    """All mappings inferred for one entity class."""

    name: str
    table_name: str
    custom_repository_class: Optional[str] = None
    id_generator: GeneratorType = GeneratorType.NONE
    identifiers: List[FieldMapping] = field(default_factory=list)
    fields: List[FieldMapping] = field(default_factory=list)
    associations: List[AssociationMapping] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def all_fields(self) -> List[FieldMapping]:
        return self.identifiers + self.fields

    @property
    def identifier_field_names(self) -> List[str]:
        return [mapping.field_name for mapping in self.identifiers]

    def has_association(self, field_name: str) -> bool:
        return any(mapping.field_name == field_name for mapping in self.associations)

    def association(self, field_name: str) -> Optional[AssociationMapping]:
        for mapping in self.associations:
            if mapping.field_name == field_name:
                return mapping
        return None

    def map_association(self, mapping: AssociationMapping) -> bool:
        """
        Register an association unless its field name is taken.

        Returns:
            True if registered. On collision a DUPLICATE_ASSOCIATION
            diagnostic is recorded and the first mapping is kept.
        """
        if self.has_association(mapping.field_name):
            self.diagnostics.append(Diagnostic(
                kind=DiagnosticKind.DUPLICATE_ASSOCIATION,
                table=self.table_name,
                message=(
                    f"Association '{mapping.field_name}' to {mapping.target_entity} "
                    f"already defined on {self.name}; keeping the first one"
                ),
            ))
            return False
        self.associations.append(mapping)
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "table": self.table_name,
            "customRepositoryClass": self.custom_repository_class,
            "idGenerator": self.id_generator.value,
            "id": [mapping.to_dict() for mapping in self.identifiers],
            "fields": [mapping.to_dict() for mapping in self.fields],
            "associations": [mapping.to_dict() for mapping in self.associations],
        }
