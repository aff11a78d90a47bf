# ==============================================
# ANALYSIS: classification and mapping inference
# ==============================================
#
# Modules:
# --------
# - mapping.py        → output data classes (EntityMapping, AssociationMapping, ...)
# - predicates.py     → structural predicates + SchemaExpansionPolicy
# - classifier.py     → TableClassifier (entity vs join tables)
# - field_builder.py  → FieldMappingBuilder (columns → fields, id generator)
# - associations.py   → AssociationInferrer (M:N, owning, inverse)
#
# ==============================================

from .mapping import (
    AssociationKind,
    AssociationMapping,
    ClassificationResult,
    EntityMapping,
    FieldMapping,
    GeneratorType,
    JoinColumn,
    JoinTable,
)
from .predicates import SchemaExpansionPolicy
from .classifier import TableClassifier
from .field_builder import FieldMappingBuilder
from .associations import AssociationInferrer

__all__ = [
    "AssociationKind",
    "AssociationMapping",
    "ClassificationResult",
    "EntityMapping",
    "FieldMapping",
    "GeneratorType",
    "JoinColumn",
    "JoinTable",
    "SchemaExpansionPolicy",
    "TableClassifier",
    "FieldMappingBuilder",
    "AssociationInferrer",
]
