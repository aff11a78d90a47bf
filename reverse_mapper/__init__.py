# ==============================================
# Reverse Mapper
# ==============================================
#
# Infers ORM mapping metadata (entities, fields, associations)
# from an existing relational schema.
#
# Package Structure:
#
# reverse_mapper/
# ├── schema/          # Table snapshot model + schema sources (MySQL, static)
# ├── naming/          # Class / field name resolution and inflection
# ├── analysis/        # Table classification + mapping inference
# ├── persistence/     # Export mappings / load schema snapshots (JSON)
# ├── config.py        # Configuration management
# ├── inferencer.py    # SchemaMappingInferencer orchestrator
# └── cli.py           # Command line entry point
#
# ==============================================

__version__ = "0.1.0"
