# ==============================================
# PERSISTENCE: inferred mappings and schema snapshots on disk
# ==============================================
#
# This package writes inferred mappings out as JSON and stores
# schema snapshots so that inference can run without a database.
#
# Modules:
# --------
# - mapping_store.py  → Save/load mappings, diagnostics, schema snapshot
#
# ==============================================

from .mapping_store import MappingStore, read_schema_file

__all__ = ["MappingStore", "read_schema_file"]
