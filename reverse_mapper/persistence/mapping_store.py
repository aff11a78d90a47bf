import json
from pathlib import Path
from typing import Any, Dict, List, Sequence

from reverse_mapper.analysis.mapping import EntityMapping
from reverse_mapper.diagnostics import Diagnostic
from reverse_mapper.schema.model import Table
from reverse_mapper.schema.source import StaticSchemaSource


# ==============================================
# MappingStore
# ==============================================
#
# PURPOSE:
#   Write inferred mappings to disk as JSON, and save / reload schema
#   snapshots so inference can be re-run without a database.
#
# WHAT IS PERSISTED:
#   1. Entity mappings   → one file per class
#   2. Diagnostics       → everything reported while inferring
#   3. Schema snapshot   → tables + FK support flag
#


def read_schema_file(path: str) -> StaticSchemaSource:
    """
    Load a schema snapshot JSON file as a schema source.

    Args:
        path: File written by MappingStore.save_schema()

    Returns:
        StaticSchemaSource over the stored tables
    """
    with open(path, 'r') as f:
        data = json.load(f)

    tables = [Table.from_dict(table) for table in data.get("tables", [])]
    return StaticSchemaSource(tables, supports_foreign_keys=data.get("supports_foreign_keys", True))


# CLASS: MappingStore
# -------------------
#   Stateful: holds a reference to the output directory.
#
#   Constructor:
#   ------------
#   - __init__(storage_dir: str = "mappings/")
#       Create storage directory (and entities/) if it doesn't exist.
#
class MappingStore:
    """
    Handles persistence of inferred mappings to disk.

    Files created:
    - mappings/entities/<ClassName>.json  → One EntityMapping each
    - mappings/diagnostics.json           → Diagnostics of the run
    - mappings/schema.json                → Schema snapshot
    """

    def __init__(self, storage_dir: str = "mappings/"):
        self.storage_dir = Path(storage_dir)
        self.entities_dir = self.storage_dir / "entities"

        self.entities_dir.mkdir(parents=True, exist_ok=True)

        self.diagnostics_file = self.storage_dir / "diagnostics.json"
        self.schema_file = self.storage_dir / "schema.json"
#   Methods:
#   --------
#   SAVING:
#   - save_mappings(mappings: dict[str, EntityMapping]) -> None
#   - save_diagnostics(diagnostics: list[Diagnostic]) -> None
#       Also collects the diagnostics recorded on each mapping.
#   - save_schema(tables, supports_foreign_keys) -> None
#   - save_all(mappings, diagnostics) -> None
#
    def entity_file(self, class_name: str) -> Path:
        return self.entities_dir / f"{class_name}.json"

    def save_mappings(self, mappings: Dict[str, EntityMapping]) -> None:
        """
        Save entity mappings, one JSON file per class.

        Args:
            mappings: Dictionary mapping class_name -> EntityMapping
        """
        for class_name, mapping in mappings.items():
            with open(self.entity_file(class_name), 'w') as f:
                json.dump(mapping.to_dict(), f, indent=2)

        print(f"✓ Saved {len(mappings)} entity mappings to {self.entities_dir}")

    def save_diagnostics(self, diagnostics: Sequence[Diagnostic]) -> None:
        with open(self.diagnostics_file, 'w') as f:
            json.dump([diagnostic.to_dict() for diagnostic in diagnostics], f, indent=2)

        if diagnostics:
            print(f"⚠ Saved {len(diagnostics)} diagnostics to {self.diagnostics_file}")

    def save_schema(self, tables: Sequence[Table], supports_foreign_keys: bool = True) -> None:
        """
        Save a schema snapshot that read_schema_file() can load back.

        Args:
            tables: Tables in snapshot order
            supports_foreign_keys: Platform capability flag
        """
        data = {
            "supports_foreign_keys": supports_foreign_keys,
            "tables": [table.to_dict() for table in tables],
        }
        with open(self.schema_file, 'w') as f:
            json.dump(data, f, indent=2)

        print(f"✓ Saved schema of {len(tables)} tables to {self.schema_file}")

    def save_all(self, mappings: Dict[str, EntityMapping], diagnostics: Sequence[Diagnostic] = ()) -> None:
        collected: List[Diagnostic] = list(diagnostics)
        for mapping in mappings.values():
            collected.extend(mapping.diagnostics)

        self.save_mappings(mappings)
        self.save_diagnostics(collected)
        print("✓ All mappings saved successfully!")
#   LOADING:
#   - load_mappings() -> dict[str, dict]
#       Stored mappings as plain dicts, keyed by class name.
#   - load_schema() -> StaticSchemaSource
#
    def load_mappings(self) -> Dict[str, Dict[str, Any]]:
        mappings = {}
        for path in sorted(self.entities_dir.glob("*.json")):
            with open(path, 'r') as f:
                data = json.load(f)
            mappings[data.get("name", path.stem)] = data

        print(f"✓ Loaded {len(mappings)} entity mappings from {self.entities_dir}")
        return mappings

    def load_schema(self) -> StaticSchemaSource:
        if not self.schema_file.exists():
            raise FileNotFoundError(f"No schema snapshot at {self.schema_file}")
        return read_schema_file(str(self.schema_file))
#   UTILITY:
#   - exists() -> bool
#   - clear() -> None
#
    def exists(self) -> bool:
        return (
            any(self.entities_dir.glob("*.json")) or
            self.diagnostics_file.exists() or
            self.schema_file.exists()
        )

    def clear(self) -> None:
        """Delete every stored file (for testing or reset)."""
        files_to_delete = list(self.entities_dir.glob("*.json"))
        files_to_delete += [self.diagnostics_file, self.schema_file]

        for file in files_to_delete:
            if file.exists():
                file.unlink()

        print("✓ All mappings cleared!")
# FILE STRUCTURE:
# ---------------
#   mappings/
#   ├── entities/
#   │   ├── User.json        → {name, table, id, fields, associations, ...}
#   │   └── Group.json
#   ├── diagnostics.json     → [{kind, table, message}, ...]
#   └── schema.json          → {supports_foreign_keys, tables: [...]}
#
# =============================================
