# ==============================================
# CLI: Command Line Entry Point
# ==============================================
#
# PURPOSE:
#   Provides command-line interface to run the inferencer.
#   This is how users interact with the system.
#
# COMMANDS:
# ---------
# 1. List inferred entity classes:
#    python -m reverse_mapper.cli entities
#
# 2. Show the mapping of one class as JSON:
#    python -m reverse_mapper.cli show User
#
# 3. Export every mapping (and the schema snapshot) to disk:
#    python -m reverse_mapper.cli export --output mappings/
#
# 4. Work from a saved snapshot instead of MySQL:
#    python -m reverse_mapper.cli --schema-file mappings/schema.json entities
#
# IMPLEMENTATION:
# ---------------
# - argparse for parsing
# - Connection settings and naming options come from get_config()
# - MySQL is read through MySQLIntrospector unless --schema-file is given
#
# ==============================================

import argparse
import json
import sys
from typing import List, Optional

from reverse_mapper.config import AppConfig, get_config
from reverse_mapper.errors import MappingError, UnknownEntityError
from reverse_mapper.inferencer import SchemaMappingInferencer
from reverse_mapper.persistence.mapping_store import MappingStore, read_schema_file
from reverse_mapper.schema.mysql_introspector import MySQLIntrospector
from reverse_mapper.schema.source import SchemaSource


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reverse_mapper",
        description="Infer ORM mappings from an existing database schema",
    )
    parser.add_argument(
        "--schema-file",
        help="Read tables from a JSON snapshot instead of connecting to MySQL",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("entities", help="List inferred entity class names")

    show = subparsers.add_parser("show", help="Print the mapping of one class as JSON")
    show.add_argument("class_name")

    export = subparsers.add_parser("export", help="Write every mapping to disk")
    export.add_argument("--output", help="Output directory (default: MAPPER_OUTPUT_DIR)")

    return parser


def run_entities(inferencer: SchemaMappingInferencer) -> int:
    class_names = inferencer.get_all_class_names()
    for class_name in class_names:
        print(class_name)
    print(f"✓ {len(class_names)} entities")
    return 0


def run_show(inferencer: SchemaMappingInferencer, class_name: str) -> int:
    try:
        mapping = inferencer.load_mapping(class_name)
    except UnknownEntityError as e:
        print(f"⚠ {e}", file=sys.stderr)
        return 1

    print(json.dumps(mapping.to_dict(), indent=2))
    for diagnostic in mapping.diagnostics:
        print(f"⚠ {diagnostic}", file=sys.stderr)
    return 0


def run_export(
    inferencer: SchemaMappingInferencer,
    config: AppConfig,
    output: Optional[str],
) -> int:
    store = MappingStore(output or config.output_dir)

    mappings = inferencer.load_all_mappings()
    store.save_all(mappings, inferencer.diagnostics())

    # Same snapshot the mappings were inferred from; no second introspection
    snapshot = inferencer.snapshot()
    store.save_schema(snapshot.tables, snapshot.supports_foreign_keys)
    return 0


def dispatch(args: argparse.Namespace, source: SchemaSource, config: AppConfig) -> int:
    inferencer = SchemaMappingInferencer(source, config.mapping)

    if args.command == "entities":
        return run_entities(inferencer)
    if args.command == "show":
        return run_show(inferencer, args.class_name)
    if args.command == "export":
        return run_export(inferencer, config, args.output)

    raise MappingError(f"Unknown command {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = get_config()

    if args.schema_file:
        return dispatch(args, read_schema_file(args.schema_file), config)

    with MySQLIntrospector(
        host=config.mysql.host,
        port=config.mysql.port,
        user=config.mysql.user,
        password=config.mysql.password,
        database=config.mysql.database,
        schemas=[config.mapping.schema] if config.mapping.schema else None,
    ) as introspector:
        return dispatch(args, introspector, config)


if __name__ == "__main__":
    sys.exit(main())
