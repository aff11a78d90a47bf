#!/usr/bin/env python3
"""
Quick demo script to verify the inferencer is working on an in-memory schema
"""

import json

from reverse_mapper.inferencer import SchemaMappingInferencer
from reverse_mapper.schema.model import Column, ColumnKind, ForeignKey, Table
from reverse_mapper.schema.source import StaticSchemaSource


def build_schema() -> StaticSchemaSource:
    user = Table(
        name="user",
        columns=[
            Column("id", "integer", ColumnKind.INTEGER, nullable=False, unsigned=True),
            Column("username", "string", ColumnKind.STRING, nullable=False, length=64),
            Column("email", "string", ColumnKind.STRING, length=255),
        ],
        primary_key=["id"],
    )
    group = Table(
        name="group",
        columns=[
            Column("id", "integer", ColumnKind.INTEGER, nullable=False),
            Column("name", "string", ColumnKind.STRING, nullable=False, length=100),
        ],
        primary_key=["id"],
    )
    user_group = Table(
        name="user_group",
        columns=[
            Column("user_id", "integer", ColumnKind.INTEGER, nullable=False),
            Column("group_id", "integer", ColumnKind.INTEGER, nullable=False),
        ],
        primary_key=["user_id", "group_id"],
        foreign_keys=[
            ForeignKey("user_group", "user", ["user_id"], ["id"]),
            ForeignKey("user_group", "group", ["group_id"], ["id"]),
        ],
    )
    article = Table(
        name="article",
        columns=[
            Column("id", "integer", ColumnKind.INTEGER, nullable=False),
            Column("author_id", "integer", ColumnKind.INTEGER, nullable=False),
            Column("title", "string", ColumnKind.STRING, nullable=False, length=200),
            Column("body", "text"),
            Column("published_at", "datetime"),
        ],
        primary_key=["id"],
        foreign_keys=[ForeignKey("article", "user", ["author_id"], ["id"])],
    )
    profile = Table(
        name="profile",
        columns=[
            Column("user_id", "integer", ColumnKind.INTEGER, nullable=False),
            Column("bio", "text"),
        ],
        primary_key=["user_id"],
        foreign_keys=[ForeignKey("profile", "user", ["user_id"], ["id"])],
    )
    return StaticSchemaSource([user, group, user_group, article, profile])


def demo_mapping():
    print("=" * 60)
    print("Reverse Mapping Demo")
    print("=" * 60)

    # Initialize inferencer
    print("\n1. Initializing inferencer...")
    inferencer = SchemaMappingInferencer(build_schema())
    print("✓ Inferencer initialized successfully")

    # Classification
    print("\n2. Classifying tables...")
    classification = inferencer.classify()
    print(f"   - Entity tables: {', '.join(classification.entity_tables)}")
    print(f"   - Join tables: {', '.join(classification.join_tables)}")

    # Mappings
    print("\n3. Entity mappings:")
    for class_name, mapping in inferencer.load_all_mappings().items():
        print(f"\n--- {class_name} ---")
        print(json.dumps(mapping.to_dict(), indent=2))
        for diagnostic in mapping.diagnostics:
            print(f"⚠ {diagnostic}")

    print("\n" + "=" * 60)
    print("✓ Demo completed")
    print("=" * 60)


if __name__ == "__main__":
    demo_mapping()
