# Relational schema for the registry store (PostgreSQL behind Supabase)
from typing import Any, Dict, List

SCHEMA = {
    "tables": [
        {
            "name": "ui_registry",
            "columns": [
                {"name": "id", "type": "serial", "primaryKey": True},
                {"name": "name", "type": "text", "notNull": True, "unique": True},
                {"name": "slug", "type": "text", "notNull": True, "unique": True},
                {"name": "description", "type": "text"},
                {"name": "framework", "type": "text", "notNull": True},
                {"name": "npm_package", "type": "text"},
                {"name": "install_command", "type": "text"},
                {"name": "docs_url", "type": "text"},
                {"name": "is_active", "type": "boolean", "notNull": True, "default": "true"},
                {"name": "metadata", "type": "jsonb", "notNull": True, "default": "'{}'::jsonb"},
                {"name": "created_at", "type": "timestamp with time zone", "notNull": True, "default": "now()"},
                {"name": "updated_at", "type": "timestamp with time zone", "notNull": True, "default": "now()"},
            ],
        },
        {
            "name": "ui_component",
            "columns": [
                {"name": "id", "type": "serial", "primaryKey": True},
                {
                    "name": "registry_id",
                    "type": "integer",
                    "notNull": True,
                    "references": {"table": "ui_registry", "column": "id", "onDelete": "CASCADE"},
                },
                {"name": "name", "type": "text", "notNull": True},
                {"name": "slug", "type": "text", "notNull": True},
                {"name": "type", "type": "text", "notNull": True},
                {"name": "description", "type": "text"},
                {"name": "dependencies", "type": "text[]", "notNull": True, "default": "ARRAY[]::text[]"},
                {"name": "status", "type": "text", "notNull": True, "default": "'stable'"},
                {"name": "introduced_version", "type": "text"},
                {"name": "deprecated_version", "type": "text"},
                {"name": "metadata", "type": "jsonb", "notNull": True, "default": "'{}'::jsonb"},
                {"name": "created_at", "type": "timestamp with time zone", "notNull": True, "default": "now()"},
                {"name": "updated_at", "type": "timestamp with time zone", "notNull": True, "default": "now()"},
            ],
            "constraints": [
                "CONSTRAINT uq_ui_component_registry_slug UNIQUE (registry_id, slug)",
                "CONSTRAINT ck_ui_component_type CHECK "
                "(type IN ('input-control', 'container', 'navigational', 'informational', 'business', 'biz'))",
                "CONSTRAINT ck_ui_component_status CHECK "
                "(status IN ('stable', 'beta', 'alpha', 'deprecated'))",
            ],
        },
        {
            "name": "ui_component_example",
            "columns": [
                {"name": "id", "type": "serial", "primaryKey": True},
                {
                    "name": "component_id",
                    "type": "integer",
                    "notNull": True,
                    "references": {"table": "ui_component", "column": "id", "onDelete": "CASCADE"},
                },
                # Globally unique as in the existing data set
                {"name": "name", "type": "text", "notNull": True, "unique": True},
                {"name": "slug", "type": "text", "notNull": True, "unique": True},
                {"name": "description", "type": "text"},
                {"name": "language", "type": "text", "notNull": True},
                {"name": "code", "type": "text", "notNull": True},
                {"name": "metadata", "type": "jsonb", "notNull": True, "default": "'{}'::jsonb"},
                {"name": "created_at", "type": "timestamp with time zone", "notNull": True, "default": "now()"},
                {"name": "updated_at", "type": "timestamp with time zone", "notNull": True, "default": "now()"},
            ],
            "constraints": [
                "CONSTRAINT ck_ui_component_example_code CHECK (length(code) > 0)",
            ],
        },
    ],
    "indexes": [
        {"table": "ui_registry", "columns": ["slug"], "method": "btree"},
        {"table": "ui_registry", "columns": ["framework", "is_active"], "method": "btree"},
        {"table": "ui_component", "columns": ["registry_id", "type", "status"], "method": "btree"},
        {"table": "ui_component", "columns": ["name"], "method": "btree"},
        {"table": "ui_component_example", "columns": ["component_id"], "method": "btree"},
    ],
}


def column_sql(column: Dict[str, Any]) -> str:
    """Render one column definition."""
    column_def = f"{column['name']} {column['type']}"

    if column.get("primaryKey"):
        column_def += " PRIMARY KEY"
    if column.get("notNull"):
        column_def += " NOT NULL"
    if column.get("unique"):
        column_def += " UNIQUE"
    if column.get("default") is not None:
        column_def += f" DEFAULT {column['default']}"
    if column.get("references"):
        ref = column["references"]
        column_def += f" REFERENCES {ref['table']}({ref['column']})"
        if ref.get("onDelete"):
            column_def += f" ON DELETE {ref['onDelete']}"

    return column_def


def create_table_sql(table: Dict[str, Any]) -> str:
    """Render ``CREATE TABLE IF NOT EXISTS`` for a table definition."""
    parts: List[str] = [column_sql(column) for column in table["columns"]]
    parts.extend(table.get("constraints", []))
    return f"CREATE TABLE IF NOT EXISTS {table['name']} ({', '.join(parts)});"


def index_name(index: Dict[str, Any]) -> str:
    return f"idx_{index['table']}_{'_'.join(index['columns'])}"


def create_index_sql(index: Dict[str, Any]) -> str:
    """Render ``CREATE INDEX IF NOT EXISTS`` for an index definition."""
    columns = ", ".join(index["columns"])
    return (
        f"CREATE INDEX IF NOT EXISTS {index_name(index)} "
        f"ON {index['table']} USING {index['method']} ({columns})"
    )
