"""DDL previews for generated schemas."""

from backendforge.sql.ddl import (
    DDLRenderError,
    build_create_table,
    dialect_for_database,
    render_schema_ddl,
)

__all__ = [
    "DDLRenderError",
    "build_create_table",
    "dialect_for_database",
    "render_schema_ddl",
]
