"""Type and dialect tables for DDL previews."""

from __future__ import annotations

# Column type names as ORMs and models tend to emit them, mapped to SQL types.
ORM_TYPE_ALIASES: dict[str, str] = {
    "string": "TEXT",
    "text": "TEXT",
    "int": "INT",
    "integer": "INT",
    "number": "DOUBLE",
    "bigint": "BIGINT",
    "long": "BIGINT",
    "float": "DOUBLE",
    "double": "DOUBLE",
    "decimal": "DECIMAL",
    "boolean": "BOOLEAN",
    "bool": "BOOLEAN",
    "datetime": "TIMESTAMP",
    "timestamp": "TIMESTAMP",
    "date": "DATE",
    "json": "JSON",
    "bytes": "BLOB",
    "uuid": "UUID",
}

# Stack database names mapped to SQLGlot dialects.
DATABASE_DIALECTS: dict[str, str] = {
    "postgresql": "postgres",
    "mysql": "mysql",
    "mariadb": "mysql",
    "sqlite": "sqlite",
    "sql server": "tsql",
}

DOCUMENT_DATABASES = frozenset({"mongodb"})
