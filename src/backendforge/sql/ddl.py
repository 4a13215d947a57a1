"""Render canonical tables as CREATE TABLE statements with SQLGlot."""

from __future__ import annotations

import re

from sqlglot import exp
from sqlglot.dialects.dialect import Dialect
from sqlglot.errors import ParseError

from backendforge.models.generation import ColumnSchema, TableSchema
from backendforge.sql.types import (
    DATABASE_DIALECTS,
    DOCUMENT_DATABASES,
    ORM_TYPE_ALIASES,
)

_RELATION_TARGET = re.compile(r"^\s*(\w+)\.(\w+)\s*$")


class DDLRenderError(RuntimeError):
    """Raised when a schema cannot be rendered as DDL."""


def dialect_for_database(database: str) -> str:
    """Map a stack database name (e.g. ``PostgreSQL``) to a SQLGlot dialect."""
    key = database.strip().lower()
    if key in DOCUMENT_DATABASES:
        raise DDLRenderError(f"{database} is a document database; there is no DDL to render.")
    try:
        return DATABASE_DIALECTS[key]
    except KeyError:
        raise DDLRenderError(f"No SQL dialect known for database {database!r}.") from None


def _identifier(name: str) -> exp.Identifier:
    return exp.to_identifier(name, quoted=True)


def _table(name: str) -> exp.Table:
    return exp.Table(this=_identifier(name))


def _column_type(raw_type: str, dialect: str) -> exp.DataType:
    name = raw_type.strip().rstrip("?").removesuffix("[]").strip() or "String"
    mapped = ORM_TYPE_ALIASES.get(name.lower(), name)
    try:
        return exp.DataType.build(mapped, dialect=dialect, udt=True)
    except (ParseError, ValueError):
        return exp.DataType(this=exp.DataType.Type.USERDEFINED, kind=mapped)


def _reference(relation: str | None, table_names: set[str]) -> exp.Reference | None:
    if not relation:
        return None
    match = _RELATION_TARGET.match(relation)
    if not match or match.group(1) not in table_names:
        return None
    target_table, target_column = match.groups()
    return exp.Reference(
        this=exp.Schema(
            this=_table(target_table),
            expressions=[_identifier(target_column)],
        )
    )


def _column_def(column: ColumnSchema, dialect: str, table_names: set[str]) -> exp.ColumnDef:
    constraints: list[exp.ColumnConstraint] = []
    if column.is_primary:
        constraints.append(exp.ColumnConstraint(kind=exp.PrimaryKeyColumnConstraint()))
    if not column.is_nullable:
        constraints.append(exp.ColumnConstraint(kind=exp.NotNullColumnConstraint()))
    if column.is_unique and not column.is_primary:
        constraints.append(exp.ColumnConstraint(kind=exp.UniqueColumnConstraint()))
    reference = _reference(column.relation, table_names)
    if reference is not None:
        constraints.append(exp.ColumnConstraint(kind=reference))

    return exp.ColumnDef(
        this=_identifier(column.name),
        kind=_column_type(column.type, dialect),
        constraints=constraints,
    )


def build_create_table(
    table: TableSchema,
    dialect: str,
    table_names: set[str] | None = None,
) -> exp.Create:
    """Build a CREATE TABLE expression for one canonical table."""
    names = table_names if table_names is not None else {table.table_name}
    return exp.Create(
        this=exp.Schema(
            this=_table(table.table_name),
            expressions=[_column_def(column, dialect, names) for column in table.columns],
        ),
        kind="TABLE",
    )


def render_schema_ddl(tables: list[TableSchema], dialect: str) -> str:
    """Render every table as a CREATE TABLE statement in ``dialect``."""
    try:
        Dialect.get_or_raise(dialect)
    except ValueError as exc:
        raise DDLRenderError(f"Unknown SQL dialect {dialect!r}.") from exc

    table_names = {table.table_name for table in tables}
    statements = [
        build_create_table(table, dialect, table_names).sql(dialect=dialect, pretty=True)
        for table in tables
        if table.columns
    ]
    return ";\n\n".join(statements) + (";" if statements else "")
