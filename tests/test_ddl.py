import pytest

from backendforge.models.generation import ColumnSchema, TableSchema
from backendforge.sql.ddl import DDLRenderError, dialect_for_database, render_schema_ddl

TABLES = [
    TableSchema(
        table_name="User",
        columns=[
            ColumnSchema(name="id", type="Int", is_primary=True),
            ColumnSchema(name="email", type="String", is_unique=True),
            ColumnSchema(name="bio", type="String?", is_nullable=True),
        ],
    ),
    TableSchema(
        table_name="Post",
        columns=[
            ColumnSchema(name="id", type="Int", is_primary=True),
            ColumnSchema(name="authorId", type="Int", relation="User.id"),
            ColumnSchema(name="tagId", type="Int", relation="Tag.id"),
        ],
    ),
    TableSchema(table_name="Empty", columns=[]),
]


def test_render_schema_ddl_postgres() -> None:
    ddl = render_schema_ddl(TABLES, "postgres")

    assert 'CREATE TABLE "User"' in ddl
    assert 'CREATE TABLE "Post"' in ddl
    assert '"Empty"' not in ddl
    assert "PRIMARY KEY" in ddl
    assert "NOT NULL" in ddl
    assert "UNIQUE" in ddl
    assert 'REFERENCES "User"' in ddl
    assert '"Tag"' not in ddl
    assert ddl.endswith(";")
    assert ddl.count("CREATE TABLE") == 2


def test_render_schema_ddl_without_tables() -> None:
    assert render_schema_ddl([], "sqlite") == ""


def test_unknown_dialect_raises() -> None:
    with pytest.raises(DDLRenderError, match="Unknown SQL dialect"):
        render_schema_ddl(TABLES, "not-a-dialect")


@pytest.mark.parametrize(
    ("database", "dialect"),
    [("PostgreSQL", "postgres"), ("MySQL", "mysql"), ("SQLite", "sqlite"), ("MariaDB", "mysql")],
)
def test_dialect_for_database(database, dialect) -> None:
    assert dialect_for_database(database) == dialect


@pytest.mark.parametrize(("database", "message"), [("MongoDB", "document database"), ("Neo4j", "No SQL dialect")])
def test_dialect_for_database_failures(database, message) -> None:
    with pytest.raises(DDLRenderError, match=message):
        dialect_for_database(database)
