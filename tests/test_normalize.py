from backendforge.models.generation import ColumnSchema, TableSchema
from backendforge.reconcile.normalize import (
    normalize_result,
    normalize_schema,
    normalize_snippets,
)


def test_prisma_attribute_marks_primary_key() -> None:
    raw = [
        {
            "tableName": "User",
            "name": "User",
            "columns": [{"name": "id", "type": "String", "attributes": ["@id"]}],
        }
    ]

    tables = normalize_schema(raw)

    assert len(tables) == 1
    assert tables[0].table_name == "User"
    column = tables[0].columns[0]
    assert column.is_primary is True
    assert column.is_unique is False
    assert column.is_nullable is False
    assert column.relation is None


def test_alternate_provider_shape_is_mapped() -> None:
    raw = [
        {
            "name": "Post",
            "fields": [
                {"name": "email", "type": "String", "attributes": ["@unique", "@db.VarChar(255)"]},
                {"name": "authorId", "type": "Int?", "relation": ["userId", "id"]},
                {"name": "author", "type": "User", "optional": True, "relation": True},
                {"name": "legacy", "isNullable": "yes", "relation": 5},
            ],
        }
    ]

    table = normalize_schema(raw)[0]

    assert table.table_name == "Post"
    assert table.description == ""
    email, author_id, author, legacy = table.columns
    assert email.is_unique is True and email.is_primary is False
    assert author_id.is_nullable is True
    assert author_id.relation == "userId, id"
    assert author.is_nullable is True
    assert author.relation == "Relation"
    # Only a literal True counts as a set flag.
    assert legacy.is_nullable is False
    assert legacy.relation is None
    assert legacy.type == "String"


def test_normalizer_is_total_over_arbitrary_entries() -> None:
    raw = [{}, "junk", None, {"columns": "not-a-list"}, {"columns": [{}, 7]}]

    tables = normalize_schema(raw)

    assert len(tables) == len(raw)
    assert [table.table_name for table in tables] == ["Unnamed Table"] * 5
    columns = tables[-1].columns
    assert [column.name for column in columns] == ["unknown", "unknown"]
    for column in columns:
        assert column.type == "String"
        for flag in (column.is_primary, column.is_nullable, column.is_unique):
            assert isinstance(flag, bool)


def test_non_list_schema_yields_empty() -> None:
    assert normalize_schema(None) == []
    assert normalize_schema({"tableName": "User"}) == []
    assert normalize_schema("[]") == []


def test_normalizer_is_idempotent() -> None:
    canonical = [
        TableSchema(
            table_name="Order",
            description="Customer orders",
            columns=[
                ColumnSchema(name="id", type="String", is_primary=True),
                ColumnSchema(name="note", type="String?", is_nullable=True),
                ColumnSchema(name="userId", type="String", relation="User.id"),
            ],
        )
    ]

    assert normalize_schema(canonical) == canonical
    dumped = [table.model_dump(by_alias=True) for table in canonical]
    assert normalize_schema(dumped) == canonical


def test_duplicate_snippet_titles_are_renamed() -> None:
    snippets = normalize_snippets(
        [
            {"title": "UserController", "language": "ts", "code": "a"},
            {"title": "UserController", "language": "ts", "code": "b"},
            {"title": "UserController", "language": "ts", "code": "c"},
            {"code": "d"},
        ]
    )

    assert [snippet.title for snippet in snippets] == [
        "UserController",
        "UserController (2)",
        "UserController (3)",
        "Untitled",
    ]
    assert snippets[3].language == "text"
    assert snippets[3].description == ""


def test_normalize_result_from_payload() -> None:
    result = normalize_result(
        {
            "chatResponse": "Done",
            "schema": [{"tableName": "User", "columns": []}],
            "snippets": [{"title": "db.ts", "language": "typescript", "code": "x"}],
            "explanation": "Users only",
            "projectSetupGuide": "npm install",
            "apiDoc": None,
        }
    )

    assert result.chat_response == "Done"
    assert [table.table_name for table in result.tables] == ["User"]
    assert result.snippets[0].title == "db.ts"
    assert result.explanation == "Users only"
    assert result.project_setup_guide == "npm install"
    assert result.api_doc == ""


def test_normalize_result_tolerates_missing_fields() -> None:
    result = normalize_result({})

    assert result.chat_response is None
    assert result.tables == []
    assert result.snippets == []
    assert result.to_document() == {
        "schema": [],
        "snippets": [],
        "explanation": "",
        "projectSetupGuide": "",
        "apiDoc": "",
    }
