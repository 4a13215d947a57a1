"""Prompt builder for backend generation turns."""

from __future__ import annotations

import json
from dataclasses import dataclass

from backendforge.models.generation import GeneratedResult
from backendforge.models.stack import TechStack
from backendforge.reconcile.changes import KEEP_SENTINEL


class PromptBuildError(RuntimeError):
    """Raised when a generation prompt cannot be built."""


@dataclass(frozen=True)
class PromptBundle:
    """Inspectable prompt bundle handed to a provider adapter."""

    request: str
    stack: TechStack
    context_json: str | None
    system_prompt: str
    user_prompt: str


_STRING = {"type": "STRING"}

# Field names and types mirror the camelCase result document.
RESPONSE_SCHEMA: dict[str, object] = {
    "type": "OBJECT",
    "properties": {
        "chatResponse": {**_STRING, "description": "Short reply to the user."},
        "explanation": {**_STRING, "description": "Technical summary of the schema."},
        "projectSetupGuide": {**_STRING, "description": "Project setup guide (Markdown)."},
        "apiDoc": {**_STRING, "description": "API documentation (Markdown)."},
        "schema": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "tableName": _STRING,
                    "description": _STRING,
                    "columns": {
                        "type": "ARRAY",
                        "items": {
                            "type": "OBJECT",
                            "properties": {
                                "name": _STRING,
                                "type": _STRING,
                                "isPrimary": {"type": "BOOLEAN"},
                                "isNullable": {"type": "BOOLEAN"},
                                "isUnique": {"type": "BOOLEAN"},
                                "relation": _STRING,
                            },
                        },
                    },
                },
            },
        },
        "snippets": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "title": _STRING,
                    "language": _STRING,
                    "code": _STRING,
                    "description": _STRING,
                },
            },
        },
    },
    "required": [
        "snippets",
        "schema",
        "explanation",
        "projectSetupGuide",
        "apiDoc",
        "chatResponse",
    ],
}

_SCHEMA_EXAMPLE = {
    "schema": [
        {
            "tableName": "User",
            "description": "Registered users",
            "columns": [
                {
                    "name": "id",
                    "type": "String",
                    "isPrimary": True,
                    "isUnique": False,
                    "isNullable": False,
                }
            ],
        }
    ]
}

_OUTPUT_SHAPE = {
    "chatResponse": "short reply",
    "explanation": "architecture notes",
    "projectSetupGuide": "setup guide (Markdown)",
    "apiDoc": "API documentation (Markdown)",
    "schema": ["..."],
    "snippets": [
        {"title": "...", "language": "...", "code": "...", "description": "..."}
    ],
}


def build_system_prompt(stack: TechStack) -> str:
    """System instruction embedding the stack choices and the no-change contract."""
    return (
        "You are an efficient backend architect and code generation assistant.\n"
        "The user's technology stack:\n"
        f"- Language: {stack.language}\n"
        f"- Framework: {stack.framework}\n"
        f"- Database: {stack.database}\n"
        f"- ORM/library: {stack.orm}\n\n"
        "Your tasks:\n"
        "1. Design or modify the database schema.\n"
        "2. Generate the core code snippets.\n"
        "3. Provide a short project setup guide.\n"
        "4. Write detailed API documentation (Markdown) for frontend developers.\n\n"
        "Decide whether the user is asking for a CHANGE or only ASKING A QUESTION.\n\n"
        "Change requests (add a field, generate code, switch ids to UUID, ...):\n"
        "- Return the updated schema in full, and the snippets.\n"
        f"- For snippets you did not modify, set `code` to exactly {KEEP_SENTINEL!r}; "
        "the previous code is kept automatically. Do not omit the snippet object.\n"
        "- Update explanation, projectSetupGuide and apiDoc to match the change.\n\n"
        "Questions (what is this table for, how to deploy, compare databases, ...):\n"
        "- Answer in chatResponse.\n"
        "- Return schema as [] and snippets as [] (meaning: unchanged).\n"
        f"- Return explanation, projectSetupGuide and apiDoc as {KEEP_SENTINEL!r}.\n\n"
        "Hard constraints:\n"
        "- Return raw JSON only. Never wrap it in a Markdown code fence.\n"
        "- When changing the schema, return it complete; do not abbreviate.\n"
        "- API documentation lists URL, method, request parameters or body example "
        "and response example for every endpoint.\n\n"
        "Schema format example:\n"
        f"{json.dumps(_SCHEMA_EXAMPLE, indent=2)}\n\n"
        "Output JSON structure:\n"
        f"{json.dumps(_OUTPUT_SHAPE, indent=2)}"
    )


def build_generation_prompt(
    request: str,
    stack: TechStack,
    *,
    previous: GeneratedResult | None = None,
) -> PromptBundle:
    """Build the prompt bundle for one turn, summarizing ``previous`` when given."""
    normalized_request = request.strip()
    if not normalized_request:
        raise PromptBuildError("Request cannot be empty.")

    context_json: str | None = None
    user_prompt = normalized_request
    if previous is not None:
        # Snippet bodies are left out to bound prompt size.
        context_json = json.dumps(previous.summary_context(), ensure_ascii=False)
        user_prompt = (
            "[CURRENT EXISTING CODEBASE SUMMARY]:\n"
            f"{context_json}\n\n"
            "[USER REQUEST]:\n"
            f"{normalized_request}\n\n"
            "Modify or extend the existing architecture. "
            "Return the complete updated JSON object (with complete snippets and schema)."
        )

    return PromptBundle(
        request=normalized_request,
        stack=stack,
        context_json=context_json,
        system_prompt=build_system_prompt(stack),
        user_prompt=user_prompt,
    )
