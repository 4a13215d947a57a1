"""Command-line entrypoint for backendforge."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from backendforge import __version__

_MISSING_DEPENDENCIES = (
    "Runtime dependencies are missing. "
    "Install project dependencies first (pip install -e .)."
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="backendforge",
        description=(
            "Turn natural-language backend requests into a database schema, "
            "code snippets, a setup guide and API docs using a configurable LLM."
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser(
        "config-check",
        help="Validate environment configuration for backendforge.",
    )
    subparsers.add_parser(
        "list-stacks",
        help="List the available technology stack presets.",
    )
    prompt_parser = subparsers.add_parser(
        "build-prompt",
        help="Build the generation prompt without calling a provider.",
    )
    prompt_parser.add_argument("request", help="Natural language request.")
    prompt_parser.add_argument(
        "--previous",
        type=Path,
        default=None,
        help="Previous result document to summarize into the prompt.",
    )
    prompt_parser.add_argument(
        "--stack",
        default=None,
        help="Stack preset key (default: BACKENDFORGE_STACK).",
    )
    generate_parser = subparsers.add_parser(
        "generate",
        help="Run one generation turn and store the merged result.",
    )
    generate_parser.add_argument("request", help="Natural language request.")
    generate_parser.add_argument(
        "--previous",
        type=Path,
        default=None,
        help="Previous result document (default: BACKENDFORGE_RESULT_PATH if present).",
    )
    generate_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Where to write the merged result (default: BACKENDFORGE_RESULT_PATH).",
    )
    generate_parser.add_argument(
        "--stack",
        default=None,
        help="Stack preset key (default: BACKENDFORGE_STACK).",
    )
    generate_parser.add_argument(
        "--fresh",
        action="store_true",
        help="Ignore any previous result and start a new conversation.",
    )
    decode_parser = subparsers.add_parser(
        "decode-output",
        help="Reconcile saved raw model output offline (sanitize, repair, normalize, merge).",
    )
    decode_parser.add_argument("raw_path", help="File with raw model text, or '-' for stdin.")
    decode_parser.add_argument(
        "--previous",
        type=Path,
        default=None,
        help="Previous result document to merge against.",
    )
    decode_parser.add_argument(
        "--finish-reason",
        default=None,
        help="Provider finish reason recorded with the output (e.g. length).",
    )
    show_parser = subparsers.add_parser(
        "show-result",
        help="Summarize a result document.",
    )
    show_parser.add_argument("path", type=Path, help="Result document path.")
    ddl_parser = subparsers.add_parser(
        "render-ddl",
        help="Render a result document's schema as CREATE TABLE statements.",
    )
    ddl_parser.add_argument("path", type=Path, help="Result document path.")
    ddl_parser.add_argument(
        "--dialect",
        default=None,
        help="SQLGlot dialect (default: derived from the configured stack database).",
    )
    return parser


def _print_summary(result) -> None:  # noqa: ANN001
    print(f"- tables: {len(result.tables)}")
    for table in result.tables:
        print(f"  - {table.table_name} ({len(table.columns)} columns)")
    print(f"- snippets: {len(result.snippets)}")
    for snippet in result.snippets:
        print(f"  - {snippet.title} [{snippet.language}]")
    print(f"- explanation: {'yes' if result.explanation else '(empty)'}")
    print(f"- setup guide: {'yes' if result.project_setup_guide else '(empty)'}")
    print(f"- api doc: {'yes' if result.api_doc else '(empty)'}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "config-check":
        try:
            from backendforge.config import ConfigError, load_settings
        except ModuleNotFoundError:
            print(_MISSING_DEPENDENCIES, file=sys.stderr)
            return 2

        try:
            settings = load_settings()
            provider_config = settings.provider_config()
        except ConfigError as exc:
            print(f"Configuration error:\n{exc}", file=sys.stderr)
            return 2

        redacted = "***" if settings.api_key else "(not set)"
        print("Configuration loaded successfully:")
        print(f"- BACKENDFORGE_PROVIDER: {provider_config.provider}")
        print(f"- BACKENDFORGE_API_KEY: {redacted}")
        print(f"- BACKENDFORGE_BASE_URL: {provider_config.base_url or '(not set)'}")
        print(f"- BACKENDFORGE_MODEL: {provider_config.model_name or '(not set)'}")
        print(f"- BACKENDFORGE_STACK: {settings.stack_preset}")
        print(f"- BACKENDFORGE_RESULT_PATH: {settings.result_path}")
        print(f"- BACKENDFORGE_TIMEOUT_SECONDS: {settings.timeout_seconds}")
        try:
            provider_config.require_credentials()
        except ConfigError as exc:
            print(f"\nWarning: {exc}")
        return 0

    if args.command == "list-stacks":
        try:
            from backendforge.models.stack import DEFAULT_STACK_PRESET, STACK_PRESETS
        except ModuleNotFoundError:
            print(_MISSING_DEPENDENCIES, file=sys.stderr)
            return 2

        print("Stack presets:")
        for key, stack in STACK_PRESETS.items():
            marker = " (default)" if key == DEFAULT_STACK_PRESET else ""
            print(
                f"- {key}{marker}: {stack.language} / {stack.framework} / "
                f"{stack.database} / {stack.orm}"
            )
        return 0

    if args.command == "build-prompt":
        try:
            from backendforge.config import ConfigError, load_settings
            from backendforge.documents import DocumentError, load_result_document
            from backendforge.prompts.generation import (
                PromptBuildError,
                build_generation_prompt,
            )
        except ModuleNotFoundError:
            print(_MISSING_DEPENDENCIES, file=sys.stderr)
            return 2

        try:
            settings = load_settings()
            stack = settings.tech_stack(args.stack)
            previous = load_result_document(args.previous) if args.previous else None
            bundle = build_generation_prompt(args.request, stack, previous=previous)
        except ConfigError as exc:
            print(f"Configuration error:\n{exc}", file=sys.stderr)
            return 2
        except DocumentError as exc:
            print(f"Result document read failed:\n{exc}", file=sys.stderr)
            return 1
        except PromptBuildError as exc:
            print(f"Prompt build failed:\n{exc}", file=sys.stderr)
            return 1

        print("Prompt build succeeded:")
        print(f"- request: {bundle.request}")
        print(f"- stack: {bundle.stack.label}")
        print(f"- previous context: {'yes' if bundle.context_json else 'no'}")
        print("\n--- SYSTEM PROMPT ---")
        print(bundle.system_prompt)
        print("\n--- USER PROMPT ---")
        print(bundle.user_prompt)
        return 0

    if args.command == "generate":
        try:
            from backendforge.config import ConfigError, load_settings
            from backendforge.documents import (
                DocumentError,
                load_result_document,
                save_result_document,
            )
            from backendforge.llm import LLMError, create_generator
            from backendforge.orchestrator import generate
            from backendforge.prompts.generation import PromptBuildError
        except ModuleNotFoundError:
            print(_MISSING_DEPENDENCIES, file=sys.stderr)
            return 2

        try:
            settings = load_settings()
            stack = settings.tech_stack(args.stack)
            previous_path = args.previous or settings.result_path
            previous = None
            if not args.fresh and (args.previous or previous_path.exists()):
                previous = load_result_document(previous_path)
            result = generate(
                args.request,
                stack,
                previous,
                settings.provider_config(),
                generator_factory=lambda config: create_generator(
                    config, timeout_seconds=settings.timeout_seconds
                ),
            )
            output_path = args.output or settings.result_path
            save_result_document(output_path, result)
        except ConfigError as exc:
            print(f"Configuration error:\n{exc}", file=sys.stderr)
            return 2
        except DocumentError as exc:
            print(f"Result document error:\n{exc}", file=sys.stderr)
            return 1
        except PromptBuildError as exc:
            print(f"Prompt build failed:\n{exc}", file=sys.stderr)
            return 1
        except LLMError as exc:
            print(f"Generation failed:\n{exc}", file=sys.stderr)
            return 1

        print(result.chat_response or "Generation finished; see the result document.")
        print("\nGeneration succeeded:")
        print(f"- output: {output_path}")
        _print_summary(result)
        return 0

    if args.command == "decode-output":
        try:
            from backendforge.documents import DocumentError, load_result_document
            from backendforge.reconcile import (
                PayloadDecodeError,
                append_truncation_note,
                decode_payload,
                merge_results,
                normalize_result,
            )
        except ModuleNotFoundError:
            print(_MISSING_DEPENDENCIES, file=sys.stderr)
            return 2

        try:
            if args.raw_path == "-":
                raw_text = sys.stdin.read()
            else:
                raw_text = Path(args.raw_path).read_text(encoding="utf-8")
            previous = load_result_document(args.previous) if args.previous else None
            decoded = decode_payload(raw_text, finish_reason=args.finish_reason)
        except OSError as exc:
            print(f"Could not read raw output:\n{exc}", file=sys.stderr)
            return 1
        except DocumentError as exc:
            print(f"Result document read failed:\n{exc}", file=sys.stderr)
            return 1
        except PayloadDecodeError as exc:
            print(f"Decoding failed:\n{exc}", file=sys.stderr)
            return 1

        result = normalize_result(decoded.payload)
        if decoded.repaired:
            result = result.model_copy(
                update={"chat_response": append_truncation_note(result.chat_response)}
            )
        merged = merge_results(result, previous)
        print(json.dumps(merged.to_document(), indent=2, ensure_ascii=False))
        return 0

    if args.command == "show-result":
        try:
            from backendforge.documents import DocumentError, load_result_document
        except ModuleNotFoundError:
            print(_MISSING_DEPENDENCIES, file=sys.stderr)
            return 2

        try:
            result = load_result_document(args.path)
        except DocumentError as exc:
            print(f"Result document read failed:\n{exc}", file=sys.stderr)
            return 1

        print("Result document loaded:")
        print(f"- path: {args.path}")
        _print_summary(result)
        return 0

    # render-ddl, the last remaining subcommand.
    try:
        from backendforge.config import ConfigError, load_settings
        from backendforge.documents import DocumentError, load_result_document
        from backendforge.sql.ddl import (
            DDLRenderError,
            dialect_for_database,
            render_schema_ddl,
        )
    except ModuleNotFoundError:
        print(_MISSING_DEPENDENCIES, file=sys.stderr)
        return 2

    try:
        result = load_result_document(args.path)
        dialect = args.dialect
        if dialect is None:
            dialect = dialect_for_database(load_settings().tech_stack().database)
        ddl = render_schema_ddl(result.tables, dialect)
    except ConfigError as exc:
        print(f"Configuration error:\n{exc}", file=sys.stderr)
        return 2
    except DocumentError as exc:
        print(f"Result document read failed:\n{exc}", file=sys.stderr)
        return 1
    except DDLRenderError as exc:
        print(f"DDL rendering failed:\n{exc}", file=sys.stderr)
        return 1

    print(ddl or "-- (schema has no tables with columns)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
