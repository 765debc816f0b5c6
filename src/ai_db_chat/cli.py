"""Command-line entrypoint for ai-db-chat."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from ai_db_chat import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ai-db-chat",
        description=(
            "Ask a PostgreSQL database questions in natural language and get "
            "back guarded, read-only SELECT results."
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser(
        "config-check",
        help="Validate environment configuration for ai-db-chat.",
    )
    subparsers.add_parser(
        "healthcheck",
        help="Check PostgreSQL connectivity with a read-only session.",
    )
    subparsers.add_parser(
        "show-schema",
        help="Print the schema listing sent to the model.",
    )
    check_parser = subparsers.add_parser(
        "check-sql",
        help="Run the safety filter on a SQL statement and show the capped form.",
    )
    check_parser.add_argument("sql", help="SQL statement to check.")
    check_parser.add_argument(
        "--max-rows",
        type=int,
        default=None,
        help="Row cap appended when the statement has no LIMIT (default: MAX_ROWS).",
    )
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP API and chat UI.",
    )
    serve_parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Interface to bind (default: 0.0.0.0).",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: PORT or 3001).",
    )
    return parser


async def _fetch_schema_listing(database_url: str, schema_name: str) -> str:
    from ai_db_chat.db.connection import connect_readonly_async
    from ai_db_chat.db.introspect import format_schema_listing, get_schema_snapshot

    async with connect_readonly_async(database_url) as conn:
        snapshot = await get_schema_snapshot(conn, schema_name)
    return format_schema_listing(snapshot)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    from ai_db_chat.config import ConfigError, load_settings

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Configuration error:\n{exc}", file=sys.stderr)
        return 2

    if args.command == "config-check":
        redacted = "***" if settings.api_key else "(not set)"
        print("Configuration loaded successfully:")
        print(f"- DATABASE_URL host: {settings.database_host}")
        print(f"- OPENROUTER_API_KEY: {redacted}")
        print(f"- OPENAI_BASE_URL: {settings.base_url}")
        print(f"- MODEL_PREFERENCE: {', '.join(settings.models)}")
        print(f"- PORT: {settings.port}")
        print(f"- MAX_ROWS: {settings.max_rows}")
        print(f"- LLM_MAX_ATTEMPTS: {settings.max_attempts}")
        print(f"- SQL_GUARD: {settings.guard_mode}")
        print(f"- DB_SCHEMA: {settings.default_schema}")
        return 0

    if args.command == "healthcheck":
        from ai_db_chat.db.connection import (
            DatabaseConnectionError,
            check_postgres_health,
        )

        try:
            result = check_postgres_health(settings.database_url)
        except DatabaseConnectionError as exc:
            print(f"Healthcheck failed:\n{exc}", file=sys.stderr)
            return 1

        print("PostgreSQL healthcheck succeeded:")
        print(f"- database: {result.current_database}")
        print(f"- user: {result.current_user}")
        print(f"- server_version: {result.server_version}")
        print(f"- transaction_read_only: {result.transaction_read_only}")
        return 0

    if args.command == "show-schema":
        from ai_db_chat.db.connection import DatabaseConnectionError
        from ai_db_chat.db.introspect import IntrospectionError

        try:
            listing = asyncio.run(
                _fetch_schema_listing(settings.database_url, settings.default_schema)
            )
        except (DatabaseConnectionError, IntrospectionError) as exc:
            print(f"Schema introspection failed:\n{exc}", file=sys.stderr)
            return 1

        print(f"Schema ({settings.default_schema}):")
        print(listing or "(no tables)")
        return 0

    if args.command == "check-sql":
        from ai_db_chat.sql.guard import denylisted_keywords, inject_limit, is_safe_select
        from ai_db_chat.sql.parser import check_select_statement

        violations: list[str] = []
        if not is_safe_select(args.sql):
            keywords = denylisted_keywords(args.sql)
            violations.append(
                "Denylisted keyword(s): " + ", ".join(keywords)
                if keywords
                else "Statement does not start with SELECT."
            )
        if settings.guard_mode == "strict":
            violations.extend(check_select_statement(args.sql))

        if violations:
            print("SQL rejected:")
            for violation in violations:
                print(f"- {violation}")
            return 1

        max_rows = args.max_rows or settings.max_rows
        print("SQL accepted:")
        print(inject_limit(args.sql, max_rows))
        return 0

    if args.command == "serve":
        import uvicorn

        from ai_db_chat.api import create_app

        uvicorn.run(
            create_app(settings),
            host=args.host,
            port=args.port or settings.port,
        )
        return 0

    print(f"Command '{args.command}' is not implemented.")
    return 1


if __name__ == "__main__":
    sys.exit(main())
