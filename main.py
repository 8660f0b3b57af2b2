"""CLI entry point for the alumni directory search service."""

import argparse
import asyncio
import logging
import sqlite3
import sys

from alumni_search.core.config import Settings
from alumni_search.core.db import count_profiles, init_db, load_profiles_file, upsert_profiles
from alumni_search.oracle.llm_oracle import build_oracle
from alumni_search.pipeline.assembler import format_outcome
from alumni_search.pipeline.intent import RuleBasedIntentExtractor
from alumni_search.pipeline.orchestrator import AlumniSearchService
from alumni_search.session.manager import SessionManager
from alumni_search.session.store import InMemorySessionStore
from alumni_search.store.sqlite import SQLiteProfileStore

_EXIT_WORDS = {"exit", "quit", "bye"}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Alumni directory search - find alumni by name, skill, role or city",
    )
    parser.add_argument(
        "--config",
        default="config/settings.yaml",
        help="Path to settings YAML file (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- import-profiles subcommand ---
    import_parser = subparsers.add_parser(
        "import-profiles",
        help="Load alumni profiles from a JSON or YAML file into the database",
    )
    import_parser.add_argument("file", help="Path to a JSON/YAML list of profiles")

    # --- search subcommand ---
    search_parser = subparsers.add_parser("search", help="Run a single search")
    search_parser.add_argument("query", help="Free-text query, e.g. 'web developers in pune'")
    search_parser.add_argument(
        "--user",
        default="cli",
        help="User ID the search is made for (default: cli)",
    )
    search_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the raw outcome as JSON instead of a chat reply",
    )

    # --- chat subcommand ---
    chat_parser = subparsers.add_parser(
        "chat",
        help="Interactive conversation; 'more' pages through results",
    )
    chat_parser.add_argument(
        "--user",
        default="cli",
        help="User ID the conversation belongs to (default: cli)",
    )

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def build_service(settings: Settings) -> tuple[AlumniSearchService, list[sqlite3.Connection]]:
    """Wire the search service. Returns it with the connections to close."""
    store_conn = init_db(settings.database.path)
    log_conn = init_db(settings.database.path)

    extractor = build_oracle(RuleBasedIntentExtractor(settings.vocabulary), settings.oracle)
    sessions = SessionManager(
        InMemorySessionStore(),
        settings.session,
        follow_up_phrases=settings.vocabulary.follow_up_phrases,
    )
    service = AlumniSearchService(
        SQLiteProfileStore(store_conn),
        sessions,
        extractor,
        settings,
        conn=log_conn,
    )
    return service, [store_conn, log_conn]


def cmd_import_profiles(args: argparse.Namespace, settings: Settings) -> None:
    """Handle import-profiles subcommand."""
    profiles = load_profiles_file(args.file)
    conn = init_db(settings.database.path)
    try:
        new_count = upsert_profiles(conn, profiles)
        total = count_profiles(conn)
    finally:
        conn.close()
    print(f"Imported {len(profiles)} profiles ({new_count} new) into {settings.database.path}")
    print(f"  Directory now holds {total} profiles")


async def cmd_search(args: argparse.Namespace, settings: Settings) -> None:
    """Handle search subcommand."""
    service, conns = build_service(settings)
    try:
        outcome = await service.search(args.user, args.query)
    finally:
        for conn in conns:
            conn.close()

    if args.json:
        print(outcome.model_dump_json(indent=2))
    else:
        print(format_outcome(outcome))


async def cmd_chat(args: argparse.Namespace, settings: Settings) -> None:
    """Handle chat subcommand."""
    service, conns = build_service(settings)
    print("Ask about alumni (e.g. 'web developers in pune'). Type 'exit' to leave.")
    try:
        while True:
            try:
                line = await asyncio.to_thread(input, "> ")
            except EOFError:
                break
            if line.strip().lower() in _EXIT_WORDS:
                break
            if not line.strip():
                continue
            outcome = await service.search(args.user, line)
            print(format_outcome(outcome))
            print()
    finally:
        for conn in conns:
            conn.close()


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = Settings.from_yaml(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    if args.command == "import-profiles":
        try:
            cmd_import_profiles(args, settings)
        except (FileNotFoundError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    elif args.command == "search":
        try:
            asyncio.run(cmd_search(args, settings))
        except (ImportError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        try:
            asyncio.run(cmd_chat(args, settings))
        except (ImportError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        except KeyboardInterrupt:
            print()


if __name__ == "__main__":
    main()
