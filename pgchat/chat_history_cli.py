"""
Command-line access to a chat message history table.

Usage:
    pgchat-history ping
    pgchat-history --session-id s1 --create-table init
    pgchat-history --session-id s1 add --type human "Hello"
    pgchat-history --session-id s1 list --json
    pgchat-history --session-id s1 clear --overwrite
    pgchat-history --session-id s1 replace --overwrite --type system "Be brief"
    pgchat-history --env-file /path/to/custom.env --session-id s1 list
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from pgchat.domain.errors import DomainError
from pgchat.domain.messages import ChatMessage, ChatMessageType
from pgchat.modules.chat_history import (
    ChatMessageHistory,
    check_connection,
    create_chat_history_engine,
    init_chat_history_table,
)
from pgchat.modules.config.config_manager import LOG_LEVELS, get_settings, reset_settings

logger = logging.getLogger(__name__)

_TYPE_CHOICES = [t.value for t in ChatMessageType]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pgchat-history",
        description="Inspect and edit chat message history stored in PostgreSQL.",
    )
    parser.add_argument("--db-url", default=None, help="Database URL (default: CHAT_HISTORY_DB_URL or PG_* settings).")
    parser.add_argument("--schema", default=None, help="Schema holding the table (default: CHAT_HISTORY_SCHEMA).")
    parser.add_argument("--table", default=None, help="Chat history table (default: CHAT_HISTORY_TABLE).")
    parser.add_argument("--session-id", default=None, help="Conversation session id.")
    parser.add_argument(
        "--create-table",
        action="store_true",
        help="Create the schema and table if they do not exist.",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Path to a .env file loaded before settings are read.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level (default: LOG_LEVEL or INFO).",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("ping", help="Connect and print the current database name.")
    sub.add_parser("init", help="Create the schema and table if missing.")

    add = sub.add_parser("add", help="Append messages to the session.")
    add.add_argument("--type", dest="message_type", choices=_TYPE_CHOICES, default="human")
    add.add_argument("content", nargs="+", help="Message text; each argument is one message.")

    list_cmd = sub.add_parser("list", help="Print the session's messages in order.")
    list_cmd.add_argument("--json", dest="json_output", action="store_true", help="Output JSON.")

    clear = sub.add_parser("clear", help="Delete the session's messages.")
    clear.add_argument("--overwrite", action="store_true", help="Required to actually delete rows.")

    replace = sub.add_parser("replace", help="Replace the session's messages.")
    replace.add_argument("--overwrite", action="store_true", help="Required to actually replace rows.")
    replace.add_argument("--type", dest="message_type", choices=_TYPE_CHOICES, default="human")
    replace.add_argument("content", nargs="*", help="Message text; each argument is one message.")
    return parser


def _history(args: argparse.Namespace, engine, table: str, schema: str) -> ChatMessageHistory:
    return ChatMessageHistory(
        engine,
        table_name=table,
        session_id=args.session_id,
        schema_name=schema,
        overwrite=getattr(args, "overwrite", False),
        create_table=args.create_table,
    )


def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    table = args.table or settings.chat_history_table
    schema = args.schema or settings.chat_history_schema

    engine = None
    try:
        engine = create_chat_history_engine(args.db_url, settings)
        if args.command == "ping":
            print(check_connection(engine))
            return 0

        if args.command == "init":
            init_chat_history_table(engine, table, schema)
            print(f"Table {schema}.{table} is ready")
            return 0

        history = _history(args, engine, table, schema)

        if args.command == "add":
            history.add_messages(ChatMessage(content=c, type=args.message_type) for c in args.content)
        elif args.command == "list":
            messages = history.get_messages()
            if args.json_output:
                print(json.dumps([m.to_dict() for m in messages], indent=2))
            else:
                for m in messages:
                    print(f"{m.type.value}: {m.content}")
        elif args.command == "clear":
            if not args.overwrite:
                print("Refusing to clear without --overwrite", file=sys.stderr)
                return 2
            history.clear()
        elif args.command == "replace":
            if not args.overwrite:
                print("Refusing to replace without --overwrite", file=sys.stderr)
                return 2
            history.set_messages(ChatMessage(content=c, type=args.message_type) for c in args.content)
        return 0
    except DomainError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        logger.debug("CLI error details", exc_info=True)
        return 1
    finally:
        if engine is not None:
            engine.dispose()


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.env_file:
        env_path = Path(args.env_file)
        if not env_path.exists():
            print(f"Error: specified env file not found: {env_path}", file=sys.stderr)
            return 2
        load_dotenv(dotenv_path=str(env_path), override=True)
        reset_settings()

    try:
        settings = get_settings()
    except ValueError as exc:
        print(f"Error: invalid settings: {exc}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=(args.log_level or settings.log_level).upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    if args.command not in ("ping", "init") and not args.session_id:
        print("Error: --session-id is required for this command.", file=sys.stderr)
        return 2

    return run(args)


if __name__ == "__main__":
    sys.exit(main())
