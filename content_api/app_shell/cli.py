import argparse
import json
import logging
import sys
from pathlib import Path

from content_api.adapters.sqlite.migrator import SQLiteMigrator
from content_api.adapters.sqlite.repos import SQLiteExampleListRepo
from content_api.api.deps import Settings
from content_api.components.listing import ListBuilderError, ListRequest, run_list
from content_api.domain.entities import Example
from content_api.rules.loader import load_rules

logger = logging.getLogger("cli")


def handle_migrate(settings: Settings, args: argparse.Namespace) -> None:
    Path(settings.db_path).parent.mkdir(parents=True, exist_ok=True)
    applied = SQLiteMigrator(settings.db_path, args.migrations_dir).run_migrations()
    print(f"Applied {len(applied)} migrations.")


def handle_list(settings: Settings, args: argparse.Namespace) -> None:
    rules_path = Path(settings.rules_path)
    if not rules_path.exists():
        logger.error("Rules file %s not found.", rules_path)
        sys.exit(1)

    rules = load_rules(rules_path)
    request = ListRequest(
        locale=args.locale or rules.content.default_locale,
        fields=args.fields,
        search=args.search,
        page=args.page,
        limit=args.limit,
    )
    try:
        representation = run_list(
            request,
            repo=SQLiteExampleListRepo(settings.db_path),
            rules=rules,
            resource_key=Example.RESOURCE_KEY,
        )
    except ListBuilderError as e:
        logger.error("Invalid list parameters: %s", e)
        sys.exit(1)

    print(json.dumps(representation.to_dict(), indent=2, default=str))


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO)

    parser = argparse.ArgumentParser(description="Example Content API CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    migrate_parser = subparsers.add_parser("migrate", help="Apply pending SQL migrations")
    migrate_parser.add_argument("--migrations-dir", default="migrations")

    # list
    list_parser = subparsers.add_parser("list", help="Print the examples list")
    list_parser.add_argument("--locale", help="Locale of the listed content")
    list_parser.add_argument("--fields", help="Comma separated field names")
    list_parser.add_argument("--search", help="Search term")
    list_parser.add_argument("--page", type=int, default=1)
    list_parser.add_argument("--limit", type=int, default=None)

    args = parser.parse_args(argv)
    settings = Settings()

    if args.command == "migrate":
        handle_migrate(settings, args)
    elif args.command == "list":
        handle_list(settings, args)


if __name__ == "__main__":
    main()
