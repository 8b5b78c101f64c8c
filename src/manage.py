"""Farmgate database management CLI.

Usage:
    python src/manage.py setup-db                     # Create all tables
    python src/manage.py drop-db --domain messaging   # Drop one domain's tables
"""

import argparse
import sys

from shared.db import drop_db, setup_db

DOMAIN_NAMES = ["ordering", "messaging"]


def _load_domains(names=None):
    from messaging.domain import messaging
    from ordering.domain import ordering

    all_domains = {"ordering": ordering, "messaging": messaging}
    return {name: all_domains[name] for name in (names or DOMAIN_NAMES)}


def setup_databases(domains=None):
    """Create database schemas for the specified (or all) domains."""
    for name, domain in _load_domains(domains).items():
        print(f"Initializing {name} domain...")
        domain.init()
        providers = setup_db(domain)
        print(f"  {name} schema ready ({', '.join(providers) or 'no SQL providers'}).")
    print("Done.")


def drop_databases(domains=None):
    """Drop database schemas for the specified (or all) domains."""
    for name, domain in _load_domains(domains).items():
        print(f"Initializing {name} domain...")
        domain.init()
        providers = drop_db(domain)
        print(f"  {name} schema dropped ({', '.join(providers) or 'no SQL providers'}).")
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Farmgate database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for command, help_text in (("setup-db", "Create all database tables"), ("drop-db", "Drop all database tables")):
        subparser = subparsers.add_parser(command, help=help_text)
        subparser.add_argument(
            "--domain",
            choices=DOMAIN_NAMES,
            nargs="*",
            help="Specific domain(s) (default: all)",
        )

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
