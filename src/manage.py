"""MediQuick management CLI.

Usage:
    python src/manage.py setup-db                 # Create all tables
    python src/manage.py drop-db                  # Drop all tables
    python src/manage.py grant-admin USER_ID      # Bootstrap an administrator
"""

import argparse
import sys


def setup_database():
    """Create the relational schema for every aggregate."""
    from mediquick.domain import mediquick
    from mediquick.utils.db import setup_db

    print("Initializing mediquick domain...")
    mediquick.init()
    print("Creating mediquick database schema...")
    setup_db(mediquick)
    print("Done.")


def drop_database():
    from mediquick.domain import mediquick
    from mediquick.utils.db import drop_db

    print("Initializing mediquick domain...")
    mediquick.init()
    print("Dropping mediquick database schema...")
    drop_db(mediquick)
    print("Done.")


def grant_admin(user_id: str, name: str | None = None):
    """Give ``user_id`` the admin role. Admins cannot be created over HTTP."""
    from mediquick.domain import mediquick
    from mediquick.profile.registration import GrantAdmin

    mediquick.init()
    with mediquick.domain_context():
        mediquick.process(GrantAdmin(user_id=user_id, name=name), asynchronous=False)
    print(f"Granted admin role to {user_id}.")


def main():
    parser = argparse.ArgumentParser(description="MediQuick management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    admin_parser = subparsers.add_parser("grant-admin", help="Grant the admin role to a user")
    admin_parser.add_argument("user_id")
    admin_parser.add_argument("--name", default=None)

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "grant-admin":
        grant_admin(args.user_id, args.name)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
