#!/usr/bin/env python3
"""
Admissionshala -- operator commands for the content-management API.

Usage:
  python main.py seed-admin
  python main.py seed-admin --email owner@example.com --password 's3cret!pass'
  python main.py seed-content
  python main.py serve --port 8000

Environment variables (see core/config.py for the full list):
  DATABASE_URL            Where accounts and content live (default: sqlite:///admissionshala.db)
  DEFAULT_ADMIN_EMAIL     Used by seed-admin when --email is not given
  DEFAULT_ADMIN_PASSWORD  Used by seed-admin when --password is not given
"""

import argparse
import logging
from typing import Optional

from auth.models import Account, Role
from auth.permissions import ALL_PERMISSIONS, sorted_permissions
from auth.store import AccountStore
from cms.defaults import initialize_content
from cms.store import CMSStore
from core.config import get_settings

logger = logging.getLogger("admissionshala.cli")


def seed_admin(
    store: AccountStore,
    name: str,
    email: str,
    password: str,
) -> tuple[Account, bool]:
    """Create the admin account unless one with that email exists.

    Returns (account, created). An existing account is returned untouched,
    whatever its role; re-running the command never resets a password.
    """
    existing = store.get_by_email(email)
    if existing is not None:
        return existing, False
    account = Account(
        name=name,
        email=email,
        role=Role.admin.value,
        permissions=sorted_permissions(ALL_PERMISSIONS),
    )
    account_id = store.create_account(account, password=password)
    logger.warning("Seeded admin account %s -- change the password after first login", email)
    return store.get_by_id(account_id), True


def seed_content(cms: CMSStore, actor_id: Optional[int]) -> list[str]:
    return initialize_content(cms, actor_id)


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="admissionshala",
        description="Operator commands for the Admissionshala API.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py seed-admin
  python main.py seed-admin --email owner@example.com --password 's3cret!pass'
  python main.py seed-content
  DATABASE_URL=postgresql://user:pw@host/db python main.py seed-content
        """,
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    p_admin = sub.add_parser("seed-admin", help="Create the default admin account if it does not exist")
    p_admin.add_argument("--name", metavar="NAME", help="Display name (default: DEFAULT_ADMIN_NAME)")
    p_admin.add_argument("--email", metavar="EMAIL", help="Login email (default: DEFAULT_ADMIN_EMAIL)")
    p_admin.add_argument("--password", metavar="PASSWORD", help="Password (default: DEFAULT_ADMIN_PASSWORD)")

    sub.add_parser("seed-content", help="Create default content for every page that has none")

    p_serve = sub.add_parser("serve", help="Run the API with uvicorn")
    p_serve.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    p_serve.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        return

    logging.basicConfig(level=logging.INFO, format="%(levelname)-5s %(name)s %(message)s")
    settings = get_settings()

    if args.command == "serve":
        import uvicorn

        uvicorn.run("api.main:app", host=args.host, port=args.port, reload=args.reload)
        return

    if args.command == "seed-admin":
        store = AccountStore()
        try:
            account, created = seed_admin(
                store,
                args.name or settings.default_admin_name,
                args.email or settings.default_admin_email,
                args.password or settings.default_admin_password,
            )
        finally:
            store.close()
        if created:
            print(f"  Admin account created: {account.email} (id {account.id})")
        else:
            print(f"  Account already exists: {account.email} (role {account.role})")
        return

    if args.command == "seed-content":
        accounts = AccountStore()
        cms = CMSStore()
        try:
            admin = accounts.get_by_email(settings.default_admin_email)
            results = seed_content(cms, admin.id if admin else None)
        finally:
            cms.close()
            accounts.close()
        for line in results:
            print(f"  {line}")


if __name__ == "__main__":
    main()
