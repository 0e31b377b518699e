#!/usr/bin/env python
# backend/tutorly/commands/manage.py
"""
Management commands for Tutorly.

Usage:
    python -m tutorly.commands.manage init-db          # Create missing tables
    python -m tutorly.commands.manage create-admin     # Create the bootstrap admin
"""

import argparse
import logging
import sys
from typing import List, Optional

from ..core.config import settings
from ..core.exceptions import DomainException
from ..database import SessionLocal, init_db
from ..services.auth_service import AuthService

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


class ManageCommand:
    """Management command handler."""

    def init_db(self) -> None:
        init_db()

    def create_admin(self, email: str, name: str, password: Optional[str]) -> str:
        """
        Create an admin account.

        Returns:
            The new account's id
        """
        if not password:
            raise ValueError("An admin password is required (--password or ADMIN_PASSWORD)")

        init_db()
        db = SessionLocal()
        try:
            user = AuthService(db).create_admin(email=email, name=name, password=password)
            return user.id
        finally:
            db.close()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the management command."""
    parser = argparse.ArgumentParser(
        description="Tutorly Management",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m tutorly.commands.manage init-db
  python -m tutorly.commands.manage create-admin --email admin@example.com --password s3cret
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("init-db", help="Create missing database tables")

    admin_parser = subparsers.add_parser("create-admin", help="Create an admin account")
    admin_parser.add_argument("--email", default=settings.admin_email)
    admin_parser.add_argument("--name", default=settings.admin_name)
    admin_parser.add_argument("--password", default=settings.admin_password)

    args = parser.parse_args(argv)
    cmd = ManageCommand()

    if args.command == "init-db":
        cmd.init_db()
        print("Database schema ensured")
        return 0

    if args.command == "create-admin":
        try:
            user_id = cmd.create_admin(args.email, args.name, args.password)
        except (DomainException, ValueError) as e:
            message = e.message if isinstance(e, DomainException) else str(e)
            logger.error(f"Could not create admin: {message}")
            return 1
        print(f"Admin {args.email} created (id {user_id})")
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
