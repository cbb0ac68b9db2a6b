"""
Seed the initial administrator account.

Run: python manage.py seed_admin --password <password>
     (or set ELOG_ADMIN_PASSWORD)
"""

import os

from django.core.management.base import BaseCommand, CommandError

from apps.users.services import seed_admin
from core.exceptions import ValidationError


class Command(BaseCommand):
    help = "Create the initial Admin account if it does not exist"

    def add_arguments(self, parser):
        parser.add_argument("--username", default="admin")
        parser.add_argument("--full-name", default="System Administrator")
        parser.add_argument(
            "--password",
            default=None,
            help="Initial password (defaults to $ELOG_ADMIN_PASSWORD)",
        )

    def handle(self, *args, **options):
        password = options["password"] or os.environ.get("ELOG_ADMIN_PASSWORD")
        if not password:
            raise CommandError(
                "A password is required: pass --password or set ELOG_ADMIN_PASSWORD"
            )

        try:
            user, created = seed_admin(
                username=options["username"],
                password=password,
                full_name=options["full_name"],
            )
        except ValidationError as exc:
            raise CommandError(exc.message)

        if created:
            self.stdout.write(self.style.SUCCESS(f"Created admin user '{user.username}'"))
        else:
            self.stdout.write(f"User '{user.username}' already exists; nothing to do")
