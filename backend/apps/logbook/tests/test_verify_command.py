from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from django.utils import timezone

from apps.logbook import services
from apps.logbook.models import LogEntry
from apps.logbook.tests.utils import (
    PASSWORD,
    make_entry,
    make_equipment,
    make_submitted_entry,
    make_user,
)


class VerifyLogbookCommandTests(TestCase):
    def setUp(self):
        self.alice = make_user("Operator")
        self.bob = make_user("QA")

    def test_passes_for_service_driven_history(self):
        make_entry(self.alice)
        entry = make_submitted_entry(self.alice)
        services.approve_entry(entry.id, self.bob.id, PASSWORD, "ok")

        out = StringIO()
        call_command("verify_logbook", stdout=out)
        self.assertIn("VERIFICATION PASSED", out.getvalue())

    def test_fails_when_audit_trail_is_missing(self):
        # Inserted without the service layer, so no CREATE audit row exists
        LogEntry.objects.create(
            log_code="LOG-1999-001",
            equipment=make_equipment(),
            activity_type="Operation",
            start_time=timezone.now(),
            description="inserted directly",
            created_by=self.alice,
        )

        with self.assertRaises(CommandError):
            call_command("verify_logbook", stdout=StringIO())
