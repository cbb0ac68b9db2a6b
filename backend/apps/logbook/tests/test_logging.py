from django.test import TestCase

from apps.logbook import services
from apps.logbook.tests.utils import PASSWORD, make_entry, make_submitted_entry, make_user
from core.exceptions import InvalidCredentialsError, PermissionDeniedError


class StructuredLoggingTests(TestCase):
    def setUp(self):
        self.alice = make_user("Operator")
        self.bob = make_user("QA")

    def test_approval_emits_structured_record(self):
        entry = make_submitted_entry(self.alice)

        with self.assertLogs("apps.logbook.services", level="INFO") as cm:
            services.approve_entry(entry.id, self.bob.id, PASSWORD, "ok")

        record = cm.records[-1]
        self.assertEqual(record.getMessage(), "log_entry_approved")
        self.assertEqual(record.operation, "APPROVE_LOG_ENTRY")
        self.assertEqual(record.entity_id, str(entry.id))
        self.assertEqual(record.actor_id, str(self.bob.id))

    def test_submit_and_reject_events(self):
        entry = make_entry(self.alice)
        with self.assertLogs("apps.logbook.services", level="INFO") as cm:
            services.submit_entry(entry.id, self.alice.id, PASSWORD, "done")
            services.reject_entry(entry.id, self.bob.id, PASSWORD, "no")

        messages = [r.getMessage() for r in cm.records]
        self.assertIn("log_entry_submitted", messages)
        self.assertIn("log_entry_rejected", messages)

    def test_failed_reauthentication_is_logged_without_password(self):
        entry = make_entry(self.alice)

        with self.assertLogs("apps.users.services", level="WARNING") as cm:
            with self.assertRaises(InvalidCredentialsError):
                services.submit_entry(entry.id, self.alice.id, "s3cret-guess", "reason")

        self.assertEqual(cm.records[0].getMessage(), "signature_reauthentication_failed")
        self.assertTrue(all("s3cret-guess" not in line for line in cm.output))

    def test_dual_control_violation_is_logged(self):
        qa_author = make_user("QA")
        entry = make_submitted_entry(qa_author)

        with self.assertLogs("apps.logbook.services", level="WARNING") as cm:
            with self.assertRaises(PermissionDeniedError):
                services.approve_entry(entry.id, qa_author.id, PASSWORD, "self")

        self.assertEqual(cm.records[0].getMessage(), "log_entry_dual_control_violation")
