from django.test import TestCase

from apps.audit.models import AuditEntry
from apps.audit.services import create_audit_entry
from apps.users.models import User


class AuditEntryImmutabilityTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="audit_test_user",
            password="password123",
            full_name="Audit Tester",
            role="QA",
        )
        self.entry = create_audit_entry(
            action="LOGIN",
            actor_id=self.user.id,
            entity_type="User",
            entity_id=self.user.id,
        )

    def test_bulk_update_is_blocked(self):
        with self.assertRaises(ValueError):
            AuditEntry.objects.filter(pk=self.entry.pk).update(action="LOGOUT")

    def test_bulk_delete_is_blocked(self):
        with self.assertRaises(ValueError):
            AuditEntry.objects.filter(pk=self.entry.pk).delete()

    def test_instance_save_after_create_is_blocked(self):
        self.entry.reason = "rewritten"
        with self.assertRaises(ValueError):
            self.entry.save()
        self.entry.refresh_from_db()
        self.assertIsNone(self.entry.reason)

    def test_instance_delete_is_blocked(self):
        with self.assertRaises(ValueError):
            self.entry.delete()
        self.assertTrue(AuditEntry.objects.filter(pk=self.entry.pk).exists())
