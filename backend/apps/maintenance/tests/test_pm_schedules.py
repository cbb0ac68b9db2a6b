"""
PM schedule tests: due-state derivation, services and API.
"""

import uuid
from datetime import timedelta
from types import SimpleNamespace

from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.audit.models import AuditEntry
from apps.logbook.tests.utils import make_equipment, make_user
from apps.maintenance import services
from apps.maintenance.models import PMSchedule
from core.exceptions import NotFoundError, ValidationError


def _schedule(days_until_due, status="Scheduled"):
    now = timezone.now()
    return SimpleNamespace(next_due=now + timedelta(days=days_until_due), status=status), now


@override_settings(ELOG_PM_DUE_SOON_DAYS=7)
class DueStateTests(SimpleTestCase):
    def test_past_due_is_overdue(self):
        schedule, now = _schedule(-1)
        self.assertEqual(services.due_state(schedule, now), "overdue")

    def test_within_window_is_due_soon(self):
        schedule, now = _schedule(3)
        self.assertEqual(services.due_state(schedule, now), "due_soon")

    def test_beyond_window_is_compliant(self):
        schedule, now = _schedule(30)
        self.assertEqual(services.due_state(schedule, now), "compliant")

    def test_completed_is_never_overdue(self):
        schedule, now = _schedule(-10, status="Completed")
        self.assertEqual(services.due_state(schedule, now), "compliant")

    @override_settings(ELOG_PM_DUE_SOON_DAYS=1)
    def test_window_is_configurable(self):
        schedule, now = _schedule(3)
        self.assertEqual(services.due_state(schedule, now), "compliant")


class PMScheduleServiceTests(TestCase):
    def setUp(self):
        self.engineer = make_user("Engineer")
        self.equipment = make_equipment()

    def _create(self, **overrides):
        fields = {
            "equipment_id": self.equipment.id,
            "task_name": "Replace filters",
            "frequency": "Monthly",
            "next_due": timezone.now() + timedelta(days=20),
        }
        fields.update(overrides)
        return services.create_schedule(self.engineer.id, **fields)

    def test_create_audits(self):
        schedule = self._create()
        row = AuditEntry.objects.get(entity_type="PMSchedule", entity_id=str(schedule.id))
        self.assertEqual(row.action, "CREATE")
        self.assertEqual(row.new_value["task_name"], "Replace filters")

    def test_create_with_unknown_equipment(self):
        with self.assertRaises(ValidationError):
            self._create(equipment_id=uuid.uuid4())

    def test_update_audits_old_and_new(self):
        schedule = self._create()
        last = timezone.now()
        updated = services.update_schedule(
            schedule.id, self.engineer.id, status="Completed", last_performed=last
        )

        self.assertEqual(updated.status, "Completed")
        row = AuditEntry.objects.get(
            entity_type="PMSchedule", entity_id=str(schedule.id), action="UPDATE"
        )
        self.assertEqual(row.old_value["status"], "Scheduled")
        self.assertEqual(row.new_value["status"], "Completed")

    def test_update_unknown_schedule(self):
        with self.assertRaises(NotFoundError):
            services.update_schedule(uuid.uuid4(), self.engineer.id, status="Completed")

    def test_list_is_ordered_by_next_due(self):
        later = self._create(task_name="Later", next_due=timezone.now() + timedelta(days=40))
        sooner = self._create(task_name="Sooner", next_due=timezone.now() + timedelta(days=2))
        self.assertEqual(list(services.list_schedules()), [sooner, later])


class PMScheduleViewTests(APITestCase):
    def setUp(self):
        self.user = make_user("Engineer")
        self.equipment = make_equipment()
        self.client.force_authenticate(self.user)
        self.url = reverse("maintenance:list-or-create-schedules")

    def test_create_and_list(self):
        response = self.client.post(
            self.url,
            {
                "equipmentId": str(self.equipment.id),
                "taskName": "Calibrate probes",
                "frequency": "Quarterly",
                "nextDue": (timezone.now() - timedelta(days=1)).isoformat(),
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.json()["data"]["status"], "Scheduled")

        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()["data"]
        self.assertEqual(len(data), 1)
        self.assertEqual(data[0]["dueState"], "overdue")

    def test_invalid_frequency(self):
        response = self.client.post(
            self.url,
            {
                "equipmentId": str(self.equipment.id),
                "taskName": "Calibrate probes",
                "frequency": "Hourly",
                "nextDue": timezone.now().isoformat(),
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("frequency", response.json()["error"]["details"])

    def test_patch_schedule(self):
        schedule = PMSchedule.objects.create(
            equipment=self.equipment,
            task_name="Lubricate",
            frequency="Weekly",
            next_due=timezone.now() + timedelta(days=3),
        )
        url = reverse("maintenance:update-schedule", kwargs={"scheduleId": schedule.id})
        response = self.client.patch(url, {"status": "Completed"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["data"]["status"], "Completed")
        self.assertEqual(response.json()["data"]["taskName"], "Lubricate")

    def test_patch_unknown_schedule(self):
        url = reverse("maintenance:update-schedule", kwargs={"scheduleId": uuid.uuid4()})
        response = self.client.patch(url, {"status": "Completed"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
