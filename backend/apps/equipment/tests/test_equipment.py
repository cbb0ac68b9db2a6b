"""
Equipment registry tests: CRUD through the API and audit of each mutation.
"""

import uuid

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.audit.models import AuditEntry
from apps.equipment.models import Equipment
from apps.logbook.tests.utils import make_entry, make_equipment, make_user


class EquipmentViewTests(APITestCase):
    def setUp(self):
        self.user = make_user("Engineer")
        self.client.force_authenticate(self.user)
        self.list_url = reverse("equipment:list-or-create-equipment")

    def _detail_url(self, equipment_id):
        return reverse("equipment:equipment-detail", kwargs={"equipmentId": equipment_id})

    def _payload(self, **overrides):
        data = {
            "equipmentCode": "EQ-BIO-001",
            "name": "Bioreactor 500L",
            "type": "Bioreactor",
            "location": "Suite A",
            "serialNumber": "SN-1",
        }
        data.update(overrides)
        return data

    def test_create_equipment(self):
        response = self.client.post(self.list_url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.json()["data"]
        self.assertEqual(data["equipmentCode"], "EQ-BIO-001")
        self.assertEqual(data["status"], "Operational")
        row = AuditEntry.objects.get(entity_type="Equipment", entity_id=data["id"])
        self.assertEqual(row.action, "CREATE")
        self.assertEqual(row.actor_id, self.user.id)

    def test_duplicate_code_is_conflict(self):
        make_equipment("EQ-BIO-001")
        response = self.client.post(self.list_url, self._payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.json()["error"]["code"], "CONFLICT")

    def test_invalid_status(self):
        response = self.client.post(
            self.list_url, self._payload(status="Broken"), format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_and_get(self):
        equipment = make_equipment("EQ-A")
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.json()["data"]), 1)

        response = self.client.get(self._detail_url(equipment.id))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["data"]["equipmentCode"], "EQ-A")

    def test_get_unknown(self):
        response = self.client.get(self._detail_url(uuid.uuid4()))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_patch_records_old_and_new(self):
        equipment = make_equipment("EQ-A")
        response = self.client.patch(
            self._detail_url(equipment.id), {"status": "Maintenance"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["data"]["status"], "Maintenance")
        row = AuditEntry.objects.get(
            entity_type="Equipment", entity_id=str(equipment.id), action="UPDATE"
        )
        self.assertEqual(row.old_value["status"], "Operational")
        self.assertEqual(row.new_value["status"], "Maintenance")

    def test_delete_unreferenced(self):
        equipment = make_equipment("EQ-A")
        response = self.client.delete(self._detail_url(equipment.id))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Equipment.objects.filter(id=equipment.id).exists())
        row = AuditEntry.objects.get(
            entity_type="Equipment", entity_id=str(equipment.id), action="DELETE"
        )
        self.assertEqual(row.old_value["equipment_code"], "EQ-A")

    def test_delete_referenced_is_conflict(self):
        equipment = make_equipment("EQ-A")
        make_entry(self.user, equipment)

        response = self.client.delete(self._detail_url(equipment.id))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Equipment.objects.filter(id=equipment.id).exists())
        self.assertFalse(
            AuditEntry.objects.filter(entity_type="Equipment", action="DELETE").exists()
        )

    def test_unauthenticated(self):
        self.client.force_authenticate(user=None)
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
