from unittest import mock

from django.urls import reverse
from rest_framework.test import APITestCase

from apps.users.models import User
from core.throttling import MutationUserThrottle


class ThrottleSmokeTest(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="throttle_user",
            password="throttlepass",
            full_name="Throttle",
            role="Engineer",
        )
        self.client.force_authenticate(self.user)
        self.url = reverse("equipment:list-or-create-equipment")

    def test_mutation_requests_execute(self):
        response = self.client.post(
            self.url,
            {"equipmentCode": "EQ-T1", "name": "T1", "type": "Mixer", "location": "A"},
            format="json",
        )
        self.assertIn(response.status_code, [201, 400])

    def test_mutations_are_rate_limited_reads_are_not(self):
        with mock.patch.object(MutationUserThrottle, "get_rate", return_value="1/min"):
            first = self.client.post(
                self.url,
                {"equipmentCode": "EQ-T1", "name": "T1", "type": "Mixer", "location": "A"},
                format="json",
            )
            second = self.client.post(
                self.url,
                {"equipmentCode": "EQ-T2", "name": "T2", "type": "Mixer", "location": "A"},
                format="json",
            )
            read = self.client.get(self.url)

        self.assertEqual(first.status_code, 201)
        self.assertEqual(second.status_code, 429)
        self.assertEqual(second.json()["error"]["code"], "THROTTLED")
        self.assertEqual(read.status_code, 200)
