"""
API tests for /api/v1/auth: login, logout, me, change-password.
"""

from unittest import mock

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.audit.models import AuditEntry
from apps.users.models import User
from core.throttling import LoginRateThrottle


class LoginTests(APITestCase):
    def setUp(self):
        self.alice = User.objects.create_user(
            username="alice", password="alicepass", full_name="Alice", role="Operator"
        )
        self.url = reverse("auth:login")

    def test_login_opens_session_and_returns_token(self):
        response = self.client.post(
            self.url, {"username": "alice", "password": "alicepass"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()["data"]
        self.assertTrue(data["token"])
        self.assertEqual(data["user"]["username"], "alice")
        self.assertNotIn("password", data["user"])
        self.assertTrue(
            AuditEntry.objects.filter(actor=self.alice, action="LOGIN").exists()
        )

        # session cookie authenticates follow-up requests
        response = self.client.get(reverse("auth:me"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["data"]["id"], str(self.alice.id))

    def test_bearer_token_authenticates(self):
        response = self.client.post(
            self.url, {"username": "alice", "password": "alicepass"}, format="json"
        )
        token = response.json()["data"]["token"]

        self.client.logout()
        response = self.client.get(
            reverse("auth:me"), HTTP_AUTHORIZATION=f"Bearer {token}"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_unknown_user_and_wrong_password_look_the_same(self):
        wrong = self.client.post(
            self.url, {"username": "alice", "password": "nope-nope"}, format="json"
        )
        unknown = self.client.post(
            self.url, {"username": "mallory", "password": "nope-nope"}, format="json"
        )

        for response in (wrong, unknown):
            self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
            self.assertEqual(response.json()["error"]["code"], "INVALID_CREDENTIALS")
        self.assertEqual(
            wrong.json()["error"]["message"], unknown.json()["error"]["message"]
        )
        self.assertFalse(AuditEntry.objects.filter(action="LOGIN").exists())

    def test_missing_fields(self):
        response = self.client.post(self.url, {"username": "alice"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_inactive_account(self):
        self.alice.is_active = False
        self.alice.save()
        response = self.client.post(
            self.url, {"username": "alice", "password": "alicepass"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_login_is_throttled(self):
        with mock.patch.object(LoginRateThrottle, "get_rate", return_value="2/min"):
            for _ in range(2):
                self.client.post(
                    self.url, {"username": "alice", "password": "wrong-pass"}, format="json"
                )
            response = self.client.post(
                self.url, {"username": "alice", "password": "alicepass"}, format="json"
            )
        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertEqual(response.json()["error"]["code"], "THROTTLED")


class SessionTests(APITestCase):
    def setUp(self):
        self.alice = User.objects.create_user(
            username="alice", password="alicepass", full_name="Alice", role="Operator"
        )
        self.client.post(
            reverse("auth:login"),
            {"username": "alice", "password": "alicepass"},
            format="json",
        )

    def test_logout_ends_session(self):
        response = self.client.post(reverse("auth:logout"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(
            AuditEntry.objects.filter(actor=self.alice, action="LOGOUT").exists()
        )

        response = self.client.get(reverse("auth:me"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_change_password(self):
        response = self.client.post(
            reverse("auth:change-password"),
            {"currentPassword": "alicepass", "newPassword": "alicepass2"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.alice.refresh_from_db()
        self.assertTrue(self.alice.check_password("alicepass2"))
        row = AuditEntry.objects.get(actor=self.alice, action="UPDATE")
        self.assertEqual(row.reason, "Password changed")

        # the session that changed the password stays signed in
        response = self.client.get(reverse("auth:me"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_change_password_with_wrong_current(self):
        response = self.client.post(
            reverse("auth:change-password"),
            {"currentPassword": "guess-guess", "newPassword": "alicepass2"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.json()["error"]["code"], "INVALID_CREDENTIALS")
        self.alice.refresh_from_db()
        self.assertTrue(self.alice.check_password("alicepass"))
