"""
Concurrency and atomicity tests for log entry transitions.

Covers the compare-and-set guard, lost races, rollback of a transition when
the audit append fails, and the log code sequence.
"""

import threading
from unittest import mock

from django.db import connection
from django.test import TestCase, TransactionTestCase

from apps.audit.models import AuditEntry
from apps.logbook import services
from apps.logbook.locking import status_locked_update
from apps.logbook.models import LogEntry, LogSequence
from apps.logbook.sequence import next_log_code
from apps.logbook.tests.utils import (
    PASSWORD,
    make_entry,
    make_submitted_entry,
    make_user,
)
from core.exceptions import InvalidStateError


class StatusLockedUpdateTests(TestCase):
    def setUp(self):
        self.alice = make_user("Operator")
        self.entry = make_entry(self.alice)

    def test_update_succeeds_with_current_status_and_version(self):
        updated = status_locked_update(
            LogEntry.objects.filter(id=self.entry.id),
            expected_status="Draft",
            current_version=self.entry.version,
            description="edited",
        )
        self.assertEqual(updated, 1)
        self.entry.refresh_from_db()
        self.assertEqual(self.entry.version, 2)

    def test_stale_version_raises_invalid_state(self):
        with self.assertRaises(InvalidStateError):
            status_locked_update(
                LogEntry.objects.filter(id=self.entry.id),
                expected_status="Draft",
                current_version=self.entry.version + 5,
                description="edited",
            )
        self.entry.refresh_from_db()
        self.assertEqual(self.entry.description, "Batch fermentation run")

    def test_stale_status_raises_invalid_state(self):
        with self.assertRaises(InvalidStateError):
            status_locked_update(
                LogEntry.objects.filter(id=self.entry.id),
                expected_status="Submitted",
                current_version=self.entry.version,
                description="edited",
            )


class DoubleApprovalTests(TestCase):
    def setUp(self):
        self.alice = make_user("Operator")
        self.bob = make_user("QA")
        self.carol = make_user("QA")
        self.entry = make_submitted_entry(self.alice)

    def _approve_rows(self):
        return AuditEntry.objects.filter(
            entity_type="LogEntry", entity_id=str(self.entry.id), action="APPROVE"
        )

    def test_second_approval_is_invalid_state(self):
        services.approve_entry(self.entry.id, self.bob.id, PASSWORD, "first")
        with self.assertRaises(InvalidStateError):
            services.approve_entry(self.entry.id, self.carol.id, PASSWORD, "second")

        self.entry.refresh_from_db()
        self.assertEqual(self.entry.approved_by_id, self.bob.id)
        self.assertEqual(self._approve_rows().count(), 1)

    def test_lost_race_is_detected_by_compare_and_set(self):
        # carol read the entry while it was still Submitted; bob approves first
        stale = LogEntry.objects.get(id=self.entry.id)
        services.approve_entry(self.entry.id, self.bob.id, PASSWORD, "first")

        with mock.patch("apps.logbook.services._lock_entry", return_value=stale):
            with self.assertRaises(InvalidStateError):
                services.approve_entry(self.entry.id, self.carol.id, PASSWORD, "second")

        self.entry.refresh_from_db()
        self.assertEqual(self.entry.status, "Approved")
        self.assertEqual(self.entry.approved_by_id, self.bob.id)
        self.assertEqual(self._approve_rows().count(), 1)

    def test_approve_then_reject_race(self):
        stale = LogEntry.objects.get(id=self.entry.id)
        services.approve_entry(self.entry.id, self.bob.id, PASSWORD, "approve")

        with mock.patch("apps.logbook.services._lock_entry", return_value=stale):
            with self.assertRaises(InvalidStateError):
                services.reject_entry(self.entry.id, self.carol.id, PASSWORD, "reject")

        self.entry.refresh_from_db()
        self.assertEqual(self.entry.status, "Approved")
        self.assertIsNone(self.entry.rejected_by_id)


class ConcurrentApprovalTests(TransactionTestCase):
    """Two reviewers approve the same entry from separate connections."""

    def setUp(self):
        self.alice = make_user("Operator")
        self.reviewers = [make_user("QA"), make_user("QA")]
        self.entry = make_submitted_entry(self.alice)

    def _approve(self, reviewer, barrier, outcomes):
        try:
            barrier.wait()
            services.approve_entry(self.entry.id, reviewer.id, PASSWORD, "checked")
            outcomes.append("ok")
        except Exception as exc:
            outcomes.append(type(exc).__name__)
        finally:
            connection.close()

    def test_exactly_one_approval_wins(self):
        barrier = threading.Barrier(len(self.reviewers))
        outcomes = []
        threads = [
            threading.Thread(target=self._approve, args=(reviewer, barrier, outcomes))
            for reviewer in self.reviewers
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=60)

        self.assertEqual(sorted(outcomes), ["InvalidStateError", "ok"])
        self.entry.refresh_from_db()
        self.assertEqual(self.entry.status, "Approved")
        self.assertIn(self.entry.approved_by_id, {r.id for r in self.reviewers})
        self.assertEqual(
            AuditEntry.objects.filter(
                entity_type="LogEntry", entity_id=str(self.entry.id), action="APPROVE"
            ).count(),
            1,
        )


class AuditFailureRollbackTests(TestCase):
    def setUp(self):
        self.alice = make_user("Operator")
        self.bob = make_user("QA")

    def test_submit_rolls_back_when_audit_fails(self):
        entry = make_entry(self.alice)
        with mock.patch(
            "apps.logbook.services.create_audit_entry",
            side_effect=RuntimeError("audit store unavailable"),
        ):
            with self.assertRaises(RuntimeError):
                services.submit_entry(entry.id, self.alice.id, PASSWORD, "reason")

        entry.refresh_from_db()
        self.assertEqual(entry.status, "Draft")
        self.assertIsNone(entry.submitted_at)
        self.assertEqual(entry.version, 1)

    def test_approve_rolls_back_when_audit_fails(self):
        entry = make_submitted_entry(self.alice)
        with mock.patch(
            "apps.logbook.services.create_audit_entry",
            side_effect=RuntimeError("audit store unavailable"),
        ):
            with self.assertRaises(RuntimeError):
                services.approve_entry(entry.id, self.bob.id, PASSWORD, "reason")

        entry.refresh_from_db()
        self.assertEqual(entry.status, "Submitted")
        self.assertIsNone(entry.approved_by_id)
        self.assertIsNone(entry.approved_at)

    def test_create_rolls_back_entry_and_sequence(self):
        with mock.patch(
            "apps.logbook.services.create_audit_entry",
            side_effect=RuntimeError("audit store unavailable"),
        ):
            with self.assertRaises(RuntimeError):
                make_entry(self.alice)

        self.assertEqual(LogEntry.objects.count(), 0)
        self.assertFalse(LogSequence.objects.filter(last_value__gt=0).exists())


class LogSequenceTests(TestCase):
    def test_sequence_is_per_year(self):
        self.assertEqual(next_log_code(2030), "LOG-2030-001")
        self.assertEqual(next_log_code(2030), "LOG-2030-002")
        self.assertEqual(next_log_code(2031), "LOG-2031-001")
        self.assertEqual(LogSequence.objects.get(year=2030).last_value, 2)

    def test_padding_grows_past_three_digits(self):
        LogSequence.objects.create(year=2030, last_value=999)
        self.assertEqual(next_log_code(2030), "LOG-2030-1000")
