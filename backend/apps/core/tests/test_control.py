from __future__ import annotations

from datetime import timedelta

from django.test import TestCase, override_settings
from django.utils import timezone

from apps.core import control, ledger
from apps.core.exceptions import ValidationFailed
from apps.core.models import AuditLog, GameSettings, ResourceLedgerEntry, ResourceType, Team
from apps.core.tests.broadcasting import RecordingBroadcaster
from apps.nodes.models import Node


@override_settings(GAME_BROADCASTER="apps.core.tests.broadcasting.RecordingBroadcaster")
class ControlPlaneTests(TestCase):
    def setUp(self):
        RecordingBroadcaster.reset()

    def test_missing_settings_row_means_inactive(self):
        self.assertFalse(GameSettings.objects.exists())
        self.assertFalse(control.is_game_active())

    def test_start_is_idempotent(self):
        control.start_game()
        result = control.start_game()
        self.assertTrue(result.success)
        self.assertTrue(control.is_game_active())
        self.assertEqual(GameSettings.objects.count(), 1)
        self.assertEqual(AuditLog.objects.filter(kind=AuditLog.KIND_CONTROL).count(), 2)

    def test_finish_deactivates_and_logs(self):
        control.start_game()
        with self.captureOnCommitCallbacks(execute=True):
            result = control.finish_game()
        self.assertEqual(result.message, "Game Finished")
        self.assertFalse(control.is_game_active())
        self.assertEqual(RecordingBroadcaster.names(), ["new-log-entry"])
        payload = RecordingBroadcaster.events[0][2]
        self.assertEqual(payload["teamColor"], "#fff")

    def test_finish_without_start_succeeds(self):
        self.assertTrue(control.finish_game().success)
        self.assertFalse(control.is_game_active())

    def test_apply_dispatches_and_rejects_unknown(self):
        self.assertEqual(control.apply("start").message, "Game Started")
        with self.assertRaises(ValidationFailed):
            control.apply("PAUSE")

    def test_reset_wipes_all_mutable_state(self):
        alpha = Team.objects.create(name="alpha", color="#ef4444")
        beta = Team.objects.create(name="beta", color="#3b82f6")
        long_ago = timezone.now() - timedelta(hours=1)
        n1 = Node.objects.create(name="Silo", resource_type=ResourceType.RICE, capture_rate=60, owner=alpha, last_settled_at=long_ago)
        n2 = Node.objects.create(name="Farm", resource_type=ResourceType.DAIRY, capture_rate=40, owner=beta, last_settled_at=long_ago)
        ledger.credit(alpha.id, {ResourceType.RICE: 120})
        ledger.credit(beta.id, {ResourceType.DAIRY: 40})
        control.start_game()
        AuditLog.objects.create(message="something happened", team=alpha)

        now = timezone.now()
        with self.captureOnCommitCallbacks(execute=True):
            result = control.reset_game(now=now)

        self.assertEqual(result.message, "Game Reset Complete")
        self.assertEqual(list(Team.objects.values_list("score", flat=True)), [0, 0])
        self.assertFalse(ResourceLedgerEntry.objects.exists())
        self.assertFalse(AuditLog.objects.exists())
        for node in (n1, n2):
            node.refresh_from_db()
            self.assertIsNone(node.owner_id)
            self.assertEqual(node.last_settled_at, now)
        self.assertEqual(GameSettings.objects.count(), 1)
        self.assertFalse(control.is_game_active())
        # Teams and nodes themselves survive
        self.assertEqual(Team.objects.count(), 2)
        self.assertEqual(Node.objects.count(), 2)
        self.assertEqual(RecordingBroadcaster.names(), ["full-reset-required"])
        self.assertEqual(RecordingBroadcaster.events[0][2], {"message": "Game has been reset by admin."})
