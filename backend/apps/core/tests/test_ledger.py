from __future__ import annotations

from django.test import TestCase

from apps.core import ledger
from apps.core.exceptions import TeamNotFound
from apps.core.models import ResourceLedgerEntry, ResourceType, Team


class TeamLedgerTests(TestCase):
    def setUp(self):
        self.team = Team.objects.create(name="alpha", color="#ef4444")

    def test_increment_score_returns_new_score(self):
        self.assertEqual(ledger.increment_score(self.team.id, 50), 50)
        self.assertEqual(ledger.increment_score(self.team.id, 30), 80)
        self.team.refresh_from_db()
        self.assertEqual(self.team.score, 80)

    def test_credit_resource_creates_entry_lazily_then_increments(self):
        self.assertFalse(ResourceLedgerEntry.objects.exists())
        ledger.credit_resource(self.team.id, ResourceType.MEAT, 50)
        ledger.credit_resource(self.team.id, ResourceType.MEAT, 25)
        entries = ResourceLedgerEntry.objects.filter(team=self.team)
        self.assertEqual(entries.count(), 1)
        self.assertEqual(entries.get().amount, 75)

    def test_credit_splits_breakdown_and_sums_score(self):
        new_score = ledger.credit(self.team.id, {ResourceType.MEAT: 50, ResourceType.RICE: 30})
        self.assertEqual(new_score, 80)
        amounts = dict(ResourceLedgerEntry.objects.filter(team=self.team).values_list("resource_type", "amount"))
        self.assertEqual(amounts, {ResourceType.MEAT: 50, ResourceType.RICE: 30})

    def test_credit_rejects_non_positive_amounts(self):
        with self.assertRaises(ValueError):
            ledger.credit(self.team.id, {ResourceType.MEAT: 0})
        with self.assertRaises(ValueError):
            ledger.credit_resource(self.team.id, ResourceType.MEAT, -5)
        self.team.refresh_from_db()
        self.assertEqual(self.team.score, 0)
        self.assertFalse(ResourceLedgerEntry.objects.exists())

    def test_unknown_team_writes_nothing(self):
        with self.assertRaises(TeamNotFound):
            ledger.credit(self.team.id + 1000, {ResourceType.MEAT: 10})
        self.assertFalse(ResourceLedgerEntry.objects.exists())

    def test_get_team_by_name(self):
        self.assertEqual(ledger.get_team_by_name("alpha"), self.team)
        with self.assertRaises(TeamNotFound):
            ledger.get_team_by_name("nobody")
