from __future__ import annotations

from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from apps.core.models import GameSettings, ResourceType, Team
from apps.nodes.models import Node

User = get_user_model()


@override_settings(GAME_BROADCASTER="apps.core.tests.broadcasting.RecordingBroadcaster")
class ActionApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        GameSettings.objects.create(is_active=True)
        self.alpha = Team.objects.create(name="alpha", color="#ef4444")
        self.beta = Team.objects.create(name="beta", color="#3b82f6")
        self.node = Node.objects.create(
            name="Fish Market",
            resource_type=ResourceType.SEAFOOD,
            capture_rate=30,
            secret_key="secret-sea-6",
            last_settled_at=timezone.now() - timedelta(hours=1),
        )

    def post(self, **overrides):
        body = {"nodeId": str(self.node.id), "teamName": "alpha", "secret": "secret-sea-6"}
        body.update(overrides)
        return self.client.post("/api/action", body, format="json")

    def test_capture_then_cooldown(self):
        r = self.post()
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["success"], True)
        self.assertEqual(r.data["action"], "CAPTURE")
        self.assertEqual(r.data["amount"], 30)
        self.assertEqual(r.data["newScore"], 30)
        self.assertEqual(r.data["node"]["ownerId"], self.alpha.id)
        self.assertEqual(r.data["node"]["ownerColor"], "#ef4444")
        self.assertNotIn("secret_key", r.data["node"])

        r = self.post()
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["success"], False)
        self.assertEqual(r.data["action"], "HARVEST")
        self.assertNotIn("amount", r.data)

    def test_harvest_after_whole_minutes(self):
        Node.objects.filter(pk=self.node.pk).update(
            owner=self.alpha, last_settled_at=timezone.now() - timedelta(minutes=2, seconds=10)
        )
        r = self.post(action="HARVEST")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["action"], "HARVEST")
        self.assertEqual(r.data["amount"], 60)

    def test_missing_fields(self):
        r = self.client.post("/api/action", {"nodeId": str(self.node.id)}, format="json")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["success"], False)
        self.assertEqual(r.data["code"], "validation_failed")
        self.assertIn("teamName", r.data["fields"])

    def test_invalid_action(self):
        r = self.post(action="STEAL")
        self.assertEqual(r.status_code, 400)
        self.assertIn("action", r.data["fields"])

    def test_wrong_secret(self):
        r = self.post(secret="nope")
        self.assertEqual(r.status_code, 403)
        self.assertEqual(r.data, {"success": False, "error": "Invalid secret key.", "code": "forbidden"})
        self.node.refresh_from_db()
        self.assertIsNone(self.node.owner_id)

    def test_unknown_node_and_team(self):
        r = self.post(nodeId="not-a-node")
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.data["code"], "node_not_found")
        r = self.post(teamName="omega")
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.data["code"], "team_not_found")

    def test_conflicts(self):
        Node.objects.filter(pk=self.node.pk).update(owner=self.beta)
        r = self.post(action="HARVEST")
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.data["code"], "not_owned")

        r = self.post(teamName="beta", action="CAPTURE")
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.data["code"], "already_owned")

    def test_inactive_game(self):
        GameSettings.objects.update(is_active=False)
        r = self.post()
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.data["code"], "game_inactive")


@override_settings(GAME_BROADCASTER="apps.core.tests.broadcasting.RecordingBroadcaster")
class NodeApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.admin = User.objects.create_user(username="admin", email="a@a", password="password-strong-123456", is_staff=True)
        self.player = User.objects.create_user(username="player", email="p@p", password="password-strong-123456")
        self.alpha = Team.objects.create(name="alpha", color="#ef4444")
        self.meat = Node.objects.create(name="Meat Plant", resource_type=ResourceType.MEAT, capture_rate=50, owner=self.alpha)
        self.rice = Node.objects.create(name="Rice Silo", resource_type=ResourceType.RICE, capture_rate=60)

    def test_public_nodes_hide_secrets(self):
        r = self.client.get("/api/nodes")
        self.assertEqual(r.status_code, 200)
        self.assertEqual([n["name"] for n in r.data], ["Meat Plant", "Rice Silo"])
        for n in r.data:
            self.assertNotIn("secret_key", n)
            self.assertNotIn("secretKey", n)
        self.assertEqual(r.data[0]["ownerColor"], "#ef4444")
        self.assertIsNone(r.data[1]["ownerId"])

        r = self.client.get(f"/api/nodes/{self.rice.id}")
        self.assertEqual(r.data["type"], ResourceType.RICE)
        self.assertEqual(r.data["captureRate"], 60)

    def test_public_nodes_filter(self):
        r = self.client.get(f"/api/nodes?owner={self.alpha.id}")
        self.assertEqual([n["name"] for n in r.data], ["Meat Plant"])
        r = self.client.get(f"/api/nodes?resource_type={ResourceType.RICE}")
        self.assertEqual([n["name"] for n in r.data], ["Rice Silo"])

    def test_game_state(self):
        r = self.client.get("/api/game/state")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["isActive"], False)
        self.assertEqual(len(r.data["nodes"]), 2)
        self.assertEqual(r.data["teams"][0]["nodeCount"], 1)
        self.assertEqual(r.data["logs"], [])

    def test_tick_requires_staff(self):
        self.assertEqual(self.client.post("/api/game/tick").status_code, 403)
        self.client.force_authenticate(user=self.player)
        self.assertEqual(self.client.post("/api/game/tick").status_code, 403)

        GameSettings.objects.create(is_active=True)
        self.client.force_authenticate(user=self.admin)
        r = self.client.post("/api/game/tick")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["processedTeams"], 1)
        self.assertEqual(r.data["details"], [{"teamId": self.alpha.id, "newScore": 50, "added": 50}])

    def test_admin_node_crud(self):
        self.assertEqual(self.client.get("/api/admin/nodes").status_code, 403)
        self.client.force_authenticate(user=self.admin)

        r = self.client.get("/api/admin/nodes")
        self.assertEqual(r.status_code, 200)
        self.assertIn("secret_key", r.data[0])

        r = self.client.post(
            "/api/admin/nodes",
            {"name": "Spice Bazaar", "resource_type": ResourceType.SPICE, "capture_rate": 20, "x": 10, "y": 20},
            format="json",
        )
        self.assertEqual(r.status_code, 201)
        self.assertTrue(r.data["secret_key"])
        self.assertIsNone(r.data["owner"])
        created = Node.objects.get(name="Spice Bazaar")

        r = self.client.patch(f"/api/admin/nodes/{created.id}", {"capture_rate": 0}, format="json")
        self.assertEqual(r.status_code, 400)
        self.assertIn("capture_rate", r.data["fields"])

        r = self.client.patch(f"/api/admin/nodes/{created.id}", {"secret_key": "rotated"}, format="json")
        self.assertEqual(r.status_code, 200)
        created.refresh_from_db()
        self.assertEqual(created.secret_key, "rotated")

        r = self.client.delete(f"/api/admin/nodes/{created.id}")
        self.assertEqual(r.status_code, 204)
        self.assertFalse(Node.objects.filter(pk=created.pk).exists())
