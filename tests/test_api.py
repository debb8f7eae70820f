#!/usr/bin/env python3
import os
import sys
import unittest
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

sys.path.insert(0, os.path.join(os.path.dirname(__file__)))
from fakes import FakeCatalog

from backend.app.config import Config
from backend.app.controller import Controller
from backend.app.main import create_app
from backend.app.postprocess import APOLOGY_REPLY
from backend.app.session import SessionStore
from backend.data.catalog import CatalogStore
from backend.data.knowledge_store import KnowledgeBase


class TestChatEndpoint(unittest.TestCase):
    def setUp(self):
        self.catalog = FakeCatalog()
        self.knowledge = KnowledgeBase()
        self.knowledge.rebuild(self.catalog)
        self.sessions = SessionStore(ttl_seconds=600, max_entries=100, lock_shards=4)
        controller = Controller(self.catalog, self.knowledge, self.sessions)
        self.client = TestClient(create_app(controller=controller, run_bootstrap=False))

    def test_chat_with_session(self):
        res = self.client.post("/chat", json={"message": "suggest a tea", "sessionId": "abc"})
        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.json()["reply"].startswith("I suggest"))
        res = self.client.post("/chat", json={"message": "what about the cheapest then", "sessionId": "abc"})
        self.assertEqual(res.json(), {"reply": "The cheapest drink is Lemon Ice Tea at ₹210."})

    def test_chat_without_session_is_stateless(self):
        res = self.client.post("/chat", json={"message": "suggest a coffee"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(self.sessions), 0)

    def test_knowledge_answer(self):
        res = self.client.post("/chat", json={"message": "can i bring my dog"})
        self.assertIn("pet-friendly", res.json()["reply"])

    def test_catalog_down_still_200(self):
        self.catalog.fail = True
        res = self.client.post("/chat", json={"message": "suggest a coffee"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["reply"], APOLOGY_REPLY)

    def test_unexpected_error_degrades_to_apology(self):
        broken = MagicMock()
        broken.handle_turn.side_effect = RuntimeError("boom")
        client = TestClient(create_app(controller=broken, run_bootstrap=False))
        res = client.post("/chat", json={"message": "hi"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["reply"], APOLOGY_REPLY)

    def test_session_lifecycle(self):
        res = self.client.post("/session", json={})
        session_id = res.json()["sessionId"]
        self.assertTrue(res.json()["created"])
        again = self.client.post("/session", json={"sessionId": session_id})
        self.assertFalse(again.json()["created"])
        cleared = self.client.delete(f"/session/{session_id}")
        self.assertTrue(cleared.json()["cleared"])

    def test_health(self):
        self.client.post("/session", json={"sessionId": "h1"})
        body = self.client.get("/health").json()
        self.assertEqual(body["status"], "healthy")
        self.assertTrue(body["knowledge_ready"])
        self.assertEqual(body["sessions"], 1)

    def test_knowledge_rebuild(self):
        res = self.client.post("/knowledge/rebuild")
        self.assertEqual(res.status_code, 200)
        self.assertGreater(res.json()["entries"], 9)
        self.catalog.fail = True
        self.assertEqual(self.client.post("/knowledge/rebuild").status_code, 503)


class TestStartup(unittest.TestCase):
    def test_lifespan_seeds_and_indexes(self):
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        catalog = CatalogStore(sessionmaker(bind=engine), timeout=5)
        knowledge = KnowledgeBase()
        app = create_app(catalog=catalog, knowledge=knowledge, sessions=SessionStore())
        with patch.object(Config, "SEED_ON_STARTUP", True):
            with TestClient(app) as client:
                self.assertTrue(knowledge.ready)
                res = client.post("/chat", json={"message": "most expensive food"})
                self.assertEqual(res.json()["reply"], "Our most premium food is Pizza at ₹300.")
                res = client.post("/chat", json={"message": "tell me about obsidian flow"})
                self.assertIn("Soma L.", res.json()["reply"])


if __name__ == '__main__':
    unittest.main()
