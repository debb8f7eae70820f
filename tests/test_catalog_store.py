#!/usr/bin/env python3
import dataclasses
import os
import sys
import time
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__)))
from fakes import memory_session_factory

from backend.app.query_builder import build_menu_query
from backend.data.catalog import CatalogQueryError, CatalogStore
from backend.data.populate_db import populate_catalog
from backend.data.query_spec import OrderBy
from backend.nlu.context_resolver import resolve_context
from backend.nlu.rules import classify


def spec_for(message):
    signals = classify(message)
    return build_menu_query(signals, resolve_context(signals, None))


class TestCatalogStore(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.Session = memory_session_factory()
        cls.inserted = populate_catalog(cls.Session)
        cls.catalog = CatalogStore(cls.Session, timeout=5)

    @classmethod
    def tearDownClass(cls):
        cls.catalog.close()

    def test_seeded_from_csv(self):
        self.assertEqual(self.inserted["art_items"], 8)
        self.assertEqual(self.inserted["workshops"], 2)
        self.assertGreater(self.inserted["menu_items"], 50)

    def test_seeding_is_skipped_when_populated(self):
        again = populate_catalog(self.Session)
        self.assertEqual(set(again.values()), {0})

    def test_available_art_only(self):
        art = self.catalog.list_art_items(available_only=True)
        self.assertEqual({a.id for a in art}, {"art-1", "art-3", "art-4", "art-6", "a1"})
        self.assertTrue(all(a.available for a in art))
        everything = self.catalog.list_art_items(available_only=False)
        self.assertEqual(len(everything), 8)

    def test_workshops(self):
        workshops = {w.id: w for w in self.catalog.list_workshops()}
        self.assertEqual(workshops["w1"].remaining, 3)
        self.assertEqual(workshops["w2"].price, 799)

    def test_cheapest_tea_breaks_ties_by_id(self):
        rows = self.catalog.list_menu_items(spec_for("what is the cheapest tea"))
        self.assertEqual([(r.name, r.price) for r in rows], [("Lemon Ice Tea", 210)])

    def test_most_expensive_food(self):
        rows = self.catalog.list_menu_items(spec_for("most expensive food"))
        self.assertEqual(rows[0].name, "Pizza")
        self.assertEqual(rows[0].price, 300)

    def test_energy_pick(self):
        rows = self.catalog.list_menu_items(spec_for("i am so tired"))
        self.assertEqual(len(rows), 1)
        self.assertIn(rows[0].caffeine_level, {"Very High", "Extreme"})

    def test_default_returns_three(self):
        rows = self.catalog.list_menu_items(spec_for("suggest something"))
        self.assertEqual(len(rows), 3)

    def test_cheapest_shake_is_a_shake(self):
        rows = self.catalog.list_menu_items(spec_for("cheapest shake"))
        self.assertEqual([(r.name, r.price) for r in rows], [("Chocolate", 220)])
        spec = dataclasses.replace(spec_for("suggest a shake"), limit=1000)
        ids = {r.id for r in self.catalog.list_menu_items(spec)}
        self.assertEqual(ids, {"sh-1", "sh-2", "sh-3"})

    def test_sql_agrees_with_in_memory_matching(self):
        everything = self.catalog.list_menu_items()
        for message in (
            "suggest a sweet cold coffee",
            "cheap shake",
            "suggest a spicy snack",
            "i'm tired",
            "what tea do you have",
            "a fruity drink please",
            "something creamy to eat",
            "suggest a sweet shake",
        ):
            spec = dataclasses.replace(spec_for(message), order_by=OrderBy.price_asc, limit=1000)
            from_sql = [r.id for r in self.catalog.list_menu_items(spec)]
            in_memory = [r.id for r in sorted(everything, key=lambda r: (r.price, r.id)) if spec.matches(r)]
            self.assertEqual(from_sql, in_memory, message)
            self.assertTrue(from_sql, message)


class TestCatalogFailures(unittest.TestCase):
    def test_timeout_raises_catalog_error(self):
        Session = memory_session_factory()

        def slow_session():
            time.sleep(0.5)
            return Session()

        catalog = CatalogStore(slow_session, timeout=0.05, max_workers=1)
        try:
            with self.assertRaises(CatalogQueryError):
                catalog.list_workshops()
        finally:
            catalog.close()

    def test_database_error_raises_catalog_error(self):
        # No tables were ever created on this engine
        catalog = CatalogStore(memory_session_factory(), timeout=5)
        try:
            with self.assertRaises(CatalogQueryError):
                catalog.list_art_items()
        finally:
            catalog.close()


if __name__ == '__main__':
    unittest.main()
