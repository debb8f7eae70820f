#!/usr/bin/env python3
import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__)))
from fakes import FakeCatalog

from backend.data.catalog import CatalogQueryError
from backend.data.knowledge_store import (
    KnowledgeBase,
    KnowledgeIndexUnavailable,
    art_entries,
    menu_entries,
    workshop_entries,
)
from backend.schemas.io_models import ArtItem


class TestKnowledgeBase(unittest.TestCase):
    def setUp(self):
        self.kb = KnowledgeBase(score_cutoff=80)

    def test_search_before_build_raises(self):
        self.assertFalse(self.kb.ready)
        with self.assertRaises(KnowledgeIndexUnavailable):
            self.kb.search("wifi")

    def test_static_entries(self):
        self.assertEqual(self.kb.rebuild(), 9)
        self.assertTrue(self.kb.ready)

    def test_natural_language_match(self):
        self.kb.rebuild()
        top = self.kb.search("can i bring my dog")[0]
        self.assertIn("pet-friendly", top.response)

    def test_typo_tolerant(self):
        self.kb.rebuild()
        top = self.kb.search("do you have wifii")[0]
        self.assertIn("high-speed", top.response)

    def test_franchise_and_location(self):
        self.kb.rebuild()
        self.assertIn("robustecafe@gmail.com", self.kb.search("franchise enquiry")[0].response)
        self.assertIn("Gymkhana Rd", self.kb.search("what is your address")[0].response)

    def test_gibberish_has_no_match(self):
        self.kb.rebuild()
        self.assertEqual(self.kb.search("zzzz qqqq xxxx"), [])
        self.assertEqual(self.kb.search("   "), [])

    def test_results_best_first_and_one_per_entry(self):
        self.kb.rebuild()
        matches = self.kb.search("pets")
        self.assertTrue(matches)
        scores = [m.score for m in matches]
        self.assertEqual(scores, sorted(scores, reverse=True))
        responses = [m.response for m in matches]
        self.assertEqual(len(responses), len(set(responses)))

    def test_rebuild_with_catalog(self):
        catalog = FakeCatalog()
        count = self.kb.rebuild(catalog)
        self.assertEqual(count, 9 + len(catalog.menu) + len(catalog.art) + len(catalog.workshops))
        top = self.kb.search("latte art basics")[0]
        self.assertIn("Latte Art Basics", top.response)
        self.assertIn("(free)", top.response)

    def test_generic_questions_miss_catalog_entries(self):
        self.kb.rebuild(FakeCatalog())
        for message in ("can i see the menu", "show me the menu", "ok", "tell me about your menu"):
            self.assertEqual(self.kb.search(message), [], message)

    def test_item_needs_every_word_of_its_name(self):
        self.kb.rebuild(FakeCatalog())
        matches = self.kb.search("is the peach ice tea nice")
        self.assertEqual([m.matched for m in matches], ["peach ice tea"])
        self.assertIn("Robco", self.kb.search("tell me about robco")[0].response)

    def test_longer_tag_wins_tie(self):
        self.kb.rebuild()
        top = self.kb.search("how do i open a rabuste")[0]
        self.assertEqual(top.matched, "open a rabuste")

    def test_failed_rebuild_keeps_old_index(self):
        self.kb.rebuild()
        with self.assertRaises(CatalogQueryError):
            self.kb.rebuild(FakeCatalog(fail=True))
        self.assertTrue(self.kb.ready)
        self.assertEqual(self.kb.size, 9)


class TestGeneratedEntries(unittest.TestCase):
    def test_menu_entry(self):
        catalog = FakeCatalog()
        entry = menu_entries(catalog.menu[:1])[0]
        self.assertEqual(entry.tags, ["iced americano"])
        self.assertEqual(
            entry.response,
            "The Iced Americano (₹160) is a Robusta Specialty (Cold - Non Milk). "
            "It's cold, strong, black. Caffeine level: High.",
        )

    def test_sold_art_skipped(self):
        sold = ArtItem(id="a2", title="Night Shift", artist="Ananya K.", price=18000, available=False)
        self.assertEqual(art_entries([sold]), [])

    def test_sold_out_workshop(self):
        catalog = FakeCatalog()
        lab = workshop_entries(catalog.workshops)[1]
        self.assertIn("SOLD OUT", lab.response)
        self.assertIn("₹799", lab.response)


if __name__ == '__main__':
    unittest.main()
