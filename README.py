"""
RABUSTE BARISTA — System Documentation
======================================

This module-style README documents the architecture, components and
operational practices of the Rabuste barista chatbot. Run
`python README.py` to print the outline.

Table of Contents
-----------------
1. System Overview
2. Architecture
3. Turn Pipeline
4. Data & Persistence
5. Configuration & Environment
6. Testing Strategy
7. Security & PII Handling
8. Running Locally

"""

from __future__ import annotations

import textwrap


def section(title: str, body: str) -> str:
    return f"\n{title}\n{'-' * len(title)}\n{body.strip()}\n"


SYSTEM_OVERVIEW = section(
    "1. System Overview",
    """
    The barista chatbot answers visitors of the Rabuste cafe site: it suggests
    drinks and snacks from the live menu, finds the cheapest or most premium
    item, picks a high-caffeine drink for tired customers, lists the art
    gallery and upcoming workshops, and falls back to canned answers (story,
    hours, wifi, pets, location, franchise) when the catalog has nothing.
    Understanding is keyword based; there is no language model in the loop.
    """,
)


ARCHITECTURE = section(
    "2. Architecture",
    """
    - Backend: FastAPI app exposing `POST /chat` (plus `/session`, `/health`,
      `/knowledge/rebuild`), orchestrated by `backend/app/controller.py`.
    - NLU: `backend/nlu/rules.py` (classifier) and `backend/nlu/context_resolver.py`.
    - Agents: menu, art, workshop and knowledge agents in `backend/agents/`.
    - Data: SQLAlchemy catalog (`backend/data/catalog.py`) and the rapidfuzz
      knowledge base (`backend/data/knowledge_store.py`).
    """,
)


TURN_PIPELINE = section(
    "3. Turn Pipeline",
    """
    classify -> resolve context (session memory, follow-ups, tired override)
    -> catalog path (Art > Workshop > Menu) -> no-match for price-sorted misses
    -> knowledge fallback -> "menu" hint -> default help.
    Catalog failures and timeouts end the turn with a fixed apology.
    """,
)


DATA_AND_PERSISTENCE = section(
    "4. Data & Persistence",
    """
    - Tables: `menu_items`, `art_items`, `workshops` (see `backend/data/models.py`).
    - Seed data: `backend/data/raw/*.csv`, loaded on startup when tables are empty.
    - Knowledge: `backend/data/raw/knowledge.json` plus entries generated from the catalog.
    - Sessions: process memory only, LRU with TTL; lost on restart.
    """,
)


CONFIG_ENV = section(
    "5. Configuration & Environment",
    """
    `.env` is read by python-dotenv. Keys: DATABASE_URL, SEED_ON_STARTUP,
    CATALOG_TIMEOUT_SECONDS, CATALOG_WORKERS, SESSION_TTL_SECONDS,
    SESSION_MAX_ENTRIES, SESSION_LOCK_SHARDS, KNOWLEDGE_FILE,
    KNOWLEDGE_SCORE_CUTOFF, CURRENCY_SYMBOL, LOG_LEVEL.
    """,
)


TESTING = section(
    "6. Testing Strategy",
    """
    - `pip install -e .[test]` then `python -m pytest`.
    - Catalog tests run against in-memory SQLite; controller tests use an
      in-memory fake catalog (`tests/fakes.py`); API tests use TestClient.
    """,
)


SECURITY = section(
    "7. Security & PII Handling",
    """
    - Chat text is passed through `mask_pii` before logging (emails, long digit runs).
    - The catalog is read-only from the chatbot.
    """,
)


RUNNING = section(
    "8. Running Locally",
    """
    - `uvicorn backend.app.main:app --reload`
    - `curl -X POST localhost:8000/chat -d '{"message": "suggest a cold coffee"}' -H 'content-type: application/json'`
    """,
)


def as_text() -> str:
    return "\n".join(
        [
            SYSTEM_OVERVIEW,
            ARCHITECTURE,
            TURN_PIPELINE,
            DATA_AND_PERSISTENCE,
            CONFIG_ENV,
            TESTING,
            SECURITY,
            RUNNING,
        ]
    )


def main() -> None:
    print(textwrap.dedent(as_text()))


if __name__ == "__main__":
    main()
