#!/usr/bin/env python3
"""
Main FastAPI application for the Rabuste barista chatbot.
"""

import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from ..data.catalog import CatalogQueryError, CatalogStore
from ..data.database import create_tables
from ..data.knowledge_store import KnowledgeBase
from ..data.populate_db import populate_catalog
from ..schemas.io_models import ChatRequest, ChatResponse, SessionCreateRequest, SessionCreateResponse
from ..utils.logger import get_logger
from .config import Config
from .controller import Controller
from .postprocess import APOLOGY_REPLY
from .session import SessionStore

logger = get_logger()


def bootstrap(catalog: CatalogStore, knowledge: KnowledgeBase, seed: bool) -> None:
    """Create tables, optionally seed them, and build the knowledge index."""
    bind = catalog.session_factory.kw.get("bind")
    if seed:
        populate_catalog(catalog.session_factory)
    else:
        create_tables(bind)
    try:
        knowledge.rebuild(catalog)
    except CatalogQueryError as e:
        # Static answers still work while the catalog is down
        logger.warning(f"Catalog unavailable while building knowledge, using static entries only: {e}")
        knowledge.rebuild()


def create_app(
    catalog: Optional[CatalogStore] = None,
    knowledge: Optional[KnowledgeBase] = None,
    sessions: Optional[SessionStore] = None,
    controller: Optional[Controller] = None,
    run_bootstrap: bool = True,
) -> FastAPI:
    """
    Build the FastAPI app around one controller.

    Args:
        catalog: Catalog store (defaults to the configured database)
        knowledge: Knowledge base (defaults to the configured knowledge file)
        sessions: Session store
        controller: Prebuilt controller; its collaborators win over the ones above
        run_bootstrap: Create/seed tables and build knowledge on startup

    Returns:
        Configured FastAPI application
    """
    if controller is None:
        controller = Controller(catalog, knowledge, sessions)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if run_bootstrap:
            bootstrap(controller.catalog, controller.knowledge, Config.SEED_ON_STARTUP)
        yield
        controller.catalog.close()

    app = FastAPI(
        title="Rabuste Barista API",
        description="Rule-based barista chatbot for the Rabuste menu, gallery and workshops",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.controller = controller

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, specify your frontend domain
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.post("/chat", response_model=ChatResponse)
    def chat(request: ChatRequest):
        """
        Answer one chat message. Always returns a reply, never an error status.
        """
        try:
            result = controller.handle_turn(request.message, request.session_id)
            logger.info(f"[WORKFLOW] Reply stage={result.stage.value} domain={result.domain.value}")
            return ChatResponse(reply=result.reply)
        except Exception:
            logger.exception("Unhandled error while answering chat message")
            return ChatResponse(reply=APOLOGY_REPLY)

    @app.post("/session", response_model=SessionCreateResponse)
    def create_session(request: SessionCreateRequest):
        """Create a chat session, minting an id when none is given."""
        session_id = request.session_id or str(uuid.uuid4())
        created = controller.sessions.get(session_id) is None
        controller.sessions.get_or_create(session_id)
        return SessionCreateResponse(session_id=session_id, created=created)

    @app.delete("/session/{session_id}")
    def clear_session(session_id: str):
        """Forget a session's remembered context."""
        return {"sessionId": session_id, "cleared": controller.sessions.clear(session_id)}

    @app.post("/knowledge/rebuild")
    def rebuild_knowledge():
        """Re-index the knowledge base against the current catalog."""
        try:
            entries = controller.knowledge.rebuild(controller.catalog)
        except CatalogQueryError as e:
            logger.warning(f"Knowledge rebuild failed: {e}")
            raise HTTPException(status_code=503, detail="Catalog unavailable, knowledge index unchanged")
        return {"entries": entries}

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "knowledge_ready": controller.knowledge.ready,
            "sessions": len(controller.sessions),
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
