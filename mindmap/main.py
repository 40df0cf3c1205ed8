"""Mind map FastAPI application entry point."""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mindmap.db.connection import Database
from mindmap.maps.router import get_mindmap_service
from mindmap.maps.router import router as mindmap_router
from mindmap.maps.service import MindMapService

VERSION = "0.1.0"

ENV_FILE = Path(__file__).resolve().parent.parent / ".env"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the slot database, restore the saved mind map, wire the service."""
    load_dotenv(ENV_FILE)
    db = await Database.connect(os.environ.get("MINDMAP_DB_PATH", "mindmap.db"))

    service = MindMapService(db, slot=os.environ.get("MINDMAP_SLOT", "mindmap"))
    await service.load()
    app.dependency_overrides[get_mindmap_service] = lambda: service

    app.state.db = db
    yield

    service.session.close()
    await db.close()


app = FastAPI(
    title="Mind Map",
    description="Keyboard-driven outliner: tree state, navigation and local persistence",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    # Process environment only; .env is read at startup, after middleware exists
    allow_origins=os.environ.get("MINDMAP_CORS_ORIGINS", "http://localhost:5173").split(","),
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(mindmap_router)


@app.get("/api/health")
async def health() -> dict:
    return {"status": "ok", "version": VERSION}
