"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fastapi import WebSocket

from pitchside.config import settings
from pitchside.api.routes.boards import router as boards_router
from pitchside.api.routes.formations import router as formations_router
from pitchside.api.websockets.drag_ws import drag_websocket
from pitchside.repositories.formation_repository import FormationRepository
from pitchside.services.board_manager import BoardManager

if settings.debug:
    logging.getLogger().setLevel(logging.DEBUG)


# Knowledge directory - use settings or default to knowledge/ in repo root
def get_knowledge_dir() -> Path:
    """Get the formation templates directory from settings or default location."""
    repo_root = Path(__file__).parent.parent.parent.parent
    if settings.knowledge_dir:
        knowledge_dir = Path(settings.knowledge_dir)
        if knowledge_dir.is_absolute():
            return knowledge_dir
        # Relative path - resolve from repo root
        return repo_root / settings.knowledge_dir
    return repo_root / "knowledge"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    if not hasattr(app.state, "formation_repository"):
        app.state.formation_repository = FormationRepository(get_knowledge_dir())
    if not hasattr(app.state, "board_manager"):
        app.state.board_manager = BoardManager(settings)
    yield


app = FastAPI(
    title="Pitchside",
    description="Tactical formation board - drag and drop positioning with live chemistry",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "pitchside"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Pitchside API",
        "version": "0.1.0",
        "docs": "/docs",
    }


# Register routers
app.include_router(formations_router)
app.include_router(boards_router)


# WebSocket endpoint for live dragging
@app.websocket("/ws/boards/{board_id}")
async def websocket_board(websocket: WebSocket, board_id: str):
    """WebSocket endpoint for drag and drop on a board."""
    await drag_websocket(websocket, board_id, app.state.board_manager)
