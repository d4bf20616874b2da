"""FastAPI backend hosting 3-2-5 rooms."""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from web.api.room_manager import room_manager
from web.api.routes import rooms

logger = logging.getLogger(__name__)

# Dev servers for the table UI; FRONTEND_URL adds the deployed table
LOCAL_TABLE_ORIGINS = ("http://localhost:5173", "http://localhost:3000")


def table_origins() -> list[str]:
    """Origins allowed to call the room API."""
    origins = list(LOCAL_TABLE_ORIGINS)
    frontend_url = os.environ.get("FRONTEND_URL")
    if frontend_url:
        origins.append(frontend_url)
    return origins


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Stop every room worker when the service shuts down."""
    logger.info(
        "Room service up: origins %s, trick hold %d ms",
        app.state.table_origins,
        room_manager.trick_hold_ms,
    )
    yield
    await room_manager.shutdown()
    logger.info("Room service stopped with %d room(s) open", len(room_manager.list_rooms()))


app = FastAPI(
    title="3-2-5 Room API",
    description="Rooms, actions and trick history for the 3-2-5 trick-taking card game",
    version="0.1.0",
    lifespan=lifespan,
)
app.state.table_origins = table_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=app.state.table_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["*"],
)

app.include_router(rooms.router, prefix="/api")


@app.get("/health")
async def health_check():
    """Liveness plus a count of open rooms."""
    return {"status": "healthy", "rooms": len(room_manager.list_rooms())}
