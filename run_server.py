#!/usr/bin/env python3
"""Serve the 3-2-5 room API with uvicorn.

Settings come from the environment, optionally seeded from a ``.env`` file
next to this script: HOST, PORT, LOG_LEVEL, RELOAD, plus FRONTEND_URL and
TRICK_HOLD_MS read by the app itself.
"""

import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

ENV_FILE = Path(__file__).parent / ".env"


def _flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


def main():
    """Load settings and start the room service."""
    if load_dotenv(ENV_FILE):
        print(f"Loaded room service settings from {ENV_FILE}")

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))
    print(f"3-2-5 rooms on http://{host}:{port} (trick hold {os.environ.get('TRICK_HOLD_MS', '2000')} ms)")

    uvicorn.run(
        "web.api:app",
        host=host,
        port=port,
        reload=_flag("RELOAD"),
        log_level=os.environ.get("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
