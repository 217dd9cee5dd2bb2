"""
User registration / authentication service — application entry point.
"""

from __future__ import annotations

import logging
import sys

import uvicorn

from api.app import create_app
from config.settings import config

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("sqlalchemy.engine", "aiosqlite", "asyncio", "multipart"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)

app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
