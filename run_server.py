#!/usr/bin/env python3
"""
ToolBridge Server launcher
Runs the FastAPI app (chat + tool catalog + MCP SSE endpoints) under uvicorn
"""
import logging
import sys

import uvicorn

from toolbridge.config import settings

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main():
    logger.info("Starting ToolBridge server...")
    logger.info(f"Python {sys.version}")
    logger.info(f"HTTP server will run on http://{settings.host}:{settings.port}")
    logger.info(f"MCP SSE endpoint at http://{settings.host}:{settings.port}/sse")

    uvicorn.run(
        "toolbridge.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
