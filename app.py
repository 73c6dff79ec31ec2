#!/usr/bin/env python3
"""
Main entry point for the linkstash service.

Concurrency: requests are served on one asyncio event loop per worker; store
calls run in threads (SQLite) or on an asyncpg pool (PostgreSQL). Admin
sessions live in process memory, so keep WORKERS=1 unless admins can tolerate
logging in per worker.

Usage:
    python app.py

Environment variables:
    DB_URL - Mapping store URL (sqlite:///path or postgresql://...)
    ADMIN_USERNAME / ADMIN_PASSWORD - Admin credentials
    SESSION_TTL_SECONDS - Idle admin session lifetime
    BASE_URL - Base URL for short links
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import load_config
from linkstash.common.logging_config import get_logger, setup_logging
from linkstash.database import open_store
from linkstash.identifier import IdentifierGenerator
from linkstash.service import LinkService
from linkstash.sessions import SessionRegistry
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting linkstash service...")

    logger.info(f"Opening mapping store at {config.db_url}")
    store = open_store(
        config.db_url,
        timeout_seconds=config.db_timeout_seconds,
        generator=IdentifierGenerator(length=config.identifier_length),
    )

    service = LinkService(
        store=store,
        registry=SessionRegistry(),
        admin_username=config.admin_username,
        admin_password=config.admin_password,
        session_ttl=config.session_ttl,
        max_mock_data_count=config.max_mock_data_count,
        logger=get_logger("service"),
    )
    app.state.service = service

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down linkstash service...")
    await service.close()
    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("linkstash")
    logger.info(f"Configuration: {config.model_dump(exclude={'admin_password'})}")
    if config.admin_password == "password":
        logger.warning("ADMIN_PASSWORD is the default; set it before exposing the admin page")

    app = create_app(service_instance=None, config=config)
    app.state.logger = logger
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=config.workers,
        log_level=config.log_level.lower(),
        access_log=False,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
