#!/usr/bin/env python3
"""
Main entry point for the short-link service.

Concurrency: requests are handled concurrently via async I/O (FastAPI +
asyncpg connection pool). Set WORKERS > 1 for multi-process scaling across
CPU cores (each worker has its own DB pool). Short code uniqueness and
ownership checks are enforced by the database, so workers share no state.

Usage:
    python app.py

Environment variables:
    STORE_BACKEND - 'postgres' (default) or 'memory'
    DATABASE_URL - PostgreSQL connection URL
    CREATE_TABLES - Set to 'true' to create the links table on startup
    BASE_URL - Base URL for short links
    PATH_PREFIX - Path prefix for short links (default /l)
    AUTH_HEADER - Header carrying the owner id from the auth proxy
    ENVIRONMENT - 'production' hides error details from logs
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import logging
import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from shortlinks.actions import LinkActions
from shortlinks.common.logging_config import setup_logging
from shortlinks.database.base import LinkStoreBase
from shortlinks.database.memory import MemoryLinkStore
from shortlinks.database.postgres import PostgresLinkStore
from shortlinks.registry import LinkRegistry
from shortlinks.resolver import RedirectResolver
from shortlinks.shortcode import ShortCodeGenerator
from web_app import create_app


def build_store(config: Config, logger: logging.Logger) -> LinkStoreBase:
    """Create the configured link store."""
    if config.store_backend == "memory":
        logger.warning("Using in-memory link store; links are lost on restart")
        return MemoryLinkStore(logger=logger)
    
    return PostgresLinkStore(
        db_config=config.database_url,
        pool_max_size=config.db_pool_max_size,
        connection_timeout_seconds=config.db_connection_timeout_seconds,
        create_tables=config.create_tables,
        logger=logger,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store at startup and close it at shutdown."""
    logger = app.state.logger
    store = app.state.store
    
    logger.info("Starting short-link service...")
    if app.state.config.create_tables:
        await store.ensure_schema()
    
    logger.info("Service started successfully")
    
    yield
    
    logger.info("Shutting down short-link service...")
    await store.close()
    logger.info("Service stopped")


def build_app(config: Config, logger: logging.Logger) -> FastAPI:
    """Wire store, registry, resolver and actions into a FastAPI app."""
    store = build_store(config, logger)
    
    registry = LinkRegistry(
        store=store,
        short_code_generator=ShortCodeGenerator(default_length=config.short_code_length),
        logger=logger.getChild("registry"),
        max_collision_retries=config.max_collision_retries,
        enforce_scheme_on_write=config.enforce_scheme_on_write,
    )
    resolver = RedirectResolver(store=store, logger=logger.getChild("resolver"))
    actions = LinkActions(
        registry=registry,
        environment=config.environment,
        logger=logger.getChild("actions"),
    )
    
    app = create_app(
        store=store,
        registry=registry,
        resolver=resolver,
        actions=actions,
        config=config,
    )
    app.state.logger = logger
    app.router.lifespan_context = lifespan
    
    return app


def main():
    """Main entry point."""
    config = load_config()
    
    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )
    
    logger.info("Short-link service")
    logger.info(f"Configuration: {config.model_dump(exclude={'database_url'})}")
    
    app = build_app(config, logger)
    
    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=config.workers,
        log_level=config.log_level.lower(),
        access_log=True,
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
