#!/usr/bin/env python3
"""
Main entry point for the shortlink service.

Every request path runs through the redirect resolver; API and unlock routes
serve whatever it passes through. The memory tier lives in the worker
process, so with WORKERS > 1 only the remote store is shared.

Usage:
    python app.py

Environment variables:
    REDIS_URL - Redis connection URL (optional; remote tier disabled if unset)
    SEED_FILE - JSON file with extra static seed entries (optional)
    TELEGRAM_BOT_TOKEN / TELEGRAM_CHAT_ID - access notifications (optional)
    BASE_URL - Fallback origin for unlock redirects
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import logging
import signal
import sys
from contextlib import asynccontextmanager
from typing import Tuple
from urllib.parse import urlparse

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from shortlink.keygen import KeyGenerator
from shortlink.notify import NotificationSink, build_notifier
from shortlink.resolver import RedirectResolver
from shortlink.service import ShortlinkService
from shortlink.storage import RedisStore, TieredCache, load_seed
from shortlink.common.logging_config import setup_logging
from web_app import create_app


def build_components(
    config: Config,
    logger: logging.Logger,
) -> Tuple[TieredCache, RedirectResolver, ShortlinkService, NotificationSink]:
    """Construct the store, resolver and service from configuration."""
    remote = None
    if config.redis_url:
        parsed = urlparse(config.redis_url)
        logger.info(f"Remote tier: Redis at {parsed.hostname}:{parsed.port or 6379}")
        remote = RedisStore(
            redis_url=config.redis_url,
            key_prefix=config.redis_key_prefix,
            timeout_seconds=config.remote_timeout_seconds,
            ttl_seconds=config.remote_ttl_seconds,
            logger=logger,
        )
    else:
        logger.info("Remote tier disabled - serving from memory and static seed only")

    store = TieredCache(
        remote=remote,
        seed=load_seed(config.seed_file, logger=logger),
        logger=logger,
    )

    notifier = build_notifier(config, logger=logger)
    resolver = RedirectResolver(store=store, notifier=notifier, logger=logger)

    generator = KeyGenerator(
        store=store,
        part_length=config.key_part_length,
        batch_size=config.key_batch_size,
        max_retries=config.max_collision_retries,
        logger=logger,
    )
    service = ShortlinkService(store=store, key_generator=generator, logger=logger)

    return store, resolver, service, notifier


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting shortlink service...")

    store, resolver, service, notifier = build_components(config, logger)
    app.state.store = store
    app.state.resolver = resolver
    app.state.service = service

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down shortlink service...")

    await resolver.drain()
    await notifier.close()
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

    logger.info("Shortlink Service")
    logger.info(
        f"Configuration: {config.model_dump(exclude={'telegram_bot_token', 'redis_url'})}"
    )

    # Components are built in the lifespan, once the event loop is running
    app = create_app(
        store_instance=None,
        resolver_instance=None,
        service_instance=None,
        config=config,
    )

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
