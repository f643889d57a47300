"""
FastAPI dependencies: the record store and settings live on ``app.state``
and are handed to each request, so tests can swap in their own.
"""

import logging

from fastapi import Request

from app.config import Settings
from app.services.database import MongoMovieStore, MovieStore
from app.services.memory_store import InMemoryMovieStore

logger = logging.getLogger(__name__)

MEMORY_URL_SCHEME = "memory://"


def create_store(settings: Settings) -> MovieStore:
    """Build the store named by ``settings.mongo_url``."""
    if settings.mongo_url.startswith(MEMORY_URL_SCHEME):
        logger.warning("Using in-memory movie store; data is lost on shutdown")
        return InMemoryMovieStore()
    return MongoMovieStore(
        settings.mongo_url,
        settings.mongo_database,
        collection=settings.mongo_collection,
        timeout_ms=settings.mongo_timeout_ms,
        max_pool_size=settings.mongo_max_pool_size,
    )


def get_store(request: Request) -> MovieStore:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
