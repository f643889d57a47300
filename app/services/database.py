"""MongoDB record store: connection management and movie queries via motor."""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from app.services.errors import InvalidMovieIdError, StoreError
from app.services.query_translator import MovieQuery

logger = logging.getLogger(__name__)

MOVIE_FIELDS = ("title", "genre", "releaseYear", "director", "rating")


def to_object_id(movie_id: str) -> ObjectId:
    if not isinstance(movie_id, str) or not ObjectId.is_valid(movie_id):
        raise InvalidMovieIdError(movie_id)
    return ObjectId(movie_id)


def document_to_movie(doc: dict) -> dict:
    """Map a stored document to the API shape: ``_id`` becomes a string ``id``."""
    movie = {"id": str(doc["_id"])}
    for name in MOVIE_FIELDS:
        if name in doc:
            movie[name] = doc[name]
    return movie


def clean_payload(data: dict) -> dict:
    """Keep only movie fields; ids and unknown keys are never written."""
    return {name: data[name] for name in MOVIE_FIELDS if name in data}


class MovieStore(ABC):
    """Async persistence interface shared by the Mongo and in-memory stores.

    Lookups by id return ``None`` when no record exists and raise
    ``InvalidMovieIdError`` for identifiers that are not ObjectIds.
    """

    @abstractmethod
    async def find_page(self, query: MovieQuery) -> tuple[int, list[dict]]:
        """Return the total match count and the requested page of movies."""

    @abstractmethod
    async def find(self, criteria: dict) -> list[dict]: ...

    @abstractmethod
    async def get(self, movie_id: str) -> dict | None: ...

    @abstractmethod
    async def create(self, data: dict) -> dict: ...

    @abstractmethod
    async def replace(self, movie_id: str, data: dict) -> dict | None: ...

    @abstractmethod
    async def update(self, movie_id: str, data: dict) -> dict | None: ...

    @abstractmethod
    async def delete(self, movie_id: str) -> dict | None: ...

    @abstractmethod
    async def ping(self) -> bool: ...

    async def close(self) -> None:
        return None


class MongoMovieStore(MovieStore):
    def __init__(
        self,
        url: str,
        database: str,
        collection: str = "movies",
        timeout_ms: int = 5000,
        max_pool_size: int = 100,
    ):
        self._client = AsyncIOMotorClient(
            url,
            serverSelectionTimeoutMS=timeout_ms,
            socketTimeoutMS=timeout_ms,
            maxPoolSize=max_pool_size,
        )
        self._collection = self._client[database][collection]
        logger.info("MongoMovieStore initialized with %s/%s", database, collection)

    @contextmanager
    def _store_errors(self, operation: str):
        try:
            yield
        except PyMongoError as exc:
            logger.exception("Store %s failed", operation)
            raise StoreError(str(exc)) from exc

    async def ping(self) -> bool:
        try:
            await self._client.admin.command("ping")
            return True
        except PyMongoError:
            logger.exception("Database health check failed")
            return False

    async def close(self) -> None:
        self._client.close()
        logger.info("MongoMovieStore connection closed")

    async def find_page(self, query: MovieQuery) -> tuple[int, list[dict]]:
        with self._store_errors("find_page"):
            total = await self._collection.count_documents(query.filter)
            cursor = self._collection.find(query.filter)
            if query.sort:
                cursor = cursor.sort(query.sort.field, query.sort.direction)
            docs = await cursor.skip(query.skip).limit(query.limit).to_list(length=None)
        return total, [document_to_movie(d) for d in docs]

    async def find(self, criteria: dict) -> list[dict]:
        with self._store_errors("find"):
            docs = await self._collection.find(criteria).to_list(length=None)
        return [document_to_movie(d) for d in docs]

    async def get(self, movie_id: str) -> dict | None:
        oid = to_object_id(movie_id)
        with self._store_errors("get"):
            doc = await self._collection.find_one({"_id": oid})
        return document_to_movie(doc) if doc else None

    async def create(self, data: dict) -> dict:
        doc = clean_payload(data)
        with self._store_errors("create"):
            result = await self._collection.insert_one(doc)
        return document_to_movie({**doc, "_id": result.inserted_id})

    async def replace(self, movie_id: str, data: dict) -> dict | None:
        oid = to_object_id(movie_id)
        with self._store_errors("replace"):
            doc = await self._collection.find_one_and_replace(
                {"_id": oid},
                clean_payload(data),
                return_document=ReturnDocument.AFTER,
            )
        return document_to_movie(doc) if doc else None

    async def update(self, movie_id: str, data: dict) -> dict | None:
        changes = clean_payload(data)
        if not changes:
            return await self.get(movie_id)
        oid = to_object_id(movie_id)
        with self._store_errors("update"):
            doc = await self._collection.find_one_and_update(
                {"_id": oid},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        return document_to_movie(doc) if doc else None

    async def delete(self, movie_id: str) -> dict | None:
        oid = to_object_id(movie_id)
        with self._store_errors("delete"):
            doc = await self._collection.find_one_and_delete({"_id": oid})
        return document_to_movie(doc) if doc else None
