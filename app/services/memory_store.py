"""In-process record store with the same semantics as the Mongo store.

Used by the test suite and for running the API without a database
(``MOVIES_API_MONGO_URL=memory://``).
"""

import logging

from bson import ObjectId

from app.services.database import (
    MovieStore,
    clean_payload,
    document_to_movie,
    to_object_id,
)
from app.services.query_translator import MovieQuery

logger = logging.getLogger(__name__)


def _matches(doc: dict, criteria: dict) -> bool:
    return all(doc.get(key) == value for key, value in criteria.items())


def _sort_key(field: str):
    # Missing values order before present ones, as in MongoDB.
    def key(doc: dict):
        value = doc.get(field)
        return (0, "") if value is None else (1, value)
    return key


class InMemoryMovieStore(MovieStore):
    def __init__(self, movies: list[dict] | None = None):
        self._docs: dict[ObjectId, dict] = {}
        for movie in movies or []:
            self._insert(movie)

    def _insert(self, data: dict) -> dict:
        doc = {"_id": ObjectId(), **clean_payload(data)}
        self._docs[doc["_id"]] = doc
        return doc

    def _select(self, criteria: dict) -> list[dict]:
        return [doc for doc in self._docs.values() if _matches(doc, criteria)]

    async def ping(self) -> bool:
        return True

    async def find_page(self, query: MovieQuery) -> tuple[int, list[dict]]:
        docs = self._select(query.filter)
        if query.sort:
            docs.sort(key=_sort_key(query.sort.field), reverse=query.sort.descending)
        page = docs[query.skip:query.skip + query.limit]
        return len(docs), [document_to_movie(d) for d in page]

    async def find(self, criteria: dict) -> list[dict]:
        return [document_to_movie(d) for d in self._select(criteria)]

    async def get(self, movie_id: str) -> dict | None:
        doc = self._docs.get(to_object_id(movie_id))
        return document_to_movie(doc) if doc else None

    async def create(self, data: dict) -> dict:
        return document_to_movie(self._insert(data))

    async def replace(self, movie_id: str, data: dict) -> dict | None:
        oid = to_object_id(movie_id)
        if oid not in self._docs:
            return None
        self._docs[oid] = {"_id": oid, **clean_payload(data)}
        return document_to_movie(self._docs[oid])

    async def update(self, movie_id: str, data: dict) -> dict | None:
        oid = to_object_id(movie_id)
        doc = self._docs.get(oid)
        if doc is None:
            return None
        doc.update(clean_payload(data))
        return document_to_movie(doc)

    async def delete(self, movie_id: str) -> dict | None:
        doc = self._docs.pop(to_object_id(movie_id), None)
        return document_to_movie(doc) if doc else None
