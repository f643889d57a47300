"""
Query translator: turns the string-valued query parameters of a list or
search request into a store filter, a sort key and a pagination window.

Pure functions: no store access, no I/O. By default invalid values fall back
silently (unparseable numbers are dropped from the filter, bad page/limit
revert to their defaults, unknown sort fields are ignored). With ``strict``
set the same inputs raise ``InvalidQueryError`` instead.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from pymongo import ASCENDING, DESCENDING

from app.services.errors import InvalidQueryError

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

LIST_FILTER_FIELDS = ("genre", "releaseYear", "director", "rating")
SEARCH_FILTER_FIELDS = ("genre", "releaseYear", "rating")

INTEGER_FIELDS = frozenset({"releaseYear", "rating"})

# BSON integers are signed 64-bit
MAX_INT64 = 2**63 - 1
MIN_INT64 = -(2**63)

_INTEGER = re.compile(r"[+-]?[0-9]+")

# Public sort names -> document keys
SORTABLE_FIELDS = {
    "id": "_id",
    "title": "title",
    "genre": "genre",
    "releaseYear": "releaseYear",
    "director": "director",
    "rating": "rating",
}


@dataclass(frozen=True)
class SortSpec:
    field: str
    direction: int = ASCENDING

    @property
    def descending(self) -> bool:
        return self.direction == DESCENDING


@dataclass(frozen=True)
class MovieQuery:
    filter: dict = field(default_factory=dict)
    sort: SortSpec | None = None
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def to_dict(self) -> dict:
        return {
            "filter": self.filter,
            "sort": (
                {"field": self.sort.field, "direction": self.sort.direction}
                if self.sort else None
            ),
            "page": self.page,
            "limit": self.limit,
            "skip": self.skip,
        }


# ── Coercion helpers ──────────────────────────────────────────────────


def _parse_int(raw: str) -> int | None:
    """Plain ASCII decimal within the int64 range, else None."""
    if not isinstance(raw, str) or not _INTEGER.fullmatch(raw.strip()):
        return None
    value = int(raw.strip())
    if not MIN_INT64 <= value <= MAX_INT64:
        return None
    return value


def _positive_or_default(name: str, raw: str | None, default: int, strict: bool) -> int:
    if raw is None or raw == "":
        return default
    value = _parse_int(raw)
    if value is not None and value > 0:
        return value
    if strict:
        raise InvalidQueryError(f"'{name}' must be a positive integer, got {raw!r}")
    logger.debug("Ignoring invalid %s=%r, using default %d", name, raw, default)
    return default


# ── Builders ──────────────────────────────────────────────────────────


def build_filter(
    params: Mapping[str, str],
    fields: tuple[str, ...] = LIST_FILTER_FIELDS,
    strict: bool = False,
) -> dict:
    """Equality filter over the recognized ``fields``; anything else is ignored."""
    query: dict = {}
    for name in fields:
        raw = params.get(name)
        if not raw:
            continue
        if name not in INTEGER_FIELDS:
            query[name] = raw
            continue
        value = _parse_int(raw)
        if value is None:
            if strict:
                raise InvalidQueryError(f"'{name}' must be an integer, got {raw!r}")
            logger.debug("Dropping non-numeric filter %s=%r", name, raw)
            continue
        query[name] = value
    return query


def build_sort(raw: str | None, strict: bool = False) -> SortSpec | None:
    """
    Parse a single sort key. A leading '-' selects descending order;
    anything else is ascending. Returns None when no ordering was asked for.
    """
    if not raw:
        return None
    descending = raw.startswith("-")
    name = raw[1:] if descending else raw
    key = SORTABLE_FIELDS.get(name)
    if key is None:
        if strict:
            raise InvalidQueryError(f"Cannot sort by unknown field {name!r}")
        logger.debug("Ignoring sort on unknown field %r", name)
        return None
    return SortSpec(field=key, direction=DESCENDING if descending else ASCENDING)


def build_pagination(
    page: str | None, limit: str | None, strict: bool = False
) -> tuple[int, int]:
    return (
        _positive_or_default("page", page, DEFAULT_PAGE, strict),
        _positive_or_default("limit", limit, DEFAULT_LIMIT, strict),
    )


def translate(params: Mapping[str, str], strict: bool = False) -> MovieQuery:
    """Build the full list query (filter, sort, page window) from request params."""
    page, limit = build_pagination(params.get("page"), params.get("limit"), strict)
    if (page - 1) * limit > MAX_INT64:
        if strict:
            raise InvalidQueryError(f"page {page} with limit {limit} is out of range")
        logger.debug("Page window %d x %d out of range, using page %d", page, limit, DEFAULT_PAGE)
        page = DEFAULT_PAGE
    return MovieQuery(
        filter=build_filter(params, LIST_FILTER_FIELDS, strict),
        sort=build_sort(params.get("sort"), strict),
        page=page,
        limit=limit,
    )
