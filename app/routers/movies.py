"""Movie CRUD endpoints with filtering, sorting and pagination."""

import logging

from fastapi import APIRouter, Depends, Query

from app.config import Settings
from app.dependencies import get_settings, get_store
from app.models import (
    ErrorResponse,
    Movie,
    MovieCreate,
    MovieDeleteResponse,
    MovieListResponse,
    MovieUpdate,
)
from app.services.database import MovieStore
from app.services.errors import MovieNotFoundError
from app.services.query_translator import (
    SEARCH_FILTER_FIELDS,
    build_filter,
    translate,
)

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/movies",
    tags=["movies"],
    responses={500: {"model": ErrorResponse, "description": "Store error"}},
)

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Movie not found"}}
_BAD_REQUEST = {400: {"model": ErrorResponse, "description": "Invalid input"}}


def _found(movie: dict | None, movie_id: str) -> dict:
    if movie is None:
        logger.info("Movie %s not found", movie_id)
        raise MovieNotFoundError(movie_id)
    return movie


@router.get("", response_model=MovieListResponse, responses=_BAD_REQUEST)
async def list_movies(
    genre: str | None = Query(None, description="Filter by genre"),
    releaseYear: str | None = Query(None, description="Filter by release year"),
    director: str | None = Query(None, description="Filter by director"),
    rating: str | None = Query(None, description="Filter by rating"),
    sort: str | None = Query(None, description="Sort by property, use '-' for descending (e.g. -rating)"),
    page: str | None = Query(None, description="Page number (default 1)"),
    limit: str | None = Query(None, description="Movies per page (default 10)"),
    store: MovieStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """Get all movies, optionally filtered, sorted and paginated."""
    query = translate(
        {
            "genre": genre,
            "releaseYear": releaseYear,
            "director": director,
            "rating": rating,
            "sort": sort,
            "page": page,
            "limit": limit,
        },
        strict=settings.strict_query_params,
    )
    logger.debug("List query %s", query.to_dict())
    total, movies = await store.find_page(query)
    return MovieListResponse(total=total, page=query.page, limit=query.limit, movies=movies)


@router.get("/search", response_model=list[Movie], responses=_BAD_REQUEST)
async def search_movies(
    genre: str | None = Query(None, description="Exact genre"),
    releaseYear: str | None = Query(None, description="Exact release year"),
    rating: str | None = Query(None, description="Exact rating"),
    store: MovieStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """Search movies by genre, releaseYear or rating. Unsorted, unpaginated."""
    criteria = build_filter(
        {"genre": genre, "releaseYear": releaseYear, "rating": rating},
        SEARCH_FILTER_FIELDS,
        strict=settings.strict_query_params,
    )
    return await store.find(criteria)


@router.get("/{movie_id}", response_model=Movie, responses={**_NOT_FOUND, **_BAD_REQUEST})
async def get_movie(movie_id: str, store: MovieStore = Depends(get_store)):
    """Get a movie by ID."""
    return _found(await store.get(movie_id), movie_id)


@router.post("", response_model=Movie, status_code=201, responses=_BAD_REQUEST)
async def create_movie(movie: MovieCreate, store: MovieStore = Depends(get_store)):
    """Add a new movie. The store assigns its id."""
    created = await store.create(movie.model_dump(exclude_none=True))
    logger.info("Created movie %s (%s)", created["id"], created["title"])
    return created


@router.put("/{movie_id}", response_model=Movie, responses={**_NOT_FOUND, **_BAD_REQUEST})
async def replace_movie(
    movie_id: str, movie: MovieCreate, store: MovieStore = Depends(get_store)
):
    """
    Replace a movie by ID. The payload becomes the whole record: optional
    fields left out of it are removed.
    """
    updated = await store.replace(movie_id, movie.model_dump(exclude_none=True))
    return _found(updated, movie_id)


@router.patch("/{movie_id}", response_model=Movie, responses={**_NOT_FOUND, **_BAD_REQUEST})
async def update_movie(
    movie_id: str, movie: MovieUpdate, store: MovieStore = Depends(get_store)
):
    """Update only the fields present in the payload."""
    updated = await store.update(movie_id, movie.model_dump(exclude_unset=True))
    return _found(updated, movie_id)


@router.delete("/{movie_id}", response_model=MovieDeleteResponse, responses={**_NOT_FOUND, **_BAD_REQUEST})
async def delete_movie(movie_id: str, store: MovieStore = Depends(get_store)):
    """Delete a movie by ID."""
    deleted = _found(await store.delete(movie_id), movie_id)
    logger.info("Deleted movie %s", movie_id)
    return MovieDeleteResponse(message="Movie deleted", movie=deleted)
