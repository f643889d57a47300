"""Pydantic request/response schemas for the Movies API."""

from pydantic import BaseModel, Field, field_validator


# Record schema

class MovieCreate(BaseModel):
    title: str = Field(..., min_length=1, examples=["Inception"])
    genre: str | None = Field(None, examples=["Sci-Fi"])
    releaseYear: int | None = Field(None, examples=[2010])
    director: str | None = Field(None, examples=["Christopher Nolan"])
    rating: int | None = Field(None, examples=[9])


class MovieUpdate(BaseModel):
    """Partial update: only the fields present in the payload are written."""

    title: str | None = None
    genre: str | None = None
    releaseYear: int | None = None
    director: str | None = None
    rating: int | None = None

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, value: str | None) -> str:
        if not value:
            raise ValueError("title must be a non-empty string")
        return value


class Movie(MovieCreate):
    id: str = Field(..., examples=["6530f1c2a4b5c6d7e8f90123"])


# Responses

class MovieListResponse(BaseModel):
    total: int
    page: int
    limit: int
    movies: list[Movie]


class MovieDeleteResponse(BaseModel):
    message: str
    movie: Movie


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    database: bool
