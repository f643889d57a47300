"""Domain errors raised by the query translator and the record stores."""


class MovieServiceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidMovieIdError(MovieServiceError):
    status_code = 400

    def __init__(self, movie_id: str):
        super().__init__(f"Invalid movie id: {movie_id!r}")
        self.movie_id = movie_id


class InvalidQueryError(MovieServiceError):
    status_code = 400


class MovieNotFoundError(MovieServiceError):
    status_code = 404

    def __init__(self, movie_id: str):
        super().__init__("Movie not found")
        self.movie_id = movie_id


class StoreError(MovieServiceError):
    status_code = 500
