class ServiceError(Exception):
    """Base error; `status_code` is the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequestError(ServiceError):
    """Missing or malformed request fields."""

    status_code = 400


class EmbeddingError(ServiceError):
    """The embedding model failed or returned unusable output."""


class VectorIndexError(ServiceError):
    """Any failure reported by the vector index backend."""
