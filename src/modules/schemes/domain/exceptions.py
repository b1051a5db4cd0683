"""Scheme domain exceptions."""

from src.core.domain.exceptions import EntityNotFoundError


class SchemeNotFoundError(EntityNotFoundError):
    """Raised when a scheme is absent from both the catalog and the fallback set."""

    error_code = "SCHEME_NOT_FOUND"

    def __init__(self, scheme_id: str):
        self.scheme_id = scheme_id
        super().__init__("Scheme", scheme_id)
