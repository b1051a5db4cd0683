"""Source domain exceptions."""

from src.core.domain.exceptions import DomainException


class InvalidSourceConfigError(DomainException):
    """Raised when source configuration is invalid."""

    def __init__(self, source_name: str, message: str):
        super().__init__(f"Invalid configuration for source '{source_name}': {message}")


class UnsupportedSourceKindError(DomainException):
    """Raised when no fetcher is registered for a source kind."""

    def __init__(self, kind: str):
        super().__init__(f"Unsupported source kind: {kind}")
