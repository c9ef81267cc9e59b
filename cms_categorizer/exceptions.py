"""Exception classes for the categorization engine."""

from typing import Any


class CategorizerError(Exception):
    """Base exception for all categorization errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class CollaboratorError(CategorizerError):
    """A category/content provider or assignment sink call failed."""

    def __init__(self, operation: str, error: Exception) -> None:
        self.operation = operation
        self.error = error
        super().__init__(
            f"{operation} failed: {error}",
            {"operation": operation, "error_type": error.__class__.__name__},
        )


class ContentNotFoundError(CategorizerError):
    """Content item not found."""

    def __init__(self, content_id: Any) -> None:
        super().__init__(f"Content not found: {content_id}")


class CatalogError(CategorizerError):
    """Catalog file could not be parsed."""

    pass


class InvalidSuggestionError(CategorizerError):
    """A suggestion cannot be applied."""

    pass
