"""Error types surfaced by the search service."""

from __future__ import annotations


class SearchValidationError(ValueError):
    """Raised when caller-supplied search parameters cannot be parsed.

    Args:
        errors: One ``{"field": ..., "message": ...}`` entry per rejected field.
    """

    def __init__(self, errors: list[dict[str, str]]) -> None:
        self.errors = errors
        fields = ", ".join(e["field"] for e in errors)
        super().__init__(f"Invalid search parameters: {fields}")


class InfrastructureError(RuntimeError):
    """Raised when the search index is unreachable or a query fails."""
