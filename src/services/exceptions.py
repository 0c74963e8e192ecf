"""Shared exceptions for service and domain layer operations."""


class UnauthenticatedError(Exception):
    """Raised when a bearer token is missing or not accepted."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class NotFoundError(Exception):
    """
    Raised when an update or delete affects zero rows.

    For owner-scoped entities (bookmarks) this also covers rows that exist but
    belong to another user; the two cases are indistinguishable to the caller.
    """

    def __init__(self, entity: str, entity_id: str) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"No {entity} found with id {entity_id}")


class RecordDecodeError(Exception):
    """Raised when a database row does not match the expected record shape."""

    def __init__(self, entity: str, detail: str) -> None:
        self.entity = entity
        self.detail = detail
        super().__init__(f"Could not decode {entity} row: {detail}")
