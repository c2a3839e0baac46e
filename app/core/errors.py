"""
Typed failures raised by the entity store and the services built on it.

Every error carries a ``kind`` so the HTTP layer (or any other caller)
can report it without inspecting messages.
"""


class EntityError(Exception):
    kind = "error"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.kind

    def __str__(self) -> str:
        return self.message


class NotFound(EntityError):
    """Record id absent on get, or on update of a record that must exist."""
    kind = "not_found"


class Conflict(EntityError):
    """Duplicate id on create, overlapping booking, or illegal status change."""
    kind = "conflict"


class InvalidArgument(EntityError):
    """Empty id, malformed interval, missing or malformed field."""
    kind = "invalid_argument"


class StorageError(EntityError):
    kind = "storage_error"


__all__ = ["EntityError", "NotFound", "Conflict", "InvalidArgument", "StorageError"]
