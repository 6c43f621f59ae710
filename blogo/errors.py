"""
Domain errors raised by the services and repositories.

Each error carries a machine-readable ``code`` and the HTTP status the API
layer maps it to.
"""

from typing import Optional


class BlogoError(Exception):
    """Base class for every error the core can raise."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(BlogoError):
    code = "INVALID_INPUT"
    status_code = 400

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"invalid {field.replace('_', ' ')}")
        self.field = field


class NotFound(BlogoError):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, entity_kind: str, id):
        super().__init__(f"{entity_kind} {id} not found")
        self.entity_kind = entity_kind
        self.id = id


class Conflict(BlogoError):
    """Uniqueness violation reported by the store."""

    code = "CONFLICT"
    status_code = 400


class NotOwner(BlogoError):
    code = "NOT_OWNER"
    status_code = 403

    def __init__(self, entity_kind: str, id):
        super().__init__(f"not the owner of {entity_kind} {id}")
        self.entity_kind = entity_kind
        self.id = id


class SelfFollowNotAllowed(BlogoError):
    code = "SELF_FOLLOW"
    status_code = 400

    def __init__(self, user_id: int):
        super().__init__("cannot follow yourself")
        self.user_id = user_id


class StoreError(BlogoError):
    """Wraps a database failure with no specific domain meaning."""

    code = "STORE_ERROR"

    def __init__(self, operation: str, cause: Exception):
        super().__init__(f"{operation}: {cause}")
        self.operation = operation
        self.__cause__ = cause


class CacheError(BlogoError):
    """Wraps a cache backend failure. Services never let it escape."""

    code = "CACHE_ERROR"

    def __init__(self, operation: str, cause: Exception):
        super().__init__(f"{operation}: {cause}")
        self.operation = operation
        self.__cause__ = cause
