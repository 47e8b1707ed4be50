"""Exceptions raised by the service and persistence layers.

Validation problems use the built-in ``ValueError``; routes map these classes
to HTTP status codes.
"""


class NotFoundError(LookupError):
    """A referenced customer, product, delivery boy or order does not exist."""


class ConflictError(Exception):
    """A uniqueness rule was violated (phone, email, order number, duplicate order)."""


class DatabaseNotConfiguredError(RuntimeError):
    """Supabase credentials are missing."""
