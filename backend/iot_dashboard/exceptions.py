"""
Error Taxonomy
==============

Every error a CRUD service can raise lives here. The HTTP layer maps each one
to a status code through ``status_code`` and renders it as ``{"error": ...}``.

    NotFoundError    -> 404  (no document with that id)
    InvalidIdError   -> 404  (the id is not a well-formed store identifier)
    ValidationError  -> 400  (missing/mistyped field, bad filter value)
    StoreError       -> 500  (the database is unreachable or refused the call)
"""


class DashboardError(Exception):
    """Base class for errors surfaced by the API."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(DashboardError):
    status_code = 404


class InvalidIdError(NotFoundError):
    """
    The id could not be parsed as a store identifier.

    Kept as a NotFoundError so the API answers 404 for both cases, while
    callers that care can still tell them apart.
    """


class ValidationError(DashboardError):
    status_code = 400


class StoreError(DashboardError):
    status_code = 500
