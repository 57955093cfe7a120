"""
Domain exception hierarchy for the booking API.

Each error carries the HTTP status the API layer answers with, so the
exception handlers in main.py stay a single lookup.
"""

from fastapi import status


class SalonBookError(Exception):
    """Base class for all application-level errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(SalonBookError):
    """Raised when a salon, service, appointment or block does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ServiceNotFoundError(NotFoundError):
    """Raised when the booked service is missing, inactive or owned by another salon."""


class ConflictError(SalonBookError):
    """Raised when a write loses against concurrent or existing state."""

    status_code = status.HTTP_409_CONFLICT


class SlotUnavailableError(ConflictError):
    """Raised when the requested interval overlaps an existing appointment."""


class InvalidInputError(SalonBookError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidTransitionError(SalonBookError):
    """Raised when an appointment status change is not allowed."""

    status_code = status.HTTP_400_BAD_REQUEST


class StorageError(SalonBookError):
    """Raised when MongoDB fails underneath a write. Never retried."""
