"""Domain errors raised by TasteID services

Each error carries a stable ``code`` and the HTTP status the API layer maps it
to, so callers can tell "collection limit reached" apart from "name required"
without parsing messages.
"""

from fastapi import status


class TasteIDError(Exception):
    """Base class for all domain errors"""

    code = "error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__

    def __repr__(self):
        return f"<{self.__class__.__name__}(code='{self.code}', message='{self.message}')>"


class ValidationError(TasteIDError):
    """Malformed input, e.g. an empty collection name or invalid username"""

    code = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST


class CapacityError(TasteIDError):
    """A user's nine grid slots are all taken"""

    code = "capacity_exceeded"
    status_code = status.HTTP_409_CONFLICT


class NotFoundError(TasteIDError):
    """Referenced entity is absent or not owned by the caller"""

    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class UnauthorizedError(TasteIDError):
    """No authenticated user for a user-scoped operation"""

    code = "unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(TasteIDError):
    """Authenticated, but the identity does not match"""

    code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class UpstreamError(TasteIDError):
    """A search provider failed; always absorbed inside the provider"""

    code = "upstream_error"
    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, provider: str, message: str = ""):
        super().__init__(message)
        self.provider = provider
