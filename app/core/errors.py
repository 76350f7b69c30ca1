"""
Domain error taxonomy.

Every error carries a human-readable message, a machine-checkable kind and the
HTTP status it is rendered with. Services raise these; app.main turns them into
``{"detail": ..., "kind": ...}`` responses.
"""
from typing import Optional
from fastapi import status


class DomainError(Exception):
    """Base class for errors surfaced to API callers."""
    kind = "error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message, "kind": self.kind}


class NotFoundError(DomainError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class PermissionDeniedError(DomainError):
    kind = "permission_denied"
    status_code = status.HTTP_403_FORBIDDEN


class ValidationError(DomainError):
    kind = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST


class UnsupportedFormatError(ValidationError):
    kind = "unsupported_format"
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE


class EmptyDocumentError(ValidationError):
    kind = "empty_document"


class InvalidStateError(DomainError):
    kind = "invalid_state"
    status_code = status.HTTP_409_CONFLICT


class ProviderError(DomainError):
    """AI collaborator failed at the HTTP level."""
    kind = "provider_error"
    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class ProviderTimeoutError(ProviderError):
    kind = "timeout"
    status_code = status.HTTP_504_GATEWAY_TIMEOUT


class PayloadParseError(DomainError):
    """AI reply did not contain a usable JSON object."""
    kind = "parse_error"
    status_code = status.HTTP_502_BAD_GATEWAY


class StoreError(DomainError):
    kind = "store_error"
