"""Utility functions and helpers."""

from sitecms.utils.auth import AuthContext, get_auth_context, require_editor
from sitecms.utils.exceptions import (
    ConflictError,
    ForbiddenError,
    MalformedKeyError,
    MediaInUseError,
    NoDraftToPublishError,
    NotFoundError,
    PartialBatchFailure,
    SiteCMSError,
    StoreUnavailableError,
    UnauthorizedError,
    UnknownPageError,
    UnknownVariantError,
    ValidationError,
)
from sitecms.utils.responses import created, error, not_found, success, validation_error

__all__ = [
    # Response helpers
    "success",
    "created",
    "error",
    "validation_error",
    "not_found",
    # Auth
    "get_auth_context",
    "require_editor",
    "AuthContext",
    # Exceptions
    "SiteCMSError",
    "NotFoundError",
    "ValidationError",
    "UnauthorizedError",
    "ForbiddenError",
    "ConflictError",
    "MalformedKeyError",
    "UnknownVariantError",
    "NoDraftToPublishError",
    "UnknownPageError",
    "StoreUnavailableError",
    "MediaInUseError",
    "PartialBatchFailure",
]
