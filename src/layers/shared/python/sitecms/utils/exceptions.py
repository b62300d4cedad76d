"""Exception hierarchy for the content engine.

Every error carries an HTTP status code and a machine-readable error code so
handlers can turn it into an API response without a lookup table.
"""

from typing import Any


class SiteCMSError(Exception):
    """Base class for all content engine errors."""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize error.

        Args:
            message: Human-readable error message.
            details: Optional structured details for the API response.
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(SiteCMSError):
    """A requested resource does not exist."""

    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, resource_type: str, resource_id: str):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(
            f"{resource_type} with ID '{resource_id}' not found",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ValidationError(SiteCMSError):
    """Request or content failed validation."""

    status_code = 400
    error_code = "VALIDATION_ERROR"

    def __init__(self, errors: list[dict[str, str]] | str):
        if isinstance(errors, str):
            errors = [{"field": "", "message": errors}]
        self.errors = errors
        super().__init__(
            "; ".join(e["message"] for e in errors) or "Validation failed",
            {"errors": errors},
        )


class UnauthorizedError(SiteCMSError):
    """No editor identity was supplied."""

    status_code = 401
    error_code = "UNAUTHORIZED"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class ForbiddenError(SiteCMSError):
    """The caller is authenticated but may not perform the action."""

    status_code = 403
    error_code = "FORBIDDEN"

    def __init__(
        self,
        message: str = "You don't have permission to perform this action",
        resource_type: str | None = None,
        action: str | None = None,
    ):
        self.resource_type = resource_type
        self.action = action
        super().__init__(message)


class ConflictError(SiteCMSError):
    """The write conflicts with stored state."""

    status_code = 409
    error_code = "CONFLICT"


class MalformedKeyError(ValidationError):
    """A content key token could not be parsed into its three components."""

    error_code = "MALFORMED_KEY"

    def __init__(self, token: str, reason: str):
        self.token = token
        self.reason = reason
        super().__init__([{"field": "contentKey", "message": f"Malformed content key '{token}': {reason}"}])


class UnknownVariantError(ValidationError):
    """A section type tag has no registry entry."""

    error_code = "UNKNOWN_VARIANT"

    def __init__(self, tag: str, available: list[str]):
        self.tag = tag
        self.available = available
        super().__init__([{
            "field": "type",
            "message": f"Unknown section type '{tag}'. Must be one of: {', '.join(available)}",
        }])


class NoDraftToPublishError(NotFoundError):
    """Publish was requested for a page that has no draft."""

    error_code = "NO_DRAFT_TO_PUBLISH"

    def __init__(self, page_id: str):
        super().__init__("Draft", page_id)
        self.page_id = page_id
        self.message = f"No draft content found to publish for page '{page_id}'"
        self.args = (self.message,)


class UnknownPageError(ValidationError):
    """Seeding named page ids that are not in the static schema registry."""

    error_code = "UNKNOWN_PAGE"

    def __init__(self, unknown: list[str], available: list[str]):
        self.unknown = unknown
        self.available = available
        super().__init__([{"field": "pageIds", "message": f"Unknown page ids: {', '.join(unknown)}"}])
        self.details.update({"unknown": unknown, "available": available})


class StoreUnavailableError(SiteCMSError):
    """Transient failure talking to the document store. Safe to retry."""

    status_code = 503
    error_code = "STORE_UNAVAILABLE"
    retryable = True


class MediaInUseError(ConflictError):
    """A media asset is still referenced by page content."""

    error_code = "MEDIA_IN_USE"

    def __init__(self, media_id: str, usages: list[dict[str, str]]):
        self.media_id = media_id
        self.usages = usages
        super().__init__(
            f"Media '{media_id}' is used in {len(usages)} location(s); pass force=true to delete",
            {"media_id": media_id, "used_in": usages},
        )


class PartialBatchFailure(SiteCMSError):
    """At least one change in a batch failed while others succeeded."""

    status_code = 207
    error_code = "PARTIAL_FAILURE"

    def __init__(self, failed: list[dict[str, Any]], total: int):
        self.failed = failed
        self.total = total
        super().__init__(
            f"{len(failed)} of {total} changes failed to save",
            {"failed": failed},
        )
