"""Authentication context helpers.

Session issuance happens upstream (the editor login flow and the API Gateway
authorizer). Handlers only ever see the authorizer context and ask one
question of it: is this caller an editor?
"""

from dataclasses import dataclass
from typing import Any

import structlog

from sitecms.utils.exceptions import ForbiddenError, UnauthorizedError

logger = structlog.get_logger()

EDITOR_ROLES = {"editor", "admin"}


@dataclass
class AuthContext:
    """Authentication context extracted from API Gateway event."""

    user_id: str
    email: str | None = None
    role: str = "editor"

    @property
    def is_editor(self) -> bool:
        return self.role in EDITOR_ROLES


def get_auth_context(event: dict[str, Any]) -> AuthContext:
    """Extract authentication context from API Gateway event.

    Args:
        event: API Gateway event dict.

    Returns:
        AuthContext with user information.

    Raises:
        UnauthorizedError: If no user identity is present.
    """
    request_context = event.get("requestContext", {}) or {}
    authorizer = request_context.get("authorizer", {}) or {}

    # Lambda authorizers nest the context one level down in payload v2
    context = authorizer.get("lambda", authorizer)

    user_id = context.get("userId") or context.get("user_id") or context.get("sub")
    if not user_id:
        logger.warning("No user ID in auth context")
        raise UnauthorizedError()

    return AuthContext(
        user_id=user_id,
        email=context.get("email"),
        role=(context.get("role") or "editor").lower(),
    )


def require_editor(event: dict[str, Any]) -> AuthContext:
    """Return the caller's auth context, or raise if they cannot edit content.

    Raises:
        UnauthorizedError: No identity on the request.
        ForbiddenError: Identity present but not an editor.
    """
    auth = get_auth_context(event)
    if not auth.is_editor:
        logger.warning("Editor access denied", user_id=auth.user_id, role=auth.role)
        raise ForbiddenError(
            message="Editor access required",
            resource_type="Content",
            action="edit",
        )
    return auth
