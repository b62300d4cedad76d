"""Site settings API handler."""

import json
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from sitecms.models.settings import SEO_PROMPT_PRESETS, UpdateSettingsRequest
from sitecms.repositories.settings import SettingsRepository
from sitecms.utils.auth import require_editor
from sitecms.utils.exceptions import SiteCMSError
from sitecms.utils.responses import error, from_exception, pydantic_errors, success, validation_error

logger = structlog.get_logger()


def handler(event: dict[str, Any], context: Any) -> dict:
    """Handle settings API requests.

    Routes:
        GET /admin/settings  - Current settings and available SEO prompt presets
        PUT /admin/settings  - Partial update
    """
    try:
        http_method = event.get("httpMethod", "").upper()

        auth = require_editor(event)
        repo = SettingsRepository()

        if http_method == "GET":
            return get_settings(repo)
        elif http_method == "PUT":
            return update_settings(repo, event, auth.user_id)
        else:
            return error("Method not allowed", 405)

    except SiteCMSError as e:
        return from_exception(e)
    except Exception as e:
        logger.exception("Settings handler error", error=str(e))
        return error("Internal server error", 500)


def get_settings(repo: SettingsRepository) -> dict:
    settings = repo.get_settings(use_cache=False)
    return success({
        "settings": settings.model_dump(mode="json", by_alias=True),
        "presets": sorted(SEO_PROMPT_PRESETS),
    })


def update_settings(repo: SettingsRepository, event: dict, author: str) -> dict:
    try:
        body = json.loads(event.get("body") or "{}")
        request = UpdateSettingsRequest.model_validate(body)
    except PydanticValidationError as e:
        return validation_error(pydantic_errors(e))
    except json.JSONDecodeError:
        return error("Invalid JSON body", 400)

    try:
        settings = repo.update_settings(request, author=author)
    except PydanticValidationError as e:
        return validation_error(pydantic_errors(e))

    return success({"settings": settings.model_dump(mode="json", by_alias=True)})
