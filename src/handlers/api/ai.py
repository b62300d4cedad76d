"""AI assistance API handler.

Provides endpoints for:
- Rewriting a piece of content (free-form instruction or quick action)
- Generating alt text and metadata for media library images
"""

import json
from typing import Any

import structlog
from pydantic import BaseModel as PydanticBaseModel, Field, ValidationError as PydanticValidationError, model_validator

from sitecms.repositories.media import MediaRepository
from sitecms.repositories.settings import SettingsRepository
from sitecms.services import ai_service
from sitecms.utils.auth import require_editor
from sitecms.utils.exceptions import NotFoundError, SiteCMSError
from sitecms.utils.responses import error, from_exception, pydantic_errors, success, validation_error

logger = structlog.get_logger()


class EditContentRequest(PydanticBaseModel):
    content: str
    instruction: str | None = None
    quick_action: str | None = Field(None, alias="quickAction")
    content_type: str = Field("paragraph", alias="contentType")
    context: str | None = None
    max_length: int | None = Field(None, alias="maxLength", gt=0)

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def check_instruction(self) -> "EditContentRequest":
        if self.quick_action and self.quick_action not in ai_service.QUICK_ACTIONS:
            raise ValueError(f"Unknown quick action '{self.quick_action}'")
        if not self.quick_action and not (self.instruction or "").strip():
            raise ValueError("Either instruction or quickAction is required")
        return self

    def resolved_instruction(self) -> str:
        if self.quick_action:
            return ai_service.QUICK_ACTIONS[self.quick_action]
        return self.instruction.strip()


class DescribeImageRequest(PydanticBaseModel):
    media_id: str | None = Field(None, alias="mediaId")
    image_url: str | None = Field(None, alias="imageUrl")
    apply: bool = False

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def check_source(self) -> "DescribeImageRequest":
        if not self.media_id and not self.image_url:
            raise ValueError("Either mediaId or imageUrl is required")
        return self


def handler(event: dict[str, Any], context: Any) -> dict:
    """Handle AI API requests.

    Routes:
        POST /admin/ai/edit            - Rewrite content
        POST /admin/ai/describe-image  - Alt text, description and tags
    """
    try:
        http_method = event.get("httpMethod", "").upper()
        path = event.get("path", "")

        auth = require_editor(event)

        body = json.loads(event.get("body") or "{}")

        if path.endswith("/ai/edit") and http_method == "POST":
            return edit_content(body, auth.user_id)
        elif path.endswith("/ai/describe-image") and http_method == "POST":
            return describe_image(body)
        else:
            return error("Method not allowed", 405)

    except PydanticValidationError as e:
        return validation_error(pydantic_errors(e))
    except json.JSONDecodeError:
        return error("Invalid JSON body", 400)
    except SiteCMSError as e:
        return from_exception(e)
    except Exception as e:
        logger.exception("AI handler error", error=str(e))
        return error("Internal server error", 500)


def edit_content(body: dict, user_id: str) -> dict:
    """Rewrite content using the site's configured SEO prompt as context."""
    request = EditContentRequest.model_validate(body)
    settings = SettingsRepository().get_settings()

    result = ai_service.edit_content(
        current_content=request.content,
        instruction=request.resolved_instruction(),
        content_type=request.content_type,
        context=request.context,
        max_length=request.max_length,
        system_prompt=settings.system_prompt(),
    )

    logger.info(
        "AI edit",
        user_id=user_id,
        quick_action=request.quick_action,
        changed=result["changed"],
    )
    return success({**result, "originalContent": request.content})


def describe_image(body: dict) -> dict:
    """Describe an image. With ``apply`` and a ``mediaId``, store the result on the item."""
    request = DescribeImageRequest.model_validate(body)

    repo = MediaRepository()
    item = None
    if request.media_id:
        item = repo.get_by_id(request.media_id)
        if item is None:
            raise NotFoundError("Media", request.media_id)

    image_url = request.image_url or item.public_url
    result = ai_service.describe_image(image_url, fallback_alt=item.alt if item else "")

    if item is not None and request.apply and result["generated"]:
        item.alt = result["altText"]
        item.description = result["description"]
        item.tags = result["tags"]
        repo.put(item)
        logger.info("Media metadata generated", media_id=item.media_id, tags=len(item.tags))

    return success(result)
