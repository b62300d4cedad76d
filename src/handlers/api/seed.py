"""Seed API handler.

Pushes the bundled page schemas into the content table and publishes them.
"""

import json
from typing import Any

import structlog
from pydantic import BaseModel as PydanticBaseModel, Field, ValidationError as PydanticValidationError

from sitecms.content import SCHEMA_REGISTRY
from sitecms.services.seeding import SeedingService
from sitecms.utils.auth import require_editor
from sitecms.utils.exceptions import SiteCMSError
from sitecms.utils.responses import error, from_exception, pydantic_errors, success, validation_error

logger = structlog.get_logger()


class SeedRequest(PydanticBaseModel):
    """Request model for seeding. ``slugs`` is accepted as an alias of ``pageIds``."""

    page_ids: list[str] | None = Field(None, alias="pageIds")
    slugs: list[str] | None = None
    force: bool = False

    model_config = {"populate_by_name": True}

    def requested(self) -> list[str]:
        return self.page_ids if self.page_ids is not None else (self.slugs or [])


def handler(event: dict[str, Any], context: Any) -> dict:
    """Handle seed requests.

    Routes:
        GET  /admin/content/seed  - List seedable pages
        POST /admin/content/seed  - Seed pages ({"pageIds": [...] | ["all"], "force": bool})
    """
    try:
        http_method = event.get("httpMethod", "").upper()

        auth = require_editor(event)

        if http_method == "GET":
            return list_seedable_pages()
        elif http_method == "POST":
            return seed_pages(event, auth.user_id)
        else:
            return error("Method not allowed", 405)

    except SiteCMSError as e:
        return from_exception(e)
    except Exception as e:
        logger.exception("Seed handler error", error=str(e))
        return error("Internal server error", 500)


def list_seedable_pages() -> dict:
    pages = [
        {"pageId": schema.page_id, "name": schema.name, "sections": len(schema.sections)}
        for schema in SCHEMA_REGISTRY.values()
    ]
    return success({
        "pages": pages,
        "usage": 'POST with {"pageIds": ["home"]} or {"pageIds": ["all"]}',
    })


def seed_pages(event: dict, author: str) -> dict:
    """Seed the requested pages.

    Unknown page ids fail the whole request before anything is written.
    """
    try:
        body = json.loads(event.get("body") or "{}")
        request = SeedRequest.model_validate(body)
    except PydanticValidationError as e:
        return validation_error(pydantic_errors(e))
    except json.JSONDecodeError:
        return error("Invalid JSON body", 400)

    report = SeedingService().seed(request.requested(), force=request.force, author=author)

    logger.info("Seed request complete", author=author, succeeded=report.succeeded, failed=report.failed)
    status_code = 200 if report.failed == 0 else 207
    return success(report.to_dict(), status_code=status_code)
