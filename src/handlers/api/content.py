"""Content API handler (admin, authenticated).

Section editing, batch field saves, publishing and page management for the
in-page editor.
"""

import json
import re
from typing import Any

import structlog
from pydantic import BaseModel as PydanticBaseModel, ValidationError as PydanticValidationError

from sitecms.models.change import BatchRequest
from sitecms.models.page_record import (
    PAGE_ID_PATTERN,
    AddSectionRequest,
    LifecycleState,
    MoveSectionRequest,
    PublishRequest,
    SaveSectionsRequest,
)
from sitecms.models.section_registry import SECTION_REGISTRY
from sitecms.services.batch_changes import BatchChangePipeline
from sitecms.services.publishing import PublishingService
from sitecms.utils.auth import require_editor
from sitecms.utils.exceptions import NotFoundError, SiteCMSError, ValidationError
from sitecms.utils.responses import (
    error,
    from_exception,
    multi_status,
    pydantic_errors,
    success,
    validation_error,
)

logger = structlog.get_logger()


def handler(event: dict[str, Any], context: Any) -> dict:
    """Handle content API requests.

    Routes:
        GET    /admin/content/sections?pageId=X&status=draft|published
        PUT    /admin/content/sections
        POST   /admin/content/sections/add
        DELETE /admin/content/sections/{section_id}?pageId=X
        POST   /admin/content/sections/{section_id}/move
        POST   /admin/content/batch
        POST   /admin/content/publish
        GET    /admin/content/pages
        DELETE /admin/content/pages/{page_id}
        GET    /admin/content/section-types
    """
    try:
        http_method = event.get("httpMethod", "").upper()
        path = event.get("path", "")
        path_params = event.get("pathParameters", {}) or {}
        section_id = path_params.get("section_id")
        page_id = path_params.get("page_id")

        logger.info("Content request", method=http_method, path=path)

        auth = require_editor(event)
        service = PublishingService()

        if path.endswith("/content/section-types") and http_method == "GET":
            return list_section_types()
        elif path.endswith("/content/batch") and http_method == "POST":
            return apply_batch(service, event, auth.user_id)
        elif path.endswith("/content/publish") and http_method == "POST":
            return publish_page(service, event, auth.user_id)
        elif path.endswith("/content/sections/add") and http_method == "POST":
            return add_section(service, event, auth.user_id)
        elif section_id and path.endswith("/move") and http_method == "POST":
            return move_section(service, section_id, event, auth.user_id)
        elif section_id and http_method == "DELETE":
            return remove_section(service, section_id, event, auth.user_id)
        elif path.endswith("/content/sections") and http_method == "GET":
            return get_sections(service, event)
        elif path.endswith("/content/sections") and http_method == "PUT":
            return save_sections(service, event, auth.user_id)
        elif page_id and "/content/pages/" in path and http_method == "DELETE":
            return delete_page(service, page_id)
        elif path.endswith("/content/pages") and http_method == "GET":
            return list_pages(service)
        else:
            return error("Method not allowed", 405)

    except PydanticValidationError as e:
        return validation_error(pydantic_errors(e))
    except SiteCMSError as e:
        return from_exception(e)
    except Exception as e:
        logger.exception("Content handler error", error=str(e))
        return error("Internal server error", 500)


def _parse_body(event: dict, model: type[PydanticBaseModel]) -> Any:
    """Parse and validate a JSON request body.

    Raises:
        ValidationError: If the body is not JSON or does not fit ``model``.
    """
    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError:
        raise ValidationError("Invalid JSON body")
    try:
        return model.model_validate(body)
    except PydanticValidationError as e:
        logger.warning("Content request validation failed", errors=e.errors())
        raise ValidationError(pydantic_errors(e))


def _query_page_id(event: dict) -> str:
    query_params = event.get("queryStringParameters", {}) or {}
    page_id = query_params.get("pageId") or query_params.get("slug")
    if not page_id:
        raise ValidationError([{"field": "pageId", "message": "Missing required parameter: pageId"}])
    return page_id


def get_sections(service: PublishingService, event: dict) -> dict:
    """Get a page's sections in one lifecycle state (draft by default)."""
    page_id = _query_page_id(event)
    query_params = event.get("queryStringParameters", {}) or {}
    status_param = query_params.get("status", "draft")

    try:
        status = LifecycleState(status_param)
    except ValueError:
        raise ValidationError([{"field": "status", "message": 'Must be "draft" or "published"'}])

    record = service.read(page_id, status)
    if record is None:
        raise NotFoundError("Content", page_id)
    return success(record.to_api())


def save_sections(service: PublishingService, event: dict, author: str) -> dict:
    """Replace a draft's sections (and optionally SEO and name)."""
    request = _parse_body(event, SaveSectionsRequest)
    record = service.save_sections(
        request.page_id,
        request.sections,
        seo=request.seo,
        name=request.name,
        author=author,
    )
    return success(record.to_api())


def add_section(service: PublishingService, event: dict, author: str) -> dict:
    """Insert a default section of the requested type."""
    request = _parse_body(event, AddSectionRequest)
    record = service.add_section(
        request.page_id,
        request.type,
        position=request.position,
        section_id=request.section_id,
        author=author,
    )
    return success(record.to_api(), status_code=201)


def remove_section(service: PublishingService, section_id: str, event: dict, author: str) -> dict:
    page_id = _query_page_id(event)
    record = service.remove_section(page_id, section_id, author=author)
    return success(record.to_api())


def move_section(service: PublishingService, section_id: str, event: dict, author: str) -> dict:
    request = _parse_body(event, MoveSectionRequest)
    record = service.move_section(request.page_id, section_id, request.position, author=author)
    return success(record.to_api())


def apply_batch(service: PublishingService, event: dict, author: str) -> dict:
    """Apply a batch of field changes.

    Returns 200 when every change applied, 207 when some did, and 422 when
    none did. The body always lists every change's outcome.
    """
    request = _parse_body(event, BatchRequest)
    result = BatchChangePipeline(publishing=service).apply_batch(request.changes, author=author)
    body = result.to_dict()

    if result.status == "ok":
        return success(body)
    if result.status == "partial":
        return multi_status(body)
    return success(body, status_code=422)


def publish_page(service: PublishingService, event: dict, author: str) -> dict:
    """Publish a page's draft."""
    request = _parse_body(event, PublishRequest)
    record = service.publish(request.page_id, author=author)
    return success(record.to_api())


def list_pages(service: PublishingService) -> dict:
    summaries = service.list_pages()
    return success({"pages": [s.to_api() for s in summaries], "count": len(summaries)})


def delete_page(service: PublishingService, page_id: str) -> dict:
    """Delete both records of a page."""
    if not re.match(PAGE_ID_PATTERN, page_id):
        raise ValidationError([{"field": "pageId", "message": "Invalid page id"}])
    deleted = service.delete_page(page_id)
    return success({"deleted": True, "pageId": page_id, "records": deleted})


def list_section_types() -> dict:
    """Registered section types with their editing metadata."""
    return success({"sectionTypes": [spec.metadata() for spec in SECTION_REGISTRY.values()]})
