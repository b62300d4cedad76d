"""Public content API handler (no authentication required).

Serves PUBLISHED page records only. Drafts are never visible here.
"""

from typing import Any

import structlog

from sitecms.models.page_record import LifecycleState
from sitecms.services.publishing import PublishingService
from sitecms.utils.exceptions import SiteCMSError
from sitecms.utils.responses import PUBLIC_CACHE_CONTROL, error, from_exception, not_found, success

logger = structlog.get_logger()


def handler(event: dict[str, Any], context: Any) -> dict:
    """Handle public content requests.

    Routes:
        GET /content/sections?pageId=X  - Published sections and SEO
    """
    try:
        http_method = event.get("httpMethod", "").upper()
        path = event.get("path", "")
        query_params = event.get("queryStringParameters", {}) or {}

        if path.endswith("/content/sections") and http_method == "GET":
            return get_published_sections(query_params.get("pageId") or query_params.get("slug"))
        else:
            return error("Not found", 404)

    except SiteCMSError as e:
        return from_exception(e)
    except Exception as e:
        logger.exception("Public content handler error", error=str(e))
        return error("Internal server error", 500)


def get_published_sections(page_id: str | None) -> dict:
    if not page_id:
        return error("Missing required parameter: pageId", 400, "VALIDATION_ERROR")

    record = PublishingService().read(page_id, LifecycleState.PUBLISHED)
    if record is None:
        return not_found("Page", page_id)

    return success(
        record.to_api(public=True),
        headers={"Cache-Control": PUBLIC_CACHE_CONTROL},
    )
