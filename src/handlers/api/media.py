"""Media library API handler."""

import json
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from sitecms.models.media import ALLOWED_MIME_TYPES, MediaItem, UploadRequest
from sitecms.repositories.media import MediaRepository
from sitecms.services.asset_store import AssetStore
from sitecms.services.media_usage import MediaService, MediaUsageIndex
from sitecms.utils.auth import require_editor
from sitecms.utils.exceptions import NotFoundError, SiteCMSError
from sitecms.utils.responses import created, error, from_exception, pydantic_errors, success, validation_error

logger = structlog.get_logger()

MAX_UPLOAD_BYTES = 10 * 1024 * 1024


def handler(event: dict[str, Any], context: Any) -> dict:
    """Handle media API requests.

    Routes:
        GET    /admin/media                      - List media items
        POST   /admin/media/upload               - Presigned upload + media record
        GET    /admin/media/{media_id}/usage     - Where the item is used
        DELETE /admin/media/{media_id}?force=1   - Delete (refused while in use)
    """
    try:
        http_method = event.get("httpMethod", "").upper()
        path = event.get("path", "")
        path_params = event.get("pathParameters", {}) or {}
        query_params = event.get("queryStringParameters", {}) or {}
        media_id = path_params.get("media_id")

        auth = require_editor(event)

        if path.endswith("/media/upload") and http_method == "POST":
            return create_upload(event, auth.user_id)
        elif media_id and path.endswith("/usage") and http_method == "GET":
            return get_usage(media_id, query_params)
        elif media_id and http_method == "DELETE":
            return delete_media(media_id, query_params)
        elif path.endswith("/media") and http_method == "GET":
            return list_media()
        else:
            return error("Method not allowed", 405)

    except SiteCMSError as e:
        return from_exception(e)
    except Exception as e:
        logger.exception("Media handler error", error=str(e))
        return error("Internal server error", 500)


def _flag(value: str | None) -> bool:
    return (value or "").lower() in ("1", "true", "yes")


def list_media() -> dict:
    items = MediaRepository().list_all()
    return success({
        "items": [item.model_dump(mode="json", by_alias=True) for item in items],
        "count": len(items),
    })


def create_upload(event: dict, author: str) -> dict:
    """Create a media record and a presigned URL to upload its bytes.

    The record is written before the upload happens so the returned public
    URL can be placed into content immediately.
    """
    try:
        body = json.loads(event.get("body") or "{}")
        request = UploadRequest.model_validate(body)
    except PydanticValidationError as e:
        return validation_error(pydantic_errors(e))
    except json.JSONDecodeError:
        return error("Invalid JSON body", 400)

    if request.content_type not in ALLOWED_MIME_TYPES:
        return validation_error([{
            "field": "contentType",
            "message": f"Unsupported content type. Allowed: {', '.join(sorted(ALLOWED_MIME_TYPES))}",
        }])
    if request.size_bytes is not None and request.size_bytes > MAX_UPLOAD_BYTES:
        return validation_error([{"field": "sizeBytes", "message": "File exceeds 10MB limit"}])

    store = AssetStore()
    item = MediaItem(filename=request.filename, s3_key="pending", public_url="pending")
    item.s3_key = store.object_key(item.media_id, request.filename)
    item.public_url = store.public_url(item.s3_key)
    item.mime_type = request.content_type
    item.size_bytes = request.size_bytes
    item.alt = request.alt
    item.uploaded_by = author

    upload_url = store.generate_upload_url(item.s3_key, request.content_type)
    MediaRepository().put(item)

    logger.info("Media upload created", media_id=item.media_id, key=item.s3_key)
    return created({
        "media": item.model_dump(mode="json", by_alias=True),
        "uploadUrl": upload_url,
    })


def get_usage(media_id: str, query_params: dict) -> dict:
    include_published = _flag(query_params.get("includePublished"))
    item = MediaRepository().get_by_id(media_id)
    if item is None:
        raise NotFoundError("Media", media_id)

    usages = MediaUsageIndex().usage_of(media_id, include_published=include_published, item=item)
    return success({
        "mediaId": media_id,
        "inUse": bool(usages),
        "usages": [u.model_dump(by_alias=True) for u in usages],
    })


def delete_media(media_id: str, query_params: dict) -> dict:
    """Delete a media item. Returns 409 MEDIA_IN_USE unless ``force`` is set."""
    usages = MediaService().delete_media(media_id, force=_flag(query_params.get("force")))
    return success({
        "deleted": True,
        "mediaId": media_id,
        "forcedUsages": [u.model_dump(by_alias=True) for u in usages],
    })
