"""AI text and vision assistance for editors.

Calls Claude on Bedrock. Every public function here degrades instead of
raising: when the model is unavailable or answers badly, the editor gets
their existing content back unchanged.
"""

import base64
import json
import os
import re
import urllib.request
from typing import Any

import boto3
import structlog
from botocore.config import Config

logger = structlog.get_logger()

DEFAULT_MODEL = "us.anthropic.claude-sonnet-4-5-20250929-v1:0"
FAST_MODEL = "us.anthropic.claude-haiku-4-5-20251001-v1:0"

BEDROCK_CONFIG = Config(
    read_timeout=60,
    connect_timeout=10,
    retries={
        "max_attempts": 2,
        "mode": "adaptive",
    },
)

MAX_IMAGE_BYTES = 5 * 1024 * 1024

QUICK_ACTIONS = {
    "makeShorter": "Make this more concise while keeping the core message",
    "makeLonger": "Expand this with more detail and persuasive elements",
    "moreCompelling": "Make this more compelling and action-oriented",
    "moreProfessional": "Make this sound more professional and authoritative",
    "addUrgency": "Add subtle urgency to encourage action",
    "simplify": "Simplify this for easier reading",
    "seoOptimize": "Optimize this for search engines while keeping it natural",
    "addEmotionalAppeal": "Add emotional appeal to connect with the reader",
}

EDIT_SYSTEM_PROMPT = """You are a copywriter editing content on a marketing website.
Keep the brand voice professional and confident. Preserve any HTML tags present
in the input and do not add new ones unless asked. Respect length limits when
given. Return ONLY the new content, with no quotes, preamble or explanation."""

DESCRIBE_SYSTEM_PROMPT = """You generate metadata for images in a website media library.
Respond ONLY with valid JSON in this format:
{
  "altText": "Descriptive alt text for accessibility (max 125 chars)",
  "description": "2-3 sentence description of the image content and context",
  "tags": ["tag1", "tag2", "tag3"],
  "seoText": "SEO-oriented description (1-2 sentences)"
}
Tags are lowercase, 3-8 in total."""

_bedrock = None


def _get_bedrock():
    """Get Bedrock runtime client (lazy initialization)."""
    global _bedrock
    if _bedrock is None:
        _bedrock = boto3.client("bedrock-runtime", config=BEDROCK_CONFIG)
    return _bedrock


def invoke_claude(
    messages: list[dict[str, Any]],
    system: str | None = None,
    model: str | None = None,
    max_tokens: int = 1024,
    temperature: float = 0.7,
) -> str:
    """Invoke Claude on Bedrock and return the text of the first block.

    Raises:
        Exception: Whatever boto3 raises; callers decide how to degrade.
    """
    request_body: dict[str, Any] = {
        "anthropic_version": "bedrock-2023-05-31",
        "max_tokens": max_tokens,
        "temperature": temperature,
        "messages": messages,
    }
    if system:
        request_body["system"] = system

    response = _get_bedrock().invoke_model(
        modelId=model or os.environ.get("AI_MODEL_ID", DEFAULT_MODEL),
        body=json.dumps(request_body),
        contentType="application/json",
        accept="application/json",
    )
    response_body = json.loads(response["body"].read())
    return response_body["content"][0]["text"]


def _extract_json(text: str) -> dict:
    match = re.search(r"\{[\s\S]*\}", text)
    if not match:
        raise ValueError("No JSON object in AI response")
    return json.loads(match.group(0))


def edit_content(
    current_content: str,
    instruction: str,
    content_type: str = "paragraph",
    context: str | None = None,
    max_length: int | None = None,
    system_prompt: str | None = None,
) -> dict[str, Any]:
    """Rewrite a piece of content according to an instruction.

    Returns:
        ``{"newContent", "changed"}``; ``changed`` is False when the model
        failed and ``newContent`` is the original content.
    """
    prompt = f"Content type: {content_type}\n"
    prompt += f'Current content: "{current_content}"\n'
    prompt += f"Instruction: {instruction}\n"
    if max_length:
        prompt += f"Maximum length: {max_length} characters\n"
    if context:
        prompt += f"Additional context: {context}\n"
    prompt += "\nProvide the improved version of this content based on the instruction."

    system = EDIT_SYSTEM_PROMPT
    if system_prompt:
        system = f"{system_prompt}\n\n{EDIT_SYSTEM_PROMPT}"

    try:
        new_content = invoke_claude(
            messages=[{"role": "user", "content": prompt}],
            system=system,
            max_tokens=800,
        ).strip()
    except Exception as e:
        logger.warning("AI edit failed, keeping content", error=str(e), content_type=content_type)
        return {"newContent": current_content, "changed": False}

    if len(new_content) >= 2 and new_content[0] == new_content[-1] == '"':
        new_content = new_content[1:-1]
    if not new_content:
        return {"newContent": current_content, "changed": False}
    if max_length and len(new_content) > max_length:
        logger.info("AI edit exceeded max length", length=len(new_content), max_length=max_length)

    return {"newContent": new_content, "changed": new_content != current_content}


def _fetch_image(image_url: str) -> tuple[bytes, str]:
    """Download an image for the vision model."""
    request = urllib.request.Request(image_url, headers={"User-Agent": "sitecms-media/1.0"})
    with urllib.request.urlopen(request, timeout=10) as response:
        media_type = response.headers.get_content_type()
        data = response.read(MAX_IMAGE_BYTES + 1)
    if len(data) > MAX_IMAGE_BYTES:
        raise ValueError("Image too large for description")
    if not media_type.startswith("image/"):
        raise ValueError(f"Not an image: {media_type}")
    return data, media_type


def describe_image(image_url: str, fallback_alt: str = "") -> dict[str, Any]:
    """Generate alt text, description, tags and SEO text for an image.

    Falls back to ``fallback_alt`` and empty fields if anything fails.
    """
    fallback = {"altText": fallback_alt, "description": "", "tags": [], "seoText": "", "generated": False}

    try:
        data, media_type = _fetch_image(image_url)
        text = invoke_claude(
            messages=[{
                "role": "user",
                "content": [
                    {
                        "type": "image",
                        "source": {
                            "type": "base64",
                            "media_type": media_type,
                            "data": base64.b64encode(data).decode("ascii"),
                        },
                    },
                    {"type": "text", "text": "Generate metadata for this image."},
                ],
            }],
            system=DESCRIBE_SYSTEM_PROMPT,
            model=FAST_MODEL,
            max_tokens=500,
            temperature=0.3,
        )
        parsed = _extract_json(text)
    except Exception as e:
        logger.warning("Image description failed", image_url=image_url, error=str(e))
        return fallback

    tags = parsed.get("tags")
    return {
        "altText": str(parsed.get("altText") or fallback_alt)[:125],
        "description": str(parsed.get("description") or ""),
        "tags": [str(t).lower() for t in tags] if isinstance(tags, list) else [],
        "seoText": str(parsed.get("seoText") or ""),
        "generated": True,
    }
