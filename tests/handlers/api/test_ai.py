"""Tests for the AI assistance API handler."""

import json
from unittest.mock import patch


class TestEditContent:
    def test_quick_action(self, dynamodb_table, api_gateway_event):
        from api.ai import handler

        with patch("sitecms.services.ai_service.edit_content") as mock_edit:
            mock_edit.return_value = {"newContent": "Short", "changed": True}

            response = handler(api_gateway_event(method="POST", path="/admin/ai/edit", body={
                "content": "A long sentence",
                "quickAction": "makeShorter",
                "contentType": "headline",
                "maxLength": 80,
            }), None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body == {"newContent": "Short", "changed": True, "originalContent": "A long sentence"}
        kwargs = mock_edit.call_args.kwargs
        assert kwargs["instruction"].startswith("Make this more concise")
        assert kwargs["max_length"] == 80
        assert kwargs["system_prompt"]

    def test_requires_instruction(self, dynamodb_table, api_gateway_event):
        from api.ai import handler

        response = handler(api_gateway_event(method="POST", path="/admin/ai/edit", body={"content": "x"}), None)

        assert response["statusCode"] == 400

    def test_unknown_quick_action(self, dynamodb_table, api_gateway_event):
        from api.ai import handler

        response = handler(api_gateway_event(method="POST", path="/admin/ai/edit", body={
            "content": "x", "quickAction": "makePoem",
        }), None)

        assert response["statusCode"] == 400


class TestDescribeImage:
    def test_apply_to_media_item(self, dynamodb_table, api_gateway_event):
        from api.ai import handler
        from sitecms.models.media import MediaItem
        from sitecms.repositories.media import MediaRepository

        repo = MediaRepository()
        repo.put(MediaItem(
            media_id="01HAI",
            filename="a.jpg",
            s3_key="media/01HAI/a.jpg",
            public_url="https://cdn.example.com/media/01HAI/a.jpg",
        ))
        generated = {
            "altText": "A camera",
            "description": "A camera on a table.",
            "tags": ["camera"],
            "seoText": "Camera.",
            "generated": True,
        }

        with patch("sitecms.services.ai_service.describe_image", return_value=generated) as mock_describe:
            response = handler(api_gateway_event(method="POST", path="/admin/ai/describe-image", body={
                "mediaId": "01HAI", "apply": True,
            }), None)

        assert response["statusCode"] == 200
        mock_describe.assert_called_once_with("https://cdn.example.com/media/01HAI/a.jpg", fallback_alt="")
        stored = repo.get_by_id("01HAI")
        assert stored.alt == "A camera"
        assert stored.tags == ["camera"]

    def test_requires_source(self, dynamodb_table, api_gateway_event):
        from api.ai import handler

        response = handler(api_gateway_event(method="POST", path="/admin/ai/describe-image", body={}), None)

        assert response["statusCode"] == 400

    def test_unknown_media(self, dynamodb_table, api_gateway_event):
        from api.ai import handler

        response = handler(api_gateway_event(method="POST", path="/admin/ai/describe-image", body={
            "mediaId": "missing",
        }), None)

        assert response["statusCode"] == 404
