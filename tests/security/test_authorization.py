"""Security tests for authorization and access control.

These tests verify that:
- Admin endpoints reject requests without an editor identity
- Authenticated non-editors are refused
- No draft content leaks through the public endpoint
"""

import json

import pytest


ADMIN_ROUTES = [
    ("api.content", "GET", "/admin/content/sections", {}, {"pageId": "home"}, None),
    ("api.content", "PUT", "/admin/content/sections", {}, {}, {"pageId": "home", "sections": []}),
    ("api.content", "POST", "/admin/content/batch", {}, {},
     {"changes": [{"contentKey": "home:hero-1:headline", "value": "x"}]}),
    ("api.content", "POST", "/admin/content/publish", {}, {}, {"pageId": "home"}),
    ("api.content", "DELETE", "/admin/content/pages/home", {"page_id": "home"}, {}, None),
    ("api.seed", "POST", "/admin/content/seed", {}, {}, {"pageIds": ["all"]}),
    ("api.media", "DELETE", "/admin/media/abc", {"media_id": "abc"}, {}, None),
    ("api.ai", "POST", "/admin/ai/edit", {}, {}, {"content": "x", "quickAction": "simplify"}),
    ("api.settings", "PUT", "/admin/settings", {}, {}, {"siteName": "Hijacked"}),
]


def _handler(module_name):
    module = __import__(module_name, fromlist=["handler"])
    return module.handler


class TestAdminAuthorization:
    """Every admin route requires an editor."""

    @pytest.mark.parametrize("module_name,method,path,path_params,query_params,body", ADMIN_ROUTES)
    def test_unauthenticated_rejected(
        self, dynamodb_table, api_gateway_event, module_name, method, path, path_params, query_params, body
    ):
        event = api_gateway_event(
            method=method,
            path=path,
            path_params=path_params,
            query_params=query_params,
            body=body,
            authenticated=False,
        )

        response = _handler(module_name)(event, None)

        assert response["statusCode"] == 401
        assert json.loads(response["body"])["error"] is True

    @pytest.mark.parametrize("module_name,method,path,path_params,query_params,body", ADMIN_ROUTES)
    def test_non_editor_forbidden(
        self, dynamodb_table, api_gateway_event, module_name, method, path, path_params, query_params, body
    ):
        event = api_gateway_event(
            method=method,
            path=path,
            path_params=path_params,
            query_params=query_params,
            body=body,
            role="viewer",
        )

        response = _handler(module_name)(event, None)

        assert response["statusCode"] == 403

    def test_rejected_writes_change_nothing(self, dynamodb_table, api_gateway_event):
        from api.seed import handler
        from sitecms.services.publishing import PublishingService

        handler(api_gateway_event(
            method="POST", path="/admin/content/seed", body={"pageIds": ["all"]}, authenticated=False,
        ), None)

        assert PublishingService().repo.list_all() == []

    def test_admin_role_allowed(self, dynamodb_table, api_gateway_event):
        from api.content import handler

        response = handler(api_gateway_event(
            method="GET", path="/admin/content/pages", role="admin",
        ), None)

        assert response["statusCode"] == 200


class TestPublicEndpoint:
    def test_public_endpoint_never_returns_draft(self, dynamodb_table):
        from api.public_content import handler
        from sitecms.models.change import FieldChange
        from sitecms.services.publishing import PublishingService

        PublishingService().edit("home", FieldChange(
            page_id="home", section_id="hero-1", field_key="headline", value="Draft only",
        ))

        response = handler({
            "httpMethod": "GET",
            "path": "/content/sections",
            "queryStringParameters": {"pageId": "home", "status": "draft"},
        }, None)

        assert response["statusCode"] == 404
        assert "Draft only" not in response["body"]

    def test_public_response_has_no_audit_fields(self, dynamodb_table):
        from api.public_content import handler
        from sitecms.services.seeding import SeedingService

        SeedingService().seed(["home"])

        response = handler({
            "httpMethod": "GET",
            "path": "/content/sections",
            "queryStringParameters": {"pageId": "home"},
        }, None)

        body = json.loads(response["body"])
        assert "updatedBy" not in body
        assert "createdBy" not in body
