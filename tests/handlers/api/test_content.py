"""Tests for the admin content API handler."""

import json

import pytest


SECTIONS_PATH = "/admin/content/sections"


def _body(response):
    return json.loads(response["body"])


@pytest.fixture
def seeded(dynamodb_table):
    from sitecms.services.seeding import SeedingService

    SeedingService().seed(["home"])


class TestGetSections:
    def test_get_draft(self, dynamodb_table, api_gateway_event, seeded):
        from api.content import handler

        event = api_gateway_event(method="GET", path=SECTIONS_PATH, query_params={"pageId": "home"})
        response = handler(event, None)

        assert response["statusCode"] == 200
        body = _body(response)
        assert body["pageId"] == "home"
        assert body["status"] == "draft"
        assert body["sections"][0]["id"] == "hero-1"
        assert body["version"] == 1

    def test_get_published(self, dynamodb_table, api_gateway_event, seeded):
        from api.content import handler

        event = api_gateway_event(
            method="GET", path=SECTIONS_PATH, query_params={"pageId": "home", "status": "published"}
        )
        response = handler(event, None)

        assert response["statusCode"] == 200
        assert _body(response)["status"] == "published"

    def test_invalid_status(self, dynamodb_table, api_gateway_event):
        from api.content import handler

        event = api_gateway_event(
            method="GET", path=SECTIONS_PATH, query_params={"pageId": "home", "status": "archived"}
        )
        response = handler(event, None)

        assert response["statusCode"] == 400

    def test_missing_page_id(self, dynamodb_table, api_gateway_event):
        from api.content import handler

        response = handler(api_gateway_event(method="GET", path=SECTIONS_PATH), None)

        assert response["statusCode"] == 400
        assert _body(response)["error_code"] == "VALIDATION_ERROR"

    def test_not_found(self, dynamodb_table, api_gateway_event):
        from api.content import handler

        event = api_gateway_event(method="GET", path=SECTIONS_PATH, query_params={"pageId": "home"})
        response = handler(event, None)

        assert response["statusCode"] == 404


class TestSaveSections:
    def test_put_sections(self, dynamodb_table, api_gateway_event):
        from api.content import handler

        event = api_gateway_event(method="PUT", path=SECTIONS_PATH, body={
            "pageId": "landing",
            "name": "Landing",
            "sections": [
                {"id": "hero-1", "type": "hero", "order": 5, "headline": "Welcome"},
                {"id": "text-block-1", "type": "text-block", "order": 9, "content": "<p>Hi</p>"},
            ],
            "seo": {"pageTitle": "Landing", "metaDescription": "A landing page"},
        })
        response = handler(event, None)

        assert response["statusCode"] == 200
        body = _body(response)
        assert [s["order"] for s in body["sections"]] == [0, 1]
        assert body["seo"]["pageTitle"] == "Landing"
        assert body["updatedBy"] == "test-user-123"

    def test_put_unknown_section_type(self, dynamodb_table, api_gateway_event):
        from api.content import handler

        event = api_gateway_event(method="PUT", path=SECTIONS_PATH, body={
            "pageId": "landing",
            "sections": [{"id": "x-1", "type": "marquee"}],
        })
        response = handler(event, None)

        assert response["statusCode"] == 400

    def test_put_invalid_json(self, dynamodb_table, api_gateway_event):
        from api.content import handler

        event = api_gateway_event(method="PUT", path=SECTIONS_PATH, body="{not json")
        response = handler(event, None)

        assert response["statusCode"] == 400
        assert _body(response)["message"] == "Invalid JSON body"


class TestSectionOperations:
    def test_add_move_remove(self, dynamodb_table, api_gateway_event, seeded):
        from api.content import handler

        added = handler(api_gateway_event(
            method="POST",
            path=f"{SECTIONS_PATH}/add",
            body={"pageId": "home", "type": "faq", "position": 1, "sectionId": "faq-home"},
        ), None)
        assert added["statusCode"] == 201
        assert [s["id"] for s in _body(added)["sections"]][1] == "faq-home"

        moved = handler(api_gateway_event(
            method="POST",
            path=f"{SECTIONS_PATH}/faq-home/move",
            path_params={"section_id": "faq-home"},
            body={"pageId": "home", "position": 0},
        ), None)
        assert moved["statusCode"] == 200
        assert _body(moved)["sections"][0]["id"] == "faq-home"

        removed = handler(api_gateway_event(
            method="DELETE",
            path=f"{SECTIONS_PATH}/faq-home",
            path_params={"section_id": "faq-home"},
            query_params={"pageId": "home"},
        ), None)
        assert removed["statusCode"] == 200
        body = _body(removed)
        assert "faq-home" not in [s["id"] for s in body["sections"]]
        assert body["version"] == 4

    def test_add_unknown_type(self, dynamodb_table, api_gateway_event):
        from api.content import handler

        response = handler(api_gateway_event(
            method="POST", path=f"{SECTIONS_PATH}/add", body={"pageId": "home", "type": "marquee"},
        ), None)

        assert response["statusCode"] == 400
        assert _body(response)["error_code"] == "UNKNOWN_VARIANT"

    def test_remove_missing_section(self, dynamodb_table, api_gateway_event, seeded):
        from api.content import handler

        response = handler(api_gateway_event(
            method="DELETE",
            path=f"{SECTIONS_PATH}/nope-1",
            path_params={"section_id": "nope-1"},
            query_params={"pageId": "home"},
        ), None)

        assert response["statusCode"] == 404


class TestBatch:
    def test_all_ok(self, dynamodb_table, api_gateway_event, seeded):
        from api.content import handler

        response = handler(api_gateway_event(method="POST", path="/admin/content/batch", body={
            "changes": [{"contentKey": "home:hero-1:headline", "value": "Batch"}],
        }), None)

        assert response["statusCode"] == 200
        assert _body(response)["summary"] == {"total": 1, "succeeded": 1, "failed": 0}

    def test_partial(self, dynamodb_table, api_gateway_event, seeded):
        from api.content import handler

        response = handler(api_gateway_event(method="POST", path="/admin/content/batch", body={
            "changes": [
                {"contentKey": "home:hero-1:headline", "value": "Batch"},
                {"contentKey": "home-hero-1-headline", "value": "Bad"},
            ],
        }), None)

        assert response["statusCode"] == 207
        body = _body(response)
        assert body["status"] == "partial"
        assert body["results"][1]["errorCode"] == "MALFORMED_KEY"

    def test_all_failed(self, dynamodb_table, api_gateway_event):
        from api.content import handler

        response = handler(api_gateway_event(method="POST", path="/admin/content/batch", body={
            "changes": [{"contentKey": "bad", "value": "x"}],
        }), None)

        assert response["statusCode"] == 422
        assert _body(response)["status"] == "failed"

    def test_empty_batch_rejected(self, dynamodb_table, api_gateway_event):
        from api.content import handler

        response = handler(api_gateway_event(method="POST", path="/admin/content/batch", body={"changes": []}), None)

        assert response["statusCode"] == 400


class TestPublish:
    def test_publish(self, dynamodb_table, api_gateway_event, seeded):
        from api.content import handler

        handler(api_gateway_event(method="POST", path="/admin/content/batch", body={
            "changes": [{"contentKey": "home:hero-1:headline", "value": "Live"}],
        }), None)
        response = handler(api_gateway_event(
            method="POST", path="/admin/content/publish", body={"pageId": "home"},
        ), None)

        assert response["statusCode"] == 200
        body = _body(response)
        assert body["status"] == "published"
        assert body["version"] == 2
        assert body["sections"][0]["headline"] == "Live"

    def test_publish_without_draft(self, dynamodb_table, api_gateway_event):
        from api.content import handler

        response = handler(api_gateway_event(
            method="POST", path="/admin/content/publish", body={"pageId": "home"},
        ), None)

        assert response["statusCode"] == 404
        assert _body(response)["error_code"] == "NO_DRAFT_TO_PUBLISH"


class TestPages:
    def test_list_pages(self, dynamodb_table, api_gateway_event, seeded):
        from api.content import handler

        response = handler(api_gateway_event(method="GET", path="/admin/content/pages"), None)

        assert response["statusCode"] == 200
        pages = {p["pageId"]: p for p in _body(response)["pages"]}
        assert pages["home"]["state"] == "has_draft_and_published"
        assert pages["about"]["state"] == "no_draft"
        assert pages["home"]["hasUnpublishedChanges"] is False

    def test_delete_page(self, dynamodb_table, api_gateway_event, seeded):
        from api.content import handler

        response = handler(api_gateway_event(
            method="DELETE", path="/admin/content/pages/home", path_params={"page_id": "home"},
        ), None)

        assert response["statusCode"] == 200
        assert _body(response)["records"] == 2

    def test_section_types(self, dynamodb_table, api_gateway_event):
        from api.content import handler

        response = handler(api_gateway_event(method="GET", path="/admin/content/section-types"), None)

        types = [t["type"] for t in _body(response)["sectionTypes"]]
        assert "hero" in types
        assert "columns" in types

    def test_unknown_route(self, dynamodb_table, api_gateway_event):
        from api.content import handler

        response = handler(api_gateway_event(method="PATCH", path="/admin/content/sections"), None)

        assert response["statusCode"] == 405
