from __future__ import annotations

import uuid

import pytest

pytestmark = pytest.mark.integration

from finflow.domains.categories.models.category_models import Category
from finflow.domains.categories.services.category_service import create_category


def _url(email: str, suffix: str = "") -> str:
    return f"/api/{email}/categories{suffix}"


class TestCategoryReads:
    def test_list_returns_only_callers_rows(self, client, alice_category, bob_category):
        resp = client.get(_url("a@x.com"))
        assert resp.status_code == 200
        assert resp.get_json() == {"data": [{"id": alice_category.id, "name": "Utilities"}]}

    def test_get_foreign_category_is_not_found(self, client, alice, bob_category):
        resp = client.get(_url("a@x.com", f"/{bob_category.id}"))
        assert resp.status_code == 404
        assert resp.get_json() == {"error": "Category Not Found"}

    def test_malformed_id_rejected_before_lookup(self, client, alice):
        resp = client.get(_url("a@x.com", "/not-a-uuid"))
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Invalid Category Id"

    def test_unknown_user_is_not_found(self, client, app):
        resp = client.get(_url("ghost@x.com"))
        assert resp.status_code == 404
        assert resp.get_json() == {"error": "User Not Found"}

    def test_invalid_email_rejected(self, client, app):
        resp = client.get(_url("not-an-email"))
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Invalid Email Id"}


class TestCategoryWrites:
    def test_create_returns_201_with_owner(self, client, alice):
        resp = client.post(_url("a@x.com"), json={"name": "  Supplies "})
        assert resp.status_code == 201
        data = resp.get_json()["data"]
        assert data["name"] == "Supplies"
        assert data["userId"] == alice.id
        uuid.UUID(data["id"])

    def test_create_without_name_is_rejected(self, client, alice):
        resp = client.post(_url("a@x.com"), json={})
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Name is required"}

    def test_create_for_unknown_user_is_bad_request(self, client, app):
        resp = client.post(_url("ghost@x.com"), json={"name": "Rent"})
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "User Not Found"}

    def test_rename_own_category(self, client, alice_category):
        resp = client.patch(_url("a@x.com", f"/{alice_category.id}"), json={"name": "Power"})
        assert resp.status_code == 200
        assert resp.get_json()["data"]["name"] == "Power"
        assert Category.query.filter_by(id=alice_category.id).first().name == "Power"

    def test_cross_user_update_leaves_row_unchanged(self, client, alice, bob_category):
        resp = client.patch(_url("a@x.com", f"/{bob_category.id}"), json={"name": "Hijacked"})
        assert resp.status_code == 404
        assert resp.get_json() == {"error": "Category Not Found"}
        assert Category.query.filter_by(id=bob_category.id).first().name == "Rent"

    def test_cross_user_delete_is_not_found(self, client, alice, bob_category):
        resp = client.delete(_url("a@x.com", f"/{bob_category.id}"))
        assert resp.status_code == 404
        assert resp.get_json() == {"error": "Category Not Found"}
        assert Category.query.filter_by(id=bob_category.id).first() is not None

    def test_delete_own_category(self, client, alice_category):
        resp = client.delete(_url("a@x.com", f"/{alice_category.id}"))
        assert resp.status_code == 200
        assert resp.get_json()["data"]["id"] == alice_category.id
        assert Category.query.filter_by(id=alice_category.id).first() is None

    def test_bulk_delete_only_touches_owned_rows(self, client, alice, alice_category, bob_category):
        second = create_category(alice.id, "Travel")
        resp = client.post(
            _url("a@x.com", "/bulk-delete"),
            json={"ids": [alice_category.id, second.id, bob_category.id]},
        )
        assert resp.status_code == 200
        deleted = {row["id"] for row in resp.get_json()["data"]}
        assert deleted == {alice_category.id, second.id}
        assert Category.query.filter_by(id=bob_category.id).first() is not None

    def test_bulk_delete_rejects_malformed_ids(self, client, alice):
        resp = client.post(_url("a@x.com", "/bulk-delete"), json={"ids": ["nope"]})
        assert resp.status_code == 400
        body = resp.get_json()
        assert body["error"] == "validation_error"
        assert body["details"][0]["loc"] == ["ids", 0]
