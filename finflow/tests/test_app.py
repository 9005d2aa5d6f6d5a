from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

pytestmark = pytest.mark.integration

from finflow import create_app
from finflow.core.users.services import create_user
from finflow.core.errors import ValidationError
from finflow.domains.categories.services import category_service


def test_health_and_ping(client):
    assert client.get("/health").get_json() == {"ok": True}
    assert client.get("/api/ping").get_json() == {"pong": True}


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/api/a@x.com/nope")
    assert resp.status_code == 404
    assert "error" in resp.get_json()


def test_database_failure_maps_to_service_unavailable(client, alice, monkeypatch):
    def broken(user_id):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    monkeypatch.setattr(category_service, "list_categories", broken)
    resp = client.get("/api/a@x.com/categories")
    assert resp.status_code == 503
    assert resp.get_json() == {"error": "Service Unavailable"}


def test_unexpected_error_is_500(client, alice, monkeypatch):
    def broken(user_id):
        raise RuntimeError("boom")

    monkeypatch.setattr(category_service, "list_categories", broken)
    resp = client.get("/api/a@x.com/categories")
    assert resp.status_code == 500
    # Testing config surfaces the message.
    assert resp.get_json() == {"error": "boom"}


def test_config_selection_by_name(tmp_path):
    app = create_app("ci", {"SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'ci.db'}"})
    assert app.testing
    assert app.config["RATELIMIT_ENABLED"] is False
    assert app.config["DEFAULT_RANGE_DAYS"] == 30


class TestCli:
    def test_create_user_command(self, app):
        result = app.test_cli_runner().invoke(args=["finflow", "create-user", "c@x.com", "--name", "Cara"])
        assert result.exit_code == 0, result.output
        assert "Created user c@x.com" in result.output

    def test_create_duplicate_user_fails(self, app, alice):
        result = app.test_cli_runner().invoke(args=["finflow", "create-user", "a@x.com"])
        assert result.exit_code != 0
        assert "User already exists" in result.output

    def test_seed_demo_command(self, app):
        result = app.test_cli_runner().invoke(args=["finflow", "seed-demo", "demo@x.com"])
        assert result.exit_code == 0, result.output
        assert "sales-transactions: 3 rows" in result.output


def test_duplicate_email_rejected(app, alice):
    with pytest.raises(ValidationError):
        create_user("a@x.com")
