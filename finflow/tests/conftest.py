import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from finflow import create_app
from finflow.core.users.services import create_user
from finflow.domains.branches.services.branch_service import create_branch
from finflow.domains.categories.services.category_service import create_category
from finflow.extensions import db


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")


@pytest.fixture()
def app(tmp_path):
    """Create a per-test app over its own SQLite file."""
    app = create_app(
        "testing",
        {"SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'finflow.db'}"},
    )
    ctx = app.app_context()
    ctx.push()
    db.create_all()
    try:
        yield app
    finally:
        db.session.remove()
        db.drop_all()
        db.engine.dispose()
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def alice(app):
    return create_user("a@x.com", name="Alice")


@pytest.fixture()
def bob(app):
    return create_user("b@x.com", name="Bob")


@pytest.fixture()
def alice_category(alice):
    return create_category(alice.id, "Utilities")


@pytest.fixture()
def alice_branch(alice):
    return create_branch(alice.id, "Main Street")


@pytest.fixture()
def bob_category(bob):
    return create_category(bob.id, "Rent")


@pytest.fixture()
def bob_branch(bob):
    return create_branch(bob.id, "Harbor")
