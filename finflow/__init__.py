"""FinFlow application factory and bootstrap."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from flask import Flask
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from finflow.config import _engine_options_from_uri, config_by_name
from finflow.core.errors import FinFlowError, UpstreamError
from finflow.extensions import db, init_extensions

# Models must be imported before create_all / autogenerate can see them.
from finflow.core.users import models as user_models  # noqa: F401
from finflow.domains.branches.models import branch_models  # noqa: F401
from finflow.domains.categories.models import category_models  # noqa: F401
from finflow.domains.transactions.models import transaction_models  # noqa: F401


def create_app(config_name: Optional[str] = None, overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    """Create and configure the FinFlow Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent
    instance_root = project_root / "instance"

    app = Flask(__name__, instance_path=str(instance_root), instance_relative_config=True)
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)
    if overrides:
        app.config.update(overrides)
        if "SQLALCHEMY_DATABASE_URI" in overrides and "SQLALCHEMY_ENGINE_OPTIONS" not in overrides:
            app.config["SQLALCHEMY_ENGINE_OPTIONS"] = _engine_options_from_uri(
                overrides["SQLALCHEMY_DATABASE_URI"]
            )

    # Normalize relative sqlite paths against the project root
    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    if db_uri.startswith("sqlite:///") and db_uri != "sqlite:///:memory:":
        db_path = Path(db_uri.replace("sqlite:///", "", 1))
        if not db_path.is_absolute():
            db_path = project_root / db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{db_path}"

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))
    logging.getLogger("finflow").setLevel(app.config.get("LOG_LEVEL", "INFO"))

    init_extensions(app)
    _register_blueprints(app)
    _register_error_handlers(app)

    @app.get("/health")
    def health():
        return {"ok": True}, 200

    @app.get("/api/ping")
    def ping():
        """Lightweight endpoint for load-balancer health checks."""
        return {"pong": True}, 200

    from finflow.cli import register_commands

    register_commands(app)

    return app


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from finflow.domains.branches.controllers.branch_api import branch_api_bp
    from finflow.domains.categories.controllers.category_api import category_api_bp
    from finflow.domains.transactions.controllers.summary_api import summary_api_bp
    from finflow.domains.transactions.controllers.transaction_api import transaction_blueprints

    app.register_blueprint(category_api_bp, url_prefix="/api/<email>/categories")
    app.register_blueprint(branch_api_bp, url_prefix="/api/<email>/branches")
    for resource, bp in transaction_blueprints.items():
        app.register_blueprint(bp, url_prefix=f"/api/<email>/{resource}")
    app.register_blueprint(summary_api_bp, url_prefix="/api/<email>/summary")


def _register_error_handlers(app: Flask) -> None:
    """JSON error responses in the ``{"error": ...}`` envelope."""
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(FinFlowError)
    def _finflow_error(exc: FinFlowError):
        if exc.status_code >= 500:
            app.logger.error("%s: %s", type(exc).__name__, exc.message)
        return exc.to_dict(), exc.status_code

    @app.errorhandler(PydanticValidationError)
    def _validation_error(exc: PydanticValidationError):
        details = exc.errors(include_url=False, include_context=False, include_input=False)
        return {"error": "validation_error", "details": details}, 400

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"error": exc.description}, exc.code

    @app.errorhandler(SQLAlchemyError)
    def _database_error(exc: SQLAlchemyError):
        db.session.rollback()
        app.logger.exception("Database error: %s", exc)
        err = UpstreamError()
        return err.to_dict(), err.status_code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"error": str(exc)}, 500
        return {"error": "unexpected_error"}, 500
