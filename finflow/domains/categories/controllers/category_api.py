"""Category API controllers."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from finflow.core.errors import NotFoundError
from finflow.core.schemas import BulkDeleteRequest
from finflow.core.utils.decorators import with_user
from finflow.domains.categories.mappers import map_category, map_category_record
from finflow.domains.categories.schemas.category_schemas import CategoryBody
from finflow.domains.categories.services import category_service as services

category_api_bp = Blueprint("category_api", __name__)

_ID_LABEL = "Category Id"


def _not_found():
    return NotFoundError("Category Not Found")


@category_api_bp.get("")
@with_user()
def list_categories(user):
    rows = services.list_categories(user.id)
    return jsonify({"data": [map_category(r) for r in rows]})


@category_api_bp.get("/<id>")
@with_user(id_label=_ID_LABEL)
def get_category(user, id: str):
    row = services.get_category(user.id, id)
    if not row:
        raise _not_found()
    return jsonify({"data": map_category(row)})


@category_api_bp.post("")
@with_user(missing_status=400)
def create_category(user):
    data = CategoryBody.model_validate(request.get_json(silent=True) or {})
    row = services.create_category(user.id, data.name)
    return jsonify({"data": map_category_record(row)}), 201


@category_api_bp.post("/bulk-delete")
@with_user()
def bulk_delete_categories(user):
    data = BulkDeleteRequest.model_validate(request.get_json(silent=True) or {})
    rows = services.bulk_delete_categories(user.id, data.id_strings())
    return jsonify({"data": [map_category_record(r) for r in rows]})


@category_api_bp.patch("/<id>")
@with_user(id_label=_ID_LABEL)
def update_category(user, id: str):
    data = CategoryBody.model_validate(request.get_json(silent=True) or {})
    row = services.update_category(user.id, id, data.name)
    if not row:
        raise _not_found()
    return jsonify({"data": map_category_record(row)})


@category_api_bp.delete("/<id>")
@with_user(id_label=_ID_LABEL)
def delete_category(user, id: str):
    row = services.delete_category(user.id, id)
    if not row:
        raise _not_found()
    return jsonify({"data": map_category_record(row)})
