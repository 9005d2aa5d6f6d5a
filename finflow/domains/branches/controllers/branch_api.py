"""Branch API controllers."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from finflow.core.errors import NotFoundError
from finflow.core.schemas import BulkDeleteRequest
from finflow.core.utils.decorators import with_user
from finflow.domains.branches.mappers import map_branch, map_branch_record
from finflow.domains.branches.schemas.branch_schemas import BranchBody
from finflow.domains.branches.services import branch_service as services

branch_api_bp = Blueprint("branch_api", __name__)

_ID_LABEL = "Branch Id"


def _not_found():
    return NotFoundError("Branch Not Found")


@branch_api_bp.get("")
@with_user()
def list_branches(user):
    rows = services.list_branches(user.id)
    return jsonify({"data": [map_branch(r) for r in rows]})


@branch_api_bp.get("/<id>")
@with_user(id_label=_ID_LABEL)
def get_branch(user, id: str):
    row = services.get_branch(user.id, id)
    if not row:
        raise _not_found()
    return jsonify({"data": map_branch(row)})


@branch_api_bp.post("")
@with_user(missing_status=400)
def create_branch(user):
    data = BranchBody.model_validate(request.get_json(silent=True) or {})
    row = services.create_branch(user.id, data.name)
    return jsonify({"data": map_branch_record(row)}), 201


@branch_api_bp.post("/bulk-delete")
@with_user()
def bulk_delete_branches(user):
    data = BulkDeleteRequest.model_validate(request.get_json(silent=True) or {})
    rows = services.bulk_delete_branches(user.id, data.id_strings())
    return jsonify({"data": [map_branch_record(r) for r in rows]})


@branch_api_bp.patch("/<id>")
@with_user(id_label=_ID_LABEL)
def update_branch(user, id: str):
    data = BranchBody.model_validate(request.get_json(silent=True) or {})
    row = services.update_branch(user.id, id, data.name)
    if not row:
        raise _not_found()
    return jsonify({"data": map_branch_record(row)})


@branch_api_bp.delete("/<id>")
@with_user(id_label=_ID_LABEL)
def delete_branch(user, id: str):
    row = services.delete_branch(user.id, id)
    if not row:
        raise _not_found()
    return jsonify({"data": map_branch_record(row)})
