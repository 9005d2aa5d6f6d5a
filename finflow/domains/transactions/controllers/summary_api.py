"""Summary API controller."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from finflow.core.utils.decorators import with_user
from finflow.core.utils.validation import parse_iso_date, parse_uuid
from finflow.domains.transactions.services import report_service

summary_api_bp = Blueprint("summary_api", __name__)


@summary_api_bp.get("")
@with_user()
def get_summary(user):
    branch_id = (request.args.get("branchId") or "").strip()
    summary = report_service.summarize(
        user.id,
        from_date=parse_iso_date(request.args.get("from"), "from"),
        to_date=parse_iso_date(request.args.get("to"), "to"),
        branch_id=parse_uuid(branch_id, "Branch Id") if branch_id else None,
        days=current_app.config.get("DEFAULT_RANGE_DAYS", 30),
    )
    return jsonify({"data": summary})
