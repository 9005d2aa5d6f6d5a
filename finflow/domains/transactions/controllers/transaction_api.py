"""Transaction API controllers.

The three ledgers expose the same routes, so one blueprint is built per
store and mounted under its resource name.
"""

from __future__ import annotations

from flask import Blueprint, Response, current_app, jsonify, request

from finflow.core.errors import NotFoundError, ValidationError
from finflow.core.schemas import BulkDeleteRequest
from finflow.core.utils.decorators import with_user
from finflow.core.utils.validation import parse_iso_date, parse_uuid
from finflow.domains.transactions.mappers import map_transaction_record, map_transaction_view
from finflow.domains.transactions.schemas.transaction_schemas import (
    ReportRequest,
    TransactionCreate,
    TransactionListFilter,
    TransactionUpdate,
)
from finflow.domains.transactions.services import import_service, report_service
from finflow.domains.transactions.services.transaction_service import STORES, TransactionStore


def _list_params():
    params = TransactionListFilter.model_validate(request.args.to_dict())
    category_id = (params.category_id or "").strip()
    branch_id = (params.branch_id or "").strip()
    return {
        "from_date": parse_iso_date(params.from_date, "from"),
        "to_date": parse_iso_date(params.to_date, "to"),
        "category_id": parse_uuid(category_id, "Category Id") if category_id else None,
        "branch_id": parse_uuid(branch_id, "Branch Id") if branch_id else None,
        "days": current_app.config.get("DEFAULT_RANGE_DAYS", 30),
    }


def _uploaded_file():
    file = request.files.get("file")
    if not file:
        raise ValidationError("CSV file is required")
    return file


def create_transaction_blueprint(store: TransactionStore) -> Blueprint:
    bp = Blueprint(f"{store.resource.replace('-', '_')}_api", __name__)
    id_label = f"{store.label} Id"

    def not_found():
        return NotFoundError(f"{store.label} Not Found")

    @bp.get("")
    @with_user()
    def list_transactions(user):
        rows = store.list(user.id, **_list_params())
        return jsonify({"data": [map_transaction_view(r) for r in rows]})

    @bp.get("/<id>")
    @with_user(id_label=id_label)
    def get_transaction(user, id: str):
        row = store.get(user.id, id)
        if not row:
            raise not_found()
        return jsonify({"data": map_transaction_view(row)})

    @bp.post("")
    @with_user(missing_status=400)
    def create_transaction(user):
        data = TransactionCreate.model_validate(request.get_json(silent=True) or {})
        row = store.create(user.id, data.to_values())
        return jsonify({"data": map_transaction_record(row)}), 201

    @bp.post("/bulk-create")
    @with_user(missing_status=400)
    def bulk_create_transactions(user):
        payload = request.get_json(silent=True)
        if not isinstance(payload, list):
            raise ValidationError("Expected a JSON array of transactions")
        max_rows = current_app.config.get("IMPORT_MAX_ROWS", 1000)
        if len(payload) > max_rows:
            raise ValidationError(f"Bulk create is limited to {max_rows} rows")
        items = [TransactionCreate.model_validate(item) for item in payload]
        rows = store.bulk_create(user.id, [item.to_values() for item in items])
        return jsonify({"data": [map_transaction_record(r) for r in rows]}), 201

    @bp.post("/bulk-delete")
    @with_user()
    def bulk_delete_transactions(user):
        data = BulkDeleteRequest.model_validate(request.get_json(silent=True) or {})
        rows = store.bulk_delete(user.id, data.id_strings())
        return jsonify({"data": [map_transaction_record(r) for r in rows]})

    @bp.patch("/<id>")
    @with_user(id_label=id_label)
    def update_transaction(user, id: str):
        data = TransactionUpdate.model_validate(request.get_json(silent=True) or {})
        row = store.update(user.id, id, data.to_values())
        if not row:
            raise not_found()
        return jsonify({"data": map_transaction_record(row)})

    @bp.delete("/<id>")
    @with_user(id_label=id_label)
    def delete_transaction(user, id: str):
        row = store.delete(user.id, id)
        if not row:
            raise not_found()
        return jsonify({"data": map_transaction_record(row)})

    @bp.post("/import/preview")
    @with_user()
    def import_preview(user):
        rows = import_service.preview_csv(
            _uploaded_file(), max_rows=current_app.config.get("IMPORT_MAX_ROWS", 1000)
        )
        return jsonify({"data": rows})

    @bp.post("/import")
    @with_user(missing_status=400)
    def import_commit(user):
        branch_id = (request.form.get("branchId") or "").strip()
        if branch_id:
            branch_id = parse_uuid(branch_id, "Branch Id")
        rows = import_service.commit_import(
            user.id,
            store,
            _uploaded_file(),
            branch_id or None,
            max_rows=current_app.config.get("IMPORT_MAX_ROWS", 1000),
        )
        return jsonify({"data": [map_transaction_record(r) for r in rows]}), 201

    @bp.get("/export")
    @with_user()
    def export_transactions(user):
        rows = store.list(user.id, **_list_params())
        filename = f"{store.resource}.csv"
        return Response(
            report_service.export_csv(rows),
            mimetype="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @bp.post("/pdf")
    @with_user()
    def transactions_pdf(user):
        data = ReportRequest.model_validate(request.get_json(silent=True) or {})
        from_date = data.date or data.from_date
        to_date = data.date or data.to_date
        context = report_service.build_report_context(
            user.id,
            store,
            org=current_app.config.get("REPORT_ORG_NAME", "FinFlow"),
            from_date=from_date,
            to_date=to_date,
            branch_id=str(data.branch_id) if data.branch_id else None,
            category_ids=[str(c) for c in data.category_ids],
            gst=data.gst,
            payment_type=data.payment_type,
            days=current_app.config.get("DEFAULT_RANGE_DAYS", 30),
        )
        pdf = report_service.render_pdf(report_service.render_report_html(context))
        return Response(
            pdf,
            mimetype="application/pdf",
            headers={"Content-Disposition": f'inline; filename="{store.resource}-report.pdf"'},
        )

    return bp


transaction_blueprints = {resource: create_transaction_blueprint(store) for resource, store in STORES.items()}
