from __future__ import annotations

import csv
import datetime as dt
import io
from decimal import Decimal

import pytest

pytestmark = pytest.mark.integration

from finflow.domains.transactions.services import report_service
from finflow.domains.transactions.services.transaction_service import (
    purchase_transactions,
    sales_transactions,
    transactions,
)

TODAY = dt.date.today()


def _add(store, user_id, product, total, **extra):
    total = Decimal(total)
    return store.create(
        user_id,
        {"date": TODAY, "product": product, "price": total, "quantity": 1, "total": total, **extra},
    )


class TestSummary:
    def test_net_is_sales_minus_purchases(self, client, alice, alice_category):
        _add(sales_transactions, alice.id, "Cake", "120.10", category_id=alice_category.id)
        _add(sales_transactions, alice.id, "Bread", "30.20")
        _add(purchase_transactions, alice.id, "Flour", "50.05")
        _add(transactions, alice.id, "Power", "10.00")

        resp = client.get("/api/a@x.com/summary")
        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert data["sales"]["total"] == 150.3
        assert data["sales"]["count"] == 2
        assert data["purchases"]["total"] == 50.05
        assert data["transactions"]["total"] == 10.0
        assert data["net"] == 100.25
        assert data["sales"]["categories"][0] == {
            "categoryId": alice_category.id,
            "category": "Utilities",
            "total": 120.1,
            "count": 1,
        }

    def test_branch_filter(self, client, alice, alice_branch):
        _add(sales_transactions, alice.id, "Cake", "10.00", branch_id=alice_branch.id)
        _add(sales_transactions, alice.id, "Bread", "5.00")
        resp = client.get("/api/a@x.com/summary", query_string={"branchId": alice_branch.id})
        assert resp.get_json()["data"]["sales"]["total"] == 10.0

    def test_summary_scoped_to_caller(self, client, alice, bob):
        _add(sales_transactions, bob.id, "Cake", "99.00")
        data = client.get("/api/a@x.com/summary").get_json()["data"]
        assert data["sales"] == {"total": 0.0, "count": 0, "categories": []}

    def test_unknown_user(self, client, app):
        assert client.get("/api/ghost@x.com/summary").status_code == 404


class TestExport:
    def test_export_csv_lists_filtered_rows(self, client, alice, alice_category):
        _add(transactions, alice.id, "Water", "51.00", category_id=alice_category.id)
        _add(transactions, alice.id, "Other", "1.00")

        resp = client.get("/api/a@x.com/transactions/export", query_string={"categoryId": alice_category.id})
        assert resp.status_code == 200
        assert resp.mimetype == "text/csv"
        assert "attachment" in resp.headers["Content-Disposition"]
        rows = list(csv.DictReader(io.StringIO(resp.get_data(as_text=True))))
        assert len(rows) == 1
        assert rows[0]["product"] == "Water"
        assert rows[0]["category"] == "Utilities"
        assert rows[0]["total"] == "51.00"


class TestPdfReport:
    def test_pdf_totals_include_gst(self, client, alice, alice_branch, monkeypatch):
        _add(purchase_transactions, alice.id, "Flour", "100.00", branch_id=alice_branch.id)
        _add(purchase_transactions, alice.id, "Sugar", "50.00")
        rendered = {}

        def fake_render(html):
            rendered["html"] = html
            return b"%PDF-1.7 fake"

        monkeypatch.setattr(report_service, "render_pdf", fake_render)
        resp = client.post(
            "/api/a@x.com/purchase-transactions/pdf",
            json={"branchId": alice_branch.id, "gst": 18, "paymentType": "Cash"},
        )
        assert resp.status_code == 200
        assert resp.mimetype == "application/pdf"
        assert resp.data == b"%PDF-1.7 fake"
        html = rendered["html"]
        assert "Flour" in html and "Sugar" not in html
        assert "GST (18%)" in html
        assert "118.00" in html
        assert "Branch: Main Street" in html

    def test_pdf_foreign_branch_not_found(self, client, alice, bob_branch):
        resp = client.post("/api/a@x.com/purchase-transactions/pdf", json={"branchId": bob_branch.id})
        assert resp.status_code == 404
        assert resp.get_json() == {"error": "Branch Not Found"}

    def test_report_context_escapes_product_names(self, app, alice):
        _add(sales_transactions, alice.id, "<b>Cake</b>", "5.00")
        context = report_service.build_report_context(alice.id, sales_transactions, org="Shop")
        html = report_service.render_report_html(context)
        assert "&lt;b&gt;Cake&lt;/b&gt;" in html
        assert context["grand_total"] == "5.00"
        assert context["gst_rate"] == "0"
