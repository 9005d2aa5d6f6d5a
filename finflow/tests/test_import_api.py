from __future__ import annotations

import datetime as dt
import io

import pytest

pytestmark = pytest.mark.integration

from finflow.core.errors import ValidationError
from finflow.domains.transactions.services.import_service import parse_csv
from finflow.domains.transactions.services.transaction_service import sales_transactions

CSV = (
    "Date,Product,Category,Price,Quantity,Total\n"
    "2024-01-10,Water,utilities,25.50,2,51\n"
    "2024-01-11,Ice,,3,1,\n"
    ",,,,,\n"
)


def db_rows(user):
    return sales_transactions.list(user.id, from_date=dt.date(2000, 1, 1))


def _upload(content: str = CSV, **form):
    data = {"file": (io.BytesIO(content.encode("utf-8")), "import.csv")}
    data.update(form)
    return data


class TestImportApi:
    def test_preview_parses_without_writing(self, client, alice):
        resp = client.post(
            "/api/a@x.com/sales-transactions/import/preview",
            data=_upload(),
            content_type="multipart/form-data",
        )
        assert resp.status_code == 200
        rows = resp.get_json()["data"]
        assert [r["product"] for r in rows] == ["Water", "Ice"]
        assert rows[1]["total"] == 3.0
        assert rows[0]["category"] == "utilities"
        assert db_rows(alice) == []

    def test_commit_requires_branch(self, client, alice):
        resp = client.post(
            "/api/a@x.com/sales-transactions/import",
            data=_upload(),
            content_type="multipart/form-data",
        )
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Please select a branch to continue."}
        assert db_rows(alice) == []

    def test_commit_with_foreign_branch_rejected(self, client, alice, bob_branch):
        resp = client.post(
            "/api/a@x.com/sales-transactions/import",
            data=_upload(branchId=bob_branch.id),
            content_type="multipart/form-data",
        )
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Branch Not Found"}

    def test_commit_inserts_rows_and_maps_categories(self, client, alice, alice_branch, alice_category):
        resp = client.post(
            "/api/a@x.com/sales-transactions/import",
            data=_upload(branchId=alice_branch.id),
            content_type="multipart/form-data",
        )
        assert resp.status_code == 201
        data = resp.get_json()["data"]
        assert len(data) == 2
        assert {r["branchId"] for r in data} == {alice_branch.id}
        water = next(r for r in data if r["product"] == "Water")
        assert water["categoryId"] == alice_category.id
        assert len(db_rows(alice)) == 2

    def test_bad_row_rejects_whole_file(self, client, alice, alice_branch):
        content = "date,product,price\n2024-01-10,Water,1\n2024-13-01,Ice,2\n"
        resp = client.post(
            "/api/a@x.com/sales-transactions/import",
            data=_upload(content, branchId=alice_branch.id),
            content_type="multipart/form-data",
        )
        assert resp.status_code == 400
        assert resp.get_json()["error"].startswith("Row 2:")
        assert db_rows(alice) == []

    def test_oversized_price_is_a_row_error(self, client, alice):
        resp = client.post(
            "/api/a@x.com/sales-transactions/import/preview",
            data=_upload("date,product,price\n2024-01-10,Gold,1e30\n"),
            content_type="multipart/form-data",
        )
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Row 1: price and quantity must be numeric"}

    def test_missing_file_rejected(self, client, alice):

        resp = client.post("/api/a@x.com/transactions/import/preview", data={}, content_type="multipart/form-data")
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "CSV file is required"}

    def test_commit_for_unknown_user_is_bad_request(self, client, app):
        resp = client.post(
            "/api/ghost@x.com/transactions/import",
            data=_upload(),
            content_type="multipart/form-data",
        )
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "User Not Found"}


class TestParseCsv:
    def test_missing_columns_reported(self):
        with pytest.raises(ValidationError) as exc:
            parse_csv(io.BytesIO(b"date,product\n2024-01-01,x\n"))
        assert exc.value.message == "Missing required column(s): price"

    def test_bom_is_stripped(self):
        rows = parse_csv(io.BytesIO("\ufeffdate,product,price\n2024-01-01,x,1\n".encode("utf-8")))
        assert rows[0].product == "x"

    def test_row_limit(self):
        content = "date,product,price\n" + "2024-01-01,x,1\n" * 3
        with pytest.raises(ValidationError) as exc:
            parse_csv(io.BytesIO(content.encode()), max_rows=2)
        assert exc.value.message == "Import is limited to 2 rows"

    def test_header_only_file_rejected(self):
        with pytest.raises(ValidationError) as exc:
            parse_csv(io.BytesIO(b"date,product,price\n"))
        assert exc.value.message == "CSV file has no rows"

    def test_quantity_cap(self):
        with pytest.raises(ValidationError) as exc:
            parse_csv(io.BytesIO(b"date,product,price,quantity\n2024-01-01,x,1,100000000000000000000\n"))
        assert exc.value.message == "Row 1: quantity must be <= 1000000000"

    def test_computed_total_out_of_range(self):
        with pytest.raises(ValidationError) as exc:
            parse_csv(io.BytesIO(b"date,product,price,quantity\n2024-01-01,x,1e25,1000\n"))
        assert exc.value.message == "Row 1: total must be numeric and within range"
