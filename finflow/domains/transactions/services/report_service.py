"""Summaries, CSV export and PDF reports over the transaction stores.

Sums are accumulated as Decimal and converted to float only when the result
dict is built for the response.
"""

from __future__ import annotations

import csv
import datetime as dt
import io
import logging
from collections import OrderedDict
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from jinja2 import BaseLoader, Environment, select_autoescape

from finflow.core.errors import NotFoundError, UpstreamError
from finflow.core.types import CENTS, to_decimal
from finflow.core.utils.validation import resolve_date_range
from finflow.domains.branches.services.branch_service import get_branch
from finflow.domains.transactions.services.transaction_service import (
    TransactionStore,
    purchase_transactions,
    sales_transactions,
    transactions,
)

logger = logging.getLogger(__name__)

SUMMARY_SECTIONS = (
    ("sales", sales_transactions),
    ("purchases", purchase_transactions),
    ("transactions", transactions),
)

EXPORT_COLUMNS = ("id", "date", "product", "category", "branch", "price", "quantity", "total")


def _sum(rows) -> Decimal:
    return sum((Decimal(r.total) for r in rows), Decimal("0")).quantize(CENTS)


def _category_breakdown(rows) -> List[dict]:
    buckets: "OrderedDict[Optional[str], dict]" = OrderedDict()
    for row in rows:
        bucket = buckets.setdefault(
            row.category_id,
            {"categoryId": row.category_id, "category": row.category, "total": Decimal("0"), "count": 0},
        )
        bucket["total"] += Decimal(row.total)
        bucket["count"] += 1
    items = sorted(buckets.values(), key=lambda b: b["total"], reverse=True)
    return [{**item, "total": float(item["total"].quantize(CENTS))} for item in items]


def summarize(
    user_id: str,
    *,
    from_date: Optional[dt.date] = None,
    to_date: Optional[dt.date] = None,
    branch_id: Optional[str] = None,
    days: int = 30,
) -> Dict[str, Any]:
    start, end = resolve_date_range(from_date, to_date, days=days)
    summary: Dict[str, Any] = {"from": start.isoformat(), "to": end.isoformat(), "branchId": branch_id}
    totals: Dict[str, Decimal] = {}
    for key, store in SUMMARY_SECTIONS:
        rows = store.list(user_id, from_date=from_date, to_date=to_date, branch_id=branch_id, days=days)
        totals[key] = _sum(rows)
        summary[key] = {
            "total": float(totals[key]),
            "count": len(rows),
            "categories": _category_breakdown(rows),
        }
    summary["net"] = float(totals["sales"] - totals["purchases"])
    return summary


def export_csv(rows: Sequence) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(EXPORT_COLUMNS)
    for row in rows:
        writer.writerow(
            [
                row.id,
                row.date.isoformat(),
                row.product,
                row.category or "",
                row.branch or "",
                str(to_decimal(row.price)),
                row.quantity,
                str(to_decimal(row.total)),
            ]
        )
    return buffer.getvalue()


REPORT_CSS = """
  @page { size: A4; margin: 18mm; }
  html, body { font-family: Inter, system-ui, -apple-system, Segoe UI, Roboto, sans-serif; font-size: 9pt; color: #111; }
  .header-wrap { display: flex; justify-content: space-between; border-bottom: 1px solid #ddd; padding-bottom: 6px; margin-bottom: 10px; }
  .h-title { font-size: 12pt; font-weight: 700; }
  .h-sub { font-size: 9pt; color: #555; }
  table { width: 100%; border-collapse: collapse; font-variant-numeric: tabular-nums; }
  thead { display: table-header-group; }
  tr { page-break-inside: avoid; }
  th { text-align: left; border-bottom: 1px solid #111; padding: 6px 8px; }
  td { padding: 4px 6px; border-bottom: 1px solid #e5e7eb; }
  tbody tr:nth-child(even) td { background: #f9fafb; }
  td.num, th.num { text-align: right; }
  .totals td { font-weight: 700; border-bottom: none; }
  .grand td { border-top: 2px solid #111; font-size: 10pt; }
"""

REPORT_TEMPLATE = r"""
<!DOCTYPE html><html><head><meta charset="utf-8"><title>{{ org }} - {{ title }}</title>
<style>{{ css }}</style></head><body>
<div class="header-wrap">
  <div>
    <div class="h-title">{{ org }}</div>
    <div class="h-sub">{{ title }} - {{ period }}</div>
    {% if branch %}<div class="h-sub">Branch: {{ branch }}</div>{% endif %}
    {% if payment_type %}<div class="h-sub">Payment: {{ payment_type }}</div>{% endif %}
  </div>
  <div class="h-sub">Generated {{ generated_at }}</div>
</div>
<table>
  <thead><tr><th>Date</th><th>Product</th><th>Category</th><th class="num">Price</th><th class="num">Qty</th><th class="num">Total</th></tr></thead>
  <tbody>
  {% for row in rows %}
    <tr><td>{{ row.date }}</td><td>{{ row.product }}</td><td>{{ row.category or "-" }}</td>
      <td class="num">{{ row.price }}</td><td class="num">{{ row.quantity }}</td><td class="num">{{ row.total }}</td></tr>
  {% else %}
    <tr><td colspan="6">No transactions in this period.</td></tr>
  {% endfor %}
  </tbody>
  <tfoot>
    <tr class="totals"><td colspan="5" class="num">Subtotal</td><td class="num">{{ subtotal }}</td></tr>
    <tr class="totals"><td colspan="5" class="num">GST ({{ gst_rate }}%)</td><td class="num">{{ gst_amount }}</td></tr>
    <tr class="totals grand"><td colspan="5" class="num">Total</td><td class="num">{{ grand_total }}</td></tr>
  </tfoot>
</table>
</body></html>
"""

_env = Environment(loader=BaseLoader(), autoescape=select_autoescape(default=True))


def build_report_context(
    user_id: str,
    store: TransactionStore,
    *,
    org: str,
    from_date: Optional[dt.date] = None,
    to_date: Optional[dt.date] = None,
    branch_id: Optional[str] = None,
    category_ids: Sequence[str] = (),
    gst: Decimal = Decimal("0"),
    payment_type: Optional[str] = None,
    days: int = 30,
) -> Dict[str, Any]:
    branch_name = None
    if branch_id:
        branch = get_branch(user_id, branch_id)
        if not branch:
            raise NotFoundError("Branch Not Found")
        branch_name = branch.name
    start, end = resolve_date_range(from_date, to_date, days=days)
    rows = store.list(user_id, from_date=from_date, to_date=to_date, branch_id=branch_id, days=days)
    if category_ids:
        wanted = set(category_ids)
        rows = [r for r in rows if r.category_id in wanted]
    # Oldest first on paper.
    rows = sorted(rows, key=lambda r: (r.date, r.product))
    subtotal = _sum(rows)
    gst_amount = to_decimal(subtotal * Decimal(gst) / Decimal("100"))
    period = start.isoformat() if start == end else f"{start.isoformat()} to {end.isoformat()}"
    return {
        "org": org,
        "title": f"{store.label} Report",
        "period": period,
        "branch": branch_name,
        "payment_type": payment_type,
        "generated_at": dt.datetime.utcnow().strftime("%Y-%m-%d %H:%M UTC"),
        "rows": [
            {
                "date": r.date.isoformat(),
                "product": r.product,
                "category": r.category,
                "price": str(to_decimal(r.price)),
                "quantity": r.quantity,
                "total": str(to_decimal(r.total)),
            }
            for r in rows
        ],
        "subtotal": str(subtotal),
        "gst_rate": format(Decimal(gst).normalize(), "f"),
        "gst_amount": str(gst_amount),
        "grand_total": str(to_decimal(subtotal + gst_amount)),
    }


def render_report_html(context: Dict[str, Any]) -> str:
    return _env.from_string(REPORT_TEMPLATE).render(css=REPORT_CSS, **context)


def render_pdf(html: str) -> bytes:
    try:
        from weasyprint import HTML
    except (ImportError, OSError) as exc:
        logger.error("WeasyPrint unavailable: %s", exc)
        raise UpstreamError("PDF renderer is unavailable") from exc
    return HTML(string=html).write_pdf()
