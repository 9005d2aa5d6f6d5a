"""Seed demo data for a FinFlow user.

Usage:
    python -m finflow.scripts.seed_demo demo@example.com
"""

from __future__ import annotations

import datetime as dt
import logging
import sys
from decimal import Decimal

from finflow.core.users.services import get_or_create_user
from finflow.domains.branches.services.branch_service import create_branch, list_branches
from finflow.domains.categories.services.category_service import create_category, list_categories
from finflow.domains.transactions.services.transaction_service import (
    purchase_transactions,
    sales_transactions,
    transactions,
)

logger = logging.getLogger(__name__)

DEMO_CATEGORIES = ("Utilities", "Inventory", "Services")
DEMO_BRANCHES = ("Main Street", "Harbor")

# (days ago, product, category, price, quantity)
DEMO_SALES = (
    (1, "Espresso beans 1kg", "Inventory", "24.50", 6),
    (3, "Catering order", "Services", "310.00", 1),
    (8, "Gift card", "Services", "50.00", 4),
)
DEMO_PURCHASES = (
    (2, "Green coffee sack", "Inventory", "180.00", 2),
    (10, "Paper cups", "Inventory", "0.12", 500),
)
DEMO_EXPENSES = (
    (5, "Electricity bill", "Utilities", "142.37", 1),
    (12, "Water bill", "Utilities", "38.90", 1),
)


def _ensure_named(existing, create, user_id: str, names) -> dict:
    by_name = {row.name: row.id for row in existing(user_id)}
    for name in names:
        if name not in by_name:
            by_name[name] = create(user_id, name).id
    return by_name


def _rows(entries, categories: dict, branch_id: str, today: dt.date) -> list:
    rows = []
    for days_ago, product, category, price, quantity in entries:
        price = Decimal(price)
        rows.append(
            {
                "date": today - dt.timedelta(days=days_ago),
                "product": product,
                "category_id": categories[category],
                "branch_id": branch_id,
                "price": price,
                "quantity": quantity,
                "total": price * quantity,
            }
        )
    return rows


def seed_demo(email: str, *, today: dt.date | None = None) -> dict:
    """Create the user if needed plus demo categories, branches and ledger rows.

    Must run inside an application context. Returns the number of rows added
    per ledger.
    """
    today = today or dt.date.today()
    user = get_or_create_user(email, name="Demo User")
    categories = _ensure_named(list_categories, create_category, user.id, DEMO_CATEGORIES)
    branches = _ensure_named(list_branches, create_branch, user.id, DEMO_BRANCHES)
    branch_id = branches[DEMO_BRANCHES[0]]

    counts = {}
    for store, entries in (
        (sales_transactions, DEMO_SALES),
        (purchase_transactions, DEMO_PURCHASES),
        (transactions, DEMO_EXPENSES),
    ):
        counts[store.resource] = len(store.bulk_create(user.id, _rows(entries, categories, branch_id, today)))
    logger.info("Seeded demo data for user %s: %s", user.id, counts)
    return counts


def main(argv: list[str] | None = None) -> int:
    from finflow import create_app

    args = sys.argv[1:] if argv is None else argv
    if not args:
        print("usage: python -m finflow.scripts.seed_demo EMAIL", file=sys.stderr)
        return 2
    app = create_app()
    with app.app_context():
        counts = seed_demo(args[0])
    print(f"Seeded {counts}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
