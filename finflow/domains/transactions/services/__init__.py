from finflow.domains.transactions.services import import_service, report_service
from finflow.domains.transactions.services.transaction_service import (
    STORES,
    TransactionStore,
    get_store,
    purchase_transactions,
    sales_transactions,
    transactions,
)

__all__ = [
    "STORES",
    "TransactionStore",
    "get_store",
    "transactions",
    "sales_transactions",
    "purchase_transactions",
    "import_service",
    "report_service",
]
