from pos_api.services.checkout_service import create_transaction, get_transaction
from pos_api.services.report_service import get_today_summary

__all__ = [
    "create_transaction",
    "get_today_summary",
    "get_transaction",
]
