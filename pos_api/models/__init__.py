import importlib

from pos_api.models.category import Category
from pos_api.models.product import Product
from pos_api.models.transaction import Transaction, TransactionDetail


def import_all_models() -> None:
    for module_name in (
        "pos_api.models.category",
        "pos_api.models.product",
        "pos_api.models.transaction",
    ):
        importlib.import_module(module_name)


__all__ = [
    "Category",
    "Product",
    "Transaction",
    "TransactionDetail",
    "import_all_models",
]
