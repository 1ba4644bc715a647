import logging
from typing import Iterable

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from pos_api.core.errors import (
    CheckoutValidationError,
    InsufficientStockError,
    PosError,
    ProductNotFoundError,
    TransactionNotFoundError,
)
from pos_api.models.product import Product
from pos_api.models.transaction import Transaction, TransactionDetail
from pos_api.schemas.transaction import CheckoutItem

logger = logging.getLogger(__name__)


def _lock_product(db: Session, product_id: int):
    return db.execute(
        select(Product.name, Product.price, Product.stock)
        .where(Product.id == product_id)
        .with_for_update()
    ).first()


def _decrement_stock(db: Session, product_id: int, quantity: int) -> bool:
    result = db.execute(
        update(Product)
        .where(Product.id == product_id, Product.stock >= quantity)
        .values(stock=Product.stock - quantity)
    )
    return result.rowcount == 1


def create_transaction(db: Session, items: Iterable[CheckoutItem]) -> Transaction:
    items = list(items)
    if not items:
        raise CheckoutValidationError("items cannot be empty")

    try:
        total_amount = 0
        details = []
        for item in items:
            if item.quantity <= 0:
                raise CheckoutValidationError(
                    "invalid quantity for product {}".format(item.product_id)
                )

            row = _lock_product(db, item.product_id)
            if row is None:
                raise ProductNotFoundError(item.product_id)
            if row.stock < item.quantity:
                raise InsufficientStockError(item.product_id, item.quantity, row.stock)

            subtotal = row.price * item.quantity
            total_amount += subtotal

            if not _decrement_stock(db, item.product_id, item.quantity):
                raise InsufficientStockError(item.product_id, item.quantity, row.stock)

            details.append(
                TransactionDetail(
                    product_id=item.product_id,
                    product_name=row.name,
                    quantity=item.quantity,
                    subtotal=subtotal,
                )
            )

        transaction = Transaction(total_amount=total_amount, details=[])
        db.add(transaction)
        db.flush()

        for detail in details:
            detail.transaction_id = transaction.id
            transaction.details.append(detail)
        db.flush()
        db.commit()
    except PosError as exc:
        db.rollback()
        logger.warning(
            "Checkout rejected: %s",
            exc,
            extra={"product_id": getattr(exc, "product_id", None)},
        )
        raise
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Checkout committed: transaction %s, %s line(s), total %s",
        transaction.id,
        len(details),
        transaction.total_amount,
        extra={
            "transaction_id": transaction.id,
            "line_count": len(details),
            "total_amount": transaction.total_amount,
        },
    )
    return transaction


def get_transaction(db: Session, transaction_id: int) -> Transaction:
    transaction = (
        db.execute(
            select(Transaction)
            .options(selectinload(Transaction.details))
            .where(Transaction.id == transaction_id)
        )
        .scalars()
        .first()
    )
    if transaction is None:
        raise TransactionNotFoundError(transaction_id)
    return transaction


__all__ = ["create_transaction", "get_transaction"]
