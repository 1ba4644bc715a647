import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pos_api.models.transaction import Transaction, TransactionDetail
from pos_api.schemas.report import ReportSummary, TopProduct

logger = logging.getLogger(__name__)


def _created_today():
    # Compare in the database so "today" is the store's calendar day.
    return func.date(Transaction.created_at) == func.current_date()


def _top_product(db: Session) -> TopProduct:
    qty_sold = func.sum(TransactionDetail.quantity).label("qty_sold")
    row = db.execute(
        select(
            TransactionDetail.product_id,
            func.max(TransactionDetail.product_name).label("name"),
            qty_sold,
        )
        .join(Transaction, Transaction.id == TransactionDetail.transaction_id)
        .where(_created_today())
        .group_by(TransactionDetail.product_id)
        # ties go to the lowest product id
        .order_by(qty_sold.desc(), TransactionDetail.product_id.asc())
        .limit(1)
    ).first()
    if row is None:
        return TopProduct()
    return TopProduct(name=row.name or "", qty_sold=int(row.qty_sold or 0))


def get_today_summary(db: Session) -> ReportSummary:
    total_revenue, total_transactions = db.execute(
        select(
            func.coalesce(func.sum(Transaction.total_amount), 0),
            func.count(Transaction.id),
        ).where(_created_today())
    ).one()

    try:
        top_product = _top_product(db)
    except SQLAlchemyError:
        logger.warning("Top product lookup failed; reporting without it", exc_info=True)
        db.rollback()
        top_product = TopProduct()

    return ReportSummary(
        total_revenue=int(total_revenue or 0),
        total_transactions=int(total_transactions or 0),
        top_product=top_product,
    )


__all__ = ["get_today_summary"]
