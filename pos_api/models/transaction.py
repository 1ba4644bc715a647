from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import relationship

from pos_api.database.base import Base


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    total_amount = Column(BigInteger, nullable=False)
    # Set by the database so "today" follows the store's clock.
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    details = relationship(
        "TransactionDetail",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionDetail.id",
    )

    __table_args__ = (
        Index("idx_transactions_created_at", "created_at"),
    )
    __mapper_args__ = {"eager_defaults": True}


class TransactionDetail(Base):
    __tablename__ = "transaction_details"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(
        Integer,
        ForeignKey("transactions.id", ondelete="CASCADE"),
        nullable=False,
    )
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    # Snapshot taken at sale time, not a live reference to products.name.
    product_name = Column(String, nullable=False, default="")
    quantity = Column(Integer, nullable=False)
    subtotal = Column(BigInteger, nullable=False)

    transaction = relationship("Transaction", back_populates="details")

    __table_args__ = (
        Index("idx_transaction_details_transaction", "transaction_id"),
        Index("idx_transaction_details_product", "product_id"),
    )


__all__ = ["Transaction", "TransactionDetail"]
