from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pos_api.core.errors import (
    CatalogValidationError,
    CategoryNotFoundError,
    ProductInUseError,
    ProductNotFoundError,
)
from pos_api.models.category import Category
from pos_api.models.product import Product
from pos_api.models.transaction import TransactionDetail
from pos_api.schemas.product import ProductCreate, ProductUpdate


def _clean_name(value: str) -> str:
    name = (value or "").strip()
    if not name:
        raise CatalogValidationError("product name is required")
    return name


def _resolve_category(db: Session, category_id: Optional[int]) -> Optional[Category]:
    if category_id is None:
        return None
    category = db.get(Category, category_id)
    if category is None:
        raise CategoryNotFoundError(category_id)
    return category


def list_products(db: Session, name: Optional[str] = None) -> list[Product]:
    stmt = select(Product).order_by(Product.id)
    if name is not None and name.strip():
        stmt = stmt.where(Product.name.icontains(name.strip(), autoescape=True))
    return list(db.execute(stmt).scalars().unique().all())


def get_product(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise ProductNotFoundError(product_id)
    return product


def create_product(db: Session, payload: ProductCreate) -> Product:
    name = _clean_name(payload.name)
    category = _resolve_category(db, payload.category_id)
    product = Product(
        name=name,
        price=payload.price,
        stock=payload.stock,
        category=category,
    )
    try:
        db.add(product)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return product


def update_product(db: Session, product_id: int, payload: ProductUpdate) -> Product:
    product = get_product(db, product_id)
    name = _clean_name(payload.name)
    category = _resolve_category(db, payload.category_id)
    try:
        product.name = name
        product.price = payload.price
        product.stock = payload.stock
        product.category = category
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return product


def delete_product(db: Session, product_id: int) -> None:
    product = get_product(db, product_id)
    has_history = db.execute(
        select(TransactionDetail.id).where(TransactionDetail.product_id == product_id).limit(1)
    ).first()
    if has_history:
        raise ProductInUseError(product_id)
    try:
        db.delete(product)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


__all__ = [
    "create_product",
    "delete_product",
    "get_product",
    "list_products",
    "update_product",
]
