from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pos_api.core.errors import CatalogValidationError, CategoryNotFoundError
from pos_api.models.category import Category
from pos_api.schemas.category import CategoryCreate, CategoryUpdate


def _clean_name(value: str) -> str:
    name = (value or "").strip()
    if not name:
        raise CatalogValidationError("category name is required")
    return name


def list_categories(db: Session) -> list[Category]:
    return list(db.execute(select(Category).order_by(Category.id)).scalars().all())


def get_category(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if category is None:
        raise CategoryNotFoundError(category_id)
    return category


def create_category(db: Session, payload: CategoryCreate) -> Category:
    category = Category(name=_clean_name(payload.name), description=payload.description or "")
    try:
        db.add(category)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return category


def update_category(db: Session, category_id: int, payload: CategoryUpdate) -> Category:
    category = get_category(db, category_id)
    name = _clean_name(payload.name)
    try:
        category.name = name
        category.description = payload.description or ""
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return category


def delete_category(db: Session, category_id: int) -> None:
    """Delete a category; its products stay, uncategorised."""
    category = get_category(db, category_id)
    try:
        db.delete(category)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.expire_all()


__all__ = [
    "create_category",
    "delete_category",
    "get_category",
    "list_categories",
    "update_category",
]
