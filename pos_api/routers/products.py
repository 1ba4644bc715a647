from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response, status
from sqlalchemy.orm import Session

from pos_api.core.constants import MAX_DB_INT
from pos_api.core.errors import PosError
from pos_api.dependencies import get_db
from pos_api.schemas.product import ProductCreate, ProductRead, ProductUpdate
from pos_api.services import product_service

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get("", response_model=list[ProductRead])
def list_products(
    name: Optional[str] = Query(None, description="Case-insensitive name filter"),
    db: Session = Depends(get_db),
):
    return product_service.list_products(db, name=name)


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    try:
        return product_service.create_product(db, payload)
    except PosError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: int = Path(le=MAX_DB_INT), db: Session = Depends(get_db)):
    try:
        return product_service.get_product(db, product_id)
    except PosError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc


@router.put("/{product_id}", response_model=ProductRead)
def update_product(payload: ProductUpdate, product_id: int = Path(le=MAX_DB_INT), db: Session = Depends(get_db)):
    try:
        return product_service.update_product(db, product_id, payload)
    except PosError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(product_id: int = Path(le=MAX_DB_INT), db: Session = Depends(get_db)):
    try:
        product_service.delete_product(db, product_id)
    except PosError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
