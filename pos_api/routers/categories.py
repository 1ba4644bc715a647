from fastapi import APIRouter, Depends, HTTPException, Path, Response, status
from sqlalchemy.orm import Session

from pos_api.core.constants import MAX_DB_INT
from pos_api.core.errors import PosError
from pos_api.dependencies import get_db
from pos_api.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from pos_api.services import category_service

router = APIRouter(prefix="/api/categories", tags=["Categories"])


@router.get("", response_model=list[CategoryRead])
def list_categories(db: Session = Depends(get_db)):
    return category_service.list_categories(db)


@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    try:
        return category_service.create_category(db, payload)
    except PosError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc


@router.get("/{category_id}", response_model=CategoryRead)
def get_category(category_id: int = Path(le=MAX_DB_INT), db: Session = Depends(get_db)):
    try:
        return category_service.get_category(db, category_id)
    except PosError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc


@router.put("/{category_id}", response_model=CategoryRead)
def update_category(payload: CategoryUpdate, category_id: int = Path(le=MAX_DB_INT), db: Session = Depends(get_db)):
    try:
        return category_service.update_category(db, category_id, payload)
    except PosError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: int = Path(le=MAX_DB_INT), db: Session = Depends(get_db)):
    try:
        category_service.delete_category(db, category_id)
    except PosError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
