from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.orm import Session

from pos_api.core.constants import MAX_DB_INT
from pos_api.core.errors import PosError
from pos_api.dependencies import get_db
from pos_api.schemas.transaction import CheckoutRequest, TransactionRead
from pos_api.services.checkout_service import create_transaction, get_transaction

router = APIRouter(prefix="/api", tags=["Checkout"])


@router.post("/checkout", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
def checkout(payload: CheckoutRequest, db: Session = Depends(get_db)):
    try:
        return create_transaction(db, payload.items)
    except PosError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc


@router.get("/transactions/{transaction_id}", response_model=TransactionRead)
def read_transaction(transaction_id: int = Path(le=MAX_DB_INT), db: Session = Depends(get_db)):
    try:
        return get_transaction(db, transaction_id)
    except PosError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
