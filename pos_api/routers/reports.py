from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pos_api.dependencies import get_db
from pos_api.schemas.report import ReportSummary
from pos_api.services.report_service import get_today_summary

router = APIRouter(prefix="/api/report", tags=["Reports"])


@router.get("/today", response_model=ReportSummary)
def today_summary(db: Session = Depends(get_db)):
    return get_today_summary(db)
