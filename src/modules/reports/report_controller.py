# src/modules/reports/report_controller.py

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.modules.reports import report_service, schemas
from src.common.database.database import get_db_session
from src.auth.dependencies import get_current_user
from src.models.models import Profile

router = APIRouter(prefix="/reports", tags=["reports"])

@router.get("/monthly", response_model=schemas.MonthlyReportResponse)
async def get_monthly_report(
    year: int = Query(..., ge=2000, le=2100),
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Income, expenses and balance for each month of the year.
    """
    return await report_service.monthly_report(current_user.id, year, db)

@router.get("/categories", response_model=schemas.CategoryReportResponse)
async def get_category_report(
    year: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    return await report_service.category_report(current_user.id, year, month, db)

@router.get("/weekly", response_model=schemas.WeeklyReportResponse)
async def get_weekly_report(
    year: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    return await report_service.weekly_report(current_user.id, year, month, db)

@router.get("/comparison", response_model=schemas.ComparisonReportResponse)
async def get_comparison_report(
    year: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Expenses per category against the previous month.
    """
    return await report_service.comparison_report(current_user.id, year, month, db)
