from fastapi import APIRouter, Depends, HTTPException, Query

from haedok.config import settings
from haedok.schemas.analysis import AnalysisRequest, PersonalizedROIRequest, ROIAnalysis, SavingsReportRequest
from haedok.schemas.catalog import Catalog
from haedok.schemas.savings import InvestmentDataPoint, SavingsReport
from haedok.services.catalog import get_catalog
from haedok.services.investment import downsample_series, generate_investment_data_points
from haedok.services.personalized_roi import PersonalizedROIResult, calculate_personalized_roi
from haedok.services.roi import analyze_usage
from haedok.services.savings import AnalysisResult, generate_savings_report, run_analysis

router = APIRouter(prefix="/analysis", tags=["analysis"])


@router.post("/roi", response_model=list[ROIAnalysis])
async def roi_analysis(
    body: AnalysisRequest,
    catalog: Catalog = Depends(get_catalog),
):
    return analyze_usage(body.subscriptions, body.usage, catalog)


@router.post("/savings-report", response_model=SavingsReport)
async def savings_report(
    body: SavingsReportRequest,
    catalog: Catalog = Depends(get_catalog),
):
    return generate_savings_report(body.subscriptions, body.roi_analyses, catalog)


@router.post("/run", response_model=AnalysisResult)
async def run(
    body: AnalysisRequest,
    years: int = Query(default=5, ge=1, le=5),
    catalog: Catalog = Depends(get_catalog),
):
    return run_analysis(body.subscriptions, body.usage, catalog, years=years, max_points=settings.CHART_MAX_POINTS)


@router.get("/investment", response_model=list[InvestmentDataPoint])
async def investment_series(
    monthly_amount: float = Query(..., ge=0),
    years: int = Query(default=5, ge=1, le=30),
    full: bool = Query(default=False),
):
    points = generate_investment_data_points(monthly_amount, years)
    if full:
        return points
    return downsample_series(points, settings.CHART_MAX_POINTS)


@router.post("/personalized-roi", response_model=PersonalizedROIResult)
async def personalized_roi(body: PersonalizedROIRequest):
    result = calculate_personalized_roi(body.calculator_name, body.inputs, body.subscription_price)
    if result is None:
        raise HTTPException(status_code=404, detail="Calculator not found")
    return result
