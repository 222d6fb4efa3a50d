"""
Order Analysis API Endpoints
Daily/weekly revenue series and top customer/product rankings
"""
from fastapi import APIRouter, HTTPException, Query
from datetime import date

from orderdesk.repositories.order_analysis_repository import OrderAnalysisRepository

router = APIRouter()


def _validate_range(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must not be after end_date")


@router.get("/daily")
async def get_daily_revenue(
    start_date: date = Query(..., description="First day (inclusive)"),
    end_date: date = Query(..., description="Last day (inclusive)")
):
    """Revenue for every day in range, zero-filled"""
    _validate_range(start_date, end_date)

    try:
        points = OrderAnalysisRepository().get_daily_revenue(start_date, end_date)
        return {"status": "success", "count": len(points), "data": [p.to_dict() for p in points]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching daily revenue: {str(e)}")


@router.get("/weekly")
async def get_weekly_revenue(
    start_date: date = Query(...),
    end_date: date = Query(...)
):
    """Revenue per Saturday-starting week, zero-filled"""
    _validate_range(start_date, end_date)

    try:
        points = OrderAnalysisRepository().get_weekly_revenue(start_date, end_date)
        return {"status": "success", "count": len(points), "data": [p.to_dict() for p in points]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching weekly revenue: {str(e)}")


@router.get("/top-customers")
async def get_top_customers(
    start_date: date = Query(...),
    end_date: date = Query(...)
):
    """Top 10 customers by revenue plus an Other row"""
    _validate_range(start_date, end_date)

    try:
        rows = OrderAnalysisRepository().get_top_customers(start_date, end_date)
        return {"status": "success", "data": [row.to_dict() for row in rows]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching top customers: {str(e)}")


@router.get("/top-products")
async def get_top_products(
    start_date: date = Query(...),
    end_date: date = Query(...)
):
    """Top 10 products by revenue plus an Other row"""
    _validate_range(start_date, end_date)

    try:
        rows = OrderAnalysisRepository().get_top_products(start_date, end_date)
        return {"status": "success", "data": [row.to_dict() for row in rows]}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching top products: {str(e)}")


@router.get("/summary")
async def get_revenue_summary(
    start_date: date = Query(...),
    end_date: date = Query(...)
):
    _validate_range(start_date, end_date)

    try:
        summary = OrderAnalysisRepository().get_revenue_summary(start_date, end_date)
        return {"status": "success", "data": summary.to_dict()}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching revenue summary: {str(e)}")
