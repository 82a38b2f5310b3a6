"""GET /v1/spending - Spend breakdowns and monthly trend as chart series"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from starling_spend.api.dependencies import get_request_id, get_starling_client, to_http_exception
from starling_spend.api.v1.schemas import (
    GroupBy,
    SpendingItem,
    SpendingResponse,
    TrendPoint,
    TrendResponse,
)
from starling_spend.domain.aggregation import (
    monthly_spend,
    rank_totals,
    spend_by_category,
    spend_by_merchant,
    to_points,
)
from starling_spend.domain.exceptions import StarlingSpendError
from starling_spend.domain.fitting import fit
from starling_spend.infrastructure.clients.starling import StarlingClient

router = APIRouter()


def _check_range(start: date, end: date) -> None:
    if start > end:
        raise HTTPException(status_code=400, detail="start must not be after end")


@router.get("/spending", response_model=SpendingResponse)
async def get_spending(
    request: Request,
    start: date = Query(..., description="First day of the range"),
    end: date = Query(..., description="Last day of the range"),
    group_by: GroupBy = Query(GroupBy.CATEGORY, description="Group by spending category or merchant"),
    limit: Optional[int] = Query(None, gt=0, description="Keep only the largest groups"),
    client: StarlingClient = Depends(get_starling_client),
):
    """
    Spend per spending category or merchant, largest first.

    Amounts are negated so outgoing card payments count as positive spend.
    """
    _check_range(start, end)
    try:
        transactions = await client.get_card_transactions(start, end)
    except StarlingSpendError as e:
        raise to_http_exception(e, get_request_id(request)) from e

    if group_by is GroupBy.MERCHANT:
        totals = spend_by_merchant(transactions)
    else:
        totals = spend_by_category(transactions)

    items = [SpendingItem(label=label, total=float(total)) for label, total in rank_totals(totals, limit)]
    return SpendingResponse(group_by=group_by, start=start, end=end, items=items)


@router.get("/spending/trend", response_model=TrendResponse)
async def get_spending_trend(
    request: Request,
    start: date = Query(..., description="First day of the range"),
    end: date = Query(..., description="Last day of the range"),
    degree: int = Query(2, ge=0, le=3, description="Polynomial degree of the trend"),
    client: StarlingClient = Depends(get_starling_client),
):
    """
    Monthly spend with a least-squares polynomial trend.

    Flow:
    1. Fetch card transactions for the range
    2. Sum spend per calendar month
    3. Fit the trend over months numbered 1..n
    """
    _check_range(start, end)
    request_id = get_request_id(request)
    try:
        transactions = await client.get_card_transactions(start, end)
        series = monthly_spend(transactions)
        points = to_points(series)
        polynomial = fit(points, degree)
    except StarlingSpendError as e:
        raise to_http_exception(e, request_id) from e

    logging.info(
        "Spend trend fitted",
        extra={"request_id": request_id, "step": "trend_fit", "degree": degree, "months": len(points)},
    )
    return TrendResponse(
        start=start,
        end=end,
        degree=degree,
        coefficients=list(polynomial.coefficients),
        points=[
            TrendPoint(month=f"{year:04d}-{month:02d}", x=x, spend=y, fitted=polynomial(x))
            for (year, month), (x, y) in zip(series, points)
        ],
    )
