"""Pydantic schemas for API responses"""

from datetime import date
from enum import Enum
from typing import List

from pydantic import BaseModel


class GroupBy(str, Enum):
    """Key used to group spend"""

    CATEGORY = "category"
    MERCHANT = "merchant"


class BalanceResponse(BaseModel):
    """Response for GET /v1/balance"""

    cleared_balance: float
    effective_balance: float
    pending_transactions: float
    available_to_spend: float
    accepted_overdraft: float
    currency: str
    amount: float


class SpendingItem(BaseModel):
    """One bar of a spend breakdown chart"""

    label: str
    total: float


class SpendingResponse(BaseModel):
    """Response for GET /v1/spending"""

    group_by: GroupBy
    start: date
    end: date
    items: List[SpendingItem]


class TrendPoint(BaseModel):
    """Monthly spend with the fitted trend value"""

    month: str  # YYYY-MM
    x: float
    spend: float
    fitted: float


class TrendResponse(BaseModel):
    """Response for GET /v1/spending/trend"""

    start: date
    end: date
    degree: int
    coefficients: List[float]
    points: List[TrendPoint]
