"""GET /v1/balance - Current account balance"""

from fastapi import APIRouter, Depends, Request

from starling_spend.api.dependencies import get_request_id, get_starling_client, to_http_exception
from starling_spend.api.v1.schemas import BalanceResponse
from starling_spend.domain.exceptions import StarlingSpendError
from starling_spend.infrastructure.clients.starling import StarlingClient

router = APIRouter()


@router.get("/balance", response_model=BalanceResponse)
async def get_balance(
    request: Request,
    client: StarlingClient = Depends(get_starling_client),
):
    """Fetch the account balance from the bank API"""
    try:
        balance = await client.get_balance()
    except StarlingSpendError as e:
        raise to_http_exception(e, get_request_id(request)) from e

    return BalanceResponse(
        cleared_balance=float(balance.cleared_balance),
        effective_balance=float(balance.effective_balance),
        pending_transactions=float(balance.pending_transactions),
        available_to_spend=float(balance.available_to_spend),
        accepted_overdraft=float(balance.accepted_overdraft),
        currency=balance.currency,
        amount=float(balance.amount),
    )
