"""Dependency injection for FastAPI endpoints"""

import logging

from fastapi import HTTPException, Request

from starling_spend.domain.exceptions import (
    AuthError,
    DecodeError,
    StarlingSpendError,
    TransportError,
    UnderdeterminedFitError,
)
from starling_spend.infrastructure.clients.starling import StarlingClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_starling_client(request: Request) -> StarlingClient:
    """Provide bank API client built from the app's settings"""
    return StarlingClient(request.app.state.settings)


def to_http_exception(error: StarlingSpendError, request_id: str) -> HTTPException:
    """Map a client or analysis error onto an HTTP response, logging it"""
    if isinstance(error, AuthError):
        logging.error(f"Bank API auth error: {error}", extra={"request_id": request_id})
        return HTTPException(status_code=502, detail="Bank API rejected credentials")
    if isinstance(error, TransportError):
        logging.error(f"Bank API error: {error}", extra={"request_id": request_id})
        return HTTPException(status_code=503, detail="Bank service unavailable")
    if isinstance(error, DecodeError):
        logging.error(f"Bank API decode error: {error}", extra={"request_id": request_id})
        return HTTPException(status_code=502, detail="Bank service returned an unexpected response")
    if isinstance(error, UnderdeterminedFitError):
        logging.warning(f"Insufficient data: {error}", extra={"request_id": request_id})
        return HTTPException(status_code=422, detail=str(error))
    logging.error(f"Unexpected error: {error}", extra={"request_id": request_id})
    return HTTPException(status_code=500, detail="Internal server error")
