"""Pytest fixtures for testing"""

import json
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from starling_spend.api.dependencies import get_starling_client
from starling_spend.api.main import create_app
from starling_spend.config import Settings
from starling_spend.domain.models import CardTransaction
from starling_spend.infrastructure.clients.starling import StarlingClient

TEST_BASE_URL = "https://api.test.bank"
TEST_TOKEN = "test-token-abc123"

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at a fake bank API"""
    return Settings(base_url=TEST_BASE_URL, access_token=TEST_TOKEN, log_level="DEBUG")


@pytest.fixture
def make_client(settings: Settings) -> Callable[[Handler], StarlingClient]:
    """Build a StarlingClient whose requests are answered by a handler"""

    def _make(handler: Handler) -> StarlingClient:
        return StarlingClient(settings, transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def balance_payload() -> dict:
    """Balance endpoint response"""
    return {
        "clearedBalance": 370.59,
        "effectiveBalance": 350.09,
        "pendingTransactions": 20.5,
        "availableToSpend": 1350.09,
        "acceptedOverdraft": 1000,
        "currency": "GBP",
        "amount": 370.59,
    }


def transaction_payload(
    txn_id: str,
    amount: float,
    created: str,
    narrative: str = "Tesco",
    category: str = "GROCERIES",
    **overrides,
) -> dict:
    payload = {
        "id": txn_id,
        "currency": "GBP",
        "amount": amount,
        "direction": "OUTBOUND" if amount < 0 else "INBOUND",
        "created": created,
        "narrative": narrative,
        "source": "MASTER_CARD",
        "spendingCategory": category,
        "merchantId": f"merchant-{narrative.lower()}",
        "merchantLocationId": f"location-{narrative.lower()}",
        "balance": 1000.0,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def transactions_payload() -> List[dict]:
    """Card transactions over three months"""
    return [
        transaction_payload("t1", -12.5, "2017-01-05T10:00:00.000Z", "Tesco", "GROCERIES"),
        transaction_payload("t2", -30.0, "2017-01-20T18:30:00.000Z", "Pret", "EATING_OUT"),
        transaction_payload("t3", -20.0, "2017-02-03T09:15:00.000Z", "Tesco", "GROCERIES"),
        transaction_payload("t4", -45.25, "2017-02-14T20:00:00.000Z", "Dishoom", "EATING_OUT"),
        transaction_payload("t5", -8.0, "2017-03-01T08:00:00.000Z", "Pret", "EATING_OUT"),
        transaction_payload("t6", -60.0, "2017-03-11T12:00:00.000Z", "Uber", "TRANSPORT"),
    ]


@pytest.fixture
def sample_transactions() -> List[CardTransaction]:
    """Decoded card transactions for aggregation tests"""
    base = datetime(2017, 1, 1, tzinfo=timezone.utc)
    rows = [
        ("GROCERIES", "Tesco", "-12.50", 4),
        ("EATING_OUT", "Pret", "-30.00", 19),
        ("GROCERIES", "Sainsbury's", "-20.00", 33),
        ("EATING_OUT", "Dishoom", "-45.25", 44),
        ("EATING_OUT", "Pret", "-8.00", 59),
        ("TRANSPORT", "Uber", "-60.00", 69),
        ("GROCERIES", "Tesco", "5.00", 70),  # refund
    ]
    return [
        CardTransaction(
            id=f"txn_{i}",
            currency="GBP",
            amount=Decimal(amount),
            direction="OUTBOUND" if Decimal(amount) < 0 else "INBOUND",
            created=base + timedelta(days=offset),
            narrative=narrative,
            source="MASTER_CARD",
            spending_category=category,
        )
        for i, (category, narrative, amount, offset) in enumerate(rows)
    ]


def json_response(payload, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload), headers={"Content-Type": "application/json"})


@pytest.fixture
def api_client(settings: Settings, make_client) -> Callable[[Handler], TestClient]:
    """FastAPI test client whose bank API calls go to a handler"""

    def _make(handler: Handler) -> TestClient:
        app = create_app(settings)
        app.dependency_overrides[get_starling_client] = lambda: make_client(handler)
        return TestClient(app)

    return _make
