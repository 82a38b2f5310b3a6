"""Bank API HTTP client for fetching balances, transactions and merchants"""

import asyncio
import time
from datetime import date
from string import Formatter
from typing import Any, Awaitable, Dict, List, Mapping, Tuple, Type, TypeVar
from urllib.parse import quote

import httpx

from starling_spend.config import Settings
from starling_spend.domain.exceptions import AuthError, DecodeError, StarlingSpendError, TransportError
from starling_spend.domain.models import AccountBalance, AccountDetails, CardTransaction, Entity, Merchant
from starling_spend.infrastructure.observability.logging import log_fetch
from starling_spend.infrastructure.observability.metrics import bank_fetch_latency_histogram, record_fetch_failure

E = TypeVar("E", bound=Entity)


def render_path(template: str, params: Mapping[str, Any] | None = None) -> Tuple[str, Dict[str, Any]]:
    """
    Fill `{name}` placeholders in a resource path from params.

    Returns the rendered path and the params left over for the query string.

    Raises:
        ValueError: A placeholder has no matching param
    """
    params = dict(params or {})
    names = [name for _, name, _, _ in Formatter().parse(template) if name]
    missing = [name for name in names if name not in params]
    if missing:
        raise ValueError(f"Missing path parameter(s) for {template}: {', '.join(missing)}")
    path = template.format(**{name: quote(str(params[name]), safe="") for name in names})
    query = {key: value for key, value in params.items() if key not in names}
    return path, query


class StarlingClient:
    """Client for the bank's token-authenticated JSON API"""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        base_url: str | None = None,
        access_token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if settings is None and (base_url is None or access_token is None):
            raise ValueError("StarlingClient needs settings or both base_url and access_token")
        self.base_url = (base_url or settings.base_url).rstrip("/")
        self._access_token = access_token if access_token is not None else settings.access_token.get_secret_value()
        self.timeout = timeout if timeout is not None else (settings.http_timeout_seconds if settings else 5.0)
        self.transport = transport

    def __repr__(self) -> str:
        return f"StarlingClient(base_url={self.base_url!r})"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._access_token}",
            "Accept": "application/json",
        }

    async def _get_json(self, entity: Type[Entity], params: Mapping[str, Any] | None) -> Any:
        """
        Perform one authenticated GET and return the decoded JSON body.

        Raises:
            TransportError: On timeout, connection failure, or non-2xx status
            AuthError: On 401/403
            DecodeError: When the body is not valid JSON
        """
        path, query = render_path(entity.path, params)
        status_code = None
        start_time = time.perf_counter()
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers(),
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                try:
                    with bank_fetch_latency_histogram.labels(entity=entity.__name__).time():
                        response = await client.get(path, params=query)
                    status_code = response.status_code
                    if status_code in (401, 403):
                        raise AuthError(f"Bank API rejected access token: {status_code}", status_code)
                    response.raise_for_status()
                    return response.json()

                except httpx.TimeoutException as e:
                    raise TransportError(f"Bank API timeout after {self.timeout}s") from e
                except httpx.HTTPStatusError as e:
                    raise TransportError(f"Bank API error: {e.response.status_code}", e.response.status_code) from e
                except httpx.RequestError as e:
                    raise TransportError(f"Bank API unreachable: {e}") from e
                except ValueError as e:
                    raise DecodeError(f"Bank API returned invalid JSON for {entity.__name__}: {e}") from e

        except StarlingSpendError as e:
            record_fetch_failure(e)
            raise
        finally:
            log_fetch(entity.__name__, path, status_code, (time.perf_counter() - start_time) * 1000)

    async def fetch_one(self, entity: Type[E], params: Mapping[str, Any] | None = None) -> E:
        """Fetch a single entity from its resource path"""
        data = await self._get_json(entity, params)
        try:
            return entity.from_payload(data)
        except DecodeError as e:
            record_fetch_failure(e)
            raise

    async def fetch_many(self, entity: Type[E], params: Mapping[str, Any] | None = None) -> List[E]:
        """
        Fetch a collection of entities from a JSON array.

        Decoding is all-or-nothing: one bad element fails the whole call.
        """
        data = await self._get_json(entity, params)
        try:
            if not isinstance(data, list):
                raise DecodeError(
                    f"Expected a JSON array of {entity.__name__}, got {type(data).__name__}"
                )
            results = []
            for index, item in enumerate(data):
                try:
                    results.append(entity.from_payload(item))
                except DecodeError as e:
                    wrapped = DecodeError(f"{entity.__name__} at index {index}: {e}")
                    wrapped.fields = e.fields
                    raise wrapped from e
            return results
        except DecodeError as e:
            record_fetch_failure(e)
            raise

    async def get_balance(self) -> AccountBalance:
        return await self.fetch_one(AccountBalance)

    async def get_account(self) -> AccountDetails:
        return await self.fetch_one(AccountDetails)

    async def get_card_transactions(self, start: date, end: date) -> List[CardTransaction]:
        """Fetch card transactions between two dates (inclusive)"""
        return await self.fetch_many(
            CardTransaction,
            {"from": start.isoformat(), "to": end.isoformat()},
        )

    async def get_merchant(self, merchant_uid: str) -> Merchant:
        return await self.fetch_one(Merchant, {"merchantUid": merchant_uid})

    async def fetch_concurrently(self, *calls: Awaitable[Any]) -> List[Any]:
        """
        Run independent fetches concurrently, returning results in call order.

        The first error propagates; fetches still in flight are cancelled and
        awaited before it does, so no request outlives the failed call.
        """
        tasks = [asyncio.ensure_future(call) for call in calls]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
