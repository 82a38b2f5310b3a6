"""Domain models - frozen dataclasses for entities fetched from the bank API"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar, Dict, Optional, Protocol, TypeVar

from starling_spend.domain.decoding import (
    PayloadReader,
    encode_decimal,
    encode_timestamp,
)

E = TypeVar("E", bound="Entity")


class Entity(Protocol):
    """A record with a fixed field set that can be fetched by resource path"""

    path: ClassVar[str]

    @classmethod
    def from_payload(cls: type[E], payload: Any) -> E: ...

    def to_payload(self) -> Dict[str, Any]: ...


@dataclass(frozen=True)
class AccountBalance:
    """Balance of the authenticated account"""

    path: ClassVar[str] = "/api/v1/accounts/balance"

    cleared_balance: Decimal
    effective_balance: Decimal
    pending_transactions: Decimal
    available_to_spend: Decimal
    accepted_overdraft: Decimal
    currency: str
    amount: Decimal

    @classmethod
    def from_payload(cls, payload: Any) -> "AccountBalance":
        reader = PayloadReader(cls.__name__, payload)
        fields = dict(
            cleared_balance=reader.decimal("clearedBalance"),
            effective_balance=reader.decimal("effectiveBalance"),
            pending_transactions=reader.decimal("pendingTransactions"),
            available_to_spend=reader.decimal("availableToSpend"),
            accepted_overdraft=reader.decimal("acceptedOverdraft"),
            currency=reader.string("currency"),
            amount=reader.decimal("amount"),
        )
        reader.finish()
        return cls(**fields)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "clearedBalance": encode_decimal(self.cleared_balance),
            "effectiveBalance": encode_decimal(self.effective_balance),
            "pendingTransactions": encode_decimal(self.pending_transactions),
            "availableToSpend": encode_decimal(self.available_to_spend),
            "acceptedOverdraft": encode_decimal(self.accepted_overdraft),
            "currency": self.currency,
            "amount": encode_decimal(self.amount),
        }


@dataclass(frozen=True)
class AccountDetails:
    """Identifiers of the authenticated account"""

    path: ClassVar[str] = "/api/v1/accounts"

    id: str
    name: str
    number: str
    sort_code: str
    currency: str
    iban: str
    bic: str
    created_at: datetime

    @classmethod
    def from_payload(cls, payload: Any) -> "AccountDetails":
        reader = PayloadReader(cls.__name__, payload)
        fields = dict(
            id=reader.string("id"),
            name=reader.string("name"),
            number=reader.string("number"),
            sort_code=reader.string("sortCode"),
            currency=reader.string("currency"),
            iban=reader.string("iban"),
            bic=reader.string("bic"),
            created_at=reader.timestamp("createdAt"),
        )
        reader.finish()
        return cls(**fields)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "number": self.number,
            "sortCode": self.sort_code,
            "currency": self.currency,
            "iban": self.iban,
            "bic": self.bic,
            "createdAt": encode_timestamp(self.created_at),
        }


@dataclass(frozen=True)
class CardTransaction:
    """Card (Mastercard) transaction; amount is signed, debits negative"""

    path: ClassVar[str] = "/api/v1/transactions/mastercard"

    id: str
    currency: str
    amount: Decimal
    direction: str  # "INBOUND" or "OUTBOUND"
    created: datetime
    narrative: str  # merchant display name
    source: str
    spending_category: str
    merchant_id: Optional[str] = None
    merchant_location_id: Optional[str] = None
    balance: Optional[Decimal] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "CardTransaction":
        reader = PayloadReader(cls.__name__, payload)
        fields = dict(
            id=reader.string("id"),
            currency=reader.string("currency"),
            amount=reader.decimal("amount"),
            direction=reader.string("direction"),
            created=reader.timestamp("created"),
            narrative=reader.string("narrative"),
            source=reader.string("source"),
            spending_category=reader.string("spendingCategory"),
            merchant_id=reader.string("merchantId", optional=True),
            merchant_location_id=reader.string("merchantLocationId", optional=True),
            balance=reader.decimal("balance", optional=True),
        )
        reader.finish()
        return cls(**fields)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "currency": self.currency,
            "amount": encode_decimal(self.amount),
            "direction": self.direction,
            "created": encode_timestamp(self.created),
            "narrative": self.narrative,
            "source": self.source,
            "spendingCategory": self.spending_category,
            "merchantId": self.merchant_id,
            "merchantLocationId": self.merchant_location_id,
            "balance": encode_decimal(self.balance),
        }


@dataclass(frozen=True)
class Merchant:
    """Merchant details, looked up by merchant UID"""

    path: ClassVar[str] = "/api/v1/merchants/{merchantUid}"

    merchant_uid: str
    name: str
    website: Optional[str] = None
    phone_number: Optional[str] = None
    twitter_username: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "Merchant":
        reader = PayloadReader(cls.__name__, payload)
        fields = dict(
            merchant_uid=reader.string("merchantUid"),
            name=reader.string("name"),
            website=reader.string("website", optional=True),
            phone_number=reader.string("phoneNumber", optional=True),
            twitter_username=reader.string("twitterUsername", optional=True),
        )
        reader.finish()
        return cls(**fields)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "merchantUid": self.merchant_uid,
            "name": self.name,
            "website": self.website,
            "phoneNumber": self.phone_number,
            "twitterUsername": self.twitter_username,
        }
