"""Field readers for decoding JSON payloads into entities"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional

from starling_spend.domain.exceptions import DecodeError


class PayloadReader:
    """
    Reads declared fields from a JSON object, collecting every problem.

    Each reader returns None for a missing or mismatched field and records
    its name; call `finish()` before building the entity so a single
    DecodeError lists every offending field. Properties not read are ignored.

    Example:
        reader = PayloadReader("AccountBalance", payload)
        amount = reader.decimal("amount")
        reader.finish()
    """

    def __init__(self, entity_name: str, payload: Any):
        if not isinstance(payload, dict):
            raise DecodeError(
                f"{entity_name} payload must be a JSON object, got {type(payload).__name__}"
            )
        self.entity_name = entity_name
        self.payload: Dict[str, Any] = payload
        self.errors: List[str] = []

    def _raw(self, name: str, optional: bool) -> Any:
        value = self.payload.get(name)
        if value is None and not optional:
            self.errors.append(name)
        return value

    def decimal(self, name: str, optional: bool = False) -> Optional[Decimal]:
        value = self._raw(name, optional)
        if value is None:
            return None
        # bool is an int subclass but never a valid amount
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            self.errors.append(name)
            return None
        return Decimal(str(value))

    def string(self, name: str, optional: bool = False) -> Optional[str]:
        value = self._raw(name, optional)
        if value is None:
            return None
        if not isinstance(value, str):
            self.errors.append(name)
            return None
        return value

    def timestamp(self, name: str, optional: bool = False) -> Optional[datetime]:
        value = self._raw(name, optional)
        if value is None:
            return None
        if not isinstance(value, str):
            self.errors.append(name)
            return None
        try:
            return parse_timestamp(value)
        except ValueError:
            self.errors.append(name)
            return None

    def finish(self) -> None:
        """Raise DecodeError naming every missing or mismatched field"""
        if self.errors:
            raise DecodeError(
                f"Invalid {self.entity_name} payload, missing or mismatched fields",
                fields=tuple(self.errors),
            )


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; trailing Z and naive values are UTC"""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def encode_decimal(value: Optional[Decimal]) -> Optional[float]:
    return None if value is None else float(value)


def encode_timestamp(value: datetime) -> str:
    return value.isoformat()
