"""Spend aggregation - grouping transactions and summing amounts per key"""

from decimal import Decimal
from enum import Enum
from typing import Callable, Dict, Hashable, Iterable, List, Optional, Tuple, TypeVar, Union

from starling_spend.domain.models import CardTransaction

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)

Month = Tuple[int, int]
Number = Union[int, float, Decimal]


class SpendSign(Enum):
    """How a transaction amount's sign relates to spend"""

    DEBITS_NEGATIVE = -1  # outgoing amounts stored negative (bank API default)
    DEBITS_POSITIVE = 1


def group_and_sum(
    items: Iterable[T],
    key_fn: Callable[[T], K],
    value_fn: Callable[[T], Number],
) -> Dict[K, Number]:
    """
    Group items by key_fn and sum value_fn per group.

    Unseen keys start at 0. The result has no ordering guarantee;
    use rank_totals for presentation order.
    """
    totals: Dict[K, Number] = {}
    for item in items:
        key = key_fn(item)
        totals[key] = totals.get(key, 0) + value_fn(item)
    return totals


def spend_value(sign: SpendSign) -> Callable[[CardTransaction], Decimal]:
    """Projection turning a transaction amount into positive spend"""
    return lambda txn: txn.amount * sign.value


def spend_by(
    transactions: Iterable[CardTransaction],
    key_fn: Callable[[CardTransaction], K],
    sign: SpendSign = SpendSign.DEBITS_NEGATIVE,
) -> Dict[K, Decimal]:
    return group_and_sum(transactions, key_fn, spend_value(sign))


def spend_by_category(
    transactions: Iterable[CardTransaction],
    sign: SpendSign = SpendSign.DEBITS_NEGATIVE,
) -> Dict[str, Decimal]:
    return spend_by(transactions, lambda txn: txn.spending_category, sign)


def spend_by_merchant(
    transactions: Iterable[CardTransaction],
    sign: SpendSign = SpendSign.DEBITS_NEGATIVE,
) -> Dict[str, Decimal]:
    """Spend keyed by merchant display name (the transaction narrative)"""
    return spend_by(transactions, lambda txn: txn.narrative, sign)


def rank_totals(totals: Dict[K, Number], limit: Optional[int] = None) -> List[Tuple[K, Number]]:
    """
    Order totals by value, largest first.

    Ties keep the order in which keys were first encountered (sorted() is
    stable over dict insertion order).
    """
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return ranked if limit is None else ranked[:limit]


def monthly_spend(
    transactions: Iterable[CardTransaction],
    sign: SpendSign = SpendSign.DEBITS_NEGATIVE,
) -> Dict[Month, Decimal]:
    """Spend per calendar month of the transaction timestamp, chronologically"""
    totals = spend_by(transactions, lambda txn: (txn.created.year, txn.created.month), sign)
    return dict(sorted(totals.items()))


def to_points(series: Dict[Month, Decimal]) -> List[Tuple[float, float]]:
    """
    Turn a chronological monthly series into (x, y) points for curve fitting.

    x counts months from the first month of the series (which is 1), so months
    without transactions leave gaps on the axis instead of being squashed out.
    """
    if not series:
        return []
    first_year, first_month = next(iter(series))
    return [
        (float((year - first_year) * 12 + month - first_month + 1), float(total))
        for (year, month), total in series.items()
    ]
