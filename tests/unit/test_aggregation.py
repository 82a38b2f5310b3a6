"""Unit tests for spend aggregation"""

from decimal import Decimal

from starling_spend.domain.aggregation import (
    SpendSign,
    group_and_sum,
    monthly_spend,
    rank_totals,
    spend_by_category,
    spend_by_merchant,
    to_points,
)


def test_group_and_sum_empty():
    """Test empty input gives an empty mapping"""
    assert group_and_sum([], lambda t: t.spending_category, lambda t: -t.amount) == {}


def test_group_and_sum_preserves_total(sample_transactions):
    """Test grouping neither loses nor invents spend"""
    value_fn = lambda t: -t.amount  # noqa: E731
    totals = group_and_sum(sample_transactions, lambda t: t.spending_category, value_fn)

    assert sum(totals.values()) == sum(value_fn(t) for t in sample_transactions)


def test_group_and_sum_does_not_mutate_input(sample_transactions):
    """Test the input sequence is left untouched"""
    before = list(sample_transactions)
    group_and_sum(sample_transactions, lambda t: t.narrative, lambda t: t.amount)

    assert sample_transactions == before


def test_spend_by_category(sample_transactions):
    """Test debits count as positive spend and refunds reduce it"""
    totals = spend_by_category(sample_transactions)

    assert totals == {
        "GROCERIES": Decimal("27.50"),  # 12.50 + 20.00 - 5.00 refund
        "EATING_OUT": Decimal("83.25"),
        "TRANSPORT": Decimal("60.00"),
    }


def test_spend_by_merchant(sample_transactions):
    """Test merchant grouping uses the transaction narrative"""
    totals = spend_by_merchant(sample_transactions)

    assert totals["Pret"] == Decimal("38.00")
    assert totals["Tesco"] == Decimal("7.50")
    assert totals["Sainsbury's"] == Decimal("20.00")


def test_spend_sign_debits_positive(sample_transactions):
    """Test the sign convention can be flipped for positive-debit data"""
    totals = spend_by_category(sample_transactions, sign=SpendSign.DEBITS_POSITIVE)

    assert totals["TRANSPORT"] == Decimal("-60.00")


def test_rank_totals_descending_with_stable_ties():
    """Test ranking is largest first; equal totals keep first-seen order"""
    totals = {"a": Decimal("5"), "b": Decimal("10"), "c": Decimal("5"), "d": Decimal("1")}

    assert rank_totals(totals) == [
        ("b", Decimal("10")),
        ("a", Decimal("5")),
        ("c", Decimal("5")),
        ("d", Decimal("1")),
    ]
    assert rank_totals(totals, limit=2) == [("b", Decimal("10")), ("a", Decimal("5"))]


def test_monthly_spend_chronological(sample_transactions):
    """Test spend is summed per calendar month in order"""
    series = monthly_spend(reversed(sample_transactions))

    assert list(series) == [(2017, 1), (2017, 2), (2017, 3)]
    assert series[(2017, 1)] == Decimal("42.50")
    assert series[(2017, 2)] == Decimal("65.25")
    assert series[(2017, 3)] == Decimal("63.00")  # 8.00 + 60.00 - 5.00


def test_to_points_numbers_months():
    """Test months become x = 1..n"""
    series = {(2016, 12): Decimal("10.5"), (2017, 1): Decimal("20")}

    assert to_points(series) == [(1.0, 10.5), (2.0, 20.0)]


def test_group_and_sum_float_projection():
    """Test plain float values sum without a Decimal seed getting in the way"""
    rows = [("a", 1.5), ("b", 2.0), ("a", 0.5)]
    totals = group_and_sum(rows, lambda row: row[0], lambda row: row[1])

    assert totals == {"a": 2.0, "b": 2.0}


def test_group_and_sum_int_projection(sample_transactions):
    """Test counting transactions per category with an int projection"""
    counts = group_and_sum(sample_transactions, lambda t: t.spending_category, lambda t: 1)

    assert counts == {"GROCERIES": 3, "EATING_OUT": 3, "TRANSPORT": 1}


def test_to_points_keeps_gap_months(sample_transactions):
    """Test a month with no transactions leaves a gap on the x axis"""
    without_february = [t for t in sample_transactions if t.created.month != 2]
    points = to_points(monthly_spend(without_february))

    assert points == [(1.0, 42.5), (3.0, 63.0)]


def test_to_points_across_year_boundary():
    """Test month offsets carry across December"""
    series = {(2016, 11): Decimal("1"), (2017, 2): Decimal("2")}

    assert to_points(series) == [(1.0, 1.0), (4.0, 2.0)]
    assert to_points({}) == []
