import math
import pytest
from datetime import date

from finance_tracker.domain.enums import TransactionKind
from finance_tracker.services.pipeline import (
    ALL_PERIODS,
    aggregate,
    available_periods,
    default_period,
    filter_by_period,
    merge,
    sort_transactions,
    summarize,
)

INCOME = TransactionKind.INCOME
EXPENSE = TransactionKind.EXPENSE

@pytest.fixture
def incomes(make_transaction):
    return [
        make_transaction(id="i1", description="Salary", amount=1000.0, kind=INCOME,
                         period="06/2025", created_at="2025-06-05T09:00:00.000Z"),
        make_transaction(id="i2", description="Freelance", amount=300.0, kind=INCOME,
                         period="05/2025", created_at="2025-06-20T09:00:00.000Z"),
    ]

@pytest.fixture
def expenses(make_transaction):
    return [
        make_transaction(id="e1", description="Rent", amount=400.0, kind=EXPENSE,
                         period="06/2025", created_at="2025-06-10T09:00:00.000Z"),
        make_transaction(id="e2", description="Market", amount=85.5, kind=EXPENSE,
                         period="12/2024", created_at="2024-12-15T09:00:00.000Z"),
        make_transaction(id="e3", description="Gym", amount=60.0, kind=EXPENSE,
                         period="05/2025", created_at="2025-05-02T09:00:00.000Z"),
    ]


@pytest.mark.unit
class TestAggregate:

    def test_merge_puts_income_first(self, incomes, expenses):
        merged = merge(incomes, expenses)

        assert [t.id for t in merged] == ["i1", "i2", "e1", "e2", "e3"]

    def test_sorted_by_period_then_recency(self, incomes, expenses):
        result = aggregate(incomes, expenses)

        # 06/2025: Rent newer than Salary; 05/2025: Freelance newer than Gym
        assert [t.id for t in result] == ["e1", "i1", "i2", "e3", "e2"]

    def test_period_outranks_recency(self, make_transaction):
        old_period_new_record = make_transaction(id="a", period="05/2025", created_at="2025-07-01T00:00:00Z")
        new_period_old_record = make_transaction(id="b", period="06/2025", created_at="2025-01-01T00:00:00Z")

        result = sort_transactions([old_period_new_record, new_period_old_record])

        assert [t.id for t in result] == ["b", "a"]

    def test_id_breaks_exact_ties(self, make_transaction):
        first = make_transaction(id="a")
        second = make_transaction(id="b")

        assert [t.id for t in sort_transactions([first, second])] == ["b", "a"]
        assert [t.id for t in sort_transactions([second, first])] == ["b", "a"]

    def test_unparseable_periods_sort_last(self, make_transaction):
        broken = make_transaction(id="x", period="junho", created_at="2030-01-01T00:00:00Z")
        missing = make_transaction(id="y", period=None, created_at="2030-01-01T00:00:00Z")
        valid = make_transaction(id="z", period="01/2020")

        result = sort_transactions([broken, valid, missing])

        assert result[0].id == "z"
        assert {t.id for t in result[1:]} == {"x", "y"}

    def test_unparseable_timestamps_sort_oldest(self, make_transaction):
        dated = make_transaction(id="a", created_at="2025-06-01T00:00:00Z")
        undated = make_transaction(id="b", created_at="")
        garbage = make_transaction(id="c", created_at="yesterday")

        result = sort_transactions([undated, garbage, dated])

        assert result[0].id == "a"

    def test_without_grouping_orders_by_recency_only(self, incomes, expenses):
        result = aggregate(incomes, expenses, group_by_period=False)

        assert [t.id for t in result] == ["i2", "e1", "i1", "e3", "e2"]

    def test_naive_and_aware_timestamps_compare(self, make_transaction):
        naive = make_transaction(id="a", created_at="2025-06-01T12:00:00")
        aware = make_transaction(id="b", created_at="2025-06-01T13:00:00+00:00")

        assert [t.id for t in sort_transactions([naive, aware])] == ["b", "a"]

    def test_order_independent_on_input(self, incomes, expenses):
        assert aggregate(incomes, expenses) == sort_transactions(merge(expenses, incomes))
        assert aggregate(incomes, expenses) == aggregate(list(reversed(incomes)), list(reversed(expenses)))

    def test_sorting_is_idempotent(self, incomes, expenses):
        once = aggregate(incomes, expenses)

        assert sort_transactions(once) == once


@pytest.mark.unit
class TestSummarize:

    def test_empty_sequence(self):
        summary = summarize([])

        assert summary.as_tuple() == (0, 0, 0)
        assert summary.count == 0

    def test_income_and_expense(self, make_transaction):
        summary = summarize([
            make_transaction(id="a", kind=INCOME, amount=100.0),
            make_transaction(id="b", kind=EXPENSE, amount=40.0),
        ])

        assert summary.total_income == 100
        assert summary.total_expense == 40
        assert summary.balance == 60
        assert summary.count == 2

    def test_negative_balance(self, make_transaction):
        summary = summarize([make_transaction(kind=EXPENSE, amount=25.0)])

        assert summary.balance == -25

    def test_nan_amounts_are_left_out(self, make_transaction):
        summary = summarize([
            make_transaction(id="a", kind=INCOME, amount=100.0),
            make_transaction(id="b", kind=INCOME, amount=math.nan),
        ])

        assert summary.total_income == 100
        assert summary.invalid_amounts == 1
        assert summary.count == 2


@pytest.mark.unit
class TestFilterByPeriod:

    def test_all_returns_everything(self, incomes, expenses):
        aggregated = aggregate(incomes, expenses)

        assert filter_by_period(aggregated, ALL_PERIODS) == aggregated

    def test_returns_exactly_the_matching_records(self, incomes, expenses):
        aggregated = aggregate(incomes, expenses)

        result = filter_by_period(aggregated, "06/2025")

        assert [t.id for t in result] == ["e1", "i1"]
        assert all(t.period == "06/2025" for t in result)

    def test_selection_is_normalized(self, incomes, expenses):
        result = filter_by_period(aggregate(incomes, expenses), "5/2025")

        assert [t.id for t in result] == ["i2", "e3"]

    def test_no_match_gives_empty_list_and_zero_totals(self, incomes, expenses):
        result = filter_by_period(aggregate(incomes, expenses), "07/2025")

        assert result == []
        assert summarize(result).as_tuple() == (0, 0, 0)

    def test_filtered_totals(self, incomes, expenses):
        result = filter_by_period(aggregate(incomes, expenses), "06/2025")

        assert summarize(result).as_tuple() == (1000, 400, 600)

    def test_date_schema_periods(self, make_transaction):
        june = make_transaction(id="a", period="2025-06", date="2025-06-15")
        july = make_transaction(id="b", period="2025-07", date="2025-07-01")

        assert filter_by_period([june, july], "2025-06") == [june]
        assert filter_by_period([june, july], "2025-07-20") == [july]

    @pytest.mark.parametrize("selected", ["2025", "45808"])
    def test_bare_numbers_match_nothing(self, make_transaction, selected):
        june = make_transaction(id="a", period="06/2025")

        assert filter_by_period([june], selected) == []


@pytest.mark.unit
class TestPeriodSelection:

    def test_available_periods_in_aggregate_order(self, incomes, expenses):
        assert available_periods(aggregate(incomes, expenses)) == ["06/2025", "05/2025", "12/2024"]

    def test_available_periods_skips_missing(self, make_transaction):
        assert available_periods([make_transaction(period=None)]) == []

    def test_default_is_current_month_when_present(self, incomes, expenses):
        aggregated = aggregate(incomes, expenses)

        assert default_period(aggregated, today=date(2025, 6, 18)) == "06/2025"

    def test_default_falls_back_to_all(self, incomes, expenses):
        aggregated = aggregate(incomes, expenses)

        assert default_period(aggregated, today=date(2025, 7, 1)) == ALL_PERIODS
        assert default_period([], today=date(2025, 6, 18)) == ALL_PERIODS
