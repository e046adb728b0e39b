"""Client-side aggregation over the cached expense collection.

This module provides:
    - get_dashboard_stats: lifetime total, current-month total, daily average and count
    - ExpenseFilter / filter_expenses: search, category and month predicates combined by AND
    - category_options / month_options: filter choices derived from the collection
    - summarize: filtered total, count and average
    - DataFrame helpers used by the Qt models and the charts

Server-computed summaries are only reshaped here, never recomputed.
"""
import dataclasses
import datetime
import decimal
import logging
from typing import Callable, Iterable, List, Optional, Sequence

import pandas as pd

from .schema import (
    CategorySummary, DailyTrend, Expense, MonthlySummary, PaymentMethodSummary
)
from ..settings import lib

ZERO = decimal.Decimal('0')

ALL_CATEGORIES_LABEL: str = 'All categories'
ALL_MONTHS_LABEL: str = 'All months'


@dataclasses.dataclass(frozen=True)
class DashboardStats:
    total: decimal.Decimal = ZERO
    this_month: decimal.Decimal = ZERO
    daily_average: decimal.Decimal = ZERO
    transaction_count: int = 0


@dataclasses.dataclass(frozen=True)
class FilteredSummary:
    total: decimal.Decimal = ZERO
    count: int = 0
    average: decimal.Decimal = ZERO


def month_key(d: datetime.date) -> str:
    """Returns the ``YYYY-MM`` prefix of a date."""
    return d.isoformat()[:7]


def get_dashboard_stats(expenses: Sequence[Expense],
                        today: Optional[datetime.date] = None) -> DashboardStats:
    """Compute the dashboard statistics.

    The daily average divides the current-month total by today's day of the month.

    Args:
        expenses: The expense collection.
        today: The reference date. Defaults to ``datetime.date.today()``.

    Returns:
        DashboardStats: The computed statistics. All zero for an empty collection.
    """
    today = today or datetime.date.today()
    current = month_key(today)

    total = sum((e.amount for e in expenses), ZERO)
    this_month = sum((e.amount for e in expenses if e.month == current), ZERO)
    daily_average = this_month / today.day if this_month else ZERO

    return DashboardStats(
        total=total,
        this_month=this_month,
        daily_average=daily_average,
        transaction_count=len(expenses),
    )


@dataclasses.dataclass(frozen=True)
class ExpenseFilter:
    """Search, category and month filter terms. An empty term matches everything."""
    search: str = ''
    category: str = ''
    month: str = ''

    def is_empty(self) -> bool:
        return not (self.search or self.category or self.month)

    def match_search(self, expense: Expense) -> bool:
        if not self.search:
            return True
        term = self.search.lower()
        return term in (expense.description or '').lower() or term in expense.category.lower()

    def match_category(self, expense: Expense) -> bool:
        return not self.category or expense.category == self.category

    def match_month(self, expense: Expense) -> bool:
        return not self.month or expense.date.isoformat().startswith(self.month)

    def predicates(self) -> List[Callable[[Expense], bool]]:
        return [self.match_search, self.match_category, self.match_month]

    def __call__(self, expense: Expense) -> bool:
        return all(p(expense) for p in self.predicates())


def filter_expenses(expenses: Iterable[Expense], expense_filter: ExpenseFilter) -> List[Expense]:
    """Returns the expenses matching every predicate of the filter, keeping their order."""
    result = [e for e in expenses if expense_filter(e)]
    logging.debug(f'Filter {expense_filter} matched {len(result)} expenses.')
    return result


def category_options(expenses: Iterable[Expense]) -> List[str]:
    """Distinct categories in use, sorted ascending."""
    return sorted({e.category for e in expenses})


def month_options(expenses: Iterable[Expense]) -> List[str]:
    """Distinct ``YYYY-MM`` keys in use, newest first."""
    return sorted({e.month for e in expenses}, reverse=True)


def summarize(expenses: Sequence[Expense]) -> FilteredSummary:
    """Total, count and average of the given expenses. The average of nothing is zero."""
    total = sum((e.amount for e in expenses), ZERO)
    count = len(expenses)
    return FilteredSummary(
        total=total,
        count=count,
        average=total / count if count else ZERO,
    )


def recent_expenses(expenses: Sequence[Expense], count: Optional[int] = None) -> List[Expense]:
    """The first `count` expenses in store order."""
    if count is None:
        count = lib.settings['recent_count'] or 5
    return list(expenses[:max(count, 0)])


def last_months(summary: Sequence[MonthlySummary], count: Optional[int] = None) -> List[MonthlySummary]:
    """The last `count` entries of the monthly summary."""
    if count is None:
        count = lib.settings['dashboard_months'] or 6
    if count <= 0:
        return []
    return list(summary[-count:])


def top_categories(summary: Sequence[CategorySummary], count: Optional[int] = None) -> List[CategorySummary]:
    """The first `count` entries of the category summary."""
    if count is None:
        count = lib.settings['dashboard_categories'] or 6
    return list(summary[:max(count, 0)])


def chronological_trends(trends: Sequence[DailyTrend]) -> List[DailyTrend]:
    """Daily trends oldest first. The server sends them newest first."""
    return sorted(trends, key=lambda t: t.date)


def expenses_to_frame(expenses: Iterable[Expense]) -> pd.DataFrame:
    """Build a DataFrame with the expense columns, in collection order."""
    records = [e.to_dict() for e in expenses]
    df = pd.DataFrame.from_records(records, columns=lib.EXPENSE_DATA_COLUMNS)
    if not df.empty:
        df['date'] = pd.to_datetime(df['date'])
    return df


def category_summary_to_frame(summary: Iterable[CategorySummary]) -> pd.DataFrame:
    """Build a DataFrame of the category summary, in server order."""
    records = [dataclasses.asdict(s) for s in summary]
    return pd.DataFrame.from_records(records, columns=lib.CATEGORY_SUMMARY_COLUMNS)


def monthly_chart_frame(summary: Iterable[MonthlySummary]) -> pd.DataFrame:
    """Label/value frame of the monthly totals."""
    return pd.DataFrame.from_records(
        [(s.label, float(s.total_amount)) for s in summary],
        columns=['label', 'value']
    )


def category_chart_frame(summary: Iterable[CategorySummary]) -> pd.DataFrame:
    """Label/value frame of the category totals.

    The server share of each category is carried in the ``percentage`` column. A frame of
    a partial summary keeps the shares of the complete one.
    """
    return pd.DataFrame.from_records(
        [(s.category, float(s.total_amount), float(s.percentage)) for s in summary],
        columns=['label', 'value', 'percentage']
    )


def payment_method_chart_frame(summary: Iterable[PaymentMethodSummary]) -> pd.DataFrame:
    """Label/value frame of the payment method totals."""
    return pd.DataFrame.from_records(
        [(s.payment_method, float(s.total_amount)) for s in summary],
        columns=['label', 'value']
    )


def trends_chart_frame(trends: Iterable[DailyTrend]) -> pd.DataFrame:
    """Date/value frame of the daily trends, oldest first."""
    df = pd.DataFrame.from_records(
        [(t.date, float(t.amount)) for t in chronological_trends(list(trends))],
        columns=['date', 'value']
    )
    if not df.empty:
        df['date'] = pd.to_datetime(df['date'])
    return df
