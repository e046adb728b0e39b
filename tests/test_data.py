"""
Unit tests for ExpenseBoard.data.data: dashboard statistics, filtering and chart frames.

Run:
    python -m unittest tests.test_data
"""
import datetime
import decimal
import itertools
import unittest

from ExpenseBoard.data import data
from ExpenseBoard.data.schema import CategorySummary, DailyTrend, MonthlySummary
from ExpenseBoard.settings import lib
from tests.base import BaseTestCase, make_expense

D = decimal.Decimal


def sample_expenses():
    return [
        make_expense(1, '12.50', 'Food & Dining', '2024-05-10', description='Lunch with Anna'),
        make_expense(2, '40.00', 'Transportation', '2024-05-03', description='Train tickets'),
        make_expense(3, '99.99', 'Shopping', '2024-04-28', description='Running shoes'),
        make_expense(4, '8.00', 'Food & Dining', '2024-04-02', description=None),
        make_expense(5, '120.00', 'Bills & Utilities', '2023-12-15', description='Electricity'),
    ]


class DashboardStatsTests(unittest.TestCase):
    def test_two_expenses_in_current_month(self):
        expenses = [
            make_expense(1, '50', date='2024-05-01'),
            make_expense(2, '20', date='2024-05-02'),
        ]
        stats = data.get_dashboard_stats(expenses, today=datetime.date(2024, 5, 2))
        self.assertEqual(stats.total, D('70'))
        self.assertEqual(stats.this_month, D('70'))
        self.assertEqual(stats.daily_average, D('35'))
        self.assertEqual(stats.transaction_count, 2)

    def test_empty_collection(self):
        stats = data.get_dashboard_stats([], today=datetime.date(2024, 5, 2))
        self.assertEqual(stats, data.DashboardStats())
        self.assertEqual(stats.total, 0)
        self.assertEqual(stats.daily_average, 0)
        self.assertEqual(stats.transaction_count, 0)

    def test_this_month_matches_year_and_month(self):
        expenses = [
            make_expense(1, '10', date='2024-05-31'),
            make_expense(2, '10', date='2023-05-15'),
            make_expense(3, '10', date='2024-04-30'),
        ]
        stats = data.get_dashboard_stats(expenses, today=datetime.date(2024, 5, 31))
        self.assertEqual(stats.total, D('30'))
        self.assertEqual(stats.this_month, D('10'))

    def test_total_and_count_of_any_collection(self):
        expenses = sample_expenses()
        for n in range(len(expenses) + 1):
            subset = expenses[:n]
            stats = data.get_dashboard_stats(subset, today=datetime.date(2024, 5, 10))
            self.assertEqual(stats.total, sum((e.amount for e in subset), D('0')))
            self.assertEqual(stats.transaction_count, n)

    def test_daily_average_divides_by_day_of_month(self):
        expenses = [make_expense(1, '100', date='2024-05-01')]
        stats = data.get_dashboard_stats(expenses, today=datetime.date(2024, 5, 20))
        self.assertEqual(stats.daily_average, D('5'))


class FilterTests(unittest.TestCase):
    def setUp(self):
        self.expenses = sample_expenses()

    def ids(self, expenses):
        return [e.id for e in expenses]

    def test_empty_filter_matches_everything(self):
        f = data.ExpenseFilter()
        self.assertTrue(f.is_empty())
        self.assertEqual(data.filter_expenses(self.expenses, f), self.expenses)

    def test_search_description_case_insensitive(self):
        f = data.ExpenseFilter(search='LUNCH')
        self.assertEqual(self.ids(data.filter_expenses(self.expenses, f)), [1])

    def test_search_matches_category(self):
        f = data.ExpenseFilter(search='food')
        self.assertEqual(self.ids(data.filter_expenses(self.expenses, f)), [1, 4])

    def test_search_term_is_matched_as_typed(self):
        f = data.ExpenseFilter(search='Electricity ')
        self.assertFalse(f.is_empty())
        self.assertEqual(data.filter_expenses(self.expenses, f), [])

        f = data.ExpenseFilter(search='Electricity')
        self.assertEqual(self.ids(data.filter_expenses(self.expenses, f)), [5])

    def test_whitespace_search_is_a_predicate(self):
        f = data.ExpenseFilter(search=' ')
        self.assertFalse(f.is_empty())
        # 'Electricity' has no space, only its category does
        self.assertTrue(f.match_search(self.expenses[4]))
        self.assertFalse(f.match_search(make_expense(6, category='Other', description='Taxi')))

    def test_search_handles_missing_description(self):
        f = data.ExpenseFilter(search='shoes')
        self.assertEqual(self.ids(data.filter_expenses(self.expenses, f)), [3])

    def test_category_exact_match(self):
        f = data.ExpenseFilter(category='Food & Dining')
        self.assertEqual(self.ids(data.filter_expenses(self.expenses, f)), [1, 4])

    def test_month_prefix(self):
        f = data.ExpenseFilter(month='2024-04')
        self.assertEqual(self.ids(data.filter_expenses(self.expenses, f)), [3, 4])

    def test_predicates_combine_with_and(self):
        f = data.ExpenseFilter(search='food', category='Food & Dining', month='2024-05')
        self.assertEqual(self.ids(data.filter_expenses(self.expenses, f)), [1])

    def test_predicate_order_does_not_matter(self):
        f = data.ExpenseFilter(search='e', category='Food & Dining', month='2024-04')
        expected = data.filter_expenses(self.expenses, f)
        for order in itertools.permutations(f.predicates()):
            result = self.expenses
            for predicate in order:
                result = [e for e in result if predicate(e)]
            self.assertEqual(result, expected)

    def test_options(self):
        self.assertEqual(
            data.category_options(self.expenses),
            ['Bills & Utilities', 'Food & Dining', 'Shopping', 'Transportation']
        )
        self.assertEqual(data.month_options(self.expenses), ['2024-05', '2024-04', '2023-12'])

    def test_summarize(self):
        summary = data.summarize(self.expenses[:2])
        self.assertEqual(summary.total, D('52.50'))
        self.assertEqual(summary.count, 2)
        self.assertEqual(summary.average, D('26.25'))

    def test_summarize_empty(self):
        self.assertEqual(data.summarize([]), data.FilteredSummary())


class SliceTests(BaseTestCase):
    def monthly(self, n):
        return [
            MonthlySummary(f'2024-{m:02d}', 'M', 2024, D(m)) for m in range(1, n + 1)
        ]

    def test_recent_expenses_uses_setting(self):
        expenses = [make_expense(i) for i in range(10)]
        self.assertEqual(len(data.recent_expenses(expenses)), lib.settings['recent_count'])
        self.assertEqual(data.recent_expenses(expenses, 2), expenses[:2])

    def test_last_months(self):
        summary = self.monthly(8)
        self.assertEqual([m.period for m in data.last_months(summary)][0], '2024-03')
        self.assertEqual(len(data.last_months(summary)), 6)
        self.assertEqual(data.last_months(summary, 0), [])

    def test_top_categories(self):
        summary = [
            CategorySummary(f'C{i}', D(10 - i), 1, D(10 - i), D(10)) for i in range(8)
        ]
        self.assertEqual([c.category for c in data.top_categories(summary, 3)], ['C0', 'C1', 'C2'])
        self.assertEqual(len(data.top_categories(summary)), 6)


class FrameTests(unittest.TestCase):
    def test_expenses_to_frame(self):
        df = data.expenses_to_frame(sample_expenses())
        self.assertEqual(list(df.columns), lib.EXPENSE_DATA_COLUMNS)
        self.assertEqual(len(df), 5)
        self.assertEqual(df['date'].iloc[0].strftime('%Y-%m-%d'), '2024-05-10')

    def test_expenses_to_frame_empty(self):
        df = data.expenses_to_frame([])
        self.assertTrue(df.empty)
        self.assertEqual(list(df.columns), lib.EXPENSE_DATA_COLUMNS)

    def test_monthly_chart_frame(self):
        df = data.monthly_chart_frame([MonthlySummary('2024-05', 'May', 2024, D('70'))])
        self.assertEqual(df['label'].tolist(), ['May 2024'])
        self.assertEqual(df['value'].tolist(), [70.0])

    def test_trends_chart_frame_is_chronological(self):
        trends = [
            DailyTrend(datetime.date(2024, 5, 3), D('3')),
            DailyTrend(datetime.date(2024, 5, 1), D('1')),
        ]
        df = data.trends_chart_frame(trends)
        self.assertEqual(df['value'].tolist(), [1.0, 3.0])
