"""
Unit tests for the typed records in ExpenseBoard.data.schema.

Run:
    python -m unittest tests.test_schema
"""
import datetime
import decimal
import unittest

from ExpenseBoard.data.schema import (
    CategorySummary,
    Expense,
    ExpenseDraft,
    MonthlySummary,
    TrendsSummary,
    parse_amount,
    parse_date,
)
from ExpenseBoard.status import status
from tests.base import expense_record

CATEGORIES = ['Food & Dining', 'Shopping', 'Other']
PAYMENT_METHODS = ['Cash', 'Credit Card']


class ParserTests(unittest.TestCase):
    def test_parse_amount_float_is_exact(self):
        self.assertEqual(parse_amount(12.1), decimal.Decimal('12.1'))

    def test_parse_amount_string(self):
        self.assertEqual(parse_amount(' 50.00 '), decimal.Decimal('50.00'))

    def test_parse_amount_rejects(self):
        for value in ('abc', '', True, float('nan'), float('inf'), None):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    parse_amount(value)

    def test_parse_date_truncates_datetime_strings(self):
        self.assertEqual(parse_date('2024-05-10T13:45:00'), datetime.date(2024, 5, 10))

    def test_parse_date_rejects(self):
        with self.assertRaises(ValueError):
            parse_date('10/05/2024')


class ExpenseTests(unittest.TestCase):
    def test_from_dict(self):
        expense = Expense.from_dict(expense_record(3, amount=12.1, description='  '))
        self.assertEqual(expense.id, 3)
        self.assertEqual(expense.amount, decimal.Decimal('12.1'))
        self.assertEqual(expense.date, datetime.date(2024, 5, 10))
        self.assertEqual(expense.month, '2024-05')
        self.assertIsNone(expense.description)
        self.assertIsNone(expense.receipt_image_path)

    def test_from_dict_keeps_string_ids(self):
        expense = Expense.from_dict(expense_record('a1b2'))
        self.assertEqual(expense.id, 'a1b2')

    def test_from_dict_missing_field(self):
        record = expense_record(1)
        del record['category']
        with self.assertRaises(status.ResponseInvalidException):
            Expense.from_dict(record)

    def test_from_dict_bad_amount(self):
        with self.assertRaises(status.ResponseInvalidException):
            Expense.from_dict(expense_record(1, amount='lots'))

    def test_from_dict_bad_date(self):
        with self.assertRaises(status.ResponseInvalidException):
            Expense.from_dict(expense_record(1, date='yesterday'))

    def test_from_dict_not_a_record(self):
        with self.assertRaises(status.ResponseInvalidException):
            Expense.from_dict(['id', 1])


class ExpenseDraftTests(unittest.TestCase):
    def draft(self, **kwargs) -> ExpenseDraft:
        values = dict(
            amount='25.50',
            category='Shopping',
            date=datetime.date(2024, 5, 10),
            payment_method='Cash',
        )
        values.update(kwargs)
        return ExpenseDraft(**values)

    def test_validate_returns_amount(self):
        self.assertEqual(
            self.draft().validate(CATEGORIES, PAYMENT_METHODS), decimal.Decimal('25.50')
        )

    def test_validate_missing_required(self):
        for field in ('amount', 'category', 'payment_method'):
            with self.subTest(field=field):
                with self.assertRaises(status.ExpenseInvalidException):
                    self.draft(**{field: ''}).validate()

    def test_validate_bad_amount(self):
        with self.assertRaises(status.ExpenseInvalidException):
            self.draft(amount='12,50.1').validate()

    def test_validate_closed_sets(self):
        with self.assertRaises(status.ExpenseInvalidException):
            self.draft(category='Gambling').validate(CATEGORIES, PAYMENT_METHODS)
        with self.assertRaises(status.ExpenseInvalidException):
            self.draft(payment_method='Barter').validate(CATEGORIES, PAYMENT_METHODS)

    def test_date_defaults_to_today(self):
        self.assertEqual(ExpenseDraft().date, datetime.date.today())

    def test_to_payload(self):
        payload = self.draft(description='Shoes').to_payload()
        self.assertEqual(payload, {
            'amount': 25.5,
            'category': 'Shopping',
            'description': 'Shoes',
            'date': '2024-05-10',
            'payment_method': 'Cash',
            'receipt_image_base64': '',
        })

    def test_to_payload_sends_absent_optionals_as_empty_strings(self):
        payload = self.draft().to_payload()
        self.assertEqual(payload['description'], '')
        self.assertEqual(payload['receipt_image_base64'], '')

    def test_to_payload_invalid(self):
        with self.assertRaises(status.ExpenseInvalidException):
            self.draft(amount=None).to_payload()


class SummaryTests(unittest.TestCase):
    def test_monthly_summary(self):
        m = MonthlySummary.from_dict(
            {'period': '2024-05', 'month_name': 'May      ', 'year': '2024', 'total_amount': 70}
        )
        self.assertEqual(m.label, 'May 2024')
        self.assertEqual(m.year, 2024)
        self.assertEqual(m.total_amount, decimal.Decimal('70'))

    def test_category_summary(self):
        c = CategorySummary.from_dict({
            'category': 'Food & Dining',
            'total_amount': 50.0,
            'transaction_count': 1,
            'average_amount': 50.0,
            'percentage': 71.43,
        })
        self.assertEqual(c.transaction_count, 1)
        self.assertEqual(c.percentage, decimal.Decimal('71.43'))

    def test_category_summary_missing_field(self):
        with self.assertRaises(status.ResponseInvalidException):
            CategorySummary.from_dict({'category': 'Other', 'total_amount': 1})

    def test_trends_summary(self):
        t = TrendsSummary.from_dict({
            'daily_trends': [{'date': '2024-05-10', 'amount': 12.0}],
            'payment_methods': [{'payment_method': 'Cash', 'total_amount': 12.0}],
        })
        self.assertEqual(t.daily_trends[0].date, datetime.date(2024, 5, 10))
        self.assertEqual(t.payment_methods[0].payment_method, 'Cash')

    def test_trends_summary_empty(self):
        t = TrendsSummary.from_dict({})
        self.assertEqual(t.daily_trends, [])
        self.assertEqual(t.payment_methods, [])
