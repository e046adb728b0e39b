"""Typed records exchanged with the expense server.

This module provides:
    - Expense: a single recorded expense
    - ExpenseDraft: the values captured by the form, validated and serialized for POST
    - MonthlySummary, CategorySummary, DailyTrend, PaymentMethodSummary, TrendsSummary:
      read-only aggregates computed by the server

Every ``from_dict`` raises :class:`status.ResponseInvalidException` when a required field is
missing or malformed.
"""
import dataclasses
import datetime
import decimal
from typing import Any, Dict, List, Optional, Union

from ..status import status

ExpenseId = Union[int, str]


def _require(data: Dict[str, Any], key: str) -> Any:
    if not isinstance(data, dict):
        raise status.ResponseInvalidException(f'Expected a record, got {type(data).__name__}.')
    if key not in data or data[key] is None:
        raise status.ResponseInvalidException(f'Record is missing "{key}": {data}')
    return data[key]


def parse_amount(value: Any) -> decimal.Decimal:
    """Convert a wire amount to a Decimal.

    Floats go through ``str`` so 12.1 becomes Decimal('12.1') rather than its binary expansion.

    Raises:
        ValueError: If the value is not a finite number.
    """
    if isinstance(value, bool):
        raise ValueError(f'Not an amount: {value!r}')
    if isinstance(value, float):
        value = str(value)
    try:
        d = decimal.Decimal(str(value).strip())
    except (decimal.InvalidOperation, TypeError) as ex:
        raise ValueError(f'Not an amount: {value!r}') from ex
    if not d.is_finite():
        raise ValueError(f'Not an amount: {value!r}')
    return d


def parse_date(value: Any) -> datetime.date:
    """Parse an ISO date. Datetime strings are truncated to their date part.

    Raises:
        ValueError: If the value is not an ISO date.
    """
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    return datetime.date.fromisoformat(str(value)[:10])


def _amount_field(data: Dict[str, Any], key: str) -> decimal.Decimal:
    try:
        return parse_amount(_require(data, key))
    except ValueError as ex:
        raise status.ResponseInvalidException(str(ex)) from ex


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value)
    return value if value.strip() else None


@dataclasses.dataclass(frozen=True)
class Expense:
    """A single recorded expense."""
    id: ExpenseId
    amount: decimal.Decimal
    category: str
    date: datetime.date
    payment_method: str
    description: Optional[str] = None
    receipt_image_path: Optional[str] = None

    @property
    def month(self) -> str:
        """The ``YYYY-MM`` key of the expense date."""
        return self.date.isoformat()[:7]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Expense':
        _id = _require(data, 'id')
        if not isinstance(_id, (int, str)) or isinstance(_id, bool):
            raise status.ResponseInvalidException(f'Invalid expense id: {_id!r}')
        try:
            date = parse_date(_require(data, 'date'))
        except ValueError as ex:
            raise status.ResponseInvalidException(f'Invalid expense date: {ex}') from ex

        return cls(
            id=_id,
            amount=_amount_field(data, 'amount'),
            category=str(_require(data, 'category')),
            date=date,
            payment_method=str(_require(data, 'payment_method')),
            description=_optional_str(data.get('description')),
            receipt_image_path=_optional_str(data.get('receipt_image_path')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'amount': self.amount,
            'category': self.category,
            'description': self.description,
            'date': self.date,
            'payment_method': self.payment_method,
            'receipt_image_path': self.receipt_image_path,
        }


@dataclasses.dataclass
class ExpenseDraft:
    """Values captured by the form before they are sent to the server.

    Amount is kept as entered so that validation can report a missing or malformed value.
    """
    amount: Any = None
    category: str = ''
    date: datetime.date = dataclasses.field(default_factory=datetime.date.today)
    payment_method: str = ''
    description: Optional[str] = None
    receipt_image_base64: Optional[str] = None

    def validate(self, categories: Optional[List[str]] = None,
                 payment_methods: Optional[List[str]] = None) -> decimal.Decimal:
        """Check the required fields.

        Args:
            categories: The allowed categories. Not checked when None.
            payment_methods: The allowed payment methods. Not checked when None.

        Returns:
            decimal.Decimal: The parsed amount.

        Raises:
            status.ExpenseInvalidException: If a required field is missing or invalid.
        """
        missing = [
            name for name, value in (
                ('amount', self.amount),
                ('category', self.category),
                ('payment method', self.payment_method),
            ) if value is None or (isinstance(value, str) and not value.strip())
        ]
        if missing:
            raise status.ExpenseInvalidException(f'Missing {", ".join(missing)}.')

        try:
            amount = parse_amount(self.amount)
        except ValueError as ex:
            raise status.ExpenseInvalidException(str(ex)) from ex

        if categories is not None and self.category not in categories:
            raise status.ExpenseInvalidException(f'Unknown category: "{self.category}"')
        if payment_methods is not None and self.payment_method not in payment_methods:
            raise status.ExpenseInvalidException(f'Unknown payment method: "{self.payment_method}"')
        if not isinstance(self.date, datetime.date):
            raise status.ExpenseInvalidException(f'Invalid date: {self.date!r}')

        return amount

    def to_payload(self) -> Dict[str, Any]:
        """Returns the POST body. Absent optional values are sent as empty strings.

        Raises:
            status.ExpenseInvalidException: If the draft does not validate.
        """
        amount = self.validate()
        return {
            'amount': float(amount),
            'category': self.category,
            'description': self.description or '',
            'date': self.date.isoformat(),
            'payment_method': self.payment_method,
            'receipt_image_base64': self.receipt_image_base64 or '',
        }


@dataclasses.dataclass(frozen=True)
class MonthlySummary:
    period: str
    month_name: str
    year: int
    total_amount: decimal.Decimal

    @property
    def label(self) -> str:
        return f'{self.month_name} {self.year}'

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MonthlySummary':
        try:
            year = int(_require(data, 'year'))
        except (TypeError, ValueError) as ex:
            raise status.ResponseInvalidException(f'Invalid year: {ex}') from ex
        return cls(
            period=str(_require(data, 'period')),
            month_name=str(_require(data, 'month_name')).strip(),
            year=year,
            total_amount=_amount_field(data, 'total_amount'),
        )


@dataclasses.dataclass(frozen=True)
class CategorySummary:
    category: str
    total_amount: decimal.Decimal
    transaction_count: int
    average_amount: decimal.Decimal
    percentage: decimal.Decimal

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CategorySummary':
        try:
            count = int(_require(data, 'transaction_count'))
        except (TypeError, ValueError) as ex:
            raise status.ResponseInvalidException(f'Invalid transaction count: {ex}') from ex
        return cls(
            category=str(_require(data, 'category')),
            total_amount=_amount_field(data, 'total_amount'),
            transaction_count=count,
            average_amount=_amount_field(data, 'average_amount'),
            percentage=_amount_field(data, 'percentage'),
        )


@dataclasses.dataclass(frozen=True)
class DailyTrend:
    date: datetime.date
    amount: decimal.Decimal

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DailyTrend':
        try:
            date = parse_date(_require(data, 'date'))
        except ValueError as ex:
            raise status.ResponseInvalidException(f'Invalid trend date: {ex}') from ex
        return cls(date=date, amount=_amount_field(data, 'amount'))


@dataclasses.dataclass(frozen=True)
class PaymentMethodSummary:
    payment_method: str
    total_amount: decimal.Decimal

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PaymentMethodSummary':
        return cls(
            payment_method=str(_require(data, 'payment_method')),
            total_amount=_amount_field(data, 'total_amount'),
        )


@dataclasses.dataclass(frozen=True)
class TrendsSummary:
    daily_trends: List[DailyTrend] = dataclasses.field(default_factory=list)
    payment_methods: List[PaymentMethodSummary] = dataclasses.field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TrendsSummary':
        if not isinstance(data, dict):
            raise status.ResponseInvalidException(f'Expected a record, got {type(data).__name__}.')
        return cls(
            daily_trends=[DailyTrend.from_dict(d) for d in data.get('daily_trends', [])],
            payment_methods=[PaymentMethodSummary.from_dict(d) for d in data.get('payment_methods', [])],
        )
