"""Analytics query: the month filter and the summary fetches it triggers.

Every call to :meth:`AnalyticsQuery.fetch` issues a new request-sequence token. The three
fetches of a query carry that token, and a response whose token is no longer the latest is
dropped. A slow response of an earlier query can never overwrite a newer one.
"""
import logging
from typing import Any, Callable, List, Optional

from PySide6 import QtCore

from . import data
from .schema import CategorySummary, MonthlySummary, TrendsSummary
from ..core import api, service

Runner = Callable[..., Any]


def _fetch_monthly() -> List[MonthlySummary]:
    return [MonthlySummary.from_dict(d) for d in api.fetch_monthly_summary()]


def _fetch_categories(month: Optional[str]) -> List[CategorySummary]:
    return [CategorySummary.from_dict(d) for d in api.fetch_category_summary(month)]


def _fetch_trends() -> TrendsSummary:
    trends = TrendsSummary.from_dict(api.fetch_trends())
    return TrendsSummary(
        daily_trends=data.chronological_trends(trends.daily_trends),
        payment_methods=trends.payment_methods,
    )


class AnalyticsQuery(QtCore.QObject):
    """Holds the analytics month filter and the latest fetched summaries.

    Signals:
        queryChanged (str): Emitted with the new month when the filter changes.
        monthlyChanged (list): Emitted with the monthly summary.
        categoriesChanged (list): Emitted with the category summary.
        trendsChanged (object): Emitted with the TrendsSummary.
        loadingChanged (bool): Emitted when the current query starts or stops loading.
    """
    queryChanged = QtCore.Signal(str)
    monthlyChanged = QtCore.Signal(list)
    categoriesChanged = QtCore.Signal(list)
    trendsChanged = QtCore.Signal(object)
    loadingChanged = QtCore.Signal(bool)

    def __init__(self, runner: Optional[Runner] = None, include_trends: bool = True,
                 parent: Optional[QtCore.QObject] = None) -> None:
        """
        Args:
            runner: Callable running ``func(*args)`` and reporting to ``on_result``/``on_error``.
                Defaults to :func:`service.run_async`.
            include_trends (bool): Also fetch the trends and payment method summary.
            parent: Parent QObject.
        """
        super().__init__(parent=parent)
        self._runner: Runner = runner or service.run_async
        self._include_trends: bool = include_trends

        self._month: str = ''
        self._token: int = 0
        self._pending: int = 0

        self.monthly: List[MonthlySummary] = []
        self.categories: List[CategorySummary] = []
        self.trends: TrendsSummary = TrendsSummary()

        self._connect_signals()

    def _connect_signals(self) -> None:
        self.queryChanged.connect(self.fetch)

    @property
    def month(self) -> str:
        return self._month

    @property
    def token(self) -> int:
        return self._token

    def is_loading(self) -> bool:
        return self._pending > 0

    def month_options(self) -> List[tuple]:
        """Returns (value, label) pairs for the month filter. The empty value means all months."""
        return [('', data.ALL_MONTHS_LABEL)] + [(m.period, m.label) for m in self.monthly]

    @QtCore.Slot(str)
    def set_month(self, month: Optional[str]) -> None:
        """Sets the month filter and emits `queryChanged` if it changed.

        Args:
            month (str): A ``YYYY-MM`` key, or an empty string for all months.
        """
        month = month or ''
        if month == self._month:
            return
        logging.debug(f'Analytics month changed: "{self._month}" -> "{month}"')
        self._month = month
        self.queryChanged.emit(month)

    def _set_pending(self, v: int) -> None:
        was_loading = self.is_loading()
        self._pending = v
        if was_loading != self.is_loading():
            self.loadingChanged.emit(self.is_loading())

    def cancel(self) -> None:
        """Invalidates every in-flight request."""
        self._token += 1
        logging.debug(f'Analytics query cancelled, token is now {self._token}.')
        self._set_pending(0)

    @QtCore.Slot()
    def fetch(self) -> int:
        """Issues the monthly, category and trends requests for the current month.

        Returns:
            int: The token of the issued query.
        """
        self._token += 1
        token = self._token
        self._set_pending(3 if self._include_trends else 2)
        logging.debug(f'Fetching analytics for "{self._month or "all"}" (token {token})')

        self._run(token, _fetch_monthly, self._apply_monthly)
        self._run(token, _fetch_categories, self._apply_categories, self._month or None)
        if self._include_trends:
            self._run(token, _fetch_trends, self._apply_trends)
        return token

    def _run(self, token: int, func: Callable[..., Any], apply: Callable[[Any], None], *args: Any) -> None:
        def on_result(result: Any) -> None:
            if self._is_stale(token, func):
                return
            apply(result)
            self._set_pending(max(self._pending - 1, 0))

        def on_error(ex: Exception) -> None:
            if self._is_stale(token, func):
                return
            logging.error(f'Error fetching {func.__name__.strip("_")}: {ex}')
            self._set_pending(max(self._pending - 1, 0))

        self._runner(func, *args, on_result=on_result, on_error=on_error)

    def _is_stale(self, token: int, func: Callable[..., Any]) -> bool:
        if token == self._token:
            return False
        logging.debug(
            f'Discarding stale {func.__name__.strip("_")} response (token {token}, latest {self._token})'
        )
        return True

    def _apply_monthly(self, result: List[MonthlySummary]) -> None:
        self.monthly = list(result)
        self.monthlyChanged.emit(self.monthly)

    def _apply_categories(self, result: List[CategorySummary]) -> None:
        self.categories = list(result)
        self.categoriesChanged.emit(self.categories)

    def _apply_trends(self, result: TrendsSummary) -> None:
        self.trends = result
        self.trendsChanged.emit(self.trends)
