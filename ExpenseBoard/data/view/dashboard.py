"""Dashboard view: spending statistics, recent expenses and summary charts.

The four statistics are computed locally from the store. The monthly and category charts
show server-computed summaries, fetched whenever the collection changes and is not empty.
"""
import logging
from typing import List, Optional

from PySide6 import QtCore, QtGui, QtWidgets

from .barchart import BarChartView
from .piechart import PieChartView
from .. import data
from ..model.expense import ExpensesModel
from ..query import AnalyticsQuery
from ..schema import CategorySummary, Expense, MonthlySummary
from ...core.store import ExpenseStore
from ...settings import lib, locale
from ...ui import ui
from ...ui.actions import signals


class DashboardView(QtWidgets.QWidget):
    """Landing view summarizing the expense collection."""

    def __init__(self, store: ExpenseStore, query: Optional[AnalyticsQuery] = None,
                 parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent=parent)
        self.setObjectName('ExpenseBoardDashboardView')

        self.store = store
        self.query = query or AnalyticsQuery(include_trends=False, parent=self)
        self.stats = data.DashboardStats()

        self.total_card = None
        self.month_card = None
        self.average_card = None
        self.count_card = None
        self.loading_label = None
        self.recent_stack = None
        self.recent_view = None
        self.recent_model = None
        self.view_all_button = None
        self.monthly_chart = None
        self.category_chart = None

        self._create_ui()
        self._connect_signals()

        self.init_data(self.store.list())

    def _create_ui(self) -> None:
        QtWidgets.QVBoxLayout(self)
        o = ui.Size.Margin(1.0)
        self.layout().setContentsMargins(o, o, o, o)
        self.layout().setSpacing(o)

        self.layout().addWidget(ui.PageHeader('Dashboard', 'Track your spending and financial insights', parent=self))

        self.loading_label = QtWidgets.QLabel('Loading...', parent=self)
        self.loading_label.setVisible(False)
        self.layout().addWidget(self.loading_label)

        row = QtWidgets.QHBoxLayout()
        row.setSpacing(o)
        self.total_card = ui.StatCard('Total Expenses', 'All time', color=ui.CHART_COLORS[0], parent=self)
        self.month_card = ui.StatCard('This Month', 'Current month', color=ui.CHART_COLORS[1], parent=self)
        self.average_card = ui.StatCard('Daily Average', 'This month', color=ui.CHART_COLORS[4], parent=self)
        self.count_card = ui.StatCard('Transactions', 'Total count', color=ui.CHART_COLORS[3], parent=self)
        for card in (self.total_card, self.month_card, self.average_card, self.count_card):
            row.addWidget(card, 1)
        self.layout().addLayout(row)

        # Recent expenses
        header = QtWidgets.QHBoxLayout()
        label = QtWidgets.QLabel('Recent Expenses', parent=self)
        label.setFont(ui.font(ui.Size.LargeText(1.0), bold=True))
        header.addWidget(label, 1)
        self.view_all_button = QtWidgets.QPushButton('View All', parent=self)
        header.addWidget(self.view_all_button, 0)
        self.layout().addLayout(header)

        self.recent_stack = QtWidgets.QStackedWidget(parent=self)

        empty = QtWidgets.QLabel(
            'No expenses recorded yet\nAdd your first expense to get started!', parent=self
        )
        empty.setAlignment(QtCore.Qt.AlignCenter)
        empty.setForegroundRole(QtGui.QPalette.PlaceholderText)
        self.recent_stack.addWidget(empty)

        self.recent_model = ExpensesModel(parent=self)
        self.recent_view = QtWidgets.QTableView(parent=self)
        self.recent_view.setModel(self.recent_model)
        self.recent_view.setItemDelegate(ui.RoundedRowDelegate(parent=self.recent_view))
        self.recent_view.setSelectionBehavior(QtWidgets.QAbstractItemView.SelectRows)
        self.recent_view.setShowGrid(False)
        self.recent_view.verticalHeader().setVisible(False)
        self.recent_view.horizontalHeader().setStretchLastSection(True)
        self.recent_view.horizontalHeader().setSectionResizeMode(QtWidgets.QHeaderView.ResizeToContents)
        self.recent_stack.addWidget(self.recent_view)

        self.recent_stack.setMaximumHeight(ui.Size.RowHeight(7.0))
        self.layout().addWidget(self.recent_stack)

        # Charts
        row = QtWidgets.QHBoxLayout()
        row.setSpacing(o)
        self.monthly_chart = BarChartView(title='Monthly Spending Trend', parent=self)
        row.addWidget(self.monthly_chart, 1)
        self.category_chart = PieChartView(title='Spending by Category', parent=self)
        row.addWidget(self.category_chart, 1)
        self.layout().addLayout(row, 1)

    def _connect_signals(self) -> None:
        self.store.expensesChanged.connect(self.init_data)
        self.store.loadingChanged.connect(self.loading_label.setVisible)

        self.query.monthlyChanged.connect(self.set_monthly_summary)
        self.query.categoriesChanged.connect(self.set_category_summary)

        self.view_all_button.clicked.connect(lambda: signals.routeRequested.emit('/expenses'))

        @QtCore.Slot(str, object)
        def metadata_changed(key: str, _: object) -> None:
            if key == 'locale':
                self._update_cards()
            elif key in ('recent_count', 'dashboard_months', 'dashboard_categories'):
                self.init_data(self.store.list())

        signals.metadataChanged.connect(metadata_changed)

    @QtCore.Slot(list)
    def init_data(self, expenses: List[Expense]) -> None:
        """Recompute the statistics and refresh the server summaries."""
        self.stats = data.get_dashboard_stats(expenses)
        self._update_cards()

        recent = data.recent_expenses(expenses)
        self.recent_model.set_expenses(recent)
        self.recent_stack.setCurrentIndex(1 if recent else 0)
        self.view_all_button.setVisible(bool(expenses))

        if not expenses:
            logging.debug('Dashboard: no expenses, skipping summary fetch.')
            self.query.cancel()
            self.monthly_chart.clear_data()
            self.category_chart.clear_data()
            return

        self.query.fetch()

    def _update_cards(self) -> None:
        loc = lib.settings['locale'] or locale.DEFAULT_LOCALE
        self.total_card.set_value(locale.format_currency_value(self.stats.total, loc))
        self.month_card.set_value(locale.format_currency_value(self.stats.this_month, loc))
        self.average_card.set_value(locale.format_currency_value(self.stats.daily_average, loc))
        self.count_card.set_value(str(self.stats.transaction_count))

    @QtCore.Slot(list)
    def set_monthly_summary(self, summary: List[MonthlySummary]) -> None:
        self.monthly_chart.set_data(data.monthly_chart_frame(data.last_months(summary)))

    @QtCore.Slot(list)
    def set_category_summary(self, summary: List[CategorySummary]) -> None:
        self.category_chart.set_data(data.category_chart_frame(data.top_categories(summary)))
