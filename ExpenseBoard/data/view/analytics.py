"""Analytics view: server-computed summaries with a month filter.

A month change emits ``queryChanged`` on the AnalyticsQuery which re-fetches the summaries.
Responses of superseded queries are dropped by the query.
"""
from typing import List, Optional

from PySide6 import QtCore, QtWidgets

from .barchart import BarChartView
from .piechart import PieChartView
from .trends import TrendChartView
from .. import data
from ..model.category import CategorySummaryModel
from ..query import AnalyticsQuery
from ..schema import CategorySummary, MonthlySummary, TrendsSummary
from ...ui import ui
from ...ui.yearmonth import FilterComboBox

CATEGORY_TITLE: str = 'Spending by Category'


class AnalyticsView(QtWidgets.QWidget):
    """Charts and tables of the monthly, category, daily and payment method summaries."""

    def __init__(self, query: Optional[AnalyticsQuery] = None, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent=parent)
        self.setObjectName('ExpenseBoardAnalyticsView')

        self.query = query or AnalyticsQuery(parent=self)

        self.month_filter = None
        self.loading_label = None
        self.monthly_chart = None
        self.category_chart = None
        self.trend_chart = None
        self.payment_chart = None
        self.category_view = None
        self.category_model = None

        self._create_ui()
        self._connect_signals()

    def _create_ui(self) -> None:
        QtWidgets.QVBoxLayout(self)
        o = ui.Size.Margin(1.0)
        self.layout().setContentsMargins(o, o, o, o)
        self.layout().setSpacing(o)

        self.layout().addWidget(ui.PageHeader('Analytics', 'Insights into your spending patterns', parent=self))

        row = QtWidgets.QHBoxLayout()
        label = QtWidgets.QLabel('Filter by Month', parent=self)
        row.addWidget(label, 0)
        self.month_filter = FilterComboBox(data.ALL_MONTHS_LABEL, parent=self)
        row.addWidget(self.month_filter, 0)
        row.addStretch(1)
        self.loading_label = QtWidgets.QLabel('Loading...', parent=self)
        self.loading_label.setVisible(False)
        row.addWidget(self.loading_label, 0)
        self.layout().addLayout(row)

        scroll = QtWidgets.QScrollArea(parent=self)
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QtWidgets.QFrame.NoFrame)
        content = QtWidgets.QWidget(parent=scroll)
        grid = QtWidgets.QGridLayout(content)
        grid.setContentsMargins(0, 0, 0, 0)
        grid.setSpacing(o)

        self.monthly_chart = BarChartView(title='Monthly Spending Trend', parent=content)
        grid.addWidget(self.monthly_chart, 0, 0)
        self.category_chart = PieChartView(title=CATEGORY_TITLE, parent=content)
        grid.addWidget(self.category_chart, 0, 1)
        self.trend_chart = TrendChartView(title='Daily Spending (Last 30 Days)', parent=content)
        grid.addWidget(self.trend_chart, 1, 0)
        self.payment_chart = BarChartView(title='Payment Methods', horizontal=True, parent=content)
        grid.addWidget(self.payment_chart, 1, 1)

        label = QtWidgets.QLabel('Category Summary', parent=content)
        label.setFont(ui.font(ui.Size.LargeText(1.0), bold=True))
        grid.addWidget(label, 2, 0, 1, 2)

        self.category_model = CategorySummaryModel(parent=self)
        self.category_view = QtWidgets.QTableView(parent=content)
        self.category_view.setModel(self.category_model)
        self.category_view.setItemDelegate(ui.RoundedRowDelegate(parent=self.category_view))
        self.category_view.setSelectionBehavior(QtWidgets.QAbstractItemView.SelectRows)
        self.category_view.setShowGrid(False)
        self.category_view.verticalHeader().setVisible(False)
        self.category_view.horizontalHeader().setSectionResizeMode(QtWidgets.QHeaderView.Stretch)
        self.category_view.setMinimumHeight(ui.Size.RowHeight(6.0))
        grid.addWidget(self.category_view, 3, 0, 1, 2)

        scroll.setWidget(content)
        self.layout().addWidget(scroll, 1)

    def _connect_signals(self) -> None:
        self.month_filter.valueChanged.connect(self.query.set_month)
        self.query.loadingChanged.connect(self.loading_label.setVisible)

        self.query.monthlyChanged.connect(self.set_monthly_summary)
        self.query.categoriesChanged.connect(self.set_category_summary)
        self.query.trendsChanged.connect(self.set_trends)

    @QtCore.Slot()
    def init_data(self) -> None:
        """Fetch the summaries for the current month filter."""
        self.query.fetch()

    @QtCore.Slot(list)
    def set_monthly_summary(self, summary: List[MonthlySummary]) -> None:
        self.month_filter.set_options(self.query.month_options()[1:])
        self.monthly_chart.set_data(data.monthly_chart_frame(summary))

    @QtCore.Slot(list)
    def set_category_summary(self, summary: List[CategorySummary]) -> None:
        self.category_chart.set_title(self.category_title())
        self.category_chart.set_data(data.category_chart_frame(summary))
        self.category_model.set_summary(summary)

    def category_title(self) -> str:
        """The category chart title, with the label of the selected month."""
        month = self.query.month
        if not month:
            return CATEGORY_TITLE
        label = dict(self.query.month_options()).get(month, month)
        return f'{CATEGORY_TITLE} ({label})'

    @QtCore.Slot(object)
    def set_trends(self, trends: TrendsSummary) -> None:
        self.trend_chart.set_data(data.trends_chart_frame(trends.daily_trends))
        self.payment_chart.set_data(data.payment_method_chart_frame(trends.payment_methods))
