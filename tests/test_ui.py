"""
Tests for the UI components of ExpenseBoard.

Views are built against an ExpenseStore whose cache is filled directly, and analytics
queries run on a DeferredRunner: no request leaves the process.
"""
import base64
import datetime
import decimal
import os
import tempfile
from unittest.mock import patch

from PySide6 import QtCore, QtWidgets

from ExpenseBoard.core.store import ExpenseStore
from ExpenseBoard.data.model.category import CategorySummaryModel
from ExpenseBoard.data.model.expense import Columns, ExpensesModel, IdRole
from ExpenseBoard.data.query import AnalyticsQuery
from ExpenseBoard.data.schema import CategorySummary, DailyTrend, MonthlySummary, TrendsSummary
from ExpenseBoard.settings import lib
from ExpenseBoard.status import status
from ExpenseBoard.ui import ui
from ExpenseBoard.ui.actions import Route, resolve_route, signals
from tests.base import BaseTestCase, DeferredRunner, make_expense

D = decimal.Decimal


def sample_expenses():
    return [
        make_expense(1, '12.50', 'Food & Dining', '2024-05-10', description='Lunch'),
        make_expense(2, '40.00', 'Transportation', '2024-05-03', description='Train'),
        make_expense(3, '99.99', 'Shopping', '2024-04-28', description='Shoes'),
    ]


def monthly_summary(n: int = 8):
    return [MonthlySummary(f'2024-{m:02d}', 'Month', 2024, D(m)) for m in range(1, n + 1)]


def category_summary(n: int = 8):
    return [CategorySummary(f'Category {i}', D(10), 1, D(10), D('12.5')) for i in range(n)]


class UIBaseTestCase(BaseTestCase):
    def setUp(self):
        super().setUp()
        ui.apply_theme()

        self.notifications = []
        self._notify = lambda *args: self.notifications.append(args)
        signals.notificationRequested.connect(self._notify)

        self.routes = []
        self._route = self.routes.append
        signals.routeRequested.connect(self._route)

    def tearDown(self):
        signals.notificationRequested.disconnect(self._notify)
        signals.routeRequested.disconnect(self._route)
        super().tearDown()

    def store_with(self, expenses) -> ExpenseStore:
        store = ExpenseStore()
        store._apply_loaded(expenses)
        return store


class TestRoutes(UIBaseTestCase):
    def test_resolve_route(self):
        self.assertEqual(resolve_route('/expenses'), Route.Expenses)
        self.assertEqual(resolve_route('/analytics/'), Route.Analytics)

    def test_root_and_unknown_paths_go_to_dashboard(self):
        for path in ('/', '', '/nowhere'):
            with self.subTest(path=path):
                self.assertEqual(resolve_route(path), Route.Dashboard)


class TestModels(UIBaseTestCase):
    def test_expenses_model(self):
        model = ExpensesModel()
        expenses = sample_expenses() + [make_expense(4, '1.00', description=None)]
        model.set_expenses(expenses)

        self.assertEqual(model.rowCount(), 4)
        self.assertEqual(model.columnCount(), 6)
        self.assertEqual(model.index(0, Columns.Amount).data(), '$12.50')
        self.assertEqual(model.index(0, Columns.Date).data(), 'May 10, 2024')
        self.assertEqual(model.index(1, Columns.Category).data(), 'Transportation')
        self.assertEqual(model.index(3, Columns.Description).data(), 'No description')
        self.assertEqual(model.index(2, 0).data(IdRole), 3)

        model.clear_data()
        self.assertEqual(model.rowCount(), 0)

    def test_expenses_model_marks_receipts(self):
        model = ExpensesModel()
        model.set_expenses([
            make_expense(1, receipt_image_path='/uploads/r.png'),
            make_expense(2),
        ])

        self.assertEqual(model.headerData(Columns.Receipt, QtCore.Qt.Horizontal), 'Receipt')
        self.assertEqual(model.index(0, Columns.Receipt).data(), 'Receipt')
        self.assertEqual(model.index(0, Columns.Receipt).data(QtCore.Qt.ToolTipRole), '/uploads/r.png')
        self.assertEqual(model.index(1, Columns.Receipt).data(), '')

    def test_category_summary_model(self):
        model = CategorySummaryModel()
        model.set_summary([CategorySummary('Food & Dining', D('50'), 1, D('50'), D('71.43'))])
        self.assertEqual(model.rowCount(), 1)
        self.assertEqual(model.index(0, 0).data(), 'Food & Dining')
        self.assertEqual(model.index(0, 1).data(), '$50.00')
        self.assertEqual(model.index(0, 2).data(), '1')
        self.assertEqual(model.index(0, 4).data(), '71.4%')


class TestCharts(UIBaseTestCase):
    def test_chart_model_spans_close_the_circle(self):
        from ExpenseBoard.ui.basechart import ChartModel
        from ExpenseBoard.data import data

        model = ChartModel()
        model.rebuild(data.category_chart_frame(category_summary(3)))
        self.assertEqual(len(model.slices), 3)
        self.assertEqual(sum(sl.span_qt for sl in model.slices), 360 * 16)
        self.assertEqual(model.max_value(), 10.0)

    def test_pie_legend_shows_server_share_of_top_categories(self):
        from ExpenseBoard.ui.basechart import ChartModel
        from ExpenseBoard.data import data

        # seven categories of which only the first six are charted
        summary = [CategorySummary(f'C{i}', D(10), 1, D(10), D('10.0')) for i in range(7)]
        df = data.category_chart_frame(data.top_categories(summary, 6))
        self.assertEqual(list(df.columns), ['label', 'value', 'percentage'])

        model = ChartModel()
        model.rebuild(df)
        self.assertEqual(len(model.slices), 6)
        self.assertEqual(model.slices[0].percentage, 10.0)
        self.assertEqual(model.slices[0].legend_text(), 'C0 (10.0%)')

    def test_legend_without_share_shows_amount(self):
        from ExpenseBoard.ui.basechart import ChartModel
        from ExpenseBoard.data import data

        model = ChartModel()
        model.rebuild(data.monthly_chart_frame(monthly_summary(1)))
        self.assertIsNone(model.slices[0].percentage)
        self.assertEqual(model.slices[0].legend_text(), 'Month 2024 $1.00')

    def test_chart_views_paint(self):
        from ExpenseBoard.data import data
        from ExpenseBoard.data.view.barchart import BarChartView
        from ExpenseBoard.data.view.piechart import PieChartView
        from ExpenseBoard.data.view.trends import TrendChartView

        trends = [DailyTrend(datetime.date(2024, 5, d), D(d)) for d in range(1, 6)]
        for view, df in (
                (BarChartView('Monthly'), data.monthly_chart_frame(monthly_summary(3))),
                (BarChartView('Payment', horizontal=True), data.category_chart_frame(category_summary(2))),
                (PieChartView('Category'), data.category_chart_frame(category_summary(4))),
                (TrendChartView('Daily'), data.trends_chart_frame(trends)),
        ):
            with self.subTest(view=view.title()):
                view.resize(400, 300)
                view.set_data(df)
                self.assertFalse(view.grab().isNull())
                for action in view.actions():
                    action.trigger()
                view.clear_data()
                self.assertEqual(view.model.slices, [])
                self.assertFalse(view.grab().isNull())


class TestDashboardView(UIBaseTestCase):
    def dashboard(self, expenses):
        from ExpenseBoard.data.view.dashboard import DashboardView
        self.runner = DeferredRunner()
        query = AnalyticsQuery(runner=self.runner, include_trends=False)
        return DashboardView(self.store_with(expenses), query=query)

    def test_empty_collection(self):
        view = self.dashboard([])
        self.assertEqual(view.total_card.value(), '$0.00')
        self.assertEqual(view.average_card.value(), '$0.00')
        self.assertEqual(view.count_card.value(), '0')
        self.assertEqual(view.recent_stack.currentIndex(), 0)
        # no summary fetch for an empty collection
        self.assertEqual(self.runner.calls, [])

    def test_stats_and_recent(self):
        today = datetime.date.today().isoformat()
        expenses = [make_expense(i, '10.00', date=today) for i in range(7)]
        view = self.dashboard(expenses)

        self.assertEqual(view.total_card.value(), '$70.00')
        self.assertEqual(view.month_card.value(), '$70.00')
        self.assertEqual(view.count_card.value(), '7')
        self.assertEqual(view.recent_stack.currentIndex(), 1)
        self.assertEqual(view.recent_model.rowCount(), 5)

    def test_summaries_are_limited(self):
        view = self.dashboard(sample_expenses())
        self.runner.resolve('_fetch_monthly', monthly_summary(8))
        self.runner.resolve('_fetch_categories', category_summary(8))

        self.assertEqual(len(view.monthly_chart.model.slices), 6)
        self.assertEqual(view.monthly_chart.model.slices[0].label, 'Month 2024')
        self.assertEqual(len(view.category_chart.model.slices), 6)

    def test_view_all_requests_expense_list(self):
        view = self.dashboard(sample_expenses())
        view.view_all_button.click()
        self.assertEqual(self.routes, ['/expenses'])


class TestExpenseListView(UIBaseTestCase):
    def setUp(self):
        super().setUp()
        from ExpenseBoard.data.view.expenses import ExpenseListView
        self.store = self.store_with(sample_expenses())
        self.view = ExpenseListView(self.store)

    def test_initial_state(self):
        self.assertEqual(self.view.model.rowCount(), 3)
        self.assertEqual(self.view.title_label.text(), '3 Expenses')
        self.assertEqual(self.view.total_card.value(), '$152.49')
        self.assertEqual(self.view.category_filter.options(), ['Food & Dining', 'Shopping', 'Transportation'])
        self.assertEqual(self.view.month_filter.options(), ['2024-05', '2024-04'])

    def test_search_filter(self):
        self.view.search_editor.setText('train')
        self.view.apply_filter()
        self.assertEqual(self.view.model.rowCount(), 1)
        self.assertEqual(self.view.title_label.text(), '1 Expense')
        self.assertEqual(self.view.average_card.value(), '$40.00')

    def test_month_and_category_filters(self):
        self.view.month_filter.set_value('2024-05')
        self.assertEqual(self.view.model.rowCount(), 2)
        self.view.category_filter.set_value('Food & Dining')
        self.assertEqual(self.view.model.rowCount(), 1)

        self.view.clear_filters()
        self.assertEqual(self.view.model.rowCount(), 3)

    def test_no_match_shows_filter_hint(self):
        self.view.search_editor.setText('nothing matches this')
        self.view.apply_filter()
        self.assertEqual(self.view.stack.currentIndex(), 0)
        self.assertEqual(self.view.empty_hint_label.text(), 'Try adjusting your filters')
        self.assertEqual(self.view.total_card.value(), '$0.00')

    def test_empty_collection_hint(self):
        self.store._apply_loaded([])
        self.assertEqual(self.view.stack.currentIndex(), 0)
        self.assertEqual(self.view.empty_hint_label.text(), 'Add your first expense to get started!')

    def test_filter_reset_when_option_disappears(self):
        self.view.category_filter.set_value('Shopping')
        self.store._apply_removed(3)
        self.assertEqual(self.view.category_filter.value(), '')
        self.assertEqual(self.view.model.rowCount(), 2)

    def test_delete_cancelled(self):
        with patch.object(self.view, 'confirm_delete', return_value=False), \
                patch.object(self.store, 'remove_async') as remove:
            self.view.delete_expense(1)
        remove.assert_not_called()

    def test_delete_confirmed(self):
        with patch.object(self.view, 'confirm_delete', return_value=True), \
                patch.object(self.store, 'remove_async') as remove:
            self.view.delete_expense(2)
            remove.assert_called_once()
            callback = remove.call_args.kwargs['callback']

        callback(True)
        self.assertEqual(self.notifications[-1][0], 'Expense deleted')
        callback(False)
        self.assertEqual(self.notifications[-1][:1], ('Error deleting expense',))
        self.assertTrue(self.notifications[-1][2])


class TestExpenseFormView(UIBaseTestCase):
    def setUp(self):
        super().setUp()
        from ExpenseBoard.data.view.form import ExpenseFormView
        self.store = ExpenseStore()
        self.form = ExpenseFormView(self.store)

    def fill(self):
        self.form.amount_editor.setText('25.50')
        self.form.category_editor.setCurrentText('Shopping')
        self.form.payment_method_editor.setCurrentText('Cash')
        self.form.description_editor.setText('Shoes')

    def test_closed_sets_from_settings(self):
        items = [self.form.category_editor.itemText(i) for i in range(self.form.category_editor.count())]
        self.assertEqual(items, lib.settings.get_section('categories'))
        self.assertEqual(self.form.date_editor.date(), QtCore.QDate.currentDate())

    def test_missing_fields_are_not_submitted(self):
        with patch.object(self.store, 'add_async') as add:
            self.form.submit()
        add.assert_not_called()
        self.assertEqual(
            self.notifications[-1], ('Missing information', 'Please fill in all required fields', True)
        )

    def test_submit(self):
        self.fill()
        with patch.object(self.store, 'add_async') as add:
            self.form.submit()
            draft = add.call_args.args[0]

        self.assertEqual(draft.amount, '25.50')
        self.assertEqual(draft.category, 'Shopping')
        self.assertEqual(draft.payment_method, 'Cash')
        self.assertEqual(draft.date, datetime.date.today())
        self.assertFalse(self.form.submit_button.isEnabled())

    def test_submitted_success_resets_and_navigates(self):
        self.fill()
        self.form._on_submitted(True)

        self.assertEqual(self.form.amount_editor.text(), '')
        self.assertEqual(self.form.category_editor.currentIndex(), -1)
        self.assertEqual(self.notifications[-1][0], 'Expense added successfully')
        self.assertTrue(self.form._navigate_timer.isActive())

        self.form._navigate_timer.stop()
        self.form._navigate_timer.timeout.emit()
        self.assertEqual(self.routes, ['/dashboard'])

    def test_submitted_failure_keeps_values(self):
        self.fill()
        self.form._on_submitted(False)
        self.assertEqual(self.form.amount_editor.text(), '25.50')
        self.assertEqual(self.notifications[-1], ('Error adding expense', 'Please try again', True))
        self.assertFalse(self.form._navigate_timer.isActive())

    def test_cancel_navigates_to_dashboard(self):
        self.form.cancel_button.click()
        self.assertEqual(self.routes, ['/dashboard'])

    def test_receipt(self):
        from ExpenseBoard.data.view.form import encode_receipt

        fd, path = tempfile.mkstemp(suffix='.png')
        os.write(fd, b'\x89PNG receipt')
        os.close(fd)
        self.addCleanup(os.remove, path)

        self.assertEqual(encode_receipt(path), base64.b64encode(b'\x89PNG receipt').decode('ascii'))
        with self.assertRaises(status.ReceiptInvalidException):
            encode_receipt(path, max_bytes=4)
        with self.assertRaises(status.ReceiptInvalidException):
            encode_receipt(path + '.missing')

        self.assertTrue(self.form.attach_receipt(path))
        self.assertIsNotNone(self.form.receipt())
        self.form.reset()
        self.assertIsNone(self.form.receipt())


class TestAnalyticsView(UIBaseTestCase):
    def setUp(self):
        super().setUp()
        from ExpenseBoard.data.view.analytics import AnalyticsView
        self.runner = DeferredRunner()
        self.view = AnalyticsView(query=AnalyticsQuery(runner=self.runner))

    def test_init_data_fetches(self):
        self.view.init_data()
        self.assertEqual(len(self.runner.calls), 3)

    def test_results_fill_charts_and_month_filter(self):
        self.view.init_data()
        self.runner.resolve('_fetch_monthly', [MonthlySummary('2024-05', 'May', 2024, D('70'))])
        self.runner.resolve('_fetch_categories', category_summary(2))
        self.runner.resolve('_fetch_trends', TrendsSummary(
            [DailyTrend(datetime.date(2024, 5, 1), D('70'))], []
        ))

        self.assertEqual(self.view.month_filter.options(), ['2024-05'])
        self.assertEqual(self.view.category_model.rowCount(), 2)
        self.assertEqual(len(self.view.trend_chart.model.slices), 1)
        self.assertEqual(self.view.payment_chart.model.slices, [])

    def test_month_filter_triggers_scoped_fetch(self):
        self.view.init_data()
        self.runner.resolve('_fetch_monthly', [MonthlySummary('2024-05', 'May', 2024, D('70'))])

        self.view.month_filter.set_value('2024-05')

        self.assertEqual(self.view.query.month, '2024-05')
        self.assertEqual(self.runner.find('_fetch_categories')['args'], ('2024-05',))

    def test_category_title_names_selected_month(self):
        self.view.init_data()
        self.runner.resolve('_fetch_categories', category_summary(2))
        self.assertEqual(self.view.category_chart.title(), 'Spending by Category')

        self.runner.resolve('_fetch_monthly', [MonthlySummary('2024-05', 'May', 2024, D('70'))])
        self.view.month_filter.set_value('2024-05')
        self.runner.resolve('_fetch_categories', category_summary(1))

        self.assertEqual(self.view.category_chart.title(), 'Spending by Category (May 2024)')


class TestMainWindow(UIBaseTestCase):
    def setUp(self):
        super().setUp()
        self.runner = DeferredRunner()
        patcher = patch('ExpenseBoard.core.service.run_async', new=self.runner)
        patcher.start()
        self.addCleanup(patcher.stop)

        from ExpenseBoard.ui.main import MainWindow
        self.window = MainWindow()

    def test_starts_on_dashboard(self):
        self.assertEqual(self.window.route(), Route.Dashboard)
        self.assertIs(self.window.stack.currentWidget(), self.window.dashboard_view)

    def test_navigate(self):
        changed = []
        slot = changed.append
        signals.routeChanged.connect(slot)
        try:
            self.window.navigate('/expenses')
            self.window.navigate('/')
        finally:
            signals.routeChanged.disconnect(slot)

        self.assertEqual(changed, ['/expenses', '/dashboard'])
        self.assertIs(self.window.stack.currentWidget(), self.window.dashboard_view)

    def test_analytics_route_fetches(self):
        self.window.navigate('/analytics')
        self.assertIs(self.window.stack.currentWidget(), self.window.analytics_view)
        self.assertEqual(
            [c['func'].__name__ for c in self.runner.calls],
            ['_fetch_monthly', '_fetch_categories', '_fetch_trends']
        )

    def test_toolbar_follows_route(self):
        self.window.navigate('/add-expense')
        self.assertEqual(self.window.toolbar.current_route(), Route.AddExpense)

    def test_reload_failure_notifies(self):
        self.window.reload()
        self.runner.fail('_fetch', status.ServiceUnavailableException('down'))
        self.assertEqual(self.notifications[-1][0], 'Error loading expenses')
        self.assertTrue(self.notifications[-1][2])

    def test_notification_bar(self):
        signals.notificationRequested.emit('Expense deleted', 'Removed', False)
        self.assertEqual(self.window.statusBar().currentMessage(), 'Expense deleted: Removed')
        self.assertFalse(self.window.statusBar().is_error())
