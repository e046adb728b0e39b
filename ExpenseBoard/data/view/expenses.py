"""Expense list view with search, category and month filters.

Filtering runs over the cached collection: nothing is fetched when a filter changes.
"""
import logging
from typing import List, Optional

from PySide6 import QtCore, QtGui, QtWidgets

from .. import data
from ..model.expense import ExpensesModel, IdRole
from ..schema import Expense
from ...core.store import ExpenseStore
from ...settings import lib, locale
from ...ui import ui
from ...ui.actions import signals
from ...ui.yearmonth import FilterComboBox, MonthFilterComboBox

EMPTY_COLLECTION_TEXT: str = 'Add your first expense to get started!'
EMPTY_FILTER_TEXT: str = 'Try adjusting your filters'


class ExpenseListView(QtWidgets.QWidget):
    """Lists the expenses matching the current filter, with filtered totals."""

    def __init__(self, store: ExpenseStore, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent=parent)
        self.setObjectName('ExpenseBoardExpenseListView')

        self.store = store
        self.summary = data.FilteredSummary()

        self.search_editor = None
        self.category_filter = None
        self.month_filter = None
        self.total_card = None
        self.count_card = None
        self.average_card = None
        self.title_label = None
        self.stack = None
        self.empty_label = None
        self.empty_hint_label = None
        self.view = None
        self.model = None
        self.delete_button = None

        self._search_timer = QtCore.QTimer(self)
        self._search_timer.setSingleShot(True)
        self._search_timer.setInterval(QtWidgets.QApplication.keyboardInputInterval())

        self._create_ui()
        self._connect_signals()
        self._init_actions()

        self.init_data(self.store.list())

    def _create_ui(self) -> None:
        QtWidgets.QVBoxLayout(self)
        o = ui.Size.Margin(1.0)
        self.layout().setContentsMargins(o, o, o, o)
        self.layout().setSpacing(o)

        self.layout().addWidget(ui.PageHeader('Expenses', 'Manage and review your spending', parent=self))

        row = QtWidgets.QHBoxLayout()
        self.search_editor = QtWidgets.QLineEdit(parent=self)
        self.search_editor.setPlaceholderText('Search expenses...')
        self.search_editor.setClearButtonEnabled(True)
        row.addWidget(self.search_editor, 1)
        self.category_filter = FilterComboBox(data.ALL_CATEGORIES_LABEL, parent=self)
        row.addWidget(self.category_filter, 0)
        self.month_filter = MonthFilterComboBox(parent=self)
        row.addWidget(self.month_filter, 0)
        self.layout().addLayout(row)

        row = QtWidgets.QHBoxLayout()
        row.setSpacing(o)
        self.total_card = ui.StatCard('Total Amount', parent=self)
        self.count_card = ui.StatCard('Transactions', parent=self)
        self.average_card = ui.StatCard('Average', parent=self)
        for card in (self.total_card, self.count_card, self.average_card):
            row.addWidget(card, 1)
        self.layout().addLayout(row)

        row = QtWidgets.QHBoxLayout()
        self.title_label = QtWidgets.QLabel('', parent=self)
        self.title_label.setFont(ui.font(ui.Size.LargeText(1.0), bold=True))
        row.addWidget(self.title_label, 1)
        self.delete_button = QtWidgets.QPushButton('Delete', parent=self)
        self.delete_button.setEnabled(False)
        row.addWidget(self.delete_button, 0)
        self.layout().addLayout(row)

        self.stack = QtWidgets.QStackedWidget(parent=self)

        empty = QtWidgets.QWidget(parent=self)
        QtWidgets.QVBoxLayout(empty)
        empty.layout().addStretch(1)
        self.empty_label = QtWidgets.QLabel('No expenses found', parent=empty)
        self.empty_label.setAlignment(QtCore.Qt.AlignCenter)
        self.empty_label.setFont(ui.font(ui.Size.LargeText(1.0)))
        empty.layout().addWidget(self.empty_label)
        self.empty_hint_label = QtWidgets.QLabel('', parent=empty)
        self.empty_hint_label.setAlignment(QtCore.Qt.AlignCenter)
        self.empty_hint_label.setForegroundRole(QtGui.QPalette.PlaceholderText)
        empty.layout().addWidget(self.empty_hint_label)
        empty.layout().addStretch(1)
        self.stack.addWidget(empty)

        self.model = ExpensesModel(parent=self)
        self.view = QtWidgets.QTableView(parent=self)
        self.view.setModel(self.model)
        self.view.setItemDelegate(ui.RoundedRowDelegate(parent=self.view))
        self.view.setSelectionBehavior(QtWidgets.QAbstractItemView.SelectRows)
        self.view.setSelectionMode(QtWidgets.QAbstractItemView.SingleSelection)
        self.view.setShowGrid(False)
        self.view.setContextMenuPolicy(QtCore.Qt.ActionsContextMenu)
        self.view.verticalHeader().setVisible(False)
        self.view.verticalHeader().setDefaultSectionSize(ui.Size.RowHeight(1.0))
        self.view.horizontalHeader().setStretchLastSection(True)
        self.view.horizontalHeader().setSectionResizeMode(QtWidgets.QHeaderView.ResizeToContents)
        self.stack.addWidget(self.view)

        self.layout().addWidget(self.stack, 1)

    def _connect_signals(self) -> None:
        self.store.expensesChanged.connect(self.init_data)

        self.search_editor.textChanged.connect(self._search_timer.start)
        self._search_timer.timeout.connect(self.apply_filter)
        self.category_filter.valueChanged.connect(self.apply_filter)
        self.month_filter.valueChanged.connect(self.apply_filter)

        self.view.selectionModel().selectionChanged.connect(
            lambda *args: self.delete_button.setEnabled(self.view.selectionModel().hasSelection())
        )
        self.delete_button.clicked.connect(self.delete_selected)

        @QtCore.Slot(str, object)
        def metadata_changed(key: str, _: object) -> None:
            if key == 'locale':
                self._update_summary()

        signals.metadataChanged.connect(metadata_changed)

    def _init_actions(self) -> None:
        action = QtGui.QAction('Delete Expense', self.view)
        action.setShortcut(QtGui.QKeySequence.Delete)
        action.setShortcutContext(QtCore.Qt.WidgetShortcut)
        action.setStatusTip('Delete the selected expense')
        action.triggered.connect(self.delete_selected)
        self.view.addAction(action)

        action = QtGui.QAction('Clear Filters', self)
        action.setShortcut('Ctrl+Shift+F')
        action.setShortcutContext(QtCore.Qt.WidgetWithChildrenShortcut)
        action.triggered.connect(self.clear_filters)
        self.addAction(action)

    def expense_filter(self) -> data.ExpenseFilter:
        return data.ExpenseFilter(
            search=self.search_editor.text(),
            category=self.category_filter.value(),
            month=self.month_filter.value(),
        )

    @QtCore.Slot(list)
    def init_data(self, expenses: List[Expense]) -> None:
        """Refresh the filter options from the collection and re-apply the filter."""
        self.category_filter.set_options((c, c) for c in data.category_options(expenses))
        self.month_filter.set_months(data.month_options(expenses))
        self.apply_filter()

    @QtCore.Slot()
    def apply_filter(self) -> None:
        expenses = self.store.list()
        filtered = data.filter_expenses(expenses, self.expense_filter())

        self.model.set_expenses(filtered)
        self.summary = data.summarize(filtered)
        self._update_summary()

        n = len(filtered)
        self.title_label.setText(f'{n} Expense{"" if n == 1 else "s"}')
        self.empty_hint_label.setText(EMPTY_COLLECTION_TEXT if not expenses else EMPTY_FILTER_TEXT)
        self.stack.setCurrentIndex(1 if filtered else 0)
        self.delete_button.setEnabled(False)

    def _update_summary(self) -> None:
        loc = lib.settings['locale'] or locale.DEFAULT_LOCALE
        self.total_card.set_value(locale.format_currency_value(self.summary.total, loc))
        self.count_card.set_value(str(self.summary.count))
        self.average_card.set_value(locale.format_currency_value(self.summary.average, loc))

    @QtCore.Slot()
    def clear_filters(self) -> None:
        self.search_editor.clear()
        self.category_filter.set_value('')
        self.month_filter.set_value('')
        self.apply_filter()

    def confirm_delete(self) -> bool:
        """Asks the user to confirm the deletion."""
        res = QtWidgets.QMessageBox.question(
            self,
            'Delete Expense',
            'Are you sure you want to delete this expense?',
            QtWidgets.QMessageBox.Yes | QtWidgets.QMessageBox.No,
            QtWidgets.QMessageBox.No
        )
        return res == QtWidgets.QMessageBox.Yes

    @QtCore.Slot()
    def delete_selected(self) -> None:
        index = self.view.selectionModel().currentIndex()
        if not index.isValid():
            return
        self.delete_expense(index.data(IdRole))

    def delete_expense(self, expense_id) -> None:
        """Deletes an expense after confirmation."""
        if not self.confirm_delete():
            logging.debug(f'Deleting expense {expense_id} was cancelled.')
            return

        def callback(success: bool) -> None:
            if success:
                signals.notificationRequested.emit(
                    'Expense deleted', 'The expense has been removed successfully', False
                )
            else:
                signals.notificationRequested.emit('Error deleting expense', 'Please try again', True)

        self.store.remove_async(expense_id, callback=callback)
