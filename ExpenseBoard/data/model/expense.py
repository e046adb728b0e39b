"""Table model listing expenses."""
import enum
from typing import Any, List, Optional

import pandas as pd
from PySide6 import QtCore

from .. import data
from ..schema import Expense
from ...settings import lib
from ...settings import locale
from ...ui import ui
from ...ui.actions import signals

IdRole = QtCore.Qt.UserRole + 1
AmountRole = QtCore.Qt.UserRole + 2
ExpenseRole = QtCore.Qt.UserRole + 3


class Columns(enum.IntEnum):
    Date = 0
    Description = 1
    Category = 2
    PaymentMethod = 3
    Receipt = 4
    Amount = 5


class ExpensesModel(QtCore.QAbstractTableModel):
    """Table model over a DataFrame of expenses, kept in collection order."""
    header = ['Date', 'Description', 'Category', 'Payment Method', 'Receipt', 'Amount']

    def __init__(self, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent=parent)
        self.setObjectName('ExpenseBoardExpensesModel')

        self._df: pd.DataFrame = pd.DataFrame(columns=lib.EXPENSE_DATA_COLUMNS)
        self._expenses: List[Expense] = []

        self._connect_signals()

    def _connect_signals(self) -> None:
        @QtCore.Slot(str, object)
        def metadata_changed(key: str, _: object) -> None:
            if key in ('locale', 'theme'):
                self._emit_all_changed()

        signals.metadataChanged.connect(metadata_changed)

    def _emit_all_changed(self) -> None:
        if not self.rowCount():
            return
        self.dataChanged.emit(
            self.index(0, 0),
            self.index(self.rowCount() - 1, self.columnCount() - 1)
        )

    @QtCore.Slot(list)
    def set_expenses(self, expenses: List[Expense]) -> None:
        """Replace the model data."""
        self.beginResetModel()
        self._expenses = list(expenses)
        self._df = data.expenses_to_frame(self._expenses)
        self.endResetModel()

    @QtCore.Slot()
    def clear_data(self) -> None:
        self.set_expenses([])

    def expenses(self) -> List[Expense]:
        return list(self._expenses)

    def rowCount(self, parent: QtCore.QModelIndex = QtCore.QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._df)

    def columnCount(self, parent: QtCore.QModelIndex = QtCore.QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self.header)

    def data(self, index: QtCore.QModelIndex, role: int = QtCore.Qt.DisplayRole) -> Any:
        if not index.isValid():
            return None
        row = index.row()
        col = index.column()

        if row < 0 or row >= self.rowCount():
            return None

        record = self._df.iloc[row]
        expense = self._expenses[row]
        loc = lib.settings['locale'] or locale.DEFAULT_LOCALE

        if role == IdRole:
            return expense.id
        if role == AmountRole:
            return expense.amount
        if role == ExpenseRole:
            return expense

        if role in (QtCore.Qt.ToolTipRole, QtCore.Qt.StatusTipRole):
            if col == Columns.Receipt and expense.receipt_image_path:
                return expense.receipt_image_path
            return expense.description or expense.category

        if role == QtCore.Qt.TextAlignmentRole:
            if col == Columns.Amount:
                return QtCore.Qt.AlignRight | QtCore.Qt.AlignVCenter
            return QtCore.Qt.AlignLeft | QtCore.Qt.AlignVCenter

        if role == QtCore.Qt.ForegroundRole:
            if col == Columns.Description and not expense.description:
                return ui.Color.SecondaryText()
            if col == Columns.Receipt:
                return ui.Color.Green()
            return None

        if role != QtCore.Qt.DisplayRole:
            return None

        if col == Columns.Date:
            return locale.format_date(record['date'].date(), loc)
        if col == Columns.Description:
            return expense.description or 'No description'
        if col == Columns.Category:
            return record['category']
        if col == Columns.PaymentMethod:
            return record['payment_method']
        if col == Columns.Receipt:
            return 'Receipt' if expense.receipt_image_path else ''
        if col == Columns.Amount:
            return locale.format_currency_value(expense.amount, loc)
        return None

    def headerData(self, section: int, orientation: QtCore.Qt.Orientation,
                   role: int = QtCore.Qt.DisplayRole) -> Any:
        if orientation == QtCore.Qt.Horizontal and role == QtCore.Qt.DisplayRole:
            if 0 <= section < len(self.header):
                return self.header[section]
        return None

    def flags(self, index: QtCore.QModelIndex) -> QtCore.Qt.ItemFlags:
        if not index.isValid():
            return QtCore.Qt.NoItemFlags
        return QtCore.Qt.ItemIsEnabled | QtCore.Qt.ItemIsSelectable
