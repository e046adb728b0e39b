"""Table model of the server-computed category summary."""
import enum
from typing import Any, List, Optional

import pandas as pd
from PySide6 import QtCore

from .. import data
from ..schema import CategorySummary
from ...settings import lib
from ...settings import locale

CategoryRole = QtCore.Qt.UserRole + 1
TotalRole = QtCore.Qt.UserRole + 2


class Columns(enum.IntEnum):
    Category = 0
    Total = 1
    Transactions = 2
    Average = 3
    Percentage = 4


class CategorySummaryModel(QtCore.QAbstractTableModel):
    """Displays a category summary as returned by the server. Nothing is recomputed."""
    header = ['Category', 'Total Amount', 'Transactions', 'Average', 'Percentage']

    def __init__(self, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent=parent)
        self.setObjectName('ExpenseBoardCategorySummaryModel')
        self._df: pd.DataFrame = pd.DataFrame(columns=lib.CATEGORY_SUMMARY_COLUMNS)

    @QtCore.Slot(list)
    def set_summary(self, summary: List[CategorySummary]) -> None:
        self.beginResetModel()
        self._df = data.category_summary_to_frame(summary)
        self.endResetModel()

    def rowCount(self, parent: QtCore.QModelIndex = QtCore.QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._df)

    def columnCount(self, parent: QtCore.QModelIndex = QtCore.QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self.header)

    def data(self, index: QtCore.QModelIndex, role: int = QtCore.Qt.DisplayRole) -> Any:
        if not index.isValid() or not 0 <= index.row() < self.rowCount():
            return None

        record = self._df.iloc[index.row()]
        col = index.column()

        if role == CategoryRole:
            return record['category']
        if role == TotalRole:
            return record['total_amount']

        if role == QtCore.Qt.TextAlignmentRole:
            if col == Columns.Category:
                return QtCore.Qt.AlignLeft | QtCore.Qt.AlignVCenter
            return QtCore.Qt.AlignRight | QtCore.Qt.AlignVCenter

        if role != QtCore.Qt.DisplayRole:
            return None

        loc = lib.settings['locale'] or locale.DEFAULT_LOCALE
        if col == Columns.Category:
            return record['category']
        if col == Columns.Total:
            return locale.format_currency_value(record['total_amount'], loc)
        if col == Columns.Transactions:
            return str(record['transaction_count'])
        if col == Columns.Average:
            return locale.format_currency_value(record['average_amount'], loc)
        if col == Columns.Percentage:
            return locale.format_percent_value(record['percentage'], loc)
        return None

    def headerData(self, section: int, orientation: QtCore.Qt.Orientation,
                   role: int = QtCore.Qt.DisplayRole) -> Any:
        if orientation == QtCore.Qt.Horizontal and role == QtCore.Qt.DisplayRole:
            if 0 <= section < len(self.header):
                return self.header[section]
        return None
