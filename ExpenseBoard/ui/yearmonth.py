"""
Filter selector widgets.

Provides combo boxes for picking a month or a category filter. The month value is
managed as a "YYYY-MM" formatted string, and the empty string selects everything.

Classes:
    FilterComboBox: Combo box of (value, label) options with a leading "all" entry.
    MonthFilterComboBox: FilterComboBox listing "YYYY-MM" keys as month labels.

"""
import logging
from typing import Iterable, List, Optional, Tuple

from PySide6 import QtCore, QtWidgets

from ..data import data
from ..settings import lib, locale


class FilterComboBox(QtWidgets.QComboBox):
    """
    Combo box of filter options.

    The first entry always has the empty value. Setting new options keeps the current
    selection when it is still available, and falls back to the empty value otherwise.

    Signals:
        valueChanged(str): Emitted with the selected value.
    """
    valueChanged = QtCore.Signal(str)

    def __init__(self, all_label: str, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent=parent)
        self._all_label = all_label
        self.setSizeAdjustPolicy(QtWidgets.QComboBox.AdjustToContents)
        self.set_options([])
        self._connect_signals()

    def _connect_signals(self) -> None:
        self.currentIndexChanged.connect(lambda _: self.valueChanged.emit(self.value()))

    def value(self) -> str:
        return self.currentData() or ''

    def options(self) -> List[str]:
        return [self.itemData(i) for i in range(1, self.count())]

    def set_options(self, options: Iterable[Tuple[str, str]]) -> None:
        """Replace the options.

        Args:
            options: (value, label) pairs. The leading "all" entry is added automatically.
        """
        current = self.value()

        self.blockSignals(True)
        try:
            self.clear()
            self.addItem(self._all_label, userData='')
            for value, label in options:
                if not value:
                    continue
                self.addItem(label, userData=value)

            idx = self.findData(current)
            self.setCurrentIndex(idx if idx >= 0 else 0)
        finally:
            self.blockSignals(False)

        if self.value() != current:
            logging.debug(f'Filter "{current}" is no longer available, resetting.')
            self.valueChanged.emit(self.value())

    def set_value(self, value: str) -> None:
        idx = self.findData(value or '')
        if idx < 0:
            logging.debug(f'Unknown filter value: "{value}"')
            return
        self.setCurrentIndex(idx)


class MonthFilterComboBox(FilterComboBox):
    """Lists "YYYY-MM" keys, newest first, labelled like "May 2024"."""

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(data.ALL_MONTHS_LABEL, parent=parent)

    def set_months(self, months: Iterable[str]) -> None:
        loc = lib.settings['locale'] or locale.DEFAULT_LOCALE
        self.set_options((m, locale.format_month_label(m, loc)) for m in months)
