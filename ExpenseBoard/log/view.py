"""Log dialog for displaying the in-memory log tank.

This module provides:
    - LogLevelComboBox: picker for the minimum level to display
    - LogDialog: non-modal dialog listing formatted log records with filtering and clear actions
"""
import logging
from typing import Optional

from PySide6 import QtCore, QtWidgets

from . import log
from ..ui import ui
from ..ui.actions import signals

dialog = None


def show() -> None:
    """Show the shared log dialog, creating it on first use."""
    global dialog

    if dialog is None:
        dialog = LogDialog()

    dialog.show()
    dialog.raise_()
    dialog.activateWindow()


class LogLevelComboBox(QtWidgets.QComboBox):
    """Combo box listing the standard logging levels."""

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent=parent)
        for level in log.LOG_LEVELS:
            self.addItem(logging.getLevelName(level), userData=level)


class LogDialog(QtWidgets.QDialog):
    """A dialog displaying log messages stored by the TankHandler."""

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent=parent)
        self.setWindowTitle('Logs')
        self.setModal(False)

        self.level_combo = None
        self.text_edit = None
        self.clear_button = None

        self._refresh_timer = QtCore.QTimer(self)
        self._refresh_timer.setSingleShot(True)
        self._refresh_timer.setInterval(100)

        self._create_ui()
        self._connect_signals()

        self.refresh()

    def _create_ui(self) -> None:
        QtWidgets.QVBoxLayout(self)
        o = ui.Size.Margin(1.0)
        self.layout().setContentsMargins(o, o, o, o)
        self.layout().setSpacing(ui.Size.Indicator(2.0))

        row = QtWidgets.QHBoxLayout()
        self.level_combo = LogLevelComboBox(parent=self)
        row.addWidget(self.level_combo, 0)
        row.addStretch(1)
        self.clear_button = QtWidgets.QPushButton('Clear', parent=self)
        row.addWidget(self.clear_button, 0)
        self.layout().addLayout(row)

        self.text_edit = QtWidgets.QPlainTextEdit(parent=self)
        self.text_edit.setReadOnly(True)
        self.text_edit.setLineWrapMode(QtWidgets.QPlainTextEdit.NoWrap)
        self.layout().addWidget(self.text_edit, 1)

    def _connect_signals(self) -> None:
        self.level_combo.currentIndexChanged.connect(self.refresh)
        self.clear_button.clicked.connect(self.clear)

        # Many records can arrive at once; coalesce the refreshes
        signals.logsChanged.connect(self._refresh_timer.start)
        self._refresh_timer.timeout.connect(self.refresh)

    @QtCore.Slot()
    def refresh(self) -> None:
        handler = log.get_handler()
        if handler is None:
            self.text_edit.setPlainText('')
            return

        level = self.level_combo.currentData() or logging.NOTSET
        self.text_edit.setPlainText('\n'.join(handler.get_logs(level)))
        bar = self.text_edit.verticalScrollBar()
        bar.setValue(bar.maximum())

    @QtCore.Slot()
    def clear(self) -> None:
        handler = log.get_handler()
        if handler is not None:
            handler.clear_logs()
        self.refresh()

    def sizeHint(self) -> QtCore.QSize:
        return QtCore.QSize(ui.Size.DefaultWidth(1.2), ui.Size.DefaultHeight(0.8))
