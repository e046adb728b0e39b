"""Form view for recording a new expense.

This module provides:
    - encode_receipt: reads an image and returns it base64 encoded, without a data-url prefix
    - ExpenseFormView: the form, submitting through the store
"""
import base64
import datetime
import logging
import pathlib
from typing import Optional

from PySide6 import QtCore, QtGui, QtWidgets

from ..schema import ExpenseDraft
from ...core.store import ExpenseStore
from ...settings import lib
from ...status import status
from ...ui import ui
from ...ui.actions import signals

DEFAULT_RECEIPT_MAX_BYTES: int = 5 * 1024 * 1024
NAVIGATE_DELAY_MS: int = 1000


def encode_receipt(path: str, max_bytes: Optional[int] = None) -> str:
    """
    Reads a receipt image and encodes it as base64.

    Args:
        path (str): Path to the image.
        max_bytes (int, optional): The size limit. Defaults to the ``receipt_max_bytes`` setting.

    Returns:
        str: The base64 encoded content.

    Raises:
        status.ReceiptInvalidException: If the file is missing, unreadable or too large.
    """
    if max_bytes is None:
        max_bytes = lib.settings['receipt_max_bytes'] or DEFAULT_RECEIPT_MAX_BYTES

    p = pathlib.Path(path)
    try:
        size = p.stat().st_size
        if size > max_bytes:
            raise status.ReceiptInvalidException(
                f'{p.name} is {size} bytes, the limit is {max_bytes} bytes.'
            )
        content = p.read_bytes()
    except OSError as ex:
        raise status.ReceiptInvalidException(f'Could not read {p}: {ex}') from ex

    return base64.b64encode(content).decode('ascii')


class ExpenseFormView(QtWidgets.QWidget):
    """Captures a new expense and submits it through the store.

    Signals:
        submitted (bool): Emitted with the success flag after each submission.
    """
    submitted = QtCore.Signal(bool)

    def __init__(self, store: ExpenseStore, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent=parent)
        self.setObjectName('ExpenseBoardFormView')

        self.store = store
        self._receipt: Optional[str] = None
        self._busy: bool = False

        self.amount_editor = None
        self.category_editor = None
        self.payment_method_editor = None
        self.date_editor = None
        self.description_editor = None
        self.receipt_button = None
        self.receipt_label = None
        self.cancel_button = None
        self.submit_button = None

        self._navigate_timer = QtCore.QTimer(self)
        self._navigate_timer.setSingleShot(True)
        self._navigate_timer.setInterval(NAVIGATE_DELAY_MS)

        self._create_ui()
        self._connect_signals()
        self.init_data()

    def _create_ui(self) -> None:
        QtWidgets.QVBoxLayout(self)
        o = ui.Size.Margin(1.0)
        self.layout().setContentsMargins(o, o, o, o)
        self.layout().setSpacing(o)

        self.layout().addWidget(ui.PageHeader('Add New Expense', 'Record your spending quickly and easily', parent=self))

        form = QtWidgets.QFormLayout()
        form.setSpacing(ui.Size.Indicator(2.0))
        form.setFieldGrowthPolicy(QtWidgets.QFormLayout.ExpandingFieldsGrow)

        self.amount_editor = QtWidgets.QLineEdit(parent=self)
        self.amount_editor.setPlaceholderText('0.00')
        validator = QtCore.QRegularExpression(r'^\d*(\.\d{0,2})?$')
        self.amount_editor.setValidator(QtGui.QRegularExpressionValidator(validator, self.amount_editor))
        form.addRow('Amount *', self.amount_editor)

        self.category_editor = QtWidgets.QComboBox(parent=self)
        self.category_editor.setPlaceholderText('Select a category')
        form.addRow('Category *', self.category_editor)

        self.payment_method_editor = QtWidgets.QComboBox(parent=self)
        self.payment_method_editor.setPlaceholderText('How did you pay?')
        form.addRow('Payment Method *', self.payment_method_editor)

        self.date_editor = QtWidgets.QDateEdit(parent=self)
        self.date_editor.setCalendarPopup(True)
        self.date_editor.setDisplayFormat('yyyy-MM-dd')
        self.date_editor.setDate(QtCore.QDate.currentDate())
        form.addRow('Date *', self.date_editor)

        self.description_editor = QtWidgets.QLineEdit(parent=self)
        self.description_editor.setPlaceholderText('What did you spend on? (optional)')
        form.addRow('Description', self.description_editor)

        row = QtWidgets.QHBoxLayout()
        self.receipt_button = QtWidgets.QPushButton('Click to upload receipt', parent=self)
        row.addWidget(self.receipt_button, 0)
        self.receipt_label = QtWidgets.QLabel('', parent=self)
        row.addWidget(self.receipt_label, 1)
        form.addRow('Receipt (Optional)', row)

        self.layout().addLayout(form)

        row = QtWidgets.QHBoxLayout()
        row.addStretch(1)
        self.cancel_button = QtWidgets.QPushButton('Cancel', parent=self)
        row.addWidget(self.cancel_button, 0)
        self.submit_button = QtWidgets.QPushButton('Add Expense', parent=self)
        self.submit_button.setDefault(True)
        row.addWidget(self.submit_button, 0)
        self.layout().addLayout(row)

        self.layout().addStretch(1)

    def _connect_signals(self) -> None:
        self.receipt_button.clicked.connect(self.pick_receipt)
        self.cancel_button.clicked.connect(lambda: signals.routeRequested.emit('/dashboard'))
        self.submit_button.clicked.connect(self.submit)
        self.amount_editor.returnPressed.connect(self.submit)

        self._navigate_timer.timeout.connect(lambda: signals.routeRequested.emit('/dashboard'))

        @QtCore.Slot(str)
        def section_changed(section: str) -> None:
            if section in ('categories', 'payment_methods'):
                self.init_data()

        signals.configSectionChanged.connect(section_changed)

    @QtCore.Slot()
    def init_data(self) -> None:
        """Populate the closed sets from the settings."""
        for editor, section in (
                (self.category_editor, 'categories'),
                (self.payment_method_editor, 'payment_methods')
        ):
            current = editor.currentText()
            editor.blockSignals(True)
            editor.clear()
            editor.addItems(lib.settings.get_section(section))
            editor.setCurrentIndex(editor.findText(current) if current else -1)
            editor.blockSignals(False)

    @QtCore.Slot()
    def reset(self) -> None:
        """Clear every field and set the date to today."""
        self.amount_editor.clear()
        self.category_editor.setCurrentIndex(-1)
        self.payment_method_editor.setCurrentIndex(-1)
        self.date_editor.setDate(QtCore.QDate.currentDate())
        self.description_editor.clear()
        self.set_receipt(None)

    def set_receipt(self, encoded: Optional[str]) -> None:
        self._receipt = encoded
        self.receipt_label.setText('Receipt uploaded ✓' if encoded else '')

    def receipt(self) -> Optional[str]:
        return self._receipt

    @QtCore.Slot()
    def pick_receipt(self) -> None:
        path, _ = QtWidgets.QFileDialog.getOpenFileName(
            self,
            'Select Receipt',
            '',
            'Images (*.png *.jpg *.jpeg *.gif *.bmp *.webp)'
        )
        if not path:
            return
        self.attach_receipt(path)

    def attach_receipt(self, path: str) -> bool:
        """Encode and attach a receipt image. An invalid file is not attached.

        Returns:
            bool: True if the receipt was attached.
        """
        try:
            encoded = encode_receipt(path)
        except status.ReceiptInvalidException as ex:
            signals.notificationRequested.emit('Receipt not attached', ex.message, True)
            return False

        self.set_receipt(encoded)
        signals.notificationRequested.emit(
            'Receipt uploaded', 'Receipt image has been attached to your expense', False
        )
        return True

    def draft(self) -> ExpenseDraft:
        """Returns the current values as an ExpenseDraft."""
        qdate = self.date_editor.date()
        return ExpenseDraft(
            amount=self.amount_editor.text().strip() or None,
            category=self.category_editor.currentText(),
            date=datetime.date(qdate.year(), qdate.month(), qdate.day()),
            payment_method=self.payment_method_editor.currentText(),
            description=self.description_editor.text().strip() or None,
            receipt_image_base64=self._receipt,
        )

    def set_busy(self, v: bool) -> None:
        self._busy = v
        self.submit_button.setEnabled(not v)
        self.submit_button.setText('Adding Expense...' if v else 'Add Expense')

    @QtCore.Slot()
    def submit(self) -> None:
        """Validate and submit the form. Nothing is sent when a required field is missing."""
        if self._busy:
            return

        draft = self.draft()
        try:
            draft.validate(
                categories=lib.settings.get_section('categories'),
                payment_methods=lib.settings.get_section('payment_methods'),
            )
        except status.ExpenseInvalidException:
            signals.notificationRequested.emit('Missing information', 'Please fill in all required fields', True)
            return

        self.set_busy(True)
        self.store.add_async(draft, callback=self._on_submitted)

    def _on_submitted(self, success: bool) -> None:
        self.set_busy(False)

        if success:
            logging.debug('Expense submitted.')
            signals.notificationRequested.emit('Expense added successfully', 'Your expense has been recorded', False)
            self.reset()
            self._navigate_timer.start()
        else:
            signals.notificationRequested.emit('Error adding expense', 'Please try again', True)

        self.submitted.emit(success)
