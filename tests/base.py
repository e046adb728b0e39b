"""Unittest base class for creating a clean test environment."""
import datetime
import decimal
import logging
import os
import shutil
import tempfile
import time
import unittest
from contextlib import contextmanager
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import MagicMock, patch

from PySide6 import QtWidgets, QtCore

from ExpenseBoard.core import api
from ExpenseBoard.data.schema import Expense
from ExpenseBoard.settings import lib


@contextmanager
def mute_ui_signals():
    from ExpenseBoard.ui.actions import signals
    blocker = QtCore.QSignalBlocker(signals)  # blocks every signal in `signals`
    try:
        yield
    finally:
        del blocker


def make_expense(
        expense_id: Any = 1,
        amount: str = '10.00',
        category: str = 'Food & Dining',
        date: str = '2024-05-10',
        payment_method: str = 'Cash',
        description: Optional[str] = None,
        receipt_image_path: Optional[str] = None,
) -> Expense:
    """Returns an Expense built from plain values."""
    return Expense(
        id=expense_id,
        amount=decimal.Decimal(amount),
        category=category,
        date=datetime.date.fromisoformat(date),
        payment_method=payment_method,
        description=description,
        receipt_image_path=receipt_image_path,
    )


def expense_record(expense_id: Any = 1, **kwargs: Any) -> Dict[str, Any]:
    """Returns an expense record as sent by the server."""
    record = {
        'id': expense_id,
        'amount': 10.0,
        'category': 'Food & Dining',
        'description': 'Lunch',
        'date': '2024-05-10',
        'payment_method': 'Cash',
        'receipt_image_path': None,
    }
    record.update(kwargs)
    return record


def mock_response(status_code: int = 200, body: Any = None, json_error: bool = False) -> MagicMock:
    """Returns a stand-in for a ``requests.Response``."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    if json_error:
        response.json.side_effect = ValueError('Expecting value')
    else:
        response.json.return_value = body
    return response


def process_events_until(predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
    """Process Qt events until `predicate` returns True or the timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        QtCore.QCoreApplication.processEvents(QtCore.QEventLoop.AllEvents, 50)
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class DeferredRunner:
    """Collects the calls of an AnalyticsQuery instead of running them.

    Tests resolve the collected calls in any order with :meth:`resolve`.
    """

    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, func, *args, on_result=None, on_error=None, **kwargs) -> None:
        self.calls.append({
            'func': func,
            'args': args,
            'on_result': on_result,
            'on_error': on_error,
        })

    def find(self, name: str, index: int = -1) -> Dict[str, Any]:
        calls = [c for c in self.calls if c['func'].__name__ == name]
        return calls[index]

    def resolve(self, name: str, result: Any, index: int = -1) -> None:
        self.find(name, index)['on_result'](result)

    def fail(self, name: str, ex: Exception, index: int = -1) -> None:
        self.find(name, index)['on_error'](ex)


class BaseTestCase(unittest.TestCase):
    """Base test case that sets up and tears down a temporary config directory."""

    config_dir: str

    def setUp(self) -> None:
        """Set up a clean config directory and reinitialize the settings API."""
        # Ensure headless Qt
        if 'QT_QPA_PLATFORM' not in os.environ:
            os.environ['QT_QPA_PLATFORM'] = 'offscreen'
            logging.debug('QT_QPA_PLATFORM set to offscreen for headless testing.')

        # Ensure a QApplication is available
        if not QtWidgets.QApplication.instance():
            QtWidgets.QApplication([])  # type: ignore
            logging.debug('QtWidgets.QApplication initialized for tests.')

        # The environment override would take precedence over the test settings
        env = patch.dict(os.environ)
        env.start()
        self.addCleanup(env.stop)
        os.environ.pop(lib.API_BASE_URL_ENV_KEY, None)

        self.config_dir = tempfile.mkdtemp(prefix='expenseboard_test_')
        logging.debug(f'Created test config directory at {self.config_dir}')

        self._settings = lib.settings
        with mute_ui_signals():
            lib.settings = lib.SettingsAPI(config_dir=self.config_dir)
        logging.debug('SettingsAPI reinitialized.')

        api.clear_session()

    def tearDown(self) -> None:
        """Restore the settings API and remove the test config directory."""
        api.clear_session()
        lib.settings = self._settings

        if os.path.isdir(self.config_dir):
            shutil.rmtree(self.config_dir)
            logging.debug(f'Removed test config directory {self.config_dir}')


class BaseApiTestCase(BaseTestCase):
    """Base test case patching the HTTP session of the api client."""

    def setUp(self) -> None:
        super().setUp()
        self.session_request = patch('requests.Session.request').start()
        self.addCleanup(patch.stopall)

    def set_response(self, status_code: int = 200, body: Any = None, json_error: bool = False) -> None:
        self.session_request.return_value = mock_response(status_code, body, json_error)

    def last_call(self):
        """Returns the (method, url, kwargs) of the last request."""
        args, kwargs = self.session_request.call_args
        return args[0], args[1], kwargs


class ConfigPathsSmokeTest(BaseTestCase):
    def test_real_paths_exist(self):
        cp = lib.ConfigPaths(config_dir=self.config_dir)
        self.assertTrue(cp.settings_template.exists())
        self.assertTrue(cp.settings_path.exists())
