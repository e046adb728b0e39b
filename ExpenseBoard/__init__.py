"""
ExpenseBoard: desktop client for tracking and analyzing personal expenses stored on a REST API server.

This package provides:

- :mod:`ExpenseBoard.core` – The API client, worker threads and the cached expense store.
- :mod:`ExpenseBoard.data` – Expense records, dashboard statistics, filtering (:func:`ExpenseBoard.data.data.get_dashboard_stats`, :func:`ExpenseBoard.data.data.filter_expenses`), analytics queries, Qt models and the page views.
- :mod:`ExpenseBoard.ui` – A PySide6-based UI with routing, theming, and charts (bar, pie, trends).
- :mod:`ExpenseBoard.settings` – Settings management with schema validation and localization.
- :mod:`ExpenseBoard.log` – In-app logging with a log viewer.

Use :func:`ExpenseBoard.exec_` to launch the application.
"""

import sys

from PySide6 import QtCore

# Fail on Python < 3.11
if not (sys.version_info.major == 3 and sys.version_info.minor >= 11):
    raise RuntimeError('ExpenseBoard requires Python 3.11 or higher.')

__version__ = '0.1.0'
__author__ = 'Gergely Wootsch'
__license__ = 'GPL-3.0'
__copyright__ = 'Copyright (C) 2025 Gergely Wootsch'
__description__ = 'ExpenseBoard: desktop client for tracking and analyzing personal expenses.'
__url__ = 'https://github.com/wgergely/ExpenseBoard'
__email__ = 'hello+ExpenseBoard@gergely-wootsch.com'

from .log import log

log.setup_logging()


def exec_() -> None:
    """Launch the ExpenseBoard GUI application and enter its event loop.

    Initializes the QApplication, shows the main window, and starts the Qt event loop.
    """
    from .ui import app
    from .ui import main
    from .ui.actions import signals
    app = app.Application(sys.argv)
    main.show()

    # Ask components to load their data
    QtCore.QTimer.singleShot(100, signals.initializationRequested.emit)

    sys.exit(app.exec())


if __name__ == '__main__':
    exec_()
