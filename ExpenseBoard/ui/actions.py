"""Application-wide Qt signals and utility slots for ExpenseBoard.

This module provides:
    - Route, resolve_route: the navigable pages and path resolution.
    - open_api_server slot: opens the configured API base url in the browser.
    - Signals: custom Qt signals for configuration changes, routing, notifications
      and log updates.
"""
import enum
import logging

from PySide6 import QtCore, QtGui


class Route(enum.StrEnum):
    """The navigable pages of the application."""
    Dashboard = '/dashboard'
    AddExpense = '/add-expense'
    Expenses = '/expenses'
    Analytics = '/analytics'


ROUTE_LABELS: dict = {
    Route.Dashboard: 'Dashboard',
    Route.AddExpense: 'Add Expense',
    Route.Expenses: 'Expenses',
    Route.Analytics: 'Analytics',
}


def resolve_route(path: str) -> Route:
    """Returns the route for a path. The root and unknown paths resolve to the dashboard."""
    path = (path or '').strip()
    if len(path) > 1:
        path = path.rstrip('/')
    try:
        return Route(path)
    except ValueError:
        if path not in ('', '/'):
            logging.warning(f'Unknown route "{path}", redirecting to {Route.Dashboard}')
        return Route.Dashboard


@QtCore.Slot()
def open_api_server() -> None:
    """
    Opens the configured API server in the default browser.
    """
    from ..settings import lib

    url: str = lib.settings.api_base_url()
    logging.debug(f'Opening api server: {url}')
    QtGui.QDesktopServices.openUrl(QtCore.QUrl(url))


class Signals(QtCore.QObject):
    """Centralized Qt signals for application config, routing, and UI events."""
    initializationRequested = QtCore.Signal()

    configSectionChanged = QtCore.Signal(str)  # Section
    metadataChanged = QtCore.Signal(str, object)

    routeRequested = QtCore.Signal(str)
    routeChanged = QtCore.Signal(str)

    # title, description, is_error
    notificationRequested = QtCore.Signal(str, str, bool)

    openServer = QtCore.Signal()

    showLogs = QtCore.Signal()
    logsChanged = QtCore.Signal()

    def __init__(self):
        super().__init__()
        self._connect_signals()

    def _connect_signals(self):
        self.openServer.connect(open_api_server)

        @QtCore.Slot(str, object)
        def metadata_changed(key: str, value: object) -> None:
            if key != 'theme':
                return

            try:
                from . import ui
                ui.apply_theme()
            except RuntimeError as ex:
                logging.debug(f'Error applying theme: {ex}')

        self.metadataChanged.connect(metadata_changed)


signals = Signals()
