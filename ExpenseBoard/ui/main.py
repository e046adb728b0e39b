"""Main window composition and UI entry points for ExpenseBoard.

This module defines:
    - show(): initialize and display the main window
    - NotificationBar: status bar showing the requested notifications
    - MainWindow: owns the expense store and routes between the pages
"""
import logging
from typing import Dict, Optional

from PySide6 import QtWidgets, QtCore, QtGui

from . import ui
from .actions import Route, resolve_route, signals
from .toolbar import NavigationToolBar
from ..core.store import ExpenseStore
from ..data.view.analytics import AnalyticsView
from ..data.view.dashboard import DashboardView
from ..data.view.expenses import ExpenseListView
from ..data.view.form import ExpenseFormView
from ..settings.lib import app_name

NOTIFICATION_TIMEOUT_MS: int = 5000

widget = None


def show():
    global widget

    if widget is None:
        widget = MainWindow()

    widget.show()


class NotificationBar(QtWidgets.QStatusBar):
    """Status bar displaying transient notifications.

    Error notifications are drawn in the error colour.
    """

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent=parent)
        self.setObjectName('ExpenseBoardNotificationBar')
        self.setSizeGripEnabled(False)

        self._is_error = False
        signals.notificationRequested.connect(self.notify)

    @QtCore.Slot(str, str, bool)
    def notify(self, title: str, description: str, is_error: bool) -> None:
        """Show a notification.

        Args:
            title (str): The short title.
            description (str): Details shown after the title.
            is_error (bool): Whether the notification reports a failure.
        """
        if is_error:
            logging.warning(f'{title}: {description}')
        else:
            logging.info(f'{title}: {description}')

        self._is_error = is_error
        palette = self.palette()
        color = ui.Color.Red() if is_error else ui.Color.Text()
        palette.setColor(QtGui.QPalette.WindowText, color)
        self.setPalette(palette)

        text = f'{title}: {description}' if description else title
        self.showMessage(text, NOTIFICATION_TIMEOUT_MS)

    def is_error(self) -> bool:
        return self._is_error


class MainWindow(QtWidgets.QMainWindow):
    """The application window.

    Owns the :class:`ExpenseStore` shared by every page and a stacked widget with one
    page per :class:`Route`. Pages navigate by emitting ``signals.routeRequested``.
    """

    def __init__(self, store: Optional[ExpenseStore] = None, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent=parent)
        self.setWindowTitle(app_name)
        self.setObjectName('ExpenseBoardMainWindow')

        self.store = store or ExpenseStore(parent=self)
        self._route: Optional[Route] = None

        # Predeclare UI elements for type clarity
        self.toolbar: NavigationToolBar
        self.stack: QtWidgets.QStackedWidget
        self.dashboard_view: DashboardView
        self.form_view: ExpenseFormView
        self.expenses_view: ExpenseListView
        self.analytics_view: AnalyticsView
        self.pages: Dict[Route, QtWidgets.QWidget] = {}

        self._create_ui()
        self._init_actions()
        self._connect_signals()
        self.load_window_settings()

        self.navigate(Route.Dashboard)

    def _create_ui(self) -> None:
        self.toolbar = NavigationToolBar(parent=self)
        self.addToolBar(QtCore.Qt.TopToolBarArea, self.toolbar)

        self.stack = QtWidgets.QStackedWidget(parent=self)
        self.setCentralWidget(self.stack)

        self.dashboard_view = DashboardView(self.store, parent=self.stack)
        self.form_view = ExpenseFormView(self.store, parent=self.stack)
        self.expenses_view = ExpenseListView(self.store, parent=self.stack)
        self.analytics_view = AnalyticsView(parent=self.stack)

        self.pages = {
            Route.Dashboard: self.dashboard_view,
            Route.AddExpense: self.form_view,
            Route.Expenses: self.expenses_view,
            Route.Analytics: self.analytics_view,
        }
        for route, page in self.pages.items():
            self.stack.addWidget(page)
            logging.debug(f'Added page {page.objectName()} for {route}')

        self.setStatusBar(NotificationBar(parent=self))

    def _init_actions(self) -> None:
        menu = self.menuBar().addMenu('&File')

        action = QtGui.QAction('Reload', self)
        action.setStatusTip('Reload the expenses from the server')
        action.triggered.connect(self.reload)
        menu.addAction(action)

        action = QtGui.QAction('Open Server', self)
        action.setStatusTip('Open the API server in the browser')
        action.triggered.connect(signals.openServer)
        menu.addAction(action)

        menu.addSeparator()

        action = QtGui.QAction('Quit', self)
        action.setShortcut(QtGui.QKeySequence.Quit)
        action.triggered.connect(self.close)
        menu.addAction(action)

        menu = self.menuBar().addMenu('&View')
        for route, page_action in self.toolbar.route_actions.items():
            menu.addAction(page_action)
        menu.addSeparator()

        action = QtGui.QAction('Show Logs', self)
        action.setShortcut('Ctrl+L')
        action.triggered.connect(signals.showLogs)
        menu.addAction(action)

    def _connect_signals(self) -> None:
        signals.routeRequested.connect(self.navigate)
        signals.initializationRequested.connect(self.reload)
        self.toolbar.reloadRequested.connect(self.reload)

        @QtCore.Slot()
        def show_logs() -> None:
            from ..log import view
            view.show()

        signals.showLogs.connect(show_logs)

    def route(self) -> Optional[Route]:
        return self._route

    @QtCore.Slot(str)
    def navigate(self, path: str) -> None:
        """Show the page of the given path.

        The root path, and any path not naming a page, shows the dashboard.
        The analytics page refreshes its summaries every time it is shown.
        """
        route = resolve_route(path)
        page = self.pages[route]
        self.stack.setCurrentWidget(page)

        if route == Route.Analytics:
            self.analytics_view.init_data()

        if route != self._route:
            logging.debug(f'Route changed: {self._route} -> {route}')
            self._route = route
        signals.routeChanged.emit(str(route))

    @QtCore.Slot()
    def reload(self) -> None:
        """Load the expense collection from the server."""

        def callback(success: bool) -> None:
            if not success:
                signals.notificationRequested.emit(
                    'Error loading expenses', 'Could not reach the server', True
                )

        self.store.load_async(callback=callback)

    def sizeHint(self):
        return QtCore.QSize(
            ui.Size.DefaultWidth(1.75),
            ui.Size.DefaultHeight(1.75)
        )

    def closeEvent(self, event) -> None:
        """Persist window geometry on close."""
        settings = QtCore.QSettings(app_name, app_name)
        settings.setValue('MainWindow/geometry', self.saveGeometry())
        super().closeEvent(event)

    def load_window_settings(self) -> None:
        settings = QtCore.QSettings(app_name, app_name)
        geometry = settings.value('MainWindow/geometry')

        if isinstance(geometry, QtCore.QByteArray) and self.restoreGeometry(geometry):
            self.clamp_window_to_screens()
            return

        self.resize(self.sizeHint())
        primary = QtGui.QGuiApplication.primaryScreen()
        if not primary:
            return
        avail = primary.availableGeometry()
        x = avail.x() + (avail.width() - self.width()) // 2
        y = avail.y() + (avail.height() - self.height()) // 2
        self.move(x, y)

    def clamp_window_to_screens(self) -> None:
        frame = self.frameGeometry()
        screen = QtGui.QGuiApplication.screenAt(frame.center()) or QtGui.QGuiApplication.primaryScreen()
        if not screen:
            return
        avail = screen.availableGeometry()

        width = min(frame.width(), avail.width())
        height = min(frame.height(), avail.height())

        x = max(avail.left(), min(frame.x(), avail.right() - width))
        y = max(avail.top(), min(frame.y(), avail.bottom() - height))

        self.setGeometry(x, y, width, height)
