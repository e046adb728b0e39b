"""
Toolbar Module.

Implements the navigation toolbar of the main window:

    Title | Dashboard, Add Expense, Expenses, Analytics | Reload

Each page button emits ``routeRequested`` and is checked when the ``routeChanged``
signal names its route. Buttons are exclusive, only the current page is checked.
"""
from typing import Dict, Optional

from PySide6 import QtWidgets, QtCore, QtGui

from . import ui
from .actions import ROUTE_LABELS, Route, signals


class NavigationToolBar(QtWidgets.QToolBar):
    """
    Toolbar with one checkable action per page.

    Signals:
        reloadRequested: Emitted when the reload action is triggered.
    """
    reloadRequested = QtCore.Signal()

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent=parent)
        self.setMovable(False)
        self.setFloatable(False)
        self.setObjectName('ExpenseBoardNavigationToolBar')
        self.setToolButtonStyle(QtCore.Qt.ToolButtonTextOnly)

        self.title_label = None
        self.route_actions: Dict[Route, QtGui.QAction] = {}
        self.reload_action = None

        self._group = QtGui.QActionGroup(self)
        self._group.setExclusive(True)

        self._create_actions()
        self._populate_toolbar()
        self._connect_signals()

    def _create_actions(self) -> None:
        self.title_label = QtWidgets.QLabel('Finance Assistant', parent=self)
        self.title_label.setFont(ui.font(ui.Size.LargeText(1.0), bold=True))
        self.title_label.setContentsMargins(ui.Size.Margin(0.5), 0, ui.Size.Margin(1.0), 0)

        for route, label in ROUTE_LABELS.items():
            action = QtGui.QAction(label, self)
            action.setCheckable(True)
            action.setData(str(route))
            action.setStatusTip(f'Go to {label}')
            self._group.addAction(action)
            self.route_actions[route] = action

        self.reload_action = QtGui.QAction('Reload', self)
        self.reload_action.setShortcut(QtGui.QKeySequence.Refresh)
        self.reload_action.setStatusTip('Reload the expenses from the server')

    def _populate_toolbar(self) -> None:
        self.addWidget(self.title_label)

        for action in self.route_actions.values():
            self.addAction(action)

        spacer = QtWidgets.QWidget(self)
        spacer.setAttribute(QtCore.Qt.WA_TransparentForMouseEvents)
        spacer.setSizePolicy(QtWidgets.QSizePolicy.Expanding, QtWidgets.QSizePolicy.Preferred)
        self.addWidget(spacer)

        self.addAction(self.reload_action)

    def _connect_signals(self) -> None:
        self._group.triggered.connect(lambda action: signals.routeRequested.emit(action.data()))
        self.reload_action.triggered.connect(self.reloadRequested)
        signals.routeChanged.connect(self.set_current_route)

    @QtCore.Slot(str)
    def set_current_route(self, route: str) -> None:
        """Check the action of the given route."""
        try:
            action = self.route_actions[Route(route)]
        except (KeyError, ValueError):
            return
        action.setChecked(True)

    def current_route(self) -> Optional[Route]:
        action = self._group.checkedAction()
        if not action:
            return None
        return Route(action.data())
