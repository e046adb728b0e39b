"""Application setup utilities and custom QApplication for ExpenseBoard.

This module provides:
    - set_app_icon: set the window icon when the config template ships one
    - set_model_id: set Windows AppUserModelID for custom window icons on Windows
    - Application: subclass of QApplication configuring application metadata and theme
"""
import ctypes
import logging
import sys
import uuid
from typing import Optional, Sequence

from PySide6 import QtCore, QtWidgets, QtGui

__version__ = '0.1.0'


def set_app_icon() -> None:
    """Set application icon for all platforms."""
    from ..settings import lib
    icon_path = lib.settings.template_dir / 'icon.png'
    if not icon_path.exists():
        logging.debug(f'No application icon found at {icon_path}')
        return
    app = QtWidgets.QApplication.instance()
    app.setWindowIcon(QtGui.QIcon(icon_path.as_posix()))


def set_model_id() -> None:
    """Set windows model id to add custom window icons on windows.
    https://github.com/cztomczak/cefpython/issues/395
    """
    if QtCore.QSysInfo().productType() not in ('windows', 'winrt'):
        return

    hresult = ctypes.windll.shell32.SetCurrentProcessExplicitAppUserModelID(
        f'ExpenseBoard-{uuid.uuid4()}'
    )
    if hresult != 0:
        raise RuntimeError(f'SetCurrentProcessExplicitAppUserModelID failed with code {hresult}')


class Application(QtWidgets.QApplication):
    """Custom QApplication setting the application metadata, icon and theme."""

    def __init__(self, argv: Optional[Sequence[str]] = None) -> None:
        if argv is None:
            argv = sys.argv

        super().__init__(list(argv))

        from ..settings import lib
        self.setApplicationName(lib.app_name)
        self.setApplicationDisplayName('Finance Assistant')
        self.setOrganizationName('')
        self.setApplicationVersion(__version__)
        self.setQuitOnLastWindowClosed(True)

        set_model_id()
        set_app_icon()

        from . import ui
        ui.apply_theme()

        self.aboutToQuit.connect(self._about_to_quit)

    @QtCore.Slot()
    def _about_to_quit(self) -> None:
        from ..core import api, service
        service.wait_for_workers()
        api.clear_session()
