"""UI styling utilities for ExpenseBoard.

This module provides:
    - Theme: supported UI themes (light, dark)
    - Size: standardized size constants and scaling logic
    - Color: standardized color palette for widgets and themes
    - CHART_COLORS: the series colours used by the charts
    - font: sized copies of the application font
    - apply_theme: applies the themed palette to the application
    - RoundedRowDelegate: table delegate drawing rounded row selections
    - PageHeader, StatCard: widgets shared by the views
"""
import enum
import math
import os
import logging
from typing import List, Optional

from PySide6 import QtWidgets, QtGui, QtCore

CHART_COLORS: List[str] = [
    '#0088FE',
    '#00C49F',
    '#FFBB28',
    '#FF8042',
    '#8884D8',
    '#82CA9D',
]


def chart_color(index: int) -> QtGui.QColor:
    """Returns the chart colour for the given series index, cycling through CHART_COLORS."""
    return QtGui.QColor(CHART_COLORS[index % len(CHART_COLORS)])


class Theme(enum.StrEnum):
    Light = 'light'
    Dark = 'dark'


class Size(enum.Enum):
    """Enumeration of size values used for UI scaling."""
    SmallText = 11.0
    MediumText = 12.0
    LargeText = 16.0
    Indicator = 4.0
    Separator = 1.0
    Margin = 18.0
    Section = 86.0
    RowHeight = 34.0
    DefaultWidth = 640.0
    DefaultHeight = 480.0

    def __new__(cls, value):
        obj = object.__new__(cls)
        obj._value_ = float(value)
        return obj

    def __eq__(self, other):
        if isinstance(other, (float, int)):
            return self._value_ == float(other)
        return super().__eq__(other)

    def __hash__(self):
        return hash(self._value_)

    def __call__(self, multiplier=1.0, apply_scale=True):
        """
        Returns the scaled size value.

        Args:
            multiplier (float): A multiplier to apply to the size.
            apply_scale (bool): If True, applies UI scaling factors.

        Returns:
            int: The scaled size.
        """
        if apply_scale:
            return round(self.value * float(multiplier))
        return round(self._value_ * float(multiplier))

    @property
    def value(self):
        """float: The scaled size value."""
        return self.size(self._value_)

    @classmethod
    def size(cls, value, ui_scale_factor=1.0, dpi=72.0):
        """Scale a value by DPI and UI scale factor."""
        return math.ceil(float(value) * (float(dpi) / 72.0)) * float(ui_scale_factor)


class Color(enum.Enum):
    """Enumeration of colours used across the UI."""

    Transparent = {
        Theme.Light.value: (0, 0, 0, 0),
        Theme.Dark.value: (0, 0, 0, 0),
    }
    VeryDarkBackground = {
        Theme.Light.value: (245, 245, 245),
        Theme.Dark.value: (30, 30, 30),
    }
    DarkBackground = {
        Theme.Light.value: (235, 235, 235),
        Theme.Dark.value: (45, 45, 45),
    }
    Background = {
        Theme.Light.value: (210, 210, 210),
        Theme.Dark.value: (65, 65, 65),
    }
    LightBackground = {
        Theme.Light.value: (190, 190, 190),
        Theme.Dark.value: (85, 85, 85),
    }
    DisabledText = {
        Theme.Light.value: (120, 120, 120),
        Theme.Dark.value: (135, 135, 135),
    }
    SecondaryText = {
        Theme.Light.value: (70, 70, 70),
        Theme.Dark.value: (185, 185, 185),
    }
    Text = {
        Theme.Light.value: (30, 30, 30),
        Theme.Dark.value: (225, 225, 225),
    }
    SelectedText = {
        Theme.Light.value: (0, 0, 0),
        Theme.Dark.value: (255, 255, 255),
    }
    Blue = {
        Theme.Light.value: (0, 110, 200),
        Theme.Dark.value: (88, 138, 180),
    }
    Red = {
        Theme.Light.value: (179, 54, 54),
        Theme.Dark.value: (229, 114, 114),
    }
    Green = {
        Theme.Light.value: (40, 150, 95),
        Theme.Dark.value: (90, 200, 155),
    }

    @classmethod
    def _get_theme(cls):
        from ..settings import lib
        theme = lib.settings['theme']
        if theme not in [f.value for f in Theme]:
            theme = Theme.Light.value
        return theme

    def __new__(cls, v):
        if not isinstance(v, dict):
            raise ValueError(f'Invalid color value: {v}. Must be a dictionary, got {type(v)}: {v}')
        obj = object.__new__(cls)
        obj._value_ = v
        return obj

    def __call__(self, qss=False):
        """
        Returns a QColor or CSS rgba string.

        Args:
            qss (bool): If True, returns a CSS rgba string suitable for QSS.

        Returns:
            QColor or str: A QColor instance if qss=False, otherwise a CSS rgba string.
        """
        theme = self._get_theme()
        if theme not in self._value_:
            theme = Theme.Light.value

        color = QtGui.QColor(*self._value_[theme])
        if not qss:
            return color

        return self.rgb(color)

    @staticmethod
    def rgb(color):
        """Returns the CSS rgba string for a QColor."""
        rgb = [str(f) for f in color.getRgb()]
        return f'rgba({",".join(rgb)})'


def font(size: float, bold: bool = False) -> QtGui.QFont:
    """
    Returns a copy of the application font with the given pixel size.

    Args:
        size (float): The pixel size.
        bold (bool): Use a bold weight.

    Returns:
        QFont: The font.
    """
    if size <= 0:
        raise RuntimeError(f'Font size must be greater than 0, got {size}')

    f = QtGui.QFont(QtWidgets.QApplication.font())
    f.setPixelSize(round(size))
    if bold:
        f.setWeight(QtGui.QFont.DemiBold)
    return f


def themed_palette() -> QtGui.QPalette:
    """Builds the application palette for the current theme."""
    palette = QtGui.QPalette()
    palette.setColor(QtGui.QPalette.Window, Color.VeryDarkBackground())
    palette.setColor(QtGui.QPalette.Base, Color.DarkBackground())
    palette.setColor(QtGui.QPalette.AlternateBase, Color.VeryDarkBackground())
    palette.setColor(QtGui.QPalette.Button, Color.DarkBackground())
    palette.setColor(QtGui.QPalette.Mid, Color.Background())
    palette.setColor(QtGui.QPalette.Dark, Color.LightBackground())
    palette.setColor(QtGui.QPalette.WindowText, Color.Text())
    palette.setColor(QtGui.QPalette.Text, Color.Text())
    palette.setColor(QtGui.QPalette.ButtonText, Color.Text())
    palette.setColor(QtGui.QPalette.PlaceholderText, Color.SecondaryText())
    palette.setColor(QtGui.QPalette.Highlight, Color.Blue())
    palette.setColor(QtGui.QPalette.HighlightedText, Color.SelectedText())
    palette.setColor(QtGui.QPalette.Link, Color.Blue())
    palette.setColor(QtGui.QPalette.ToolTipBase, Color.DarkBackground())
    palette.setColor(QtGui.QPalette.ToolTipText, Color.Text())

    for role in (QtGui.QPalette.WindowText, QtGui.QPalette.Text, QtGui.QPalette.ButtonText):
        palette.setColor(QtGui.QPalette.Disabled, role, Color.DisabledText())
    return palette


def apply_theme() -> None:
    """Set the themed palette for the entire app.

    This function should be called after the QApplication is created.

    """
    if not QtWidgets.QApplication.instance():
        raise RuntimeError('apply_theme() must be called after a QApplication is initiated.')

    if os.environ.get('EXPENSEBOARD_DISABLE_THEME', '').lower() in ['1', 'true', 'yes']:
        logging.warning('Theme disabled by environment variable.')
        return

    app = QtWidgets.QApplication.instance()
    app.setStyle('Fusion')
    app.setPalette(themed_palette())

    for widget in app.topLevelWidgets():
        widget.update()


class RoundedRowDelegate(QtWidgets.QStyledItemDelegate):
    """Delegate that draws rounded-corner backgrounds for selected row cells."""

    def __init__(self, first_column: int = 0, last_column: int = -1,
                 parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent=parent)

        self._first_column = first_column
        self._last_column = last_column

    def paint(self, painter: QtGui.QPainter, option: QtWidgets.QStyleOptionViewItem,
              index: QtCore.QModelIndex) -> None:
        """Paint the item with rounded corners if selected."""
        selected = option.state & QtWidgets.QStyle.State_Selected
        column = index.column()

        painter.save()
        painter.setRenderHint(QtGui.QPainter.Antialiasing)
        painter.setPen(QtCore.Qt.NoPen)
        color = Color.Background() if selected else Color.Transparent()
        painter.setBrush(color)

        last_column = index.model().columnCount() + self._last_column

        o = Size.Indicator(1.5)
        rect1 = QtCore.QRect(option.rect)
        rect2 = QtCore.QRect(option.rect)
        half = option.rect.width() // 2

        if column == self._first_column:
            rect1 = rect1.adjusted(0, 0, -half + o, 0)
            painter.drawRoundedRect(rect1, o, o)
            rect2 = rect2.adjusted(half, 0, 0, 0)
            painter.fillRect(rect2, color)
        elif column == last_column:
            rect1 = rect1.adjusted(half, 0, 0, 0)
            painter.drawRoundedRect(rect1, o, o)
            rect2 = rect2.adjusted(0, 0, -half + o, 0)
            painter.fillRect(rect2, color)
        else:
            painter.fillRect(option.rect, color)
        painter.restore()

        # The selection background is already drawn
        opt = QtWidgets.QStyleOptionViewItem(option)
        opt.state &= ~QtWidgets.QStyle.State_Selected
        super().paint(painter, opt, index)


class PageHeader(QtWidgets.QWidget):
    """Title and subtitle shown at the top of every view."""

    def __init__(self, title: str, subtitle: str = '', parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent=parent)

        QtWidgets.QVBoxLayout(self)
        self.layout().setContentsMargins(0, 0, 0, Size.Indicator(2.0))
        self.layout().setSpacing(Size.Indicator(1.0))

        self.title_label = QtWidgets.QLabel(title, parent=self)
        self.title_label.setFont(font(Size.LargeText(1.5), bold=True))
        self.layout().addWidget(self.title_label)

        self.subtitle_label = QtWidgets.QLabel(subtitle, parent=self)
        self.subtitle_label.setForegroundRole(QtGui.QPalette.PlaceholderText)
        self.subtitle_label.setVisible(bool(subtitle))
        self.layout().addWidget(self.subtitle_label)


class StatCard(QtWidgets.QFrame):
    """A rounded card showing a caption, a large value and a footnote."""

    def __init__(self, caption: str, footnote: str = '', color: Optional[str] = None,
                 parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent=parent)
        self._color = QtGui.QColor(color) if color else None

        self.setSizePolicy(QtWidgets.QSizePolicy.Expanding, QtWidgets.QSizePolicy.Maximum)

        QtWidgets.QVBoxLayout(self)
        o = Size.Margin(0.75)
        self.layout().setContentsMargins(o, o, o, o)
        self.layout().setSpacing(Size.Indicator(1.0))

        self.caption_label = QtWidgets.QLabel(caption, parent=self)
        self.caption_label.setFont(font(Size.SmallText(1.0), bold=True))
        self.layout().addWidget(self.caption_label)

        self.value_label = QtWidgets.QLabel('', parent=self)
        self.value_label.setFont(font(Size.LargeText(1.5), bold=True))
        self.layout().addWidget(self.value_label)

        self.footnote_label = QtWidgets.QLabel(footnote, parent=self)
        self.footnote_label.setFont(font(Size.SmallText(1.0)))
        self.footnote_label.setVisible(bool(footnote))
        self.layout().addWidget(self.footnote_label)

        # Labels on a coloured card are drawn in white
        if self._color:
            palette = self.palette()
            palette.setColor(QtGui.QPalette.WindowText, QtGui.QColor(255, 255, 255))
            for label in (self.caption_label, self.value_label, self.footnote_label):
                label.setPalette(palette)

    def set_value(self, text: str) -> None:
        self.value_label.setText(text)

    def value(self) -> str:
        return self.value_label.text()

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:
        painter = QtGui.QPainter(self)
        painter.setRenderHint(QtGui.QPainter.Antialiasing)
        painter.setPen(QtCore.Qt.NoPen)
        painter.setBrush(self._color if self._color else Color.DarkBackground())
        o = Size.Indicator(2.0)
        painter.drawRoundedRect(self.rect(), o, o)
        painter.end()
