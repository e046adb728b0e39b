"""Shared chart slice, model, and base view for the summary charts.

The model is built from a DataFrame with ``label`` and ``value`` columns, and an optional
``percentage`` column of server-supplied shares. It keeps a ChartSlice per row. The views
only add geometry and painting.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import pandas as pd
from PySide6 import QtCore, QtGui, QtWidgets

from . import ui
from ..settings import lib, locale


@dataclass(slots=True)
class ChartSlice:
    """Slice data plus optional geometry."""
    label: str
    amount_txt: str
    value: float
    color: QtGui.QColor
    start_qt: int = 0
    span_qt: int = 0
    percentage: Optional[float] = None
    # geometry fields for rendering
    rect: QtCore.QRectF = field(default_factory=QtCore.QRectF, repr=False)
    path: QtGui.QPainterPath = field(default_factory=QtGui.QPainterPath, repr=False)
    point: QtCore.QPointF = field(default_factory=QtCore.QPointF, repr=False)
    mid_deg: float = 0.0

    def legend_text(self) -> str:
        """Label with the server share, or with the amount when no share was given."""
        if self.percentage is None:
            return f'{self.label} {self.amount_txt}'
        return f'{self.label} ({self.percentage:.1f}%)'


class ChartModel(QtCore.QObject):
    """Model for constructing ChartSlice instances from a label/value DataFrame."""

    def __init__(self, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent=parent)
        self._slices: List[ChartSlice] = []
        self._version: int = 0

    @property
    def slices(self) -> List[ChartSlice]:
        return self._slices

    @property
    def version(self) -> int:
        return self._version

    def max_value(self) -> float:
        return max((sl.value for sl in self._slices), default=0.0)

    def rebuild(self, df: pd.DataFrame) -> None:
        """Populate slices from the given DataFrame.

        Args:
            df (pd.DataFrame): A frame with ``label`` and ``value`` columns, in display order.
                An optional ``percentage`` column is stored on the slices as is.
        """
        if df is None or df.empty:
            logging.debug('ChartModel: no data available')
            self._slices = []
            self._version += 1
            return

        loc = lib.settings['locale'] or locale.DEFAULT_LOCALE
        qt_circle = 360 * 16
        rotation_qt = 90 * 16
        total_abs = float(df['value'].abs().sum())

        spans: List[int] = []
        for value in df['value']:
            spans.append(int(round(abs(value) / total_abs * qt_circle)) if total_abs else 0)

        # Give the rounding leftover to the largest slice so the pie closes
        if total_abs:
            leftover = qt_circle - sum(spans)
            if leftover:
                max_idx = int(df['value'].abs().reset_index(drop=True).idxmax())
                spans[max_idx] += leftover

        percentages = df['percentage'] if 'percentage' in df.columns else [None] * len(df)

        cursor = 0
        new_slices: List[ChartSlice] = []
        for idx, (label, value, percentage) in enumerate(zip(df['label'], df['value'], percentages)):
            new_slices.append(
                ChartSlice(
                    label=str(label),
                    amount_txt=locale.format_currency_value(value, loc),
                    value=float(value),
                    color=ui.chart_color(idx),
                    start_qt=(cursor + rotation_qt) % qt_circle,
                    span_qt=spans[idx],
                    percentage=None if percentage is None else float(percentage),
                )
            )
            cursor += spans[idx]

        self._slices = new_slices
        self._version += 1

    def clear(self) -> None:
        """Clear the model."""
        self._slices = []
        self._version += 1


class BaseChartView(QtWidgets.QWidget):
    """Base widget for the summary charts.

    Signals:
        hoverChanged (int): Emitted with the hovered slice index, or -1.
    """
    hoverChanged = QtCore.Signal(int)

    def __init__(self, title: str = '', empty_text: str = 'No data to display',
                 parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self._title: str = title
        self._empty_text: str = empty_text
        self._show_legend: bool = True
        self._show_tooltip: bool = True
        self._geom_sig: tuple[int, int, int] = (-1, -1, -1)
        self._hover_index: int = -1

        self._anim_progress = 1.0

        self.model = ChartModel(parent=self)

        self.setMouseTracking(True)
        self.setContextMenuPolicy(QtCore.Qt.ActionsContextMenu)

        self._animation = QtCore.QVariantAnimation(self)
        self._animation.setDuration(400)
        self._animation.setStartValue(0.0)
        self._animation.setEndValue(1.0)
        self._animation.setEasingCurve(QtCore.QEasingCurve.OutQuad)
        self._animation.setLoopCount(1)

        self._create_ui()
        self._connect_signals()
        self._init_actions()

    def _create_ui(self) -> None:
        self.setMinimumSize(
            ui.Size.DefaultWidth(0.4), ui.Size.DefaultHeight(0.5)
        )
        self.setSizePolicy(
            QtWidgets.QSizePolicy.Expanding, QtWidgets.QSizePolicy.Expanding
        )

    def _connect_signals(self) -> None:
        def on_anim_value_changed(value: float) -> None:
            self._anim_progress = value
            self._geom_sig = (-1, -1, -1)
            self.update()

        self._animation.valueChanged.connect(on_anim_value_changed)

    def _init_actions(self) -> None:
        @QtCore.Slot(bool)
        def toggle_legend(checked: bool) -> None:
            self._show_legend = checked
            self.update()

        action = QtGui.QAction('Toggle Legend', self)
        action.setCheckable(True)
        action.setChecked(self._show_legend)
        action.setToolTip('Show/hide legend')
        action.setStatusTip('Show/hide legend')
        action.setShortcut('Alt+1')
        action.setShortcutContext(QtCore.Qt.WidgetShortcut)
        action.triggered.connect(toggle_legend)
        self.addAction(action)

        @QtCore.Slot(bool)
        def toggle_tooltip(checked: bool) -> None:
            self._show_tooltip = checked
            self.update()

        action = QtGui.QAction('Toggle Tooltip', self)
        action.setCheckable(True)
        action.setChecked(self._show_tooltip)
        action.setToolTip('Show/hide tooltip')
        action.setStatusTip('Show/hide tooltip')
        action.setShortcut('Alt+2')
        action.setShortcutContext(QtCore.Qt.WidgetShortcut)
        action.triggered.connect(toggle_tooltip)
        self.addAction(action)

    def title(self) -> str:
        return self._title

    def set_title(self, title: str) -> None:
        if title == self._title:
            return
        self._title = title
        self._geom_sig = (-1, -1, -1)
        self.update()

    def set_data(self, df: pd.DataFrame) -> None:
        """Rebuild the chart from a label/value DataFrame and animate it in."""
        self.model.rebuild(df)
        self._hover_index = -1
        self._geom_sig = (-1, -1, -1)
        self._animation.stop()
        self._anim_progress = 0.0
        self._animation.start()
        self.update()

    @QtCore.Slot()
    def clear_data(self) -> None:
        self.model.clear()
        self._hover_index = -1
        self._geom_sig = (-1, -1, -1)
        self.update()

    def plot_rect(self) -> QtCore.QRectF:
        """The area available to the chart itself, below the title."""
        o = ui.Size.Margin(1.0)
        rect = QtCore.QRectF(self.rect()).adjusted(o, o, -o, -o)
        if self._title:
            rect.setTop(rect.top() + ui.Size.LargeText(1.0) + ui.Size.Indicator(2.0))
        return rect

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:
        self._recalc_geometry()

        painter = QtGui.QPainter(self)
        painter.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing)

        self._draw_background(painter)
        self._draw_title(painter)

        if not self.model.slices:
            self._draw_empty(painter)
            return

        self._draw_slices(painter)

        if self._show_legend:
            self._draw_legend(painter)

        if self._show_tooltip:
            self._draw_tooltip(painter)

    def _draw_background(self, painter: QtGui.QPainter) -> None:
        painter.setBrush(ui.Color.DarkBackground())
        painter.setPen(QtCore.Qt.NoPen)
        o = ui.Size.Indicator(2.0)
        painter.drawRoundedRect(self.rect(), o, o)

    def _draw_title(self, painter: QtGui.QPainter) -> None:
        if not self._title:
            return
        o = ui.Size.Margin(1.0)
        painter.setFont(ui.font(ui.Size.LargeText(1.0), bold=True))
        painter.setPen(ui.Color.Text())
        rect = QtCore.QRectF(self.rect()).adjusted(o, o, -o, -o)
        rect.setHeight(ui.Size.LargeText(1.0) + ui.Size.Indicator(1.0))
        painter.drawText(rect, QtCore.Qt.AlignLeft | QtCore.Qt.AlignVCenter, self._title)

    def _draw_empty(self, painter: QtGui.QPainter) -> None:
        painter.setFont(ui.font(ui.Size.MediumText(1.0)))
        painter.setPen(ui.Color.SecondaryText())
        painter.drawText(self.plot_rect(), QtCore.Qt.AlignCenter, self._empty_text)

    def _draw_tooltip(self, painter: QtGui.QPainter) -> None:
        if not 0 <= self._hover_index < len(self.model.slices):
            return

        sl = self.model.slices[self._hover_index]
        cursor_pos = self.mapFromGlobal(QtGui.QCursor.pos())

        text = f'{sl.label}: {sl.amount_txt}'
        font = ui.font(ui.Size.MediumText(1.0), bold=True)
        metrics = QtGui.QFontMetricsF(font)
        painter.setFont(font)

        pad = ui.Size.Indicator(2.0)
        swatch = metrics.height()
        width = swatch + pad + metrics.horizontalAdvance(text) + pad * 2
        height = swatch + pad * 2

        x = max(self.rect().left(), min(cursor_pos.x() - width / 2, self.rect().right() - width))
        y = cursor_pos.y() - height - pad
        if y < self.rect().top():
            y = cursor_pos.y() + pad

        bg = QtCore.QRectF(x, y, width, height)
        painter.setBrush(ui.Color.VeryDarkBackground())
        painter.setPen(QtCore.Qt.NoPen)
        painter.drawRoundedRect(bg, pad, pad)

        painter.setBrush(sl.color)
        painter.drawRoundedRect(QtCore.QRectF(bg.x() + pad, bg.y() + pad, swatch, swatch), pad, pad)

        painter.setPen(ui.Color.Text())
        painter.drawText(
            QtCore.QPointF(bg.x() + pad + swatch + pad, bg.y() + pad + metrics.ascent()),
            text,
        )

    # Subclasses must implement:
    def _recalc_geometry(self) -> None:
        raise NotImplementedError

    def _draw_slices(self, painter: QtGui.QPainter) -> None:
        raise NotImplementedError

    def _slice_at(self, pos: QtCore.QPoint) -> int:
        raise NotImplementedError

    def _draw_legend(self, painter: QtGui.QPainter) -> None:
        raise NotImplementedError

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:
        idx = self._slice_at(event.pos())
        if idx != self._hover_index:
            self._hover_index = idx
            self.hoverChanged.emit(idx)
        self.update()
        super().mouseMoveEvent(event)

    def leaveEvent(self, event: QtCore.QEvent) -> None:
        if self._hover_index != -1:
            self._hover_index = -1
            self.hoverChanged.emit(-1)
            self.update()
        super().leaveEvent(event)

    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:
        self._geom_sig = (-1, -1, -1)
        self.update()
        super().resizeEvent(event)

    def sizeHint(self) -> QtCore.QSize:
        return QtCore.QSize(ui.Size.DefaultWidth(0.8), ui.Size.DefaultHeight(0.7))
