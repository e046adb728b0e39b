"""Bar chart view for the monthly and payment method totals."""
from typing import Optional

from PySide6 import QtCore, QtGui, QtWidgets

from ...settings import lib, locale
from ...ui import ui
from ...ui.basechart import BaseChartView

TICK_COUNT: int = 4


class BarChartView(BaseChartView):
    """Vertical or horizontal bar chart.

    Vertical bars share one colour, horizontal bars are coloured per row.
    """

    def __init__(self, title: str = '', horizontal: bool = False,
                 parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(title=title, parent=parent)
        self._horizontal: bool = horizontal
        self._bars_rect = QtCore.QRectF()
        self._show_legend = True

    def _axis_width(self, metrics: QtGui.QFontMetricsF) -> float:
        loc = lib.settings['locale'] or locale.DEFAULT_LOCALE
        text = locale.format_currency_value(self.model.max_value(), loc)
        return metrics.horizontalAdvance(text) + ui.Size.Indicator(2.0)

    def _recalc_geometry(self) -> None:
        sig = (self.model.version, self.width(), self.height())
        if sig == self._geom_sig:
            return

        slices = self.model.slices
        area = self.plot_rect()
        metrics = QtGui.QFontMetricsF(ui.font(ui.Size.SmallText(1.0)))
        max_value = self.model.max_value() or 1.0
        gap = ui.Size.Indicator(1.0)

        if self._horizontal:
            label_width = max((metrics.horizontalAdvance(sl.label) for sl in slices), default=0.0)
            label_width = min(label_width + gap * 2, area.width() * 0.35)
            self._bars_rect = area.adjusted(label_width, 0, -self._axis_width(metrics), 0)
            step = self._bars_rect.height() / max(len(slices), 1)
            for n, sl in enumerate(slices):
                w = self._bars_rect.width() * max(sl.value, 0.0) / max_value * self._anim_progress
                sl.rect = QtCore.QRectF(
                    self._bars_rect.left(), self._bars_rect.top() + n * step + gap,
                    w, max(step - gap * 2, 1.0)
                )
        else:
            self._bars_rect = area.adjusted(self._axis_width(metrics), 0, 0, -metrics.height() - gap * 2)
            step = self._bars_rect.width() / max(len(slices), 1)
            for n, sl in enumerate(slices):
                h = self._bars_rect.height() * max(sl.value, 0.0) / max_value * self._anim_progress
                sl.rect = QtCore.QRectF(
                    self._bars_rect.left() + n * step + step * 0.15,
                    self._bars_rect.bottom() - h,
                    step * 0.7,
                    h
                )

        self._geom_sig = sig

    def _slice_at(self, pos: QtCore.QPoint) -> int:
        p = QtCore.QPointF(pos)
        for index, sl in enumerate(self.model.slices):
            rect = QtCore.QRectF(sl.rect)
            # Hovering anywhere in the bar's column counts
            if self._horizontal:
                rect.setLeft(self._bars_rect.left())
                rect.setRight(self._bars_rect.right())
            else:
                rect.setTop(self._bars_rect.top())
            if rect.contains(p):
                return index
        return -1

    def _draw_slices(self, painter: QtGui.QPainter) -> None:
        painter.setPen(QtCore.Qt.NoPen)
        o = ui.Size.Indicator(0.5)
        for idx, sl in enumerate(self.model.slices):
            color = QtGui.QColor(sl.color if self._horizontal else ui.chart_color(0))
            if idx == self._hover_index:
                color = color.lighter(120)
            painter.setBrush(color)
            painter.drawRoundedRect(sl.rect, o, o)

    def _draw_legend(self, painter: QtGui.QPainter) -> None:
        """Draws the value axis and the bar labels."""
        font = ui.font(ui.Size.SmallText(1.0))
        metrics = QtGui.QFontMetricsF(font)
        painter.setFont(font)
        loc = lib.settings['locale'] or locale.DEFAULT_LOCALE
        max_value = self.model.max_value()

        grid_pen = QtGui.QPen(ui.Color.Background(), ui.Size.Separator(1.0), QtCore.Qt.DashLine)
        for i in range(TICK_COUNT + 1):
            value = max_value * i / TICK_COUNT
            text = locale.format_currency_value(round(value), loc)
            if self._horizontal:
                x = self._bars_rect.left() + self._bars_rect.width() * i / TICK_COUNT
                painter.setPen(grid_pen)
                painter.drawLine(QtCore.QPointF(x, self._bars_rect.top()), QtCore.QPointF(x, self._bars_rect.bottom()))
            else:
                y = self._bars_rect.bottom() - self._bars_rect.height() * i / TICK_COUNT
                painter.setPen(grid_pen)
                painter.drawLine(QtCore.QPointF(self._bars_rect.left(), y), QtCore.QPointF(self._bars_rect.right(), y))
                painter.setPen(ui.Color.SecondaryText())
                painter.drawText(
                    QtCore.QRectF(self.plot_rect().left(), y - metrics.height() / 2,
                                  self._bars_rect.left() - self.plot_rect().left() - ui.Size.Indicator(1.0),
                                  metrics.height()),
                    QtCore.Qt.AlignRight | QtCore.Qt.AlignVCenter,
                    text
                )

        painter.setPen(ui.Color.SecondaryText())
        for sl in self.model.slices:
            if self._horizontal:
                rect = QtCore.QRectF(
                    self.plot_rect().left(), sl.rect.top(),
                    self._bars_rect.left() - self.plot_rect().left() - ui.Size.Indicator(1.0), sl.rect.height()
                )
                text = metrics.elidedText(sl.label, QtCore.Qt.ElideRight, rect.width())
                painter.drawText(rect, QtCore.Qt.AlignRight | QtCore.Qt.AlignVCenter, text)
            else:
                rect = QtCore.QRectF(
                    sl.rect.center().x() - sl.rect.width(), self._bars_rect.bottom() + ui.Size.Indicator(1.0),
                    sl.rect.width() * 2, metrics.height()
                )
                text = metrics.elidedText(sl.label, QtCore.Qt.ElideRight, rect.width())
                painter.drawText(rect, QtCore.Qt.AlignHCenter | QtCore.Qt.AlignTop, text)
