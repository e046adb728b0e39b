"""Daily spending trend line chart.

This module provides:
    - paint decorator: wraps paint helpers with save/restore and error logging
    - TrendChartView: line chart of the daily totals, oldest day first
"""
import logging
from typing import Optional

import pandas as pd
from PySide6 import QtCore, QtGui, QtWidgets

from ...settings import lib, locale
from ...ui import ui
from ...ui.basechart import BaseChartView

TICK_COUNT: int = 4


def paint(func):
    """Decorator to wrap paint helpers with save/restore + exception log."""

    def wrapper(self, painter: QtGui.QPainter) -> None:
        painter.save()
        try:
            func(self, painter)
        except Exception as ex:
            logging.error(f'TrendChartView: error in {func.__name__}', exc_info=ex)
        painter.restore()

    return wrapper


class TrendChartView(BaseChartView):
    """Line chart of daily totals."""

    def __init__(self, title: str = '', parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(title=title, parent=parent)
        self._line_rect = QtCore.QRectF()
        self._line_path = QtGui.QPainterPath()

    def set_data(self, df: pd.DataFrame) -> None:
        """Rebuild the chart from a date/value DataFrame, see :func:`data.trends_chart_frame`."""
        if df is not None and not df.empty and 'date' in df.columns:
            loc = lib.settings['locale'] or locale.DEFAULT_LOCALE
            df = pd.DataFrame({
                'label': [locale.format_short_date(d.date(), loc) for d in df['date']],
                'value': df['value'],
            })
        super().set_data(df)

    def _recalc_geometry(self) -> None:
        sig = (self.model.version, self.width(), self.height())
        if sig == self._geom_sig:
            return

        slices = self.model.slices
        area = self.plot_rect()
        metrics = QtGui.QFontMetricsF(ui.font(ui.Size.SmallText(1.0)))
        loc = lib.settings['locale'] or locale.DEFAULT_LOCALE
        axis_width = metrics.horizontalAdvance(
            locale.format_currency_value(self.model.max_value(), loc)
        ) + ui.Size.Indicator(2.0)
        self._line_rect = area.adjusted(axis_width, metrics.height() / 2, -ui.Size.Indicator(2.0),
                                        -metrics.height() - ui.Size.Indicator(2.0))

        max_value = self.model.max_value() or 1.0
        step = self._line_rect.width() / max(len(slices) - 1, 1)

        self._line_path = QtGui.QPainterPath()
        for n, sl in enumerate(slices):
            x = self._line_rect.left() + n * step if len(slices) > 1 else self._line_rect.center().x()
            h = self._line_rect.height() * max(sl.value, 0.0) / max_value * self._anim_progress
            sl.point = QtCore.QPointF(x, self._line_rect.bottom() - h)
            sl.rect = QtCore.QRectF(x - step / 2, self._line_rect.top(), step, self._line_rect.height())
            if n == 0:
                self._line_path.moveTo(sl.point)
            else:
                self._line_path.lineTo(sl.point)

        self._geom_sig = sig

    def _slice_at(self, pos: QtCore.QPoint) -> int:
        p = QtCore.QPointF(pos)
        for index, sl in enumerate(self.model.slices):
            if sl.rect.contains(p):
                return index
        return -1

    @paint
    def _draw_slices(self, painter: QtGui.QPainter) -> None:
        pen = QtGui.QPen(ui.chart_color(4), ui.Size.Separator(2.0))
        pen.setJoinStyle(QtCore.Qt.RoundJoin)
        pen.setCapStyle(QtCore.Qt.RoundCap)
        painter.setPen(pen)
        painter.setBrush(QtCore.Qt.NoBrush)
        painter.drawPath(self._line_path)

        painter.setPen(QtCore.Qt.NoPen)
        for idx, sl in enumerate(self.model.slices):
            r = ui.Size.Indicator(1.5 if idx == self._hover_index else 0.75)
            painter.setBrush(ui.chart_color(4))
            painter.drawEllipse(sl.point, r, r)

    @paint
    def _draw_legend(self, painter: QtGui.QPainter) -> None:
        """Draws the value axis and the first, middle and last date labels."""
        font = ui.font(ui.Size.SmallText(1.0))
        metrics = QtGui.QFontMetricsF(font)
        painter.setFont(font)
        loc = lib.settings['locale'] or locale.DEFAULT_LOCALE
        max_value = self.model.max_value()

        grid_pen = QtGui.QPen(ui.Color.Background(), ui.Size.Separator(1.0), QtCore.Qt.DashLine)
        for i in range(TICK_COUNT + 1):
            y = self._line_rect.bottom() - self._line_rect.height() * i / TICK_COUNT
            painter.setPen(grid_pen)
            painter.drawLine(QtCore.QPointF(self._line_rect.left(), y), QtCore.QPointF(self._line_rect.right(), y))
            painter.setPen(ui.Color.SecondaryText())
            painter.drawText(
                QtCore.QRectF(self.plot_rect().left(), y - metrics.height() / 2,
                              self._line_rect.left() - self.plot_rect().left() - ui.Size.Indicator(1.0),
                              metrics.height()),
                QtCore.Qt.AlignRight | QtCore.Qt.AlignVCenter,
                locale.format_currency_value(round(max_value * i / TICK_COUNT), loc)
            )

        slices = self.model.slices
        indexes = sorted({0, len(slices) // 2, len(slices) - 1})
        painter.setPen(ui.Color.SecondaryText())
        for i in indexes:
            sl = slices[i]
            w = metrics.horizontalAdvance(sl.label)
            x = min(max(sl.point.x() - w / 2, self._line_rect.left()), self._line_rect.right() - w)
            painter.drawText(QtCore.QPointF(x, self._line_rect.bottom() + ui.Size.Indicator(1.0) + metrics.ascent()),
                             sl.label)
