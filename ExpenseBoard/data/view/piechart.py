"""Pie chart view for visualizing category and payment method distributions."""
import math
from typing import Optional

from PySide6 import QtCore, QtGui, QtWidgets

from ...ui import ui
from ...ui.basechart import BaseChartView


class PieChartView(BaseChartView):
    """Pie chart with a hover pop-out and a side legend."""

    def __init__(self, title: str = '', parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(title=title, parent=parent)
        self.max_offset_px = ui.Size.Indicator(3.0)
        self._pie_rect = QtCore.QRectF()
        self._legend_rect = QtCore.QRectF()

    @staticmethod
    def _slice_path(rect: QtCore.QRectF, start_deg: float, span_deg: float) -> QtGui.QPainterPath:
        path = QtGui.QPainterPath()
        path.moveTo(rect.center())
        path.arcTo(rect, start_deg, span_deg)
        path.closeSubpath()
        return path

    def _recalc_geometry(self) -> None:
        sig = (self.model.version, self.width(), self.height())
        if sig == self._geom_sig:
            return

        area = self.plot_rect()
        if self._show_legend:
            legend_width = area.width() * 0.4
            self._legend_rect = QtCore.QRectF(area.right() - legend_width, area.top(), legend_width, area.height())
            area.setRight(area.right() - legend_width - ui.Size.Indicator(2.0))

        edge = min(area.width(), area.height()) - self.max_offset_px * 2
        edge = max(edge, 0.0)
        self._pie_rect = QtCore.QRectF(
            area.x() + (area.width() - edge) / 2,
            area.y() + (area.height() - edge) / 2,
            edge,
            edge,
        )

        for sl in self.model.slices:
            start_deg = sl.start_qt / 16.0
            span_deg = sl.span_qt / 16.0 * self._anim_progress
            sl.mid_deg = start_deg + span_deg / 2.0
            sl.rect = QtCore.QRectF(self._pie_rect)
            sl.path = self._slice_path(sl.rect, start_deg, span_deg)

        self._geom_sig = sig

    def _slice_at(self, pos: QtCore.QPoint) -> int:
        for index, sl in enumerate(self.model.slices):
            if sl.path.contains(QtCore.QPointF(pos)):
                return index
        return -1

    def _draw_slices(self, painter: QtGui.QPainter) -> None:
        for idx, sl in enumerate(self.model.slices):
            rect = QtCore.QRectF(sl.rect)
            if idx == self._hover_index:
                theta = math.radians(sl.mid_deg)
                rect.translate(
                    self.max_offset_px * math.cos(theta),
                    -self.max_offset_px * math.sin(theta)
                )
            painter.setBrush(sl.color)
            painter.setPen(QtGui.QPen(ui.Color.DarkBackground(), ui.Size.Separator(1.0)))
            painter.drawPie(rect, sl.start_qt, int(sl.span_qt * self._anim_progress))

    def _draw_legend(self, painter: QtGui.QPainter) -> None:
        font = ui.font(ui.Size.SmallText(1.0))
        metrics = QtGui.QFontMetricsF(font)
        painter.setFont(font)

        pad = ui.Size.Indicator(1.0)
        row_height = metrics.height() + pad * 2
        swatch = metrics.height() * 0.8

        y = self._legend_rect.top()
        for idx, sl in enumerate(self.model.slices):
            if y + row_height > self._legend_rect.bottom():
                break

            painter.setPen(QtCore.Qt.NoPen)
            painter.setBrush(sl.color)
            painter.drawRoundedRect(
                QtCore.QRectF(self._legend_rect.left(), y + (row_height - swatch) / 2, swatch, swatch),
                pad, pad
            )

            text = metrics.elidedText(sl.legend_text(), QtCore.Qt.ElideMiddle, self._legend_rect.width() - swatch - pad * 2)
            painter.setPen(ui.Color.Text() if idx == self._hover_index else ui.Color.SecondaryText())
            painter.drawText(
                QtCore.QRectF(self._legend_rect.left() + swatch + pad * 2, y, self._legend_rect.width(), row_height),
                QtCore.Qt.AlignLeft | QtCore.Qt.AlignVCenter,
                text
            )
            y += row_height
