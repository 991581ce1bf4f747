"""
PyQtGraph renderer for waveform frames.

One PlotItem per domain, stacked in a GraphicsLayoutWidget with a shared
time window. render() redraws a FrameSnapshot; hover, clicks and manual
pan/zoom are routed back to the SelectionController and to the
view_bounds_changed signal so the owner can keep bounds sticky.
"""

from typing import Dict, List, Optional, Set

import numpy as np
import pyqtgraph as pg
from PyQt6.QtCore import QPointF, Qt, pyqtSignal
from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import QVBoxLayout, QWidget

from pywaveform.core.colors import highlight_color
from pywaveform.core.entity_path import EntityPath
from pywaveform.core.frame import FrameSnapshot
from pywaveform.core.lookup import CURSOR_TIME_TOLERANCE, lookup_analog
from pywaveform.core.selection import SelectionController
from pywaveform.core.series import WaveformSeries
from pywaveform.logging import get_logger
from .layout_planner import DiscreteTrack, DomainLayout, PlotBounds
from .time_axis import TimeType, format_time, ns_grid_marks

logger = get_logger(__name__)

BACKGROUND = '#0d0d0d'
AXIS_COLOR = '#888888'
ERROR_COLOR = '#ff5555'
LABEL_COLOR = '#ffffff'
CURSOR_COLOR = QColor(255, 140, 0)
MARKER_COLOR = QColor(255, 255, 0)

CURVE_WIDTH = 1.5
SELECTED_CURVE_WIDTH = 3.0
# Max vertical pixel distance for a curve to count as hovered
HOVER_DISTANCE_PX = 8.0
# Fixed so every plot's view box starts at the same pixel column
LEFT_AXIS_WIDTH = 60


def hit_test(
    layout: DomainLayout,
    time: int,
    value: float,
    value_tolerance: float,
    cursor_tolerance: int = CURSOR_TIME_TOLERANCE,
) -> Set[EntityPath]:
    """Entities of ``layout`` drawn at (time, value).

    Analog series match when their looked-up value is within
    ``value_tolerance``; discrete tracks match inside their box height.
    """
    hits = set()
    for series in layout.series:
        result = lookup_analog(series, time, cursor_tolerance)
        if result is not None and abs(result.value - value) <= value_tolerance:
            hits.add(series.entity_path)
    for track in layout.tracks:
        if abs(track.y - value) <= track.box_height / 2.0:
            hits.add(track.entity_path)
    return hits


class TimeAxisItem(pg.AxisItem):
    """Bottom axis labelling offset plot coordinates as absolute times."""

    def __init__(self, orientation: str = 'bottom', **kwargs):
        super().__init__(orientation, **kwargs)
        self._time_type = TimeType.SEQUENCE
        self._offset = 0

    def set_timeline(self, time_type: TimeType, offset: int) -> None:
        if (time_type, offset) == (self._time_type, self._offset):
            return
        self._time_type = time_type
        self._offset = offset
        self.picture = None
        self.update()

    def tickValues(self, minVal, maxVal, size):
        if self._time_type != TimeType.TIME:
            return super().tickValues(minVal, maxVal, size)

        # Offsets are whole days, so sub-day spacing is the same on relative values
        levels: Dict[float, List[float]] = {}
        for mark in ns_grid_marks(size, (minVal, maxVal)):
            levels.setdefault(mark.step_size, []).append(mark.value)
        return sorted(levels.items(), reverse=True)[:2]

    def tickStrings(self, values, scale, spacing):
        return [format_time(self._time_type, int(round(v)) + self._offset) for v in values]


class DomainPlot:
    """Plot items belonging to one domain."""

    def __init__(self, domain: str, plot_item: pg.PlotItem, axis: TimeAxisItem):
        self.domain = domain
        self.plot_item = plot_item
        self.axis = axis
        self.layout: Optional[DomainLayout] = None
        self.curves: Dict[EntityPath, pg.PlotDataItem] = {}
        self.bars: List[pg.BarGraphItem] = []
        self.event_lines: List[pg.InfiniteLine] = []
        self.cursor_line = pg.InfiniteLine(
            angle=90, movable=False, pen=pg.mkPen(CURSOR_COLOR, width=1),
        )
        self.marker_line = pg.InfiniteLine(
            angle=90, movable=False,
            pen=pg.mkPen(MARKER_COLOR, width=1, style=Qt.PenStyle.DashLine),
        )
        self.error_text = pg.TextItem(color=ERROR_COLOR, anchor=(0.5, 0.5))
        self.fresh = True

    @property
    def view_box(self) -> pg.ViewBox:
        return self.plot_item.getViewBox()

    def view_bounds(self) -> PlotBounds:
        (min_x, max_x), (min_y, max_y) = self.view_box.viewRange()
        return PlotBounds(min_x, max_x, min_y, max_y)

    def contains(self, scene_pos: QPointF) -> bool:
        return self.view_box.sceneBoundingRect().contains(scene_pos)


class WaveformPlotWidget(QWidget):
    """Stacked per-domain plots of one waveform view.

    Signals:
        view_bounds_changed(str, object): domain and PlotBounds after a
            manual pan/zoom
        lookup_time_changed(object): time under the mouse, or None
        reset_requested(): double-click on a plot
    """

    view_bounds_changed = pyqtSignal(str, object)
    lookup_time_changed = pyqtSignal(object)
    reset_requested = pyqtSignal()

    def __init__(self, selection: SelectionController, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._selection = selection
        self._snapshot = FrameSnapshot()
        self._plots: Dict[str, DomainPlot] = {}
        self._lookup_time: Optional[int] = None
        self._syncing_x = False

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self._graphics = pg.GraphicsLayoutWidget()
        self._graphics.setBackground(BACKGROUND)
        layout.addWidget(self._graphics)

        scene = self._graphics.scene()
        scene.sigMouseMoved.connect(self._on_mouse_moved)
        scene.sigMouseClicked.connect(self._on_mouse_clicked)

        selection.selection_changed.connect(self._restyle_curves)
        selection.cursor_changed.connect(lambda _: self._update_time_lines())
        selection.marker_changed.connect(lambda _: self._update_time_lines())

    # === Accessors ===

    @property
    def snapshot(self) -> FrameSnapshot:
        return self._snapshot

    @property
    def domains(self) -> List[str]:
        return list(self._plots)

    @property
    def lookup_time(self) -> Optional[int]:
        return self._lookup_time

    def plot_for(self, domain: str) -> Optional[DomainPlot]:
        return self._plots.get(domain)

    # === Rendering ===

    def render(self, snapshot: FrameSnapshot) -> None:
        self._snapshot = snapshot
        self._sync_plots([layout.domain for layout in snapshot.domains])
        for layout in snapshot.domains:
            self._render_domain(self._plots[layout.domain], layout)
        self._update_time_lines()

    def _sync_plots(self, domains: List[str]) -> None:
        """Rebuild the plot stack when the visible domains change."""
        if domains == list(self._plots):
            return

        logger.debug(f"Rebuilding plot stack: {domains}")
        self._graphics.clear()
        self._plots = {}
        for row, domain in enumerate(domains):
            axis = TimeAxisItem('bottom')
            axis.setPen(pg.mkPen(AXIS_COLOR, width=1))
            axis.setTextPen(pg.mkPen(AXIS_COLOR, width=1))
            plot_item = self._graphics.addPlot(row=row, col=0, axisItems={'bottom': axis})
            plot_item.setMenuEnabled(False)
            plot_item.hideButtons()
            plot_item.showGrid(x=True, y=True, alpha=0.3)
            plot_item.setLabel('left', domain)
            plot_item.getAxis('left').setPen(pg.mkPen(AXIS_COLOR, width=1))
            plot_item.getAxis('left').setTextPen(pg.mkPen(AXIS_COLOR, width=1))
            plot_item.getAxis('left').setWidth(LEFT_AXIS_WIDTH)
            view_box = plot_item.getViewBox()
            view_box.disableAutoRange()
            view_box.sigXRangeChanged.connect(self._on_x_range_changed)
            view_box.sigRangeChangedManually.connect(
                lambda mask, d=domain: self._on_manual_range_change(d)
            )
            self._plots[domain] = DomainPlot(domain, plot_item, axis)

    def _render_domain(self, plot: DomainPlot, layout: DomainLayout) -> None:
        snapshot = self._snapshot
        offset = snapshot.time_offset
        item = plot.plot_item

        item.clear()
        plot.layout = layout
        plot.curves = {}
        plot.bars = []
        plot.event_lines = []
        plot.axis.set_timeline(snapshot.time_type, offset)

        if not layout.can_render:
            plot.error_text.setText(f"Cannot render this domain: {layout.error}")
            (min_x, max_x), (min_y, max_y) = plot.view_box.viewRange()
            plot.error_text.setPos((min_x + max_x) / 2.0, (min_y + max_y) / 2.0)
            item.addItem(plot.error_text, ignoreBounds=True)
            return

        for series in layout.series:
            if len(series.analog_points) == 0:
                continue
            x, y = series.analog_points.as_arrays(offset)
            curve = pg.PlotDataItem(x, y, pen=self._series_pen(series), antialias=False)
            # Clip and downsample need the view box, so only after addItem
            item.addItem(curve)
            curve.setDownsampling(auto=True, method='peak')
            curve.setClipToView(True)
            plot.curves[series.entity_path] = curve

        for track in layout.tracks:
            self._add_track(plot, track)

        for time, markers in snapshot.events.iter():
            for marker in markers:
                line = pg.InfiniteLine(
                    pos=time - offset, angle=90, movable=False,
                    pen=pg.mkPen(marker.color, width=1, style=Qt.PenStyle.DashLine),
                    label=marker.label,
                    labelOpts={'position': 0.95, 'color': marker.color},
                )
                item.addItem(line, ignoreBounds=True)
                plot.event_lines.append(line)

        # A freshly built plot has no view yet, so sticky bounds are applied too
        bounds = layout.new_bounds
        if bounds is None and plot.fresh:
            bounds = layout.bounds
        if bounds is not None:
            item.setRange(
                xRange=(bounds.min_x, bounds.max_x),
                yRange=(bounds.min_y, bounds.max_y),
                padding=0,
            )
        plot.fresh = False

        item.addItem(plot.cursor_line, ignoreBounds=True)
        item.addItem(plot.marker_line, ignoreBounds=True)

    def _add_track(self, plot: DomainPlot, track: DiscreteTrack) -> None:
        item = plot.plot_item
        if track.boxes:
            boxes = track.boxes
            bars = pg.BarGraphItem(
                x0=np.array([b.start for b in boxes], dtype=float),
                x1=np.array([b.end for b in boxes], dtype=float),
                y0=np.array([b.y - b.height / 2.0 for b in boxes], dtype=float),
                height=np.array([b.height for b in boxes], dtype=float),
                brushes=[pg.mkBrush(b.fill) for b in boxes],
                pens=[pg.mkPen(b.stroke, width=b.stroke_width) for b in boxes],
            )
            item.addItem(bars)
            plot.bars.append(bars)
            for box in boxes:
                text = pg.TextItem(box.label, color=LABEL_COLOR, anchor=(0, 0.5))
                text.setPos(box.start, box.y)
                item.addItem(text, ignoreBounds=True)

        if track.line is not None:
            line = track.line
            item.addItem(pg.PlotDataItem(
                [line.min_x, line.max_x], [line.y, line.y],
                pen=pg.mkPen(line.color, width=line.stroke_width),
            ))

    def _series_pen(self, series: WaveformSeries):
        path = series.entity_path
        color = highlight_color(series.color, self._selection.is_hovered(path))
        width = SELECTED_CURVE_WIDTH if self._selection.is_highlighted(path) else CURVE_WIDTH
        return pg.mkPen(color, width=width)

    def _restyle_curves(self) -> None:
        for plot in self._plots.values():
            for path, curve in plot.curves.items():
                series = self._snapshot.series_for(path)
                if series is not None:
                    curve.setPen(self._series_pen(series))

    def _update_time_lines(self) -> None:
        offset = self._snapshot.time_offset
        cursor = self._selection.cursor_time
        marker = self._selection.second_marker
        for plot in self._plots.values():
            plot.cursor_line.setVisible(cursor is not None)
            if cursor is not None:
                plot.cursor_line.setPos(cursor - offset)
            plot.marker_line.setVisible(marker is not None)
            if marker is not None:
                plot.marker_line.setPos(marker - offset)

    # === Interaction ===

    def _plot_at(self, scene_pos: QPointF) -> Optional[DomainPlot]:
        for plot in self._plots.values():
            if plot.contains(scene_pos):
                return plot
        return None

    def _time_at(self, plot: DomainPlot, scene_pos: QPointF) -> int:
        view_pos = plot.view_box.mapSceneToView(scene_pos)
        return int(round(view_pos.x())) + self._snapshot.time_offset

    def _hovered_at(self, plot: DomainPlot, scene_pos: QPointF) -> Set[EntityPath]:
        if plot.layout is None or not plot.layout.can_render:
            return set()
        view_pos = plot.view_box.mapSceneToView(scene_pos)
        _, pixel_height = plot.view_box.viewPixelSize()
        return hit_test(
            plot.layout,
            self._time_at(plot, scene_pos),
            view_pos.y(),
            HOVER_DISTANCE_PX * pixel_height,
            self._snapshot.cursor_tolerance,
        )

    def _set_lookup_time(self, time: Optional[int]) -> None:
        if time != self._lookup_time:
            self._lookup_time = time
            self.lookup_time_changed.emit(time)

    def _on_mouse_moved(self, scene_pos) -> None:
        plot = self._plot_at(scene_pos)
        if plot is None:
            self._set_lookup_time(None)
            self._selection.set_hovered(())
            return
        self._set_lookup_time(self._time_at(plot, scene_pos))
        self._selection.set_hovered(self._hovered_at(plot, scene_pos))

    def _on_mouse_clicked(self, ev) -> None:
        scene_pos = ev.scenePos()
        plot = self._plot_at(scene_pos)
        if plot is None:
            return

        if ev.double():
            ev.accept()
            self.reset_requested.emit()
            return

        time = self._time_at(plot, scene_pos)
        modifiers = ev.modifiers()
        if ev.button() == Qt.MouseButton.RightButton and modifiers & Qt.KeyboardModifier.ShiftModifier:
            ev.accept()
            self._selection.set_second_marker(time)
        elif ev.button() == Qt.MouseButton.LeftButton:
            ev.accept()
            hovered = self._hovered_at(plot, scene_pos)
            if hovered and modifiers & Qt.KeyboardModifier.ControlModifier:
                for path in hovered:
                    self._selection.add_selected(path)
            elif hovered:
                self._selection.set_selected(hovered)
            else:
                self._selection.clear_selection()
            self._selection.set_cursor_time(time)

    def _on_x_range_changed(self, view_box, x_range) -> None:
        """Share one time window across all plots, in view coordinates."""
        if self._syncing_x:
            return
        self._syncing_x = True
        try:
            for plot in self._plots.values():
                if plot.view_box is not view_box:
                    plot.view_box.setXRange(x_range[0], x_range[1], padding=0)
        finally:
            self._syncing_x = False

    def _on_manual_range_change(self, domain: str) -> None:
        plot = self._plots.get(domain)
        if plot is None:
            return
        bounds = plot.view_bounds()
        logger.debug(f"View of {domain!r} moved to {bounds}")
        self.view_bounds_changed.emit(domain, bounds)
