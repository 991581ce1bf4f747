"""
Application entry point and main window.
"""

import sys
from typing import Optional

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QKeySequence, QShortcut
from PyQt6.QtWidgets import QApplication, QMainWindow, QSplitter, QWidget

# Configure PyQtGraph before importing any plot modules
import pyqtgraph as pg
pg.setConfigOptions(
    useOpenGL=False,           # Disable OpenGL to prevent rendering issues
    antialias=False,           # Disable antialiasing for performance
    enableExperimental=False,  # Disable experimental features
)

from ..core.annotations import AnnotationResolver
from ..core.frame import FrameSnapshot, WaveformFrameRunner
from ..core.readout import seek_time
from ..core.sample_store import SampleStore
from ..core.selection import SelectionController
from ..core.settings import WaveformConfig
from ..logging import get_logger
from ..plots.time_axis import TimeType
from ..plots.waveform_renderer import WaveformPlotWidget
from .readout_panel import ReadoutPanel

logger = get_logger(__name__)

DEFAULT_REFRESH_MS = 250


class WaveformWindow(QMainWindow):
    """Plots on the left, cursor readout on the right.

    A QTimer runs one frame per tick; the plots are only redrawn when the
    data, the selected-only mode or a reset request changed the frame.
    """

    def __init__(
        self,
        store: SampleStore,
        resolver: AnnotationResolver,
        config: Optional[WaveformConfig] = None,
        time_type: TimeType = TimeType.SEQUENCE,
        refresh_ms: int = DEFAULT_REFRESH_MS,
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self.setWindowTitle("pywaveform")
        self.resize(1400, 800)

        self._config = config or WaveformConfig()
        self._time_type = time_type
        self._runner = WaveformFrameRunner(store, resolver, self._config, time_type)
        self._selection = SelectionController(self)
        self._reset_pending = True
        self._dirty = True
        self._last_sample_count: Optional[int] = None

        self._plot = WaveformPlotWidget(self._selection)
        self._readout = ReadoutPanel()
        self._splitter = QSplitter(Qt.Orientation.Horizontal)
        self._splitter.addWidget(self._plot)
        self._splitter.addWidget(self._readout)
        self.setCentralWidget(self._splitter)
        self._apply_side_panel_fraction()

        self._plot.view_bounds_changed.connect(self._runner.state.layout.update_view_bounds)
        self._plot.reset_requested.connect(self.request_reset)
        self._plot.lookup_time_changed.connect(lambda _: self._update_readout())
        self._selection.cursor_changed.connect(lambda _: self._update_readout())
        self._selection.marker_changed.connect(lambda _: self._update_readout())
        self._selection.selected_mode_changed.connect(self._on_selected_mode_changed)

        self._toggle_shortcut = QShortcut(QKeySequence("Ctrl+Space"), self)
        self._toggle_shortcut.activated.connect(self._selection.toggle_selected_mode)

        self._timer = QTimer(self)
        self._timer.setInterval(refresh_ms)
        self._timer.timeout.connect(self.run_frame)

    # === Accessors ===

    @property
    def selection(self) -> SelectionController:
        return self._selection

    @property
    def plot_widget(self) -> WaveformPlotWidget:
        return self._plot

    @property
    def readout_panel(self) -> ReadoutPanel:
        return self._readout

    @property
    def runner(self) -> WaveformFrameRunner:
        return self._runner

    # === Frame loop ===

    def start(self) -> None:
        self.run_frame()
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def request_reset(self) -> None:
        """Re-pad every domain's bounds on the next frame."""
        self._reset_pending = True
        self._dirty = True

    def run_frame(self) -> FrameSnapshot:
        reset = self._reset_pending
        snapshot = self._runner.run(self._selection.mode, reset=reset)
        if self._runner.last_error is not None:
            return snapshot

        self._reset_pending = False
        if self._dirty or snapshot.sample_count != self._last_sample_count:
            self._plot.render(snapshot)
            self._update_readout()
            self._dirty = False
            self._last_sample_count = snapshot.sample_count
        return snapshot

    def _on_selected_mode_changed(self, is_selected: bool) -> None:
        logger.debug(f"Selected-only mode {'on' if is_selected else 'off'}")
        self._dirty = True
        self.run_frame()

    def _update_readout(self) -> None:
        snapshot = self._plot.snapshot
        time = seek_time(self._plot.lookup_time, self._selection.cursor_time)
        self._readout.set_time(self._time_type, time)
        self._readout.set_marker(
            self._time_type, self._selection.second_marker, self._selection.marker_delta(),
        )
        self._readout.set_rows(snapshot.readout(time))

    def _apply_side_panel_fraction(self) -> None:
        width = self.width()
        side = int(width * self._config.side_panel_fraction)
        self._splitter.setSizes([width - side, side])

    def closeEvent(self, event) -> None:
        self.stop()
        super().closeEvent(event)


def create_app() -> QApplication:
    """Create and configure the QApplication."""
    # Enable high DPI scaling
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv)
    app.setApplicationName("pywaveform")
    app.setOrganizationName("pywaveform")
    return app


def run_app(
    store: SampleStore,
    resolver: AnnotationResolver,
    config: Optional[WaveformConfig] = None,
    time_type: TimeType = TimeType.SEQUENCE,
    refresh_ms: int = DEFAULT_REFRESH_MS,
) -> int:
    """Show a waveform window over ``store`` and run the event loop."""
    app = create_app()
    window = WaveformWindow(
        store, resolver,
        config=config or WaveformConfig.from_settings(),
        time_type=time_type,
        refresh_ms=refresh_ms,
    )
    window.show()
    window.start()
    return app.exec()
