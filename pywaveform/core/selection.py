"""
Selection and cursor state.

SelectedMode is the two-state "selected-only" display filter:

    Unselected --toggle(non-empty set)--> Selected(set)
    Unselected --toggle(empty set)------> Unselected
    Selected   --toggle(anything)-------> Unselected

The secondary time marker and the timeline cursor are independent plain
optional values, overwritten on each set.
"""

from typing import FrozenSet, Iterable, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from .entity_path import EntityPath
from pywaveform.logging import get_logger

logger = get_logger(__name__)


class SelectedMode:
    """Immutable state of the selected-only filter."""

    __slots__ = ('_paths',)

    def __init__(self, paths: Optional[Iterable[EntityPath]] = None):
        # None means Unselected
        self._paths: Optional[FrozenSet[EntityPath]] = frozenset(paths) if paths is not None else None

    @classmethod
    def unselected(cls) -> 'SelectedMode':
        return cls()

    @classmethod
    def selected_with(cls, paths: Iterable[EntityPath]) -> 'SelectedMode':
        return cls(paths)

    @property
    def is_selected(self) -> bool:
        return self._paths is not None

    @property
    def paths(self) -> FrozenSet[EntityPath]:
        """Remembered set (empty while Unselected)."""
        return self._paths if self._paths is not None else frozenset()

    def toggle(self, paths: Iterable[EntityPath]) -> 'SelectedMode':
        """Return the next state."""
        if self.is_selected:
            return SelectedMode.unselected()
        paths = frozenset(paths)
        if not paths:
            return self
        return SelectedMode.selected_with(paths)

    def filter_path(self, path: EntityPath) -> bool:
        """True if series of ``path`` should be displayed."""
        if self._paths is None:
            return True
        return path in self._paths

    def __eq__(self, other) -> bool:
        if not isinstance(other, SelectedMode):
            return NotImplemented
        return self._paths == other._paths

    def __hash__(self) -> int:
        return hash(self._paths)

    def __repr__(self) -> str:
        if self._paths is None:
            return "SelectedMode.Unselected"
        return f"SelectedMode.Selected({sorted(str(p) for p in self._paths)})"


class SelectionController(QObject):
    """Hover/selection sets, selected-only mode and time markers of one view.

    Signals:
        selected_mode_changed(bool): True when entering selected-only mode
        marker_changed(object): new secondary marker time or None
        cursor_changed(object): new timeline cursor time or None
        selection_changed(): hovered or selected entities changed
    """

    selected_mode_changed = pyqtSignal(bool)
    marker_changed = pyqtSignal(object)
    cursor_changed = pyqtSignal(object)
    selection_changed = pyqtSignal()

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._mode = SelectedMode.unselected()
        self._hovered: FrozenSet[EntityPath] = frozenset()
        self._selected: FrozenSet[EntityPath] = frozenset()
        self._second_marker: Optional[int] = None
        self._cursor_time: Optional[int] = None

    # === Selected-only mode ===

    @property
    def mode(self) -> SelectedMode:
        return self._mode

    def toggle_selected_mode(self) -> None:
        """Toggle selected-only mode using the current selection."""
        new_mode = self._mode.toggle(self._selected)
        if new_mode == self._mode:
            logger.debug("Selected mode toggle ignored: nothing selected")
            return
        self._mode = new_mode
        logger.debug(f"Selected mode -> {new_mode!r}")
        self.selected_mode_changed.emit(new_mode.is_selected)

    # === Hover / selection sets ===

    def set_hovered(self, paths: Iterable[EntityPath]) -> None:
        paths = frozenset(paths)
        if paths != self._hovered:
            self._hovered = paths
            self.selection_changed.emit()

    def set_selected(self, paths: Iterable[EntityPath]) -> None:
        paths = frozenset(paths)
        if paths != self._selected:
            self._selected = paths
            self.selection_changed.emit()

    def add_selected(self, path: EntityPath) -> None:
        """Ctrl+click: extend the selection."""
        self.set_selected(self._selected | {path})

    def clear_selection(self) -> None:
        self.set_selected(())

    @property
    def hovered(self) -> FrozenSet[EntityPath]:
        return self._hovered

    @property
    def selected(self) -> FrozenSet[EntityPath]:
        return self._selected

    def is_hovered(self, path: EntityPath) -> bool:
        return path in self._hovered

    def is_highlighted(self, path: EntityPath) -> bool:
        return path in self._selected

    # === Time markers ===

    @property
    def second_marker(self) -> Optional[int]:
        return self._second_marker

    def set_second_marker(self, time: Optional[int]) -> None:
        self._second_marker = time
        self.marker_changed.emit(time)

    def clear_second_marker(self) -> None:
        self.set_second_marker(None)

    @property
    def cursor_time(self) -> Optional[int]:
        return self._cursor_time

    def set_cursor_time(self, time: Optional[int]) -> None:
        self._cursor_time = time
        self.cursor_changed.emit(time)

    def marker_delta(self) -> Optional[int]:
        """Cursor time minus secondary marker, when both are set."""
        if self._cursor_time is None or self._second_marker is None:
            return None
        return self._cursor_time - self._second_marker
