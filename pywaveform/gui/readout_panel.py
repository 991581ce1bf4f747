"""
Side panel listing every visible series and its value at the seek time.
"""

from typing import Dict, List, Optional

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor, QFont
from PyQt6.QtWidgets import (
    QHeaderView, QLabel, QTableWidget, QTableWidgetItem, QVBoxLayout, QWidget,
)

from pywaveform.core.readout import ReadoutRow
from pywaveform.plots.time_axis import TimeType, format_delta, format_time

DOMAIN_COLOR = QColor('#aaaaaa')
PLACEHOLDER = "--"


class ReadoutPanel(QWidget):
    """Two-column table (entity, value) grouped by domain."""

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(4)

        self._time_label = QLabel(f"Time: {PLACEHOLDER}")
        self._time_label.setFont(QFont("JetBrains Mono", 10, QFont.Weight.Bold))
        layout.addWidget(self._time_label)

        self._marker_label = QLabel("")
        self._marker_label.setFont(QFont("JetBrains Mono", 9))
        self._marker_label.setStyleSheet("color: #ffff00;")
        layout.addWidget(self._marker_label)

        self.table = QTableWidget(0, 2)
        self.table.setHorizontalHeaderLabels(["Entity", "Value"])
        self.table.verticalHeader().setVisible(False)
        self.table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self.table.setSelectionMode(QTableWidget.SelectionMode.NoSelection)
        header = self.table.horizontalHeader()
        if header is not None:
            header.setSectionResizeMode(QHeaderView.ResizeMode.ResizeToContents)
            header.setStretchLastSection(True)
        layout.addWidget(self.table)

        self.setStyleSheet("""
            QWidget { background-color: #0d0d0d; color: #e0e0e0; }
            QHeaderView::section { background-color: #1a1a1a; color: #aaaaaa; padding: 4px; }
        """)

    def set_time(self, time_type: TimeType, time: Optional[int]) -> None:
        text = format_time(time_type, time) if time is not None else PLACEHOLDER
        self._time_label.setText(f"Time: {text}")

    def set_marker(self, time_type: TimeType, marker: Optional[int], delta: Optional[int]) -> None:
        if marker is None:
            self._marker_label.setText("")
            return
        text = f"Marker: {format_time(time_type, marker)}"
        if delta is not None:
            text += f"  Δ {format_delta(time_type, delta)}"
        self._marker_label.setText(text)

    def set_rows(self, rows_by_domain: Dict[str, List[ReadoutRow]]) -> None:
        """Replace the table contents; one bold header row per domain."""
        self.table.setRowCount(0)
        for domain, rows in rows_by_domain.items():
            if not rows:
                continue
            self._append(domain, "", DOMAIN_COLOR, bold=True)
            for row in rows:
                value = row.value_text or PLACEHOLDER
                self._append(row.entity_label, value, row.color, row.discrete_color)

    def _append(
        self,
        label: str,
        value: str,
        color: QColor,
        value_color: Optional[QColor] = None,
        bold: bool = False,
    ) -> None:
        index = self.table.rowCount()
        self.table.insertRow(index)

        label_item = QTableWidgetItem(label)
        label_item.setForeground(color)
        value_item = QTableWidgetItem(value)
        value_item.setTextAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
        if value_color is not None:
            value_item.setForeground(value_color)
        if bold:
            font = label_item.font()
            font.setBold(True)
            label_item.setFont(font)
        self.table.setItem(index, 0, label_item)
        self.table.setItem(index, 1, value_item)

    def row_texts(self) -> List[tuple]:
        """(label, value) of every table row, for inspection."""
        return [
            (self.table.item(i, 0).text(), self.table.item(i, 1).text())
            for i in range(self.table.rowCount())
        ]
