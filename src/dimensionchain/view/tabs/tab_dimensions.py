"""
Dimension Table Control Panel
"""
import logging

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QGroupBox, QLabel, QPushButton,
    QTableWidget, QTableWidgetItem, QHeaderView
)
from PySide6.QtCore import Signal, Qt
from PySide6.QtGui import QColor

from dimensionchain.model.errors import InvalidNumericInput
from dimensionchain.model.state import ProjectState

logger = logging.getLogger(__name__)

# Column -> ProjectState field (last column holds the delete button)
COLUMN_FIELDS = ["id", "nominal", "tol_min", "tol_max"]
HEADERS = ["Nom", "Valeur (mm)", "Tol. Min (mm)", "Tol. Max (mm)", "Actions"]

INVALID_COLOR = QColor("#f8c8c8")
INVERTED_COLOR = QColor("#fde3b0")


class DimensionsControlPanel(QWidget):
    # Emitted after any change of the dimension chain
    data_changed = Signal()
    # Emitted with a user-readable message when an edit is rejected
    input_rejected = Signal(str)

    def __init__(self, project_state: ProjectState) -> None:
        super().__init__()
        self.project = project_state

        layout = QVBoxLayout(self)

        grp = QGroupBox("Tableau des cotes")
        grp_layout = QVBoxLayout(grp)

        header = QHBoxLayout()
        header.addStretch()
        self.btn_add = QPushButton("Ajouter")
        self.btn_add.clicked.connect(self.on_add_clicked)
        header.addWidget(self.btn_add)
        grp_layout.addLayout(header)

        self.table = QTableWidget(0, len(HEADERS))
        self.table.setHorizontalHeaderLabels(HEADERS)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.table.verticalHeader().setVisible(False)
        self.table.itemChanged.connect(self.on_item_changed)
        grp_layout.addWidget(self.table)

        # --- Totals ---
        totals = QGridLayout()
        totals.addWidget(QLabel("<b>Total</b>"), 0, 0)
        self.lbl_totals = [QLabel(), QLabel(), QLabel()]
        for col, lbl in enumerate(self.lbl_totals, start=1):
            lbl.setAlignment(Qt.AlignCenter)
            totals.addWidget(lbl, 0, col)
        grp_layout.addLayout(totals)

        self.lbl_clearance = QLabel()
        self.lbl_clearance.setStyleSheet("color: #404040;")
        grp_layout.addWidget(self.lbl_clearance)

        layout.addWidget(grp)
        layout.addStretch()

        self.load_from_state()

    # --- STATE -> WIDGETS ---

    def load_from_state(self) -> None:
        """Rebuild the table from the project state."""
        self.table.blockSignals(True)
        try:
            self.table.setRowCount(len(self.project.entries))
            for row, entry in enumerate(self.project.entries):
                self.table.setItem(row, 0, QTableWidgetItem(entry.id))
                for col, name in enumerate(COLUMN_FIELDS[1:], start=1):
                    self.table.setItem(row, col, QTableWidgetItem(getattr(entry, name).display))

                btn_delete = QPushButton("Supprimer")
                btn_delete.setStyleSheet("color: #b00020;")
                btn_delete.clicked.connect(lambda _=False, r=row: self.on_delete_clicked(r))
                self.table.setCellWidget(row, len(COLUMN_FIELDS), btn_delete)

                self._mark_row(row)
        finally:
            self.table.blockSignals(False)

        self.update_totals()

    def update_totals(self) -> None:
        result = self.project.aggregate
        if result is None:
            for lbl in self.lbl_totals:
                lbl.setText("invalide")
            self.lbl_clearance.setText("Jeu fonctionnel : saisie invalide")
            return

        for lbl, text in zip(self.lbl_totals, result.totals_row()):
            lbl.setText(text)
        self.lbl_clearance.setText(result.describe())

    def _mark_row(self, row: int) -> None:
        """Color invalid cells red, inverted tolerances orange."""
        entry = self.project.entries[row]
        invalid = set(entry.invalid_fields)
        for col, name in enumerate(COLUMN_FIELDS[1:], start=1):
            item = self.table.item(row, col)
            if item is None:
                continue
            if name in invalid:
                item.setBackground(INVALID_COLOR)
                item.setToolTip("Valeur numérique invalide")
            elif entry.is_inverted and name in ("tol_min", "tol_max"):
                item.setBackground(INVERTED_COLOR)
                item.setToolTip("Tol. Min supérieure à Tol. Max")
            else:
                item.setData(Qt.BackgroundRole, None)
                item.setToolTip("")

    # --- SLOTS ---

    def on_item_changed(self, item: QTableWidgetItem) -> None:
        row, col = item.row(), item.column()
        if col >= len(COLUMN_FIELDS):
            return

        try:
            self.project.update_field(row, COLUMN_FIELDS[col], item.text())
        except InvalidNumericInput as e:
            self.input_rejected.emit(f"Valeur invalide pour {self.project.entries[row].id} : {e.raw_text!r}")

        self.table.blockSignals(True)
        try:
            self._mark_row(row)
        finally:
            self.table.blockSignals(False)

        self.update_totals()
        self.data_changed.emit()

    def on_add_clicked(self) -> None:
        self.project.add_entry()
        self.load_from_state()
        self.data_changed.emit()

    def on_delete_clicked(self, row: int) -> None:
        self.project.delete_entry(row)
        self.load_from_state()
        self.data_changed.emit()
