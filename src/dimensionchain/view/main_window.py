"""
Main Application Window
=======================
The primary GUI container that holds the Menu Bar, the diagram and the
dimension table.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It connects global actions (like File -> Save) to the IO manager
   and keeps the diagram and the table in sync with the project state.
"""
import os

from PySide6.QtWidgets import QMainWindow, QSplitter, QFileDialog, QMessageBox
from PySide6.QtCore import Qt
from PySide6.QtGui import QAction

from dimensionchain.config import (
    APP_NAME, DEFAULT_PROJECT_FILENAME, PROJECT_FILE_EXTENSION, PROJECT_FILE_FILTER, IMAGE_FILE_FILTER
)
from dimensionchain.model.state import ProjectState
from dimensionchain.model.io import IOManager
from dimensionchain.view.tabs.tab_dimensions import DimensionsControlPanel
from dimensionchain.view.widgets.diagram import DiagramWidget


class MainWindow(QMainWindow):
    def __init__(self, project_state: ProjectState) -> None:
        super().__init__()
        self.project: ProjectState = project_state
        self.is_modified: bool = False

        self.update_window_title()
        self.resize(1400, 600)

        # --- CONTENT AREA ---
        splitter = QSplitter(Qt.Horizontal)
        self.setCentralWidget(splitter)

        # --- LEFT SIDE: Diagram ---
        self.diagram = DiagramWidget()
        splitter.addWidget(self.diagram)

        # --- RIGHT SIDE: Dimension table ---
        self.dim_panel = DimensionsControlPanel(self.project)
        splitter.addWidget(self.dim_panel)

        # 2 parts diagram : 1 part table
        splitter.setSizes([900, 500])

        # --- SIGNAL CONNECTIONS ---
        self.dim_panel.data_changed.connect(self.on_data_changed)
        self.dim_panel.input_rejected.connect(self.on_input_rejected)
        self.diagram.anchor_moved.connect(self.on_anchor_moved)

        # --- ACTIONS & MENUS ---
        self._create_actions()
        self._create_menus()

        # Initial Render
        self.update_visualization()

    def _create_actions(self) -> None:
        self.act_new = QAction("Nouveau projet", self)
        self.act_new.triggered.connect(self.on_file_new)

        self.act_open = QAction("Ouvrir...", self)
        self.act_open.setShortcut("Ctrl+O")
        self.act_open.triggered.connect(self.on_file_open)

        self.act_save = QAction("Sauvegarder", self)
        self.act_save.setShortcut("Ctrl+S")
        self.act_save.triggered.connect(self.on_file_save)

        self.act_save_as = QAction("Sauvegarder sous...", self)
        self.act_save_as.setShortcut("Ctrl+Shift+S")
        self.act_save_as.triggered.connect(self.on_file_save_as)

        self.act_image = QAction("Importer une image...", self)
        self.act_image.triggered.connect(self.on_image_import)

        self.act_clear_image = QAction("Retirer l'image", self)
        self.act_clear_image.triggered.connect(self.on_image_clear)

        self.act_exit = QAction("Quitter", self)
        self.act_exit.triggered.connect(self.close)

    def _create_menus(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&Fichier")
        file_menu.addAction(self.act_new)
        file_menu.addSeparator()
        file_menu.addAction(self.act_open)
        file_menu.addSeparator()
        file_menu.addAction(self.act_save)
        file_menu.addAction(self.act_save_as)
        file_menu.addSeparator()
        file_menu.addAction(self.act_exit)

        image_menu = menu_bar.addMenu("&Image")
        image_menu.addAction(self.act_image)
        image_menu.addAction(self.act_clear_image)

    # --- HELPER METHODS ---
    def update_window_title(self) -> None:
        """Updates the window title based on filename and dirty state."""
        filename = self.project.filepath if self.project.filepath else "Sans titre"
        title = f"{APP_NAME} - [{os.path.basename(filename)}"
        if self.is_modified:
            title += "*"
        title += "]"
        self.setWindowTitle(title)

    def set_modified(self, modified: bool) -> None:
        """Sets the dirty flag and updates title if changed."""
        if self.is_modified != modified:
            self.is_modified = modified
            self.update_window_title()

    def on_data_changed(self) -> None:
        """Slot called when the dimension chain changes."""
        self.set_modified(True)
        self.update_visualization()

    def on_input_rejected(self, message: str) -> None:
        self.statusBar().showMessage(message, 5000)

    def on_anchor_moved(self, index: int, x: float, y: float) -> None:
        """The callout is already drawn at its new place, only the state needs it."""
        self.project.move_anchor(index, x, y)
        self.set_modified(True)

    # --- IMAGE SLOTS ---

    def on_image_import(self) -> None:
        fname, _ = QFileDialog.getOpenFileName(self, "Importer une image", "", IMAGE_FILE_FILTER)
        if fname:
            try:
                self.project.set_background_image(IOManager.image_to_data_url(fname))
                self.set_modified(True)
                self.update_visualization()
            except OSError as e:
                QMessageBox.critical(self, "Erreur", f"Impossible de lire l'image :\n{e}")

    def on_image_clear(self) -> None:
        if self.project.background_image is not None:
            self.project.set_background_image(None)
            self.set_modified(True)
            self.update_visualization()

    # --- FILE SLOTS ---

    def on_file_new(self) -> None:
        self.project.reset()
        self.is_modified = False
        self.update_window_title()
        self.refresh_ui_from_state()

    def on_file_open(self) -> None:
        fname, _ = QFileDialog.getOpenFileName(self, "Ouvrir un projet", "", PROJECT_FILE_FILTER)
        if fname:
            try:
                IOManager.load_project(self.project, fname)

                # Reset dirty flag
                self.is_modified = False
                # Explicitly update title to show new filename
                self.update_window_title()

                self.refresh_ui_from_state()
            except Exception as e:
                QMessageBox.critical(self, "Erreur", f"Impossible d'ouvrir le fichier :\n{e}")

    def on_file_save(self) -> None:
        if self.project.filepath:
            try:
                IOManager.save_project(self.project, self.project.filepath)
                # Removes asterisk
                self.set_modified(False)
            except Exception as e:
                QMessageBox.critical(self, "Erreur", f"Impossible d'enregistrer le fichier :\n{e}")
        else:
            self.on_file_save_as()

    def on_file_save_as(self) -> None:
        fname, _ = QFileDialog.getSaveFileName(
            self, "Sauvegarder le projet", DEFAULT_PROJECT_FILENAME, PROJECT_FILE_FILTER
        )
        if fname:
            if not fname.endswith(PROJECT_FILE_EXTENSION):
                fname += PROJECT_FILE_EXTENSION

            try:
                IOManager.save_project(self.project, fname)
                self.is_modified = False
                self.update_window_title()
            except Exception as e:
                QMessageBox.critical(self, "Erreur", f"Impossible d'enregistrer le fichier :\n{e}")

    def refresh_ui_from_state(self) -> None:
        """
        After loading a file, the State is updated, but the Widgets are old.
        We need to force the Widgets to read from the State again.
        """
        self.dim_panel.blockSignals(True)
        try:
            self.dim_panel.load_from_state()
        finally:
            self.dim_panel.blockSignals(False)

        self.update_visualization()

    def update_visualization(self) -> None:
        self.diagram.update_scene(self.project)

    def closeEvent(self, event, /) -> None:
        """Handle window close event to prompt for saving if modified."""
        if self.is_modified:
            reply = QMessageBox.question(
                self,
                "Enregistrer les modifications ?",
                "Le projet a été modifié. Voulez-vous enregistrer avant de quitter ?",
                QMessageBox.Save | QMessageBox.Discard | QMessageBox.Cancel
            )

            if reply == QMessageBox.Save:
                self.on_file_save()
                # Save dialog cancelled or failed: keep the window open
                if self.is_modified:
                    event.ignore()
                    return
            elif reply == QMessageBox.Cancel:
                event.ignore()
                return

        event.accept()
