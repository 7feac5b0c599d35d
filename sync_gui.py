# sync_gui.py
# -*- coding: utf-8 -*-
import logging

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QTextEdit, QProgressBar, QGroupBox,
)
from PySide6.QtCore import Qt

import config
import sync_runner
from gui_handlers import MainWindowHandlers


class MainWindow(QMainWindow):
    # --- Initialization ---
    # Builds the widgets; all behaviour lives in MainWindowHandlers.
    def __init__(self, initial_settings, qt_log_handler=None):
        super().__init__()
        self.current_settings = initial_settings
        self.qt_log_handler = qt_log_handler
        self.worker_thread = None

        self.setWindowTitle(config.APP_NAME)
        self.setGeometry(650, 250, 640, 480)
        self.setMinimumSize(560, 420)

        self.handlers = MainWindowHandlers(self)

        # --- Game folder ---
        install_group = QGroupBox("Game Folder")
        install_layout = QHBoxLayout(install_group)
        self.install_dir_label = QLabel()
        self.install_dir_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        self.select_install_button = QPushButton("Select Game Folder...")
        install_layout.addWidget(self.install_dir_label, stretch=1)
        install_layout.addWidget(self.select_install_button)

        # --- Actions ---
        actions_layout = QHBoxLayout()
        self.export_button = QPushButton("Export Settings")
        self.import_button = QPushButton("Import Settings")
        self.backup_button = QPushButton("Backup Configs")
        for button in (self.export_button, self.import_button, self.backup_button):
            actions_layout.addWidget(button)

        self.categories_label = QLabel()
        self.categories_label.setWordWrap(True)

        # --- Log panel ---
        self.log_output = QTextEdit()
        self.log_output.setReadOnly(True)

        # --- Status bar area ---
        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 0)  # busy indicator
        self.progress_bar.setVisible(False)
        self.status_label = QLabel("Ready.")

        central = QWidget()
        main_layout = QVBoxLayout(central)
        main_layout.addWidget(install_group)
        main_layout.addLayout(actions_layout)
        main_layout.addWidget(self.categories_label)
        main_layout.addWidget(self.log_output, stretch=1)
        main_layout.addWidget(self.progress_bar)
        main_layout.addWidget(self.status_label)
        self.setCentralWidget(central)

        # --- Connections ---
        self.select_install_button.clicked.connect(self.handlers.handle_select_install_dir)
        self.export_button.clicked.connect(self.handlers.handle_export)
        self.import_button.clicked.connect(self.handlers.handle_import)
        self.backup_button.clicked.connect(self.handlers.handle_backup)
        if self.qt_log_handler is not None:
            self.qt_log_handler.log_signal.connect(self.log_output.append)

        self.update_install_dir_display(sync_runner.resolve_install_dir(self.current_settings))
        self.update_categories_display()

    def update_install_dir_display(self, install_dir):
        if install_dir:
            self.install_dir_label.setText(install_dir)
        else:
            self.install_dir_label.setText(f"Not found ({config.INSTALL_MARKER_EXE} missing)")

    def update_categories_display(self):
        categories = self.current_settings.get("categories", config.DEFAULT_CATEGORIES)
        self.categories_label.setText("Exported categories: " + ", ".join(categories))

    def set_controls_enabled(self, enabled):
        """Abilita o disabilita i controlli principali della UI."""
        self.select_install_button.setEnabled(enabled)
        self.export_button.setEnabled(enabled)
        self.import_button.setEnabled(enabled)
        self.backup_button.setEnabled(enabled)
        self.progress_bar.setVisible(not enabled)

    def closeEvent(self, event):
        if self.worker_thread and self.worker_thread.isRunning():
            logging.info("Waiting for the running operation to finish before closing...")
            self.worker_thread.wait()
        if self.qt_log_handler is not None:
            logging.getLogger().removeHandler(self.qt_log_handler)
        super().closeEvent(event)
