# gui_handlers.py
# -*- coding: utf-8 -*-

import os

from PySide6.QtWidgets import QMessageBox, QFileDialog
from PySide6.QtCore import Slot

import config
import settings_manager
import sync_runner
from gui_utils import WorkerThread


class MainWindowHandlers:
    # Initializes the handler class, connecting it to the main window.
    def __init__(self, main_window):
        self.main_window = main_window

    def _is_busy(self):
        worker = self.main_window.worker_thread
        if worker and worker.isRunning():
            QMessageBox.information(self.main_window, "Operation in Progress", "Another operation is already in progress.")
            return True
        return False

    def _start_worker(self, status_text, function, *args):
        self.main_window.status_label.setText(status_text)
        self.main_window.set_controls_enabled(False)
        worker = WorkerThread(function, *args)
        worker.progress.connect(self.main_window.status_label.setText)
        worker.finished.connect(self.on_operation_finished)
        self.main_window.worker_thread = worker
        worker.start()

    # --- Game folder ---
    @Slot()
    def handle_select_install_dir(self):
        current = self.main_window.current_settings.get("cod_install_dir") or config.DEFAULT_INSTALL_DIR
        directory = QFileDialog.getExistingDirectory(self.main_window, "Select Call of Duty Folder", current)
        if not directory:
            self.main_window.status_label.setText("No folder selected.")
            return
        success, message = sync_runner.set_install_dir(directory, self.main_window.current_settings)
        if success:
            self.main_window.update_install_dir_display(self.main_window.current_settings["cod_install_dir"])
        else:
            QMessageBox.warning(self.main_window, "Invalid Folder", message)
        self.main_window.status_label.setText(message)

    # --- Export ---
    @Slot()
    def handle_export(self):
        if self._is_busy():
            return
        last_path = self.main_window.current_settings.get("last_export_path")
        suggested = last_path or os.path.join(os.path.expanduser("~"), config.DEFAULT_EXPORT_FILENAME)
        output_path, _ = QFileDialog.getSaveFileName(self.main_window, "Export Settings", suggested, config.EXPORT_FILE_FILTER)
        if not output_path:
            self.main_window.status_label.setText("Export cancelled.")
            return
        self.main_window.current_settings["last_export_path"] = output_path
        settings_manager.save_settings(self.main_window.current_settings)
        self._start_worker("Exporting settings...", sync_runner.run_export, output_path, dict(self.main_window.current_settings))

    # --- Import ---
    @Slot()
    def handle_import(self):
        if self._is_busy():
            return
        start_dir = self.main_window.current_settings.get("last_export_path") or os.path.expanduser("~")
        document_path, _ = QFileDialog.getOpenFileName(self.main_window, "Import Settings", start_dir, config.EXPORT_FILE_FILTER)
        if not document_path:
            self.main_window.status_label.setText("Import cancelled.")
            return
        confirm = QMessageBox.question(
            self.main_window, "Confirm Import",
            "Settings from '{0}' will be written into your profile config files.\n"
            "Consider creating a backup first. Continue?".format(os.path.basename(document_path)),
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No, QMessageBox.StandardButton.No,
        )
        if confirm != QMessageBox.StandardButton.Yes:
            self.main_window.status_label.setText("Import cancelled.")
            return
        self._start_worker("Importing settings...", sync_runner.run_import, document_path, dict(self.main_window.current_settings))

    # --- Backup ---
    @Slot()
    def handle_backup(self):
        if self._is_busy():
            return
        self._start_worker("Backing up config files...", sync_runner.run_backup, dict(self.main_window.current_settings))

    @Slot(bool, str)
    def on_operation_finished(self, success, message):
        self.main_window.set_controls_enabled(True)
        self.main_window.status_label.setText(message)
        if not success:
            QMessageBox.warning(self.main_window, "Operation Failed", message)
