# main.py
# -*- coding: utf-8 -*-
import sys
import logging

import config
import settings_manager
import sync_runner


def configure_logging(gui_mode):
    """Sets up the root logger: console always, Qt log panel in GUI mode."""
    log_format = '%(asctime)s - %(levelname)s - %(message)s'
    log_datefmt = '%H:%M:%S'
    log_formatter = logging.Formatter(log_format, log_datefmt)
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)

    # Remove existing handlers if necessary (e.g. in PyInstaller)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(log_formatter)
    console_handler.setLevel(logging.INFO)
    root_logger.addHandler(console_handler)

    qt_log_handler = None
    if gui_mode:
        from gui_utils import QtLogHandler
        qt_log_handler = QtLogHandler()
        qt_log_handler.setFormatter(log_formatter)
        qt_log_handler.setLevel(logging.INFO)
        root_logger.addHandler(qt_log_handler)

    logging.info("Logging configured.")
    return qt_log_handler


def run_gui(qt_log_handler):
    from PySide6.QtWidgets import QApplication
    from sync_gui import MainWindow

    app = QApplication(sys.argv)
    app.setApplicationName(config.APP_NAME)
    app.setStyle("Fusion")

    settings, first_launch = settings_manager.load_settings()
    if first_launch:
        logging.info("First launch: default settings in use.")

    window = MainWindow(settings, qt_log_handler)
    window.show()
    return app.exec()


def main(argv=None):
    args = sync_runner.build_arg_parser().parse_args(argv)
    silent = sync_runner.has_silent_action(args)
    qt_log_handler = configure_logging(gui_mode=not silent)

    # === Silent Mode ===
    if silent:
        return sync_runner.run_from_args(args)

    # === Normal GUI Mode ===
    return run_gui(qt_log_handler)


if __name__ == "__main__":
    sys.exit(main())
