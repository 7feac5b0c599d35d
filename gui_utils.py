# -*- coding: utf-8 -*-
import html
import logging

from PySide6.QtCore import QThread, Signal, QObject

# --- Thread Worker per Operazioni Lunghe ---

class WorkerThread(QThread):
    """Runs a function returning (success, message) away from the UI thread."""
    finished = Signal(bool, str)
    progress = Signal(str)

    def __init__(self, function, *args, **kwargs):
        super().__init__()
        self.function = function
        self.args = args
        self.kwargs = kwargs
        self.setObjectName("WorkerThread")

    def run(self):
        try:
            self.progress.emit("Operation in progress...")
            success, message = self.function(*self.args, **self.kwargs)
            self.progress.emit("Operation completed.")
            self.finished.emit(success, message)
        except Exception as e:
            error_msg = f"Critical error in worker thread: {e}"
            logging.critical(error_msg, exc_info=True)
            self.progress.emit("Error.")
            self.finished.emit(False, error_msg)


# --- Gestore Log Personalizzato per Qt ---
class QtLogHandler(logging.Handler, QObject):
    # Segnale che emette una stringa (il messaggio di log formattato)
    log_signal = Signal(str)

    def __init__(self, parent=None):
        logging.Handler.__init__(self)
        QObject.__init__(self, parent)
        self.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s', datefmt='%H:%M:%S'))

    def emit(self, record):
        """Formats and HTML-escapes the record, colored red/orange for ERROR/WARNING."""
        try:
            msg = html.escape(self.format(record))
            color = None
            if record.levelno >= logging.ERROR:
                color = "#FF0000"
            elif record.levelno == logging.WARNING:
                color = "orange"
            if color:
                msg = f'<font color="{color}">{msg}</font>'
            self.log_signal.emit(msg)
        except Exception:
            self.handleError(record)
