# config.py
import os
import logging
import platform # Aggiunto per system detection


# --- Nome Applicazione (per cartella AppData) ---
APP_NAME = "CodSettingsSync"

# --- Funzione per Trovare/Creare Cartella Dati App ---
def get_app_data_folder():
    """Restituisce il percorso della cartella dati dell'app (%LOCALAPPDATA% su Win)
       e la crea se non esiste. Gestisce fallback basici."""
    system = platform.system()
    base_path = None
    app_folder = None

    try:
        if system == "Windows":
            base_path = os.getenv('LOCALAPPDATA')
        elif system == "Darwin": # macOS
            base_path = os.path.expanduser('~/Library/Application Support')
        elif system == "Linux":
             # Standard XDG Base Directory Specification
             base_path = os.getenv('XDG_DATA_HOME', os.path.expanduser('~/.local/share'))

        if not base_path:
             logging.error("Unable to determine the standard user data folder. Using the current folder as fallback.")
             app_folder = os.path.abspath(APP_NAME)
        else:
             app_folder = os.path.join(base_path, APP_NAME)

        if not os.path.exists(app_folder):
             try:
                 os.makedirs(app_folder, exist_ok=True)
                 logging.info(f"Created application data folder: {app_folder}")
             except OSError as e:
                 # load/save gestiranno l'errore
                 logging.error(f"Unable to create data folder {app_folder}: {e}.")

    except Exception as e:
         logging.error(f"Unexpected error in get_app_data_folder: {e}. Trying CWD fallback.", exc_info=True)
         app_folder = os.path.abspath(APP_NAME)
         try:
             os.makedirs(app_folder, exist_ok=True)
         except OSError:
             pass

    return app_folder


# --- Documents root (profile configs live below it) ---
DOCUMENTS_DIR_ENV = "COD_SYNC_DOCUMENTS_DIR"

def get_documents_folder():
    """Returns the user's Documents folder, or None if it cannot be resolved.

    The COD_SYNC_DOCUMENTS_DIR environment variable overrides detection.
    """
    override = os.getenv(DOCUMENTS_DIR_ENV)
    if override:
        if os.path.isdir(override):
            return os.path.abspath(override)
        logging.warning(f"{DOCUMENTS_DIR_ENV} points to a missing folder: '{override}'")
        return None

    if platform.system() == "Windows":
        user_profile = os.getenv('USERPROFILE') or os.path.expanduser('~')
        documents = os.path.join(user_profile, 'Documents')
    else:
        documents = os.path.join(os.path.expanduser('~'), 'Documents')

    if os.path.isdir(documents):
        return documents
    logging.warning(f"Documents folder not found: '{documents}'")
    return None


# --- Installazione del gioco ---
DEFAULT_INSTALL_DIR = r"C:/Program Files (x86)/Steam/steamapps/common/Call of Duty"
INSTALL_MARKER_EXE = "cod.exe"

# --- Profili giocatore (relativi a Documents) ---
PLAYERS_RELATIVE_DIR = os.path.join("Call of Duty", "players")
# g.<qualcosa>.txt0 / g.<qualcosa>.txt1
PROFILE_FILE_PATTERN = r"^g\..+\.txt[01]$"

# Substring tokens used to pick which settings get exported
DEFAULT_CATEGORIES = [
    "mouse",
    "fov",
    "brightness",
    "hdr",
    "adssensitivity",
    "gamepad",
    "sprint",
]

# --- Export / Backup ---
DEFAULT_EXPORT_FILENAME = "cod_settings_export.json"
EXPORT_FILE_FILTER = "JSON Files (*.json)"
BACKUP_SUFFIX = ".bak_"
BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
