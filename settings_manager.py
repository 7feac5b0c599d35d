# settings_manager.py
import json
import os
import logging

import config # Import for default values


SETTINGS_FILENAME = "settings.json"


def get_settings_path() -> str:
    return os.path.join(config.get_app_data_folder(), SETTINGS_FILENAME)


def get_default_settings() -> dict:
    return {
        # Chosen install folder; replaces any process-wide "selected path" state
        "cod_install_dir": None,
        "categories": list(config.DEFAULT_CATEGORIES),
        "last_export_path": None,
        "documents_dir_override": None,
    }


def _is_optional_str(value) -> bool:
    return value is None or isinstance(value, str)


def load_settings():
    """Load settings. Returns (settings dict, first_launch bool)."""
    settings_file_path = get_settings_path()
    defaults = get_default_settings()

    if not os.path.exists(settings_file_path):
        logging.info(f"Settings file '{settings_file_path}' not found, using defaults.")
        return defaults, True

    try:
        with open(settings_file_path, 'r', encoding='utf-8') as f:
            user_settings = json.load(f)
        if not isinstance(user_settings, dict):
            raise TypeError("settings root is not an object")
        # User settings override defaults
        settings = defaults.copy()
        settings.update(user_settings)
        logging.info(f"Settings loaded successfully from '{settings_file_path}'.")

        # --- VALIDATION CATEGORIES ---
        categories = settings.get("categories")
        if not isinstance(categories, list) or not all(isinstance(c, str) for c in categories):
            logging.warning("'categories' in the settings file is not a valid list of strings, using the default list.")
            settings["categories"] = defaults["categories"]

        # --- VALIDATION PATHS ---
        for key in ("cod_install_dir", "last_export_path", "documents_dir_override"):
            if not _is_optional_str(settings.get(key)):
                logging.warning(f"Invalid {key} value ('{settings.get(key)}'), using default.")
                settings[key] = defaults[key]

        return settings, False
    except (json.JSONDecodeError, KeyError, TypeError):
        logging.error(f"Failed to read or validate '{settings_file_path}'...", exc_info=True)
        return defaults, True # Treat as first launch if file is corrupted
    except OSError:
        logging.error(f"Unexpected error reading settings from '{settings_file_path}'.", exc_info=True)
        return defaults, True


def save_settings(settings_dict) -> bool:
    """Save the settings dictionary. Returns bool (success)."""
    settings_file_path = get_settings_path()
    try:
        with open(settings_file_path, 'w', encoding='utf-8') as f:
            json.dump(settings_dict, f, indent=4)
        logging.info(f"Settings saved to '{settings_file_path}'.")
        return True
    except (OSError, TypeError) as e:
        logging.error(f"Error saving settings to '{settings_file_path}': {e}", exc_info=True)
        return False
