# settings_sync_cli.py
# -*- coding: utf-8 -*-

import os
import sys
import logging
import platform

from colorama import Fore, Style, init

import config
import settings_manager
import sync_runner

# --- Funzioni Helper per Stampa Colorata ---

def print_title(text):
    """Prints a title in bright red."""
    print(f"{Style.BRIGHT}{Fore.RED}=== {text.upper()} ===")

def print_header(text):
    """Prints a section header in bright magenta."""
    print(f"\n{Style.BRIGHT}{Fore.MAGENTA}--- {text} ---{Style.RESET_ALL}")

def print_option(key, text):
    print(f"  {Style.BRIGHT}{Fore.CYAN}{key}{Style.RESET_ALL}. {text}")

def print_info(text):
    print(text)

def print_success(text):
    print(f"{Fore.GREEN}{text}")

def print_warning(text):
    print(f"{Fore.YELLOW}WARNING: {text}")

def print_error(text):
    print(f"{Style.BRIGHT}{Fore.RED}ERROR: {text}")

def print_result(success, message):
    if success:
        print_success(message)
    else:
        print_error(message)

def get_input(prompt):
    """Gets user input with a specific prompt style."""
    try:
        return input(f"{Style.BRIGHT}{Fore.WHITE}> {prompt}{Style.RESET_ALL} ")
    except EOFError:
        print_error("\nInput stream closed unexpectedly. Exiting.")
        sys.exit(1)

def pause(message="Press Enter to continue..."):
    input(f"\n{Fore.LIGHTBLACK_EX}{message}{Style.RESET_ALL}")

def clear_screen():
    os.system('cls' if platform.system() == "Windows" else 'clear')


# --- Menu actions ---

def list_profiles_cli(settings):
    clear_screen()
    print_title("Profile Config Files")
    success, message = sync_runner.list_profiles(settings)
    if success:
        for line in message.splitlines():
            print_option("-", line)
    else:
        print_error(message)
    pause()


def export_cli(settings):
    clear_screen()
    print_title("Export Settings")
    default_path = settings.get("last_export_path") or os.path.join(os.getcwd(), config.DEFAULT_EXPORT_FILENAME)
    path_input = get_input(f"Export file path (blank for '{default_path}'): ").strip('"')
    output_path = path_input or default_path
    success, message = sync_runner.run_export(output_path, settings)
    print_result(success, message)
    if success:
        settings["last_export_path"] = output_path
        if not settings_manager.save_settings(settings):
            print_warning("Could not save settings.")
    pause()


def import_cli(settings):
    clear_screen()
    print_title("Import Settings")
    document_path = get_input("Path of the JSON file to import (blank to cancel): ").strip('"')
    if not document_path:
        print_info("Import cancelled.")
        pause()
        return
    if not os.path.isfile(document_path):
        print_error(f"File not found: '{document_path}'")
        pause()
        return
    confirm = get_input("Back up the config files before importing? [Y/n]: ").strip().lower()
    if confirm in ("", "y", "yes"):
        print_result(*sync_runner.run_backup(settings))
    print_result(*sync_runner.run_import(document_path, settings))
    pause()


def backup_cli(settings):
    clear_screen()
    print_title("Backup Config Files")
    print_result(*sync_runner.run_backup(settings))
    pause()


def set_install_dir_cli(settings):
    clear_screen()
    print_title("Set Game Folder")
    current = sync_runner.resolve_install_dir(settings)
    print_info(f"Current game folder: {current or 'not found'}")
    path_input = get_input("Enter the Call of Duty folder (blank to cancel): ").strip('"')
    if not path_input:
        print_info("Cancelled.")
    else:
        print_result(*sync_runner.set_install_dir(os.path.normpath(path_input), settings))
    pause()


def show_categories_cli(settings):
    clear_screen()
    print_title("Exported Categories")
    for category in settings.get("categories", config.DEFAULT_CATEGORIES):
        print_option("-", category)
    print_info(f"\nEdit 'categories' in {settings_manager.get_settings_path()} to change them.")
    pause()


def main_menu():
    settings, _ = settings_manager.load_settings()
    actions = {
        "1": ("List profile config files", list_profiles_cli),
        "2": ("Export settings", export_cli),
        "3": ("Import settings", import_cli),
        "4": ("Backup config files", backup_cli),
        "5": ("Set game folder", set_install_dir_cli),
        "6": ("Show exported categories", show_categories_cli),
    }
    while True:
        clear_screen()
        print_title(config.APP_NAME)
        install_dir = sync_runner.resolve_install_dir(settings)
        print_info(f"Game folder: {install_dir or Fore.YELLOW + 'not found'}")
        print_header("Main Menu")
        for key, (label, _) in actions.items():
            print_option(key, label)
        print_option("0", "Exit")

        choice = get_input("Choose an option: ").strip()
        if choice == "0":
            print_info("Goodbye!")
            return
        action = actions.get(choice)
        if action is None:
            print_error("Invalid choice.")
            pause()
            continue
        action[1](settings)


if __name__ == "__main__":
    init(autoreset=True)
    logging.basicConfig(level=logging.WARNING, format='%(asctime)s - %(levelname)s - %(message)s', datefmt='%H:%M:%S')
    try:
        main_menu()
    except KeyboardInterrupt:
        print_info("\nInterrupted.")
        sys.exit(1)
