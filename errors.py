# errors.py
# -*- coding: utf-8 -*-
"""
Exception types raised by the settings sync core.
sync_runner turns every one of them into a short status message.
"""

from typing import Optional


class SyncError(Exception):
    """Base class for all settings sync errors."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class NotFoundError(SyncError):
    """Documents root, profile files or install marker could not be found."""


class ConfigIOError(SyncError):
    """A config, export or backup file could not be read, written or copied."""


class MalformedDocumentError(SyncError):
    """The import document is not a {file name: {setting: value}} mapping."""
