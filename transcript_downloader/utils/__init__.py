"""Utility helpers for the browser session, output files, and prompts."""

from .browser import AuthenticationError, BrowserPage, BrowserSession
from .file_utils import OutputStore, ensure_directory, sanitize_filename

__all__ = ["AuthenticationError", "BrowserPage", "BrowserSession", "OutputStore", "ensure_directory", "sanitize_filename"]
