"""
Reporting utilities for Messager.

Centralized logging with verbose filtering and semantic emoji markers.
"""

from messager.reporter.emojis import Emoji
from messager.reporter.system_reporter import SystemReporter

__all__ = ["Emoji", "SystemReporter"]
