"""
Configuration for Messager.
"""

from messager.config.settings import Settings, load_config

__all__ = ["Settings", "load_config"]
