"""
Dependency injection for Messager.
"""

from messager.di.container import Container

__all__ = ["Container"]
