"""
Messager - Real-time one-to-one chat backend

Clean Architecture implementation of token sessions, presence tracking
and message delivery, plus a Python session client.
"""

__version__ = "0.1.0"
