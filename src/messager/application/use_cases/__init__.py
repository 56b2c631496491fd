"""
Application use cases for Messager.
"""

from messager.application.use_cases.authenticate_request import (
    AuthenticateRequestUseCase,
)
from messager.application.use_cases.delete_message import DeleteMessageUseCase
from messager.application.use_cases.get_conversation import GetConversationUseCase
from messager.application.use_cases.list_contacts import ListContactsUseCase
from messager.application.use_cases.login_user import LoginUserUseCase
from messager.application.use_cases.manage_reactions import ManageReactionsUseCase
from messager.application.use_cases.refresh_session import RefreshSessionUseCase
from messager.application.use_cases.register_user import RegisterUserUseCase
from messager.application.use_cases.send_message import SendMessageUseCase
from messager.application.use_cases.update_profile import UpdateProfileUseCase

__all__ = [
    "AuthenticateRequestUseCase",
    "DeleteMessageUseCase",
    "GetConversationUseCase",
    "ListContactsUseCase",
    "LoginUserUseCase",
    "ManageReactionsUseCase",
    "RefreshSessionUseCase",
    "RegisterUserUseCase",
    "SendMessageUseCase",
    "UpdateProfileUseCase",
]
