"""
Dependency Injection container for Messager.

Manages lifecycle and dependencies of all application components.
The container is the composition root's single owner of runtime
state: one presence registry, one token service, one delivery engine.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from sqlalchemy.engine import make_url

from messager.application.use_cases import (
    AuthenticateRequestUseCase,
    DeleteMessageUseCase,
    GetConversationUseCase,
    ListContactsUseCase,
    LoginUserUseCase,
    ManageReactionsUseCase,
    RefreshSessionUseCase,
    RegisterUserUseCase,
    SendMessageUseCase,
    UpdateProfileUseCase,
)
from messager.config.settings import Settings
from messager.domain.exceptions import ConfigError
from messager.domain.repositories import IMessageRepository, IUserRepository
from messager.domain.services import IMailSender, IPasswordHasher
from messager.infrastructure.auth import Argon2PasswordHasher, TokenService
from messager.infrastructure.mail import HttpMailSender, NullMailSender
from messager.infrastructure.persistence import (
    Database,
    InMemoryMessageRepository,
    InMemoryUserRepository,
    SqlAlchemyMessageRepository,
    SqlAlchemyUserRepository,
)
from messager.infrastructure.presence import PresenceEvent, PresenceRegistry
from messager.infrastructure.rate_limiting import RateLimiter
from messager.infrastructure.shutdown import ShutdownManager
from messager.reporter import Emoji, SystemReporter


class Container:
    """
    Dependency Injection container.

    Creates and manages all application dependencies. Adapters for the
    stores, the password hasher and the mail sender may be injected.
    Otherwise stores are SQL-backed when database_url is set and
    in-memory when it is not.
    """

    def __init__(
        self,
        settings: Settings,
        reporter: Optional[SystemReporter] = None,
        clock: Optional[Callable[[], datetime]] = None,
        user_repository: Optional[IUserRepository] = None,
        message_repository: Optional[IMessageRepository] = None,
        password_hasher: Optional[IPasswordHasher] = None,
        mail_sender: Optional[IMailSender] = None,
    ):
        """
        Initialize container with settings.

        Args:
            settings: Application settings
            reporter: Shared SystemReporter (a quiet one is created if None)
            clock: Clock used for tokens and message timestamps
            user_repository: Optional user store adapter
            message_repository: Optional message store adapter
            password_hasher: Optional password hasher
            mail_sender: Optional mail sender
        """
        self.settings = settings
        self.reporter = reporter or SystemReporter(
            name="messager", level=settings.log_level, verbose=settings.verbose
        )
        self.clock = clock

        self._user_repository = user_repository
        self._message_repository = message_repository
        self._password_hasher = password_hasher
        self._mail_sender = mail_sender

        self._database: Optional[Database] = None
        self._token_service: Optional[TokenService] = None
        self._presence_registry: Optional[PresenceRegistry] = None
        self._shutdown_manager: Optional[ShutdownManager] = None
        self._auth_rate_limiter: Optional[RateLimiter] = None
        self._send_message_use_case: Optional[SendMessageUseCase] = None

        self.stats: Dict[str, Any] = {
            "total_connections": 0,
            "total_messages_sent": 0,
            "start_time": datetime.now(timezone.utc),
        }

    # ============================================================
    # Configuration checks
    # ============================================================

    def validate_configuration(self) -> None:
        """
        Fail fast on missing token secrets.

        Raises:
            ConfigError: If a secret is unset or both are identical
        """
        if not self.settings.access_token_secret:
            raise ConfigError("ACCESS_TOKEN_SECRET is not configured")
        if not self.settings.refresh_token_secret:
            raise ConfigError("REFRESH_TOKEN_SECRET is not configured")
        # Constructing the service checks that the secrets differ
        _ = self.token_service

    # ============================================================
    # Infrastructure singletons
    # ============================================================

    @property
    def token_service(self) -> TokenService:
        """
        Get TokenService singleton.

        Missing secrets surface as ConfigError on first issue/verify.
        """
        if self._token_service is None:
            self._token_service = TokenService(
                access_secret=self.settings.access_token_secret,
                refresh_secret=self.settings.refresh_token_secret,
                algorithm=self.settings.jwt_algorithm,
                access_ttl=timedelta(minutes=self.settings.access_token_expire_minutes),
                refresh_ttl=timedelta(days=self.settings.refresh_token_expire_days),
                clock=self.clock,
            )
        return self._token_service

    @property
    def presence_registry(self) -> PresenceRegistry:
        """Get PresenceRegistry singleton, wired to broadcast transitions."""
        if self._presence_registry is None:
            self._presence_registry = PresenceRegistry(
                max_connections_per_user=self.settings.max_connections_per_user,
                reporter=self.reporter,
            )
            self._presence_registry.add_listener(self._broadcast_presence_change)
        return self._presence_registry

    def _broadcast_presence_change(self, event: PresenceEvent) -> None:
        reached = self.presence_registry.push_to_all(
            event.to_dict(), exclude_user=event.user_id
        )
        self.reporter.debug(
            f"{Emoji.NETWORK.BROADCAST} Presence user={event.user_id} "
            f"online={event.online} -> {reached} connections",
            context="Container",
        )

    @property
    def shutdown_manager(self) -> ShutdownManager:
        """Get ShutdownManager singleton."""
        if self._shutdown_manager is None:
            self._shutdown_manager = ShutdownManager(
                shutdown_timeout=self.settings.shutdown_timeout,
                grace_period=self.settings.shutdown_grace_period,
                reporter=self.reporter,
            )
        return self._shutdown_manager

    @property
    def auth_rate_limiter(self) -> Optional[RateLimiter]:
        """Get the limiter shared by signup, login and refresh (None if disabled)."""
        if self._auth_rate_limiter is None and self.settings.auth_rate_limit:
            self._auth_rate_limiter = RateLimiter(
                limit=self.settings.auth_rate_limit,
                window_seconds=self.settings.auth_rate_limit_window,
            )
        return self._auth_rate_limiter

    @property
    def database(self) -> Optional[Database]:
        """Get Database singleton, None when no database_url is configured."""
        if self._database is None and self.settings.database_url:
            self._database = Database(
                self.settings.database_url, echo=self.settings.database_echo
            )
        return self._database

    @property
    def user_repository(self) -> IUserRepository:
        if self._user_repository is None:
            if self.database is not None:
                self._user_repository = SqlAlchemyUserRepository(self.database)
            else:
                self._user_repository = InMemoryUserRepository()
        return self._user_repository

    @property
    def message_repository(self) -> IMessageRepository:
        if self._message_repository is None:
            if self.database is not None:
                self._message_repository = SqlAlchemyMessageRepository(
                    self.database, clock=self.clock
                )
            else:
                self._message_repository = InMemoryMessageRepository(clock=self.clock)
        return self._message_repository

    @property
    def password_hasher(self) -> IPasswordHasher:
        if self._password_hasher is None:
            self._password_hasher = Argon2PasswordHasher()
        return self._password_hasher

    @property
    def mail_sender(self) -> IMailSender:
        """HttpMailSender when a mail service is configured, else NullMailSender."""
        if self._mail_sender is None:
            if self.settings.mail_service_url:
                self._mail_sender = HttpMailSender(
                    service_url=self.settings.mail_service_url,
                    sender_name=self.settings.mail_sender_name,
                    client_url=self.settings.client_url,
                    timeout=self.settings.mail_timeout,
                    api_key=self.settings.mail_api_key,
                    reporter=self.reporter,
                )
            else:
                self._mail_sender = NullMailSender(reporter=self.reporter)
        return self._mail_sender

    # ============================================================
    # Use cases
    # ============================================================

    def get_authenticate_use_case(self) -> AuthenticateRequestUseCase:
        return AuthenticateRequestUseCase(
            token_service=self.token_service,
            user_repository=self.user_repository,
            reporter=self.reporter,
        )

    def get_register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            user_repository=self.user_repository,
            password_hasher=self.password_hasher,
            token_service=self.token_service,
            reporter=self.reporter,
        )

    def get_login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            user_repository=self.user_repository,
            password_hasher=self.password_hasher,
            token_service=self.token_service,
            reporter=self.reporter,
        )

    def get_refresh_session_use_case(self) -> RefreshSessionUseCase:
        return RefreshSessionUseCase(
            token_service=self.token_service, reporter=self.reporter
        )

    def get_update_profile_use_case(self) -> UpdateProfileUseCase:
        return UpdateProfileUseCase(
            user_repository=self.user_repository,
            max_image_bytes=self.settings.max_image_bytes,
            reporter=self.reporter,
        )

    def get_send_message_use_case(self) -> SendMessageUseCase:
        """
        Get SendMessageUseCase singleton.

        A single instance owns the per-pair ordering locks.
        """
        if self._send_message_use_case is None:
            self._send_message_use_case = SendMessageUseCase(
                message_repository=self.message_repository,
                user_repository=self.user_repository,
                presence_registry=self.presence_registry,
                max_image_bytes=self.settings.max_image_bytes,
                max_text_length=self.settings.max_text_length,
                reporter=self.reporter,
            )
        return self._send_message_use_case

    def get_manage_reactions_use_case(self) -> ManageReactionsUseCase:
        return ManageReactionsUseCase(
            message_repository=self.message_repository,
            presence_registry=self.presence_registry,
            reporter=self.reporter,
        )

    def get_delete_message_use_case(self) -> DeleteMessageUseCase:
        return DeleteMessageUseCase(
            message_repository=self.message_repository,
            presence_registry=self.presence_registry,
            reporter=self.reporter,
        )

    def get_conversation_use_case(self) -> GetConversationUseCase:
        return GetConversationUseCase(
            message_repository=self.message_repository,
            user_repository=self.user_repository,
            presence_registry=self.presence_registry,
            reporter=self.reporter,
        )

    def get_list_contacts_use_case(self) -> ListContactsUseCase:
        return ListContactsUseCase(
            user_repository=self.user_repository,
            message_repository=self.message_repository,
        )

    # ============================================================
    # Statistics / lifecycle
    # ============================================================

    def increment_stat(self, key: str, amount: int = 1) -> None:
        """Increment a counter in stats."""
        self.stats[key] = self.stats.get(key, 0) + amount

    async def connect(self) -> None:
        """Open the database (if configured) and create missing tables."""
        if self.database is None:
            return
        await self.database.connect()
        await self.database.create_schema()
        self.reporter.info(
            f"{Emoji.NETWORK.CONNECTED} Database ready: "
            f"{make_url(self.database.database_url).render_as_string()}",
            context="Container",
        )

    async def close(self) -> None:
        """Release network resources held by adapters."""
        if self._mail_sender is not None:
            await self._mail_sender.close()
        if self._database is not None:
            await self._database.disconnect()
