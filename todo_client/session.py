from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from .auth_client import AuthClient
from .errors import NetworkFailure, SessionInvalid
from .models import AuthResponse, Session, SessionStatus, User
from .token_repo import Profile, TokenRepo

logger = logging.getLogger(__name__)

Listener = Callable[[Session], None]


class Route(str, Enum):
    HOME = "/"
    LOGIN = "/login"
    SIGNUP = "/signup"
    DASHBOARD = "/dashboard"


class SessionStore:
    """Who is logged in for one client profile.

    State only changes through ``resolve_identity``, ``login``, ``signup`` and
    ``logout``. The persisted token slot and the in-memory token are always
    written together.
    """

    def __init__(self, repo: TokenRepo, auth: AuthClient, profile: Profile = "default"):
        self.repo = repo
        self.auth = auth
        self.profile = profile
        self._session = Session()
        self._listeners: list[Listener] = []

    # reads
    def current_session(self) -> Session:
        return self._session.model_copy(deep=True)

    @property
    def token(self) -> Optional[str]:
        return self._session.token

    @property
    def user(self) -> Optional[User]:
        return self._session.user

    @property
    def status(self) -> SessionStatus:
        return self._session.status

    def is_authenticated(self) -> bool:
        return self._session.status == SessionStatus.AUTHENTICATED

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # transitions
    async def resolve_identity(self) -> Session:
        token = await self.repo.get(self.profile)
        if not token:
            self._set(SessionStatus.ANONYMOUS)
            return self.current_session()

        # token without user until /auth/me answers
        self._session = Session(status=SessionStatus.UNRESOLVED, token=token)
        try:
            user = await self.auth.me(token)
        except (SessionInvalid, NetworkFailure) as e:
            logger.info("identity resolution failed for profile=%s: %s", self.profile, e.message)
            await self.repo.delete(self.profile)
            self._set(SessionStatus.ANONYMOUS)
            return self.current_session()

        self._set(SessionStatus.AUTHENTICATED, token=token, user=user)
        return self.current_session()

    async def login(self, email: str, password: str) -> Route:
        res = await self.auth.sign_in(email, password)
        await self._accept(res)
        return Route.DASHBOARD

    async def signup(self, email: str, password: str, name: str) -> Route:
        res = await self.auth.sign_up(email, password, name)
        await self._accept(res)
        return Route.DASHBOARD

    async def logout(self) -> Route:
        self._session = Session(status=SessionStatus.ANONYMOUS)
        await self.repo.delete(self.profile)
        self._notify()
        return Route.HOME

    async def _accept(self, res: AuthResponse) -> None:
        await self.repo.set(self.profile, res.token)
        self._set(SessionStatus.AUTHENTICATED, token=res.token, user=res.user)

    def _set(self, status: SessionStatus, token: Optional[str] = None, user: Optional[User] = None) -> None:
        self._session = Session(status=status, token=token, user=user)
        self._notify()

    def _notify(self) -> None:
        snapshot = self.current_session()
        for listener in list(self._listeners):
            listener(snapshot)
