from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx

from ..api_client import ApiClient
from ..auth_client import AuthClient
from ..session import SessionStore
from ..token_repo import TokenRepo


@dataclass
class ChatProfile:
    store: SessionStore
    api: ApiClient


class Profiles:
    """One session store and gateway per chat, resolved on first contact."""

    def __init__(
        self,
        repo: TokenRepo,
        auth: AuthClient,
        base_url: str,
        timeout_sec: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.repo = repo
        self.auth = auth
        self.base_url = base_url
        self.timeout = timeout_sec
        self.transport = transport
        self._profiles: dict[int, ChatProfile] = {}

    async def get(self, chat_id: int) -> ChatProfile:
        p = self._profiles.get(chat_id)
        if p is not None:
            return p
        store = SessionStore(self.repo, self.auth, profile=chat_id)
        api = ApiClient(self.base_url, store, timeout_sec=self.timeout, transport=self.transport)
        p = ChatProfile(store=store, api=api)
        # registered before resolving so concurrent updates see "unresolved"
        self._profiles[chat_id] = p
        try:
            await store.resolve_identity()
        except Exception:
            # forget the chat so the next update retries resolution
            self._profiles.pop(chat_id, None)
            raise
        return p
