from __future__ import annotations

from typing import Optional, Union

import redis.asyncio as redis


Profile = Union[int, str]


class TokenRepo:
    """Single-slot bearer token storage, one Redis key per client profile."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        slot: str = "auth-token",
        client: Optional[redis.Redis] = None,
    ):
        self.r = client if client is not None else redis.Redis(host=host, port=port, decode_responses=True)
        self.slot = slot

    def _key(self, profile: Profile) -> str:
        return f"{self.slot}:{profile}"

    async def get(self, profile: Profile) -> Optional[str]:
        raw = await self.r.get(self._key(profile))
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return raw or None

    async def set(self, profile: Profile, token: str) -> None:
        # no TTL: the token lives until logout or rejection by /auth/me
        await self.r.set(self._key(profile), token)

    async def delete(self, profile: Profile) -> None:
        await self.r.delete(self._key(profile))

    async def close(self) -> None:
        await self.r.aclose()
