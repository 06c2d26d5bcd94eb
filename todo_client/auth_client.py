from __future__ import annotations

from typing import Optional

import httpx
from pydantic import ValidationError

from .errors import AuthenticationFailure, RequestFailure, SessionInvalid
from .models import AuthResponse, User
from .transport import handle_response, send


class AuthClient:
    def __init__(
        self,
        base_url: str,
        timeout_sec: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout_sec
        self.transport = transport

    async def _post(self, path: str, payload: dict, default: str) -> AuthResponse:
        r = await send(
            "POST",
            f"{self.base_url}{path}",
            headers={"Content-Type": "application/json"},
            json=payload,
            timeout=self.timeout,
            transport=self.transport,
        )
        try:
            return AuthResponse.model_validate(handle_response(r, default))
        except RequestFailure as e:
            raise AuthenticationFailure(e.message) from e
        except ValidationError:
            raise AuthenticationFailure(default) from None

    async def sign_in(self, email: str, password: str) -> AuthResponse:
        return await self._post(
            "/auth/sign-in",
            {"email": email, "password": password},
            "Invalid email or password",
        )

    async def sign_up(self, email: str, password: str, name: str) -> AuthResponse:
        return await self._post(
            "/auth/sign-up",
            {"email": email, "password": password, "name": name},
            "Signup failed",
        )

    async def me(self, token: str) -> User:
        # /auth/me returns the user object directly, not wrapped in {"user": ...}
        r = await send(
            "GET",
            f"{self.base_url}/auth/me",
            headers={"Authorization": f"Bearer {token}", "Content-Type": "application/json"},
            timeout=self.timeout,
            transport=self.transport,
        )
        try:
            return User.model_validate(handle_response(r))
        except RequestFailure as e:
            raise SessionInvalid(e.message) from e
        except ValidationError:
            raise SessionInvalid("Malformed identity response") from None
