from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from .errors import RequestFailure
from .models import MessageResponse, Task, TaskCreate, TaskUpdate
from .transport import handle_response, send

if TYPE_CHECKING:
    from .session import SessionStore

M = TypeVar("M", bound=BaseModel)

_TASK_LIST = TypeAdapter(list[Task])


def _parse(model: type[M], data: Any) -> M:
    try:
        return model.model_validate(data)
    except ValidationError:
        raise RequestFailure() from None


class ApiClient:
    """Gateway to the task resource service.

    Every call goes through ``_request``: the bearer token is taken from the
    session store at call time, the body is sent as JSON, and any non-2xx
    answer is raised as ``RequestFailure`` carrying the server's message.
    """

    def __init__(
        self,
        base_url: str,
        session: "SessionStore",
        timeout_sec: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.session = session
        self.timeout = timeout_sec
        self.transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.session.token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _request(self, method: str, path: str, json: Optional[dict] = None) -> Any:
        r = await send(
            method,
            f"{self.base_url}{path}",
            headers=self._headers(),
            json=json,
            timeout=self.timeout,
            transport=self.transport,
        )
        return handle_response(r)

    # TASKS
    async def list_tasks(self) -> list[Task]:
        data = await self._request("GET", "/tasks")
        try:
            return _TASK_LIST.validate_python(data)
        except ValidationError:
            raise RequestFailure() from None

    async def get_task(self, task_id: int) -> Task:
        return _parse(Task, await self._request("GET", f"/tasks/{task_id}"))

    async def create_task(self, title: str, description: Optional[str] = None) -> Task:
        payload = TaskCreate(title=title, description=description).model_dump(exclude_none=True)
        return _parse(Task, await self._request("POST", "/tasks", json=payload))

    async def update_task(self, task_id: int, title: Optional[str] = None, description: Optional[str] = None) -> Task:
        payload = TaskUpdate(title=title, description=description).model_dump(exclude_none=True)
        return _parse(Task, await self._request("PUT", f"/tasks/{task_id}", json=payload))

    async def delete_task(self, task_id: int) -> MessageResponse:
        return _parse(MessageResponse, await self._request("DELETE", f"/tasks/{task_id}"))

    async def mark_complete(self, task_id: int) -> Task:
        return _parse(Task, await self._request("POST", f"/tasks/{task_id}/complete"))

    async def mark_incomplete(self, task_id: int) -> Task:
        return _parse(Task, await self._request("POST", f"/tasks/{task_id}/incomplete"))
