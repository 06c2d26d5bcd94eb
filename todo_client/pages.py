"""View logic for the screens of the client.

Pages never talk to a UI toolkit: they hold local view state, call the
session store and the API gateway, and report what should be shown next
(an inline error, a dismissible banner, a blocking alert or a navigation).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .api_client import ApiClient
from .errors import AuthenticationFailure, RequestFailure
from .models import SessionStatus, Task
from .session import Route, SessionStore


@dataclass
class Gate:
    loading: bool = False
    redirect: Optional[Route] = None

    @property
    def ready(self) -> bool:
        return not self.loading and self.redirect is None


@dataclass
class Outcome:
    navigate: Optional[Route] = None
    error: Optional[str] = None  # inline, next to the form
    alert: Optional[str] = None  # blocking acknowledgement

    @property
    def ok(self) -> bool:
        return self.error is None and self.alert is None


@dataclass
class NavItem:
    label: str
    route: Optional[Route] = None
    action: Optional[str] = None


@dataclass
class HeaderState:
    items: list[NavItem] = field(default_factory=list)
    email: Optional[str] = None


def guard(store: SessionStore) -> Gate:
    """Unresolved sessions wait, anonymous ones go to the login screen."""
    status = store.status
    if status == SessionStatus.UNRESOLVED:
        return Gate(loading=True)
    if status == SessionStatus.ANONYMOUS:
        return Gate(redirect=Route.LOGIN)
    return Gate()


def header(store: SessionStore) -> HeaderState:
    items = [NavItem("Home", Route.HOME)]
    status = store.status
    if status == SessionStatus.AUTHENTICATED and store.user:
        items += [NavItem("Dashboard", Route.DASHBOARD), NavItem("Logout", action="logout")]
        return HeaderState(items=items, email=store.user.email)
    if status == SessionStatus.ANONYMOUS:
        items += [NavItem("Login", Route.LOGIN), NavItem("Sign Up", Route.SIGNUP)]
    return HeaderState(items=items)


def _alert(e: RequestFailure, fallback: str) -> str:
    return f"Error: {e.message or fallback}"


class AuthPage:
    def __init__(self, store: SessionStore):
        self.store = store

    async def login(self, email: str, password: str) -> Outcome:
        email = (email or "").strip()
        if not email or not password:
            return Outcome(error="Email and password are required")
        try:
            return Outcome(navigate=await self.store.login(email, password))
        except (AuthenticationFailure, RequestFailure) as e:
            return Outcome(error=e.message)

    async def signup(self, email: str, password: str, name: str) -> Outcome:
        email = (email or "").strip()
        if not email or not password:
            return Outcome(error="Email and password are required")
        try:
            return Outcome(navigate=await self.store.signup(email, password, (name or "").strip()))
        except (AuthenticationFailure, RequestFailure) as e:
            return Outcome(error=e.message)

    async def logout(self) -> Outcome:
        return Outcome(navigate=await self.store.logout())


class DashboardPage:
    def __init__(self, store: SessionStore, api: ApiClient):
        self.store = store
        self.api = api
        self.tasks: list[Task] = []
        self.loading = True
        self.error = ""
        self.deleting_id: Optional[int] = None

    def gate(self) -> Gate:
        return guard(self.store)

    def greeting(self) -> str:
        user = self.store.user
        if not user:
            return ""
        return f"Welcome back, {user.name or user.email}!"

    def banner(self) -> Optional[str]:
        if not self.error:
            return None
        return f"Error: {self.error}. Make sure the backend server is running at {self.api.base_url}"

    def dismiss_error(self) -> None:
        self.error = ""

    def find(self, task_id: int) -> Optional[Task]:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None

    async def load(self) -> None:
        if not self.gate().ready:
            return
        try:
            self.tasks = await self.api.list_tasks()
        except RequestFailure as e:
            self.error = e.message or "Failed to fetch tasks"
        finally:
            self.loading = False

    async def refresh(self) -> None:
        self.loading = True
        self.error = ""
        await self.load()

    async def toggle(self, task: Task) -> Outcome:
        try:
            if task.completed:
                updated = await self.api.mark_incomplete(task.id)
            else:
                updated = await self.api.mark_complete(task.id)
        except RequestFailure as e:
            return Outcome(alert=_alert(e, "Failed to update task"))
        self.tasks = [updated if t.id == task.id else t for t in self.tasks]
        return Outcome()

    async def delete(self, task_id: int) -> Outcome:
        self.deleting_id = task_id
        try:
            await self.api.delete_task(task_id)
        except RequestFailure as e:
            return Outcome(alert=_alert(e, "Failed to delete task"))
        finally:
            self.deleting_id = None
        self.tasks = [t for t in self.tasks if t.id != task_id]
        return Outcome()


def _check_title(title: Optional[str]) -> Optional[str]:
    title = (title or "").strip()
    return title or None


class CreateTaskPage:
    def __init__(self, store: SessionStore, api: ApiClient):
        self.store = store
        self.api = api
        self.submitting = False

    def gate(self) -> Gate:
        return guard(self.store)

    async def submit(self, title: str, description: Optional[str] = None) -> Outcome:
        clean = _check_title(title)
        if clean is None:
            return Outcome(error="Title is required")
        self.submitting = True
        try:
            await self.api.create_task(clean, description)
        except RequestFailure as e:
            return Outcome(error=e.message or "Failed to create task")
        finally:
            self.submitting = False
        return Outcome(navigate=Route.DASHBOARD)


class EditTaskPage:
    def __init__(self, store: SessionStore, api: ApiClient, task_id: int):
        self.store = store
        self.api = api
        self.task_id = task_id
        self.task: Optional[Task] = None
        self.loading = True
        self.submitting = False
        self.error = ""

    def gate(self) -> Gate:
        return guard(self.store)

    async def load(self) -> None:
        if not self.gate().ready:
            return
        try:
            self.task = await self.api.get_task(self.task_id)
        except RequestFailure as e:
            self.error = e.message or "Failed to fetch task"
        finally:
            self.loading = False

    async def submit(self, title: str, description: Optional[str] = None) -> Outcome:
        clean = _check_title(title)
        if clean is None:
            return Outcome(error="Title is required")
        self.submitting = True
        try:
            self.task = await self.api.update_task(self.task_id, title=clean, description=description)
        except RequestFailure as e:
            self.error = e.message or "Failed to update task"
            return Outcome(error=self.error)
        finally:
            self.submitting = False
        return Outcome(navigate=Route.DASHBOARD)

    async def toggle(self) -> Outcome:
        if self.task is None:
            return Outcome()
        try:
            if self.task.completed:
                self.task = await self.api.mark_incomplete(self.task.id)
            else:
                self.task = await self.api.mark_complete(self.task.id)
        except RequestFailure as e:
            return Outcome(alert=_alert(e, "Failed to update task"))
        return Outcome()

    async def delete(self) -> Outcome:
        if self.task is None:
            return Outcome()
        try:
            await self.api.delete_task(self.task.id)
        except RequestFailure as e:
            return Outcome(alert=_alert(e, "Failed to delete task"))
        return Outcome(navigate=Route.DASHBOARD)
