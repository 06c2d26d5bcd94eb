"""Tests for screen logic: guards, header, dashboard, create and edit."""

import pytest

from conftest import BASE_URL, failing_transport
from todo_client.api_client import ApiClient
from todo_client.pages import (
    AuthPage, CreateTaskPage, DashboardPage, EditTaskPage, guard, header,
)
from todo_client.session import Route


class TestGuard:
    def test_unresolved_shows_loading(self, store):
        gate = guard(store)
        assert gate.loading is True
        assert gate.redirect is None
        assert gate.ready is False

    @pytest.mark.asyncio
    async def test_anonymous_redirects_to_login(self, store):
        await store.resolve_identity()
        gate = guard(store)
        assert gate.redirect == Route.LOGIN
        assert gate.loading is False

    @pytest.mark.asyncio
    async def test_authenticated_is_ready(self, logged_in):
        assert guard(logged_in).ready


class TestHeader:
    def test_loading_shows_only_home(self, store):
        state = header(store)
        assert [i.label for i in state.items] == ["Home"]
        assert state.email is None

    @pytest.mark.asyncio
    async def test_anonymous(self, store):
        await store.resolve_identity()
        assert [i.label for i in header(store).items] == ["Home", "Login", "Sign Up"]

    @pytest.mark.asyncio
    async def test_authenticated(self, logged_in):
        state = header(logged_in)
        assert [i.label for i in state.items] == ["Home", "Dashboard", "Logout"]
        assert state.email == "ann@example.com"


class TestAuthPage:
    @pytest.mark.asyncio
    async def test_login_navigates_to_dashboard(self, auth, store):
        await auth.sign_up("ann@example.com", "secret", "Ann")
        outcome = await AuthPage(store).login(" ann@example.com ", "secret")
        assert outcome.navigate == Route.DASHBOARD
        assert outcome.ok

    @pytest.mark.asyncio
    async def test_login_error_is_inline(self, store):
        outcome = await AuthPage(store).login("ann@example.com", "secret")
        assert outcome.error == "Invalid email or password"
        assert outcome.navigate is None

    @pytest.mark.asyncio
    async def test_missing_fields(self, store, backend):
        outcome = await AuthPage(store).login("", "")
        assert outcome.error == "Email and password are required"
        assert backend.state.requests == []

    @pytest.mark.asyncio
    async def test_signup_and_logout(self, store):
        page = AuthPage(store)
        assert (await page.signup("bob@example.com", "pw", "Bob")).navigate == Route.DASHBOARD
        assert (await page.logout()).navigate == Route.HOME


class TestDashboard:
    @pytest.mark.asyncio
    async def test_load_and_greeting(self, logged_in, api):
        await api.create_task("Buy milk", "2%")
        page = DashboardPage(logged_in, api)
        await page.load()
        assert page.loading is False
        assert [t.title for t in page.tasks] == ["Buy milk"]
        assert page.greeting() == "Welcome back, Ann!"
        assert page.banner() is None

    @pytest.mark.asyncio
    async def test_load_skipped_when_not_ready(self, store, api, backend):
        await store.resolve_identity()
        page = DashboardPage(store, api)
        await page.load()
        assert page.tasks == []
        assert backend.state.requests == []

    @pytest.mark.asyncio
    async def test_load_failure_becomes_banner(self, logged_in):
        api = ApiClient(BASE_URL, logged_in, transport=failing_transport())
        page = DashboardPage(logged_in, api)
        await page.load()
        assert page.loading is False
        assert BASE_URL in page.banner()
        page.dismiss_error()
        assert page.banner() is None

    @pytest.mark.asyncio
    async def test_toggle_replaces_task(self, logged_in, api):
        task = await api.create_task("Buy milk")
        page = DashboardPage(logged_in, api)
        await page.load()

        assert (await page.toggle(page.find(task.id))).ok
        assert page.find(task.id).completed is True
        assert (await page.toggle(page.find(task.id))).ok
        assert page.find(task.id).completed is False

    @pytest.mark.asyncio
    async def test_toggle_failure_is_alert_and_keeps_state(self, logged_in, api):
        task = await api.create_task("Buy milk")
        page = DashboardPage(logged_in, api)
        await page.load()
        await api.delete_task(task.id)

        outcome = await page.toggle(page.find(task.id))
        assert outcome.alert == "Error: Task not found"
        assert page.find(task.id).completed is False

    @pytest.mark.asyncio
    async def test_delete_removes_task(self, logged_in, api):
        a = await api.create_task("a")
        b = await api.create_task("b")
        page = DashboardPage(logged_in, api)
        await page.load()

        assert (await page.delete(a.id)).ok
        assert [t.id for t in page.tasks] == [b.id]
        assert page.deleting_id is None

    @pytest.mark.asyncio
    async def test_delete_nonexistent_keeps_list(self, logged_in, api):
        a = await api.create_task("a")
        page = DashboardPage(logged_in, api)
        await page.load()

        outcome = await page.delete(12345)
        assert outcome.alert == "Error: Task not found"
        assert [t.id for t in page.tasks] == [a.id]
        assert page.deleting_id is None

    @pytest.mark.asyncio
    async def test_refresh_refetches(self, logged_in, api):
        page = DashboardPage(logged_in, api)
        await page.load()
        await api.create_task("late")
        await page.refresh()
        assert [t.title for t in page.tasks] == ["late"]


class TestCreateTask:
    @pytest.mark.asyncio
    async def test_submit_navigates(self, logged_in, api):
        outcome = await CreateTaskPage(logged_in, api).submit("  Buy milk  ", "2%")
        assert outcome.navigate == Route.DASHBOARD
        tasks = await api.list_tasks()
        assert tasks[0].title == "Buy milk"

    @pytest.mark.asyncio
    async def test_title_required(self, logged_in, api, backend):
        count = len(backend.state.requests)
        outcome = await CreateTaskPage(logged_in, api).submit("   ")
        assert outcome.error == "Title is required"
        assert len(backend.state.requests) == count

    @pytest.mark.asyncio
    async def test_failure_is_inline(self, store, api):
        await store.resolve_identity()
        outcome = await CreateTaskPage(store, api).submit("x")
        assert outcome.error == "Not authenticated"


class TestEditTask:
    @pytest.mark.asyncio
    async def test_load_and_submit(self, logged_in, api):
        task = await api.create_task("Buy milk", "2%")
        page = EditTaskPage(logged_in, api, task.id)
        await page.load()
        assert page.task.title == "Buy milk"

        outcome = await page.submit("Buy oat milk", "1l")
        assert outcome.navigate == Route.DASHBOARD
        fetched = await api.get_task(task.id)
        assert (fetched.title, fetched.description) == ("Buy oat milk", "1l")

    @pytest.mark.asyncio
    async def test_load_missing_task(self, logged_in, api):
        page = EditTaskPage(logged_in, api, 404)
        await page.load()
        assert page.task is None
        assert page.error == "Task not found"
        assert (await page.toggle()).ok

    @pytest.mark.asyncio
    async def test_toggle_and_delete(self, logged_in, api):
        task = await api.create_task("Buy milk")
        page = EditTaskPage(logged_in, api, task.id)
        await page.load()

        await page.toggle()
        assert page.task.completed is True
        assert (await page.delete()).navigate == Route.DASHBOARD
        assert await api.list_tasks() == []

    @pytest.mark.asyncio
    async def test_delete_failure_is_alert(self, logged_in, api):
        task = await api.create_task("Buy milk")
        page = EditTaskPage(logged_in, api, task.id)
        await page.load()
        await api.delete_task(task.id)

        outcome = await page.delete()
        assert outcome.alert == "Error: Task not found"
        assert outcome.navigate is None
