from __future__ import annotations

import logging
from typing import Optional

from aiogram import Router, F
from aiogram.types import Message, CallbackQuery, ErrorEvent
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext

from ..models import Task
from ..pages import (
    AuthPage, CreateTaskPage, DashboardPage, EditTaskPage, Gate, Outcome, header,
)
from ..session import Route
from .keyboards import (
    BTN_DASHBOARD, BTN_HELP, BTN_HOME, BTN_LOGIN, BTN_LOGOUT, BTN_SIGNUP,
    confirm_delete_kb, edit_task_kb, main_menu_kb, task_list_kb,
)
from .profiles import ChatProfile, Profiles
from .states import LoginForm, SignupForm, TaskForm

router = Router()
logger = logging.getLogger(__name__)

HELP_TEXT = (
    "👋 TodoApp: manage your tasks.\n\n"
    "• /menu — main menu\n"
    "• /login, /signup, /logout\n"
    "• /tasks — your tasks\n"
    "• /me — status\n"
)

SKIP = "-"
ALERT_LIMIT = 200  # Telegram callback alert text limit


# ========= rendering =========

def render_task(t: Task) -> str:
    mark = "✅" if t.completed else "⬜"
    line = f"{mark} #{t.id} {t.title}"
    if t.description:
        line += f"\n    {t.description}"
    return line


def render_dashboard(page: DashboardPage) -> str:
    parts = ["My Tasks", page.greeting()]
    banner = page.banner()
    if banner:
        parts.append(f"⚠️ {banner}")
    elif not page.tasks:
        parts.append("No tasks yet. Create your first one!")
    else:
        parts.extend(render_task(t) for t in page.tasks)
    return "\n\n".join(p for p in parts if p)


def render_edit(page: EditTaskPage) -> str:
    if page.task is None:
        return f"⚠️ {page.error or 'Task not found'}"
    status = "Completed" if page.task.completed else "Incomplete"
    return f"Edit Task\n\n{render_task(page.task)}\n\nStatus: {status}"


def _task_id(data: Optional[str]) -> int:
    return int((data or "").rsplit(":", 1)[1])


# ========= helpers =========

async def _profile(msg: Message, profiles: Profiles) -> ChatProfile:
    return await profiles.get(msg.chat.id)


async def _pass_gate(msg: Message, gate: Gate) -> bool:
    if gate.loading:
        await msg.answer("⏳ Loading...")
        return False
    if gate.redirect == Route.LOGIN:
        await msg.answer("🔒 You are not logged in. Use /login or /signup.")
        return False
    return True


async def _show_menu(msg: Message, p: ChatProfile, text: Optional[str] = None):
    state = header(p.store)
    if text is None:
        text = f"Signed in as {state.email}" if state.email else "TodoApp: log in or sign up to manage your tasks."
    await msg.answer(text, reply_markup=main_menu_kb(state))


async def _show_dashboard(msg: Message, p: ChatProfile, page: Optional[DashboardPage] = None):
    if page is None:
        page = DashboardPage(p.store, p.api)
        if not await _pass_gate(msg, page.gate()):
            return
        await page.load()
    await msg.answer(render_dashboard(page), reply_markup=task_list_kb(page.tasks, page.deleting_id))


async def _navigate(msg: Message, p: ChatProfile, state: FSMContext, route: Route):
    if route == Route.DASHBOARD:
        await _show_menu(msg, p)
        await _show_dashboard(msg, p)
    elif route == Route.LOGIN:
        await state.set_state(LoginForm.email)
        await msg.answer("Email:")
    else:
        await _show_menu(msg, p)


async def _alert(c: CallbackQuery, outcome: Outcome) -> bool:
    if outcome.alert:
        await c.answer(outcome.alert[:ALERT_LIMIT], show_alert=True)
        return True
    await c.answer()
    return False


# ========= MAIN MENU =========

@router.message(Command("start"))
@router.message(Command("menu"))
@router.message(F.text == BTN_HOME)
async def start_menu(m: Message, state: FSMContext, profiles: Profiles):
    await state.clear()
    await _show_menu(m, await _profile(m, profiles))


@router.message(Command("help"))
@router.message(F.text == BTN_HELP)
async def help_menu(m: Message):
    await m.answer(HELP_TEXT)


@router.message(Command("me"))
async def me(m: Message, profiles: Profiles):
    p = await _profile(m, profiles)
    user = p.store.user
    if user:
        await m.answer(f"Status: logged in ✅\nName: {user.name}\nEmail: {user.email}")
    else:
        await m.answer(f"Status: {p.store.status.value}")


# ========= AUTH =========

@router.message(Command("login"))
@router.message(F.text == BTN_LOGIN)
async def login_start(m: Message, state: FSMContext):
    await state.clear()
    await state.set_state(LoginForm.email)
    await m.answer("Email:")


@router.message(LoginForm.email)
async def login_email(m: Message, state: FSMContext):
    await state.update_data(email=(m.text or "").strip())
    await state.set_state(LoginForm.password)
    await m.answer("Password:")


@router.message(LoginForm.password)
async def login_password(m: Message, state: FSMContext, profiles: Profiles):
    p = await _profile(m, profiles)
    data = await state.get_data()
    await state.clear()
    outcome = await AuthPage(p.store).login(data.get("email", ""), m.text or "")
    if outcome.error:
        await m.answer(f"❌ {outcome.error}\nTry again: /login")
        return
    await _navigate(m, p, state, outcome.navigate)


@router.message(Command("signup"))
@router.message(F.text == BTN_SIGNUP)
async def signup_start(m: Message, state: FSMContext):
    await state.clear()
    await state.set_state(SignupForm.name)
    await m.answer("Name:")


@router.message(SignupForm.name)
async def signup_name(m: Message, state: FSMContext):
    await state.update_data(name=(m.text or "").strip())
    await state.set_state(SignupForm.email)
    await m.answer("Email:")


@router.message(SignupForm.email)
async def signup_email(m: Message, state: FSMContext):
    await state.update_data(email=(m.text or "").strip())
    await state.set_state(SignupForm.password)
    await m.answer("Password:")


@router.message(SignupForm.password)
async def signup_password(m: Message, state: FSMContext, profiles: Profiles):
    p = await _profile(m, profiles)
    data = await state.get_data()
    await state.clear()
    outcome = await AuthPage(p.store).signup(data.get("email", ""), m.text or "", data.get("name", ""))
    if outcome.error:
        await m.answer(f"❌ {outcome.error}\nTry again: /signup")
        return
    await _navigate(m, p, state, outcome.navigate)


@router.message(Command("logout"))
@router.message(F.text == BTN_LOGOUT)
async def logout(m: Message, state: FSMContext, profiles: Profiles):
    p = await _profile(m, profiles)
    await state.clear()
    outcome = await AuthPage(p.store).logout()
    await _show_menu(m, p, "You have been logged out.")
    logger.info("chat_id=%s logged out, navigating to %s", m.chat.id, outcome.navigate.value)


# ========= TASKS =========

@router.message(Command("tasks"))
@router.message(F.text == BTN_DASHBOARD)
async def tasks(m: Message, state: FSMContext, profiles: Profiles):
    await state.clear()
    await _show_dashboard(m, await _profile(m, profiles))


@router.callback_query(F.data == "tasks:refresh")
async def tasks_refresh(c: CallbackQuery, profiles: Profiles):
    await c.answer()
    await _show_dashboard(c.message, await _profile(c.message, profiles))


@router.callback_query(F.data == "noop")
async def noop(c: CallbackQuery):
    await c.answer()


@router.callback_query(F.data.startswith("task:toggle:"))
async def task_toggle(c: CallbackQuery, profiles: Profiles):
    p = await _profile(c.message, profiles)
    page = DashboardPage(p.store, p.api)
    if not page.gate().ready:
        await c.answer()
        await _pass_gate(c.message, page.gate())
        return
    await page.load()
    if page.error:
        await c.answer(page.banner()[:ALERT_LIMIT], show_alert=True)
        return
    task = page.find(_task_id(c.data))
    if task is None:
        await c.answer("Task not found", show_alert=True)
        return
    if await _alert(c, await page.toggle(task)):
        return
    await _show_dashboard(c.message, p, page)


@router.callback_query(F.data.startswith("task:del:"))
async def task_delete_ask(c: CallbackQuery):
    await c.answer()
    task_id = _task_id(c.data)
    await c.message.answer(
        f"Are you sure you want to delete task #{task_id}?",
        reply_markup=confirm_delete_kb(task_id),
    )


@router.callback_query(F.data.startswith("task:del_ok:"))
async def task_delete(c: CallbackQuery, profiles: Profiles):
    p = await _profile(c.message, profiles)
    page = DashboardPage(p.store, p.api)
    if not page.gate().ready:
        await c.answer()
        await _pass_gate(c.message, page.gate())
        return
    await page.load()
    if await _alert(c, await page.delete(_task_id(c.data))):
        return
    await _show_dashboard(c.message, p, page)


@router.callback_query(F.data == "task:create")
async def task_create_start(c: CallbackQuery, state: FSMContext, profiles: Profiles):
    await c.answer()
    p = await _profile(c.message, profiles)
    if not await _pass_gate(c.message, CreateTaskPage(p.store, p.api).gate()):
        return
    await state.clear()
    await state.set_state(TaskForm.title)
    await c.message.answer("Create New Task\n\nTitle:")


@router.callback_query(F.data.startswith("task:edit:"))
async def task_edit(c: CallbackQuery, profiles: Profiles):
    await c.answer()
    p = await _profile(c.message, profiles)
    page = EditTaskPage(p.store, p.api, _task_id(c.data))
    if not await _pass_gate(c.message, page.gate()):
        return
    await page.load()
    if page.task is None:
        await c.message.answer(render_edit(page))
        return
    await c.message.answer(render_edit(page), reply_markup=edit_task_kb(page.task))


@router.callback_query(F.data.startswith("edit:toggle:"))
async def edit_toggle(c: CallbackQuery, profiles: Profiles):
    p = await _profile(c.message, profiles)
    page = EditTaskPage(p.store, p.api, _task_id(c.data))
    if not page.gate().ready:
        await c.answer()
        await _pass_gate(c.message, page.gate())
        return
    await page.load()
    if await _alert(c, await page.toggle()):
        return
    if page.task is None:
        await c.message.answer(render_edit(page))
        return
    await c.message.answer(render_edit(page), reply_markup=edit_task_kb(page.task))


@router.callback_query(F.data.startswith("edit:form:"))
async def edit_form(c: CallbackQuery, state: FSMContext, profiles: Profiles):
    await c.answer()
    p = await _profile(c.message, profiles)
    page = EditTaskPage(p.store, p.api, _task_id(c.data))
    if not await _pass_gate(c.message, page.gate()):
        return
    await page.load()
    if page.task is None:
        await c.message.answer(render_edit(page))
        return
    await state.clear()
    await state.update_data(task_id=page.task_id)
    await state.set_state(TaskForm.title)
    await c.message.answer(
        f"Edit task #{page.task_id}\n\n"
        f"Current title: {page.task.title}\n"
        f"Current description: {page.task.description or SKIP}\n\n"
        "New title:"
    )


@router.message(TaskForm.title)
async def task_form_title(m: Message, state: FSMContext):
    title = (m.text or "").strip()
    if not title:
        await m.answer("Title is required. Title:")
        return
    await state.update_data(title=title)
    await state.set_state(TaskForm.description)
    await m.answer(f"Description (send {SKIP} to leave it empty):")


@router.message(TaskForm.description)
async def task_form_description(m: Message, state: FSMContext, profiles: Profiles):
    p = await _profile(m, profiles)
    data = await state.get_data()
    raw = (m.text or "").strip()
    task_id = data.get("task_id")
    if raw == SKIP:
        # an edit sends the empty description so it can be cleared
        description = None if task_id is None else ""
    else:
        description = raw

    if task_id is None:
        outcome = await CreateTaskPage(p.store, p.api).submit(data.get("title", ""), description)
    else:
        outcome = await EditTaskPage(p.store, p.api, task_id).submit(data.get("title", ""), description)

    if outcome.error:
        await state.set_state(TaskForm.title)
        await m.answer(f"❌ {outcome.error}\nTitle:")
        return
    await state.clear()
    await _navigate(m, p, state, outcome.navigate)


# ========= fallback =========

@router.message()
async def any_text_fallback(m: Message):
    await m.answer("I only understand commands and menu buttons 🙂\nOpen /menu")


@router.errors()
async def on_error(event: ErrorEvent):
    logger.error("update handling failed: %s", event.exception, exc_info=event.exception)
    cq = event.update.callback_query
    msg = event.update.message or (cq.message if cq else None)
    if msg:
        await msg.answer("⚠️ Service error. Try again a bit later.")
    return True
