from typing import Optional

from aiogram.types import ReplyKeyboardMarkup, KeyboardButton, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from ..models import Task
from ..pages import HeaderState
from ..session import Route

BTN_HOME = "🏠 Home"
BTN_DASHBOARD = "📋 Dashboard"
BTN_LOGIN = "🔐 Login"
BTN_SIGNUP = "📝 Sign Up"
BTN_LOGOUT = "🚪 Logout"
BTN_HELP = "ℹ️ Help"

_ROUTE_BUTTONS = {
    Route.HOME: BTN_HOME,
    Route.DASHBOARD: BTN_DASHBOARD,
    Route.LOGIN: BTN_LOGIN,
    Route.SIGNUP: BTN_SIGNUP,
}


def main_menu_kb(state: HeaderState) -> ReplyKeyboardMarkup:
    row = []
    for item in state.items:
        if item.route is not None:
            row.append(KeyboardButton(text=_ROUTE_BUTTONS[item.route]))
        elif item.action == "logout":
            row.append(KeyboardButton(text=BTN_LOGOUT))
    return ReplyKeyboardMarkup(
        keyboard=[row, [KeyboardButton(text=BTN_HELP)]],
        resize_keyboard=True,
    )


def task_list_kb(tasks: list[Task], deleting_id: Optional[int] = None) -> InlineKeyboardMarkup:
    b = InlineKeyboardBuilder()
    for t in tasks:
        toggle = "↩️ Incomplete" if t.completed else "✅ Complete"
        b.button(text=f"{toggle} #{t.id}", callback_data=f"task:toggle:{t.id}")
        b.button(text=f"✏️ #{t.id}", callback_data=f"task:edit:{t.id}")
        if deleting_id == t.id:
            b.button(text="Deleting...", callback_data="noop")
        else:
            b.button(text=f"🗑 #{t.id}", callback_data=f"task:del:{t.id}")
    b.button(text="➕ Create task", callback_data="task:create")
    b.button(text="🔄 Refresh", callback_data="tasks:refresh")
    b.adjust(*([3] * len(tasks)), 2)
    return b.as_markup()


def confirm_delete_kb(task_id: int) -> InlineKeyboardMarkup:
    b = InlineKeyboardBuilder()
    b.button(text="Yes, delete", callback_data=f"task:del_ok:{task_id}")
    b.button(text="Cancel", callback_data="tasks:refresh")
    b.adjust(2)
    return b.as_markup()


def edit_task_kb(task: Task) -> InlineKeyboardMarkup:
    b = InlineKeyboardBuilder()
    b.button(
        text="Mark Incomplete" if task.completed else "Mark Complete",
        callback_data=f"edit:toggle:{task.id}",
    )
    b.button(text="✏️ Edit title/description", callback_data=f"edit:form:{task.id}")
    b.button(text="🗑 Delete", callback_data=f"task:del:{task.id}")
    b.button(text="⬅️ Back to Dashboard", callback_data="tasks:refresh")
    b.adjust(1)
    return b.as_markup()
