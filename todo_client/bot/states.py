from aiogram.fsm.state import State, StatesGroup


class LoginForm(StatesGroup):
    email = State()
    password = State()


class SignupForm(StatesGroup):
    name = State()
    email = State()
    password = State()


class TaskForm(StatesGroup):
    title = State()
    description = State()
