from aiogram.fsm.state import State, StatesGroup


class ClearConfirm(StatesGroup):
    waiting_answer = State()
