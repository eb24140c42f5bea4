from aiogram.types import ReplyKeyboardMarkup, KeyboardButton

YES = "Yes"
NO = "No"


def main_kb() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        keyboard=[
            [KeyboardButton(text="/products"), KeyboardButton(text="/cart")],
            [KeyboardButton(text="/checkout"), KeyboardButton(text="/clear")],
            [KeyboardButton(text="/refresh"), KeyboardButton(text="/help")],
        ],
        resize_keyboard=True,
    )


def yes_no_kb() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        keyboard=[[KeyboardButton(text=YES), KeyboardButton(text=NO)]],
        resize_keyboard=True,
        one_time_keyboard=True,
    )
