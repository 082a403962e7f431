# flatbot/keyboards.py
from typing import List, Optional

from telebot import types

from .state import Listing
from .utils import DISTRICTS, PARKING_OPTIONS

CHECK = "✅ "


def _mark(selected: bool, label: str) -> str:
    return f"{CHECK if selected else ''}{label}"


def districts_keyboard(selected: List[str]) -> types.InlineKeyboardMarkup:
    kb = types.InlineKeyboardMarkup()
    for i in range(0, len(DISTRICTS), 2):
        kb.row(*[
            types.InlineKeyboardButton(_mark(d in selected, d), callback_data=f"d:{d}")
            for d in DISTRICTS[i:i + 2]
        ])
    kb.row(
        types.InlineKeyboardButton("Пропустити ➜", callback_data="d_skip"),
        types.InlineKeyboardButton("Готово ➜", callback_data="d_done"),
    )
    return kb


def rooms_keyboard() -> types.InlineKeyboardMarkup:
    kb = types.InlineKeyboardMarkup()
    kb.row(
        types.InlineKeyboardButton("1", callback_data="r:1"),
        types.InlineKeyboardButton("2", callback_data="r:2"),
        types.InlineKeyboardButton("3+", callback_data="r:3"),
        types.InlineKeyboardButton("будь-які", callback_data="r:any"),
    )
    return kb


def pets_keyboard(current: Optional[str]) -> types.InlineKeyboardMarkup:
    kb = types.InlineKeyboardMarkup()
    kb.row(
        types.InlineKeyboardButton(_mark(current == "Tak", "Так"), callback_data="p:Tak"),
        types.InlineKeyboardButton(_mark(current == "Nie", "Ні"), callback_data="p:Nie"),
        types.InlineKeyboardButton(_mark(current is None, "Все одно"), callback_data="p:any"),
    )
    return kb


def parking_keyboard(selected: List[str]) -> types.InlineKeyboardMarkup:
    garage, guarded = PARKING_OPTIONS
    kb = types.InlineKeyboardMarkup()
    kb.row(
        types.InlineKeyboardButton(_mark(garage in selected, "Гараж"), callback_data=f"park:{garage}"),
        types.InlineKeyboardButton(_mark(guarded in selected, "Охоронюваний"), callback_data=f"park:{guarded}"),
    )
    kb.row(
        types.InlineKeyboardButton("Не треба ➜", callback_data="park_skip"),
        types.InlineKeyboardButton("Готово ➜", callback_data="park_done"),
    )
    return kb


def elevator_keyboard(current: Optional[bool]) -> types.InlineKeyboardMarkup:
    kb = types.InlineKeyboardMarkup()
    kb.row(
        types.InlineKeyboardButton(_mark(current is True, "Ліфт must-have"), callback_data="e:yes"),
        types.InlineKeyboardButton(_mark(current is not True, "Все одно"), callback_data="e:any"),
    )
    return kb


def confirm_keyboard() -> types.InlineKeyboardMarkup:
    kb = types.InlineKeyboardMarkup()
    kb.add(types.InlineKeyboardButton("🔍 Шукати", callback_data="go"))
    kb.add(types.InlineKeyboardButton("♻️ Почати заново", callback_data="restart"))
    return kb


def listing_keyboard(listing: Listing) -> types.InlineKeyboardMarkup:
    kb = types.InlineKeyboardMarkup()
    kb.row(
        types.InlineKeyboardButton("❤️ Like", callback_data=f"like:{listing.id}"),
        types.InlineKeyboardButton("❌ Skip", callback_data=f"skip:{listing.id}"),
    )
    return kb
