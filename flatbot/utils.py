# flatbot/utils.py
import math
import re
from typing import List, Optional

from .state import Room

DISTRICTS = [
    "Stare Miasto",
    "Grzegórzki",
    "Krowodrza",
    "Podgórze",
    "Nowa Huta",
    "Bronowice",
    "Bieżanów-Prokocim",
    "Łagiewniki-Borek-Falecki",
]

PARKING_OPTIONS = ["w garażu", "parking strzeżony"]
PETS_OPTIONS = ["Tak", "Nie"]

_ROOMS = {
    "1": [Room.ONE],
    "2": [Room.TWO],
    "3": [Room.THREE, Room.FOUR, Room.FIVE_MORE],  # 3+
}

_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_WS_RE = re.compile(r"\s+")


def rooms_to_enum_list(choice: str) -> List[Room]:
    """Map a rooms button ('1', '2', '3' for 3+, 'any') to room enums; empty means any."""
    return list(_ROOMS.get(str(choice).strip(), []))


def parse_price(text: Optional[str]) -> Optional[int]:
    """
    Parse a budget typed by the user.

    All whitespace is removed first, so '3 500' is 3500. Returns None for
    anything that is not a positive finite number or rounds down to 0;
    fractions round half up.
    """
    raw = _WS_RE.sub("", text or "")
    if not _NUMBER_RE.fullmatch(raw):
        return None
    value = float(raw)
    if not math.isfinite(value) or value <= 0:
        return None
    rounded = int(math.floor(value + 0.5))
    return rounded if rounded > 0 else None


def toggle(items: List[str], value: str) -> List[str]:
    """Add value if missing, remove it if present. Mutates and returns items."""
    if value in items:
        items.remove(value)
    else:
        items.append(value)
    return items


def format_price(amount, currency="zł"):
    """'3500 zł' for whole numbers, the raw value otherwise."""
    try:
        a = float(amount)
        if a.is_integer():
            return f"{int(a)} {currency}"
        return f"{a} {currency}"
    except (TypeError, ValueError):
        return f"{amount} {currency}"
