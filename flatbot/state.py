# flatbot/state.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Any, Tuple

DEFAULT_CITY = "Kraków"


class Step(str, Enum):
    IDLE = "idle"
    DISTRICTS = "districts"
    PRICE = "price"
    ROOMS = "rooms"
    PETS = "pets"
    PARKING = "parking"
    ELEVATOR = "elevator"
    CONFIRM = "confirm"
    SEARCHING = "searching"
    SHOWING = "showing"


class Room(str, Enum):
    ONE = "one"
    TWO = "two"
    THREE = "three"
    FOUR = "four"
    FIVE_MORE = "five_more"


# Collection order of the full flow; price and rooms are always present.
FULL_ORDER: Tuple[Step, ...] = (
    Step.DISTRICTS,
    Step.PRICE,
    Step.ROOMS,
    Step.PETS,
    Step.PARKING,
    Step.ELEVATOR,
    Step.CONFIRM,
)
OPTIONAL_STEPS = frozenset({Step.DISTRICTS, Step.PETS, Step.PARKING, Step.ELEVATOR, Step.CONFIRM})


class Flow:
    """Which steps a conversation walks through, in order."""

    def __init__(self, optional=OPTIONAL_STEPS):
        unknown = set(optional) - OPTIONAL_STEPS
        if unknown:
            raise ValueError(f"not optional steps: {sorted(s.value for s in unknown)}")
        self.steps = tuple(s for s in FULL_ORDER if s not in OPTIONAL_STEPS or s in optional)

    @classmethod
    def full(cls) -> "Flow":
        return cls(OPTIONAL_STEPS)

    @classmethod
    def simple(cls) -> "Flow":
        return cls(())

    def includes(self, step: Step) -> bool:
        return step in self.steps

    def first(self) -> Step:
        return self.steps[0]

    def after(self, step: Step) -> Optional[Step]:
        """Next step, or None when filter collection is over and search should run."""
        idx = self.steps.index(step)
        if idx + 1 < len(self.steps):
            return self.steps[idx + 1]
        return None

    def __repr__(self):
        return f"Flow({', '.join(s.value for s in self.steps)})"


@dataclass
class Filters:
    city: str = DEFAULT_CITY
    districts: List[str] = field(default_factory=list)
    price_min: Optional[int] = None  # never collected from the user
    price_max: Optional[int] = None
    rooms: List[Room] = field(default_factory=list)  # empty = any
    pets: Optional[str] = None  # "Tak" | "Nie" | None = any
    parking: List[str] = field(default_factory=list)
    elevator: Optional[bool] = None  # only True is a constraint

    @classmethod
    def fresh(cls, city: str = DEFAULT_CITY) -> "Filters":
        return cls(city=city)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "city": self.city or DEFAULT_CITY,
            "districts": list(self.districts),
            "price_min": self.price_min,
            "price_max": self.price_max,
            "rooms": [r.value for r in self.rooms],
            "pets": self.pets,
            "parking": list(self.parking),
            "elevator": True if self.elevator is True else None,
        }


@dataclass(frozen=True)
class Listing:
    id: str
    title: Optional[str]
    location: Optional[str]
    price_value: Optional[float]
    url: Optional[str]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Listing":
        if not isinstance(data, dict) or data.get("id") in (None, ""):
            raise ValueError(f"listing without id: {data!r}")
        return cls(
            id=str(data["id"]),
            title=data.get("title"),
            location=data.get("location"),
            price_value=data.get("price_value"),
            url=data.get("url"),
        )


@dataclass
class Session:
    step: Step = Step.IDLE
    filters: Filters = field(default_factory=Filters)
    queue: List[Listing] = field(default_factory=list)
    current: Optional[str] = None  # id of the card waiting for like/skip


class SessionStore:
    """
    In-memory sessions keyed by user id.

    Sessions are created on first access and live until the process exits;
    nothing is ever evicted.
    """

    def __init__(self, city: str = DEFAULT_CITY):
        self.city = city
        self._sessions: Dict[int, Session] = {}

    def get(self, user_id: int) -> Session:
        sess = self._sessions.get(user_id)
        if sess is None:
            sess = Session(filters=Filters.fresh(self.city))
            self._sessions[user_id] = sess
        return sess

    def reset(self, user_id: int, step: Step = Step.IDLE) -> Session:
        sess = self.get(user_id)
        sess.step = step
        sess.filters = Filters.fresh(self.city)
        sess.queue = []
        sess.current = None
        return sess

    def __len__(self):
        return len(self._sessions)

    def __contains__(self, user_id):
        return user_id in self._sessions
