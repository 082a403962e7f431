# flatbot/controller.py
import traceback
from typing import Optional

from . import keyboards
from .backend import BackendError, LIKED, SKIPPED
from .formatter import format_listing_card, format_summary
from .state import Flow, SessionStore, Session, Step
from .utils import DISTRICTS, PARKING_OPTIONS, PETS_OPTIONS, parse_price, rooms_to_enum_list, toggle

FEED_LIMIT = 10

GREETING = "Привіт, я She 🌙\nЗнайду тобі вигідну оренду в Кракові, без зайвого шуму.\n\n"
PRICE_PROMPT = "Який максимальний бюджет? (числом, напр. 3500)"
PRICE_RETRY = "Мені треба число типу 3500. Спробуй ще раз 🙂"
START_HINT = "Якщо хочеш новий пошук, натисни /start 🌙"
RESTARTED = "Рестарт. Натисни /start 🌙"
SEARCHING = "Ок, я пірнаю в OLX… 🫧"
NOTHING_FOUND = "Поки порожньо. Дай мені хвилинку і спробуй /start ще раз."
NOTHING_LEFT = "Поки все. Натисни /start, і я знову піду на полювання 🌙"
BACKEND_DOWN = "Я зараз не дотягнулась до бекенда 😿 Перевір ще раз через хвилину."


class ConversationController:
    """
    Drives the per-user filter collection flow and the like/skip feed.

    Every input handler returns True when it was applied and False when it
    was ignored: wrong step (a button from an older message), an unknown
    option, or an invalid price.
    """

    def __init__(self, bot, backend, flow: Optional[Flow] = None, sessions: Optional[SessionStore] = None,
                 feed_limit: int = FEED_LIMIT):
        self.bot = bot
        self.backend = backend
        self.flow = flow or Flow.full()
        self.sessions = sessions if sessions is not None else SessionStore()
        self.feed_limit = feed_limit

    # -------------------- helpers --------------------
    def _at(self, user_id: int, step: Step) -> Optional[Session]:
        sess = self.sessions.get(user_id)
        return sess if sess.step == step else None

    def _prompt(self, chat_id: int, sess: Session, lead: str = ""):
        f = sess.filters
        if sess.step == Step.DISTRICTS:
            self.bot.send_message(chat_id, lead + "Обери райони (можна кілька) або пропусти:",
                                  reply_markup=keyboards.districts_keyboard(f.districts))
        elif sess.step == Step.PRICE:
            self.bot.send_message(chat_id, lead + PRICE_PROMPT)
        elif sess.step == Step.ROOMS:
            self.bot.send_message(chat_id, lead + "Кімнати?", reply_markup=keyboards.rooms_keyboard())
        elif sess.step == Step.PETS:
            self.bot.send_message(chat_id, lead + "Тварини ок?", reply_markup=keyboards.pets_keyboard(f.pets))
        elif sess.step == Step.PARKING:
            self.bot.send_message(chat_id, lead + "Паркінг?", reply_markup=keyboards.parking_keyboard(f.parking))
        elif sess.step == Step.ELEVATOR:
            self.bot.send_message(chat_id, lead + "Ліфт важливий?",
                                  reply_markup=keyboards.elevator_keyboard(f.elevator))
        elif sess.step == Step.CONFIRM:
            self.bot.send_message(chat_id, format_summary(f), reply_markup=keyboards.confirm_keyboard())

    def _advance(self, user_id: int, chat_id: int, sess: Session, lead: str = ""):
        nxt = self.flow.after(sess.step)
        if nxt is None:
            self.run_search(user_id, chat_id)
            return
        sess.step = nxt
        self._prompt(chat_id, sess, lead)

    # -------------------- flow --------------------
    def start(self, user_id: int, chat_id: int) -> bool:
        sess = self.sessions.reset(user_id, self.flow.first())
        self._prompt(chat_id, sess, GREETING)
        return True

    def restart(self, user_id: int, chat_id: int) -> bool:
        self.sessions.reset(user_id, Step.IDLE)
        self.bot.send_message(chat_id, RESTARTED)
        return True

    def toggle_district(self, user_id: int, chat_id: int, district: str, message_id: Optional[int] = None) -> bool:
        sess = self._at(user_id, Step.DISTRICTS)
        if sess is None or district not in DISTRICTS:
            return False
        toggle(sess.filters.districts, district)
        if message_id is not None:
            self.bot.edit_message_reply_markup(chat_id, message_id,
                                               reply_markup=keyboards.districts_keyboard(sess.filters.districts))
        return True

    def finish_districts(self, user_id: int, chat_id: int, skip: bool = False) -> bool:
        sess = self._at(user_id, Step.DISTRICTS)
        if sess is None:
            return False
        if skip:
            sess.filters.districts = []
        self._advance(user_id, chat_id, sess, "Ок. " if skip else "Супер. ")
        return True

    def submit_price(self, user_id: int, chat_id: int, text: str) -> bool:
        sess = self._at(user_id, Step.PRICE)
        if sess is None:
            self.bot.send_message(chat_id, START_HINT)
            return False
        value = parse_price(text)
        if value is None:
            self.bot.send_message(chat_id, PRICE_RETRY)
            return False
        sess.filters.price_max = value
        self._advance(user_id, chat_id, sess)
        return True

    def choose_rooms(self, user_id: int, chat_id: int, choice: str) -> bool:
        sess = self._at(user_id, Step.ROOMS)
        if sess is None or choice not in ("1", "2", "3", "any"):
            return False
        sess.filters.rooms = rooms_to_enum_list(choice)
        self._advance(user_id, chat_id, sess)
        return True

    def choose_pets(self, user_id: int, chat_id: int, choice: str) -> bool:
        sess = self._at(user_id, Step.PETS)
        if sess is None or (choice != "any" and choice not in PETS_OPTIONS):
            return False
        sess.filters.pets = None if choice == "any" else choice
        self._advance(user_id, chat_id, sess)
        return True

    def toggle_parking(self, user_id: int, chat_id: int, option: str, message_id: Optional[int] = None) -> bool:
        sess = self._at(user_id, Step.PARKING)
        if sess is None or option not in PARKING_OPTIONS:
            return False
        toggle(sess.filters.parking, option)
        if message_id is not None:
            self.bot.edit_message_reply_markup(chat_id, message_id,
                                               reply_markup=keyboards.parking_keyboard(sess.filters.parking))
        return True

    def finish_parking(self, user_id: int, chat_id: int, skip: bool = False) -> bool:
        sess = self._at(user_id, Step.PARKING)
        if sess is None:
            return False
        if skip:
            sess.filters.parking = []
        self._advance(user_id, chat_id, sess)
        return True

    def choose_elevator(self, user_id: int, chat_id: int, choice: str) -> bool:
        sess = self._at(user_id, Step.ELEVATOR)
        if sess is None or choice not in ("yes", "any"):
            return False
        sess.filters.elevator = True if choice == "yes" else None
        self._advance(user_id, chat_id, sess)
        return True

    def confirm_search(self, user_id: int, chat_id: int) -> bool:
        if self._at(user_id, Step.CONFIRM) is None:
            return False
        self.run_search(user_id, chat_id)
        return True

    # -------------------- search & feed --------------------
    def run_search(self, user_id: int, chat_id: int) -> bool:
        """
        Submit the search, load the feed and show the first listing.

        Any backend failure sends a generic notice and drops the session to
        idle; nothing is retried.
        """
        sess = self.sessions.get(user_id)
        # buttons pressed while the backend call is in flight are stale
        sess.step = Step.SEARCHING
        self.bot.send_message(chat_id, SEARCHING)
        try:
            job_id = self.backend.submit_search(user_id, sess.filters, self.feed_limit)
            self.bot.send_message(chat_id, f"Я в роботі. Job: {job_id}")
            listings = self.backend.fetch_feed(user_id, self.feed_limit)
        except BackendError as e:
            print(f"[Search] Backend error for user {user_id}: {e}")
            return self._abort(chat_id, sess)
        except Exception:
            print(f"[Search] Unexpected failure for user {user_id}")
            traceback.print_exc()
            return self._abort(chat_id, sess)

        sess.queue = list(listings)
        sess.current = None
        if not sess.queue:
            sess.step = Step.IDLE
            self.bot.send_message(chat_id, NOTHING_FOUND)
            return False

        sess.step = Step.SHOWING
        self.deliver_next(user_id, chat_id)
        return True

    def _abort(self, chat_id: int, sess: Session) -> bool:
        sess.step = Step.IDLE
        sess.queue = []
        sess.current = None
        self.bot.send_message(chat_id, BACKEND_DOWN)
        return False

    def deliver_next(self, user_id: int, chat_id: int) -> bool:
        sess = self.sessions.get(user_id)
        if not sess.queue:
            sess.step = Step.IDLE
            sess.current = None
            self.bot.send_message(chat_id, NOTHING_LEFT)
            return False
        listing = sess.queue.pop(0)
        sess.current = listing.id
        self.bot.send_message(chat_id, format_listing_card(listing),
                              reply_markup=keyboards.listing_keyboard(listing))
        return True

    def react(self, user_id: int, chat_id: int, listing_id: str, state: str) -> bool:
        """Record like/skip for the card on screen and move to the next one."""
        if state not in (LIKED, SKIPPED):
            return False
        sess = self._at(user_id, Step.SHOWING)
        if sess is None or sess.current != listing_id:
            return False
        sess.current = None
        try:
            self.backend.report_state(user_id, listing_id, state)
        except Exception as e:
            # best effort, triage goes on
            print(f"[Triage] Failed to report {state} for listing {listing_id} (user {user_id}): {e}")
        self.deliver_next(user_id, chat_id)
        return True
