from types import SimpleNamespace

import pytest

from flatbot.backend import BackendError, build_search_payload
from flatbot.controller import ConversationController
from flatbot.state import Flow, Listing, SessionStore

USER = 42
CHAT = 42


class FakeBot:
    """Records everything the controller sends instead of talking to Telegram."""

    def __init__(self):
        self.sent = []
        self.edits = []
        self.answers = []
        self.commands = None
        self.message_handlers = []
        self.callback_handlers = []

    def send_message(self, chat_id, text, reply_markup=None, **kwargs):
        self.sent.append(SimpleNamespace(chat_id=chat_id, text=text, markup=reply_markup))

    def edit_message_reply_markup(self, chat_id, message_id, reply_markup=None):
        self.edits.append(SimpleNamespace(chat_id=chat_id, message_id=message_id, markup=reply_markup))

    def answer_callback_query(self, callback_query_id, text=None):
        self.answers.append((callback_query_id, text))

    def set_my_commands(self, commands):
        self.commands = commands

    def message_handler(self, **kwargs):
        def deco(fn):
            self.message_handlers.append((kwargs, fn))
            return fn
        return deco

    def callback_query_handler(self, func):
        def deco(fn):
            self.callback_handlers.append((func, fn))
            return fn
        return deco

    @property
    def texts(self):
        return [m.text for m in self.sent]


class FakeBackend:
    def __init__(self, listings=None, job_id="job-1"):
        self.listings = listings or []
        self.job_id = job_id
        self.searches = []
        self.feeds = []
        self.states = []
        self.fail_search = False
        self.fail_feed = False
        self.fail_state = False

    def submit_search(self, user_id, filters, limit=10):
        if self.fail_search:
            raise BackendError("search down")
        self.searches.append(build_search_payload(user_id, filters, limit))
        return self.job_id

    def fetch_feed(self, user_id, limit=10):
        if self.fail_feed:
            raise BackendError("feed timed out")
        self.feeds.append((user_id, limit))
        return list(self.listings)

    def report_state(self, user_id, listing_id, state):
        self.states.append((user_id, listing_id, state))
        if self.fail_state:
            raise BackendError("state down")


def make_listings(n):
    return [
        Listing(id=f"l{i}", title=f"Flat {i}", location="Krowodrza", price_value=3000 + i,
                url=f"https://olx.pl/d/oferta/l{i}")
        for i in range(1, n + 1)
    ]


@pytest.fixture()
def bot():
    return FakeBot()


@pytest.fixture()
def backend():
    return FakeBackend(listings=make_listings(3))


@pytest.fixture()
def controller(bot, backend):
    return ConversationController(bot, backend, flow=Flow.full(), sessions=SessionStore())


@pytest.fixture()
def simple_controller(bot, backend):
    return ConversationController(bot, backend, flow=Flow.simple(), sessions=SessionStore())
