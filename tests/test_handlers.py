from types import SimpleNamespace

import pytest

from flatbot.handlers import register
from flatbot.state import Step

from conftest import CHAT, USER


@pytest.fixture()
def wired(bot, controller):
    register(bot, controller)
    return bot


def press(bot, data, call_id="cb", message_id=99):
    call = SimpleNamespace(
        id=call_id,
        data=data,
        from_user=SimpleNamespace(id=USER),
        message=SimpleNamespace(chat=SimpleNamespace(id=CHAT), message_id=message_id),
    )
    for func, fn in bot.callback_handlers:
        if func(call):
            fn(call)
            return
    raise AssertionError(f"no handler for {data}")


def send(bot, text):
    msg = SimpleNamespace(text=text, from_user=SimpleNamespace(id=USER), chat=SimpleNamespace(id=CHAT))
    for kwargs, fn in bot.message_handlers:
        if "commands" in kwargs:
            if text.startswith("/") and text[1:].split()[0] in kwargs["commands"]:
                fn(msg)
                return
        else:
            fn(msg)
            return


def test_start_command_registered(wired):
    assert [c.command for c in wired.commands] == ["start"]


def test_full_conversation_through_buttons(wired, controller, backend):
    send(wired, "/start")
    press(wired, "d:Krowodrza")
    press(wired, "d:Bronowice")
    press(wired, "d:Krowodrza")
    press(wired, "d_done")
    send(wired, "4 200")
    press(wired, "r:3")
    press(wired, "p:any")
    press(wired, "park:parking strzeżony")
    press(wired, "park_done")
    press(wired, "e:yes")
    press(wired, "go")

    filters = backend.searches[0]["filters"]
    assert filters["districts"] == ["Bronowice"]
    assert filters["price_max"] == 4200
    assert filters["rooms"] == ["three", "four", "five_more"]
    assert filters["parking"] == ["parking strzeżony"]
    assert filters["elevator"] is True
    assert controller.sessions.get(USER).step == Step.SHOWING

    press(wired, "like:l1", call_id="like")
    assert wired.answers[-1] == ("like", "Лайк ✅")
    assert backend.states[-1] == (USER, "l1", "liked")


def test_every_callback_is_answered(wired):
    send(wired, "/start")
    press(wired, "r:1", call_id="stale")
    press(wired, "skip:zzz", call_id="stale2")
    press(wired, "d_skip", call_id="ok")
    assert [a[0] for a in wired.answers] == ["stale", "stale2", "ok"]
    assert wired.answers[1] == ("stale2", None)


def test_toggle_edits_pressed_message(wired):
    send(wired, "/start")
    press(wired, "d:Podgórze", message_id=5)
    assert wired.edits[-1].message_id == 5
    labels = [b.text for row in wired.edits[-1].markup.keyboard for b in row]
    assert "✅ Podgórze" in labels


def test_handler_failure_still_answers(wired, controller, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(controller, "restart", boom)
    press(wired, "restart", call_id="r")
    assert wired.answers == [("r", None)]
