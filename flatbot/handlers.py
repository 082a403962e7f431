# flatbot/handlers.py
import traceback

from telebot import types
from telebot.types import Message, CallbackQuery

from .backend import LIKED, SKIPPED
from .controller import ConversationController

REACTION_TOASTS = {LIKED: "Лайк ✅", SKIPPED: "Скіп ❌"}


def _suffix(data: str, prefix: str) -> str:
    return data[len(prefix):]


def register(bot, controller: ConversationController):
    bot.set_my_commands([
        types.BotCommand("start", "🌙 Новий пошук"),
    ])

    def answer(call: CallbackQuery, text=None):
        try:
            bot.answer_callback_query(call.id, text)
        except Exception:
            # query may be too old to answer
            traceback.print_exc()

    # -------------------- Start --------------------
    @bot.message_handler(commands=["start"])
    def cmd_start(msg: Message):
        try:
            controller.start(msg.from_user.id, msg.chat.id)
        except Exception:
            print(f"[Handlers] /start failed for {msg.from_user.id}")
            traceback.print_exc()

    # -------------------- Price (free text) --------------------
    @bot.message_handler(content_types=["text"])
    def on_text(msg: Message):
        try:
            controller.submit_price(msg.from_user.id, msg.chat.id, msg.text or "")
        except Exception:
            print(f"[Handlers] Failed to handle text from {msg.from_user.id}")
            traceback.print_exc()

    # -------------------- Callbacks --------------------
    @bot.callback_query_handler(func=lambda c: c.data is not None)
    def on_callback(call: CallbackQuery):
        uid, chat_id = call.from_user.id, call.message.chat.id
        data = call.data
        toast = None
        try:
            if data.startswith("d:"):
                controller.toggle_district(uid, chat_id, _suffix(data, "d:"), call.message.message_id)
            elif data in ("d_skip", "d_done"):
                controller.finish_districts(uid, chat_id, skip=data == "d_skip")
            elif data.startswith("r:"):
                controller.choose_rooms(uid, chat_id, _suffix(data, "r:"))
            elif data.startswith("p:"):
                controller.choose_pets(uid, chat_id, _suffix(data, "p:"))
            elif data.startswith("park:"):
                controller.toggle_parking(uid, chat_id, _suffix(data, "park:"), call.message.message_id)
            elif data in ("park_skip", "park_done"):
                controller.finish_parking(uid, chat_id, skip=data == "park_skip")
            elif data.startswith("e:"):
                controller.choose_elevator(uid, chat_id, _suffix(data, "e:"))
            elif data == "go":
                answer(call)
                controller.confirm_search(uid, chat_id)
                return
            elif data == "restart":
                controller.restart(uid, chat_id)
            elif data.startswith("like:") or data.startswith("skip:"):
                kind, listing_id = data.split(":", 1)
                state = LIKED if kind == "like" else SKIPPED
                if controller.react(uid, chat_id, listing_id, state):
                    toast = REACTION_TOASTS[state]
        except Exception:
            print(f"[Handlers] Failed to handle callback {data!r} from {uid}")
            traceback.print_exc()
        answer(call, toast)
