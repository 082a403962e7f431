# flatbot/bot.py
import signal
import sys

from telebot import TeleBot

from .backend import BackendClient
from .config import Config, ConfigError, load_config
from .controller import ConversationController
from .handlers import register
from .keepalive import run_keepalive
from .state import SessionStore


def build_controller(config: Config, bot, backend=None) -> ConversationController:
    if backend is None:
        backend = BackendClient(config.api_base_url, config.search_timeout, config.state_timeout)
    return ConversationController(
        bot,
        backend,
        flow=config.flow,
        sessions=SessionStore(config.city),
        feed_limit=config.feed_limit,
    )


def main():
    try:
        config = load_config()
    except ConfigError as e:
        print(f"[ERROR] {e}")
        sys.exit(1)

    # one update at a time, so a double tap cannot race on a session
    bot = TeleBot(config.bot_token, threaded=False)
    controller = build_controller(config, bot)
    register(bot, controller)

    server = run_keepalive(config.port)

    def shutdown(signum, frame):
        """Graceful shutdown on SIGINT/SIGTERM."""
        print(f"\n[INFO] Shutdown {signal.Signals(signum).name}")
        bot.stop_polling()
        server.shutdown()
        sys.exit(0)

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    print(f"[INFO] Bot is running (polling), {controller.flow}")
    bot.infinity_polling(skip_pending=True)


if __name__ == "__main__":
    main()
