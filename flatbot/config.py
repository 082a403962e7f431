# flatbot/config.py
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dotenv import load_dotenv

from .state import DEFAULT_CITY, Flow, OPTIONAL_STEPS, Step

DEFAULT_PORT = 3000


class ConfigError(Exception):
    """Required settings missing or malformed; the bot must not start."""


@dataclass(frozen=True)
class Config:
    bot_token: str
    api_base_url: str
    port: int = DEFAULT_PORT
    city: str = DEFAULT_CITY
    feed_limit: int = 10
    search_timeout: float = 20
    state_timeout: float = 15
    flow: Flow = field(default_factory=Flow.full)


def _number(env: Mapping[str, str], name: str, default, cast):
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def parse_flow(raw: Optional[str]) -> Flow:
    """'districts,pets,...' enables those optional steps; 'simple' enables none."""
    if raw is None or not raw.strip():
        return Flow.full()
    raw = raw.strip().lower()
    if raw == "simple":
        return Flow.simple()
    if raw == "full":
        return Flow.full()
    steps = set()
    for name in filter(None, (p.strip() for p in raw.split(","))):
        try:
            step = Step(name)
        except ValueError:
            raise ConfigError(f"FLOW_STEPS: unknown step {name!r}")
        if step not in OPTIONAL_STEPS:
            raise ConfigError(f"FLOW_STEPS: {name!r} is not an optional step")
        steps.add(step)
    return Flow(steps)


def load_config(env: Optional[Mapping[str, str]] = None) -> Config:
    if env is None:
        load_dotenv()
        env = os.environ

    token = (env.get("BOT_TOKEN") or "").strip()
    base_url = (env.get("API_BASE_URL") or "").strip().rstrip("/")
    if not token or not base_url:
        raise ConfigError("Missing BOT_TOKEN or API_BASE_URL")

    return Config(
        bot_token=token,
        api_base_url=base_url,
        port=_number(env, "PORT", DEFAULT_PORT, int),
        city=(env.get("CITY") or "").strip() or DEFAULT_CITY,
        feed_limit=_number(env, "FEED_LIMIT", 10, int),
        search_timeout=_number(env, "SEARCH_TIMEOUT", 20, float),
        state_timeout=_number(env, "STATE_TIMEOUT", 15, float),
        flow=parse_flow(env.get("FLOW_STEPS")),
    )
