import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


MALFORMED_POLICIES = ("fail", "skip")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    malformed_policy: str = "fail"
    max_depth: Optional[int] = None
    indent: int = 2
    log_level: str = "WARNING"
    jsonp_callback: str = "callback"


def _int_or_none(name: str, raw: Optional[str]) -> Optional[int]:
    if raw is None or raw.strip() == "":
        return None
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


def load_settings(environ=None) -> Settings:
    """
    Build Settings from JQRECIPES_* environment variables.

    A .env file in the working directory is honoured (loaded at import).
    Unknown or out-of-range values raise ValueError instead of being
    silently replaced by defaults.
    """
    env = os.environ if environ is None else environ

    policy = env.get("JQRECIPES_MALFORMED", "fail").strip().lower()
    if policy not in MALFORMED_POLICIES:
        raise ValueError(
            f"JQRECIPES_MALFORMED must be one of {MALFORMED_POLICIES}, got {policy!r}"
        )

    level = env.get("JQRECIPES_LOG_LEVEL", "WARNING").strip().upper()
    if level not in LOG_LEVELS:
        raise ValueError(
            f"JQRECIPES_LOG_LEVEL must be one of {LOG_LEVELS}, got {level!r}"
        )

    indent = _int_or_none("JQRECIPES_INDENT", env.get("JQRECIPES_INDENT"))

    return Settings(
        malformed_policy=policy,
        max_depth=_int_or_none("JQRECIPES_MAX_DEPTH", env.get("JQRECIPES_MAX_DEPTH")),
        indent=2 if indent is None else indent,
        log_level=level,
        jsonp_callback=env.get("JQRECIPES_JSONP_CALLBACK", "callback").strip() or "callback",
    )
