import logging
import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    recent_limit: int = 10
    warning_pct: int = 80
    currency: str = "₩"
    reject_negative: bool = False

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level.upper(), logging.INFO)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer, using %d", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive, using %d", name, raw, default)
        return default
    return value


def load_settings(dotenv: bool = True) -> Settings:
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True))
    return Settings(
        log_level=os.getenv("MONEYBOOK_LOG_LEVEL", "INFO"),
        recent_limit=_int_env("MONEYBOOK_RECENT_LIMIT", 10),
        warning_pct=_int_env("MONEYBOOK_WARNING_PCT", 80),
        currency=os.getenv("MONEYBOOK_CURRENCY", "₩"),
        reject_negative=os.getenv("MONEYBOOK_REJECT_NEGATIVE", "false").strip().lower() in _TRUTHY,
    )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.logging_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
