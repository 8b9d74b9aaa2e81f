"""Time-bounded cache for delivery pricing settings."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from sqlalchemy.exc import SQLAlchemyError

from foodcart.db import session as db_session
from foodcart.services.delivery_fee import PricingSettings
from foodcart.services.errors import SettingsUnavailableError
from foodcart.services.settings_service import get_pricing_settings

logger = logging.getLogger(__name__)


def load_pricing_from_db() -> PricingSettings:
    """Read pricing with a short-lived session of its own."""
    try:
        with db_session.SessionLocal() as db:
            return get_pricing_settings(db)
    except SQLAlchemyError as exc:
        logger.warning("[PRICING] settings read failed: %s", exc)
        raise SettingsUnavailableError from exc


class PricingCache:
    """Serve pricing for up to ``ttl_seconds`` before reloading.

    Failed loads are not cached, so the next call retries the loader.
    """

    def __init__(
        self,
        loader: Callable[[], PricingSettings] = load_pricing_from_db,
        ttl_seconds: float = 600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loader = loader
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._value: PricingSettings | None = None
        self._loaded_at: float = 0.0

    def get(self) -> PricingSettings:
        with self._lock:
            now = self._clock()
            if self._value is not None and now - self._loaded_at < self._ttl_seconds:
                return self._value
            value = self._loader()
            self._value = value
            self._loaded_at = now
            logger.info("[PRICING] loaded base_fee=%s per_km=%s", value.base_fee, value.per_km_rate)
            return value

    def invalidate(self) -> None:
        with self._lock:
            self._value = None
