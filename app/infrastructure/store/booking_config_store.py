from __future__ import annotations

import json
import logging
import time
from typing import Callable

from pydantic import ValidationError

from app.application.dto.booking_config import BookingConfigDTO
from app.application.ports.booking_config import BookingConfigPort
from app.application.ports.settings_store import SettingsStorePort
from app.domain.entities.booking_config import DEFAULT_BOOKING_CONFIG, CalendarBookingConfig

BOOKING_CONFIG_SETTING = "calendar_booking_config"


class SettingsBookingConfigStore(BookingConfigPort):
    """Reads the booking config JSON from settings, merged over the defaults.

    A short TTL keeps repeated screens of one conversation from re-reading
    storage; ``cache_seconds=0`` disables it.
    """

    def __init__(
        self,
        store: SettingsStorePort,
        cache_seconds: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store = store
        self._cache_seconds = cache_seconds
        self._clock = clock
        self._cached: tuple[float, CalendarBookingConfig] | None = None
        self._logger = logging.getLogger(__name__)

    def get_config(self) -> CalendarBookingConfig:
        now = self._clock()
        if self._cached and now - self._cached[0] < self._cache_seconds:
            return self._cached[1]
        config = self._load()
        self._cached = (now, config)
        return config

    def _load(self) -> CalendarBookingConfig:
        raw = self._store.get(BOOKING_CONFIG_SETTING)
        if not raw:
            return DEFAULT_BOOKING_CONFIG
        try:
            payload = json.loads(raw)
            return BookingConfigDTO.model_validate(payload).to_entity()
        except (json.JSONDecodeError, ValidationError) as e:
            self._logger.warning(
                "Invalid booking config, using defaults",
                extra={"reason": type(e).__name__},
            )
            return DEFAULT_BOOKING_CONFIG
