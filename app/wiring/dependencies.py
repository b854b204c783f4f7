from functools import lru_cache
import logging

from app.core.config import settings
from app.application.ports.calendar import CalendarPort
from app.application.ports.flow_platform import FlowPlatformPort
from app.application.ports.settings_store import SettingsStorePort
from app.application.use_cases.booking_flow import BookingFlowUseCase
from app.application.use_cases.flow_endpoint import FlowEndpointUseCase
from app.infrastructure.calendar.google_calendar import GoogleCalendar
from app.infrastructure.calendar.mock_calendar import MockCalendar
from app.infrastructure.knowledge.service_catalog_store import ServiceCatalogStore
from app.infrastructure.meta.graph_client import MetaGraphClient
from app.infrastructure.meta.meta_platform import MetaFlowPlatform
from app.infrastructure.meta.mock_platform import MockFlowPlatform
from app.infrastructure.store.booking_config_store import SettingsBookingConfigStore
from app.infrastructure.store.json_store import JsonSettingsStore
from app.infrastructure.store.key_store import SettingsKeyStore
from app.infrastructure.store.memory_store import MemorySettingsStore


def _is_local() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


@lru_cache
def get_settings_store() -> SettingsStorePort:
    if settings.ENV.lower() == "test":
        return MemorySettingsStore()
    return JsonSettingsStore(path=settings.SETTINGS_STORE_PATH)


@lru_cache
def get_booking_config_store() -> SettingsBookingConfigStore:
    return SettingsBookingConfigStore(
        store=get_settings_store(),
        cache_seconds=settings.BOOKING_CONFIG_CACHE_SECONDS,
    )


def get_key_store() -> SettingsKeyStore:
    return SettingsKeyStore(
        store=get_settings_store(),
        fallback_private_key=settings.FLOW_PRIVATE_KEY,
        passphrase=settings.FLOW_PRIVATE_KEY_PASSPHRASE,
    )


@lru_cache
def get_calendar() -> CalendarPort:
    if not settings.GOOGLE_CALENDAR_ACCESS_TOKEN and _is_local():
        logging.getLogger(__name__).info("Using MockCalendar (token missing, ENV=dev/local)")
        return MockCalendar()
    return GoogleCalendar()


def get_calendar_id() -> str | None:
    if not settings.GOOGLE_CALENDAR_ID and _is_local():
        return "primary"
    return settings.GOOGLE_CALENDAR_ID


@lru_cache
def get_flow_platform() -> FlowPlatformPort:
    if not settings.META_ACCESS_TOKEN:
        if _is_local():
            return MockFlowPlatform()
        return MetaFlowPlatform(client=None, phone_number_id=None)

    client = MetaGraphClient(
        access_token=settings.META_ACCESS_TOKEN,
        base_url=settings.META_GRAPH_BASE_URL,
        api_version=settings.META_GRAPH_API_VERSION,
    )
    return MetaFlowPlatform(client=client, phone_number_id=settings.META_PHONE_NUMBER_ID)


def get_booking_flow_use_case() -> BookingFlowUseCase:
    return BookingFlowUseCase(
        calendar=get_calendar(),
        catalog=ServiceCatalogStore(),
        config_store=get_booking_config_store(),
        calendar_id=get_calendar_id(),
        language=settings.FLOW_LANGUAGE,
    )


def get_flow_endpoint_use_case() -> FlowEndpointUseCase:
    return FlowEndpointUseCase(
        key_store=get_key_store(),
        platform=get_flow_platform(),
        booking_flow=get_booking_flow_use_case(),
        passphrase=settings.FLOW_PRIVATE_KEY_PASSPHRASE,
    )
