from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable
from zoneinfo import ZoneInfo

from app.application.dto.flow_request import DecryptedFlowRequest
from app.application.exceptions import (
    BookingValidationError,
    CalendarUnavailableError,
    FlowError,
    UnknownTransitionError,
)
from app.application.ports.booking_config import BookingConfigPort
from app.application.ports.calendar import CalendarPort
from app.application.ports.service_catalog import ServiceCatalogPort
from app.application.use_cases.availability import (
    day_bounds,
    list_pickable_dates,
    list_slots,
    to_utc_iso,
)
from app.application.utils.date_labels import (
    format_date_chip,
    format_date_label,
    format_local_time,
    parse_flow_date,
    parse_iso_instant,
)
from app.domain.entities.booking_config import CalendarBookingConfig, Weekday
from app.domain.entities.booking_draft import BookingDraft
from app.domain.entities.flow import FlowAction, FlowScreen
from app.domain.entities.slot import Slot

FLOW_TEXTS: dict[str, dict[str, str]] = {
    "pt": {
        "start_title": "Agendar Atendimento",
        "start_subtitle": "Escolha o tipo de atendimento e a data desejada",
        "time_title": "Escolha o Horario",
        "time_subtitle": "Horarios disponiveis para {date}",
        "info_title": "Seus Dados",
        "info_subtitle": "Preencha seus dados para confirmar",
        "select_date": "Selecione uma data",
        "select_slot": "Selecione um horario",
        "enter_name": "Informe seu nome",
        "no_slots": "{chip} sem horarios. Escolha outra data.",
        "slot_taken": "Esse horario acabou de ser reservado. Escolha outro.",
        "calendar_unavailable": "Agenda indisponivel no momento. Tente novamente mais tarde.",
        "unknown_transition": "Acao desconhecida",
        "default_service": "Atendimento",
        "confirmation": "Agendamento confirmado, {name}!\n\n{service}\n{date} as {time}\n\nVoce recebera um lembrete.",
        "event_customer": "Cliente: {name}",
        "event_phone": "Telefone: {phone}",
        "event_notes": "Observacoes: {notes}",
        "event_footer": "Agendado via WhatsApp",
    },
    "en": {
        "start_title": "Book an Appointment",
        "start_subtitle": "Choose the service and the date you want",
        "time_title": "Choose a Time",
        "time_subtitle": "Available times for {date}",
        "info_title": "Your Details",
        "info_subtitle": "Fill in your details to confirm",
        "select_date": "Select a date",
        "select_slot": "Select a time",
        "enter_name": "Enter your name",
        "no_slots": "{chip} has no available times. Choose another date.",
        "slot_taken": "That time was just booked. Choose another one.",
        "calendar_unavailable": "The calendar is unavailable right now. Please try again later.",
        "unknown_transition": "Unknown action",
        "default_service": "Appointment",
        "confirmation": "Booking confirmed, {name}!\n\n{service}\n{date} at {time}\n\nYou will receive a reminder.",
        "event_customer": "Customer: {name}",
        "event_phone": "Phone: {phone}",
        "event_notes": "Notes: {notes}",
        "event_footer": "Booked via WhatsApp",
    },
}

Handler = Callable[[dict[str, Any]], dict[str, Any]]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BookingFlowUseCase:
    """Turns one decrypted screen submission into the next screen payload.

    The server keeps no conversation state: every transition is computed from
    the action, the screen and the draft echoed back by the client.
    """

    def __init__(
        self,
        calendar: CalendarPort,
        catalog: ServiceCatalogPort,
        config_store: BookingConfigPort,
        calendar_id: str | None,
        language: str = "pt",
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._calendar = calendar
        self._catalog = catalog
        self._config_store = config_store
        self._calendar_id = calendar_id
        self._texts = FLOW_TEXTS.get(language, FLOW_TEXTS["pt"])
        self._language = language if language in FLOW_TEXTS else "pt"
        self._clock = clock
        self._logger = logging.getLogger(__name__)

        self._transitions: dict[tuple[FlowAction, FlowScreen | None], Handler] = {
            (FlowAction.INIT, None): self._init,
            (FlowAction.DATA_EXCHANGE, FlowScreen.BOOKING_START): self._submit_booking_start,
            (FlowAction.DATA_EXCHANGE, FlowScreen.SELECT_TIME): self._submit_select_time,
            (FlowAction.DATA_EXCHANGE, FlowScreen.CUSTOMER_INFO): self._submit_customer_info,
            (FlowAction.BACK, FlowScreen.BOOKING_START): self._back_to_start,
            (FlowAction.BACK, FlowScreen.SELECT_TIME): self._back_to_start,
            (FlowAction.BACK, FlowScreen.CUSTOMER_INFO): self._back_to_select_time,
        }

    def handle(self, request: DecryptedFlowRequest) -> dict[str, Any]:
        data = dict(request.data)

        if request.is_error_notification:
            self._logger.info("Client error notification acknowledged", extra={"screen": request.screen})
            return {"data": {"acknowledged": True}}

        action = request.flow_action
        screen = request.flow_screen
        handler = None
        if action is not None:
            handler = self._transitions.get((action, None if action is FlowAction.INIT else screen))

        try:
            if handler is None:
                raise UnknownTransitionError(self._texts["unknown_transition"])
            result = handler(data)
        except BookingValidationError as e:
            result = self._error_response(request.screen, data, str(e))
        except CalendarUnavailableError:
            result = self._error_response(request.screen, data, self._texts["calendar_unavailable"])
        except FlowError as e:
            self._logger.info(
                "Unknown flow transition",
                extra={"action": request.action, "screen": request.screen},
            )
            result = self._error_response(request.screen, data, str(e))

        self._logger.info(
            "Flow transition",
            extra={"action": request.action, "screen": request.screen, "status": result.get("screen", "close")},
        )
        return result

    # --- transitions ---

    def _init(self, data: dict[str, Any]) -> dict[str, Any]:
        config = self._config_store.get_config()
        return self._screen(FlowScreen.BOOKING_START, self._booking_start_data(config))

    def _back_to_start(self, data: dict[str, Any]) -> dict[str, Any]:
        return self._init(data)

    def _submit_booking_start(self, data: dict[str, Any]) -> dict[str, Any]:
        draft = BookingDraft.from_data(data)
        day = parse_flow_date(draft.selected_date) if draft.selected_date else None
        if day is None:
            raise BookingValidationError(self._texts["select_date"])

        config = self._config_store.get_config()
        slots = self._available_slots(day, config)

        if not slots:
            chip = format_date_chip(day, self._language)
            return self._screen(
                FlowScreen.BOOKING_START,
                {
                    **data,
                    **self._booking_start_data(config),
                    "error_message": self._texts["no_slots"].format(chip=chip),
                    "has_error": True,
                },
            )

        return self._select_time_screen(draft, day, slots)

    def _submit_select_time(self, data: dict[str, Any]) -> dict[str, Any]:
        draft = BookingDraft.from_data(data)
        if not draft.selected_slot:
            raise BookingValidationError(self._texts["select_slot"])

        return self._screen(
            FlowScreen.CUSTOMER_INFO,
            {
                "selected_service": draft.selected_service or "",
                "selected_date": draft.selected_date or "",
                "selected_slot": draft.selected_slot,
                "title": self._texts["info_title"],
                "subtitle": self._texts["info_subtitle"],
                "error_message": "",
                "has_error": False,
            },
        )

    def _submit_customer_info(self, data: dict[str, Any]) -> dict[str, Any]:
        draft = BookingDraft.from_data(data)
        if not draft.customer_name:
            raise BookingValidationError(self._texts["enter_name"])

        slot_start = parse_iso_instant(draft.selected_slot or "")
        if slot_start is None:
            raise BookingValidationError(self._texts["select_slot"])

        config = self._config_store.get_config()
        slot_end = slot_start + timedelta(minutes=config.slot_duration_minutes)
        calendar_id = self._require_calendar_id()

        if not config.allow_simultaneous and self._is_taken(calendar_id, slot_start, slot_end, config):
            raise BookingValidationError(self._texts["slot_taken"])

        service_name = self._service_name(draft.selected_service)
        event = self._calendar.create_event(
            calendar_id,
            {
                "summary": f"{service_name} - {draft.customer_name}",
                "description": self._event_description(draft),
                "start": {"dateTime": to_utc_iso(slot_start), "timeZone": config.timezone},
                "end": {"dateTime": to_utc_iso(slot_end), "timeZone": config.timezone},
            },
        )
        event_id = event.get("id") or "created"

        local_time = format_local_time(slot_start, config.timezone)
        local_date = slot_start.astimezone(ZoneInfo(config.timezone)).date()
        message = self._texts["confirmation"].format(
            name=draft.customer_name,
            service=service_name,
            date=format_date_label(local_date, self._language),
            time=local_time,
        )
        self._logger.info("Booking confirmed", extra={"event_id": event_id})

        return {
            "data": {
                "success": True,
                "event_id": event_id,
                "event_link": event.get("link") or "",
                "selected_service": draft.selected_service or "",
                "selected_date": local_date.isoformat(),
                "selected_slot": draft.selected_slot,
                "customer_name": draft.customer_name,
                "customer_phone": draft.customer_phone or "",
                "notes": draft.notes or "",
                "message": message,
            }
        }

    def _back_to_select_time(self, data: dict[str, Any]) -> dict[str, Any]:
        draft = BookingDraft.from_data(data)
        day = parse_flow_date(draft.selected_date) if draft.selected_date else None
        if day is None:
            return self._init(data)

        config = self._config_store.get_config()
        slots = self._available_slots(day, config)
        screen = self._select_time_screen(draft, day, slots)
        screen["data"] = {**data, **screen["data"]}
        return screen

    # --- helpers ---

    def _screen(self, screen: FlowScreen, data: dict[str, Any]) -> dict[str, Any]:
        return {"screen": screen.value, "data": data}

    def _booking_start_data(self, config: CalendarBookingConfig) -> dict[str, Any]:
        picker = list_pickable_dates(config, now=self._clock())
        return {
            "services": [service.to_option() for service in self._catalog.list_services()],
            **picker.to_screen_data(),
            "title": self._texts["start_title"],
            "subtitle": self._texts["start_subtitle"],
            "error_message": "",
            "has_error": False,
        }

    def _select_time_screen(self, draft: BookingDraft, day: date, slots: list[Slot]) -> dict[str, Any]:
        return self._screen(
            FlowScreen.SELECT_TIME,
            {
                "selected_service": draft.selected_service or "",
                "selected_date": day.isoformat(),
                "slots": [slot.to_dict() for slot in slots],
                "title": self._texts["time_title"],
                "subtitle": self._texts["time_subtitle"].format(date=format_date_label(day, self._language)),
                "error_message": "",
                "has_error": False,
            },
        )

    def _error_response(self, raw_screen: str | None, data: dict[str, Any], message: str) -> dict[str, Any]:
        screen = FlowScreen.parse(raw_screen)
        payload: dict[str, Any] = dict(data)
        if screen is FlowScreen.BOOKING_START:
            payload.update(self._booking_start_data(self._config_store.get_config()))
        payload.update({"error_message": message, "has_error": True})
        if raw_screen:
            return {"screen": raw_screen, "data": payload}
        return {"data": payload}

    def _require_calendar_id(self) -> str:
        if not self._calendar_id:
            raise CalendarUnavailableError("Calendar not connected")
        return self._calendar_id

    def _available_slots(self, day: date, config: CalendarBookingConfig) -> list[Slot]:
        if not config.is_enabled(Weekday.from_index(day.weekday())):
            return []
        calendar_id = self._require_calendar_id()
        time_min, time_max = day_bounds(day, config)
        busy = self._calendar.list_busy_intervals(calendar_id, time_min, time_max, config.timezone)
        slots = list_slots(day, config, busy, now=self._clock())
        self._logger.info("Slots computed", extra={"slot_count": len(slots)})
        return slots

    def _is_taken(
        self,
        calendar_id: str,
        slot_start: datetime,
        slot_end: datetime,
        config: CalendarBookingConfig,
    ) -> bool:
        buffer = timedelta(minutes=config.slot_buffer_minutes)
        busy = self._calendar.list_busy_intervals(calendar_id, slot_start - buffer, slot_end + buffer, config.timezone)
        return any(slot_start < b.end + buffer and slot_end > b.start - buffer for b in busy)

    def _service_name(self, service_key: str | None) -> str:
        if not service_key:
            return self._texts["default_service"]
        entry = self._catalog.get_service(service_key)
        return entry.display_name if entry else service_key

    def _event_description(self, draft: BookingDraft) -> str:
        lines = [
            self._texts["event_customer"].format(name=draft.customer_name),
            self._texts["event_phone"].format(phone=draft.customer_phone or ""),
        ]
        if draft.notes:
            lines.append(self._texts["event_notes"].format(notes=draft.notes))
        lines.extend(["", self._texts["event_footer"]])
        return "\n".join(lines)
