from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class BookingDraft:
    """Booking fields echoed back by the client on every screen submission."""

    selected_service: str | None = None
    selected_date: str | None = None  # YYYY-MM-DD, zone-less
    selected_slot: str | None = None  # UTC ISO instant
    customer_name: str | None = None
    customer_phone: str | None = None
    notes: str | None = None

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "BookingDraft":
        return cls(
            selected_service=_text(data.get("selected_service")),
            selected_date=_text(data.get("selected_date")),
            selected_slot=_text(data.get("selected_slot")),
            customer_name=_text(data.get("customer_name")),
            customer_phone=_text(data.get("customer_phone")),
            notes=_text(data.get("notes")),
        )


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
