from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceCatalogEntry:
    service_key: str
    display_name: str
    duration_minutes: int | None = None

    def to_option(self) -> dict[str, str]:
        return {"id": self.service_key, "title": self.display_name}
