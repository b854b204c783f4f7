from __future__ import annotations

from app.application.ports.service_catalog import ServiceCatalogPort
from app.domain.entities.service_catalog import ServiceCatalogEntry

DEFAULT_SERVICES: tuple[ServiceCatalogEntry, ...] = (
    ServiceCatalogEntry(service_key="consulta", display_name="Consulta", duration_minutes=30),
    ServiceCatalogEntry(service_key="visita", display_name="Visita", duration_minutes=60),
    ServiceCatalogEntry(service_key="suporte", display_name="Suporte", duration_minutes=30),
)


class ServiceCatalogStore(ServiceCatalogPort):
    def __init__(self, services: tuple[ServiceCatalogEntry, ...] | None = None) -> None:
        self._services = services or DEFAULT_SERVICES

    def list_services(self) -> list[ServiceCatalogEntry]:
        return list(self._services)

    def get_service(self, service_key: str) -> ServiceCatalogEntry | None:
        normalized_key = service_key.lower().strip()
        for entry in self._services:
            if entry.service_key == normalized_key:
                return entry
        return None
