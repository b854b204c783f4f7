from abc import ABC, abstractmethod

from app.domain.entities.booking_config import CalendarBookingConfig


class BookingConfigPort(ABC):
    @abstractmethod
    def get_config(self) -> CalendarBookingConfig:
        """Current booking configuration, with defaults applied."""
        raise NotImplementedError
