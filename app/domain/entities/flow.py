from __future__ import annotations

from enum import Enum


class FlowAction(str, Enum):
    INIT = "INIT"
    DATA_EXCHANGE = "data_exchange"
    BACK = "BACK"
    PING = "ping"

    @classmethod
    def parse(cls, value: str | None) -> "FlowAction | None":
        try:
            return cls(value)
        except ValueError:
            return None


class FlowScreen(str, Enum):
    BOOKING_START = "BOOKING_START"
    SELECT_TIME = "SELECT_TIME"
    CUSTOMER_INFO = "CUSTOMER_INFO"

    @classmethod
    def parse(cls, value: str | None) -> "FlowScreen | None":
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None
