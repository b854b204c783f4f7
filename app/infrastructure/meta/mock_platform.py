from __future__ import annotations

import logging

from app.application.ports.flow_platform import FlowPlatformPort


class MockFlowPlatform(FlowPlatformPort):
    def __init__(self) -> None:
        self.registered_keys: list[str] = []
        self._logger = logging.getLogger(__name__)

    def register_public_key(self, public_key: str) -> bool:
        self.registered_keys.append(public_key)
        self._logger.info("Mock public key registration", extra={"status": "registered"})
        return True
