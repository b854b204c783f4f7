from __future__ import annotations

import logging

from app.application.ports.flow_platform import FlowPlatformPort
from app.infrastructure.meta.graph_client import MetaGraphClient


class MetaFlowPlatform(FlowPlatformPort):
    def __init__(self, client: MetaGraphClient | None, phone_number_id: str | None) -> None:
        self._client = client
        self._phone_number_id = phone_number_id
        self._logger = logging.getLogger(__name__)

    def register_public_key(self, public_key: str) -> bool:
        if self._client is None or not self._phone_number_id:
            self._logger.info("WhatsApp credentials not configured, public key sync pending")
            return False
        self._client.set_encryption_public_key(phone_number_id=self._phone_number_id, public_key=public_key)
        self._logger.info("Public key registered with Meta")
        return True
