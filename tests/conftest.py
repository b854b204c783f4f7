"""Shared fixtures: key pairs, a platform-side reference cipher and a booking flow wired to fakes."""

from __future__ import annotations

import base64
import json
import os
from datetime import datetime, timezone
from typing import Any

import pytest
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from app.application.use_cases.booking_flow import BookingFlowUseCase
from app.infrastructure.calendar.mock_calendar import MockCalendar
from app.infrastructure.crypto.flow_crypto import KeyPair, generate_key_pair
from app.infrastructure.knowledge.service_catalog_store import ServiceCatalogStore
from app.infrastructure.store.booking_config_store import SettingsBookingConfigStore
from app.infrastructure.store.memory_store import MemorySettingsStore

# Monday 2026-03-16 08:00 in America/Sao_Paulo (UTC-3)
FIXED_NOW = datetime(2026, 3, 16, 11, 0, tzinfo=timezone.utc)


class PlatformCipher:
    """Encrypts requests and opens responses the way the WhatsApp client does."""

    def __init__(self, public_key_pem: str) -> None:
        self._public_key = serialization.load_pem_public_key(public_key_pem.encode("utf-8"))

    def encrypt_request(self, payload: Any, raw: bytes | None = None) -> tuple[dict[str, str], bytes, bytes]:
        aes_key = os.urandom(16)
        iv = os.urandom(16)
        plaintext = raw if raw is not None else json.dumps(payload).encode("utf-8")
        encrypted_key = self._public_key.encrypt(
            aes_key,
            padding.OAEP(mgf=padding.MGF1(algorithm=hashes.SHA256()), algorithm=hashes.SHA256(), label=None),
        )
        envelope = {
            "encrypted_flow_data": base64.b64encode(AESGCM(aes_key).encrypt(iv, plaintext, None)).decode(),
            "encrypted_aes_key": base64.b64encode(encrypted_key).decode(),
            "initial_vector": base64.b64encode(iv).decode(),
        }
        return envelope, aes_key, iv

    @staticmethod
    def decrypt_response(body: str, aes_key: bytes, iv: bytes) -> dict[str, Any]:
        plaintext = AESGCM(aes_key).decrypt(iv, base64.b64decode(body), None)
        return json.loads(plaintext.decode("utf-8"))


@pytest.fixture(scope="session")
def key_pair() -> KeyPair:
    return generate_key_pair()


@pytest.fixture(scope="session")
def other_key_pair() -> KeyPair:
    return generate_key_pair()


@pytest.fixture
def platform(key_pair: KeyPair) -> PlatformCipher:
    return PlatformCipher(key_pair.public_key)


@pytest.fixture
def calendar() -> MockCalendar:
    return MockCalendar()


@pytest.fixture
def settings_store() -> MemorySettingsStore:
    return MemorySettingsStore()


@pytest.fixture
def booking_flow(calendar: MockCalendar, settings_store: MemorySettingsStore) -> BookingFlowUseCase:
    return BookingFlowUseCase(
        calendar=calendar,
        catalog=ServiceCatalogStore(),
        config_store=SettingsBookingConfigStore(store=settings_store),
        calendar_id="primary",
        language="en",
        clock=lambda: FIXED_NOW,
    )
