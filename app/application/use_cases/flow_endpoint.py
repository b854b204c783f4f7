from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from app.application.dto.flow_request import DecryptedFlowRequest
from app.application.exceptions import KeyMismatchError, MalformedPayloadError
from app.application.ports.flow_platform import FlowPlatformPort
from app.application.ports.key_store import KeyStorePort
from app.application.use_cases.booking_flow import BookingFlowUseCase
from app.domain.entities.flow import FlowAction
from app.infrastructure.crypto.flow_crypto import (
    decrypt_request,
    encrypt_response,
    generate_key_pair,
    is_valid_private_key,
)

KEY_MISMATCH_HINT = (
    "The public key configured for the Flow on the WhatsApp platform does not match "
    "the server's private key. Upload the current public key or generate a new key pair."
)


@dataclass(frozen=True)
class KeyStatus:
    configured: bool
    public_key: str | None


class FlowEndpointUseCase:
    """Opens an encrypted flow request, runs the booking flow and seals the reply."""

    def __init__(
        self,
        key_store: KeyStorePort,
        platform: FlowPlatformPort,
        booking_flow: BookingFlowUseCase,
        passphrase: str | None = None,
    ) -> None:
        self._key_store = key_store
        self._platform = platform
        self._booking_flow = booking_flow
        self._passphrase = passphrase
        self._logger = logging.getLogger(__name__)

    def key_status(self) -> KeyStatus:
        return KeyStatus(
            configured=is_valid_private_key(self._key_store.get_private_key(), self._passphrase),
            public_key=self._key_store.get_public_key(),
        )

    def ensure_private_key(self) -> str:
        """Return the stored private key, generating and registering a pair if none exists."""
        private_key = self._key_store.get_private_key()
        if private_key:
            return private_key

        self._logger.info("Private key not found, generating a new key pair")
        key_pair = generate_key_pair()
        self._key_store.set_key_pair(key_pair.private_key, key_pair.public_key)

        try:
            self._platform.register_public_key(key_pair.public_key)
        except Exception as e:
            # the request proceeds; the operator can upload the key later
            self._logger.warning("Public key sync with Meta failed", extra={"reason": type(e).__name__})

        return key_pair.private_key

    def handle(self, envelope: dict[str, str]) -> str:
        """Returns the base64 ciphertext of the response payload.

        Raises KeyMismatchError, PayloadIntegrityError or MalformedPayloadError
        when the request cannot be opened; nothing can be encrypted back then.
        """
        private_key = self.ensure_private_key()

        try:
            decrypted = decrypt_request(envelope, private_key, self._passphrase)
        except KeyMismatchError:
            self._logger.error(
                "Flow session key unwrap failed. %s Public key endpoint: GET /api/flows/endpoint/keys",
                KEY_MISMATCH_HINT,
                extra={"reason": "key_mismatch"},
            )
            raise

        try:
            request = DecryptedFlowRequest.model_validate(decrypted.body)
        except ValidationError as e:
            self._logger.error(
                "Decrypted flow request has an invalid shape",
                extra={"reason": ",".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))},
            )
            raise MalformedPayloadError("Decrypted flow request has an invalid shape") from e

        if request.flow_action is FlowAction.PING:
            self._logger.info("Flow health check", extra={"action": request.action})
            return encrypt_response({"data": {"status": "active"}}, decrypted.aes_key, decrypted.initial_vector)

        response = self._dispatch(request)
        return encrypt_response(response, decrypted.aes_key, decrypted.initial_vector)

    def _dispatch(self, request: DecryptedFlowRequest) -> dict[str, Any]:
        try:
            return self._booking_flow.handle(request)
        except Exception:
            self._logger.exception(
                "Error in flow handler",
                extra={"action": request.action, "screen": request.screen},
            )
            return {"data": {"error_message": "Internal error", "has_error": True}}
