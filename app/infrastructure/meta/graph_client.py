from __future__ import annotations

import logging

import httpx


class MetaGraphClient:
    def __init__(
        self,
        access_token: str,
        base_url: str,
        api_version: str,
        client: httpx.Client | None = None,
    ) -> None:
        self._access_token = access_token
        self._base_url = f"{base_url.rstrip('/')}/{api_version}"
        self._client = client or httpx.Client(timeout=10.0)
        self._logger = logging.getLogger(__name__)

    def set_encryption_public_key(self, phone_number_id: str, public_key: str) -> None:
        url = f"{self._base_url}/{phone_number_id}/whatsapp_business_encryption"
        headers = {"Authorization": f"Bearer {self._access_token}"}
        resp = self._client.post(url, headers=headers, data={"business_public_key": public_key})
        if resp.status_code >= 400:
            try:
                error_json = resp.json()
                error_code = error_json.get("error", {}).get("code")
                error_message = error_json.get("error", {}).get("message")
            except ValueError:
                error_code = None
                error_message = resp.text

            self._logger.error(
                "Public key upload failed",
                extra={
                    "status": resp.status_code,
                    "error_code": error_code,
                    "reason": error_message,
                },
            )
            resp.raise_for_status()
