from __future__ import annotations

from app.application.exceptions import KeyMismatchError
from app.application.ports.key_store import KeyStorePort
from app.application.ports.settings_store import SettingsStorePort
from app.infrastructure.crypto.flow_crypto import derive_public_key

PRIVATE_KEY_SETTING = "whatsapp_flow_private_key"
PUBLIC_KEY_SETTING = "whatsapp_flow_public_key"


class SettingsKeyStore(KeyStorePort):
    def __init__(
        self,
        store: SettingsStorePort,
        fallback_private_key: str | None = None,
        passphrase: str | None = None,
    ) -> None:
        self._store = store
        self._fallback_private_key = fallback_private_key or None
        self._passphrase = passphrase

    def get_private_key(self) -> str | None:
        return self._store.get(PRIVATE_KEY_SETTING) or self._fallback_private_key

    def get_public_key(self) -> str | None:
        stored = self._store.get(PUBLIC_KEY_SETTING)
        if stored:
            return stored
        # a key supplied through the environment has no stored public half
        private_key = self.get_private_key()
        if not private_key:
            return None
        try:
            return derive_public_key(private_key, self._passphrase)
        except KeyMismatchError:
            return None

    def set_key_pair(self, private_key: str, public_key: str) -> None:
        self._store.set(PRIVATE_KEY_SETTING, private_key)
        self._store.set(PUBLIC_KEY_SETTING, public_key)
