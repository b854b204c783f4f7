from abc import ABC, abstractmethod


class KeyStorePort(ABC):
    @abstractmethod
    def get_private_key(self) -> str | None:
        """PEM private key, or None when no key pair is configured."""
        raise NotImplementedError

    @abstractmethod
    def get_public_key(self) -> str | None:
        raise NotImplementedError

    @abstractmethod
    def set_key_pair(self, private_key: str, public_key: str) -> None:
        raise NotImplementedError
