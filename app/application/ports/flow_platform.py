from abc import ABC, abstractmethod


class FlowPlatformPort(ABC):
    @abstractmethod
    def register_public_key(self, public_key: str) -> bool:
        """Upload the flow public key. Returns False when credentials are missing."""
        raise NotImplementedError
