from relay_backend.config.settings import RelaySettings

__all__ = ["RelaySettings"]
