"""Named collection of secret managers, one per stack scope."""

from kubeweave.secrets.application.secret_manager import SecretManager
from kubeweave.shared.domain.exceptions import ConfigurationError, ResolutionError


class SecretRegistry:
    """Managers keyed by name, kept in registration order."""

    def __init__(self):
        self._managers: dict[str, SecretManager] = {}

    def add(self, name: str, manager: SecretManager) -> "SecretRegistry":
        if name in self._managers:
            raise ConfigurationError(f"Secret manager '{name}' is already registered", context={"manager": name})
        self._managers[name] = manager
        return self

    def get(self, name: str) -> SecretManager:
        try:
            return self._managers[name]
        except KeyError:
            raise ResolutionError(
                f"Secret manager '{name}' not found",
                context={"registered": list(self._managers)},
            ) from None

    def list(self) -> dict[str, SecretManager]:
        return dict(self._managers)
