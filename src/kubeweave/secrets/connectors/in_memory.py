"""In-memory connector for tests and local development."""

from typing import Any

from kubeweave.secrets.connectors.base import BaseConnector
from kubeweave.shared.domain.exceptions import LoadError


class InMemoryConnector(BaseConnector):
    """Serves secrets from a plain dictionary."""

    def __init__(self, values: dict[str, Any] | None = None):
        super().__init__(config=dict(values or {}))
        self._loaded: dict[str, Any] = {}

    async def load_async(self, names: list[str]) -> None:
        for name in names:
            if name not in self.config:
                raise LoadError(f"Missing secret: {name}", context={"connector": "in-memory"})
            self._loaded[name] = self.config[name]

    def get(self, name: str) -> Any:
        if name not in self._loaded:
            raise LoadError(f"Secret {name} not loaded", context={"connector": "in-memory"})
        return self._loaded[name]
