"""
HashiCorp Vault connector.

Reads secrets from a KV version 2 engine over the HTTP API:
GET {url}/v1/{mount_point}/data/{path}
"""

from dataclasses import dataclass, field
from typing import Any

import httpx

from kubeweave.secrets.connectors.base import BaseConnector
from kubeweave.shared.domain.exceptions import LoadError
from kubeweave.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


@dataclass
class VaultConnectorConfig:
    url: str
    token: str
    mount_point: str = "secret"
    base_path: str = ""
    key_mapping: dict[str, str] = field(default_factory=dict)
    timeout: float = 5.0


class VaultConnector(BaseConnector):
    """
    Secret values from Vault KV v2.

    A secret whose data holds a single `value` field resolves to that scalar,
    anything else resolves to the whole data object.
    """

    def __init__(
        self,
        url: str,
        token: str,
        mount_point: str = "secret",
        base_path: str = "",
        key_mapping: dict[str, str] | None = None,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(
            config=VaultConnectorConfig(
                url=url.rstrip("/"),
                token=token,
                mount_point=mount_point.strip("/"),
                base_path=base_path.strip("/"),
                key_mapping=dict(key_mapping or {}),
                timeout=timeout,
            )
        )
        self._transport = transport
        self._secrets: dict[str, Any] = {}

    def _secret_path(self, name: str) -> str:
        mapped = self.config.key_mapping.get(name)
        if mapped:
            return mapped.strip("/")
        return f"{self.config.base_path}/{name}" if self.config.base_path else name

    async def load_async(self, names: list[str]) -> None:
        pending = [name for name in names if name not in self._secrets]
        if not pending:
            return

        headers = {"X-Vault-Token": self.config.token}
        async with httpx.AsyncClient(
            base_url=self.config.url,
            headers=headers,
            timeout=self.config.timeout,
            transport=self._transport,
        ) as client:
            for name in pending:
                path = self._secret_path(name)
                try:
                    response = await client.get(f"/v1/{self.config.mount_point}/data/{path}")
                    response.raise_for_status()
                    body = response.json()
                except httpx.HTTPStatusError as e:
                    raise LoadError(
                        f"Vault returned {e.response.status_code} for secret '{name}'",
                        context={"secret": name, "path": path},
                    ) from e
                except httpx.HTTPError as e:
                    raise LoadError(
                        f"Vault request failed for secret '{name}': {e}",
                        context={"secret": name, "path": path},
                    ) from e

                data = (body.get("data") or {}).get("data")
                if not isinstance(data, dict):
                    raise LoadError(f"Vault secret '{name}' has no data", context={"secret": name, "path": path})

                self._secrets[name] = data["value"] if set(data) == {"value"} else data
                logger.debug("vault_secret_loaded", secret=name, path=path)

    def get(self, name: str) -> Any:
        if name not in self._secrets:
            raise LoadError(f"Secret '{name}' not loaded. Did you call load_async()?", context={"secret": name})
        return self._secrets[name]
