"""
Custom-type Secret provider.

For Secret types without a dedicated provider. The value is a flat map
of string keys; `allowed_keys`, when set, restricts both the data and the
keys env injections may reference.
"""

from dataclasses import dataclass
from typing import Any

from kubeweave.secrets.providers.kubernetes import KubernetesSecretConfig, KubernetesSecretProvider, encode_base64
from kubeweave.shared.domain.exceptions import ConfigurationError, ValidationError


@dataclass
class CustomTypeSecretConfig(KubernetesSecretConfig):
    secret_type: str = ""
    allowed_keys: tuple[str, ...] | None = None


class CustomTypeSecretProvider(KubernetesSecretProvider):
    def __init__(
        self,
        name: str,
        secret_type: str,
        namespace: str = "default",
        allowed_keys: list[str] | None = None,
    ):
        if not secret_type or not secret_type.strip():
            raise ConfigurationError("CustomTypeSecretProvider requires a non-empty secret_type")
        super().__init__(
            CustomTypeSecretConfig(
                name=name,
                namespace=namespace,
                secret_type=secret_type,
                allowed_keys=tuple(allowed_keys) if allowed_keys is not None else None,
            )
        )
        self.secret_type = secret_type
        self.supported_env_keys = self.config.allowed_keys

    def build_data(self, name: str, value: Any) -> dict[str, str]:
        if not isinstance(value, dict):
            raise ValidationError(
                f"Invalid value for secret '{name}' in {self.label}: expected an object of string values",
                context={"secret": name},
            )

        allowed = self.config.allowed_keys
        if allowed is not None:
            unknown = [key for key in value if key not in allowed]
            if unknown:
                raise ValidationError(
                    f"Invalid keys for secret '{name}' in {self.label}: {', '.join(unknown)}. "
                    f"Allowed: {', '.join(allowed)}",
                    context={"secret": name, "unknown": unknown},
                )

        data = {}
        for key, item in value.items():
            if isinstance(item, (dict, list)):
                raise ValidationError(
                    f"Invalid value for key '{key}' of secret '{name}' in {self.label}: nested values are not supported",
                    context={"secret": name, "key": key},
                )
            data[key] = encode_base64(str(item))
        return data
