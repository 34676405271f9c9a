"""Opaque Secret provider: one string value per secret, exposed under the secret's own name."""

from typing import Any

from kubeweave.secrets.domain.enums import StrategyKind
from kubeweave.secrets.domain.models import Injection
from kubeweave.secrets.providers.kubernetes import KubernetesSecretConfig, KubernetesSecretProvider, encode_base64
from kubeweave.shared.domain.exceptions import ValidationError


class OpaqueSecretProvider(KubernetesSecretProvider):
    secret_type = "Opaque"
    supported_strategies = (StrategyKind.ENV,)

    def __init__(self, name: str, namespace: str = "default"):
        super().__init__(KubernetesSecretConfig(name=name, namespace=namespace))

    def build_data(self, name: str, value: Any) -> dict[str, str]:
        if not isinstance(value, str):
            raise ValidationError(
                f"Invalid value for secret '{name}' in {self.label}: expected a string, got {type(value).__name__}",
                context={"secret": name},
            )
        return {name: encode_base64(value)}

    def env_key_for(self, injection: Injection) -> str:
        return injection.meta.secret_name
