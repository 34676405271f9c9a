"""Basic-auth Secret provider (kubernetes.io/basic-auth)."""

from typing import Any

from kubeweave.secrets.providers.kubernetes import KubernetesSecretConfig, KubernetesSecretProvider, encode_base64
from kubeweave.secrets.providers.schemas import BasicAuthValue, parse_secret_value


class BasicAuthSecretProvider(KubernetesSecretProvider):
    """Expects `{"username": ..., "password": ...}`."""

    secret_type = "kubernetes.io/basic-auth"
    supported_env_keys = ("username", "password")

    def __init__(self, name: str, namespace: str = "default"):
        super().__init__(KubernetesSecretConfig(name=name, namespace=namespace))

    def build_data(self, name: str, value: Any) -> dict[str, str]:
        parsed = parse_secret_value(BasicAuthValue, value, name, self.label)
        return {
            "username": encode_base64(parsed.username),
            "password": encode_base64(parsed.password),
        }
