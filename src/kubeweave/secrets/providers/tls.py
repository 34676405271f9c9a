"""TLS Secret provider (kubernetes.io/tls)."""

from typing import Any

from kubeweave.secrets.providers.kubernetes import KubernetesSecretConfig, KubernetesSecretProvider, encode_base64
from kubeweave.secrets.providers.schemas import TlsValue, parse_secret_value


class TlsSecretProvider(KubernetesSecretProvider):
    """Expects `{"cert": <PEM>, "key": <PEM>}`, both non-empty."""

    secret_type = "kubernetes.io/tls"
    supported_env_keys = ("tls.crt", "tls.key")

    def __init__(self, name: str, namespace: str = "default"):
        super().__init__(KubernetesSecretConfig(name=name, namespace=namespace))

    def build_data(self, name: str, value: Any) -> dict[str, str]:
        parsed = parse_secret_value(TlsValue, value, name, self.label)
        return {
            "tls.crt": encode_base64(parsed.cert),
            "tls.key": encode_base64(parsed.key),
        }
