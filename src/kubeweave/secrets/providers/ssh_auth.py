"""SSH auth Secret provider (kubernetes.io/ssh-auth)."""

from typing import Any

from kubeweave.secrets.providers.kubernetes import KubernetesSecretConfig, KubernetesSecretProvider, encode_base64
from kubeweave.secrets.providers.schemas import SshAuthValue, parse_secret_value


class SshAuthSecretProvider(KubernetesSecretProvider):
    """Expects `{"ssh-privatekey": ..., "known_hosts": ...}`; known_hosts is optional."""

    secret_type = "kubernetes.io/ssh-auth"
    supported_env_keys = ("ssh-privatekey", "known_hosts")

    def __init__(self, name: str, namespace: str = "default"):
        super().__init__(KubernetesSecretConfig(name=name, namespace=namespace))

    def build_data(self, name: str, value: Any) -> dict[str, str]:
        parsed = parse_secret_value(SshAuthValue, value, name, self.label)
        data = {"ssh-privatekey": encode_base64(parsed.ssh_privatekey)}
        if parsed.known_hosts is not None:
            data["known_hosts"] = encode_base64(parsed.known_hosts)
        return data
