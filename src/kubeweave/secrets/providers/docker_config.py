"""
Docker registry credentials provider (kubernetes.io/dockerconfigjson).

Injected as an image pull secret rather than into the environment.
"""

import json
from typing import Any

from kubeweave.secrets.domain.enums import StrategyKind
from kubeweave.secrets.providers.kubernetes import KubernetesSecretConfig, KubernetesSecretProvider, encode_base64
from kubeweave.secrets.providers.schemas import DockerRegistryValue, parse_secret_value


class DockerConfigSecretProvider(KubernetesSecretProvider):
    """Expects `{"username": ..., "password": ..., "registry": ...}`."""

    secret_type = "kubernetes.io/dockerconfigjson"
    supported_strategies = (StrategyKind.IMAGE_PULL_SECRET,)

    def __init__(self, name: str, namespace: str = "default"):
        super().__init__(KubernetesSecretConfig(name=name, namespace=namespace))

    def build_data(self, name: str, value: Any) -> dict[str, str]:
        parsed = parse_secret_value(DockerRegistryValue, value, name, self.label)
        docker_config = {
            "auths": {
                parsed.registry: {
                    "username": parsed.username,
                    "password": parsed.password,
                    "auth": encode_base64(f"{parsed.username}:{parsed.password}"),
                }
            }
        }
        return {".dockerconfigjson": encode_base64(json.dumps(docker_config))}
