"""Secret sinks."""

from kubeweave.secrets.providers.base import BaseProvider
from kubeweave.secrets.providers.basic_auth import BasicAuthSecretProvider
from kubeweave.secrets.providers.custom_type import CustomTypeSecretProvider
from kubeweave.secrets.providers.docker_config import DockerConfigSecretProvider
from kubeweave.secrets.providers.in_memory import InMemoryProvider
from kubeweave.secrets.providers.kubernetes import KubernetesSecretProvider
from kubeweave.secrets.providers.opaque import OpaqueSecretProvider
from kubeweave.secrets.providers.ssh_auth import SshAuthSecretProvider
from kubeweave.secrets.providers.tls import TlsSecretProvider

__all__ = [
    "BaseProvider",
    "BasicAuthSecretProvider",
    "CustomTypeSecretProvider",
    "DockerConfigSecretProvider",
    "InMemoryProvider",
    "KubernetesSecretProvider",
    "OpaqueSecretProvider",
    "SshAuthSecretProvider",
    "TlsSecretProvider",
]
