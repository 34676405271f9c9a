"""Secret sources."""

from kubeweave.secrets.connectors.base import BaseConnector
from kubeweave.secrets.connectors.env import EnvConnector
from kubeweave.secrets.connectors.in_memory import InMemoryConnector
from kubeweave.secrets.connectors.vault import VaultConnector

__all__ = ["BaseConnector", "EnvConnector", "InMemoryConnector", "VaultConnector"]
