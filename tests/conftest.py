"""Shared test fixtures for kubeweave test suite."""

import copy

import pytest

from kubeweave.secrets.application.secret_manager import SecretManager
from kubeweave.secrets.connectors.in_memory import InMemoryConnector
from kubeweave.secrets.providers.opaque import OpaqueSecretProvider
from kubeweave.stack.composer import ResourceComposer
from kubeweave.stack.stack import Stack

DEPLOYMENT = {
    "apiVersion": "apps/v1",
    "kind": "Deployment",
    "metadata": {"name": "api", "namespace": "default"},
    "spec": {
        "template": {
            "spec": {
                "containers": [
                    {"name": "api", "image": "example/api:1.0"},
                ],
            },
        },
    },
}


@pytest.fixture
def deployment_factory():
    """Build Deployment manifests with a given name."""

    def factory(name: str = "api", kind: str = "Deployment") -> dict:
        manifest = copy.deepcopy(DEPLOYMENT)
        manifest["kind"] = kind
        manifest["metadata"]["name"] = name
        return manifest

    return factory


@pytest.fixture
def stack(deployment_factory):
    """Stack holding a single Deployment with id 'api'."""
    composer = ResourceComposer().add_object("api", deployment_factory("api"))
    return Stack("app", composer)


@pytest.fixture
def memory_connector():
    """Connector serving two plain string secrets."""
    return InMemoryConnector({"API_KEY": "abc123", "DB_URL": "postgres://db"})


@pytest.fixture
def opaque_manager(memory_connector):
    """Manager with one connector, one Opaque provider and two secrets."""
    return (
        SecretManager()
        .add_connector("mem", memory_connector)
        .add_provider("opaque", OpaqueSecretProvider(name="app-secret"))
        .add_secret("API_KEY")
        .add_secret("DB_URL")
    )


@pytest.fixture
def mock_kubectl():
    """KubectlExecutor stand-in recording applied manifests."""
    from unittest.mock import AsyncMock, MagicMock

    kubectl = MagicMock()
    kubectl.apply_async = AsyncMock(return_value=None)
    return kubectl
