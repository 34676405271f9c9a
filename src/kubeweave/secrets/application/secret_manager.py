"""
Secret Manager.

Holds one group of connectors, providers and secret declarations, plus the
defaults used when a secret does not name its own connector or provider.
"""

from kubeweave.secrets.connectors.base import BaseConnector
from kubeweave.secrets.domain.models import SecretDefinition
from kubeweave.secrets.providers.base import BaseProvider
from kubeweave.shared.domain.exceptions import ConfigurationError, ResolutionError
from kubeweave.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class SecretManager:
    """
    Registry of connectors, providers and secrets for one scope.

    Mutators return the manager so declarations can be chained:

        >>> manager = (
        ...     SecretManager()
        ...     .add_connector("env", EnvConnector())
        ...     .add_provider("opaque", OpaqueSecretProvider(name="app-secret"))
        ...     .add_secret("API_KEY")
        ... )
    """

    def __init__(self, name: str | None = None):
        self.name = name
        self._connectors: dict[str, BaseConnector] = {}
        self._providers: dict[str, BaseProvider] = {}
        self._secrets: dict[str, SecretDefinition] = {}
        self._default_connector: str | None = None
        self._default_provider: str | None = None

    # Registration

    def add_connector(self, name: str, instance: BaseConnector) -> "SecretManager":
        if name in self._connectors:
            raise ConfigurationError(f"Connector '{name}' is already registered", context={"connector": name})
        self._connectors[name] = instance
        return self

    def add_provider(self, name: str, instance: BaseProvider) -> "SecretManager":
        if name in self._providers:
            raise ConfigurationError(f"Provider '{name}' is already registered", context={"provider": name})
        instance.validate_capabilities()
        instance.name = name
        self._providers[name] = instance
        return self

    def set_default_connector(self, name: str) -> "SecretManager":
        if name not in self._connectors:
            raise ResolutionError(f"Connector '{name}' not found", context={"registered": list(self._connectors)})
        self._default_connector = name
        return self

    def set_default_provider(self, name: str) -> "SecretManager":
        if name not in self._providers:
            raise ResolutionError(f"Provider '{name}' not found", context={"registered": list(self._providers)})
        self._default_provider = name
        return self

    def add_secret(
        self,
        secret: str | SecretDefinition,
        connector: str | None = None,
        provider: str | None = None,
    ) -> "SecretManager":
        definition = (
            secret
            if isinstance(secret, SecretDefinition)
            else SecretDefinition(name=secret, connector=connector, provider=provider)
        )
        if not definition.name:
            raise ConfigurationError("Secret name must not be empty")
        if definition.name in self._secrets:
            raise ConfigurationError(f"Secret '{definition.name}' is already declared", context={"secret": definition.name})
        self._secrets[definition.name] = definition
        return self

    # Resolution

    def get_default_connector(self) -> str | None:
        """Explicit default, or the only registered connector."""
        if self._default_connector is not None:
            return self._default_connector
        if len(self._connectors) == 1:
            return next(iter(self._connectors))
        return None

    def get_default_provider(self) -> str | None:
        """Explicit default, or the only registered provider."""
        if self._default_provider is not None:
            return self._default_provider
        if len(self._providers) == 1:
            return next(iter(self._providers))
        return None

    def resolve_connector(self, name: str | None = None) -> BaseConnector:
        key = name if name is not None else self.get_default_connector()
        if key is None:
            raise ResolutionError(
                "No connector specified and no default connector set",
                context={"registered": list(self._connectors)},
            )
        if key not in self._connectors:
            raise ResolutionError(f"Connector '{key}' not found", context={"registered": list(self._connectors)})
        return self._connectors[key]

    def resolve_provider(self, name: str | None = None) -> BaseProvider:
        key = self._provider_key(name)
        return self._providers[key]

    def resolve_provider_for(self, secret_name: str) -> tuple[BaseProvider, str]:
        """Provider instance and registration name serving a declared secret."""
        definition = self._secrets.get(secret_name)
        if definition is None:
            raise ResolutionError(
                f"Secret '{secret_name}' is not declared in this manager",
                context={"secret": secret_name, "declared": list(self._secrets)},
            )
        key = self._provider_key(definition.provider)
        return self._providers[key], key

    def resolve_connector_for(self, secret_name: str) -> BaseConnector:
        definition = self._secrets.get(secret_name)
        if definition is None:
            raise ResolutionError(f"Secret '{secret_name}' is not declared in this manager", context={"secret": secret_name})
        return self.resolve_connector(definition.connector)

    def _provider_key(self, name: str | None) -> str:
        key = name if name is not None else self.get_default_provider()
        if key is None:
            raise ResolutionError(
                "No provider specified and no default provider set",
                context={"registered": list(self._providers)},
            )
        if key not in self._providers:
            raise ResolutionError(f"Provider '{key}' not found", context={"registered": list(self._providers)})
        return key

    # Accessors

    def get_secrets(self) -> dict[str, SecretDefinition]:
        return dict(self._secrets)

    def get_connectors(self) -> dict[str, BaseConnector]:
        return dict(self._connectors)

    def get_providers(self) -> dict[str, BaseProvider]:
        return dict(self._providers)
