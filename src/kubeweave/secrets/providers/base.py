"""
Base Provider Interface

A provider turns a resolved secret value into effects (artifacts to apply)
and turns injections into the payload written into a workload manifest.
All provider implementations must inherit from this interface.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable
from typing import Any, ClassVar

from kubeweave.secrets.domain.enums import StrategyKind
from kubeweave.secrets.domain.models import (
    Injection,
    InjectionStrategy,
    PreparedEffect,
    SecretDefinition,
)
from kubeweave.shared.domain.exceptions import ConfigurationError, InjectionResolutionError


class BaseProvider(ABC):
    """
    Interface for secret providers.

    Capabilities are declared as class attributes and checked when the
    provider is registered on a manager (see `validate_capabilities`).
    """

    target_kind: ClassVar[str] = "Deployment"
    supported_strategies: tuple[StrategyKind, ...] = ()
    supported_env_keys: tuple[str, ...] | None = None

    def __init__(self, config: Any = None):
        self.config = config
        # Assigned by SecretManager.add_provider
        self.name: str | None = None
        self._secrets: dict[str, SecretDefinition] = {}

    @abstractmethod
    def prepare(self, name: str, value: Any) -> list[PreparedEffect] | Awaitable[list[PreparedEffect]]:
        """
        Turn a resolved value into effects.

        Raises:
            ValidationError: If the value does not have the expected shape
        """
        pass

    @abstractmethod
    def get_injection_payload(self, injections: list[Injection]) -> Any:
        """Build the manifest fragment for a group of injections. Uses metadata only, never values."""
        pass

    @abstractmethod
    def get_target_path(self, strategy: InjectionStrategy) -> str:
        """
        Where a strategy writes in the target resource.

        Raises:
            InjectionResolutionError: For a strategy kind this provider does not support
        """
        pass

    def merge_secrets(self, effects: list[PreparedEffect]) -> list[PreparedEffect]:
        """Combine this provider's effects that share a destination. Identity by default."""
        return effects

    def get_effect_identifier(self, effect: PreparedEffect) -> str | None:
        """Logical destination of an effect. None keeps the effect out of conflict detection."""
        return None

    def set_secrets(self, secrets: dict[str, SecretDefinition]) -> None:
        """Receive the secret definitions routed to this provider."""
        self._secrets = dict(secrets)

    def get_secrets(self) -> dict[str, SecretDefinition]:
        return dict(self._secrets)

    def ensure_routed(self, injections: list[Injection]) -> None:
        """
        Check that every injection reads a secret routed to this provider.

        Nothing is checked until definitions have been routed here.

        Raises:
            InjectionResolutionError: If an injection names a secret routed elsewhere
        """
        if not self._secrets:
            return
        unrouted = sorted({injection.meta.secret_name for injection in injections} - set(self._secrets))
        if unrouted:
            raise InjectionResolutionError(
                f"Secrets {unrouted} are not routed to provider '{self.name or type(self).__name__}'",
                context={"unrouted": unrouted, "routed": list(self._secrets)},
            )

    def supports(self, kind: StrategyKind) -> bool:
        return kind in self.supported_strategies

    def ensure_supported(self, strategy: InjectionStrategy) -> None:
        if not self.supports(strategy.kind):
            raise InjectionResolutionError(
                f"Provider '{self.name or type(self).__name__}' does not support strategy '{strategy.kind.value}'",
                context={"supported": [k.value for k in self.supported_strategies]},
            )

    def validate_capabilities(self) -> None:
        """
        Check the declared capability lists.

        Raises:
            ConfigurationError: On an empty or unknown strategy list, or a missing target kind
        """
        label = type(self).__name__
        if not self.target_kind:
            raise ConfigurationError(f"Provider {label} must declare a target kind")
        if not self.supported_strategies:
            raise ConfigurationError(f"Provider {label} must support at least one injection strategy")
        for kind in self.supported_strategies:
            if not isinstance(kind, StrategyKind):
                raise ConfigurationError(
                    f"Provider {label} declares unknown strategy {kind!r}",
                    context={"known": [k.value for k in StrategyKind]},
                )
        if self.supported_env_keys is not None and not all(
            isinstance(key, str) and key for key in self.supported_env_keys
        ):
            raise ConfigurationError(f"Provider {label} declares invalid env keys")
