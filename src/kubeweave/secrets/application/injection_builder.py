"""
Fluent builder for one secret injection.

    ctx.secrets("DB_PASSWORD").for_name("PGPASSWORD").inject("env", key="password").into_resource("api")

Nothing is resolved until `resolve_injection`, which the injection context
calls once the stack's `use_secrets` callback returns.
"""

from typing import TYPE_CHECKING, Any

from kubeweave.secrets.domain.enums import StrategyKind
from kubeweave.secrets.domain.models import (
    AnnotationStrategy,
    EnvFromStrategy,
    EnvStrategy,
    ImagePullSecretStrategy,
    Injection,
    InjectionMeta,
    InjectionStrategy,
    build_strategy,
)
from kubeweave.secrets.providers.base import BaseProvider
from kubeweave.shared.domain.exceptions import InjectionResolutionError
from kubeweave.shared.infrastructure.logging import get_logger

if TYPE_CHECKING:
    from kubeweave.secrets.application.injection_context import SecretsInjectionContext
    from kubeweave.stack.stack import Stack

logger = get_logger(__name__)

# Strategies `inject()` may infer when a provider supports a single kind
DEFAULT_STRATEGIES: dict[StrategyKind, type[InjectionStrategy]] = {
    StrategyKind.ENV: EnvStrategy,
    StrategyKind.ENV_FROM: EnvFromStrategy,
    StrategyKind.IMAGE_PULL_SECRET: ImagePullSecretStrategy,
    StrategyKind.ANNOTATION: AnnotationStrategy,
}


class SecretInjectionBuilder:
    def __init__(
        self,
        stack: "Stack",
        secret_name: str,
        provider: BaseProvider,
        provider_id: str,
        context: "SecretsInjectionContext",
    ):
        self.stack = stack
        self.secret_name = secret_name
        self.provider = provider
        self.provider_id = provider_id
        self.context = context
        self._strategy: InjectionStrategy | None = None
        self._target_name: str | None = None
        self._resource_id: str | None = None

    @property
    def strategy(self) -> InjectionStrategy | None:
        return self._strategy

    def inject(self, strategy: InjectionStrategy | StrategyKind | str | None = None, **options: Any) -> "SecretInjectionBuilder":
        """
        Choose how the secret reaches the workload.

        Accepts a strategy instance, a kind name with its options, or nothing
        at all when the provider supports exactly one kind.

        Raises:
            InjectionResolutionError: If the strategy cannot be inferred, is
                unsupported by the provider, or names an env key the provider
                does not expose
        """
        if isinstance(strategy, InjectionStrategy):
            if options:
                raise InjectionResolutionError("Options cannot be combined with a strategy instance")
            resolved = strategy
        elif strategy is not None:
            resolved = build_strategy(strategy, **options)
        else:
            resolved = self._infer_strategy(options)

        self.provider.ensure_supported(resolved)
        self._check_env_key(resolved)
        self._strategy = resolved
        return self

    def _infer_strategy(self, options: dict[str, Any]) -> InjectionStrategy:
        supported = self.provider.supported_strategies
        if len(supported) != 1:
            raise InjectionResolutionError(
                f"Provider '{self.provider_id}' supports several strategies; "
                f"pass one explicitly to inject() for secret '{self.secret_name}'",
                context={"supported": [kind.value for kind in supported]},
            )
        kind = supported[0]
        if options:
            return build_strategy(kind, **options)
        if kind not in DEFAULT_STRATEGIES:
            raise InjectionResolutionError(
                f"Strategy '{kind.value}' has no default; pass it explicitly to inject() for secret '{self.secret_name}'"
            )
        return DEFAULT_STRATEGIES[kind]()

    def _check_env_key(self, strategy: InjectionStrategy) -> None:
        if not isinstance(strategy, EnvStrategy) or strategy.key is None:
            return
        allowed = self.provider.supported_env_keys
        if allowed is not None and strategy.key not in allowed:
            raise InjectionResolutionError(
                f"Invalid key '{strategy.key}' for provider '{self.provider_id}'. Must be one of: {', '.join(allowed)}",
                context={"secret": self.secret_name, "supported_keys": list(allowed)},
            )

    def into_resource(self, resource_id: str) -> "SecretInjectionBuilder":
        self._resource_id = resource_id
        return self

    def for_name(self, target_name: str) -> "SecretInjectionBuilder":
        self._target_name = target_name
        return self

    def _resolve_resource_id(self) -> str:
        if self._resource_id:
            return self._resource_id

        default_id = self.context.get_default_resource_id()
        if default_id:
            return default_id

        kind = self.provider.target_kind
        matches = self.stack.composer.find_resource_ids_by_kind(kind)
        remediation = "Use .into_resource(<id>) on the injection or call ctx.set_default_resource_id(<id>)."
        if not matches:
            raise InjectionResolutionError(
                f"No resource of kind '{kind}' found for secret '{self.secret_name}'. {remediation}",
                context={"secret": self.secret_name, "kind": kind},
            )
        if len(matches) > 1:
            raise InjectionResolutionError(
                f"Multiple resources of kind '{kind}' found for secret '{self.secret_name}': "
                f"{', '.join(matches)}. {remediation}",
                context={"secret": self.secret_name, "kind": kind, "candidates": matches},
            )
        return matches[0]

    def resolve_injection(self) -> Injection:
        """Pin the injection to one resource and path and register it on the stack."""
        if self._strategy is None:
            raise InjectionResolutionError(
                f"No injection strategy set for secret '{self.secret_name}'. Call inject() first.",
                context={"secret": self.secret_name},
            )

        resource_id = self._resolve_resource_id()
        path = self.provider.get_target_path(self._strategy)
        injection = Injection(
            provider_id=self.provider_id,
            provider=self.provider,
            resource_id=resource_id,
            path=path,
            meta=InjectionMeta(
                secret_name=self.secret_name,
                target_name=self._target_name or self.secret_name,
                strategy=self._strategy,
            ),
        )
        self.stack.register_secret_injection(injection)
        logger.debug(
            "secret_injection_resolved",
            secret=self.secret_name,
            provider=self.provider_id,
            resource_id=resource_id,
            path=path,
        )
        return injection
