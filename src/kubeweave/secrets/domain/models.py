"""
Secret domain models.

Plain dataclasses shared by connectors, providers, managers and the
orchestrator.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from kubeweave.secrets.domain.enums import EffectKind, StrategyKind
from kubeweave.shared.domain.exceptions import InjectionResolutionError

if TYPE_CHECKING:
    from kubeweave.secrets.providers.base import BaseProvider


@dataclass(frozen=True)
class SecretDefinition:
    """
    A named secret declared on a manager.

    `connector` and `provider` are registration names. None means the
    manager's default at resolution time.
    """

    name: str
    connector: str | None = None
    provider: str | None = None


# Injection strategies


@dataclass(frozen=True)
class InjectionStrategy:
    """Base of the strategy variants. `target_path` overrides the provider's default path."""

    kind: ClassVar[StrategyKind]
    target_path: str | None = field(default=None, kw_only=True)


@dataclass(frozen=True)
class EnvStrategy(InjectionStrategy):
    kind: ClassVar[StrategyKind] = StrategyKind.ENV
    container_index: int = 0
    key: str | None = None


@dataclass(frozen=True)
class EnvFromStrategy(InjectionStrategy):
    kind: ClassVar[StrategyKind] = StrategyKind.ENV_FROM
    container_index: int = 0
    prefix: str | None = None


@dataclass(frozen=True)
class VolumeStrategy(InjectionStrategy):
    kind: ClassVar[StrategyKind] = StrategyKind.VOLUME
    mount_path: str = ""
    container_index: int = 0


@dataclass(frozen=True)
class AnnotationStrategy(InjectionStrategy):
    kind: ClassVar[StrategyKind] = StrategyKind.ANNOTATION


@dataclass(frozen=True)
class ImagePullSecretStrategy(InjectionStrategy):
    kind: ClassVar[StrategyKind] = StrategyKind.IMAGE_PULL_SECRET


@dataclass(frozen=True)
class PluginStrategy(InjectionStrategy):
    kind: ClassVar[StrategyKind] = StrategyKind.PLUGIN
    action: str | None = None
    args: tuple[Any, ...] = ()


STRATEGY_TYPES: dict[StrategyKind, type[InjectionStrategy]] = {
    cls.kind: cls
    for cls in (
        EnvStrategy,
        EnvFromStrategy,
        VolumeStrategy,
        AnnotationStrategy,
        ImagePullSecretStrategy,
        PluginStrategy,
    )
}


def build_strategy(kind: StrategyKind | str, **options: Any) -> InjectionStrategy:
    """
    Build a strategy variant from its kind name.

    Example:
        >>> build_strategy("env", key="password")
        EnvStrategy(target_path=None, container_index=0, key='password')
    """
    try:
        strategy_kind = StrategyKind(kind)
    except ValueError:
        raise InjectionResolutionError(
            f"Unknown injection strategy '{kind}'",
            context={"supported": [k.value for k in StrategyKind]},
        ) from None

    try:
        return STRATEGY_TYPES[strategy_kind](**options)
    except TypeError as e:
        raise InjectionResolutionError(
            f"Invalid options for strategy '{strategy_kind.value}': {e}",
            context={"options": sorted(options)},
        ) from e


# Injections


@dataclass(frozen=True)
class InjectionMeta:
    secret_name: str
    target_name: str
    strategy: InjectionStrategy


@dataclass(frozen=True)
class Injection:
    """A resolved request to place one provider payload at one resource path."""

    provider_id: str
    provider: "BaseProvider"
    resource_id: str
    path: str
    meta: InjectionMeta


# Effects


@dataclass
class PreparedEffect:
    """An artifact derived from a resolved secret, ready to apply."""

    kind: EffectKind
    payload: Any
    provider_name: str | None
    secret_name: str

    @property
    def is_kubectl(self) -> bool:
        return self.kind == EffectKind.KUBECTL


# Merge provenance


@dataclass(frozen=True)
class SecretOrigin:
    """One contribution to a merge destination and where it came from."""

    key: str
    value: Any
    source: str
    provider_name: str | None
    manager_name: str
    stack_name: str
    origin_path: str

    @classmethod
    def for_effect(
        cls,
        key: str,
        value: Any,
        effect: PreparedEffect,
        manager_name: str,
        stack_name: str,
    ) -> "SecretOrigin":
        provider_name = effect.provider_name or "<default>"
        return cls(
            key=key,
            value=value,
            source=effect.secret_name,
            provider_name=effect.provider_name,
            manager_name=manager_name,
            stack_name=stack_name,
            origin_path=f"{stack_name}/{manager_name}/{provider_name}/{effect.secret_name}",
        )
