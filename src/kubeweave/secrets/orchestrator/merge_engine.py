"""
Conflict resolution for effects that write the same destination.

Every destination key keeps an ordered history of its contributions. The
first contribution is the baseline; each later one is classified into a
scope by comparing it with the first, and that scope's strategy decides
whether it overwrites, merges or fails.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from kubeweave.secrets.domain.enums import ConflictScope, ConflictStrategy
from kubeweave.secrets.domain.models import SecretOrigin
from kubeweave.shared.domain.exceptions import ConfigurationError, ConflictError
from kubeweave.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONFLICT_STRATEGIES: dict[ConflictScope, ConflictStrategy] = {
    ConflictScope.INTRA_PROVIDER: ConflictStrategy.AUTO_MERGE,
    ConflictScope.CROSS_PROVIDER: ConflictStrategy.ERROR,
    ConflictScope.INTRA_STACK: ConflictStrategy.ERROR,
    ConflictScope.CROSS_STACK: ConflictStrategy.ERROR,
}


class ConflictOptions(BaseModel):
    """
    Per-scope conflict strategies.

    Unset scopes use DEFAULT_CONFLICT_STRATEGIES. With `strict`, every scope
    is 'error' and relaxing any of them is rejected.

    Example:
        >>> ConflictOptions(strategies={"crossStack": "overwrite"})
    """

    model_config = ConfigDict(frozen=True)

    strategies: dict[ConflictScope, ConflictStrategy] = Field(default_factory=dict)
    strict: bool = False

    def resolved_strategies(self) -> dict[ConflictScope, ConflictStrategy]:
        """
        Effective strategy for every scope.

        Raises:
            ConfigurationError: If strict mode is combined with a non-'error' strategy
        """
        if self.strict:
            relaxed = {
                scope.value: strategy.value
                for scope, strategy in self.strategies.items()
                if strategy != ConflictStrategy.ERROR
            }
            if relaxed:
                raise ConfigurationError(
                    f"Strict conflict mode forbids relaxing strategies: {relaxed}",
                    context={"relaxed": relaxed},
                )
            return {scope: ConflictStrategy.ERROR for scope in ConflictScope}
        return {**DEFAULT_CONFLICT_STRATEGIES, **self.strategies}


@dataclass
class MergeResult:
    """
    Final value and contribution history per destination key, both in first-seen order.

    `winners` holds, per key, the history index of the contribution whose
    value was last taken whole (the first one, or the latest overwrite).
    An autoMerge union keeps the previous winner.
    """

    values: dict[str, Any] = field(default_factory=dict)
    history: dict[str, list[SecretOrigin]] = field(default_factory=dict)
    winners: dict[str, int] = field(default_factory=dict)


class SecretMergeEngine:
    def __init__(self, options: ConflictOptions | None = None):
        self.options = options or ConflictOptions()
        self.strategies = self.options.resolved_strategies()

    @staticmethod
    def compute_scope(first: SecretOrigin, incoming: SecretOrigin) -> ConflictScope:
        """Most specific difference between two contributions wins."""
        if first.stack_name != incoming.stack_name:
            return ConflictScope.CROSS_STACK
        if first.manager_name != incoming.manager_name:
            return ConflictScope.INTRA_STACK
        if first.provider_name != incoming.provider_name:
            return ConflictScope.CROSS_PROVIDER
        return ConflictScope.INTRA_PROVIDER

    def strategy_for(self, scope: ConflictScope) -> ConflictStrategy:
        return self.strategies[scope]

    def merge(self, origins: Iterable[SecretOrigin]) -> MergeResult:
        result = MergeResult()
        for origin in origins:
            self.add(result, origin)
        return result

    def add(self, result: MergeResult, origin: SecretOrigin) -> None:
        """
        Fold one contribution into `result`.

        Raises:
            ConflictError: If the destination is taken and the scope's strategy is 'error'
        """
        history = result.history.get(origin.key)
        if history is None:
            result.history[origin.key] = [origin]
            result.values[origin.key] = origin.value
            result.winners[origin.key] = 0
            return

        scope = self.compute_scope(history[0], origin)
        strategy = self.strategy_for(scope)
        previous = history[-1]

        if strategy == ConflictStrategy.ERROR:
            raise ConflictError(
                f"Conflict on '{origin.key}' ({scope.value}): written by {previous.origin_path} "
                f"and {origin.origin_path}. Set the '{scope.value}' conflict strategy to "
                f"'overwrite' or 'autoMerge' to allow it.",
                context={
                    "key": origin.key,
                    "scope": scope.value,
                    "origins": [item.origin_path for item in history] + [origin.origin_path],
                },
            )

        current = result.values[origin.key]
        if (
            strategy == ConflictStrategy.AUTO_MERGE
            and isinstance(current, dict)
            and isinstance(origin.value, dict)
        ):
            result.values[origin.key] = {**current, **origin.value}
            logger.debug("secret_conflict_merged", key=origin.key, scope=scope.value, incoming=origin.origin_path)
        else:
            result.values[origin.key] = origin.value
            result.winners[origin.key] = len(history)
            logger.info(
                "secret_conflict_overwritten",
                key=origin.key,
                scope=scope.value,
                strategy=strategy.value,
                previous=previous.origin_path,
                incoming=origin.origin_path,
            )

        history.append(origin)
