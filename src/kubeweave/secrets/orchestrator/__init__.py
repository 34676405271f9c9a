"""Validate/prepare/apply orchestration and conflict resolution."""

from kubeweave.secrets.orchestrator.engine import EffectOptions, ManagerEntry, SecretManagerEngine
from kubeweave.secrets.orchestrator.merge_engine import (
    DEFAULT_CONFLICT_STRATEGIES,
    ConflictOptions,
    MergeResult,
    SecretMergeEngine,
)
from kubeweave.secrets.orchestrator.orchestrator import SecretsOrchestrator

__all__ = [
    "DEFAULT_CONFLICT_STRATEGIES",
    "ConflictOptions",
    "EffectOptions",
    "ManagerEntry",
    "MergeResult",
    "SecretManagerEngine",
    "SecretMergeEngine",
    "SecretsOrchestrator",
]
