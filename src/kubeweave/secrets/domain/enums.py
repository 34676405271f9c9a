"""
Secret domain enums.

Values are the names used in project configuration, so they double as the
wire form of each member.
"""

from enum import Enum


class StrategyKind(str, Enum):
    """How a provider's payload is wired into a workload."""

    ENV = "env"
    ENV_FROM = "envFrom"
    VOLUME = "volume"
    ANNOTATION = "annotation"
    IMAGE_PULL_SECRET = "imagePullSecret"
    PLUGIN = "plugin"


class EffectKind(str, Enum):
    """Kind of artifact a provider produces from a resolved secret."""

    CUSTOM = "custom"
    KUBECTL = "kubectl"  # Kubernetes manifest applied to the cluster


class ConflictScope(str, Enum):
    """
    Where two contributions to the same destination came from.

    Ordered from least to most specific.
    """

    INTRA_PROVIDER = "intraProvider"  # Same provider, same manager, same stack
    CROSS_PROVIDER = "crossProvider"  # Different providers in one manager
    INTRA_STACK = "intraStack"  # Different managers in one stack
    CROSS_STACK = "crossStack"  # Different stacks


class ConflictStrategy(str, Enum):
    """What to do when a destination receives a second contribution."""

    OVERWRITE = "overwrite"
    ERROR = "error"
    AUTO_MERGE = "autoMerge"
