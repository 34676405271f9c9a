"""
Provider-local effect merging.

Kubernetes Secret providers may emit several effects for the same Secret
(one per secret name). They are folded into a single manifest here.
"""

import copy
from collections.abc import Callable

from kubeweave.secrets.domain.models import PreparedEffect
from kubeweave.shared.domain.exceptions import ConflictError

MergeHandler = Callable[[list[PreparedEffect]], list[PreparedEffect]]


def _is_secret_effect(effect: PreparedEffect) -> bool:
    return effect.is_kubectl and isinstance(effect.payload, dict) and effect.payload.get("kind") == "Secret"


def secret_identity(payload: dict) -> tuple[str, str]:
    metadata = payload.get("metadata") or {}
    return metadata.get("namespace") or "default", metadata.get("name", "")


def create_kubernetes_merge_handler() -> MergeHandler:
    """
    Build a handler that merges Secret effects by namespace/name.

    The first effect of a group is the template; later effects contribute
    their `data` keys. A key written twice raises ConflictError.
    Non-Secret effects are returned unchanged, in order.
    """

    def merge(effects: list[PreparedEffect]) -> list[PreparedEffect]:
        merged: dict[tuple[str, str], PreparedEffect] = {}
        output: list[PreparedEffect] = []

        for effect in effects:
            if not _is_secret_effect(effect):
                output.append(effect)
                continue

            identity = secret_identity(effect.payload)
            existing = merged.get(identity)
            if existing is None:
                first = copy.copy(effect)
                first.payload = copy.deepcopy(effect.payload)
                first.payload.setdefault("data", {})
                merged[identity] = first
                output.append(first)
                continue

            namespace, name = identity
            data = existing.payload["data"]
            for key, value in (effect.payload.get("data") or {}).items():
                if key in data:
                    raise ConflictError(
                        f'[conflict:k8s] Conflict detected: key "{key}" already exists in '
                        f'Secret "{name}" in namespace "{namespace}"',
                        context={"secret": name, "namespace": namespace, "key": key},
                    )
                data[key] = value

        return output

    return merge
