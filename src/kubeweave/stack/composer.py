"""
Resource composer.

Keeps the manifests of a stack keyed by resource id and lets secret
injections write into them.
"""

import copy
from typing import Any

from kubeweave.shared.domain.exceptions import InjectionResolutionError, ResolutionError
from kubeweave.shared.utils.path_utils import deep_merge, get_path, has_path, set_path


class ResourceComposer:
    def __init__(self):
        self._resources: dict[str, dict[str, Any]] = {}

    def add_object(self, resource_id: str, config: dict[str, Any]) -> "ResourceComposer":
        if resource_id in self._resources:
            raise InjectionResolutionError(f"Resource '{resource_id}' already exists", context={"resource_id": resource_id})
        self._resources[resource_id] = copy.deepcopy(config)
        return self

    def find_resource_ids_by_kind(self, kind: str) -> list[str]:
        """Ids of resources whose `kind` matches, ignoring case, in insertion order."""
        wanted = kind.lower()
        return [
            resource_id
            for resource_id, resource in self._resources.items()
            if str(resource.get("kind", "")).lower() == wanted
        ]

    def inject(self, resource_id: str, path: str, value: Any) -> None:
        """
        Write `value` at `path`.

        An existing list is extended, an existing dict is deep-merged; any
        other existing value is an error.
        """
        resource = self._resources.get(resource_id)
        if resource is None:
            raise ResolutionError(f"Resource '{resource_id}' not found", context={"registered": list(self._resources)})

        if not has_path(resource, path):
            set_path(resource, path, copy.deepcopy(value))
            return

        existing = get_path(resource, path)
        if isinstance(existing, list) and isinstance(value, list):
            existing.extend(copy.deepcopy(value))
        elif isinstance(existing, dict) and isinstance(value, dict):
            set_path(resource, path, deep_merge(existing, value))
        else:
            raise InjectionResolutionError(
                f"Resource '{resource_id}' already has a value at path '{path}'",
                context={"resource_id": resource_id, "path": path},
            )

    def build(self) -> dict[str, dict[str, Any]]:
        return copy.deepcopy(self._resources)
