"""
Secret Manager Engine.

Collects the configured managers and drives their connectors and providers:
loading values for validation and turning them into effects.
"""

import inspect
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from kubeweave.secrets.application.secret_manager import SecretManager
from kubeweave.secrets.application.secret_registry import SecretRegistry
from kubeweave.secrets.connectors.base import BaseConnector
from kubeweave.secrets.domain.models import PreparedEffect
from kubeweave.shared.domain.exceptions import ConfigurationError
from kubeweave.shared.infrastructure.logging import get_logger

if TYPE_CHECKING:
    from kubeweave.config.project import ProjectConfig

logger = get_logger(__name__)

DEFAULT_MANAGER_NAME = "default"


@dataclass
class EffectOptions:
    """Runtime options for a validate/prepare pass."""

    working_dir: str | Path | None = None


@dataclass(frozen=True)
class ManagerEntry:
    """A collected manager. `stack_name` is the scope used for conflict detection."""

    name: str
    stack_name: str
    secret_manager: SecretManager


class SecretManagerEngine:
    def __init__(self, config: "ProjectConfig", effect_options: EffectOptions | None = None):
        self.config = config
        self.effect_options = effect_options or EffectOptions()

    def collect(self) -> dict[str, ManagerEntry]:
        """
        Managers to process, in registration order.

        A single manager is collected as 'default'; a registry yields one
        entry per registered name.

        Raises:
            ConfigurationError: If neither a manager nor a registry is configured
        """
        spec = self.config.secret_spec
        if isinstance(spec, SecretManager):
            managers = {DEFAULT_MANAGER_NAME: ManagerEntry(DEFAULT_MANAGER_NAME, DEFAULT_MANAGER_NAME, spec)}
        elif isinstance(spec, SecretRegistry):
            managers = {name: ManagerEntry(name, name, manager) for name, manager in spec.list().items()}
        else:
            raise ConfigurationError(
                "No secret manager or secret registry configured. Set `secret_spec` in the project config.",
            )

        logger.debug("secret_managers_collected", count=len(managers), names=list(managers))
        return managers

    def _prepare_connector(self, connector: BaseConnector) -> None:
        if connector.get_working_dir() is None and self.effect_options.working_dir is not None:
            connector.set_working_dir(self.effect_options.working_dir)

    async def _load_async(
        self,
        entry: ManagerEntry,
        seen: set[tuple[int, str]],
    ) -> dict[str, object]:
        """Load every secret of one manager, once per (connector, name) within the pass."""
        manager = entry.secret_manager
        values = {}
        for name in manager.get_secrets():
            connector = manager.resolve_connector_for(name)
            self._prepare_connector(connector)
            marker = (id(connector), name)
            if marker not in seen:
                await connector.load_async([name])
                seen.add(marker)
            values[name] = connector.get(name)
        return values

    async def validate_async(self, managers: dict[str, ManagerEntry]) -> None:
        """
        Load every declared secret of every manager.

        Raises:
            LoadError: On the first secret that cannot be loaded
            ResolutionError: If a secret names an unknown connector
        """
        seen: set[tuple[int, str]] = set()
        total = 0
        for entry in managers.values():
            values = await self._load_async(entry, seen)
            total += len(values)
        logger.info("secrets_validated", managers=len(managers), secrets=total)

    async def prepare_manager_effects_async(
        self,
        entry: ManagerEntry,
        seen: set[tuple[int, str]] | None = None,
    ) -> list[PreparedEffect]:
        """Resolve one manager's secrets and run them through their providers."""
        values = await self._load_async(entry, seen if seen is not None else set())
        manager = entry.secret_manager
        effects: list[PreparedEffect] = []
        for name, value in values.items():
            provider, _ = manager.resolve_provider_for(name)
            prepared = provider.prepare(name, value)
            if inspect.isawaitable(prepared):
                prepared = await prepared
            effects.extend(prepared)
        return effects

    async def prepare_effects_async(self, managers: dict[str, ManagerEntry]) -> list[PreparedEffect]:
        seen: set[tuple[int, str]] = set()
        effects: list[PreparedEffect] = []
        for entry in managers.values():
            effects.extend(await self.prepare_manager_effects_async(entry, seen))
        return effects
