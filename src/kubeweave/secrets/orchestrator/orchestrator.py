"""
Secrets Orchestrator.

Entry point for validate and apply: collects managers, prepares effects,
merges effects that share a destination and hands the result to kubectl.

Flow of `prepare_effects_async`:
    1. Prepare each manager's effects (load + provider.prepare)
    2. Provider-local merge (merge_secrets) per provider
    3. Conflict merge across providers, managers and stacks
"""

import copy
import json
from typing import TYPE_CHECKING, Any

from kubeweave.infrastructure.kubectl import KubectlExecutor
from kubeweave.secrets.domain.enums import EffectKind
from kubeweave.secrets.domain.models import PreparedEffect, SecretDefinition, SecretOrigin
from kubeweave.secrets.orchestrator.engine import EffectOptions, ManagerEntry, SecretManagerEngine
from kubeweave.secrets.orchestrator.merge_engine import SecretMergeEngine
from kubeweave.shared.domain.exceptions import ConfigurationError
from kubeweave.shared.infrastructure.logging import get_logger
from kubeweave.shared.utils.masking import censor_secret_payload

if TYPE_CHECKING:
    from kubeweave.config.project import ProjectConfig

logger = get_logger(__name__)


class SecretsOrchestrator:
    """
    Runs one validate/prepare/apply pass over the project's secret managers.

    Every step awaits sequentially, in registration order.
    """

    def __init__(
        self,
        config: "ProjectConfig",
        effect_options: EffectOptions | None = None,
        kubectl: KubectlExecutor | None = None,
    ):
        self.config = config
        self.engine = SecretManagerEngine(config, effect_options)
        # Invalid conflict options raise here, before any secret is loaded
        self.merge_engine = SecretMergeEngine(config.conflict)
        self._kubectl = kubectl

    @property
    def kubectl(self) -> KubectlExecutor:
        if self._kubectl is None:
            self._kubectl = KubectlExecutor()
        return self._kubectl

    def collect(self) -> dict[str, ManagerEntry]:
        return self.engine.collect()

    async def validate_async(self) -> dict[str, ManagerEntry]:
        managers = self.collect()
        await self.engine.validate_async(managers)
        return managers

    def inject_secrets_to_providers(self) -> None:
        """Give each provider the definitions routed to it (explicitly or through the default)."""
        for entry in self.collect().values():
            manager = entry.secret_manager
            default_provider = manager.get_default_provider()
            secrets = manager.get_secrets()
            for provider_name, provider in manager.get_providers().items():
                routed: dict[str, SecretDefinition] = {
                    name: definition
                    for name, definition in secrets.items()
                    if (definition.provider or default_provider) == provider_name
                }
                provider.set_secrets(routed)
                logger.debug("provider_secrets_injected", manager=entry.name, provider=provider_name, count=len(routed))

    def build_stacks(self) -> dict[str, dict[str, dict[str, Any]]]:
        """
        Route definitions to providers (when a secret spec is set), then build every configured stack.

        Returns:
            Manifests per stack name, each keyed by resource id

        Raises:
            ConfigurationError: If the project declares no stacks
            InjectionResolutionError: If a payload cannot be built or injected
        """
        if not self.config.stacks:
            raise ConfigurationError("No stacks found in config", context={"stacks": []})

        if self.config.secret_spec is not None:
            self.inject_secrets_to_providers()
        built = {name: stack.build() for name, stack in self.config.stacks.items()}
        logger.info("stacks_built", stacks=list(built), resources=sum(len(manifests) for manifests in built.values()))
        return built

    async def prepare_effects_async(self) -> list[PreparedEffect]:
        """
        Prepared effects, merged per destination.

        Raises:
            LoadError, ValidationError: From connectors and providers
            ConflictError: If contributions collide under an 'error' strategy
        """
        managers = self.collect()
        seen: set[tuple[int, str]] = set()

        # Each slot is either a passthrough effect or a destination key
        slots: list[PreparedEffect | str] = []
        contributions: dict[str, list[PreparedEffect]] = {}
        origins: list[SecretOrigin] = []

        for entry in managers.values():
            effects = await self.engine.prepare_manager_effects_async(entry, seen)
            for effect in self._merge_by_provider(entry, effects):
                provider = entry.secret_manager.resolve_provider(effect.provider_name)
                identifier = provider.get_effect_identifier(effect)
                if identifier is None:
                    slots.append(effect)
                    continue

                key = f"{effect.kind.value}:{identifier}"
                if key not in contributions:
                    contributions[key] = []
                    slots.append(key)
                contributions[key].append(effect)
                origins.append(
                    SecretOrigin.for_effect(key, self._mergeable_value(effect), effect, entry.name, entry.stack_name)
                )

        merged = self.merge_engine.merge(origins)

        # The winning contribution shapes the rebuilt effect; autoMerge unions keep the earlier one
        result = [
            slot
            if isinstance(slot, PreparedEffect)
            else self._rebuild(contributions[slot][merged.winners[slot]], merged.values[slot])
            for slot in slots
        ]
        logger.info("secret_effects_prepared", managers=len(managers), effects=len(result))
        return result

    def _merge_by_provider(self, entry: ManagerEntry, effects: list[PreparedEffect]) -> list[PreparedEffect]:
        """Run merge_secrets once per provider, keeping providers in first-seen order."""
        grouped: dict[str | None, list[PreparedEffect]] = {}
        for effect in effects:
            grouped.setdefault(effect.provider_name, []).append(effect)

        merged: list[PreparedEffect] = []
        for provider_name, group in grouped.items():
            provider = entry.secret_manager.resolve_provider(provider_name)
            merged.extend(provider.merge_secrets(group))
        return merged

    @staticmethod
    def _mergeable_value(effect: PreparedEffect) -> Any:
        if effect.kind == EffectKind.KUBECTL and isinstance(effect.payload, dict):
            return dict(effect.payload.get("data") or {})
        return effect.payload

    @staticmethod
    def _rebuild(template: PreparedEffect, value: Any) -> PreparedEffect:
        if template.kind == EffectKind.KUBECTL and isinstance(template.payload, dict):
            payload = copy.deepcopy(template.payload)
            payload["data"] = value
        else:
            payload = value
        return PreparedEffect(
            kind=template.kind,
            payload=payload,
            provider_name=template.provider_name,
            secret_name=template.secret_name,
        )

    async def apply_async(self, dry_run: bool = False) -> list[PreparedEffect]:
        """
        Validate, prepare and apply every effect.

        Effects are applied one at a time; the first failure propagates and
        nothing already applied is rolled back.

        Returns:
            The effects that were applied (or would be, in dry-run)
        """
        await self.validate_async()
        effects = await self.prepare_effects_async()

        if not effects:
            logger.warning("no_secrets_to_apply")
            return []

        applied: list[PreparedEffect] = []
        for effect in effects:
            if effect.kind != EffectKind.KUBECTL:
                logger.info("custom_effect_skipped", secret=effect.secret_name, provider=effect.provider_name)
                continue

            if dry_run:
                logger.info(
                    "dry_run_would_apply",
                    secret=effect.secret_name,
                    provider=effect.provider_name,
                    manifest=json.dumps(censor_secret_payload(effect.payload)),
                )
            else:
                await self.kubectl.apply_async(effect.payload)
            applied.append(effect)

        logger.info("secrets_applied", count=len(applied), dry_run=dry_run)
        return applied
