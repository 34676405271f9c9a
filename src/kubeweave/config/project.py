"""
Project configuration.

A project is a Python module exposing a `config` attribute holding a
ProjectConfig. It is imported from an explicit path; there is no discovery.
"""

import importlib.util
from dataclasses import dataclass, field
from pathlib import Path

from kubeweave.secrets.application.secret_manager import SecretManager
from kubeweave.secrets.application.secret_registry import SecretRegistry
from kubeweave.secrets.orchestrator.merge_engine import ConflictOptions
from kubeweave.shared.domain.exceptions import ConfigurationError
from kubeweave.shared.infrastructure.logging import get_logger
from kubeweave.stack.stack import Stack

logger = get_logger(__name__)


@dataclass
class ProjectConfig:
    """
    Everything the orchestrator needs.

    Attributes:
        secret_spec: A single manager, or a registry of managers (one per stack scope)
        conflict: Conflict strategies for the merge engine
        stacks: Stacks built, injections included, by `SecretsOrchestrator.build_stacks`
    """

    secret_spec: SecretManager | SecretRegistry | None = None
    conflict: ConflictOptions = field(default_factory=ConflictOptions)
    stacks: dict[str, Stack] = field(default_factory=dict)


def load_project_config(path: str | Path) -> ProjectConfig:
    """
    Import a project module and return its `config`.

    Raises:
        ConfigurationError: If the file is missing, fails to import, or has no ProjectConfig named `config`
    """
    config_path = Path(path).resolve()
    if not config_path.is_file():
        raise ConfigurationError(f"Config file not found: {config_path}", context={"path": str(config_path)})

    spec = importlib.util.spec_from_file_location(f"kubeweave_project_{config_path.stem}", config_path)
    if spec is None or spec.loader is None:
        raise ConfigurationError(f"Cannot import config file: {config_path}", context={"path": str(config_path)})

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load config file {config_path}: {e}",
            context={"path": str(config_path)},
        ) from e

    config = getattr(module, "config", None)
    if not isinstance(config, ProjectConfig):
        raise ConfigurationError(
            f"Config file {config_path} must define `config = ProjectConfig(...)`",
            context={"path": str(config_path)},
        )

    logger.debug("project_config_loaded", path=str(config_path))
    return config
