"""
Environment variable connector.

Reads `<prefix><NAME>` from the process environment, optionally after
loading a `.env` file from the working directory.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from kubeweave.secrets.connectors.base import BaseConnector
from kubeweave.shared.domain.exceptions import LoadError
from kubeweave.shared.infrastructure.logging import get_logger
from kubeweave.shared.utils.masking import mask_value

logger = get_logger(__name__)

DEFAULT_ENV_PREFIX = "KUBEWEAVE_SECRET_"


@dataclass
class EnvConnectorConfig:
    prefix: str = DEFAULT_ENV_PREFIX
    allow_dot_env: bool = True
    case_insensitive: bool = False


def _parse_value(raw: str) -> Any:
    """Parse JSON flat objects (scalar values only). Anything else stays a string."""
    try:
        parsed = json.loads(raw)
    except ValueError:
        return raw

    if isinstance(parsed, dict) and all(
        isinstance(v, (str, int, float, bool)) or v is None for v in parsed.values()
    ):
        return parsed
    return raw


class EnvConnector(BaseConnector):
    """Secret values from environment variables."""

    def __init__(
        self,
        prefix: str = DEFAULT_ENV_PREFIX,
        allow_dot_env: bool = True,
        case_insensitive: bool = False,
        working_dir: str | Path | None = None,
    ):
        super().__init__(
            config=EnvConnectorConfig(
                prefix=prefix,
                allow_dot_env=allow_dot_env,
                case_insensitive=case_insensitive,
            ),
            working_dir=working_dir,
        )
        self._secrets: dict[str, Any] = {}

    def _load_dot_env(self) -> None:
        if not self.config.allow_dot_env:
            return
        env_path = (self.get_working_dir() or Path.cwd()) / ".env"
        if env_path.is_file():
            # Variables already in the environment win over .env entries
            load_dotenv(env_path, override=False)
            logger.debug("dot_env_loaded", path=str(env_path))

    def _lookup(self, env_name: str) -> str | None:
        if not self.config.case_insensitive:
            return os.environ.get(env_name)
        wanted = env_name.lower()
        for key, value in os.environ.items():
            if key.lower() == wanted:
                return value
        return None

    async def load_async(self, names: list[str]) -> None:
        self._load_dot_env()

        for name in names:
            env_name = f"{self.config.prefix}{name}"
            raw = self._lookup(env_name)
            if not raw:
                raise LoadError(
                    f"Missing environment variable: {env_name}",
                    context={"secret": name, "prefix": self.config.prefix},
                )
            self._secrets[name] = _parse_value(raw)
            logger.debug("env_secret_loaded", secret=name, masked=mask_value(raw))

    def get(self, name: str) -> Any:
        if name not in self._secrets:
            raise LoadError(f"Secret '{name}' not loaded. Did you call load_async()?", context={"secret": name})
        return self._secrets[name]
