"""
kubectl apply shim.

Each manifest is written to a temporary JSON file, applied with
`kubectl apply -f`, and the file is removed whatever the outcome.
"""

import json
import os
import tempfile
import uuid
from pathlib import Path
from typing import Any

from kubeweave.shared.domain.exceptions import ApplyError
from kubeweave.shared.infrastructure.config import settings
from kubeweave.shared.infrastructure.execution.command_executor import CommandExecutor, CommandResult
from kubeweave.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class KubectlExecutor:
    def __init__(
        self,
        kubectl_path: str | None = None,
        executor: CommandExecutor | None = None,
        timeout: float | None = None,
        temp_dir: str | Path | None = None,
    ):
        self.kubectl_path = kubectl_path or settings.kubectl_path
        self.executor = executor or CommandExecutor(default_timeout=timeout or settings.kubectl_timeout)
        self.temp_dir = Path(temp_dir) if temp_dir is not None else Path(tempfile.gettempdir())

    def _write_manifest(self, manifest: dict[str, Any]) -> Path:
        path = self.temp_dir / f"kubeweave-secret-{uuid.uuid4().hex}.json"
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(manifest, handle)
        return path

    async def apply_async(self, manifest: dict[str, Any]) -> CommandResult:
        """
        Apply one manifest to the cluster.

        Raises:
            ApplyError: If kubectl exits non-zero, times out or cannot be started
        """
        metadata = manifest.get("metadata") or {}
        target = f"{manifest.get('kind', 'object')}/{metadata.get('name', '?')}"
        path = self._write_manifest(manifest)
        try:
            result = await self.executor.run_async([self.kubectl_path, "apply", "-f", str(path)])
        finally:
            path.unlink(missing_ok=True)

        if not result.is_success:
            raise ApplyError(
                f"kubectl apply failed for {target}: {result.stderr.strip() or f'exit code {result.exit_code}'}",
                context={"target": target, "exit_code": result.exit_code},
            )

        logger.info("kubectl_applied", target=target, namespace=metadata.get("namespace"))
        return result
