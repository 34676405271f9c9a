"""
Base Connector Interface

All secret sources (environment, Vault, in-memory) inherit from this class.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any


class BaseConnector(ABC):
    """
    Resolves raw secret values from an external source.

    Values are cached per instance: `load_async` fills the cache and `get`
    reads from it. Two connector instances never share a cache.
    """

    def __init__(self, config: Any = None, working_dir: str | Path | None = None):
        self.config = config
        self._working_dir = Path(working_dir) if working_dir is not None else None

    @abstractmethod
    async def load_async(self, names: list[str]) -> None:
        """
        Resolve and cache the given secret names.

        Raises:
            LoadError: On the first name that cannot be resolved

        Note:
            Loading a name twice is harmless.
        """
        pass

    @abstractmethod
    def get(self, name: str) -> Any:
        """
        Return a previously loaded value.

        Raises:
            LoadError: If `name` was never loaded
        """
        pass

    def set_working_dir(self, path: str | Path | None) -> None:
        self._working_dir = Path(path) if path is not None else None

    def get_working_dir(self) -> Path | None:
        return self._working_dir
