"""Project configuration loading."""

from kubeweave.config.project import ProjectConfig, load_project_config

__all__ = ["ProjectConfig", "load_project_config"]
