"""Tests for project config loading"""

import pytest

from kubeweave.config.project import ProjectConfig, load_project_config
from kubeweave.secrets.application.secret_manager import SecretManager
from kubeweave.shared.domain.exceptions import ConfigurationError

VALID_CONFIG = """
from kubeweave.config.project import ProjectConfig
from kubeweave.secrets.application.secret_manager import SecretManager

config = ProjectConfig(secret_spec=SecretManager(name="main"))
"""


def test_loads_config_object(tmp_path):
    """The module's `config` is returned"""
    path = tmp_path / "kubeweave_config.py"
    path.write_text(VALID_CONFIG)

    config = load_project_config(path)

    assert isinstance(config, ProjectConfig)
    assert isinstance(config.secret_spec, SecretManager)
    assert config.secret_spec.name == "main"


def test_missing_file(tmp_path):
    """A missing file is a configuration error"""
    with pytest.raises(ConfigurationError, match="Config file not found"):
        load_project_config(tmp_path / "nope.py")


def test_missing_config_attribute(tmp_path):
    """Modules must define `config`"""
    path = tmp_path / "empty.py"
    path.write_text("value = 1\n")

    with pytest.raises(ConfigurationError, match="must define"):
        load_project_config(path)


def test_import_failure_wrapped(tmp_path):
    """Errors raised while importing become configuration errors"""
    path = tmp_path / "broken.py"
    path.write_text("raise RuntimeError('boom')\n")

    with pytest.raises(ConfigurationError, match="boom"):
        load_project_config(path)
