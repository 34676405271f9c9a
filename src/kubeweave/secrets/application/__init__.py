"""Secret declaration and injection building."""

from kubeweave.secrets.application.injection_builder import SecretInjectionBuilder
from kubeweave.secrets.application.injection_context import SecretsInjectionContext
from kubeweave.secrets.application.secret_manager import SecretManager
from kubeweave.secrets.application.secret_registry import SecretRegistry

__all__ = ["SecretInjectionBuilder", "SecretManager", "SecretRegistry", "SecretsInjectionContext"]
