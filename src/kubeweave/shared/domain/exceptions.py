"""
Domain exceptions for kubeweave.

Everything fails fast: nothing is retried and nothing is rolled back.
All application errors inherit from KubeweaveError.
"""


class KubeweaveError(Exception):
    """Base class for all kubeweave exceptions."""

    def __init__(self, message: str, context: dict = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ConfigurationError(KubeweaveError):
    """Raised on duplicate registrations, missing managers or invalid merge options."""

    pass


class ResolutionError(KubeweaveError):
    """Raised when a named connector, provider, secret or manager cannot be resolved."""

    pass


class LoadError(KubeweaveError):
    """Raised when a connector cannot load or has not loaded a secret."""

    pass


class ValidationError(KubeweaveError):
    """Raised when a provider rejects the shape of a secret value."""

    pass


class InjectionResolutionError(KubeweaveError):
    """Raised when an injection cannot be resolved to a single resource and path."""

    pass


class ConflictError(KubeweaveError):
    """Raised when two effects write the same destination and the strategy is 'error'."""

    pass


class ApplyError(KubeweaveError):
    """Raised when applying an effect to the cluster fails."""

    pass
