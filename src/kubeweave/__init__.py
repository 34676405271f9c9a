"""
kubeweave - Kubernetes secret orchestration and injection.

Resolves secret values from connectors, turns them into provider effects
and wires provider payloads into composed manifests.
"""

__version__ = "0.1.0"
