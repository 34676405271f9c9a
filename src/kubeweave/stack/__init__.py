"""Minimal stack and resource composition."""

from kubeweave.stack.composer import ResourceComposer
from kubeweave.stack.stack import Stack

__all__ = ["ResourceComposer", "Stack"]
