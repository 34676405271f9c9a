"""kubeweave command-line interface."""
