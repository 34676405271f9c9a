"""Cluster-facing infrastructure."""
