"""Watch sources, write targets, reconcile requests and an in-memory client for Kubernetes-style objects."""

__version__ = "0.1.0"

__all__ = ["client", "reconciler", "resource", "source", "target", "util"]