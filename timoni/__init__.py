"""Types and helpers for Kubernetes application modules, bundles, runtimes and artifacts."""

__version__ = "0.1.0"

__all__ = ["api", "artifacts", "cuevalues", "options", "render"]