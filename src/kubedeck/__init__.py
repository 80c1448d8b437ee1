"""KubeDeck - Kubernetes workbench for manifests, pods and remote debugging."""

__version__ = "1.0.0"
