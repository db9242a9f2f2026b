"""rops - deploy Helm charts and keep Metablock blocks in sync."""

__version__ = "0.1.0"
