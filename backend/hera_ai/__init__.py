"""HERA AI request router: multi-provider routing with fallback, scoring and caching."""

__version__ = "0.1.0"
