"""pygor - best-effort Python to Go transliterator."""

__version__ = "0.1.0"
