"""HTTP request parsing, content types, a worker thread pool and idle-connection timers."""

__version__ = "0.4.0"
__all__ = ["__version__"]