"""depscope - health check for npm dependencies."""

__version__ = "0.1.0"
