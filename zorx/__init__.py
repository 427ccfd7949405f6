"""zorx -- scaffold a minimal Express backend from the command line."""

__version__ = "0.1.0"
