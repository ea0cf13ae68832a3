from checkcov._meta import __version__, logger

__all__ = ["__version__", "logger"]
