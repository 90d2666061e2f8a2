"""contentflow — sequential multi-agent content marketing pipeline."""

from contentflow.version import __version__

__all__ = ["__version__"]
