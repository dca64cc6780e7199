"""shellmate - a shell wrapper that asks a language model for help."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("shellmate")
except PackageNotFoundError:
    __version__ = "0.0.0"
