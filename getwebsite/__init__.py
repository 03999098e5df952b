"""getwebsite: mirror a website and its media to local storage."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("getwebsite")
except PackageNotFoundError:
    __version__ = "0.0.0+dev"
