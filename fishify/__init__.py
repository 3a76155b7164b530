"""fishify - Spotify playback control for chat bots and the command line"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fishify")
except PackageNotFoundError:
    __version__ = "dev"
