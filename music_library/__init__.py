"Single-user music catalog kept in a JSON document."

from importlib import metadata

from .catalog import SongLibrary
from .models import LoadFailure, SaveFailure, Song
from .prompt_io import BufferPromptIO, ConsolePromptIO
from .storage import FileStorage, MemoryStorage

try:
    __version__ = metadata.version("music-library")
except metadata.PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.0.0"

__all__ = [
    "BufferPromptIO",
    "ConsolePromptIO",
    "FileStorage",
    "LoadFailure",
    "MemoryStorage",
    "SaveFailure",
    "Song",
    "SongLibrary",
    "__version__",
]
