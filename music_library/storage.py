from __future__ import annotations

import codecs
import errno
import logging
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Tuple, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class Storage(Protocol):
    def exists(self, path: PathLike) -> bool: ...

    def read_text(self, path: PathLike) -> str: ...

    def write_text(self, path: PathLike, text: str) -> None: ...


class FileStorage:
    """Whole-document storage on the local file system."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def exists(self, path: PathLike) -> bool:
        try:
            info = Path(path).stat()
        except FileNotFoundError:
            return False
        except OSError as exc:
            # Symlink loops, permission problems and over-long names all mean
            # there is no readable catalog at this path.
            logger.debug("Cannot stat %s: %s", path, exc)
            return False
        except ValueError:
            # embedded null byte
            return False
        return stat.S_ISREG(info.st_mode)

    def read_text(self, path: PathLike) -> str:
        # utf-8-sig also accepts documents saved with a byte order mark
        encoding = self.encoding
        if codecs.lookup(encoding).name == "utf-8":
            encoding = "utf-8-sig"
        return Path(path).read_text(encoding=encoding)

    def write_text(self, path: PathLike, text: str) -> None:
        Path(path).write_text(text, encoding=self.encoding)


@dataclass(slots=True)
class MemoryStorage:
    files: Dict[str, str] = field(default_factory=dict)
    writes: List[Tuple[str, str]] = field(default_factory=list)
    read_error: Optional[OSError] = None
    write_error: Optional[OSError] = None

    def exists(self, path: PathLike) -> bool:
        return str(path) in self.files

    def read_text(self, path: PathLike) -> str:
        if self.read_error is not None:
            raise self.read_error
        try:
            return self.files[str(path)]
        except KeyError:
            raise FileNotFoundError(errno.ENOENT, "No such file", str(path)) from None

    def write_text(self, path: PathLike, text: str) -> None:
        if self.write_error is not None:
            raise self.write_error
        self.files[str(path)] = text
        self.writes.append((str(path), text))

    @property
    def last_written(self) -> Optional[str]:
        if not self.writes:
            return None
        return self.writes[-1][1]
