from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

if TYPE_CHECKING:
    from .prompt_io import PromptIO

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_INT_PATTERN = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)[ \t\n\v\f\r]*")

TITLE = "Title"
ARTIST = "Artist"
ALBUM = "Album"
GENRE = "Genre"
DURATION = "Duration"
TEXT_KEYS = (TITLE, ARTIST, ALBUM, GENRE)


@dataclass(frozen=True, slots=True)
class Song:
    title: str = ""
    artist: str = ""
    album: str = ""
    genre: str = ""
    duration: int = 0

    def render(self) -> str:
        return (
            f"Titel: {self.title} | Künstler: {self.artist} | Album: {self.album}"
            f" | Genre: {self.genre} | Dauer: {self.duration}s"
        )

    def display(self, prompt_io: "PromptIO") -> None:
        prompt_io.write_line(self.render())

    def matches(self, needle: str) -> bool:
        """Case-insensitive substring match on the four text fields.

        ``needle`` is expected to be lowercased already.
        """
        return any(
            needle in value.lower()
            for value in (self.title, self.artist, self.album, self.genre)
        )

    def to_document(self) -> Dict[str, object]:
        return {
            TITLE: self.title,
            ARTIST: self.artist,
            ALBUM: self.album,
            GENRE: self.genre,
            DURATION: self.duration,
        }

    @classmethod
    def from_document(cls, payload: Mapping[str, Any]) -> "Song":
        texts = [_text_field(payload, key) for key in TEXT_KEYS]
        duration = payload.get(DURATION, 0)
        # bool is an int subclass; the document format only allows real integers
        if isinstance(duration, bool) or not isinstance(duration, int):
            raise ValueError(f"{DURATION} must be an integer, got {duration!r}")
        if duration < INT32_MIN or duration > INT32_MAX:
            raise ValueError(f"{DURATION} {duration} is outside the 32-bit range")
        return cls(*texts, duration=duration)


class CatalogError(Exception):
    """Raised inside the catalog when persisting fails; recovered by the caller."""


class LoadFailure(CatalogError):
    """The catalog document exists but could not be read or decoded."""


class SaveFailure(CatalogError):
    """The catalog document could not be encoded or written."""


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse a signed 32-bit integer from user input, or return None."""
    if value is None:
        return None
    match = _INT_PATTERN.fullmatch(value)
    if not match:
        return None
    number = int(match.group(1))
    if number < INT32_MIN or number > INT32_MAX:
        return None
    return number


def _text_field(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string, got {value!r}")
    return value
