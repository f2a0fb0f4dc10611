from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .models import LoadFailure, SaveFailure, Song, parse_int
from .prompt_io import PromptIO
from .storage import Storage

logger = logging.getLogger(__name__)

EMPTY_LIBRARY = "Die Bibliothek ist leer."
INVALID_NUMBER = "Ungültige Nummer!"
CONFIRM_TOKEN = "j"
UNCHANGED_HINT = " (leer lassen für unverändert): "


def encode_songs(songs: Iterable[Song], indent: int = 2) -> str:
    return json.dumps(
        [song.to_document() for song in songs],
        indent=indent,
        ensure_ascii=False,
    )


def decode_songs(text: str) -> List[Song]:
    """Decode a catalog document.

    The JSON literal ``null`` stands for an empty catalog. Anything that is not
    an array of objects raises ``ValueError`` (``json.JSONDecodeError`` for
    malformed text).
    """
    payload = json.loads(text)
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise ValueError(f"expected a JSON array, got {type(payload).__name__}")
    songs: List[Song] = []
    for position, entry in enumerate(payload, 1):
        if not isinstance(entry, dict):
            raise ValueError(
                f"entry {position}: expected a JSON object, got {type(entry).__name__}"
            )
        try:
            songs.append(Song.from_document(entry))
        except ValueError as exc:
            raise ValueError(f"entry {position}: {exc}") from exc
    return songs


class SongLibrary:
    """In-memory song catalog mirrored to a single JSON document.

    Every public operation talks to the user through ``prompt_io`` and never
    raises: storage and decoding problems are reported as notices.
    """

    def __init__(
        self,
        prompt_io: PromptIO,
        storage: Storage,
        data_file: Union[str, Path],
        *,
        indent: int = 2,
        songs: Iterable[Song] = (),
    ) -> None:
        self.prompt_io = prompt_io
        self.storage = storage
        self.data_file = data_file
        self.indent = indent
        self._songs: List[Song] = list(songs)

    @property
    def songs(self) -> Tuple[Song, ...]:
        return tuple(self._songs)

    def __len__(self) -> int:
        return len(self._songs)

    def __iter__(self) -> Iterator[Song]:
        return iter(tuple(self._songs))

    # persistence

    def load(self) -> None:
        try:
            present = self.storage.exists(self.data_file)
        except (OSError, ValueError) as exc:
            logger.warning("Failed to check %s: %s", self.data_file, exc)
            self.prompt_io.write_line(f"Fehler beim Laden: {exc}")
            return
        if not present:
            logger.debug("No catalog at %s; starting empty", self.data_file)
            self.prompt_io.write_line("Neue Bibliothek wird erstellt...")
            return
        try:
            songs = self._read_document()
        except LoadFailure as exc:
            logger.warning("Failed to load %s: %s", self.data_file, exc)
            self.prompt_io.write_line(f"Fehler beim Laden: {exc}")
            return
        self._songs = songs
        logger.debug("Loaded %d song(s) from %s", len(songs), self.data_file)
        self.prompt_io.write_line(f"Bibliothek geladen! ({len(songs)} Titel)")

    def save(self) -> bool:
        try:
            self._write_document()
        except SaveFailure as exc:
            logger.warning("Failed to save %s: %s", self.data_file, exc)
            self.prompt_io.write_line(f"Fehler beim Speichern: {exc}")
            return False
        logger.debug("Saved %d song(s) to %s", len(self._songs), self.data_file)
        return True

    def _read_document(self) -> List[Song]:
        try:
            text = self.storage.read_text(self.data_file)
            return decode_songs(text)
        except (OSError, LookupError, ValueError) as exc:
            raise LoadFailure(str(exc)) from exc

    def _write_document(self) -> None:
        try:
            text = encode_songs(self._songs, indent=self.indent)
            self.storage.write_text(self.data_file, text)
        except (OSError, LookupError, TypeError, ValueError) as exc:
            raise SaveFailure(str(exc)) from exc

    # interactive operations

    def add_song(self) -> None:
        title = self._ask("Titel: ")
        artist = self._ask("Künstler: ")
        album = self._ask("Album: ")
        genre = self._ask("Genre: ")
        duration = parse_int(self._ask("Dauer (Sekunden): "))
        if duration is None:
            self.prompt_io.write_line("Ungültige Dauer!")
            return
        self._songs.append(Song(title, artist, album, genre, duration))
        self.save()
        self.prompt_io.write_line("Song hinzugefügt!")

    def search_songs(self) -> List[Song]:
        if not self._songs:
            self.prompt_io.write_line(EMPTY_LIBRARY)
            return []
        needle = self._ask("Suchbegriff: ").lower()
        self.prompt_io.write_line("\n--- Suchergebnisse ---")
        hits = [song for song in self._songs if song.matches(needle)]
        for song in hits:
            song.display(self.prompt_io)
        if not hits:
            self.prompt_io.write_line("Keine Titel gefunden.")
        return hits

    def remove_song(self) -> None:
        index = self._select("Welchen Titel löschen? (Nummer): ")
        if index is None:
            return
        self.prompt_io.write("Lösche: ")
        self._songs[index].display(self.prompt_io)
        confirmation = self._ask("Wirklich löschen? (j/n): ").lower()
        if confirmation != CONFIRM_TOKEN:
            self.prompt_io.write_line("Löschvorgang abgebrochen.")
            return
        del self._songs[index]
        self.save()
        self.prompt_io.write_line("Titel wurde gelöscht!")

    def update_song(self) -> None:
        index = self._select("Welchen Titel bearbeiten? (Nummer): ")
        if index is None:
            return
        song = self._songs[index]
        self.prompt_io.write("Aktuelle Daten: ")
        song.display(self.prompt_io)

        changes: Dict[str, object] = {}
        for attr, label in (
            ("title", "Neuer Titel"),
            ("artist", "Neuer Künstler"),
            ("album", "Neues Album"),
            ("genre", "Neues Genre"),
        ):
            value = self._ask(label + UNCHANGED_HINT)
            if value:
                changes[attr] = value

        value = self._ask("Neue Dauer" + UNCHANGED_HINT)
        if value:
            duration = parse_int(value)
            if duration is not None:
                changes["duration"] = duration
            else:
                logger.debug("Ignoring unparseable duration %r", value)

        self._songs[index] = replace(song, **changes)
        self.save()
        self.prompt_io.write_line("Titel wurde aktualisiert!")

    def show_all_songs(self) -> None:
        self.prompt_io.write_line("\n--- Alle Titel ---")
        for number, song in enumerate(self._songs, 1):
            self.prompt_io.write(f"{number}. ")
            song.display(self.prompt_io)

    # helpers

    def _ask(self, prompt: str) -> str:
        self.prompt_io.write(prompt)
        return self.prompt_io.read_line() or ""

    def _select(self, prompt: str) -> Optional[int]:
        """List the catalog and ask for a 1-based number; return a 0-based index."""
        if not self._songs:
            self.prompt_io.write_line(EMPTY_LIBRARY)
            return None
        self.show_all_songs()
        number = parse_int(self._ask(prompt))
        if number is None or number < 1 or number > len(self._songs):
            self.prompt_io.write_line(INVALID_NUMBER)
            return None
        return number - 1
