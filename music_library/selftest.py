"""Built-in scenario checks behind ``music-library test``.

Each check drives a ``SongLibrary`` against in-memory doubles, so the harness
never touches the real catalog file.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Tuple

from .catalog import SongLibrary
from .models import Song
from .prompt_io import BufferPromptIO, ConsolePromptIO, PromptIO
from .storage import MemoryStorage

DATA_FILE = "music_data.json"

Check = Tuple[str, Callable[[], None]]


class CheckFailed(Exception):
    pass


def _expect(condition: bool, message: str) -> None:
    if not condition:
        raise CheckFailed(message)


def _expect_in(needle: str, haystack: str, message: str) -> None:
    if needle not in haystack:
        raise CheckFailed(f"{message}\nMissing: {needle!r}\nIn:      {haystack!r}")


def _library(
    *inputs: Optional[str],
    songs: Iterable[Song] = (),
    storage: Optional[MemoryStorage] = None,
) -> Tuple[SongLibrary, BufferPromptIO, MemoryStorage]:
    prompt_io = BufferPromptIO(inputs=list(inputs))
    storage = storage if storage is not None else MemoryStorage()
    return SongLibrary(prompt_io, storage, DATA_FILE, songs=songs), prompt_io, storage


def load_missing_file() -> None:
    library, prompt_io, _ = _library()
    library.load()
    _expect_in("Neue Bibliothek wird erstellt", prompt_io.text(), "new library notice")
    _expect(len(library) == 0, "catalog should be empty")


def load_valid_json() -> None:
    storage = MemoryStorage(
        files={
            DATA_FILE: '[{"Title":"One","Artist":"U2","Album":"Achtung","Genre":"Rock","Duration":276}]'
        }
    )
    library, prompt_io, _ = _library(storage=storage)
    library.load()
    _expect(len(library) == 1, "exactly one song expected")
    _expect_in("Bibliothek geladen! (1 Titel)", prompt_io.text(), "loaded notice")


def load_invalid_json() -> None:
    library, prompt_io, _ = _library(storage=MemoryStorage(files={DATA_FILE: "{ kaputt"}))
    library.load()
    _expect_in("Fehler beim Laden:", prompt_io.text(), "load error notice")


def load_null_document() -> None:
    library, prompt_io, _ = _library(storage=MemoryStorage(files={DATA_FILE: "null"}))
    library.load()
    _expect(len(library) == 0, "catalog should be empty")
    _expect_in("Bibliothek geladen! (0 Titel)", prompt_io.text(), "zero count notice")


def save_writes_json() -> None:
    library, _, storage = _library(songs=[Song("A", "B", "C", "D", 10)])
    library.save()
    _expect(storage.writes[-1][0] == DATA_FILE, "wrong target path")
    _expect_in('"Title": "A"', storage.last_written or "", "document content")


def save_write_fails() -> None:
    storage = MemoryStorage(write_error=PermissionError("nope"))
    library, prompt_io, _ = _library(storage=storage)
    library.save()
    _expect_in("Fehler beim Speichern:", prompt_io.text(), "save error notice")


def add_valid_input() -> None:
    library, prompt_io, storage = _library("One", "U2", "Achtung Baby", "Rock", "276")
    library.add_song()
    _expect(len(library) == 1, "one song expected")
    _expect_in("Song hinzugefügt!", prompt_io.text(), "added notice")
    _expect(storage.last_written is not None, "catalog should be saved")


def add_invalid_duration() -> None:
    library, prompt_io, storage = _library("One", "U2", "Achtung Baby", "Rock", "abc")
    library.add_song()
    _expect_in("Ungültige Dauer!", prompt_io.text(), "invalid duration notice")
    _expect(len(library) == 0, "nothing should be added")
    _expect(not storage.writes, "nothing should be saved")


def add_negative_duration() -> None:
    library, _, _ = _library("X", "Y", "Z", "G", "-5")
    library.add_song()
    _expect(len(library) == 1, "one song expected")
    _expect(library.songs[0].duration == -5, "duration should be -5")


def add_empty_fields() -> None:
    library, _, _ = _library("", "", "", "", "0")
    library.add_song()
    _expect(library.songs == (Song("", "", "", "", 0),), "empty song expected")


def search_empty_library() -> None:
    library, prompt_io, _ = _library()
    library.search_songs()
    _expect_in("Die Bibliothek ist leer.", prompt_io.text(), "empty notice")
    _expect(prompt_io.reads == 0, "should not prompt")


def search_finds_match() -> None:
    library, prompt_io, _ = _library("hel", songs=[Song("Hello", "A", "B", "C", 1)])
    hits = library.search_songs()
    _expect(len(hits) == 1, "one match expected")
    _expect_in("Titel: Hello", prompt_io.text(), "rendered match")


def search_no_match() -> None:
    library, prompt_io, _ = _library("zzz", songs=[Song("Hello", "A", "B", "C", 1)])
    library.search_songs()
    _expect_in("Keine Titel gefunden.", prompt_io.text(), "nothing found notice")


def search_empty_term_lists_all() -> None:
    songs = [Song("A", "B", "C", "D", 1), Song("E", "F", "G", "H", 2)]
    library, prompt_io, _ = _library("", songs=songs)
    hits = library.search_songs()
    _expect(len(hits) == 2, "all songs expected")
    _expect_in("Titel: E", prompt_io.text(), "second song rendered")


def remove_empty_library() -> None:
    library, prompt_io, _ = _library()
    library.remove_song()
    _expect_in("Die Bibliothek ist leer.", prompt_io.text(), "empty notice")


def remove_invalid_index() -> None:
    library, prompt_io, storage = _library("abc", songs=[Song("A", "B", "C", "D", 1)])
    library.remove_song()
    _expect_in("Ungültige Nummer!", prompt_io.text(), "invalid number notice")
    _expect(len(library) == 1 and not storage.writes, "catalog must be unchanged")


def remove_out_of_range() -> None:
    library, prompt_io, storage = _library("2", songs=[Song("A", "B", "C", "D", 1)])
    library.remove_song()
    _expect_in("Ungültige Nummer!", prompt_io.text(), "invalid number notice")
    _expect(len(library) == 1 and not storage.writes, "catalog must be unchanged")


def remove_cancelled() -> None:
    library, prompt_io, storage = _library("1", "n", songs=[Song("A", "B", "C", "D", 1)])
    library.remove_song()
    _expect_in("Löschvorgang abgebrochen.", prompt_io.text(), "cancel notice")
    _expect(len(library) == 1 and not storage.writes, "catalog must be unchanged")


def remove_confirmed() -> None:
    library, prompt_io, storage = _library("1", "j", songs=[Song("A", "B", "C", "D", 1)])
    library.remove_song()
    _expect(len(library) == 0, "song should be removed")
    _expect_in("Titel wurde gelöscht!", prompt_io.text(), "deleted notice")
    _expect(len(storage.writes) == 1, "catalog should be saved once")


def update_empty_library() -> None:
    library, prompt_io, _ = _library()
    library.update_song()
    _expect_in("Die Bibliothek ist leer.", prompt_io.text(), "empty notice")


def update_invalid_index() -> None:
    library, prompt_io, storage = _library("0", songs=[Song("A", "B", "C", "D", 1)])
    library.update_song()
    _expect_in("Ungültige Nummer!", prompt_io.text(), "invalid number notice")
    _expect(not storage.writes, "nothing should be saved")


def update_all_fields_empty() -> None:
    library, prompt_io, storage = _library(
        "1", "", "", "", "", "", songs=[Song("A", "B", "C", "D", 1)]
    )
    library.update_song()
    _expect(library.songs[0] == Song("A", "B", "C", "D", 1), "song must be unchanged")
    _expect_in("Titel wurde aktualisiert!", prompt_io.text(), "updated notice")
    _expect(len(storage.writes) == 1, "catalog should be saved")


def update_invalid_duration_keeps_old() -> None:
    library, _, _ = _library("1", "", "", "", "", "abc", songs=[Song("A", "B", "C", "D", 7)])
    library.update_song()
    _expect(library.songs[0].duration == 7, "duration should stay 7")


def update_valid_duration() -> None:
    library, _, _ = _library("1", "", "", "", "", "99", songs=[Song("A", "B", "C", "D", 7)])
    library.update_song()
    _expect(library.songs[0].duration == 99, "duration should be 99")


def song_display_format() -> None:
    prompt_io = BufferPromptIO()
    Song("T", "A", "Al", "G", 123).display(prompt_io)
    _expect_in(
        "Titel: T | Künstler: A | Album: Al | Genre: G | Dauer: 123s",
        prompt_io.text(),
        "rendering",
    )


CHECKS: List[Check] = [
    (fn.__name__, fn)
    for fn in (
        load_missing_file,
        load_valid_json,
        load_invalid_json,
        load_null_document,
        save_writes_json,
        save_write_fails,
        add_valid_input,
        add_invalid_duration,
        add_negative_duration,
        add_empty_fields,
        search_empty_library,
        search_finds_match,
        search_no_match,
        search_empty_term_lists_all,
        remove_empty_library,
        remove_invalid_index,
        remove_out_of_range,
        remove_cancelled,
        remove_confirmed,
        update_empty_library,
        update_invalid_index,
        update_all_fields_empty,
        update_invalid_duration_keeps_old,
        update_valid_duration,
        song_display_format,
    )
]


def run(
    prompt_io: Optional[PromptIO] = None,
    checks: Optional[List[Check]] = None,
) -> int:
    out = prompt_io or ConsolePromptIO()
    passed = failed = 0
    out.write_line("=== RUNNING SELF-TEST ===")
    for name, check in checks if checks is not None else CHECKS:
        try:
            check()
        except Exception as exc:
            out.write_line(f"[FAIL] {name}")
            out.write_line(str(exc) if isinstance(exc, CheckFailed) else repr(exc))
            out.write_line()
            failed += 1
            continue
        out.write_line(f"[PASS] {name}")
        passed += 1
    out.write_line(f"=== {passed} passed, {failed} failed ===")
    return 1 if failed else 0
