import dataclasses
import json
import unittest

from music_library.catalog import SongLibrary
from music_library.models import Song
from music_library.prompt_io import BufferPromptIO
from music_library.storage import MemoryStorage

DATA_FILE = "music_data.json"


def make_library(*inputs, songs=()):
    prompt_io = BufferPromptIO(inputs=list(inputs))
    storage = MemoryStorage()
    return SongLibrary(prompt_io, storage, DATA_FILE, songs=songs), prompt_io, storage


THREE = (
    Song("First", "A", "X", "Rock", 1),
    Song("Second", "B", "Y", "Pop", 2),
    Song("Third", "C", "Z", "Jazz", 3),
)


class TestAddSong(unittest.TestCase):
    def test_valid_input_appends_and_saves(self) -> None:
        library, prompt_io, storage = make_library(
            "One", "U2", "Achtung Baby", "Rock", "276", songs=[Song("Zero")]
        )
        library.add_song()
        self.assertEqual(library.songs[-1], Song("One", "U2", "Achtung Baby", "Rock", 276))
        self.assertEqual(len(storage.writes), 1)
        self.assertEqual(json.loads(storage.last_written)[1]["Title"], "One")
        self.assertTrue(prompt_io.text().endswith("Song hinzugefügt!\n"))

    def test_prompts_in_order(self) -> None:
        library, prompt_io, _ = make_library("a", "b", "c", "d", "1")
        library.add_song()
        self.assertEqual(
            [out for out in prompt_io.outputs if out.endswith(": ")],
            ["Titel: ", "Künstler: ", "Album: ", "Genre: ", "Dauer (Sekunden): "],
        )

    def test_invalid_duration_aborts_without_saving(self) -> None:
        for bad in ("abc", "", "1.5", "99999999999", None):
            with self.subTest(duration=bad):
                library, prompt_io, storage = make_library("One", "U2", "A", "Rock", bad)
                library.add_song()
                self.assertIn("Ungültige Dauer!", prompt_io.text())
                self.assertNotIn("Song hinzugefügt!", prompt_io.text())
                self.assertEqual(len(library), 0)
                self.assertEqual(storage.writes, [])

    def test_negative_duration_is_accepted(self) -> None:
        library, _, _ = make_library("X", "Y", "Z", "G", "-5")
        library.add_song()
        self.assertEqual(library.songs[0].duration, -5)

    def test_text_is_taken_verbatim(self) -> None:
        library, _, _ = make_library("  spaced ", None, "", "", "0")
        library.add_song()
        self.assertEqual(library.songs[0], Song("  spaced ", "", "", "", 0))


class TestSearchSongs(unittest.TestCase):
    def test_empty_library_never_prompts(self) -> None:
        library, prompt_io, _ = make_library()
        self.assertEqual(library.search_songs(), [])
        self.assertEqual(prompt_io.reads, 0)
        self.assertEqual(prompt_io.text(), "Die Bibliothek ist leer.\n")

    def test_case_insensitive_match(self) -> None:
        library, prompt_io, _ = make_library("HEL", songs=[Song("Hello", "A", "B", "C", 1)])
        hits = library.search_songs()
        self.assertEqual(hits, [Song("Hello", "A", "B", "C", 1)])
        self.assertIn("--- Suchergebnisse ---", prompt_io.text())
        self.assertIn("Titel: Hello", prompt_io.text())
        self.assertNotIn("Keine Titel gefunden.", prompt_io.text())

    def test_matches_any_text_field_in_stored_order(self) -> None:
        library, prompt_io, _ = make_library("o", songs=THREE)
        hits = library.search_songs()
        # First via its genre, Second via its title
        self.assertEqual(hits, [THREE[0], THREE[1]])
        text = prompt_io.text()
        self.assertLess(text.index("Titel: First"), text.index("Titel: Second"))

    def test_duration_is_not_searched(self) -> None:
        library, prompt_io, _ = make_library("2", songs=THREE)
        self.assertEqual(library.search_songs(), [])
        self.assertIn("Keine Titel gefunden.", prompt_io.text())

    def test_empty_term_lists_everything(self) -> None:
        library, _, _ = make_library("", songs=THREE)
        self.assertEqual(library.search_songs(), list(THREE))

    def test_search_does_not_save(self) -> None:
        library, _, storage = make_library("x", songs=THREE)
        library.search_songs()
        self.assertEqual(storage.writes, [])


class TestShowAllSongs(unittest.TestCase):
    def test_numbers_from_one(self) -> None:
        library, prompt_io, _ = make_library(songs=THREE[:2])
        library.show_all_songs()
        self.assertEqual(
            prompt_io.text(),
            "\n--- Alle Titel ---\n"
            "1. Titel: First | Künstler: A | Album: X | Genre: Rock | Dauer: 1s\n"
            "2. Titel: Second | Künstler: B | Album: Y | Genre: Pop | Dauer: 2s\n",
        )

    def test_empty_library_prints_header_only(self) -> None:
        library, prompt_io, _ = make_library()
        library.show_all_songs()
        self.assertEqual(prompt_io.text(), "\n--- Alle Titel ---\n")


class TestSongsSnapshot(unittest.TestCase):
    def test_songs_is_a_read_only_snapshot(self) -> None:
        library, _, _ = make_library(songs=THREE)
        snapshot = library.songs
        self.assertIsInstance(snapshot, tuple)
        self.assertEqual(list(library), list(THREE))
        with self.assertRaises(AttributeError):
            snapshot.append(Song())  # type: ignore[attr-defined]
        self.assertEqual(len(library), 3)

    def test_records_cannot_be_changed_through_the_snapshot(self) -> None:
        library, _, storage = make_library(songs=[Song("A", "B", "C", "D", 1)])
        with self.assertRaises(dataclasses.FrozenInstanceError):
            library.songs[0].title = "hacked"  # type: ignore[misc]
        self.assertEqual(library.songs[0].title, "A")
        self.assertEqual(storage.writes, [])

    def test_update_leaves_callers_record_untouched(self) -> None:
        original = Song("A", "B", "C", "D", 1)
        library, _, _ = make_library("1", "New", "", "", "", "9", songs=[original])
        library.update_song()
        self.assertEqual(original, Song("A", "B", "C", "D", 1))
        self.assertEqual(library.songs[0], Song("New", "B", "C", "D", 9))


if __name__ == "__main__":
    unittest.main()
