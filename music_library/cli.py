from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import yaml
from pydantic import ValidationError

from . import selftest
from .catalog import SongLibrary
from .config import Settings, find_config
from .prompt_io import ConsolePromptIO, PromptIO
from .storage import FileStorage

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}

MENU = (
    "\n--- Musikbibliothek ---",
    "1) Song hinzufügen",
    "2) Songs suchen",
    "3) Alle Songs anzeigen",
    "4) Song löschen",
    "5) Song bearbeiten",
    "0) Beenden",
)


class ColorFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


def configure_logging(level: str, warning_log: Optional[Path] = None) -> None:
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    color_handler = logging.StreamHandler(sys.stderr)
    color_handler.setFormatter(ColorFormatter(LOG_FORMAT))
    root_logger.addHandler(color_handler)

    if warning_log is not None:
        file_handler = logging.FileHandler(warning_log, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.WARNING)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(file_handler)


def run_menu(library: SongLibrary, prompt_io: PromptIO) -> None:
    while True:
        for line in MENU:
            prompt_io.write_line(line)
        prompt_io.write("Auswahl: ")
        choice = prompt_io.read_line()
        if choice is None:
            prompt_io.write_line()
            return
        match choice:
            case "0":
                return
            case "1":
                library.add_song()
            case "2":
                library.search_songs()
            case "3":
                library.show_all_songs()
            case "4":
                library.remove_song()
            case "5":
                library.update_song()
            case _:
                prompt_io.write_line("Ungültige Eingabe!")


def load_settings(args: argparse.Namespace) -> Settings:
    config_path = find_config(args.config)
    raw = {} if config_path is None else Settings.load(config_path).model_dump()
    if args.data_file is not None:
        raw.setdefault("library", {})["data_file"] = args.data_file
    if args.log_level is not None:
        raw.setdefault("logging", {})["level"] = args.log_level
    return Settings.model_validate(raw)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Music library catalog")
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument(
        "--data-file", type=Path, help="Catalog JSON document (overrides config)"
    )
    parser.add_argument("--log-level", default=None, help="Python logging level")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("repl", help="Interactive menu (default)")
    subparsers.add_parser("test", help="Run the built-in self-test and exit")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "test":
        raise SystemExit(selftest.run())

    try:
        settings = load_settings(args)
    except (OSError, yaml.YAMLError) as exc:
        parser.exit(2, f"Could not read config: {exc}\n")
    except ValidationError as exc:
        parser.exit(2, f"Invalid config:\n{exc}\n")

    configure_logging(settings.logging.level, settings.logging.warning_log)
    logger = logging.getLogger(__name__)
    logger.debug("Using catalog %s", settings.library.data_file)

    prompt_io = ConsolePromptIO()
    library = SongLibrary(
        prompt_io,
        FileStorage(settings.library.encoding),
        settings.library.data_file,
        indent=settings.library.indent,
    )

    match args.command:
        case None | "repl":
            library.load()
            run_menu(library, prompt_io)
        case _:
            parser.error("Unknown command")
