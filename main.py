#!/usr/bin/env python3
"""TypeTester - terminal typing speed trainer."""

import argparse
import logging
import os
import sqlite3
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from prompt_toolkit import print_formatted_text
from prompt_toolkit.formatted_text import FormattedText

from core.errors import EntropyError, InvalidInputError, WordBankError
from core.models import FailureRecord, SessionPhase, SessionSnapshot
from core.phrase_generator import make_random_source
from core.session import SessionStateMachine
from core.word_bank import load_word_bank
from ui.render import render
from ui.styles import build_style
from ui.terminal_app import TerminalApp
from utils.config import LOG_LEVELS, AppSettings, Config

log = logging.getLogger("typetester")


def state_dir() -> Path:
    """XDG state directory holding the log file."""
    xdg_state_home = os.environ.get("XDG_STATE_HOME", str(Path.home() / ".local" / "state"))
    return Path(xdg_state_home) / "typetester"


def data_dir() -> Path:
    """XDG data directory holding the settings database."""
    xdg_data_home = os.environ.get("XDG_DATA_HOME", str(Path.home() / ".local" / "share"))
    return Path(xdg_data_home) / "typetester"


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> Path:
    """Log to a rotating file; the terminal belongs to the UI.

    Returns:
        Path of the log file
    """
    if log_file is None:
        log_file = state_dir() / "typetester.log"
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # 1MB per file, keep 3 backups
    file_handler = RotatingFileHandler(log_file, maxBytes=1024 * 1024, backupCount=3)
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[file_handler],
        force=True,
    )
    return log_file


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="typetester",
        description="Type a random phrase as fast and accurately as you can.",
    )
    parser.add_argument("--wordbank", type=Path, help="Word list, one word per line")
    parser.add_argument("--words", type=int, help="Words per phrase")
    parser.add_argument("--seed", type=int, help="Seed for reproducible phrases")
    parser.add_argument(
        "--config-db",
        type=Path,
        default=None,
        help="Settings database (default: XDG data dir)",
    )
    parser.add_argument("--log-level", choices=LOG_LEVELS, help="Log file verbosity")
    return parser.parse_args(argv)


def print_snapshot(snapshot: SessionSnapshot, settings: AppSettings) -> None:
    """Print the final view after the full-screen UI has closed."""
    fragments = render(
        snapshot,
        toggle_key=settings.toggle_key,
        reset_key=settings.reset_key,
        quit_key=settings.quit_key,
    )
    print_formatted_text(FormattedText(fragments), style=build_style())


def print_failure(failure: FailureRecord) -> None:
    print_formatted_text(
        FormattedText([("class:error", failure.message)]), style=build_style()
    )


def build_session(args: argparse.Namespace, settings: AppSettings) -> SessionStateMachine:
    """Load the word bank and create the session.

    Raises:
        WordBankError: If the word list cannot be loaded
        EntropyError: If no seed was given and the OS cannot provide one
        InvalidInputError: If the settings cannot produce a phrase
    """
    words = load_word_bank(Path(settings.word_bank_path))
    rng = make_random_source(args.seed)
    return SessionStateMachine(words, word_count=settings.word_count, rng=rng)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    config_db = args.config_db or data_dir() / "settings.db"
    try:
        config = Config(config_db)
        settings = config.settings(
            word_bank_path=str(args.wordbank) if args.wordbank else None,
            word_count=args.words,
            log_level=args.log_level,
        )
    except ValueError as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        return 1
    except (OSError, sqlite3.Error) as e:
        log.error(f"Cannot open settings database {config_db}: {e}")
        print(f"Cannot open settings database {config_db}: {e}", file=sys.stderr)
        return 1

    log_file = setup_logging(settings.log_level)
    log.info(f"Starting TypeTester (log: {log_file}, settings: {config_db})")

    try:
        session = build_session(args, settings)
    except WordBankError as e:
        log.error(str(e))
        print_failure(FailureRecord.from_exception(e, "Fatal error while loading word bank: "))
        return 1
    except EntropyError as e:
        log.error(str(e))
        print_failure(FailureRecord.from_exception(e.cause, e.note))
        return 1
    except InvalidInputError as e:
        log.error(f"Cannot generate a phrase: {e}")
        print_failure(FailureRecord.from_exception(e, "Cannot generate a phrase: "))
        return 1

    final = TerminalApp(session, settings).run()
    print_snapshot(final, settings)

    log.info("TypeTester shutdown complete")
    return 1 if final.phase == SessionPhase.ERRORING else 0


if __name__ == "__main__":
    sys.exit(main())
