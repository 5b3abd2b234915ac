"""Word list loading for phrase generation."""

import logging
from pathlib import Path

from core.errors import WordBankError

log = logging.getLogger("typetester.word_bank")


def load_word_bank(path: Path) -> list[str]:
    """Load candidate words from a text file.

    One word per line. Surrounding whitespace is stripped and blank lines
    are skipped; order and duplicates are kept.

    Args:
        path: Path to the word list

    Returns:
        List of words (never empty)

    Raises:
        WordBankError: If the file cannot be read or holds no words
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            words = [line.strip() for line in f if line.strip()]
    except (OSError, UnicodeDecodeError) as e:
        raise WordBankError(f"Error reading word bank file {path}: {e}") from e

    if not words:
        raise WordBankError(f"Word bank file {path} contains no words")

    log.info(f"Loaded {len(words)} words from {path}")
    return words
