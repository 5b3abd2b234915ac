"""Reference phrase generation from a word bank."""

import logging
import os
import random
from typing import Optional, Sequence

from core.errors import EntropyError, InvalidInputError

log = logging.getLogger("typetester.phrase_generator")

DEFAULT_WORD_COUNT = 10
SEPARATOR = " "


def make_random_source(seed: Optional[int] = None) -> random.Random:
    """Create the random source handed to PhraseGenerator.

    Args:
        seed: Fixed seed for reproducible phrases. If None, the generator
              is seeded from 8 bytes of OS entropy.

    Returns:
        A seeded random.Random instance

    Raises:
        EntropyError: If the OS entropy source is unavailable
    """
    if seed is not None:
        return random.Random(seed)

    try:
        seed_bytes = os.urandom(8)
    except (NotImplementedError, OSError) as e:
        raise EntropyError(e, "Fatal error occurred while generating random seed: ")

    return random.Random(int.from_bytes(seed_bytes, "little", signed=True))


class PhraseGenerator:
    """Builds reference phrases from randomly chosen words."""

    def __init__(self, rng: random.Random):
        """Initialize phrase generator.

        Args:
            rng: Random source used to pick words
        """
        self.rng = rng

    def generate(self, word_count: int, bank: Sequence[str]) -> str:
        """Generate a phrase of word_count words joined by single spaces.

        Words are drawn independently and uniformly, with replacement.
        The bank is never modified.

        Args:
            word_count: Number of words in the phrase
            bank: Candidate words

        Returns:
            The reference phrase

        Raises:
            InvalidInputError: If bank is empty, holds a blank word or
                               word_count is not positive
        """
        if word_count <= 0:
            raise InvalidInputError(f"word_count must be positive, got {word_count}")
        if not bank:
            raise InvalidInputError("word bank is empty")
        if any(not word for word in bank):
            raise InvalidInputError("word bank contains an empty word")

        words = [bank[self.rng.randrange(len(bank))] for _ in range(word_count)]
        phrase = SEPARATOR.join(words)
        log.debug(f"Generated phrase of {word_count} words ({len(phrase)} chars)")
        return phrase
