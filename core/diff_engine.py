"""Position-by-position comparison of typed text against the reference phrase."""

from enum import Enum

from core.errors import OutOfRangeError


class Mark(str, Enum):
    """Classification of one typed position."""

    HIT = "hit"
    MISS = "miss"


def _check_length(phrase: str, typed: str) -> None:
    if len(typed) > len(phrase):
        raise OutOfRangeError(
            f"typed buffer ({len(typed)} chars) is longer than phrase ({len(phrase)} chars)"
        )


def classify_at(phrase: str, typed: str, index: int) -> Mark:
    """Classify a single typed position.

    Args:
        phrase: Reference phrase
        typed: Typed buffer
        index: Position to classify, must be < len(typed)

    Returns:
        Mark.HIT if typed[index] == phrase[index], else Mark.MISS

    Raises:
        OutOfRangeError: If typed is longer than phrase or index is unwritten
    """
    _check_length(phrase, typed)
    if not 0 <= index < len(typed):
        raise OutOfRangeError(f"index {index} outside typed buffer of {len(typed)} chars")
    return Mark.HIT if typed[index] == phrase[index] else Mark.MISS


def classify(phrase: str, typed: str) -> list[Mark]:
    """Classify every typed position against the phrase.

    Positions at or beyond len(typed) are unwritten and not returned.

    Raises:
        OutOfRangeError: If typed is longer than phrase
    """
    _check_length(phrase, typed)
    return [Mark.HIT if t == p else Mark.MISS for t, p in zip(typed, phrase)]


def is_complete(phrase: str, typed: str) -> bool:
    """Return True only when typed matches phrase exactly.

    Reaching the phrase length with any miss does not complete the attempt.

    Raises:
        OutOfRangeError: If typed is longer than phrase
    """
    _check_length(phrase, typed)
    return len(typed) == len(phrase) and typed == phrase


class DiffCache:
    """Incrementally maintained marks for one typed buffer.

    Mirrors a buffer that only changes by appending or removing its last
    character, so each keystroke classifies a single index.
    """

    def __init__(self, phrase: str):
        """Initialize cache for a phrase.

        Args:
            phrase: Reference phrase the buffer is compared against
        """
        self.phrase = phrase
        self._marks: list[Mark] = []
        self._miss_count = 0

    @property
    def marks(self) -> tuple[Mark, ...]:
        return tuple(self._marks)

    @property
    def miss_count(self) -> int:
        return self._miss_count

    def push(self, typed: str) -> Mark:
        """Classify the newly appended last character of typed.

        Args:
            typed: Buffer after the append, exactly one char longer than
                   the buffer the cache currently mirrors

        Returns:
            Mark for the appended position

        Raises:
            OutOfRangeError: If typed is longer than the phrase or out of
                             step with the cache
        """
        if len(typed) != len(self._marks) + 1:
            raise OutOfRangeError(
                f"cache holds {len(self._marks)} marks, buffer has {len(typed)} chars"
            )
        mark = classify_at(self.phrase, typed, len(typed) - 1)
        self._marks.append(mark)
        if mark == Mark.MISS:
            self._miss_count += 1
        return mark

    def pop(self) -> None:
        """Drop the mark of the last position, if any."""
        if self._marks and self._marks.pop() == Mark.MISS:
            self._miss_count -= 1

    def clear(self, phrase: str | None = None) -> None:
        """Forget all marks, optionally switching to a new phrase."""
        if phrase is not None:
            self.phrase = phrase
        self._marks = []
        self._miss_count = 0
