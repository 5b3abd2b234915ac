"""Exception types raised by the TypeTester core."""


class TypeTesterError(Exception):
    """Base exception for TypeTester errors."""

    pass


class InvalidInputError(TypeTesterError, ValueError):
    """Exception raised when a caller supplies unusable input.

    Examples are an empty word bank, a non-positive phrase length or a
    keystroke that is not exactly one character.
    """

    pass


class OutOfRangeError(TypeTesterError, IndexError):
    """Exception raised when a typed buffer is longer than its phrase."""

    pass


class WordBankError(TypeTesterError):
    """Exception raised when the word list cannot be loaded."""

    pass


class EntropyError(TypeTesterError):
    """Exception raised when the OS entropy source cannot seed the generator."""

    def __init__(self, cause: BaseException, note: str):
        super().__init__(f"{note}{cause}")
        self.cause = cause
        self.note = note
