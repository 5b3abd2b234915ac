"""Speed and accuracy figures for a finished attempt."""


def calculate_wpm(char_count: int, duration_ms: int) -> float:
    """Calculate words per minute.

    Uses the usual convention of five characters per word, spaces included.

    Args:
        char_count: Characters in the completed phrase
        duration_ms: Running time of the attempt in milliseconds

    Returns:
        WPM (words per minute), or 0.0 if duration is zero
    """
    if duration_ms <= 0:
        return 0.0

    words = char_count / 5.0
    minutes = duration_ms / 60000.0
    return words / minutes


def calculate_accuracy(keystrokes: int, misses: int) -> float:
    """Calculate the share of keystrokes that matched the phrase.

    Args:
        keystrokes: Accepted character keystrokes (backspaces excluded)
        misses: Keystrokes classified as a miss when typed

    Returns:
        Accuracy in percent (0-100), 100.0 if nothing was typed
    """
    if keystrokes <= 0:
        return 100.0
    hits = max(0, keystrokes - misses)
    return 100.0 * hits / keystrokes
