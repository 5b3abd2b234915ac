"""Events consumed by the session and intents it hands back."""

from dataclasses import dataclass
from enum import Enum

from core.errors import InvalidInputError


@dataclass(frozen=True)
class Keystroke:
    """A printable character typed by the player."""
    char: str

    def __post_init__(self) -> None:
        if len(self.char) != 1:
            raise InvalidInputError(
                f"Keystroke needs exactly one character, got {self.char!r}"
            )


@dataclass(frozen=True)
class Backspace:
    """Remove the last typed character."""


@dataclass(frozen=True)
class RequestStart:
    """Begin a fresh attempt (same as RequestReset)."""


@dataclass(frozen=True)
class RequestReset:
    """Discard the current attempt and begin a fresh one."""


@dataclass(frozen=True)
class RequestToggle:
    """Pause a running attempt or resume a paused one."""


@dataclass(frozen=True)
class RequestQuit:
    """Leave the program."""


@dataclass(frozen=True)
class FatalError:
    """Unrecoverable failure reported by a collaborator."""
    cause: BaseException
    note: str = ""


@dataclass(frozen=True)
class TimerTick:
    """Display refresh tick; never changes session state."""


class Intent(str, Enum):
    """What the UI adapter should do after an event was handled."""

    REDRAW = "redraw"
    CLOCK_RESTARTED = "clock_restarted"
    CLOCK_TOGGLED = "clock_toggled"
    CLOCK_STOPPED = "clock_stopped"
    SESSION_FINISHED = "session_finished"
    SHUTDOWN = "shutdown"
