"""Session state machine driving one typing-test run."""

import logging
import random
import threading
from typing import Callable, Optional, Sequence

from core.clock import Clock
from core.diff_engine import DiffCache, Mark, is_complete
from core.errors import OutOfRangeError
from core.events import (
    Backspace,
    FatalError,
    Intent,
    Keystroke,
    RequestQuit,
    RequestReset,
    RequestStart,
    RequestToggle,
    TimerTick,
)
from core.models import AttemptStats, FailureRecord, SessionPhase, SessionSnapshot
from core.phrase_generator import DEFAULT_WORD_COUNT, PhraseGenerator, make_random_source

log = logging.getLogger("typetester.session")

Intents = tuple[Intent, ...]


class SessionStateMachine:
    """Owns the phase, phrase and typed buffer of a typing test.

    Events are handled one at a time, in arrival order, behind a single
    lock. The machine starts in PLAYING with a freshly generated phrase and
    a running clock. QUITTING and ERRORING are terminal: every later event
    is dropped.
    """

    def __init__(
        self,
        word_bank: Sequence[str],
        *,
        word_count: int = DEFAULT_WORD_COUNT,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize session and begin the first attempt.

        Args:
            word_bank: Candidate words for phrase generation
            word_count: Words per phrase
            rng: Random source for phrase generation (OS-seeded if None)
            clock: Attempt clock (a fresh Clock if None)

        Raises:
            InvalidInputError: If the bank is empty or word_count <= 0
            EntropyError: If rng is None and the OS cannot seed one
        """
        self.word_bank: tuple[str, ...] = tuple(word_bank)
        self.word_count = word_count
        self.generator = PhraseGenerator(rng if rng is not None else make_random_source())
        self.clock = clock if clock is not None else Clock()

        self._lock = threading.Lock()
        self._phase = SessionPhase.PLAYING
        self._failure: Optional[FailureRecord] = None
        self._attempt = 0
        self._phrase = ""
        self._typed = ""
        self._diff = DiffCache(self._phrase)
        self._stats = AttemptStats()

        self._handlers: dict[type, Callable[[object], Intents]] = {
            Keystroke: self._on_keystroke,
            Backspace: self._on_backspace,
            RequestStart: self._on_reset,
            RequestReset: self._on_reset,
            RequestToggle: self._on_toggle,
            RequestQuit: self._on_quit,
            FatalError: self._on_fatal_error,
            TimerTick: self._on_tick,
        }

        self._begin_attempt()

    # ========== Read-only views ==========

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def phrase(self) -> str:
        return self._phrase

    @property
    def typed(self) -> str:
        return self._typed

    @property
    def marks(self) -> tuple[Mark, ...]:
        return self._diff.marks

    @property
    def failure(self) -> Optional[FailureRecord]:
        return self._failure

    @property
    def attempt(self) -> int:
        return self._attempt

    @property
    def stats(self) -> AttemptStats:
        return self._stats

    def snapshot(self) -> SessionSnapshot:
        """Capture a consistent view of the session for rendering."""
        with self._lock:
            return SessionSnapshot(
                phase=self._phase,
                phrase=self._phrase,
                typed=self._typed,
                marks=self._diff.marks,
                elapsed_ms=self.clock.elapsed_ms(),
                clock_running=self.clock.running,
                failure=self._failure,
                stats=self._stats,
                attempt=self._attempt,
            )

    # ========== Event handling ==========

    def handle(self, event: object) -> Intents:
        """Apply one event and return the resulting intents.

        Args:
            event: One of the core.events event types

        Returns:
            Tuple of intents for the UI adapter (empty if ignored)

        Raises:
            TypeError: If event is not a known event type
            InvalidInputError: If a reset could not generate a phrase;
                               the session is left unchanged
        """
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported session event: {event!r}")

        with self._lock:
            if self._phase.is_terminal:
                log.debug(f"Dropping {type(event).__name__} in phase {self._phase.value}")
                return ()

            try:
                return handler(event)
            except OutOfRangeError as e:
                log.error(f"Typed buffer invariant broken: {e}")
                return self._fail(e, "Fatal error while comparing typed text: ")

    def _on_keystroke(self, event: Keystroke) -> Intents:
        if self._phase != SessionPhase.PLAYING:
            return ()

        if len(self._typed) + 1 > len(self._phrase):
            log.debug(f"Rejected keystroke {event.char!r}: buffer already full")
            return ()

        self._typed += event.char
        mark = self._diff.push(self._typed)
        self._stats = self._stats.model_copy(
            update={
                "keystrokes": self._stats.keystrokes + 1,
                "misses": self._stats.misses + (1 if mark == Mark.MISS else 0),
            }
        )

        if len(self._typed) == len(self._phrase) and is_complete(self._phrase, self._typed):
            self._phase = SessionPhase.FINISHED
            self.clock.stop()
            log.info(
                f"Attempt {self._attempt} finished in {self.clock.elapsed_ms()}ms "
                f"({self._stats.misses} misses)"
            )
            return (Intent.CLOCK_STOPPED, Intent.SESSION_FINISHED, Intent.REDRAW)

        return (Intent.REDRAW,)

    def _on_backspace(self, event: Backspace) -> Intents:
        if self._phase != SessionPhase.PLAYING or not self._typed:
            return ()

        self._typed = self._typed[:-1]
        self._diff.pop()
        self._stats = self._stats.model_copy(
            update={"backspaces": self._stats.backspaces + 1}
        )
        return (Intent.REDRAW,)

    def _on_reset(self, event: object) -> Intents:
        # A reset while paused discards the pause and starts a fresh clock
        self._begin_attempt()
        return (Intent.CLOCK_RESTARTED, Intent.REDRAW)

    def _on_toggle(self, event: RequestToggle) -> Intents:
        if self._phase == SessionPhase.PLAYING:
            self._phase = SessionPhase.PAUSED
        elif self._phase == SessionPhase.PAUSED:
            self._phase = SessionPhase.PLAYING
        else:
            return ()

        self.clock.toggle()
        log.debug(f"Toggled to {self._phase.value}")
        return (Intent.CLOCK_TOGGLED, Intent.REDRAW)

    def _on_quit(self, event: RequestQuit) -> Intents:
        self._phase = SessionPhase.QUITTING
        log.info(f"Quit requested during attempt {self._attempt}")
        return (Intent.REDRAW, Intent.SHUTDOWN)

    def _on_fatal_error(self, event: FatalError) -> Intents:
        return self._fail(event.cause, event.note)

    def _on_tick(self, event: TimerTick) -> Intents:
        return (Intent.REDRAW,) if self.clock.running else ()

    # ========== Helpers ==========

    def _begin_attempt(self) -> None:
        """Generate a new phrase and restart the clock.

        The phrase is generated before anything is mutated, so a failure
        leaves the session as it was.
        """
        phrase = self.generator.generate(self.word_count, self.word_bank)

        self._phrase = phrase
        self._typed = ""
        self._diff.clear(phrase)
        self._stats = AttemptStats()
        self._attempt += 1
        self._phase = SessionPhase.PLAYING

        self.clock.reset()
        self.clock.start()
        log.info(f"Attempt {self._attempt} started ({len(phrase)} chars)")

    def _fail(self, cause: BaseException, note: str) -> Intents:
        self._failure = FailureRecord.from_exception(cause, note)
        self._phase = SessionPhase.ERRORING
        log.error(f"Session failed: {self._failure.message}")
        return (Intent.REDRAW, Intent.SHUTDOWN)


__all__ = ["SessionPhase", "SessionStateMachine"]
