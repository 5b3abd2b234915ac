"""Pydantic models for TypeTester session data."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from core.diff_engine import Mark
from core.wpm_calculator import calculate_accuracy, calculate_wpm


class SessionPhase(str, Enum):
    """High-level mode of the session. Exactly one is active at a time."""

    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"
    QUITTING = "quitting"
    ERRORING = "erroring"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionPhase.QUITTING, SessionPhase.ERRORING)


class FailureRecord(BaseModel):
    """Cause of the fatal error that ended the session."""

    cause: str = Field(..., description="String form of the failing exception")
    cause_type: str = Field(..., description="Exception class name")
    note: str = Field(default="", description="Human-readable context for the error")

    model_config = ConfigDict(frozen=True, extra="ignore")

    @classmethod
    def from_exception(cls, cause: BaseException, note: str = "") -> "FailureRecord":
        return cls(cause=str(cause), cause_type=type(cause).__name__, note=note)

    @property
    def message(self) -> str:
        """Note followed by the cause, as shown on the error screen."""
        return f"{self.note}{self.cause}"


class AttemptStats(BaseModel):
    """Keystroke counters for the current attempt."""

    keystrokes: int = Field(default=0, ge=0, description="Accepted character keystrokes")
    misses: int = Field(default=0, ge=0, description="Keystrokes that were a miss when typed")
    backspaces: int = Field(default=0, ge=0, description="Characters removed with backspace")

    model_config = ConfigDict(frozen=True, extra="ignore")


class SessionSnapshot(BaseModel):
    """Read-only view of the session handed to the renderer."""

    phase: SessionPhase = Field(..., description="Current session phase")
    phrase: str = Field(..., description="Reference phrase")
    typed: str = Field(default="", description="Characters typed so far")
    marks: tuple[Mark, ...] = Field(default=(), description="Hit/miss per typed position")
    elapsed_ms: int = Field(default=0, ge=0, description="Running time of the attempt (ms)")
    clock_running: bool = Field(default=False, description="Whether the clock is counting")
    failure: FailureRecord | None = Field(default=None, description="Set once in ERRORING")
    stats: AttemptStats = Field(default_factory=AttemptStats)
    attempt: int = Field(default=1, ge=1, description="1-based attempt number")

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def cursor(self) -> int:
        """Index of the next character to type."""
        return len(self.typed)

    @property
    def is_complete(self) -> bool:
        return self.typed == self.phrase

    @property
    def wpm(self) -> float:
        return calculate_wpm(len(self.typed), self.elapsed_ms)

    @property
    def accuracy(self) -> float:
        return calculate_accuracy(self.stats.keystrokes, self.stats.misses)
