"""Full-screen terminal front end built on prompt_toolkit."""

import asyncio
import logging

from prompt_toolkit import Application
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl

from core.errors import InvalidInputError
from core.events import (
    Backspace,
    FatalError,
    Intent,
    Keystroke,
    RequestQuit,
    RequestReset,
    RequestToggle,
    TimerTick,
)
from core.models import SessionSnapshot
from core.session import SessionStateMachine
from ui.render import render
from ui.styles import build_style
from utils.config import AppSettings

log = logging.getLogger("typetester.terminal_app")


class TerminalApp:
    """Feeds key presses and refresh ticks to a session and draws its snapshots.

    All events are dispatched from the prompt_toolkit event loop, so the
    session sees them strictly in arrival order.
    """

    def __init__(self, session: SessionStateMachine, settings: AppSettings):
        """Initialize terminal app.

        Args:
            session: Session to drive
            settings: Key bindings and refresh interval
        """
        self.session = session
        self.settings = settings
        self.app = Application(
            layout=Layout(Window(FormattedTextControl(self._render_current))),
            key_bindings=self._build_key_bindings(),
            style=build_style(),
            full_screen=True,
        )

    def _build_key_bindings(self) -> KeyBindings:
        kb = KeyBindings()

        @kb.add(self.settings.quit_key, eager=True)
        def _(event):
            self.dispatch(RequestQuit())

        @kb.add(self.settings.reset_key, eager=True)
        def _(event):
            self.dispatch(RequestReset())

        @kb.add(self.settings.toggle_key, eager=True)
        def _(event):
            self.dispatch(RequestToggle())

        @kb.add(Keys.Backspace)
        def _(event):
            self.dispatch(Backspace())

        @kb.add(Keys.BracketedPaste)
        def _(event):
            for char in event.data:
                if char.isprintable():
                    self.dispatch(Keystroke(char))

        @kb.add(Keys.Any)
        def _(event):
            for char in event.data:
                if char.isprintable():
                    self.dispatch(Keystroke(char))

        return kb

    def _render_current(self) -> FormattedText:
        try:
            return FormattedText(self._render_snapshot())
        except Exception as e:
            log.exception("Unexpected error while drawing")
            self._apply(self.session.handle(FatalError(e, "Unexpected error while drawing: ")))

        failure = self.session.failure
        message = failure.message if failure is not None else "Unexpected error while drawing"
        return FormattedText([("class:error", message)])

    def _render_snapshot(self) -> list:
        return render(
            self.session.snapshot(),
            toggle_key=self.settings.toggle_key,
            reset_key=self.settings.reset_key,
            quit_key=self.settings.quit_key,
        )

    def dispatch(self, event: object) -> tuple[Intent, ...]:
        """Hand one event to the session and act on the returned intents."""
        try:
            intents = self.session.handle(event)
        except InvalidInputError as e:
            log.warning(f"Ignored {type(event).__name__}: {e}")
            return ()
        except Exception as e:
            log.exception(f"Unexpected error while handling {type(event).__name__}")
            intents = self.session.handle(FatalError(e, "Unexpected error: "))

        self._apply(intents)
        return intents

    def _apply(self, intents: tuple[Intent, ...]) -> None:
        for intent in intents:
            if intent == Intent.REDRAW:
                self.app.invalidate()
            elif intent == Intent.SESSION_FINISHED:
                log.info("Attempt finished")
            elif intent == Intent.SHUTDOWN and self.app.is_running:
                self.app.exit(result=self.session.snapshot())

    async def _tick(self) -> None:
        interval = self.settings.refresh_interval_ms / 1000.0
        while True:
            await asyncio.sleep(interval)
            self.dispatch(TimerTick())

    def _start_ticker(self) -> None:
        self.app.create_background_task(self._tick())

    def run(self) -> SessionSnapshot:
        """Run until quit or a fatal error; return the final snapshot."""
        log.info("Starting terminal UI")
        result = self.app.run(pre_run=self._start_ticker)
        if result is None:
            result = self.session.snapshot()
        log.info(f"Terminal UI exited in phase {result.phase.value}")
        return result
