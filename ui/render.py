"""Turn session snapshots into styled text fragments.

Every function returns a list of (style, text) tuples, the fragment format
prompt_toolkit's FormattedText accepts. Nothing here touches the terminal.
"""

from core.diff_engine import Mark
from core.models import SessionPhase, SessionSnapshot
from ui.styles import BOX_WIDTH

Fragments = list[tuple[str, str]]

_KEY_LABELS = {
    "enter": "enter",
    "c-m": "enter",
    "escape": "esc",
    "space": "space",
}


def describe_key(key: str) -> str:
    """Convert a prompt_toolkit key name into a help label (c-s -> ctrl+s)."""
    if key in _KEY_LABELS:
        return _KEY_LABELS[key]
    if key.startswith("c-"):
        return "ctrl+" + key[2:]
    return key


def format_elapsed(elapsed_ms: int) -> str:
    """Format milliseconds like 3.042s or 1m05.250s."""
    minutes, rest_ms = divmod(max(0, elapsed_ms), 60000)
    seconds = rest_ms / 1000.0
    if minutes:
        return f"{minutes}m{seconds:06.3f}s"
    return f"{seconds:.3f}s"


def render_help(toggle_key: str, reset_key: str, quit_key: str, running: bool) -> Fragments:
    toggle_action = "stop" if running else "start"
    parts = [
        f"{describe_key(toggle_key)} {toggle_action}",
        f"{describe_key(reset_key)} reset",
        f"{describe_key(quit_key)} quit",
    ]
    return [("class:help", " • ".join(parts))]


def render_typed(snapshot: SessionSnapshot) -> Fragments:
    """Typed text coloured per mark, then cursor and unwritten remainder."""
    fragments: Fragments = []
    for char, mark in zip(snapshot.typed, snapshot.marks):
        style = "class:hit" if mark == Mark.HIT else "class:miss"
        fragments.append((style, char))

    cursor = snapshot.cursor
    if cursor < len(snapshot.phrase):
        fragments.append(("class:cursor", snapshot.phrase[cursor]))
        remainder = snapshot.phrase[cursor + 1:]
    else:
        remainder = ""

    if remainder:
        fragments.append(("class:unwritten", remainder))
    return fragments


def render_playing(
    snapshot: SessionSnapshot, toggle_key: str, reset_key: str, quit_key: str
) -> Fragments:
    fragments: Fragments = [
        ("class:default", f"Elapsed: {format_elapsed(snapshot.elapsed_ms)}\n"),
        ("class:default", f"\n{snapshot.phrase}\n"),
    ]
    fragments.extend(render_typed(snapshot))
    fragments.append(("", "\n\n"))
    fragments.extend(
        render_help(toggle_key, reset_key, quit_key, snapshot.clock_running)
    )
    return fragments


def render_paused(snapshot: SessionSnapshot, toggle_key: str) -> Fragments:
    border = "─" * BOX_WIDTH
    hint = f"{describe_key(toggle_key)} to resume"
    return [
        ("class:paused", f"┌{border}┐\n"),
        ("class:paused", f"│{'':^{BOX_WIDTH}}│\n"),
        ("class:paused", f"│{'Paused':^{BOX_WIDTH}}│\n"),
        ("class:paused", f"│{hint:^{BOX_WIDTH}}│\n"),
        ("class:paused", f"│{'':^{BOX_WIDTH}}│\n"),
        ("class:paused", f"└{border}┘\n"),
    ]


def render_finished(snapshot: SessionSnapshot, reset_key: str) -> Fragments:
    return [
        ("class:finished",
         f"Good job! Your final time was: {format_elapsed(snapshot.elapsed_ms)}\n"),
        ("class:finished",
         f"{snapshot.wpm:.1f} WPM, {snapshot.accuracy:.1f}% accuracy\n"),
        ("class:help", f"\nPress {describe_key(reset_key).capitalize()} to restart"),
    ]


def render_quitting(snapshot: SessionSnapshot) -> Fragments:
    return [("class:default", f"Elapsed: {format_elapsed(snapshot.elapsed_ms)}\n")]


def render_erroring(snapshot: SessionSnapshot) -> Fragments:
    message = snapshot.failure.message if snapshot.failure else "Unknown error"
    width = max(len(message) + 2, 20)
    border = "─" * width
    return [
        ("class:error", f"╭{border}╮\n"),
        ("class:error", f"│{message:^{width}}│\n"),
        ("class:error", f"╰{border}╯\n"),
    ]


def render(
    snapshot: SessionSnapshot,
    toggle_key: str = "c-s",
    reset_key: str = "enter",
    quit_key: str = "c-c",
) -> Fragments:
    """Render the view for the snapshot's phase."""
    if snapshot.phase == SessionPhase.PLAYING:
        return render_playing(snapshot, toggle_key, reset_key, quit_key)
    if snapshot.phase == SessionPhase.PAUSED:
        return render_paused(snapshot, toggle_key)
    if snapshot.phase == SessionPhase.FINISHED:
        return render_finished(snapshot, reset_key)
    if snapshot.phase == SessionPhase.QUITTING:
        return render_quitting(snapshot)
    return render_erroring(snapshot)
