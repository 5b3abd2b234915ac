"""Colour palette for the terminal UI."""

from prompt_toolkit.styles import Style

BOX_WIDTH = 50

PALETTE = {
    "default": "#ffffff",
    "hit": "#0bf48b",
    "miss": "bg:#f12746 #ffffff",
    "unwritten": "#828282",
    "cursor": "bg:#828282 #ffffff",
    "paused": "#ffffff bold",
    "finished": "#ffffff",
    "help": "#626262",
    "error": "#f12746 bold",
}


def build_style() -> Style:
    """Create the prompt_toolkit style used by all views."""
    return Style.from_dict(PALETTE)
